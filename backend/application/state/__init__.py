"""Application state - in-memory simulation state."""
from backend.application.state.market_state import InstrumentState, MarketStateManager

__all__ = ["InstrumentState", "MarketStateManager"]
