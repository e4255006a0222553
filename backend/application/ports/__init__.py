"""Application ports - Interfaces to infrastructure."""
from backend.application.ports.market_broadcaster import IMarketBroadcaster

__all__ = [
    "IMarketBroadcaster",
]
