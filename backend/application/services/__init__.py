"""Application services - stateful engines driven by the tick loop."""
from backend.application.services.account_locks import AccountLockRegistry
from backend.application.services.candle_aggregator import CandleAggregator
from backend.application.services.price_generator import PriceGenerator
from backend.application.services.settlement_executor import SettlementExecutor

__all__ = [
    "AccountLockRegistry",
    "CandleAggregator",
    "PriceGenerator",
    "SettlementExecutor",
]
