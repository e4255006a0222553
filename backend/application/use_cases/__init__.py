"""Application use cases - Business logic orchestration."""

from backend.application.use_cases.account_usecase import AccountUseCase
from backend.application.use_cases.process_tick_usecase import (
    ProcessTickUseCase,
    ProcessTickResult,
)
from backend.application.use_cases.trading_usecase import TradingUseCase
from backend.application.use_cases.wallet_usecase import WalletUseCase

__all__ = [
    "AccountUseCase",
    "ProcessTickUseCase",
    "ProcessTickResult",
    "TradingUseCase",
    "WalletUseCase",
]
