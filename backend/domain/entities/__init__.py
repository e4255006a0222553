"""Domain entities."""
from backend.domain.entities.account import Account
from backend.domain.entities.candle import Candle
from backend.domain.entities.position import Position, PositionSide, PositionStatus
from backend.domain.entities.wallet_transaction import (
    TransactionStatus,
    TransactionType,
    WalletTransaction,
)

__all__ = [
    "Account",
    "Candle",
    "Position",
    "PositionSide",
    "PositionStatus",
    "TransactionStatus",
    "TransactionType",
    "WalletTransaction",
]
