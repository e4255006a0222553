"""Application DTOs."""
from backend.application.dto.position_dto import (
    ClosePositionCommand,
    ClosePositionResult,
    OpenPositionCommand,
)
from backend.application.dto.wallet_dto import WalletRequestCommand

__all__ = [
    "ClosePositionCommand",
    "ClosePositionResult",
    "OpenPositionCommand",
    "WalletRequestCommand",
]
