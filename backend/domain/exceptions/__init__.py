"""Domain exceptions."""
from backend.domain.exceptions.domain_errors import (
    AccountNotFoundError,
    DomainError,
    DuplicateAccountError,
    InsufficientBalanceError,
    InsufficientMarginError,
    InvalidTransactionError,
    PositionAlreadyClosedError,
    PositionNotFoundError,
    SettlementError,
    UnknownInstrumentError,
    ValidationError,
)

__all__ = [
    "AccountNotFoundError",
    "DomainError",
    "DuplicateAccountError",
    "InsufficientBalanceError",
    "InsufficientMarginError",
    "InvalidTransactionError",
    "PositionAlreadyClosedError",
    "PositionNotFoundError",
    "SettlementError",
    "UnknownInstrumentError",
    "ValidationError",
]
