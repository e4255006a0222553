"""Repository implementations."""

from backend.infrastructure.persistence.repositories.account_repository_impl import (
    AccountRepositoryImpl,
)
from backend.infrastructure.persistence.repositories.position_repository_impl import (
    PositionRepositoryImpl,
)
from backend.infrastructure.persistence.repositories.transaction_repository_impl import (
    TransactionRepositoryImpl,
)

__all__ = [
    "AccountRepositoryImpl",
    "PositionRepositoryImpl",
    "TransactionRepositoryImpl",
]
