"""Domain repository interfaces (ABCs)."""
from backend.domain.repositories.account_repository import IAccountRepository
from backend.domain.repositories.position_repository import IPositionRepository
from backend.domain.repositories.transaction_repository import ITransactionRepository
from backend.domain.repositories.unit_of_work import IUnitOfWork, UnitOfWorkFactory

__all__ = [
    "IAccountRepository",
    "IPositionRepository",
    "ITransactionRepository",
    "IUnitOfWork",
    "UnitOfWorkFactory",
]
