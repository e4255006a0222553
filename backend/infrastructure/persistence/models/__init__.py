"""
Infrastructure Models Package.

Contiene los modelos ORM de SQLAlchemy para la persistencia.
Estos modelos representan la estructura de la base de datos,
NO las entidades de dominio.
"""

from backend.infrastructure.persistence.models.account import AccountModel
from backend.infrastructure.persistence.models.position import PositionModel
from backend.infrastructure.persistence.models.wallet_transaction import (
    WalletTransactionModel,
)

__all__ = [
    "AccountModel",
    "PositionModel",
    "WalletTransactionModel",
]
