"""
FX Trader – Domain Entity: Wallet Transaction
===============================================
Solicitud monetaria (depósito o retiro) distinta de una posición.

CICLO DE VIDA:
  deposit    → PENDING ──(aprobación)──▸ APPROVED + balance acreditado
  withdrawal → PENDING (balance ya debitado al solicitar)
               ──(aprobación)──▸ APPROVED (sin cambio de balance)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


@dataclass
class WalletTransaction:
    """Movimiento de la billetera de una cuenta."""

    owner_id: int
    type: TransactionType
    amount: float
    method: str = ""
    reference: str = ""
    status: TransactionStatus = TransactionStatus.PENDING
    id: Optional[int] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_pending(self) -> bool:
        return self.status == TransactionStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.owner_id,
            "type": self.type.value,
            "amount": self.amount,
            "status": self.status.value,
            "method": self.method,
            "reference": self.reference,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
