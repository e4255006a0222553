"""
FX Trader – Domain Entity: Account
====================================
Cuenta de trading con un único balance en unidades monetarias.

El balance solo cambia dentro de una unidad de trabajo atómica:
liquidación de posición, aprobación de depósito o solicitud de retiro.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class Account:
    """Cuenta propietaria de posiciones y transacciones."""

    email: str
    balance: float
    role: str = "user"
    id: Optional[int] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "balance": self.balance,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
