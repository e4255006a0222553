"""
FX Trader – Account ORM Model
===============================
Modelo para la tabla `accounts`.

DECISIONES DE DISEÑO:
- balance como NUMERIC(20, 8) (Money), float en el dominio.
- email UNIQUE: una cuenta por email.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from backend.infrastructure.persistence.database import Base, IdType, Money


class AccountModel(Base):
    """Cuenta de trading con su balance."""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(
        IdType, primary_key=True, autoincrement=True
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    balance: Mapped[float] = mapped_column(Money, nullable=False, default=10_000.0)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AccountModel(id={self.id}, email={self.email!r}, balance={self.balance})>"
