"""
FX Trader – Wallet Transaction ORM Model
==========================================
Modelo para la tabla `wallet_transactions` (depósitos y retiros).
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from backend.infrastructure.persistence.database import Base, IdType, Money


class WalletTransactionModel(Base):
    """Solicitud de depósito o retiro."""

    __tablename__ = "wallet_transactions"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False
    )
    type: Mapped[str] = mapped_column(
        SQLEnum("deposit", "withdrawal", name="wallet_tx_type_enum"), nullable=False
    )
    amount: Mapped[float] = mapped_column(Money, nullable=False)
    status: Mapped[str] = mapped_column(
        SQLEnum("pending", "approved", name="wallet_tx_status_enum"),
        nullable=False, default="pending",
    )
    method: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    reference: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_wallet_transactions_account", "account_id"),
        Index("ix_wallet_transactions_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<WalletTransactionModel(id={self.id}, {self.type} {self.amount}, "
            f"status={self.status})>"
        )
