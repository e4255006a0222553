"""
FX Trader – Position ORM Model
================================
Modelo para la tabla `positions`.

DECISIONES DE DISEÑO:

- ENUM para status (open/closed) y side (BUY/SELL).
- BIGINT para timestamps (epoch ms).
- NUMERIC(20, 8) para tamaño, precios y pnl (ver Money).
- take_profit / stop_loss NULL = sin umbral.
- close_price NULL hasta que la posición se cierra.
- Índice (account_id, status): consultas de posiciones abiertas por cuenta.

RELACIÓN CON ENTIDAD DE DOMINIO:
- Position se cierra una sola vez; el UPDATE de cierre filtra por
  status='open' para que dos liquidaciones no pisen la misma fila.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Enum as SQLEnum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from backend.infrastructure.persistence.database import Base, IdType, Money


class PositionModel(Base):
    """Modelo ORM para posiciones apalancadas."""

    __tablename__ = "positions"

    # ─── Primary Key ──────────────────────────────────────────────────
    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)

    # ─── Foreign Keys ─────────────────────────────────────────────────
    account_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False
    )

    # ─── Contrato ─────────────────────────────────────────────────────
    instrument: Mapped[str] = mapped_column(String(20), nullable=False)
    side: Mapped[str] = mapped_column(
        SQLEnum("BUY", "SELL", name="position_side_enum"), nullable=False
    )
    size: Mapped[float] = mapped_column(Money, nullable=False)
    entry_price: Mapped[float] = mapped_column(Money, nullable=False)
    take_profit: Mapped[Optional[float]] = mapped_column(Money, default=None)
    stop_loss: Mapped[Optional[float]] = mapped_column(Money, default=None)

    # ─── Status & Result ──────────────────────────────────────────────
    status: Mapped[str] = mapped_column(
        SQLEnum("open", "closed", name="position_status_enum"),
        nullable=False, default="open",
    )
    close_price: Mapped[Optional[float]] = mapped_column(
        Money, default=None, comment="Precio de cierre (NULL si open)"
    )
    pnl: Mapped[float] = mapped_column(Money, nullable=False, default=0.0)

    # ─── Timing ───────────────────────────────────────────────────────
    opened_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, comment="Epoch ms de apertura"
    )
    closed_at: Mapped[Optional[int]] = mapped_column(
        BigInteger, default=None, comment="Epoch ms de cierre"
    )

    __table_args__ = (
        Index("ix_positions_account_status", "account_id", "status"),
        Index("ix_positions_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<PositionModel(id={self.id}, account={self.account_id}, "
            f"{self.side} {self.instrument}, status={self.status})>"
        )
