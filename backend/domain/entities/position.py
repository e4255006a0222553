"""
FX Trader – Domain Entity: Position
=====================================
Posición apalancada (estilo CFD) de una cuenta sobre un instrumento.

═══════════════════════════════════════════════════════════════
            CICLO DE VIDA DE LA POSICIÓN
═══════════════════════════════════════════════════════════════

  open-position request (margen verificado)
       │
       ▼
  Position OPEN ──(cada tick evalúa TP / SL)
       │
       ├── precio cruza TP ──▸ CLOSED a precio TP
       ├── precio cruza SL ──▸ CLOSED a precio SL
       └── cierre manual   ──▸ CLOSED al precio indicado por el caller

  El cierre ocurre UNA sola vez: status, close_price, pnl y closed_at
  se fijan juntos. Después la posición es inmutable.

LADOS:
  BUY  = long  → gana si el precio sube
  SELL = short → gana si el precio baja
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Optional

from backend.domain.exceptions.domain_errors import PositionAlreadyClosedError


class PositionSide(str, Enum):
    """Dirección de la posición."""
    BUY = "BUY"    # long
    SELL = "SELL"  # short


class PositionStatus(str, Enum):
    """Estados posibles de una posición."""
    OPEN = "open"
    CLOSED = "closed"


class Position:
    """
    Posición con transición de cierre controlada.

    Métodos:
      - close() → OPEN → CLOSED (una sola vez)
    """

    __slots__ = (
        "id", "owner_id", "instrument", "size", "side",
        "entry_price", "take_profit", "stop_loss",
        "status", "close_price", "pnl",
        "opened_at", "closed_at",
    )

    def __init__(
        self,
        owner_id: int,
        instrument: str,
        size: float,
        side: PositionSide,
        entry_price: float,
        take_profit: Optional[float] = None,
        stop_loss: Optional[float] = None,
        opened_at: Optional[float] = None,
        id: Optional[int] = None,
    ) -> None:
        self.id = id
        self.owner_id = owner_id
        self.instrument = instrument
        self.size = size
        self.side = PositionSide(side)
        self.entry_price = entry_price
        self.take_profit = take_profit
        self.stop_loss = stop_loss

        # Estado
        self.status: PositionStatus = PositionStatus.OPEN
        self.close_price: Optional[float] = None
        self.pnl: float = 0.0
        self.opened_at: float = opened_at if opened_at is not None else time.time()
        self.closed_at: Optional[float] = None

    # ════════════════════════════════════════════════════════════════
    #  TRANSICIONES DE ESTADO
    # ════════════════════════════════════════════════════════════════

    def close(self, close_price: float, pnl: float, timestamp: float) -> None:
        """Transición OPEN → CLOSED. Los cuatro campos se fijan juntos."""
        if self.status != PositionStatus.OPEN:
            raise PositionAlreadyClosedError(
                f"Posición {self.id} ya está cerrada", position_id=self.id,
            )
        self.close_price = close_price
        self.pnl = pnl
        self.closed_at = timestamp
        self.status = PositionStatus.CLOSED

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    @property
    def is_open(self) -> bool:
        return self.status == PositionStatus.OPEN

    @property
    def is_long(self) -> bool:
        return self.side == PositionSide.BUY

    def to_dict(self) -> dict:
        """Serialización para API / WebSocket."""
        return {
            "id": self.id,
            "user_id": self.owner_id,
            "asset": self.instrument,
            "size": self.size,
            "type": self.side.value,
            "entry_price": self.entry_price,
            "take_profit": self.take_profit,
            "stop_loss": self.stop_loss,
            "close_price": self.close_price,
            "status": self.status.value,
            "pnl": self.pnl,
            "opened_at": self.opened_at,
            "closed_at": self.closed_at,
        }

    def __repr__(self) -> str:
        return (
            f"<Position(id={self.id}, owner={self.owner_id}, {self.side.value} "
            f"{self.size} {self.instrument} @ {self.entry_price}, status={self.status.value})>"
        )
