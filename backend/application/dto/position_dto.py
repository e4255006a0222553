"""
FX Trader – Application DTO: Position
=======================================
Data Transfer Objects de entrada/salida para operaciones de trading.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from backend.domain.entities.position import PositionSide


@dataclass(frozen=True)
class OpenPositionCommand:
    """Solicitud de apertura recibida de la capa HTTP."""

    owner_id: int
    instrument: str
    size: float
    side: PositionSide
    entry_price: float
    take_profit: Optional[float] = None
    stop_loss: Optional[float] = None


@dataclass(frozen=True)
class ClosePositionCommand:
    """Solicitud de cierre manual."""

    owner_id: int
    position_id: int
    close_price: float


@dataclass(frozen=True)
class ClosePositionResult:
    """Resultado de un cierre manual."""

    position_id: int
    close_price: float
    pnl: float
    closed_at: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "id": self.position_id,
            "close_price": self.close_price,
            "pnl": self.pnl,
            "closed_at": self.closed_at,
        }
