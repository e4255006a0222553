"""
FX Trader – Domain Events
===========================
Eventos de dominio que la capa de presentación difunde a observadores.

Los eventos representan HECHOS que ya ocurrieron (commit hecho).
Son inmutables y llevan timestamp.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

POSITION_CLOSED_EVENT = "position_closed"


@dataclass(frozen=True)
class DomainEvent:
    """Evento base de dominio."""

    event_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.__class__.__name__,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class PositionClosed(DomainEvent):
    """Evento: una posición se liquidó (TP, SL o cierre manual)."""

    position_id: Optional[int] = None
    owner_id: int = 0
    instrument: str = ""
    side: str = ""         # BUY | SELL
    reason: str = ""       # take_profit | stop_loss | manual
    entry_price: float = 0.0
    close_price: float = 0.0
    pnl: float = 0.0

    @classmethod
    def from_position(cls, position, reason: str) -> "PositionClosed":
        """Construir el evento desde una Position ya cerrada."""
        return cls(
            position_id=position.id,
            owner_id=position.owner_id,
            instrument=position.instrument,
            side=position.side.value,
            reason=reason,
            entry_price=position.entry_price,
            close_price=position.close_price,
            pnl=position.pnl,
        )

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "position_id": self.position_id,
            "user_id": self.owner_id,
            "asset": self.instrument,
            "type": self.side,
            "reason": self.reason,
            "entry_price": self.entry_price,
            "close_price": self.close_price,
            "pnl": self.pnl,
        })
        return base
