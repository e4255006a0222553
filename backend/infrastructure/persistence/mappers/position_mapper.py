"""
FX Trader – Position Mapper
=============================
Mapea entre Position (domain entity) y PositionModel (ORM).

Timestamps: epoch segundos (float) en dominio ↔ epoch ms (int) en BD.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from backend.domain.entities.position import Position, PositionSide, PositionStatus
from backend.infrastructure.persistence.models.position import PositionModel


def to_epoch_ms(ts: Optional[float]) -> Optional[int]:
    return int(round(ts * 1000)) if ts is not None else None


def from_epoch_ms(ms: Optional[int]) -> Optional[float]:
    return ms / 1000.0 if ms is not None else None


class PositionMapper:
    """
    Mapper bidireccional Position ↔ PositionModel.
    """

    def to_model(self, position: Position) -> Dict[str, Any]:
        """Convierte Position entity a dict para crear PositionModel."""
        return {
            "account_id": position.owner_id,
            "instrument": position.instrument,
            "side": position.side.value,
            "size": position.size,
            "entry_price": position.entry_price,
            "take_profit": position.take_profit,
            "stop_loss": position.stop_loss,
            "status": position.status.value,
            "close_price": position.close_price,
            "pnl": position.pnl,
            "opened_at": to_epoch_ms(position.opened_at),
            "closed_at": to_epoch_ms(position.closed_at),
        }

    def to_entity(self, model: PositionModel) -> Position:
        """Convierte PositionModel ORM a Position entity."""
        position = Position(
            owner_id=model.account_id,
            instrument=model.instrument,
            size=model.size,
            side=PositionSide(model.side),
            entry_price=model.entry_price,
            take_profit=model.take_profit,
            stop_loss=model.stop_loss,
            opened_at=from_epoch_ms(model.opened_at),
            id=model.id,
        )
        # Sobrescribir estado persistido
        position.status = PositionStatus(model.status)
        position.close_price = model.close_price
        position.pnl = model.pnl or 0.0
        position.closed_at = from_epoch_ms(model.closed_at)
        return position
