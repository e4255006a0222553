"""
Position Repository Implementation.

Implementación concreta del repositorio de posiciones usando SQLAlchemy.
Implementa la interfaz IPositionRepository del dominio.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.domain.entities.position import Position, PositionStatus
from backend.domain.repositories.position_repository import IPositionRepository
from backend.infrastructure.persistence.mappers.position_mapper import (
    PositionMapper,
    to_epoch_ms,
)
from backend.infrastructure.persistence.models.position import PositionModel
from backend.shared.logging.logger import get_logger

logger = get_logger("infrastructure.position_repository")


class PositionRepositoryImpl(IPositionRepository):
    """Implementación async del repositorio de posiciones."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._mapper = PositionMapper()

    async def add(self, position: Position) -> int:
        model = PositionModel(**self._mapper.to_model(position))
        self._session.add(model)
        await self._session.flush()
        logger.debug("Posición guardada: id=%s %s", model.id, position.instrument)
        return model.id

    async def get(self, position_id: int) -> Optional[Position]:
        model = await self._session.get(PositionModel, position_id)
        return self._mapper.to_entity(model) if model is not None else None

    async def find_open(self, owner_id: Optional[int] = None) -> List[Position]:
        query = select(PositionModel).where(
            PositionModel.status == PositionStatus.OPEN.value
        )
        if owner_id is not None:
            query = query.where(PositionModel.account_id == owner_id)
        query = query.order_by(PositionModel.opened_at, PositionModel.id)

        result = await self._session.execute(query)
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_closed(self, owner_id: int, limit: int = 50) -> List[Position]:
        query = (
            select(PositionModel)
            .where(PositionModel.account_id == owner_id)
            .where(PositionModel.status == PositionStatus.CLOSED.value)
            .order_by(desc(PositionModel.closed_at), desc(PositionModel.id))
            .limit(limit)
        )
        result = await self._session.execute(query)
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def mark_closed(
        self,
        position_id: int,
        close_price: float,
        pnl: float,
        closed_at: float,
    ) -> bool:
        """UPDATE condicionado a status='open'. False si otra escritura ganó."""
        result = await self._session.execute(
            update(PositionModel)
            .where(PositionModel.id == position_id)
            .where(PositionModel.status == PositionStatus.OPEN.value)
            .values(
                status=PositionStatus.CLOSED.value,
                close_price=close_price,
                pnl=pnl,
                closed_at=to_epoch_ms(closed_at),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
