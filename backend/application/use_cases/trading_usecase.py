"""
Trading Use Case.

Apertura, cierre manual y consultas de posiciones de una cuenta.

FLUJO DE APERTURA:
    validar → leer balance → ¿balance ≥ margen? → insertar posición

    El chequeo de margen es una lectura previa fuera de la transacción
    de inserción (un solo escritor por cuenta). El margen NO se debita.

FLUJO DE CIERRE MANUAL:
    buscar posición (propia y abierta) → pnl con la fórmula compartida
    → SettlementExecutor.execute() (misma unidad atómica que el loop)
"""

from __future__ import annotations

import math
from typing import List, Optional

from backend.application.dto.position_dto import (
    ClosePositionCommand,
    ClosePositionResult,
    OpenPositionCommand,
)
from backend.application.ports.market_broadcaster import IMarketBroadcaster
from backend.application.services.settlement_executor import SettlementExecutor
from backend.application.state.market_state import MarketStateManager
from backend.domain.entities.position import Position, PositionSide
from backend.domain.events.domain_events import POSITION_CLOSED_EVENT, PositionClosed
from backend.domain.exceptions.domain_errors import (
    AccountNotFoundError,
    DomainError,
    InsufficientMarginError,
    PositionAlreadyClosedError,
    PositionNotFoundError,
    SettlementError,
    UnknownInstrumentError,
    ValidationError,
)
from backend.domain.repositories.unit_of_work import UnitOfWorkFactory
from backend.domain.services.pnl_calculator import (
    DEFAULT_LEVERAGE,
    realized_pnl,
    required_margin,
)
from backend.domain.services.position_evaluator import CloseReason
from backend.shared.logging.logger import get_logger

logger = get_logger("trading")


class TradingUseCase:
    """
    Caso de uso: operar posiciones.

    Orquesta:
    1. Validación y chequeo de margen al abrir
    2. Cierre manual con liquidación atómica
    3. Consultas de posiciones abiertas e historial
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        market_state: MarketStateManager,
        settlement: SettlementExecutor,
        broadcaster: Optional[IMarketBroadcaster] = None,
        leverage: float = DEFAULT_LEVERAGE,
        history_limit: int = 50,
    ) -> None:
        self._uow_factory = uow_factory
        self._market_state = market_state
        self._settlement = settlement
        self._broadcaster = broadcaster
        self._leverage = leverage
        self._history_limit = history_limit

    # ════════════════════════════════════════════════════════════════
    #  APERTURA
    # ════════════════════════════════════════════════════════════════

    async def open_position(self, cmd: OpenPositionCommand) -> Position:
        """
        Abre una posición si el balance cubre el margen.

        Raises:
            ValidationError, UnknownInstrumentError, AccountNotFoundError,
            InsufficientMarginError
        """
        side = _parse_side(cmd.side)
        if not self._market_state.has_instrument(cmd.instrument):
            raise UnknownInstrumentError(cmd.instrument)
        _require_positive("size", cmd.size)
        _require_positive("entry_price", cmd.entry_price)
        take_profit = _optional_level("take_profit", cmd.take_profit)
        stop_loss = _optional_level("stop_loss", cmd.stop_loss)

        margin = required_margin(cmd.size, cmd.entry_price, self._leverage)

        async with self._uow_factory() as uow:
            account = await uow.accounts.get(cmd.owner_id)
        if account is None:
            raise AccountNotFoundError(cmd.owner_id)

        if account.balance < margin:
            logger.info(
                "Apertura rechazada | owner=%s %s %s margen=%.2f balance=%.2f",
                cmd.owner_id, side.value, cmd.instrument, margin, account.balance,
            )
            raise InsufficientMarginError(required=margin, available=account.balance)

        position = Position(
            owner_id=cmd.owner_id,
            instrument=cmd.instrument,
            size=cmd.size,
            side=side,
            entry_price=cmd.entry_price,
            take_profit=take_profit,
            stop_loss=stop_loss,
        )
        async with self._uow_factory() as uow:
            position.id = await uow.positions.add(position)
            await uow.commit()

        logger.info(
            "Posición abierta | id=%s owner=%s %s %s %s @ %.5f TP=%s SL=%s",
            position.id, position.owner_id, side.value, position.size,
            position.instrument, position.entry_price, take_profit, stop_loss,
        )
        return position

    # ════════════════════════════════════════════════════════════════
    #  CIERRE MANUAL
    # ════════════════════════════════════════════════════════════════

    async def close_position(self, cmd: ClosePositionCommand) -> ClosePositionResult:
        """
        Cierra una posición propia al precio indicado por el caller.

        Raises:
            ValidationError, PositionNotFoundError, PositionAlreadyClosedError,
            SettlementError
        """
        _require_positive("close_price", cmd.close_price)

        async with self._uow_factory() as uow:
            position = await uow.positions.get(cmd.position_id)

        if position is None or position.owner_id != cmd.owner_id:
            raise PositionNotFoundError(cmd.position_id)
        if not position.is_open:
            raise PositionAlreadyClosedError(
                f"Posición {position.id} ya está cerrada", position_id=position.id,
            )

        pnl = realized_pnl(
            position.side, position.entry_price, cmd.close_price, position.size,
        )
        try:
            closed_at = await self._settlement.execute(position, cmd.close_price, pnl)
        except DomainError:
            raise
        except Exception as e:
            logger.error("Cierre manual fallido | id=%s: %s", position.id, e, exc_info=True)
            raise SettlementError(
                f"No se pudo liquidar la posición {position.id}", position_id=position.id,
            ) from e

        if self._broadcaster is not None:
            event = PositionClosed.from_position(position, CloseReason.MANUAL.value)
            self._broadcaster.publish_event(POSITION_CLOSED_EVENT, event.to_dict())

        return ClosePositionResult(
            position_id=position.id,
            close_price=cmd.close_price,
            pnl=pnl,
            closed_at=closed_at,
        )

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    async def list_open(self, owner_id: int) -> List[Position]:
        async with self._uow_factory() as uow:
            return await uow.positions.find_open(owner_id)

    async def history(self, owner_id: int) -> List[Position]:
        """Últimas posiciones cerradas, closed_at DESC."""
        async with self._uow_factory() as uow:
            return await uow.positions.find_closed(owner_id, limit=self._history_limit)


# ════════════════════════════════════════════════════════════════════
#  VALIDACIÓN
# ════════════════════════════════════════════════════════════════════

def _parse_side(value) -> PositionSide:
    try:
        return PositionSide(value)
    except ValueError:
        raise ValidationError(f"Dirección inválida: {value}", field="type", value=value) from None


def _require_positive(field: str, value: float) -> None:
    if value is None or not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{field} debe ser un número positivo", field=field, value=value)


def _optional_level(field: str, value: Optional[float]) -> Optional[float]:
    """TP/SL opcional: None o 0 significan "sin umbral"."""
    if value is None or value == 0:
        return None
    _require_positive(field, value)
    return value
