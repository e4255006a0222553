"""
FX Trader – Settlement Executor
=================================
Aplica el cierre de una posición y el ajuste de balance como UNA sola
unidad atómica.

═══════════════════════════════════════════════════════════════
            FLUJO DE LIQUIDACIÓN
═══════════════════════════════════════════════════════════════

    lock(cuenta)                      ← serializa escrituras de balance
      └── UnitOfWork
            ├── positions.mark_closed(... WHERE status='open')
            │       └── 0 filas → PositionAlreadyClosedError (rollback)
            ├── accounts.adjust_balance(owner, +pnl)
            └── commit()
          └── position.close(...)     ← espejo en memoria al confirmar

ATOMICIDAD:
    Cualquier excepción dentro de la unidad → rollback de AMBAS
    escrituras. No existe liquidación parcial.

REINTENTO:
    settle() nunca lanza: retorna False y deja la posición abierta,
    que el siguiente tick vuelve a evaluar.
"""

from __future__ import annotations

import time
from typing import Callable

from backend.application.services.account_locks import AccountLockRegistry
from backend.domain.entities.position import Position
from backend.domain.exceptions.domain_errors import DomainError, PositionAlreadyClosedError
from backend.domain.repositories.unit_of_work import UnitOfWorkFactory
from backend.shared.logging.logger import get_logger

logger = get_logger("settlement")


class SettlementExecutor:
    """Cierre de posición + ajuste de balance, todo o nada."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        locks: AccountLockRegistry,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._uow_factory = uow_factory
        self._locks = locks
        self._clock = clock
        self._settled = 0
        self._failed = 0

    async def execute(self, position: Position, close_price: float, pnl: float) -> float:
        """
        Liquidar la posición. Retorna el timestamp de cierre.

        Raises:
            PositionAlreadyClosedError si otra liquidación ganó la carrera.
            Cualquier error de almacenamiento (tras rollback).
        """
        async with self._locks.lock_for(position.owner_id):
            async with self._uow_factory() as uow:
                closed_at = self._clock()
                closed = await uow.positions.mark_closed(
                    position.id, close_price, pnl, closed_at,
                )
                if not closed:
                    raise PositionAlreadyClosedError(
                        f"Posición {position.id} ya no está abierta",
                        position_id=position.id,
                    )
                await uow.accounts.adjust_balance(position.owner_id, pnl)
                await uow.commit()
                # Confirmado: el espejo en memoria no depende del cierre de la sesión
                position.close(close_price, pnl, closed_at)
                self._settled += 1

        logger.info(
            "Posición liquidada | id=%s owner=%s %s %s close=%.5f pnl=%.5f",
            position.id, position.owner_id, position.side.value,
            position.instrument, close_price, pnl,
        )
        return closed_at

    async def settle(self, position: Position, close_price: float, pnl: float) -> bool:
        """Variante sin excepciones para el loop de ticks."""
        try:
            await self.execute(position, close_price, pnl)
            return True
        except DomainError as e:
            self._failed += 1
            logger.warning("Liquidación rechazada | id=%s: %s", position.id, e.message)
            return False
        except Exception as e:
            if not position.is_open:
                logger.warning(
                    "Liquidación confirmada, error al liberar la sesión | id=%s: %s",
                    position.id, e,
                )
                return True
            self._failed += 1
            logger.error(
                "Liquidación fallida (rollback) | id=%s: %s", position.id, e, exc_info=True,
            )
            return False

    @property
    def stats(self) -> dict:
        return {"settled": self._settled, "failed": self._failed}
