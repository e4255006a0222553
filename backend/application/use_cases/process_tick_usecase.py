"""
Process Tick Use Case.

Driver del mercado simulado: un tick por periodo fijo.

═══════════════════════════════════════════════════════════════
            FLUJO POR TICK (secuencial, sin solapamiento)
═══════════════════════════════════════════════════════════════

    PriceGenerator.advance_all()        → precios nuevos
    CandleAggregator.on_price()         → todas las series × timeframes
    broadcaster.publish()               → fire-and-forget
    positions.find_open()               → snapshot de posiciones
    PositionEvaluator.evaluate()        → instrucciones de cierre
    SettlementExecutor.settle() × N     → una a una, con timeout propio
    broadcaster.publish_event()         → "position_closed" por cierre

Un fallo o timeout en una liquidación no detiene las demás: la posición
queda abierta y el siguiente tick la vuelve a evaluar.

El loop termina cuando se activa el stop_event (cancelación explícita).
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from backend.application.ports.market_broadcaster import IMarketBroadcaster
from backend.application.services.candle_aggregator import CandleAggregator
from backend.application.services.price_generator import PriceGenerator
from backend.application.services.settlement_executor import SettlementExecutor
from backend.application.state.market_state import MarketStateManager
from backend.domain.events.domain_events import POSITION_CLOSED_EVENT, PositionClosed
from backend.domain.repositories.unit_of_work import UnitOfWorkFactory
from backend.domain.services.position_evaluator import (
    ClosureInstruction,
    PositionEvaluator,
)
from backend.shared.logging.logger import get_logger

logger = get_logger("tick_loop")


@dataclass
class ProcessTickResult:
    """Resultado de un tick."""
    prices: Dict[str, float] = field(default_factory=dict)
    evaluated: int = 0
    closed: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)


class ProcessTickUseCase:
    """
    Caso de uso: procesar un tick de mercado y monitorear posiciones.

    Todas las dependencias se inyectan; con un PriceGenerator sembrado
    y un clock fijo, run_tick() es determinista.
    """

    def __init__(
        self,
        market_state: MarketStateManager,
        generator: PriceGenerator,
        aggregator: CandleAggregator,
        evaluator: PositionEvaluator,
        settlement: SettlementExecutor,
        uow_factory: UnitOfWorkFactory,
        broadcaster: Optional[IMarketBroadcaster] = None,
        tick_interval: float = 1.0,
        settlement_timeout: float = 5.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._state = market_state
        self._generator = generator
        self._aggregator = aggregator
        self._evaluator = evaluator
        self._settlement = settlement
        self._uow_factory = uow_factory
        self._broadcaster = broadcaster
        self._tick_interval = tick_interval
        self._settlement_timeout = settlement_timeout
        self._clock = clock

        self._stop_event = asyncio.Event()
        self._ticks = 0
        self._errors = 0
        self._running = False

    # ════════════════════════════════════════════════════════════════
    #  TICK
    # ════════════════════════════════════════════════════════════════

    async def run_tick(self, now: Optional[float] = None) -> ProcessTickResult:
        """Ejecuta un tick completo. `now` por defecto es el clock inyectado."""
        now = self._clock() if now is None else now

        prices = self._generator.advance_all(self._state)
        for instrument, price in prices.items():
            self._aggregator.on_price(self._state, instrument, price, now)

        if self._broadcaster is not None:
            self._broadcaster.publish(self._state.prices(), self._state.candles_snapshot())

        async with self._uow_factory() as uow:
            open_positions = await uow.positions.find_open()

        result = ProcessTickResult(prices=prices, evaluated=len(open_positions))
        for instruction in self._evaluator.evaluate(open_positions, prices):
            position_id = instruction.position.id
            if await self._settle(instruction):
                result.closed.append(position_id)
                self._publish_closure(instruction)
            else:
                result.failed.append(position_id)

        self._ticks += 1
        return result

    async def _settle(self, instruction: ClosureInstruction) -> bool:
        position = instruction.position
        try:
            return await asyncio.wait_for(
                self._settlement.settle(position, instruction.close_price, instruction.pnl),
                timeout=self._settlement_timeout,
            )
        except asyncio.TimeoutError:
            if not position.is_open:
                # Timeout tras el commit: la liquidación ya es definitiva
                logger.warning(
                    "Liquidación confirmada pero su cierre excedió %.1fs | id=%s",
                    self._settlement_timeout, position.id,
                )
                return True
            logger.error(
                "Liquidación excedió %.1fs | id=%s, se reintenta en el próximo tick",
                self._settlement_timeout, position.id,
            )
            return False

    def _publish_closure(self, instruction: ClosureInstruction) -> None:
        if self._broadcaster is None:
            return
        event = PositionClosed.from_position(instruction.position, instruction.reason.value)
        self._broadcaster.publish_event(POSITION_CLOSED_EVENT, event.to_dict())

    # ════════════════════════════════════════════════════════════════
    #  LOOP
    # ════════════════════════════════════════════════════════════════

    async def start(self) -> None:
        """Loop principal. Retorna cuando stop() activa el evento."""
        self._running = True
        logger.info("▶ Tick loop iniciado (periodo=%.2fs)", self._tick_interval)

        while not self._stop_event.is_set():
            started = time.monotonic()
            try:
                await self.run_tick()
            except Exception as e:
                self._errors += 1
                logger.error("Error en tick #%d: %s", self._ticks + 1, e, exc_info=True)

            remaining = max(0.0, self._tick_interval - (time.monotonic() - started))
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=remaining)
            except asyncio.TimeoutError:
                pass

        self._running = False
        logger.info("⏹ Tick loop detenido tras %d ticks", self._ticks)

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def stats(self) -> dict:
        return {
            "ticks": self._ticks,
            "errors": self._errors,
            "generator_resets": self._generator.resets,
            **self._settlement.stats,
        }
