"""
Dependency Injection Container.

Este módulo proporciona el contenedor de inyección de dependencias
que gestiona todas las instancias de servicios, repositorios y casos de uso.

Clean Architecture: Este contenedor vive en la capa más externa y es el único
lugar donde se crean dependencias concretas.

ORDEN DE ARRANQUE (startup):
  1. DatabaseManager.initialize() + create_schema()
  2. Tick loop como background task

SHUTDOWN (orden inverso):
  1. Detener tick loop (stop_event) y esperar el task
  2. WebSocketManager.stop()
  3. DatabaseManager.close()
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# Application
from backend.application.services.account_locks import AccountLockRegistry
from backend.application.services.candle_aggregator import CandleAggregator
from backend.application.services.price_generator import PriceGenerator
from backend.application.services.settlement_executor import SettlementExecutor
from backend.application.state.market_state import MarketStateManager
from backend.application.use_cases.account_usecase import AccountUseCase
from backend.application.use_cases.process_tick_usecase import ProcessTickUseCase
from backend.application.use_cases.trading_usecase import TradingUseCase
from backend.application.use_cases.wallet_usecase import WalletUseCase

# Domain
from backend.domain.repositories.unit_of_work import IUnitOfWork
from backend.domain.services.position_evaluator import PositionEvaluator

# Infrastructure / Presentation
from backend.infrastructure.persistence.database import DatabaseManager
from backend.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from backend.presentation.websocket.websocket_manager import WebSocketManager

# Shared
from backend.shared.config.settings import Settings
from backend.shared.logging.logger import get_logger

logger = get_logger("container")


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Cada componente se crea la primera vez que se pide (singleton por
    contenedor). override() permite sustituir cualquiera en tests.
    """

    # Configuración
    settings: Settings = field(default_factory=Settings)

    # Cache de instancias
    _instances: Dict[str, Any] = field(default_factory=dict)
    _tick_task: Optional[asyncio.Task] = None

    def _get(self, name: str, factory):
        if name not in self._instances:
            self._instances[name] = factory()
        return self._instances[name]

    # ==================== Infraestructura ====================

    @property
    def db(self) -> DatabaseManager:
        return self._get("db", lambda: DatabaseManager(self.settings))

    def uow_factory(self) -> IUnitOfWork:
        """Nueva unidad de trabajo (una sesión por unidad)."""
        return SqlAlchemyUnitOfWork(self.db.session_factory)

    @property
    def ws_manager(self) -> WebSocketManager:
        return self._get("ws_manager", lambda: WebSocketManager(
            queue_size=self.settings.ws_client_queue_size,
            send_timeout=self.settings.ws_send_timeout,
        ))

    # ==================== Estado y servicios ====================

    @property
    def market_state(self) -> MarketStateManager:
        return self._get("market_state", lambda: MarketStateManager(
            timeframes=self.settings.available_timeframes,
            max_candles=self.settings.max_candles_buffer,
        ))

    @property
    def locks(self) -> AccountLockRegistry:
        return self._get("locks", AccountLockRegistry)

    @property
    def generator(self) -> PriceGenerator:
        return self._get("generator", lambda: PriceGenerator(seed=self.settings.price_seed))

    @property
    def aggregator(self) -> CandleAggregator:
        return self._get("aggregator", CandleAggregator)

    @property
    def evaluator(self) -> PositionEvaluator:
        return self._get("evaluator", PositionEvaluator)

    @property
    def settlement(self) -> SettlementExecutor:
        return self._get("settlement", lambda: SettlementExecutor(self.uow_factory, self.locks))

    # ==================== Use Cases ====================

    @property
    def tick_loop(self) -> ProcessTickUseCase:
        return self._get("tick_loop", lambda: ProcessTickUseCase(
            market_state=self.market_state,
            generator=self.generator,
            aggregator=self.aggregator,
            evaluator=self.evaluator,
            settlement=self.settlement,
            uow_factory=self.uow_factory,
            broadcaster=self.ws_manager,
            tick_interval=self.settings.tick_interval_seconds,
            settlement_timeout=self.settings.settlement_timeout_seconds,
        ))

    @property
    def trading(self) -> TradingUseCase:
        return self._get("trading", lambda: TradingUseCase(
            uow_factory=self.uow_factory,
            market_state=self.market_state,
            settlement=self.settlement,
            broadcaster=self.ws_manager,
            leverage=self.settings.leverage,
            history_limit=self.settings.history_limit,
        ))

    @property
    def accounts(self) -> AccountUseCase:
        return self._get("accounts", lambda: AccountUseCase(
            self.uow_factory, default_balance=self.settings.default_balance,
        ))

    @property
    def wallet(self) -> WalletUseCase:
        return self._get("wallet", lambda: WalletUseCase(self.uow_factory, self.locks))

    # ==================== Lifecycle ====================

    async def startup(self, start_tick_loop: bool = True) -> None:
        await self.db.initialize()
        await self.db.create_schema()
        if start_tick_loop:
            self._tick_task = asyncio.create_task(
                self.tick_loop.start(), name="market-tick-loop",
            )

    async def shutdown(self) -> None:
        if self._tick_task is not None:
            self.tick_loop.stop()
            try:
                await asyncio.wait_for(
                    self._tick_task,
                    timeout=self.settings.tick_interval_seconds
                    + self.settings.settlement_timeout_seconds,
                )
            except asyncio.TimeoutError:
                logger.warning("Tick loop no terminó a tiempo, cancelado")
            self._tick_task = None
        await self.ws_manager.stop()
        await self.db.close()

    def reset(self) -> None:
        """Resetea todas las instancias (útil para tests)."""
        self._instances.clear()

    def override(self, name: str, instance: Any) -> None:
        """
        Override una dependencia (útil para tests con mocks).

        Args:
            name: Nombre de la dependencia (ej: 'generator')
            instance: Instancia a usar
        """
        if not hasattr(type(self), name):
            raise ValueError(f"Unknown dependency: {name}")
        self._instances[name] = instance


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    """Obtiene la instancia global del contenedor."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def init_container(settings: Optional[Settings] = None) -> Container:
    """Inicializa el contenedor global con configuración específica."""
    global _container
    _container = Container(settings=settings or Settings())
    return _container
