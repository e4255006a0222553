"""
FX Trader – Main Application Entry Point
============================================
Orquesta el mercado simulado, el monitoreo de posiciones y la API.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. Crear el container (instancias perezosas)
  3. FastAPI lifespan startup:
     a. Base de datos (engine + schema)
     b. Tick loop como background task
  4. FastAPI lifespan shutdown:
     a. Detener todo en orden inverso

FLUJO DE DATOS (cada tick):
  PriceGenerator → CandleAggregator → MarketStateManager
       → WebSocketManager (market_update) → Frontend
       → PositionEvaluator → SettlementExecutor (UoW atómica)
       → WebSocketManager (position_closed) → Frontend

  python -m backend.main
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.container import Container, init_container
from backend.domain.exceptions.domain_errors import DomainError
from backend.presentation.api.routes import domain_error_handler, init_routes, router
from backend.shared.config.settings import settings
from backend.shared.logging.logger import get_logger, setup_logging

# ─── Logging ────────────────────────────────────────────────────────────
setup_logging("DEBUG" if settings.debug else "INFO")
logger = get_logger("main")


def create_app(container: Optional[Container] = None, start_tick_loop: bool = True) -> FastAPI:
    """Construye la app FastAPI sobre un container (inyectable en tests)."""
    container = container or init_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        s = container.settings
        logger.info("=" * 60)
        logger.info("  FX Trader - Simulated Market Feed")
        logger.info("  Instrumentos: %s", ", ".join(container.market_state.instruments))
        logger.info("  Timeframes: %s", ", ".join(container.market_state.timeframes))
        logger.info("  Buffer máximo: %d velas por instrumento por TF", s.max_candles_buffer)
        logger.info("  Tick: %.2fs  Apalancamiento: 1:%d", s.tick_interval_seconds, int(s.leverage))
        logger.info("=" * 60)

        init_routes(container)
        await container.startup(start_tick_loop=start_tick_loop)
        logger.info("✓ Todos los componentes iniciados correctamente")

        yield  # ← La app está corriendo aquí

        logger.info("Iniciando shutdown...")
        await container.shutdown()
        logger.info("✓ Shutdown completo")

    app = FastAPI(
        title="FX Trader",
        description="Feed de mercado simulado con velas multi-timeframe y liquidación de posiciones",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS para frontend local
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainError, domain_error_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
