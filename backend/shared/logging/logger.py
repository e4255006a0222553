"""
FX Trader – Logging configuration
==================================
Un handler de stdout propio sobre el root logger y loggers por componente
bajo el namespace `fxtrader.`.

    setup_logging("DEBUG")                → idempotente, reemplaza el handler propio
    get_logger("tick_loop")               → fxtrader.tick_loop
    get_logger("fxtrader.settlement")     → fxtrader.settlement (sin doble prefijo)
"""

from __future__ import annotations

import logging
import sys

LOGGER_PREFIX = "fxtrader"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Drivers y servidor: solo WARNING o superior
NOISY_LOGGERS = (
    "websockets",
    "uvicorn.access",
    "sqlalchemy.engine",
    "aiosqlite",
    "aiomysql",
)


class _FxTraderHandler(logging.StreamHandler):
    """Marca el handler instalado por setup_logging()."""


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configura el root logger.

    Llamadas repetidas cambian el nivel sin duplicar salida; handlers
    ajenos (uvicorn, pytest) se dejan intactos.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Nivel de logging desconocido: {level}")

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _FxTraderHandler)]:
        root.removeHandler(existing)

    handler = _FxTraderHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger de componente dentro del namespace fxtrader."""
    if name == LOGGER_PREFIX or name.startswith(f"{LOGGER_PREFIX}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")
