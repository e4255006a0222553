"""
FX Trader – Settings (Pydantic BaseSettings)
=============================================
Configuración centralizada cargada desde variables de entorno / .env.
Se usa pydantic-settings para validación estricta al arranque.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ─── Simulador de mercado ───────────────────────────────────────────
    tick_interval_seconds: float = Field(
        default=1.0, description="Periodo (seg) del loop de ticks"
    )
    price_seed: Optional[int] = Field(
        default=None, description="Semilla del random walk (None = no determinista)"
    )

    # ─── Velas ──────────────────────────────────────────────────────────
    max_candles_buffer: int = Field(
        default=200, description="Máximo de velas en memoria por instrumento por timeframe"
    )
    available_timeframes: List[str] = Field(
        default=["1m", "5m", "15m", "30m", "1h", "3h", "12h", "24h"],
        description="Marcos temporales agregados en cada tick",
    )

    # ─── Trading ────────────────────────────────────────────────────────
    leverage: float = Field(default=100.0, description="Apalancamiento fijo (1:100)")
    default_balance: float = Field(
        default=10_000.0, description="Balance inicial de una cuenta nueva"
    )
    history_limit: int = Field(
        default=50, description="Máximo de posiciones cerradas en el historial"
    )
    settlement_timeout_seconds: float = Field(
        default=5.0, description="Tiempo máximo de una liquidación dentro de un tick"
    )

    # ─── WebSocket broadcast ────────────────────────────────────────────
    ws_client_queue_size: int = Field(
        default=100, description="Mensajes pendientes por cliente antes de descartar"
    )
    ws_send_timeout: float = Field(
        default=5.0, description="Timeout (seg) de envío a un cliente"
    )

    # ─── Base de datos ──────────────────────────────────────────────────
    db_url: str = Field(
        default="sqlite+aiosqlite:///./fxtrader.db",
        description="URL SQLAlchemy async; vacía = MySQL con los campos db_*",
    )
    db_host: str = Field(default="localhost", description="MySQL host")
    db_port: int = Field(default=3306, description="MySQL port")
    db_user: str = Field(default="fxtrader", description="MySQL username")
    db_password: str = Field(default="fxtrader_secret", description="MySQL password")
    db_name: str = Field(default="fxtrader", description="MySQL database name")
    db_echo: bool = Field(default=False, description="Loguear queries SQL (debug)")
    db_pool_size: int = Field(default=5, description="Conexiones en el pool")
    db_max_overflow: int = Field(default=10, description="Conexiones extra en picos")

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    debug: bool = Field(default=False)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton global – se importa donde se necesite
settings = Settings()
