"""
FX Trader – SQLAlchemy ORM Base Configuration
================================================
Configuración base para todos los modelos ORM y el engine async.

Clean Architecture: Esta es la implementación concreta de la infraestructura
de base de datos. Los repositorios dependen de interfaces, no de esta clase.

BACKENDS:
- settings.db_url definido  → se usa tal cual (SQLite async por defecto)
- settings.db_url vacío     → MySQL async construido con los campos db_*
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Integer, MetaData, Numeric
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from backend.shared.config.settings import Settings
from backend.shared.logging.logger import get_logger

logger = get_logger("database")

# ─── Naming Convention (para migraciones consistentes) ─────────────────────
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# BIGINT autoincremental; SQLite solo autoincrementa INTEGER PRIMARY KEY
IdType = BigInteger().with_variant(Integer, "sqlite")

# Montos y precios: NUMERIC(20, 8) en la base, float en el dominio
Money = Numeric(20, 8, asdecimal=False)


class Base(DeclarativeBase):
    """Base declarativa para todos los modelos ORM."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class DatabaseManager:
    """
    Dueño del engine async y de la session factory.

    USO:
        db = DatabaseManager(settings)
        await db.initialize()     # En startup de FastAPI
        await db.create_schema()

        uow = SqlAlchemyUnitOfWork(db.session_factory)

        await db.close()          # En shutdown de FastAPI
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def database_url(self) -> str:
        """URL de conexión desde settings."""
        s = self._settings
        if s.db_url:
            return s.db_url
        return (
            f"mysql+aiomysql://{s.db_user}:{s.db_password}"
            f"@{s.db_host}:{s.db_port}/{s.db_name}"
            f"?charset=utf8mb4"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    async def initialize(self) -> None:
        """Inicializa el engine async y session factory."""
        if self._engine is not None:
            return

        s = self._settings
        if self.is_sqlite:
            self._engine = create_async_engine(self.database_url, echo=s.db_echo)
        else:
            self._engine = create_async_engine(
                self.database_url,
                echo=s.db_echo,
                pool_size=s.db_pool_size,
                max_overflow=s.db_max_overflow,
                pool_recycle=3600,
                pool_pre_ping=True,
            )

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("🗄️ Base de datos inicializada (%s)", "sqlite" if self.is_sqlite else "mysql")

    async def create_schema(self) -> None:
        """Crea las tablas que falten."""
        # Registrar los modelos en Base.metadata
        from backend.infrastructure.persistence import models  # noqa: F401

        if self._engine is None:
            raise RuntimeError("DatabaseManager no inicializado. Llama a initialize() primero.")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager no inicializado. Llama a initialize() primero.")
        return self._session_factory

    async def close(self) -> None:
        """Cierra el engine y todas las conexiones del pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("🗄️ Conexiones de base de datos cerradas")
