"""
FX Trader – SQLAlchemy Unit of Work
=====================================
Una AsyncSession por unidad; los tres repositorios comparten la misma
sesión y, por lo tanto, la misma transacción.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.domain.repositories.unit_of_work import IUnitOfWork
from backend.infrastructure.persistence.repositories import (
    AccountRepositoryImpl,
    PositionRepositoryImpl,
    TransactionRepositoryImpl,
)


class SqlAlchemyUnitOfWork(IUnitOfWork):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork no iniciada")
        return self._session

    async def begin(self) -> None:
        self._session = self._session_factory()
        self.accounts = AccountRepositoryImpl(self._session)
        self.positions = PositionRepositoryImpl(self._session)
        self.transactions = TransactionRepositoryImpl(self._session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
