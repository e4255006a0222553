"""
FX Trader – Domain Interface: Unit of Work
============================================
Frontera transaccional explícita (begin / commit / rollback).

USO:
    async with uow_factory() as uow:
        await uow.positions.mark_closed(...)
        await uow.accounts.adjust_balance(...)
        await uow.commit()

GARANTÍAS:
- Todo lo escrito dentro del bloque se confirma junto en commit().
- Excepción dentro del bloque → rollback completo.
- Salir del bloque sin commit() → rollback (nada queda a medias).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from backend.domain.repositories.account_repository import IAccountRepository
from backend.domain.repositories.position_repository import IPositionRepository
from backend.domain.repositories.transaction_repository import ITransactionRepository


class IUnitOfWork(ABC):
    """Unidad de trabajo atómica sobre cuentas, posiciones y transacciones."""

    accounts: IAccountRepository
    positions: IPositionRepository
    transactions: ITransactionRepository

    async def __aenter__(self) -> "IUnitOfWork":
        await self.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        # commit() explícito; cualquier otra salida descarta los cambios
        try:
            await self.rollback()
        finally:
            await self.close()

    @abstractmethod
    async def begin(self) -> None:
        """Abre la transacción y enlaza los repositorios."""

    @abstractmethod
    async def commit(self) -> None:
        """Confirma todos los cambios de la unidad."""

    @abstractmethod
    async def rollback(self) -> None:
        """Descarta los cambios no confirmados. Idempotente."""

    @abstractmethod
    async def close(self) -> None:
        """Libera la conexión subyacente."""


UnitOfWorkFactory = Callable[[], IUnitOfWork]
