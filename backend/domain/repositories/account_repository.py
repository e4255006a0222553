"""
FX Trader – Domain Repository Interface: Account
==================================================
Interfaz abstracta para cuentas y su balance.

REGLA:
El balance se modifica con incrementos relativos (`adjust_balance`),
nunca con read-modify-write fuera de la unidad de trabajo.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from backend.domain.entities.account import Account


class IAccountRepository(ABC):
    """Interfaz abstracta para repositorio de cuentas."""

    @abstractmethod
    async def add(self, account: Account) -> int:
        """Inserta una cuenta. Retorna el ID asignado."""

    @abstractmethod
    async def get(self, account_id: int) -> Optional[Account]:
        """Busca una cuenta por ID."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Account]:
        """Busca una cuenta por email."""

    @abstractmethod
    async def list_all(self) -> List[Account]:
        """Todas las cuentas (vista administrativa)."""

    @abstractmethod
    async def adjust_balance(self, account_id: int, delta: float) -> None:
        """
        balance = balance + delta.

        Raises:
            AccountNotFoundError si la cuenta no existe.
        """
