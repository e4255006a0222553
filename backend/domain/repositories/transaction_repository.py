"""
FX Trader – Domain Repository Interface: Wallet Transaction
=============================================================
Interfaz abstracta para solicitudes de depósito / retiro.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from backend.domain.entities.wallet_transaction import WalletTransaction


class ITransactionRepository(ABC):
    """Interfaz abstracta para repositorio de transacciones de billetera."""

    @abstractmethod
    async def add(self, transaction: WalletTransaction) -> int:
        """Inserta una transacción. Retorna el ID asignado."""

    @abstractmethod
    async def get(self, transaction_id: int) -> Optional[WalletTransaction]:
        """Busca una transacción por ID."""

    @abstractmethod
    async def find_by_owner(self, owner_id: int) -> List[WalletTransaction]:
        """Transacciones de una cuenta, created_at DESC."""

    @abstractmethod
    async def find_pending(self) -> List[WalletTransaction]:
        """Transacciones pendientes de todas las cuentas, created_at DESC."""

    @abstractmethod
    async def mark_approved(self, transaction_id: int) -> bool:
        """
        PENDING → APPROVED.

        Returns:
            True si cambió, False si no existía o no estaba pendiente.
        """
