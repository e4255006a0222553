"""
FX Trader – Domain Repository Interface: Position
===================================================
Interfaz abstracta para persistencia de posiciones.

TRANSACCIONES:
El repositorio no hace commit automático.
La unidad de trabajo (IUnitOfWork) controla la transacción.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from backend.domain.entities.position import Position


class IPositionRepository(ABC):
    """Interfaz abstracta para repositorio de posiciones."""

    @abstractmethod
    async def add(self, position: Position) -> int:
        """Inserta una posición abierta. Retorna el ID asignado."""

    @abstractmethod
    async def get(self, position_id: int) -> Optional[Position]:
        """Busca una posición por ID."""

    @abstractmethod
    async def find_open(self, owner_id: Optional[int] = None) -> List[Position]:
        """Posiciones abiertas (todas, o solo las de una cuenta)."""

    @abstractmethod
    async def find_closed(self, owner_id: int, limit: int = 50) -> List[Position]:
        """Historial de una cuenta ordenado por closed_at DESC."""

    @abstractmethod
    async def mark_closed(
        self,
        position_id: int,
        close_price: float,
        pnl: float,
        closed_at: float,
    ) -> bool:
        """
        Cierra la posición solo si sigue abierta.

        Returns:
            True si se cerró, False si no existía o ya estaba cerrada.
        """
