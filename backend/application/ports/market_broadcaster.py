"""
FX Trader – Application Port: Market Broadcaster
==================================================
Interfaz del sink de broadcast hacia observadores conectados.

El loop de ticks publica; la infraestructura decide CÓMO entregar
(WebSocket, cola de mensajes, etc.).

CONTRATO:
- publish() / publish_event() NO bloquean: encolan y retornan.
- Un observador lento o caído no afecta a los demás ni al loop.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping


class IMarketBroadcaster(ABC):
    """Fan-out best-effort del estado de mercado."""

    @abstractmethod
    def publish(
        self,
        prices: Mapping[str, float],
        candles: Mapping[str, Mapping[str, List[dict]]],
    ) -> None:
        """
        Encola un mensaje "market_update" para cada observador.

        Args:
            prices: {instrumento: precio actual}
            candles: {instrumento: {timeframe: [vela, ...]}}
        """

    @abstractmethod
    def publish_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Encola un evento puntual (e.g. "position_closed")."""
