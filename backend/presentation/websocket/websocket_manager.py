"""
FX Trader – WebSocket Manager (broadcast a clientes frontend)
================================================================
Gestiona conexiones WebSocket y les envía el estado de mercado en
tiempo real (precios + series de velas) y eventos de cierre.

ARQUITECTURA:
  ProcessTickUseCase ──publish()──▸ json.dumps (una vez)
       │
       ├──▸ Queue cliente 1 ──▸ sender task 1 ──▸ ws.send_text
       ├──▸ Queue cliente 2 ──▸ sender task 2 ──▸ ws.send_text
       └──▸ ...

NO BLOQUEA EL TICK LOOP:
- publish() solo hace put_nowait: nunca espera a un cliente.
- Cola por cliente con política drop-oldest: un cliente lento pierde
  mensajes viejos, no frena a los demás.
- El envío usa asyncio.wait_for con timeout; si falla, el cliente se
  elimina limpiamente sin afectar a otros.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Mapping

from fastapi import WebSocket

from backend.application.ports.market_broadcaster import IMarketBroadcaster
from backend.shared.logging.logger import get_logger

logger = get_logger("ws_manager")

MARKET_UPDATE_TYPE = "market_update"


class _Client:
    __slots__ = ("websocket", "queue", "task", "dropped")

    def __init__(self, websocket: WebSocket, queue: asyncio.Queue) -> None:
        self.websocket = websocket
        self.queue = queue
        self.task: asyncio.Task | None = None
        self.dropped = 0


class WebSocketManager(IMarketBroadcaster):
    """Gestiona conexiones frontend y broadcast de datos en tiempo real."""

    def __init__(self, queue_size: int = 100, send_timeout: float = 5.0) -> None:
        self._queue_size = queue_size
        self._send_timeout = send_timeout
        self._clients: Dict[WebSocket, _Client] = {}
        self._published = 0

    # ════════════════════════════════════════════════════════════════
    #  CICLO DE VIDA DE CLIENTES
    # ════════════════════════════════════════════════════════════════

    async def connect(self, websocket: WebSocket) -> None:
        """Registrar un nuevo cliente WebSocket."""
        await websocket.accept()
        client = _Client(websocket, asyncio.Queue(maxsize=self._queue_size))
        client.task = asyncio.create_task(
            self._sender_loop(client), name=f"ws-sender-{id(websocket):x}",
        )
        self._clients[websocket] = client
        logger.info("Cliente WS conectado. Total: %d", len(self._clients))

    def disconnect(self, websocket: WebSocket) -> None:
        """Des-registrar un cliente desconectado."""
        client = self._clients.pop(websocket, None)
        if client is None:
            return
        if client.task is not None and client.task is not asyncio.current_task():
            client.task.cancel()
        logger.info("Cliente WS desconectado. Total: %d", len(self._clients))

    async def stop(self) -> None:
        """Cancelar envíos y cerrar todos los clientes."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            if client.task is not None:
                client.task.cancel()
        for client in clients:
            try:
                await client.websocket.close()
            except Exception as e:
                logger.debug("Cierre de cliente WS ignorado: %s", e)
        logger.info("WebSocketManager detenido")

    # ════════════════════════════════════════════════════════════════
    #  PUBLICACIÓN (IMarketBroadcaster)
    # ════════════════════════════════════════════════════════════════

    def publish(
        self,
        prices: Mapping[str, float],
        candles: Mapping[str, Mapping[str, List[dict]]],
    ) -> None:
        if not self._clients:
            return
        payload = json.dumps({
            "type": MARKET_UPDATE_TYPE,
            "prices": dict(prices),
            "candleData": candles,
        })
        self._fan_out(payload)

    def publish_event(self, event_type: str, data: Dict[str, Any]) -> None:
        if not self._clients:
            return
        self._fan_out(json.dumps({"type": event_type, "data": data}))

    def _fan_out(self, payload: str) -> None:
        """Encolar en cada cliente. Política drop-oldest → nunca bloquea."""
        self._published += 1
        for client in list(self._clients.values()):
            queue = client.queue
            if queue.full():
                try:
                    queue.get_nowait()
                    client.dropped += 1
                    logger.warning(
                        "Cola llena para cliente WS %x – mensaje antiguo descartado",
                        id(client.websocket),
                    )
                except asyncio.QueueEmpty:
                    pass
            queue.put_nowait(payload)

    # ════════════════════════════════════════════════════════════════
    #  ENVÍO
    # ════════════════════════════════════════════════════════════════

    async def _sender_loop(self, client: _Client) -> None:
        """
        Consume la cola del cliente y envía cada payload con timeout.
        Cualquier fallo de envío elimina solo a ese cliente.
        """
        try:
            while True:
                payload = await client.queue.get()
                try:
                    await asyncio.wait_for(
                        client.websocket.send_text(payload), timeout=self._send_timeout,
                    )
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.warning(
                        "Envío WS fallido (%s), cliente eliminado", type(e).__name__,
                    )
                    self.disconnect(client.websocket)
                    return
        except asyncio.CancelledError:
            pass  # Shutdown limpio

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    @property
    def client_count(self) -> int:
        return len(self._clients)

    @property
    def stats(self) -> dict:
        return {
            "clients": len(self._clients),
            "published": self._published,
            "dropped": sum(c.dropped for c in self._clients.values()),
        }
