import asyncio
import json

import pytest

from backend.presentation.websocket.websocket_manager import WebSocketManager


class FakeWebSocket:
    def __init__(self, mode="ok"):
        self.mode = mode
        self.sent = []
        self.accepted = False
        self.closed = False

    async def accept(self):
        self.accepted = True

    async def send_text(self, text):
        if self.mode == "broken":
            raise RuntimeError("connection reset")
        if self.mode == "stuck":
            await asyncio.Event().wait()
        self.sent.append(json.loads(text))

    async def close(self, code=1000, reason=None):
        self.closed = True


async def drain():
    for _ in range(5):
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_market_update_reaches_every_client():
    manager = WebSocketManager()
    a, b = FakeWebSocket(), FakeWebSocket()
    await manager.connect(a)
    await manager.connect(b)

    manager.publish({"EUR/USD": 1.1}, {"EUR/USD": {"1m": [{"time": 60, "open": 1.1}]}})
    await drain()

    for ws in (a, b):
        assert ws.accepted
        [msg] = ws.sent
        assert msg["type"] == "market_update"
        assert msg["prices"] == {"EUR/USD": 1.1}
        assert msg["candleData"]["EUR/USD"]["1m"][0]["time"] == 60
    await manager.stop()


@pytest.mark.asyncio
async def test_failing_client_is_dropped_without_affecting_others():
    manager = WebSocketManager(send_timeout=0.05)
    good, broken, stuck = FakeWebSocket(), FakeWebSocket("broken"), FakeWebSocket("stuck")
    for ws in (good, broken, stuck):
        await manager.connect(ws)

    manager.publish_event("position_closed", {"position_id": 1})
    await asyncio.sleep(0.2)

    assert manager.client_count == 1
    assert good.sent == [{"type": "position_closed", "data": {"position_id": 1}}]

    manager.publish_event("position_closed", {"position_id": 2})
    await drain()
    assert len(good.sent) == 2
    await manager.stop()
    assert good.closed


@pytest.mark.asyncio
async def test_full_queue_drops_oldest():
    manager = WebSocketManager(queue_size=2)
    ws = FakeWebSocket()
    await manager.connect(ws)

    # No await between publishes: the sender task cannot run yet
    for n in range(5):
        manager.publish_event("tick", {"n": n})
    assert manager.stats["dropped"] == 3

    await drain()
    assert [m["data"]["n"] for m in ws.sent] == [3, 4]
    await manager.stop()


@pytest.mark.asyncio
async def test_publish_without_clients_is_noop():
    manager = WebSocketManager()
    manager.publish({}, {})
    manager.publish_event("position_closed", {})
    assert manager.stats == {"clients": 0, "published": 0, "dropped": 0}


@pytest.mark.asyncio
async def test_disconnect_cancels_sender():
    manager = WebSocketManager()
    ws = FakeWebSocket()
    await manager.connect(ws)
    manager.disconnect(ws)
    manager.disconnect(ws)
    await drain()
    assert manager.client_count == 0
