"""
Tests for the WebSocket connection manager.
"""

import asyncio
from uuid import uuid4

import pytest

from battlechess.websocket import ConnectionInfo, ConnectionManager


class FakeWebSocket:
    """Records sent messages, optionally stalling or failing."""

    def __init__(self, delay: float = 0.0, error: Exception | None = None):
        self.sent = []
        self.delay = delay
        self.error = error

    async def send_json(self, message):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.sent.append(message)


@pytest.mark.asyncio
async def test_send_to_connected():
    """Test delivery to a registered connection."""
    manager = ConnectionManager()
    socket = FakeWebSocket()
    info = ConnectionInfo(name="Alice", websocket=socket)
    await manager.connect(info)

    assert await manager.send_to(info.connection_id, {"type": "ping", "data": {}})
    assert socket.sent == [{"type": "ping", "data": {}}]
    assert manager.connection_count == 1
    assert manager.get_connection(info.connection_id) is info


@pytest.mark.asyncio
async def test_send_to_unknown_connection():
    """Test sending to an unknown id is a no-op."""
    manager = ConnectionManager()
    assert await manager.send_to(uuid4(), {"type": "ping"}) is False


@pytest.mark.asyncio
async def test_send_timeout():
    """Test a stalled socket is given up on."""
    manager = ConnectionManager(send_timeout=0.05)
    socket = FakeWebSocket(delay=1.0)
    info = ConnectionInfo(name="Slow", websocket=socket)
    await manager.connect(info)

    assert await manager.send_to(info.connection_id, {"type": "ping"}) is False
    assert socket.sent == []


@pytest.mark.asyncio
async def test_send_error_is_logged_not_raised():
    """Test a closed socket does not raise out of send_to."""
    manager = ConnectionManager()
    info = ConnectionInfo(name="Gone", websocket=FakeWebSocket(error=RuntimeError("closed")))
    await manager.connect(info)

    assert await manager.send_to(info.connection_id, {"type": "ping"}) is False


@pytest.mark.asyncio
async def test_send_to_many_continues_past_failures():
    """Test one broken connection does not stop delivery to the rest."""
    manager = ConnectionManager()
    broken = ConnectionInfo(name="Gone", websocket=FakeWebSocket(error=BrokenPipeError()))
    healthy_socket = FakeWebSocket()
    healthy = ConnectionInfo(name="Alice", websocket=healthy_socket)
    await manager.connect(broken)
    await manager.connect(healthy)

    await manager.send_to_many(
        [broken.connection_id, healthy.connection_id], {"type": "gameUpdate"}
    )
    assert healthy_socket.sent == [{"type": "gameUpdate"}]


@pytest.mark.asyncio
async def test_disconnect():
    """Test unregistering connections."""
    manager = ConnectionManager()
    socket = FakeWebSocket()
    info = ConnectionInfo(name="Alice", websocket=socket)
    await manager.connect(info)
    await manager.disconnect(info.connection_id)
    await manager.disconnect(info.connection_id)

    assert manager.connection_count == 0
    assert await manager.send_to(info.connection_id, {"type": "ping"}) is False
