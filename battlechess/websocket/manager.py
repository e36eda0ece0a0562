"""
WebSocket connection manager for the BattleChess server.
Tracks live connections and delivers messages to them.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable
from uuid import UUID, uuid4

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


@dataclass
class ConnectionInfo:
    """Information about a connected player."""

    name: str
    websocket: WebSocket
    connection_id: UUID = field(default_factory=uuid4)


class ConnectionManager:
    """
    Manages WebSocket connections.
    """

    def __init__(self, send_timeout: float = 5.0) -> None:
        # Map of connection_id -> ConnectionInfo
        self._connections: dict[UUID, ConnectionInfo] = {}
        self._send_timeout = send_timeout
        self._lock = asyncio.Lock()

    async def connect(self, info: ConnectionInfo) -> None:
        """Register a new connection."""
        async with self._lock:
            self._connections[info.connection_id] = info
            logger.info(f"{info.name} connected [conn_id={info.connection_id}]")

    async def disconnect(self, connection_id: UUID) -> None:
        """Unregister a connection. Unknown ids are ignored."""
        async with self._lock:
            info = self._connections.pop(connection_id, None)
        if info is not None:
            logger.info(f"{info.name} disconnected [conn_id={connection_id}]")

    async def send_to(self, connection_id: UUID, message: dict[str, Any]) -> bool:
        """Send a message to one connection. Returns False if it could not be delivered."""
        async with self._lock:
            info = self._connections.get(connection_id)

        if info is None:
            return False

        return await self._send_to_connection(info, message)

    async def send_to_many(
        self,
        connection_ids: Iterable[UUID],
        message: dict[str, Any],
    ) -> None:
        """Send the same message to several connections, in order."""
        for connection_id in connection_ids:
            await self.send_to(connection_id, message)

    async def _send_to_connection(
        self,
        info: ConnectionInfo,
        message: dict[str, Any],
    ) -> bool:
        try:
            await asyncio.wait_for(
                info.websocket.send_json(message),
                timeout=self._send_timeout,
            )
            return True
        except asyncio.TimeoutError:
            logger.warning(f"Timeout sending to {info.name}")
        except (WebSocketDisconnect, RuntimeError, ConnectionResetError,
                BrokenPipeError, OSError) as e:
            # Closed socket; the connection's own handler cleans up
            logger.warning(f"Error sending to {info.name}: {e}")
        return False

    def get_connection(self, connection_id: UUID) -> ConnectionInfo | None:
        return self._connections.get(connection_id)

    @property
    def connection_count(self) -> int:
        """Number of active connections."""
        return len(self._connections)
