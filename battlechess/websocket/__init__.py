"""
WebSocket handling for the BattleChess server.
"""

from battlechess.websocket.manager import ConnectionInfo, ConnectionManager
from battlechess.websocket.handler import WebSocketHandler

__all__ = ["ConnectionInfo", "ConnectionManager", "WebSocketHandler"]
