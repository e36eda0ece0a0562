"""
WebSocket message handler for the BattleChess server.
"""

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from battlechess.engine import CommandResult
from battlechess.matchmaking import ActiveMatch, Matchmaker
from battlechess.websocket.manager import ConnectionInfo, ConnectionManager
from battlechess.websocket.messages import (
    AttackUnitPayload,
    MoveUnitPayload,
    PlayCardPayload,
    envelope,
)

logger = logging.getLogger(__name__)

INVALID_PAYLOAD = "InvalidPayload"
NOT_IN_GAME = "NotInGame"
UNKNOWN_MESSAGE = "UnknownMessage"


class WebSocketHandler:
    """
    Handles WebSocket messages for a connected player.

    Each message is handled to completion before the next one is read.
    Engine commands run without an await between validation and mutation,
    so commands for a match never interleave.
    """

    def __init__(
        self,
        manager: ConnectionManager,
        matchmaker: Matchmaker,
        info: ConnectionInfo,
    ) -> None:
        self.manager = manager
        self.matchmaker = matchmaker
        self.info = info

    async def handle_connection(self) -> None:
        """
        Main message loop for a WebSocket connection.

        Expected (non-fatal) errors:
        - WebSocketDisconnect: client disconnected
        - asyncio.TimeoutError: send timeout
        - ConnectionResetError, BrokenPipeError: connection lost
        - json.JSONDecodeError: invalid JSON -> close with 1007

        All other errors propagate (fail-fast).
        """
        try:
            await self._send("connected", {"playerName": self.info.name})
            while True:
                try:
                    raw = await self.info.websocket.receive_text()
                    message = json.loads(raw)
                except json.JSONDecodeError:
                    logger.warning(f"Invalid JSON from {self.info.name}, closing")
                    await self.info.websocket.close(code=1007)  # Invalid frame payload
                    return
                await self._handle_message(message)
        except WebSocketDisconnect:
            logger.info(f"{self.info.name} disconnected")
        except asyncio.TimeoutError:
            logger.warning(f"Timeout for {self.info.name}")
        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            logger.info(f"Connection lost for {self.info.name}: {e}")
        finally:
            await self._cleanup()

    async def _cleanup(self) -> None:
        """Leave the queue, discard any running match and unregister."""
        abandoned = self.matchmaker.disconnect(self.info.connection_id)
        if abandoned is not None:
            # No reconnection support: the match is gone for both players
            logger.info(
                f"Match {abandoned.match_id} discarded after {self.info.name} disconnected"
            )
        await self.manager.disconnect(self.info.connection_id)

    async def _handle_message(self, message: Any) -> None:
        """Route incoming messages to appropriate handlers."""
        if not isinstance(message, dict) or not isinstance(message.get("type"), str):
            await self._send_error("Missing message type", INVALID_PAYLOAD)
            return

        msg_type = message["type"]
        handlers = {
            "findMatch": self._handle_find_match,
            "cancelSearch": self._handle_cancel_search,
            "playCard": self._handle_play_card,
            "moveUnit": self._handle_move_unit,
            "attackUnit": self._handle_attack_unit,
            "nextPhase": self._handle_next_phase,
        }

        handler = handlers.get(msg_type)
        if handler is None:
            await self._send_error(f"Unknown message type: {msg_type}", UNKNOWN_MESSAGE)
            return

        data = message.get("data")
        await handler(data if data is not None else {})

    # =========================================================================
    # Matchmaking
    # =========================================================================

    async def _handle_find_match(self, data: dict[str, Any]) -> None:
        logger.info(
            f"{self.info.name} looking for match. "
            f"Current queue size: {self.matchmaker.waiting_count}"
        )
        if self.matchmaker.match_for(self.info.connection_id) is not None:
            await self._send_error("You are already in a game", INVALID_PAYLOAD)
            return

        match = self.matchmaker.request_match(self.info.connection_id, self.info.name)
        if match is None:
            await self._send("searching", {"message": "Searching for opponent..."})
            return

        await self._announce_match(match)

    async def _announce_match(self, match: ActiveMatch) -> None:
        """Send gameStarted to both seats with their own perspective."""
        state = match.engine.snapshot().to_wire()
        for index, seat in enumerate(match.seats):
            opponent = match.seats[1 - index]
            await self.manager.send_to(seat.connection_id, envelope("gameStarted", {
                "gameId": match.match_id,
                "gameState": state,
                "yourPlayerIndex": index,
                "yourName": seat.name,
                "opponentName": opponent.name,
            }))

    async def _handle_cancel_search(self, data: dict[str, Any]) -> None:
        if self.matchmaker.cancel(self.info.connection_id):
            await self._send("searchCancelled", {"message": "Search cancelled"})
        else:
            await self._send_error("You are not searching for a match", NOT_IN_GAME)

    # =========================================================================
    # Game intents
    # =========================================================================

    async def _handle_play_card(self, data: dict[str, Any]) -> None:
        payload = await self._parse(PlayCardPayload, data)
        if payload is None:
            return
        await self._run_command(
            lambda engine, seat: engine.deploy(seat, payload.card_index, payload.tile_index)
        )

    async def _handle_move_unit(self, data: dict[str, Any]) -> None:
        payload = await self._parse(MoveUnitPayload, data)
        if payload is None:
            return
        await self._run_command(
            lambda engine, seat: engine.move(seat, payload.from_index, payload.to_index)
        )

    async def _handle_attack_unit(self, data: dict[str, Any]) -> None:
        payload = await self._parse(AttackUnitPayload, data)
        if payload is None:
            return
        await self._run_command(
            lambda engine, seat: engine.attack(seat, payload.attacker_index, payload.target_index)
        )

    async def _handle_next_phase(self, data: dict[str, Any]) -> None:
        await self._run_command(lambda engine, seat: engine.end_turn(seat))

    async def _run_command(self, command) -> None:
        """
        Apply a command for the sender's seat and publish the outcome.

        The seat index always comes from the connection, never the payload.
        """
        match = self.matchmaker.match_for(self.info.connection_id)
        if match is None:
            await self._send_error("You are not in a game", NOT_IN_GAME)
            return

        seat = match.seat_of(self.info.connection_id)
        result: CommandResult = command(match.engine, seat)
        # Snapshot before any await so it reflects exactly this command
        state = match.engine.snapshot().to_wire()

        if not result.success:
            logger.warning(
                f"Rejected intent from {self.info.name} in match {match.match_id}: "
                f"{result.error.value} ({result.error_message})"
            )
            await self._send_error(result.error_message, result.error.value)
            return

        connection_ids = [s.connection_id for s in match.seats]
        await self.manager.send_to_many(connection_ids, envelope("gameUpdate", state))

        if result.game_over:
            self.matchmaker.end_match(match.match_id)
            await self.manager.send_to_many(
                connection_ids, envelope("gameOver", {"winner": result.winner})
            )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _parse(self, schema: type[BaseModel], data: Any) -> BaseModel | None:
        """Validate an intent payload, replying with gameError when it is malformed."""
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            await self._send_error(f"Invalid payload: {fields or 'bad data'}", INVALID_PAYLOAD)
            return None

    async def _send(self, msg_type: str, data: dict[str, Any]) -> None:
        await self.manager.send_to(self.info.connection_id, envelope(msg_type, data))

    async def _send_error(self, message: str, code: str) -> None:
        """Send an error to this client only."""
        await self._send("gameError", {"message": message, "code": code})
