"""
FIFO matchmaking and the table of live matches.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable
from uuid import UUID, uuid4

from battlechess.engine import MatchEngine

logger = logging.getLogger(__name__)

EngineFactory = Callable[[str, tuple[str, str]], MatchEngine]


@dataclass
class WaitingPlayer:
    """A connection waiting in the queue."""

    connection_id: UUID
    name: str


@dataclass
class ActiveMatch:
    """A live match and the connections seated in it, seat 0 first."""

    engine: MatchEngine
    seats: tuple[WaitingPlayer, WaitingPlayer]

    @property
    def match_id(self) -> str:
        return self.engine.match_id

    def seat_of(self, connection_id: UUID) -> int | None:
        for index, seat in enumerate(self.seats):
            if seat.connection_id == connection_id:
                return index
        return None

    def opponent_of(self, connection_id: UUID) -> WaitingPlayer | None:
        index = self.seat_of(connection_id)
        if index is None:
            return None
        return self.seats[1 - index]


class Matchmaker:
    """
    Pairs waiting connections into matches.

    One instance is created at start-up and handed to whatever handles
    connections. All methods are synchronous and are only called from the
    event loop, so no locking is needed.
    """

    def __init__(self, engine_factory: EngineFactory = MatchEngine) -> None:
        self._engine_factory = engine_factory
        # Oldest waiting connection on the left
        self._queue: deque[WaitingPlayer] = deque()
        # Map of match_id -> ActiveMatch
        self._matches: dict[str, ActiveMatch] = {}
        # Map of connection_id -> match_id for seated connections
        self._match_of: dict[UUID, str] = {}

    def request_match(self, connection_id: UUID, name: str) -> ActiveMatch | None:
        """
        Pair the requester with the oldest waiting connection.

        Returns the new ActiveMatch, or None if the requester is now
        waiting (or was already waiting or seated).
        """
        if connection_id in self._match_of:
            logger.info(f"{name} asked for a match while already playing")
            return None
        if self.is_waiting(connection_id):
            return None

        if not self._queue:
            self._queue.append(WaitingPlayer(connection_id, name))
            logger.info(f"{name} added to queue. Queue size: {len(self._queue)}")
            return None

        opponent = self._queue.popleft()
        requester = WaitingPlayer(connection_id, name)
        match_id = self._new_match_id()
        engine = self._engine_factory(match_id, (opponent.name, requester.name))

        match = ActiveMatch(engine=engine, seats=(opponent, requester))
        self._matches[match_id] = match
        self._match_of[opponent.connection_id] = match_id
        self._match_of[requester.connection_id] = match_id

        logger.info(f"Match {match_id} started: {opponent.name} vs {requester.name}")
        return match

    def cancel(self, connection_id: UUID) -> bool:
        """Remove a connection from the queue. Returns True if it was waiting."""
        for waiting in self._queue:
            if waiting.connection_id == connection_id:
                self._queue.remove(waiting)
                logger.info(
                    f"Removed {waiting.name} from queue. Queue size: {len(self._queue)}"
                )
                return True
        return False

    def is_waiting(self, connection_id: UUID) -> bool:
        return any(w.connection_id == connection_id for w in self._queue)

    def match_for(self, connection_id: UUID) -> ActiveMatch | None:
        """Get the match a connection is seated in."""
        match_id = self._match_of.get(connection_id)
        if match_id is None:
            return None
        return self._matches.get(match_id)

    def get_match(self, match_id: str) -> ActiveMatch | None:
        return self._matches.get(match_id)

    def end_match(self, match_id: str) -> ActiveMatch | None:
        """Drop a match from the table and free both seats."""
        match = self._matches.pop(match_id, None)
        if match is None:
            return None
        for seat in match.seats:
            self._match_of.pop(seat.connection_id, None)
        logger.info(f"Match {match_id} removed")
        return match

    def disconnect(self, connection_id: UUID) -> ActiveMatch | None:
        """
        Forget a connection entirely.

        Leaves the queue if waiting. A match it was playing is discarded
        (there is no reconnection) and returned so the caller can notify
        the opponent.
        """
        self.cancel(connection_id)
        match = self.match_for(connection_id)
        if match is None:
            return None
        return self.end_match(match.match_id)

    def matches(self) -> list[ActiveMatch]:
        return list(self._matches.values())

    @property
    def waiting_count(self) -> int:
        return len(self._queue)

    @property
    def match_count(self) -> int:
        return len(self._matches)

    def _new_match_id(self) -> str:
        while True:
            match_id = uuid4().hex[:8]
            if match_id not in self._matches:
                return match_id
