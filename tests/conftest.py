"""
Pytest fixtures for BattleChess tests.
"""

import os
import random
from typing import AsyncGenerator

import pytest
import pytest_asyncio

# Set test environment before the app reads its settings
os.environ["DEBUG_MODE"] = "true"
os.environ["MATCH_SEED"] = "7"
os.environ["BOARD_SIZE"] = "5"
os.environ["SPAWN_ROWS"] = "2"
os.environ["SEND_TIMEOUT_SECONDS"] = "1.0"

from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from battlechess.engine import (
    Archetype, BoardGeometry, Card, MatchEngine, MatchState, UnitInstance, stats_for
)
from battlechess.engine.actions import CommandExecutor
from battlechess.engine.catalog import card_for
from battlechess.main import app
from battlechess.matchmaking import Matchmaker


def make_state(size: int = 5, spawn_rows: int = 2, seed: int = 1) -> MatchState:
    """An ACTIVE match state with empty board and seeded decks."""
    state = MatchState(BoardGeometry(size, spawn_rows), rng=random.Random(seed))
    state.start(("Alice", "Bob"))
    return state


def place_unit(state: MatchState, archetype: Archetype, owner: int, tile: int,
               **flags) -> UnitInstance:
    """Put a unit straight onto the board, bypassing deploy rules."""
    stats = stats_for(archetype)
    unit = UnitInstance(
        unit_id=state.next_unit_id(),
        stats=stats,
        owner=owner,
        position=tile,
        current_health=stats.health,
        max_health=stats.health,
        weapon=stats.weapon,
        **flags,
    )
    state.board.place(unit)
    return unit


def hand_of(*archetypes: Archetype) -> list[Card]:
    return [card_for(a) for a in archetypes]


@pytest.fixture
def state() -> MatchState:
    return make_state()


@pytest.fixture
def executor(state: MatchState) -> CommandExecutor:
    return CommandExecutor(state)


def scripted_engine_factory(match_id: str, player_names: tuple[str, str]) -> MatchEngine:
    """Engines whose opening hands are all scouts, for predictable socket tests."""
    engine = MatchEngine(match_id, player_names, rng=random.Random(3))
    for player in engine._state.players:
        player.hand = hand_of(*[Archetype.SCOUT] * 5)
    return engine


@pytest.fixture
def scripted_client():
    """Test client whose matches deal predictable hands."""
    with TestClient(app) as test_client:
        app.state.matchmaker = Matchmaker(scripted_engine_factory)
        yield test_client


@pytest_asyncio.fixture
async def api_client() -> AsyncGenerator[AsyncClient, None]:
    """Async REST client against a fresh matchmaker."""
    app.state.matchmaker = Matchmaker(scripted_engine_factory)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
