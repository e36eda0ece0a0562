"""
Tests for the health check and the match inspection endpoints.
"""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from battlechess.config import Settings, get_settings
from battlechess.main import app


def start_match(name_a: str = "Alice", name_b: str = "Bob"):
    matchmaker = app.state.matchmaker
    matchmaker.request_match(uuid4(), name_a)
    return matchmaker.request_match(uuid4(), name_b)


@pytest.mark.asyncio
async def test_health(api_client: AsyncClient):
    """Test health reports live matches and waiting players."""
    start_match()
    app.state.matchmaker.request_match(uuid4(), "Carol")

    response = await api_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "games": 1, "waiting": 1}


@pytest.mark.asyncio
async def test_list_matches(api_client: AsyncClient):
    """Test listing live matches."""
    match = start_match()

    response = await api_client.get("/api/matches")
    assert response.status_code == 200
    data = response.json()
    assert data["waiting"] == 0
    assert len(data["matches"]) == 1
    summary = data["matches"][0]
    assert summary["id"] == match.match_id
    assert summary["players"] == ["Alice", "Bob"]
    assert summary["status"] == "ACTIVE"
    assert summary["current_turn"] == 0
    assert summary["turn_number"] == 1


@pytest.mark.asyncio
async def test_get_match_state(api_client: AsyncClient):
    """Test fetching one match's snapshot."""
    match = start_match()

    response = await api_client.get(f"/api/matches/{match.match_id}")
    assert response.status_code == 200
    state = response.json()["state"]
    assert len(state["board"]) == 25
    assert state["currentTurn"] == 0
    assert [p["name"] for p in state["players"]] == ["Alice", "Bob"]
    assert state["players"][1]["maxMana"] == 2


@pytest.mark.asyncio
async def test_get_unknown_match(api_client: AsyncClient):
    """Test unknown match ids return 404."""
    response = await api_client.get("/api/matches/nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Match not found"


@pytest.mark.asyncio
async def test_debug_endpoints_disabled(api_client: AsyncClient):
    """Test match inspection is forbidden outside debug mode."""
    app.dependency_overrides[get_settings] = lambda: Settings(debug_mode=False)

    response = await api_client.get("/api/matches")
    assert response.status_code == 403

    # Health stays public
    response = await api_client.get("/health")
    assert response.status_code == 200
