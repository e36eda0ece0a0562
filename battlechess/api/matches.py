"""
Match inspection API routes.
All endpoints require debug mode.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from battlechess.api.deps import get_matchmaker, require_debug_mode
from battlechess.engine import MatchStatus
from battlechess.matchmaking import ActiveMatch, Matchmaker

router = APIRouter(dependencies=[Depends(require_debug_mode)])


# Response schemas
class MatchSummary(BaseModel):
    """Response schema for a live match."""

    id: str
    players: list[str]
    status: MatchStatus
    current_turn: int
    turn_number: int


class MatchListResponse(BaseModel):
    """Response schema for match list."""

    matches: list[MatchSummary]
    waiting: int


class MatchStateResponse(MatchSummary):
    """Response schema for match state inspection."""

    state: dict[str, Any]


def _summary(match: ActiveMatch) -> dict[str, Any]:
    engine = match.engine
    return {
        "id": match.match_id,
        "players": [seat.name for seat in match.seats],
        "status": engine.status,
        "current_turn": engine.current_turn,
        "turn_number": engine.turn_number,
    }


# Routes
@router.get("", response_model=MatchListResponse)
async def list_matches(
    matchmaker: Annotated[Matchmaker, Depends(get_matchmaker)],
) -> MatchListResponse:
    """
    List all live matches.
    """
    return MatchListResponse(
        matches=[MatchSummary(**_summary(m)) for m in matchmaker.matches()],
        waiting=matchmaker.waiting_count,
    )


@router.get("/{match_id}", response_model=MatchStateResponse)
async def get_match(
    match_id: str,
    matchmaker: Annotated[Matchmaker, Depends(get_matchmaker)],
) -> MatchStateResponse:
    """
    Get the full state snapshot of a match.
    """
    match = matchmaker.get_match(match_id)
    if match is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Match not found",
        )

    return MatchStateResponse(
        **_summary(match),
        state=match.engine.snapshot().to_wire(),
    )
