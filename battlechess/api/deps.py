"""
Shared FastAPI dependencies.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from battlechess.config import Settings, get_settings
from battlechess.matchmaking import Matchmaker


def get_matchmaker(request: Request) -> Matchmaker:
    """The matchmaker created at start-up."""
    return request.app.state.matchmaker


async def require_debug_mode(
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """
    Dependency that requires debug mode.
    Raises 403 if the server was not started with DEBUG_MODE on.
    """
    if not settings.debug_mode:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Debug endpoints are disabled",
        )
