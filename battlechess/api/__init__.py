"""
REST API routes for the BattleChess server.
"""

from fastapi import APIRouter

from battlechess.api.matches import router as matches_router

api_router = APIRouter()

api_router.include_router(matches_router, prefix="/matches", tags=["matches"])

__all__ = ["api_router"]
