"""
Main FastAPI application for the BattleChess server.
"""

import logging
import random
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, status
from fastapi.middleware.cors import CORSMiddleware

from battlechess.api import api_router
from battlechess.config import Settings, get_settings
from battlechess.engine import BoardGeometry, MatchEngine
from battlechess.matchmaking import Matchmaker
from battlechess.matchmaking.matchmaker import EngineFactory
from battlechess.matchmaking.names import generate_player_name
from battlechess.websocket import ConnectionInfo, ConnectionManager, WebSocketHandler

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_engine_factory(settings: Settings) -> EngineFactory:
    """Create MatchEngine instances configured from settings."""
    geometry = BoardGeometry(size=settings.board_size, spawn_rows=settings.spawn_rows)

    def factory(match_id: str, player_names: tuple[str, str]) -> MatchEngine:
        return MatchEngine(
            match_id,
            player_names,
            geometry=geometry,
            rng=random.Random(settings.match_seed),
            mana_ceiling=settings.mana_ceiling,
            hand_limit=settings.hand_limit,
            starting_hand_size=settings.starting_hand_size,
        )

    return factory


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Creates the matchmaker and connection manager owned by this app.
    """
    settings = get_settings()

    logger.info("Initializing connection manager...")
    app.state.connections = ConnectionManager(send_timeout=settings.send_timeout_seconds)

    logger.info(
        f"Initializing matchmaker ({settings.board_size}x{settings.board_size} board, "
        f"{settings.spawn_rows} spawn rows)..."
    )
    app.state.matchmaker = Matchmaker(build_engine_factory(settings))

    logger.info("BattleChess server started successfully!")

    yield

    logger.info(
        f"Shutting down with {app.state.matchmaker.match_count} live matches "
        f"and {app.state.matchmaker.waiting_count} waiting players"
    )


# Create FastAPI application
app = FastAPI(
    title="BattleChess",
    description="Authoritative server for a two-player tactical card battler",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# WebSocket endpoint
@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    Main WebSocket endpoint for game connections.
    Every connection gets a generated display name.
    """
    manager: ConnectionManager | None = getattr(websocket.app.state, "connections", None)
    matchmaker: Matchmaker | None = getattr(websocket.app.state, "matchmaker", None)
    if manager is None or matchmaker is None:
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    await websocket.accept()

    info = ConnectionInfo(name=generate_player_name(), websocket=websocket)
    await manager.connect(info)

    # Handler owns the disconnect path
    handler = WebSocketHandler(manager=manager, matchmaker=matchmaker, info=info)
    await handler.handle_connection()


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    matchmaker: Matchmaker | None = getattr(app.state, "matchmaker", None)

    return {
        "status": "healthy",
        "games": matchmaker.match_count if matchmaker else 0,
        "waiting": matchmaker.waiting_count if matchmaker else 0,
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "battlechess.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
