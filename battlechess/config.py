"""
Configuration management for the BattleChess server.
Uses pydantic-settings for environment variable parsing.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Board
    board_size: int = Field(
        default=5,
        ge=2,
        description="Width and height of the square board in tiles"
    )
    spawn_rows: int = Field(
        default=2,
        ge=1,
        description="Rows nearest each player's edge reserved for their deploys"
    )

    # Economy
    starting_hand_size: int = Field(
        default=5,
        ge=0,
        description="Cards dealt to each player when a match starts"
    )
    hand_limit: int = Field(
        default=10,
        ge=1,
        description="No card is drawn while a hand holds this many cards"
    )
    mana_ceiling: int = Field(
        default=10,
        ge=1,
        description="Hard cap on a player's max mana"
    )

    # Randomness
    match_seed: int | None = Field(
        default=None,
        description="Seed for deck shuffles. None means a fresh seed per match"
    )

    # Transport
    send_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Give up on a single outgoing message after this long"
    )

    # Debug
    debug_mode: bool = Field(
        default=False,
        description="Enable the match inspection endpoints"
    )
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use dependency injection in FastAPI routes.
    """
    return Settings()
