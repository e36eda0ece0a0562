"""
Authoritative match engine for BattleChess.

Pure game logic, no networking. The transport layer feeds it player
intents and broadcasts the snapshots it produces.

Example usage:
    from battlechess.engine import MatchEngine

    engine = MatchEngine("abc123", ("Alice", "Bob"))
    result = engine.deploy(0, card_index=0, tile_index=22)
    if result.success:
        state = engine.snapshot().to_wire()
    else:
        print(result.error.value, result.error_message)
"""

# Core models
from .models import (
    Archetype,
    WeaponClass,
    MovementKind,
    MovementPattern,
    MatchStatus,
    RuleViolation,
    UnitArchetype,
    UnitInstance,
    Card,
    PlayerState,
    MatchEvent,
    CommandResult,
)

# Static data
from .catalog import (
    UNIT_CATALOG,
    WEAPON_CYCLE,
    stats_for,
    damage_multiplier,
    compute_damage,
)

# Board and rules
from .board import Board, BoardGeometry
from .targeting import legal_destinations, legal_targets

# State and engine
from .match_state import MatchState
from .match import MatchEngine
from .snapshot import GameStateSnapshot

__all__ = [
    # Core models
    "Archetype",
    "WeaponClass",
    "MovementKind",
    "MovementPattern",
    "MatchStatus",
    "RuleViolation",
    "UnitArchetype",
    "UnitInstance",
    "Card",
    "PlayerState",
    "MatchEvent",
    "CommandResult",
    # Static data
    "UNIT_CATALOG",
    "WEAPON_CYCLE",
    "stats_for",
    "damage_multiplier",
    "compute_damage",
    # Board and rules
    "Board",
    "BoardGeometry",
    "legal_destinations",
    "legal_targets",
    # State and engine
    "MatchState",
    "MatchEngine",
    "GameStateSnapshot",
]
