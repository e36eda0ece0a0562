"""Core data structures for the match engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Archetype(str, Enum):
    """Unit types that can be deployed from a card."""
    SCOUT = "SCOUT"
    ARCHER = "ARCHER"
    KNIGHT = "KNIGHT"
    MAGE = "MAGE"


class WeaponClass(str, Enum):
    """Weapon carried by a unit, drives the weapon triangle and attack reach."""
    SWORD = "SWORD"
    BOW = "BOW"
    LANCE = "LANCE"
    STAFF = "STAFF"


class MovementKind(str, Enum):
    """How a unit travels across the board."""
    JUMP = "JUMP"          # Manhattan radius, ignores blockers
    STRAIGHT = "STRAIGHT"  # Orthogonal slide, stops before blockers
    ADJACENT = "ADJACENT"  # One step in any of the 8 directions
    DIAGONAL = "DIAGONAL"  # Diagonal slide, stops before blockers


class MatchStatus(str, Enum):
    """Lifecycle of a match."""
    WAITING_FOR_PLAYERS = "WAITING_FOR_PLAYERS"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class RuleViolation(str, Enum):
    """Reasons a command can be rejected."""
    NOT_YOUR_TURN = "NotYourTurn"
    INVALID_CARD_INDEX = "InvalidCardIndex"
    INSUFFICIENT_MANA = "InsufficientMana"
    INVALID_SPAWN_ZONE = "InvalidSpawnZone"
    TILE_OCCUPIED = "TileOccupied"
    INVALID_UNIT = "InvalidUnit"
    ALREADY_MOVED = "AlreadyMoved"
    SUMMONING_SICKNESS = "SummoningSickness"
    INVALID_DESTINATION = "InvalidDestination"
    ILLEGAL_MOVEMENT_PATTERN = "IllegalMovementPattern"
    INVALID_ATTACKER = "InvalidAttacker"
    ALREADY_ATTACKED = "AlreadyAttacked"
    INVALID_TARGET = "InvalidTarget"
    OUT_OF_RANGE = "OutOfRange"
    MATCH_FINISHED = "MatchFinished"


@dataclass(frozen=True)
class MovementPattern:
    """Movement kind plus its reach in tiles."""
    kind: MovementKind
    range: int = 1


@dataclass(frozen=True)
class UnitArchetype:
    """Immutable stat template for a unit type."""
    archetype: Archetype
    health: int
    attack: int
    movement: MovementPattern
    weapon: WeaponClass
    cost: int


@dataclass(frozen=True)
class Card:
    """A card in hand. Playing it deploys a unit of its archetype."""
    archetype: Archetype
    cost: int


@dataclass
class UnitInstance:
    """A unit on the board."""
    unit_id: str
    stats: UnitArchetype
    owner: int
    position: int
    current_health: int
    max_health: int
    weapon: WeaponClass
    moved_this_turn: bool = False
    attacked_this_turn: bool = False
    just_summoned: bool = False

    @property
    def archetype(self) -> Archetype:
        return self.stats.archetype

    @property
    def attack(self) -> int:
        return self.stats.attack

    @property
    def movement(self) -> MovementPattern:
        return self.stats.movement

    @property
    def is_alive(self) -> bool:
        return self.current_health > 0

    def reset_turn_flags(self) -> None:
        """Clear per-turn flags at the start of the owner's turn."""
        self.moved_this_turn = False
        self.attacked_this_turn = False
        self.just_summoned = False


@dataclass
class PlayerState:
    """One player's hand, mana and private draw pile."""
    name: str
    hand: list[Card] = field(default_factory=list)
    mana: int = 0
    max_mana: int = 0
    deck: list[Card] = field(default_factory=list)


@dataclass
class MatchEvent:
    """Something that happened while applying a command."""
    event_type: str
    data: dict[str, Any] = field(default_factory=dict)

    # Event types:
    # "deploy" - data: {unit_id, type, owner, tile}
    # "move" - data: {unit_id, from, to}
    # "damage" - data: {unit_id, attacker_id, amount, multiplier, new_health}
    # "death" - data: {unit_id, tile}
    # "turn_start" - data: {player, turn_number}
    # "draw" - data: {player, type}
    # "match_end" - data: {winner}


@dataclass
class CommandResult:
    """Result of attempting a command."""
    success: bool
    events: list[MatchEvent] = field(default_factory=list)
    error: RuleViolation | None = None
    error_message: str | None = None
    winner: int | None = None

    @property
    def game_over(self) -> bool:
        return self.winner is not None

    @staticmethod
    def failure(error: RuleViolation, message: str) -> "CommandResult":
        return CommandResult(success=False, error=error, error_message=message)

    @staticmethod
    def ok(events: list[MatchEvent] | None = None,
           winner: int | None = None) -> "CommandResult":
        return CommandResult(success=True, events=events or [], winner=winner)
