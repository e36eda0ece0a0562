"""Immutable wire snapshots of match state."""

from pydantic import BaseModel, ConfigDict, Field

from .models import Archetype, MatchStatus, MovementKind, WeaponClass


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CardSnapshot(_Frozen):
    """A card as shown in a player's hand."""

    type: Archetype
    cost: int


class UnitSnapshot(_Frozen):
    """A unit on the board."""

    id: str
    type: Archetype
    owner: int
    position: int
    health: int
    max_health: int = Field(alias="maxHealth")
    attack: int
    weapon: WeaponClass
    movement: MovementKind
    moved_this_turn: bool = Field(alias="movedThisTurn")
    attacked_this_turn: bool = Field(alias="attackedThisTurn")
    just_summoned: bool = Field(alias="justSummoned")


class PlayerSnapshot(_Frozen):
    """Public view of one player's state."""

    name: str
    hand: tuple[CardSnapshot, ...]
    mana: int
    max_mana: int = Field(alias="maxMana")
    deck_size: int = Field(alias="deckSize")


class GameStateSnapshot(_Frozen):
    """Full match state sent to both players after every change."""

    board: tuple[UnitSnapshot | None, ...]
    players: tuple[PlayerSnapshot, PlayerSnapshot]
    current_turn: int = Field(alias="currentTurn")
    turn_number: int = Field(alias="turnNumber")
    status: MatchStatus
    winner: int | None = None

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
