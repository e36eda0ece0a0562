"""Main match engine."""

import random

from .actions import CommandExecutor
from .board import BoardGeometry
from .models import CommandResult, MatchStatus, UnitInstance
from .match_state import HAND_LIMIT, MANA_CEILING, STARTING_HAND_SIZE, MatchState
from .snapshot import GameStateSnapshot
from .targeting import legal_destinations, legal_targets


class MatchEngine:
    """
    Authoritative engine for one match.

    This class provides the public API used by the transport layer. It owns
    the MatchState and delegates command execution. Nothing outside the
    engine ever sees the mutable state, only snapshots.
    """

    def __init__(self, match_id: str, player_names: tuple[str, str],
                 geometry: BoardGeometry | None = None,
                 rng: random.Random | None = None,
                 mana_ceiling: int = MANA_CEILING,
                 hand_limit: int = HAND_LIMIT,
                 starting_hand_size: int = STARTING_HAND_SIZE):
        """
        Create and start a match.

        Args:
            match_id: Identifier reported to clients as gameId
            player_names: Display names, seat 0 first
            geometry: Board dimensions and spawn rows
            rng: Source of randomness for deck shuffles
        """
        self.match_id = match_id
        self._state = MatchState(
            geometry=geometry,
            rng=rng,
            mana_ceiling=mana_ceiling,
            hand_limit=hand_limit,
            starting_hand_size=starting_hand_size,
        )
        self._state.start(player_names)
        self._executor = CommandExecutor(self._state)

    # =========================================================================
    # Query Methods
    # =========================================================================

    @property
    def status(self) -> MatchStatus:
        return self._state.status

    @property
    def current_turn(self) -> int:
        return self._state.current_turn

    @property
    def turn_number(self) -> int:
        return self._state.turn_number

    @property
    def winner(self) -> int | None:
        return self._state.winner

    @property
    def geometry(self) -> BoardGeometry:
        return self._state.geometry

    def is_over(self) -> bool:
        return self._state.is_finished

    def snapshot(self) -> GameStateSnapshot:
        """Immutable copy of the full match state."""
        return self._state.snapshot()

    def units_of(self, player: int) -> list[int]:
        """Tile indices holding the player's units."""
        return [u.position for u in self._state.board.units(player)]

    def legal_moves_for(self, tile_index: int) -> list[int]:
        """Sorted destinations for the unit on a tile, empty if none can move."""
        unit = self._movable_unit(tile_index)
        if unit is None:
            return []
        return sorted(legal_destinations(self._state.board, unit))

    def legal_targets_for(self, tile_index: int) -> list[int]:
        """Sorted attack targets for the unit on a tile."""
        unit = self._state.board.unit_at(tile_index)
        if unit is None or unit.attacked_this_turn:
            return []
        return sorted(legal_targets(self._state.board, unit, unit.owner))

    def can_play_card(self, player: int, card_index: int) -> bool:
        """Whether the player could afford the card right now."""
        state = self._state
        if state.is_finished or player != state.current_turn:
            return False
        hand = state.get_player(player).hand
        if not isinstance(card_index, int) or not 0 <= card_index < len(hand):
            return False
        return hand[card_index].cost <= state.get_player(player).mana

    def _movable_unit(self, tile_index: int) -> UnitInstance | None:
        unit = self._state.board.unit_at(tile_index)
        if unit is None or unit.moved_this_turn or unit.just_summoned:
            return None
        return unit

    # =========================================================================
    # Command Methods
    # =========================================================================

    def deploy(self, player: int, card_index, tile_index) -> CommandResult:
        """Play a card onto the board."""
        return self._executor.execute_deploy(player, card_index, tile_index)

    def move(self, player: int, from_index, to_index) -> CommandResult:
        """Move a unit."""
        return self._executor.execute_move(player, from_index, to_index)

    def attack(self, player: int, attacker_index, target_index) -> CommandResult:
        """Attack an enemy unit."""
        return self._executor.execute_attack(player, attacker_index, target_index)

    def end_turn(self, player: int) -> CommandResult:
        """End the current turn and pass to the opponent."""
        return self._executor.end_turn(player)
