"""Match state container and turn lifecycle."""

import random

from .board import Board, BoardGeometry
from .catalog import build_deck, stats_for
from .models import (
    Card, MatchEvent, MatchStatus, PlayerState, UnitInstance
)
from .snapshot import (
    CardSnapshot, GameStateSnapshot, PlayerSnapshot, UnitSnapshot
)

MANA_CEILING = 10
HAND_LIMIT = 10
STARTING_HAND_SIZE = 5


class MatchState:
    """
    Container for all match state.

    This class holds the board, both players and the turn counters and
    implements the turn-switch procedure. Command validation lives in
    CommandExecutor.
    """

    def __init__(self, geometry: BoardGeometry | None = None,
                 rng: random.Random | None = None,
                 mana_ceiling: int = MANA_CEILING,
                 hand_limit: int = HAND_LIMIT,
                 starting_hand_size: int = STARTING_HAND_SIZE):
        self.geometry = geometry or BoardGeometry()
        self.board = Board(self.geometry)
        self.rng = rng or random.Random()
        self.mana_ceiling = mana_ceiling
        self.hand_limit = hand_limit
        self.starting_hand_size = starting_hand_size

        self.players: list[PlayerState] = []
        self.current_turn: int = 0
        self.turn_number: int = 1
        self.status: MatchStatus = MatchStatus.WAITING_FOR_PLAYERS
        self.winner: int | None = None
        self._next_unit_number = 1

    def start(self, player_names: tuple[str, str]) -> None:
        """Deal starting hands and set up opening mana. Match becomes ACTIVE."""
        if self.status != MatchStatus.WAITING_FOR_PLAYERS:
            raise RuntimeError(f"Cannot start a match in status {self.status.value}")

        self.players = []
        for seat, name in enumerate(player_names):
            player = PlayerState(name=name, deck=build_deck(self.rng))
            for _ in range(self.starting_hand_size):
                self._draw(player)
            # Second player opens one mana ahead
            player.max_mana = min(seat + 1, self.mana_ceiling)
            player.mana = player.max_mana
            self.players.append(player)

        self.current_turn = 0
        self.turn_number = 1
        self.status = MatchStatus.ACTIVE

    @property
    def is_finished(self) -> bool:
        return self.status == MatchStatus.FINISHED

    def get_player(self, index: int) -> PlayerState:
        return self.players[index]

    def next_unit_id(self) -> str:
        unit_id = f"u{self._next_unit_number}"
        self._next_unit_number += 1
        return unit_id

    def create_unit(self, card: Card, owner: int, tile: int) -> UnitInstance:
        """Instantiate a freshly summoned unit from a card and put it on the board."""
        stats = stats_for(card.archetype)
        unit = UnitInstance(
            unit_id=self.next_unit_id(),
            stats=stats,
            owner=owner,
            position=tile,
            current_health=stats.health,
            max_health=stats.health,
            weapon=stats.weapon,
            just_summoned=True,
        )
        self.board.place(unit)
        return unit

    def _draw(self, player: PlayerState) -> Card | None:
        """Move the top card of the pile into hand, if the hand has room."""
        if len(player.hand) >= self.hand_limit:
            return None
        if not player.deck:
            player.deck = build_deck(self.rng)
        card = player.deck.pop(0)
        player.hand.append(card)
        return card

    def switch_turn(self) -> list[MatchEvent]:
        """
        Pass the turn to the other player.

        Player 1 -> player 0 closes a round: the round counter increments and
        both players gain max mana, refill and draw. Player 0 -> player 1 only
        refills player 1's mana.
        """
        events: list[MatchEvent] = []

        if self.current_turn == 0:
            self.current_turn = 1
            incoming = self.players[1]
            incoming.mana = incoming.max_mana
        else:
            self.current_turn = 0
            self.turn_number += 1
            for seat, player in enumerate(self.players):
                player.max_mana = min(player.max_mana + 1, self.mana_ceiling)
                player.mana = player.max_mana
                card = self._draw(player)
                if card is not None:
                    events.append(MatchEvent("draw", {
                        "player": seat,
                        "type": card.archetype.value,
                    }))

        for unit in self.board.units(self.current_turn):
            unit.reset_turn_flags()

        events.append(MatchEvent("turn_start", {
            "player": self.current_turn,
            "turn_number": self.turn_number,
        }))
        return events

    def check_elimination(self) -> int | None:
        """
        Finish the match if one side has no units left.

        Returns the winning player index, or None if the match continues.
        """
        counts = [len(self.board.units(seat)) for seat in (0, 1)]
        if counts[0] > 0 and counts[1] > 0:
            return None
        if counts[0] == 0 and counts[1] == 0:
            return None

        self.winner = 0 if counts[0] > 0 else 1
        self.status = MatchStatus.FINISHED
        return self.winner

    def snapshot(self) -> GameStateSnapshot:
        """Build an immutable copy of the current state."""
        return GameStateSnapshot(
            board=tuple(
                None if unit is None else _unit_snapshot(unit)
                for unit in self.board.tiles()
            ),
            players=tuple(_player_snapshot(p) for p in self.players),
            current_turn=self.current_turn,
            turn_number=self.turn_number,
            status=self.status,
            winner=self.winner,
        )


def _unit_snapshot(unit: UnitInstance) -> UnitSnapshot:
    return UnitSnapshot(
        id=unit.unit_id,
        type=unit.archetype,
        owner=unit.owner,
        position=unit.position,
        health=unit.current_health,
        max_health=unit.max_health,
        attack=unit.attack,
        weapon=unit.weapon,
        movement=unit.movement.kind,
        moved_this_turn=unit.moved_this_turn,
        attacked_this_turn=unit.attacked_this_turn,
        just_summoned=unit.just_summoned,
    )


def _player_snapshot(player: PlayerState) -> PlayerSnapshot:
    return PlayerSnapshot(
        name=player.name,
        hand=tuple(CardSnapshot(type=c.archetype, cost=c.cost) for c in player.hand),
        mana=player.mana,
        max_mana=player.max_mana,
        deck_size=len(player.deck),
    )
