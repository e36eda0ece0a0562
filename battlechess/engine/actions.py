"""Command execution for the match engine."""

import logging

from .catalog import compute_damage, damage_multiplier
from .match_state import MatchState
from .models import CommandResult, MatchEvent, RuleViolation
from .targeting import legal_destinations, legal_targets

logger = logging.getLogger(__name__)


def _is_index(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class CommandExecutor:
    """
    Validates and applies player commands against a MatchState.

    Every check runs before the first mutation, so a rejected command
    leaves the state exactly as it was.
    """

    def __init__(self, state: MatchState):
        self.state = state

    def _check_turn(self, player: int) -> CommandResult | None:
        if self.state.is_finished:
            return CommandResult.failure(RuleViolation.MATCH_FINISHED, "The match is over")
        if player != self.state.current_turn:
            return CommandResult.failure(RuleViolation.NOT_YOUR_TURN, "Not your turn")
        return None

    def execute_deploy(self, player: int, card_index, tile_index) -> CommandResult:
        """
        Play a card from hand onto an empty tile of the player's spawn zone.

        Args:
            player: Acting player index, taken from the connection
            card_index: Position of the card in hand
            tile_index: Board tile to deploy on

        Returns:
            CommandResult with a deploy event
        """
        rejected = self._check_turn(player)
        if rejected:
            return rejected

        state = self.state
        owner = state.get_player(player)

        if not _is_index(card_index) or not 0 <= card_index < len(owner.hand):
            return CommandResult.failure(
                RuleViolation.INVALID_CARD_INDEX, f"No card at hand index {card_index!r}"
            )

        card = owner.hand[card_index]
        if card.cost > owner.mana:
            return CommandResult.failure(
                RuleViolation.INSUFFICIENT_MANA,
                f"Not enough mana: need {card.cost}, have {owner.mana}",
            )

        if not state.geometry.is_valid_index(tile_index) or \
                not state.geometry.is_spawn_tile(player, tile_index):
            return CommandResult.failure(
                RuleViolation.INVALID_SPAWN_ZONE,
                f"Tile {tile_index!r} is not in your spawn zone",
            )

        if not state.board.is_empty(tile_index):
            return CommandResult.failure(
                RuleViolation.TILE_OCCUPIED, f"Tile {tile_index} is already occupied"
            )

        owner.hand.pop(card_index)
        owner.mana -= card.cost
        unit = state.create_unit(card, player, tile_index)

        logger.debug(f"Player {player} deployed {card.archetype.value} at {tile_index}")
        return CommandResult.ok([MatchEvent("deploy", {
            "unit_id": unit.unit_id,
            "type": unit.archetype.value,
            "owner": player,
            "tile": tile_index,
        })])

    def execute_move(self, player: int, from_index, to_index) -> CommandResult:
        """
        Move one of the player's units along its movement pattern.

        Returns:
            CommandResult with a move event
        """
        rejected = self._check_turn(player)
        if rejected:
            return rejected

        state = self.state
        unit = state.board.unit_at(from_index) if _is_index(from_index) else None
        if unit is None or unit.owner != player:
            return CommandResult.failure(
                RuleViolation.INVALID_UNIT, f"You have no unit on tile {from_index!r}"
            )

        if unit.moved_this_turn:
            return CommandResult.failure(
                RuleViolation.ALREADY_MOVED, "This unit already moved this turn"
            )

        if unit.just_summoned:
            return CommandResult.failure(
                RuleViolation.SUMMONING_SICKNESS, "Units cannot move on the turn they are deployed"
            )

        if not state.geometry.is_valid_index(to_index) or not state.board.is_empty(to_index):
            return CommandResult.failure(
                RuleViolation.INVALID_DESTINATION, f"Tile {to_index!r} is not an empty board tile"
            )

        if to_index not in legal_destinations(state.board, unit):
            return CommandResult.failure(
                RuleViolation.ILLEGAL_MOVEMENT_PATTERN,
                f"{unit.archetype.value} cannot reach tile {to_index}",
            )

        state.board.relocate(from_index, to_index)
        unit.moved_this_turn = True

        return CommandResult.ok([MatchEvent("move", {
            "unit_id": unit.unit_id,
            "from": from_index,
            "to": to_index,
        })])

    def execute_attack(self, player: int, attacker_index, target_index) -> CommandResult:
        """
        Attack an enemy unit in range.

        The defender is removed when its health drops to zero or below and
        elimination is evaluated immediately.

        Returns:
            CommandResult with damage/death events, and the winner if the
            attack ended the match
        """
        rejected = self._check_turn(player)
        if rejected:
            return rejected

        state = self.state
        attacker = state.board.unit_at(attacker_index) if _is_index(attacker_index) else None
        if attacker is None or attacker.owner != player:
            return CommandResult.failure(
                RuleViolation.INVALID_ATTACKER, f"You have no unit on tile {attacker_index!r}"
            )

        if attacker.attacked_this_turn:
            return CommandResult.failure(
                RuleViolation.ALREADY_ATTACKED, "This unit already attacked this turn"
            )

        defender = state.board.unit_at(target_index) if _is_index(target_index) else None
        if defender is None or defender.owner == player:
            return CommandResult.failure(
                RuleViolation.INVALID_TARGET, f"No enemy unit on tile {target_index!r}"
            )

        if target_index not in legal_targets(state.board, attacker, player):
            return CommandResult.failure(
                RuleViolation.OUT_OF_RANGE,
                f"Tile {target_index} is out of range for {attacker.archetype.value}",
            )

        damage = compute_damage(attacker.attack, attacker.weapon, defender.weapon)
        defender.current_health = max(0, defender.current_health - damage)
        attacker.attacked_this_turn = True

        events = [MatchEvent("damage", {
            "unit_id": defender.unit_id,
            "attacker_id": attacker.unit_id,
            "amount": damage,
            "multiplier": damage_multiplier(attacker.weapon, defender.weapon),
            "new_health": defender.current_health,
        })]

        if not defender.is_alive:
            state.board.remove(target_index)
            events.append(MatchEvent("death", {
                "unit_id": defender.unit_id,
                "tile": target_index,
            }))

        winner = state.check_elimination()
        if winner is not None:
            events.append(MatchEvent("match_end", {"winner": winner}))
            logger.info(f"Player {winner} eliminated the opposing army")

        return CommandResult.ok(events, winner=winner)

    def end_turn(self, player: int) -> CommandResult:
        """End the player's turn and start the opponent's."""
        rejected = self._check_turn(player)
        if rejected:
            return rejected

        return CommandResult.ok(self.state.switch_turn())
