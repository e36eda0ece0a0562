"""Movement and attack targeting rules.

Both entry points are pure: they read the board and never mutate it.
"""

from .board import (
    ALL_DIRECTIONS, DIAGONAL_DIRECTIONS, ORTHOGONAL_DIRECTIONS, Board
)
from .models import MovementKind, UnitInstance, WeaponClass

# (directions, reach) per weapon class
MELEE_REACH = 1
BOW_REACH = 3
STAFF_REACH = 4

ATTACK_PROFILES: dict[WeaponClass, tuple[tuple[tuple[int, int], ...], int]] = {
    WeaponClass.SWORD: (ORTHOGONAL_DIRECTIONS, MELEE_REACH),
    WeaponClass.LANCE: (ORTHOGONAL_DIRECTIONS, MELEE_REACH),
    WeaponClass.BOW: (ORTHOGONAL_DIRECTIONS, BOW_REACH),
    WeaponClass.STAFF: (DIAGONAL_DIRECTIONS, STAFF_REACH),
}


def legal_destinations(board: Board, unit: UnitInstance) -> frozenset[int]:
    """
    Get every tile the unit may move to.

    Destinations are always in bounds and empty.
    """
    kind = unit.movement.kind
    reach = unit.movement.range

    if kind == MovementKind.JUMP:
        return _jump_destinations(board, unit.position, reach)
    elif kind == MovementKind.STRAIGHT:
        return _slide_destinations(board, unit.position, ORTHOGONAL_DIRECTIONS, reach)
    elif kind == MovementKind.DIAGONAL:
        return _slide_destinations(board, unit.position, DIAGONAL_DIRECTIONS, reach)
    else:  # ADJACENT
        return _slide_destinations(board, unit.position, ALL_DIRECTIONS, 1)


def _jump_destinations(board: Board, origin: int, reach: int) -> frozenset[int]:
    """Every empty tile within a Manhattan radius, blockers ignored."""
    geometry = board.geometry
    row, col = geometry.to_row_col(origin)
    found = set()
    for dy in range(-reach, reach + 1):
        for dx in range(-reach, reach + 1):
            distance = abs(dx) + abs(dy)
            if distance == 0 or distance > reach:
                continue
            r, c = row + dy, col + dx
            if not geometry.in_bounds(r, c):
                continue
            index = geometry.to_index(r, c)
            if board.is_empty(index):
                found.add(index)
    return frozenset(found)


def _slide_destinations(board: Board, origin: int,
                        directions, reach: int) -> frozenset[int]:
    """Slide along each direction, stopping before the first occupied tile."""
    found = set()
    for direction in directions:
        for index in board.geometry.ray(origin, direction, reach):
            if not board.is_empty(index):
                break
            found.add(index)
    return frozenset(found)


def legal_targets(board: Board, unit: UnitInstance, owner: int) -> frozenset[int]:
    """
    Get every enemy-occupied tile the unit may attack.

    Scanning along a direction stops at the first occupied tile: an enemy
    there is a target, a friendly unit blocks line of sight.
    """
    directions, reach = ATTACK_PROFILES.get(unit.weapon, (ORTHOGONAL_DIRECTIONS, MELEE_REACH))
    found = set()
    for direction in directions:
        for index in board.geometry.ray(unit.position, direction, reach):
            occupant = board.unit_at(index)
            if occupant is None:
                continue
            if occupant.owner != owner:
                found.add(index)
            break
    return frozenset(found)
