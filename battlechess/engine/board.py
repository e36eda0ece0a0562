"""Board geometry and tile storage for the square battle grid."""

from dataclasses import dataclass
from typing import Iterator

from .models import UnitInstance

# Grid dimensions
DEFAULT_BOARD_SIZE = 5
DEFAULT_SPAWN_ROWS = 2

ORTHOGONAL_DIRECTIONS = ((0, -1), (1, 0), (0, 1), (-1, 0))
DIAGONAL_DIRECTIONS = ((-1, -1), (1, -1), (1, 1), (-1, 1))
ALL_DIRECTIONS = ORTHOGONAL_DIRECTIONS + DIAGONAL_DIRECTIONS


@dataclass(frozen=True)
class BoardGeometry:
    """
    Square board of size x size tiles addressed by a flat index.

    Index 0 is the top-left tile. Player 0 deploys into the bottom
    spawn_rows rows, player 1 into the top spawn_rows rows.
    """
    size: int = DEFAULT_BOARD_SIZE
    spawn_rows: int = DEFAULT_SPAWN_ROWS

    def __post_init__(self):
        if self.size < 2:
            raise ValueError(f"Board size must be at least 2, got {self.size}")
        if not 1 <= self.spawn_rows <= self.size // 2:
            raise ValueError(
                f"spawn_rows must be between 1 and {self.size // 2}, got {self.spawn_rows}"
            )

    @property
    def tile_count(self) -> int:
        return self.size * self.size

    def is_valid_index(self, index) -> bool:
        """True for an in-bounds integer tile index (bools are rejected)."""
        return (
            isinstance(index, int)
            and not isinstance(index, bool)
            and 0 <= index < self.tile_count
        )

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def to_row_col(self, index: int) -> tuple[int, int]:
        return index // self.size, index % self.size

    def to_index(self, row: int, col: int) -> int:
        return row * self.size + col

    def spawn_zone(self, player: int) -> range:
        """Tile indices a player may deploy into."""
        if player == 0:
            return range((self.size - self.spawn_rows) * self.size, self.tile_count)
        return range(0, self.spawn_rows * self.size)

    def is_spawn_tile(self, player: int, index: int) -> bool:
        return index in self.spawn_zone(player)

    def manhattan_distance(self, a: int, b: int) -> int:
        ar, ac = self.to_row_col(a)
        br, bc = self.to_row_col(b)
        return abs(ar - br) + abs(ac - bc)

    def ray(self, origin: int, direction: tuple[int, int], max_steps: int) -> Iterator[int]:
        """Yield in-bounds tiles stepping away from origin, nearest first."""
        row, col = self.to_row_col(origin)
        dx, dy = direction
        for step in range(1, max_steps + 1):
            r, c = row + dy * step, col + dx * step
            if not self.in_bounds(r, c):
                return
            yield self.to_index(r, c)


class Board:
    """Flat tile array where each tile holds at most one unit."""

    def __init__(self, geometry: BoardGeometry):
        self.geometry = geometry
        self._tiles: list[UnitInstance | None] = [None] * geometry.tile_count

    def __len__(self) -> int:
        return len(self._tiles)

    def unit_at(self, index: int) -> UnitInstance | None:
        """Get the unit on a tile, or None if empty or out of bounds."""
        if not self.geometry.is_valid_index(index):
            return None
        return self._tiles[index]

    def is_empty(self, index: int) -> bool:
        return self.geometry.is_valid_index(index) and self._tiles[index] is None

    def place(self, unit: UnitInstance) -> None:
        """Place a unit on its own position. The tile must be empty."""
        if not self.is_empty(unit.position):
            raise ValueError(f"Tile {unit.position} is not an empty board tile")
        self._tiles[unit.position] = unit

    def relocate(self, from_index: int, to_index: int) -> UnitInstance:
        """Move the unit on from_index to the empty tile to_index."""
        unit = self._tiles[from_index]
        if unit is None:
            raise ValueError(f"No unit on tile {from_index}")
        if not self.is_empty(to_index):
            raise ValueError(f"Tile {to_index} is not an empty board tile")
        self._tiles[from_index] = None
        self._tiles[to_index] = unit
        unit.position = to_index
        return unit

    def remove(self, index: int) -> UnitInstance | None:
        """Remove and return the unit on a tile."""
        unit = self._tiles[index]
        self._tiles[index] = None
        return unit

    def units(self, owner: int | None = None) -> list[UnitInstance]:
        """All units in tile order, optionally only one player's."""
        return [
            u for u in self._tiles
            if u is not None and (owner is None or u.owner == owner)
        ]

    def tiles(self) -> tuple[UnitInstance | None, ...]:
        return tuple(self._tiles)
