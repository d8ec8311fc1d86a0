from dataclasses import dataclass
from typing import Tuple

TILE_COUNT = 12

# Slot ids per lattice row; the outer rows sit over columns 1-2.
LATTICE_ROWS: Tuple[Tuple[int, ...], ...] = (
    (0, 1),
    (2, 3, 4, 5),
    (6, 7, 8, 9),
    (10, 11),
)
POSITIONS: Tuple[int, ...] = tuple(range(TILE_COUNT))


@dataclass(frozen=True)
class Tile:
    """Square with a number in each corner."""

    top_left: int
    top_right: int
    bottom_left: int
    bottom_right: int

    @property
    def top_edge(self) -> Tuple[int, int]:
        return (self.top_left, self.top_right)

    @property
    def bottom_edge(self) -> Tuple[int, int]:
        return (self.bottom_left, self.bottom_right)

    @property
    def corners(self) -> Tuple[int, int, int, int]:
        return (self.top_left, self.top_right, self.bottom_left, self.bottom_right)

    def as_line(self) -> str:
        return " ".join(str(v) for v in self.corners)


# Stands in for the slot outside the lattice in the boundary rules.
NEUTRAL_TILE = Tile(0, 0, 0, 0)

# (position, tile) pairs ordered by position
Placement = Tuple[Tuple[int, Tile], ...]
