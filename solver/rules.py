# solver/rules.py
"""Corner-sum rules for the 2-4-4-2 lattice.

Every rule shares the same bound ``LIMIT``.  Pair rules cap the sums of the
corners that meet along a shared edge, the block rule pins the four corners
meeting at an inner lattice point to exactly ``LIMIT`` and the triangle rule
caps the three real corners meeting at a point on the lattice boundary.

``VALIDATORS`` maps each position to the conjunction of rules that become
checkable once that position is filled, assuming the positions are filled in
:data:`solver.backtrack.TRAVERSAL_ORDER`.  A validator reads only positions
that precede it in that order; calling it on a board missing one of them
raises ``KeyError``.
"""
from typing import Callable, Dict, Mapping, Optional, Tuple

from models import NEUTRAL_TILE, POSITIONS, Tile

LIMIT = 10

Board = Mapping[int, Tile]
Validator = Callable[[Board], bool]

# ---------- lattice geometry ----------
HORIZONTAL_PAIRS: Tuple[Tuple[int, int], ...] = (
    (0, 1), (2, 3), (3, 4), (4, 5), (6, 7), (7, 8), (8, 9), (10, 11),
)
VERTICAL_PAIRS: Tuple[Tuple[int, int], ...] = (
    (0, 3), (1, 4), (2, 6), (3, 7), (4, 8), (5, 9), (7, 10), (8, 11),
)
# (upper-left, upper-right, lower-left, lower-right)
BLOCKS: Tuple[Tuple[int, int, int, int], ...] = (
    (0, 1, 3, 4), (2, 3, 6, 7), (3, 4, 7, 8), (4, 5, 8, 9), (7, 8, 10, 11),
)
# None marks the slot outside the lattice
TRIANGLES: Tuple[Tuple[Optional[int], ...], ...] = (
    (None, 0, 2, 3), (1, None, 4, 5), (6, 7, None, 10), (8, 9, 11, None),
)


# ---------- rules ----------
def validate_tile(tile: Tile) -> bool:
    return (
        tile.top_left <= LIMIT and tile.top_right <= LIMIT
        and tile.bottom_left <= LIMIT and tile.bottom_right <= LIMIT
    )


def validate_horizontal(left: Tile, right: Tile) -> bool:
    """``left`` sits directly left of ``right``."""
    return (
        validate_tile(left) and validate_tile(right)
        and left.top_right + right.top_left <= LIMIT
        and left.bottom_right + right.bottom_left <= LIMIT
    )


def validate_vertical(upper: Tile, lower: Tile) -> bool:
    """``upper`` sits directly above ``lower``."""
    return (
        validate_tile(upper) and validate_tile(lower)
        and upper.bottom_left + lower.top_left <= LIMIT
        and upper.bottom_right + lower.top_right <= LIMIT
    )


def _inner_sum(ul: Tile, ur: Tile, ll: Tile, lr: Tile) -> int:
    return ul.bottom_right + ur.bottom_left + ll.top_right + lr.top_left


def validate_block(ul: Tile, ur: Tile, ll: Tile, lr: Tile) -> bool:
    """Four tiles around one inner lattice point; the meeting corners must add up to ``LIMIT``."""
    return (
        validate_horizontal(ul, ur) and validate_horizontal(ll, lr)
        and validate_vertical(ul, ll) and validate_vertical(ur, lr)
        and _inner_sum(ul, ur, ll, lr) == LIMIT
    )


def validate_triangle(ul: Tile, ur: Tile, ll: Tile, lr: Tile) -> bool:
    """Boundary point: one of the four slots is ``NEUTRAL_TILE``."""
    return _inner_sum(ul, ur, ll, lr) <= LIMIT


# ---------- position validators ----------
_N = NEUTRAL_TILE

VALIDATORS: Dict[int, Validator] = {
    0: lambda b: validate_vertical(b[0], b[3]),
    1: lambda b: validate_block(b[0], b[1], b[3], b[4]),
    2: lambda b: validate_horizontal(b[2], b[3]) and validate_triangle(_N, b[0], b[2], b[3]),
    3: lambda b: validate_tile(b[3]),
    4: lambda b: validate_horizontal(b[3], b[4]),
    5: lambda b: validate_horizontal(b[4], b[5]) and validate_triangle(b[1], _N, b[4], b[5]),
    6: lambda b: validate_block(b[2], b[3], b[6], b[7]),
    7: lambda b: validate_vertical(b[3], b[7]),
    8: lambda b: validate_block(b[3], b[4], b[7], b[8]),
    9: lambda b: validate_block(b[4], b[5], b[8], b[9]),
    10: lambda b: validate_vertical(b[7], b[10]) and validate_triangle(b[6], b[7], _N, b[10]),
    11: lambda b: (
        validate_block(b[7], b[8], b[10], b[11])
        and validate_triangle(b[8], b[9], b[11], _N)
    ),
}


def validate_position(position: int, board: Board) -> bool:
    return VALIDATORS[position](board)


def validate_board(board: Board) -> bool:
    """Re-run every position validator against a complete board."""
    return all(VALIDATORS[p](board) for p in POSITIONS)


__all__ = [
    "LIMIT",
    "Board",
    "HORIZONTAL_PAIRS",
    "VERTICAL_PAIRS",
    "BLOCKS",
    "TRIANGLES",
    "VALIDATORS",
    "validate_tile",
    "validate_horizontal",
    "validate_vertical",
    "validate_block",
    "validate_triangle",
    "validate_position",
    "validate_board",
]
