# solver/backtrack.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional, Sequence, Set, Tuple

from models import POSITIONS, TILE_COUNT, Placement, Tile
from solver.rules import validate_position

log = logging.getLogger(__name__)

# Topological order of the validator dependencies: each position's validator
# only reads positions listed before it.  Reordering makes validators read
# unfilled slots.
TRAVERSAL_ORDER: Tuple[int, ...] = (3, 4, 7, 8, 0, 1, 2, 6, 5, 9, 10, 11)

Assignment = Tuple[int, ...]  # tile id per position
Sink = Callable[[Placement], None]


@dataclass
class SearchStats:
    nodes: int = 0
    solutions: int = 0
    every: int = 0
    on_progress: Optional[Callable[["SearchStats"], None]] = None

    def visit(self) -> None:
        self.nodes += 1
        if self.on_progress is not None and self.every > 0 and self.nodes % self.every == 0:
            self.on_progress(self)


def check_tile_count(tiles: Sequence[Tile]) -> None:
    if len(tiles) != TILE_COUNT:
        raise ValueError(f"expected {TILE_COUNT} tiles, got {len(tiles)}")


def placement_from_ids(tiles: Sequence[Tile], ids: Assignment) -> Placement:
    return tuple((p, tiles[ids[p]]) for p in POSITIONS)


def iter_assignments(
    tiles: Sequence[Tile],
    *,
    first: Optional[int] = None,
    stats: Optional[SearchStats] = None,
) -> Iterator[Assignment]:
    """Yield every valid assignment as a tuple of tile ids indexed by position.

    Positions are filled in ``TRAVERSAL_ORDER`` and the validator of each
    position runs right after it is filled, so a branch is dropped as soon as
    one of its rules fails.  Free tiles are tried in ascending id order.
    ``first`` pins the tile id used at the first traversal position.

    The board and the free set are shared by the whole search and restored on
    every exit path, so closing the generator early leaves nothing behind.
    """
    tiles = tuple(tiles)
    check_tile_count(tiles)
    if first is not None and not 0 <= first < TILE_COUNT:
        raise ValueError(f"first tile id out of range: {first}")
    if stats is None:
        stats = SearchStats()

    board: Dict[int, Tile] = {}
    ids: Dict[int, int] = {}
    free: Set[int] = set(range(TILE_COUNT))

    def _search(depth: int) -> Iterator[Assignment]:
        if depth == TILE_COUNT:
            stats.solutions += 1
            yield tuple(ids[p] for p in POSITIONS)
            return
        position = TRAVERSAL_ORDER[depth]
        if depth == 0 and first is not None:
            candidates = [first]
        else:
            candidates = sorted(free)
        for tile_id in candidates:
            stats.visit()
            board[position] = tiles[tile_id]
            ids[position] = tile_id
            free.discard(tile_id)
            try:
                if validate_position(position, board):
                    yield from _search(depth + 1)
            finally:
                free.add(tile_id)
                del board[position]
                del ids[position]

    yield from _search(0)


def enumerate_solutions(
    tiles: Sequence[Tile],
    sink: Sink,
    *,
    stats: Optional[SearchStats] = None,
) -> int:
    """Hand every solution to ``sink`` and return how many were found."""
    tiles = tuple(tiles)
    if stats is None:
        stats = SearchStats()
    count = 0
    for ids in iter_assignments(tiles, stats=stats):
        sink(placement_from_ids(tiles, ids))
        count += 1
    log.debug("backtracking finished: solutions=%d nodes=%d", count, stats.nodes)
    return count


__all__ = [
    "TRAVERSAL_ORDER",
    "Assignment",
    "Sink",
    "SearchStats",
    "check_tile_count",
    "placement_from_ids",
    "iter_assignments",
    "enumerate_solutions",
]
