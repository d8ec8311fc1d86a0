"""CP-SAT model of the lattice, used to enumerate solutions independently of the backtracker."""
import logging
from typing import List, Optional, Sequence, Tuple

from ortools.sat.python import cp_model as _cp

from config import CFG
from models import POSITIONS, TILE_COUNT, Tile
from solver.backtrack import Assignment, check_tile_count
from solver.rules import (
    BLOCKS,
    HORIZONTAL_PAIRS,
    LIMIT,
    TRIANGLES,
    VERTICAL_PAIRS,
    validate_tile,
)

log = logging.getLogger(__name__)


class _AssignmentCollector(_cp.CpSolverSolutionCallback):
    def __init__(self, x: List[List[_cp.IntVar]]):
        super().__init__()
        self._x = x
        self.assignments: List[Assignment] = []

    def on_solution_callback(self) -> None:
        ids = []
        for row in self._x:
            for tile_id, var in enumerate(row):
                if self.BooleanValue(var):
                    ids.append(tile_id)
                    break
        self.assignments.append(tuple(ids))


def _build_model(tiles: Sequence[Tile]):
    m = _cp.CpModel()

    # x[p][t] -> tile t sits at position p
    x = [[m.NewBoolVar(f"x_{p}_{t}") for t in range(TILE_COUNT)] for p in POSITIONS]
    for p in POSITIONS:
        m.AddExactlyOne(x[p])
    for t in range(TILE_COUNT):
        m.AddExactlyOne([x[p][t] for p in POSITIONS])

    for t, tile in enumerate(tiles):
        if not validate_tile(tile):
            for p in POSITIONS:
                m.Add(x[p][t] == 0)

    def corner(position: Optional[int], attr: str):
        if position is None:
            return 0
        return sum(getattr(tiles[t], attr) * x[position][t] for t in range(TILE_COUNT))

    def inner(ul, ur, ll, lr):
        return (
            corner(ul, "bottom_right") + corner(ur, "bottom_left")
            + corner(ll, "top_right") + corner(lr, "top_left")
        )

    for a, b in HORIZONTAL_PAIRS:
        m.Add(corner(a, "top_right") + corner(b, "top_left") <= LIMIT)
        m.Add(corner(a, "bottom_right") + corner(b, "bottom_left") <= LIMIT)
    for a, b in VERTICAL_PAIRS:
        m.Add(corner(a, "bottom_left") + corner(b, "top_left") <= LIMIT)
        m.Add(corner(a, "bottom_right") + corner(b, "top_right") <= LIMIT)
    for block in BLOCKS:
        m.Add(inner(*block) == LIMIT)
    for triangle in TRIANGLES:
        m.Add(inner(*triangle) <= LIMIT)

    return m, x


def enumerate_assignments(
    tiles: Sequence[Tile],
    max_seconds: Optional[float] = None,
) -> Tuple[bool, List[Assignment], Optional[str]]:
    """
    Returns (complete, assignments, reason).
    ``complete`` is False when the solver stopped before the enumeration
    finished; ``assignments`` then holds whatever was found so far.
    """
    tiles = tuple(tiles)
    check_tile_count(tiles)
    m, x = _build_model(tiles)

    solver = _cp.CpSolver()
    seconds = CFG.CP_MAX_SECONDS if max_seconds is None else max_seconds
    solver.parameters.max_time_in_seconds = float(seconds)
    solver.parameters.max_memory_in_mb = int(getattr(CFG, "CP_MAX_MEMORY_MB", 2048))
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1
    solver.parameters.log_search_progress = False

    collector = _AssignmentCollector(x)
    res = solver.Solve(m, collector)
    found = collector.assignments
    log.debug("cp-sat status=%s solutions=%d", solver.StatusName(res), len(found))

    if res in (_cp.OPTIMAL, _cp.INFEASIBLE):
        return True, found, None
    if res == _cp.MODEL_INVALID:
        return False, found, "Model invalid (configuration error)"
    return False, found, "Stopped before enumeration finished (timebox)"


__all__ = ["enumerate_assignments"]
