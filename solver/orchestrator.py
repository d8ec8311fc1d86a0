# solver/orchestrator.py
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple

from config import CFG
from models import TILE_COUNT, Tile
from progress import set_done, set_engine, set_search_counts, set_tile_count, start_timer
from solver.backtrack import (
    Assignment,
    SearchStats,
    Sink,
    iter_assignments,
    placement_from_ids,
)
from solver.parallel import iter_assignments_parallel

log = logging.getLogger(__name__)

ENGINES = ("backtrack", "cp_sat")

SolveResult = Tuple[bool, int, str, Optional[str], Dict[str, Any]]


def _publish(stats: SearchStats) -> None:
    set_search_counts(stats.nodes, stats.solutions)


def _strategy_label(engine: str, workers: int) -> str:
    if engine == "cp_sat":
        return "CP-SAT enumeration"
    if workers > 1:
        return f"Backtracking ({workers} workers)"
    return "Backtracking"


def _cp_sat_assignments(tiles: Tuple[Tile, ...], meta: Dict[str, Any]) -> Iterator[Assignment]:
    from solver.cp_sat import enumerate_assignments

    complete, found, reason = enumerate_assignments(tiles, CFG.CP_MAX_SECONDS)
    meta["complete"] = complete
    if reason:
        meta["reason"] = reason
    yield from found


# ---------- public entrypoint ----------
def solve(
    tiles: Sequence[Tile],
    sink: Sink,
    *,
    engine: Optional[str] = None,
    workers: Optional[int] = None,
) -> SolveResult:
    """Enumerate every solution for ``tiles`` and hand each to ``sink``.

    Returns ``(ok, count, strategy, reason, meta)``.  ``ok`` is True when the
    enumeration ran to completion, including when it found nothing.
    """
    engine_name = (engine or CFG.ENGINE or "backtrack").strip().lower()
    n_workers = int(CFG.WORKERS if workers is None else workers)
    tiles = tuple(tiles)
    meta: Dict[str, Any] = {"engine": engine_name, "workers": n_workers}

    if engine_name not in ENGINES:
        reason = f"unknown engine: {engine_name}"
        meta["error"] = "bad_engine"
        return False, 0, "error", reason, meta
    if len(tiles) != TILE_COUNT:
        reason = f"expected {TILE_COUNT} tiles, got {len(tiles)}"
        meta["error"] = "bad_tile_count"
        return False, 0, "error", reason, meta

    strategy = _strategy_label(engine_name, n_workers)
    set_tile_count(len(tiles))
    set_engine(engine_name, strategy)
    start_timer()
    log.info("solve start: engine=%s workers=%d", engine_name, n_workers)

    stats = SearchStats(every=CFG.PROGRESS_EVERY, on_progress=_publish)
    if engine_name == "cp_sat":
        assignments = _cp_sat_assignments(tiles, meta)
    elif n_workers > 1:
        assignments = iter_assignments_parallel(tiles, n_workers, stats=stats)
    else:
        assignments = iter_assignments(tiles, stats=stats)

    t0 = time.time()
    count = 0
    try:
        for ids in assignments:
            sink(placement_from_ids(tiles, ids))
            count += 1
    except Exception as exc:
        set_search_counts(stats.nodes, count)
        set_done(False, reason=f"run aborted after {count} solution(s): {type(exc).__name__}: {exc}")
        log.exception("solve aborted: engine=%s solutions=%d", engine_name, count)
        raise
    finally:
        assignments.close()
    elapsed = time.time() - t0

    set_search_counts(stats.nodes, count)
    meta.update({"nodes": stats.nodes, "solutions": count, "elapsed": elapsed})
    log.info(
        "solve finished: engine=%s solutions=%d nodes=%d elapsed=%.2fs",
        engine_name, count, stats.nodes, elapsed,
    )

    if not meta.get("complete", True):
        return False, count, strategy, meta.get("reason"), meta
    reason = None if count else "No arrangement satisfies the lattice rules"
    return True, count, strategy, reason, meta


__all__ = ["ENGINES", "solve"]
