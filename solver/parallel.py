# solver/parallel.py
"""Run the backtracking search one top-level branch per worker process.

Each branch pins the tile placed at the first traversal position, so the
branches share nothing and their union is exactly the sequential solution
set.  Workers push each solution onto a shared queue as soon as it is found;
results arrive interleaved across branches, not in sequential order.
"""
import logging
import multiprocessing as mp
import traceback
from typing import Any, Iterator, Optional, Sequence, Tuple

from models import TILE_COUNT, Tile
from solver.backtrack import Assignment, SearchStats, check_tile_count, iter_assignments

log = logging.getLogger(__name__)

# Bounded so a fast branch waits for the consumer instead of piling up results.
_QUEUE_MAXSIZE = 1024


# Worker must be top-level (picklable on Windows spawn)
def _branch_worker(args: Tuple[Tuple[Tile, ...], int, Any]) -> None:
    tiles, first, queue = args
    try:
        stats = SearchStats()
        for ids in iter_assignments(tiles, first=first, stats=stats):
            queue.put(("solution", first, ids))
        queue.put(("done", first, stats.nodes))
    except Exception as e:
        queue.put(("exc", first, f"{e}\n{traceback.format_exc()}"))


def iter_assignments_parallel(
    tiles: Sequence[Tile],
    workers: int,
    *,
    stats: Optional[SearchStats] = None,
) -> Iterator[Assignment]:
    tiles = tuple(tiles)
    check_tile_count(tiles)
    if workers <= 1:
        yield from iter_assignments(tiles, stats=stats)
        return

    ctx = mp.get_context("spawn")  # safest on Windows
    with ctx.Manager() as manager, ctx.Pool(processes=min(int(workers), TILE_COUNT)) as pool:
        queue = manager.Queue(maxsize=_QUEUE_MAXSIZE)
        branches = [(tiles, tile_id, queue) for tile_id in range(TILE_COUNT)]
        pending = pool.map_async(_branch_worker, branches, chunksize=1)

        remaining = TILE_COUNT
        while remaining:
            tag, first, payload = queue.get()
            if tag == "solution":
                if stats is not None:
                    stats.solutions += 1
                yield payload
            elif tag == "done":
                remaining -= 1
                log.debug("branch %d done: nodes=%d", first, payload)
                if stats is not None:
                    stats.nodes += payload
                    if stats.on_progress is not None:
                        stats.on_progress(stats)
            else:
                raise RuntimeError(f"branch {first} failed: {payload}")
        pending.wait()


__all__ = ["iter_assignments_parallel"]
