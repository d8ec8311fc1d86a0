from __future__ import annotations

import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional

# ------------------------------
# Thread-safe global progress state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _state_file_path() -> Path:
    configured = os.environ.get("PROGRESS_STATE_FILE")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent / "logs" / "progress_state.json"


STATE_FILE = _state_file_path()
STATE_FILE_TMP = STATE_FILE.with_name(STATE_FILE.name + ".tmp")
_LAST_STATE_MTIME: float = 0.0


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("solver.run_log")
    if logger.handlers:
        return logger

    log_path = Path(__file__).resolve().parent / "logs" / "solver_runs.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        # No writable log directory; progress tracking keeps working without it.
        return logger
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


RUN_LOGGER = _init_logger()


def _now() -> float:
    return time.time()


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    return f"{float(seconds):.2f}s"


def _fmt_elapsed(seconds: Optional[float]) -> str:
    if not seconds or seconds < 1:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _emit_log(event: str, **fields: Any) -> None:
    if not RUN_LOGGER.handlers:
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    if extras:
        RUN_LOGGER.info("%s | %s", event, " ".join(extras))
    else:
        RUN_LOGGER.info("%s", event)


# Single source of truth for the progress endpoint
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Error
    "engine": "",              # backtrack | parallel | cp_sat
    "strategy": "",            # human readable engine description
    "tile_count": 0,           # tiles supplied by the request
    "nodes": 0,                # search nodes visited so far
    "solutions": 0,            # solutions emitted so far
    "elapsed_start": None,     # t0 (float) when solving started
    "elapsed": 0.0,
    "message": "",
    "done": False,
    "ok": None,
    "result_url": "",
    "run_id": 0,
}


def _persist_locked() -> None:
    global _LAST_STATE_MTIME
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        with STATE_FILE_TMP.open("w", encoding="utf-8") as fh:
            json.dump(PROGRESS, fh, ensure_ascii=False, separators=(",", ":"))
        STATE_FILE_TMP.replace(STATE_FILE)
        _LAST_STATE_MTIME = STATE_FILE.stat().st_mtime
    except OSError:
        # Persistence is best effort; the in-memory state stays authoritative.
        _LAST_STATE_MTIME = _now()


def _load_persisted_locked(force: bool = False) -> None:
    global _LAST_STATE_MTIME
    try:
        stat = STATE_FILE.stat()
    except OSError:
        return
    if not force and stat.st_mtime <= _LAST_STATE_MTIME:
        return
    try:
        with STATE_FILE.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError):
        return
    if not isinstance(data, dict):
        return
    for key in PROGRESS.keys():
        if key in data:
            PROGRESS[key] = data[key]
    _LAST_STATE_MTIME = stat.st_mtime


def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None:
        PROGRESS["elapsed"] = _now() - float(t0)


def reset() -> None:
    with PROGRESS_LOCK:
        new_run_id = int(PROGRESS.get("run_id") or 0) + 1
        PROGRESS.update({
            "status": "Idle",
            "engine": "",
            "strategy": "",
            "tile_count": 0,
            "nodes": 0,
            "solutions": 0,
            "elapsed_start": None,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
            "result_url": "",
            "run_id": new_run_id,
        })
        _emit_log("Progress reset", run_id=new_run_id)
        _persist_locked()


def start_timer() -> None:
    with PROGRESS_LOCK:
        PROGRESS["elapsed_start"] = _now()
        PROGRESS["elapsed"] = 0.0
        _persist_locked()


# ------------------------------
# Setters
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)
        _persist_locked()


def set_engine(engine: Any, strategy: Any = None) -> None:
    with PROGRESS_LOCK:
        PROGRESS["engine"] = "" if engine is None else str(engine)
        if strategy is not None:
            PROGRESS["strategy"] = str(strategy)
        _emit_log("Run started", engine=PROGRESS["engine"], strategy=PROGRESS["strategy"])
        _persist_locked()


def set_tile_count(n: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["tile_count"] = max(0, int(n))
        _persist_locked()


def set_search_counts(nodes: int, solutions: int) -> None:
    with PROGRESS_LOCK:
        PROGRESS["nodes"] = max(0, int(nodes))
        PROGRESS["solutions"] = max(0, int(solutions))
        _touch_elapsed_locked()
        _persist_locked()


def set_message(msg: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["message"] = "" if msg is None else str(msg)
        _persist_locked()


def set_result_url(url: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["result_url"] = "" if url is None else str(url)
        _persist_locked()


def set_done(ok: Optional[bool] = None, *, reason: Any = None) -> None:
    """Mark the run complete.

    ``ok`` picks the final status (``Solved`` / ``Error``); when omitted the
    status defaults to ``Solved`` unless a failure was already recorded.
    ``reason`` is surfaced via the ``message`` field.
    """
    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        if ok is not None:
            PROGRESS["status"] = "Solved" if ok else "Error"
            PROGRESS["ok"] = bool(ok)
        elif PROGRESS.get("status") != "Error":
            PROGRESS["status"] = "Solved"
            PROGRESS["ok"] = True
        else:
            PROGRESS["ok"] = False
        if reason is not None:
            PROGRESS["message"] = str(reason)
        PROGRESS["done"] = True
        _emit_log(
            "Run finished",
            status=PROGRESS["status"],
            engine=PROGRESS["engine"],
            solutions=PROGRESS["solutions"],
            nodes=PROGRESS["nodes"],
            duration=_fmt_seconds(PROGRESS["elapsed"]),
            message=PROGRESS["message"],
        )
        _persist_locked()


# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _load_persisted_locked()
        _touch_elapsed_locked()
        snap = {k: v for k, v in PROGRESS.items() if k != "elapsed_start"}
        snap["elapsed_str"] = _fmt_elapsed(PROGRESS["elapsed"])
        return snap


def as_json() -> Dict[str, Any]:
    # Alias used by /progress
    return snapshot()


with PROGRESS_LOCK:
    _load_persisted_locked(force=True)
