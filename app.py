# app.py: web front end for the lattice solver
from __future__ import annotations
import os
import time
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, request, render_template, send_from_directory, jsonify, url_for

from solver.orchestrator import solve
from tiles import parse_tiles, parse_tile_rows
from config import CFG
from io_files import SolutionFile
from render import format_solution, render_svg
from models import Placement, Tile

from progress import (
    reset as progress_reset,
    as_json as progress_json,
    _fmt_elapsed,
    set_status, set_done, set_result_url, set_tile_count,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "strategy": "",
    "reason": "",
    "solution_count": 0,
    "shown": [],
    "tiles": [],
    "elapsed_str": "0s",
    "solutions_filename": "",
}

app = Flask(__name__, template_folder="templates")


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return render_template("index.html")


@app.route("/result/latest")
def result_latest():
    return render_template("result.html", **LAST_RESULT)


def _tiles_from_request() -> Tuple[List[Tile], Optional[str]]:
    payload = request.get_json(silent=True)
    if isinstance(payload, dict) and "tiles" in payload:
        rows = payload["tiles"]
        if isinstance(rows, str):
            return parse_tiles(rows)
        return parse_tile_rows(rows)
    return parse_tiles(request.form.get("tiles", ""))


class _StreamingSink:
    """Writes each solution to ``out`` as it arrives; keeps the first ``limit`` drawings."""

    def __init__(self, out: SolutionFile, limit: int):
        self.out = out
        self.limit = max(0, int(limit))
        self.shown: List[Dict[str, str]] = []

    def __call__(self, placement: Placement) -> None:
        text = format_solution(placement)
        self.out.write(text)
        if len(self.shown) < self.limit:
            self.shown.append({"text": text, "svg": render_svg(placement)})


def _finish(ok_flag: bool, reason: str, **fields: Any):
    set_done(ok_flag, reason=reason)
    LAST_RESULT.update({
        "ok": ok_flag,
        "strategy": "",
        "reason": reason,
        "solution_count": 0,
        "shown": [],
        "tiles": [],
        "solutions_filename": "",
    })
    LAST_RESULT.update(fields)
    set_result_url(url_for("result_latest"))
    return render_template("result.html", **LAST_RESULT)


@app.route("/solve", methods=["POST"])
def solve_route():
    progress_reset()
    set_status("Solving")
    t0 = time.time()

    tiles, err = _tiles_from_request()
    set_tile_count(len(tiles))
    if err:
        return _finish(False, f"Bad tiles: {err}", elapsed_str=_fmt_elapsed(time.time() - t0))

    try:
        with SolutionFile(BASE_DIR) as out:
            sink = _StreamingSink(out, CFG.MAX_DISPLAY_SOLUTIONS)
            ok, count, strategy, reason, meta = solve(tiles, sink)
    except Exception as e:
        return _finish(
            False,
            f"solver exception: {type(e).__name__}: {e}",
            tiles=[t.as_line() for t in tiles],
            elapsed_str=_fmt_elapsed(time.time() - t0),
        )

    return _finish(
        ok,
        reason or f"{count} solution(s) found",
        strategy=strategy,
        solution_count=count,
        shown=sink.shown,
        tiles=[t.as_line() for t in tiles],
        elapsed_str=_fmt_elapsed(time.time() - t0),
        solutions_filename=os.path.basename(out.path),
    )


@app.route("/download/solutions")
def download_solutions():
    _, directory, filename = _resolve_output_paths(CFG.SOLUTIONS_OUT, "solutions.txt")
    return send_from_directory(directory, filename, as_attachment=True)


@app.route("/progress")
def progress_route():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
