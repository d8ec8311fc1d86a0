"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os
from typing import Optional, TextIO

from config import CFG


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


class SolutionFile:
    """Writes formatted solutions to the configured text file as they arrive."""

    def __init__(self, base_dir: str):
        self.path = _resolve_output_path(base_dir, CFG.SOLUTIONS_OUT, "solutions.txt")
        self.written = 0
        self._fh: Optional[TextIO] = None

    def __enter__(self) -> "SolutionFile":
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        self._fh = open(self.path, "w", encoding="utf-8")
        return self

    def write(self, block: str) -> None:
        self._fh.write(block + "\n\n")
        self.written += 1

    def __exit__(self, *exc_info) -> None:
        if not self.written:
            self._fh.write("No solution\n")
        self._fh.close()
        self._fh = None


__all__ = ["SolutionFile"]
