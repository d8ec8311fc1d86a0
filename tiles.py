# tiles.py: tile list parser
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple, Union

from models import TILE_COUNT, Tile

_INT_RE = re.compile(r"^[+-]?\d+$")


class TileInputError(ValueError):
    """Raised when a tile file cannot be turned into exactly twelve tiles."""


def _to_int(tok: Any) -> Optional[int]:
    s = str(tok).strip()
    if not _INT_RE.match(s):
        return None
    return int(s)


def _parse_row(values: Iterable[Any]) -> Optional[Tile]:
    ints = [_to_int(v) for v in values]
    if len(ints) != 4 or any(v is None for v in ints):
        return None
    return Tile(*ints)


def parse_tiles(text: str) -> Tuple[List[Tile], Optional[str]]:
    """
    Return (tiles, error_message_or_None).
    One tile per non-blank line: four whitespace separated integers in the
    order top-left, top-right, bottom-left, bottom-right.
    """
    tiles: List[Tile] = []
    for lineno, line in enumerate((text or "").splitlines(), start=1):
        if not line.strip():
            continue
        tile = _parse_row(line.split())
        if tile is None:
            return [], f"line {lineno}: expected four integers"
        tiles.append(tile)

    if len(tiles) != TILE_COUNT:
        return [], f"expected {TILE_COUNT} tiles, got {len(tiles)}"
    return tiles, None


def parse_tile_rows(rows: Any) -> Tuple[List[Tile], Optional[str]]:
    """Same contract as :func:`parse_tiles` for JSON payloads (a list of 4-item lists)."""
    if not isinstance(rows, (list, tuple)):
        return [], "tiles must be a list of four-integer rows"
    tiles: List[Tile] = []
    for idx, row in enumerate(rows, start=1):
        tile = _parse_row(row) if isinstance(row, (list, tuple)) else None
        if tile is None:
            return [], f"tile {idx}: expected four integers"
        tiles.append(tile)
    if len(tiles) != TILE_COUNT:
        return [], f"expected {TILE_COUNT} tiles, got {len(tiles)}"
    return tiles, None


def load_tiles(path: Union[str, Path]) -> List[Tile]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise TileInputError(f"cannot read {path}: {exc.strerror or exc}") from exc
    tiles, err = parse_tiles(text)
    if err:
        raise TileInputError(f"{path}: {err}")
    return tiles


__all__ = ["TileInputError", "parse_tiles", "parse_tile_rows", "load_tiles"]
