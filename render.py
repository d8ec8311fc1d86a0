from typing import List, Optional, TextIO, Tuple

from config import CFG
from models import LATTICE_ROWS, Placement, Tile


def _row_line(edges: List[Tuple[int, int]], width: int) -> str:
    text = " ".join(f"{a} {b}" for a, b in edges)
    return text.rjust(width)


def format_solution(placement: Placement, width: Optional[int] = None) -> str:
    """Two lines per lattice row: the top edges, then the bottom edges, right-aligned."""
    w = CFG.FIELD_WIDTH if width is None else width
    board = dict(placement)
    lines: List[str] = []
    for row in LATTICE_ROWS:
        tiles = [board[p] for p in row]
        lines.append(_row_line([t.top_edge for t in tiles], w))
        lines.append(_row_line([t.bottom_edge for t in tiles], w))
    return "\n".join(lines)


def format_sequence(placement: Placement) -> str:
    return "\n".join(tile.as_line() for _, tile in placement)


class PrintSink:
    """Writes each solution to ``stream`` followed by a blank line."""

    def __init__(self, stream: TextIO, *, sequence: bool = False, width: Optional[int] = None):
        self.stream = stream
        self.sequence = sequence
        self.width = width
        self.count = 0

    def __call__(self, placement: Placement) -> None:
        if self.sequence:
            block = format_sequence(placement)
        else:
            block = format_solution(placement, self.width)
        self.stream.write(block + "\n\n")
        self.count += 1


def _tile_svg(x: int, y: int, tile: Tile, size: int) -> str:
    pad = 14
    return (
        f'<rect x="{x}" y="{y}" width="{size}" height="{size}" fill="white" stroke="black" stroke-width="1"/>'
        f'<text x="{x+4}" y="{y+pad}" font-size="12">{tile.top_left}</text>'
        f'<text x="{x+size-4}" y="{y+pad}" font-size="12" text-anchor="end">{tile.top_right}</text>'
        f'<text x="{x+4}" y="{y+size-4}" font-size="12">{tile.bottom_left}</text>'
        f'<text x="{x+size-4}" y="{y+size-4}" font-size="12" text-anchor="end">{tile.bottom_right}</text>'
    )


def render_svg(placement: Placement, scale: int = 48) -> str:
    board = dict(placement)
    cells = []
    for r, row in enumerate(LATTICE_ROWS):
        offset = 1 if len(row) == 2 else 0
        for c, pos in enumerate(row):
            cells.append(_tile_svg((c + offset) * scale + 1, r * scale + 1, board[pos], scale))
    svg_w = 4 * scale + 2
    svg_h = len(LATTICE_ROWS) * scale + 2
    return (
        f'<svg class="lattice-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" viewBox="0 0 {svg_w} {svg_h}">'
        f'{"".join(cells)}</svg>'
    )
