import io

from models import Tile
from render import PrintSink, format_sequence, format_solution, render_svg
from solver.backtrack import placement_from_ids
from tests.data import HANDCRAFTED_ASSIGNMENT, HANDCRAFTED_TILES


def _placement():
    return placement_from_ids(HANDCRAFTED_TILES, HANDCRAFTED_ASSIGNMENT)


def test_format_solution_prints_top_then_bottom_edges_per_row():
    lines = format_solution(_placement(), width=11).split("\n")
    assert lines == [
        "    0 0 0 0",
        "    0 1 2 0",
        "0 0 0 3 4 0 0 0",
        "0 5 1 2 3 1 6 0",
        "0 2 2 1 4 2 1 0",
        "0 0 0 3 1 0 0 0",
        "    0 4 2 0",
        "    0 0 0 0",
    ]


def test_format_solution_uses_configured_width(monkeypatch):
    from config import CFG

    monkeypatch.setattr(CFG, "FIELD_WIDTH", 9, raising=False)
    assert format_solution(_placement()).split("\n")[0] == "  0 0 0 0"


def test_format_sequence_lists_tiles_in_position_order():
    assert format_sequence(_placement()).split("\n") == [t.as_line() for t in HANDCRAFTED_TILES]


def test_print_sink_separates_solutions_with_blank_line():
    out = io.StringIO()
    sink = PrintSink(out)
    sink(_placement())
    sink(_placement())
    blocks = out.getvalue().split("\n\n")
    assert sink.count == 2
    assert blocks[0] == blocks[1] == format_solution(_placement())
    assert out.getvalue().endswith("\n\n")


def test_render_svg_draws_twelve_tiles():
    svg = render_svg(_placement())
    assert svg.startswith("<svg")
    assert svg.count("<rect") == 12


def test_tile_edges():
    tile = Tile(1, 2, 3, 4)
    assert tile.top_edge == (1, 2)
    assert tile.bottom_edge == (3, 4)
    assert tile.as_line() == "1 2 3 4"
