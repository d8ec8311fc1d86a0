import pytest

from models import NEUTRAL_TILE, Tile
from solver.backtrack import TRAVERSAL_ORDER
from solver.rules import (
    BLOCKS,
    HORIZONTAL_PAIRS,
    LIMIT,
    VALIDATORS,
    VERTICAL_PAIRS,
    validate_block,
    validate_board,
    validate_horizontal,
    validate_position,
    validate_tile,
    validate_triangle,
    validate_vertical,
)
from tests.data import HANDCRAFTED_TILES


class _RecordingBoard(dict):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.read = set()

    def __getitem__(self, key):
        self.read.add(key)
        return super().__getitem__(key)


def _handcrafted_board():
    return {p: t for p, t in enumerate(HANDCRAFTED_TILES)}


def test_limit_is_ten():
    assert LIMIT == 10


def test_tile_rule_caps_every_corner():
    assert validate_tile(Tile(10, 10, 10, 10))
    assert not validate_tile(Tile(11, 0, 0, 0))
    assert not validate_tile(Tile(0, 0, 0, 11))


def test_tile_rule_has_no_lower_bound():
    assert validate_tile(Tile(-5, -1, 0, 3))


def test_horizontal_pair_sums_touching_corners():
    left = Tile(0, 6, 0, 3)
    assert validate_horizontal(left, Tile(4, 0, 7, 0))
    assert not validate_horizontal(left, Tile(5, 0, 0, 0))
    assert not validate_horizontal(left, Tile(0, 0, 8, 0))


def test_horizontal_pair_requires_valid_tiles():
    assert not validate_horizontal(Tile(11, 0, 0, 0), NEUTRAL_TILE)


def test_vertical_pair_sums_touching_corners():
    upper = Tile(0, 0, 6, 3)
    assert validate_vertical(upper, Tile(4, 7, 0, 0))
    assert not validate_vertical(upper, Tile(5, 0, 0, 0))
    assert not validate_vertical(upper, Tile(0, 8, 0, 0))


def test_block_inner_corners_must_hit_limit_exactly():
    ul, ur, ll = Tile(0, 0, 0, 1), Tile(0, 0, 2, 0), Tile(0, 3, 0, 0)
    assert validate_block(ul, ur, ll, Tile(4, 0, 0, 0))
    assert not validate_block(ul, ur, ll, Tile(3, 0, 0, 0))
    assert not validate_block(ul, ur, ll, Tile(5, 0, 0, 0))


def test_block_all_zero_fails_exact_sum():
    assert not validate_block(NEUTRAL_TILE, NEUTRAL_TILE, NEUTRAL_TILE, NEUTRAL_TILE)


def test_triangle_is_an_upper_bound_only():
    assert validate_triangle(NEUTRAL_TILE, Tile(0, 0, 3, 0), Tile(0, 3, 0, 0), Tile(4, 0, 0, 0))
    assert validate_triangle(NEUTRAL_TILE, NEUTRAL_TILE, NEUTRAL_TILE, NEUTRAL_TILE)
    assert not validate_triangle(NEUTRAL_TILE, Tile(0, 0, 5, 0), Tile(0, 5, 0, 0), Tile(1, 0, 0, 0))


def test_handcrafted_board_passes_every_validator():
    board = _handcrafted_board()
    assert validate_board(board)
    for position in VALIDATORS:
        assert validate_position(position, board)


def test_validator_on_missing_position_raises():
    with pytest.raises(KeyError):
        validate_position(1, {3: NEUTRAL_TILE, 4: NEUTRAL_TILE})


def test_validators_only_read_positions_filled_before_them():
    board = _handcrafted_board()
    for k, position in enumerate(TRAVERSAL_ORDER):
        recording = _RecordingBoard(board)
        assert VALIDATORS[position](recording)
        assert position in recording.read
        assert recording.read <= set(TRAVERSAL_ORDER[: k + 1])


def test_validators_cover_every_pair_and_block():
    board = _handcrafted_board()
    read_by = {}
    for position, validator in VALIDATORS.items():
        recording = _RecordingBoard(board)
        validator(recording)
        read_by[position] = recording.read
    for pair in HORIZONTAL_PAIRS + VERTICAL_PAIRS:
        assert any(set(pair) <= read for read in read_by.values()), pair
    for block in BLOCKS:
        assert any(set(block) <= read for read in read_by.values()), block


def test_traversal_order_is_a_permutation_of_positions():
    assert TRAVERSAL_ORDER == (3, 4, 7, 8, 0, 1, 2, 6, 5, 9, 10, 11)
    assert sorted(TRAVERSAL_ORDER) == list(range(12))
