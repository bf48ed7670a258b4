import pytest

from mancala.board import BoardConfig
from mancala.errors import ParseError
from mancala.position import Position


W3 = BoardConfig(width=3, stones=4)
W6 = BoardConfig(width=6, stones=4)


def test_zero_equals_itself_and_differs_from_start():
    z = Position.zero(W6)
    assert z == Position.zero(W6)
    assert Position.start(W6) != Position.diagnostic(W6)


def test_create_matches_named_positions():
    assert Position.create(W3, 0, 1, 2, 3, 0, 1, 2, 3) == Position.diagnostic(W3)
    assert Position.create(W3, 0, 4, 4, 4, 0, 4, 4, 4) == Position.start(W3)


def test_create_pads_trailing_cells_with_zero():
    p = Position.create(W3, 1, 2)
    assert p.near == (1, 2, 0, 0)
    assert p.far == (0, 0, 0, 0)


def test_create_rejects_too_many_values():
    with pytest.raises(ValueError):
        Position.create(W3, *range(9))


def test_near_far_and_accessors():
    p = Position.create(W3, 1, 3, 5, 7, 2, 4, 6, 8)
    assert p.near == (1, 3, 5, 7)
    assert p.far == (2, 4, 6, 8)
    assert p.near_store == 1 and p.far_store == 2
    assert p.near_holes == (3, 5, 7)
    assert p.far_holes == (4, 6, 8)


def test_key_roundtrip():
    p = Position.create(W3, 1, 3, 5, 7, 2, 4, 6, 8)
    s = p.as_key()
    assert s == "1,3,5,7,2,4,6,8"
    clone = Position.from_key(W3, s)
    assert clone is not p
    assert clone == p
    assert clone.as_key() == s


def test_key_accepts_negative_values_of_deltas():
    p = Position.from_key(W3, "0,1,1,-2,0,0,0,0")
    assert p.near == (0, 1, 1, -2)


@pytest.mark.parametrize("bad", ["", "1,2,3", "0,4,4,4,0,4,4,4,0", "0,4,4,x,0,4,4,4", "0,4,4,4.5,0,4,4,4"])
def test_from_key_rejects_malformed_text(bad):
    with pytest.raises(ParseError):
        Position.from_key(W3, bad)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        Position.from_key(W3, "a,b")


def test_is_valid_reports_deficit():
    assert Position.start(W3).is_valid() == (True, 0)
    assert Position.create(W3, 0, 4, 4, 4, 0, 4, 4, 3).is_valid() == (False, 1)
    assert Position.create(W3, 2, 4, 4, 4, 0, 4, 4, 4).is_valid() == (False, -2)


def test_valid_moves_of_start_position():
    assert Position.start(W6).valid_moves() == [1, 2, 3, 4, 5, 6]


def test_valid_moves_only_non_empty_near_holes_ascending():
    p = Position.create(W3, 0, 0, 2, 1, 0, 1, 1, 1)
    assert p.valid_moves() == [2, 3]


def test_valid_moves_empty_when_game_has_ended():
    near_empty = Position.create(W3, 5, 0, 0, 0, 0, 1, 2, 3)
    far_empty = Position.create(W3, 0, 1, 0, 0, 5, 0, 0, 0)
    assert near_empty.is_game_end() and near_empty.valid_moves() == []
    assert far_empty.is_game_end() and far_empty.valid_moves() == []
    assert not Position.start(W3).is_game_end()


def test_change_player_swaps_sides():
    p = Position.create(W3, 1, 3, 5, 7, 2, 4, 6, 8)
    q = p.change_player()
    assert q.near == p.far and q.far == p.near
    assert q.change_player() == p


def test_add_zero_is_identity_and_sums_cellwise():
    p = Position.start(W3)
    assert p.add(Position.zero(W3)) == p
    d = Position.create(W3, 1, 1, 1, -3, 0, 0, 0, 0)
    assert p.add(d).near == (1, 5, 5, 1)


def test_add_rejects_other_board_size():
    with pytest.raises(ValueError):
        Position.start(W3).add(Position.zero(W6))


def test_side_length_must_match_width():
    with pytest.raises(ValueError):
        Position(W3, (0, 1, 2), (0, 1, 2, 3))


def test_board_config_validation():
    assert BoardConfig(3, 0).total_stones == 0
    assert BoardConfig(6, 4).total_stones == 48
    with pytest.raises(ValueError):
        BoardConfig(0, 4)
    with pytest.raises(ValueError):
        BoardConfig(3, -1)


def test_steal_target_ignores_stores():
    p = Position.create(W3, 1, 1, 0, 0, 0, 0, 0, 5)
    assert p.steal_target(0, 0) is None
    assert p.steal_target(0, 1) == (1, 3, 5)


@pytest.mark.parametrize("token", ["1_0", " 1", "+1", "١", "1 ", "0x1"])
def test_from_key_accepts_only_plain_decimal_tokens(token):
    with pytest.raises(ParseError):
        Position.from_key(BoardConfig(2, 1), f"0,{token},1,0,1,1")
