from typing import List

import pytest

pytest.importorskip("hypothesis")

from hypothesis import given, settings, strategies as st  # noqa: E402

from mancala.board import BoardConfig
from mancala.engine import MoveResult, move, try_move
from mancala.position import Position

boards = st.builds(BoardConfig, width=st.integers(min_value=1, max_value=7), stones=st.integers(min_value=0, max_value=6))


@given(boards, st.lists(st.integers(min_value=0, max_value=99), max_size=60))
@settings(max_examples=150)
def test_stones_are_conserved_along_any_game(config: BoardConfig, picks: List[int]):
    p = Position.start(config)
    for pick in picks:
        moves = p.valid_moves()
        if not moves:
            assert p.is_game_end()
            break
        out = move(p, moves[pick % len(moves)])
        assert out.position.is_valid() == (True, 0)
        # sowing only moves stones around
        assert sum(out.delta.cells()) == 0
        # stores never shrink
        assert out.position.near_store >= p.near_store
        assert out.position.far_store >= p.far_store
        p = out.position.change_player() if out.result == MoveResult.END_OF_TURN else out.position


@given(boards, st.data())
def test_key_roundtrip(config: BoardConfig, data):
    n = 2 * config.cells_per_side
    values = data.draw(st.lists(st.integers(min_value=0, max_value=60), min_size=n, max_size=n))
    p = Position.create(config, *values)
    assert Position.from_key(config, p.as_key()) == p
    assert p.change_player().change_player() == p


@given(boards, st.integers(min_value=-3, max_value=10))
def test_illegal_moves_leave_position_unchanged(config: BoardConfig, hole: int):
    p = Position.start(config)
    outcome, err = try_move(p, hole)
    if hole in p.valid_moves():
        assert err is None
        assert outcome.result != MoveResult.BAD_MOVE
    else:
        assert err is not None
        assert outcome.result == MoveResult.BAD_MOVE
        assert outcome.position == p


@given(boards)
def test_end_of_game_iff_no_moves(config: BoardConfig):
    p = Position.diagnostic(config)
    assert p.is_game_end() == (p.valid_moves() == [])
