import io

import pytest

from mancala.board import BoardConfig
from mancala.engine import MoveResult
from mancala.errors import ParseError
from mancala.play import GAME_OVER_BANNER, PlaySession, parse_hole
from mancala.position import Position
from mancala.strategies import RandomStrategy, ScriptedStrategy


def session(config=BoardConfig(6, 4), **kw):
    return PlaySession(Position.start(config), out=io.StringIO(), **kw)


def test_parse_hole():
    assert parse_hole("3") == 3
    assert parse_hole(" 12 ") == 12
    assert parse_hole(5) == 5
    with pytest.raises(ValueError):
        parse_hole("three")


@pytest.mark.parametrize("token", ["1_0", "+1", "\u0661", "-1", "1.0"])
def test_parse_hole_accepts_only_plain_digits(token):
    with pytest.raises(ParseError):
        parse_hole(token)
    s = session()
    assert s.apply(token) == MoveResult.BAD_MOVE
    assert s.history == []


@pytest.mark.parametrize("token", ["x", "0", "7", "-1", ""])
def test_bad_tokens_leave_the_board_unchanged(token):
    s = session()
    before = s.position
    assert s.apply(token) == MoveResult.BAD_MOVE
    assert s.position == before
    assert s.history == []
    assert s.out.getvalue() == ""


def test_end_of_turn_hands_the_board_over():
    s = session()
    assert s.apply("3") == MoveResult.END_OF_TURN
    # the other player now sees their own row as near
    assert s.position.near == (0, 4, 4, 4, 4, 4, 5)
    assert s.position.far == (1, 5, 5, 0, 4, 4, 4)
    assert s.history[0].result_key == "1,5,5,0,4,4,4,0,4,4,4,4,4,5"
    assert s.out.getvalue().startswith("args > 3\n")


def test_repeat_turn_keeps_the_perspective():
    s = session()
    assert s.apply(4, label="repl") == MoveResult.REPEAT_TURN
    assert s.position.near == (1, 5, 5, 5, 0, 4, 4)
    assert "repl > 4\n" in s.out.getvalue()


def test_delta_is_rendered_on_request():
    s = session(show_delta=True)
    s.apply("3")
    # move line, delta board (4 lines), new board (4 lines)
    assert len(s.out.getvalue().splitlines()) == 9


def test_game_over_banner_and_refusal():
    config = BoardConfig(1, 1)
    s = PlaySession(Position.create(config, 0, 1, 0, 3), out=io.StringIO())
    assert s.apply("1") == MoveResult.END_OF_GAME
    assert s.game_over
    assert s.out.getvalue().rstrip().endswith(GAME_OVER_BANNER)
    with pytest.raises(ValueError):
        s.apply("1")


def test_apply_all_stops_at_game_over():
    config = BoardConfig(1, 1)
    s = PlaySession(Position.create(config, 0, 1, 0, 3), out=io.StringIO())
    results = s.apply_all(["x", "1", "1", "1"])
    assert results == [MoveResult.BAD_MOVE, MoveResult.END_OF_GAME]


def test_session_on_finished_position_is_over():
    s = PlaySession(Position.zero(BoardConfig(2, 1)), out=io.StringIO())
    assert s.game_over


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_random_play_out_reaches_game_end(seed):
    config = BoardConfig(6, 4)
    s = session(config)
    made = s.play_out(RandomStrategy(seed=seed))
    assert s.game_over
    assert made == len(s.history) > 0
    assert s.position.is_valid() == (True, 0)
    assert s.position.is_game_end()


def test_play_out_respects_max_moves():
    s = session()
    assert s.play_out(RandomStrategy(seed=5), max_moves=2) == 2
    assert len(s.history) == 2


def test_play_out_with_scripted_moves():
    s = session()
    s.play_out(ScriptedStrategy(["3", "x"]), max_moves=1)
    assert s.history[0].hole == 3
