"""
Move engine: sowing, captures and end-of-game detection.

Sowing rules:
- The chosen near hole is emptied and its stones are sown one per cell
  towards the near store: holes hole-1 .. 1, the near store, far holes
  width .. 1, then round again to near hole width.
- The opponent's store is skipped on every lap; skipping does not use up a
  stone.
- Last stone in the near store: the mover plays again.
- Last stone in a hole that now holds exactly one stone, with stones in the
  directly opposite hole: both are captured into the near store.
- If either side's holes are all empty afterwards the game is over, which
  overrides a repeat turn.

The engine never flips perspective; callers call change_player() after an
END_OF_TURN result.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Iterator, List, NamedTuple, Optional, Tuple

from .errors import EmptyHole, IllegalMove, OutOfRangeHole
from .position import FAR, NEAR, Position


class MoveResult(IntEnum):
    BAD_MOVE = -1
    END_OF_TURN = 0
    REPEAT_TURN = 1
    END_OF_GAME = 2


class MoveOutcome(NamedTuple):
    position: Position
    delta: Optional[Position]  # raw sowing delta, before any capture
    result: MoveResult


def sowing_path(width: int, hole: int) -> Iterator[Tuple[int, int]]:
    """Yield the (row, index) cells that receive stones, in order, forever."""
    row, index = NEAR, hole
    while True:
        index -= 1
        if index < 0:
            row = FAR if row == NEAR else NEAR
            index = width
        if row == FAR and index == 0:
            continue
        yield row, index


def sowing_delta(position: Position, hole: int) -> Tuple[Position, int, int]:
    """Return the delta for sowing `hole` and the (row, index) of the last stone."""
    width = position.config.width
    count = position.near[hole]
    cells: List[List[int]] = [[0] * (width + 1), [0] * (width + 1)]
    cells[NEAR][hole] = -count
    last_row, last_index = NEAR, hole
    path = sowing_path(width, hole)
    for _ in range(count):
        last_row, last_index = next(path)
        cells[last_row][last_index] += 1
    return Position(position.config, tuple(cells[NEAR]), tuple(cells[FAR])), last_row, last_index


def steal_delta(position: Position, row: int, hole: int, op_row: int, op_hole: int, op_count: int) -> Position:
    """Delta moving the landing stone and the opposite stones into the near store."""
    width = position.config.width
    cells: List[List[int]] = [[0] * (width + 1), [0] * (width + 1)]
    cells[op_row][op_hole] -= op_count
    cells[row][hole] -= 1
    cells[NEAR][0] += op_count + 1
    return Position(position.config, tuple(cells[NEAR]), tuple(cells[FAR]))


def move(position: Position, hole: int) -> MoveOutcome:
    """Apply a move for the near player and classify the result.

    Raises:
        OutOfRangeHole: hole is not in 1..width.
        EmptyHole: the chosen hole has no stones.
    """
    width = position.config.width
    if isinstance(hole, bool) or not isinstance(hole, int) or hole < 1 or hole > width:
        raise OutOfRangeHole(hole, width)
    if position.near[hole] == 0:
        raise EmptyHole(hole)

    delta, last_row, last_index = sowing_delta(position, hole)
    result = position.add(delta)

    move_result = MoveResult.REPEAT_TURN if (last_row == NEAR and last_index == 0) else MoveResult.END_OF_TURN

    steal = result.steal_target(last_row, last_index)
    if steal is not None:
        op_row, op_hole, op_count = steal
        result = result.add(steal_delta(position, last_row, last_index, op_row, op_hole, op_count))

    if result.is_game_end():
        move_result = MoveResult.END_OF_GAME

    return MoveOutcome(result, delta, move_result)


def try_move(position: Position, hole: int) -> Tuple[MoveOutcome, Optional[IllegalMove]]:
    """Like move(), but report an illegal move instead of raising.

    On a bad move the given position is returned unchanged with BAD_MOVE.
    """
    try:
        return move(position, hole), None
    except IllegalMove as exc:
        return MoveOutcome(position, None, MoveResult.BAD_MOVE), exc
