"""
Game sessions: apply moves from scripted tokens, a console or a strategy.

The session owns the current position, always expressed from the side to
move. After an END_OF_TURN result the board is handed to the other player
with change_player(); after END_OF_GAME the session stops accepting moves.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TextIO, Union

from .engine import MoveResult, try_move
from .errors import ParseError
from .position import Position
from .render import render
from .strategies import Strategy, parse_hole

logger = logging.getLogger(__name__)

GAME_OVER_BANNER = "*** Game Over ***"


@dataclass
class Turn:
    position_key: str
    hole: int
    result: MoveResult
    result_key: str


@dataclass
class PlaySession:
    position: Position
    show_delta: bool = False
    out: Optional[TextIO] = None
    history: List[Turn] = field(default_factory=list)
    game_over: bool = False

    def __post_init__(self) -> None:
        if self.position.is_game_end():
            self.game_over = True

    def _write(self, text: str) -> None:
        (self.out if self.out is not None else sys.stdout).write(text)

    def show(self) -> None:
        self._write(render(self.position))

    def apply(self, token: Union[str, int], label: str = "args") -> MoveResult:
        """Apply one move token; bad tokens are reported and leave the board unchanged."""
        if self.game_over:
            raise ValueError("game is over")
        try:
            hole = parse_hole(token)
        except ParseError as exc:
            logger.warning("%s", exc)
            return MoveResult.BAD_MOVE
        outcome, err = try_move(self.position, hole)
        if err is not None:
            logger.warning("%s %s", token, err)
            return MoveResult.BAD_MOVE

        self._write(f"{label} > {hole}\n")
        if self.show_delta and outcome.delta is not None:
            self._write(render(outcome.delta))
        self.history.append(Turn(self.position.as_key(), hole, outcome.result, outcome.position.as_key()))
        nxt = outcome.position
        if outcome.result == MoveResult.END_OF_TURN:
            nxt = nxt.change_player()
        self.position = nxt
        self.show()
        if outcome.result == MoveResult.END_OF_GAME:
            self.game_over = True
            self._write(GAME_OVER_BANNER + "\n")
        return outcome.result

    def apply_all(self, tokens: Iterable[Union[str, int]], label: str = "args") -> List[MoveResult]:
        results: List[MoveResult] = []
        for token in tokens:
            if self.game_over:
                break
            results.append(self.apply(token, label=label))
        return results

    def play_out(self, strategy: Strategy, max_moves: Optional[int] = None) -> int:
        """Let one strategy play every turn until the game ends; return moves made."""
        made = 0
        while not self.game_over and (max_moves is None or made < max_moves):
            hole = strategy.choose(self.position)
            result = self.apply(hole, label=strategy.name)
            if result == MoveResult.BAD_MOVE:
                raise ValueError(f"strategy {strategy.name} chose illegal hole {hole}")
            made += 1
        return made
