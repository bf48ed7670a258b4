"""
Move-selection strategies.

A strategy is bound to one player and sees positions from that player's
perspective (near is always "me"). Strategies only read the position they
are given and never keep board state between calls.
"""
from __future__ import annotations

import logging
import re
import sys
from enum import Enum
from typing import Callable, Iterable, Iterator, Optional, Protocol, TextIO, Union

import numpy as np

from .errors import ParseError, UnknownStrategy
from .position import Position

logger = logging.getLogger(__name__)

_HOLE_RE = re.compile(r"[0-9]+")

MoveSource = Callable[[Position], Union[str, int, None]]


def parse_hole(token: Union[str, int]) -> int:
    """Parse a hole number typed as plain ASCII digits."""
    if isinstance(token, int) and not isinstance(token, bool):
        return token
    text = str(token).strip()
    if not _HOLE_RE.fullmatch(text):
        raise ParseError(f"{token!r} is not a hole number")
    return int(text)


class Strategy(Protocol):
    name: str

    def choose(self, position: Position) -> int:
        ...


class RandomStrategy:
    """Uniform choice among the legal moves."""

    def __init__(self, seed: Optional[int] = None, name: str = "random") -> None:
        self.name = name
        self.rng = np.random.default_rng(seed)

    def choose(self, position: Position) -> int:
        moves = position.valid_moves()
        if not moves:
            raise ValueError(f"no legal move in position {position.as_key()}")
        hole = int(self.rng.choice(moves))
        logger.info("%s > %d", self.name, hole)
        return hole


class ExternalStrategy:
    """Take moves from an injected source, asking again until one is legal.

    The source is called with the position and may return an int or a text
    token. Tokens that are not integers or not legal are logged and
    re-requested. When max_attempts is set, giving up raises ValueError.
    """

    def __init__(self, source: MoveSource, name: str = "console", max_attempts: Optional[int] = None) -> None:
        self.source = source
        self.name = name
        self.max_attempts = max_attempts

    def choose(self, position: Position) -> int:
        moves = position.valid_moves()
        if not moves:
            raise ValueError(f"no legal move in position {position.as_key()}")
        attempts = 0
        while self.max_attempts is None or attempts < self.max_attempts:
            attempts += 1
            raw = self.source(position)
            if raw is None:
                raise ValueError(f"{self.name}: move source exhausted")
            try:
                hole = parse_hole(raw)
            except ParseError:
                logger.warning("%s: %r not valid", self.name, raw)
                continue
            if hole in moves:
                return hole
            logger.warning("%s: %d not a legal move (legal: %s)", self.name, hole, moves)
        raise ValueError(f"{self.name}: no legal move after {attempts} attempts")


class ScriptedStrategy(ExternalStrategy):
    """External strategy fed from a fixed sequence of moves."""

    def __init__(self, moves: Iterable[Union[str, int]], name: str = "script") -> None:
        it: Iterator[Union[str, int]] = iter(moves)
        super().__init__(lambda _position: next(it, None), name=name)


def console_source(name: str = "console", stream_in: Optional[TextIO] = None, stream_out: Optional[TextIO] = None) -> MoveSource:
    """Read one move per line from a text stream (stdin by default)."""

    def read(_position: Position) -> Optional[str]:
        fin = stream_in if stream_in is not None else sys.stdin
        fout = stream_out if stream_out is not None else sys.stdout
        fout.write(f"{name} > ")
        fout.flush()
        line = fin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    return read


class StrategyKind(Enum):
    RANDOM = "random"
    CONSOLE = "console"


def create_strategy(
    kind: str,
    name: Optional[str] = None,
    seed: Optional[int] = None,
    stream_in: Optional[TextIO] = None,
    stream_out: Optional[TextIO] = None,
) -> Strategy:
    try:
        k = StrategyKind(kind)
    except ValueError:
        raise UnknownStrategy(kind, [s.value for s in StrategyKind]) from None
    if k is StrategyKind.RANDOM:
        return RandomStrategy(seed=seed, name=name or k.value)
    label = name or k.value
    return ExternalStrategy(console_source(label, stream_in, stream_out), name=label)
