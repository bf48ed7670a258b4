"""
Error types raised by the position engine, strategies and generator.

Illegal moves and parse failures are recoverable at the call site; a
generator failure is not.
"""
from __future__ import annotations

from typing import Iterable


class MancalaError(Exception):
    """Base class for all package errors."""


class IllegalMove(MancalaError, ValueError):
    def __init__(self, hole: int, message: str) -> None:
        super().__init__(message)
        self.hole = hole


class OutOfRangeHole(IllegalMove):
    def __init__(self, hole: int, width: int) -> None:
        super().__init__(hole, f"hole {hole} not in range 1..{width}")
        self.width = width


class EmptyHole(IllegalMove):
    def __init__(self, hole: int) -> None:
        super().__init__(hole, f"hole {hole} is empty")


class ParseError(MancalaError, ValueError):
    pass


class UnknownStrategy(MancalaError, KeyError):
    def __init__(self, name: str, available: Iterable[str]) -> None:
        self.name = name
        self.available = sorted(available)
        super().__init__(name)

    def __str__(self) -> str:
        return f"Invalid strategy {self.name!r}. Must be one of: {', '.join(self.available)}"


class GeneratorError(MancalaError, RuntimeError):
    pass
