"""
Board dimensions shared by every position of a run.

A BoardConfig is a plain value: it travels with each Position instead of
living in a module global, so two boards of different sizes can coexist.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BoardConfig:
    """Board dimensions.

    Attributes:
        width: Number of holes per side (>= 1).
        stones: Initial number of stones in each hole (>= 0).
    """

    width: int = 6
    stones: int = 4

    def __post_init__(self) -> None:
        if isinstance(self.width, bool) or not isinstance(self.width, int) or self.width < 1:
            raise ValueError(f"width must be a positive integer, got {self.width!r}")
        if isinstance(self.stones, bool) or not isinstance(self.stones, int) or self.stones < 0:
            raise ValueError(f"stones must be a non-negative integer, got {self.stones!r}")

    @property
    def cells_per_side(self) -> int:
        # store at index 0, holes at 1..width
        return self.width + 1

    @property
    def total_stones(self) -> int:
        return 2 * self.width * self.stones

