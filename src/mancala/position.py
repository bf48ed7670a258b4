"""
Position representation for Mancala.

A position is seen from the side to move:
- near: the mover's side, index 0 is the mover's store, 1..width the holes.
- far: the opponent's side, same layout.

Positions are immutable. Every "change" (a move, a perspective flip, adding a
delta) returns a new Position.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .board import BoardConfig
from .errors import ParseError

NEAR: int = 0
FAR: int = 1

Side = Tuple[int, ...]

_KEY_TOKEN_RE = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class Position:
    """Immutable snapshot of both sides.

    Attributes:
        config: Board dimensions; every side has config.width + 1 cells.
        near: Cells of the player to move.
        far: Cells of the opponent.
    """

    config: BoardConfig
    near: Side
    far: Side

    def __post_init__(self) -> None:
        n = self.config.cells_per_side
        if len(self.near) != n or len(self.far) != n:
            raise ValueError(
                f"each side needs {n} cells for width {self.config.width}, "
                f"got {len(self.near)} and {len(self.far)}"
            )

    # ------------------------- Construction helpers ------------------------- #
    @staticmethod
    def create(config: BoardConfig, *values: int) -> "Position":
        """Build a position from row-major values (near cells, then far cells).

        Unspecified trailing cells are zero.
        """
        n = config.cells_per_side
        if len(values) > 2 * n:
            raise ValueError(f"at most {2 * n} values allowed, got {len(values)}")
        cells = [int(v) for v in values] + [0] * (2 * n - len(values))
        return Position(config, tuple(cells[:n]), tuple(cells[n:]))

    @staticmethod
    def from_key(config: BoardConfig, text: str) -> "Position":
        """Parse a canonical key produced by as_key()."""
        tokens = text.strip().split(",")
        expected = 2 * config.cells_per_side
        if len(tokens) != expected:
            raise ParseError(f"expected {expected} values for width {config.width}, got {len(tokens)}: {text!r}")
        values: List[int] = []
        for tok in tokens:
            if not _KEY_TOKEN_RE.fullmatch(tok):
                raise ParseError(f"not an integer: {tok!r} in {text!r}")
            values.append(int(tok))
        return Position.create(config, *values)

    @staticmethod
    def start(config: BoardConfig) -> "Position":
        side = (0,) + (config.stones,) * config.width
        return Position(config, side, side)

    @staticmethod
    def zero(config: BoardConfig) -> "Position":
        side = (0,) * config.cells_per_side
        return Position(config, side, side)

    @staticmethod
    def diagnostic(config: BoardConfig) -> "Position":
        """Each hole holds as many stones as its index; stores are empty."""
        side = tuple(range(config.cells_per_side))
        return Position(config, side, side)

    # ----------------------------- Query methods ---------------------------- #
    def as_key(self) -> str:
        return ",".join(str(v) for v in self.cells())

    def cells(self) -> Tuple[int, ...]:
        return self.near + self.far

    def row(self, index: int) -> Side:
        return self.near if index == NEAR else self.far

    @property
    def near_store(self) -> int:
        return self.near[0]

    @property
    def far_store(self) -> int:
        return self.far[0]

    @property
    def near_holes(self) -> Side:
        return self.near[1:]

    @property
    def far_holes(self) -> Side:
        return self.far[1:]

    def is_valid(self) -> Tuple[bool, int]:
        """Check stone conservation.

        Returns (ok, deficit) where deficit = expected total - actual total.
        """
        deficit = self.config.total_stones - sum(self.cells())
        return deficit == 0, deficit

    def is_game_end(self) -> bool:
        # end of game if all holes on either side are empty
        return sum(self.near_holes) == 0 or sum(self.far_holes) == 0

    def valid_moves(self) -> List[int]:
        """Ascending near holes that contain stones; empty once the game has ended."""
        if self.is_game_end():
            return []
        return [i for i in range(1, self.config.width + 1) if self.near[i] > 0]

    def steal_target(self, row: int, hole: int) -> Optional[Tuple[int, int, int]]:
        """Return (opposite row, opposite hole, opposite count) if landing at (row, hole) captures.

        A capture needs the landing hole to hold exactly one stone and the
        directly opposite hole to be non-empty. Stores never capture.
        """
        if hole == 0:
            return None
        op_row = (row + 1) % 2
        op_hole = self.config.width + 1 - hole
        op_count = self.row(op_row)[op_hole]
        if op_count > 0 and self.row(row)[hole] == 1:
            return op_row, op_hole, op_count
        return None

    # --------------------------- Derived positions -------------------------- #
    def change_player(self) -> "Position":
        return Position(self.config, self.far, self.near)

    def add(self, delta: "Position") -> "Position":
        if delta.config != self.config:
            raise ValueError("cannot add positions of different board sizes")
        near = tuple(a + b for a, b in zip(self.near, delta.near))
        far = tuple(a + b for a, b in zip(self.far, delta.far))
        return Position(self.config, near, far)

    def __str__(self) -> str:
        return self.as_key()
