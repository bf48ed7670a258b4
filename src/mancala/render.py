"""
Console rendering of a position.

The far row is printed left to right above, the near row right to left
below, with the far store on the left and the near store on the right.
Width 6, 4 stones:

         4  4  4  4  4  4
     0                     0
        4  4  4  4  4  4
    ------------------------
"""
from __future__ import annotations

from .position import Position


def render(position: Position) -> str:
    far = "".join(f" {v:2d}" for v in position.far_holes)
    near = "".join(f" {v:2d}" for v in reversed(position.near_holes))
    padding = max(len(far), len(near))
    lines = [
        f"   {far}",
        f"{position.far_store:2d} {' ' * padding} {position.near_store:2d}",
        f"  {near}",
        "-" * (padding + 6),
    ]
    return "\n".join(lines) + "\n"
