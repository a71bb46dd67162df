"""Foundational types for tilewave.

This module defines the small value types shared by the solver:
- Side: the four sides of a square tile, with neighbour offsets
- Edge: the boundary values read along one side
- Matrix: a tile pattern as rows of cell values
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Sequence

# A tile pattern, row-major. Tiles use booleans, but the edge helpers only
# need equality so any hashable cell value works.
Matrix = tuple[tuple[Any, ...], ...]
Edge = tuple[Any, ...]


class Side(Enum):
    """The four sides of a tile, and the four neighbours of a grid cell."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @property
    def offset(self) -> tuple[int, int]:
        """Get the (drow, dcol) offset of the neighbour on this side.

        Rows grow downward, so TOP is one row up.
        """
        return _SIDE_OFFSETS[self]

    @property
    def opposite(self) -> Side:
        """Get the side that touches this one on the neighbouring tile."""
        return _SIDE_OPPOSITES[self]

    @classmethod
    def coerce(cls, value: Side | str) -> Side:
        """Accept a Side or its string value ("top", "right", ...)."""
        if isinstance(value, Side):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid side: {value!r}") from None


# Lookup tables for Side properties
_SIDE_OFFSETS: dict[Side, tuple[int, int]] = {
    Side.TOP: (-1, 0),
    Side.RIGHT: (0, 1),
    Side.BOTTOM: (1, 0),
    Side.LEFT: (0, -1),
}

_SIDE_OPPOSITES: dict[Side, Side] = {
    Side.TOP: Side.BOTTOM,
    Side.BOTTOM: Side.TOP,
    Side.LEFT: Side.RIGHT,
    Side.RIGHT: Side.LEFT,
}


def to_matrix(rows: Sequence[Sequence[Any]]) -> Matrix:
    """Freeze nested sequences into a tuple-of-tuples matrix."""
    return tuple(tuple(row) for row in rows)
