"""Domain models for tilewave.

Pure value types with no I/O: tile patterns, their orientations, sides and
edges, and the exceptions raised for malformed input.

Usage:
    from tilewave.domain import TilePattern, TileOrientation, Side
"""

from .errors import InvalidTileError, TileStoreError
from .tile import (
    DEFAULT_WEIGHT,
    TileOrientation,
    TilePattern,
    check_rectangular,
    check_square,
)
from .types import Edge, Matrix, Side, to_matrix

__all__ = [
    "InvalidTileError",
    "TileStoreError",
    "DEFAULT_WEIGHT",
    "TileOrientation",
    "TilePattern",
    "check_rectangular",
    "check_square",
    "Edge",
    "Matrix",
    "Side",
    "to_matrix",
]
