"""Exceptions raised by tilewave.

Only malformed input raises. A solve that fails to converge is reported
through SolveStatus/AbortReason on the result instead.
"""

from __future__ import annotations


class InvalidTileError(ValueError):
    """A tile grid is empty, non-rectangular or non-square."""

    def __init__(self, message: str, tile_index: int | None = None):
        if tile_index is not None:
            message = f"Tile {tile_index}: {message}"
        super().__init__(message)
        self.tile_index = tile_index


class TileStoreError(Exception):
    """A persisted tile library or tile set could not be read."""
