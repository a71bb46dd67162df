"""
Edge inventory: which edge shapes occur across a tile set, and how often.

This feeds the "unique edges" overview an author uses to see whether their
tiles can connect at all. Unlike the solver's edges, these are read
clockwise around the tile (top left-to-right, right top-to-bottom, bottom
right-to-left, left bottom-to-top), and every raw variation is counted
without deduplication, so a symmetric tile contributes its edges several
times.
"""

from __future__ import annotations

from typing import Any, Sequence

from tilewave.domain import Edge, Matrix, TilePattern, check_square
from tilewave.wfc.variants import mirror_grid, rotate_grid


def edge_key(edge: Sequence[Any]) -> str:
    """Encode an edge as a string of 1s and 0s, e.g. "10001"."""
    return "".join("1" if cell else "0" for cell in edge)


def clockwise_edges(grid: Sequence[Sequence[Any]]) -> tuple[Edge, Edge, Edge, Edge]:
    """The four edges of a tile, each read clockwise around it."""
    top = tuple(grid[0])
    right = tuple(row[-1] for row in grid)
    bottom = tuple(reversed(grid[-1]))
    left = tuple(row[0] for row in reversed(grid))
    return top, right, bottom, left


def raw_variations(tile: TilePattern) -> list[Matrix]:
    """Identity, rotations and mirrors of a tile, duplicates included."""
    variations = [rotate_grid(tile.grid, 0)]
    if tile.rotation_enabled:
        variations.extend(rotate_grid(tile.grid, i) for i in range(1, 4))
    if tile.mirror_enabled:
        variations.extend([mirror_grid(v) for v in variations])
    return variations


def edge_inventory(tiles: Sequence[TilePattern]) -> dict[str, int]:
    """
    Count edge keys across all variations of all tiles.

    Keys appear in first-seen order.

    Raises:
        InvalidTileError: If any tile grid is malformed
    """
    counts: dict[str, int] = {}
    for index, tile in enumerate(tiles):
        check_square(tile.grid, index)
        for grid in raw_variations(tile):
            for edge in clockwise_edges(grid):
                key = edge_key(edge)
                counts[key] = counts.get(key, 0) + 1
    return counts
