"""
Edge extraction and edge compatibility.

Every edge is read in an absolute direction: rows left-to-right, columns
top-to-bottom. Two touching edges therefore line up position by position
without reversal. The right edge of a tile and the left edge of the tile to
its right are both read top-to-bottom, so they compare directly.

Rotation and mirror symmetry are not considered here. The variant expander
has already put every allowed orientation into the catalog.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Sequence

from tilewave.domain import Edge, Side, TileOrientation, check_rectangular


def _grid_of(tile_or_grid: Any) -> Sequence[Sequence[Any]]:
    """Accept a tile model (anything with .grid) or a raw matrix."""
    grid = getattr(tile_or_grid, "grid", tile_or_grid)
    check_rectangular(grid)
    return grid


def get_edge(tile_or_grid: Any, side: Side | str) -> Edge:
    """
    Get the boundary values along one side of a tile.

    - top: first row, left to right
    - bottom: last row, left to right
    - left: first column, top to bottom
    - right: last column, top to bottom

    Raises:
        InvalidTileError: If the grid is empty or not rectangular
        ValueError: If side is not one of the four sides
    """
    side = Side.coerce(side)
    grid = _grid_of(tile_or_grid)

    if side is Side.TOP:
        return tuple(grid[0])
    if side is Side.BOTTOM:
        return tuple(grid[-1])
    if side is Side.LEFT:
        return tuple(row[0] for row in grid)
    return tuple(row[-1] for row in grid)


def tile_edges(tile_or_grid: Any) -> dict[Side, Edge]:
    """Get all four edges of a tile, keyed by side."""
    return {side: get_edge(tile_or_grid, side) for side in Side}


def edges_compatible(a: Any, b: Any, side: Side | str) -> bool:
    """
    Check whether b may sit on the given side of a.

    a and b can each be a tile (anything with a .grid) or an edge that the
    caller has already extracted. For a tile, a's edge is read on `side`
    and b's on the opposite side. A pre-extracted edge is used as-is.

    e.g. edges_compatible(left_tile, right_tile, "right") compares the
    right edge of left_tile with the left edge of right_tile.
    """
    side = Side.coerce(side)
    edge_a = get_edge(a, side) if hasattr(a, "grid") else tuple(a)
    edge_b = get_edge(b, side.opposite) if hasattr(b, "grid") else tuple(b)
    return edge_a == edge_b


class CompatibilityTable:
    """
    Precomputed adjacency for a catalog.

    Extracts every orientation's four edges once and groups candidate ids
    by edge content. allowed(i, side) then answers "which ids may sit on
    `side` of orientation i" without touching any grid.

    The answers always match edges_compatible on freshly extracted edges.
    """

    def __init__(self, catalog: Sequence[TileOrientation]):
        self.catalog = list(catalog)
        self.edges: list[dict[Side, Edge]] = [tile_edges(t) for t in self.catalog]

        # (side, edge content) -> ids whose edge on that side has that content
        by_edge: dict[tuple[Side, Edge], set[int]] = defaultdict(set)
        for tile_id, edges in enumerate(self.edges):
            for side, edge in edges.items():
                by_edge[(side, edge)].add(tile_id)

        self._allowed: dict[tuple[int, Side], frozenset[int]] = {}
        for tile_id, edges in enumerate(self.edges):
            for side, edge in edges.items():
                self._allowed[(tile_id, side)] = frozenset(
                    by_edge.get((side.opposite, edge), ())
                )

    def __len__(self) -> int:
        return len(self.catalog)

    def allowed(self, tile_id: int, side: Side) -> frozenset[int]:
        """Ids that may be placed on `side` of tile_id."""
        return self._allowed[(tile_id, side)]

    def allowed_for_any(self, tile_ids: Sequence[int], side: Side) -> set[int]:
        """
        Union of allowed neighbours over several candidates.

        This is what a cell still in superposition permits on one side.
        """
        allowed: set[int] = set()
        for tile_id in tile_ids:
            allowed |= self._allowed[(tile_id, side)]
        return allowed

    def compatible(self, a: int, b: int, side: Side) -> bool:
        return b in self._allowed[(a, side)]
