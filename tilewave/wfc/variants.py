"""
Tile variant expansion.

Turns the author's tiles into the catalog of orientations the solver works
with. For each tile, in order:

1. the tile as drawn
2. its 90/180/270 degree clockwise rotations, if rotation is enabled
3. the horizontal mirror of every variant added so far, if mirror is enabled

A variant whose matrix is already in that tile's list is dropped, so the
first occurrence wins. Mirroring the k-quarter-turn rotation gives the
mirror turned the other way, so that entry is labelled mirror+rot(360 - 90k). Deduplication never looks across tiles: two tiles
that happen to share a matrix both keep their entries.

The position of an orientation in the catalog is its candidate id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from tilewave.domain import InvalidTileError, Matrix, TileOrientation, TilePattern, check_square, to_matrix

logger = logging.getLogger(__name__)


def rotate_grid(grid: Sequence[Sequence[Any]], times: int = 1) -> Matrix:
    """Rotate a matrix clockwise by 90 degrees `times` times."""
    result = to_matrix(grid)
    for _ in range(times % 4):
        rows = len(result)
        cols = len(result[0]) if rows else 0
        # new[j][rows - 1 - i] = old[i][j]
        result = tuple(
            tuple(result[rows - 1 - k][j] for k in range(rows))
            for j in range(cols)
        )
    return result


def mirror_grid(grid: Sequence[Sequence[Any]]) -> Matrix:
    """Mirror a matrix horizontally (reverse every row)."""
    return tuple(tuple(reversed(row)) for row in grid)


def _mirrored_label(transform: str) -> str:
    """Label for mirror(g) where g carries `transform` (original or rotN).

    mirror(rotN(t)) == rot(360 - N)(mirror(t)), and labels always name a
    rotation of the mirror.
    """
    if transform == "original":
        return "mirror"
    degrees = int(transform.removeprefix("rot"))
    return f"mirror+rot{(360 - degrees) % 360}"


def tile_variants(tile: TilePattern, source_index: int = 0) -> list[TileOrientation]:
    """
    Expand one tile into its deduplicated orientations.

    Does not validate the grid; expand_catalog does that up front.
    """
    variants: list[TileOrientation] = []
    seen: set[Matrix] = set()

    def add(grid: Matrix, transform: str) -> None:
        if grid in seen:
            return
        seen.add(grid)
        variants.append(
            TileOrientation(
                grid=grid,
                weight=tile.weight,
                source_index=source_index,
                transform=transform,
            )
        )

    add(to_matrix(tile.grid), "original")

    if tile.rotation_enabled:
        for quarter_turns in range(1, 4):
            add(rotate_grid(tile.grid, quarter_turns), f"rot{quarter_turns * 90}")

    if tile.mirror_enabled:
        # Mirror only what existed before this step
        for variant in list(variants):
            add(mirror_grid(variant.grid), _mirrored_label(variant.transform))

    return variants


def check_tiles(tiles: Sequence[TilePattern]) -> None:
    """
    Validate a tile set: every grid square, and all of the same size.

    Raises:
        InvalidTileError: Naming the first offending tile
    """
    size = None
    for index, tile in enumerate(tiles):
        check_square(tile.grid, index)
        if size is None:
            size = len(tile.grid)
        elif len(tile.grid) != size:
            raise InvalidTileError(
                f"tile is {len(tile.grid)}x{len(tile.grid)}, "
                f"but tile 0 is {size}x{size}; all tiles must share one size",
                index,
            )


def expand_catalog(tiles: Sequence[TilePattern]) -> list[TileOrientation]:
    """
    Build the solver catalog from the author's tiles.

    Every tile is validated before any variant is generated, so a bad tile
    fails the whole call with nothing half-built.

    Raises:
        InvalidTileError: If any tile grid is empty, ragged, not square, or
            a different size from the others
    """
    check_tiles(tiles)

    catalog: list[TileOrientation] = []
    for index, tile in enumerate(tiles):
        catalog.extend(tile_variants(tile, source_index=index))

    logger.debug(f"Expanded {len(tiles)} tiles into {len(catalog)} orientations")
    return catalog


def describe_variant(orientation: TileOrientation) -> str:
    """Human-readable label, e.g. "Mirrored + Rotated 90°"."""
    transform = orientation.transform
    if transform == "original":
        return "Original"
    if transform == "mirror":
        return "Mirrored"
    if transform.startswith("mirror+rot"):
        return f"Mirrored + Rotated {transform.removeprefix('mirror+rot')}°"
    if transform.startswith("rot"):
        return f"Rotated {transform.removeprefix('rot')}°"
    return transform


@dataclass(frozen=True)
class VariantGroup:
    """The orientations contributed by one author tile (for listings)."""

    source_index: int
    tile: TilePattern
    variants: tuple[TileOrientation, ...]

    @property
    def descriptions(self) -> list[str]:
        return [describe_variant(v) for v in self.variants]


def variant_groups(tiles: Sequence[TilePattern]) -> list[VariantGroup]:
    """
    Group the catalog by originating tile.

    The groups, flattened in order, are exactly expand_catalog(tiles).
    """
    check_tiles(tiles)
    return [
        VariantGroup(
            source_index=index,
            tile=tile,
            variants=tuple(tile_variants(tile, source_index=index)),
        )
        for index, tile in enumerate(tiles)
    ]
