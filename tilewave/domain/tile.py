"""Tile models: the author's patterns and the orientations derived from them.

TilePattern is what a user edits and stores. TileOrientation is one concrete
rotation/mirror variant of a pattern; the solver only ever sees orientations,
identified by their index in the catalog.

Both models are frozen and use transformation methods for updates.
"""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidTileError
from .types import Matrix

DEFAULT_WEIGHT = 1.0


def check_rectangular(grid: Sequence[Sequence[Any]], tile_index: int | None = None) -> None:
    """Raise InvalidTileError unless grid is a non-empty rectangle."""
    if grid is None or len(grid) == 0:
        raise InvalidTileError("tile must have a non-empty grid", tile_index)
    width = len(grid[0])
    if width == 0:
        raise InvalidTileError("tile rows must not be empty", tile_index)
    for i, row in enumerate(grid):
        if len(row) != width:
            raise InvalidTileError(
                f"row {i} has {len(row)} cells, expected {width}", tile_index
            )


def check_square(grid: Sequence[Sequence[Any]], tile_index: int | None = None) -> None:
    """Raise InvalidTileError unless grid is a non-empty N x N square."""
    check_rectangular(grid, tile_index)
    if len(grid) != len(grid[0]):
        raise InvalidTileError(
            f"grid is {len(grid)}x{len(grid[0])}, tiles must be square", tile_index
        )


class TilePattern(BaseModel):
    """An author-defined tile.

    The grid shape is checked when a catalog is built, not here, so a
    library can hold a pattern that is still being edited.
    """

    model_config = ConfigDict(frozen=True)

    grid: tuple[tuple[bool, ...], ...]
    rotation_enabled: bool = False
    mirror_enabled: bool = False
    weight: float = Field(default=DEFAULT_WEIGHT, gt=0)

    @classmethod
    def blank(cls, size: int) -> TilePattern:
        """Create an all-empty size x size pattern."""
        if size < 1:
            raise ValueError(f"tile size must be at least 1, got {size}")
        return cls(grid=tuple(tuple(False for _ in range(size)) for _ in range(size)))

    @property
    def size(self) -> int:
        return len(self.grid)

    def with_cell_toggled(self, row: int, col: int) -> TilePattern:
        """Return a new pattern with one cell flipped."""
        if not (0 <= row < len(self.grid) and 0 <= col < len(self.grid[row])):
            raise IndexError(f"cell ({row}, {col}) is outside the tile")
        grid = [list(r) for r in self.grid]
        grid[row][col] = not grid[row][col]
        return self.model_copy(update={"grid": tuple(tuple(r) for r in grid)})

    def with_rotation(self, enabled: bool) -> TilePattern:
        return self.model_copy(update={"rotation_enabled": enabled})

    def with_mirror(self, enabled: bool) -> TilePattern:
        return self.model_copy(update={"mirror_enabled": enabled})

    def with_weight(self, weight: float) -> TilePattern:
        """Return a new pattern with a different selection weight (must be > 0)."""
        # model_copy skips validation, so go through the constructor
        return TilePattern(
            grid=self.grid,
            rotation_enabled=self.rotation_enabled,
            mirror_enabled=self.mirror_enabled,
            weight=weight,
        )


class TileOrientation(BaseModel):
    """One concrete variant of a TilePattern, as placed by the solver."""

    model_config = ConfigDict(frozen=True)

    grid: Matrix
    weight: float = DEFAULT_WEIGHT
    source_index: int = 0
    transform: str = "original"

    @property
    def size(self) -> int:
        return len(self.grid)
