"""
Tile library persistence.

A TileLibrary is everything an author has set up: the tiles, the size new
tiles start at, and the grid dimensions to solve. TileStore keeps one
library per directory as tiles.json; saving overwrites, so the last write
wins. Tile sets can also be written by hand in YAML and loaded with
load_tileset_yaml.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tilewave.domain import TilePattern, TileStoreError
from tilewave.logging_config import log_storage

logger = logging.getLogger(__name__)

LIBRARY_FILE_NAME = "tiles.json"
# Shipped with the package, relative to this file
BUNDLED_TILESET = Path(__file__).parent.parent / "tilesets" / "pipes.yaml"
DEFAULT_TILE_SIZE = 5
DEFAULT_GRID_SIZE = 10

FILLED_CHARS = frozenset("#1Xx")
EMPTY_CHARS = frozenset(".0 _")


class TileLibrary(BaseModel):
    """An author's tiles plus the sizes they work with."""

    model_config = ConfigDict(frozen=True)

    tiles: tuple[TilePattern, ...] = Field(default_factory=tuple)
    tile_size: int = Field(default=DEFAULT_TILE_SIZE, ge=1)
    grid_rows: int = Field(default=DEFAULT_GRID_SIZE, ge=1)
    grid_cols: int = Field(default=DEFAULT_GRID_SIZE, ge=1)

    def add_tile(self, tile: TilePattern | None = None) -> TileLibrary:
        """Return a new library with a tile appended (blank if None)."""
        if tile is None:
            tile = TilePattern.blank(self.tile_size)
        return self.model_copy(update={"tiles": self.tiles + (tile,)})

    def remove_tile(self, index: int) -> TileLibrary:
        """Return a new library without the tile at index."""
        self._check_index(index)
        return self.model_copy(
            update={"tiles": self.tiles[:index] + self.tiles[index + 1:]}
        )

    def replace_tile(self, index: int, tile: TilePattern) -> TileLibrary:
        """Return a new library with the tile at index swapped out."""
        self._check_index(index)
        tiles = list(self.tiles)
        tiles[index] = tile
        return self.model_copy(update={"tiles": tuple(tiles)})

    def with_tile_size(self, tile_size: int) -> TileLibrary:
        """Change the size new tiles start at. Existing tiles are untouched."""
        if tile_size < 1:
            raise ValueError(f"tile size must be at least 1, got {tile_size}")
        return self.model_copy(update={"tile_size": tile_size})

    def with_grid_size(self, rows: int, cols: int) -> TileLibrary:
        if rows < 1 or cols < 1:
            raise ValueError(f"grid must be at least 1x1, got {rows}x{cols}")
        return self.model_copy(update={"grid_rows": rows, "grid_cols": cols})

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.tiles):
            raise IndexError(f"no tile at index {index} (library has {len(self.tiles)})")


class TileStore:
    """Saves and loads a TileLibrary as JSON under a data directory."""

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.path = self.root / LIBRARY_FILE_NAME

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, library: TileLibrary) -> Path:
        """Write the library, replacing whatever was there. Returns the path."""
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(library.model_dump(mode="json"), f, indent=2)
        log_storage(logger, "save", self.path, details=f"{len(library.tiles)} tiles")
        return self.path

    def load(self) -> TileLibrary | None:
        """Load the library. Returns None if nothing has been saved yet."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                library = TileLibrary.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            log_storage(logger, "load", self.path, success=False, details=str(e))
            raise TileStoreError(f"Could not read {self.path}: {e}") from e
        log_storage(logger, "load", self.path, details=f"{len(library.tiles)} tiles")
        return library


def _parse_row(row: Any) -> list[bool]:
    """A grid row is either a string like "#..#" or a list of booleans/0/1."""
    if isinstance(row, str):
        cells = []
        for ch in row:
            if ch in FILLED_CHARS:
                cells.append(True)
            elif ch in EMPTY_CHARS:
                cells.append(False)
            else:
                raise TileStoreError(f"Unknown tile cell character {ch!r} in {row!r}")
        return cells
    if isinstance(row, list):
        return [bool(cell) for cell in row]
    raise TileStoreError(f"Tile rows must be strings or lists, got {row!r}")


def _parse_tile(data: Any) -> TilePattern:
    if not isinstance(data, dict):
        raise TileStoreError(f"Each tile must be a mapping with a grid, got {data!r}")
    return TilePattern(
        grid=tuple(tuple(_parse_row(row)) for row in data.get("grid", [])),
        rotation_enabled=data.get("rotation", data.get("rotation_enabled", False)),
        mirror_enabled=data.get("mirror", data.get("mirror_enabled", False)),
        weight=data.get("weight", 1.0),
    )


def load_tileset_yaml(path: Path | str) -> TileLibrary:
    """
    Load a hand-written tile set.

    Format:
        tile_size: 3
        grid: {rows: 12, cols: 20}
        tiles:
          - grid: ["...", "###", "..."]
            rotation: true
            mirror: false
            weight: 2

    Raises:
        TileStoreError: If the file is missing, not YAML, or has bad values
    """
    path = Path(path)
    if not path.exists():
        raise TileStoreError(f"Tile set not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise TileStoreError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise TileStoreError(f"{path}: expected a mapping at the top level")

    grid = data.get("grid") or {}
    if not isinstance(grid, dict):
        raise TileStoreError(f"{path}: 'grid' must be a mapping with rows and cols")
    try:
        tiles = tuple(_parse_tile(t) for t in data.get("tiles") or [])
        library = TileLibrary(
            tiles=tiles,
            tile_size=data.get("tile_size", len(tiles[0].grid) if tiles else DEFAULT_TILE_SIZE),
            grid_rows=grid.get("rows", DEFAULT_GRID_SIZE),
            grid_cols=grid.get("cols", DEFAULT_GRID_SIZE),
        )
    except ValidationError as e:
        raise TileStoreError(f"{path}: {e}") from e

    log_storage(logger, "load_yaml", path, details=f"{len(library.tiles)} tiles")
    return library
