from .tile_store import TileLibrary, TileStore, load_tileset_yaml

__all__ = [
    "TileLibrary",
    "TileStore",
    "load_tileset_yaml",
]
