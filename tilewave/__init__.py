"""
tilewave - Wave Function Collapse for edge-matched square tiles.

Authors draw small boolean tiles, optionally allowing rotation and mirroring
and giving each a selection weight. The solver expands them into a catalog
of orientations and fills a grid so that every pair of neighbours shows
matching edges, backtracking when it paints itself into a corner.

Example usage:
    from tilewave import TilePattern, expand_catalog, solve

    catalog = expand_catalog([TilePattern(grid=..., rotation_enabled=True)])
    result = solve(catalog, rows=10, cols=10)
    if result.solved:
        ids = result.resolved_ids()
"""

__version__ = "0.1.0"

from .config import SolveOptions
from .domain import InvalidTileError, Side, TileOrientation, TilePattern
from .logging_config import setup_logging
from .wfc import (
    AbortReason,
    SolveResult,
    SolveStatus,
    WFCSolver,
    edges_compatible,
    expand_catalog,
    get_edge,
    solve,
    solve_best_effort,
)

__all__ = [
    "__version__",
    "SolveOptions",
    "InvalidTileError",
    "Side",
    "TileOrientation",
    "TilePattern",
    "setup_logging",
    "AbortReason",
    "SolveResult",
    "SolveStatus",
    "WFCSolver",
    "edges_compatible",
    "expand_catalog",
    "get_edge",
    "solve",
    "solve_best_effort",
]
