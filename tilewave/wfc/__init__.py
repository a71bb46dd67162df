"""Wave Function Collapse over edge-matched square tiles."""

from .edges import CompatibilityTable, edges_compatible, get_edge, tile_edges
from .grid import GridStatus, SolverCell, SolverGrid
from .solver import (
    AbortReason,
    HistoryRecord,
    SolveResult,
    SolveStatus,
    WFCSolver,
    collapse_cell,
    propagate,
    solve,
    solve_best_effort,
    weighted_choice,
)
from .variants import (
    VariantGroup,
    check_tiles,
    describe_variant,
    expand_catalog,
    mirror_grid,
    rotate_grid,
    tile_variants,
    variant_groups,
)

__all__ = [
    "CompatibilityTable",
    "edges_compatible",
    "get_edge",
    "tile_edges",
    "GridStatus",
    "SolverCell",
    "SolverGrid",
    "AbortReason",
    "HistoryRecord",
    "SolveResult",
    "SolveStatus",
    "WFCSolver",
    "collapse_cell",
    "propagate",
    "solve",
    "solve_best_effort",
    "weighted_choice",
    "VariantGroup",
    "check_tiles",
    "describe_variant",
    "expand_catalog",
    "mirror_grid",
    "rotate_grid",
    "tile_variants",
    "variant_groups",
]
