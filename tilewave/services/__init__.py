from .edge_inventory import clockwise_edges, edge_inventory, edge_key, raw_variations
from .runner import CancelToken, SolveHandle, SolveRunner, solve_async

__all__ = [
    "clockwise_edges",
    "edge_inventory",
    "edge_key",
    "raw_variations",
    "CancelToken",
    "SolveHandle",
    "SolveRunner",
    "solve_async",
]
