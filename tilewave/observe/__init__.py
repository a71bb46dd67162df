"""Human-facing views of tiles and solver output."""

from .render import (
    edge_table,
    print_result,
    render_grid,
    render_summary,
    variant_table,
)

__all__ = [
    "edge_table",
    "print_result",
    "render_grid",
    "render_summary",
    "variant_table",
]
