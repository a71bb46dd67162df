"""
Terminal rendering of solver output.

A resolved cell is drawn as its orientation's pattern, one character per
tile cell, so an R x C grid of N x N tiles becomes R*N lines of C*N
characters. An unresolved cell shows how many candidates it has left,
centred in its N x N block.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from tilewave.domain import TileOrientation
from tilewave.wfc.grid import SolverCell, SolverGrid
from tilewave.wfc.solver import SolveResult, SolveStatus
from tilewave.wfc.variants import VariantGroup

FILLED = "█"
EMPTY = " "

STYLE_TILE = "white"
STYLE_PENDING = "dim cyan"
STYLE_CONTRADICTION = "bold red"


def _tile_size(catalog: Sequence[TileOrientation]) -> int:
    return catalog[0].size if catalog else 1


def _cell_block(cell: SolverCell, catalog: Sequence[TileOrientation], size: int) -> list[tuple[str, str]]:
    """The N lines (text, style) that draw one cell."""
    tile_id = cell.tile_id
    if tile_id is not None:
        grid = catalog[tile_id].grid
        return [
            ("".join(FILLED if value else EMPTY for value in row), STYLE_TILE)
            for row in grid
        ]

    label = "!" if cell.is_contradiction else str(cell.entropy)
    style = STYLE_CONTRADICTION if cell.is_contradiction else STYLE_PENDING
    lines = ["." * size for _ in range(size)]
    middle = size // 2
    lines[middle] = label[:size].center(size, ".")
    return [(line, style) for line in lines]


def render_grid(
    grid_or_result: SolverGrid | SolveResult,
    catalog: Sequence[TileOrientation],
) -> Text:
    """Draw a solver grid as styled text."""
    grid = grid_or_result.grid if isinstance(grid_or_result, SolveResult) else grid_or_result
    size = _tile_size(catalog)

    text = Text()
    for r, row in enumerate(grid.cells):
        blocks = [_cell_block(cell, catalog, size) for cell in row]
        for line in range(size):
            for block in blocks:
                content, style = block[line]
                text.append(content, style=style)
            if r < grid.rows - 1 or line < size - 1:
                text.append("\n")
    return text


def render_summary(result: SolveResult) -> str:
    """One line describing how the run ended."""
    grid = result.grid
    total = grid.rows * grid.cols
    resolved = grid.resolved_count()
    if result.status is SolveStatus.DONE:
        outcome = "solved"
    elif result.reason is not None:
        outcome = f"aborted ({result.reason.value})"
    else:
        outcome = result.status.value
    return (
        f"{grid.rows}x{grid.cols} {outcome}: {resolved}/{total} cells, "
        f"{result.iterations} iterations, {result.backtracks} backtracks"
    )


def print_result(
    result: SolveResult,
    catalog: Sequence[TileOrientation],
    console: Console | None = None,
) -> None:
    console = console or Console()
    console.print(render_grid(result, catalog))
    console.print(render_summary(result))


def edge_table(inventory: dict[str, int]) -> Table:
    """Unique edges and how often each occurs."""
    table = Table(title="Unique Edges")
    table.add_column("Edge")
    table.add_column("Pattern")
    table.add_column("Count", justify="right")
    for key, count in inventory.items():
        pattern = "".join(FILLED if ch == "1" else "·" for ch in key)
        table.add_row(key, pattern, str(count))
    return table


def variant_table(groups: Sequence[VariantGroup]) -> Table:
    """One row per tile: its settings and the variants it contributes."""
    total = sum(len(g.variants) for g in groups)
    table = Table(title=f"{len(groups)} tiles generate {total} variants")
    table.add_column("Tile", justify="right")
    table.add_column("Rotation")
    table.add_column("Mirror")
    table.add_column("Weight", justify="right")
    table.add_column("Variants")
    for group in groups:
        table.add_row(
            str(group.source_index + 1),
            "Enabled" if group.tile.rotation_enabled else "Disabled",
            "Enabled" if group.tile.mirror_enabled else "Disabled",
            f"{group.tile.weight:g}",
            ", ".join(group.descriptions),
        )
    return table
