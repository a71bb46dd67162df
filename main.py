#!/usr/bin/env python3
"""
tilewave - Fill a grid with edge-matched tiles using Wave Function Collapse.

Run this to solve the saved tile library (or a YAML tile set) and print the
result to the terminal.
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console

from tilewave.config import SolveOptions
from tilewave.domain import InvalidTileError, TileStoreError
from tilewave.logging_config import setup_logging
from tilewave.observe import edge_table, print_result, variant_table
from tilewave.services import edge_inventory
from tilewave.storage import TileStore, load_tileset_yaml
from tilewave.storage.tile_store import BUNDLED_TILESET
from tilewave.wfc import expand_catalog, solve, solve_best_effort, variant_groups

EXIT_SOLVED = 0
EXIT_ABORTED = 1
EXIT_BAD_INPUT = 2


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="tilewave - Wave Function Collapse for edge-matched tiles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tilewave                              # Solve the saved library (or the bundled pipes set)
  tilewave --tileset my_tiles.yaml      # Import a tile set, save it, and solve it
  tilewave --rows 8 --cols 30 --seed 7  # Override grid size and seed
  tilewave --edges --variants           # Also show edge and variant overviews
        """,
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=Path("data"),
        help="Data directory for the tile library and log (default: data/)",
    )
    parser.add_argument(
        "--tileset",
        type=Path,
        metavar="FILE",
        help="Load tiles from a YAML tile set and save them as the library",
    )
    parser.add_argument("--rows", type=int, help="Grid rows (default: from library)")
    parser.add_argument("--cols", type=int, help="Grid columns (default: from library)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument("--max-iterations", type=int, metavar="N", help="Iteration budget")
    parser.add_argument("--max-backtracks", type=int, metavar="N", help="Backtrack budget")
    parser.add_argument(
        "--best-effort",
        action="store_true",
        help="Single pass without backtracking; stop at the first contradiction",
    )
    parser.add_argument("--edges", action="store_true", help="Show the unique edge overview")
    parser.add_argument("--variants", action="store_true", help="List tile variants")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )

    args = parser.parse_args(argv)

    # Always log DEBUG to file, console level depends on --debug
    console_level = logging.DEBUG if args.debug else logging.WARNING
    setup_logging(args.data, console_level=console_level)
    console = Console()

    store = TileStore(args.data)
    try:
        if args.tileset is not None:
            library = load_tileset_yaml(args.tileset)
            store.save(library)
            console.print(f"Imported {len(library.tiles)} tiles from {args.tileset}")
        else:
            library = store.load()
            if library is None:
                library = load_tileset_yaml(BUNDLED_TILESET)
    except TileStoreError as e:
        console.print(f"[red]{e}[/red]")
        return EXIT_BAD_INPUT

    try:
        options = SolveOptions.from_env().with_overrides(
            max_iterations=args.max_iterations,
            max_backtracks=args.max_backtracks,
            rng_seed=args.seed,
        )
        catalog = expand_catalog(library.tiles)
        rows = args.rows if args.rows is not None else library.grid_rows
        cols = args.cols if args.cols is not None else library.grid_cols
        if rows < 1 or cols < 1:
            raise ValueError(f"grid must be at least 1x1, got {rows}x{cols}")
    except (InvalidTileError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        return EXIT_BAD_INPUT

    if args.edges:
        console.print(edge_table(edge_inventory(library.tiles)))
    if args.variants:
        console.print(variant_table(variant_groups(library.tiles)))

    run = solve_best_effort if args.best_effort else solve
    result = run(catalog, rows, cols, options)

    print_result(result, catalog, console)
    return EXIT_SOLVED if result.solved else EXIT_ABORTED


if __name__ == "__main__":
    sys.exit(main())
