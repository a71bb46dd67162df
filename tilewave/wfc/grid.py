"""
Grid representation for Wave Function Collapse.

The SolverGrid is the "wave function" - a 2D array of cells where each cell
is in superposition (several candidate orientations) until it collapses to
a single one.

A grid belongs to exactly one solve run. It is created fully unconstrained,
mutated in place by collapse/propagate/backtrack, and handed back to the
caller at the end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, NamedTuple

from tilewave.domain import Side


@dataclass
class SolverCell:
    """
    A single cell in the solver grid.

    Before collapse: holds the candidate ids still possible, resolved=False
    After collapse: holds exactly one candidate id, resolved=True

    A cell with no candidates is a contradiction.
    """
    row: int
    col: int
    candidates: list[int] = field(default_factory=list)
    resolved: bool = False

    @property
    def entropy(self) -> int:
        """Number of remaining candidates. Lower = more constrained."""
        return len(self.candidates)

    @property
    def tile_id(self) -> int | None:
        """The catalog index this cell resolved to, or None if unresolved."""
        if self.resolved and self.candidates:
            return self.candidates[0]
        return None

    @property
    def is_contradiction(self) -> bool:
        return not self.candidates

    def resolve_to(self, tile_id: int) -> None:
        """Fix this cell to a single candidate."""
        self.candidates = [tile_id]
        self.resolved = True

    def constrain_to(self, allowed: set[int] | frozenset[int]) -> bool:
        """
        Keep only the candidates in `allowed`.

        Returns True if the cell lost candidates.
        """
        old_count = len(self.candidates)
        self.candidates = [c for c in self.candidates if c in allowed]
        return len(self.candidates) < old_count

    def copy(self) -> SolverCell:
        return SolverCell(self.row, self.col, list(self.candidates), self.resolved)


class GridStatus(NamedTuple):
    """Summary used by the solve loop at the top of each iteration."""
    all_resolved: bool
    contradiction: bool


class SolverGrid:
    """
    The 2D grid of solver cells.

    Initially every cell may be any of the catalog's orientations.
    """

    def __init__(self, rows: int, cols: int, catalog_size: int):
        """
        Create a grid with all cells in maximum superposition.

        Args:
            rows: Number of cells vertically
            cols: Number of cells horizontally
            catalog_size: Number of orientations K; candidates are 0..K-1
        """
        if rows < 1 or cols < 1:
            raise ValueError(f"grid must be at least 1x1, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.catalog_size = catalog_size

        self.cells: list[list[SolverCell]] = [
            [
                SolverCell(row=r, col=c, candidates=list(range(catalog_size)))
                for c in range(cols)
            ]
            for r in range(rows)
        ]

    def get_cell(self, row: int, col: int) -> SolverCell | None:
        """Get cell at position, or None if out of bounds."""
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return self.cells[row][col]
        return None

    def __getitem__(self, pos: tuple[int, int]) -> SolverCell:
        row, col = pos
        return self.cells[row][col]

    def neighbors(self, row: int, col: int) -> Iterator[tuple[SolverCell, Side]]:
        """
        Yield all in-bounds neighbours of a cell with their sides.

        The side is FROM the given cell TO the neighbour, e.g.
        (neighbour, Side.RIGHT) means the neighbour is to the right.
        """
        for side in Side:
            drow, dcol = side.offset
            neighbor = self.get_cell(row + drow, col + dcol)
            if neighbor is not None:
                yield neighbor, side

    def select_next(self) -> tuple[int, int] | None:
        """
        Find the unresolved cell with the fewest candidates.

        Ties go to the first cell in row-major order. Returns None when
        every cell is resolved.
        """
        best: SolverCell | None = None
        for cell in self.all_cells():
            if cell.resolved:
                continue
            if best is None or cell.entropy < best.entropy:
                best = cell
                if best.entropy == 0:
                    break  # can't do better than a contradiction
        if best is None:
            return None
        return best.row, best.col

    def status(self) -> GridStatus:
        """Check for completion and for contradictions in one pass."""
        all_resolved = True
        for cell in self.all_cells():
            if not cell.candidates:
                return GridStatus(all_resolved=False, contradiction=True)
            if not cell.resolved:
                all_resolved = False
        return GridStatus(all_resolved=all_resolved, contradiction=False)

    def resolved_count(self) -> int:
        return sum(1 for cell in self.all_cells() if cell.resolved)

    def all_cells(self) -> Iterator[SolverCell]:
        """Iterate over all cells in row-major order."""
        for row in self.cells:
            yield from row

    def copy(self) -> SolverGrid:
        """Deep copy, used for backtracking snapshots."""
        clone = SolverGrid.__new__(SolverGrid)
        clone.rows = self.rows
        clone.cols = self.cols
        clone.catalog_size = self.catalog_size
        clone.cells = [[cell.copy() for cell in row] for row in self.cells]
        return clone

    def restore(self, snapshot: SolverGrid) -> None:
        """Overwrite this grid's state with a snapshot's, in place."""
        if (snapshot.rows, snapshot.cols) != (self.rows, self.cols):
            raise ValueError("snapshot has different dimensions")
        self.cells = [[cell.copy() for cell in row] for row in snapshot.cells]

    def resolved_ids(self) -> list[list[int | None]]:
        """Catalog index per cell, None where unresolved."""
        return [[cell.tile_id for cell in row] for row in self.cells]

    def __repr__(self) -> str:
        return (
            f"SolverGrid({self.rows}x{self.cols}, "
            f"{self.resolved_count()}/{self.rows * self.cols} resolved)"
        )
