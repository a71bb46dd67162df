"""
Wave Function Collapse solver.

This is the heart of WFC - the loop that observes (collapses) cells and
propagates constraints until the entire grid is determined.

The algorithm, one iteration at a time:
1. Check the grid: finished, or holding a contradiction?
2. On a contradiction, undo the most recent collapse and rule out the
   candidate it tried (backtracking)
3. Otherwise find the cell with the fewest candidates
4. Collapse it to one orientation (weighted random choice)
5. Propagate: prune neighbours that no longer fit, spreading outward

Both the iteration count and the number of backtracks are bounded. Running
out of either is a normal outcome: the run ends ABORTED and the caller gets
the grid as it stood.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, Sequence

from tilewave.config import SolveOptions
from tilewave.domain import DEFAULT_WEIGHT, TileOrientation
from tilewave.logging_config import log_solve

from .edges import CompatibilityTable
from .grid import SolverGrid

logger = logging.getLogger(__name__)


class SolveStatus(Enum):
    """Where a solve run stands."""
    RUNNING = "running"   # More steps needed
    DONE = "done"         # Every cell resolved, no contradictions
    ABORTED = "aborted"   # Gave up; see AbortReason


class AbortReason(Enum):
    """Why a run ended ABORTED."""
    CONTRADICTION_EXHAUSTED = "contradiction_exhausted"      # No history left, or backtrack budget spent
    ITERATION_BUDGET_EXCEEDED = "iteration_budget_exceeded"  # Hit max_iterations first
    CONTRADICTION = "contradiction"                          # Best-effort mode: first contradiction is final
    CANCELLED = "cancelled"                                  # Cancellation flag was set


class CancelFlag(Protocol):
    def is_set(self) -> bool: ...


ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class HistoryRecord:
    """
    Everything needed to undo one collapse.

    snapshot is a deep copy of the grid taken just before the collapse;
    original_candidates is what the cell could be at that moment and
    tried is the id the collapse picked.
    """
    snapshot: SolverGrid
    row: int
    col: int
    original_candidates: tuple[int, ...]
    tried: int


@dataclass(frozen=True)
class SolveResult:
    """Outcome of a solve run. The grid may be partial when ABORTED."""
    grid: SolverGrid
    status: SolveStatus
    reason: AbortReason | None
    iterations: int
    backtracks: int

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.DONE

    def resolved_ids(self) -> list[list[int | None]]:
        return self.grid.resolved_ids()


def weighted_choice(
    candidates: Sequence[int],
    catalog: Sequence[TileOrientation],
    rng: random.Random,
) -> int:
    """
    Pick a candidate with probability proportional to its weight.

    Cumulative draw: take r uniform in [0, total) and walk the candidates
    subtracting weights until r drops to zero or below.
    """
    if not candidates:
        raise ValueError("cannot choose from an empty candidate set")

    weights = [catalog[c].weight or DEFAULT_WEIGHT for c in candidates]
    r = rng.random() * sum(weights)
    for candidate, weight in zip(candidates, weights):
        r -= weight
        if r <= 0:
            return candidate
    # Float round-off can leave r a hair above zero
    return candidates[-1]


def collapse_cell(
    grid: SolverGrid,
    catalog: Sequence[TileOrientation],
    row: int,
    col: int,
    rng: random.Random,
) -> int:
    """
    Resolve one cell to a single weighted-random candidate.

    Returns the chosen id so the caller can record and propagate it.
    """
    cell = grid[row, col]
    if cell.resolved:
        raise ValueError(f"cell ({row}, {col}) is already resolved")
    chosen = weighted_choice(cell.candidates, catalog, rng)
    cell.resolve_to(chosen)
    return chosen


def propagate(grid: SolverGrid, table: CompatibilityTable, row: int, col: int) -> int:
    """
    Prune neighbours after the cell at (row, col) was resolved.

    Works through an explicit FIFO worklist instead of recursion. Each
    unresolved neighbour keeps only the candidates that fit at least one of
    the source cell's remaining candidates on the facing side. A neighbour
    that lost candidates is queued so the wave keeps spreading.

    A neighbour pruned to nothing stays empty and is not queued. That is a
    contradiction, and detecting it is the solve loop's job.

    Returns the number of times a neighbour shrank.
    """
    start = grid[row, col]
    if not start.resolved:
        raise ValueError(f"cannot propagate from unresolved cell ({row}, {col})")

    queue: deque = deque([start])
    in_queue: set[tuple[int, int]] = {(row, col)}
    shrunk = 0

    while queue:
        cell = queue.popleft()
        in_queue.discard((cell.row, cell.col))

        for neighbor, side in grid.neighbors(cell.row, cell.col):
            if neighbor.resolved:
                continue

            allowed = table.allowed_for_any(cell.candidates, side)
            if not neighbor.constrain_to(allowed):
                continue

            shrunk += 1
            if not neighbor.candidates:
                continue

            if (neighbor.row, neighbor.col) not in in_queue:
                queue.append(neighbor)
                in_queue.add((neighbor.row, neighbor.col))

    return shrunk


class WFCSolver:
    """
    The backtracking WFC controller.

    Usage:
        solver = WFCSolver(catalog, rows=10, cols=10)
        while solver.step() is SolveStatus.RUNNING:
            pass
        result = solver.result()

    Or for bulk solving:
        result = solver.solve()

    With backtracking=False the solver runs the best-effort variant: no
    history is kept and the first contradiction ends the run.
    """

    def __init__(
        self,
        catalog: Sequence[TileOrientation],
        rows: int,
        cols: int,
        options: SolveOptions | None = None,
        rng: random.Random | None = None,
        cancel: CancelFlag | None = None,
        progress_callback: ProgressCallback | None = None,
        backtracking: bool = True,
    ):
        """
        Initialize the solver with a fresh, fully unconstrained grid.

        Args:
            catalog: Orientations from expand_catalog; index = candidate id
            rows: Grid height in cells
            cols: Grid width in cells
            options: Iteration/backtrack budgets and seed
            rng: Random source for the weighted draw. Defaults to
                 random.Random(options.rng_seed)
            cancel: Checked at the top of every iteration (anything with is_set())
            progress_callback: Optional callback(resolved_cells, total_cells)
            backtracking: False for the best-effort, no-retry mode
        """
        self.catalog = list(catalog)
        self.options = options or SolveOptions()
        self.rng = rng if rng is not None else random.Random(self.options.rng_seed)
        self.cancel = cancel
        self.progress_callback = progress_callback
        self.backtracking = backtracking

        self.table = CompatibilityTable(self.catalog)
        self.grid = SolverGrid(rows, cols, len(self.catalog))

        self.iterations = 0
        self.backtracks = 0
        self.status = SolveStatus.RUNNING
        self.reason: AbortReason | None = None
        self.history: list[HistoryRecord] = []

    @property
    def total_cells(self) -> int:
        return self.grid.rows * self.grid.cols

    def step(self) -> SolveStatus:
        """
        Run one iteration of the solve loop.

        Returns the status after this iteration; RUNNING means call again.
        """
        if self.status is not SolveStatus.RUNNING:
            return self.status

        if self.cancel is not None and self.cancel.is_set():
            return self._abort(AbortReason.CANCELLED)

        state = self.grid.status()
        if state.all_resolved and not state.contradiction:
            return self._finish()

        if self.iterations >= self.options.max_iterations:
            return self._abort(AbortReason.ITERATION_BUDGET_EXCEEDED)
        self.iterations += 1

        if state.contradiction:
            return self._handle_contradiction()

        position = self.grid.select_next()
        if position is None:
            return self._finish()

        row, col = position
        cell = self.grid[position]
        if not cell.candidates:
            return self._handle_contradiction()

        snapshot = self.grid.copy() if self.backtracking else None
        original = tuple(cell.candidates)

        chosen = collapse_cell(self.grid, self.catalog, row, col, self.rng)
        if snapshot is not None:
            self.history.append(HistoryRecord(snapshot, row, col, original, chosen))

        shrunk = propagate(self.grid, self.table, row, col)
        log_solve(
            logger, self.iterations, "COLLAPSE",
            f"({row}, {col}) -> {chosen} of {len(original)} | pruned {shrunk}",
        )

        if self.progress_callback is not None:
            self.progress_callback(self.grid.resolved_count(), self.total_cells)

        return SolveStatus.RUNNING

    def _handle_contradiction(self) -> SolveStatus:
        """Undo the latest collapse, or give up."""
        if not self.backtracking:
            return self._abort(AbortReason.CONTRADICTION)

        if not self.history or self.backtracks >= self.options.max_backtracks:
            return self._abort(AbortReason.CONTRADICTION_EXHAUSTED)

        record = self.history.pop()
        self.grid.restore(record.snapshot)

        # The restored cell still holds its full pre-collapse set; rebuild it
        # from the recorded set so the failed choice is excluded.
        remaining = [c for c in record.original_candidates if c != record.tried]
        cell = self.grid[record.row, record.col]
        cell.candidates = remaining
        cell.resolved = False

        self.backtracks += 1
        logger.info(
            f"ITER {self.iterations:05d} | BACKTRACK | ({record.row}, {record.col}) "
            f"ruled out {record.tried}, {len(remaining)} left "
            f"(backtrack {self.backtracks}/{self.options.max_backtracks})"
        )
        return SolveStatus.RUNNING

    def _finish(self) -> SolveStatus:
        self.status = SolveStatus.DONE
        logger.info(
            f"Solved {self.grid.rows}x{self.grid.cols} in {self.iterations} iterations, "
            f"{self.backtracks} backtracks"
        )
        return self.status

    def _abort(self, reason: AbortReason) -> SolveStatus:
        self.status = SolveStatus.ABORTED
        self.reason = reason
        logger.warning(
            f"Aborted ({reason.value}) after {self.iterations} iterations, "
            f"{self.backtracks} backtracks: "
            f"{self.grid.resolved_count()}/{self.total_cells} cells resolved"
        )
        return self.status

    def solve(self) -> SolveResult:
        """Run the loop until DONE or ABORTED."""
        while self.step() is SolveStatus.RUNNING:
            pass
        return self.result()

    def result(self) -> SolveResult:
        return SolveResult(
            grid=self.grid,
            status=self.status,
            reason=self.reason,
            iterations=self.iterations,
            backtracks=self.backtracks,
        )


def solve(
    catalog: Sequence[TileOrientation],
    rows: int,
    cols: int,
    options: SolveOptions | None = None,
    *,
    rng: random.Random | None = None,
    cancel: CancelFlag | None = None,
    progress_callback: ProgressCallback | None = None,
) -> SolveResult:
    """
    Fill a rows x cols grid from the catalog, backtracking on contradictions.

    Never raises for a run that fails to converge; inspect result.status.
    """
    solver = WFCSolver(
        catalog, rows, cols, options,
        rng=rng, cancel=cancel, progress_callback=progress_callback,
    )
    return solver.solve()


def solve_best_effort(
    catalog: Sequence[TileOrientation],
    rows: int,
    cols: int,
    options: SolveOptions | None = None,
    *,
    rng: random.Random | None = None,
    cancel: CancelFlag | None = None,
    progress_callback: ProgressCallback | None = None,
) -> SolveResult:
    """
    Single pass without backtracking.

    Stops for good at the first contradiction, leaving the grid as it was
    at that point (reason CONTRADICTION).
    """
    solver = WFCSolver(
        catalog, rows, cols, options,
        rng=rng, cancel=cancel, progress_callback=progress_callback,
        backtracking=False,
    )
    return solver.solve()
