"""
SolveRunner - Runs solves off the caller's thread.

A solve can take a while on large grids or catalogs. Interactive callers
(a UI, an async service) hand it to the runner and get a future back; the
solve itself stays single-threaded and owns its grid for its whole life.

Cancellation is cooperative: the solver checks the token at the top of each
iteration, between mutations, so an aborted grid is never half-propagated.
"""

from __future__ import annotations

import asyncio
import logging
import random
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Sequence

from tilewave.config import SolveOptions
from tilewave.domain import TileOrientation
from tilewave.wfc.solver import ProgressCallback, SolveResult, WFCSolver

logger = logging.getLogger(__name__)


class CancelToken:
    """A cancellation flag shared between the caller and a running solve."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def is_set(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class SolveHandle:
    """A submitted solve: its future plus the token that can stop it."""
    future: Future
    token: CancelToken

    def cancel(self) -> None:
        """Ask the solve to stop at its next iteration."""
        self.token.cancel()

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: float | None = None) -> SolveResult:
        return self.future.result(timeout=timeout)


def _run_solve(
    catalog: Sequence[TileOrientation],
    rows: int,
    cols: int,
    options: SolveOptions | None,
    token: CancelToken,
    best_effort: bool,
    rng: random.Random | None,
    progress_callback: ProgressCallback | None,
) -> SolveResult:
    solver = WFCSolver(
        catalog, rows, cols, options,
        rng=rng,
        cancel=token,
        progress_callback=progress_callback,
        backtracking=not best_effort,
    )
    return solver.solve()


class SolveRunner:
    """
    Runs solves one at a time on a dedicated worker thread.

    Usage:
        runner = SolveRunner()
        handle = runner.submit(catalog, 20, 20, on_complete=show)
        ...
        handle.cancel()      # optional, cooperative
        runner.shutdown()
    """

    def __init__(self):
        self._executor: ThreadPoolExecutor | None = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="SolveRunner"
        )

    def submit(
        self,
        catalog: Sequence[TileOrientation],
        rows: int,
        cols: int,
        options: SolveOptions | None = None,
        on_complete: Callable[[SolveResult], None] | None = None,
        *,
        best_effort: bool = False,
        rng: random.Random | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> SolveHandle:
        """
        Queue a solve. Non-blocking.

        on_complete runs on the worker thread with the SolveResult once the
        solve finishes (DONE or ABORTED). It is not called if the solve
        raised; the exception is on the future instead.
        """
        if self._executor is None:
            raise RuntimeError("SolveRunner has been shut down")

        # Validate dimensions here so bad input fails in the caller's thread
        if rows < 1 or cols < 1:
            raise ValueError(f"grid must be at least 1x1, got {rows}x{cols}")

        token = CancelToken()
        future = self._executor.submit(
            _run_solve, list(catalog), rows, cols, options, token,
            best_effort, rng, progress_callback,
        )
        logger.debug(f"Submitted {rows}x{cols} solve over {len(catalog)} orientations")

        if on_complete is not None:
            def _done(f: Future) -> None:
                if f.cancelled():
                    return
                error = f.exception()
                if error is not None:
                    logger.error(f"Solve failed: {error}")
                    return
                on_complete(f.result())

            future.add_done_callback(_done)

        return SolveHandle(future=future, token=token)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work. Pending solves still run unless cancelled."""
        if self._executor is None:
            return
        self._executor.shutdown(wait=wait)
        self._executor = None
        logger.debug("SolveRunner shut down")

    def __enter__(self) -> SolveRunner:
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()


async def solve_async(
    catalog: Sequence[TileOrientation],
    rows: int,
    cols: int,
    options: SolveOptions | None = None,
    *,
    token: CancelToken | None = None,
    best_effort: bool = False,
    rng: random.Random | None = None,
) -> SolveResult:
    """
    Await a solve without blocking the event loop.

    If the awaiting task is cancelled, the token is set so the worker
    thread stops at its next iteration.
    """
    token = token or CancelToken()
    try:
        return await asyncio.to_thread(
            _run_solve, list(catalog), rows, cols, options, token,
            best_effort, rng, None,
        )
    except asyncio.CancelledError:
        token.cancel()
        raise
