"""Shared pytest fixtures for tilewave tests."""

import logging
import random
import tempfile
from pathlib import Path
from typing import Callable

import pytest

from tilewave.domain import TilePattern, TileOrientation
from tilewave.wfc import expand_catalog


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class FixedRandom(random.Random):
    """A random source whose random() always returns the same value."""

    def __init__(self, value: float = 0.0):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def parse_rows(rows: list[str]) -> tuple[tuple[bool, ...], ...]:
    """Turn ["#..", ".#."] into a boolean matrix."""
    return tuple(tuple(ch == "#" for ch in row) for row in rows)


# =============================================================================
# Tiles
# =============================================================================

@pytest.fixture
def make_tile() -> Callable[..., TilePattern]:
    """Build a TilePattern from "#"/"." row strings."""
    def _make(rows: list[str], **kwargs) -> TilePattern:
        return TilePattern(grid=parse_rows(rows), **kwargs)
    return _make


@pytest.fixture
def blank_tile() -> TilePattern:
    """A 5x5 all-empty tile, no rotation or mirror."""
    return TilePattern.blank(5)


@pytest.fixture
def corner_tile(make_tile) -> TilePattern:
    """A 5x5 tile with only its four corners filled."""
    return make_tile([
        "#...#",
        ".....",
        ".....",
        ".....",
        "#...#",
    ])


@pytest.fixture
def pipe_tiles(make_tile) -> list[TilePattern]:
    """
    Pipe pieces whose edges are either "..." or ".#.".

    With rotation they cover every open/closed combination of the four
    sides, so a solve can never reach a contradiction.
    """
    return [
        make_tile(["...", "...", "..."], weight=4),
        make_tile([".#.", ".#.", "..."], rotation_enabled=True),
        make_tile([".#.", ".#.", ".#."], rotation_enabled=True, weight=2),
        make_tile([".#.", ".##", "..."], rotation_enabled=True),
        make_tile([".#.", "###", "..."], rotation_enabled=True),
        make_tile([".#.", "###", ".#."]),
    ]


@pytest.fixture
def pipe_catalog(pipe_tiles) -> list[TileOrientation]:
    return expand_catalog(pipe_tiles)


@pytest.fixture
def dead_end_catalog() -> list[TileOrientation]:
    """
    Two orientations where the first can have nothing on its right.

    0: right edge (2, 4) matches no left edge
    1: every edge is (5, 5), so it only fits next to itself
    """
    return [
        TileOrientation(grid=((1, 2), (3, 4))),
        TileOrientation(grid=((5, 5), (5, 5))),
    ]


@pytest.fixture
def rng() -> random.Random:
    return random.Random(12345)


@pytest.fixture
def fixed_random() -> type[FixedRandom]:
    """FixedRandom(value): a rng that always draws `value`."""
    return FixedRandom


# =============================================================================
# Filesystem
# =============================================================================

@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="tilewave_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers setup_logging attached, so none outlive their test's streams."""
    yield
    tilewave_logger = logging.getLogger("tilewave")
    for handler in tilewave_logger.handlers:
        handler.close()
    tilewave_logger.handlers.clear()
