"""Tests for tilewave.wfc.edges."""

import pytest

from tilewave.domain import InvalidTileError, Side, TileOrientation, TilePattern
from tilewave.wfc import CompatibilityTable, edges_compatible, expand_catalog, get_edge, tile_edges

NUMBERED = ((1, 2, 3), (4, 5, 6), (7, 8, 9))


class TestGetEdge:
    """Tests for edge extraction."""

    def test_top(self):
        assert get_edge(NUMBERED, "top") == (1, 2, 3)

    def test_bottom(self):
        assert get_edge(NUMBERED, "bottom") == (7, 8, 9)

    def test_left(self):
        assert get_edge(NUMBERED, "left") == (1, 4, 7)

    def test_right(self):
        assert get_edge(NUMBERED, "right") == (3, 6, 9)

    def test_accepts_side_enum_and_tiles(self):
        tile = TileOrientation(grid=NUMBERED)
        assert get_edge(tile, Side.RIGHT) == (3, 6, 9)

    def test_top_reversed_is_not_bottom(self):
        assert tuple(reversed(get_edge(NUMBERED, "top"))) != get_edge(NUMBERED, "bottom")

    def test_corner_tile_edges_all_match(self, corner_tile):
        expected = (True, False, False, False, True)
        edges = tile_edges(corner_tile)
        assert set(edges) == set(Side)
        for side in Side:
            assert edges[side] == expected

    def test_blank_tile_edges(self, blank_tile):
        for side in Side:
            assert get_edge(blank_tile, side) == (False,) * 5

    def test_non_square_rectangle_is_fine(self):
        assert get_edge(((1, 2, 3), (4, 5, 6)), "left") == (1, 4)

    def test_invalid_side(self):
        with pytest.raises(ValueError):
            get_edge(NUMBERED, "middle")

    def test_empty_grid(self):
        with pytest.raises(InvalidTileError):
            get_edge(TilePattern(grid=()), "top")

    def test_ragged_grid(self):
        with pytest.raises(InvalidTileError):
            get_edge(((1, 2), (3,)), "right")


class TestEdgesCompatible:
    """Tests for the compatibility check."""

    tile_a = TileOrientation(grid=NUMBERED)
    tile_b = TileOrientation(grid=((3, 10, 20), (6, 11, 21), (9, 12, 22)))

    def test_right_of_a_matches_left_of_b(self):
        assert edges_compatible(self.tile_a, self.tile_b, "right")

    def test_incompatible(self):
        other = TileOrientation(grid=((0, 10, 20), (0, 11, 21), (0, 12, 22)))
        assert not edges_compatible(self.tile_a, other, "right")

    def test_pre_extracted_edges(self):
        assert edges_compatible([3, 6, 9], [3, 6, 9], "right")
        assert not edges_compatible([3, 6, 9], [9, 6, 3], "right")

    def test_mixed_tile_and_edge(self):
        assert edges_compatible(self.tile_a, (3, 6, 9), Side.RIGHT)
        assert edges_compatible((1, 4, 7), self.tile_b, Side.LEFT) is False

    def test_same_as_fresh_extraction(self, pipe_catalog):
        for a in pipe_catalog:
            for b in pipe_catalog:
                for side in Side:
                    fresh = edges_compatible(a, b, side)
                    extracted = edges_compatible(
                        get_edge(a, side), get_edge(b, side.opposite), side
                    )
                    assert fresh == extracted

    def test_length_mismatch_is_incompatible(self):
        assert not edges_compatible((1, 2), (1, 2, 3), "top")

    def test_symmetry(self, pipe_catalog):
        for a in pipe_catalog:
            for b in pipe_catalog:
                assert edges_compatible(a, b, "right") == edges_compatible(b, a, "left")
                assert edges_compatible(a, b, "bottom") == edges_compatible(b, a, "top")

    def test_invalid_side(self):
        with pytest.raises(ValueError):
            edges_compatible((1,), (1,), "up")


class TestCompatibilityTable:
    """Tests for the precomputed table."""

    def test_agrees_with_edges_compatible(self, pipe_catalog):
        table = CompatibilityTable(pipe_catalog)
        assert len(table) == len(pipe_catalog)
        for i, a in enumerate(pipe_catalog):
            for j, b in enumerate(pipe_catalog):
                for side in Side:
                    assert table.compatible(i, j, side) == edges_compatible(a, b, side)
                    assert (j in table.allowed(i, side)) == edges_compatible(a, b, side)

    def test_allowed_for_any_is_union(self, pipe_catalog):
        table = CompatibilityTable(pipe_catalog)
        expected = table.allowed(1, Side.TOP) | table.allowed(2, Side.TOP)
        assert table.allowed_for_any([1, 2], Side.TOP) == expected

    def test_self_incompatible_tile(self):
        catalog = expand_catalog([TilePattern(grid=((True, False), (False, False)))])
        table = CompatibilityTable(catalog)
        for side in Side:
            assert table.allowed(0, side) == frozenset()

    def test_empty_catalog(self):
        table = CompatibilityTable([])
        assert len(table) == 0
        assert table.allowed_for_any([], Side.LEFT) == set()
