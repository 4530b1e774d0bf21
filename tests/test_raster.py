"""Tests for geoschem/generator/raster.py: bounds, line drawing, rasterization."""

from __future__ import annotations

import random

import pytest

from geoschem.errors import EmptyContourMapError, VolumeTooLargeError
from geoschem.generator.raster import bresenham_line, compute_bounds, rasterize_contours


class TestBresenham:
    def test_endpoints_included(self):
        points = bresenham_line(0, 0, 4, 2)
        assert points[0] == (0, 0)
        assert points[-1] == (4, 2)

    def test_reversal_gives_same_cells(self):
        forward = bresenham_line(0, 0, 4, 2)
        backward = bresenham_line(4, 2, 0, 0)
        assert set(forward) == set(backward)
        assert backward == list(reversed(forward))

    def test_steps_are_connected(self):
        points = bresenham_line(-3, 7, 9, -2)
        for (ax, az), (bx, bz) in zip(points, points[1:]):
            assert abs(ax - bx) <= 1 and abs(az - bz) <= 1

    def test_axis_aligned(self):
        assert bresenham_line(0, 0, 3, 0) == [(0, 0), (1, 0), (2, 0), (3, 0)]
        assert bresenham_line(2, 3, 2, 1) == [(2, 3), (2, 2), (2, 1)]

    def test_single_cell(self):
        assert bresenham_line(5, 5, 5, 5) == [(5, 5)]

    def test_random_segments_symmetric(self):
        rng = random.Random(7)
        for _ in range(200):
            a = (rng.randint(-20, 20), rng.randint(-20, 20))
            b = (rng.randint(-20, 20), rng.randint(-20, 20))
            assert set(bresenham_line(*a, *b)) == set(bresenham_line(*b, *a))


class TestBounds:
    def test_extents(self):
        bounds = compute_bounds({3: [[(2, 2)]], 0: [[(0, 0)], [(4, 4)]]})
        assert (bounds.min_x, bounds.min_y, bounds.min_z) == (0, 0, 0)
        assert (bounds.length, bounds.width, bounds.height) == (5, 5, 4)

    def test_x_is_length_z_is_width(self):
        bounds = compute_bounds({0: [[(10, 100), (19, 102)]]})
        assert bounds.length == 10
        assert bounds.width == 3
        assert bounds.height == 1

    def test_empty_map(self):
        with pytest.raises(EmptyContourMapError):
            compute_bounds({})

    def test_map_without_points(self):
        with pytest.raises(EmptyContourMapError):
            compute_bounds({5: [[]], 6: []})

    def test_levels_without_points_ignored(self):
        bounds = compute_bounds({5: [[(0, 0)]], 900: []})
        assert bounds.height == 1

    def test_oversized_plane_rejected(self):
        with pytest.raises(VolumeTooLargeError):
            compute_bounds({0: [[(0, 0)], [(39999, 39999)]]})

    def test_too_many_levels_rejected(self):
        with pytest.raises(VolumeTooLargeError):
            compute_bounds({0: [[(0, 0)]], 2500: [[(0, 0)]]})


class TestRasterize:
    def test_single_point(self):
        grid, bounds = rasterize_contours({3: [[(2, 2)]], 0: [[(0, 0)], [(4, 4)]]})
        assert grid.get(2, 2).contour_elevations() == [3]
        assert grid.get(0, 0).contour_elevations() == [0]
        assert grid.get(1, 1) is None
        assert len(grid) == 3

    def test_segment_cells_relative_to_min(self):
        grid, bounds = rasterize_contours({1: [[(10, 20), (14, 22)]]})
        cells = {(x, z) for z, x, _ in grid.occupied()}
        expected = {(x - 10, z - 20) for x, z in bresenham_line(10, 20, 14, 22)}
        assert cells == expected

    def test_polyline_consecutive_pairs(self):
        grid, _ = rasterize_contours({0: [[(0, 0), (2, 0), (2, 2)]]})
        cells = {(x, z) for z, x, _ in grid.occupied()}
        assert cells == {(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)}

    def test_cell_keeps_several_elevations(self):
        grid, _ = rasterize_contours({1: [[(0, 0), (3, 0)]], 4: [[(0, 0), (0, 3)]]})
        assert grid.get(0, 0).contour_elevations() == [1, 4]

    def test_never_outside_grid(self):
        rng = random.Random(11)
        for _ in range(30):
            contours = {}
            for _ in range(rng.randint(1, 4)):
                elev = rng.randint(-5, 5)
                line = [(rng.randint(-500, 500), rng.randint(-500, 500)) for _ in range(rng.randint(1, 5))]
                contours.setdefault(elev, []).append(line)
            grid, bounds = rasterize_contours(contours)
            for z, x, _ in grid.occupied():
                assert 0 <= z < bounds.width
                assert 0 <= x < bounds.length
