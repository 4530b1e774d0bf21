"""Tests for geoschem/geoprocessor: projection and quantization."""

from __future__ import annotations

import pytest

from geoschem.geoprocessor.projection import GeoProjector
from geoschem.geoprocessor.quantize import (
    BASELINE_ELEVATION,
    quantize_contours,
    working_elevation,
)


def identity(lon, lat):
    return lon, lat


class TestWorkingElevation:
    def test_consistent_places_one_below(self):
        assert working_elevation(120, True) == 119

    def test_inconsistent_uses_baseline(self):
        assert working_elevation(120, False) == BASELINE_ELEVATION == 0


class TestQuantize:
    def test_floor_on_both_axes(self):
        out = quantize_contours({10: [[(1.7, -2.2), (3.0, 4.9)]]}, identity)
        assert out == {9: [[(1, -3), (3, 4)]]}

    def test_floor_not_round(self):
        out = quantize_contours({1: [[(0.99, -0.01)]]}, identity)
        assert out == {0: [[(0, -1)]]}

    def test_baseline_collapses_levels(self):
        out = quantize_contours(
            {10: [[(0.0, 0.0)]], 20: [[(5.0, 5.0)]]}, identity, consistent_elevation=False
        )
        assert out == {0: [[(0, 0)], [(5, 5)]]}

    def test_empty_lines_skipped(self):
        out = quantize_contours({3: [[], [(2.5, 2.5)]]}, identity)
        assert out == {2: [[(2, 2)]]}

    def test_uses_projector(self):
        out = quantize_contours({1: [[(1.0, 2.0)]]}, lambda lon, lat: (lon * 10.5, lat * -3.0))
        assert out == {0: [[(10, -6)]]}


class TestGeoProjector:
    def test_origin_maps_to_zero(self):
        x, z = GeoProjector()(0.0, 0.0)
        assert x == pytest.approx(0.0, abs=1e-6)
        assert z == pytest.approx(0.0, abs=1e-6)

    def test_z_grows_southward(self):
        proj = GeoProjector()
        _, z_north = proj(0.0, 1.0)
        _, z_south = proj(0.0, -1.0)
        assert z_north < 0 < z_south

    def test_one_degree_of_longitude(self):
        x, _ = GeoProjector()(1.0, 0.0)
        assert x == pytest.approx(111319.49, rel=1e-4)

    def test_project_many_matches_scalar(self):
        proj = GeoProjector()
        many = proj.project_many([0.5, 1.0], [0.25, -0.5])
        for (lon, lat), row in zip([(0.5, 0.25), (1.0, -0.5)], many):
            assert tuple(row) == pytest.approx(proj(lon, lat))
