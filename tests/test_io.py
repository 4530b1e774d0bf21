"""Tests for geoschem/geoprocessor/io.py: GeoJSON and KML readers."""

from __future__ import annotations

import json

import pytest

from geoschem.errors import UnsupportedOptionsError
from geoschem.geoprocessor.io import (
    define_elevation,
    load_contours,
    parse_geojson,
    parse_kml,
    polyline_count,
)


GEOJSON = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {"ELEV": 120},
            "geometry": {"type": "LineString", "coordinates": [[10.0, 20.0], [10.5, 20.5]]},
        },
        {
            "type": "Feature",
            "properties": {"elevation": "130"},
            "geometry": {
                "type": "Polygon",
                "coordinates": [
                    [[0, 0], [4, 0], [4, 4], [0, 4], [0, 0]],
                    [[1, 1], [2, 1], [2, 2], [1, 1]],
                ],
            },
        },
        {
            "type": "Feature",
            "properties": None,
            "geometry": {"type": "Point", "coordinates": [10.0, 20.0, 55.6]},
        },
        {"type": "Feature", "properties": {"ELEV": 1}, "geometry": None},
    ],
}

KML = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Placemark>
      <ExtendedData>
        <SchemaData schemaUrl="#contours">
          <SimpleData name="ELEV">100</SimpleData>
        </SchemaData>
      </ExtendedData>
      <LineString><coordinates>10,20,0 11,21,0</coordinates></LineString>
    </Placemark>
    <Placemark>
      <MultiGeometry>
        <Point><coordinates>12,22,7</coordinates></Point>
        <Polygon>
          <outerBoundaryIs><LinearRing>
            <coordinates>0,0,7 1,0,7 1,1,7 0,0,7</coordinates>
          </LinearRing></outerBoundaryIs>
          <innerBoundaryIs><LinearRing>
            <coordinates>0.2,0.1,7 0.5,0.1,7 0.5,0.4,7 0.2,0.1,7</coordinates>
          </LinearRing></innerBoundaryIs>
        </Polygon>
      </MultiGeometry>
    </Placemark>
  </Document>
</kml>
"""


class TestDefineElevation:
    def test_metadata_first(self):
        assert define_elevation("42", (0.0, 0.0, 9.0)) == 42

    def test_decimal_metadata_truncated(self):
        assert define_elevation("42.8", None) == 42

    def test_third_coordinate_rounded(self):
        assert define_elevation(None, (0.0, 0.0, 55.5)) == 56

    def test_unparsable_falls_back(self):
        assert define_elevation("n/a", (0.0, 0.0)) == 0


class TestGeoJSON:
    def test_levels(self):
        contours = parse_geojson(json.dumps(GEOJSON))
        assert sorted(contours) == [56, 120, 130]

    def test_line_points_lon_lat(self):
        contours = parse_geojson(json.dumps(GEOJSON))
        assert contours[120] == [[(10.0, 20.0), (10.5, 20.5)]]

    def test_polygon_rings(self):
        contours = parse_geojson(json.dumps(GEOJSON))
        assert len(contours[130]) == 2
        assert contours[130][1][0] == (1.0, 1.0)

    def test_point_is_single_point_line(self):
        contours = parse_geojson(json.dumps(GEOJSON))
        assert contours[56] == [[(10.0, 20.0)]]

    def test_bare_geometry(self):
        doc = {"type": "MultiLineString", "coordinates": [[[0, 0], [1, 1]], [[2, 2], [3, 3]]]}
        contours = parse_geojson(json.dumps(doc))
        assert polyline_count(contours) == 2
        assert list(contours) == [0]

    def test_empty_collection(self):
        assert parse_geojson(json.dumps({"type": "FeatureCollection", "features": []})) == {}

    def test_missing_type(self):
        with pytest.raises(UnsupportedOptionsError):
            parse_geojson(json.dumps({"features": []}))


class TestKML:
    def test_simple_data_elevation(self):
        contours = parse_kml(KML)
        assert contours[100] == [[(10.0, 20.0), (11.0, 21.0)]]

    def test_elevation_from_coordinates(self):
        contours = parse_kml(KML)
        assert len(contours[7]) == 3
        assert contours[7][0] == [(12.0, 22.0)]

    def test_polygon_inner_ring(self):
        contours = parse_kml(KML)
        assert contours[7][2][0] == (0.2, 0.1)


class TestLoadContours:
    def test_geojson_file(self, tmp_path):
        path = tmp_path / "lines.geojson"
        path.write_text(json.dumps(GEOJSON))
        assert sorted(load_contours(str(path))) == [56, 120, 130]

    def test_kml_file(self, tmp_path):
        path = tmp_path / "lines.kml"
        path.write_text(KML)
        assert sorted(load_contours(str(path))) == [7, 100]

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(UnsupportedOptionsError):
            load_contours(str(tmp_path / "lines.shp"))
