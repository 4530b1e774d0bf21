"""
Readers turning GeoJSON / KML documents into elevation-bucketed contour maps.

The result maps an integer elevation to a list of polylines of (lon, lat)
points. Polygons contribute their exterior and every interior ring, points
contribute one-point polylines, multi-part geometries are flattened.
"""

from __future__ import annotations

import json
import math
import os
import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional, Sequence

import geopandas as gpd
import pandas as pd
from shapely.geometry.base import BaseGeometry

from ..errors import UnsupportedOptionsError
from ..models import ContourMap
from ..utils.logging import get_logger

logger = get_logger(__name__)

# GeoJSON property names carrying the elevation (QGIS contour exports)
ELEVATION_PROPERTIES = ("ELEV", "elevation", "elevationStart")
# KML SimpleData names, compared case-insensitively
KML_ELEVATION_NAMES = ("elev", "elevation", "elevationstart")


def _parse_elevation(value) -> Optional[int]:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    try:
        return int(float(str(value).strip()))
    except ValueError:
        return None


def define_elevation(value, first_point: Optional[Sequence[float]]) -> int:
    """Elevation from metadata, else the rounded third coordinate, else 0."""
    elevation = _parse_elevation(value)
    if elevation is not None:
        return elevation
    if first_point is not None and len(first_point) > 2 and first_point[2] is not None:
        return int(math.floor(float(first_point[2]) + 0.5))
    return 0


def _flatten_geometry(geom: Optional[BaseGeometry]) -> List[List[tuple]]:
    """Split a shapely geometry into coordinate sequences (z kept if present)."""
    if geom is None or geom.is_empty:
        return []
    kind = geom.geom_type
    if kind == "Point":
        return [[tuple(geom.coords[0])]]
    if kind in ("LineString", "LinearRing"):
        return [[tuple(c) for c in geom.coords]]
    if kind == "Polygon":
        rings = [geom.exterior] + list(geom.interiors)
        return [[tuple(c) for c in ring.coords] for ring in rings]
    if hasattr(geom, "geoms"):
        lines: List[List[tuple]] = []
        for part in geom.geoms:
            lines.extend(_flatten_geometry(part))
        return lines
    logger.warning("Skipping unsupported geometry type %s", kind)
    return []


def _add_lines(contours: ContourMap, elevation: int, lines: Iterable[List[tuple]]) -> None:
    bucket = contours.setdefault(elevation, [])
    for line in lines:
        if line:
            bucket.append([(float(p[0]), float(p[1])) for p in line])


def _features_from_document(data) -> List[dict]:
    kind = data.get("type") if isinstance(data, dict) else None
    if kind == "FeatureCollection":
        features = list(data.get("features") or [])
    elif kind == "Feature":
        features = [data]
    elif kind is not None:
        features = [{"type": "Feature", "geometry": data, "properties": {}}]
    else:
        raise UnsupportedOptionsError("GeoJSON document has no 'type'")

    cleaned = []
    for feature in features:
        if not feature.get("geometry") or not feature["geometry"].get("coordinates", True):
            continue
        if feature.get("properties") is None:
            feature = {**feature, "properties": {}}
        cleaned.append(feature)
    return cleaned


def parse_geojson(text: str) -> ContourMap:
    """Parse a GeoJSON document into a contour map."""
    features = _features_from_document(json.loads(text))
    contours: ContourMap = {}
    if not features:
        return contours

    gdf = gpd.GeoDataFrame.from_features(features)
    columns = [c for c in ELEVATION_PROPERTIES if c in gdf.columns]
    for _, row in gdf.iterrows():
        lines = _flatten_geometry(row.geometry)
        if not lines:
            continue
        value = None
        for column in columns:
            value = _parse_elevation(row[column])
            if value is not None:
                break
        elevation = define_elevation(value, lines[0][0])
        _add_lines(contours, elevation, lines)

    logger.debug("GeoJSON: %d feature(s) into %d elevation level(s)", len(gdf), len(contours))
    return contours


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> List[ET.Element]:
    return [el for el in element.iter() if _local(el.tag) == name]


def _parse_coordinates(text: Optional[str]) -> List[tuple]:
    points = []
    for chunk in (text or "").split():
        values = [float(v) for v in chunk.split(",") if v != ""]
        if len(values) >= 2:
            points.append(tuple(values))
    return points


def _kml_elevation_value(placemark: ET.Element) -> Optional[str]:
    for data in _children(placemark, "SimpleData"):
        if (data.get("name") or "").lower() in KML_ELEVATION_NAMES:
            return data.text
    return None


def _kml_lines(geometry: ET.Element) -> List[List[tuple]]:
    kind = _local(geometry.tag)
    if kind in ("LineString", "Point", "LinearRing"):
        coords = _children(geometry, "coordinates")
        points = _parse_coordinates(coords[0].text) if coords else []
        return [points] if points else []
    if kind == "Polygon":
        lines = []
        for boundary in ("outerBoundaryIs", "innerBoundaryIs"):
            for element in _children(geometry, boundary):
                coords = _children(element, "coordinates")
                points = _parse_coordinates(coords[0].text) if coords else []
                if points:
                    lines.append(points)
        return lines
    return []


def parse_kml(text: str) -> ContourMap:
    """Parse a KML document into a contour map."""
    root = ET.fromstring(text.encode("utf-8") if isinstance(text, str) else text)
    contours: ContourMap = {}
    n_placemarks = 0
    for placemark in _children(root, "Placemark"):
        n_placemarks += 1
        value = _kml_elevation_value(placemark)
        # Polygon rings are handled by their Polygon; skip nested LinearRings
        geometries = [
            el for el in placemark.iter()
            if _local(el.tag) in ("LineString", "Point", "Polygon")
        ]
        for geometry in geometries:
            lines = _kml_lines(geometry)
            if not lines:
                continue
            elevation = define_elevation(value, lines[0][0])
            _add_lines(contours, elevation, lines)

    logger.debug("KML: %d placemark(s) into %d elevation level(s)", n_placemarks, len(contours))
    return contours


def load_contours(path: str) -> ContourMap:
    """Read a ``.kml``, ``.geojson`` or ``.json`` file into a contour map."""
    suffix = os.path.splitext(path)[1].lower()
    if suffix == ".kml":
        parser = parse_kml
    elif suffix in (".geojson", ".json"):
        parser = parse_geojson
    else:
        raise UnsupportedOptionsError(
            f"Only .kml and .geojson files are supported, got {os.path.basename(path)}"
        )
    logger.info("Reading %s", path)
    with open(path, "r", encoding="utf-8") as f:
        return parser(f.read())


def polyline_count(contours: ContourMap) -> int:
    return sum(len(lines) for lines in contours.values())
