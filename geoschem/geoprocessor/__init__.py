"""
Geoprocessing helpers: reading contour files, projecting and quantizing
coordinates onto the integer block grid.

Axis contract:
- Projected points are ``(x, z)`` with X growing east and Z growing south.
- Elevation keys are integer block levels.
"""

from .projection import GeoProjector, Projector
from .quantize import quantize_contours, working_elevation, BASELINE_ELEVATION
from .io import parse_geojson, parse_kml, load_contours, define_elevation

__all__ = [
    "GeoProjector",
    "Projector",
    "quantize_contours",
    "working_elevation",
    "BASELINE_ELEVATION",
    "parse_geojson",
    "parse_kml",
    "load_contours",
    "define_elevation",
]
