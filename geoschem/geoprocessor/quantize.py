"""
Projection and integer quantization of contour maps.

Coordinates are floored (not rounded) on both axes after projection; grid
rasterization later rounds, and the two steps must stay distinct.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np

from ..models import ContourMap
from ..utils.logging import get_logger
from .projection import Projector

logger = get_logger(__name__)

BASELINE_ELEVATION = 0


def working_elevation(source_elevation: int, consistent_elevation: bool) -> int:
    """Elevation a contour is bucketed at.

    With elevation consistency a contour sits one level below its nominal
    elevation, so a marker reads correctly when standing on the surface.
    Without it every level collapses onto ``BASELINE_ELEVATION``.
    """
    if consistent_elevation:
        return int(source_elevation) - 1
    return BASELINE_ELEVATION


def _project_line(line, projector: Projector) -> np.ndarray:
    coords = np.asarray([(p[0], p[1]) for p in line], dtype=float).reshape(-1, 2)
    project_many = getattr(projector, "project_many", None)
    if project_many is not None:
        projected = np.asarray(project_many(coords[:, 0], coords[:, 1]), dtype=float)
    else:
        projected = np.asarray([projector(lon, lat) for lon, lat in coords], dtype=float)
    return np.floor(projected.reshape(-1, 2)).astype(np.int64)


def quantize_contours(
    contours: ContourMap,
    projector: Projector,
    consistent_elevation: bool = True,
) -> Dict[int, List[List[Tuple[int, int]]]]:
    """Project every point and floor it to integer ``(x, z)``.

    Returns a new contour map keyed by working elevation. Empty polylines are
    skipped; polyline order within a bucket follows the source order.
    """
    quantized: Dict[int, List[List[Tuple[int, int]]]] = {}
    n_points = 0
    for elevation, lines in contours.items():
        target = working_elevation(elevation, consistent_elevation)
        for line in lines or []:
            if not line:
                continue
            cells = _project_line(line, projector)
            quantized.setdefault(target, []).append([(int(x), int(z)) for x, z in cells])
            n_points += len(cells)

    logger.debug(
        "Quantized %d points into %d elevation level(s)", n_points, len(quantized)
    )
    return quantized
