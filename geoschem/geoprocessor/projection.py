"""
Geographic to planar projection.

The quantizer accepts any callable ``(lon, lat) -> (x, z)``; ``GeoProjector``
is the default one, backed by a pyproj transformer from WGS84.
"""

from __future__ import annotations

from typing import Callable, Sequence, Tuple

import numpy as np
from pyproj import Transformer

Projector = Callable[[float, float], Tuple[float, float]]

WGS84 = "EPSG:4326"


class GeoProjector:
    """Project (lon, lat) to block coordinates ``(x, z)``.

    ``x`` is the easting and ``z`` the negated northing of ``crs``, so Z
    grows southward like the voxel world. ``scale`` converts CRS units to
    blocks (1 block per metre by default).
    """

    def __init__(self, crs: str = "EPSG:3857", scale: float = 1.0) -> None:
        self.crs = crs
        self.scale = float(scale)
        self._transformer = Transformer.from_crs(WGS84, crs, always_xy=True)

    def __repr__(self) -> str:
        return f"GeoProjector(crs={self.crs!r}, scale={self.scale})"

    def __call__(self, lon: float, lat: float) -> Tuple[float, float]:
        east, north = self._transformer.transform(lon, lat)
        return east * self.scale, -north * self.scale

    def project_many(self, lons: Sequence[float], lats: Sequence[float]) -> np.ndarray:
        """Vectorized variant returning an ``(N, 2)`` array of ``(x, z)``."""
        east, north = self._transformer.transform(
            np.asarray(lons, dtype=float), np.asarray(lats, dtype=float)
        )
        return np.column_stack((np.asarray(east) * self.scale, -np.asarray(north) * self.scale))
