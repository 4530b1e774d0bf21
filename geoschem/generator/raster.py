import math
from typing import Dict, List, Sequence, Tuple

from ..errors import EmptyContourMapError
from ..models import Grid, GridBounds, check_volume
from ..utils.logging import get_logger

logger = get_logger(__name__)

QuantizedContours = Dict[int, List[List[Tuple[int, int]]]]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _walk(x1: int, z1: int, x2: int, z2: int) -> List[Tuple[int, int]]:
    points = []
    x, z = x1, z1
    dx = abs(x2 - x1)
    dz = abs(z2 - z1)
    sx = 1 if x1 < x2 else -1
    sz = 1 if z1 < z2 else -1
    err = dx - dz

    while True:
        points.append((x, z))
        if x == x2 and z == z2:
            break
        e2 = 2 * err
        if e2 > -dz:
            err -= dz
            x += sx
        if e2 < dx:
            err += dx
            z += sz
    return points


def bresenham_line(x1: int, z1: int, x2: int, z2: int) -> List[Tuple[int, int]]:
    """Cells of the discrete segment from (x1, z1) to (x2, z2), both included.

    The walk always starts from the lexicographically smaller endpoint, so a
    segment and its reverse cover the same cells; the returned list is
    ordered from the first argument to the second.
    """
    if (x2, z2) < (x1, z1):
        points = _walk(x2, z2, x1, z1)
        points.reverse()
        return points
    return _walk(x1, z1, x2, z2)


def compute_bounds(contours: QuantizedContours) -> GridBounds:
    """Integer bounding box of every point, checked against the size limits."""
    min_x = min_z = min_y = math.inf
    max_x = max_z = max_y = -math.inf
    for elevation, lines in contours.items():
        has_points = False
        for line in lines or []:
            for x, z in line:
                has_points = True
                min_x = min(min_x, x)
                max_x = max(max_x, x)
                min_z = min(min_z, z)
                max_z = max(max_z, z)
        if has_points:
            min_y = min(min_y, elevation)
            max_y = max(max_y, elevation)

    if min_x is math.inf:
        raise EmptyContourMapError("No coordinates in contour map")

    min_x, max_x = round_half_up(min_x), round_half_up(max_x)
    min_z, max_z = round_half_up(min_z), round_half_up(max_z)
    min_y, max_y = int(min_y), int(max_y)
    length = max_x - min_x + 1
    width = max_z - min_z + 1
    height = max_y - min_y + 1
    check_volume(width, length, height)
    return GridBounds(min_x=min_x, min_y=min_y, min_z=min_z, length=length, width=width, height=height)


def _to_grid(point: Sequence[float], bounds: GridBounds) -> Tuple[int, int]:
    return round_half_up(point[0]) - bounds.min_x, round_half_up(point[1]) - bounds.min_z


def rasterize_contours(contours: QuantizedContours) -> Tuple[Grid, GridBounds]:
    """Mark every point and segment of the contour map as contour cells.

    Returns the grid (indexed ``[z][x]`` relative to the bounds) and the
    bounds. Cells landing outside the grid are dropped.
    """
    bounds = compute_bounds(contours)
    grid = Grid(bounds.width, bounds.length)
    dropped = 0

    for elevation, lines in contours.items():
        elevation = int(elevation)
        for line in lines or []:
            if not line:
                continue
            if len(line) == 1:
                gx, gz = _to_grid(line[0], bounds)
                if not grid.mark_contour(gz, gx, elevation):
                    dropped += 1
                continue
            for a, b in zip(line, line[1:]):
                ax, az = _to_grid(a, bounds)
                bx, bz = _to_grid(b, bounds)
                for gx, gz in bresenham_line(ax, az, bx, bz):
                    if not grid.mark_contour(gz, gx, elevation):
                        dropped += 1

    logger.info(
        "Rasterized %d contour cell(s) into %dx%d grid, %d level(s) from y=%d",
        len(grid), bounds.length, bounds.width, bounds.height, bounds.min_y,
    )
    if dropped:
        logger.debug("Dropped %d out-of-range cell(s)", dropped)
    return grid, bounds
