"""
Scanline terrain fill.

Closes the gaps between contour cells so the compiled volume reads as a
surface rather than isolated outlines. Three passes run over the same grid,
in order:

1. along X within each Z row, forward;
2. along Z within each X column, forward;
3. along Z within each X column, reverse.

Within a line the sweep keeps a left anchor (the last cell holding contour
entries). When the next contour cell is reached and the two cells carry
compatible elevations (any pair differing by at most one level), every cell
strictly between them receives a fill proposal at the lower of the two
minimum elevations. Proposals merge per cell with the lowest one winning,
so the result does not depend on which pass proposed what first.

Passes share one grid and must run sequentially.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models import Grid
from ..utils.logging import get_logger

logger = get_logger(__name__)

AXIS_X = "x"
AXIS_Z = "z"

# (scan axis, reverse)
FILL_PASSES: Tuple[Tuple[str, bool], ...] = (
    (AXIS_X, False),
    (AXIS_Z, False),
    (AXIS_Z, True),
)


def decide_fill(left_heights: Sequence[int], right_heights: Sequence[int]) -> Optional[int]:
    """Fill elevation between two anchors, or None when they are incompatible."""
    if not left_heights or not right_heights:
        return None
    right = set(right_heights)
    for h in left_heights:
        if h in right or (h - 1) in right or (h + 1) in right:
            return min(min(left_heights), min(right_heights))
    return None


def _contour_lines(grid: Grid, axis: str) -> Dict[int, List[int]]:
    """Positions of contour cells per scan line (row for X, column for Z)."""
    lines: Dict[int, List[int]] = {}
    for z, x, cell in grid.occupied():
        if not cell.has_contour:
            continue
        if axis == AXIS_X:
            lines.setdefault(z, []).append(x)
        else:
            lines.setdefault(x, []).append(z)
    return lines


def scanline_fill(
    grid: Grid,
    axis: str,
    reverse: bool = False,
    lines: Optional[Dict[int, List[int]]] = None,
) -> int:
    """Run one pass over ``grid``; returns the number of fill entries changed."""
    if axis not in (AXIS_X, AXIS_Z):
        raise ValueError(f"axis must be '{AXIS_X}' or '{AXIS_Z}', got {axis!r}")
    if lines is None:
        lines = _contour_lines(grid, axis)
    step = -1 if reverse else 1
    changed = 0

    for outer in sorted(lines, reverse=reverse):
        positions: Iterable[int] = sorted(lines[outer], reverse=reverse)
        anchor_pos: Optional[int] = None
        anchor_heights: List[int] = []

        for inner in positions:
            z, x = (outer, inner) if axis == AXIS_X else (inner, outer)
            heights = grid.get(z, x).contour_elevations()

            if anchor_pos is not None:
                target = decide_fill(anchor_heights, heights)
                # every position between two consecutive contour cells is the buffer
                if target is not None:
                    for mid in range(anchor_pos + step, inner, step):
                        bz, bx = (outer, mid) if axis == AXIS_X else (mid, outer)
                        if grid.cell(bz, bx).propose_fill(target):
                            changed += 1

            anchor_pos = inner
            anchor_heights = heights

    return changed


def fill_terrain(grid: Grid) -> None:
    """Apply the three fill passes to ``grid`` in place."""
    row_lines = _contour_lines(grid, AXIS_X)
    column_lines = _contour_lines(grid, AXIS_Z)
    for axis, reverse in FILL_PASSES:
        lines = row_lines if axis == AXIS_X else column_lines
        changed = scanline_fill(grid, axis, reverse=reverse, lines=lines)
        logger.debug(
            "Fill pass %s%s: %d cell(s) changed", "-" if reverse else "", axis, changed
        )
    filled = sum(1 for _, _, cell in grid.occupied() if cell.fill_elevation is not None)
    logger.info("Terrain fill produced %d fill cell(s)", filled)
