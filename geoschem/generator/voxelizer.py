import numpy as np
from typing import Dict, Optional

from ..models import AIR, CellKind, Grid, GridBounds, check_volume
from ..utils.blocks import AIR_BLOCK
from ..utils.logging import get_logger

logger = get_logger(__name__)


def build_palette(contour_block: str, fill_block: Optional[str] = None) -> Dict[str, int]:
    """Palette with air at 0, the contour block at 1 and, if given, fill at 2."""
    palette = {
        AIR_BLOCK: AIR,
        contour_block: int(CellKind.CONTOUR),
    }
    if fill_block is not None:
        if fill_block in palette:
            raise ValueError(f"Fill block {fill_block!r} must differ from air and the contour block")
        palette[fill_block] = int(CellKind.FILL)
    return palette


class Voxelizer:
    """Compiles an annotated 2D grid into a flat block volume.

    Index layout: ``y * width * length + z * length + x`` with
    ``y = elevation - min_y``.
    """

    def __init__(self, voxel_dtype=np.uint8) -> None:
        self.voxel_dtype = voxel_dtype

    def _estimate_and_allocate(self, bounds: GridBounds) -> np.ndarray:
        total = check_volume(bounds.width, bounds.length, bounds.height)
        est_mb = total * np.dtype(self.voxel_dtype).itemsize / (1024 ** 2)
        logger.debug(
            "Block volume shape: (%d, %d, %d), dtype: %s, ~%.1f MB",
            bounds.height, bounds.width, bounds.length, np.dtype(self.voxel_dtype).name, est_mb,
        )
        return np.zeros(total, dtype=self.voxel_dtype)

    def compile(self, grid: Grid, bounds: GridBounds) -> np.ndarray:
        volume = self._estimate_and_allocate(bounds)
        layer = bounds.width * bounds.length
        written = 0

        for gz, gx, cell in grid.occupied():
            for elevation, kind in cell.items():
                y = elevation - bounds.min_y
                if y < 0 or y >= bounds.height:
                    continue
                index = y * layer + gz * bounds.length + gx
                # contour overrides anything, fill only lands on air
                if volume[index] == AIR or kind is CellKind.CONTOUR:
                    volume[index] = int(kind)
                    written += 1

        logger.info("Compiled %d block(s) into a volume of %d", written, volume.size)
        return volume


def compile_block_volume(grid: Grid, bounds: GridBounds) -> np.ndarray:
    return Voxelizer().compile(grid, bounds)
