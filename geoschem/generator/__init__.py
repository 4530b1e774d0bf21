"""geoschem generator subpackage.

Turns quantized contour maps into schematic files.

Orientation contract:
- 2D grids are indexed ``[z][x]``: rows follow Z (north to south), columns
  follow X (west to east).
- Block volumes are flat, ``y * width * length + z * length + x``, with
  ``width`` the Z extent and ``length`` the X extent.
"""

from .raster import bresenham_line, compute_bounds, rasterize_contours
from .fill import decide_fill, scanline_fill, fill_terrain, FILL_PASSES
from .voxelizer import Voxelizer, build_palette, compile_block_volume
from .pipeline import ConversionPipeline, ConversionResult, convert_geodata
from .io import ExportPackage, package_results, save_package

__all__ = [
    "bresenham_line",
    "compute_bounds",
    "rasterize_contours",
    "decide_fill",
    "scanline_fill",
    "fill_terrain",
    "FILL_PASSES",
    "Voxelizer",
    "build_palette",
    "compile_block_volume",
    "ConversionPipeline",
    "ConversionResult",
    "convert_geodata",
    "ExportPackage",
    "package_results",
    "save_package",
]
