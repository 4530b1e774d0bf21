import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from ..errors import BatchConversionError
from ..geoprocessor.io import load_contours, polyline_count
from ..geoprocessor.projection import GeoProjector, Projector
from ..geoprocessor.quantize import quantize_contours
from ..models import ContourMap, ConverterConfig, Schematic
from ..schematic.formats import SCHEMATIC_EXTENSIONS, build_schematic, encode_schematic
from ..utils.logging import get_logger
from .fill import fill_terrain
from .raster import rasterize_contours
from .voxelizer import Voxelizer, build_palette

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    name: str
    data: bytes  # gzip-compressed NBT
    origin: Tuple[int, int, int]
    schematic_format: str
    schematic: Schematic

    @property
    def extension(self) -> str:
        return SCHEMATIC_EXTENSIONS[self.schematic_format]

    @property
    def filename(self) -> str:
        return self.name + self.extension


class ConversionPipeline:
    """quantize -> rasterize -> fill -> compile -> encode, one input at a time."""

    def __init__(self, config: Optional[ConverterConfig] = None, projector: Optional[Projector] = None) -> None:
        self.config = (config or ConverterConfig()).validate()
        self.projector = projector if projector is not None else GeoProjector(self.config.crs)

    def build_schematic(self, contours: ContourMap) -> Schematic:
        cfg = self.config
        quantized = quantize_contours(contours, self.projector, cfg.consistent_elevation)
        grid, bounds = rasterize_contours(quantized)
        if cfg.fill:
            fill_terrain(grid)
        volume = Voxelizer().compile(grid, bounds)
        palette = build_palette(cfg.block_id, cfg.fill_block_id if cfg.fill else None)
        return build_schematic(bounds, palette, volume, bounds.origin(cfg.offset))

    def convert(self, contours: ContourMap, name: str = "geotoschematic") -> ConversionResult:
        logger.info(
            "Converting %s: %d level(s), %d polyline(s)",
            name, len(contours), polyline_count(contours),
        )
        schematic = self.build_schematic(contours)
        data = encode_schematic(schematic, self.config.schematic_format)
        logger.info("%s done: origin %s, %d byte(s)", name, list(schematic.origin), len(data))
        return ConversionResult(
            name=name,
            data=data,
            origin=schematic.origin,
            schematic_format=self.config.schematic_format,
            schematic=schematic,
        )

    def convert_file(self, path: str) -> ConversionResult:
        stem = os.path.splitext(os.path.basename(path))[0]
        return self.convert(load_contours(path), stem)

    def _convert_safely(self, item: Tuple[ContourMap, str]):
        contours, name = item
        try:
            return self.convert(contours, name), None
        except Exception as e:
            logger.error("Conversion of %s failed: %s", name, e)
            return None, e

    def _convert_all(self, items: List[Tuple[ContourMap, str]]) -> list:
        workers = min(int(self.config.max_workers), max(len(items), 1))
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                return list(executor.map(self._convert_safely, items))
        return [self._convert_safely(item) for item in items]

    @staticmethod
    def _collect(names: Sequence[str], outcomes: list) -> List[ConversionResult]:
        results = [result for result, _ in outcomes if result is not None]
        failures = [(name, exc) for name, (_, exc) in zip(names, outcomes) if exc is not None]
        if failures:
            raise BatchConversionError(failures, results)
        return results

    def run(self, inputs: Iterable[Tuple[ContourMap, str]]) -> List[ConversionResult]:
        """Convert every ``(contours, name)`` pair, keeping input order.

        Inputs are independent; a failing input does not stop the others,
        but any failure is raised afterwards as ``BatchConversionError``.
        """
        items = list(inputs)
        return self._collect([name for _, name in items], self._convert_all(items))

    def run_files(self, paths: Sequence[str]) -> List[ConversionResult]:
        """Like ``run`` for file paths; read failures keep their input position."""
        names = []
        outcomes: list = [None] * len(paths)
        pending = []
        for position, path in enumerate(paths):
            stem = os.path.splitext(os.path.basename(path))[0]
            names.append(stem)
            try:
                pending.append((position, (load_contours(path), stem)))
            except Exception as e:
                logger.error("Reading %s failed: %s", path, e)
                outcomes[position] = (None, e)

        converted = self._convert_all([item for _, item in pending])
        for (position, _), outcome in zip(pending, converted):
            outcomes[position] = outcome
        return self._collect(names, outcomes)


def convert_geodata(
    inputs: Iterable[Tuple[ContourMap, str]],
    config: Optional[ConverterConfig] = None,
    projector: Optional[Projector] = None,
) -> List[ConversionResult]:
    return ConversionPipeline(config, projector).run(inputs)
