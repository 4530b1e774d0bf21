"""Command line front end: contour files in, schematic (or zip of schematics) out."""

import argparse
import sys
from typing import List, Optional

from .errors import BatchConversionError, ConversionError
from .generator.io import package_results, save_package
from .generator.pipeline import ConversionPipeline
from .models import OFFSET_PRESETS, ConverterConfig, load_config
from .utils.logging import get_logger, set_level

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="KML / GeoJSON contours -> WorldEdit schematic",
    )
    parser.add_argument("inputs", nargs="+", help=".kml / .geojson files")
    parser.add_argument("--config", default=None, help="JSON config file (command line flags override it)")
    parser.add_argument("--block", default=None, help="contour block id (default: diamond_block)")
    parser.add_argument("--fill", action="store_true", default=None, help="fill terrain between contours")
    parser.add_argument("--fill-block", default=None, help="fill block id (default: emerald_block)")
    parser.add_argument("--format", dest="schematic_format", default=None,
                        choices=["sponge_v3", "legacy"], help="schematic format (default: sponge_v3)")
    parser.add_argument("--offset", type=int, nargs=3, metavar=("X", "Y", "Z"), default=None,
                        help="integer offset added to the origin")
    parser.add_argument("--preset", choices=sorted(OFFSET_PRESETS), default=None,
                        help="BuildTheEarth region offset (assumes BuildTheEarth projected input)")
    parser.add_argument("--no-consistent-elevation", dest="consistent_elevation",
                        action="store_false", default=None,
                        help="place every contour on the base level instead of one below its elevation")
    parser.add_argument("--crs", default=None, help="planar CRS for projection (default: EPSG:3857)")
    parser.add_argument("--workers", type=int, default=None, help="inputs converted concurrently")
    parser.add_argument("--output-dir", default="output", help="output directory (default: output)")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="override GEOSCHEM_LOG_LEVEL")
    return parser


def config_from_args(args: argparse.Namespace) -> ConverterConfig:
    cfg = load_config(args.config) if args.config else ConverterConfig()
    overrides = {
        "block_id": args.block,
        "fill": args.fill,
        "fill_block_id": args.fill_block,
        "schematic_format": args.schematic_format,
        "consistent_elevation": args.consistent_elevation,
        "crs": args.crs,
        "max_workers": args.workers,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(cfg, key, value)
    if args.offset is not None:
        cfg.offset = tuple(args.offset)
    elif args.preset is not None:
        cfg.offset = OFFSET_PRESETS[args.preset]
    return cfg.validate()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        set_level(args.log_level)
    try:
        cfg = config_from_args(args)
        logger.debug("Options: %s", cfg)
        pipeline = ConversionPipeline(cfg)
        results = pipeline.run_files(args.inputs)
    except BatchConversionError as e:
        for name, exc in e.failures:
            print(f"[ERROR] {name}: {exc}", file=sys.stderr)
        print("[ERROR] No output written.", file=sys.stderr)
        return 1
    except ConversionError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    output_path = save_package(package_results(results), args.output_dir)
    for result in results:
        print(f"[INFO] {result.filename}: origin {' '.join(str(v) for v in result.origin)}")
    print(f"[INFO] Saved {output_path}. Use \"//paste -a -o\" to place the schematic.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
