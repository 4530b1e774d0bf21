from __future__ import annotations

import enum
import json
from dataclasses import dataclass, fields
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .errors import UnsupportedOptionsError, VolumeTooLargeError
from .utils.blocks import AIR_BLOCK, normalize_block_id


# -----------------------------
# Type aliases
# -----------------------------
Point = Tuple[float, float]
Polyline = List[Point]
# elevation -> polylines
ContourMap = Dict[int, List[Polyline]]


# -----------------------------
# Volume limits
# -----------------------------
MAX_WIDTH = 32767
MAX_LENGTH = 32767
MAX_HEIGHT = 2000
MAX_VOLUME = 5_000_000_000


def check_volume(width: int, length: int, height: int) -> int:
    """Return ``width * length * height`` or raise if it exceeds the limits.

    Must be called before anything of that size is allocated.
    """
    total = int(width) * int(length) * int(height)
    if width > MAX_WIDTH or length > MAX_LENGTH or height > MAX_HEIGHT or total > MAX_VOLUME:
        raise VolumeTooLargeError(width, length, height)
    return total


# -----------------------------
# Cells and grid
# -----------------------------
AIR = 0


class CellKind(enum.IntEnum):
    """Kind of a cell entry; the value is the palette index it compiles to."""
    CONTOUR = 1
    FILL = 2


class Cell:
    """Entries of one grid position, keyed by elevation.

    A cell holds any number of contour entries and at most one fill entry.
    Contour entries are never replaced or removed.
    """

    __slots__ = ("entries",)

    def __init__(self) -> None:
        self.entries: Dict[int, CellKind] = {}

    def __repr__(self) -> str:
        body = ", ".join(f"{elev}:{kind.name.lower()}" for elev, kind in self.items())
        return f"Cell({body})"

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def has_contour(self) -> bool:
        return CellKind.CONTOUR in self.entries.values()

    @property
    def fill_elevation(self) -> Optional[int]:
        for elev, kind in self.entries.items():
            if kind is CellKind.FILL:
                return elev
        return None

    def items(self) -> List[Tuple[int, CellKind]]:
        return sorted(self.entries.items())

    def contour_elevations(self) -> List[int]:
        return sorted(elev for elev, kind in self.entries.items() if kind is CellKind.CONTOUR)

    def add_contour(self, elevation: int) -> None:
        self.entries[int(elevation)] = CellKind.CONTOUR

    def propose_fill(self, elevation: int) -> bool:
        """Merge a fill proposal; the lowest proposal wins.

        Returns True when the stored fill entry changed.
        """
        elevation = int(elevation)
        if self.entries.get(elevation) is CellKind.CONTOUR:
            return False
        current = self.fill_elevation
        if current is not None:
            if elevation >= current:
                return False
            del self.entries[current]
        self.entries[elevation] = CellKind.FILL
        return True


class Grid:
    """Sparse 2D grid of cells indexed ``[z][x]``.

    ``width`` is the Z extent and ``length`` the X extent. Positions that
    were never touched read as empty.
    """

    def __init__(self, width: int, length: int) -> None:
        self.width = int(width)
        self.length = int(length)
        self._cells: Dict[Tuple[int, int], Cell] = {}

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, length={self.length}, cells={len(self._cells)})"

    def in_bounds(self, z: int, x: int) -> bool:
        return 0 <= z < self.width and 0 <= x < self.length

    def get(self, z: int, x: int) -> Optional[Cell]:
        return self._cells.get((z, x))

    def cell(self, z: int, x: int) -> Cell:
        if not self.in_bounds(z, x):
            raise IndexError(f"cell ({z}, {x}) outside grid {self.width}x{self.length}")
        found = self._cells.get((z, x))
        if found is None:
            found = self._cells[(z, x)] = Cell()
        return found

    def mark_contour(self, z: int, x: int, elevation: int) -> bool:
        """Add a contour entry; out-of-range positions are dropped."""
        if not self.in_bounds(z, x):
            return False
        self.cell(z, x).add_contour(elevation)
        return True

    def occupied(self) -> Iterator[Tuple[int, int, Cell]]:
        for (z, x) in sorted(self._cells):
            cell = self._cells[(z, x)]
            if not cell.is_empty:
                yield z, x, cell


@dataclass(frozen=True)
class GridBounds:
    min_x: int
    min_y: int
    min_z: int
    length: int  # X extent
    width: int   # Z extent
    height: int  # Y extent

    @property
    def volume(self) -> int:
        return self.width * self.length * self.height

    def origin(self, offset: Tuple[int, int, int] = (0, 0, 0)) -> Tuple[int, int, int]:
        return (
            self.min_x + int(offset[0]),
            self.min_y + int(offset[1]),
            self.min_z + int(offset[2]),
        )


# -----------------------------
# Schematic
# -----------------------------
FORMAT_SPONGE_V3 = "sponge_v3"
FORMAT_LEGACY = "legacy"

_FORMAT_ALIASES = {
    "sponge_v3": FORMAT_SPONGE_V3,
    "spongev3": FORMAT_SPONGE_V3,
    "sponge": FORMAT_SPONGE_V3,
    "schem": FORMAT_SPONGE_V3,
    "legacy": FORMAT_LEGACY,
    "schematic": FORMAT_LEGACY,
}


def normalize_format(value: str) -> str:
    try:
        return _FORMAT_ALIASES[str(value).strip().lower()]
    except KeyError:
        raise UnsupportedOptionsError(f"Unknown schematic version: {value!r}") from None


@dataclass(frozen=True)
class Schematic:
    length: int  # X extent
    width: int   # Z extent
    height: int  # Y extent
    palette: Dict[str, int]
    block_data: bytes  # palette indices as VarInts
    origin: Tuple[int, int, int]

    @property
    def volume(self) -> int:
        return self.length * self.width * self.height


# -----------------------------
# Configuration
# -----------------------------
DEFAULT_CONTOUR_BLOCK = "minecraft:diamond_block"
DEFAULT_FILL_BLOCK = "minecraft:emerald_block"

# BuildTheEarth server offsets. They line up only with coordinates in the
# BuildTheEarth projection; with the default EPSG:3857 projector they are
# plain translations.
OFFSET_PRESETS: Dict[str, Tuple[int, int, int]] = {
    "none": (0, 0, 0),
    "asean": (-13379008, 0, 2727648),
    "italy": (0, -2016, 0),
    "romania": (0, -544, 0),
    "balkans": (0, -1024, 0),
}


@dataclass
class ConverterConfig:
    block_id: str = DEFAULT_CONTOUR_BLOCK
    fill_block_id: str = DEFAULT_FILL_BLOCK
    offset: Tuple[int, int, int] = (0, 0, 0)
    schematic_format: str = FORMAT_SPONGE_V3
    consistent_elevation: bool = True
    fill: bool = False
    crs: str = "EPSG:3857"
    # Inputs converted concurrently; 1 runs them one after another
    max_workers: int = 1

    def validate(self) -> "ConverterConfig":
        """Normalize fields in place and reject unsupported settings."""
        self.schematic_format = normalize_format(self.schematic_format)
        self.block_id = normalize_block_id(self.block_id, DEFAULT_CONTOUR_BLOCK)
        self.fill_block_id = normalize_block_id(self.fill_block_id, DEFAULT_FILL_BLOCK)
        if AIR_BLOCK in (self.block_id, self.fill_block_id):
            raise UnsupportedOptionsError(f"{AIR_BLOCK} cannot be used as a contour or fill block")
        if self.fill and self.fill_block_id == self.block_id:
            raise UnsupportedOptionsError("Fill block must differ from the contour block")

        offset = tuple(self.offset)
        if len(offset) != 3 or not all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in offset):
            raise UnsupportedOptionsError(
                f"Offset values can only be three integers, got {self.offset!r}"
            )
        self.offset = tuple(int(v) for v in offset)

        if self.schematic_format == FORMAT_LEGACY and self.fill:
            raise UnsupportedOptionsError("Terrain fill cannot be applied to legacy schematics")
        if int(self.max_workers) < 1:
            raise UnsupportedOptionsError("max_workers must be at least 1")
        return self


def load_config(path: str) -> ConverterConfig:
    """Read a JSON config file whose keys mirror ``ConverterConfig`` fields.

    An ``offset_preset`` key selects one of ``OFFSET_PRESETS`` when no
    explicit ``offset`` is given.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise UnsupportedOptionsError(f"Cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise UnsupportedOptionsError(f"Config file {path} must contain a JSON object")

    preset = data.pop("offset_preset", None)
    if preset is not None and "offset" not in data:
        try:
            data["offset"] = OFFSET_PRESETS[str(preset).lower()]
        except KeyError:
            raise UnsupportedOptionsError(f"Unknown offset preset: {preset!r}") from None

    known = {f.name for f in fields(ConverterConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise UnsupportedOptionsError(f"Unknown config keys: {', '.join(unknown)}")
    if "offset" in data:
        data["offset"] = tuple(data["offset"])
    return ConverterConfig(**data).validate()
