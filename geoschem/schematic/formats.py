"""
NBT encoders for the two supported schematic containers.

- Sponge v3 (``.schem``): palette + VarInt block data, offset as an int array.
- Legacy MCEdit/WorldEdit (``.schematic``): numeric ``Blocks``/``Data``
  arrays; palette entries are remapped through the legacy id table.

Axis naming follows the container, not the grid: ``Width`` is the grid X
extent, ``Length`` the grid Z extent, ``Height`` the elevation extent.
"""

from __future__ import annotations

import gzip
from typing import Dict, Optional, Tuple

import numpy as np
from amulet_nbt import (
    ByteArrayTag,
    CompoundTag,
    IntArrayTag,
    IntTag,
    ListTag,
    NamedTag,
    ShortTag,
    StringTag,
    load as load_nbt,
)

from ..errors import UnsupportedBlockError, UnsupportedOptionsError
from ..models import FORMAT_LEGACY, FORMAT_SPONGE_V3, GridBounds, Schematic, normalize_format
from ..utils.blocks import legacy_id, split_legacy_id
from ..utils.logging import get_logger
from .varint import decode_varints, encode_varints

logger = get_logger(__name__)

SPONGE_VERSION = 3
DATA_VERSION = 3700
METADATA_AUTHOR = "GeoToSchematic"
METADATA_NAME = "BuildTheEarth schematic"
LEGACY_MATERIALS = "Alpha"

TAG_COMPOUND = 10
GZIP_MAGIC = b"\x1f\x8b"

SCHEMATIC_EXTENSIONS: Dict[str, str] = {
    FORMAT_SPONGE_V3: ".schem",
    FORMAT_LEGACY: ".schematic",
}


def build_schematic(
    bounds: GridBounds,
    palette: Dict[str, int],
    volume: np.ndarray,
    origin: Tuple[int, int, int],
) -> Schematic:
    """Assemble a schematic from a compiled block volume."""
    if volume.size != bounds.volume:
        raise ValueError(f"Block volume holds {volume.size} entries, bounds need {bounds.volume}")
    return Schematic(
        length=bounds.length,
        width=bounds.width,
        height=bounds.height,
        palette=dict(palette),
        block_data=encode_varints(volume),
        origin=tuple(int(v) for v in origin),
    )


def _byte_array(values) -> ByteArrayTag:
    arr = np.frombuffer(values, dtype=np.uint8) if isinstance(values, (bytes, bytearray)) \
        else np.asarray(values, dtype=np.uint8)
    return ByteArrayTag(arr.view(np.int8))


def sponge_v3_tag(schematic: Schematic) -> NamedTag:
    body = CompoundTag({
        "Version": IntTag(SPONGE_VERSION),
        "DataVersion": IntTag(DATA_VERSION),
        "Width": ShortTag(schematic.length),
        "Height": ShortTag(schematic.height),
        "Length": ShortTag(schematic.width),
        # placement origin for //paste -a -o
        "Offset": IntArrayTag(list(schematic.origin)),
        "Metadata": CompoundTag({
            "Author": StringTag(METADATA_AUTHOR),
            "Name": StringTag(METADATA_NAME),
        }),
        "Blocks": CompoundTag({
            "Palette": CompoundTag({
                block_id: IntTag(index) for block_id, index in schematic.palette.items()
            }),
            "Data": _byte_array(schematic.block_data),
        }),
    })
    return NamedTag(CompoundTag({"Schematic": body}), "")


def legacy_block_arrays(
    schematic: Schematic,
    legacy_ids: Optional[Dict[str, int]] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Per-cell ``(Blocks, Data)`` arrays for a legacy schematic.

    Raises ``UnsupportedBlockError`` for the first palette entry missing from
    the legacy table, before anything is decoded.
    """
    size = max(schematic.palette.values(), default=0) + 1
    block_lut = np.zeros(size, dtype=np.uint8)
    data_lut = np.zeros(size, dtype=np.uint8)
    for block_id, index in schematic.palette.items():
        packed = legacy_id(block_id, legacy_ids)
        if packed is None or not 0 <= packed >> 4 <= 0xFF:
            raise UnsupportedBlockError(block_id)
        block_lut[index], data_lut[index] = split_legacy_id(packed)

    indices = decode_varints(schematic.block_data, count=schematic.volume)
    if indices.size and indices.max() >= size:
        raise ValueError(f"Block data references palette index {int(indices.max())} outside the palette")
    return block_lut[indices], data_lut[indices]


def legacy_tag(schematic: Schematic, legacy_ids: Optional[Dict[str, int]] = None) -> NamedTag:
    blocks, data = legacy_block_arrays(schematic, legacy_ids)
    x, y, z = schematic.origin
    body = CompoundTag({
        "Width": ShortTag(schematic.length),
        "Height": ShortTag(schematic.height),
        "Length": ShortTag(schematic.width),
        "Materials": StringTag(LEGACY_MATERIALS),
        "Blocks": _byte_array(blocks),
        "Data": _byte_array(data),
        "WEOriginX": IntTag(x),
        "WEOriginY": IntTag(y),
        "WEOriginZ": IntTag(z),
        "WEOffsetX": IntTag(0),
        "WEOffsetY": IntTag(0),
        "WEOffsetZ": IntTag(0),
        "Entities": ListTag([], TAG_COMPOUND),
        "TileEntities": ListTag([], TAG_COMPOUND),
    })
    return NamedTag(body, "Schematic")


def to_named_tag(
    schematic: Schematic,
    schematic_format: str = FORMAT_SPONGE_V3,
    legacy_ids: Optional[Dict[str, int]] = None,
) -> NamedTag:
    fmt = normalize_format(schematic_format)
    if fmt == FORMAT_LEGACY:
        return legacy_tag(schematic, legacy_ids)
    return sponge_v3_tag(schematic)


def encode_schematic(
    schematic: Schematic,
    schematic_format: str = FORMAT_SPONGE_V3,
    compressed: bool = True,
    legacy_ids: Optional[Dict[str, int]] = None,
) -> bytes:
    """Serialize to big-endian NBT, gzip-compressed unless ``compressed`` is False."""
    tag = to_named_tag(schematic, schematic_format, legacy_ids)
    raw = tag.to_nbt(compressed=False, little_endian=False)
    payload = gzip.compress(raw) if compressed else raw
    logger.debug(
        "Encoded %s schematic: %d NBT byte(s), %d written",
        normalize_format(schematic_format), len(raw), len(payload),
    )
    return payload


def decode_schematic(data: bytes) -> Schematic:
    """Read a Sponge v3 schematic (gzip-compressed or raw NBT) back."""
    raw = gzip.decompress(data) if data[:2] == GZIP_MAGIC else data
    root = load_nbt(raw, compressed=False, little_endian=False).tag
    if "Schematic" not in root:
        raise UnsupportedOptionsError("Only Sponge v3 schematics can be decoded")
    body = root["Schematic"]
    if body["Version"].py_int != SPONGE_VERSION:
        raise UnsupportedOptionsError(f"Unsupported Sponge schematic version {body['Version'].py_int}")

    blocks = body["Blocks"]
    return Schematic(
        length=body["Width"].py_int,
        width=body["Length"].py_int,
        height=body["Height"].py_int,
        palette={block_id: tag.py_int for block_id, tag in blocks["Palette"].items()},
        block_data=blocks["Data"].np_array.astype(np.uint8).tobytes(),
        origin=tuple(int(v) for v in body["Offset"].np_array.tolist()),
    )
