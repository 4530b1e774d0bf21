"""Schematic containers: assembly, NBT encoding and decoding."""

from .varint import encode_varints, decode_varints
from .formats import (
    SCHEMATIC_EXTENSIONS,
    build_schematic,
    sponge_v3_tag,
    legacy_tag,
    legacy_block_arrays,
    to_named_tag,
    encode_schematic,
    decode_schematic,
)

__all__ = [
    "encode_varints",
    "decode_varints",
    "SCHEMATIC_EXTENSIONS",
    "build_schematic",
    "sponge_v3_tag",
    "legacy_tag",
    "legacy_block_arrays",
    "to_named_tag",
    "encode_schematic",
    "decode_schematic",
]
