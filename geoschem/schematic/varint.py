"""
VarInt coding of block data: 7 data bits per byte, least significant group
first, high bit (0x80) set on every byte but the last.

Block volumes can reach billions of cells; when every value fits in one
byte both directions work on ``uint8`` buffers without widening.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

import numpy as np

_MAX_VARINT_BYTES = 5

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]


def encode_varints(values: Iterable[int]) -> bytes:
    if isinstance(values, np.ndarray) and values.dtype.kind in "ui":
        arr = values.ravel()
    else:
        arr = np.asarray(list(values), dtype=np.int64)
    if arr.size == 0:
        return b""
    if arr.dtype.kind == "i" and arr.min() < 0:
        raise ValueError("VarInt block data must be non-negative")
    if arr.max() < 0x80:
        return arr.astype(np.uint8, copy=False).tobytes()

    out = bytearray()
    for value in arr.tolist():
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                out.append(byte | 0x80)
            else:
                out.append(byte)
                break
    return bytes(out)


def decode_varints(data: BytesLike, count: Optional[int] = None) -> np.ndarray:
    """Decode a VarInt byte sequence.

    Returns a read-only ``uint8`` view of ``data`` when every value is a
    single byte, an ``int64`` array otherwise. When ``count`` is given the
    sequence must hold exactly that many values.
    """
    if isinstance(data, np.ndarray):
        raw = data.astype(np.uint8, copy=False).ravel()
    else:
        raw = np.frombuffer(data, dtype=np.uint8)

    if raw.size == 0 or raw.max() < 0x80:
        values = raw
    else:
        decoded = []
        value = 0
        shift = 0
        for byte in raw.tolist():
            value |= (byte & 0x7F) << shift
            if byte & 0x80:
                shift += 7
                if shift >= 7 * _MAX_VARINT_BYTES:
                    raise ValueError("VarInt is too long")
                continue
            decoded.append(value)
            value = 0
            shift = 0
        if shift:
            raise ValueError("Block data ends inside a VarInt")
        values = np.asarray(decoded, dtype=np.int64)

    if count is not None and values.size != count:
        raise ValueError(f"Expected {count} block(s), decoded {values.size}")
    return values
