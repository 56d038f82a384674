"""Conversion between raw stored values and physical values."""

from __future__ import annotations

import math
import struct
from enum import Enum


class RawKind(str, Enum):
    """Raw storage types that physical values can be converted to."""

    UINT8 = "uint8"
    UINT16 = "uint16"
    INT16 = "int16"
    FLOAT = "float"


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def raw_to_physical(raw: float, factor: float, offset: float) -> float:
    """Scale a raw value: ``raw * factor + offset``."""
    return float(raw) * factor + offset


def physical_to_raw_u16(physical: float, factor: float, offset: float) -> int:
    """Convert to an unsigned 16-bit raw value, clamped and rounded half up."""
    raw = (physical - offset) / factor
    if raw < 0:
        return 0
    if raw > 65535:
        return 65535
    return int(raw + 0.5)


def physical_to_raw_i16(physical: float, factor: float, offset: float) -> int:
    """Convert to a signed 16-bit raw value, clamped and rounded half away from zero."""
    raw = (physical - offset) / factor
    if raw < -32768:
        return -32768
    if raw > 32767:
        return 32767
    return int(raw + (0.5 if raw >= 0 else -0.5))


def physical_to_raw_u8(physical: float, factor: float, offset: float) -> int:
    """Convert to an unsigned 8-bit raw value, clamped and rounded half up."""
    raw = (physical - offset) / factor
    if raw < 0:
        return 0
    if raw > 255:
        return 255
    return int(raw + 0.5)


def physical_to_raw_float(physical: float, factor: float, offset: float) -> float:
    """Convert to a single-precision raw value."""
    return _to_float32((physical - offset) / factor)


_CONVERTERS = {
    RawKind.UINT8: physical_to_raw_u8,
    RawKind.UINT16: physical_to_raw_u16,
    RawKind.INT16: physical_to_raw_i16,
    RawKind.FLOAT: physical_to_raw_float,
}


def physical_to_raw(kind, physical: float, factor: float, offset: float):
    """Convert a physical value to the raw type named by ``kind``."""
    try:
        raw_kind = RawKind(kind)
    except ValueError:
        raise ValueError(f"unsupported raw kind: {kind!r}") from None
    return _CONVERTERS[raw_kind](physical, factor, offset)