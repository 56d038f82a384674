"""Statistics over runs of binary values used to spot calibration tables."""

from __future__ import annotations

import struct
from collections.abc import Iterable
from dataclasses import dataclass

_FORMATS = {1: "<B", 2: "<H", 4: "<f"}


@dataclass
class PatternResult:
    """Shape and spread of a run of values."""

    is_monotonic: bool = False
    is_increasing: bool = False
    is_decreasing: bool = False
    variance: float = 0.0
    mean: float = 0.0


def calculate_variance(values: Iterable[float]) -> float:
    """Population variance; zero for fewer than two values."""
    values = list(values)
    if len(values) <= 1:
        return 0.0
    mean = sum(values) / len(values)
    return sum((value - mean) ** 2 for value in values) / len(values)


def analyze_2d(data, offset: int, count: int, element_size: int) -> PatternResult:
    """Analyse ``count`` little-endian elements of ``element_size`` bytes at ``offset``.

    Element sizes 1, 2 and 4 are read as uint8, uint16 and float; any other
    size yields zeros. Raises ValueError if the run extends past the data.
    """
    if data is None or count == 0 or element_size == 0:
        return PatternResult()

    fmt = _FORMATS.get(element_size)
    if fmt is None:
        values = [0.0] * count
    else:
        end = offset + count * element_size
        if offset < 0 or end > len(data):
            raise ValueError(
                f"run of {count} elements at offset {offset} exceeds {len(data)} bytes"
            )
        values = [float(v) for (v,) in struct.iter_unpack(fmt, bytes(data[offset:end]))]

    pairs = list(zip(values, values[1:]))
    increasing = all(not (current < previous) for previous, current in pairs)
    decreasing = all(not (current > previous) for previous, current in pairs)

    return PatternResult(
        is_monotonic=increasing or decreasing,
        is_increasing=increasing,
        is_decreasing=decreasing,
        variance=calculate_variance(values),
        mean=sum(values) / len(values),
    )


def detect_matrix_pattern(data, offset: int, rows: int, cols: int, element_size: int) -> bool:
    """Whether a block may hold a matrix; only degenerate shapes are rejected."""
    if data is None or rows == 0 or cols == 0 or element_size == 0:
        return False
    return True