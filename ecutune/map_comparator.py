"""Cell-by-cell comparison of maps stored in binary images."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .definition import MapDefinition

_DIFFERENCE_TOLERANCE = 0.0001


@dataclass
class MapDifference:
    """One cell whose value differs between two maps."""

    row: int = 0
    column: int = 0
    original_value: float = 0.0
    modified_value: float = 0.0
    difference: float = 0.0
    is_different: bool = False


@dataclass
class ComparisonResult:
    """Differing cells and statistics over their differences."""

    differences: list[MapDifference] = field(default_factory=list)
    total_differences: int = 0
    max_difference: float = 0.0
    min_difference: float = 0.0
    average_difference: float = 0.0


def _read_value(map_def: MapDefinition, data, row: int, col: int) -> float:
    """Physical value of a cell read little-endian from ``data``.

    Missing data, unsupported types (including uint8) and cells past the end
    of the data read as zero.
    """
    if data is None:
        return 0.0
    size = len(data)
    index = row * map_def.columns + col
    if map_def.data_type in (2, 3):
        address = map_def.address + index * 2
        if address + 1 < size:
            fmt = "<H" if map_def.data_type == 2 else "<h"
            (raw,) = struct.unpack_from(fmt, data, address)
            return float(raw) * map_def.factor + map_def.offset
    elif map_def.data_type == 4:
        address = map_def.address + index * 4
        if address + 3 < size:
            (raw,) = struct.unpack_from("<f", data, address)
            return raw * map_def.factor + map_def.offset
    return 0.0


def _same_shape(map1: MapDefinition, map2: MapDefinition) -> bool:
    return map1.rows == map2.rows and map1.columns == map2.columns


class MapComparator:
    """Compares two maps, each read from its own binary image."""

    def compare_maps(self, map1: MapDefinition, file1, map2: MapDefinition, file2) -> ComparisonResult:
        """List the cells that differ; maps of different shapes give an empty result."""
        result = ComparisonResult()
        if not _same_shape(map1, map2):
            return result

        total = 0.0
        for r in range(map1.rows):
            for c in range(map1.columns):
                original = _read_value(map1, file1, r, c)
                modified = _read_value(map2, file2, r, c)
                diff = abs(original - modified)
                if diff <= _DIFFERENCE_TOLERANCE:
                    continue
                result.differences.append(
                    MapDifference(r, c, original, modified, diff, True)
                )
                total += diff
                result.max_difference = max(result.max_difference, diff)
                if result.min_difference == 0.0 or diff < result.min_difference:
                    result.min_difference = diff

        result.total_differences = len(result.differences)
        if result.differences:
            result.average_difference = total / len(result.differences)
        return result

    def maps_are_equal(self, map1: MapDefinition, file1, map2: MapDefinition, file2,
                       tolerance: float = 0.0001) -> bool:
        """True when the shapes match and no cell differs by more than ``tolerance``."""
        if not _same_shape(map1, map2):
            return False
        return all(
            abs(_read_value(map1, file1, r, c) - _read_value(map2, file2, r, c)) <= tolerance
            for r in range(map1.rows)
            for c in range(map1.columns)
        )