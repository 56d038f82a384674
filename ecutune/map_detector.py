"""Heuristic search for 2D and 3D calibration maps in a binary image."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .definition import MapType
from .pattern_analyzer import analyze_2d, detect_matrix_pattern

_STEP = 2
_MIN_MAP_SIZE = 16
_SIZES_2D = (8, 12, 16, 20, 24, 32, 40, 48, 64, 80, 96, 128)
_PREFERRED_2D = frozenset({16, 32, 64})
_DIMS_3D = (8, 12, 16, 20)
_MIN_2D_SPAN = 64
_MIN_3D_SPAN = 256
_SCAN_THRESHOLD = 0.2
_REFINE_THRESHOLD = 0.4
_MAX_CANDIDATES = 50


@dataclass
class MapCandidate:
    """A possible map found by the detector."""

    address: int = 0
    type: MapType = MapType.MAP_2D
    rows: int = 0
    columns: int = 0
    confidence: float = 0.0


def _end(candidate: MapCandidate) -> int:
    return candidate.address + candidate.rows * candidate.columns * 2


def _overlaps(a: MapCandidate, b: MapCandidate) -> bool:
    return (b.address <= a.address < _end(b)) or (a.address <= b.address < _end(a))


class MapDetector:
    """Scans binary data for regions that look like 16-bit maps."""

    def __init__(self, data=None):
        self.set_binary_data(data)

    def set_binary_data(self, data) -> None:
        """Replace the data to be scanned."""
        self._data = bytes(data) if data is not None else b""

    def detect_maps(self, min_address: int = 0, max_address: int = 0) -> list[MapCandidate]:
        """Return up to 50 non-overlapping candidates, highest confidence first.

        A ``max_address`` of zero, or one past the end, scans to the end.
        """
        size = len(self._data)
        if size == 0:
            return []
        if max_address == 0 or max_address > size:
            max_address = size

        candidates: list[MapCandidate] = []
        for offset in range(min_address, max_address - _MIN_MAP_SIZE, _STEP * 2):
            candidate = self._detect_2d_map(offset)
            if candidate.confidence > _SCAN_THRESHOLD and self._is_valid_map_address(offset, candidate):
                candidates.append(candidate)
            if offset + _MIN_3D_SPAN < max_address:
                candidate = self._detect_3d_map(offset)
                if candidate.confidence > _SCAN_THRESHOLD and self._is_valid_map_address(offset, candidate):
                    candidates.append(candidate)

        refined: list[MapCandidate] = []
        for candidate in candidates:
            if candidate.type is MapType.MAP_2D:
                again = self._detect_2d_map(candidate.address)
            else:
                again = self._detect_3d_map(candidate.address)
            if again.confidence > _REFINE_THRESHOLD and self._is_valid_map_address(candidate.address, again):
                refined.append(again)

        refined.sort(key=lambda c: c.confidence, reverse=True)

        filtered: list[MapCandidate] = []
        for candidate in refined:
            for index, existing in enumerate(filtered):
                if _overlaps(candidate, existing):
                    if candidate.confidence > existing.confidence:
                        filtered[index] = candidate
                    break
            else:
                filtered.append(candidate)

        return filtered[:_MAX_CANDIDATES]

    def _u16(self, offset: int) -> int:
        return struct.unpack_from("<H", self._data, offset)[0]

    def _detect_2d_map(self, offset: int) -> MapCandidate:
        candidate = MapCandidate(address=offset, type=MapType.MAP_2D)
        size = len(self._data)
        if offset + _MIN_2D_SPAN > size:
            return candidate

        best_confidence = 0.0
        best_size = 0
        for test_size in _SIZES_2D:
            if offset + test_size * 2 > size:
                continue
            pattern = analyze_2d(self._data, offset, test_size, 2)
            confidence = 0.0

            if pattern.is_monotonic:
                confidence += 0.25

            if 100 < pattern.variance < 1000000:
                confidence += 0.25
            elif pattern.variance > 0:
                confidence += 0.1

            if 100 < pattern.mean < 60000:
                confidence += 0.2
            elif 0 < pattern.mean < 65535:
                confidence += 0.1

            if test_size > 4:
                smooth = 0
                for i in range(1, test_size):
                    if offset + i * 2 + 1 >= size:
                        break
                    diff = abs(self._u16(offset + i * 2) - self._u16(offset + (i - 1) * 2))
                    if diff < pattern.mean * 0.5:
                        smooth += 1
                confidence += smooth / (test_size - 1) * 0.15

            if test_size in _PREFERRED_2D:
                confidence += 0.05

            if confidence > best_confidence:
                best_confidence = confidence
                best_size = test_size

        candidate.columns = best_size
        candidate.rows = 1
        candidate.confidence = min(best_confidence, 1.0)
        return candidate

    def _detect_3d_map(self, offset: int) -> MapCandidate:
        candidate = MapCandidate(address=offset, type=MapType.MAP_3D)
        size = len(self._data)
        if offset + _MIN_3D_SPAN > size:
            return candidate

        best_confidence = 0.0
        best_rows = 0
        best_cols = 0
        for rows in _DIMS_3D:
            for cols in _DIMS_3D:
                if offset + rows * cols * 2 > size:
                    continue
                has_pattern = detect_matrix_pattern(self._data, offset, rows, cols, 2)
                row_pattern = analyze_2d(self._data, offset, cols, 2)

                confidence = 0.0
                if has_pattern:
                    confidence += 0.4
                if 100 < row_pattern.variance < 1000000:
                    confidence += 0.3
                if 0 < row_pattern.mean < 65535:
                    confidence += 0.2
                if row_pattern.is_monotonic:
                    confidence += 0.1

                if confidence > best_confidence:
                    best_confidence = confidence
                    best_rows = rows
                    best_cols = cols

        candidate.rows = best_rows
        candidate.columns = best_cols
        candidate.confidence = best_confidence
        return candidate

    def _is_valid_map_address(self, offset: int, candidate: MapCandidate) -> bool:
        cells = candidate.rows * candidate.columns
        if offset + cells * 2 > len(self._data):
            return False
        if offset % 2 != 0:
            return False
        check_count = min(cells, 16)
        if check_count <= 1:
            return False
        first = self._u16(offset)
        return any(self._u16(offset + i * 2) != first for i in range(1, check_count))