"""Interpolation and smoothing of map cells stored in a binary image."""

from __future__ import annotations

from enum import Enum

from .batch_operations import BinaryAccess, read_map_value, write_map_value
from .definition import MapDefinition


class InterpolationType(Enum):
    """Interpolation method; only LINEAR changes the data."""

    LINEAR = "linear"
    CUBIC = "cubic"
    SPLINE = "spline"


def _lerp(x0: float, y0: float, x1: float, y1: float, x: float) -> float:
    if abs(x1 - x0) < 0.0001:
        return y0
    return y0 + (y1 - y0) * ((x - x0) / (x1 - x0))


def _fraction(position: int, start: int, end: int) -> float:
    span = end - start
    return (position - start) / span if span else 0.0


class InterpolationEngine:
    """Rewrites map regions from their corners or by box filtering."""

    def __init__(self, binary: BinaryAccess | None = None):
        self.binary = binary

    def interpolate_map(self, map_def: MapDefinition,
                        kind: InterpolationType = InterpolationType.LINEAR) -> None:
        """Interpolate the whole map from its four corners.

        Raises ValueError for a map without cells.
        """
        if map_def.rows <= 0 or map_def.columns <= 0:
            raise ValueError("map has no cells")
        self.interpolate_region(map_def, 0, 0, map_def.rows - 1, map_def.columns - 1, kind)

    def interpolate_region(self, map_def: MapDefinition, start_row: int, start_col: int,
                           end_row: int, end_col: int,
                           kind: InterpolationType = InterpolationType.LINEAR) -> None:
        """Bilinearly fill an inclusive region from its corner cells.

        A region one row or one column wide takes its first edge along that
        direction. Methods other than LINEAR leave the region unchanged.
        """
        if kind is not InterpolationType.LINEAR:
            return
        top_left = read_map_value(self.binary, map_def, start_row, start_col)
        top_right = read_map_value(self.binary, map_def, start_row, end_col)
        bottom_left = read_map_value(self.binary, map_def, end_row, start_col)
        bottom_right = read_map_value(self.binary, map_def, end_row, end_col)

        for r in range(start_row, end_row + 1):
            row_t = _fraction(r, start_row, end_row)
            for c in range(start_col, end_col + 1):
                col_t = _fraction(c, start_col, end_col)
                top = _lerp(0, top_left, 1, top_right, col_t)
                bottom = _lerp(0, bottom_left, 1, bottom_right, col_t)
                write_map_value(self.binary, map_def, r, c, _lerp(0, top, 1, bottom, row_t))

    def smooth_map(self, map_def: MapDefinition, kernel_size: int = 3) -> None:
        """Replace every cell with the mean of its square neighbourhood.

        The window is clipped at the map edges. Raises ValueError unless
        ``kernel_size`` is an odd number of at least 3.
        """
        if kernel_size < 3 or kernel_size % 2 == 0:
            raise ValueError(f"kernel size must be odd and at least 3, got {kernel_size}")
        rows, cols = map_def.rows, map_def.columns
        values = [[read_map_value(self.binary, map_def, r, c) for c in range(cols)] for r in range(rows)]
        half = kernel_size // 2

        for r in range(rows):
            row_window = values[max(0, r - half):min(rows, r + half + 1)]
            for c in range(cols):
                window = [v for line in row_window for v in line[max(0, c - half):min(cols, c + half + 1)]]
                if window:
                    write_map_value(self.binary, map_def, r, c, sum(window) / len(window))