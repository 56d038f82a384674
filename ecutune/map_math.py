"""Arithmetic on maps stored in a binary image."""

from __future__ import annotations

import operator
from collections.abc import Callable

from .batch_operations import BinaryAccess, read_map_value, write_map_value
from .definition import MapDefinition

_DIVISOR_EPSILON = 0.0001


def _require_same_shape(*maps: MapDefinition) -> None:
    first = maps[0]
    for other in maps[1:]:
        if other.rows != first.rows or other.columns != first.columns:
            raise ValueError(
                f"map shapes differ: {first.rows}x{first.columns} and {other.rows}x{other.columns}"
            )


def _cells(map_def: MapDefinition):
    return ((r, c) for r in range(map_def.rows) for c in range(map_def.columns))


class MapMath:
    """Cell-wise arithmetic between maps and with scalars."""

    def __init__(self, binary: BinaryAccess | None = None):
        self.binary = binary

    def _combine(self, map1: MapDefinition, map2: MapDefinition, result_map: MapDefinition,
                 op: Callable[[float, float], float]) -> None:
        _require_same_shape(map1, map2, result_map)
        for r, c in _cells(map1):
            left = read_map_value(self.binary, map1, r, c)
            right = read_map_value(self.binary, map2, r, c)
            write_map_value(self.binary, result_map, r, c, op(left, right))

    def add_maps(self, map1: MapDefinition, map2: MapDefinition, result_map: MapDefinition) -> None:
        """Write ``map1 + map2`` into ``result_map``; raises ValueError on differing shapes."""
        self._combine(map1, map2, result_map, operator.add)

    def subtract_maps(self, map1: MapDefinition, map2: MapDefinition, result_map: MapDefinition) -> None:
        """Write ``map1 - map2`` into ``result_map``; raises ValueError on differing shapes."""
        self._combine(map1, map2, result_map, operator.sub)

    def multiply_maps(self, map1: MapDefinition, map2: MapDefinition, result_map: MapDefinition) -> None:
        """Write ``map1 * map2`` into ``result_map``; raises ValueError on differing shapes."""
        self._combine(map1, map2, result_map, operator.mul)

    def divide_maps(self, map1: MapDefinition, map2: MapDefinition, result_map: MapDefinition) -> None:
        """Write ``map1 / map2`` into ``result_map``.

        Cells whose divisor is within 0.0001 of zero are left unchanged.
        Raises ValueError on differing shapes.
        """
        _require_same_shape(map1, map2, result_map)
        for r, c in _cells(map1):
            left = read_map_value(self.binary, map1, r, c)
            right = read_map_value(self.binary, map2, r, c)
            if abs(right) > _DIVISOR_EPSILON:
                write_map_value(self.binary, result_map, r, c, left / right)

    def apply_function(self, map_def: MapDefinition, func: Callable[[float], float]) -> None:
        """Replace every cell's physical value with ``func(value)``."""
        for r, c in _cells(map_def):
            write_map_value(self.binary, map_def, r, c, func(read_map_value(self.binary, map_def, r, c)))

    def add_scalar(self, map_def: MapDefinition, scalar: float) -> None:
        """Add ``scalar`` to every cell."""
        self.apply_function(map_def, lambda value: value + scalar)

    def subtract_scalar(self, map_def: MapDefinition, scalar: float) -> None:
        """Subtract ``scalar`` from every cell."""
        self.add_scalar(map_def, -scalar)

    def multiply_scalar(self, map_def: MapDefinition, scalar: float) -> None:
        """Multiply every cell by ``scalar``."""
        self.apply_function(map_def, lambda value: value * scalar)

    def divide_scalar(self, map_def: MapDefinition, scalar: float) -> None:
        """Divide every cell by ``scalar``; raises ZeroDivisionError when it is near zero."""
        if abs(scalar) < _DIVISOR_EPSILON:
            raise ZeroDivisionError(f"divisor too close to zero: {scalar}")
        self.multiply_scalar(map_def, 1.0 / scalar)