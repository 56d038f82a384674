"""One-dimensional maps (curves) held in memory with an optional X axis."""

from __future__ import annotations

import math
import struct
from collections.abc import Callable
from dataclasses import dataclass

from .definition import MapAxis, MapDefinition
from .scaling import RawKind, physical_to_raw, physical_to_raw_float, physical_to_raw_u16, raw_to_physical

_FORMATS = {1: "<B", 2: "<H", 4: "<f"}


@dataclass(frozen=True)
class ValueLimits:
    """Hard and warning limits that apply to the physical values of a map."""

    hard_min: float = 0.0
    hard_max: float = 10000.0
    warning_min: float = 0.0
    warning_max: float = 10000.0

    @classmethod
    def from_definition(cls, definition: MapDefinition) -> "ValueLimits":
        """Take the limits configured on a map definition."""
        return cls(
            hard_min=definition.hard_min,
            hard_max=definition.hard_max,
            warning_min=definition.warning_min,
            warning_max=definition.warning_max,
        )


Validator = Callable[[float, ValueLimits], bool]
"""Decides whether a physical value may be stored; False blocks the change."""


def _axis_element_size(axis: MapAxis) -> int:
    if axis.data_type == 1:
        return 1
    if axis.data_type == 4:
        return 4
    return 2


def _axis_kind(axis: MapAxis) -> RawKind:
    size = _axis_element_size(axis)
    if size == 1:
        return RawKind.UINT8
    if size == 4:
        return RawKind.FLOAT
    return RawKind.UINT16


def _wrap_u16(value: float) -> int:
    if not math.isfinite(value):
        return 0
    return int(value) & 0xFFFF


def _read_axis(data, offset: int, axis: MapAxis, current: list[float]) -> tuple[list[float], int]:
    """Read ``axis.count`` breakpoints from ``offset``; return them and the next offset."""
    size = _axis_element_size(axis)
    fmt = _FORMATS[size]
    values = (list(current) + [0.0] * axis.count)[: axis.count]
    for i in range(axis.count):
        if offset + size > len(data):
            break
        (raw,) = struct.unpack_from(fmt, data, offset)
        values[i] = raw_to_physical(raw, axis.factor, axis.offset)
        offset += size
    return values, offset


def _write_axis(buffer, offset: int, axis: MapAxis, values) -> int:
    """Write axis breakpoints at ``offset``; return the next offset."""
    size = _axis_element_size(axis)
    fmt = _FORMATS[size]
    kind = _axis_kind(axis)
    for value in values:
        if offset + size > len(buffer):
            break
        struct.pack_into(fmt, buffer, offset, physical_to_raw(kind, value, axis.factor, axis.offset))
        offset += size
    return offset


def _read_cells(data, offset: int, definition: MapDefinition, cells: list[int]) -> None:
    """Fill ``cells`` in place with raw values read from ``offset``."""
    size = definition.data_size()
    fmt = _FORMATS[size]
    for i in range(len(cells)):
        if offset + size > len(data):
            break
        (raw,) = struct.unpack_from(fmt, data, offset)
        if size == 4:
            cells[i] = _wrap_u16(raw_to_physical(raw, definition.factor, definition.offset) * 1000.0)
        else:
            cells[i] = int(raw)
        offset += size


def _write_cells(buffer, offset: int, definition: MapDefinition, cells) -> None:
    """Write raw cell values at ``offset``; float maps store the scaled physical value."""
    size = definition.data_size()
    fmt = _FORMATS[size]
    for raw in cells:
        if offset + size > len(buffer):
            break
        if size == 2:
            struct.pack_into(fmt, buffer, offset, raw & 0xFFFF)
        elif size == 1:
            struct.pack_into(fmt, buffer, offset, raw & 0xFF)
        else:
            physical = raw_to_physical(raw, definition.factor, definition.offset)
            struct.pack_into(
                fmt, buffer, offset, physical_to_raw_float(physical, definition.factor, definition.offset)
            )
        offset += size


def _accepts(validator: Validator | None, definition: MapDefinition, physical: float) -> bool:
    if validator is None:
        return True
    return bool(validator(physical, ValueLimits.from_definition(definition)))


class Map2D:
    """A curve of 16-bit raw values with an optional X axis of physical breakpoints."""

    def __init__(self, definition: MapDefinition | None = None, validator: Validator | None = None):
        self.definition = definition if definition is not None else MapDefinition()
        self.validator = validator
        self.raw_data: list[int] = [0] * self.definition.columns
        self.x_axis_data: list[float] = (
            [0.0] * self.definition.x_axis.count if self.definition.has_x_axis() else []
        )

    def load_from_binary(self, data) -> None:
        """Read the X axis (if any) followed by the cells from the start of ``data``."""
        if not data:
            return
        offset = 0
        if self.definition.has_x_axis():
            self.x_axis_data, offset = _read_axis(data, offset, self.definition.x_axis, self.x_axis_data)
        columns = self.definition.columns
        self.raw_data = (self.raw_data + [0] * columns)[:columns]
        _read_cells(data, offset, self.definition, self.raw_data)

    def write_to_binary(self, buffer) -> None:
        """Write the X axis (if any) and the cells into the writable ``buffer``."""
        if len(buffer) == 0:
            return
        offset = 0
        if self.definition.has_x_axis():
            axis = self.definition.x_axis
            offset = _write_axis(buffer, offset, axis, self.x_axis_data[: axis.count])
        _write_cells(buffer, offset, self.definition, self.raw_data)

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self.raw_data)

    def raw_value(self, index: int) -> int:
        """Raw value of a cell; zero when the index is out of range."""
        return self.raw_data[index] if self._in_range(index) else 0

    def set_raw_value(self, index: int, value: int) -> None:
        """Store a raw value unless the index is out of range or the validator blocks it."""
        if not self._in_range(index):
            return
        value &= 0xFFFF
        physical = raw_to_physical(value, self.definition.factor, self.definition.offset)
        if not _accepts(self.validator, self.definition, physical):
            return
        self.raw_data[index] = value

    def physical_value(self, index: int) -> float:
        """Scaled value of a cell; zero when the index is out of range."""
        if not self._in_range(index):
            return 0.0
        return raw_to_physical(self.raw_data[index], self.definition.factor, self.definition.offset)

    def set_physical_value(self, index: int, value: float) -> None:
        """Store a physical value as a clamped 16-bit raw value, subject to validation."""
        if not self._in_range(index):
            return
        if not _accepts(self.validator, self.definition, value):
            return
        self.raw_data[index] = physical_to_raw_u16(value, self.definition.factor, self.definition.offset)

    def x_axis_value(self, index: int) -> float:
        """X breakpoint at ``index``; the index itself when there is none."""
        if 0 <= index < len(self.x_axis_data):
            return self.x_axis_data[index]
        return float(index)

    def set_x_axis_value(self, index: int, value: float) -> None:
        """Change an X breakpoint; out-of-range indexes are ignored."""
        if 0 <= index < len(self.x_axis_data):
            self.x_axis_data[index] = value

    def point_count(self) -> int:
        """Number of cells in the curve."""
        return len(self.raw_data)