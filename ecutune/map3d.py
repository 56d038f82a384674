"""Two-dimensional maps (tables) held in memory with optional X and Y axes."""

from __future__ import annotations

from .definition import MapDefinition
from .map2d import Validator, _accepts, _read_axis, _read_cells, _write_axis, _write_cells
from .scaling import physical_to_raw_u16, raw_to_physical


class Map3D:
    """A row-major table of 16-bit raw values with optional X and Y breakpoints."""

    def __init__(self, definition: MapDefinition | None = None, validator: Validator | None = None):
        self.definition = definition if definition is not None else MapDefinition()
        self.validator = validator
        self.rows = self.definition.rows
        self.columns = self.definition.columns
        self.raw_data: list[int] = [0] * (self.rows * self.columns)
        self.x_axis_data: list[float] = (
            [0.0] * self.definition.x_axis.count if self.definition.has_x_axis() else []
        )
        self.y_axis_data: list[float] = (
            [0.0] * self.definition.y_axis.count if self.definition.has_y_axis() else []
        )

    def load_from_binary(self, data) -> None:
        """Read the X axis, the Y axis and then the cells from the start of ``data``."""
        if not data:
            return
        offset = 0
        if self.definition.has_x_axis():
            self.x_axis_data, offset = _read_axis(data, offset, self.definition.x_axis, self.x_axis_data)
        if self.definition.has_y_axis():
            self.y_axis_data, offset = _read_axis(data, offset, self.definition.y_axis, self.y_axis_data)
        _read_cells(data, offset, self.definition, self.raw_data)

    def write_to_binary(self, buffer) -> None:
        """Write the axes present and the cells into the writable ``buffer``."""
        if len(buffer) == 0:
            return
        offset = 0
        if self.definition.has_x_axis():
            offset = _write_axis(buffer, offset, self.definition.x_axis, self.x_axis_data)
        if self.definition.has_y_axis():
            offset = _write_axis(buffer, offset, self.definition.y_axis, self.y_axis_data)
        _write_cells(buffer, offset, self.definition, self.raw_data)

    def _index(self, row: int, col: int) -> int | None:
        if 0 <= row < self.rows and 0 <= col < self.columns:
            return row * self.columns + col
        return None

    def raw_value(self, row: int, col: int) -> int:
        """Raw value of a cell; zero outside the table."""
        index = self._index(row, col)
        return 0 if index is None else self.raw_data[index]

    def set_raw_value(self, row: int, col: int, value: int) -> None:
        """Store a raw value unless outside the table or blocked by the validator."""
        index = self._index(row, col)
        if index is None:
            return
        value &= 0xFFFF
        physical = raw_to_physical(value, self.definition.factor, self.definition.offset)
        if not _accepts(self.validator, self.definition, physical):
            return
        self.raw_data[index] = value

    def physical_value(self, row: int, col: int) -> float:
        """Scaled value of a cell; zero outside the table."""
        index = self._index(row, col)
        if index is None:
            return 0.0
        return raw_to_physical(self.raw_data[index], self.definition.factor, self.definition.offset)

    def set_physical_value(self, row: int, col: int, value: float) -> None:
        """Store a physical value as a clamped 16-bit raw value, subject to validation."""
        index = self._index(row, col)
        if index is None:
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

    def y_axis_value(self, index: int) -> float:
        """Y breakpoint at ``index``; the index itself when there is none."""
        if 0 <= index < len(self.y_axis_data):
            return self.y_axis_data[index]
        return float(index)

    def set_y_axis_value(self, index: int, value: float) -> None:
        """Change a Y breakpoint; out-of-range indexes are ignored."""
        if 0 <= index < len(self.y_axis_data):
            self.y_axis_data[index] = value