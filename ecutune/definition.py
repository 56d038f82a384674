"""Map and axis definitions describing where calibration tables live in a binary."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

_DATA_SIZES = {1: 1, 2: 2, 3: 2, 4: 4}


class AxisType(Enum):
    """Which dimension an axis describes."""

    X_AXIS = "x"
    Y_AXIS = "y"
    Z_AXIS = "z"


class MapType(Enum):
    """Shape of a map: a single curve or a table."""

    MAP_2D = "2D"
    MAP_3D = "3D"


@dataclass
class MapAxis:
    """Breakpoint axis of a map.

    ``data_type`` codes: 1 = uint8, 2 = uint16, 3 = int16, 4 = float.
    """

    type: AxisType = AxisType.X_AXIS
    address: int = 0
    count: int = 0
    data_type: int = 2
    factor: float = 1.0
    offset: float = 0.0
    name: str = ""
    unit: str = ""


def _axis_element_size(axis: MapAxis) -> int:
    if axis.data_type == 1:
        return 1
    if axis.data_type == 4:
        return 4
    return 2


@dataclass
class MapDefinition:
    """Location, layout and scaling of a single map.

    ``data_type`` codes: 1 = uint8, 2 = uint16, 3 = int16, 4 = float.
    """

    name: str = ""
    address: int = 0
    type: MapType = MapType.MAP_2D
    rows: int = 0
    columns: int = 0
    data_type: int = 2
    factor: float = 1.0
    offset: float = 0.0
    unit: str = ""
    x_axis: MapAxis = field(default_factory=lambda: MapAxis(type=AxisType.X_AXIS))
    y_axis: MapAxis = field(default_factory=lambda: MapAxis(type=AxisType.Y_AXIS))
    hard_min: float = 0.0
    hard_max: float = 10000.0
    warning_min: float = 0.0
    warning_max: float = 10000.0

    def has_x_axis(self) -> bool:
        """True when the X axis has at least one breakpoint."""
        return self.x_axis.count > 0

    def has_y_axis(self) -> bool:
        """True when the Y axis has at least one breakpoint."""
        return self.y_axis.count > 0

    def data_size(self) -> int:
        """Size in bytes of one map cell; unknown types count as two bytes."""
        return _DATA_SIZES.get(self.data_type, 2)

    def total_size(self) -> int:
        """Bytes taken by the cells plus the axes that belong to the map."""
        size = self.rows * self.columns * self.data_size()
        if self.has_x_axis():
            size += self.x_axis.count * _axis_element_size(self.x_axis)
        if self.has_y_axis() and self.type is MapType.MAP_3D:
            size += self.y_axis.count * _axis_element_size(self.y_axis)
        return size