"""Reading, writing and bulk editing of map cells inside a binary image."""

from __future__ import annotations

import math
import struct
from collections.abc import Callable, Iterable
from enum import Enum

from .definition import MapDefinition

_LAYOUTS = {1: ("<B", 1), 2: ("<H", 2), 3: ("<h", 2), 4: ("<f", 4)}


class BinaryAccess:
    """A writable binary image; ``data`` is None while nothing is loaded."""

    def __init__(self, data=None):
        self.data: bytearray | None = bytearray(data) if data is not None else None

    @property
    def loaded(self) -> bool:
        """True when an image is present."""
        return self.data is not None

    def __len__(self) -> int:
        return len(self.data) if self.data is not None else 0

    def __bytes__(self) -> bytes:
        return bytes(self.data) if self.data is not None else b""


def _round_half_away(value: float) -> int:
    if not math.isfinite(value):
        return 0
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _cell_address(map_def: MapDefinition, row: int, col: int, width: int) -> int:
    return map_def.address + (row * map_def.columns + col) * width


def read_map_value(binary: BinaryAccess | None, map_def: MapDefinition, row: int, col: int) -> float:
    """Physical value of a cell; zero when unloaded, unsupported or out of the image."""
    if binary is None or not binary.loaded:
        return 0.0
    layout = _LAYOUTS.get(map_def.data_type)
    if layout is None:
        return 0.0
    fmt, width = layout
    address = _cell_address(map_def, row, col, width)
    if address < 0 or address + width > len(binary):
        return 0.0
    (raw,) = struct.unpack_from(fmt, binary.data, address)
    return float(raw) * map_def.factor + map_def.offset


def write_map_value(binary: BinaryAccess | None, map_def: MapDefinition, row: int, col: int,
                    value: float) -> None:
    """Store a physical value in a cell; ignored when it cannot be placed.

    Integer cells take the raw value rounded half away from zero and wrapped
    to the cell's width.
    """
    if binary is None or not binary.loaded:
        return
    layout = _LAYOUTS.get(map_def.data_type)
    if layout is None:
        return
    fmt, width = layout
    raw = (value - map_def.offset) / map_def.factor
    address = _cell_address(map_def, row, col, width)
    if address < 0 or address + width > len(binary):
        return
    if map_def.data_type == 4:
        packed = _to_float32(raw)
    else:
        integer = _round_half_away(raw)
        if map_def.data_type == 1:
            packed = integer & 0xFF
        elif map_def.data_type == 2:
            packed = integer & 0xFFFF
        else:
            packed = ((integer + 0x8000) & 0xFFFF) - 0x8000
    struct.pack_into(fmt, binary.data, address, packed)


def _require_cell(map_def: MapDefinition, row: int, col: int) -> None:
    if not (0 <= row < map_def.rows and 0 <= col < map_def.columns):
        raise IndexError(
            f"cell ({row}, {col}) outside map of {map_def.rows}x{map_def.columns}"
        )


class FillMode(Enum):
    """How a region is filled."""

    CONSTANT = "constant"
    LINEAR = "linear"
    INTERPOLATION = "interpolation"


class BatchOperations:
    """Copy, paste and fill operations on maps stored in a binary image."""

    def __init__(self, binary: BinaryAccess | None = None):
        self.binary = binary

    def copy_map_data(self, map_def: MapDefinition, start_row: int, start_col: int,
                      end_row: int, end_col: int) -> list[float]:
        """Physical values of an inclusive region, row by row.

        Raises IndexError for a corner outside the map and ValueError when
        the start lies past the end.
        """
        _require_cell(map_def, start_row, start_col)
        _require_cell(map_def, end_row, end_col)
        if start_row > end_row or start_col > end_col:
            raise ValueError("region start lies after its end")
        return [
            read_map_value(self.binary, map_def, r, c)
            for r in range(start_row, end_row + 1)
            for c in range(start_col, end_col + 1)
        ]

    def paste_map_data(self, map_def: MapDefinition, start_row: int, start_col: int,
                       buffer: Iterable[float]) -> int:
        """Write values from the start cell rightwards, each row from ``start_col``.

        Returns how many cells were written. Raises IndexError when the start
        cell lies outside the map.
        """
        _require_cell(map_def, start_row, start_col)
        cells = (
            (r, c)
            for r in range(start_row, map_def.rows)
            for c in range(start_col, map_def.columns)
        )
        written = 0
        for (r, c), value in zip(cells, buffer):
            write_map_value(self.binary, map_def, r, c, value)
            written += 1
        return written

    def fill_map(self, map_def: MapDefinition, value: float, mode: FillMode = FillMode.CONSTANT) -> None:
        """Fill every cell of the map."""
        self.fill_map_region(map_def, 0, 0, map_def.rows - 1, map_def.columns - 1, value, mode)

    def fill_map_region(self, map_def: MapDefinition, start_row: int, start_col: int,
                        end_row: int, end_col: int, value: float,
                        mode: FillMode = FillMode.CONSTANT) -> None:
        """Fill an inclusive region.

        CONSTANT writes ``value`` everywhere; LINEAR ramps from the start
        cell's current value to ``value`` in row order; INTERPOLATION leaves
        the region unchanged. Raises IndexError for a corner outside the map.
        """
        _require_cell(map_def, start_row, start_col)
        _require_cell(map_def, end_row, end_col)
        cells = [
            (r, c)
            for r in range(start_row, end_row + 1)
            for c in range(start_col, end_col + 1)
        ]
        if mode is FillMode.CONSTANT:
            for r, c in cells:
                write_map_value(self.binary, map_def, r, c, value)
        elif mode is FillMode.LINEAR and cells:
            start_value = read_map_value(self.binary, map_def, start_row, start_col)
            last = len(cells) - 1
            for index, (r, c) in enumerate(cells):
                t = index / last if last else 1.0
                write_map_value(self.binary, map_def, r, c, start_value + (value - start_value) * t)

    def apply_to_all_maps(self, maps: Iterable[MapDefinition],
                          operation: Callable[[MapDefinition, BinaryAccess | None], object]) -> int:
        """Call ``operation(map, binary)`` for each map; return how many were visited."""
        count = 0
        for map_def in maps:
            operation(map_def, self.binary)
            count += 1
        return count