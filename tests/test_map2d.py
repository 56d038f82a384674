import struct

import pytest

from ecutune.definition import MapAxis, MapDefinition
from ecutune.map2d import Map2D, ValueLimits
from ecutune.scaling import raw_to_physical


def _definition(columns=4, data_type=2, factor=1.0, offset=0.0, axis_count=0, axis_type=2, axis_factor=1.0):
    return MapDefinition(
        columns=columns,
        rows=1,
        data_type=data_type,
        factor=factor,
        offset=offset,
        x_axis=MapAxis(count=axis_count, data_type=axis_type, factor=axis_factor),
    )


def test_construction_sizes_follow_definition():
    m = Map2D(_definition(columns=5, axis_count=3))
    assert m.point_count() == 5
    assert m.raw_data == [0] * 5
    assert m.x_axis_data == [0.0] * 3


def test_load_uint16_with_axis():
    data = struct.pack("<3H4H", 10, 20, 30, 100, 200, 300, 400)
    m = Map2D(_definition(axis_count=3, axis_factor=0.5))
    m.load_from_binary(data)
    assert m.x_axis_data == [raw_to_physical(v, 0.5, 0.0) for v in (10, 20, 30)]
    assert m.raw_data == [100, 200, 300, 400]


def test_load_uint8_cells():
    m = Map2D(_definition(columns=3, data_type=1))
    m.load_from_binary(bytes([7, 8, 9]))
    assert m.raw_data == [7, 8, 9]


def test_load_float_cells_scaled_by_thousand():
    m = Map2D(_definition(columns=1, data_type=4))
    m.load_from_binary(struct.pack("<f", 1.5))
    assert m.raw_data == [1500]


def test_short_data_leaves_remaining_cells():
    m = Map2D(_definition(columns=4))
    m.load_from_binary(struct.pack("<2H", 5, 6))
    assert m.raw_data == [5, 6, 0, 0]


def test_empty_data_is_ignored():
    m = Map2D(_definition(columns=2))
    m.raw_data = [1, 2]
    m.load_from_binary(b"")
    assert m.raw_data == [1, 2]


def test_uint16_round_trip():
    data = struct.pack("<2H4H", 1000, 2000, 11, 22, 33, 44)
    m = Map2D(_definition(axis_count=2))
    m.load_from_binary(data)
    out = bytearray(len(data))
    m.write_to_binary(out)
    assert bytes(out) == data


def test_uint8_axis_round_trip():
    data = bytes([1, 2, 3]) + struct.pack("<2H", 500, 600)
    m = Map2D(_definition(columns=2, axis_count=3, axis_type=1))
    m.load_from_binary(data)
    out = bytearray(len(data))
    m.write_to_binary(out)
    assert bytes(out) == data


def test_write_float_cells_store_scaled_raw():
    m = Map2D(_definition(columns=1, data_type=4, factor=2.0))
    m.raw_data = [3]
    out = bytearray(4)
    m.write_to_binary(out)
    assert struct.unpack("<f", out)[0] == pytest.approx(3.0)


def test_write_stops_at_buffer_end():
    m = Map2D(_definition(columns=3))
    m.raw_data = [1, 2, 3]
    out = bytearray(4)
    m.write_to_binary(out)
    assert struct.unpack("<2H", out) == (1, 2)


def test_out_of_range_access():
    m = Map2D(_definition(columns=2))
    assert m.raw_value(5) == 0
    assert m.physical_value(-1) == 0.0
    m.set_raw_value(9, 123)
    assert m.raw_data == [0, 0]


def test_physical_round_trip_with_factor():
    m = Map2D(_definition(columns=2, factor=0.1, offset=5.0))
    m.set_physical_value(1, 12.3)
    assert m.physical_value(1) == pytest.approx(12.3)


def test_physical_value_clamps_to_uint16():
    m = Map2D(_definition(columns=1))
    m.set_physical_value(0, 1e9)
    assert m.raw_value(0) == 65535


def test_validator_blocks_change():
    m = Map2D(_definition(columns=1), validator=lambda value, limits: False)
    m.set_physical_value(0, 10.0)
    m.set_raw_value(0, 10)
    assert m.raw_value(0) == 0


def test_validator_receives_physical_and_limits():
    seen = []
    definition = _definition(columns=1, factor=2.0, offset=1.0)
    definition.hard_max = 42.0
    m = Map2D(definition, validator=lambda value, limits: seen.append((value, limits)) or True)
    m.set_raw_value(0, 7)
    assert m.raw_value(0) == 7
    assert seen == [(raw_to_physical(7, 2.0, 1.0), ValueLimits.from_definition(definition))]
    assert seen[0][1].hard_max == 42.0


def test_x_axis_defaults_and_setters():
    m = Map2D(_definition(axis_count=2))
    assert m.x_axis_value(7) == 7.0
    m.set_x_axis_value(1, 3.5)
    m.set_x_axis_value(4, 9.0)
    assert m.x_axis_data == [0.0, 3.5]