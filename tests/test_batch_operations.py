import pytest

from ecutune.batch_operations import (
    BatchOperations,
    BinaryAccess,
    FillMode,
    read_map_value,
    write_map_value,
)
from ecutune.definition import MapDefinition


def make_map(rows, columns, data_type=2, address=0, factor=1.0, offset=0.0):
    return MapDefinition(rows=rows, columns=columns, data_type=data_type, address=address,
                         factor=factor, offset=offset)


def grid(binary, map_def):
    return [[read_map_value(binary, map_def, r, c) for c in range(map_def.columns)]
            for r in range(map_def.rows)]


def test_paste_then_copy_round_trip():
    binary = BinaryAccess(bytearray(64))
    map_def = make_map(2, 3)
    ops = BatchOperations(binary)
    values = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    assert ops.paste_map_data(map_def, 0, 0, values) == 6
    assert ops.copy_map_data(map_def, 0, 0, 1, 2) == values


def test_copy_sub_region():
    binary = BinaryAccess(bytearray(64))
    map_def = make_map(3, 3)
    ops = BatchOperations(binary)
    ops.paste_map_data(map_def, 0, 0, [float(v) for v in range(9)])
    assert ops.copy_map_data(map_def, 1, 1, 2, 2) == [4.0, 5.0, 7.0, 8.0]


def test_copy_outside_map_raises():
    ops = BatchOperations(BinaryAccess(bytearray(64)))
    with pytest.raises(IndexError):
        ops.copy_map_data(make_map(2, 2), 0, 0, 2, 1)


def test_copy_reversed_region_raises():
    ops = BatchOperations(BinaryAccess(bytearray(64)))
    with pytest.raises(ValueError):
        ops.copy_map_data(make_map(3, 3), 2, 0, 1, 2)


def test_paste_restarts_each_row_at_start_column():
    binary = BinaryAccess(bytearray(64))
    map_def = make_map(3, 3)
    ops = BatchOperations(binary)
    assert ops.paste_map_data(map_def, 0, 1, [1.0, 2.0, 3.0, 4.0]) == 4
    cells = grid(binary, map_def)
    assert cells[0] == [0.0, 1.0, 2.0]
    assert cells[1] == [0.0, 3.0, 4.0]
    assert cells[2] == [0.0, 0.0, 0.0]


def test_paste_stops_at_map_end():
    binary = BinaryAccess(bytearray(64))
    map_def = make_map(2, 3)
    ops = BatchOperations(binary)
    assert ops.paste_map_data(map_def, 1, 1, [7.0, 8.0, 9.0, 10.0]) == 2
    assert grid(binary, map_def)[1] == [0.0, 7.0, 8.0]


def test_paste_start_outside_raises():
    ops = BatchOperations(BinaryAccess(bytearray(64)))
    with pytest.raises(IndexError):
        ops.paste_map_data(make_map(2, 2), 2, 0, [1.0])


def test_fill_constant():
    binary = BinaryAccess(bytearray(64))
    map_def = make_map(3, 4)
    BatchOperations(binary).fill_map(map_def, 42.0)
    assert all(v == 42.0 for row in grid(binary, map_def) for v in row)


def test_fill_region_leaves_rest_untouched():
    binary = BinaryAccess(bytearray(64))
    map_def = make_map(3, 3)
    BatchOperations(binary).fill_map_region(map_def, 1, 1, 2, 2, 9.0)
    cells = grid(binary, map_def)
    assert cells[0] == [0.0, 0.0, 0.0]
    assert cells[1][0] == 0.0 and cells[2][0] == 0.0
    assert cells[1][1:] == [9.0, 9.0] and cells[2][1:] == [9.0, 9.0]


def test_fill_linear_ramps_from_start_value():
    binary = BinaryAccess(bytearray(128))
    map_def = make_map(2, 4, data_type=4)
    write_map_value(binary, map_def, 0, 0, 2.0)
    BatchOperations(binary).fill_map(map_def, 30.0, FillMode.LINEAR)
    values = [v for row in grid(binary, map_def) for v in row]
    assert values[0] == pytest.approx(2.0)
    assert values[-1] == pytest.approx(30.0)
    assert all(a <= b for a, b in zip(values, values[1:]))


def test_fill_linear_single_cell_takes_value():
    binary = BinaryAccess(bytearray(64))
    map_def = make_map(2, 2, data_type=4)
    BatchOperations(binary).fill_map_region(map_def, 1, 1, 1, 1, 5.0, FillMode.LINEAR)
    assert read_map_value(binary, map_def, 1, 1) == 5.0


def test_fill_interpolation_mode_changes_nothing():
    binary = BinaryAccess(bytearray(64))
    map_def = make_map(2, 2)
    ops = BatchOperations(binary)
    ops.paste_map_data(map_def, 0, 0, [1.0, 2.0, 3.0, 4.0])
    ops.fill_map(map_def, 50.0, FillMode.INTERPOLATION)
    assert ops.copy_map_data(map_def, 0, 0, 1, 1) == [1.0, 2.0, 3.0, 4.0]


def test_fill_empty_map_raises():
    with pytest.raises(IndexError):
        BatchOperations(BinaryAccess(bytearray(8))).fill_map(make_map(0, 0), 1.0)


def test_apply_to_all_maps_visits_each():
    binary = BinaryAccess(bytearray(8))
    maps = [make_map(1, 1, address=a) for a in (0, 2, 4)]
    seen = []
    count = BatchOperations(binary).apply_to_all_maps(maps, lambda m, b: seen.append((m.address, b)))
    assert count == 3
    assert seen == [(0, binary), (2, binary), (4, binary)]


def test_unloaded_binary_reads_zero_and_ignores_writes():
    binary = BinaryAccess()
    map_def = make_map(1, 1)
    write_map_value(binary, map_def, 0, 0, 12.0)
    assert read_map_value(binary, map_def, 0, 0) == 0.0
    assert len(binary) == 0
    assert read_map_value(None, map_def, 0, 0) == 0.0


def test_scaling_stores_raw_little_endian():
    binary = BinaryAccess(bytearray(4))
    map_def = make_map(1, 1, factor=0.5, offset=10.0)
    write_map_value(binary, map_def, 0, 0, 20.0)
    assert bytes(binary)[:2] == (20).to_bytes(2, "little")
    assert read_map_value(binary, map_def, 0, 0) == 20.0


def test_int16_negative_round_trip():
    binary = BinaryAccess(bytearray(4))
    map_def = make_map(1, 1, data_type=3)
    write_map_value(binary, map_def, 0, 0, -123.0)
    assert read_map_value(binary, map_def, 0, 0) == -123.0


def test_uint8_rounds_half_away_from_zero():
    binary = BinaryAccess(bytearray(4))
    map_def = make_map(1, 1, data_type=1)
    write_map_value(binary, map_def, 0, 0, 2.5)
    assert read_map_value(binary, map_def, 0, 0) == 3.0


def test_cells_past_end_read_zero_and_are_not_written():
    binary = BinaryAccess(bytearray(4))
    map_def = make_map(1, 4, address=2)
    write_map_value(binary, map_def, 0, 3, 99.0)
    assert bytes(binary) == bytes(4)
    assert read_map_value(binary, map_def, 0, 3) == 0.0


def test_unknown_data_type_reads_zero():
    binary = BinaryAccess(b"\x05\x00\x05\x00")
    assert read_map_value(binary, make_map(1, 1, data_type=9), 0, 0) == 0.0