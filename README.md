# ecutune

A library for working with calibration maps in ECU binary images. It can
describe maps and their axes, scale values between raw and physical form,
find likely maps with heuristics, save and load map packs as JSON, compare
maps, and edit map contents in bulk.

## Installation

```
pip install .
```

The package has no runtime dependencies outside the standard library.

## Modules

- `ecutune.definition`: `MapDefinition`, `MapAxis`, `MapType` and `AxisType`.
  These dataclasses record where a map lives, its shape, its scaling
  (`factor`, `offset`) and its storage type. The data type codes are
  1 = uint8, 2 = uint16, 3 = int16 and 4 = float. `MapDefinition.data_size()`
  gives the bytes per cell and `total_size()` gives the bytes used by the cells
  plus their axes.
- `ecutune.scaling`: `raw_to_physical` computes `raw * factor + offset`.
  `physical_to_raw_u8`, `physical_to_raw_u16`, `physical_to_raw_i16` and
  `physical_to_raw_float` convert in the other direction and clamp integers to
  their type's range. `physical_to_raw(kind, ...)` picks the conversion by a
  `RawKind` or its name (`"uint8"`, `"uint16"`, `"int16"`, `"float"`).
- `ecutune.pattern_analyzer`: `analyze_2d` returns a `PatternResult` with the
  mean, population variance and monotonicity of a run of little-endian values.
  `calculate_variance` and `detect_matrix_pattern` are also provided.
- `ecutune.map_detector`: `MapDetector` scans a binary for regions that look
  like 16-bit curves or tables. `detect_maps(min_address, max_address)` returns
  at most 50 non-overlapping `MapCandidate` objects, highest confidence first.
  A `max_address` of 0 scans to the end of the data.
- `ecutune.map2d` and `ecutune.map3d`: `Map2D` (a curve) and `Map3D` (a table)
  keep a map's raw 16-bit values and its axis breakpoints in memory. They have
  `load_from_binary` and `write_to_binary` methods. An optional validator,
  a callable taking `(physical_value, ValueLimits)` and returning `False` to
  block a change, is consulted before values are set.
- `ecutune.mappack`: `MapPack` holds a `MapPackInfo` and a list of map
  definitions. It supports `len()` and indexing (out-of-range indexes raise
  `IndexError`), and reads and writes JSON with `save(path)` and `load(path)`.
  `load` raises `ValueError` for a file that is not a JSON object.
  `MapPackManager` keeps the packs it has loaded.
- `ecutune.map_comparator`: `MapComparator.compare_maps` lists the cells that
  differ between two maps, each read from its own bytes, and gives statistics
  on the differences. `maps_are_equal` checks them against a tolerance. uint8
  maps read as zero in comparisons.
- `ecutune.batch_operations`: `BinaryAccess` wraps a writable image.
  `read_map_value` and `write_map_value` access single cells.
  `BatchOperations` provides copy, paste, fill (`FillMode.CONSTANT` or
  `FillMode.LINEAR`) and `apply_to_all_maps`.
- `ecutune.interpolation`: `InterpolationEngine` fills a map or a region
  bilinearly from its corner cells (only `InterpolationType.LINEAR` changes
  data) and smooths a map with a box filter of odd size.
- `ecutune.map_math`: `MapMath` does cell-wise add, subtract, multiply and
  divide between maps of the same shape, and with scalars. `apply_function`
  applies any function to every cell.

## Examples

Detecting maps and saving them as a pack:

```python
from ecutune.definition import MapDefinition
from ecutune.map_detector import MapDetector
from ecutune.mappack import MapPack

with open("image.bin", "rb") as fh:
    image = fh.read()

pack = MapPack()
for candidate in MapDetector(image).detect_maps(0, 0):
    pack.add_map(MapDefinition(
        name=f"map_{candidate.address:08X}",
        address=candidate.address,
        type=candidate.type,
        rows=candidate.rows,
        columns=candidate.columns,
    ))

pack.info.name = "Detected maps"
pack.save("detected.mappack")
print(len(pack), "maps saved")
```

Editing a map inside an image:

```python
from ecutune.batch_operations import BatchOperations, BinaryAccess
from ecutune.definition import MapDefinition
from ecutune.map_math import MapMath

binary = BinaryAccess(bytes(1024))
fuel = MapDefinition(name="fuel", address=0x100, rows=4, columns=4,
                     data_type=2, factor=0.1)

BatchOperations(binary).fill_map(fuel, 12.5)
MapMath(binary).multiply_scalar(fuel, 2.0)
print(BatchOperations(binary).copy_map_data(fuel, 0, 0, 0, 3))

with open("edited.bin", "wb") as fh:
    fh.write(bytes(binary))
```

Cells that fall outside the image are skipped when writing and read as zero.

## What the package does not do

This is a library only. It has no command-line tool, no graphical editor or
hex view, and no project, bookmark or settings storage. It does not recalculate
checksums, and it has no plugin loading. You read and write binary images with
ordinary file I/O, as shown above. Value limits are checked only through the
validator you pass to `Map2D` or `Map3D`.

## Running the tests

```
pip install ".[test]"
pytest
```