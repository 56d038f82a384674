"""Map packs: named collections of map definitions stored as JSON files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from os import PathLike
from typing import Any, Union

from .definition import MapAxis, MapDefinition, MapType

FILE_EXTENSION = ".mappack"

PathType = Union[str, "PathLike[str]"]


@dataclass
class MapPackInfo:
    """Descriptive metadata of a map pack."""

    name: str = ""
    version: str = ""
    author: str = ""
    description: str = ""
    ecu_name: str = ""
    ecu_id: str = ""
    file_hash: str = ""
    tags: list[str] = field(default_factory=list)


def _text(obj: dict, key: str) -> str:
    value = obj.get(key)
    return value if isinstance(value, str) else ""


def _integer(obj: dict, key: str) -> int:
    value = obj.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not value.is_integer():
        return 0
    return int(value)


def _number(obj: dict, key: str) -> float:
    value = obj.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _object(obj: dict, key: str) -> dict:
    value = obj.get(key)
    return value if isinstance(value, dict) else {}


def _array(obj: dict, key: str) -> list:
    value = obj.get(key)
    return value if isinstance(value, list) else []


def _axis_to_json(axis: MapAxis) -> dict[str, Any]:
    return {
        "address": axis.address,
        "count": axis.count,
        "dataType": axis.data_type,
        "factor": axis.factor,
        "offset": axis.offset,
        "name": axis.name,
        "unit": axis.unit,
    }


def _axis_from_json(axis: MapAxis, obj: dict) -> None:
    axis.address = _integer(obj, "address")
    axis.count = _integer(obj, "count")
    axis.data_type = _integer(obj, "dataType")
    axis.factor = _number(obj, "factor")
    axis.offset = _number(obj, "offset")
    axis.name = _text(obj, "name")
    axis.unit = _text(obj, "unit")


def _map_to_json(map_def: MapDefinition) -> dict[str, Any]:
    obj: dict[str, Any] = {
        "name": map_def.name,
        "address": map_def.address,
        "type": "3D" if map_def.type is MapType.MAP_3D else "2D",
        "rows": map_def.rows,
        "columns": map_def.columns,
        "dataType": map_def.data_type,
        "factor": map_def.factor,
        "offset": map_def.offset,
        "unit": map_def.unit,
        "xAxis": _axis_to_json(map_def.x_axis),
    }
    if map_def.type is MapType.MAP_3D:
        obj["yAxis"] = _axis_to_json(map_def.y_axis)
    return obj


def _map_from_json(obj: dict) -> MapDefinition:
    map_def = MapDefinition(
        name=_text(obj, "name"),
        address=_integer(obj, "address"),
        type=MapType.MAP_3D if _text(obj, "type") == "3D" else MapType.MAP_2D,
        rows=_integer(obj, "rows"),
        columns=_integer(obj, "columns"),
        data_type=_integer(obj, "dataType"),
        factor=_number(obj, "factor"),
        offset=_number(obj, "offset"),
        unit=_text(obj, "unit"),
    )
    _axis_from_json(map_def.x_axis, _object(obj, "xAxis"))
    if map_def.type is MapType.MAP_3D:
        _axis_from_json(map_def.y_axis, _object(obj, "yAxis"))
    return map_def


class MapPack:
    """A set of map definitions together with information about the pack."""

    FILE_EXTENSION = FILE_EXTENSION

    def __init__(self, info: MapPackInfo | None = None, maps: list[MapDefinition] | None = None):
        self.info = info if info is not None else MapPackInfo()
        self.maps: list[MapDefinition] = list(maps) if maps is not None else []

    def add_map(self, map_def: MapDefinition) -> None:
        """Append a map definition."""
        self.maps.append(map_def)

    def remove_map(self, index: int) -> None:
        """Remove the map at ``index``; an index out of range is ignored."""
        if 0 <= index < len(self.maps):
            del self.maps[index]

    def __getitem__(self, index: int) -> MapDefinition:
        if not 0 <= index < len(self.maps):
            raise IndexError("Map index out of range")
        return self.maps[index]

    def __len__(self) -> int:
        return len(self.maps)

    def to_json(self) -> dict[str, Any]:
        """The JSON document describing this pack."""
        info = self.info
        return {
            "info": {
                "name": info.name,
                "version": info.version,
                "author": info.author,
                "description": info.description,
                "ecuName": info.ecu_name,
                "ecuId": info.ecu_id,
                "fileHash": info.file_hash,
                "tags": list(info.tags),
            },
            "maps": [_map_to_json(map_def) for map_def in self.maps],
        }

    def save(self, path: PathType) -> None:
        """Write the pack as JSON; raises OSError if the file cannot be written."""
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(self.to_json(), handle, indent=4)
            handle.write("\n")

    def load(self, path: PathType) -> None:
        """Replace the pack's contents with those of a JSON file.

        Raises OSError if the file cannot be read and ValueError if it does
        not hold a JSON object.
        """
        with open(path, "rb") as handle:
            raw = handle.read()
        try:
            root = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValueError(f"not a valid map pack: {exc}") from None
        if not isinstance(root, dict):
            raise ValueError("not a valid map pack: top level is not an object")

        info_obj = _object(root, "info")
        self.info = MapPackInfo(
            name=_text(info_obj, "name"),
            version=_text(info_obj, "version"),
            author=_text(info_obj, "author"),
            description=_text(info_obj, "description"),
            ecu_name=_text(info_obj, "ecuName"),
            ecu_id=_text(info_obj, "ecuId"),
            file_hash=_text(info_obj, "fileHash"),
            tags=[tag if isinstance(tag, str) else "" for tag in _array(info_obj, "tags")],
        )
        self.maps = [
            _map_from_json(obj if isinstance(obj, dict) else {}) for obj in _array(root, "maps")
        ]


class MapPackManager:
    """Keeps the map packs that have been loaded."""

    def __init__(self):
        self._installed: list[MapPack] = []

    def load_map_pack(self, path: PathType) -> MapPack:
        """Load a pack from ``path`` and add it to the installed packs."""
        pack = MapPack()
        pack.load(path)
        self._installed.append(pack)
        return pack

    def save_map_pack(self, pack: MapPack, path: PathType) -> None:
        """Save ``pack`` to ``path``."""
        pack.save(path)

    def installed_map_packs(self) -> list[MapPackInfo]:
        """Information about every loaded pack, in load order."""
        return [pack.info for pack in self._installed]