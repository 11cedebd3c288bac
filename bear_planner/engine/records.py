"""Parse saved-layout records into ``PlacedObject`` values.

A saved layout is a JSON array of records::

    {"id": "...", "type": "furnace", "anchorRow": 3, "anchorCol": 3,
     "footprintSize": 2, "name": ""}

Only the basic shape is checked: the record is a mapping, ``type`` is a
catalog tag, and positions/sizes are integers. Bounds and collisions are NOT
re-validated; a saved layout is trusted as-is.

Layouts written by the web planner use ``row``/``col``/``size``/
``className`` instead; those keys are accepted too, with the canonical keys
winning when both are present.
"""

from __future__ import annotations

from collections.abc import Iterable

from .errors import LayoutFormatError
from .registry import new_object_id
from .types import Catalog, PlacedObject

_LEGACY_KEYS = {
    "type": "className",
    "anchorRow": "row",
    "anchorCol": "col",
    "footprintSize": "size",
}


def _field(record: dict, key: str):
    if key in record:
        return record[key]
    return record.get(_LEGACY_KEYS.get(key, key))


def _int_field(record: dict, key: str, index: int) -> int:
    value = _field(record, key)
    # bool is an int subclass; true/false is not a coordinate.
    if isinstance(value, bool) or not isinstance(value, int):
        raise LayoutFormatError(
            f"Record {index}: {key!r} must be an integer, got {value!r}"
        )
    return value


def parse_record(record: object, catalog: Catalog, index: int = 0) -> PlacedObject:
    if not isinstance(record, dict):
        raise LayoutFormatError(f"Record {index} is not an object: {record!r}")

    object_type = _field(record, "type")
    if not isinstance(object_type, str) or object_type not in catalog:
        raise LayoutFormatError(
            f"Record {index}: unknown object type {object_type!r}"
        )

    if _field(record, "footprintSize") is None:
        size = catalog.get(object_type).footprint_size
    else:
        size = _int_field(record, "footprintSize", index)
        if size < 1:
            raise LayoutFormatError(
                f"Record {index}: footprintSize must be positive, got {size}"
            )

    name = record.get("name") or ""
    if not isinstance(name, str):
        raise LayoutFormatError(f"Record {index}: name must be a string")

    object_id = record.get("id")
    if not object_id:
        object_id = new_object_id()
    elif not isinstance(object_id, str):
        object_id = str(object_id)

    return PlacedObject(
        id=object_id,
        type=object_type,
        anchor_row=_int_field(record, "anchorRow", index),
        anchor_col=_int_field(record, "anchorCol", index),
        footprint_size=size,
        name=name,
    )


def parse_records(records: object, catalog: Catalog) -> list[PlacedObject]:
    """Parse a whole saved layout, failing on the first malformed record."""
    if not isinstance(records, list):
        raise LayoutFormatError(
            f"Layout must be a list of records, got {type(records).__name__}"
        )
    return [parse_record(r, catalog, i) for i, r in enumerate(records)]


def objects_to_records(objects: Iterable[PlacedObject]) -> list[dict]:
    return [obj.to_dict() for obj in objects]
