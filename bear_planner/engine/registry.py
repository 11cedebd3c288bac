"""The authoritative list of placed objects and its per-type counters.

Insertion order doubles as z-order: when footprints are found to share a
cell (only possible in a trusted, loaded layout) the most recently inserted
object is the one ``find_object_at`` returns.

Counters are only ever changed together with the list, and
``recount_from_scratch`` rebuilds them from the list after a bulk
replacement. Positions change only through ``relocate``, which the move
transaction calls after validating; the registry itself never revalidates a
relocation.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Iterator

from .errors import CapacityExceeded, NamingNotAllowed, UnknownObject
from .grid import check_placement, resolve_anchor
from .types import Cell, PlacedObject, PlannerConfig


def new_object_id() -> str:
    return str(uuid.uuid4())


class ObjectRegistry:
    def __init__(self, config: PlannerConfig) -> None:
        self.config = config
        self._objects: list[PlacedObject] = []
        self._counts: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[PlacedObject]:
        return iter(self._objects)

    @property
    def objects(self) -> list[PlacedObject]:
        """Placed objects in insertion order (a new list each call)."""
        return list(self._objects)

    def find(self, object_id: str) -> PlacedObject | None:
        for obj in self._objects:
            if obj.id == object_id:
                return obj
        return None

    def get(self, object_id: str) -> PlacedObject:
        obj = self.find(object_id)
        if obj is None:
            raise UnknownObject(object_id)
        return obj

    def count(self, object_type: str) -> int:
        return self._counts.get(object_type, 0)

    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    def add_object(
        self, object_type: str, target_cell: Cell, name: str = ""
    ) -> PlacedObject:
        """Place a new object centred on ``target_cell``.

        Checks, in order: the type exists, the name is allowed, its instance
        cap, bounds and collisions. Nothing is inserted unless every check
        passes.
        """
        ot = self.config.catalog.get(object_type)
        name = name.strip()
        if name and object_type not in self.config.nameable_types:
            raise NamingNotAllowed(object_type)
        size = ot.footprint_size
        if (
            ot.max_instances is not None
            and self.count(object_type) >= ot.max_instances
        ):
            raise CapacityExceeded(object_type, ot.max_instances)

        row, col = resolve_anchor(
            target_cell[0], target_cell[1], size, self.config.grid_size
        )
        check_placement(self._objects, self.config.grid_size, row, col, size)

        obj = PlacedObject(
            id=new_object_id(),
            type=object_type,
            anchor_row=row,
            anchor_col=col,
            footprint_size=size,
            name=name,
        )
        self._objects.append(obj)
        self._counts[object_type] = self.count(object_type) + 1
        return obj

    def remove_object(self, object_id: str) -> bool:
        """Remove an object if present. Returns False (no error) if absent."""
        for i, obj in enumerate(self._objects):
            if obj.id == object_id:
                del self._objects[i]
                self._counts[obj.type] = self.count(obj.type) - 1
                return True
        return False

    def find_object_at(self, row: int, col: int) -> PlacedObject | None:
        """Topmost object covering the cell, scanning newest first."""
        for obj in reversed(self._objects):
            if obj.contains(row, col):
                return obj
        return None

    def rename(self, object_id: str, new_name: str) -> PlacedObject:
        obj = self.get(object_id)
        if obj.type not in self.config.nameable_types:
            raise NamingNotAllowed(obj.type)
        obj.name = new_name.strip()
        return obj

    def relocate(self, object_id: str, anchor_row: int, anchor_col: int) -> None:
        obj = self.get(object_id)
        obj.anchor_row = anchor_row
        obj.anchor_col = anchor_col

    def replace_all(self, objects: Iterable[PlacedObject]) -> None:
        """Swap in a whole new object list and rebuild the counters."""
        self._objects = list(objects)
        self.recount_from_scratch()

    def clear(self) -> None:
        self._objects = []
        self._counts = {}

    def recount_from_scratch(self) -> None:
        counts: dict[str, int] = {}
        for obj in self._objects:
            counts[obj.type] = counts.get(obj.type, 0) + 1
        self._counts = counts
