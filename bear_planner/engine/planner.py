"""Planner session: the one owned state object behind a bear trap layout.

This module is the orchestrator. It owns an ``ObjectRegistry``, a
``MoveTransaction`` and the published ``CoverageMap``, and exposes the two
surfaces a host UI needs:

  * **Queries**: ``list_objects``, ``object_at``, ``coverage_at``,
    ``statistics``, ``furnace_status``, ``can_place``, ``preview_place``.
    Queries hand out copies, so a caller cannot mutate registry state behind
    the planner's back.
  * **Commands**: ``place``, ``remove``, ``rename``, ``begin_move`` /
    ``update_move`` / ``finalize_move`` / ``cancel_move``, ``load_records``
    and ``clear``.

Every command that changes the registry ends in ``_publish``, which
recomputes coverage from scratch. Statistics are derived on demand from
that coverage. A command that raises publishes nothing, because it changed
nothing.

Delegates to:

  * ``grid.py``: anchor resolution and bounds/collision checks.
  * ``registry.py``: the object list, ids and per-type counters.
  * ``coverage.py`` / ``proximity.py``: the derived views.
  * ``move.py``: the drag state machine.
  * ``records.py``: parsing saved layouts for ``load_records``.

Single-threaded: every command runs to completion before returning, so no
caller can observe a half-applied change.
"""

from __future__ import annotations

import dataclasses
import logging

from .coverage import CoverageCell, CoverageMap, compute_coverage
from .grid import can_place, resolve_anchor
from .move import MoveOutcome, MovePreview, MoveTransaction, preview_at
from .proximity import compute_statistics, furnace_status
from .records import objects_to_records, parse_records
from .registry import ObjectRegistry
from .types import (
    FURNACE,
    Cell,
    FurnaceStatus,
    LayoutStats,
    PlacedObject,
    PlannerConfig,
)

logger = logging.getLogger(__name__)


class Planner:
    def __init__(self, config: PlannerConfig | None = None) -> None:
        self.config = config or PlannerConfig()
        self.registry = ObjectRegistry(self.config)
        self._move = MoveTransaction(self.registry)
        self._coverage = CoverageMap(self.config.grid_size)
        self._publish()

    @property
    def grid_size(self) -> int:
        return self.config.grid_size

    # -- derived views --

    def _publish(self) -> None:
        self._coverage = compute_coverage(
            self.registry, self.config.catalog, self.config.grid_size
        )

    @property
    def coverage(self) -> CoverageMap:
        return self._coverage.copy()

    # -- queries --

    def list_objects(self) -> list[PlacedObject]:
        return [dataclasses.replace(o) for o in self.registry]

    def get_object(self, object_id: str) -> PlacedObject:
        return dataclasses.replace(self.registry.get(object_id))

    def object_at(self, row: int, col: int) -> PlacedObject | None:
        obj = self.registry.find_object_at(row, col)
        return dataclasses.replace(obj) if obj is not None else None

    def coverage_at(self, row: int, col: int) -> CoverageCell:
        return self._coverage.at(row, col)

    def counts(self) -> dict[str, int]:
        return self.registry.counts()

    def statistics(self) -> LayoutStats:
        return compute_statistics(
            self.registry.objects,
            self._coverage,
            self.config.furnace_coverage_ratio,
            self.config.proximity_tier_gaps,
        )

    def furnace_status(self, object_id: str) -> FurnaceStatus:
        obj = self.registry.get(object_id)
        if obj.type != FURNACE:
            raise ValueError(f"{object_id!r} is a {obj.type}, not a furnace")
        return furnace_status(
            obj,
            self.registry.objects,
            self._coverage,
            self.config.furnace_coverage_ratio,
            self.config.proximity_tier_gaps,
        )

    def can_place(
        self,
        anchor_row: int,
        anchor_col: int,
        size: int,
        excluding_id: str | None = None,
    ) -> bool:
        return can_place(
            self.registry,
            self.grid_size,
            anchor_row,
            anchor_col,
            size,
            excluding_id=excluding_id,
        )

    def preview_place(self, object_type: str, target_cell: Cell) -> MovePreview:
        """Where a new object would land, and whether it may, without placing it."""
        size = self.config.catalog.get(object_type).footprint_size
        row, col = resolve_anchor(
            target_cell[0], target_cell[1], size, self.grid_size
        )
        candidate = PlacedObject(
            id="", type=object_type, anchor_row=row, anchor_col=col,
            footprint_size=size,
        )
        return preview_at(self.registry, candidate)

    @property
    def moving_id(self) -> str | None:
        return self._move.object_id

    # -- commands --

    def place(self, object_type: str, target_cell: Cell) -> PlacedObject:
        obj = self.registry.add_object(object_type, target_cell)
        logger.debug(
            "Placed %s %s at (%d, %d)",
            obj.type, obj.id, obj.anchor_row, obj.anchor_col,
        )
        self._publish()
        return dataclasses.replace(obj)

    def remove(self, object_id: str) -> bool:
        if self._move.object_id == object_id:
            self._move.cancel()
        removed = self.registry.remove_object(object_id)
        if removed:
            logger.debug("Removed %s", object_id)
            self._publish()
        return removed

    def rename(self, object_id: str, text: str) -> PlacedObject:
        obj = self.registry.rename(object_id, text)
        logger.debug("Renamed %s to %r", object_id, obj.name)
        # Names do not feed coverage or statistics; nothing to republish.
        return dataclasses.replace(obj)

    def begin_move(self, object_id: str) -> PlacedObject:
        return dataclasses.replace(self._move.begin(object_id))

    def update_move(self, target_cell: Cell) -> MovePreview:
        return self._move.update(target_cell)

    def finalize_move(self, target_cell: Cell | None) -> MoveOutcome:
        outcome = self._move.finalize(target_cell)
        if outcome.committed:
            logger.debug(
                "Moved %s to (%d, %d)",
                outcome.object_id, outcome.anchor_row, outcome.anchor_col,
            )
            self._publish()
        else:
            logger.debug("Move of %s reverted", outcome.object_id)
        return outcome

    def cancel_move(self) -> MoveOutcome | None:
        return self._move.cancel()

    def load_records(self, records: object) -> int:
        """Replace the whole layout with saved records.

        Parsing happens before anything is touched, so a malformed layout
        leaves the current one intact. Counters are rebuilt and coverage is
        published once, after the swap.
        """
        objects = parse_records(records, self.config.catalog)
        self._move.cancel()
        self.registry.replace_all(objects)
        self._publish()
        logger.info("Loaded layout with %d objects", len(objects))
        return len(objects)

    def to_records(self) -> list[dict]:
        return objects_to_records(self.registry)

    def clear(self) -> None:
        self._move.cancel()
        self.registry.clear()
        self._publish()
        logger.debug("Cleared layout")

