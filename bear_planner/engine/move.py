"""Relocate-or-revert transaction for dragging a placed object.

State machine::

    IDLE --begin--> DRAGGING --finalize/cancel--> IDLE
                      |  ^
                      +--+ update (preview only)

``begin`` records the object's original anchor. ``update`` resolves a
candidate anchor for the hovered cell and reports whether it is legal; it
never touches the registry. ``finalize`` commits the candidate if it passes
``can_place`` with the dragged object excluded from collision checks, and
otherwise puts the original anchor back. A drop outside the grid
(``target_cell=None``, or a cell off the grid) and ``cancel`` both
revert. Counters are never touched: a move cannot change an object's
type.

A rejected drop is not an error. ``finalize`` returns a ``MoveOutcome`` with
``committed=False`` and the caller carries on.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass

from .coverage import coverage_square
from .errors import InvalidMoveState, UnknownObject
from .grid import can_place, cell_in_grid, resolve_anchor
from .registry import ObjectRegistry
from .types import BANNER, HQ, Cell, PlacedObject


class MoveState(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class MovePreview:
    anchor_row: int
    anchor_col: int
    valid: bool
    # Half-open (row_start, row_end, col_start, col_end) coverage square the
    # object would project from the candidate anchor; None for types that
    # do not emit coverage.
    territory: tuple[int, int, int, int] | None = None


@dataclass(frozen=True)
class MoveOutcome:
    object_id: str
    committed: bool
    anchor_row: int
    anchor_col: int


def territory_for(
    obj: PlacedObject, registry: ObjectRegistry
) -> tuple[int, int, int, int] | None:
    if obj.type not in (HQ, BANNER) or obj.type not in registry.config.catalog:
        return None
    radius = registry.config.catalog.get(obj.type).coverage_radius
    if radius is None:
        return None
    return coverage_square(obj, radius, registry.config.grid_size)


def preview_at(
    registry: ObjectRegistry,
    candidate: PlacedObject,
    excluding_id: str | None = None,
) -> MovePreview:
    """Legality and territory of ``candidate`` without placing it."""
    valid = can_place(
        registry,
        registry.config.grid_size,
        candidate.anchor_row,
        candidate.anchor_col,
        candidate.footprint_size,
        excluding_id=excluding_id,
    )
    return MovePreview(
        anchor_row=candidate.anchor_row,
        anchor_col=candidate.anchor_col,
        valid=valid,
        territory=territory_for(candidate, registry),
    )


class MoveTransaction:
    def __init__(self, registry: ObjectRegistry) -> None:
        self.registry = registry
        self.state = MoveState.IDLE
        self.object_id: str | None = None
        self.original_anchor: Cell | None = None

    @property
    def active(self) -> bool:
        return self.state is MoveState.DRAGGING

    def begin(self, object_id: str) -> PlacedObject:
        if self.active:
            raise InvalidMoveState(
                f"Already moving {self.object_id!r}; finalize or cancel first"
            )
        obj = self.registry.get(object_id)
        self.object_id = object_id
        self.original_anchor = (obj.anchor_row, obj.anchor_col)
        self.state = MoveState.DRAGGING
        return obj

    def _dragged(self) -> PlacedObject:
        if not self.active or self.object_id is None:
            raise InvalidMoveState("No move in progress")
        obj = self.registry.find(self.object_id)
        if obj is None:
            missing = self.object_id
            self._end()
            raise UnknownObject(missing)
        return obj

    def _candidate(self, obj: PlacedObject, target_cell: Cell) -> PlacedObject:
        row, col = resolve_anchor(
            target_cell[0],
            target_cell[1],
            obj.footprint_size,
            self.registry.config.grid_size,
        )
        return dataclasses.replace(obj, anchor_row=row, anchor_col=col)

    def _on_grid(self, target_cell: Cell) -> bool:
        return cell_in_grid(
            target_cell[0], target_cell[1], self.registry.config.grid_size
        )

    def update(self, target_cell: Cell) -> MovePreview:
        obj = self._dragged()
        preview = preview_at(
            self.registry, self._candidate(obj, target_cell), obj.id
        )
        if not self._on_grid(target_cell):
            preview = dataclasses.replace(preview, valid=False)
        return preview

    def finalize(self, target_cell: Cell | None) -> MoveOutcome:
        obj = self._dragged()
        if target_cell is None or not self._on_grid(target_cell):
            return self._revert(obj)
        candidate = self._candidate(obj, target_cell)
        if not can_place(
            self.registry,
            self.registry.config.grid_size,
            candidate.anchor_row,
            candidate.anchor_col,
            candidate.footprint_size,
            excluding_id=obj.id,
        ):
            return self._revert(obj)
        self.registry.relocate(obj.id, candidate.anchor_row, candidate.anchor_col)
        self._end()
        return MoveOutcome(obj.id, True, candidate.anchor_row, candidate.anchor_col)

    def cancel(self) -> MoveOutcome | None:
        """Abort the move. Returns None when nothing was being moved."""
        if not self.active:
            return None
        return self._revert(self._dragged())

    def _revert(self, obj: PlacedObject) -> MoveOutcome:
        assert self.original_anchor is not None
        row, col = self.original_anchor
        self.registry.relocate(obj.id, row, col)
        self._end()
        return MoveOutcome(obj.id, False, row, col)

    def _end(self) -> None:
        self.state = MoveState.IDLE
        self.object_id = None
        self.original_anchor = None
