"""Error kinds raised by the planner engine.

Every error derives from ``PlannerError`` (itself a ``ValueError``), so a
caller that only wants to surface "that didn't work" to the user can catch
one type. All of them are local and recoverable: an operation that raises
has left the registry, counters and derived views exactly as they were.
"""

from __future__ import annotations


class PlannerError(ValueError):
    """Base class for all planner engine errors."""


class InvalidPlacement(PlannerError):
    """A footprint cannot go where it was asked to."""


class OutOfBounds(InvalidPlacement):
    def __init__(self, anchor_row: int, anchor_col: int, size: int, grid_size: int):
        self.anchor_row = anchor_row
        self.anchor_col = anchor_col
        self.size = size
        self.grid_size = grid_size
        super().__init__(
            f"{size}x{size} footprint at ({anchor_row}, {anchor_col}) "
            f"leaves the {grid_size}x{grid_size} grid"
        )


class Collision(InvalidPlacement):
    def __init__(self, anchor_row: int, anchor_col: int, blocking_ids: list[str]):
        self.anchor_row = anchor_row
        self.anchor_col = anchor_col
        self.blocking_ids = blocking_ids
        super().__init__(
            f"footprint at ({anchor_row}, {anchor_col}) overlaps "
            f"{', '.join(blocking_ids)}"
        )


class CapacityExceeded(PlannerError):
    def __init__(self, object_type: str, limit: int):
        self.object_type = object_type
        self.limit = limit
        super().__init__(f"Only {limit} {object_type} allowed")


class UnknownObject(PlannerError):
    def __init__(self, object_id: str):
        self.object_id = object_id
        super().__init__(f"No placed object with id {object_id!r}")


class UnknownObjectType(PlannerError):
    def __init__(self, object_type: str):
        self.object_type = object_type
        super().__init__(f"Unknown object type {object_type!r}")


class NamingNotAllowed(PlannerError):
    def __init__(self, object_type: str):
        self.object_type = object_type
        super().__init__(f"Objects of type {object_type!r} cannot be named")


class InvalidMoveState(PlannerError):
    """A move command was issued in the wrong transaction state."""


class LayoutFormatError(PlannerError):
    """A persisted layout record failed the basic shape check."""
