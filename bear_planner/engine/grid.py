"""Bounds and collision checks for square footprints on the planner grid.

The central question this module answers: "can a footprint go here?"
``Planner.place`` and the move transaction both resolve a target cell to an
anchor with ``resolve_anchor`` and then ask ``can_place`` (or
``check_placement``, which says *why* not). The check enforces:

  * **Grid bounds**: every cell of the ``size x size`` footprint lies in
    ``[0, grid_size)`` on both axes.
  * **No overlap**: no cell is shared with any other placed object, of any
    type, except the one named by ``excluding_id`` (a dragged object must
    be able to pass back over its own footprint).

All checks are pure queries over the current list of ``PlacedObject``; there
is no cached occupancy surface to keep in sync. ``occupancy_mask`` builds a
numpy boolean surface on demand for consumers that want the whole grid at
once (rendering, analysis).
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

from .errors import Collision, OutOfBounds
from .types import Cell, PlacedObject


def resolve_anchor(
    tile_row: int, tile_col: int, size: int, grid_size: int
) -> Cell:
    """Turn a target centre cell into a clamped top-left anchor.

    ``half = (size - 1) / 2`` is fractional for even sizes; flooring biases
    the anchor toward the lower-indexed cell. Each axis is then clamped into
    ``[0, grid_size - size]``.
    """
    half = (size - 1) / 2
    row = math.floor(tile_row - half)
    col = math.floor(tile_col - half)
    hi = grid_size - size
    row = max(0, min(row, hi))
    col = max(0, min(col, hi))
    return row, col


def cell_in_grid(row: int, col: int, grid_size: int) -> bool:
    return 0 <= row < grid_size and 0 <= col < grid_size


def footprint_in_bounds(
    anchor_row: int, anchor_col: int, size: int, grid_size: int
) -> bool:
    return (
        anchor_row >= 0
        and anchor_col >= 0
        and anchor_row + size <= grid_size
        and anchor_col + size <= grid_size
    )


def squares_overlap(
    row_a: int, col_a: int, size_a: int, row_b: int, col_b: int, size_b: int
) -> bool:
    """True if two square cell blocks share at least one cell.

    Touching edges or corners is NOT overlap.
    """
    return (
        row_a < row_b + size_b
        and row_b < row_a + size_a
        and col_a < col_b + size_b
        and col_b < col_a + size_a
    )


def blocking_objects(
    objects: Iterable[PlacedObject],
    anchor_row: int,
    anchor_col: int,
    size: int,
    excluding_id: str | None = None,
) -> list[PlacedObject]:
    """Return every placed object whose footprint overlaps the given one."""
    return [
        obj
        for obj in objects
        if obj.id != excluding_id
        and squares_overlap(
            anchor_row,
            anchor_col,
            size,
            obj.anchor_row,
            obj.anchor_col,
            obj.footprint_size,
        )
    ]


def can_place(
    objects: Iterable[PlacedObject],
    grid_size: int,
    anchor_row: int,
    anchor_col: int,
    size: int,
    excluding_id: str | None = None,
) -> bool:
    """Check that a footprint is in bounds and overlaps nothing.

    No side effects.
    """
    if not footprint_in_bounds(anchor_row, anchor_col, size, grid_size):
        return False
    return not blocking_objects(
        objects, anchor_row, anchor_col, size, excluding_id
    )


def check_placement(
    objects: Iterable[PlacedObject],
    grid_size: int,
    anchor_row: int,
    anchor_col: int,
    size: int,
    excluding_id: str | None = None,
) -> None:
    """Like ``can_place`` but raises ``OutOfBounds`` or ``Collision``."""
    if not footprint_in_bounds(anchor_row, anchor_col, size, grid_size):
        raise OutOfBounds(anchor_row, anchor_col, size, grid_size)
    blockers = blocking_objects(
        objects, anchor_row, anchor_col, size, excluding_id
    )
    if blockers:
        raise Collision(anchor_row, anchor_col, [b.id for b in blockers])


def clipped_square(
    center_row: int, center_col: int, radius: int, grid_size: int
) -> tuple[int, int, int, int]:
    """Chebyshev neighbourhood of a cell clipped to the grid.

    Returns half-open ``(row_start, row_end, col_start, col_end)``; the
    range is empty when the square lies wholly outside the grid.
    """
    r0 = max(0, center_row - radius)
    r1 = min(grid_size, center_row + radius + 1)
    c0 = max(0, center_col - radius)
    c1 = min(grid_size, center_col + radius + 1)
    return r0, max(r0, r1), c0, max(c0, c1)


def occupancy_mask(
    objects: Iterable[PlacedObject],
    grid_size: int,
    excluding_id: str | None = None,
) -> np.ndarray:
    """Boolean ``grid_size x grid_size`` surface, True where occupied.

    Footprints loaded from a saved layout are trusted rather than
    re-validated, so they are clipped to the grid here.
    """
    mask = np.zeros((grid_size, grid_size), dtype=bool)
    for obj in objects:
        if obj.id == excluding_id:
            continue
        r0 = max(0, obj.anchor_row)
        r1 = min(grid_size, obj.anchor_row + obj.footprint_size)
        c0 = max(0, obj.anchor_col)
        c1 = min(grid_size, obj.anchor_col + obj.footprint_size)
        if r0 < r1 and c0 < c1:
            mask[r0:r1, c0:c1] = True
    return mask
