"""Coverage of grid cells by headquarters and banner radii.

``compute_coverage`` is a pure function of the placed objects: it is rerun
from scratch after every registry mutation and never patched in place.

Coverage is logical, not visual. A cell under another object is still
marked covered; whether a renderer *shows* coverage on occupied cells is
its own business. ``is_furnace_covered`` depends on this, since a furnace's
own cells are always occupied (by the furnace).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from .grid import cell_in_grid, clipped_square
from .types import BANNER, HQ, Catalog, PlacedObject


@dataclass(frozen=True)
class CoverageCell:
    covered_by_hq: bool
    covered_by_banner: bool

    @property
    def covered(self) -> bool:
        return self.covered_by_hq or self.covered_by_banner


class CoverageMap:
    """Two boolean ``grid_size x grid_size`` layers, indexed ``[row, col]``."""

    def __init__(self, grid_size: int) -> None:
        self.grid_size = grid_size
        self.hq = np.zeros((grid_size, grid_size), dtype=bool)
        self.banner = np.zeros((grid_size, grid_size), dtype=bool)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CoverageMap):
            return NotImplemented
        return (
            self.grid_size == other.grid_size
            and np.array_equal(self.hq, other.hq)
            and np.array_equal(self.banner, other.banner)
        )

    def copy(self) -> CoverageMap:
        other = CoverageMap(self.grid_size)
        other.hq = self.hq.copy()
        other.banner = self.banner.copy()
        return other

    def in_grid(self, row: int, col: int) -> bool:
        return cell_in_grid(row, col, self.grid_size)

    def at(self, row: int, col: int) -> CoverageCell:
        """Coverage of one cell; cells outside the grid are uncovered."""
        if not self.in_grid(row, col):
            return CoverageCell(False, False)
        return CoverageCell(
            bool(self.hq[row, col]), bool(self.banner[row, col])
        )

    @property
    def covered(self) -> np.ndarray:
        return self.hq | self.banner


def coverage_center(obj: PlacedObject) -> tuple[int, int]:
    """Geometric centre cell of an odd footprint (anchor for size 1)."""
    offset = (obj.footprint_size - 1) // 2
    return obj.anchor_row + offset, obj.anchor_col + offset


def coverage_square(
    obj: PlacedObject, radius: int, grid_size: int
) -> tuple[int, int, int, int]:
    center_row, center_col = coverage_center(obj)
    return clipped_square(center_row, center_col, radius, grid_size)


def compute_coverage(
    objects: Iterable[PlacedObject], catalog: Catalog, grid_size: int
) -> CoverageMap:
    """Mark every cell within an HQ's or banner's Chebyshev radius.

    Overlapping sources OR together, so the result does not depend on the
    order of ``objects``.
    """
    cmap = CoverageMap(grid_size)
    layers = {HQ: cmap.hq, BANNER: cmap.banner}
    for obj in objects:
        layer = layers.get(obj.type)
        if layer is None or obj.type not in catalog:
            continue
        radius = catalog.get(obj.type).coverage_radius
        if radius is None:
            continue
        r0, r1, c0, c1 = coverage_square(obj, radius, grid_size)
        layer[r0:r1, c0:c1] = True
    return cmap


def covered_cell_count(obj: PlacedObject, coverage: CoverageMap) -> int:
    return sum(1 for r, c in obj.cells() if coverage.at(r, c).covered)


def is_furnace_covered(
    furnace: PlacedObject, coverage: CoverageMap, ratio: float = 0.75
) -> bool:
    """True if at least ``ratio`` of the footprint's cells are covered.

    The threshold is inclusive: 3 of 4 cells passes at the default 0.75.
    """
    total = furnace.footprint_size * furnace.footprint_size
    return covered_cell_count(furnace, coverage) >= total * ratio
