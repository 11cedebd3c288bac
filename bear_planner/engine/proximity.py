"""Furnace proximity tiers and whole-layout statistics.

A furnace's tier is the ring it sits in around the nearest bear trap,
measured as the edge-to-edge Chebyshev gap between the two footprint boxes
(1 for side-by-side footprints, 0 when they overlap). With the default ring bounds
``(2, 4, 6)``:

  * gap 0..2 -> tier 1 (first row)
  * gap 3..4 -> tier 2
  * gap 5..6 -> tier 3
  * further, or no bear trap at all -> tier 0 (no tier)

``compute_statistics`` is the aggregate pass used to grade a layout. Like
coverage it is always recomputed from the current objects, never cached
across mutations.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .coverage import CoverageMap, is_furnace_covered
from .types import (
    BANNER,
    BEAR_TRAP,
    DEFAULT_FURNACE_COVERAGE_RATIO,
    DEFAULT_PROXIMITY_TIER_GAPS,
    FURNACE,
    FurnaceStatus,
    LayoutStats,
    PlacedObject,
)

NO_TIER = 0


def footprint_gap(a: PlacedObject, b: PlacedObject) -> int:
    """Edge-to-edge Chebyshev gap between two footprints, clamped to >= 0."""
    horizontal = max(b.anchor_col - a.right_col, a.anchor_col - b.right_col)
    vertical = max(b.anchor_row - a.bottom_row, a.anchor_row - b.bottom_row)
    return max(0, horizontal, vertical)


def nearest_trap_gap(
    furnace: PlacedObject, traps: Iterable[PlacedObject]
) -> int | None:
    """Smallest gap to any bear trap, or None if there are none."""
    gaps = [footprint_gap(furnace, trap) for trap in traps]
    return min(gaps) if gaps else None


def tier_for_gap(
    gap: int | None, tier_gaps: Sequence[int] = DEFAULT_PROXIMITY_TIER_GAPS
) -> int:
    if gap is None:
        return NO_TIER
    for i, bound in enumerate(tier_gaps):
        if gap <= bound:
            return i + 1
    return NO_TIER


def proximity_tier(
    furnace: PlacedObject,
    objects: Iterable[PlacedObject],
    tier_gaps: Sequence[int] = DEFAULT_PROXIMITY_TIER_GAPS,
) -> int:
    traps = [o for o in objects if o.type == BEAR_TRAP]
    return tier_for_gap(nearest_trap_gap(furnace, traps), tier_gaps)


def furnace_status(
    furnace: PlacedObject,
    objects: Iterable[PlacedObject],
    coverage: CoverageMap,
    coverage_ratio: float = DEFAULT_FURNACE_COVERAGE_RATIO,
    tier_gaps: Sequence[int] = DEFAULT_PROXIMITY_TIER_GAPS,
) -> FurnaceStatus:
    return FurnaceStatus(
        tier=proximity_tier(furnace, objects, tier_gaps),
        covered=is_furnace_covered(furnace, coverage, coverage_ratio),
    )


def compute_statistics(
    objects: Sequence[PlacedObject],
    coverage: CoverageMap,
    coverage_ratio: float = DEFAULT_FURNACE_COVERAGE_RATIO,
    tier_gaps: Sequence[int] = DEFAULT_PROXIMITY_TIER_GAPS,
) -> LayoutStats:
    stats = LayoutStats()
    traps = [o for o in objects if o.type == BEAR_TRAP]
    for obj in objects:
        if obj.type == BANNER:
            stats.banners += 1
        elif obj.type == FURNACE:
            stats.furnaces += 1
            if not is_furnace_covered(obj, coverage, coverage_ratio):
                stats.uncovered_furnaces += 1
            tier = tier_for_gap(nearest_trap_gap(obj, traps), tier_gaps)
            if tier == 1:
                stats.first_row_furnaces += 1
            elif tier == 2:
                stats.second_row_furnaces += 1
            elif tier == 3:
                stats.third_row_furnaces += 1
    return stats
