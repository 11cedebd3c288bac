"""Data types for the planner: catalog entries, placed objects, config.

Persisted records use the camelCase keys of the saved-layout format
(``anchorRow``, ``footprintSize``, ...); the Python side is snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import UnknownObjectType

HQ = "hq"
BEAR_TRAP = "bear-trap"
FURNACE = "furnace"
BANNER = "banner"

DEFAULT_GRID_SIZE = 40
DEFAULT_NAMEABLE_TYPES = frozenset({"hq", "bear-trap", "furnace"})
DEFAULT_FURNACE_COVERAGE_RATIO = 0.75
DEFAULT_PROXIMITY_TIER_GAPS = (2, 4, 6)

Cell = tuple[int, int]


@dataclass(frozen=True)
class ObjectType:
    type: str
    footprint_size: int
    max_instances: int | None = None
    coverage_radius: int | None = None
    label: str | None = None

    @staticmethod
    def from_dict(d: dict) -> ObjectType:
        return ObjectType(
            type=d["type"],
            footprint_size=d["footprint_size"],
            max_instances=d.get("max_instances"),
            coverage_radius=d.get("coverage_radius"),
            label=d.get("label"),
        )

    def to_dict(self) -> dict:
        d: dict = {
            "type": self.type,
            "footprint_size": self.footprint_size,
            "max_instances": self.max_instances,
        }
        if self.coverage_radius is not None:
            d["coverage_radius"] = self.coverage_radius
        if self.label:
            d["label"] = self.label
        return d


@dataclass
class Catalog:
    object_types: list[ObjectType] = field(default_factory=list)
    name: str | None = None

    def __contains__(self, tag: object) -> bool:
        return any(ot.type == tag for ot in self.object_types)

    def get(self, tag: str) -> ObjectType:
        for ot in self.object_types:
            if ot.type == tag:
                return ot
        raise UnknownObjectType(tag)

    @property
    def tags(self) -> list[str]:
        return [ot.type for ot in self.object_types]

    @staticmethod
    def from_dict(d: dict) -> Catalog:
        return Catalog(
            object_types=[
                ObjectType.from_dict(o) for o in d.get("object_types", [])
            ],
            name=d.get("name"),
        )

    def to_dict(self) -> dict:
        d: dict = {"object_types": [o.to_dict() for o in self.object_types]}
        if self.name:
            d["name"] = self.name
        return d


@dataclass
class PlacedObject:
    id: str
    type: str
    anchor_row: int
    anchor_col: int
    footprint_size: int
    name: str = ""

    @property
    def bottom_row(self) -> int:
        """Last row index covered by the footprint (inclusive)."""
        return self.anchor_row + self.footprint_size - 1

    @property
    def right_col(self) -> int:
        """Last column index covered by the footprint (inclusive)."""
        return self.anchor_col + self.footprint_size - 1

    def contains(self, row: int, col: int) -> bool:
        return (
            self.anchor_row <= row <= self.bottom_row
            and self.anchor_col <= col <= self.right_col
        )

    def cells(self) -> list[Cell]:
        return [
            (r, c)
            for r in range(self.anchor_row, self.anchor_row + self.footprint_size)
            for c in range(self.anchor_col, self.anchor_col + self.footprint_size)
        ]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "anchorRow": self.anchor_row,
            "anchorCol": self.anchor_col,
            "footprintSize": self.footprint_size,
            "name": self.name,
        }


@dataclass(frozen=True)
class FurnaceStatus:
    tier: int
    covered: bool


@dataclass
class LayoutStats:
    banners: int = 0
    furnaces: int = 0
    uncovered_furnaces: int = 0
    first_row_furnaces: int = 0
    second_row_furnaces: int = 0
    third_row_furnaces: int = 0

    def to_dict(self) -> dict:
        return {
            "banners": self.banners,
            "furnaces": self.furnaces,
            "uncovered_furnaces": self.uncovered_furnaces,
            "first_row_furnaces": self.first_row_furnaces,
            "second_row_furnaces": self.second_row_furnaces,
            "third_row_furnaces": self.third_row_furnaces,
        }


def _sequence(d: dict, key: str, default):
    # A bare string would otherwise be split into characters.
    value = d.get(key, default)
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"config {key!r} must be a list, got {value!r}")
    return value


def _default_catalog() -> Catalog:
    # Deferred import: catalog_io imports this module.
    from .catalog_io import load_builtin_catalog

    return load_builtin_catalog()


@dataclass
class PlannerConfig:
    grid_size: int = DEFAULT_GRID_SIZE
    catalog: Catalog = field(default_factory=_default_catalog)
    nameable_types: frozenset[str] = DEFAULT_NAMEABLE_TYPES
    furnace_coverage_ratio: float = DEFAULT_FURNACE_COVERAGE_RATIO
    proximity_tier_gaps: tuple[int, ...] = DEFAULT_PROXIMITY_TIER_GAPS

    @staticmethod
    def from_dict(d: dict | None) -> PlannerConfig:
        if not d:
            return PlannerConfig()
        cat_d = d.get("catalog")
        config = PlannerConfig(
            grid_size=d.get("grid_size", DEFAULT_GRID_SIZE),
            nameable_types=frozenset(
                _sequence(d, "nameable_types", DEFAULT_NAMEABLE_TYPES)
            ),
            furnace_coverage_ratio=d.get(
                "furnace_coverage_ratio", DEFAULT_FURNACE_COVERAGE_RATIO
            ),
            proximity_tier_gaps=tuple(
                _sequence(d, "proximity_tier_gaps", DEFAULT_PROXIMITY_TIER_GAPS)
            ),
        )
        if cat_d:
            config.catalog = Catalog.from_dict(cat_d)
        return config

    def to_dict(self) -> dict:
        return {
            "grid_size": self.grid_size,
            "catalog": self.catalog.to_dict(),
            "nameable_types": sorted(self.nameable_types),
            "furnace_coverage_ratio": self.furnace_coverage_ratio,
            "proximity_tier_gaps": list(self.proximity_tier_gaps),
        }
