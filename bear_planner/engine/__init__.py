"""Grid placement and coverage engine for bear trap layouts."""

from .planner import Planner
from .types import LayoutStats, PlacedObject, PlannerConfig

__all__ = ["LayoutStats", "PlacedObject", "Planner", "PlannerConfig"]
