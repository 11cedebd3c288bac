"""Bear Trap Planner: lay out a bear trap base on a square grid and grade it."""

__version__ = "0.3.0"
