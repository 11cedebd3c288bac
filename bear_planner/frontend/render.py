"""Headless Pillow renderer for a planner layout.

Draws the top-down grid the way the planner's UI shows it:

  1. covered cells tinted, but only where no object stands (coverage is
     still logically true under objects; it just is not drawn there),
  2. grid lines,
  3. objects in per-type colours, furnaces coloured by proximity tier,
  4. a red outline around furnaces that fail the coverage check,
  5. name labels.

Only the planner's query surface is used (``list_objects``,
``coverage``, ``furnace_status``), so rendering can never change state.
Used by ``layout_io.save_layout_png`` and the CLI ``render`` command.
"""

from __future__ import annotations

from PIL import Image, ImageDraw

from ..engine.grid import occupancy_mask
from ..engine.planner import Planner
from ..engine.types import FURNACE

BACKGROUND = "#F4F1EA"
GRID_LINE = "#D0CCC2"
COVERED_FILL = "#CDE8C4"
OBJECT_OUTLINE = "#333333"
UNCOVERED_OUTLINE = "#FF0000"
LABEL_COLOR = "#111111"
DEFAULT_FILL = "#999999"

TYPE_COLORS = {
    "hq": "#4A6FA5",
    "bear-trap": "#8B4513",
    "banner": "#2E8B57",
    "resource-node": "#6B8E23",
    "non-buildable-area": "#555555",
}

FURNACE_TIER_COLORS = {
    1: "#FFD700",
    2: "#FFA500",
    3: "#FF8C00",
}
FURNACE_OTHER_COLOR = "#FF6347"


class LayoutRenderer:
    """Renders a planner's current layout to a Pillow image."""

    def __init__(self, tile_px: int = 20, show_names: bool = True):
        self.tile_px = tile_px
        self.show_names = show_names

    def _cell_box(self, row, col, size=1):
        x0 = col * self.tile_px
        y0 = row * self.tile_px
        return [x0, y0, x0 + size * self.tile_px - 1, y0 + size * self.tile_px - 1]

    def _fill_for(self, planner, obj):
        if obj.type == FURNACE:
            tier = planner.furnace_status(obj.id).tier
            return FURNACE_TIER_COLORS.get(tier, FURNACE_OTHER_COLOR)
        return TYPE_COLORS.get(obj.type, DEFAULT_FILL)

    def render(self, planner: Planner) -> Image.Image:
        n = planner.grid_size
        px = n * self.tile_px
        img = Image.new("RGB", (px, px), BACKGROUND)
        draw = ImageDraw.Draw(img)
        objects = planner.list_objects()

        # 1. Coverage on open ground
        visible = planner.coverage.covered & ~occupancy_mask(objects, n)
        for row, col in zip(*visible.nonzero()):
            draw.rectangle(self._cell_box(int(row), int(col)), fill=COVERED_FILL)

        # 2. Grid lines
        for i in range(1, n):
            p = i * self.tile_px
            draw.line([(p, 0), (p, px - 1)], fill=GRID_LINE)
            draw.line([(0, p), (px - 1, p)], fill=GRID_LINE)

        # 3. Objects, in z-order
        for obj in objects:
            box = self._cell_box(obj.anchor_row, obj.anchor_col, obj.footprint_size)
            draw.rectangle(box, fill=self._fill_for(planner, obj), outline=OBJECT_OUTLINE)
            if obj.type == FURNACE and not planner.furnace_status(obj.id).covered:
                draw.rectangle(box, outline=UNCOVERED_OUTLINE, width=2)

        # 4. Labels
        if self.show_names:
            for obj in objects:
                if not obj.name:
                    continue
                x0, y0, x1, y1 = self._cell_box(
                    obj.anchor_row, obj.anchor_col, obj.footprint_size
                )
                left, top, right, bottom = draw.textbbox((0, 0), obj.name)
                draw.text(
                    (
                        (x0 + x1 - (right - left)) / 2,
                        (y0 + y1 - (bottom - top)) / 2,
                    ),
                    obj.name,
                    fill=LABEL_COLOR,
                )

        draw.rectangle([0, 0, px - 1, px - 1], outline=OBJECT_OUTLINE, width=2)
        return img
