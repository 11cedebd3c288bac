#!/usr/bin/env python3
"""Command-line front end for bear trap layouts.

Usage:
    bear-planner stats LAYOUT                   # statistics as JSON
    bear-planner render LAYOUT OUT.png          # picture of the layout
    bear-planner convert IN OUT                 # .btpl <-> .json <-> .png
    bear-planner catalog OUT.json               # export the object catalog
    bear-planner -v --config cfg.json stats LAYOUT
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ..engine.catalog_io import load_config, save_catalog_dict
from ..engine.errors import PlannerError
from ..engine.planner import Planner
from ..engine.types import PlannerConfig
from .layout_io import load_into, save_layout
from .render import LayoutRenderer

logger = logging.getLogger(__name__)


def _config(args) -> PlannerConfig:
    return load_config(Path(args.config)) if args.config else PlannerConfig()


def _make_planner(args) -> Planner:
    planner = Planner(_config(args))
    load_into(planner, args.layout)
    return planner


def cmd_stats(args) -> int:
    planner = _make_planner(args)
    stats = planner.statistics().to_dict()
    stats["counts"] = planner.counts()
    print(json.dumps(stats, indent=2, sort_keys=True))
    return 0


def cmd_render(args) -> int:
    planner = _make_planner(args)
    img = LayoutRenderer(tile_px=args.tile_px, show_names=not args.no_names).render(
        planner
    )
    img.save(args.output)
    logger.info("Rendered %s", args.output)
    return 0


def cmd_convert(args) -> int:
    planner = _make_planner(args)
    save_layout(planner, args.output, LayoutRenderer(tile_px=args.tile_px))
    return 0


def cmd_catalog(args) -> int:
    save_catalog_dict(_config(args).catalog.to_dict(), Path(args.output))
    logger.info("Wrote catalog to %s", args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bear-planner",
        description="Inspect, render and convert bear trap layouts.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More logging (-v info, -vv debug)",
    )
    parser.add_argument(
        "--config", help="JSON planner config (grid size, catalog, ...)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("stats", help="Print layout statistics as JSON")
    p.add_argument("layout", help="Layout file (.btpl, .json or .png)")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("render", help="Render a layout to an image")
    p.add_argument("layout", help="Layout file (.btpl, .json or .png)")
    p.add_argument("output", help="Image path (e.g. layout.png)")
    p.add_argument("--tile-px", type=int, default=20, help="Pixels per cell")
    p.add_argument("--no-names", action="store_true", help="Hide name labels")
    p.set_defaults(func=cmd_render)

    p = sub.add_parser("convert", help="Rewrite a layout in another format")
    p.add_argument("layout", help="Input layout file")
    p.add_argument("output", help="Output file; format chosen by extension")
    p.add_argument("--tile-px", type=int, default=20, help="Pixels per cell (.png)")
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser("catalog", help="Write the object catalog as JSON")
    p.add_argument("output", help="Catalog JSON path")
    p.set_defaults(func=cmd_catalog)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return args.func(args)
    except (PlannerError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
