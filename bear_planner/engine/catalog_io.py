"""Load and save object catalogs and planner config from/to JSON files.

Provides helpers for reading catalog JSON files into typed ``Catalog``
objects (via ``types.py``) or raw dicts, plus the path helper for the
built-in catalogs under ``bear_planner/catalogs/builtin/``.

Used by:
  - ``types.PlannerConfig``: its default catalog is the built-in one.
  - ``frontend/cli.py``: ``--config`` files go through ``load_config``,
    and the ``catalog`` command writes with ``save_catalog_dict``.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from .types import Catalog, PlannerConfig

# bear_planner/catalogs/ is one level up from bear_planner/engine/catalog_io.py
_CATALOGS_DIR = Path(__file__).parent.parent / "catalogs"

BUILTIN_CATALOG = "whiteout_survival"


def builtin_catalog_path(name: str) -> Path:
    """Return the path to a built-in catalog JSON file.

    Args:
        name: Catalog name without extension (e.g. "whiteout_survival").

    Returns:
        Path to ``bear_planner/catalogs/builtin/{name}.json``.
    """
    return _CATALOGS_DIR / "builtin" / f"{name}.json"


def _read_object(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(
            f"{path}: expected a JSON object, got {type(data).__name__}"
        )
    return data


def load_catalog_dict(path: Path) -> dict:
    """Raw catalog dict from ``path``; raises ValueError if it is not an object."""
    return _read_object(path)


def load_catalog(path: Path) -> Catalog:
    return Catalog.from_dict(load_catalog_dict(path))


@lru_cache(maxsize=None)
def _load_builtin(name: str) -> Catalog:
    return load_catalog(builtin_catalog_path(name))


def load_builtin_catalog(name: str = BUILTIN_CATALOG) -> Catalog:
    """Return a fresh copy of a built-in catalog.

    The file is parsed once; each caller gets its own ``Catalog`` so a
    session can edit its list without touching others.
    """
    cached = _load_builtin(name)
    return Catalog(object_types=list(cached.object_types), name=cached.name)


def save_catalog_dict(data: dict, path: Path) -> None:
    """Write a catalog as indented JSON, making parent directories as needed.

    The output loads back with ``load_catalog`` and can be dropped into the
    ``catalog`` key of a ``--config`` file. Used by the CLI ``catalog``
    command.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def load_config(path: Path) -> PlannerConfig:
    """Load a ``PlannerConfig`` from a JSON file.

    Missing keys fall back to the defaults, so a file containing only
    ``{"grid_size": 30}`` is valid.
    """
    return PlannerConfig.from_dict(_read_object(path))
