"""Tests for catalog and config loading."""

import json

import pytest

from bear_planner.engine.catalog_io import (
    builtin_catalog_path,
    load_builtin_catalog,
    load_catalog,
    load_catalog_dict,
    load_config,
    save_catalog_dict,
)
from bear_planner.engine.errors import UnknownObjectType
from bear_planner.engine.types import Catalog, ObjectType, PlannerConfig


class TestBuiltinCatalog:
    def test_file_exists(self):
        assert builtin_catalog_path("whiteout_survival").is_file()

    def test_object_types(self):
        cat = load_builtin_catalog()
        assert cat.tags == [
            "bear-trap",
            "hq",
            "furnace",
            "banner",
            "resource-node",
            "non-buildable-area",
        ]
        assert cat.get("hq") == ObjectType(
            type="hq",
            footprint_size=3,
            max_instances=1,
            coverage_radius=7,
            label="HQ",
        )
        assert cat.get("bear-trap").max_instances == 2
        assert cat.get("banner").coverage_radius == 3
        assert cat.get("furnace").max_instances is None

    def test_fresh_copy_each_call(self):
        a = load_builtin_catalog()
        a.object_types.pop()
        assert len(load_builtin_catalog().object_types) == 6

    def test_unknown_tag(self):
        with pytest.raises(UnknownObjectType):
            load_builtin_catalog().get("castle")


class TestCatalogFiles:
    def test_save_and_load(self, tmp_path):
        cat = Catalog(
            object_types=[ObjectType("tower", 2, max_instances=4)], name="Test"
        )
        path = tmp_path / "nested" / "cat.json"
        save_catalog_dict(cat.to_dict(), path)
        assert load_catalog(path) == cat
        assert load_catalog_dict(path)["name"] == "Test"

    def test_non_object_rejected(self, tmp_path):
        path = tmp_path / "cat.json"
        path.write_text("[]")
        with pytest.raises(ValueError):
            load_catalog(path)


class TestConfig:
    def test_defaults(self):
        cfg = PlannerConfig()
        assert cfg.grid_size == 40
        assert cfg.furnace_coverage_ratio == 0.75
        assert cfg.proximity_tier_gaps == (2, 4, 6)
        assert cfg.nameable_types == frozenset({"hq", "bear-trap", "furnace"})
        assert "banner" in cfg.catalog

    def test_partial_file(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"grid_size": 30, "nameable_types": ["banner"]}))
        cfg = load_config(path)
        assert cfg.grid_size == 30
        assert cfg.nameable_types == frozenset({"banner"})
        assert cfg.furnace_coverage_ratio == 0.75
        assert "hq" in cfg.catalog

    def test_round_trip(self):
        cfg = PlannerConfig(grid_size=25, proximity_tier_gaps=(1, 2))
        again = PlannerConfig.from_dict(cfg.to_dict())
        assert again == cfg

    def test_string_nameable_types_rejected(self):
        with pytest.raises(ValueError, match="nameable_types"):
            PlannerConfig.from_dict({"nameable_types": "hq"})

    def test_non_list_tier_gaps_rejected(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"proximity_tier_gaps": 6}))
        with pytest.raises(ValueError, match="proximity_tier_gaps"):
            load_config(path)

    def test_empty_dict_is_default(self):
        assert PlannerConfig.from_dict(None) == PlannerConfig()
