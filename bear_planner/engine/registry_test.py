"""Tests for the object registry: insertion, counters, z-order, naming."""

import pytest

from bear_planner.engine.errors import (
    CapacityExceeded,
    Collision,
    NamingNotAllowed,
    OutOfBounds,
    UnknownObject,
    UnknownObjectType,
)
from bear_planner.engine.registry import ObjectRegistry
from bear_planner.engine.types import PlacedObject, PlannerConfig


@pytest.fixture
def registry():
    return ObjectRegistry(PlannerConfig())


def _assert_counts_match(registry):
    actual = {}
    for obj in registry:
        actual[obj.type] = actual.get(obj.type, 0) + 1
    for tag in registry.config.catalog.tags:
        assert registry.count(tag) == actual.get(tag, 0)


class TestAddObject:
    def test_centres_and_assigns_id(self, registry):
        obj = registry.add_object("hq", (11, 11))
        assert (obj.anchor_row, obj.anchor_col) == (10, 10)
        assert obj.footprint_size == 3
        assert obj.id
        assert registry.count("hq") == 1

    def test_ids_are_unique(self, registry):
        a = registry.add_object("banner", (0, 0))
        b = registry.add_object("banner", (5, 5))
        assert a.id != b.id

    def test_hq_cap(self, registry):
        registry.add_object("hq", (5, 5))
        before = registry.objects
        with pytest.raises(CapacityExceeded) as exc:
            registry.add_object("hq", (20, 20))
        assert str(exc.value) == "Only 1 hq allowed"
        assert registry.objects == before
        assert registry.count("hq") == 1

    def test_bear_trap_cap(self, registry):
        registry.add_object("bear-trap", (5, 5))
        registry.add_object("bear-trap", (15, 15))
        with pytest.raises(CapacityExceeded):
            registry.add_object("bear-trap", (25, 25))
        assert registry.count("bear-trap") == 2

    def test_unbounded_types(self, registry):
        for i in range(10):
            registry.add_object("banner", (i * 2, 0))
        assert registry.count("banner") == 10

    def test_collision_leaves_registry_unchanged(self, registry):
        registry.add_object("furnace", (5, 5))
        with pytest.raises(Collision):
            registry.add_object("furnace", (5, 5))
        assert len(registry) == 1
        assert registry.count("furnace") == 1

    def test_clamped_near_edge(self, registry):
        obj = registry.add_object("bear-trap", (39, 0))
        assert (obj.anchor_row, obj.anchor_col) == (37, 0)

    def test_unknown_type(self, registry):
        with pytest.raises(UnknownObjectType):
            registry.add_object("castle", (5, 5))
        assert len(registry) == 0

    def test_named_on_placement(self, registry):
        obj = registry.add_object("furnace", (5, 5), name=" Ivy ")
        assert obj.name == "Ivy"

    def test_name_rejected_for_banner(self, registry):
        with pytest.raises(NamingNotAllowed):
            registry.add_object("banner", (5, 5), name="flag")
        assert len(registry) == 0
        assert registry.count("banner") == 0

    def test_blank_name_allowed_for_banner(self, registry):
        assert registry.add_object("banner", (5, 5), name="  ").name == ""

    def test_footprint_larger_than_grid(self):
        registry = ObjectRegistry(PlannerConfig(grid_size=2))
        with pytest.raises(OutOfBounds):
            registry.add_object("hq", (1, 1))
        assert registry.count("hq") == 0


class TestRemove:
    def test_remove_decrements(self, registry):
        obj = registry.add_object("hq", (5, 5))
        assert registry.remove_object(obj.id)
        assert registry.count("hq") == 0
        assert len(registry) == 0

    def test_remove_missing_is_noop(self, registry):
        registry.add_object("hq", (5, 5))
        assert not registry.remove_object("nope")
        assert registry.count("hq") == 1

    def test_removal_frees_capacity(self, registry):
        obj = registry.add_object("hq", (5, 5))
        registry.remove_object(obj.id)
        registry.add_object("hq", (20, 20))
        assert registry.count("hq") == 1


class TestFindObjectAt:
    def test_hit_and_miss(self, registry):
        obj = registry.add_object("hq", (11, 11))
        assert registry.find_object_at(12, 12).id == obj.id
        assert registry.find_object_at(13, 13) is None

    def test_newest_wins_on_overlap(self, registry):
        registry.replace_all(
            [
                PlacedObject("old", "furnace", 0, 0, 2),
                PlacedObject("new", "banner", 1, 1, 1),
            ]
        )
        assert registry.find_object_at(1, 1).id == "new"
        assert registry.find_object_at(0, 0).id == "old"


class TestRename:
    def test_trims(self, registry):
        obj = registry.add_object("furnace", (5, 5))
        registry.rename(obj.id, "  Alice  ")
        assert registry.get(obj.id).name == "Alice"

    def test_empty_after_trim_is_allowed(self, registry):
        obj = registry.add_object("hq", (5, 5))
        registry.rename(obj.id, "   ")
        assert registry.get(obj.id).name == ""

    def test_banner_cannot_be_named(self, registry):
        obj = registry.add_object("banner", (5, 5))
        with pytest.raises(NamingNotAllowed):
            registry.rename(obj.id, "flag")
        assert registry.get(obj.id).name == ""

    def test_unknown_id(self, registry):
        with pytest.raises(UnknownObject):
            registry.rename("nope", "x")


class TestCounters:
    def test_counts_never_drift(self, registry):
        ids = []
        for cell in [(2, 2), (10, 10), (20, 20), (30, 30)]:
            ids.append(registry.add_object("furnace", cell).id)
            _assert_counts_match(registry)
        ids.append(registry.add_object("hq", (2, 30)).id)
        _assert_counts_match(registry)
        for oid in ids[::2]:
            registry.remove_object(oid)
            _assert_counts_match(registry)
        registry.remove_object("missing")
        _assert_counts_match(registry)

    def test_replace_all_recounts(self, registry):
        registry.add_object("hq", (5, 5))
        registry.replace_all(
            [
                PlacedObject("a", "bear-trap", 0, 0, 3),
                PlacedObject("b", "furnace", 5, 5, 2),
                PlacedObject("c", "furnace", 8, 8, 2),
            ]
        )
        assert registry.counts() == {"bear-trap": 1, "furnace": 2}
        assert registry.count("hq") == 0

    def test_clear(self, registry):
        registry.add_object("hq", (5, 5))
        registry.clear()
        assert len(registry) == 0
        assert registry.counts() == {}
