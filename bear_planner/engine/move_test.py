"""Tests for the drag transaction: preview, commit, revert."""

import pytest

from bear_planner.engine.errors import InvalidMoveState, UnknownObject
from bear_planner.engine.move import MoveState, MoveTransaction
from bear_planner.engine.registry import ObjectRegistry
from bear_planner.engine.types import PlannerConfig


@pytest.fixture
def registry():
    return ObjectRegistry(PlannerConfig())


@pytest.fixture
def move(registry):
    return MoveTransaction(registry)


def _anchor(registry, object_id):
    obj = registry.get(object_id)
    return obj.anchor_row, obj.anchor_col


class TestBegin:
    def test_records_original_anchor(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        assert move.state is MoveState.DRAGGING
        assert move.original_anchor == (3, 3)

    def test_unknown_id(self, move):
        with pytest.raises(UnknownObject):
            move.begin("nope")
        assert move.state is MoveState.IDLE

    def test_second_begin_rejected(self, registry, move):
        a = registry.add_object("banner", (0, 0))
        b = registry.add_object("banner", (5, 5))
        move.begin(a.id)
        with pytest.raises(InvalidMoveState):
            move.begin(b.id)
        assert move.object_id == a.id


class TestUpdate:
    def test_preview_does_not_mutate(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        preview = move.update((20, 20))
        assert (preview.anchor_row, preview.anchor_col) == (19, 19)
        assert preview.valid
        assert _anchor(registry, f.id) == (3, 3)

    def test_overlapping_self_is_valid(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        assert move.update((5, 5)).valid

    def test_blocked_preview(self, registry, move):
        registry.add_object("hq", (11, 11))
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        assert not move.update((11, 11)).valid

    def test_territory_for_hq(self, registry, move):
        hq = registry.add_object("hq", (11, 11))
        move.begin(hq.id)
        assert move.update((21, 21)).territory == (14, 29, 14, 29)

    def test_no_territory_for_furnace(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        assert move.update((10, 10)).territory is None

    def test_off_grid_preview_is_invalid(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        preview = move.update((-1, 10))
        assert not preview.valid
        assert (preview.anchor_row, preview.anchor_col) == (0, 9)
        assert _anchor(registry, f.id) == (3, 3)

    def test_update_when_idle(self, move):
        with pytest.raises(InvalidMoveState):
            move.update((1, 1))


class TestFinalize:
    def test_commit(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        outcome = move.finalize((20, 20))
        assert outcome.committed
        assert _anchor(registry, f.id) == (19, 19)
        assert move.state is MoveState.IDLE

    def test_blocked_drop_reverts(self, registry, move):
        registry.add_object("hq", (11, 11))
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        outcome = move.finalize((11, 11))
        assert not outcome.committed
        assert (outcome.anchor_row, outcome.anchor_col) == (3, 3)
        assert _anchor(registry, f.id) == (3, 3)
        assert move.state is MoveState.IDLE

    def test_drop_outside_grid_reverts(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        assert not move.finalize(None).committed
        assert _anchor(registry, f.id) == (3, 3)

    def test_drop_on_off_grid_cell_reverts(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        outcome = move.finalize((-10, 55))
        assert not outcome.committed
        assert (outcome.anchor_row, outcome.anchor_col) == (3, 3)
        assert _anchor(registry, f.id) == (3, 3)
        assert move.state is MoveState.IDLE

    def test_drop_just_past_edge_reverts(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        assert not move.finalize((20, 40)).committed
        assert _anchor(registry, f.id) == (3, 3)

    def test_drop_on_last_cell_commits(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        assert move.finalize((39, 39)).committed
        assert _anchor(registry, f.id) == (38, 38)

    def test_counts_unchanged(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        before = registry.counts()
        move.begin(f.id)
        move.finalize((30, 30))
        assert registry.counts() == before

    def test_finalize_when_idle(self, move):
        with pytest.raises(InvalidMoveState):
            move.finalize((1, 1))

    def test_object_removed_mid_drag(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        registry.remove_object(f.id)
        with pytest.raises(UnknownObject):
            move.finalize((10, 10))
        assert move.state is MoveState.IDLE


class TestCancel:
    def test_cancel_reverts(self, registry, move):
        f = registry.add_object("furnace", (4, 4))
        move.begin(f.id)
        move.update((20, 20))
        outcome = move.cancel()
        assert not outcome.committed
        assert _anchor(registry, f.id) == (3, 3)
        assert not move.active

    def test_cancel_when_idle(self, move):
        assert move.cancel() is None
