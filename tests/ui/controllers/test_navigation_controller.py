import json
from dataclasses import replace

import pytest

from conftest import level_ids, page, section
from navtree_toolkit.core.dnd import keyboard
from navtree_toolkit.core.models import DEFAULT_SCHEMA
from navtree_toolkit.core.models.drag_state import DragPhase
from navtree_toolkit.core.tree.navigator import NavTree
from navtree_toolkit.ui.controllers import NavigationController, OperationResult


class Recorder:
    """Counts change notifications sent to the view."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


@pytest.fixture
def changes():
    return Recorder()


@pytest.fixture
def controller(tree, scheduler, tmp_path, changes):
    return NavigationController(tree, scheduler, storage_dir=tmp_path, on_change=changes)


def press(controller, key, node_id):
    located = controller.tree.find_item_by_id(node_id)
    return keyboard.handle_key_down(controller.session, key, located.node, located.parent_id, located.index)


class TestMoveItem:
    def test_successful_move_is_recorded(self, controller, tree, changes):
        result = controller.move_item("P2", "G", 0)

        assert isinstance(result, OperationResult)
        assert result.success
        assert result.details["event"].to_index == 0
        assert level_ids(tree.data, "G") == ["P2", "P1"]
        assert controller.last_event is result.details["event"]
        assert controller.can_undo()
        assert changes.calls == 1

    def test_move_to_root_and_depth(self, controller, tree):
        assert controller.move_item("P7", None, 0).success
        assert level_ids(tree.data) == ["P7", "S", "S2"]

        result = controller.move_item("P1", "G3", 0)
        assert result.details["event"].depth == 2
        assert level_ids(tree.data, "G3") == ["P1", "P5"]

    @pytest.mark.parametrize(
        "args, message",
        [
            (("X", None, 0), "Unknown item 'X'"),
            (("S2", "S", 0), "'S2' must stay at the top level"),
            (("S2", "G2", 0), "'S2' must stay at the top level"),
            (("P1", "P3", 0), "'P3' cannot hold items"),
            (("P1", "missing", 0), "'missing' cannot hold items"),
            (("G2", "G3", 0), "An item cannot be moved into itself"),
            (("G", "G", 0), "An item cannot be moved into itself"),
        ],
    )
    def test_invalid_moves(self, controller, args, message):
        result = controller.move_item(*args)

        assert not result.success
        assert result.message == message
        assert not controller.can_undo()

    def test_schema_root_kinds_are_honoured(self, forest, scheduler):
        schema = replace(DEFAULT_SCHEMA, root_kinds=frozenset({"section", "group"}))
        tree = NavTree(forest, schema=schema)
        controller = NavigationController(tree, scheduler)

        result = controller.move_item("G", "S2", 0)

        assert result.message == "'G' must stay at the top level"
        assert level_ids(tree.data, "S") == ["G", "P3"]
        assert controller.move_item("G", None, 0).success

    def test_veto(self, tree, scheduler):
        seen = []
        controller = NavigationController(tree, scheduler, can_reorder=lambda event: seen.append(event) or False)

        result = controller.move_item("P2", "G", 0)

        assert result.message == "Move rejected"
        assert len(seen) == 1
        assert level_ids(tree.data, "G") == ["P1", "P2"]
        assert not controller.can_undo()

    def test_refused_while_dragging(self, controller):
        press(controller, " ", "P1")

        assert controller.move_item("P2", "G", 0).message == "A drag is in progress"
        assert controller.undo().message == "A drag is in progress"
        assert controller.redo().message == "A drag is in progress"


class TestHistory:
    def test_undo_redo_single_move(self, controller, tree):
        controller.move_item("P2", "G", 0)

        assert controller.undo().message == "Undo"
        assert level_ids(tree.data, "G") == ["P1", "P2"]
        assert controller.can_redo()

        assert controller.redo().message == "Redo"
        assert level_ids(tree.data, "G") == ["P2", "P1"]

    def test_each_move_is_one_undo_step(self, controller, tree):
        controller.move_item("P2", "G", 0)
        controller.move_item("P3", None, 0)

        controller.undo()
        assert level_ids(tree.data) == ["S", "S2", "P7"]
        assert level_ids(tree.data, "G") == ["P2", "P1"]

        controller.undo()
        assert level_ids(tree.data, "G") == ["P1", "P2"]
        assert controller.undo().message == "Nothing to undo"

    def test_undo_restores_expansion_at_move_time(self, controller, tree):
        controller.toggle_group("G")
        controller.move_item("P3", "G", 0)
        controller.toggle_group("G")

        controller.undo()

        assert tree.is_group_expanded("G")

    def test_keyboard_drop_is_undoable(self, controller, tree):
        press(controller, " ", "P2")
        press(controller, "ArrowUp", "P2")
        press(controller, "Enter", "P2")
        assert level_ids(tree.data, "G") == ["P2", "P1"]

        controller.undo()

        assert level_ids(tree.data, "G") == ["P1", "P2"]

    def test_nothing_to_redo(self, controller):
        assert controller.redo().message == "Nothing to redo"

    def test_set_data_restarts_history(self, controller, tree, changes):
        controller.move_item("P2", "G", 0)

        controller.set_data([section("A", page("Q1"))])

        assert level_ids(tree.data) == ["A"]
        assert not controller.can_undo() and not controller.can_redo()
        assert changes.calls == 2

    def test_set_data_cancels_active_drag(self, controller):
        press(controller, " ", "P1")
        controller.set_data([page("Q1")])
        assert not controller.session.is_active


class TestExpansionAndPersistence:
    def test_toggle_group_persists(self, controller, tmp_path, changes):
        assert controller.toggle_group("G") is True

        payload = json.loads((tmp_path / "navtree.json").read_text(encoding="utf-8"))
        assert sorted(payload["expanded_group_ids"]) == ["G", "G2"]
        assert changes.calls == 1

    def test_expand_path_to_opens_missing_groups(self, controller, tree, changes):
        assert controller.expand_path_to("P5") == ["G3"]
        assert tree.is_group_expanded("G3")
        assert changes.calls == 1

        assert controller.expand_path_to("P5") == []
        assert changes.calls == 1

    def test_collapsed_flag_survives_restart(self, controller, tree, scheduler, forest, tmp_path):
        controller.toggle_group("G")
        assert controller.toggle_collapsed() is True

        fresh_tree = NavTree(forest)
        fresh = NavigationController(fresh_tree, scheduler, storage_dir=tmp_path)
        state = fresh.load_state()

        assert state.collapsed is True
        assert fresh.collapsed is True
        assert fresh_tree.is_group_expanded("G")

    def test_no_storage_dir(self, tree, scheduler):
        controller = NavigationController(tree, scheduler)
        assert controller.save_state() is False
        assert controller.load_state().expanded_group_ids == []

    def test_hover_expand_during_drag_is_persisted(self, controller, scheduler, tmp_path):
        session = controller.session
        located = controller.tree.find_item_by_id("P3")
        assert session.acquire("native", DragPhase.ARMED)
        session.start_drag(located.node, "S", 1)
        session.set_drop_target(controller.tree.find_item_by_id("G").node, "S")

        scheduler.advance(500)

        payload = json.loads((tmp_path / "navtree.json").read_text(encoding="utf-8"))
        assert "G" in payload["expanded_group_ids"]
