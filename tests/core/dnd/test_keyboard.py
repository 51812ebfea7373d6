import pytest

from conftest import level_ids
from navtree_toolkit.core.dnd import keyboard
from navtree_toolkit.core.models import PreviewInsert
from navtree_toolkit.core.models.drag_state import DragPhase
from navtree_toolkit.core.services.drag_session import DragSession
from navtree_toolkit.core.tree.navigator import NavTree


@pytest.fixture
def session(tree, scheduler):
    return DragSession(tree, scheduler=scheduler, animated=False)


def press(session, key, node_id):
    located = session.tree.find_item_by_id(node_id)
    return keyboard.handle_key_down(session, key, located.node, located.parent_id, located.index)


class TestTransitions:
    """Pure state transitions: refused moves hand back the same state object."""

    def test_step_in_onto_non_group_is_refused(self, simple_forest):
        tree = NavTree(simple_forest)
        located = tree.find_item_by_id("P2")
        state = keyboard.pick_up(tree, located.node, "G", 1).state

        move = keyboard.step_in(state, tree)

        assert move.signal == "not_a_group"
        assert move.state is state
        assert not move.moved
        assert (move.state.current_parent_id, move.state.current_index) == ("G", 1)

    def test_step_in_at_first_slot_has_no_group_above(self, simple_forest):
        tree = NavTree(simple_forest)
        located = tree.find_item_by_id("P1")
        state = keyboard.pick_up(tree, located.node, "G", 0).state

        move = keyboard.step_in(state, tree)

        assert move.signal == "no_group_above"
        assert move.state is state

    def test_step_bounds(self, tree):
        located = tree.find_item_by_id("P1")
        state = keyboard.pick_up(tree, located.node, "G", 0).state

        assert keyboard.step(state, -1, tree).signal == "at_top"
        down = keyboard.step(state, 1, tree)
        assert down.signal == "moved"
        assert down.state.current_index == 1
        assert down.values == {"position": "after", "target": "P2", "index": 2, "count": 2}
        assert keyboard.step(down.state, 1, tree).signal == "at_bottom"
        assert state.current_index == 0

    def test_step_out_lands_after_parent(self, tree):
        located = tree.find_item_by_id("P5")
        state = keyboard.pick_up(tree, located.node, "G3", 0).state

        move = keyboard.step_out(state, tree)

        assert move.signal == "moved_out_of"
        assert (move.state.current_parent_id, move.state.current_index) == ("G2", 2)
        assert move.state.has_moved

    def test_step_out_from_origin_level_accounts_for_removal(self, tree):
        located = tree.find_item_by_id("P4")
        state = keyboard.pick_up(tree, located.node, "G2", 0).state
        state = keyboard.step_in(keyboard.step(state, 1, tree).state, tree).state
        assert (state.current_parent_id, state.current_index) == ("G3", 1)

        move = keyboard.step_out(state, tree)

        # G2 without P4 is [G3]; right after G3 is slot 1.
        assert (move.state.current_parent_id, move.state.current_index) == ("G2", 1)

    def test_step_out_at_root(self, tree):
        located = tree.find_item_by_id("P7")
        state = keyboard.pick_up(tree, located.node, None, 2).state
        assert keyboard.step_out(state, tree).signal == "at_top_level"

    def test_sections_cannot_step_in(self, tree):
        located = tree.find_item_by_id("S2")
        state = keyboard.pick_up(tree, located.node, None, 1).state
        assert keyboard.step_in(state, tree).signal == "invalid_target"

    def test_step_in_requests_expansion_of_collapsed_group(self, tree):
        located = tree.find_item_by_id("P3")
        state = keyboard.pick_up(tree, located.node, "S", 1).state

        move = keyboard.step_in(state, tree)

        assert move.signal == "moved_into"
        assert (move.state.current_parent_id, move.state.current_index) == ("G", 2)
        assert move.expand_group_id == "G"


class TestSessionCommands:
    def test_pick_up_move_and_drop(self, session, tree):
        assert press(session, " ", "P2")
        assert session.phase is DragPhase.DRAGGING
        assert session.modality == "keyboard"
        assert session.announcement.startswith("Picked up P2.")

        press(session, "ArrowUp", "P2")
        assert session.announcement == "Moved before P1. Position 1 of 2."
        assert session.preview_insert == PreviewInsert("G", 0)
        assert session.is_preview_item("P2")

        press(session, "Enter", "P2")

        assert level_ids(tree.data, "G") == ["P2", "P1"]
        assert session.announcement == "Dropped P2. Reorder complete."
        assert session.phase is DragPhase.IDLE
        assert session.keyboard_state is None

    def test_move_out_of_group_then_drop(self, session, tree):
        press(session, "Enter", "P1")
        press(session, "ArrowLeft", "P1")
        assert session.announcement == "Moved out of G. Now at parent level."

        press(session, "Enter", "P1")

        assert level_ids(tree.data, "G") == ["P2"]
        assert level_ids(tree.data, "S") == ["G", "P1", "P3"]

    def test_move_into_collapsed_group_expands_it(self, scheduler, tree):
        toggled = []
        session = DragSession(
            tree, scheduler=scheduler, animated=False, on_group_toggle=lambda gid, exp: toggled.append((gid, exp))
        )
        press(session, " ", "P3")
        press(session, "ArrowRight", "P3")

        assert tree.is_group_expanded("G")
        assert toggled == [("G", True)]
        assert session.announcement == "Moved into G. Position 3."

        press(session, " ", "P3")
        assert level_ids(tree.data, "G") == ["P1", "P2", "P3"]

    def test_refused_move_announces_and_keeps_state(self, session):
        press(session, " ", "P1")
        state = session.keyboard_state

        press(session, "ArrowRight", "P1")

        assert session.keyboard_state is state
        assert session.announcement == "No group above to move into"

    def test_escape_cancels_without_changes(self, session, tree, forest):
        before = level_ids(tree.data, "G")
        press(session, " ", "P1")
        press(session, "ArrowDown", "P1")

        press(session, "Escape", "P1")

        assert session.announcement == "Cancelled. P1 returned to original position."
        assert session.phase is DragPhase.IDLE
        assert level_ids(tree.data, "G") == before

    def test_keys_for_other_items_are_not_consumed(self, session):
        assert not press(session, "ArrowUp", "P1")
        press(session, " ", "P1")
        assert not press(session, "ArrowUp", "P2")

    def test_veto_runs_cancel_path(self, scheduler, tree):
        session = DragSession(tree, scheduler=scheduler, animated=False, on_before_reorder=lambda event: False)
        press(session, " ", "P2")
        press(session, "ArrowUp", "P2")

        assert keyboard.drop_picked_up_item(session) is None

        assert level_ids(tree.data, "G") == ["P1", "P2"]
        assert session.phase is DragPhase.IDLE
        assert session.announcement.startswith("Cancelled.")

    def test_drop_reports_event_with_depth(self, scheduler, tree):
        events = []
        session = DragSession(tree, scheduler=scheduler, animated=False, on_reorder=events.append)
        press(session, " ", "P5")
        press(session, "ArrowLeft", "P5")

        event = keyboard.drop_picked_up_item(session)

        assert event is events[0]
        assert (event.from_parent_id, event.to_parent_id, event.to_index) == ("G3", "G2", 2)
        assert event.depth == 1
        # Controlled mode: the caller owns the data.
        assert level_ids(tree.data, "G3") == ["P5"]

    def test_disabled_session_ignores_keys(self, scheduler, tree):
        session = DragSession(tree, scheduler=scheduler, enabled=False)
        assert not press(session, " ", "P1")

    def test_keyboard_pick_up_refused_during_other_drag(self, session):
        located = session.tree.find_item_by_id("P3")
        assert session.acquire("pointer", DragPhase.ARMED)

        assert not keyboard.pick_up_item(session, located.node, "S", 1)
        assert session.modality == "pointer"
