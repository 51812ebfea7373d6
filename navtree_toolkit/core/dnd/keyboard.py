from __future__ import annotations

"""Keyboard drag and drop.

The positional logic lives in pure transition functions (:func:`pick_up`,
:func:`step`, :func:`step_out`, :func:`step_in`) that take a
:class:`KeyboardDragState` and return a :class:`KeyboardMove`: the next
state plus the announcement signal describing what happened. A refused
move returns the *same* state object with an explanatory signal.

The session commands below apply those moves to a :class:`DragSession`:
they update the preview insert, schedule the reflow animation after the
next layout pass and set the announcement.

Index semantics: ``current_index`` is the slot the node would occupy in its
current level once it has been removed from its origin, i.e. the same
index the reorder applier receives.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from navtree_toolkit.core.models import PreviewInsert, ReorderEvent
from navtree_toolkit.core.models.drag_state import DragPhase, KeyboardDragState
from navtree_toolkit.core.models.settings import matches_shortcut
from navtree_toolkit.core.services.drag_session import DragSession
from navtree_toolkit.core.tree.navigator import NavTree

__all__ = [
    "KeyboardMove",
    "pick_up",
    "step",
    "step_out",
    "step_in",
    "pick_up_item",
    "move_picked_up_item",
    "move_picked_up_item_to_parent",
    "move_picked_up_item_into_group",
    "drop_picked_up_item",
    "cancel_keyboard_drag",
    "handle_key_down",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyboardMove:
    """Result of a keyboard transition.

    Attributes
    ----------
    state
        The next state; identical to the input state when the move was refused.
    signal
        Announcement key (``moved``, ``at_top``, ``not_a_group`` ...).
    values
        Placeholder values for the announcement template.
    expand_group_id
        Group that must be expanded for the new position to be visible.
    """

    state: KeyboardDragState
    signal: str
    values: Dict[str, Any] = field(default_factory=dict)
    expand_group_id: Optional[str] = None

    @property
    def moved(self) -> bool:
        return self.signal in ("moved", "moved_out_of", "moved_into")


def _others(state: KeyboardDragState, tree: NavTree) -> List[Any]:
    return [node for node in state.siblings if tree.get_id(node) != state.id]


def pick_up(tree: NavTree, node: Any, parent_id: Optional[str], index: int) -> KeyboardMove:
    node_id = tree.get_id(node)
    state = KeyboardDragState(
        node=node,
        id=node_id,
        original_parent_id=parent_id,
        original_index=index,
        current_parent_id=parent_id,
        current_index=index,
        siblings=tuple(tree.get_siblings_at_level(parent_id)),
    )
    return KeyboardMove(state, "picked_up", {"label": tree.get_label(node)})


def step(state: KeyboardDragState, direction: int, tree: NavTree) -> KeyboardMove:
    """Move one slot up (``-1``) or down (``+1``) within the current level."""
    others = _others(state, tree)
    new_index = state.current_index + direction
    if new_index < 0:
        return KeyboardMove(state, "at_top")
    if new_index > len(others):
        return KeyboardMove(state, "at_bottom")

    passed = others[new_index] if direction < 0 else others[new_index - 1]
    return KeyboardMove(
        replace(state, current_index=new_index),
        "moved",
        {
            "position": "before" if direction < 0 else "after",
            "target": tree.get_label(passed),
            "index": new_index + 1,
            "count": len(others) + 1,
        },
    )


def step_out(state: KeyboardDragState, tree: NavTree) -> KeyboardMove:
    """Move to the grandparent level, right after the current parent."""
    if state.current_parent_id is None:
        return KeyboardMove(state, "at_top_level")
    parent = tree.find_item_by_id(state.current_parent_id)
    if parent is None:
        return KeyboardMove(state, "invalid_target", {"label": tree.get_label(state.node)})

    new_siblings = tree.get_siblings_at_level(parent.parent_id)
    remaining = [node for node in new_siblings if tree.get_id(node) != state.id]
    parent_position = next(
        (i for i, node in enumerate(remaining) if tree.get_id(node) == state.current_parent_id),
        len(remaining) - 1,
    )
    return KeyboardMove(
        replace(
            state,
            current_parent_id=parent.parent_id,
            current_index=parent_position + 1,
            siblings=tuple(new_siblings),
        ),
        "moved_out_of",
        {"target": tree.get_label(parent.node)},
    )


def step_in(state: KeyboardDragState, tree: NavTree) -> KeyboardMove:
    """Move to the end of the group directly above the current position."""
    schema = tree.schema
    if schema.is_root_locked(schema.get_kind(state.node)):
        return KeyboardMove(state, "invalid_target", {"label": tree.get_label(state.node)})
    if state.current_index <= 0:
        return KeyboardMove(state, "no_group_above")

    others = _others(state, tree)
    above = others[state.current_index - 1]
    if not schema.is_group(schema.get_kind(above)):
        return KeyboardMove(state, "not_a_group")

    group_id = tree.get_id(above)
    children = schema.children_of(above)
    new_index = len([node for node in children if tree.get_id(node) != state.id])
    return KeyboardMove(
        replace(
            state,
            current_parent_id=group_id,
            current_index=new_index,
            siblings=tuple(children),
        ),
        "moved_into",
        {"target": tree.get_label(above), "index": new_index + 1},
        expand_group_id=None if tree.is_group_expanded(group_id) else group_id,
    )


# ---------------------------------------------------------------------------
# Session commands
# ---------------------------------------------------------------------------


def pick_up_item(session: DragSession, node: Any, parent_id: Optional[str], index: int) -> bool:
    if not session.acquire("keyboard", DragPhase.DRAGGING):
        return False
    move = pick_up(session.tree, node, parent_id, index)
    session.start_drag(node, parent_id, index)
    session.keyboard_state = move.state
    session.preview_insert = PreviewInsert(parent_id, index)
    session.announce(move.signal, **move.values)
    return True


def _apply_move(session: DragSession, move: KeyboardMove) -> bool:
    if not move.moved:
        session.announce(move.signal, **move.values)
        return False
    if move.expand_group_id is not None:
        session.expand_group(move.expand_group_id)
    session.capture_item_positions()
    session.keyboard_state = move.state
    session.preview_insert = PreviewInsert(move.state.current_parent_id, move.state.current_index)
    session.schedule_reflow_after_layout()
    session.announce(move.signal, **move.values)
    return True


def move_picked_up_item(session: DragSession, direction: int) -> bool:
    state = session.keyboard_state
    if state is None:
        return False
    return _apply_move(session, step(state, direction, session.tree))


def move_picked_up_item_to_parent(session: DragSession) -> bool:
    state = session.keyboard_state
    if state is None:
        session.announce("at_top_level")
        return False
    return _apply_move(session, step_out(state, session.tree))


def move_picked_up_item_into_group(session: DragSession) -> bool:
    state = session.keyboard_state
    if state is None:
        return False
    return _apply_move(session, step_in(state, session.tree))


def drop_picked_up_item(session: DragSession, depth: Optional[int] = None) -> Optional[ReorderEvent]:
    """Commit the virtual position. The preview already shows it, so no FLIP runs."""
    state = session.keyboard_state
    if state is None:
        return None
    if not session.can_commit():
        logger.warning("Keyboard drop ignored: no reorder handler and no internal reordering")
        cancel_keyboard_drag(session)
        return None

    same_level = state.current_parent_id == state.original_parent_id
    event = ReorderEvent(
        item=state.node,
        from_parent_id=state.original_parent_id,
        to_parent_id=state.current_parent_id,
        to_index=state.current_index,
        from_index=state.original_index,
        depth=depth if same_level and depth is not None else session.tree.calculate_depth(state.current_parent_id),
        position="before",
    )
    label = session.tree.get_label(state.node)

    session.transition(DragPhase.COMMITTING)
    vetoed = False
    try:
        vetoed = not session.dispatch_reorder(event)
    finally:
        if not vetoed:
            session.end_drag()
    if vetoed:
        cancel_keyboard_drag(session)
        return None
    session.announce("dropped", label=label)
    return event


def cancel_keyboard_drag(session: DragSession) -> None:
    state = session.keyboard_state
    if state is None:
        return
    session.announce("cancelled", label=session.tree.get_label(state.node))
    session.cancel_drag()


def handle_key_down(
    session: DragSession,
    key: str,
    node: Any,
    parent_id: Optional[str],
    index: int,
    depth: int = 0,
) -> bool:
    """Dispatch ``key`` pressed on ``node``'s drag handle; True when consumed."""
    if not session.enabled:
        return False
    shortcuts = session.settings.dnd.keyboard
    state = session.keyboard_state

    if state is None:
        if matches_shortcut(key, shortcuts.pick_up_drop):
            return pick_up_item(session, node, parent_id, index)
        return False

    if state.id != session.tree.get_id(node):
        return False

    if matches_shortcut(key, shortcuts.move_up):
        move_picked_up_item(session, -1)
    elif matches_shortcut(key, shortcuts.move_down):
        move_picked_up_item(session, 1)
    elif matches_shortcut(key, shortcuts.move_to_parent):
        move_picked_up_item_to_parent(session)
    elif matches_shortcut(key, shortcuts.move_into_group):
        move_picked_up_item_into_group(session)
    elif matches_shortcut(key, shortcuts.pick_up_drop):
        drop_picked_up_item(session, depth)
    elif matches_shortcut(key, shortcuts.cancel):
        cancel_keyboard_drag(session)
    return True
