from __future__ import annotations

"""Touch and pen drag driven by pointer events with a long-press start.

Mouse pointers are left to the native drag handlers. A press arms a
long-press timer; moving further than ``move_cancel_distance`` before it
fires is treated as a scroll gesture and abandons the session.
"""

import logging
from dataclasses import replace
from typing import Any, Optional

from navtree_toolkit.core.models import ReorderEvent
from navtree_toolkit.core.models.drag_state import DragPhase, PointerDragState
from navtree_toolkit.core.services.drag_session import DragSession

__all__ = [
    "handle_pointer_down",
    "start_pointer_drag",
    "handle_pointer_move",
    "handle_pointer_up",
    "cleanup_pointer_drag",
]

logger = logging.getLogger(__name__)


def handle_pointer_down(
    session: DragSession,
    node: Any,
    parent_id: Optional[str],
    index: int,
    x: float,
    y: float,
    pointer_type: str = "touch",
    button: int = 0,
) -> bool:
    """Arm a long-press drag for ``node``; False when the press is ignored."""
    if not session.enabled or button != 0 or pointer_type == "mouse":
        return False
    if not session.acquire("pointer", DragPhase.ARMED):
        return False

    timer = session.scheduler.call_later(
        session.settings.dnd.long_press_delay, lambda: start_pointer_drag(session)
    )
    session.pointer_state = PointerDragState(
        node=node,
        id=session.tree.get_id(node),
        parent_id=parent_id,
        index=index,
        start_x=x,
        start_y=y,
        current_x=x,
        current_y=y,
        long_press_timer=timer,
    )
    return True


def start_pointer_drag(session: DragSession) -> None:
    """Long-press timer callback: the press becomes a drag."""
    state = session.pointer_state
    if state is None or state.is_dragging:
        return
    session.pointer_state = replace(state, is_dragging=True, long_press_timer=None)
    session.start_drag(state.node, state.parent_id, state.index)
    session.cache_drop_zone_rects()
    session.announce("touch_drag_started", label=session.tree.get_label(state.node))
    logger.debug("Touch drag started for %s", state.id)


def handle_pointer_move(session: DragSession, x: float, y: float) -> bool:
    """Track the pointer; True when the move was consumed by an active drag."""
    state = session.pointer_state
    if state is None:
        return False
    state = replace(state, current_x=x, current_y=y)
    session.pointer_state = state

    if not state.is_dragging:
        if state.moved_distance() > session.settings.dnd.move_cancel_distance:
            logger.debug("Long press abandoned for %s: pointer moved", state.id)
            cleanup_pointer_drag(session)
        return False

    session.refresh_drop_zone_rects()
    zone = session.find_drop_zone_at_point(x, y)
    if zone is None:
        session.set_drop_target(None)
    else:
        target = session.tree.find_item_by_id(zone.id)
        if target is not None:
            rect = session.surface.get_item_rect(zone.id) if session.surface is not None else None
            session.set_drop_target(target.node, target.parent_id, y, rect or zone.rect)
    session.handle_drag_auto_scroll(y)
    return True


def handle_pointer_up(session: DragSession) -> Optional[ReorderEvent]:
    """Commit at the current target, or cancel when there is none."""
    state = session.pointer_state
    if state is None:
        return None
    if state.long_press_timer is not None:
        session.scheduler.cancel(state.long_press_timer)

    event = None
    if state.is_dragging and session.drop_target_id is not None:
        if session.tree.find_item_by_id(session.drop_target_id) is not None:
            event = session.handle_drop()
    cleanup_pointer_drag(session)
    return event


def cleanup_pointer_drag(session: DragSession) -> None:
    state = session.pointer_state
    if state is None:
        session.auto_scroll.stop()
        return
    if state.is_dragging and session.dragged is not None:
        session.cancel_drag()
    else:
        session.end_drag()
