from __future__ import annotations

"""Native (desktop mouse) drag handlers.

These mirror the platform drag protocol: mouse down pre-arms the session so
the preview is ready before drag start, drag over moves the target, drop
commits. Drag end is deferred by one zero-delay timer so a drop delivered
in the same event burst wins; if the platform never delivered the drop but
a target is still recorded, the deferred callback commits anyway.

The container handlers cover the gaps between items, where no item-level
drag over fires.
"""

import logging
from typing import Any, Optional

from navtree_toolkit.core.dnd.geometry import Rect
from navtree_toolkit.core.models import DraggedItem, ReorderEvent
from navtree_toolkit.core.models.drag_state import DragPhase
from navtree_toolkit.core.services.drag_session import DragSession

__all__ = [
    "handle_mouse_down",
    "handle_mouse_up",
    "handle_drag_start",
    "handle_drag_over",
    "handle_drag_leave",
    "handle_drop",
    "handle_drag_end",
    "handle_container_drag_over",
    "handle_container_drag_leave",
    "handle_container_drop",
]

logger = logging.getLogger(__name__)


def _is_native(session: DragSession) -> bool:
    return session.modality == "native"


def handle_mouse_down(session: DragSession, node: Any, parent_id: Optional[str], index: int) -> bool:
    if session.dragged is not None and session.phase is not DragPhase.ARMED:
        return False
    if not session.acquire("native", DragPhase.ARMED):
        return False
    session.dragged = DraggedItem(session.tree.get_id(node), node, parent_id, index)
    return True


def handle_mouse_up(session: DragSession) -> None:
    """Release a pre-arm that never turned into a drag."""
    if _is_native(session):
        session.release_arm()


def handle_drag_start(session: DragSession, node: Any, parent_id: Optional[str], index: int) -> bool:
    node_id = session.tree.get_id(node)
    armed_same = (
        _is_native(session)
        and session.phase is DragPhase.ARMED
        and session.dragged is not None
        and session.dragged.id == node_id
    )
    if not armed_same and not session.acquire("native", DragPhase.ARMED):
        return False
    session.start_drag(node, parent_id, index)
    return True


def handle_drag_over(
    session: DragSession,
    node: Any,
    parent_id: Optional[str],
    client_y: float,
    rect: Optional[Rect] = None,
) -> bool:
    """Update the drop target from the cursor over ``node``'s drop zone."""
    if session.dragged is None or not _is_native(session):
        return False
    return session.set_drop_target(node, parent_id, client_y, rect)


def handle_drag_leave(session: DragSession, node: Any) -> None:
    # The target itself is kept: live preview reflows fire spurious leaves.
    if session.hover_expand.target_id == session.tree.get_id(node):
        session.hover_expand.cancel()


def handle_drop(session: DragSession) -> Optional[ReorderEvent]:
    if session.dragged is None or not _is_native(session):
        return None
    return session.handle_drop()


def handle_drag_end(session: DragSession) -> None:
    if session.dragged is None or not _is_native(session):
        return

    def finish() -> None:
        if not _is_native(session) or session.dragged is None:
            return
        target_id = session.drop_target_id
        if (
            target_id is not None
            and session.drop_position is not None
            and session.tree.find_item_by_id(target_id) is not None
        ):
            logger.debug("Drop event missing; committing at %s", target_id)
            session.handle_drop()
            return
        session.cancel_drag()

    session.defer_drag_end(finish)


def handle_container_drag_over(session: DragSession, x: float, y: float) -> bool:
    """Target the item under (x, y), or the nearest one when over a gap."""
    if session.dragged is None or not _is_native(session):
        return False
    session.refresh_drop_zone_rects()
    zone = session.find_drop_zone_at_point(x, y) or session.find_nearest_drop_zone(y)
    if zone is not None:
        target = session.tree.find_item_by_id(zone.id)
        if target is not None:
            session.set_drop_target(target.node, target.parent_id, y, zone.rect)
    session.handle_drag_auto_scroll(y)
    return True


def handle_container_drag_leave(session: DragSession, still_inside: bool = False) -> None:
    """Clear the target when the cursor leaves the container for good."""
    if session.dragged is None or still_inside:
        return
    session.set_drop_target(None)


def handle_container_drop(session: DragSession) -> Optional[ReorderEvent]:
    if session.dragged is None or not _is_native(session):
        return None
    if session.drop_target_id is not None and session.drop_position is not None:
        if session.tree.find_item_by_id(session.drop_target_id) is not None:
            return session.handle_drop()
    session.cancel_drag()
    return None
