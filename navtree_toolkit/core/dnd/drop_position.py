from __future__ import annotations

"""Map a cursor position over a drop zone to before/inside/after."""

from typing import Optional

from navtree_toolkit.core.dnd.geometry import Rect
from navtree_toolkit.core.models import DropPosition

__all__ = ["calculate_drop_position_from_rect", "EDGE_ZONE_PX", "HYSTERESIS"]

EDGE_ZONE_PX = 16.0
HYSTERESIS = 0.04
BEFORE_BOUNDARY = 0.2
AFTER_BOUNDARY = 0.8
LEAF_BOUNDARY = 0.5


def calculate_drop_position_from_rect(
    client_y: float,
    rect: Rect,
    is_container: bool,
    current_position: Optional[DropPosition] = None,
) -> DropPosition:
    """Return the drop position for ``client_y`` over ``rect``.

    The top and bottom ``min(16px, 25%)`` of the zone always mean
    before/after. Between them containers split 20/60/20 into
    before/inside/after and leaves split at the midpoint. When
    ``current_position`` is the position already shown for this zone, the
    boundary moves 4% further away so the indicator does not flicker.
    """
    relative_y = client_y - rect.top
    height = max(rect.height, 1.0)
    edge = min(EDGE_ZONE_PX, height * 0.25)
    if relative_y <= edge:
        return "before"
    if height - relative_y <= edge:
        return "after"

    ratio = relative_y / height

    if not is_container:
        if current_position == "before":
            return "before" if ratio < LEAF_BOUNDARY + HYSTERESIS else "after"
        if current_position == "after":
            return "after" if ratio > LEAF_BOUNDARY - HYSTERESIS else "before"
        return "before" if ratio < LEAF_BOUNDARY else "after"

    if current_position == "before":
        if ratio < BEFORE_BOUNDARY + HYSTERESIS:
            return "before"
        return "after" if ratio > AFTER_BOUNDARY else "inside"
    if current_position == "after":
        if ratio > AFTER_BOUNDARY - HYSTERESIS:
            return "after"
        return "before" if ratio < BEFORE_BOUNDARY else "inside"
    if current_position == "inside":
        if ratio < BEFORE_BOUNDARY - HYSTERESIS:
            return "before"
        if ratio > AFTER_BOUNDARY + HYSTERESIS:
            return "after"
        return "inside"

    if ratio < BEFORE_BOUNDARY:
        return "before"
    if ratio > AFTER_BOUNDARY:
        return "after"
    return "inside"
