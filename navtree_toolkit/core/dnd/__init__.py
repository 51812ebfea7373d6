"""Drag-and-drop engine.

Pure building blocks (constraints, preview, reorder, geometry) are
re-exported here. The modality handlers (:mod:`.native`, :mod:`.pointer`,
:mod:`.keyboard`) and :mod:`.handlers` depend on
:class:`navtree_toolkit.core.services.drag_session.DragSession` and are
imported from their own modules.
"""

from navtree_toolkit.core.dnd.constraints import compute_effective_parent_id, is_valid_drop
from navtree_toolkit.core.dnd.drop_position import calculate_drop_position_from_rect
from navtree_toolkit.core.dnd.geometry import LayoutSurface, Rect
from navtree_toolkit.core.dnd.preview import (
    calculate_insert_position,
    compute_preview_insert,
    get_items_with_preview,
    is_preview_item,
)
from navtree_toolkit.core.dnd.reorder import (
    apply_internal_reorder,
    can_reorder_internally,
    get_effective_reorder_mode,
    reorder_items,
)

__all__ = [
    "compute_effective_parent_id",
    "is_valid_drop",
    "calculate_drop_position_from_rect",
    "LayoutSurface",
    "Rect",
    "calculate_insert_position",
    "compute_preview_insert",
    "get_items_with_preview",
    "is_preview_item",
    "apply_internal_reorder",
    "can_reorder_internally",
    "get_effective_reorder_mode",
    "reorder_items",
]
