from __future__ import annotations

"""Per-item drag-and-drop bindings for the rendering layer.

:func:`create_dnd_state` bundles, for one rendered item, the flags the
renderer needs to style it and the callbacks it attaches to the item's drag
handle and drop zone. Callback signatures are framework neutral: a Tk
adapter passes ``event.y_root`` and the like, a test passes numbers.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from navtree_toolkit.core.dnd import keyboard, native, pointer
from navtree_toolkit.core.dnd.geometry import Rect
from navtree_toolkit.core.models import DropPosition
from navtree_toolkit.core.services.drag_session import DragSession

__all__ = ["ItemDnDState", "create_dnd_state"]


@dataclass
class ItemDnDState:
    enabled: bool
    is_dragging: bool
    is_keyboard_dragging: bool
    is_pointer_dragging: bool
    is_drop_target: bool
    drop_position: Optional[DropPosition]
    dragged_label: Optional[str]
    is_preview: bool
    handle_props: Dict[str, Any] = field(default_factory=dict)
    drop_zone_props: Dict[str, Any] = field(default_factory=dict)
    keyboard: Dict[str, Any] = field(default_factory=dict)


def create_dnd_state(
    session: DragSession,
    node: Any,
    parent_id: Optional[str],
    index: int,
    depth: int,
    has_custom_drop_indicator: bool = False,
) -> ItemDnDState:
    tree = session.tree
    item_id = tree.get_id(node)
    kind = tree.get_kind(node)
    enabled = session.enabled

    keyboard_state = session.keyboard_state
    pointer_state = session.pointer_state
    is_keyboard_dragging = keyboard_state is not None and keyboard_state.id == item_id
    is_pointer_dragging = (
        pointer_state is not None and pointer_state.id == item_id and pointer_state.is_dragging
    )
    is_dragging = session.dragged is not None and session.dragged.id == item_id
    is_drop_target = session.drop_target_id == item_id
    labels = session.settings.labels

    def on_key_down(key: str) -> bool:
        return keyboard.handle_key_down(session, key, node, parent_id, index, depth)

    def on_pointer_down(x: float, y: float, pointer_type: str = "touch", button: int = 0) -> bool:
        return pointer.handle_pointer_down(session, node, parent_id, index, x, y, pointer_type, button)

    def on_drag_over(client_y: float, rect: Optional[Rect] = None) -> bool:
        return native.handle_drag_over(session, node, parent_id, client_y, rect)

    handle_props: Dict[str, Any] = {
        "draggable": enabled and not is_keyboard_dragging,
        "tab_index": 0 if enabled else -1,
        "role": "button",
        "aria-roledescription": labels.get("draggable_item", ""),
        "aria-describedby": labels.get("instructions_id", ""),
        "aria-pressed": True if is_keyboard_dragging else None,
        "aria-grabbed": True if is_dragging or is_keyboard_dragging else None,
        "on_mouse_down": lambda: native.handle_mouse_down(session, node, parent_id, index),
        "on_mouse_up": lambda: native.handle_mouse_up(session),
        "on_drag_start": lambda: native.handle_drag_start(session, node, parent_id, index),
        "on_drag_end": lambda: native.handle_drag_end(session),
        "on_key_down": on_key_down,
        "on_pointer_down": on_pointer_down,
    }
    drop_zone_props: Dict[str, Any] = {
        "data-item-id": item_id,
        "data-item-kind": kind,
        "on_drag_over": on_drag_over,
        "on_drag_leave": lambda: native.handle_drag_leave(session, node),
        "on_drop": lambda: native.handle_drop(session),
    }

    return ItemDnDState(
        enabled=enabled,
        is_dragging=is_dragging,
        is_keyboard_dragging=is_keyboard_dragging,
        is_pointer_dragging=is_pointer_dragging,
        is_drop_target=is_drop_target,
        drop_position=session.drop_position if is_drop_target else None,
        dragged_label=tree.get_label(session.dragged.node) if session.dragged is not None else None,
        is_preview=False if has_custom_drop_indicator else session.is_preview_item(item_id),
        handle_props=handle_props,
        drop_zone_props=drop_zone_props,
        keyboard={
            "is_active": is_keyboard_dragging,
            "announcement": session.announcement if is_keyboard_dragging else "",
        },
    )
