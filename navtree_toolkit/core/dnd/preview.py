from __future__ import annotations

"""Insertion point computation and the "as if dropped" sibling lists.

None of these functions mutate the forest. The preview insert is the exact
location the commit path hands to the reorder applier, so what the user
sees while dragging is what they get on drop.
"""

from typing import Any, Callable, List, Optional, Sequence

from navtree_toolkit.core.models import DraggedItem, DropPosition, PreviewInsert
from navtree_toolkit.core.tree.navigator import NavTree

__all__ = [
    "calculate_insert_position",
    "compute_preview_insert",
    "is_preview_item",
    "get_items_with_preview",
]


def calculate_insert_position(
    dragged: Optional[DraggedItem],
    target_id: Optional[str],
    position: Optional[DropPosition],
    tree: NavTree,
) -> Optional[PreviewInsert]:
    """Where the dragged node lands when dropped at ``position`` of ``target_id``.

    Returns None when the target is unknown or the move would nest a
    root-locked kind.
    """
    if dragged is None or target_id is None or position is None:
        return None
    target = tree.find_item_by_id(target_id)
    if target is None:
        return None

    schema = tree.schema
    target_kind = schema.get_kind(target.node)
    dragged_kind = schema.get_kind(dragged.node)

    if schema.is_root_locked(dragged_kind) and schema.is_root_locked(target_kind):
        to_parent_id = None
        to_index = target.index if position == "before" else target.index + 1
    elif position == "inside" and schema.is_container(target_kind):
        to_parent_id = target_id
        to_index = 0
    elif position == "before":
        to_parent_id = target.parent_id
        to_index = target.index
    else:
        to_parent_id = target.parent_id
        to_index = target.index + 1

    if schema.is_root_locked(dragged_kind) and to_parent_id is not None:
        return None

    # The node's own removal shifts later siblings up by one.
    if dragged.origin_parent_id == to_parent_id and dragged.origin_index < to_index:
        to_index = max(0, to_index - 1)

    return PreviewInsert(to_parent_id, to_index)


def compute_preview_insert(
    live_preview: bool,
    dragged: Optional[DraggedItem],
    drop_target_id: Optional[str],
    drop_position: Optional[DropPosition],
    tree: NavTree,
) -> Optional[PreviewInsert]:
    if not live_preview:
        return None
    return calculate_insert_position(dragged, drop_target_id, drop_position, tree)


def is_preview_item(
    live_preview: bool,
    dragged: Optional[DraggedItem],
    preview_insert: Optional[PreviewInsert],
    item_id: str,
) -> bool:
    """True for the dragged node while its preview slot differs from its origin."""
    if not live_preview or dragged is None or preview_insert is None:
        return False
    if dragged.id != item_id:
        return False
    return (
        dragged.origin_parent_id != preview_insert.parent_id
        or dragged.origin_index != preview_insert.index
    )


def get_items_with_preview(
    items: Sequence[Any],
    parent_id: Optional[str],
    dragged: Optional[DraggedItem],
    preview_insert: Optional[PreviewInsert],
    get_id: Callable[[Any], str],
) -> List[Any]:
    """Return the sibling list for ``parent_id`` with the pending move applied.

    The dragged node is removed from its origin level and inserted at the
    destination level; a level can be either, both or neither.
    """
    if dragged is None or preview_insert is None:
        return list(items)

    is_origin = dragged.origin_parent_id == parent_id
    is_destination = preview_insert.parent_id == parent_id
    if not is_origin and not is_destination:
        return list(items)

    if is_origin:
        result = [item for item in items if get_id(item) != dragged.id]
    else:
        result = list(items)

    if is_destination:
        result = [item for item in result if get_id(item) != dragged.id]
        insert_at = max(0, min(preview_insert.index, len(result)))
        result.insert(insert_at, dragged.node)
    return result
