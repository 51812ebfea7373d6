from __future__ import annotations

"""Reorder applier: produce a new forest with one node relocated.

The caller's forest is never touched. A move whose source or destination
no longer matches the forest (stale ids after an external edit) is a logged
no-op that returns an untouched copy.
"""

import copy
import logging
from typing import Any, Callable, List, Optional, Sequence, Set, Tuple

from navtree_toolkit.core.models import NavtreeError, ReorderEvent, TreeSchema
from navtree_toolkit.core.tree.index import build_tree_index
from navtree_toolkit.core.tree.search import is_descendant_of

__all__ = [
    "REORDER_MODES",
    "reorder_items",
    "get_effective_reorder_mode",
    "can_reorder_internally",
    "apply_internal_reorder",
]

logger = logging.getLogger(__name__)

REORDER_MODES = ("auto", "controlled", "uncontrolled")

GetId = Callable[[Any], str]
GetChildren = Callable[[Any], Optional[Sequence[Any]]]
SetChildren = Callable[[Any, List[Any]], Any]
Splice = Callable[[List[Any]], List[Any]]


def _rebuild(
    items: List[Any],
    parent_id: Optional[str],
    splice: Splice,
    get_id: GetId,
    get_children: GetChildren,
    set_children: SetChildren,
    visited: Set[str],
) -> Tuple[List[Any], bool]:
    """Apply ``splice`` to the child list of ``parent_id`` and rebuild its ancestors.

    Returns the (possibly new) item list and whether the parent was found.
    """
    if parent_id is None:
        return splice(list(items)), True

    for position, node in enumerate(items):
        node_id = get_id(node)
        if node_id in visited:
            continue
        visited.add(node_id)
        children = list(get_children(node) or [])
        if node_id == parent_id:
            items[position] = set_children(node, splice(children))
            return items, True
        if children:
            new_children, found = _rebuild(
                children, parent_id, splice, get_id, get_children, set_children, visited
            )
            if found:
                items[position] = set_children(node, new_children)
                return items, True
    return items, False


def reorder_items(
    forest: Sequence[Any],
    event: ReorderEvent,
    get_id: GetId,
    get_children: GetChildren,
    set_children: SetChildren,
) -> List[Any]:
    """Return a deep copy of ``forest`` with ``event.item`` moved to its destination."""
    result: List[Any] = copy.deepcopy(list(forest))
    item_id = get_id(event.item)
    index = build_tree_index(result, get_id, get_children)

    entry = index.get(item_id)
    if entry is None or entry.parent_id != event.from_parent_id:
        logger.warning(
            "Reorder skipped: %s is not under %s", item_id, event.from_parent_id or "<root>"
        )
        return result
    if event.to_parent_id is not None and (
        event.to_parent_id not in index
        or is_descendant_of(result, event.to_parent_id, item_id, get_id, get_children, index)
    ):
        logger.warning(
            "Reorder skipped: destination %s is unknown or inside %s", event.to_parent_id, item_id
        )
        return result

    moved = entry.node

    def remove(children: List[Any]) -> List[Any]:
        if entry.index < len(children) and get_id(children[entry.index]) == item_id:
            del children[entry.index]
            return children
        for position, child in enumerate(children):
            if get_id(child) == item_id:
                del children[position]
                break
        return children

    def insert(children: List[Any]) -> List[Any]:
        at = max(0, min(event.to_index, len(children)))
        children.insert(at, moved)
        return children

    result, _ = _rebuild(
        result, event.from_parent_id, remove, get_id, get_children, set_children, set()
    )
    result, inserted = _rebuild(
        result, event.to_parent_id, insert, get_id, get_children, set_children, set()
    )
    if not inserted:
        # Validated above; only reachable when set_children drops nodes.
        logger.error("Reorder lost %s: destination %s vanished", item_id, event.to_parent_id)
    else:
        logger.debug(
            "Moved %s from %s to %s[%d]",
            item_id,
            event.from_parent_id,
            event.to_parent_id,
            event.to_index,
        )
    return result


def get_effective_reorder_mode(mode: str, has_external_handler: bool) -> str:
    """Resolve ``auto`` to ``controlled`` when a handler exists, else ``uncontrolled``."""
    if mode not in REORDER_MODES:
        raise NavtreeError(f"Unknown reorder mode: {mode!r}")
    if mode != "auto":
        return mode
    return "controlled" if has_external_handler else "uncontrolled"


def can_reorder_internally(schema: TreeSchema) -> bool:
    return schema.supports_internal_reorder


def apply_internal_reorder(data: Sequence[Any], event: ReorderEvent, schema: TreeSchema) -> List[Any]:
    if schema.set_children is None:
        return list(data)
    return reorder_items(data, event, schema.get_id, schema.get_children, schema.set_children)
