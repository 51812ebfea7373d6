from __future__ import annotations

"""Item lookup, depth and ancestry queries.

Every query accepts an optional :class:`TreeIndex`. With an index the
answer comes from the flat map; without one a raw walk over the forest
produces the same result. Both paths are cycle-safe.
"""

from typing import Any, Callable, Optional, Sequence, Set

from navtree_toolkit.core.models import LocatedItem
from navtree_toolkit.core.tree.index import TreeIndex

__all__ = [
    "find_item_by_id",
    "calculate_depth",
    "contains_id",
    "is_descendant_of",
]


GetId = Callable[[Any], str]
GetChildren = Callable[[Any], Optional[Sequence[Any]]]


def find_item_by_id(
    data: Sequence[Any],
    target_id: Optional[str],
    get_id: GetId,
    get_children: GetChildren,
    index: Optional[TreeIndex] = None,
) -> Optional[LocatedItem]:
    """Return the node with ``target_id`` and its parent id/position, or None."""
    if target_id is None:
        return None
    if index is not None:
        entry = index.get(target_id)
        if entry is None:
            return None
        return LocatedItem(entry.node, entry.parent_id, entry.index)

    visited: Set[str] = set()

    def search(items: Sequence[Any], parent_id: Optional[str]) -> Optional[LocatedItem]:
        for position, node in enumerate(items):
            node_id = get_id(node)
            if node_id in visited:
                continue
            visited.add(node_id)
            if node_id == target_id:
                return LocatedItem(node, parent_id, position)
            children = get_children(node)
            if children:
                found = search(children, node_id)
                if found is not None:
                    return found
        return None

    return search(data or (), None)


def calculate_depth(
    data: Sequence[Any],
    parent_id: Optional[str],
    get_id: GetId,
    get_children: GetChildren,
    index: Optional[TreeIndex] = None,
) -> int:
    """Depth of the level whose parent is ``parent_id`` (0 for the root level).

    With an index this is the parent's own indexed depth, matching how the
    rendering layer numbers rows: children of a root section sit at depth 0.
    """
    if parent_id is None:
        return 0
    if index is not None:
        entry = index.get(parent_id)
        return entry.depth if entry is not None else 0

    depth = 0
    seen: Set[str] = set()
    current: Optional[str] = parent_id
    while current is not None and current not in seen:
        seen.add(current)
        info = find_item_by_id(data, current, get_id, get_children)
        if info is None:
            break
        if info.parent_id is None:
            break
        current = info.parent_id
        depth += 1
    return depth


def contains_id(
    items: Sequence[Any],
    target_id: str,
    get_id: GetId,
    get_children: GetChildren,
    _visited: Optional[Set[str]] = None,
) -> bool:
    """True when ``target_id`` occurs anywhere within ``items`` (recursively)."""
    visited = _visited if _visited is not None else set()
    for node in items or ():
        node_id = get_id(node)
        if node_id == target_id:
            return True
        if node_id in visited:
            continue
        visited.add(node_id)
        children = get_children(node)
        if children and contains_id(children, target_id, get_id, get_children, visited):
            return True
    return False


def is_descendant_of(
    data: Sequence[Any],
    target_id: Optional[str],
    ancestor_id: Optional[str],
    get_id: GetId,
    get_children: GetChildren,
    index: Optional[TreeIndex] = None,
) -> bool:
    """True when ``target_id`` is ``ancestor_id`` itself or lies beneath it."""
    if target_id is None or ancestor_id is None:
        return False
    if target_id == ancestor_id:
        return True

    if index is not None:
        visited: Set[str] = set()
        current: Optional[str] = target_id
        while current is not None and current not in visited:
            visited.add(current)
            entry = index.get(current)
            if entry is None:
                return False
            if entry.parent_id == ancestor_id:
                return True
            current = entry.parent_id
        return False

    seen: Set[str] = set()

    def find_ancestor(items: Sequence[Any]) -> Optional[bool]:
        for node in items:
            node_id = get_id(node)
            if node_id in seen:
                continue
            seen.add(node_id)
            if node_id == ancestor_id:
                return contains_id(get_children(node) or (), target_id, get_id, get_children)
            children = get_children(node)
            if children:
                found = find_ancestor(children)
                if found is not None:
                    return found
        return None

    return bool(find_ancestor(data or ()))
