from __future__ import annotations

"""Ancestor path reconstruction."""

from typing import Any, List, Optional, Sequence, Set

from navtree_toolkit.core.models import TreeSchema
from navtree_toolkit.core.tree.index import TreeIndex

__all__ = ["get_ancestor_path", "find_path_to_item"]


def get_ancestor_path(target_id: str, index: TreeIndex) -> List[str]:
    """Return every ancestor id of ``target_id``, root first.

    Unknown ids yield an empty list. A corrupted parent chain stops at the
    first repeated id.
    """
    entry = index.get(target_id)
    if entry is None:
        return []
    path: List[str] = []
    visited: Set[str] = {target_id}
    current = entry.parent_id
    while current is not None and current not in visited:
        visited.add(current)
        path.append(current)
        parent_entry = index.get(current)
        current = parent_entry.parent_id if parent_entry is not None else None
    path.reverse()
    return path


def find_path_to_item(
    data: Sequence[Any],
    target_id: str,
    schema: TreeSchema,
    index: Optional[TreeIndex] = None,
) -> List[str]:
    """Return the ids of the *group* ancestors of ``target_id``, outermost first.

    Sections are skipped because they are never collapsed; the result is
    what must be expanded to reveal the item.
    """
    if index is not None:
        return [
            node_id
            for node_id in get_ancestor_path(target_id, index)
            if schema.is_group(schema.get_kind(index.get(node_id).node))
        ]

    visited: Set[str] = set()

    def walk(items: Sequence[Any], path: List[str]) -> Optional[List[str]]:
        for node in items:
            node_id = schema.get_id(node)
            if node_id == target_id:
                return path
            if node_id in visited:
                continue
            visited.add(node_id)
            children = schema.children_of(node)
            if not children:
                continue
            next_path = path + [node_id] if schema.is_group(schema.get_kind(node)) else path
            found = walk(children, next_path)
            if found is not None:
                return found
        return None

    return walk(data or (), []) or []
