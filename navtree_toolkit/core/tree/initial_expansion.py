from __future__ import annotations

from typing import Any, Dict, Sequence, Set

from navtree_toolkit.core.models import TreeSchema

__all__ = ["get_initial_expanded_groups"]


def get_initial_expanded_groups(data: Sequence[Any], schema: TreeSchema) -> Dict[str, bool]:
    """Return ``{group_id: True}`` for every group flagged as expanded by default.

    Only groups are recorded; other containers are traversed so nested groups
    are still found. Leaves are never descended into.
    """
    expanded: Dict[str, bool] = {}
    visited: Set[str] = set()

    def walk(items: Sequence[Any]) -> None:
        for node in items:
            node_id = schema.get_id(node)
            if node_id in visited:
                continue
            visited.add(node_id)
            kind = schema.get_kind(node)
            if not schema.is_container(kind):
                continue
            if schema.is_group(kind) and schema.get_default_expanded(node):
                expanded[node_id] = True
            children = schema.children_of(node)
            if children:
                walk(children)

    walk(data or ())
    return expanded
