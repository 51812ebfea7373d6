from __future__ import annotations

"""Convenience queries over a whole navigation forest.

Each helper builds a throwaway index, so they suit one-off lookups (sitemap
generation, "reveal the current page") rather than per-event hot paths;
those go through :class:`navtree_toolkit.core.tree.NavTree`.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from navtree_toolkit.core.models import DEFAULT_SCHEMA, TreeSchema
from navtree_toolkit.core.tree.index import TreeIndex, build_tree_index
from navtree_toolkit.core.tree.path import find_path_to_item

__all__ = [
    "ItemCounts",
    "get_all_pages",
    "find_page_by_href",
    "get_all_group_ids",
    "count_items",
    "get_item_path",
    "get_item_depth",
    "is_item_descendant_of",
]


@dataclass(frozen=True)
class ItemCounts:
    pages: int
    groups: int

    @property
    def total(self) -> int:
        return self.pages + self.groups


def _index(data: Sequence[Any], schema: TreeSchema) -> TreeIndex:
    return build_tree_index(data, schema.get_id, schema.get_children)


def _nodes(data: Sequence[Any], schema: TreeSchema) -> List[Any]:
    """Every node once, in depth-first document order."""
    index = _index(data, schema)
    return [index.get(node_id).node for node_id in index.ids()]


def get_all_pages(data: Sequence[Any], schema: TreeSchema = DEFAULT_SCHEMA) -> List[Any]:
    """Flat list of leaf (non-container) nodes in document order."""
    return [node for node in _nodes(data, schema) if not schema.is_container(schema.get_kind(node))]


def find_page_by_href(data: Sequence[Any], href: str, schema: TreeSchema = DEFAULT_SCHEMA) -> Optional[Any]:
    for page in get_all_pages(data, schema):
        if schema.get_href(page) == href:
            return page
    return None


def get_all_group_ids(data: Sequence[Any], schema: TreeSchema = DEFAULT_SCHEMA) -> List[str]:
    return [
        schema.get_id(node)
        for node in _nodes(data, schema)
        if schema.is_group(schema.get_kind(node))
    ]


def count_items(data: Sequence[Any], schema: TreeSchema = DEFAULT_SCHEMA) -> ItemCounts:
    """Count pages and groups; sections are not counted."""
    pages = groups = 0
    for node in _nodes(data, schema):
        kind = schema.get_kind(node)
        if schema.is_group(kind):
            groups += 1
        elif not schema.is_container(kind):
            pages += 1
    return ItemCounts(pages=pages, groups=groups)


def get_item_path(data: Sequence[Any], target_id: str, schema: TreeSchema = DEFAULT_SCHEMA) -> List[str]:
    """Group ids leading to ``target_id``, outermost first."""
    return find_path_to_item(data, target_id, schema, _index(data, schema))


def get_item_depth(data: Sequence[Any], target_id: str, schema: TreeSchema = DEFAULT_SCHEMA) -> int:
    """Group nesting depth of ``target_id`` (sections do not count)."""
    return len(get_item_path(data, target_id, schema))


def is_item_descendant_of(
    data: Sequence[Any], item_id: str, group_id: str, schema: TreeSchema = DEFAULT_SCHEMA
) -> bool:
    return group_id in get_item_path(data, item_id, schema)
