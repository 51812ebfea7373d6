from __future__ import annotations

"""Tree index, search and path helpers plus the :class:`NavTree` model."""

from navtree_toolkit.core.tree.index import TreeIndex, TreeIndexEntry, build_tree_index
from navtree_toolkit.core.tree.initial_expansion import get_initial_expanded_groups
from navtree_toolkit.core.tree.navigator import NavTree
from navtree_toolkit.core.tree.path import find_path_to_item, get_ancestor_path
from navtree_toolkit.core.tree.search import (
    calculate_depth,
    contains_id,
    find_item_by_id,
    is_descendant_of,
)

__all__ = [
    "TreeIndex",
    "TreeIndexEntry",
    "build_tree_index",
    "get_initial_expanded_groups",
    "NavTree",
    "find_path_to_item",
    "get_ancestor_path",
    "calculate_depth",
    "contains_id",
    "find_item_by_id",
    "is_descendant_of",
]
