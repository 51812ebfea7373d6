from __future__ import annotations

"""Tree model owning the caller's forest, its schema, the cached index and
the group expansion map.

Every drag-and-drop component talks to the forest through a :class:`NavTree`
so lookups are served by one shared index. The index is rebuilt lazily the
first time it is needed after :meth:`NavTree.set_data` or
:meth:`NavTree.invalidate_tree_index`.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from navtree_toolkit.core.models import DEFAULT_SCHEMA, LocatedItem, TreeSchema
from navtree_toolkit.core.tree.index import TreeIndex, build_tree_index
from navtree_toolkit.core.tree.initial_expansion import get_initial_expanded_groups
from navtree_toolkit.core.tree.path import find_path_to_item, get_ancestor_path
from navtree_toolkit.core.tree.search import (
    calculate_depth,
    find_item_by_id,
    is_descendant_of,
)

__all__ = ["NavTree"]

logger = logging.getLogger(__name__)


class NavTree:
    """Caller-owned forest plus the derived state the engine needs.

    Parameters
    ----------
    data
        Root-level nodes. The list is copied; nodes are not.
    schema
        Accessor set for the node shape, :data:`DEFAULT_SCHEMA` by default.
    expanded_groups
        Persisted expansion map applied over the ``default_expanded`` flags.
    """

    def __init__(
        self,
        data: Optional[Sequence[Any]] = None,
        schema: TreeSchema = DEFAULT_SCHEMA,
        expanded_groups: Optional[Dict[str, bool]] = None,
    ) -> None:
        self.schema = schema
        self._data: List[Any] = list(data or [])
        self._index: Optional[TreeIndex] = None
        self._expanded: Dict[str, bool] = get_initial_expanded_groups(self._data, schema)
        if expanded_groups:
            self._expanded.update(expanded_groups)

    # ------------------------------------------------------------------
    # Data and index
    # ------------------------------------------------------------------

    @property
    def data(self) -> List[Any]:
        return self._data

    @property
    def index(self) -> TreeIndex:
        if self._index is None:
            self._index = build_tree_index(self._data, self.schema.get_id, self.schema.get_children)
            logger.debug("Tree index rebuilt: %d node(s)", len(self._index))
        return self._index

    def set_data(self, data: Sequence[Any]) -> None:
        """Replace the forest. Expansion state for surviving groups is kept."""
        self._data = list(data)
        self._index = None

    def invalidate_tree_index(self) -> None:
        """Drop the cached index after the forest was mutated in place."""
        self._index = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_id(self, node: Any) -> str:
        return self.schema.get_id(node)

    def get_kind(self, node: Any) -> str:
        return self.schema.get_kind(node)

    def get_label(self, node: Any) -> str:
        return self.schema.get_label(node)

    def find_item_by_id(self, target_id: Optional[str]) -> Optional[LocatedItem]:
        return find_item_by_id(
            self._data, target_id, self.schema.get_id, self.schema.get_children, self.index
        )

    def calculate_depth(self, parent_id: Optional[str]) -> int:
        return calculate_depth(
            self._data, parent_id, self.schema.get_id, self.schema.get_children, self.index
        )

    def is_descendant_of(self, target_id: Optional[str], ancestor_id: Optional[str]) -> bool:
        return is_descendant_of(
            self._data,
            target_id,
            ancestor_id,
            self.schema.get_id,
            self.schema.get_children,
            self.index,
        )

    def get_siblings_at_level(self, parent_id: Optional[str]) -> List[Any]:
        """Children of ``parent_id`` (root nodes for ``None``); empty when unknown."""
        if parent_id is None:
            return list(self._data)
        entry = self.index.get(parent_id)
        if entry is None:
            return []
        return self.schema.children_of(entry.node)

    def get_ancestor_path(self, target_id: str) -> List[str]:
        return get_ancestor_path(target_id, self.index)

    def find_path_to_item(self, target_id: str) -> List[str]:
        return find_path_to_item(self._data, target_id, self.schema, self.index)

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def is_group_expanded(self, group_id: str) -> bool:
        return self._expanded.get(group_id, False)

    def set_group_expanded(self, group_id: str, expanded: bool) -> None:
        self._expanded[group_id] = expanded

    def toggle_group(self, group_id: str) -> bool:
        """Flip the group's expansion flag and return the new value."""
        expanded = not self.is_group_expanded(group_id)
        self._expanded[group_id] = expanded
        return expanded

    def expanded_group_ids(self) -> List[str]:
        return [group_id for group_id, expanded in self._expanded.items() if expanded]

    def load_expanded_groups(self, group_ids: Iterable[str]) -> None:
        for group_id in group_ids:
            self._expanded[group_id] = True

    def expand_path_to(self, target_id: str) -> List[str]:
        """Expand every group leading to ``target_id``; return the newly opened ids."""
        opened = []
        for group_id in self.find_path_to_item(target_id):
            if not self.is_group_expanded(group_id):
                self._expanded[group_id] = True
                opened.append(group_id)
        return opened

    def __repr__(self) -> str:
        return f"NavTree(roots={len(self._data)})"
