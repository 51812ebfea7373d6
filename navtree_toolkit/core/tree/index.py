from __future__ import annotations

"""Flat parent/depth/position index over a navigation forest.

The index is a snapshot: callers rebuild it (or invalidate their cache)
whenever the forest changes outside the reorder applier. Cycles and
duplicate ids are tolerated; the first occurrence of an id wins and later
occurrences are skipped together with their subtrees.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Sequence

__all__ = ["TreeIndexEntry", "TreeIndex", "build_tree_index"]


@dataclass(frozen=True)
class TreeIndexEntry:
    node: Any
    parent_id: Optional[str]
    depth: int
    index: int


class TreeIndex:
    """Read-only mapping of node id -> :class:`TreeIndexEntry`."""

    def __init__(self, entries: Dict[str, TreeIndexEntry]) -> None:
        self._entries = entries

    def get(self, node_id: Optional[str]) -> Optional[TreeIndexEntry]:
        if node_id is None:
            return None
        return self._entries.get(node_id)

    def ids(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TreeIndex(size={len(self._entries)})"


def build_tree_index(
    roots: Sequence[Any],
    get_id: Callable[[Any], str],
    get_children: Callable[[Any], Optional[Sequence[Any]]],
) -> TreeIndex:
    """Walk the forest depth-first and index every node by id."""
    entries: Dict[str, TreeIndexEntry] = {}

    def walk(items: Sequence[Any], parent_id: Optional[str], depth: int) -> None:
        for position, node in enumerate(items):
            node_id = get_id(node)
            if node_id in entries:
                continue
            entries[node_id] = TreeIndexEntry(node, parent_id, depth, position)
            children = get_children(node)
            if children:
                walk(children, node_id, depth + 1)

    walk(roots or (), None, 0)
    return TreeIndex(entries)
