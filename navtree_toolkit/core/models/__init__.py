from __future__ import annotations

"""Shared data structures used across the navtree core.

This package exposes dataclasses and value objects used by the tree, drag
and drop and service layers. It is intentionally free of UI / I/O code so
that the contained objects can be reused in any context (unit-tests, CLI,
GUI, etc.).
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, FrozenSet, List, Literal, Optional, Sequence

__all__ = [
    "DropPosition",
    "NavNode",
    "TreeSchema",
    "DEFAULT_SCHEMA",
    "LocatedItem",
    "DraggedItem",
    "PreviewInsert",
    "ReorderEvent",
    "NavtreeError",
]

DropPosition = Literal["before", "after", "inside"]


class NavtreeError(Exception):
    """Base exception for programmer errors (bad settings, malformed input).

    Routine invalid actions (unknown ids, illegal drops) never raise; they
    return ``None``/``False`` instead.
    """


@dataclass
class NavNode:
    """Default node shape for navigation trees.

    Attributes
    ----------
    id
        Stable unique identifier.
    kind
        One of the kinds declared by the schema, ``section``/``group``/``page``
        by default.
    label
        Display text.
    href
        Link target for pages (optional for groups).
    children
        Ordered child nodes; empty for leaves.
    """

    id: str
    kind: str
    label: str = ""
    href: Optional[str] = None
    children: List["NavNode"] = field(default_factory=list)
    default_expanded: bool = False
    collapsible: bool = True
    meta: Dict[str, Any] = field(default_factory=dict)

    def is_leaf(self) -> bool:
        return not self.children


def _nav_children(node: NavNode) -> List[NavNode]:
    return node.children


def _nav_set_children(node: NavNode, children: Sequence[NavNode]) -> NavNode:
    return replace(node, children=list(children))


@dataclass(frozen=True)
class TreeSchema:
    """Accessor set binding the generic engine to a concrete tree shape.

    ``get_id``, ``get_kind`` and ``get_children`` are mandatory. Internal
    reordering additionally needs ``set_children``, which must return the
    node carrying the new child list (a new object or the same one).
    """

    get_id: Callable[[Any], str]
    get_kind: Callable[[Any], str]
    get_children: Callable[[Any], Optional[Sequence[Any]]]
    set_children: Optional[Callable[[Any, List[Any]], Any]] = None
    get_label: Callable[[Any], str] = lambda node: ""
    get_href: Callable[[Any], Optional[str]] = lambda node: None
    get_default_expanded: Callable[[Any], bool] = lambda node: False
    container_kinds: FrozenSet[str] = frozenset({"group", "section"})
    root_kinds: FrozenSet[str] = frozenset({"section"})
    group_kinds: FrozenSet[str] = frozenset({"group"})

    def children_of(self, node: Any) -> List[Any]:
        """Return the node's children as a list, never ``None``."""
        children = self.get_children(node)
        return list(children) if children else []

    def is_container(self, kind: Optional[str]) -> bool:
        return kind in self.container_kinds

    def is_root_locked(self, kind: Optional[str]) -> bool:
        return kind in self.root_kinds

    def is_group(self, kind: Optional[str]) -> bool:
        return kind in self.group_kinds

    @property
    def supports_internal_reorder(self) -> bool:
        return self.set_children is not None


DEFAULT_SCHEMA = TreeSchema(
    get_id=lambda node: node.id,
    get_kind=lambda node: node.kind,
    get_children=_nav_children,
    set_children=_nav_set_children,
    get_label=lambda node: node.label,
    get_href=lambda node: node.href,
    get_default_expanded=lambda node: node.default_expanded,
)


@dataclass(frozen=True)
class LocatedItem:
    """A node together with its current location in the forest."""

    node: Any
    parent_id: Optional[str]
    index: int


@dataclass(frozen=True)
class DraggedItem:
    """The node carried by the active drag session and where it came from."""

    id: str
    node: Any
    origin_parent_id: Optional[str]
    origin_index: int


@dataclass(frozen=True)
class PreviewInsert:
    """Location at which the dragged node would land if committed now."""

    parent_id: Optional[str]
    index: int


@dataclass(frozen=True)
class ReorderEvent:
    """A committed move, reported once per drop.

    ``depth`` is the depth of the destination level (0 = root) and
    ``position`` the drop position that produced the move.
    """

    item: Any
    from_parent_id: Optional[str]
    to_parent_id: Optional[str]
    to_index: int
    from_index: int = 0
    depth: int = 0
    position: DropPosition = "before"

    def inverted(self) -> "ReorderEvent":
        """Return the move that puts the item back where it came from."""
        return ReorderEvent(
            item=self.item,
            from_parent_id=self.to_parent_id,
            to_parent_id=self.from_parent_id,
            to_index=self.from_index,
            from_index=self.to_index,
            depth=self.depth,
            position=self.position,
        )
