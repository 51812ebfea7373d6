from __future__ import annotations

"""Drop legality rules.

Pure predicates: no tree access beyond the ``is_descendant`` callback, no
logging, no side effects.
"""

from typing import AbstractSet, Callable, Optional

from navtree_toolkit.core.models import DropPosition

__all__ = ["compute_effective_parent_id", "is_valid_drop"]

DEFAULT_CONTAINER_KINDS = frozenset({"group", "section"})
DEFAULT_ROOT_KINDS = frozenset({"section"})


def compute_effective_parent_id(
    *,
    dragged_kind: Optional[str],
    target_kind: Optional[str],
    target_id: str,
    target_parent_id: Optional[str],
    position: DropPosition,
    container_kinds: AbstractSet[str] = DEFAULT_CONTAINER_KINDS,
    root_kinds: AbstractSet[str] = DEFAULT_ROOT_KINDS,
) -> Optional[str]:
    """Parent the dragged node would end up under for this drop."""
    # Root containers never nest into each other by adjacency.
    if dragged_kind in root_kinds and target_kind in root_kinds:
        return None
    if position == "inside" and target_kind in container_kinds:
        return target_id
    return target_parent_id


def is_valid_drop(
    *,
    dragged_id: Optional[str],
    dragged_kind: Optional[str],
    target_id: str,
    target_kind: Optional[str],
    target_parent_id: Optional[str],
    position: DropPosition,
    is_descendant: Callable[[str, str], bool],
    container_kinds: AbstractSet[str] = DEFAULT_CONTAINER_KINDS,
    root_kinds: AbstractSet[str] = DEFAULT_ROOT_KINDS,
) -> bool:
    """Return True when dropping the dragged node at ``position`` of ``target_id`` is legal.

    ``is_descendant(a, b)`` must be true when ``a`` is ``b`` or lies under it.
    Without a dragged node every target is considered valid.
    """
    if dragged_id is None or dragged_kind is None:
        return True

    effective_parent_id = compute_effective_parent_id(
        dragged_kind=dragged_kind,
        target_kind=target_kind,
        target_id=target_id,
        target_parent_id=target_parent_id,
        position=position,
        container_kinds=container_kinds,
        root_kinds=root_kinds,
    )
    if dragged_kind in root_kinds and effective_parent_id is not None:
        return False
    if is_descendant(target_id, dragged_id):
        return False
    return True
