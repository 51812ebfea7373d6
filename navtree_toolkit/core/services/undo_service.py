from __future__ import annotations

"""Undo/redo snapshot management for a :class:`NavTree`.

This service is UI-agnostic and performs pure in-memory history tracking of
the navigation forest. Each snapshot is a deep copy of the forest plus the
expanded group ids, and can be restored into the same tree.

Design principles
-----------------
- No UI imports and no I/O (filesystem/console).
- Snapshots are never handed out; restores copy them again so later edits
  cannot leak into history.
- Redo stack is cleared on every new snapshot push (standard undo/redo behavior).
- Memory usage controlled by a max_history policy (trim oldest).
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from navtree_toolkit.core.tree.navigator import NavTree

__all__ = ["UndoService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    """Immutable in-memory snapshot of a tree.

    Attributes
    ----------
    data :
        Deep copy of the root-level nodes.
    expanded_group_ids :
        Groups expanded when the snapshot was taken.
    """

    data: Tuple[Any, ...]
    expanded_group_ids: Tuple[str, ...]


class UndoService:
    """Manage undo/redo stacks for :class:`NavTree`.

    Parameters
    ----------
    max_history : int, default=50
        Maximum number of undo snapshots to keep. Oldest entries are discarded
        when the capacity is exceeded. Coerced to at least 1.

    Notes
    -----
    Callers push a snapshot BEFORE a mutation (baseline) and AFTER it (post).
    Undo then restores the baseline and moves the post snapshot to the redo
    stack.

    Examples
    --------
    >>> tree = NavTree(load_nav_data(nav))
    >>> svc = UndoService(max_history=10)
    >>> svc.push_snapshot(tree)
    >>> # ... reorder ...
    >>> svc.push_snapshot(tree)
    >>> svc.undo(tree)
    True
    """

    def __init__(self, max_history: int = 50) -> None:
        self._max_history: int = max(1, int(max_history))
        self._undo_stack: List[_Snapshot] = []
        self._redo_stack: List[_Snapshot] = []

    # --------------------------------------------------------------------- API

    def push_snapshot(self, tree: NavTree) -> None:
        """Capture the tree and push it onto the undo stack; clears redo."""
        snap = self._create_snapshot(tree)
        if snap is None:
            return
        self._undo_stack.append(snap)
        self._redo_stack.clear()
        self._trim(self._undo_stack)

    def undo(self, tree: NavTree) -> bool:
        """Restore the baseline preceding the latest snapshot.

        Given undo_stack = [..., baseline, post] and tree == post, ``post``
        moves to the redo stack and ``baseline`` is restored.
        """
        if len(self._undo_stack) < 2:
            return False
        post_snap = self._undo_stack.pop()
        self._restore_snapshot_into_tree(tree, self._undo_stack[-1])
        self._redo_stack.append(post_snap)
        self._trim(self._redo_stack)
        return True

    def redo(self, tree: NavTree) -> bool:
        """Re-apply the most recently undone state."""
        if not self._redo_stack:
            return False
        post_snap = self._redo_stack.pop()
        self._restore_snapshot_into_tree(tree, post_snap)
        self._undo_stack.append(post_snap)
        self._trim(self._undo_stack)
        return True

    def can_undo(self) -> bool:
        return len(self._undo_stack) > 1

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def discard_last(self) -> None:
        """Drop the newest undo snapshot (a baseline whose edit never happened)."""
        if self._undo_stack:
            self._undo_stack.pop()

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()

    # --------------------------------------------------------------- Internals

    def _trim(self, stack: List[_Snapshot]) -> None:
        overflow = len(stack) - self._max_history
        if overflow > 0:
            del stack[0:overflow]

    def _create_snapshot(self, tree: NavTree) -> Optional[_Snapshot]:
        try:
            data = tuple(copy.deepcopy(tree.data))
        except (copy.Error, TypeError) as exc:
            logger.warning("Snapshot skipped: forest cannot be copied (%s)", exc)
            return None
        return _Snapshot(data=data, expanded_group_ids=tuple(tree.expanded_group_ids()))

    def _restore_snapshot_into_tree(self, tree: NavTree, snap: _Snapshot) -> None:
        tree.set_data(copy.deepcopy(list(snap.data)))
        for group_id in tree.expanded_group_ids():
            tree.set_group_expanded(group_id, False)
        tree.load_expanded_groups(snap.expanded_group_ids)
