from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from navtree_toolkit.core.dnd.constraints import compute_effective_parent_id, is_valid_drop
from navtree_toolkit.core.dnd.geometry import LayoutSurface
from navtree_toolkit.core.models import ReorderEvent
from navtree_toolkit.core.models.settings import SidebarSettings
from navtree_toolkit.core.persistence import PersistedState, load_persisted_state, persist_state
from navtree_toolkit.core.scheduling import Scheduler
from navtree_toolkit.core.services.drag_session import DragSession
from navtree_toolkit.core.services.undo_service import UndoService
from navtree_toolkit.core.tree.navigator import NavTree

__all__ = ["NavigationController", "OperationResult"]


@dataclass
class OperationResult:
    """Result of a controller operation.

    Attributes
    ----------
    success
        Whether the operation completed.
    message
        Human-readable summary suitable for a status bar.
    details
        Optional structured details for diagnostics or caller logic.
    """

    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class NavigationController:
    """Coordinate a navigation tree, its drag session, undo history and persistence.

    The session runs in uncontrolled mode: committed drops are applied to
    ``tree`` internally and every committed move is recorded for undo.

    Parameters
    ----------
    tree : NavTree
        The forest being displayed and edited.
    scheduler : Scheduler
        Timer source handed to the drag session.
    settings : SidebarSettings, optional
        Shared sidebar settings; defaults when omitted.
    storage_dir : str or Path, optional
        Directory for persisted expansion/collapse state. Without it
        nothing is persisted.
    surface : LayoutSurface, optional
        Rendering collaborator forwarded to the drag session.
    undo_service : UndoService, optional
        History store; a fresh one is created when omitted.
    can_reorder : callable, optional
        Application veto for drops; returning ``False`` cancels the drop.
    on_change : callable, optional
        Called with no arguments whenever the tree data or expansion changed
        (drop, undo, redo, toggle) so the view can re-render.

    Notes
    -----
    - History uses baseline/post snapshots. Right before each committed move
      the newest snapshot is refreshed so it carries the current expansion
      state; the post-move snapshot is pushed once the move is applied.
    - Routine failures return ``OperationResult`` with ``success=False``.
    - No Tkinter code appears in this module.
    """

    def __init__(
        self,
        tree: NavTree,
        scheduler: Scheduler,
        settings: Optional[SidebarSettings] = None,
        storage_dir: Optional[Union[str, Path]] = None,
        surface: Optional[LayoutSurface] = None,
        undo_service: Optional[UndoService] = None,
        can_reorder: Optional[Callable[[ReorderEvent], Optional[bool]]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        # Dependencies
        self.tree: NavTree = tree
        self.settings: SidebarSettings = settings or SidebarSettings()
        self.storage_dir: Optional[Path] = Path(storage_dir) if storage_dir is not None else None
        self.undo_service: UndoService = undo_service or UndoService()
        self.can_reorder = can_reorder
        self.on_change = on_change

        # Transient UI-related state
        self.collapsed: bool = False
        self.last_event: Optional[ReorderEvent] = None

        self.session = DragSession(
            tree,
            scheduler=scheduler,
            settings=self.settings,
            surface=surface,
            on_reorder=self._after_reorder,
            on_before_reorder=self._before_reorder,
            reorder_mode="uncontrolled",
            animated=self.settings.animation_duration > 0,
            on_group_toggle=self._group_toggled,
        )
        self.undo_service.push_snapshot(self.tree)

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _before_reorder(self, event: ReorderEvent) -> bool:
        if self.can_reorder is not None and self.can_reorder(event) is False:
            return False
        self.undo_service.discard_last()
        self.undo_service.push_snapshot(self.tree)
        return True

    def _after_reorder(self, event: ReorderEvent) -> None:
        self.last_event = event
        self.undo_service.push_snapshot(self.tree)
        self._notify()

    def _group_toggled(self, group_id: str, expanded: bool) -> None:
        self.save_state()
        self._notify()

    # ---------------------------------------------------------------------------------
    # Data and moves
    # ---------------------------------------------------------------------------------

    def set_data(self, data: Sequence[Any]) -> None:
        """Replace the forest and restart history from it."""
        if self.session.is_active:
            self.session.cancel_drag()
        self.tree.set_data(data)
        self.undo_service.clear()
        self.undo_service.push_snapshot(self.tree)
        self._notify()

    def move_item(self, item_id: str, to_parent_id: Optional[str], to_index: int) -> OperationResult:
        """Move ``item_id`` under ``to_parent_id`` at ``to_index`` outside of a drag.

        The move goes through the same veto, apply and history path as a drop.
        """
        if self.session.is_active:
            return OperationResult(False, "A drag is in progress")
        located = self.tree.find_item_by_id(item_id)
        if located is None:
            return OperationResult(False, f"Unknown item '{item_id}'")

        schema = self.tree.schema
        kind = self.tree.get_kind(located.node)
        if to_parent_id is not None:
            target = self.tree.find_item_by_id(to_parent_id)
            if target is None or not schema.is_container(self.tree.get_kind(target.node)):
                return OperationResult(False, f"'{to_parent_id}' cannot hold items")
            rules = dict(
                dragged_kind=kind,
                target_kind=self.tree.get_kind(target.node),
                target_id=to_parent_id,
                target_parent_id=target.parent_id,
                position="inside",
                container_kinds=schema.container_kinds,
                root_kinds=schema.root_kinds,
            )
            # Same rules as a drop "inside" the target; root kinds never nest.
            if compute_effective_parent_id(**rules) != to_parent_id:
                return OperationResult(False, f"'{item_id}' must stay at the top level")
            if not is_valid_drop(dragged_id=item_id, is_descendant=self.tree.is_descendant_of, **rules):
                if schema.is_root_locked(kind):
                    return OperationResult(False, f"'{item_id}' must stay at the top level")
                return OperationResult(False, "An item cannot be moved into itself")

        event = ReorderEvent(
            item=located.node,
            from_parent_id=located.parent_id,
            to_parent_id=to_parent_id,
            to_index=max(0, int(to_index)),
            from_index=located.index,
            depth=self.tree.calculate_depth(to_parent_id),
        )
        if not self.session.dispatch_reorder(event):
            return OperationResult(False, "Move rejected")
        return OperationResult(True, f"Moved '{item_id}'", {"event": event})

    # ---------------------------------------------------------------------------------
    # History
    # ---------------------------------------------------------------------------------

    def can_undo(self) -> bool:
        return self.undo_service.can_undo()

    def can_redo(self) -> bool:
        return self.undo_service.can_redo()

    def undo(self) -> OperationResult:
        """Restore the tree as it was before the latest move."""
        if self.session.is_active:
            return OperationResult(False, "A drag is in progress")
        if not self.undo_service.undo(self.tree):
            return OperationResult(False, "Nothing to undo")
        self._notify()
        return OperationResult(True, "Undo")

    def redo(self) -> OperationResult:
        if self.session.is_active:
            return OperationResult(False, "A drag is in progress")
        if not self.undo_service.redo(self.tree):
            return OperationResult(False, "Nothing to redo")
        self._notify()
        return OperationResult(True, "Redo")

    # ---------------------------------------------------------------------------------
    # Expansion and collapse
    # ---------------------------------------------------------------------------------

    def toggle_group(self, group_id: str) -> bool:
        """Flip a group's expanded flag; returns the new value."""
        expanded = self.tree.toggle_group(group_id)
        self._group_toggled(group_id, expanded)
        return expanded

    def expand_path_to(self, item_id: str) -> List[str]:
        """Open every group above ``item_id``; returns the groups that were opened."""
        opened = self.tree.expand_path_to(item_id)
        if opened:
            self.save_state()
            self._notify()
        return opened

    def toggle_collapsed(self) -> bool:
        self.collapsed = not self.collapsed
        self.save_state()
        self._notify()
        return self.collapsed

    # ---------------------------------------------------------------------------------
    # Persistence
    # ---------------------------------------------------------------------------------

    def load_state(self) -> PersistedState:
        """Apply the persisted collapsed flag and expanded groups, if any."""
        if self.storage_dir is None:
            return PersistedState()
        state = load_persisted_state(self.settings, self.storage_dir)
        if state.collapsed is not None:
            self.collapsed = state.collapsed
        self.tree.load_expanded_groups(state.expanded_group_ids)
        return state

    def save_state(self) -> bool:
        if self.storage_dir is None:
            return False
        expanded = {group_id: True for group_id in self.tree.expanded_group_ids()}
        return persist_state(self.settings, self.storage_dir, self.collapsed, expanded)
