from __future__ import annotations

"""Drag session: the single state machine behind every drag modality.

One :class:`DragSession` exists per rendered tree and is passed explicitly
to the native, pointer and keyboard handler modules
(:mod:`navtree_toolkit.core.dnd.native`, :mod:`~navtree_toolkit.core.dnd.pointer`,
:mod:`~navtree_toolkit.core.dnd.keyboard`). Those modules translate input
into session commands; the session owns the drop target, the live preview,
the commit path and every timer or frame callback involved.

Design principles
-----------------
- At most one session is active. Starting another while one is active is
  refused, except that a native session which was only pre-armed on mouse
  down is released first.
- Ending a session (commit or cancel) synchronously clears every piece of
  state and every pending timer so nothing from an old session can fire
  into a new one.
- Routine invalid actions (unknown ids, illegal targets) are no-ops. Errors
  raised by caller callbacks propagate, after the session has been cleared.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence

from navtree_toolkit.core.dnd.auto_scroll import AutoScrollController
from navtree_toolkit.core.dnd.constraints import is_valid_drop
from navtree_toolkit.core.dnd.drop_position import calculate_drop_position_from_rect
from navtree_toolkit.core.dnd.dropzones import (
    DropZoneRect,
    cache_drop_zone_rects,
    find_drop_zone_at_point,
    find_nearest_drop_zone,
)
from navtree_toolkit.core.dnd.flip import FlipController
from navtree_toolkit.core.dnd.geometry import LayoutSurface, Rect
from navtree_toolkit.core.dnd.hover_expand import HoverExpandController
from navtree_toolkit.core.dnd.preview import (
    calculate_insert_position,
    compute_preview_insert,
    get_items_with_preview,
    is_preview_item,
)
from navtree_toolkit.core.dnd.reorder import (
    apply_internal_reorder,
    can_reorder_internally,
    get_effective_reorder_mode,
)
from navtree_toolkit.core.models import (
    DraggedItem,
    DropPosition,
    PreviewInsert,
    ReorderEvent,
)
from navtree_toolkit.core.models.drag_state import (
    DragPhase,
    KeyboardDragState,
    PointerDragState,
)
from navtree_toolkit.core.models.settings import SidebarSettings, format_announcement
from navtree_toolkit.core.scheduling import DeferredFrame, Scheduler
from navtree_toolkit.core.tree.navigator import NavTree

__all__ = ["DragSession", "MODALITIES"]

logger = logging.getLogger(__name__)

MODALITIES = ("native", "pointer", "keyboard")

ReorderCallback = Callable[[ReorderEvent], None]
BeforeReorderCallback = Callable[[ReorderEvent], Optional[bool]]
GroupToggleCallback = Callable[[str, bool], None]
PhaseCallback = Callable[[DragPhase, DragPhase], None]


class DragSession:
    """Explicit drag-and-drop session handle for one tree.

    Parameters
    ----------
    tree : NavTree
        The forest being reordered. Internal reorders replace its data.
    scheduler : Scheduler
        Timer and frame source.
    settings : SidebarSettings, optional
        Timing, shortcuts and announcement templates; defaults when omitted.
    surface : LayoutSurface, optional
        Rendering collaborator for rects, scrolling and transforms. Without
        one, pointer hit testing, auto-scroll and FLIP are inert.
    on_reorder : callable, optional
        Receives the :class:`ReorderEvent` of every committed drop.
    on_before_reorder : callable, optional
        Veto hook; returning ``False`` cancels the drop.
    reorder_mode : {"auto", "controlled", "uncontrolled"}
        ``auto`` reorders internally only when no ``on_reorder`` is given.
    live_preview : bool
        Show the tree with the move applied while dragging.
    animated : bool
        Run FLIP animations on preview changes and drops.
    enabled : bool
        When False every start command is ignored.
    on_group_toggle : callable, optional
        Notified when a drag expands a group (hover or keyboard move-in).
    on_phase_change : callable, optional
        Receives ``(old, new)`` on every phase transition.
    """

    def __init__(
        self,
        tree: NavTree,
        *,
        scheduler: Scheduler,
        settings: Optional[SidebarSettings] = None,
        surface: Optional[LayoutSurface] = None,
        on_reorder: Optional[ReorderCallback] = None,
        on_before_reorder: Optional[BeforeReorderCallback] = None,
        reorder_mode: str = "auto",
        live_preview: bool = True,
        animated: bool = True,
        enabled: bool = True,
        on_group_toggle: Optional[GroupToggleCallback] = None,
        on_phase_change: Optional[PhaseCallback] = None,
    ) -> None:
        # Fail fast on a bad mode.
        get_effective_reorder_mode(reorder_mode, on_reorder is not None)

        self.tree = tree
        self.scheduler = scheduler
        self.settings = settings or SidebarSettings()
        self.surface = surface
        self.on_reorder = on_reorder
        self.on_before_reorder = on_before_reorder
        self.reorder_mode = reorder_mode
        self.live_preview = live_preview
        self.animated = animated
        self.enabled = enabled
        self.on_group_toggle = on_group_toggle
        self.on_phase_change = on_phase_change

        self.phase = DragPhase.IDLE
        self.modality: Optional[str] = None
        self.dragged: Optional[DraggedItem] = None
        self.drop_target_id: Optional[str] = None
        self.drop_position: Optional[DropPosition] = None
        self.preview_insert: Optional[PreviewInsert] = None
        self.keyboard_state: Optional[KeyboardDragState] = None
        self.pointer_state: Optional[PointerDragState] = None
        self.announcement = ""

        self.drop_zone_rects: List[DropZoneRect] = []
        self.last_rect_cache_time: float = float("-inf")

        self.auto_scroll = AutoScrollController(scheduler)
        self.hover_expand = HoverExpandController(scheduler)
        self.flip = FlipController(scheduler)

        self._preview_timer: Optional[Any] = None
        self._drag_end_timer: Optional[Any] = None
        self._reflow: Optional[DeferredFrame] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.phase is not DragPhase.IDLE

    def transition(self, phase: DragPhase) -> None:
        if phase is self.phase:
            return
        old = self.phase
        self.phase = phase
        logger.debug("Drag phase %s -> %s (%s)", old.value, phase.value, self.modality)
        if self.on_phase_change is not None:
            self.on_phase_change(old, phase)

    def acquire(self, modality: str, phase: DragPhase) -> bool:
        """Open a session for ``modality``; False when disabled or another session is active."""
        if not self.enabled:
            return False
        if self.is_active:
            if self.phase is DragPhase.ARMED and self.modality == "native":
                self.release_arm()
            else:
                logger.debug("Refusing %s drag: %s session active", modality, self.modality)
                return False
        self._cancel_timers()
        self._cancel_reflow()
        self.modality = modality
        self.transition(phase)
        return True

    def start_drag(self, node: Any, parent_id: Optional[str], index: int) -> None:
        """Record the dragged node and enter ``DRAGGING``."""
        self.dragged = DraggedItem(self.tree.get_id(node), node, parent_id, index)
        if self.modality is None:
            self.modality = "native"
        self.transition(DragPhase.DRAGGING)

    def release_arm(self) -> None:
        """Drop a native pre-arm that never became a drag."""
        if self.phase is DragPhase.ARMED:
            self.end_drag(animate=False)

    def end_drag(self, animate: bool = False) -> None:
        """Clear all session state; animate back when a preview had been shown."""
        self._cancel_timers()
        if self.pointer_state is not None and self.pointer_state.long_press_timer is not None:
            self.scheduler.cancel(self.pointer_state.long_press_timer)

        should_animate = animate and self.animated and self.preview_insert is not None
        if should_animate:
            self.capture_item_positions()

        self.dragged = None
        self.drop_target_id = None
        self.drop_position = None
        self.preview_insert = None
        self.keyboard_state = None
        self.pointer_state = None
        self.drop_zone_rects = []
        self.last_rect_cache_time = float("-inf")
        self.hover_expand.cancel()
        self.auto_scroll.stop()
        self.transition(DragPhase.IDLE)
        self.modality = None

        if should_animate:
            self._schedule_reflow(frames=1)

    def _cancel_timers(self) -> None:
        if self._preview_timer is not None:
            self.scheduler.cancel(self._preview_timer)
            self._preview_timer = None
        if self._drag_end_timer is not None:
            self.scheduler.cancel(self._drag_end_timer)
            self._drag_end_timer = None

    def cancel_drag(self) -> None:
        if not self.is_active:
            return
        self.transition(DragPhase.CANCELLING)
        self.end_drag(animate=True)

    def set_surface(self, surface: Optional[LayoutSurface]) -> None:
        self.surface = surface

    # ------------------------------------------------------------------
    # Drop target
    # ------------------------------------------------------------------

    def is_valid_target(self, target_id: str, position: DropPosition) -> bool:
        target = self.tree.find_item_by_id(target_id)
        if target is None:
            return False
        if self.dragged is None:
            return True
        schema = self.tree.schema
        return is_valid_drop(
            dragged_id=self.dragged.id,
            dragged_kind=schema.get_kind(self.dragged.node),
            target_id=target_id,
            target_kind=schema.get_kind(target.node),
            target_parent_id=target.parent_id,
            position=position,
            is_descendant=self.tree.is_descendant_of,
            container_kinds=schema.container_kinds,
            root_kinds=schema.root_kinds,
        )

    def set_drop_target(
        self,
        node: Any,
        parent_id: Optional[str] = None,
        client_y: Optional[float] = None,
        rect: Optional[Rect] = None,
    ) -> bool:
        """Point the drag at ``node``; ``None`` clears the target.

        The position comes from ``client_y`` within ``rect`` (with hysteresis
        against the position already shown for this node) and defaults to
        ``inside`` without geometry. An illegal target is ignored and the
        previous target kept. Returns whether the target was accepted.
        """
        if node is None:
            self.drop_target_id = None
            self.drop_position = None
            self.hover_expand.cancel()
            return False

        schema = self.tree.schema
        target_id = schema.get_id(node)
        target_kind = schema.get_kind(node)
        if rect is None and client_y is not None and self.surface is not None:
            rect = self.surface.get_item_rect(target_id)
        if rect is not None and client_y is not None:
            current = self.drop_position if self.drop_target_id == target_id else None
            position = calculate_drop_position_from_rect(
                client_y, rect, schema.is_container(target_kind), current
            )
        else:
            position = "inside"

        if not self.is_valid_target(target_id, position):
            return False

        if (
            schema.is_group(target_kind)
            and position == "inside"
            and not self.tree.is_group_expanded(target_id)
        ):
            self.start_hover_expand(target_id)
        else:
            self.hover_expand.cancel()

        if self.drop_target_id != target_id or self.drop_position != position:
            self.drop_target_id = target_id
            self.drop_position = position
            self.schedule_preview_update()
        return True

    # ------------------------------------------------------------------
    # Live preview
    # ------------------------------------------------------------------

    def calculate_insert_position(
        self, target_id: Optional[str], position: Optional[DropPosition]
    ) -> Optional[PreviewInsert]:
        return calculate_insert_position(self.dragged, target_id, position, self.tree)

    def update_preview_insert(self) -> None:
        next_preview = compute_preview_insert(
            self.live_preview, self.dragged, self.drop_target_id, self.drop_position, self.tree
        )
        if next_preview is None:
            self.preview_insert = None
            return
        # Preview changes wait while a reflow is still settling.
        if self.flip.is_animating or next_preview == self.preview_insert:
            return
        if self.animated:
            self.capture_item_positions()
        self.preview_insert = next_preview
        if self.animated:
            self._schedule_reflow(frames=1)

    def schedule_preview_update(self) -> None:
        if self._preview_timer is not None:
            self.scheduler.cancel(self._preview_timer)
        self._preview_timer = self.scheduler.call_later(
            self.settings.dnd.preview_debounce, self._run_preview_update
        )

    def _run_preview_update(self) -> None:
        self._preview_timer = None
        self.update_preview_insert()

    def flush_preview_debounce(self) -> None:
        if self._preview_timer is not None:
            self.scheduler.cancel(self._preview_timer)
            self._preview_timer = None
            self.update_preview_insert()

    def is_preview_item(self, item_id: str) -> bool:
        return is_preview_item(self.live_preview, self.dragged, self.preview_insert, item_id)

    def get_items_with_preview(self, items: Sequence[Any], parent_id: Optional[str]) -> List[Any]:
        return get_items_with_preview(
            items, parent_id, self.dragged, self.preview_insert, self.tree.get_id
        )

    def get_children_with_preview(self, parent_id: Optional[str]) -> List[Any]:
        """Rendered children of ``parent_id`` (root for ``None``) with the preview applied."""
        return self.get_items_with_preview(self.tree.get_siblings_at_level(parent_id), parent_id)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    @property
    def effective_reorder_mode(self) -> str:
        return get_effective_reorder_mode(self.reorder_mode, self.on_reorder is not None)

    def can_reorder_internally(self) -> bool:
        return can_reorder_internally(self.tree.schema)

    def can_commit(self) -> bool:
        """False when neither an external handler nor internal reordering can take the move."""
        if self.on_reorder is not None:
            return True
        return self.effective_reorder_mode == "uncontrolled" and self.can_reorder_internally()

    def apply_internal_reorder(self, event: ReorderEvent) -> bool:
        if not self.can_reorder_internally():
            return False
        self.tree.set_data(apply_internal_reorder(self.tree.data, event, self.tree.schema))
        return True

    def dispatch_reorder(self, event: ReorderEvent) -> bool:
        """Run the veto hook, the internal reorder and ``on_reorder``; False when vetoed."""
        if self.on_before_reorder is not None and self.on_before_reorder(event) is False:
            logger.info("Reorder of %s vetoed", self.tree.get_id(event.item))
            return False
        if self.effective_reorder_mode == "uncontrolled" and self.can_reorder_internally():
            self.apply_internal_reorder(event)
        if self.on_reorder is not None:
            self.on_reorder(event)
        logger.info(
            "Reorder OK: %s %s[%d] -> %s[%d]",
            self.tree.get_id(event.item),
            event.from_parent_id or "<root>",
            event.from_index,
            event.to_parent_id or "<root>",
            event.to_index,
        )
        return True

    def handle_drop(self) -> Optional[ReorderEvent]:
        """Commit the current drag at the recorded target; return the applied event."""
        if self.dragged is None:
            return None
        if not self.can_commit():
            logger.warning("Drop ignored: no reorder handler and no internal reordering")
            self.cancel_drag()
            return None

        self.transition(DragPhase.COMMITTING)
        animate_back = False
        try:
            if self.live_preview:
                self.flush_preview_debounce()
            position = self.drop_position or "inside"

            if self.live_preview and self.preview_insert is not None:
                insert = self.preview_insert
            else:
                if self.drop_target_id is None or self.drop_position is None:
                    return None
                if not self.is_valid_target(self.drop_target_id, self.drop_position):
                    animate_back = True
                    return None
                insert = self.calculate_insert_position(self.drop_target_id, self.drop_position)
            if insert is None:
                return None

            dragged = self.dragged
            event = ReorderEvent(
                item=dragged.node,
                from_parent_id=dragged.origin_parent_id,
                to_parent_id=insert.parent_id,
                to_index=insert.index,
                from_index=dragged.origin_index,
                depth=self.tree.calculate_depth(insert.parent_id),
                position=position,
            )

            if not self.live_preview:
                self.capture_item_positions()
            if not self.dispatch_reorder(event):
                animate_back = True
                return None
            if not self.live_preview:
                self._schedule_reflow(frames=1)
            return event
        finally:
            self.end_drag(animate=animate_back)

    # ------------------------------------------------------------------
    # Hit testing, auto-scroll, hover expand
    # ------------------------------------------------------------------

    def cache_drop_zone_rects(self) -> None:
        exclude = self.pointer_state.id if self.pointer_state is not None else None
        if exclude is None and self.dragged is not None:
            exclude = self.dragged.id
        self.drop_zone_rects = cache_drop_zone_rects(self.surface, exclude)
        self.last_rect_cache_time = self.scheduler.now()

    def refresh_drop_zone_rects(self) -> None:
        """Re-cache rects when the cache is older than ``rect_cache_interval``."""
        if self.scheduler.now() - self.last_rect_cache_time > self.settings.dnd.rect_cache_interval:
            self.cache_drop_zone_rects()

    def find_drop_zone_at_point(self, x: float, y: float) -> Optional[DropZoneRect]:
        return find_drop_zone_at_point(self.drop_zone_rects, x, y)

    def find_nearest_drop_zone(self, y: float) -> Optional[DropZoneRect]:
        return find_nearest_drop_zone(self.drop_zone_rects, y)

    def handle_drag_auto_scroll(self, client_y: float) -> None:
        if self.surface is None:
            return
        self.auto_scroll.handle_drag(
            client_y,
            self.surface.get_container_rect(),
            self.settings.dnd.auto_scroll_threshold,
            self.settings.dnd.auto_scroll_max_speed,
            self.surface.scroll_by,
        )

    def start_hover_expand(self, group_id: str) -> None:
        self.hover_expand.start(
            group_id,
            self.settings.dnd.hover_expand_delay,
            self.tree.is_group_expanded,
            self.expand_group,
        )

    def expand_group(self, group_id: str) -> None:
        """Expand ``group_id`` on behalf of a drag, bypassing any toggle veto."""
        self.tree.set_group_expanded(group_id, True)
        if self.on_group_toggle is not None:
            self.on_group_toggle(group_id, True)
        self.announce("group_expanded")

    # ------------------------------------------------------------------
    # Reflow animation and announcements
    # ------------------------------------------------------------------

    def capture_item_positions(self) -> None:
        self.flip.capture(self.surface)

    def animate_item_positions(self) -> None:
        self.flip.animate(self.surface, self.animated, self.settings.animation_duration)

    def _schedule_reflow(self, frames: int) -> None:
        self._cancel_reflow()
        self._reflow = DeferredFrame(self.scheduler, self._run_reflow, frames)

    def schedule_reflow_after_layout(self) -> None:
        self._schedule_reflow(frames=2)

    def _run_reflow(self) -> None:
        self._reflow = None
        self.animate_item_positions()

    def _cancel_reflow(self) -> None:
        if self._reflow is not None:
            self._reflow.cancel()
            self._reflow = None

    @property
    def reflow_pending(self) -> bool:
        return self._reflow is not None and self._reflow.pending

    def announce(self, key: str, **values: Any) -> str:
        template = self.settings.announcements.get(key, "")
        self.announcement = format_announcement(template, values)
        logger.debug("Announce: %s", self.announcement)
        return self.announcement

    # ------------------------------------------------------------------
    # Deferred native drag end
    # ------------------------------------------------------------------

    def defer_drag_end(self, callback: Callable[[], None]) -> None:
        if self._drag_end_timer is not None:
            self.scheduler.cancel(self._drag_end_timer)

        def run() -> None:
            self._drag_end_timer = None
            callback()

        self._drag_end_timer = self.scheduler.call_later(0, run)

    def __repr__(self) -> str:
        dragged = self.dragged.id if self.dragged is not None else None
        return f"DragSession(phase={self.phase.value}, modality={self.modality}, dragged={dragged})"
