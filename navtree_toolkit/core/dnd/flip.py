from __future__ import annotations

"""First-Last-Invert-Play reflow animation.

:meth:`FlipController.capture` records every rendered item's rect before a
layout change; :meth:`FlipController.animate` runs once the new layout is
in place and asks the surface to slide each moved item from its old
position back to rest.
"""

import logging
from typing import Any, Dict, Optional

from navtree_toolkit.core.dnd.geometry import LayoutSurface, Rect
from navtree_toolkit.core.scheduling import Scheduler

__all__ = ["FlipController"]

logger = logging.getLogger(__name__)


class FlipController:
    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._positions: Dict[str, Rect] = {}
        self._animating = False
        self._clear_timer: Optional[Any] = None

    @property
    def is_animating(self) -> bool:
        return self._animating

    @property
    def captured(self) -> Dict[str, Rect]:
        return dict(self._positions)

    def capture(self, surface: Optional[LayoutSurface]) -> None:
        self._positions.clear()
        if surface is None:
            return
        self._positions.update(surface.get_item_rects())

    def animate(self, surface: Optional[LayoutSurface], enabled: bool, duration_ms: int) -> int:
        """Apply compensating transforms; return how many items were moved.

        Ignored while a previous animation is still running or when nothing
        was captured.
        """
        if surface is None or not enabled or self._animating or not self._positions:
            return 0
        self._animating = True

        moved = 0
        for item_id, new_rect in surface.get_item_rects().items():
            old_rect = self._positions.get(item_id)
            if old_rect is None:
                continue
            dx = old_rect.left - new_rect.left
            dy = old_rect.top - new_rect.top
            if dx == 0 and dy == 0:
                continue
            surface.apply_transform(item_id, dx, dy, duration_ms)
            moved += 1

        logger.debug("FLIP animating %d item(s) over %d ms", moved, duration_ms)
        self._clear_timer = self._scheduler.call_later(duration_ms, self._finish)
        return moved

    def _finish(self) -> None:
        self._clear_timer = None
        self._positions.clear()
        self._animating = False

    def reset(self) -> None:
        """Abort any in-flight animation bookkeeping."""
        if self._clear_timer is not None:
            self._scheduler.cancel(self._clear_timer)
        self._finish()
