from __future__ import annotations

"""Scroll the tree container while a drag hovers near its top or bottom edge."""

import logging
from typing import Any, Callable, Optional

from navtree_toolkit.core.dnd.geometry import Rect
from navtree_toolkit.core.scheduling import Scheduler

__all__ = ["AutoScrollController", "compute_scroll_speed"]

logger = logging.getLogger(__name__)


def compute_scroll_speed(client_y: float, container: Rect, threshold: float, max_speed: float) -> float:
    """Signed pixels per frame; negative scrolls up, 0 outside the edge bands."""
    if threshold <= 0:
        return 0.0
    top_distance = max(0.0, client_y - container.top)
    bottom_distance = max(0.0, container.bottom - client_y)
    if top_distance < threshold:
        return -max_speed * (1 - top_distance / threshold)
    if bottom_distance < threshold:
        return max_speed * (1 - bottom_distance / threshold)
    return 0.0


class AutoScrollController:
    """Per-frame scroll loop that runs while the pointer stays inside an edge band."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._frame: Optional[Any] = None
        self._speed = 0.0

    @property
    def is_running(self) -> bool:
        return self._frame is not None

    @property
    def speed(self) -> float:
        return self._speed

    def handle_drag(
        self,
        client_y: float,
        container_rect: Optional[Rect],
        threshold: float,
        max_speed: float,
        scroll_by: Callable[[float], None],
    ) -> None:
        if container_rect is None:
            return
        speed = compute_scroll_speed(client_y, container_rect, threshold, max_speed)
        if speed:
            self.start(speed, scroll_by)
        else:
            self.stop()

    def start(self, speed: float, scroll_by: Callable[[float], None]) -> None:
        if self._frame is not None:
            self._scheduler.cancel_frame(self._frame)
        if not self._speed:
            logger.debug("Auto-scroll started at %.1f px/frame", speed)
        self._speed = speed

        def step() -> None:
            scroll_by(speed)
            self._frame = self._scheduler.request_frame(step)

        self._frame = self._scheduler.request_frame(step)

    def stop(self) -> None:
        if self._frame is not None:
            self._scheduler.cancel_frame(self._frame)
            self._frame = None
        self._speed = 0.0
