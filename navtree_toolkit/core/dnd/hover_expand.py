from __future__ import annotations

"""Expand a collapsed group after the drag has hovered over it for a while."""

from typing import Any, Callable, Optional

from navtree_toolkit.core.scheduling import Scheduler

__all__ = ["HoverExpandController"]


class HoverExpandController:
    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._timer: Optional[Any] = None
        self._target_id: Optional[str] = None

    @property
    def target_id(self) -> Optional[str]:
        return self._target_id

    def start(
        self,
        group_id: str,
        delay_ms: float,
        is_expanded: Callable[[str], bool],
        on_expand: Callable[[str], None],
    ) -> None:
        """Arm the timer for ``group_id``; a repeat call for the same group is a no-op."""
        if self._target_id == group_id:
            return
        self.cancel()
        self._target_id = group_id

        def fire() -> None:
            self._timer = None
            self._target_id = None
            if not is_expanded(group_id):
                on_expand(group_id)

        self._timer = self._scheduler.call_later(delay_ms, fire)

    def cancel(self) -> None:
        if self._timer is not None:
            self._scheduler.cancel(self._timer)
            self._timer = None
        self._target_id = None
