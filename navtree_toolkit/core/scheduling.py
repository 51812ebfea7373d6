from __future__ import annotations

"""Timer and frame scheduling contract.

Long press, hover expand, preview debounce and drag-end deferral use
delayed callbacks; auto-scroll and reflow animation use frame callbacks.
Everything goes through a :class:`Scheduler` so the engine can run under
Tk (:class:`navtree_toolkit.ui.tk_scheduler.TkScheduler`) or under a
deterministic virtual clock in tests (:class:`ManualScheduler`).
"""

import heapq
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, runtime_checkable

__all__ = ["Scheduler", "ManualScheduler", "DeferredFrame", "after_next_layout"]


Callback = Callable[[], None]


@runtime_checkable
class Scheduler(Protocol):
    def call_later(self, delay_ms: float, callback: Callback) -> Any:
        """Run ``callback`` once after ``delay_ms``; return a handle for :meth:`cancel`."""
        ...

    def cancel(self, handle: Any) -> None:
        """Cancel a pending timer. Unknown or already fired handles are ignored."""
        ...

    def request_frame(self, callback: Callback) -> Any:
        """Run ``callback`` before the next rendered frame."""
        ...

    def cancel_frame(self, handle: Any) -> None:
        ...

    def now(self) -> float:
        """Monotonic time in milliseconds."""
        ...


class ManualScheduler:
    """Virtual clock scheduler; nothing runs until the test advances it.

    Timers fire in due-time order (ties in scheduling order) during
    :meth:`advance`. Frame callbacks run only through :meth:`run_frames`,
    and callbacks requested while a frame is running wait for the next one.
    """

    def __init__(self) -> None:
        self._time = 0.0
        self._next_handle = 1
        self._timers: Dict[int, Tuple[float, Callback]] = {}
        self._heap: List[Tuple[float, int]] = []
        self._frames: Dict[int, Callback] = {}
        self._running: Dict[int, Callback] = {}

    def _handle(self) -> int:
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def call_later(self, delay_ms: float, callback: Callback) -> int:
        handle = self._handle()
        due = self._time + max(0.0, float(delay_ms))
        self._timers[handle] = (due, callback)
        heapq.heappush(self._heap, (due, handle))
        return handle

    def cancel(self, handle: Any) -> None:
        self._timers.pop(handle, None)

    def request_frame(self, callback: Callback) -> int:
        handle = self._handle()
        self._frames[handle] = callback
        return handle

    def cancel_frame(self, handle: Any) -> None:
        self._frames.pop(handle, None)
        self._running.pop(handle, None)

    def now(self) -> float:
        return self._time

    # ------------------------------------------------------------------
    # Test driving
    # ------------------------------------------------------------------

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    @property
    def pending_frames(self) -> int:
        return len(self._frames)

    def advance(self, ms: float) -> None:
        """Move the clock forward by ``ms``, firing every timer that falls due."""
        target = self._time + ms
        while self._heap and self._heap[0][0] <= target:
            due, handle = heapq.heappop(self._heap)
            entry = self._timers.pop(handle, None)
            if entry is None:
                continue
            self._time = due
            entry[1]()
        self._time = target

    def run_frames(self, count: int = 1) -> None:
        for _ in range(count):
            self._running, self._frames = self._frames, {}
            while self._running:
                handle = next(iter(self._running))
                self._running.pop(handle)()


class DeferredFrame:
    """Run a callback after ``frames`` rendered frames; cancellable at any point.

    Two frames is "after the next completed layout pass": the first frame
    lets the toolkit apply pending geometry, the second observes it.
    """

    def __init__(self, scheduler: Scheduler, callback: Callback, frames: int = 2) -> None:
        self._scheduler = scheduler
        self._callback = callback
        self._remaining = max(1, frames)
        self._handle: Optional[Any] = scheduler.request_frame(self._tick)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _tick(self) -> None:
        self._remaining -= 1
        if self._remaining > 0:
            self._handle = self._scheduler.request_frame(self._tick)
            return
        self._handle = None
        self._callback()

    def cancel(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel_frame(self._handle)
            self._handle = None


def after_next_layout(scheduler: Scheduler, callback: Callback) -> DeferredFrame:
    return DeferredFrame(scheduler, callback, frames=2)
