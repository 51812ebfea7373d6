from __future__ import annotations

"""Tkinter implementation of the :class:`~navtree_toolkit.core.scheduling.Scheduler` contract.

Timers map onto ``widget.after`` / ``after_cancel``. Tk has no frame
callback, so frames are approximated with a fixed ~60 Hz ``after`` delay.
"""

import time
import tkinter as tk
from typing import Any, Callable, Set

__all__ = ["TkScheduler", "FRAME_INTERVAL_MS"]

FRAME_INTERVAL_MS = 16


class TkScheduler:
    """Schedule drag-session callbacks on a Tk widget's event loop.

    Parameters
    ----------
    widget : tk.Misc
        Any widget of the running application; usually the tree view.
    """

    def __init__(self, widget: tk.Misc) -> None:
        self.widget = widget
        self._pending: Set[str] = set()

    def _after(self, delay_ms: float, callback: Callable[[], None]) -> str:
        handle = ""

        def run() -> None:
            self._pending.discard(handle)
            callback()

        handle = self.widget.after(max(0, int(round(delay_ms))), run)
        self._pending.add(handle)
        return handle

    def _cancel(self, handle: Any) -> None:
        if handle in self._pending:
            self._pending.discard(handle)
            self.widget.after_cancel(handle)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> str:
        return self._after(delay_ms, callback)

    def cancel(self, handle: Any) -> None:
        self._cancel(handle)

    def request_frame(self, callback: Callable[[], None]) -> str:
        return self._after(FRAME_INTERVAL_MS, callback)

    def cancel_frame(self, handle: Any) -> None:
        self._cancel(handle)

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def cancel_all(self) -> None:
        """Cancel everything still pending, e.g. before the widget is destroyed."""
        for handle in list(self._pending):
            self._cancel(handle)
