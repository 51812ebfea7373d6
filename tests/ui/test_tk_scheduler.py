import tkinter as tk

import pytest

from navtree_toolkit.core.scheduling import Scheduler
from navtree_toolkit.ui.tk_scheduler import TkScheduler


@pytest.fixture
def root():
    try:
        root = tk.Tk()
    except tk.TclError as exc:
        pytest.skip(f"Tk not available: {exc}")
    root.withdraw()
    yield root
    root.destroy()


def pump(root, scheduler, timeout_ms=500):
    """Run the Tk loop until the scheduler has nothing pending or the timeout passes."""
    deadline = scheduler.now() + timeout_ms
    while scheduler._pending and scheduler.now() < deadline:
        root.update()


def test_satisfies_scheduler_protocol(root):
    assert isinstance(TkScheduler(root), Scheduler)


def test_timers_and_frames_run_on_the_event_loop(root):
    scheduler = TkScheduler(root)
    calls = []

    scheduler.call_later(5, lambda: calls.append("timer"))
    scheduler.request_frame(lambda: calls.append("frame"))
    pump(root, scheduler)

    assert sorted(calls) == ["frame", "timer"]


def test_cancelled_callbacks_never_run(root):
    scheduler = TkScheduler(root)
    calls = []

    timer = scheduler.call_later(5, lambda: calls.append("timer"))
    frame = scheduler.request_frame(lambda: calls.append("frame"))
    scheduler.cancel(timer)
    scheduler.cancel_frame(frame)
    scheduler.cancel(timer)
    scheduler.call_later(30, lambda: calls.append("late"))
    scheduler.cancel_all()
    root.after(60, lambda: calls.append("done"))
    while "done" not in calls:
        root.update()

    assert calls == ["done"]
