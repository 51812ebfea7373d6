from __future__ import annotations

"""Stateful services: the drag session and reorder history."""

from .drag_session import DragSession  # noqa: F401
from .undo_service import UndoService  # noqa: F401

__all__: list[str] = [
    "DragSession",
    "UndoService",
]
