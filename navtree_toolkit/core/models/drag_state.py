"""Per-modality drag session state.

Both state objects are immutable: transitions produce a new value through
:func:`dataclasses.replace` so observers never see a partially updated state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

__all__ = ["DragPhase", "KeyboardDragState", "PointerDragState"]


class DragPhase(Enum):
    IDLE = "idle"
    ARMED = "armed"
    DRAGGING = "dragging"
    COMMITTING = "committing"
    CANCELLING = "cancelling"


@dataclass(frozen=True)
class KeyboardDragState:
    """Virtual position of a node picked up with the keyboard.

    Attributes
    ----------
    siblings
        Nodes of the level the virtual position currently sits in, in data
        order (the dragged node is included only when that level is its
        origin).
    """

    node: Any
    id: str
    original_parent_id: Optional[str]
    original_index: int
    current_parent_id: Optional[str]
    current_index: int
    siblings: Tuple[Any, ...]

    @property
    def has_moved(self) -> bool:
        return (
            self.current_parent_id != self.original_parent_id
            or self.current_index != self.original_index
        )


@dataclass(frozen=True)
class PointerDragState:
    """Touch/pen drag in progress; ``is_dragging`` flips once the long press fires."""

    node: Any
    id: str
    parent_id: Optional[str]
    index: int
    start_x: float
    start_y: float
    current_x: float
    current_y: float
    is_dragging: bool = False
    long_press_timer: Any = None

    def moved_distance(self) -> float:
        dx = self.current_x - self.start_x
        dy = self.current_y - self.start_y
        return (dx * dx + dy * dy) ** 0.5
