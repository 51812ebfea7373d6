from __future__ import annotations

"""Geometry primitives and the layout surface contract.

The engine never measures widgets itself. A rendering layer implements
:class:`LayoutSurface` (a Tk canvas adapter, a test fake, ...) and the drag
handlers query it for bounding boxes, scrolling and transforms.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, runtime_checkable

__all__ = ["Rect", "LayoutSurface"]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box in surface coordinates (y grows downwards)."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, x: float, y: float) -> bool:
        """Inclusive on every edge."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def vertical_distance(self, y: float) -> float:
        if y < self.top:
            return self.top - y
        if y > self.bottom:
            return y - self.bottom
        return 0.0


@runtime_checkable
class LayoutSurface(Protocol):
    """What the drag-and-drop engine needs from the rendering layer."""

    def get_item_rects(self) -> Dict[str, Rect]:
        """Return the rect of every rendered drop zone keyed by item id.

        Returns:
            Mapping in render order; hidden items (collapsed groups) are absent.
        """
        ...

    def get_item_rect(self, item_id: str) -> Optional[Rect]:
        ...

    def get_container_rect(self) -> Optional[Rect]:
        """Visible rect of the scroll container, or None when not scrollable."""
        ...

    def scroll_by(self, dy: float) -> None:
        ...

    def apply_transform(self, item_id: str, dx: float, dy: float, duration_ms: int) -> None:
        """Offset ``item_id`` by (dx, dy) and animate it back to rest over ``duration_ms``.

        Args:
            item_id: Rendered item to move.
            dx: Horizontal offset in pixels, old position minus new.
            dy: Vertical offset in pixels, old position minus new.
            duration_ms: Length of the settle animation.
        """
        ...
