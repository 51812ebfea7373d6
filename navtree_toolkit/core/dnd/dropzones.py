from __future__ import annotations

"""Drop-zone rect caching and hit testing for pointer and gap drags."""

from dataclasses import dataclass
from typing import List, Optional

from navtree_toolkit.core.dnd.geometry import LayoutSurface, Rect

__all__ = [
    "DropZoneRect",
    "cache_drop_zone_rects",
    "find_drop_zone_at_point",
    "find_nearest_drop_zone",
]


@dataclass(frozen=True)
class DropZoneRect:
    id: str
    rect: Rect


def cache_drop_zone_rects(surface: Optional[LayoutSurface], exclude_id: Optional[str] = None) -> List[DropZoneRect]:
    """Snapshot every rendered drop zone except ``exclude_id`` (the dragged node)."""
    if surface is None:
        return []
    return [
        DropZoneRect(item_id, rect)
        for item_id, rect in surface.get_item_rects().items()
        if item_id != exclude_id
    ]


def find_drop_zone_at_point(zones: List[DropZoneRect], x: float, y: float) -> Optional[DropZoneRect]:
    """Zone containing (x, y); the smallest one wins when nested zones overlap."""
    best: Optional[DropZoneRect] = None
    for zone in zones:
        if zone.rect.contains(x, y) and (best is None or zone.rect.area < best.rect.area):
            best = zone
    return best


def find_nearest_drop_zone(zones: List[DropZoneRect], y: float) -> Optional[DropZoneRect]:
    """Zone closest to ``y`` vertically; the first one wins on ties."""
    best: Optional[DropZoneRect] = None
    best_distance = 0.0
    for zone in zones:
        distance = zone.rect.vertical_distance(y)
        if best is None or distance < best_distance:
            best = zone
            best_distance = distance
    return best
