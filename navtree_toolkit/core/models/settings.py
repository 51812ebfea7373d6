from __future__ import annotations

"""Settings models for drag and drop timing, shortcuts, labels and announcements.

Defaults live here; :class:`navtree_toolkit.config.ConfigManager` supplies
YAML overrides which :func:`resolve_settings` merges section by section.
"""

import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from navtree_toolkit.core.models import NavtreeError

__all__ = [
    "SettingsError",
    "KeyboardShortcuts",
    "DndSettings",
    "SidebarSettings",
    "DEFAULT_LABELS",
    "DEFAULT_ANNOUNCEMENTS",
    "resolve_settings",
    "format_announcement",
    "matches_shortcut",
]


class SettingsError(NavtreeError):
    """Raised when a settings override has an unknown key or a bad value."""


DEFAULT_LABELS: Dict[str, str] = {
    "draggable_item": "Draggable item",
    "instructions": (
        "Press Space or Enter to pick up a draggable item. Use Arrow keys to move the item. "
        "Press Enter to drop the item in a new position, or press Escape to cancel."
    ),
    "instructions_id": "navtree-dnd-instructions",
}

DEFAULT_ANNOUNCEMENTS: Dict[str, str] = {
    "picked_up": "Picked up {label}. Use arrow keys to move, Enter to drop, Escape to cancel.",
    "moved": "Moved {position} {target}. Position {index} of {count}.",
    "dropped": "Dropped {label}. Reorder complete.",
    "cancelled": "Cancelled. {label} returned to original position.",
    "at_top": "At the top of the list",
    "at_bottom": "At the bottom of the list",
    "at_top_level": "Already at the top level",
    "no_group_above": "No group above to move into",
    "not_a_group": "Previous item is not a group",
    "invalid_target": "{label} cannot be moved there",
    "moved_out_of": "Moved out of {target}. Now at parent level.",
    "moved_into": "Moved into {target}. Position {index}.",
    "touch_drag_started": "Dragging {label}. Move finger to reposition.",
    "group_expanded": "Expanded group",
}

Shortcut = Union[str, Tuple[str, ...]]


@dataclass(frozen=True)
class KeyboardShortcuts:
    pick_up_drop: Shortcut = (" ", "Enter")
    move_up: Shortcut = "ArrowUp"
    move_down: Shortcut = "ArrowDown"
    move_to_parent: Shortcut = "ArrowLeft"
    move_into_group: Shortcut = "ArrowRight"
    cancel: Shortcut = "Escape"


@dataclass(frozen=True)
class DndSettings:
    """Timing and distance thresholds (milliseconds / pixels)."""

    long_press_delay: int = 400
    hover_expand_delay: int = 500
    auto_scroll_threshold: int = 50
    auto_scroll_max_speed: int = 15
    rect_cache_interval: int = 100
    preview_debounce: int = 40
    move_cancel_distance: int = 10
    keyboard: KeyboardShortcuts = field(default_factory=KeyboardShortcuts)


@dataclass(frozen=True)
class SidebarSettings:
    animation_duration: int = 200
    persist_collapsed: bool = True
    persist_expanded_groups: bool = True
    storage_key: str = "navtree"
    dnd: DndSettings = field(default_factory=DndSettings)
    labels: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_LABELS))
    announcements: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_ANNOUNCEMENTS))


def _coerce_shortcut(value: Any) -> Shortcut:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise SettingsError(f"Invalid keyboard shortcut: {value!r}")


def _merge_dataclass(base: Any, overrides: Mapping[str, Any], section: str) -> Any:
    known = {f.name for f in fields(base)}
    unknown = set(overrides) - known
    if unknown:
        raise SettingsError(f"Unknown {section} setting(s): {', '.join(sorted(unknown))}")
    return replace(base, **overrides)


def _section(value: Any, name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SettingsError(f"{name} must be a mapping, got {value!r}")
    return value


def resolve_settings(overrides: Optional[Mapping[str, Any]] = None) -> SidebarSettings:
    """Merge user overrides over the defaults.

    ``overrides`` uses the YAML layout: top-level scalars, plus nested
    ``dnd`` (with nested ``keyboard``), ``labels`` and ``announcements``
    mappings. Nested mappings are merged key by key so a partial override
    keeps every other default.
    """
    overrides = dict(_section(overrides, "settings"))
    defaults = SidebarSettings()

    dnd_over = dict(_section(overrides.pop("dnd", None), "dnd"))
    keyboard_over = _section(dnd_over.pop("keyboard", None), "dnd.keyboard")
    keyboard = _merge_dataclass(
        defaults.dnd.keyboard,
        {k: _coerce_shortcut(v) for k, v in keyboard_over.items()},
        "keyboard",
    )
    for key, value in dnd_over.items():
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
            raise SettingsError(f"dnd.{key} must be a non-negative number, got {value!r}")
    dnd = _merge_dataclass(defaults.dnd, dict(dnd_over, keyboard=keyboard), "dnd")

    labels = dict(DEFAULT_LABELS)
    labels.update(_section(overrides.pop("labels", None), "labels"))
    announcements = dict(DEFAULT_ANNOUNCEMENTS)
    announcements.update(_section(overrides.pop("announcements", None), "announcements"))

    return _merge_dataclass(
        defaults,
        dict(overrides, dnd=dnd, labels=labels, announcements=announcements),
        "sidebar",
    )


_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def format_announcement(template: str, values: Mapping[str, Any]) -> str:
    """Substitute ``{name}`` placeholders; unknown placeholders are kept verbatim."""
    return _PLACEHOLDER.sub(
        lambda m: str(values[m.group(1)]) if m.group(1) in values else m.group(0),
        template,
    )


def matches_shortcut(key: str, shortcut: Shortcut) -> bool:
    if isinstance(shortcut, str):
        return key == shortcut
    return key in shortcut
