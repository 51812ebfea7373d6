from __future__ import annotations

"""Persist the collapsed flag and expanded groups between runs.

State is stored as ``<storage_key>.json`` in a caller-chosen directory
(usually the user config directory). Storage problems never reach the
caller: loading falls back to defaults and saving is skipped, both with a
warning in the log.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from navtree_toolkit.core.models.settings import SidebarSettings

__all__ = ["PersistedState", "load_persisted_state", "persist_state", "state_file_path"]

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class PersistedState:
    collapsed: Optional[bool] = None
    expanded_group_ids: List[str] = field(default_factory=list)


def state_file_path(settings: SidebarSettings, storage_dir: PathLike) -> Path:
    return Path(storage_dir) / f"{settings.storage_key}.json"


def load_persisted_state(settings: SidebarSettings, storage_dir: PathLike) -> PersistedState:
    """Read the stored state; disabled or unreadable parts come back as defaults."""
    path = state_file_path(settings, storage_dir)
    if not path.exists():
        return PersistedState()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError("state file does not hold an object")
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring persisted state %s: %s", path, exc)
        return PersistedState()

    state = PersistedState()
    if settings.persist_collapsed and isinstance(raw.get("collapsed"), bool):
        state.collapsed = raw["collapsed"]
    if settings.persist_expanded_groups:
        ids = raw.get("expanded_group_ids")
        if isinstance(ids, list):
            state.expanded_group_ids = [str(i) for i in ids]
    return state


def persist_state(
    settings: SidebarSettings,
    storage_dir: PathLike,
    collapsed: bool,
    expanded: Dict[str, bool],
) -> bool:
    """Write the enabled parts of the state; return False when nothing was written."""
    payload: Dict[str, object] = {}
    if settings.persist_collapsed:
        payload["collapsed"] = bool(collapsed)
    if settings.persist_expanded_groups:
        payload["expanded_group_ids"] = [gid for gid, is_open in expanded.items() if is_open]
    if not payload:
        return False

    path = state_file_path(settings, storage_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    except (OSError, ValueError) as exc:
        logger.warning("Could not persist state to %s: %s", path, exc)
        return False
    return True
