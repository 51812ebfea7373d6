"""Configuration files (YAML) and the :class:`ConfigManager` that reads them.

Default files live in this folder and are merged with user overrides.
"""

from .manager import ConfigManager, load_settings

__all__ = [
    "ConfigManager",
    "load_settings",
]
