from __future__ import annotations

"""Central logging configuration for navtree-toolkit.

Import and call :func:`setup_logging` at application start-up.
"""

import logging
import logging.config
import os
from typing import Any, Dict, List

from navtree_toolkit.config import ConfigManager

__all__ = ["setup_logging"]

_DND_LOGGERS = [
    "navtree_toolkit.core.services.drag_session",
    "navtree_toolkit.core.dnd",
]
_TRUTHY = {"1", "true", "yes", "on"}


def setup_logging() -> None:
    """Configure logging for the application using configuration from YAML files."""
    log_dir = os.environ.get("NAVTREE_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    try:
        logging_config = ConfigManager().get_logging_config()
        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            logging_config = _with_log_file(logging_config, log_file)
            logging.config.dictConfig(logging_config)
            logging.info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError, OSError) as exc:
        # dictConfig reports every bad entry as one of these.
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging()

    _apply_debug_overrides()


def _with_log_file(config: Dict[str, Any], log_file: str) -> Dict[str, Any]:
    config = dict(config)
    handlers = dict(config.get("handlers") or {})
    if "file" in handlers:
        handlers["file"] = dict(handlers["file"], filename=log_file)
        config["handlers"] = handlers
    return config


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
                "level": "INFO",
            },
        },
        "root": {
            "level": "INFO",
            "handlers": ["console"],
        },
        # Keep a session logger entry so the env override can flip it.
        "loggers": {
            "navtree_toolkit.core.services.drag_session": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            }
        },
    }
    logging.config.dictConfig(minimal_config)
    logging.error("===== Logging initialised with minimal fallback (config error) =====")


def _debug_targets() -> List[str]:
    targets: List[str] = []
    if os.environ.get("NAVTREE_DEBUG_DND", "").strip().lower() in _TRUTHY:
        targets.extend(_DND_LOGGERS)
    extra_modules = os.environ.get("NAVTREE_DEBUG_MODULES", "").strip()
    if extra_modules:
        targets.extend(m.strip() for m in extra_modules.split(",") if m.strip())
    return targets


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    Supports:
    - NAVTREE_DEBUG_DND=true  -> DEBUG for the drag session and dnd handlers
    - NAVTREE_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    for name in _debug_targets():
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            logger.addHandler(handler)
        logger.info("Debug override active for logger '%s'", name)
