"""Top-level package for navtree-toolkit.

A framework-agnostic drag-and-drop reorder engine for navigation trees.
Front-ends (e.g. a Tk tree view) should only depend on the public API
exposed here rather than importing internal modules directly.
"""

from .core.models import (  # re-export for convenience
    DEFAULT_SCHEMA,
    NavNode,
    NavtreeError,
    ReorderEvent,
    TreeSchema,
)
from .core.services import DragSession, UndoService
from .core.tree import NavTree

__all__: list[str] = [
    "DEFAULT_SCHEMA",
    "NavNode",
    "NavtreeError",
    "ReorderEvent",
    "TreeSchema",
    "DragSession",
    "UndoService",
    "NavTree",
]
