"""Shared fixtures for navtree-toolkit tests.

Provides sample navigation forests, a deterministic scheduler and a fake
layout surface with fixed row rects so drag sessions can be driven without
a GUI toolkit.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from navtree_toolkit.core.dnd.geometry import Rect
from navtree_toolkit.core.models import NavNode
from navtree_toolkit.core.scheduling import ManualScheduler
from navtree_toolkit.core.tree.navigator import NavTree

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

ROW_HEIGHT = 40.0


def page(node_id: str, label: Optional[str] = None) -> NavNode:
    return NavNode(id=node_id, kind="page", label=label or node_id, href=f"/{node_id.lower()}")


def group(node_id: str, *children: NavNode, expanded: bool = False) -> NavNode:
    return NavNode(id=node_id, kind="group", label=node_id, children=list(children), default_expanded=expanded)


def section(node_id: str, *children: NavNode) -> NavNode:
    return NavNode(id=node_id, kind="section", label=node_id, children=list(children))


def level_ids(forest: List[NavNode], parent_id: Optional[str] = None) -> List[str]:
    """Ids at one level of ``forest``; root level when ``parent_id`` is None."""
    if parent_id is None:
        return [node.id for node in forest]

    def find(items: List[NavNode]) -> Optional[NavNode]:
        for node in items:
            if node.id == parent_id:
                return node
            found = find(node.children)
            if found is not None:
                return found
        return None

    parent = find(forest)
    assert parent is not None, f"{parent_id} not in forest"
    return [child.id for child in parent.children]


def structure(forest: List[NavNode]) -> Tuple:
    """Nested (id, children) tuples for whole-forest equality checks."""
    return tuple((node.id, structure(node.children)) for node in forest)


class FakeSurface:
    """Layout surface with one fixed-height row per id, laid out top to bottom."""

    def __init__(self, ids: List[str], row_height: float = ROW_HEIGHT, container: Optional[Rect] = None) -> None:
        self.row_height = row_height
        self.rects: Dict[str, Rect] = {}
        self.set_order(ids)
        self.container = container or Rect(0, 0, 200, 400)
        self.scrolled: List[float] = []
        self.transforms: List[Tuple[str, float, float, int]] = []

    def set_order(self, ids: List[str]) -> None:
        self.rects = {
            item_id: Rect(0, position * self.row_height, 200, self.row_height)
            for position, item_id in enumerate(ids)
        }

    def get_item_rects(self) -> Dict[str, Rect]:
        return dict(self.rects)

    def get_item_rect(self, item_id: str) -> Optional[Rect]:
        return self.rects.get(item_id)

    def get_container_rect(self) -> Optional[Rect]:
        return self.container

    def scroll_by(self, dy: float) -> None:
        self.scrolled.append(dy)

    def apply_transform(self, item_id: str, dx: float, dy: float, duration_ms: int) -> None:
        self.transforms.append((item_id, dx, dy, duration_ms))


@pytest.fixture
def simple_forest() -> List[NavNode]:
    """``S{ G{ P1, P2 } }``."""
    return [section("S", group("G", page("P1"), page("P2")))]


@pytest.fixture
def forest() -> List[NavNode]:
    """Two sections with nested groups and root-level leaves::

        S  { G { P1, P2 }, P3 }
        S2 { G2* { P4, G3 { P5 } }, P6 }
        P7
    (* expanded by default)
    """
    return [
        section("S", group("G", page("P1"), page("P2")), page("P3")),
        section("S2", group("G2", page("P4"), group("G3", page("P5")), expanded=True), page("P6")),
        page("P7"),
    ]


@pytest.fixture
def tree(forest) -> NavTree:
    return NavTree(forest)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface(["S", "G", "P1", "P2", "P3", "S2", "G2", "P4", "G3", "P6", "P7"])
