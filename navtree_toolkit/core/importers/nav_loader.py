from __future__ import annotations

"""Build :class:`NavNode` forests from plain mappings and YAML files.

Accepted layout (YAML shown, plain dicts/lists work the same)::

    sections:
      - kind: section
        id: docs
        title: Documentation
        items:
          - {kind: page, id: intro, label: Introduction, href: /docs/intro}
          - kind: group
            id: guides
            label: Guides
            default_expanded: true
            items: [...]

``title`` is accepted as an alias of ``label`` and ``defaultExpanded`` of
``default_expanded``. Unknown keys are kept in ``NavNode.meta``.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Union

import yaml

from navtree_toolkit.core.models import NavNode, NavtreeError

__all__ = [
    "NavFormatError",
    "node_from_mapping",
    "load_nav_data",
    "load_nav_yaml",
    "node_to_mapping",
    "dump_nav_yaml",
]

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {
    "id",
    "kind",
    "label",
    "title",
    "href",
    "items",
    "children",
    "default_expanded",
    "defaultExpanded",
    "collapsible",
}


class NavFormatError(NavtreeError):
    """Raised when navigation data is malformed (missing ids, duplicates, bad types)."""

    def __init__(self, message: str, location: Optional[str] = None):
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


def node_from_mapping(
    mapping: Mapping[str, Any],
    location: str = "sections[0]",
    _seen: Optional[Set[str]] = None,
) -> NavNode:
    """Convert one mapping (and its ``items``) into a :class:`NavNode`."""
    seen = _seen if _seen is not None else set()
    if not isinstance(mapping, Mapping):
        raise NavFormatError("expected a mapping", location)

    node_id = mapping.get("id")
    if not isinstance(node_id, str) or not node_id:
        raise NavFormatError("missing or empty 'id'", location)
    if node_id in seen:
        raise NavFormatError(f"duplicate id {node_id!r}", location)
    seen.add(node_id)

    kind = mapping.get("kind", "page")
    if not isinstance(kind, str):
        raise NavFormatError("'kind' must be a string", location)

    raw_children = mapping.get("items", mapping.get("children")) or []
    if not isinstance(raw_children, Sequence) or isinstance(raw_children, (str, bytes)):
        raise NavFormatError("'items' must be a list", location)

    children = [
        node_from_mapping(child, f"{location}.items[{i}]", seen)
        for i, child in enumerate(raw_children)
    ]
    default_expanded = mapping.get("default_expanded", mapping.get("defaultExpanded", False))

    return NavNode(
        id=node_id,
        kind=kind,
        label=str(mapping.get("label", mapping.get("title", "")) or ""),
        href=mapping.get("href"),
        children=children,
        default_expanded=bool(default_expanded),
        collapsible=bool(mapping.get("collapsible", True)),
        meta={k: v for k, v in mapping.items() if k not in _KNOWN_KEYS},
    )


def load_nav_data(source: Union[Mapping[str, Any], Sequence[Any]]) -> List[NavNode]:
    """Build a forest from ``{"sections": [...]}`` or a bare list of root mappings."""
    if isinstance(source, Mapping):
        roots = source.get("sections", [])
    else:
        roots = source
    if not isinstance(roots, Sequence) or isinstance(roots, (str, bytes)):
        raise NavFormatError("'sections' must be a list")
    seen: Set[str] = set()
    forest = [node_from_mapping(root, f"sections[{i}]", seen) for i, root in enumerate(roots)]
    logger.debug("Loaded %d root node(s), %d node(s) total", len(forest), len(seen))
    return forest


def load_nav_yaml(source: Union[str, Path]) -> List[NavNode]:
    """Load a forest from a YAML file path, or from YAML text when ``source`` is a str
    that does not name an existing file."""
    path = Path(source) if not isinstance(source, Path) else source
    try:
        is_file = path.is_file()
    except (OSError, ValueError):
        is_file = False
    try:
        text = path.read_text(encoding="utf-8") if is_file else str(source)
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise NavFormatError(f"invalid YAML: {exc}") from exc
    return load_nav_data(data or [])


def node_to_mapping(node: NavNode) -> Dict[str, Any]:
    mapping: Dict[str, Any] = {"kind": node.kind, "id": node.id}
    if node.label:
        mapping["label"] = node.label
    if node.href is not None:
        mapping["href"] = node.href
    if node.default_expanded:
        mapping["default_expanded"] = True
    if not node.collapsible:
        mapping["collapsible"] = False
    mapping.update(node.meta)
    if node.children:
        mapping["items"] = [node_to_mapping(child) for child in node.children]
    return mapping


def dump_nav_yaml(forest: Sequence[NavNode], path: Optional[Union[str, Path]] = None) -> str:
    """Serialise ``forest`` to YAML; also write it to ``path`` when given."""
    text = yaml.safe_dump(
        {"sections": [node_to_mapping(node) for node in forest]},
        sort_keys=False,
        allow_unicode=True,
    )
    if path is not None:
        Path(path).write_text(text, encoding="utf-8")
    return text
