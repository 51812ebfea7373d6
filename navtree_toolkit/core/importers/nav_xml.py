from __future__ import annotations

"""Read and write navigation trees as XML using lxml.

Element names are node kinds; ``id``, ``label``, ``href``,
``default-expanded`` and ``collapsible`` are attributes. Any other
attribute is kept in ``NavNode.meta`` as a string::

    <nav>
      <section id="docs" label="Documentation">
        <page id="intro" label="Introduction" href="/docs/intro"/>
        <group id="guides" label="Guides" default-expanded="true">
          <page id="setup" label="Setup"/>
        </group>
      </section>
    </nav>
"""

import logging
from pathlib import Path
from typing import List, Sequence, Set, Union

from lxml import etree as ET  # type: ignore

from navtree_toolkit.core.importers.nav_loader import NavFormatError
from navtree_toolkit.core.models import NavNode

__all__ = ["parse_nav_xml", "nav_to_xml", "write_nav_xml"]

logger = logging.getLogger(__name__)

_ROOT_TAG = "nav"
_KNOWN_ATTRS = {"id", "label", "href", "default-expanded", "collapsible"}
_TRUE = {"true", "1", "yes"}


def _parser() -> ET.XMLParser:
    return ET.XMLParser(resolve_entities=False, no_network=True, remove_comments=True, remove_blank_text=True)


def _element_to_node(elem: ET._Element, seen: Set[str]) -> NavNode:
    location = f"line {elem.sourceline}" if elem.sourceline else elem.tag
    node_id = elem.get("id")
    if not node_id:
        raise NavFormatError(f"<{elem.tag}> is missing an 'id' attribute", location)
    if node_id in seen:
        raise NavFormatError(f"duplicate id {node_id!r}", location)
    seen.add(node_id)

    children = [
        _element_to_node(child, seen)
        for child in elem
        if isinstance(child.tag, str)
    ]
    return NavNode(
        id=node_id,
        kind=ET.QName(elem).localname,
        label=elem.get("label", ""),
        href=elem.get("href"),
        children=children,
        default_expanded=elem.get("default-expanded", "false").lower() in _TRUE,
        collapsible=elem.get("collapsible", "true").lower() in _TRUE,
        meta={k: v for k, v in elem.attrib.items() if k not in _KNOWN_ATTRS},
    )


def parse_nav_xml(source: Union[str, Path, bytes]) -> List[NavNode]:
    """Parse a ``<nav>`` document from a file path or raw bytes.

    Raises
    ------
    NavFormatError
        If the XML is not well-formed, the root is not ``<nav>``, or an
        element lacks a unique ``id``.
    """
    try:
        if isinstance(source, bytes):
            root = ET.fromstring(source, _parser())
        else:
            root = ET.parse(str(source), _parser()).getroot()
    except ET.XMLSyntaxError as exc:
        raise NavFormatError(f"invalid XML: {exc}") from exc
    except OSError as exc:
        raise NavFormatError(f"cannot read {source}: {exc}") from exc

    if ET.QName(root).localname != _ROOT_TAG:
        raise NavFormatError(f"expected <{_ROOT_TAG}> root element, found <{root.tag}>")

    seen: Set[str] = set()
    forest = [_element_to_node(child, seen) for child in root if isinstance(child.tag, str)]
    logger.debug("Parsed nav XML: %d root node(s), %d node(s) total", len(forest), len(seen))
    return forest


def _node_to_element(node: NavNode, parent: ET._Element) -> None:
    elem = ET.SubElement(parent, node.kind, id=node.id)
    if node.label:
        elem.set("label", node.label)
    if node.href is not None:
        elem.set("href", node.href)
    if node.default_expanded:
        elem.set("default-expanded", "true")
    if not node.collapsible:
        elem.set("collapsible", "false")
    for key, value in node.meta.items():
        elem.set(key, str(value))
    for child in node.children:
        _node_to_element(child, elem)


def nav_to_xml(forest: Sequence[NavNode]) -> bytes:
    root = ET.Element(_ROOT_TAG)
    for node in forest:
        _node_to_element(node, root)
    return ET.tostring(root, pretty_print=True, xml_declaration=True, encoding="UTF-8")


def write_nav_xml(forest: Sequence[NavNode], path: Union[str, Path]) -> None:
    Path(path).write_bytes(nav_to_xml(forest))
