from __future__ import annotations

"""Loaders that turn YAML, plain data or XML into ``NavNode`` forests."""

from .nav_loader import (
    NavFormatError,
    dump_nav_yaml,
    load_nav_data,
    load_nav_yaml,
    node_from_mapping,
    node_to_mapping,
)
from .nav_xml import nav_to_xml, parse_nav_xml, write_nav_xml

__all__ = [
    "NavFormatError",
    "node_from_mapping",
    "load_nav_data",
    "load_nav_yaml",
    "node_to_mapping",
    "dump_nav_yaml",
    "parse_nav_xml",
    "nav_to_xml",
    "write_nav_xml",
]
