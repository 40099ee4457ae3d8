from __future__ import annotations

import re
from enum import Enum

from bs4 import Tag
from bs4.element import PageElement

_SECTION_CLASS_RE = re.compile(r"^sect(?P<level>[1-9])$")
_HEADING_TAG_RE = re.compile(r"^h(?P<level>[1-6])$")


class NodeKind(Enum):
    """Closed set of node shapes the chapter transformer knows about."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    TABLE = "table"
    LISTING = "listingblock"
    IMAGE = "imageblock"
    SECTION = "section"
    ADMONITION = "admonitionblock"
    ULIST = "ulist"
    OLIST = "olist"
    QUOTE = "quoteblock"
    UNRECOGNIZED = "unrecognized"


# div class -> kind, checked in this order
_DIV_KINDS: tuple[tuple[str, NodeKind], ...] = (
    ("paragraph", NodeKind.PARAGRAPH),
    ("listingblock", NodeKind.LISTING),
    ("imageblock", NodeKind.IMAGE),
    ("admonitionblock", NodeKind.ADMONITION),
    ("ulist", NodeKind.ULIST),
    ("olist", NodeKind.OLIST),
    ("quoteblock", NodeKind.QUOTE),
)


def node_classes(node: Tag) -> list[str]:
    raw = node.get("class")
    if raw is None:
        return []
    if isinstance(raw, str):
        return raw.split()
    return list(raw)


def heading_level(node: PageElement) -> int | None:
    """Return N for an <hN> tag, else None."""
    if not isinstance(node, Tag):
        return None
    m = _HEADING_TAG_RE.match(node.name or "")
    return int(m.group("level")) if m else None


def section_level(node: Tag) -> int | None:
    """Return N for a div carrying a ``sectN`` class, else None."""
    for cls in node_classes(node):
        m = _SECTION_CLASS_RE.match(cls)
        if m:
            return int(m.group("level"))
    return None


def classify_node(node: PageElement) -> NodeKind:
    """Derive the NodeKind of a chapter child from its tag name and classes.

    Text nodes, comments and anything not listed map to UNRECOGNIZED.
    Only sect2 and deeper count as sections; a sect1 is a chapter root.
    """

    if not isinstance(node, Tag):
        return NodeKind.UNRECOGNIZED

    name = (node.name or "").lower()
    if name == "h2":
        return NodeKind.HEADING
    if name == "table":
        return NodeKind.TABLE
    if name != "div":
        return NodeKind.UNRECOGNIZED

    level = section_level(node)
    if level is not None and level >= 2:
        return NodeKind.SECTION

    classes = node_classes(node)
    for cls, kind in _DIV_KINDS:
        if cls in classes:
            return kind
    return NodeKind.UNRECOGNIZED


def describe_node(node: PageElement) -> str:
    """Short human description (``div.foo.bar``, ``#text``) for log lines."""
    if not isinstance(node, Tag):
        return "#text"
    classes = node_classes(node)
    return ".".join([node.name or "?", *classes])


__all__ = [
    "NodeKind",
    "classify_node",
    "describe_node",
    "heading_level",
    "node_classes",
    "section_level",
]
