"""Admonition block flattening.

Asciidoctor lays admonitions out as a one-row table: an icon cell holding
the label ("Note", "Tip", ...) and a content cell holding the actual blocks.
Readers of the element stream only need the content, so the table
scaffolding is replaced by a plain wrapper div.
"""

from __future__ import annotations

from bs4 import Tag

from ..ingest.error_handling import MalformedNodeError
from ..parser.classify import node_classes
from .html_wrap import build_tag


def find_content_cell(node: Tag) -> Tag:
    cell = node.find("td", class_="content")
    if not isinstance(cell, Tag):
        raise MalformedNodeError("admonitionblock", "no content cell found")
    return cell


def flatten_admonition(node: Tag) -> Tag:
    """Build ``<div class="admonitionblock ...">`` with the content cell's children.

    The wrapper keeps the block's class list so the admonition type (note,
    tip, warning, ...) stays available to the renderer. The icon cell is
    dropped. ``node`` is not modified.
    """

    cell = find_content_cell(node)
    classes = node_classes(node) or ["admonitionblock"]
    return build_tag("div", {"class": classes}, cell.contents)


__all__ = ["find_content_cell", "flatten_admonition"]
