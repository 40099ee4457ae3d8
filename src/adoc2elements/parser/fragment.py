from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

from ..ingest.error_handling import InvalidInputError

logger = logging.getLogger(__name__)

HTML_PARSER = "html.parser"

ChapterInput = str | Tag


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, HTML_PARSER)


def _select_root(doc: BeautifulSoup) -> Tag:
    # Asciidoctor wraps every chapter in div.sect1; otherwise the top-level
    # nodes of the fragment are the chapter's children.
    sect1 = doc.find("div", class_="sect1")
    if isinstance(sect1, Tag):
        return sect1
    return doc


def _is_section_body(node: PageElement) -> bool:
    if not isinstance(node, Tag) or node.name != "div":
        return False
    return "sectionbody" in (node.get("class") or [])


def chapter_children(root: Tag) -> list[PageElement]:
    """Direct children of a chapter root, in document order.

    Asciidoctor puts a level-1 section's blocks inside ``div.sectionbody``;
    that wrapper is lifted so its blocks sit beside the chapter ``h2``.
    """

    children: list[PageElement] = []
    for child in root.children:
        if _is_section_body(child):
            assert isinstance(child, Tag)
            children.extend(child.contents)
        else:
            children.append(child)
    return children


def load_chapter_root(fragment: ChapterInput | None, chapter_id: str | None = None) -> Tag:
    """Resolve the node whose direct children make up a chapter.

    Accepts an HTML string or an already-parsed bs4 node. A parsed node is
    used as-is unless it is a whole document, in which case the same
    root selection as for strings applies. The returned node is only read.

    Raises:
        InvalidInputError: if the fragment is absent, blank, or contains no
            element at all.
    """

    if fragment is None:
        raise InvalidInputError(chapter_id, "fragment is missing")

    if isinstance(fragment, str):
        if not fragment.strip():
            raise InvalidInputError(chapter_id, "fragment is empty")
        doc = parse_html(fragment)
        if doc.find(True) is None:
            raise InvalidInputError(chapter_id, "fragment contains no elements")
        return _select_root(doc)

    if isinstance(fragment, BeautifulSoup):
        if fragment.find(True) is None:
            raise InvalidInputError(chapter_id, "fragment contains no elements")
        return _select_root(fragment)

    if isinstance(fragment, Tag):
        return fragment

    raise InvalidInputError(chapter_id, f"unsupported fragment type {type(fragment).__name__}")


__all__ = [
    "HTML_PARSER",
    "ChapterInput",
    "chapter_children",
    "load_chapter_root",
    "parse_html",
]
