from __future__ import annotations

import copy

from bs4 import Tag

from ..ingest.error_handling import MalformedNodeError
from ..parser.classify import heading_level

MIN_SOURCE_LEVEL = 2
MAX_SOURCE_LEVEL = 6


def demoted_level(level: int) -> int:
    """Output level for a heading rendered at ``level`` in the source.

    The document title consumes level 1 upstream, so every nested section
    heading moves up by exactly one.
    """

    if not MIN_SOURCE_LEVEL <= level <= MAX_SOURCE_LEVEL:
        raise MalformedNodeError("heading", f"cannot demote heading level {level}")
    return level - 1


def demote_heading(node: Tag) -> Tag:
    """Return a new heading one level shallower than ``node``.

    Only the tag name changes: attributes keep their source order and the
    inner markup is copied. ``node`` is not modified.
    """

    level = heading_level(node)
    if level is None:
        raise MalformedNodeError("heading", f"<{node.name}> is not a heading")
    demoted = copy.copy(node)
    demoted.name = f"h{demoted_level(level)}"
    return demoted


def find_section_heading(section: Tag, expected_level: int) -> Tag:
    """Return the direct child heading of a section block.

    ``expected_level`` is the source heading level for the section depth
    (sect2 -> h3, sect3 -> h4, ...).
    """

    for child in section.children:
        if heading_level(child) == expected_level:
            assert isinstance(child, Tag)
            return child
    raise MalformedNodeError("section", f"no <h{expected_level}> heading found")


__all__ = [
    "demote_heading",
    "demoted_level",
    "find_section_heading",
]
