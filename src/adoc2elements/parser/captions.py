from __future__ import annotations

import re
from functools import lru_cache


@lru_cache(maxsize=16)
def _figure_prefix_re(label: str) -> re.Pattern[str]:
    # "Figure 1. ", "Figure 12. ", "Figure 3.2. " (case-sensitive label)
    return re.compile(rf"^{re.escape(label)}\s+\d+(?:\.\d+)*\.(?:\s+|$)")


def normalize_caption_text(text: str) -> str:
    """Collapse runs of whitespace (including newlines) and trim."""
    return " ".join((text or "").split())


def strip_figure_prefix(text: str, label: str = "Figure") -> str:
    """Remove a leading ``<label> <number>.`` numbering from a caption.

    - "Figure 1. Welcome aboard!" -> "Welcome aboard!"
    - "Figure 10.2. Nested" -> "Nested"
    - "figure 1. lower" is left alone: the label match is case-sensitive
    - Text without the prefix is returned whitespace-normalized
    """

    caption = normalize_caption_text(text)
    return _figure_prefix_re(label).sub("", caption, count=1)


def image_filename(src: str) -> str:
    """Return the final path segment of an image source.

    Query strings and fragments are dropped on purpose, so for
    ``a/b.png?x=1`` the filename is ``b.png`` rather than the literal last
    segment of the source. Backslashes count as separators.
    """

    path = (src or "").strip()
    path = path.split("#", 1)[0].split("?", 1)[0]
    path = path.replace("\\", "/").rstrip("/")
    return path.rsplit("/", 1)[-1]


__all__ = [
    "image_filename",
    "normalize_caption_text",
    "strip_figure_prefix",
]
