from __future__ import annotations

import copy
import re
from collections.abc import Iterable, Mapping

from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

from ..parser.fragment import HTML_PARSER


def build_tag(
    name: str,
    attrs: Mapping[str, str | list[str]] | None = None,
    children: Iterable[PageElement] = (),
) -> Tag:
    """Create a detached tag holding copies of ``children``.

    The children are copied, never moved, so the tree they come from is
    left untouched.
    """

    # Multi-valued attributes (class) are joined the way bs4 serializes them
    flat = {
        key: " ".join(value) if isinstance(value, list) else value
        for key, value in (attrs or {}).items()
    }
    factory = BeautifulSoup("", HTML_PARSER)
    tag = factory.new_tag(name, attrs=flat)
    for child in children:
        tag.append(copy.copy(child))
    return tag


def rewrite_img_srcs(html: str, base_url: str) -> str:
    """Prefix relative <img src> values with ``base_url``.

    - ch01/images/a.png -> <base_url>/ch01/images/a.png
    - Leave data:, http(s):, protocol-relative and absolute paths unchanged
    - Handle single/double quotes; avoid double-prefixing
    """

    base = base_url.rstrip("/")

    def _repl(m: re.Match[str]) -> str:
        quote = m.group("q")
        src = m.group("src")
        if src.startswith(("http://", "https://", "data:", "/")):
            return m.group(0)
        if src.startswith(f"{base}/"):
            return m.group(0)
        head = m.group(0)[: m.start("pad") - m.start(0)]
        return f"{head}{base}/{src}{quote}"

    pattern = re.compile(
        r"<img\s+[^>]*src=(?P<q>['\"])(?P<pad>\s*)(?P<src>[^'\"]+)(?P=q)", re.IGNORECASE
    )
    return pattern.sub(_repl, html)


__all__ = ["build_tag", "rewrite_img_srcs"]
