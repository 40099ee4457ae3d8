"""Chapter fragment -> ordered element sequence.

The transformer walks the direct children of a chapter's root node once, in
document order, classifies each child into a ``NodeKind`` and hands it to the
matching handler. Handlers emit ``ChapterElement`` (and for image blocks an
``ImageRef``) into an accumulator that owns the two position counters.

Only section blocks descend: their heading is demoted by one level and their
remaining children go through the same dispatch table. Nothing else recurses.
Unrecognized children are skipped; malformed ones are skipped or raised
depending on ``TransformOptions.on_malformed``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from bs4 import Tag
from bs4.element import NavigableString, PageElement

from ..ingest.error_handling import ErrorContext, MalformedNodeError
from ..ingest.node_logger import (
    log_chapter_summary,
    log_malformed_node,
    log_node_skipped,
    log_transform_options,
)
from ..model.content import ChapterElement, ChapterResult, ElementTag, ImageRef
from ..model.options import MalformedPolicy, TransformOptions
from ..parser.captions import image_filename, strip_figure_prefix
from ..parser.classify import NodeKind, classify_node, describe_node, section_level
from ..parser.fragment import ChapterInput, chapter_children, load_chapter_root
from .admonition import flatten_admonition
from .headings import demote_heading, find_section_heading

logger = logging.getLogger(__name__)


@dataclass
class _Accumulator:
    """Fold state: the outputs so far plus the next free positions."""

    chapter_id: str
    options: TransformOptions
    elements: list[ChapterElement] = field(default_factory=list)
    images: list[ImageRef] = field(default_factory=list)
    next_element_position: int = 1
    next_image_position: int = 1

    def emit(self, tag: ElementTag, content: str) -> None:
        self.elements.append(ChapterElement(tag, content, self.next_element_position))
        self.next_element_position += 1

    def emit_image(self, filename: str, caption: str) -> None:
        self.images.append(ImageRef(filename, caption, self.next_image_position))
        self.next_image_position += 1


Handler = Callable[[Tag, _Accumulator], None]


def _inner_child(node: Tag, name: str, kind: NodeKind) -> Tag:
    inner = node.find(name)
    if not isinstance(inner, Tag):
        raise MalformedNodeError(kind.value, f"no <{name}> found")
    return inner


def _handle_heading(node: Tag, acc: _Accumulator) -> None:
    # The chapter title was taken from this node before the transform ran.
    return None


def _handle_paragraph(node: Tag, acc: _Accumulator) -> None:
    acc.emit("p", str(_inner_child(node, "p", NodeKind.PARAGRAPH)))


def _handle_table(node: Tag, acc: _Accumulator) -> None:
    acc.emit("table", str(node))


def _handle_listing(node: Tag, acc: _Accumulator) -> None:
    acc.emit("div", str(node))


def _handle_image(node: Tag, acc: _Accumulator) -> None:
    img = node.find("img")
    if not isinstance(img, Tag):
        raise MalformedNodeError(NodeKind.IMAGE.value, "no <img> found")
    src = img.get("src")
    if not isinstance(src, str) or not src.strip():
        raise MalformedNodeError(NodeKind.IMAGE.value, "<img> has no src")

    title = node.find("div", class_="title")
    caption = ""
    if isinstance(title, Tag):
        caption = strip_figure_prefix(title.get_text(), acc.options.figure_label)

    acc.emit("img", src)
    acc.emit_image(image_filename(src), caption)


def _handle_section(node: Tag, acc: _Accumulator) -> None:
    level = section_level(node)
    if level is None:
        raise MalformedNodeError(NodeKind.SECTION.value, "no sectN class found")
    heading = find_section_heading(node, level + 1)

    demoted = demote_heading(heading)
    acc.emit(demoted.name, str(demoted))  # type: ignore[arg-type]
    _visit(node.children, acc, skip=heading)


def _handle_admonition(node: Tag, acc: _Accumulator) -> None:
    acc.emit("div", str(flatten_admonition(node)))


def _handle_ulist(node: Tag, acc: _Accumulator) -> None:
    acc.emit("ul", str(_inner_child(node, "ul", NodeKind.ULIST)))


def _handle_olist(node: Tag, acc: _Accumulator) -> None:
    acc.emit("ol", str(_inner_child(node, "ol", NodeKind.OLIST)))


def _handle_quote(node: Tag, acc: _Accumulator) -> None:
    acc.emit("div", str(node))


_HANDLERS: dict[NodeKind, Handler] = {
    NodeKind.HEADING: _handle_heading,
    NodeKind.PARAGRAPH: _handle_paragraph,
    NodeKind.TABLE: _handle_table,
    NodeKind.LISTING: _handle_listing,
    NodeKind.IMAGE: _handle_image,
    NodeKind.SECTION: _handle_section,
    NodeKind.ADMONITION: _handle_admonition,
    NodeKind.ULIST: _handle_ulist,
    NodeKind.OLIST: _handle_olist,
    NodeKind.QUOTE: _handle_quote,
}


def _is_blank(node: PageElement) -> bool:
    return isinstance(node, NavigableString) and not node.strip()


def _visit(
    children: Iterable[PageElement], acc: _Accumulator, *, skip: Tag | None = None
) -> None:
    for index, child in enumerate(children, start=1):
        if child is skip or _is_blank(child):
            continue

        kind = classify_node(child)
        context = ErrorContext(
            chapter_id=acc.chapter_id,
            source_module=__name__,
            node_kind=kind.value,
            node_index=index,
        )
        if kind is NodeKind.UNRECOGNIZED:
            log_node_skipped(context, describe_node(child))
            continue

        assert isinstance(child, Tag)
        try:
            _HANDLERS[kind](child, acc)
        except MalformedNodeError as exc:
            if exc.chapter_id is not None:
                # Already logged and bound by a nested section visit
                raise
            error = exc.for_chapter(acc.chapter_id)
            log_malformed_node(context, error, acc.options.on_malformed)
            if acc.options.on_malformed is MalformedPolicy.RAISE:
                raise error from exc


def transform_chapter(
    chapter_id: str,
    fragment: ChapterInput | None,
    options: TransformOptions | None = None,
) -> ChapterResult:
    """Turn one chapter's rendered HTML into ordered elements and images.

    Args:
        chapter_id: Identity of the chapter, carried onto the result
        fragment: Chapter HTML string or parsed bs4 node (read-only)
        options: Transform options (defaults: strip "Figure N.", skip malformed)

    Returns:
        ChapterResult with 1-based dense positions for elements and,
        independently, for images

    Raises:
        InvalidInputError: if the fragment is absent or empty
        MalformedNodeError: only with ``MalformedPolicy.RAISE``
    """

    opts = options or TransformOptions()
    log_transform_options(opts)
    root = load_chapter_root(fragment, chapter_id)

    acc = _Accumulator(chapter_id=chapter_id, options=opts)
    _visit(chapter_children(root), acc)

    result = ChapterResult(chapter_id=chapter_id, elements=acc.elements, images=acc.images)
    log_chapter_summary(result)
    return result


__all__ = ["transform_chapter"]
