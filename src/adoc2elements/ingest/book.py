"""Book-level ingestion: split a rendered book into chapters and transform each.

This is the job that sits around the chapter transformer. It finds every
top-level section (``div.sect1``) in the rendered document, takes the chapter
title from its ``h2``, assigns a deterministic chapter id and runs
``transform_chapter`` once per chapter, optionally in worker processes.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor
from contextlib import suppress

from bs4 import Tag

from adoc2elements.ids import chapter_path, compute_chapter_id
from adoc2elements.ingest.error_handling import ChapterTransformError, InvalidInputError
from adoc2elements.model.content import (
    BookChapter,
    BookResult,
    ChapterFragment,
    ChapterPart,
    ChapterResult,
)
from adoc2elements.model.options import TransformOptions
from adoc2elements.parser.captions import normalize_caption_text
from adoc2elements.parser.fragment import chapter_children, parse_html
from adoc2elements.transform.chapter import transform_chapter
from adoc2elements.transform.html_wrap import build_tag

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, dict[str, int | str]], None] | None

_NUMBER_PREFIX_RE = re.compile(r"^(?:\d+(?:\.\d+)*\.?|[A-Z]\.)\s+")

_FRONTMATTER_TITLES = frozenset(
    {
        "preface",
        "foreword",
        "dedication",
        "acknowledgements",
        "acknowledgments",
        "introduction",
    }
)
_BACKMATTER_TITLES = frozenset({"index", "colophon", "bibliography", "glossary"})


def _safe_emit(on_progress: ProgressCallback, event: str, payload: dict[str, int | str]) -> None:
    if on_progress is None:
        return
    with suppress(Exception):
        on_progress(event, payload)


def detect_part(title: str, *, seen_mainmatter: bool) -> ChapterPart:
    """Classify a chapter title as front, main or back matter.

    Front matter titles only count before the first main matter chapter; an
    "Introduction" in the middle of a book is an ordinary chapter.
    """

    bare = _NUMBER_PREFIX_RE.sub("", title.strip()).strip().lower()
    if bare.startswith("appendix") or bare in _BACKMATTER_TITLES:
        return ChapterPart.BACKMATTER
    if bare in _FRONTMATTER_TITLES and not seen_mainmatter:
        return ChapterPart.FRONTMATTER
    return ChapterPart.MAINMATTER


def _chapter_markup(section: Tag) -> str:
    return str(build_tag("div", section.attrs, chapter_children(section)))


def split_book(html: str) -> list[ChapterFragment]:
    """Split a rendered book into chapter fragments, in document order.

    Raises:
        InvalidInputError: if ``html`` is blank
    """

    if html is None or not html.strip():
        raise InvalidInputError(reason="book HTML is empty")

    doc = parse_html(html)
    fragments: list[ChapterFragment] = []
    seen_mainmatter = False
    for index, section in enumerate(doc.find_all("div", class_="sect1"), start=1):
        heading = section.find("h2", recursive=False)
        title = normalize_caption_text(heading.get_text()) if isinstance(heading, Tag) else ""
        anchor = heading.get("id", "") if isinstance(heading, Tag) else ""
        if not title:
            logger.warning("Chapter %d has no <h2> title", index)

        part = detect_part(title, seen_mainmatter=seen_mainmatter)
        if part is ChapterPart.MAINMATTER:
            seen_mainmatter = True

        fragments.append(
            ChapterFragment(
                index=index,
                title=title,
                anchor=str(anchor),
                part=part,
                html=_chapter_markup(section),
            )
        )

    logger.info("Split book into %d chapters", len(fragments))
    return fragments


def chapter_id_for(book_id: str, fragment: ChapterFragment) -> str:
    return compute_chapter_id(book_id, chapter_path(fragment.index, fragment.title))


def _transform_fragment(
    job: tuple[str, ChapterFragment, TransformOptions | None],
) -> ChapterResult:
    chapter_id, fragment, options = job
    try:
        return transform_chapter(chapter_id, fragment.html, options)
    except ChapterTransformError:
        raise
    except Exception as exc:
        raise ChapterTransformError(
            f"Failed to transform chapter {fragment.index} ({fragment.title!r})",
            chapter_id=chapter_id,
            cause=exc,
        ) from exc


def ingest_book(
    html: str,
    book_id: str,
    options: TransformOptions | None = None,
    *,
    workers: int = 1,
    on_progress: ProgressCallback = None,
) -> BookResult:
    """Split ``html`` into chapters and transform each one exactly once.

    With ``workers > 1`` chapters are transformed in a process pool; the
    book result is always in book order.
    """

    if workers < 1:
        raise ValueError("workers must be >= 1")

    fragments = split_book(html)
    _safe_emit(on_progress, "book:start", {"book_id": book_id, "chapters": len(fragments)})

    jobs = [(chapter_id_for(book_id, f), f, options) for f in fragments]
    book = BookResult(book_id=book_id)

    def _collect(fragment: ChapterFragment, result: ChapterResult) -> None:
        book.chapters.append(BookChapter(fragment=fragment, result=result))
        _safe_emit(
            on_progress,
            "chapter:done",
            {
                "chapter_id": result.chapter_id,
                "index": fragment.index,
                "elements": len(result.elements),
                "images": len(result.images),
            },
        )

    if workers == 1 or len(jobs) <= 1:
        for job in jobs:
            _collect(job[1], _transform_fragment(job))
    else:
        logger.info("Transforming %d chapters with %d workers", len(jobs), workers)
        with ProcessPoolExecutor(max_workers=workers) as executor:
            for job, result in zip(jobs, executor.map(_transform_fragment, jobs), strict=True):
                _collect(job[1], result)

    _safe_emit(on_progress, "book:done", {"book_id": book_id, "chapters": len(book.chapters)})
    return book


__all__ = [
    "chapter_id_for",
    "detect_part",
    "ingest_book",
    "split_book",
]
