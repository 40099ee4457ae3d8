"""Content data structures produced by the chapter transformer and book ingestion."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

ElementTag = Literal["p", "h2", "h3", "h4", "h5", "table", "ul", "ol", "img", "div"]


@dataclass(frozen=True, slots=True)
class ChapterElement:
    tag: ElementTag
    content: str
    position: int  # 1-based


@dataclass(frozen=True, slots=True)
class ImageRef:
    # Basename of the <img> src, e.g. "welcome_aboard.png"
    filename: str
    caption: str
    position: int  # 1-based, counted across images only


@dataclass(slots=True)
class ChapterResult:
    chapter_id: str
    elements: list[ChapterElement] = field(default_factory=list)
    images: list[ImageRef] = field(default_factory=list)


class ChapterPart(Enum):
    """Where a chapter sits in the book."""

    FRONTMATTER = "frontmatter"
    MAINMATTER = "mainmatter"
    BACKMATTER = "backmatter"


@dataclass(frozen=True, slots=True)
class ChapterFragment:
    index: int  # 1-based order in the book
    title: str
    anchor: str
    part: ChapterPart
    html: str


@dataclass(slots=True)
class BookChapter:
    fragment: ChapterFragment
    result: ChapterResult

    @property
    def chapter_id(self) -> str:
        return self.result.chapter_id


@dataclass(slots=True)
class BookResult:
    book_id: str
    chapters: list[BookChapter] = field(default_factory=list)

    def chapters_in(self, part: ChapterPart) -> list[BookChapter]:
        return [c for c in self.chapters if c.fragment.part is part]

    def replace_chapter(self, result: ChapterResult) -> None:
        """Swap in a fresh result for an existing chapter.

        Replace, never merge: the previous elements and images are dropped.
        Raises KeyError if no chapter carries ``result.chapter_id``.
        """

        for chapter in self.chapters:
            if chapter.chapter_id == result.chapter_id:
                chapter.result = result
                return
        raise KeyError(result.chapter_id)
