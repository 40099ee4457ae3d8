"""JSON serialization for chapter and book results.

This is the hand-off format to whatever persists elements and images:
- Deterministic JSON with sorted keys, so re-running on the same input
  produces byte-identical files
- Chapter results can be read back for re-rendering
- Atomic file writing so a reader never sees a half-replaced chapter
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from adoc2elements.model.content import (
    BookChapter,
    BookResult,
    ChapterElement,
    ChapterResult,
    ImageRef,
)


def _dumps(obj: object, pretty: bool) -> str:
    return json.dumps(
        obj,
        ensure_ascii=False,
        sort_keys=True,
        indent=2 if pretty else None,
    )


def chapter_to_dict(result: ChapterResult) -> dict[str, Any]:
    return asdict(result)


def book_chapter_to_dict(chapter: BookChapter) -> dict[str, Any]:
    fragment = chapter.fragment
    return {
        "chapter_id": chapter.chapter_id,
        "index": fragment.index,
        "title": fragment.title,
        "anchor": fragment.anchor,
        "part": fragment.part.value,
        "element_count": len(chapter.result.elements),
        "image_count": len(chapter.result.images),
    }


def book_to_dict(book: BookResult) -> dict[str, Any]:
    return {
        "book_id": book.book_id,
        "chapters": [book_chapter_to_dict(c) for c in book.chapters],
    }


def result_to_json(result: ChapterResult | BookResult, *, pretty: bool = True) -> str:
    """Serialize a chapter result (full) or a book result (index only)."""
    if isinstance(result, BookResult):
        return _dumps(book_to_dict(result), pretty)
    return _dumps(chapter_to_dict(result), pretty)


def chapter_from_json(text: str) -> ChapterResult:
    """Rebuild a ChapterResult written by ``result_to_json``.

    Raises:
        ValueError: if the text is not a chapter result document
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid chapter JSON: {exc}") from exc

    if not isinstance(data, dict) or "chapter_id" not in data:
        raise ValueError("Invalid chapter JSON: missing 'chapter_id'")

    try:
        elements = [
            ChapterElement(tag=e["tag"], content=e["content"], position=int(e["position"]))
            for e in data.get("elements", [])
        ]
        images = [
            ImageRef(filename=i["filename"], caption=i["caption"], position=int(i["position"]))
            for i in data.get("images", [])
        ]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Invalid chapter JSON: {exc}") from exc

    return ChapterResult(chapter_id=str(data["chapter_id"]), elements=elements, images=images)


def atomic_write_text(path: Path, data: str, *, encoding: str = "utf-8") -> None:
    """Atomically write text to a file by writing to a temp file then replacing.

    Ensures parent directories exist and minimizes risk of partial writes.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile("w", encoding=encoding, dir=str(path.parent), delete=False) as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
        tmp_path = Path(tmp.name)
    os.replace(tmp_path, path)


__all__ = [
    "atomic_write_text",
    "book_to_dict",
    "chapter_from_json",
    "chapter_to_dict",
    "result_to_json",
]
