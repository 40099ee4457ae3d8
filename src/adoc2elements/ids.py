from __future__ import annotations

import hashlib
import re
import unicodedata


def slugify(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    replaced = re.sub(r"[^a-z0-9]+", "-", normalized.lower())
    collapsed = re.sub(r"-+", "-", replaced).strip("-")
    return collapsed or "untitled"


def chapter_path(index: int, title: str) -> str:
    """Stable path for the ``index``-th chapter, e.g. ``ch/03-getting-started``."""
    return f"ch/{index:02d}-{slugify(title)}"


def compute_chapter_id(book_id: str, path: str) -> str:
    """Compute a deterministic 16-hex chapter id.

    _id = sha1(<book-id>|<chapter-path>)[:16]
    Re-ingesting the same book yields the same ids, so previous results for a
    chapter can be replaced rather than duplicated.
    """

    seed = f"{book_id}|{path}"
    digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()
    return digest[:16]
