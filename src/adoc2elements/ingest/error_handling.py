"""Exceptions and error context for chapter transformation.

Per-node problems are raised as ``MalformedNodeError`` by the individual
handlers and absorbed by the dispatch loop according to the configured
``MalformedPolicy``. Only a structurally invalid call (no root node) is
surfaced to the caller as ``InvalidInputError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ErrorContext:
    """Structured context attached to transform log records."""

    chapter_id: str | None = None
    source_module: str | None = None
    node_kind: str | None = None
    node_index: int | None = None  # 1-based index among the visited siblings

    def to_dict(self) -> dict[str, Any]:
        return {
            "chapter_id": self.chapter_id,
            "source_module": self.source_module,
            "node_kind": self.node_kind,
            "node_index": self.node_index,
        }


class ChapterTransformError(Exception):
    """Base class for chapter transformation failures."""

    def __init__(
        self, message: str, chapter_id: str | None = None, cause: Exception | None = None
    ) -> None:
        self.chapter_id = chapter_id
        self.cause = cause
        self._message = message
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)

    def __reduce__(self) -> tuple[Any, ...]:
        # Keep errors raised in worker processes intact across pickling
        return (self.__class__, (self._message, self.chapter_id, self.cause))


class InvalidInputError(ChapterTransformError):
    """The chapter fragment is absent or has no element content."""

    def __init__(self, chapter_id: str | None = None, reason: str | None = None) -> None:
        self.reason = reason
        message = "Invalid chapter input"
        if chapter_id is not None:
            message += f" for chapter {chapter_id}"
        if reason:
            message += f": {reason}"
        super().__init__(message, chapter_id=chapter_id)

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self.chapter_id, self.reason))


class MalformedNodeError(ChapterTransformError):
    """A recognized node is missing a child its rule depends on."""

    def __init__(self, kind: str, reason: str, chapter_id: str | None = None) -> None:
        self.kind = kind
        self.reason = reason
        message = f"Malformed {kind} node"
        if chapter_id is not None:
            message += f" in chapter {chapter_id}"
        message += f": {reason}"
        super().__init__(message, chapter_id=chapter_id)

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self.kind, self.reason, self.chapter_id))

    def for_chapter(self, chapter_id: str) -> MalformedNodeError:
        """Return a copy of this error bound to ``chapter_id``."""
        return MalformedNodeError(self.kind, self.reason, chapter_id=chapter_id)


__all__ = [
    "ChapterTransformError",
    "ErrorContext",
    "InvalidInputError",
    "MalformedNodeError",
]
