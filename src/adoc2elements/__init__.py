"""adoc2elements: Asciidoctor chapter HTML -> ordered content elements."""

from __future__ import annotations

__version__ = "0.1.0"

from .ingest.error_handling import ChapterTransformError, InvalidInputError, MalformedNodeError
from .model.content import ChapterElement, ChapterResult, ImageRef
from .model.options import MalformedPolicy, TransformOptions
from .transform.chapter import transform_chapter

__all__ = [
    "ChapterElement",
    "ChapterResult",
    "ChapterTransformError",
    "ImageRef",
    "InvalidInputError",
    "MalformedNodeError",
    "MalformedPolicy",
    "TransformOptions",
    "__version__",
    "transform_chapter",
]
