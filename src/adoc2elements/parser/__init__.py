from __future__ import annotations

__all__ = [
    "ChapterInput",
    "NodeKind",
    "chapter_children",
    "classify_node",
    "heading_level",
    "image_filename",
    "load_chapter_root",
    "parse_html",
    "section_level",
    "strip_figure_prefix",
]

# Re-export primary functions from submodules (explicit alias)
from .captions import image_filename as image_filename
from .captions import strip_figure_prefix as strip_figure_prefix
from .classify import NodeKind as NodeKind
from .classify import classify_node as classify_node
from .classify import heading_level as heading_level
from .classify import section_level as section_level
from .fragment import ChapterInput as ChapterInput
from .fragment import chapter_children as chapter_children
from .fragment import load_chapter_root as load_chapter_root
from .fragment import parse_html as parse_html
