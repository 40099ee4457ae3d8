"""Re-render a transformed chapter as a standalone HTML page."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import BaseLoader, DictLoader, Environment, FileSystemLoader, StrictUndefined

from .model.content import ChapterResult
from .transform.html_wrap import rewrite_img_srcs

DEFAULT_TEMPLATES: dict[str, str] = {
    "page.html": """
<!doctype html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{{ title }}</title>
  </head>
  <body>
    {% if title %}<h1>{{ title }}</h1>{% endif %}
    {% block content %}{% endblock %}
  </body>
</html>
""".strip(),
    "chapter.html": """
{% extends "page.html" %}
{% block content %}
<div class='adoc2elements'>
{{ body|safe }}
</div>
{% endblock %}
""".strip(),
    "image.html": """
<div class="imageblock">
  <div class="content"><img src="{{ src }}" alt="{{ alt }}"></div>
  {% if caption %}<div class="title">{{ caption }}</div>{% endif %}
</div>
""".strip(),
}


@dataclass(frozen=True)
class Templates:
    env: Environment

    def render_image(self, context: dict[str, Any]) -> str:
        tpl = self.env.get_template("image.html")
        return str(tpl.render(**context))

    def render_chapter(self, context: dict[str, Any]) -> str:
        tpl = self.env.get_template("chapter.html")
        return str(tpl.render(**context))


def _make_templates(loader: BaseLoader) -> Templates:
    env = Environment(loader=loader, undefined=StrictUndefined, autoescape=True)
    return Templates(env=env)


def default_templates() -> Templates:
    return _make_templates(DictLoader(DEFAULT_TEMPLATES))


def create_environment(templates_dir: Path) -> Templates:
    return _make_templates(FileSystemLoader(str(templates_dir)))


def write_default_templates(target_dir: Path) -> None:
    target_dir.mkdir(parents=True, exist_ok=True)
    for name, text in DEFAULT_TEMPLATES.items():
        (target_dir / name).write_text(text, encoding="utf-8")


def render_chapter_html(
    result: ChapterResult,
    *,
    title: str = "",
    templates: Templates | None = None,
    image_base_url: str | None = None,
) -> str:
    """Reassemble a chapter's elements, in position order, into one page.

    ``img`` elements are paired with their ImageRef by order and rendered
    with the caption; every other element is emitted as stored.
    """

    tpl = templates or default_templates()
    images = sorted(result.images, key=lambda i: i.position)
    image_iter = iter(images)

    parts: list[str] = []
    for element in sorted(result.elements, key=lambda e: e.position):
        if element.tag == "img":
            ref = next(image_iter, None)
            caption = ref.caption if ref is not None else ""
            alt = caption or (ref.filename if ref is not None else "")
            parts.append(tpl.render_image({"src": element.content, "alt": alt, "caption": caption}))
        else:
            parts.append(element.content)

    body = "\n".join(parts)
    if image_base_url:
        body = rewrite_img_srcs(body, image_base_url)
    return tpl.render_chapter({"title": title, "body": body})


__all__ = [
    "DEFAULT_TEMPLATES",
    "Templates",
    "create_environment",
    "default_templates",
    "render_chapter_html",
    "write_default_templates",
]
