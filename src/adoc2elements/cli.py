"""CLI interface for adoc2elements."""

from pathlib import Path
from typing import Annotated

import typer

from adoc2elements import __version__
from adoc2elements.ids import slugify
from adoc2elements.ingest.book import ingest_book
from adoc2elements.ingest.error_handling import ChapterTransformError
from adoc2elements.ingest.json_io import atomic_write_text, chapter_from_json, result_to_json
from adoc2elements.model.content import ChapterPart
from adoc2elements.model.options import TransformOptions
from adoc2elements.templating import render_chapter_html
from adoc2elements.transform.chapter import transform_chapter

app = typer.Typer(
    name="adoc2elements",
    help="Turn Asciidoctor-rendered chapters into ordered content elements and image records.",
    no_args_is_help=True,
)

HtmlFile = Annotated[
    Path,
    typer.Argument(
        help="Path to the rendered HTML file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
]


def _build_options(figure_label: str, on_malformed: str) -> TransformOptions:
    try:
        return TransformOptions.from_cli(figure_label=figure_label, on_malformed=on_malformed)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


@app.command()
def chapter(
    html_file: HtmlFile,
    chapter_id: Annotated[
        str,
        typer.Option("--chapter-id", help="Identifier carried onto the chapter result."),
    ],
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write JSON here instead of printing it."),
    ] = None,
    figure_label: Annotated[
        str,
        typer.Option("--figure-label", help="Caption numbering label to strip (default: Figure)"),
    ] = "Figure",
    on_malformed: Annotated[
        str,
        typer.Option("--on-malformed", help="Malformed node handling: 'skip' or 'raise'"),
    ] = "skip",
    compact: Annotated[
        bool,
        typer.Option("--compact/--pretty", help="Compact JSON output (default: pretty)"),
    ] = False,
) -> None:
    """
    Transform one chapter fragment into elements and images.

    Examples:

        adoc2elements chapter ch01.html --chapter-id ch01

        adoc2elements chapter ch01.html --chapter-id ch01 --out ch01.json --on-malformed raise
    """
    options = _build_options(figure_label, on_malformed)
    html = html_file.read_text(encoding="utf-8")

    try:
        result = transform_chapter(chapter_id, html, options)
    except ChapterTransformError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    text = result_to_json(result, pretty=not compact)
    if out is None:
        typer.echo(text)
        return

    atomic_write_text(out, text + "\n")
    typer.echo(
        f"✅ Wrote {len(result.elements)} elements and {len(result.images)} images to {out}"
    )


@app.command()
def book(
    html_file: HtmlFile,
    book_id: Annotated[
        str,
        typer.Option("--book-id", help="Book identifier used to derive chapter ids."),
    ],
    out_dir: Annotated[
        Path,
        typer.Option("--out-dir", help="Output directory (default: dist/<book-id>)"),
    ] = Path("dist"),
    workers: Annotated[
        int,
        typer.Option("--workers", min=1, help="Worker processes for chapter transforms."),
    ] = 1,
    figure_label: Annotated[
        str,
        typer.Option("--figure-label", help="Caption numbering label to strip (default: Figure)"),
    ] = "Figure",
    on_malformed: Annotated[
        str,
        typer.Option("--on-malformed", help="Malformed node handling: 'skip' or 'raise'"),
    ] = "skip",
) -> None:
    """
    Split a rendered book into chapters and transform every chapter.

    Writes one JSON file per chapter (replacing any previous file for that
    chapter) plus a book.json index. Chapter files left over from an earlier
    run that no longer match a chapter are removed.
    """
    options = _build_options(figure_label, on_malformed)
    html = html_file.read_text(encoding="utf-8")

    def _emit(event: str, payload: dict[str, int | str]) -> None:
        if event == "chapter:done":
            typer.echo(
                f"📖 Chapter {payload['index']}: "
                f"{payload['elements']} elements, {payload['images']} images"
            )

    try:
        result = ingest_book(html, book_id, options, workers=workers, on_progress=_emit)
    except ChapterTransformError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    book_dir = out_dir / slugify(book_id)
    chapters_dir = book_dir / "chapters"
    written: set[Path] = set()
    for entry in result.chapters:
        out_file = chapters_dir / f"{entry.fragment.index:03d}-{entry.chapter_id}.json"
        atomic_write_text(out_file, result_to_json(entry.result) + "\n")
        written.add(out_file)
    atomic_write_text(book_dir / "book.json", result_to_json(result) + "\n")

    # Chapters renamed or removed since the last run
    for stale in sorted(chapters_dir.glob("*.json")):
        if stale not in written:
            stale.unlink()
            typer.echo(f"🗑️  Removed stale chapter file {stale.name}")

    parts = ", ".join(f"{len(result.chapters_in(part))} {part.value}" for part in ChapterPart)
    typer.echo(f"\n✅ Wrote {len(result.chapters)} chapters ({parts}) to {book_dir}")


@app.command()
def render(
    json_file: Annotated[
        Path,
        typer.Argument(
            help="Chapter JSON written by the 'chapter' or 'book' command",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write HTML here instead of printing it."),
    ] = None,
    title: Annotated[str, typer.Option("--title", help="Page title")] = "",
    image_base_url: Annotated[
        str | None,
        typer.Option("--image-base-url", help="Prefix for relative image sources"),
    ] = None,
) -> None:
    """Render a transformed chapter back into an HTML page."""
    try:
        result = chapter_from_json(json_file.read_text(encoding="utf-8"))
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    html = render_chapter_html(result, title=title, image_base_url=image_base_url)
    if out is None:
        typer.echo(html)
        return
    atomic_write_text(out, html + "\n")
    typer.echo(f"✅ Rendered chapter {result.chapter_id} to {out}")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"adoc2elements version {__version__}")


def version_callback(value: bool) -> None:
    """Version callback for --version flag."""
    if value:
        typer.echo(f"adoc2elements version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """
    adoc2elements - Turn Asciidoctor HTML chapters into ordered content elements.

    Each chapter (a div.sect1) becomes a list of typed elements (paragraphs,
    demoted headings, lists, tables, listings, admonitions, quotes, images)
    with 1-based positions, plus image records carrying filename and caption.

    For detailed usage, run: adoc2elements chapter --help
    """
    pass


if __name__ == "__main__":  # pragma: no cover - executed only via `python -m`
    app()
