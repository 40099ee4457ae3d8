from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from adoc2elements.ingest.error_handling import InvalidInputError, MalformedNodeError
from adoc2elements.model.content import ChapterElement, ImageRef
from adoc2elements.model.options import MalformedPolicy, TransformOptions
from adoc2elements.parser.classify import NodeKind
from adoc2elements.transform.chapter import _HANDLERS, transform_chapter


def _chapter(inner: str) -> str:
    return f'<div class="sect1">\n{inner}\n</div>'


def _elements(inner: str) -> list[ChapterElement]:
    return transform_chapter("ch-test", _chapter(inner)).elements


class TestDispatchRules:
    def test_h2_adds_no_element(self) -> None:
        # Chapter title has already been handled upstream
        assert _elements('<h2 id="_chapter_1">1. Chapter 1</h2>') == []

    def test_table_kept_verbatim(self) -> None:
        content = "<table>\n<tr>\n<td>A table.</td>\n</tr>\n</table>"
        assert _elements(content) == [ChapterElement("table", content, 1)]

    def test_paragraph_unwrapped(self) -> None:
        elements = _elements('<div class="paragraph"><p>Simple paragraph</p></div>')
        assert elements == [ChapterElement("p", "<p>Simple paragraph</p>", 1)]

    def test_listingblock_kept_verbatim(self) -> None:
        content = (
            '<div class="listingblock">\n'
            '<div class="title">book.rb</div>\n'
            '<div class="content">\n'
            '<pre class="highlight"><code class="language-ruby" data-lang="ruby">class Book\n'
            "  attr_reader :title\n"
            "end</code></pre>\n"
            "</div>\n"
            "</div>"
        )
        assert _elements(content) == [ChapterElement("div", content, 1)]

    def test_imageblock(self) -> None:
        result = transform_chapter(
            "ch01",
            _chapter(
                '<div class="imageblock">\n'
                '  <div class="content">\n'
                '    <img src="ch01/images/welcome_aboard.png" alt="welcome aboard">\n'
                "  </div>\n"
                '  <div class="title">\n'
                "    Figure 1. Welcome aboard!\n"
                "  </div>\n"
                "</div>"
            ),
        )

        assert result.elements == [ChapterElement("img", "ch01/images/welcome_aboard.png", 1)]
        assert result.images == [ImageRef("welcome_aboard.png", "Welcome aboard!", 1)]

    def test_imageblock_without_title_has_empty_caption(self) -> None:
        result = transform_chapter(
            "ch01",
            _chapter('<div class="imageblock"><div class="content"><img src="a/b.png"></div></div>'),
        )
        assert result.images == [ImageRef("b.png", "", 1)]

    @pytest.mark.parametrize(
        ("section", "source", "demoted"),
        [("sect2", "h3", "h2"), ("sect3", "h4", "h3"), ("sect4", "h5", "h4")],
    )
    def test_section_heading_demoted(self, section: str, source: str, demoted: str) -> None:
        elements = _elements(
            f'<div class="{section}">\n'
            f"  <{source}>{section} title</{source}>\n"
            '  <div class="paragraph">\n'
            f"    <p>Simple para inside of a {section}</p>\n"
            "  </div>\n"
            "</div>"
        )

        assert elements == [
            ChapterElement(demoted, f"<{demoted}>{section} title</{demoted}>", 1),
            ChapterElement("p", f"<p>Simple para inside of a {section}</p>", 2),
        ]

    def test_section_heading_keeps_attributes(self) -> None:
        elements = _elements('<div class="sect2"><h3 id="_setup">Setup</h3></div>')
        assert elements == [ChapterElement("h2", '<h2 id="_setup">Setup</h2>', 1)]

    def test_deeper_section_levels_follow_same_rule(self) -> None:
        elements = _elements('<div class="sect5"><h6>Deep</h6></div>')
        assert elements == [ChapterElement("h5", "<h5>Deep</h5>", 1)]

    def test_nested_sections_dispatch_through_same_table(self) -> None:
        elements = _elements(
            '<div class="sect2"><h3>Outer</h3>'
            '<div class="paragraph"><p>a</p></div>'
            '<div class="sect3"><h4>Inner</h4><div class="paragraph"><p>b</p></div></div>'
            "</div>"
        )
        assert [(e.tag, e.content) for e in elements] == [
            ("h2", "<h2>Outer</h2>"),
            ("p", "<p>a</p>"),
            ("h3", "<h3>Inner</h3>"),
            ("p", "<p>b</p>"),
        ]

    def test_admonitionblock_drops_table_scaffolding(self) -> None:
        elements = _elements(
            '<div class="admonitionblock note">\n'
            "<table>\n"
            "<tr>\n"
            '<td class="icon">\n'
            '<div class="title">Note</div>\n'
            "</td>\n"
            '<td class="content">\n'
            '<div class="title">This is a note</div>\n'
            '<div class="paragraph">\n'
            "<p>Notes stand out different from the text.</p>\n"
            "</div>\n"
            '<div class="listingblock">\n'
            '<div class="content">\n'
            "<pre>$ rails new rails</pre>\n"
            "</div>\n"
            "</div>\n"
            "</td>\n"
            "</tr>\n"
            "</table>\n"
            "</div>"
        )

        expected = (
            '<div class="admonitionblock note">\n'
            '<div class="title">This is a note</div>\n'
            '<div class="paragraph">\n'
            "<p>Notes stand out different from the text.</p>\n"
            "</div>\n"
            '<div class="listingblock">\n'
            '<div class="content">\n'
            "<pre>$ rails new rails</pre>\n"
            "</div>\n"
            "</div>\n"
            "</div>"
        )
        assert elements == [ChapterElement("div", expected, 1)]
        assert "<table" not in elements[0].content
        assert 'class="icon"' not in elements[0].content

    def test_ulist_unwrapped(self) -> None:
        ul = "<ul>\n<li><p>Item 1</p></li>\n<li><p>Item 2</p></li>\n</ul>"
        elements = _elements(f'<div class="ulist">\n{ul}\n</div>')
        assert elements == [ChapterElement("ul", ul, 1)]

    def test_olist_unwrapped(self) -> None:
        ol = "<ol>\n<li><p>Item 1</p></li>\n<li><p>Item 2</p></li>\n</ol>"
        elements = _elements(f'<div class="olist arabic">\n{ol}\n</div>')
        assert elements == [ChapterElement("ol", ol, 1)]

    def test_quoteblock_kept_verbatim(self) -> None:
        content = (
            '<div class="quoteblock">\n'
            "<blockquote>\n"
            '<div class="paragraph">\n'
            "<p>May the force be with you.</p>\n"
            "</div>\n"
            "</blockquote>\n"
            '<div class="attribution">\n'
            "— Gandalf\n"
            "</div>\n"
            "</div>"
        )
        assert _elements(content) == [ChapterElement("div", content, 1)]

    def test_unrecognized_nodes_skipped(self) -> None:
        elements = _elements(
            "<!-- comment -->\n"
            "stray text\n"
            '<div class="sidebarblock"><p>sidebar</p></div>\n'
            "<h3>orphan heading</h3>\n"
            '<div class="paragraph"><p>kept</p></div>'
        )
        assert elements == [ChapterElement("p", "<p>kept</p>", 1)]

    def test_every_known_kind_has_a_handler(self) -> None:
        known = {k for k in NodeKind if k is not NodeKind.UNRECOGNIZED}
        assert set(_HANDLERS) == known


class TestOrderingProperties:
    def test_positions_dense_and_independent(self, sample_chapter: str) -> None:
        result = transform_chapter("ch01", sample_chapter)

        assert [e.position for e in result.elements] == list(range(1, len(result.elements) + 1))
        assert [i.position for i in result.images] == [1, 2, 3]
        assert [e.tag for e in result.elements] == ["p", "img", "h2", "p", "img", "ul", "table", "img"]

    def test_images_correlate_with_img_elements(self, sample_chapter: str) -> None:
        result = transform_chapter("ch01", sample_chapter)
        img_elements = [e for e in result.elements if e.tag == "img"]

        assert len(img_elements) == len(result.images)
        for element, image in zip(img_elements, result.images, strict=True):
            assert element.content.rsplit("/", 1)[-1] == image.filename
        assert [i.caption for i in result.images] == ["Welcome aboard!", "", "The end"]

    def test_idempotent(self, sample_chapter: str) -> None:
        first = transform_chapter("ch01", sample_chapter)
        second = transform_chapter("ch01", sample_chapter)
        assert first == second

    def test_input_tree_not_mutated(self, sample_chapter: str) -> None:
        soup = BeautifulSoup(sample_chapter, "html.parser")
        before = str(soup)

        transform_chapter("ch01", soup.find("div", class_="sect1"))

        assert str(soup) == before

    def test_admonition_input_not_mutated(self) -> None:
        html = _chapter(
            '<div class="admonitionblock tip"><table><tr>'
            '<td class="icon"><div class="title">Tip</div></td>'
            '<td class="content"><div class="paragraph"><p>x</p></div></td>'
            "</tr></table></div>"
        )
        soup = BeautifulSoup(html, "html.parser")
        before = str(soup)

        result = transform_chapter("ch01", soup)

        assert str(soup) == before
        assert result.elements[0].content == (
            '<div class="admonitionblock tip"><div class="paragraph"><p>x</p></div></div>'
        )

    def test_chapter_id_carried(self) -> None:
        result = transform_chapter("abc123", _chapter('<div class="paragraph"><p>x</p></div>'))
        assert result.chapter_id == "abc123"


class TestInputs:
    def test_fragment_without_sect1_uses_top_level_nodes(self) -> None:
        result = transform_chapter(
            "ch01", '<h2>Title</h2><div class="paragraph"><p>loose</p></div>'
        )
        assert result.elements == [ChapterElement("p", "<p>loose</p>", 1)]

    def test_sectionbody_blocks_are_chapter_children(self) -> None:
        html = (
            '<div class="sect1"><h2 id="_ch">1. Chapter</h2>'
            '<div class="sectionbody">'
            '<div class="paragraph"><p>Body</p></div>'
            '<div class="sect2"><h3>Sub</h3><div class="paragraph"><p>Inner</p></div></div>'
            "</div></div>"
        )

        result = transform_chapter("ch", html)

        assert result.elements == [
            ChapterElement("p", "<p>Body</p>", 1),
            ChapterElement("h2", "<h2>Sub</h2>", 2),
            ChapterElement("p", "<p>Inner</p>", 3),
        ]

    def test_sectionbody_in_parsed_node(self) -> None:
        soup = BeautifulSoup(
            '<div class="sect1"><h2>T</h2><div class="sectionbody">'
            '<div class="ulist"><ul><li>x</li></ul></div></div></div>',
            "html.parser",
        )
        section = soup.find("div", class_="sect1")

        result = transform_chapter("ch", section)

        assert result.elements == [ChapterElement("ul", "<ul><li>x</li></ul>", 1)]
        assert section.find("div", class_="sectionbody") is not None

    @pytest.mark.parametrize("fragment", [None, "", "   \n", "just text"])
    def test_invalid_input_raises(self, fragment: str | None) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            transform_chapter("ch01", fragment)
        assert exc_info.value.chapter_id == "ch01"

    def test_empty_chapter_is_valid(self) -> None:
        result = transform_chapter("ch01", '<div class="sect1"></div>')
        assert result.elements == []
        assert result.images == []


class TestMalformedNodes:
    def test_section_without_heading_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        result = transform_chapter(
            "ch01",
            _chapter(
                '<div class="sect2"><div class="paragraph"><p>orphan</p></div></div>'
                '<div class="paragraph"><p>after</p></div>'
            ),
        )

        assert result.elements == [ChapterElement("p", "<p>after</p>", 1)]
        assert "malformed -> skip" in caplog.text

    def test_imageblock_without_img_skipped(self) -> None:
        result = transform_chapter(
            "ch01",
            _chapter(
                '<div class="imageblock"><div class="title">Figure 1. Lost</div></div>'
                '<div class="imageblock"><img src="x/found.png"></div>'
            ),
        )

        assert result.elements == [ChapterElement("img", "x/found.png", 1)]
        assert result.images == [ImageRef("found.png", "", 1)]

    def test_malformed_child_inside_section_skipped(self) -> None:
        elements = _elements(
            '<div class="sect2"><h3>Title</h3>'
            '<div class="ulist"><p>no list here</p></div>'
            '<div class="paragraph"><p>kept</p></div></div>'
        )
        assert [e.tag for e in elements] == ["h2", "p"]
        assert [e.position for e in elements] == [1, 2]

    def test_admonition_without_content_cell_skipped(self) -> None:
        elements = _elements('<div class="admonitionblock note"><table></table></div>')
        assert elements == []

    def test_raise_policy_surfaces_error(self) -> None:
        options = TransformOptions(on_malformed=MalformedPolicy.RAISE)
        with pytest.raises(MalformedNodeError) as exc_info:
            transform_chapter("ch09", _chapter('<div class="paragraph"></div>'), options)

        assert exc_info.value.chapter_id == "ch09"
        assert exc_info.value.kind == "paragraph"
        assert str(exc_info.value) == "Malformed paragraph node in chapter ch09: no <p> found"

    def test_raise_policy_from_nested_section(self) -> None:
        options = TransformOptions(on_malformed=MalformedPolicy.RAISE)
        with pytest.raises(MalformedNodeError) as exc_info:
            transform_chapter(
                "ch09",
                _chapter('<div class="sect2"><h3>T</h3><div class="olist"></div></div>'),
                options,
            )
        assert exc_info.value.kind == "olist"
        assert exc_info.value.chapter_id == "ch09"


def test_custom_figure_label() -> None:
    result = transform_chapter(
        "ch01",
        _chapter(
            '<div class="imageblock"><img src="bild.png">'
            '<div class="title">Abbildung 3. Karte</div></div>'
        ),
        TransformOptions(figure_label="Abbildung"),
    )
    assert result.images == [ImageRef("bild.png", "Karte", 1)]
