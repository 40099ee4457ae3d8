import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


def chapter_html(inner: str) -> str:
    """Wrap block markup in the div.sect1 an Asciidoctor chapter lives in."""
    return f'<div class="sect1">\n{inner}\n</div>'


@pytest.fixture
def sample_chapter() -> str:
    """A chapter exercising every block kind the transformer knows."""
    return chapter_html(
        """<h2 id="_chapter_1">1. Chapter 1</h2>
<div class="paragraph"><p>Opening paragraph</p></div>
<div class="imageblock">
<div class="content"><img src="ch01/images/welcome_aboard.png" alt="welcome aboard"></div>
<div class="title">Figure 1. Welcome aboard!</div>
</div>
<div class="sect2">
<h3 id="_first_steps">First steps</h3>
<div class="paragraph"><p>Inside a sect2</p></div>
<div class="imageblock">
<div class="content"><img src="ch01/images/rails.png" alt="rails"></div>
</div>
</div>
<div class="ulist"><ul><li><p>Item 1</p></li></ul></div>
<!-- a comment -->
<div class="unknownblock"><p>ignored</p></div>
<table><tr><td>A table.</td></tr></table>
<div class="imageblock">
<div class="content"><img src="ch01/images/deep/last.jpg" alt="last"></div>
<div class="title">Figure 2. The end</div>
</div>"""
    )


@pytest.fixture
def sample_book() -> str:
    """A small Asciidoctor book body with preface, two chapters and an appendix."""
    return """<div id="content">
<div class="sect1">
<h2 id="_preface">Preface</h2>
<div class="sectionbody">
<div class="paragraph"><p>Why this book.</p></div>
</div>
</div>
<div class="sect1">
<h2 id="_chapter_1">1. Getting started</h2>
<div class="sectionbody">
<div class="paragraph"><p>First chapter.</p></div>
<div class="sect2">
<h3 id="_install">1.1. Install</h3>
<div class="paragraph"><p>Install it.</p></div>
</div>
</div>
</div>
<div class="sect1">
<h2 id="_chapter_2">2. Images</h2>
<div class="sectionbody">
<div class="imageblock">
<div class="content"><img src="ch02/images/diagram.png" alt="diagram"></div>
<div class="title">Figure 1. A diagram</div>
</div>
</div>
</div>
<div class="sect1">
<h2 id="_appendix_a">Appendix A: Reference</h2>
<div class="sectionbody">
<div class="olist arabic"><ol><li><p>One</p></li></ol></div>
</div>
</div>
</div>"""
