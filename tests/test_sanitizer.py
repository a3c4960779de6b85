"""Property-style tests for the allow-list sanitizer."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from zendocs.sanitizer import ALLOWED_ATTRIBUTES, ALLOWED_TAGS, sanitize

ADVERSARIAL_PAYLOADS = [
    "<script>alert(1)</script>",
    "<SCRIPT>alert(1)</SCRIPT><p>after</p>",
    '<img src="x" onerror="alert(1)">',
    '<a href="javascript:alert(1)">x</a>',
    '<a href="JaVaScRiPt:alert(1)">x</a>',
    '<a href="data:text/html;base64,PHNjcmlwdD4=">x</a>',
    '<div style="color:red" onclick="x()">hi</div>',
    '<iframe src="https://evil.example"></iframe>',
    "<svg><script>alert(1)</script></svg>",
    "<p>ok</p><style>p { display: none }</style>",
    "<object data='x.swf'></object><embed src='x.swf'>",
    "<!-- hidden --><p>visible</p>",
    '<form action="/steal"><input name="q"></form>',
    "<table><tr><td>cell</td></tr></table>",
]


@pytest.mark.parametrize("payload", ADVERSARIAL_PAYLOADS)
def test_output_only_contains_allowed_markup(payload: str) -> None:
    cleaned = sanitize(payload)
    soup = BeautifulSoup(cleaned, "html.parser")
    for tag in soup.find_all(True):
        assert tag.name in ALLOWED_TAGS, f"{tag.name} survived sanitizing {payload!r}"
        assert set(tag.attrs) <= set(ALLOWED_ATTRIBUTES)
        for attr in ("href", "src"):
            value = tag.get(attr, "")
            assert not value.lower().startswith(("javascript:", "data:"))
    assert "alert(1)" not in cleaned


@pytest.mark.parametrize("payload", ADVERSARIAL_PAYLOADS)
def test_sanitize_is_idempotent(payload: str) -> None:
    once = sanitize(payload)
    assert sanitize(once) == once


def test_executable_content_is_removed_entirely() -> None:
    assert sanitize("<p>before</p><script>var a = 1;</script><p>after</p>") == (
        "<p>before</p><p>after</p>"
    )


def test_disallowed_tags_keep_their_text() -> None:
    assert sanitize("<p>a <u>b</u> <sup>c</sup></p>") == "<p>a b c</p>"


def test_allowed_markup_passes_through() -> None:
    html = (
        '<h2 id="setup"><a class="heading-anchor" href="#setup"></a>Setup</h2>'
        '<p><a href="https://example.com" title="site">link</a> '
        '<a href="mailto:team@example.com">mail</a></p>'
    )
    assert sanitize(html) == html


def test_code_block_markup_survives() -> None:
    html = (
        '<div class="code-block language-sql"><div class="code-header">'
        '<span class="code-language">sql</span>'
        '<button class="copy-button"></button></div>'
        '<div class="codehilite"><pre><span></span><code>'
        '<span class="k">SELECT</span> 1;\n</code></pre></div></div>'
    )
    assert sanitize(html) == html


def test_empty_input() -> None:
    assert sanitize("") == ""
