"""End-to-end tests for the render pipeline.

These cover the documented rendering scenarios: alias relabelling with
highlighting, heading anchors, script removal, fetch failures, plus the error
document fallback and the sanitizer's guarantees on whole documents.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_mock import MockerFixture

from zendocs._constants import ERROR_TITLE
from zendocs.errors import FetchFailure
from zendocs.models import DocumentKey
from zendocs.pipeline import RenderPipeline
from zendocs.sanitizer import ALLOWED_ATTRIBUTES, ALLOWED_TAGS, sanitize
from zendocs.sources import LocalDocumentSource

SAMPLE_DOCUMENT = """# Reader API

Purpose: Describe the reader endpoints.

Owner: Platform Team
Status: Stable

```pgsql
SELECT id FROM readers;
```

CREATE TABLE readers (
  id INT
);

{
  "id": 1,
  "name": "front door",
}

┌──────┐
│ door │
└──────┘

Response Structure:
Returns a `Reader` object. See [docs](https://example.com/docs).
"""


@pytest.fixture
def pipeline() -> RenderPipeline:
    """Return a pipeline using the default renderer configuration."""
    return RenderPipeline()


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_mislabelled_sql_fence_is_relabelled_and_highlighted(
    pipeline: RenderPipeline,
) -> None:
    result = pipeline.render("```pgsql\nSELECT 1;\n```")
    soup = _soup(result.html)
    assert soup.select_one(".code-language").get_text() == "sql"
    assert "pgsql" not in result.html
    code = soup.select_one(".codehilite code")
    assert code.find("span", class_=True) is not None
    assert soup.select_one("button.copy-button") is not None


def test_heading_gets_id_anchor_and_outline_entry(pipeline: RenderPipeline) -> None:
    result = pipeline.render("# Hello World")
    heading = _soup(result.html).find("h1")
    assert heading["id"] == "hello-world"
    assert heading.find("a", class_="heading-anchor")["href"] == "#hello-world"
    assert result.payload()["headings"] == [
        {"level": 1, "text": "Hello World", "slug": "hello-world"}
    ]


def test_script_is_removed_with_its_content(pipeline: RenderPipeline) -> None:
    result = pipeline.render("Hello\n\n<script>alert(1)</script>\n\nWorld")
    assert "<script" not in result.html
    assert "alert(1)" not in result.html
    assert "Hello" in result.html
    assert "World" in result.html
    assert not result.is_error


def test_fetch_failure_renders_error_document(pipeline: RenderPipeline) -> None:
    class _MissingSource:
        def fetch_doc_text(self, product_id: str, path: str) -> str:
            raise FetchFailure(product_id, path, "404 Not Found")

    document = pipeline.render_document(_MissingSource(), DocumentKey("rfid", "setup"))
    assert document.raw_text is None
    assert document.result.is_error
    assert ERROR_TITLE in document.result.html
    assert "404 Not Found" in document.result.html


def test_unexpected_source_error_is_contained(pipeline: RenderPipeline) -> None:
    class _BrokenSource:
        def fetch_doc_text(self, product_id: str, path: str) -> str:
            msg = "socket closed"
            raise ConnectionError(msg)

    document = pipeline.render_document(_BrokenSource(), DocumentKey("rfid"))
    assert document.result.is_error
    assert "ConnectionError: socket closed" in document.result.html


def test_render_document_from_local_source(
    pipeline: RenderPipeline, tmp_path: Path
) -> None:
    doc_dir = tmp_path / "documentation" / "rfid" / "setup"
    doc_dir.mkdir(parents=True)
    (doc_dir / "install.md").write_text("# Install\n\nSteps.\n", encoding="utf-8")
    document = pipeline.render_document(
        LocalDocumentSource(tmp_path), DocumentKey("rfid", "setup", "install")
    )
    assert document.raw_text == "# Install\n\nSteps.\n"
    assert document.result.headings[0].slug == "install"


def test_stage_failure_becomes_error_document(
    pipeline: RenderPipeline, mocker: MockerFixture
) -> None:
    mocker.patch.object(pipeline.renderer, "render", side_effect=RuntimeError("boom"))
    result = pipeline.render("# Title")
    assert result.is_error
    assert ERROR_TITLE in result.html
    assert "RuntimeError: boom" in result.html


def test_error_reason_is_escaped(pipeline: RenderPipeline) -> None:
    result = pipeline.render_error("<script>alert(1)</script>")
    assert "<script" not in result.html
    assert "&lt;script&gt;" in result.html


def test_sample_document_renders_every_dialect(pipeline: RenderPipeline) -> None:
    result = pipeline.render(SAMPLE_DOCUMENT)
    soup = _soup(result.html)
    assert [h.slug for h in result.headings] == [
        "reader-api",
        "purpose",
        "response-structure",
    ]
    languages = [record.resolved_language for record in result.code_blocks]
    assert languages == ["sql", "sql", "json", "ascii"]
    owners = [li.get_text() for li in soup.select("ul > li")]
    assert owners == ["Owner: Platform Team", "Status: Stable"]
    assert soup.select_one("ul > li strong").get_text() == "Owner:"
    assert soup.find("a", href="https://example.com/docs") is not None
    assert soup.select_one("code.inline-code").get_text() == "Reader"


def test_rendered_output_only_uses_allowed_markup(pipeline: RenderPipeline) -> None:
    result = pipeline.render(SAMPLE_DOCUMENT)
    for tag in _soup(result.html).find_all(True):
        assert tag.name in ALLOWED_TAGS, f"unexpected tag {tag.name}"
        assert set(tag.attrs) <= set(ALLOWED_ATTRIBUTES), f"unexpected attrs on {tag}"


@pytest.mark.parametrize(
    "text",
    [
        SAMPLE_DOCUMENT,
        "# Title\n\n<img src=x onerror=alert(1)> and [x](javascript:alert(1))",
        "<style>p { color: red }</style>\n\n<iframe src='https://evil'></iframe>",
        "",
    ],
)
def test_rendered_output_is_stable_under_resanitizing(
    pipeline: RenderPipeline, text: str
) -> None:
    html = pipeline.render(text).html
    assert sanitize(html) == html


def test_dangerous_attributes_and_protocols_are_removed(
    pipeline: RenderPipeline,
) -> None:
    result = pipeline.render(
        "# Title\n\n<img src=x onerror=alert(1)> and [x](javascript:alert(1))"
    )
    assert "onerror" not in result.html
    assert "javascript:" not in result.html
    assert _soup(result.html).find("img")["src"] == "x"


def test_normalize_is_exposed_for_debugging(pipeline: RenderPipeline) -> None:
    assert pipeline.normalize("```js\nx\n```") == "```javascript\nx\n```"
