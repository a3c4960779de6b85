"""Tests for the ``zendocs`` CLI commands.

The command functions are called directly so the tests exercise option
handling and output formats without going through process exit handling.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from zendocs import cli


def _write_doc(root: Path, relative: str, body: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


def test_convert_prints_sanitized_fragment(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write_doc(tmp_path, "page.md", "# Title\n\n<script>x()</script>\n")
    cli.convert(source, config=tmp_path / "absent.yaml")
    out = capsys.readouterr().out
    soup = BeautifulSoup(out, "html.parser")
    assert soup.find("h1")["id"] == "title"
    assert "<script" not in out


def test_convert_writes_json_payload(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write_doc(tmp_path, "page.md", "# One\n\n## Two\n")
    output = tmp_path / "out" / "page.json"
    cli.convert(
        source,
        config=tmp_path / "absent.yaml",
        output=output,
        output_format="json",
    )
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert [h["slug"] for h in payload["headings"]] == ["one", "two"]
    assert "<h2" in payload["html"]
    assert "wrote" in capsys.readouterr().out


def test_convert_missing_source_renders_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.convert(tmp_path / "missing.md", config=tmp_path / "absent.yaml")
    assert "Error loading documentation content" in capsys.readouterr().out


def test_render_standalone_page_from_local_tree(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_doc(
        tmp_path,
        "docs/documentation/rfid/setup/install-guide.md",
        "# Install\n\n```pgsql\nSELECT 1;\n```\n",
    )
    config = _write_doc(tmp_path, "zendocs.yaml", "source:\n  docs_root: docs\n")
    cli.render("rfid", "setup", "install-guide", config=config, standalone=True)
    out = capsys.readouterr().out
    page = BeautifulSoup(out, "html.parser")
    assert page.find("title").get_text() == "rfid / setup / install guide"
    crumbs = [span.get_text() for span in page.select(".doc-breadcrumbs > span")]
    assert [c for c in crumbs if c != "/"] == ["rfid", "setup", "install guide"]
    assert page.select_one(".doc-toc a")["href"] == "#install"
    assert ".codehilite" in out.split("</style>")[0]
    assert page.select_one("main .code-block .code-language").get_text() == "sql"


def test_render_defaults_to_overview(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_doc(tmp_path, "docs/documentation/rfid/overview.md", "# Overview\n")
    config = _write_doc(tmp_path, "zendocs.yaml", "source:\n  docs_root: docs\n")
    cli.render("rfid", config=config)
    assert 'id="overview"' in capsys.readouterr().out


def test_render_requires_config(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        cli.render("rfid", config=tmp_path / "absent.yaml")


def test_stylesheet_honours_style_override(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output = tmp_path / "pygments.css"
    cli.stylesheet(style="default", config=tmp_path / "absent.yaml", output=output)
    css = output.read_text(encoding="utf-8")
    assert ".codehilite" in css
    assert "wrote" in capsys.readouterr().out
