"""Behaviour tests for rendering loosely written documentation.

The ``render_scenarios.feature`` file walks through the dialects the pipeline
has to cope with: mislabelled fences, headings that need anchors, embedded
scripts and box drawings pasted as prose. Markdown in the feature file uses a
literal ``\\n`` for line breaks.

Usage
-----
Run ``pytest tests/bdd/test_render_scenarios.py -v`` after installing the test
extra (``pip install -e .[test]``). No network access is required.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from zendocs.pipeline import RenderPipeline

if typ.TYPE_CHECKING:
    from zendocs.models import RenderResult

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "render_scenarios.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _result(scenario_state: dict[str, object]) -> RenderResult:
    return typ.cast("RenderResult", scenario_state["result"])


@given(parsers.parse('the markdown "{text}"'))
def given_markdown(scenario_state: dict[str, object], text: str) -> None:
    """Store the markdown under test with escaped newlines expanded."""
    scenario_state["markdown"] = text.replace("\\n", "\n")


@when("I render the document")
def when_render(scenario_state: dict[str, object]) -> None:
    """Render the stored markdown through the full pipeline."""
    markdown = typ.cast("str", scenario_state["markdown"])
    scenario_state["result"] = RenderPipeline().render(markdown)


@then(parsers.parse('the first code block is labelled "{language}"'))
def then_code_label(scenario_state: dict[str, object], language: str) -> None:
    """Check the language label shown in the first code block header."""
    soup = BeautifulSoup(_result(scenario_state).html, "html.parser")
    label = soup.select_one(".code-block .code-language")
    assert label is not None, "expected a code block with a language label"
    assert label.get_text() == language


@then("the first code block contains highlighted tokens")
def then_highlighted(scenario_state: dict[str, object]) -> None:
    """Verify the code body carries Pygments token spans."""
    soup = BeautifulSoup(_result(scenario_state).html, "html.parser")
    code = soup.select_one(".code-block .codehilite code")
    assert code is not None, "expected highlighted code markup"
    assert code.find("span", class_=True) is not None


@then("the first code block is a diagram")
def then_diagram(scenario_state: dict[str, object]) -> None:
    """Verify the block is rendered as a preformatted diagram."""
    result = _result(scenario_state)
    assert result.code_blocks, "expected at least one code block"
    assert result.code_blocks[0].is_diagram
    soup = BeautifulSoup(result.html, "html.parser")
    assert soup.select_one(".code-block.diagram pre.diagram") is not None


@then(parsers.parse('the heading outline is "{slugs}"'))
def then_outline(scenario_state: dict[str, object], slugs: str) -> None:
    """Compare the outline slugs with a comma-separated expectation."""
    expected = [slug.strip() for slug in slugs.split(",")]
    assert [h.slug for h in _result(scenario_state).headings] == expected


@then(parsers.parse('the heading "{slug}" links to itself'))
def then_heading_anchor(scenario_state: dict[str, object], slug: str) -> None:
    """Check the heading id and its anchor link agree."""
    soup = BeautifulSoup(_result(scenario_state).html, "html.parser")
    heading = soup.find(id=slug)
    assert heading is not None, f"expected an element with id {slug!r}"
    anchor = heading.find("a", class_="heading-anchor")
    assert anchor is not None
    assert anchor["href"] == f"#{slug}"


@then(parsers.parse('the HTML does not contain "{fragment}"'))
def then_html_excludes(scenario_state: dict[str, object], fragment: str) -> None:
    """Ensure a fragment was removed from the sanitized output."""
    assert fragment not in _result(scenario_state).html
