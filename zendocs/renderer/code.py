"""Render code blocks with Pygments, diagram detection and copy affordances."""

from __future__ import annotations

import dataclasses as dc
import logging
import re
from html import escape

from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from zendocs._constants import (
    BOX_DRAWING_CHARS,
    CODE_BLOCK_CLASS,
    CODE_HEADER_CLASS,
    CODE_LANGUAGE_CLASS,
    COPY_BUTTON_CLASS,
    CREATE_TABLE_KEYWORDS,
    DIAGRAM_CLASS,
    HIGHLIGHT_CSS_CLASS,
)
from zendocs.config import RendererConfig
from zendocs.models import CodeBlockRecord

from .content import InlineContent, PlainText

logger = logging.getLogger(__name__)

BOX_DRAWING_PATTERN = re.compile(BOX_DRAWING_CHARS)
SQL_BODY_PATTERN = re.compile(rf"^\s*{CREATE_TABLE_KEYWORDS}", re.IGNORECASE)
JSON_BODY_PATTERN = re.compile(r'^\s*\{\s*"[^"\n]*"\s*:')
LEADING_FENCE_PATTERN = re.compile(r"\A[ \t]*(?P<fence>`{3,})[^`\n]*\n")
TRAILING_FENCE_PATTERN = re.compile(r"\n?[ \t]*(?P<fence>`{3,})[ \t]*\n?\Z")
FENCE_MARKER_PATTERN = re.compile(r"^[ \t]*`{3,}[^`\n]*$", re.MULTILINE)
DIAGRAM_LANGUAGE = "ascii"


@dc.dataclass(frozen=True, slots=True)
class Highlighted:
    """Pygments markup for a successfully highlighted block."""

    markup: str


@dc.dataclass(frozen=True, slots=True)
class Unhighlighted:
    """Source that could not be highlighted, with the reason why."""

    source: str
    reason: str


HighlightResult = Highlighted | Unhighlighted


def or_escaped(result: HighlightResult) -> str:
    """Return highlighted markup, or the escaped source wrapped like Pygments output."""
    match result:
        case Highlighted(markup=markup):
            return markup
        case Unhighlighted(source=source, reason=reason):
            logger.debug("rendering code without highlighting: %s", reason)
            return (
                f'<div class="{HIGHLIGHT_CSS_CLASS}"><pre><code>'
                f"{escape(source, quote=True)}</code></pre></div>\n"
            )
    msg = f"unexpected highlight result {result!r}"
    raise TypeError(msg)


def highlight_code(
    code: str, language: str | None, formatter: HtmlFormatter
) -> HighlightResult:
    """Highlight ``code`` as ``language``, never raising.

    Parameters
    ----------
    code : str
        Source snippet to highlight.
    language : str, optional
        Pygments lexer name; ``None`` yields an unhighlighted result.
    formatter : HtmlFormatter
        Formatter configured with the renderer's style.

    Returns
    -------
    HighlightResult
        :class:`Highlighted` on success, otherwise :class:`Unhighlighted`
        carrying the original source.
    """
    if not language:
        return Unhighlighted(code, "no language")
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        return Unhighlighted(code, f"no lexer for {language!r}")
    try:
        return Highlighted(highlight(code, lexer, formatter))
    except Exception as exc:  # noqa: BLE001 - every highlighter failure degrades
        return Unhighlighted(code, f"{type(exc).__name__}: {exc}")


def resolve_body(body: str | InlineContent) -> str:
    """Return the literal code text for a string or a parsed token."""
    match body:
        case str():
            return body
        case PlainText(text=text):
            return text
        case _:
            return body.resolve_to_text()


def strip_fence_markers(body: str, fence_length: int = 3) -> str:
    """Drop fence lines that leaked into a code body.

    A leading or trailing marker counts as leaked when it is at least as long
    as the enclosing fence, or when the body's markers do not pair up. Shorter
    paired markers are content, e.g. a markdown sample showing a fence.
    """
    unbalanced = len(FENCE_MARKER_PATTERN.findall(body)) % 2 == 1

    def _leaked(match: re.Match[str]) -> bool:
        return unbalanced or len(match.group("fence")) >= fence_length

    leading = LEADING_FENCE_PATTERN.match(body)
    if leading and _leaked(leading):
        body = body[leading.end() :]
    trailing = TRAILING_FENCE_PATTERN.search(body)
    if body and trailing and _leaked(trailing):
        body = f"{body[: trailing.start()]}\n"
    return body


def detect_language(body: str) -> str | None:
    """Guess ``sql`` or ``json`` for unlabelled blocks."""
    if SQL_BODY_PATTERN.match(body):
        return "sql"
    if JSON_BODY_PATTERN.match(body):
        return "json"
    return None


class CodeBlockRenderer:
    """Render code bodies into the ``code-block`` markup the UI layer expects."""

    def __init__(self, config: RendererConfig | None = None) -> None:
        self.config = config or RendererConfig()
        self._formatter = HtmlFormatter(
            style=self.config.pygments_style,
            cssclass=HIGHLIGHT_CSS_CLASS,
            wrapcode=True,
        )

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")

    def resolve_language(self, body: str, declared: str | None) -> str | None:
        """Return the alias-mapped declared language or a detected one."""
        return self.config.canonical_language(declared) or detect_language(body)

    def render(
        self,
        body: str | InlineContent,
        language: str | None = None,
        *,
        fence_length: int = 3,
    ) -> tuple[str, CodeBlockRecord]:
        """Render a code block and describe what was rendered.

        Parameters
        ----------
        body : str or InlineContent
            Code text, or the token the parser produced for it.
        language : str, optional
            Language label declared by the author.
        fence_length : int, optional
            Backtick count of the enclosing fence; inner fence lines shorter
            than it are kept as content.

        Returns
        -------
        tuple[str, CodeBlockRecord]
            Block HTML and the matching record.
        """
        raw = strip_fence_markers(resolve_body(body), fence_length)
        declared = (language or "").strip() or None
        is_diagram = bool(
            (declared or "").lower() == DIAGRAM_LANGUAGE
            or BOX_DRAWING_PATTERN.search(raw)
        )
        if is_diagram:
            resolved: str | None = DIAGRAM_LANGUAGE
            markup = f'<pre class="{DIAGRAM_CLASS}">{escape(raw, quote=True)}</pre>'
            html = self._wrap(markup, label=DIAGRAM_CLASS, extra_class=DIAGRAM_CLASS)
        else:
            resolved = self.resolve_language(raw, declared)
            markup = or_escaped(highlight_code(raw, resolved, self._formatter))
            extra = f"language-{resolved}" if resolved else None
            html = self._wrap(markup, label=resolved, extra_class=extra)
        record = CodeBlockRecord(
            raw_body=raw,
            declared_language=declared,
            resolved_language=resolved,
            highlighted_markup=markup,
            is_diagram=is_diagram,
        )
        return html, record

    @staticmethod
    def _wrap(markup: str, *, label: str | None, extra_class: str | None) -> str:
        classes = CODE_BLOCK_CLASS
        if extra_class:
            classes = f"{classes} {escape(extra_class, quote=True)}"
        label_html = (
            f'<span class="{CODE_LANGUAGE_CLASS}">{escape(label)}</span>'
            if label
            else ""
        )
        return (
            f'<div class="{classes}">'
            f'<div class="{CODE_HEADER_CLASS}">{label_html}'
            f'<button class="{COPY_BUTTON_CLASS}"></button></div>'
            f"{markup}</div>"
        )


__all__ = [
    "CodeBlockRenderer",
    "HighlightResult",
    "Highlighted",
    "Unhighlighted",
    "detect_language",
    "highlight_code",
    "or_escaped",
    "resolve_body",
    "strip_fence_markers",
]
