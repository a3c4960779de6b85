"""Inline content handed to the heading and code emitters.

Python-Markdown gives tree processors an :class:`~xml.etree.ElementTree.Element`
whose text may hold stash placeholders and escaped characters, while callers
outside the parser pass plain strings. Both shapes are modelled as a small tagged
union so the emitters resolve them the same way.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape, unescape

from markdown.serializers import to_html_string
from markdown.util import HTML_PLACEHOLDER_RE

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Element = typ.Any
    Markdown = typ.Any

TAG_PATTERN = re.compile(r"<[^>]*>")
ESCAPED_CHAR_PATTERN = re.compile("\x02(\\d+)\x03")
OUTER_TAG_PATTERN = re.compile(r"^<[^>]+>(?P<inner>.*)</[^>]+>$", re.DOTALL)


def strip_tags(text: str) -> str:
    """Remove HTML tags and decode entities, returning plain text."""
    return unescape(TAG_PATTERN.sub("", text))


@dc.dataclass(frozen=True, slots=True)
class PlainText:
    """Inline content supplied as a plain string."""

    text: str

    def resolve_to_text(self) -> str:
        """Return the text with any HTML stripped."""
        return strip_tags(self.text)

    def resolve_to_html(self) -> str:
        """Return the text escaped for inclusion in an HTML element."""
        return escape(self.text, quote=False)


@dc.dataclass(frozen=True, slots=True)
class InlineFragment:
    """Inline content supplied as an already parsed Python-Markdown element."""

    element: Element
    md: Markdown | None = None

    def resolve_to_text(self) -> str:
        """Return the element's text with stashed HTML and escapes resolved."""
        text = "".join(self.element.itertext())
        text = self._unstash(text)
        text = ESCAPED_CHAR_PATTERN.sub(lambda match: chr(int(match.group(1))), text)
        return strip_tags(text)

    def resolve_to_html(self) -> str:
        """Return the serialized children of the element."""
        serialized = to_html_string(self.element)
        match = OUTER_TAG_PATTERN.match(serialized)
        inner = match.group("inner") if match else serialized
        return self._unstash(inner)

    def _unstash(self, text: str) -> str:
        if self.md is None:
            return text
        blocks = self.md.htmlStash.rawHtmlBlocks

        def _replace(match: re.Match[str]) -> str:
            index = int(match.group(1))
            return str(blocks[index]) if index < len(blocks) else ""

        return HTML_PLACEHOLDER_RE.sub(_replace, text)


InlineContent = PlainText | InlineFragment


def as_inline(value: str | InlineContent) -> InlineContent:
    """Wrap plain strings so emitters only ever deal with the union."""
    if isinstance(value, str):
        return PlainText(value)
    return value


__all__ = [
    "InlineContent",
    "InlineFragment",
    "PlainText",
    "as_inline",
    "strip_tags",
]
