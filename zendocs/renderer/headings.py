r"""Heading anchors and slug derivation.

Example
-------
>>> from zendocs.renderer.headings import slugify
>>> slugify("Hello <em>World</em>!")
'hello-world'
"""

from __future__ import annotations

import re
import typing as typ
from html import escape
from xml.etree import ElementTree as etree

from zendocs._constants import HEADING_ANCHOR_CLASS
from zendocs.models import HeadingRecord

from .content import InlineContent, InlineFragment, as_inline, strip_tags

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Element = typ.Any
    Markdown = typ.Any

NON_WORD_PATTERN = re.compile(r"\W+")
FALLBACK_SLUG = "section"


def slugify(text: str) -> str:
    """Return a lowercase, hyphen-separated anchor slug for ``text``."""
    plain = strip_tags(text).lower()
    return NON_WORD_PATTERN.sub("-", plain).strip("-")


class Slugger:
    """Hand out slugs that are unique within a single document."""

    def __init__(self) -> None:
        self._used: set[str] = set()

    def claim(self, text: str) -> str:
        """Generate a unique slug, appending numeric suffixes when needed."""
        base = slugify(text) or FALLBACK_SLUG
        candidate = base
        suffix = 2
        while candidate in self._used:
            candidate = f"{base}-{suffix}"
            suffix += 1
        self._used.add(candidate)
        return candidate


class HeadingEmitter:
    """Emit anchored headings and remember them for the document outline."""

    def __init__(self) -> None:
        self._slugger = Slugger()
        self.records: list[HeadingRecord] = []

    def emit(self, content: str | InlineContent, level: int) -> HeadingRecord:
        """Resolve ``content`` to text, claim a slug and record the heading."""
        text = " ".join(as_inline(content).resolve_to_text().split())
        record = HeadingRecord(
            level=min(max(level, 1), 6), text=text, slug=self._slugger.claim(text)
        )
        self.records.append(record)
        return record

    def render(self, content: str | InlineContent, level: int) -> str:
        """Return the HTML for a heading built outside the markdown parser.

        Parameters
        ----------
        content : str or InlineContent
            Heading text or an inline fragment; plain strings are escaped.
        level : int
            Heading level, clamped to 1-6.

        Returns
        -------
        str
            ``<hN id="slug">`` with an anchor link followed by the content.
        """
        inline = as_inline(content)
        record = self.emit(inline, level)
        slug = escape(record.slug, quote=True)
        return (
            f'<h{record.level} id="{slug}">'
            f'<a class="{HEADING_ANCHOR_CLASS}" href="#{slug}"></a>'
            f"{inline.resolve_to_html()}</h{record.level}>"
        )

    def decorate(self, element: Element, md: Markdown | None = None) -> HeadingRecord:
        """Add the id and anchor link to a heading element in place."""
        record = self.emit(InlineFragment(element, md), int(element.tag[1]))
        element.set("id", record.slug)
        anchor = etree.Element(
            "a", {"class": HEADING_ANCHOR_CLASS, "href": f"#{record.slug}"}
        )
        anchor.tail = element.text
        element.text = None
        element.insert(0, anchor)
        return record


__all__ = ["FALLBACK_SLUG", "HeadingEmitter", "Slugger", "slugify"]
