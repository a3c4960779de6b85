"""Shared dataclasses passed between the rendering stages and their callers."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import DEFAULT_DOCUMENT


@dc.dataclass(frozen=True, slots=True)
class DocumentKey:
    """Address of a documentation file within a product.

    Attributes
    ----------
    product : str
        Product identifier, used only for fetch addressing.
    section : str
        Top-level file or folder name; empty values select ``overview.md``.
    subsection : str or None
        Optional file nested below ``section``.
    """

    product: str
    section: str = DEFAULT_DOCUMENT
    subsection: str | None = None

    @property
    def path(self) -> str:
        """Return the product-relative markdown path for this document."""
        parts = [
            part.strip("/") for part in (self.section, self.subsection) if part
        ]
        joined = "/".join(part for part in parts if part) or DEFAULT_DOCUMENT
        if not joined.endswith(".md"):
            joined = f"{joined}.md"
        return joined

    def breadcrumbs(self) -> list[str]:
        """Return human-readable labels for the product and each path segment."""
        crumbs = [self.product.replace("-", " ")]
        if self.path == DEFAULT_DOCUMENT:
            return crumbs
        segments = self.path.split("/")
        for segment in segments[:-1]:
            crumbs.append(segment.replace("-", " "))
        crumbs.append(segments[-1].removesuffix(".md").replace("-", " "))
        return crumbs


@dc.dataclass(frozen=True, slots=True)
class HeadingRecord:
    """Heading metadata extracted while rendering a document."""

    level: int
    text: str
    slug: str

    def as_dict(self) -> dict[str, typ.Any]:
        """Return the JSON-friendly representation used by the UI layer."""
        return {"level": self.level, "text": self.text, "slug": self.slug}


@dc.dataclass(frozen=True, slots=True)
class CodeBlockRecord:
    """Outcome of rendering a single code block.

    Attributes
    ----------
    raw_body : str
        Code text after residual fence markers were removed.
    declared_language : str or None
        Language label written by the author, if any.
    resolved_language : str or None
        Canonical language after alias mapping or content detection.
    highlighted_markup : str
        HTML for the code body (highlighted, escaped, or preformatted diagram).
    is_diagram : bool
        True for ``ascii`` blocks and bodies with box-drawing characters.
    """

    raw_body: str
    declared_language: str | None
    resolved_language: str | None
    highlighted_markup: str
    is_diagram: bool


@dc.dataclass(frozen=True, slots=True)
class RenderResult:
    """HTML plus the metadata collected while rendering one document."""

    html: str
    headings: tuple[HeadingRecord, ...] = ()
    code_blocks: tuple[CodeBlockRecord, ...] = ()
    is_error: bool = False

    def payload(self) -> dict[str, typ.Any]:
        """Return the ``{html, headings}`` mapping handed to the UI layer."""
        return {
            "html": self.html,
            "headings": [heading.as_dict() for heading in self.headings],
        }


@dc.dataclass(frozen=True, slots=True)
class Document:
    """A fetched document and its render result, replaced on every navigation."""

    key: DocumentKey
    raw_text: str | None
    result: RenderResult


__all__ = [
    "CodeBlockRecord",
    "Document",
    "DocumentKey",
    "HeadingRecord",
    "RenderResult",
]
