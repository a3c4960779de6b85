"""Structural rendering of normalized markdown into HTML."""

from .code import (
    CodeBlockRenderer,
    Highlighted,
    HighlightResult,
    Unhighlighted,
    highlight_code,
    or_escaped,
)
from .content import InlineContent, InlineFragment, PlainText
from .extension import DocRenderExtension
from .headings import HeadingEmitter, Slugger, slugify
from .structural import StructuralRenderer

__all__ = [
    "CodeBlockRenderer",
    "DocRenderExtension",
    "HeadingEmitter",
    "HighlightResult",
    "Highlighted",
    "InlineContent",
    "InlineFragment",
    "PlainText",
    "Slugger",
    "StructuralRenderer",
    "Unhighlighted",
    "highlight_code",
    "or_escaped",
    "slugify",
]
