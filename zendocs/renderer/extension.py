"""Python-Markdown hooks that replace heading and code emission.

The extension is created per conversion and owns the state collected during it
(heading records, code block records), so no renderer configuration or outline
data is shared between documents.
"""

from __future__ import annotations

import typing as typ
from xml.etree import ElementTree as etree

from markdown.extensions import Extension
from markdown.inlinepatterns import SimpleTagInlineProcessor
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import HTML_PLACEHOLDER_RE, AtomicString

from zendocs._constants import INLINE_CODE_CLASS
from zendocs.fences import FENCE_PATTERN

from .content import InlineFragment
from .headings import HeadingEmitter

if typ.TYPE_CHECKING:
    import re
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from zendocs.models import CodeBlockRecord

    from .code import CodeBlockRenderer
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
STRIKETHROUGH_RE = r"(~{2})(.+?)\1"


class DocRenderExtension(Extension):
    """Register the fenced-code, heading and inline-code overrides."""

    def __init__(self, code_renderer: CodeBlockRenderer) -> None:
        super().__init__()
        self.code_renderer = code_renderer
        self.headings = HeadingEmitter()
        self.code_blocks: list[CodeBlockRecord] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the processors on the Markdown instance."""
        md.preprocessors.register(FencedCodePreprocessor(md, self), "zendocs_fences", 25)
        md.treeprocessors.register(DocTreeprocessor(md, self), "zendocs_tree", 5)
        md.inlinePatterns.register(
            SimpleTagInlineProcessor(STRIKETHROUGH_RE, "del"), "zendocs_del", 65
        )

    def render_code(
        self,
        body: str | InlineFragment,
        language: str | None,
        *,
        fence_length: int = 3,
    ) -> str:
        """Render a code block, record it, and return its HTML."""
        html, record = self.code_renderer.render(
            body, language, fence_length=fence_length
        )
        self.code_blocks.append(record)
        return html


class FencedCodePreprocessor(Preprocessor):
    """Swap fenced blocks for stashed, fully rendered code-block HTML."""

    def __init__(self, md: Markdown, extension: DocRenderExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, lines: list[str]) -> list[str]:
        """Replace each fence in ``lines`` with a raw-HTML placeholder."""
        text = "\n".join(lines)

        def _stash(match: re.Match[str]) -> str:
            indent = match.group("indent")
            fence = match.group("fence")
            body = _dedent(match.group("body"), len(indent))
            html = self.extension.render_code(
                body, match.group("language") or None, fence_length=len(fence)
            )
            placeholder = self.md.htmlStash.store(html)
            return f"\n\n{indent}{placeholder}\n\n"

        return FENCE_PATTERN.sub(_stash, text).split("\n")


class DocTreeprocessor(Treeprocessor):
    """Anchor headings and route indented and inline code through the renderer."""

    def __init__(self, md: Markdown, extension: DocRenderExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, root: Element) -> Element:
        """Rewrite headings, ``pre`` blocks and inline ``code`` in document order."""
        headings = [element for element in root.iter() if element.tag in HEADING_TAGS]
        for element in headings:
            self.extension.headings.decorate(element, self.md)

        code_parents = [
            (parent, child)
            for parent in root.iter()
            for child in parent
            if child.tag == "pre"
        ]
        for parent, pre in code_parents:
            self._replace_pre(parent, pre)

        for element in root.iter("code"):
            self._mark_inline(element)
        return root

    def _replace_pre(self, parent: Element, pre: Element) -> None:
        """Replace an indented ``<pre><code>`` block with rendered block HTML."""
        code = pre.find("code")
        source = code if code is not None else pre
        holder = etree.Element("p")
        stashed = (source.text or "").strip()
        if HTML_PLACEHOLDER_RE.fullmatch(stashed):
            # an indented fence, already rendered by the preprocessor
            holder.text = stashed
        else:
            html = self.extension.render_code(InlineFragment(source, self.md), None)
            holder.text = self.md.htmlStash.store(html)
        holder.tail = pre.tail
        index = list(parent).index(pre)
        parent.remove(pre)
        parent.insert(index, holder)

    def _mark_inline(self, element: Element) -> None:
        """Pass inline code text through unhighlighted, tagged for styling."""
        text = InlineFragment(element, self.md).resolve_to_text()
        for child in list(element):
            element.remove(child)
        element.text = AtomicString(text)
        element.set("class", INLINE_CODE_CLASS)


def _dedent(body: str, width: int) -> str:
    """Remove up to ``width`` leading spaces from every line of ``body``."""
    if width <= 0:
        return body
    lines = body.split("\n")
    trimmed = []
    for line in lines:
        strip = len(line) - len(line.lstrip(" "))
        trimmed.append(line[min(strip, width) :])
    return "\n".join(trimmed)


__all__ = [
    "DocRenderExtension",
    "DocTreeprocessor",
    "FencedCodePreprocessor",
]
