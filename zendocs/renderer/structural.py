"""Markdown-to-HTML conversion for normalized documentation text."""

from __future__ import annotations

from markdown import Markdown

from zendocs.config import RendererConfig
from zendocs.models import RenderResult

from .code import CodeBlockRenderer
from .extension import DocRenderExtension


class StructuralRenderer:
    """Render canonical markdown with anchored headings and code blocks."""

    def __init__(self, config: RendererConfig | None = None) -> None:
        """Initialize a renderer from an explicit configuration.

        Parameters
        ----------
        config : RendererConfig, optional
            Pygments style and language aliases; defaults to
            :class:`~zendocs.config.RendererConfig` when omitted.
        """
        self.config = config or RendererConfig()
        self.code_renderer = CodeBlockRenderer(self.config)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self.code_renderer.stylesheet

    def render(self, text: str) -> RenderResult:
        """Convert ``text`` into unsanitized HTML plus outline metadata.

        Parameters
        ----------
        text : str
            Markdown produced by the normalizer. Empty or whitespace-only input
            renders to an empty result.

        Returns
        -------
        RenderResult
            HTML with ``code-block`` wrappers and anchored headings, the heading
            records in document order, and one record per code block.
        """
        if not text.strip():
            return RenderResult(html="")
        extension = DocRenderExtension(self.code_renderer)
        md = Markdown(extensions=[extension, "sane_lists"], output_format="html")
        html = md.convert(text)
        return RenderResult(
            html=html,
            headings=tuple(extension.headings.records),
            code_blocks=tuple(extension.code_blocks),
        )


__all__ = ["StructuralRenderer"]
