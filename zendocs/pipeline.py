"""Sequence the rendering stages for one document.

:class:`RenderPipeline` is the only entry point the UI layer needs: it collapses
doubled fences, protects fences, normalizes prose, restores fences, renders the
markdown and sanitizes the result. It never raises; any failure becomes a
labelled error document so the page always has something safe to show.

Example
-------
>>> from zendocs.pipeline import RenderPipeline
>>> result = RenderPipeline().render("# Hello World")
>>> result.headings[0].slug
'hello-world'
"""

from __future__ import annotations

import logging
import typing as typ
from html import escape

from ._constants import ERROR_TITLE
from .config import RendererConfig
from .errors import FetchFailure
from .models import Document, DocumentKey, RenderResult
from .normalizer import HeuristicNormalizer
from .renderer import StructuralRenderer
from .sanitizer import sanitize

if typ.TYPE_CHECKING:
    from .sources import DocumentSource

logger = logging.getLogger(__name__)


class RenderPipeline:
    """Render raw documentation text into sanitized HTML and headings."""

    def __init__(self, config: RendererConfig | None = None) -> None:
        """Initialize the stages from one explicit configuration object.

        Parameters
        ----------
        config : RendererConfig, optional
            Shared settings for the normalizer and renderer; defaults to
            :class:`~zendocs.config.RendererConfig`.
        """
        self.config = config or RendererConfig()
        self.normalizer = HeuristicNormalizer(self.config)
        self.renderer = StructuralRenderer(self.config)

    @property
    def stylesheet(self) -> str:
        """Return the Pygments CSS matching the rendered code blocks."""
        return self.renderer.stylesheet

    def normalize(self, text: str) -> str:
        """Return canonical markdown for ``text`` (stages before rendering)."""
        return self.normalizer.normalize_markdown(text)

    def render(self, text: str) -> RenderResult:
        """Render ``text`` end to end, substituting an error document on failure.

        Parameters
        ----------
        text : str
            Raw markdown as fetched from the document source.

        Returns
        -------
        RenderResult
            Sanitized HTML with heading and code block metadata, or an error
            document when any stage fails.
        """
        try:
            rendered = self.renderer.render(self.normalize(text))
            return RenderResult(
                html=sanitize(rendered.html),
                headings=rendered.headings,
                code_blocks=rendered.code_blocks,
            )
        except Exception as exc:  # noqa: BLE001 - the page must always render
            logger.warning("rendering failed: %s", exc, exc_info=True)
            return self.render_error(f"{type(exc).__name__}: {exc}")

    def render_error(self, reason: str) -> RenderResult:
        """Return the fixed error document carrying ``reason``."""
        html = (
            '<div class="doc-error">'
            f"<p><strong>{ERROR_TITLE}</strong></p>"
            f"<p>{escape(reason)}</p>"
            "</div>"
        )
        return RenderResult(html=sanitize(html), is_error=True)

    def render_document(self, source: DocumentSource, key: DocumentKey) -> Document:
        """Fetch ``key`` from ``source`` and render it, never raising.

        Fetch failures are rendered as the error document; the returned
        :class:`~zendocs.models.Document` then has no raw text.
        """
        try:
            text = source.fetch_doc_text(key.product, key.path)
        except FetchFailure as exc:
            logger.warning("could not load %s/%s: %s", key.product, key.path, exc.reason)
            return Document(key=key, raw_text=None, result=self.render_error(exc.reason))
        except Exception as exc:  # noqa: BLE001 - collaborator bugs must not escape
            logger.warning("document source failed for %s/%s", key.product, key.path)
            return Document(
                key=key,
                raw_text=None,
                result=self.render_error(f"{type(exc).__name__}: {exc}"),
            )
        return Document(key=key, raw_text=text, result=self.render(text))


__all__ = ["RenderPipeline"]
