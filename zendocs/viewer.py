"""Navigation sessions where the most recent request always wins.

Fetching a document is the only point where a render waits, and the reader can
navigate again before it finishes. Every navigation takes a sequence number;
a result is published only if no newer navigation has started since, so a slow
response for an old page can never replace the page on screen.

Example
-------
>>> import asyncio
>>> from zendocs.models import DocumentKey
>>> from zendocs.pipeline import RenderPipeline
>>> class Source:
...     def fetch_doc_text(self, product_id, path):
...         return "# Overview"
>>> viewer = DocumentViewer(RenderPipeline(), Source())
>>> document = asyncio.run(viewer.navigate(DocumentKey("rfid")))
>>> document.result.headings[0].slug
'overview'
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import logging
import typing as typ

from .errors import FetchFailure
from .models import Document, DocumentKey

if typ.TYPE_CHECKING:
    from .pipeline import RenderPipeline
    from .sources import DocumentSource

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class NavigationTicket:
    """Identity of one navigation request."""

    sequence: int
    key: DocumentKey


class DocumentViewer:
    """Track the displayed document and discard stale render results."""

    def __init__(self, pipeline: RenderPipeline, source: DocumentSource) -> None:
        self.pipeline = pipeline
        self.source = source
        self.current: Document | None = None
        self._sequence = 0

    def begin(self, key: DocumentKey) -> NavigationTicket:
        """Start a navigation to ``key``, superseding any pending one."""
        self._sequence += 1
        return NavigationTicket(self._sequence, key)

    def is_current(self, ticket: NavigationTicket) -> bool:
        """Return True when no navigation has started after ``ticket``."""
        return ticket.sequence == self._sequence

    def complete(
        self, ticket: NavigationTicket, outcome: str | FetchFailure
    ) -> Document | None:
        """Render the fetch outcome for ``ticket`` and publish it if still current.

        Parameters
        ----------
        ticket : NavigationTicket
            Ticket returned by :meth:`begin` for this navigation.
        outcome : str or FetchFailure
            Fetched markdown, or the failure that prevented fetching it.

        Returns
        -------
        Document or None
            The newly displayed document, or ``None`` when the ticket was
            superseded and the result was discarded.
        """
        if not self.is_current(ticket):
            logger.debug(
                "discarding stale render of %s (request %d, latest %d)",
                ticket.key.path,
                ticket.sequence,
                self._sequence,
            )
            return None
        if isinstance(outcome, FetchFailure):
            document = Document(
                key=ticket.key,
                raw_text=None,
                result=self.pipeline.render_error(outcome.reason),
            )
        else:
            document = Document(
                key=ticket.key, raw_text=outcome, result=self.pipeline.render(outcome)
            )
        self.current = document
        return document

    async def navigate(self, key: DocumentKey) -> Document | None:
        """Fetch and render ``key``; return None if a newer navigation won."""
        ticket = self.begin(key)
        outcome: str | FetchFailure
        try:
            outcome = await asyncio.to_thread(
                self.source.fetch_doc_text, key.product, key.path
            )
        except FetchFailure as exc:
            outcome = exc
        except Exception as exc:  # noqa: BLE001 - collaborator bugs must not escape
            outcome = FetchFailure(key.product, key.path, f"{type(exc).__name__}: {exc}")
        return self.complete(ticket, outcome)


__all__ = ["DocumentViewer", "NavigationTicket"]
