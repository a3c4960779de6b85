"""Document sources that supply raw markdown to the rendering pipeline.

Both sources address files as ``documentation/<product>/<path>`` below their
root, mirroring how the product docs are published, and raise
:class:`~zendocs.errors.FetchFailure` for anything that prevents returning text.
"""

from __future__ import annotations

import logging
import posixpath
import typing as typ
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ._constants import DOCUMENT_PATH_TEMPLATE
from .errors import ConfigError, FetchFailure

if typ.TYPE_CHECKING:
    from .config import SourceConfig

logger = logging.getLogger(__name__)


class DocumentSource(typ.Protocol):
    """Anything that can fetch the raw text of a documentation file."""

    def fetch_doc_text(self, product_id: str, path: str) -> str:
        """Return the markdown stored at ``path`` for ``product_id``."""
        ...


def _relative_path(product_id: str, path: str) -> str:
    """Return the normalized document path, rejecting escapes from the product."""
    product = product_id.strip("/")
    product_root = DOCUMENT_PATH_TEMPLATE.format(product=product, path="")
    candidate = DOCUMENT_PATH_TEMPLATE.format(product=product, path=path.lstrip("/"))
    normalized = posixpath.normpath(candidate)
    if not product or not normalized.startswith(product_root):
        raise FetchFailure(product_id, path, "path escapes the product documentation")
    return normalized


class HttpDocumentSource:
    """Fetch documents over HTTP(S) with retries on transient failures."""

    def __init__(self, base_url: str, *, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url_for(self, product_id: str, path: str) -> str:
        """Return the absolute URL for a product document."""
        return f"{self.base_url}/{_relative_path(product_id, path)}"

    def fetch_doc_text(self, product_id: str, path: str) -> str:
        """Download the document, mapping HTTP and network errors to FetchFailure."""
        url = self.url_for(product_id, path)
        session = requests.Session()
        retry = Retry(
            total=5,
            read=5,
            connect=3,
            backoff_factor=0.5,
            status_forcelist=(500, 502, 503, 504),
            allowed_methods=("GET", "HEAD"),
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        try:
            resp = session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            return resp.text
        except requests.RequestException as exc:
            logger.warning("failed to fetch %s: %s", url, exc)
            raise FetchFailure(product_id, path, str(exc)) from exc
        finally:
            session.close()


class LocalDocumentSource:
    """Read documents from a directory laid out like the published site."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def fetch_doc_text(self, product_id: str, path: str) -> str:
        """Read the document from disk, mapping IO errors to FetchFailure."""
        target = self.root / _relative_path(product_id, path)
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("failed to read %s: %s", target, exc)
            raise FetchFailure(product_id, path, str(exc)) from exc


def build_source(config: SourceConfig) -> DocumentSource:
    """Return the document source described by ``config``.

    Raises
    ------
    ConfigError
        If neither ``base_url`` nor ``docs_root`` is configured.
    """
    if config.base_url:
        return HttpDocumentSource(config.base_url, timeout=config.timeout)
    if config.docs_root is not None:
        return LocalDocumentSource(config.docs_root)
    msg = "No document source configured; set 'source.base_url' or 'source.docs_root'."
    raise ConfigError(msg)


__all__ = [
    "DocumentSource",
    "HttpDocumentSource",
    "LocalDocumentSource",
    "build_source",
]
