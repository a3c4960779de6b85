"""Exception taxonomy shared by the zendocs rendering pipeline.

Only :class:`ConfigError` is meant to reach end users directly (through the
CLI). Everything raised while fetching or rendering a document is caught by
:class:`~zendocs.pipeline.RenderPipeline` and turned into an error document.
"""

from __future__ import annotations


class ZendocsError(Exception):
    """Base class for all zendocs errors."""


class FetchFailure(ZendocsError):
    """Raised when a document cannot be found or its source is unreachable."""

    def __init__(self, product_id: str, path: str, reason: str) -> None:
        self.product_id = product_id
        self.path = path
        self.reason = reason
        super().__init__(f"{product_id}/{path}: {reason}")


class MalformedContent(ZendocsError):
    """Raised when a heuristic or highlighter cannot process its input."""


class SanitizationViolation(ZendocsError):
    """Disallowed markup category.

    The sanitizer strips offending markup silently; this class exists so callers
    that audit input can name the category, it is never raised by the pipeline.
    """


class ConfigError(ZendocsError, ValueError):
    """Raised when the zendocs configuration is invalid or incomplete."""


__all__ = [
    "ConfigError",
    "FetchFailure",
    "MalformedContent",
    "SanitizationViolation",
    "ZendocsError",
]
