"""Render product documentation markdown into sanitized HTML.

The package exposes the rendering pipeline used by the documentation site and
the ``zendocs`` CLI built on top of it.

Exports
-------
- ``RenderPipeline``: normalize, render and sanitize one document.
- ``DocumentViewer``: navigation session where the latest request wins.
- ``app``: Cyclopts application behind the ``zendocs`` console script.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from zendocs import RenderPipeline
>>> RenderPipeline().render("# Hello World").headings[0].text
'Hello World'
"""

from __future__ import annotations

from .cli import app, main
from .pipeline import RenderPipeline
from .viewer import DocumentViewer

__all__ = ["DocumentViewer", "RenderPipeline", "app", "main"]
