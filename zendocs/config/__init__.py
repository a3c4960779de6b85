"""Load and validate zendocs configuration YAML.

This subpackage parses ``zendocs.yaml``, merges configured language aliases and
section labels over the built-in defaults, and produces frozen dataclasses
(:class:`SiteConfig`, :class:`RendererConfig`, :class:`SourceConfig`) that the
pipeline receives explicitly through its constructor.

Examples
--------
>>> from zendocs.config import RendererConfig
>>> RendererConfig().canonical_language("pgsql")
'sql'
"""

from .loader import load_site_config
from .models import (
    DEFAULT_LANGUAGE_ALIASES,
    DEFAULT_SECTION_LABELS,
    RendererConfig,
    SiteConfig,
    SourceConfig,
)

__all__ = [
    "DEFAULT_LANGUAGE_ALIASES",
    "DEFAULT_SECTION_LABELS",
    "RendererConfig",
    "SiteConfig",
    "SourceConfig",
    "load_site_config",
]
