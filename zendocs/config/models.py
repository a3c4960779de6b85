"""Typed dataclasses describing zendocs configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

from zendocs._constants import DEFAULT_DOCUMENT

DEFAULT_LANGUAGE_ALIASES: dict[str, str] = {
    "pgsql": "sql",
    "postgresql": "sql",
    "postgres": "sql",
    "jsonc": "json",
    "json5": "json",
    "js": "javascript",
    "ts": "typescript",
}
DEFAULT_SECTION_LABELS: tuple[str, ...] = (
    "Purpose",
    "Response Structure",
    "Response",
)


@dc.dataclass(frozen=True, slots=True)
class RendererConfig:
    """Settings shared by the normalizer, the structural renderer and the pipeline.

    Attributes
    ----------
    pygments_style : str
        Pygments style used for highlighted blocks and the emitted stylesheet.
    language_aliases : dict[str, str]
        Non-standard fence labels mapped to canonical lexer names.
    section_labels : tuple[str, ...]
        Ad-hoc ``Label:`` lines promoted to level-two headings.
    diagram_min_lines : int
        Consecutive box-drawing lines required before prose becomes a diagram.
    """

    pygments_style: str = "monokai"
    language_aliases: dict[str, str] = dc.field(
        default_factory=lambda: dict(DEFAULT_LANGUAGE_ALIASES)
    )
    section_labels: tuple[str, ...] = DEFAULT_SECTION_LABELS
    diagram_min_lines: int = 3

    def canonical_language(self, language: str | None) -> str | None:
        """Return the canonical lexer name for ``language``, if one was given."""
        if not language:
            return None
        lowered = language.strip().lower()
        return self.language_aliases.get(lowered, lowered) or None


@dc.dataclass(frozen=True, slots=True)
class SourceConfig:
    """Where raw documentation files are fetched from.

    Exactly one of ``base_url`` and ``docs_root`` is expected; documents live at
    ``documentation/<product>/<path>`` below either of them.
    """

    base_url: str | None = None
    docs_root: Path | None = None
    timeout: float = 30.0
    default_file: str = DEFAULT_DOCUMENT


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Top-level configuration loaded from ``zendocs.yaml``."""

    renderer: RendererConfig = dc.field(default_factory=RendererConfig)
    source: SourceConfig = dc.field(default_factory=SourceConfig)


__all__ = [
    "DEFAULT_LANGUAGE_ALIASES",
    "DEFAULT_SECTION_LABELS",
    "RendererConfig",
    "SiteConfig",
    "SourceConfig",
]
