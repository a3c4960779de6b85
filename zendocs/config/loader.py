"""Load zendocs configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from zendocs._constants import DEFAULT_DOCUMENT
from zendocs.errors import ConfigError

from .models import (
    DEFAULT_LANGUAGE_ALIASES,
    DEFAULT_SECTION_LABELS,
    RendererConfig,
    SiteConfig,
    SourceConfig,
)


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing rendering and source choices.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``zendocs.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied for every missing key.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ConfigError
        If a section or value has the wrong shape (for example, a negative
        timeout or both ``base_url`` and ``docs_root``).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from zendocs.config import load_site_config
    >>> config = load_site_config(Path("zendocs.yaml"))  # doctest: +SKIP
    >>> config.renderer.pygments_style  # doctest: +SKIP
    'monokai'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    renderer = _build_renderer_config(_section(raw, "renderer"))
    source = _build_source_config(_section(raw, "source"), base_dir=path.parent)
    return SiteConfig(renderer=renderer, source=source)


def _section(raw: typ.Mapping[str, typ.Any], name: str) -> typ.Mapping[str, typ.Any]:
    """Return the mapping stored under ``name``, treating null as empty."""
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        msg = f"'{name}' must be a mapping."
        raise ConfigError(msg)
    return value


def _build_renderer_config(payload: typ.Mapping[str, typ.Any]) -> RendererConfig:
    """Build a RendererConfig, merging configured aliases over the defaults."""
    aliases = dict(DEFAULT_LANGUAGE_ALIASES)
    extra_aliases = payload.get("language_aliases") or {}
    if not isinstance(extra_aliases, dict):
        msg = "'renderer.language_aliases' must be a mapping."
        raise ConfigError(msg)
    for alias, canonical in extra_aliases.items():
        aliases[str(alias).strip().lower()] = str(canonical).strip().lower()

    labels = payload.get("section_labels")
    match labels:
        case None:
            section_labels = DEFAULT_SECTION_LABELS
        case list():
            cleaned = (str(label).strip().rstrip(":") for label in labels)
            section_labels = tuple(label for label in cleaned if label)
        case _:
            msg = "'renderer.section_labels' must be a list."
            raise ConfigError(msg)

    min_lines = payload.get("diagram_min_lines", 3)
    if not isinstance(min_lines, int) or min_lines < 1:
        msg = "'renderer.diagram_min_lines' must be a positive integer."
        raise ConfigError(msg)

    return RendererConfig(
        pygments_style=str(payload.get("pygments_style", "monokai")),
        language_aliases=aliases,
        section_labels=section_labels,
        diagram_min_lines=min_lines,
    )


def _build_source_config(
    payload: typ.Mapping[str, typ.Any], *, base_dir: Path
) -> SourceConfig:
    """Build a SourceConfig, resolving ``docs_root`` relative to the config file."""
    base_url = payload.get("base_url")
    docs_root_raw = payload.get("docs_root")
    if base_url and docs_root_raw:
        msg = "Configure either 'source.base_url' or 'source.docs_root', not both."
        raise ConfigError(msg)

    docs_root: Path | None = None
    if docs_root_raw:
        docs_root = Path(str(docs_root_raw))
        if not docs_root.is_absolute():
            docs_root = base_dir / docs_root

    timeout = payload.get("timeout", 30.0)
    if not isinstance(timeout, int | float) or timeout <= 0:
        msg = "'source.timeout' must be a positive number."
        raise ConfigError(msg)

    return SourceConfig(
        base_url=str(base_url).rstrip("/") if base_url else None,
        docs_root=docs_root,
        timeout=float(timeout),
        default_file=str(payload.get("default_file", DEFAULT_DOCUMENT)),
    )


__all__ = ["load_site_config"]
