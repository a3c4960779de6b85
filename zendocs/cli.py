"""Cyclopts CLI entrypoint for rendering zendocs documentation.

The ``zendocs`` console script renders a local markdown file (``convert``), a
product document fetched through the configured source (``render``), or the
Pygments stylesheet that matches the highlighted blocks (``stylesheet``).
Output is the sanitized HTML fragment by default; ``--standalone`` wraps it in
a minimal page and ``--format json`` emits the ``{html, headings}`` payload.

Examples
--------
Render a local file to stdout:

>>> from zendocs.cli import app
>>> app(["convert", "docs/overview.md"])  # doctest: +SKIP

Render a product page into a file using ``zendocs.yaml``:

>>> app(
...     ["render", "rfid", "setup", "install.md", "--output", "out.html"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

import cyclopts
import msgspec.json as msgspec_json
from cyclopts import App, Parameter
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .config import SiteConfig, load_site_config
from .models import DocumentKey, RenderResult
from .pipeline import RenderPipeline
from .renderer import CodeBlockRenderer
from .sources import build_source

DEFAULT_CONFIG = Path("zendocs.yaml")
TEMPLATES_DIR = Path(__file__).parent / "templates"
OutputFormat = typ.Literal["html", "json"]

app = App(name="zendocs", config=cyclopts.config.Env("ZENDOCS_", command=False))  # type: ignore[unknown-argument]

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _load_config(path: Path, *, required: bool) -> SiteConfig:
    """Load ``path`` or fall back to defaults when it is optional and absent."""
    if not required and not path.exists():
        return SiteConfig()
    return load_site_config(path)


def _standalone_page(
    result: RenderResult, *, title: str, stylesheet: str, breadcrumbs: list[str]
) -> str:
    """Wrap a rendered fragment in the standalone document template."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml", "jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("document.jinja")
    return template.render(
        title=title,
        pygments_css=stylesheet,
        breadcrumbs=breadcrumbs,
        headings=result.headings,
        body_html=result.html,
    )


def _emit(
    result: RenderResult,
    *,
    output: Path | None,
    output_format: OutputFormat,
    standalone: bool,
    title: str,
    stylesheet: str,
    breadcrumbs: list[str],
) -> None:
    """Write the result to ``output`` (or stdout) in the requested format."""
    if result.is_error:
        logger.warning("%s rendered as an error document", title)
    if output_format == "json":
        content = msgspec_json.format(
            msgspec_json.encode(result.payload()), indent=2
        ).decode("utf-8")
    elif standalone:
        content = _standalone_page(
            result, title=title, stylesheet=stylesheet, breadcrumbs=breadcrumbs
        )
    else:
        content = result.html
    if output is None:
        print(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    print(f"wrote {_format_path(output)}")


@app.command(help="Render a local markdown file to sanitized HTML.")
def convert(
    source: Path,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the zendocs config (optional)")
    ] = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path | None, Parameter(help="Write to this file instead of stdout")
    ] = None,
    output_format: typ.Annotated[
        OutputFormat, Parameter(name="--format", help="html or json")
    ] = "html",
    standalone: typ.Annotated[
        bool, Parameter(help="Wrap the fragment in a complete HTML page")
    ] = False,
    verbose: bool = False,
) -> None:
    """Render ``source`` through the full pipeline.

    Parameters
    ----------
    source : Path
        Markdown file to render.
    config : Path, optional
        Configuration file; defaults are used when it does not exist.
    output : Path or None, optional
        Destination file; the result is printed when omitted.
    output_format : {"html", "json"}, optional
        ``json`` emits the ``{html, headings}`` payload.
    standalone : bool, optional
        Wrap HTML output in the page template with the Pygments stylesheet.
    verbose : bool, optional
        Enable debug logging.
    """
    _configure_logging(verbose)
    site_config = _load_config(config, required=False)
    pipeline = RenderPipeline(site_config.renderer)
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        result = pipeline.render_error(str(exc))
    else:
        result = pipeline.render(text)
    _emit(
        result,
        output=output,
        output_format=output_format,
        standalone=standalone,
        title=source.stem.replace("-", " "),
        stylesheet=pipeline.stylesheet,
        breadcrumbs=[],
    )


@app.command(help="Fetch a product document from the configured source and render it.")
def render(
    product: str,
    section: str | None = None,
    subsection: str | None = None,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the zendocs config", env_var="ZENDOCS_CONFIG")
    ] = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path | None, Parameter(help="Write to this file instead of stdout")
    ] = None,
    output_format: typ.Annotated[
        OutputFormat, Parameter(name="--format", help="html or json")
    ] = "html",
    standalone: typ.Annotated[
        bool, Parameter(help="Wrap the fragment in a complete HTML page")
    ] = False,
    verbose: bool = False,
) -> None:
    """Render one product document addressed by section and subsection.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    ConfigError
        If the configuration names no document source.
    """
    _configure_logging(verbose)
    site_config = _load_config(config, required=True)
    pipeline = RenderPipeline(site_config.renderer)
    key = DocumentKey(
        product=product,
        section=section or site_config.source.default_file,
        subsection=subsection,
    )
    document = pipeline.render_document(build_source(site_config.source), key)
    _emit(
        document.result,
        output=output,
        output_format=output_format,
        standalone=standalone,
        title=" / ".join(key.breadcrumbs()),
        stylesheet=pipeline.stylesheet,
        breadcrumbs=key.breadcrumbs(),
    )


@app.command(help="Print the Pygments stylesheet for highlighted code blocks.")
def stylesheet(
    *,
    style: typ.Annotated[str | None, Parameter(help="Pygments style name")] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to the zendocs config (optional)")
    ] = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path | None, Parameter(help="Write to this file instead of stdout")
    ] = None,
) -> None:
    """Emit the CSS matching the configured (or requested) Pygments style."""
    renderer_config = _load_config(config, required=False).renderer
    if style:
        renderer_config = dc.replace(renderer_config, pygments_style=style)
    css = CodeBlockRenderer(renderer_config).stylesheet
    if output is None:
        print(css)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(css, encoding="utf-8")
    print(f"wrote {_format_path(output)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``zendocs`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
