"""Cyclopts CLI entrypoint for building compose-html sites.

The ``compose-html`` console script defined here compiles a directory of HTML
components and pages into a static site: components are expanded, slots are
filled, and inline scripts shared across pages are extracted into bundles.
Typical usage is running ``compose-html build`` in the site directory, with an
optional ``compose.yaml`` alongside.

Examples
--------
Build the site described by ``compose.yaml`` in the current directory:

>>> from compose_html.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory without pretty-printing:

>>> from compose_html.cli import app
>>> app(["build", "--output-dir", "dist", "--no-beautify"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from rich.console import Console
from rich.logging import RichHandler

from ._constants import DEFAULT_CONFIG
from .builder import SiteBuilder
from .config import load_build_config

DEBUG_ENV_VAR = "COMPOSE_HTML_DEBUG"

app = App(name="compose-html", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]
console = Console(stderr=True)


def setup_logging(*, verbose: bool = False) -> None:
    """Route ``compose_html`` logs through a Rich handler.

    Warnings and errors are always shown; ``verbose`` adds progress messages
    and setting ``COMPOSE_HTML_DEBUG`` shows everything.
    """
    debug = bool(os.environ.get(DEBUG_ENV_VAR))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console, show_time=verbose, show_path=debug, rich_tracebacks=True
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("compose_html")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Render pages, bundle shared scripts, and copy static assets.")
def build(
    *,
    config: typ.Annotated[
        Path | None,
        Parameter(
            help="Path to build config (default: compose.yaml)",
            env_var="INPUT_CONFIG",
        ),
    ] = None,
    input_dir: typ.Annotated[
        Path | None, Parameter(help="Directory holding components and pages")
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Directory the site is written to")
    ] = None,
    root_dir: typ.Annotated[
        Path | None,
        Parameter(help="Content root for page paths and assets (default: input dir)"),
    ] = None,
    min_page_usage: typ.Annotated[
        int | None,
        Parameter(help="Pages a component script must appear on to be bundled"),
    ] = None,
    script_src_prefix: typ.Annotated[
        str | None, Parameter(help="URL prefix of generated script bundles")
    ] = None,
    beautify: typ.Annotated[
        bool | None, Parameter(help="Pretty-print rendered pages")
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(name=["--verbose", "-v"], help="Log build progress")
    ] = False,
) -> None:
    """Build the site and print every written artefact.

    Parameters
    ----------
    config : Path or None, optional
        YAML build configuration. When omitted, ``compose.yaml`` is read if
        it exists; a path given explicitly must exist.
    input_dir, output_dir, root_dir : Path or None, optional
        Directory overrides; relative paths resolve against the current
        working directory.
    min_page_usage : int or None, optional
        Override the minimum page usage for bundling.
    script_src_prefix : str or None, optional
        Override the bundle URL prefix.
    beautify : bool or None, optional
        Enable or disable pretty-printing.
    verbose : bool, optional
        Log progress at INFO level.

    Raises
    ------
    ComponentError
        If component definitions are invalid; the build is aborted.
    """
    setup_logging(verbose=verbose)
    site_config = load_build_config(
        config or DEFAULT_CONFIG,
        overrides={
            "input_dir": input_dir,
            "output_dir": output_dir,
            "root_dir": root_dir,
            "min_page_usage": min_page_usage,
            "script_src_prefix": script_src_prefix,
            "beautify": beautify,
        },
        required=config is not None,
    )
    result = SiteBuilder(site_config).run()
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    for path in result.skipped_pages:
        print(f"skipped {_format_path(path)} (outside root dir)")


def main() -> None:
    """Invoke the Cyclopts application behind the ``compose-html`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
