"""Compose static HTML sites from reusable components.

This package expands custom-element components and their slots into plain
HTML pages, then extracts inline scripts shared across pages into external
bundles. The ``compose-html`` console script drives a full build.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``Renderer``, ``extract_script_bundles``: the composition and bundling passes.
- ``SiteBuilder``, ``load_build_config``: the build pipeline and its config.

Examples
--------
>>> from compose_html import main
>>> main()  # doctest: +SKIP
>>> from compose_html import app
>>> app.name  # doctest: +SKIP
('compose-html',)
"""

from __future__ import annotations

from .builder import BuildResult, SiteBuilder
from .bundler import Bundle, Page, ScriptSignature, extract_script_bundles
from .cli import app, main
from .compiler import Component, ComponentTable, compile_file, compile_source
from .config import BuildConfig, load_build_config
from .renderer import Renderer

__all__ = [
    "Bundle",
    "BuildConfig",
    "BuildResult",
    "Component",
    "ComponentTable",
    "Page",
    "Renderer",
    "ScriptSignature",
    "SiteBuilder",
    "app",
    "compile_file",
    "compile_source",
    "extract_script_bundles",
    "load_build_config",
    "main",
]
