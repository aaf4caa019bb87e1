"""Build a static site from a directory of HTML components and pages.

:class:`SiteBuilder` is the orchestration layer around the renderer and the
script bundler. It discovers sources, compiles them, copies static assets
that changed, renders every page, extracts shared scripts into bundles, and
writes the results under the output directory.

Typical usage pairs the builder with a loaded configuration:

>>> from pathlib import Path
>>> from compose_html.builder import SiteBuilder
>>> from compose_html.config import load_build_config
>>> config = load_build_config(Path("compose.yaml"), required=False)  # doctest: +SKIP
>>> result = SiteBuilder(config).run()  # doctest: +SKIP
>>> [path.name for path in result.pages]  # doctest: +SKIP
['index.html', 'index.html']

Side effects are limited to reading the input and root directories and
writing into the output directory.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import shutil
import typing as typ
from pathlib import Path

from ._constants import HTML_GLOB, INDEX_PAGE
from .beautify import beautify_html, detect_indent
from .bundler import Page, extract_script_bundles
from .compiler import ComponentTable, compile_file
from .renderer import Renderer

if typ.TYPE_CHECKING:
    from .bundler import Bundle
    from .compiler import Component
    from .config import BuildConfig

log = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BuildResult:
    """Paths written by a build, plus pages that were skipped."""

    pages: list[Path] = dc.field(default_factory=list)
    bundles: list[Path] = dc.field(default_factory=list)
    assets: list[Path] = dc.field(default_factory=list)
    skipped_pages: list[Path] = dc.field(default_factory=list)

    @property
    def written(self) -> list[Path]:
        """Return every written path: assets, then bundles, then pages."""
        return [*self.assets, *self.bundles, *self.pages]


@dc.dataclass(slots=True)
class _RenderedPage:
    component: Component
    output_path: Path
    page: Page


class SiteBuilder:
    """Compile, render, bundle, and write a site described by a BuildConfig."""

    def __init__(self, config: BuildConfig) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : BuildConfig
            Resolved build configuration. ``root_dir`` defaults to
            ``input_dir`` when unset.
        """
        self.config = config
        self.input_dir = config.input_dir.resolve()
        self.output_dir = config.output_dir.resolve()
        self.root_dir = config.content_root.resolve()

    def run(self) -> BuildResult:
        """Run the whole build and return what was written.

        Raises
        ------
        ComponentError
            If components are duplicated, undefined, or recursive. Nothing is
            written for pages or bundles in that case.
        """
        log.info(
            "Working directories\n   input: %s\n  output: %s\n    root: %s",
            self.input_dir,
            self.output_dir,
            self.root_dir,
        )
        result = BuildResult()
        html_files = self.discover_html_files()
        assets = self.discover_assets(html_files)
        log.info("%d html files", len(html_files))
        log.info("%d non-html files", len(assets))

        table, page_components = self.compile_components(html_files, result)
        log.debug("Loaded components: %s", ", ".join(table.names()))

        result.assets.extend(self.copy_assets(assets))

        rendered = self.render_pages(table, page_components)
        bundles = extract_script_bundles(
            [entry.page for entry in rendered],
            table,
            self.config.min_page_usage,
            self.config.script_src_prefix,
        )
        result.bundles.extend(self.write_bundles(bundles))
        result.pages.extend(self.write_pages(rendered))
        return result

    def discover_html_files(self) -> list[Path]:
        """Return every ``.html`` source below the input directory, sorted."""
        return sorted(
            path
            for path in self.input_dir.glob(HTML_GLOB)
            if path.is_file() and not self._is_output(path)
        )

    def discover_assets(self, html_files: list[Path]) -> list[Path]:
        """Return every non-HTML-source file below the root directory, sorted."""
        sources = set(html_files)
        return sorted(
            path
            for path in self.root_dir.rglob("*")
            if path.is_file() and path not in sources and not self._is_output(path)
        )

    def compile_components(
        self, html_files: list[Path], result: BuildResult
    ) -> tuple[ComponentTable, list[Component]]:
        """Compile sources into a component table and the list of pages.

        Pages outside the root directory are logged, recorded in
        ``result.skipped_pages``, and left out of the build.
        """
        table = ComponentTable()
        pages: list[Component] = []
        for path in html_files:
            component = compile_file(path)
            if not component.is_page:
                table.register(component)
            elif path.is_relative_to(self.root_dir):
                pages.append(component)
            else:
                log.warning("Page component found outside root dir: %s", path)
                result.skipped_pages.append(path)
        return table, pages

    def copy_assets(self, assets: list[Path]) -> list[Path]:
        """Copy assets into the output directory unless the copy is up to date."""
        copied: list[Path] = []
        for source in assets:
            target = self.output_dir / source.relative_to(self.root_dir)
            if target.is_file() and target.stat().st_mtime >= source.stat().st_mtime:
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
            log.info("Copied %s -> %s", source, target)
            copied.append(target)
        return copied

    def render_pages(
        self, table: ComponentTable, pages: list[Component]
    ) -> list[_RenderedPage]:
        """Render every page component against ``table``."""
        renderer = Renderer(table)
        rendered: list[_RenderedPage] = []
        for component in pages:
            page_path = component.file_path.relative_to(self.root_dir).as_posix()
            page = Page.from_nodes(
                page_path, renderer.render(component), source_path=component.file_path
            )
            rendered.append(
                _RenderedPage(
                    component=component,
                    output_path=self.output_path_for(component),
                    page=page,
                )
            )
        return rendered

    def output_path_for(self, component: Component) -> Path:
        """Return where ``component`` is written.

        ``index`` pages keep their relative path; any other page ``name.html``
        becomes ``name/index.html`` so it is served from a directory URL.
        """
        relative = component.file_path.relative_to(self.root_dir)
        if component.name == INDEX_PAGE:
            return self.output_dir / relative
        return self.output_dir / relative.parent / component.name / f"{INDEX_PAGE}.html"

    def write_bundles(self, bundles: list[Bundle]) -> list[Path]:
        """Write each bundle's code to its ``src`` below the output directory."""
        written: list[Path] = []
        for bundle in bundles:
            output_path = self.output_dir / bundle.relative_path
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(bundle.code, encoding="utf-8")
            log.info("Bundled script -> %s", output_path)
            written.append(output_path)
        return written

    def write_pages(self, rendered: list[_RenderedPage]) -> list[Path]:
        """Serialize and write every rendered page."""
        written: list[Path] = []
        beautify = self.config.beautify
        for entry in rendered:
            if beautify.enabled:
                indent = beautify.indent
                if indent is None:
                    indent = detect_indent(entry.component.source)
                html = beautify_html(entry.page.document, indent)
            else:
                html = entry.page.to_html()
                if not html.endswith("\n"):
                    html += "\n"
            entry.output_path.parent.mkdir(parents=True, exist_ok=True)
            entry.output_path.write_text(html, encoding="utf-8")
            log.info("Rendered %s -> %s", entry.component.file_path, entry.output_path)
            written.append(entry.output_path)
        return written

    def _is_output(self, path: Path) -> bool:
        return path.is_relative_to(self.output_dir)


__all__ = ["BuildResult", "SiteBuilder"]
