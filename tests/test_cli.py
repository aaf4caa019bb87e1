"""Tests for the ``compose-html`` command-line entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from compose_html import cli
from compose_html.compiler import ComponentCycleError

from tests.helpers import write_files

SITE = {
    "x-note.html": "<aside><slot/></aside><script>note()</script>",
    "index.html": "<html><x-note>one</x-note></html>",
    "guide.html": "<html><x-note>two</x-note></html>",
}


@pytest.fixture
def site(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write a small site and make it the working directory."""
    root = tmp_path.resolve()
    write_files(root, SITE)
    monkeypatch.chdir(root)
    monkeypatch.delenv(cli.DEBUG_ENV_VAR, raising=False)
    return root


def test_build_without_config_uses_defaults(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """The default config file is optional and output goes to ``out``."""
    cli.build()
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "wrote out/scripts/x-note.js",
        "wrote out/guide/index.html",
        "wrote out/index.html",
    ]
    assert (site / "out" / "guide" / "index.html").is_file()


def test_build_reads_config_file(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Values from ``compose.yaml`` shape the build."""
    write_files(
        site, {"compose.yaml": "output_dir: public\nscript_src_prefix: /js/\n"}
    )
    cli.build()
    out = capsys.readouterr().out
    assert "wrote public/js/x-note.js" in out
    assert (site / "public" / "index.html").is_file()


def test_options_override_config(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Command-line values win over the config file."""
    write_files(site, {"compose.yaml": "min_page_usage: 1\n"})
    cli.build(output_dir=Path("dist"), min_page_usage=3, beautify=False)
    out = capsys.readouterr().out
    assert "x-note.js" not in out, "threshold override should keep scripts inline"
    index = (site / "dist" / "index.html").read_text(encoding="utf-8")
    assert index == "<html><aside>one</aside><script>note()</script></html>\n"


def test_explicit_config_must_exist(site: Path) -> None:
    """Naming a config file that does not exist is an error."""
    with pytest.raises(FileNotFoundError, match="missing.yaml"):
        cli.build(config=site / "missing.yaml")


def test_explicit_default_config_must_exist(site: Path) -> None:
    """Passing ``compose.yaml`` explicitly also requires the file."""
    with pytest.raises(FileNotFoundError, match="compose.yaml"):
        cli.build(config=Path("compose.yaml"))


def test_skipped_pages_are_reported(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Pages outside the root directory are listed as skipped."""
    write_files(site, {"pages/index.html": "<html><p>home</p></html>"})
    cli.build(root_dir=Path("pages"))
    out = capsys.readouterr().out.splitlines()
    assert "wrote out/index.html" in out
    assert "skipped guide.html (outside root dir)" in out
    assert "skipped index.html (outside root dir)" in out


def test_definition_errors_propagate(site: Path) -> None:
    """Invalid components abort the build with the component error."""
    write_files(
        site,
        {"x-loop.html": "<x-loop></x-loop>", "loop.html": "<html><x-loop/></html>"},
    )
    with pytest.raises(ComponentCycleError):
        cli.build()


@pytest.mark.parametrize(
    ("verbose", "debug", "level"),
    [
        (False, False, logging.WARNING),
        (True, False, logging.INFO),
        (False, True, logging.DEBUG),
    ],
)
def test_setup_logging_levels(
    monkeypatch: pytest.MonkeyPatch, *, verbose: bool, debug: bool, level: int
) -> None:
    """Verbosity flags and the debug variable pick the package log level."""
    if debug:
        monkeypatch.setenv(cli.DEBUG_ENV_VAR, "1")
    else:
        monkeypatch.delenv(cli.DEBUG_ENV_VAR, raising=False)
    cli.setup_logging(verbose=verbose)
    logger = logging.getLogger("compose_html")
    assert logger.level == level
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_app_parses_build_command(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """The Cyclopts app dispatches ``build`` with its options."""
    command, bound, _ = cli.app.parse_args(
        ["build", "--output-dir", "site-out", "--no-beautify"]
    )
    assert command is cli.build
    assert bound.arguments["output_dir"] == Path("site-out")
    assert bound.arguments["beautify"] is False
    command(*bound.args, **bound.kwargs)
    assert "wrote site-out/index.html" in capsys.readouterr().out
    assert (site / "site-out" / "index.html").read_text(encoding="utf-8").startswith(
        "<html><aside>one</aside>"
    )
