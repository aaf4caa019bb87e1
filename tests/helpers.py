"""Builders shared by the compose_html unit and behaviour tests."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from compose_html.compiler import Component, ComponentTable, compile_source

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def make_component(name: str, source: str) -> Component:
    """Compile ``source`` as if it were read from ``<name>.html``."""
    return compile_source(name, Path(f"{name}.html"), source)


def make_table(sources: cabc.Mapping[str, str]) -> ComponentTable:
    """Compile every ``name -> source`` entry into a component table."""
    return ComponentTable(
        make_component(name, source) for name, source in sources.items()
    )


def write_files(root: Path, files: cabc.Mapping[str, str]) -> None:
    """Write ``relative path -> text`` entries below ``root``."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
