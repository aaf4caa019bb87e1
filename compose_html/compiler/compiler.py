"""Compile HTML template sources into :class:`Component` records.

A source is a page when its top level holds a doctype or an ``<html>``
element; everything else is a reusable fragment invoked through a custom
element named after the file.

Example
-------
>>> from pathlib import Path
>>> from compose_html.compiler import compile_source
>>> card = compile_source("site-card", Path("site-card.html"), "<div><slot/></div>")
>>> (card.name, card.is_page)
('site-card', False)
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from bs4 import Doctype, Tag

from compose_html.dom import is_custom_element_name, is_inline_javascript, parse

from .models import Component, InvalidComponentNameError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bs4 import PageElement


def compile_file(path: Path) -> Component:
    """Read ``path`` as UTF-8 and compile it into a component.

    The component name is the lower-cased file stem, so ``Site-Card.html``
    is invoked as ``<site-card>``.
    """
    source = path.read_text(encoding="utf-8")
    return compile_source(path.stem.lower(), path, source)


def compile_source(name: str, file_path: Path | str, source: str) -> Component:
    """Compile ``source`` into a component called ``name``.

    Parameters
    ----------
    name : str
        Component name; must be a valid custom element name for fragments.
    file_path : Path or str
        Origin of ``source``, used in diagnostics.
    source : str
        Raw template markup.

    Returns
    -------
    Component
        The parsed template with its page flag and client scripts.

    Raises
    ------
    InvalidComponentNameError
        If the source is a fragment and ``name`` contains no hyphen.
    """
    path = Path(file_path)
    template = parse(source)
    is_page = _is_page(template.contents)
    if not is_page and not is_custom_element_name(name):
        msg = (
            f"Component '{path}' must be named like a custom element "
            f"(for example 'x-{name}'); got '{name}'."
        )
        raise InvalidComponentNameError(msg)
    return Component(
        name=name,
        file_path=path,
        is_page=is_page,
        template=template,
        client_scripts=tuple(_collect_client_scripts(template.contents)),
        source=source,
    )


def _is_page(nodes: cabc.Iterable[PageElement]) -> bool:
    for node in nodes:
        if isinstance(node, Doctype):
            return True
        if isinstance(node, Tag) and node.name == "html":
            return True
    return False


def _collect_client_scripts(nodes: cabc.Iterable[PageElement]) -> cabc.Iterator[Tag]:
    """Yield inline scripts owned by this template, skipping nested invocations."""
    for node in nodes:
        if is_inline_javascript(node):
            yield typ.cast("Tag", node)
        elif isinstance(node, Tag) and not is_custom_element_name(node.name):
            yield from _collect_client_scripts(list(node.contents))


__all__ = ["compile_file", "compile_source"]
