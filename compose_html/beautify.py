"""Pretty-print rendered pages, keeping the indentation their authors used.

Only block-level structure is re-indented. Runs of text and phrasing elements
(``<a>``, ``<b>``, ``<span>``…) are written on one line exactly as rendered,
so pretty-printing never inserts whitespace a browser would display.
Preformatted elements keep their content verbatim.
"""

from __future__ import annotations

import re
import typing as typ

from bs4 import Doctype, NavigableString, Tag

from ._constants import DEFAULT_INDENT
from .dom import clone_element, new_document, to_html

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bs4 import BeautifulSoup, PageElement

INDENT_PATTERN = re.compile(r"\n([ \t]+)(?=\S)")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Phrasing content: laid out inline, so surrounding whitespace is significant.
INLINE_TAGS = frozenset(
    {
        "a",
        "abbr",
        "audio",
        "b",
        "bdi",
        "bdo",
        "br",
        "button",
        "canvas",
        "cite",
        "code",
        "data",
        "del",
        "dfn",
        "em",
        "embed",
        "i",
        "iframe",
        "img",
        "input",
        "ins",
        "kbd",
        "label",
        "map",
        "mark",
        "math",
        "meter",
        "object",
        "output",
        "picture",
        "progress",
        "q",
        "ruby",
        "s",
        "samp",
        "select",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "svg",
        "textarea",
        "time",
        "u",
        "var",
        "video",
        "wbr",
    }
)
PRESERVED_TAGS = frozenset({"pre", "textarea", "script", "style"})

_FACTORY = new_document()


def detect_indent(source: str, default: int | str = DEFAULT_INDENT) -> int | str:
    """Return the indent used by the first indented line of ``source``.

    Pass the authored page source: parsed trees do not keep whitespace-only
    strings verbatim. A tab-indented line selects ``"\\t"``; a space-indented
    one selects the number of leading spaces. ``default`` is returned when no
    line is indented.

    Examples
    --------
    >>> detect_indent("<ul>\\n    <li>a</li>\\n</ul>")
    4
    >>> detect_indent("<ul>\\n\\t<li>a</li>\\n</ul>")
    '\\t'
    """
    match = INDENT_PATTERN.search(source)
    if not match:
        return default
    indent = match.group(1)
    if indent[0] == "\t":
        return "\t"
    return len(indent)


def beautify_html(document: BeautifulSoup, indent: int | str | None = None) -> str:
    """Return ``document`` with its block structure indented by ``indent``.

    Parameters
    ----------
    document : BeautifulSoup
        Rendered page.
    indent : int or str, optional
        Number of spaces or a literal indent string; defaults to two spaces.

    Returns
    -------
    str
        Markup ending in a newline whose visible text matches ``document``.

    Examples
    --------
    >>> from compose_html.dom import parse
    >>> print(beautify_html(parse("<div><p>Hi <b>there</b>!</p></div>")), end="")
    <div>
      <p>Hi <b>there</b>!</p>
    </div>
    """
    if indent is None:
        indent = DEFAULT_INDENT
    unit = " " * indent if isinstance(indent, int) else indent
    lines: list[str] = []
    _write_children(list(document.contents), 0, unit, lines)
    return "".join(f"{line}\n" for line in lines)


def _is_inline(node: PageElement) -> bool:
    if isinstance(node, Doctype):
        return False
    if isinstance(node, NavigableString):
        return True
    return isinstance(node, Tag) and node.name in INLINE_TAGS


def _write_children(
    children: list[PageElement], depth: int, unit: str, lines: list[str]
) -> None:
    run: list[PageElement] = []
    for child in children:
        if _is_inline(child):
            run.append(child)
            continue
        _write_run(run, depth, unit, lines)
        run = []
        _write_block(child, depth, unit, lines)
    _write_run(run, depth, unit, lines)


def _write_run(
    run: cabc.Sequence[PageElement], depth: int, unit: str, lines: list[str]
) -> None:
    """Write a run of inline nodes on one line.

    Whitespace inside text is collapsed and trimmed at the run's edges, which
    sit next to block boundaries where browsers discard it anyway.
    """
    pieces = [
        WHITESPACE_PATTERN.sub(" ", to_html([node]))
        if type(node) is NavigableString
        else to_html([node])
        for node in run
    ]
    text = "".join(pieces).strip()
    if text:
        lines.append(f"{unit * depth}{text}")


def _write_block(node: PageElement, depth: int, unit: str, lines: list[str]) -> None:
    prefix = unit * depth
    if not isinstance(node, Tag):
        lines.append(f"{prefix}{to_html([node]).strip()}")
        return
    children = list(node.contents)
    if node.name in PRESERVED_TAGS or all(_is_inline(child) for child in children):
        lines.append(f"{prefix}{to_html([node])}")
        return
    closing = f"</{node.name}>"
    shell = clone_element(_FACTORY, node)
    lines.append(f"{prefix}{to_html([shell]).removesuffix(closing)}")
    _write_children(children, depth + 1, unit, lines)
    lines.append(f"{prefix}{closing}")


__all__ = ["INDENT_PATTERN", "INLINE_TAGS", "beautify_html", "detect_indent"]
