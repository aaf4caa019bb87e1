"""Node tree helpers built on BeautifulSoup.

Templates, rendered pages, and script rewrites all operate on ``bs4`` trees
parsed with the standard library ``html.parser`` backend. Attributes are kept as
plain strings (``multi_valued_attributes=None``) so that ``class="a b"``
round-trips verbatim and attribute lists compare cleanly.

Example
-------
>>> from compose_html.dom import parse, to_html
>>> to_html(parse("<p>Hello <b>there</b></p>").contents)
'<p>Hello <b>there</b></p>'
"""

from __future__ import annotations

import copy
import typing as typ

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bs4 import PageElement

PARSER = "html.parser"
SCRIPT_TAG = "script"

JAVASCRIPT_TYPES = frozenset(
    {
        "",
        "module",
        "text/javascript",
        "application/javascript",
        "text/ecmascript",
        "application/ecmascript",
    }
)
# Hyphenated names the HTML standard reserves for SVG and MathML.
RESERVED_CUSTOM_NAMES = frozenset(
    {
        "annotation-xml",
        "color-profile",
        "font-face",
        "font-face-src",
        "font-face-uri",
        "font-face-format",
        "font-face-name",
        "missing-glyph",
    }
)


def parse(source: str) -> BeautifulSoup:
    """Parse ``source`` into a BeautifulSoup document without restructuring it."""
    return BeautifulSoup(source, PARSER, multi_valued_attributes=None)


def new_document() -> BeautifulSoup:
    """Return an empty document used as a container and element factory."""
    return parse("")


class AuthoredOrderFormatter(HTMLFormatter):
    """Minimal HTML formatter that writes attributes in their authored order."""

    def __init__(self, indent: int | str = 1) -> None:
        super().__init__(
            entity_substitution=EntitySubstitution.substitute_xml, indent=indent
        )

    def attributes(self, tag: Tag) -> list[tuple[str, typ.Any]]:
        """Return ``tag``'s attributes unsorted."""
        return list(tag.attrs.items())


FORMATTER = AuthoredOrderFormatter()


def to_html(nodes: cabc.Iterable[PageElement]) -> str:
    """Serialize ``nodes`` in order, concatenating their markup."""
    return "".join(_serialize(node) for node in nodes)


def _serialize(node: PageElement) -> str:
    if isinstance(node, Tag):
        return node.decode(formatter=FORMATTER)
    # Bare ``str()`` drops comment delimiters and entity escaping.
    return typ.cast("NavigableString", node).output_ready(formatter=FORMATTER)


def copy_node(node: PageElement) -> PageElement:
    """Return a detached deep copy of ``node``."""
    return copy.copy(node)


def is_custom_element_name(name: str) -> bool:
    """Return ``True`` when ``name`` is a valid custom element tag name."""
    return "-" in name and name not in RESERVED_CUSTOM_NAMES


def is_inline_javascript(node: PageElement) -> bool:
    """Return ``True`` for ``<script>`` elements holding inline JavaScript.

    Scripts with a ``src`` attribute are external and data blocks such as
    ``type="application/json"`` are not JavaScript, so neither qualifies.
    """
    if not isinstance(node, Tag) or node.name != SCRIPT_TAG:
        return False
    if node.has_attr("src"):
        return False
    script_type = str(node.get("type", "")).strip().lower()
    return script_type in JAVASCRIPT_TYPES


def script_text(script: Tag) -> str:
    """Return the inline source text of ``script``."""
    return "".join(str(child) for child in script.contents)


def iter_inline_scripts(nodes: cabc.Iterable[PageElement]) -> cabc.Iterator[Tag]:
    """Yield inline JavaScript elements below ``nodes`` in document order."""
    for node in nodes:
        if is_inline_javascript(node):
            yield typ.cast("Tag", node)
        elif isinstance(node, Tag):
            yield from iter_inline_scripts(list(node.contents))


def clone_element(factory: BeautifulSoup, element: Tag) -> Tag:
    """Create an empty element with the same name and attributes as ``element``."""
    return factory.new_tag(element.name, attrs=dict(element.attrs))


def is_string_node(node: PageElement) -> bool:
    """Return ``True`` for text, comments, doctypes, and other string nodes."""
    return isinstance(node, NavigableString)


__all__ = [
    "FORMATTER",
    "JAVASCRIPT_TYPES",
    "PARSER",
    "RESERVED_CUSTOM_NAMES",
    "SCRIPT_TAG",
    "AuthoredOrderFormatter",
    "clone_element",
    "copy_node",
    "is_custom_element_name",
    "is_inline_javascript",
    "is_string_node",
    "iter_inline_scripts",
    "new_document",
    "parse",
    "script_text",
    "to_html",
]
