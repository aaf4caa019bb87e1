"""Value types shared by the script bundling pass."""

from __future__ import annotations

import dataclasses as dc
import hashlib
import typing as typ
from html import escape

from compose_html.dom import new_document, script_text, to_html

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from bs4 import BeautifulSoup, PageElement, Tag

BUNDLE_SUFFIX = ".js"


class BundlingInvariantError(RuntimeError):
    """Raised when the bundling pass reaches a state it should never reach."""


@dc.dataclass(frozen=True, slots=True)
class ScriptSignature:
    """Content-based identity of an inline script.

    Two scripts with the same tag, attributes, and inline text are the same
    logical script wherever they appear. Attributes are stored sorted so their
    authored order does not matter.

    Attributes
    ----------
    tag : str
        Element name, normally ``"script"``.
    attributes : tuple[tuple[str, str], ...]
        Sorted ``(name, value)`` pairs.
    code : str
        Inline script text.
    digest : str
        SHA-256 of :meth:`canonical`, computed once at construction.
    """

    tag: str
    attributes: tuple[tuple[str, str], ...]
    code: str
    digest: str = dc.field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        digest = hashlib.sha256(self.canonical().encode("utf-8")).hexdigest()
        object.__setattr__(self, "digest", digest)

    def __hash__(self) -> int:
        return hash(self.digest)

    @classmethod
    def from_element(cls, element: Tag) -> ScriptSignature:
        """Build the signature of a parsed ``<script>`` element."""
        attributes = tuple(
            sorted((str(name), str(value)) for name, value in element.attrs.items())
        )
        return cls(tag=element.name, attributes=attributes, code=script_text(element))

    def canonical(self) -> str:
        """Return the canonical markup the signature stands for."""
        attrs = "".join(
            f' {name}="{escape(value, quote=True)}"' for name, value in self.attributes
        )
        return f"<{self.tag}{attrs}>{self.code}</{self.tag}>"

    @property
    def is_async(self) -> bool:
        """Return ``True`` when the script carries the ``async`` attribute."""
        return any(name == "async" for name, _ in self.attributes)


@dc.dataclass(eq=False, slots=True)
class Page:
    """A rendered page awaiting bundling and serialization.

    Pages compare by identity. ``document`` owns the rendered top-level nodes
    so that any of them can be replaced in place.
    """

    page_path: str
    document: BeautifulSoup
    source_path: Path | None = None

    @classmethod
    def from_nodes(
        cls,
        page_path: str,
        nodes: cabc.Iterable[PageElement],
        *,
        source_path: Path | None = None,
    ) -> Page:
        """Wrap rendered ``nodes`` in a fresh document."""
        document = new_document()
        for node in list(nodes):
            document.append(node)
        return cls(page_path=page_path, document=document, source_path=source_path)

    @property
    def nodes(self) -> list[PageElement]:
        """Return the page's top-level nodes."""
        return list(self.document.contents)

    def to_html(self) -> str:
        """Serialize the page markup."""
        return to_html(self.document.contents)


@dc.dataclass(slots=True)
class Bundle:
    """An external script file built from one or more extracted scripts.

    Attributes
    ----------
    name : str
        File stem; dash-joined names of every component merged in.
    code : str
        Newline-joined bodies of the merged scripts.
    components : list[str]
        Names of the components whose scripts the bundle carries.
    src : str or None
        Final URL path, assigned once merging is complete.
    """

    name: str
    code: str
    components: list[str] = dc.field(default_factory=list)
    src: str | None = None

    def absorb(self, other: Bundle) -> None:
        """Append ``other``'s name and code to this bundle."""
        self.name = f"{self.name}-{other.name}"
        self.code = f"{self.code}\n{other.code}"
        self.components.extend(other.components)

    def finalize(self, src_prefix: str) -> str:
        """Assign the bundle's ``src`` from its final name."""
        if self.src is not None:
            msg = f"Bundle '{self.name}' already has a src: {self.src}"
            raise BundlingInvariantError(msg)
        self.src = f"{src_prefix}{self.name}{BUNDLE_SUFFIX}"
        return self.src

    @property
    def relative_path(self) -> str:
        """Return ``src`` without a leading slash, for writing under a directory."""
        if self.src is None:
            msg = f"Bundle '{self.name}' has not been finalized."
            raise BundlingInvariantError(msg)
        return self.src.lstrip("/")


__all__ = [
    "BUNDLE_SUFFIX",
    "Bundle",
    "BundlingInvariantError",
    "Page",
    "ScriptSignature",
]
