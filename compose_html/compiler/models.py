"""Component records, the component table, and definition errors."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from bs4 import BeautifulSoup, Tag


class ComponentError(ValueError):
    """Raised when component definitions cannot produce a valid build."""


class DuplicateComponentError(ComponentError):
    """Raised when two reusable components share the same name."""


class UnknownComponentError(ComponentError):
    """Raised when a template references a component that was never defined."""


class ComponentCycleError(ComponentError):
    """Raised when a component expands into itself, directly or indirectly."""


class InvalidComponentNameError(ComponentError):
    """Raised when a reusable component cannot be invoked as a custom element."""


@dc.dataclass(frozen=True, slots=True)
class Component:
    """A compiled template file.

    Attributes
    ----------
    name : str
        Tag name used to invoke the component (the lower-cased file stem).
    file_path : Path
        Source file the component was compiled from.
    is_page : bool
        ``True`` for top-level documents, ``False`` for reusable fragments.
    template : BeautifulSoup
        Parsed template tree as authored.
    client_scripts : tuple[Tag, ...]
        Inline scripts written in this component's own template, excluding
        anything nested inside a custom element.
    source : str
        Raw markup as read, kept for indentation detection.
    """

    name: str
    file_path: Path
    is_page: bool
    template: BeautifulSoup = dc.field(compare=False, repr=False)
    client_scripts: tuple[Tag, ...] = dc.field(default=(), compare=False, repr=False)
    source: str = dc.field(default="", compare=False, repr=False)


class ComponentTable:
    """Registry of reusable components keyed by name."""

    def __init__(self, components: cabc.Iterable[Component] = ()) -> None:
        self._components: dict[str, Component] = {}
        for component in components:
            self.register(component)

    def register(self, component: Component) -> None:
        """Add ``component`` to the table.

        Raises
        ------
        ValueError
            If ``component`` is a page; pages are rendered, never invoked.
        DuplicateComponentError
            If another component already uses the same name.
        """
        if component.is_page:
            msg = f"Page '{component.file_path}' cannot be registered as a component."
            raise ValueError(msg)
        existing = self._components.get(component.name)
        if existing is not None:
            msg = (
                "Component name must be unique. Found duplicate: "
                f"{component.name} ({existing.file_path}, {component.file_path})"
            )
            raise DuplicateComponentError(msg)
        self._components[component.name] = component

    def get(self, name: str) -> Component | None:
        """Return the component registered as ``name`` or ``None``."""
        return self._components.get(name)

    def names(self) -> list[str]:
        """Return registered names in registration order."""
        return list(self._components)

    def __contains__(self, name: object) -> bool:
        return name in self._components

    def __iter__(self) -> cabc.Iterator[Component]:
        return iter(self._components.values())

    def __len__(self) -> int:
        return len(self._components)


__all__ = [
    "Component",
    "ComponentCycleError",
    "ComponentError",
    "ComponentTable",
    "DuplicateComponentError",
    "InvalidComponentNameError",
    "UnknownComponentError",
]
