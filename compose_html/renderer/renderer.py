"""Expand component invocations and slots into plain markup.

:class:`Renderer` walks a component template depth-first and dispatches every
node on its :class:`NodeKind`. Component invocations are replaced with the
expansion of the referenced template, slot placeholders with the content the
caller supplied, and everything else is copied through. Slot content is
rendered in the scope where it was written, so placeholders nested inside it
resolve against the caller's own slots.

Example
-------
>>> from pathlib import Path
>>> from compose_html.compiler import ComponentTable, compile_source
>>> from compose_html.dom import to_html
>>> table = ComponentTable(
...     [compile_source("x-box", Path("x-box.html"), "<div><slot/></div>")]
... )
>>> page = compile_source(
...     "index", Path("index.html"), "<html><x-box>Hi</x-box></html>"
... )
>>> to_html(Renderer(table).render(page))
'<html><div>Hi</div></html>'
"""

from __future__ import annotations

import enum
import typing as typ

from bs4 import Tag

from compose_html.compiler.models import ComponentCycleError, UnknownComponentError
from compose_html.dom import (
    clone_element,
    copy_node,
    is_custom_element_name,
    is_string_node,
    new_document,
)

from .slots import SLOT_TAG, SlotBinding, partition_slot_content, slot_name

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bs4 import PageElement

    from compose_html.compiler.models import Component, ComponentTable

ExpansionStack = tuple["Component", ...]


class NodeKind(enum.Enum):
    """How the renderer treats a template node."""

    TEXT = "text"
    SLOT = "slot"
    COMPONENT = "component"
    ELEMENT = "element"


class Renderer:
    """Render pages against a read-only component table."""

    def __init__(self, components: ComponentTable) -> None:
        self.components = components
        self._factory = new_document()

    def render(
        self,
        page: Component,
        provided_slot_content: cabc.Iterable[PageElement] = (),
    ) -> list[PageElement]:
        """Return the fully expanded top-level nodes of ``page``.

        Parameters
        ----------
        page : Component
            Component to render, usually a page.
        provided_slot_content : Iterable[PageElement], optional
            Content for the page's own slots, partitioned the same way as the
            children of a component invocation.

        Returns
        -------
        list[PageElement]
            Detached nodes that no longer contain custom elements or slots.

        Raises
        ------
        UnknownComponentError
            If a template references an unregistered custom element.
        ComponentCycleError
            If a component expands into itself.
        """
        stack: ExpansionStack = (page,)
        binding = partition_slot_content(
            list(provided_slot_content),
            lambda node: self._render_node(node, {}, stack),
        )
        return self._expand(page, binding, ())

    def expand(
        self, component: Component, binding: SlotBinding | None = None
    ) -> list[PageElement]:
        """Expand ``component`` with an already rendered slot binding."""
        return self._expand(component, binding or {}, ())

    def classify(self, node: PageElement, owner: Component) -> NodeKind:
        """Resolve the kind of ``node`` found in the template of ``owner``."""
        if is_string_node(node) or not isinstance(node, Tag):
            return NodeKind.TEXT
        if node.name == SLOT_TAG:
            return NodeKind.SLOT
        if node.name in self.components:
            return NodeKind.COMPONENT
        if is_custom_element_name(node.name):
            msg = f"Unknown component <{node.name}> referenced in {owner.file_path}"
            raise UnknownComponentError(msg)
        return NodeKind.ELEMENT

    def _expand(
        self, component: Component, binding: SlotBinding, stack: ExpansionStack
    ) -> list[PageElement]:
        if any(entry is component for entry in stack):
            chain = " -> ".join(entry.name for entry in (*stack, component))
            msg = f"Recursive component definition: {chain}"
            raise ComponentCycleError(msg)
        inner_stack = (*stack, component)
        rendered: list[PageElement] = []
        for node in list(component.template.contents):
            rendered.extend(self._render_node(node, binding, inner_stack))
        return rendered

    def _render_node(
        self, node: PageElement, binding: SlotBinding, stack: ExpansionStack
    ) -> list[PageElement]:
        match self.classify(node, stack[-1]):
            case NodeKind.TEXT:
                return [copy_node(node)]
            case NodeKind.SLOT:
                supplied = binding.get(slot_name(typ.cast("Tag", node)), [])
                return [copy_node(item) for item in supplied]
            case NodeKind.COMPONENT:
                return self._render_invocation(typ.cast("Tag", node), binding, stack)
            case NodeKind.ELEMENT:
                return [self._render_element(typ.cast("Tag", node), binding, stack)]

    def _render_invocation(
        self, invocation: Tag, binding: SlotBinding, stack: ExpansionStack
    ) -> list[PageElement]:
        target = self.components.get(invocation.name)
        if target is None:  # pragma: no cover - classify guarantees registration
            msg = f"Component <{invocation.name}> disappeared from the table."
            raise UnknownComponentError(msg)
        # Children belong to the caller: render them with the caller's binding.
        inner_binding = partition_slot_content(
            list(invocation.contents),
            lambda child: self._render_node(child, binding, stack),
        )
        return self._expand(target, inner_binding, stack)

    def _render_element(
        self, element: Tag, binding: SlotBinding, stack: ExpansionStack
    ) -> Tag:
        clone = clone_element(self._factory, element)
        for child in list(element.contents):
            for rendered in self._render_node(child, binding, stack):
                clone.append(rendered)
        return clone


__all__ = ["NodeKind", "Renderer"]
