"""Slot bindings passed from a component invocation to the invoked template."""

from __future__ import annotations

import typing as typ

from bs4 import Tag

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bs4 import PageElement

DEFAULT_SLOT = ""
SLOT_TAG = "slot"
SLOT_WRAPPER_TAG = "template"

SlotBinding = dict[str, list["PageElement"]]


def slot_name(placeholder: Tag) -> str:
    """Return the slot a ``<slot>`` placeholder stands for."""
    return str(placeholder.get("name", DEFAULT_SLOT)).strip()


def wrapper_slot_name(node: PageElement) -> str | None:
    """Return the target slot of a ``<template slot="...">`` wrapper, if any."""
    if (
        isinstance(node, Tag)
        and node.name == SLOT_WRAPPER_TAG
        and node.has_attr("slot")
    ):
        return str(node["slot"]).strip()
    return None


def partition_slot_content(
    children: cabc.Iterable[PageElement],
    render: cabc.Callable[[PageElement], list[PageElement]],
) -> SlotBinding:
    """Group invocation children by the slot they fill.

    Each ``<template slot="X">`` wrapper contributes its rendered children to
    slot ``X``; every other child is rendered into the default slot. Wrappers
    naming the same slot are concatenated in document order.

    Parameters
    ----------
    children : Iterable[PageElement]
        Child nodes of the component invocation, in document order.
    render : Callable[[PageElement], list[PageElement]]
        Renders a single node in the caller's scope.

    Returns
    -------
    SlotBinding
        Mapping of slot name to rendered nodes; the default slot is keyed by
        the empty string.
    """
    binding: SlotBinding = {}
    for child in children:
        name = wrapper_slot_name(child)
        if name is None:
            binding.setdefault(DEFAULT_SLOT, []).extend(render(child))
            continue
        target = binding.setdefault(name, [])
        for grandchild in list(typ.cast("Tag", child).contents):
            target.extend(render(grandchild))
    return binding


__all__ = [
    "DEFAULT_SLOT",
    "SLOT_TAG",
    "SLOT_WRAPPER_TAG",
    "SlotBinding",
    "partition_slot_content",
    "slot_name",
    "wrapper_slot_name",
]
