"""Composition renderer that turns component trees into plain HTML nodes."""

from .renderer import NodeKind, Renderer
from .slots import DEFAULT_SLOT, SlotBinding, partition_slot_content

__all__ = [
    "DEFAULT_SLOT",
    "NodeKind",
    "Renderer",
    "SlotBinding",
    "partition_slot_content",
]
