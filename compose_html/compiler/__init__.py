"""Compile template files into components and hold them in a lookup table."""

from .compiler import compile_file, compile_source
from .models import (
    Component,
    ComponentCycleError,
    ComponentError,
    ComponentTable,
    DuplicateComponentError,
    InvalidComponentNameError,
    UnknownComponentError,
)

__all__ = [
    "Component",
    "ComponentCycleError",
    "ComponentError",
    "ComponentTable",
    "DuplicateComponentError",
    "InvalidComponentNameError",
    "UnknownComponentError",
    "compile_file",
    "compile_source",
]
