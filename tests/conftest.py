"""Shared fixtures for the compose_html test suite."""

from __future__ import annotations

import logging
import typing as typ

import pytest

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@pytest.fixture(autouse=True)
def _reset_package_logger() -> cabc.Iterator[None]:
    """Undo CLI logging setup so caplog keeps seeing package records."""
    logger = logging.getLogger("compose_html")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
