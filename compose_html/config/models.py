"""Typed dataclasses describing a compose-html build."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from compose_html._constants import (
    DEFAULT_MIN_PAGE_USAGE,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SCRIPT_SRC_PREFIX,
)


class BuildConfigError(ValueError):
    """Raised when the build configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class BeautifyConfig:
    """Pretty-printing applied to rendered pages.

    ``indent`` is either a number of spaces, a literal indent string such as
    ``"\\t"``, or ``None`` to detect it from each page's own markup.
    """

    enabled: bool = True
    indent: int | str | None = None


@dc.dataclass(slots=True)
class BuildConfig:
    """A fully resolved build definition."""

    input_dir: Path = dc.field(default_factory=Path.cwd)
    output_dir: Path = dc.field(default_factory=lambda: Path.cwd() / DEFAULT_OUTPUT_DIR)
    root_dir: Path | None = None
    min_page_usage: int = DEFAULT_MIN_PAGE_USAGE
    script_src_prefix: str = DEFAULT_SCRIPT_SRC_PREFIX
    beautify: BeautifyConfig = dc.field(default_factory=BeautifyConfig)

    def __post_init__(self) -> None:
        if self.min_page_usage < 1:
            msg = f"min_page_usage must be at least 1, got {self.min_page_usage}."
            raise BuildConfigError(msg)

    @property
    def content_root(self) -> Path:
        """Return the directory pages and assets are resolved against."""
        return self.root_dir or self.input_dir


__all__ = ["BeautifyConfig", "BuildConfig", "BuildConfigError"]
