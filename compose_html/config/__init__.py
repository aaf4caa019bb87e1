"""Load and validate compose-html build configuration.

This subpackage reads the optional ``compose.yaml`` file, merges it with
command-line overrides, and produces a :class:`BuildConfig` that the site
builder consumes. The primary entry point is :func:`load_build_config`.

Examples
--------
>>> from pathlib import Path
>>> from compose_html.config import load_build_config
>>> config = load_build_config(Path("compose.yaml"), required=False)  # doctest: +SKIP
>>> config.script_src_prefix  # doctest: +SKIP
'/scripts/'
"""

from .loader import load_build_config
from .models import BeautifyConfig, BuildConfig, BuildConfigError

__all__ = [
    "BeautifyConfig",
    "BuildConfig",
    "BuildConfigError",
    "load_build_config",
]
