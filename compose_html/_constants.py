"""Common literal values used across compose_html.

Defaults live here so the configuration loader, the CLI, and tests agree on
them without drifting.

Examples
--------
>>> from compose_html import _constants
>>> _constants.DEFAULT_SCRIPT_SRC_PREFIX + "site-nav.js"
'/scripts/site-nav.js'
"""

from pathlib import Path

DEFAULT_CONFIG = Path("compose.yaml")
DEFAULT_OUTPUT_DIR = "out"
DEFAULT_MIN_PAGE_USAGE = 2
DEFAULT_SCRIPT_SRC_PREFIX = "/scripts/"
DEFAULT_INDENT = 2
INDEX_PAGE = "index"
HTML_GLOB = "**/*.html"
