"""Script bundling: extract shared inline scripts into external files."""

from .bundler import extract_script_bundles
from .models import BUNDLE_SUFFIX, Bundle, BundlingInvariantError, Page, ScriptSignature
from .registry import BundleRegistry

__all__ = [
    "BUNDLE_SUFFIX",
    "Bundle",
    "BundleRegistry",
    "BundlingInvariantError",
    "Page",
    "ScriptSignature",
    "extract_script_bundles",
]
