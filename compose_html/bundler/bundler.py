"""Promote reused inline component scripts into shared external bundles.

:func:`extract_script_bundles` runs once over every rendered page. It indexes
the inline scripts each component declares, finds which pages use them,
extracts the ones used often enough (or marked ``async``), merges bundles
that are always loaded together, and rewrites the pages to load the bundles
through ``<script src>`` elements.

Example
-------
>>> bundles = extract_script_bundles(pages, table, 2, "/scripts/")  # doctest: +SKIP
>>> [bundle.src for bundle in bundles]  # doctest: +SKIP
['/scripts/site-nav-site-footer.js']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from compose_html.dom import iter_inline_scripts, script_text

from .models import Bundle, BundlingInvariantError, ScriptSignature
from .registry import BundleRegistry

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bs4 import Tag

    from compose_html.compiler.models import Component

    from .models import Page

log = logging.getLogger(__name__)

USAGE_SEPARATOR = ":"


@dc.dataclass(frozen=True, slots=True)
class ScriptOwner:
    """The component that declares a script, and the declaring element."""

    component: Component
    element: Tag


@dc.dataclass(slots=True)
class PageScripts:
    """Inline scripts found on one page, each paired with its signature."""

    page: Page
    scripts: list[tuple[Tag, ScriptSignature]]


def extract_script_bundles(
    pages: cabc.Sequence[Page],
    components: cabc.Iterable[Component],
    min_page_usage: int,
    src_prefix: str,
) -> list[Bundle]:
    """Extract shared component scripts from ``pages`` into bundles.

    Parameters
    ----------
    pages : Sequence[Page]
        Every rendered page of the build, in a stable order. Their trees are
        rewritten in place.
    components : Iterable[Component]
        Components whose inline scripts may be extracted.
    min_page_usage : int
        Minimum number of distinct pages a script must appear on to be
        extracted. ``async`` scripts are extracted regardless.
    src_prefix : str
        Prefix of every bundle ``src`` (for example ``"/scripts/"``).

    Returns
    -------
    list[Bundle]
        The surviving bundles, with ``src`` assigned, in creation order.

    Raises
    ------
    ValueError
        If ``min_page_usage`` is smaller than one.
    BundlingInvariantError
        If the pass reaches an inconsistent state.
    """
    if min_page_usage < 1:
        msg = f"min_page_usage must be at least 1, got {min_page_usage}."
        raise ValueError(msg)

    owners = _map_script_owners(components)
    page_scripts, script_pages = _map_scripts_to_pages(pages)
    eligible = [
        signature
        for signature, used_on in script_pages.items()
        if _is_eligible(signature, used_on, owners, min_page_usage)
    ]
    registry = _generate_bundles(eligible, owners)
    _merge_bundles(registry, script_pages)

    bundles = registry.bundles()
    for bundle in bundles:
        bundle.finalize(src_prefix)

    _replace_scripts_with_bundles(page_scripts, registry)
    return bundles


def _map_script_owners(
    components: cabc.Iterable[Component],
) -> dict[ScriptSignature, ScriptOwner]:
    """Index every component's own inline scripts by signature."""
    owners: dict[ScriptSignature, ScriptOwner] = {}
    for component in components:
        for element in component.client_scripts:
            signature = ScriptSignature.from_element(element)
            owners[signature] = ScriptOwner(component=component, element=element)
    return owners


def _map_scripts_to_pages(
    pages: cabc.Sequence[Page],
) -> tuple[list[PageScripts], dict[ScriptSignature, list[Page]]]:
    """Find every inline script per page and the distinct pages per script."""
    page_scripts: list[PageScripts] = []
    script_pages: dict[ScriptSignature, list[Page]] = {}
    for page in pages:
        found = [
            (element, ScriptSignature.from_element(element))
            for element in iter_inline_scripts(page.nodes)
        ]
        page_scripts.append(PageScripts(page=page, scripts=found))
        for _, signature in found:
            used_on = script_pages.setdefault(signature, [])
            if not any(existing is page for existing in used_on):
                used_on.append(page)
    return page_scripts, script_pages


def _is_eligible(
    signature: ScriptSignature,
    used_on: list[Page],
    owners: dict[ScriptSignature, ScriptOwner],
    min_page_usage: int,
) -> bool:
    """Return ``True`` when a component-owned script should be extracted."""
    if signature not in owners:
        return False
    return len(used_on) >= min_page_usage or signature.is_async


def _generate_bundles(
    eligible: list[ScriptSignature], owners: dict[ScriptSignature, ScriptOwner]
) -> BundleRegistry:
    """Create one bundle per eligible script, named after its component."""
    registry = BundleRegistry()
    for signature in eligible:
        owner = owners.get(signature)
        if owner is None:
            msg = f"Eligible script {signature.digest[:12]} has no owning component."
            raise BundlingInvariantError(msg)
        bundle = Bundle(
            name=owner.component.name,
            code=script_text(owner.element),
            components=[owner.component.name],
        )
        registry.add(signature, bundle)
    return registry


def _usage_signature(used_on: cabc.Iterable[Page]) -> str:
    """Return the sorted, colon-joined page paths a script is used on."""
    return USAGE_SEPARATOR.join(sorted(page.page_path for page in used_on))


def _merge_bundles(
    registry: BundleRegistry, script_pages: dict[ScriptSignature, list[Page]]
) -> None:
    """Merge bundles whose scripts are loaded on exactly the same pages."""
    buckets: dict[str, int] = {}
    for signature in registry.signatures():
        bundle_id = registry.id_of(signature)
        if bundle_id is None:  # pragma: no cover - signatures() only lists owned ids
            msg = f"Script {signature.digest[:12]} lost its bundle."
            raise BundlingInvariantError(msg)
        usage = _usage_signature(script_pages.get(signature, []))
        representative = buckets.get(usage)
        if representative is None:
            buckets[usage] = bundle_id
        else:
            registry.union(representative, bundle_id)


def _replace_scripts_with_bundles(
    page_scripts: list[PageScripts], registry: BundleRegistry
) -> None:
    """Swap extracted inline scripts for ``<script src>`` references."""
    for entry in page_scripts:
        sources: list[str] = []
        for element, signature in entry.scripts:
            bundle = registry.resolve(signature)
            if bundle is None:
                continue
            if bundle.src is None:
                msg = f"Bundle '{bundle.name}' was not finalized before rewriting."
                raise BundlingInvariantError(msg)
            reference = entry.page.document.new_tag(
                "script", attrs=dict(element.attrs)
            )
            reference["src"] = bundle.src
            element.replace_with(reference)
            sources.append(bundle.src)
        if sources:
            log.debug(
                "Extracting %d bundles from: %s%s",
                len(sources),
                entry.page.page_path,
                "".join(f"\n  {src}" for src in sources),
            )


__all__ = ["PageScripts", "ScriptOwner", "extract_script_bundles"]
