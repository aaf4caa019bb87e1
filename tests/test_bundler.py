"""Unit tests for the script bundling pass.

``extract_script_bundles`` decides which inline component scripts become
external bundles, merges bundles loaded on identical page sets, and rewrites
page trees to reference them. These tests build small page sets directly from
markup so every decision (threshold, ``async`` override, merge order, naming,
rewrite attributes, determinism) can be asserted precisely.

Usage
-----
Run ``pytest tests/test_bundler.py -v``.
"""

from __future__ import annotations

import logging
import typing as typ

import pytest

from compose_html.bundler import (
    Bundle,
    BundlingInvariantError,
    Page,
    ScriptSignature,
    extract_script_bundles,
)
from compose_html.dom import iter_inline_scripts, parse

from tests.helpers import make_component

if typ.TYPE_CHECKING:
    from compose_html.compiler import Component

PREFIX = "/js/"


def _page(path: str, markup: str) -> Page:
    return Page.from_nodes(path, parse(markup).contents)


def _components() -> list[Component]:
    return [
        make_component("a-comp", "<div>a</div><script>A()</script>"),
        make_component("b-comp", "<div>b</div><script>B()</script>"),
        make_component("c-comp", "<div>c</div><script>C()</script>"),
    ]


def _script_sources(page: Page) -> list[str | None]:
    return [script.get("src") for script in page.document.find_all("script")]


def test_threshold_keeps_single_page_scripts_inline() -> None:
    """With a threshold of two, a script on one page is never extracted."""
    pages = [
        _page("x.html", "<script>A()</script>"),
        _page("y.html", "<p>no scripts</p>"),
    ]
    bundles = extract_script_bundles(pages, _components(), 2, PREFIX)
    assert bundles == [], f"expected no bundles, got {bundles!r}"
    assert pages[0].to_html() == "<script>A()</script>"


def test_threshold_extracts_shared_scripts_once() -> None:
    """A script on two pages becomes one bundle referenced from both."""
    pages = [
        _page("x.html", "<main><script>A()</script></main>"),
        _page("y.html", "<script>A()</script>"),
    ]
    bundles = extract_script_bundles(pages, _components(), 2, PREFIX)
    assert [(b.name, b.src, b.code) for b in bundles] == [
        ("a-comp", "/js/a-comp.js", "A()")
    ]
    assert pages[0].to_html() == '<main><script src="/js/a-comp.js"></script></main>'
    assert pages[1].to_html() == '<script src="/js/a-comp.js"></script>'


def test_repeated_use_on_one_page_counts_once() -> None:
    """Pages are counted once per script, not once per occurrence."""
    pages = [_page("x.html", "<script>A()</script><script>A()</script>")]
    assert extract_script_bundles(pages, _components(), 2, PREFIX) == []


def test_async_scripts_are_always_extracted() -> None:
    """An ``async`` component script is extracted even from a single page."""
    components = [make_component("x-beacon", "<script async>ping()</script>")]
    pages = [_page("x.html", "<script async>ping()</script>")]
    bundles = extract_script_bundles(pages, components, 2, PREFIX)
    assert [b.src for b in bundles] == ["/js/x-beacon.js"]
    script = pages[0].document.find("script")
    assert script is not None
    assert script.attrs == {"async": "", "src": "/js/x-beacon.js"}
    assert script.string is None, "expected the inline body to be dropped"


def test_page_level_scripts_are_never_extracted() -> None:
    """Scripts no component declares stay inline however often they repeat."""
    pages = [
        _page("x.html", "<script>track()</script>"),
        _page("y.html", "<script>track()</script>"),
    ]
    assert extract_script_bundles(pages, _components(), 1, PREFIX) == []
    assert _script_sources(pages[0]) == [None]


def test_data_scripts_are_untouched() -> None:
    """Non-JavaScript script types are not treated as inline scripts."""
    markup = '<script type="application/json">{"a": 1}</script>'
    components = [make_component("x-data", markup)]
    pages = [_page("x.html", markup), _page("y.html", markup)]
    assert extract_script_bundles(pages, components, 1, PREFIX) == []
    assert pages[0].to_html() == markup


def test_same_usage_bundles_merge() -> None:
    """Scripts always loaded together share one bundle; others stay apart."""
    pages = [
        _page(
            "/x.html",
            "<script>A()</script><script>B()</script><script>C()</script>",
        ),
        _page("/y.html", "<script>A()</script><script>B()</script>"),
    ]
    bundles = extract_script_bundles(pages, _components(), 1, PREFIX)
    assert [(b.name, b.code) for b in bundles] == [
        ("a-comp-b-comp", "A()\nB()"),
        ("c-comp", "C()"),
    ]
    assert bundles[0].src == "/js/a-comp-b-comp.js"
    assert bundles[0].components == ["a-comp", "b-comp"]
    assert _script_sources(pages[0]) == [
        "/js/a-comp-b-comp.js",
        "/js/a-comp-b-comp.js",
        "/js/c-comp.js",
    ]
    assert _script_sources(pages[1]) == ["/js/a-comp-b-comp.js"] * 2


def test_last_declaring_component_owns_shared_script() -> None:
    """Identical scripts in two components are named after the later one."""
    components = [
        make_component("x-first", "<script>shared()</script>"),
        make_component("x-second", "<p></p><script>shared()</script>"),
    ]
    pages = [
        _page("x.html", "<script>shared()</script>"),
        _page("y.html", "<script>shared()</script>"),
    ]
    bundles = extract_script_bundles(pages, components, 2, PREFIX)
    assert [b.name for b in bundles] == ["x-second"]


def test_merge_order_follows_page_traversal() -> None:
    """Bundle contents follow first encounter across pages in order."""
    pages = [
        _page("x.html", "<script>B()</script><script>A()</script>"),
        _page("y.html", "<script>A()</script><script>B()</script>"),
    ]
    bundles = extract_script_bundles(pages, _components(), 2, PREFIX)
    assert [(b.name, b.code) for b in bundles] == [("b-comp-a-comp", "B()\nA()")]


def test_rewrite_keeps_original_attributes() -> None:
    """Replaced scripts keep every attribute and gain a ``src``."""
    markup = '<script type="module" defer data-role="nav">nav()</script>'
    components = [make_component("site-nav", markup)]
    pages = [_page("x.html", markup), _page("y.html", markup)]
    extract_script_bundles(pages, components, 2, "/assets/")
    for page in pages:
        script = page.document.find("script")
        assert script is not None
        assert script.attrs == {
            "type": "module",
            "defer": "",
            "data-role": "nav",
            "src": "/assets/site-nav.js",
        }
        assert script.contents == [], "expected the inline body to be dropped"
        assert page.to_html() == (
            '<script type="module" defer="" data-role="nav" '
            'src="/assets/site-nav.js"></script>'
        )


def test_scripts_inside_nested_elements_are_found() -> None:
    """Scripts are found at any depth of the page tree."""
    pages = [
        _page("x.html", "<html><body><div><script>A()</script></div></body></html>"),
        _page("y.html", "<html><head><script>A()</script></head></html>"),
    ]
    extract_script_bundles(pages, _components(), 2, PREFIX)
    assert _script_sources(pages[0]) == ["/js/a-comp.js"]
    assert _script_sources(pages[1]) == ["/js/a-comp.js"]


def test_bundling_is_deterministic() -> None:
    """Identical inputs produce byte-identical bundles and pages."""

    def run() -> tuple[list[tuple[str, str | None, str]], list[str]]:
        pages = [
            _page("b.html", "<script>C()</script><script>A()</script>"),
            _page("a.html", "<script>A()</script><script>B()</script>"),
            _page("c.html", "<script>B()</script><script>C()</script>"),
        ]
        bundles = extract_script_bundles(pages, _components(), 2, PREFIX)
        return [(b.name, b.src, b.code) for b in bundles], [p.to_html() for p in pages]

    assert run() == run()


def test_min_page_usage_must_be_positive() -> None:
    """A threshold below one is rejected."""
    with pytest.raises(ValueError, match="at least 1"):
        extract_script_bundles([], _components(), 0, PREFIX)


def test_debug_log_lists_page_bundles(caplog: pytest.LogCaptureFixture) -> None:
    """Each rewritten page logs the bundles it now loads."""
    caplog.set_level(logging.DEBUG, logger="compose_html.bundler")
    pages = [
        _page("x.html", "<script>A()</script>"),
        _page("y.html", "<script>A()</script>"),
    ]
    extract_script_bundles(pages, _components(), 2, PREFIX)
    assert "Extracting 1 bundles from: x.html\n  /js/a-comp.js" in caplog.text


def test_signature_ignores_attribute_order() -> None:
    """Signatures are structural and independent of attribute order."""
    first, second = iter_inline_scripts(
        parse('<script defer type="module">x()</script>'
              '<script type="module" defer>x()</script>').contents
    )
    left = ScriptSignature.from_element(first)
    right = ScriptSignature.from_element(second)
    assert left == right
    assert hash(left) == hash(right)
    assert left.digest == right.digest
    assert left.canonical() == '<script defer="" type="module">x()</script>'


def test_signature_distinguishes_code_and_attributes() -> None:
    """Different code or attributes are different logical scripts."""
    scripts = list(
        iter_inline_scripts(
            parse("<script>x()</script><script>y()</script>"
                  "<script async>x()</script>").contents
        )
    )
    signatures = {ScriptSignature.from_element(script) for script in scripts}
    assert len(signatures) == 3
    assert [ScriptSignature.from_element(s).is_async for s in scripts] == [
        False,
        False,
        True,
    ]


def test_bundle_finalize_runs_once() -> None:
    """A bundle's path is assigned exactly once."""
    bundle = Bundle(name="x-nav", code="nav()")
    assert bundle.finalize("/js/") == "/js/x-nav.js"
    assert bundle.relative_path == "js/x-nav.js"
    with pytest.raises(BundlingInvariantError):
        bundle.finalize("/js/")


def test_unfinalized_bundle_has_no_path() -> None:
    """Reading the output path before finalization is an invariant violation."""
    with pytest.raises(BundlingInvariantError):
        _ = Bundle(name="x-nav", code="").relative_path
