"""Unit tests for the union-find bundle registry."""

from __future__ import annotations

import pytest

from compose_html.bundler import Bundle, BundleRegistry, BundlingInvariantError
from compose_html.bundler.models import ScriptSignature


def _signature(code: str) -> ScriptSignature:
    return ScriptSignature(tag="script", attributes=(), code=code)


def _registry(*names: str) -> tuple[BundleRegistry, list[ScriptSignature]]:
    registry = BundleRegistry()
    signatures = [_signature(f"{name}()") for name in names]
    for name, signature in zip(names, signatures, strict=True):
        registry.add(signature, Bundle(name=name, code=f"{name}()", components=[name]))
    return registry, signatures


def test_add_assigns_sequential_ids() -> None:
    """Each signature owns its own bundle until merged."""
    registry, signatures = _registry("x-a", "x-b")
    assert [registry.id_of(sig) for sig in signatures] == [0, 1]
    assert len(registry) == 2
    assert signatures[0] in registry
    assert _signature("other()") not in registry
    assert registry.id_of(_signature("other()")) is None


def test_add_rejects_second_bundle_for_signature() -> None:
    """A signature is carried by exactly one bundle."""
    registry, signatures = _registry("x-a")
    with pytest.raises(BundlingInvariantError):
        registry.add(signatures[0], Bundle(name="x-a", code=""))


def test_union_merges_name_and_code() -> None:
    """The surviving bundle absorbs the merged bundle's name and code."""
    registry, signatures = _registry("x-a", "x-b", "x-c")
    registry.union(0, 1)
    merged = registry.resolve(signatures[1])
    assert merged is registry.resolve(signatures[0])
    assert merged is not None
    assert (merged.name, merged.code) == ("x-a-x-b", "x-a()\nx-b()")
    assert [bundle.name for bundle in registry.bundles()] == ["x-a-x-b", "x-c"]


def test_union_follows_representatives() -> None:
    """Merging through a non-representative id reaches the right group."""
    registry, signatures = _registry("x-a", "x-b", "x-c")
    registry.union(0, 1)
    registry.union(1, 2)
    assert registry.find(2) == 0
    resolved = {id(registry.resolve(sig)) for sig in signatures}
    assert len(resolved) == 1
    assert [bundle.name for bundle in registry.bundles()] == ["x-a-x-b-x-c"]


def test_union_within_one_group_is_rejected() -> None:
    """Merging a group with itself would duplicate its code."""
    registry, _ = _registry("x-a", "x-b")
    registry.union(0, 1)
    with pytest.raises(BundlingInvariantError, match="into itself"):
        registry.union(1, 0)


def test_resolve_unknown_signature() -> None:
    """Scripts that were never registered resolve to no bundle."""
    registry, _ = _registry("x-a")
    assert registry.resolve(_signature("missing()")) is None


def test_signatures_keep_insertion_order() -> None:
    """Iteration follows the order scripts were registered."""
    registry, signatures = _registry("x-c", "x-a", "x-b")
    assert registry.signatures() == signatures
    assert list(registry) == signatures
