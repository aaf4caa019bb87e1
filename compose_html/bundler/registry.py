"""Union-find bookkeeping from script signatures to the bundles that carry them."""

from __future__ import annotations

import typing as typ

from .models import BundlingInvariantError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import Bundle, ScriptSignature


class BundleRegistry:
    """Map script signatures to bundles and merge bundles together.

    Every signature owns a bundle id when it is added. Merging points one id
    at another, so a signature always resolves to its group's representative
    through :meth:`find` and no per-signature repointing is needed.
    """

    def __init__(self) -> None:
        self._bundles: list[Bundle] = []
        self._parent: list[int] = []
        self._owners: dict[ScriptSignature, int] = {}

    def add(self, signature: ScriptSignature, bundle: Bundle) -> int:
        """Register ``bundle`` as the sole carrier of ``signature``."""
        if signature in self._owners:
            msg = f"Script {signature.digest[:12]} already has a bundle."
            raise BundlingInvariantError(msg)
        bundle_id = len(self._bundles)
        self._bundles.append(bundle)
        self._parent.append(bundle_id)
        self._owners[signature] = bundle_id
        return bundle_id

    def find(self, bundle_id: int) -> int:
        """Return the representative id of ``bundle_id``'s group."""
        root = bundle_id
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[bundle_id] != root:
            self._parent[bundle_id], bundle_id = root, self._parent[bundle_id]
        return root

    def union(self, representative_id: int, other_id: int) -> int:
        """Merge ``other_id``'s group into ``representative_id``'s group.

        Parameters
        ----------
        representative_id : int
            Group that survives; its bundle absorbs the other's name and code.
        other_id : int
            Group that is merged away.

        Returns
        -------
        int
            The surviving representative id.

        Raises
        ------
        BundlingInvariantError
            If both ids already belong to the same group.
        """
        keep = self.find(representative_id)
        drop = self.find(other_id)
        if keep == drop:
            msg = f"Bundle '{self._bundles[keep].name}' cannot be merged into itself."
            raise BundlingInvariantError(msg)
        self._bundles[keep].absorb(self._bundles[drop])
        self._parent[drop] = keep
        return keep

    def id_of(self, signature: ScriptSignature) -> int | None:
        """Return the id first assigned to ``signature``, if any."""
        return self._owners.get(signature)

    def resolve(self, signature: ScriptSignature) -> Bundle | None:
        """Return the surviving bundle that carries ``signature``."""
        bundle_id = self._owners.get(signature)
        if bundle_id is None:
            return None
        return self._bundles[self.find(bundle_id)]

    def signatures(self) -> list[ScriptSignature]:
        """Return registered signatures in insertion order."""
        return list(self._owners)

    def bundles(self) -> list[Bundle]:
        """Return surviving bundles in the order their groups were created."""
        return [
            bundle
            for bundle_id, bundle in enumerate(self._bundles)
            if self.find(bundle_id) == bundle_id
        ]

    def __contains__(self, signature: object) -> bool:
        return signature in self._owners

    def __iter__(self) -> cabc.Iterator[ScriptSignature]:
        return iter(self._owners)

    def __len__(self) -> int:
        return len(self._owners)


__all__ = ["BundleRegistry"]
