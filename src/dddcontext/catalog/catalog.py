"""In-memory artifact catalog with a build-then-freeze lifecycle."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from dddcontext.catalog.models import Artifact
from dddcontext.exceptions import CatalogError, NotFoundError


class ArtifactCatalog:
    """Holds classified artifacts grouped by bounded context.

    The catalog is populated first (``add``) and then frozen. After
    ``freeze()`` it is read-only, so any number of selection runs may read it
    concurrently without locking. Re-ingestion builds a new catalog instead of
    mutating a frozen one.

    Usage:
        catalog = ArtifactCatalog.build(artifacts)
        ordering = catalog.lookup("Ordering")
    """

    def __init__(self) -> None:
        self._by_id: dict[str, Artifact] = {}
        self._by_context: dict[str, list[Artifact]] = {}
        self._frozen = False

    @classmethod
    def build(cls, artifacts: Iterable[Artifact]) -> ArtifactCatalog:
        """Create a frozen catalog from an iterable of artifacts."""
        catalog = cls()
        for artifact in artifacts:
            catalog.add(artifact)
        catalog.freeze()
        return catalog

    # ------------------------------------------------------------------
    # Build phase
    # ------------------------------------------------------------------

    def add(self, artifact: Artifact) -> None:
        if self._frozen:
            raise CatalogError(
                f"Cannot add '{artifact.id}': catalog is frozen. "
                "Build a new catalog to re-ingest artifacts."
            )
        if artifact.id in self._by_id:
            raise CatalogError(f"Duplicate artifact id: '{artifact.id}'")
        self._by_id[artifact.id] = artifact
        self._by_context.setdefault(artifact.bounded_context, []).append(artifact)

    def freeze(self) -> None:
        """End the build phase. Idempotent."""
        if self._frozen:
            return
        self._by_context = MappingProxyType(
            {name: tuple(items) for name, items in self._by_context.items()}
        )
        self._by_id = MappingProxyType(self._by_id)
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Read phase
    # ------------------------------------------------------------------

    def lookup(self, bounded_context: str) -> tuple[Artifact, ...]:
        """Return every artifact owned by a bounded context."""
        try:
            items = self._by_context[bounded_context]
        except KeyError:
            raise NotFoundError("bounded context", bounded_context) from None
        return tuple(items)

    def get(self, artifact_id: str) -> Artifact:
        try:
            return self._by_id[artifact_id]
        except KeyError:
            raise NotFoundError("artifact", artifact_id) from None

    def bounded_contexts(self) -> list[str]:
        return sorted(self._by_context)

    def stats(self) -> dict:
        """Artifact counts per bounded context and per kind."""
        return {
            "artifacts": len(self._by_id),
            "bounded_contexts": {
                name: len(items) for name, items in sorted(self._by_context.items())
            },
            "kinds": dict(sorted(Counter(a.kind for a in self._by_id.values()).items())),
        }

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Artifact]:
        return iter(self._by_id.values())

    def __contains__(self, artifact_id: object) -> bool:
        return artifact_id in self._by_id
