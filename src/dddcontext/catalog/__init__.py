"""Artifact catalog: classified records grouped by bounded context."""

from dddcontext.catalog.catalog import ArtifactCatalog
from dddcontext.catalog.models import Artifact, ArtifactKind, TokenEstimator, kind_name
from dddcontext.catalog.store import CatalogStore, load_records

__all__ = [
    "Artifact",
    "ArtifactCatalog",
    "ArtifactKind",
    "CatalogStore",
    "TokenEstimator",
    "kind_name",
    "load_records",
]
