"""Shared test fixtures for dddcontext."""

from __future__ import annotations

from pathlib import Path

import pytest

from dddcontext.catalog import Artifact, ArtifactCatalog, load_records

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


def make_artifact(
    artifact_id: str,
    kind: str,
    cost: int,
    weight: float = 1.0,
    context: str = "Ordering",
    signature_cost: int | None = None,
) -> Artifact:
    """Build an artifact with explicit cost units."""
    if signature_cost is None:
        return Artifact(
            id=artifact_id,
            kind=kind,
            bounded_context=context,
            full_content=f"full body of {artifact_id}",
            size_full=cost,
            semantic_weight=weight,
        )
    return Artifact(
        id=artifact_id,
        kind=kind,
        bounded_context=context,
        full_content=f"full body of {artifact_id}",
        signature_view=f"signature of {artifact_id}",
        size_full=cost,
        size_signature=signature_cost,
        semantic_weight=weight,
    )


@pytest.fixture
def story() -> Artifact:
    return make_artifact("US-1", "UserStory", cost=20, weight=10.0)


@pytest.fixture
def small_catalog(story: Artifact) -> ArtifactCatalog:
    """One aggregate, one value object and the driving story."""
    return ArtifactCatalog.build([
        story,
        make_artifact("Order", "Aggregate", cost=50, weight=9.0),
        make_artifact("Money", "ValueObject", cost=10, weight=5.0),
    ])


@pytest.fixture
def bookstore_records() -> Path:
    return EXAMPLES_DIR / "bookstore_catalog.json"


@pytest.fixture
def bookstore_catalog(bookstore_records: Path) -> ArtifactCatalog:
    return ArtifactCatalog.build(load_records(bookstore_records))
