"""Tests for artifact models, the catalog and its store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from conftest import make_artifact
from dddcontext.catalog import (
    Artifact,
    ArtifactCatalog,
    ArtifactKind,
    CatalogStore,
    TokenEstimator,
    kind_name,
    load_records,
)
from dddcontext.exceptions import CatalogError, NotFoundError


class TestTokenEstimator:
    def test_estimate_basic(self):
        assert TokenEstimator.estimate("def hello():\n    return 'world'") > 0

    def test_estimate_empty(self):
        assert TokenEstimator.estimate("") == 0

    def test_estimate_short_text_costs_at_least_one(self):
        assert TokenEstimator.estimate("x") == 1

    def test_estimate_proportional(self):
        short = TokenEstimator.estimate("x = 1")
        long = TokenEstimator.estimate("x = 1\n" * 100)
        assert long > short


class TestArtifact:
    def test_kind_enum_normalized(self):
        a = Artifact(
            id="a", kind=ArtifactKind.VALUE_OBJECT, bounded_context="Ordering",
            full_content="x", size_full=3,
        )
        assert a.kind == "ValueObject"
        assert kind_name(ArtifactKind.VALUE_OBJECT) == "ValueObject"

    def test_custom_kind_allowed(self):
        a = Artifact(id="s", kind="Saga", bounded_context="Ordering", size_full=1)
        assert a.kind == "Saga"

    def test_sizes_derived_from_text(self):
        a = Artifact(
            id="a", kind="Entity", bounded_context="Ordering",
            full_content="x" * 400, signature_view="y" * 40,
        )
        assert a.size_full == 100
        assert a.size_signature == 10

    def test_signature_size_defaults_to_full(self):
        a = make_artifact("a", "Entity", cost=42)
        assert a.signature_view is None
        assert a.size_signature == 42
        assert not a.has_signature

    def test_derived_signature_size_never_exceeds_full(self):
        a = Artifact(
            id="a", kind="Entity", bounded_context="Ordering",
            full_content="short", size_full=1, signature_view="much longer signature",
        )
        assert a.size_signature == 1

    def test_signature_larger_than_full_rejected(self):
        with pytest.raises(ValidationError):
            Artifact(
                id="a", kind="Entity", bounded_context="Ordering",
                signature_view="sig", size_full=5, size_signature=6,
            )

    def test_missing_signature_requires_equal_sizes(self):
        with pytest.raises(ValidationError):
            Artifact(
                id="a", kind="Entity", bounded_context="Ordering",
                size_full=10, size_signature=4,
            )

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            Artifact(id="a", kind="Entity", bounded_context="Ordering", size_full=-1)

    def test_frozen(self):
        a = make_artifact("a", "Entity", cost=1)
        with pytest.raises(ValidationError):
            a.semantic_weight = 99.0

    def test_display_name(self):
        a = Artifact(id="x.Order", kind="Aggregate", bounded_context="O", title="Order", size_full=1)
        assert a.display_name == "Order"
        assert make_artifact("x.Money", "ValueObject", cost=1).display_name == "x.Money"


class TestArtifactCatalog:
    def test_lookup(self, small_catalog: ArtifactCatalog):
        ids = [a.id for a in small_catalog.lookup("Ordering")]
        assert ids == ["US-1", "Order", "Money"]

    def test_lookup_unknown_context(self, small_catalog: ArtifactCatalog):
        with pytest.raises(NotFoundError) as exc:
            small_catalog.lookup("Shipping")
        assert "Shipping" in str(exc.value)

    def test_get(self, small_catalog: ArtifactCatalog):
        assert small_catalog.get("Order").kind == "Aggregate"

    def test_get_unknown(self, small_catalog: ArtifactCatalog):
        with pytest.raises(NotFoundError):
            small_catalog.get("nope")

    def test_build_freezes(self, small_catalog: ArtifactCatalog):
        assert small_catalog.is_frozen
        with pytest.raises(CatalogError):
            small_catalog.add(make_artifact("late", "Entity", cost=1))

    def test_add_then_freeze(self):
        catalog = ArtifactCatalog()
        catalog.add(make_artifact("a", "Entity", cost=1))
        assert not catalog.is_frozen
        catalog.freeze()
        catalog.freeze()
        assert catalog.is_frozen
        assert len(catalog) == 1

    def test_duplicate_id(self):
        with pytest.raises(CatalogError):
            ArtifactCatalog.build([
                make_artifact("a", "Entity", cost=1),
                make_artifact("a", "ValueObject", cost=2, context="Billing"),
            ])

    def test_bounded_contexts_and_contains(self, bookstore_catalog: ArtifactCatalog):
        assert bookstore_catalog.bounded_contexts() == ["Catalog", "Ordering"]
        assert "US-101" in bookstore_catalog
        assert "US-999" not in bookstore_catalog

    def test_stats(self, small_catalog: ArtifactCatalog):
        stats = small_catalog.stats()
        assert stats["artifacts"] == 3
        assert stats["bounded_contexts"] == {"Ordering": 3}
        assert stats["kinds"]["Aggregate"] == 1


class TestLoadRecords:
    def test_load_bookstore(self, bookstore_records: Path):
        artifacts = load_records(bookstore_records)
        assert len(artifacts) == 16
        assert artifacts[0].id == "US-101"

    def test_load_bare_list(self, tmp_path: Path):
        path = tmp_path / "records.json"
        path.write_text(json.dumps([
            {"id": "a", "kind": "Entity", "bounded_context": "X", "full_content": "abcd"},
        ]))
        artifacts = load_records(path)
        assert artifacts[0].size_full == 1

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(CatalogError):
            load_records(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "records.json"
        path.write_text("{not json")
        with pytest.raises(CatalogError):
            load_records(path)

    def test_invalid_record(self, tmp_path: Path):
        path = tmp_path / "records.json"
        path.write_text(json.dumps([{"id": "a", "kind": "Entity"}]))
        with pytest.raises(CatalogError) as exc:
            load_records(path)
        assert "record 0" in str(exc.value)


class TestCatalogStore:
    def test_save_and_load(self, tmp_path: Path, bookstore_catalog: ArtifactCatalog):
        store = CatalogStore(tmp_path / "catalog.db")
        store.save(bookstore_catalog, metadata={"source": "bookstore"})
        store.close()

        store = CatalogStore(tmp_path / "catalog.db")
        loaded = store.load()
        assert store.get_metadata("source") == "bookstore"
        store.close()

        assert loaded is not None
        assert loaded.is_frozen
        assert [a.id for a in loaded] == [a.id for a in bookstore_catalog]
        assert loaded.get("ordering.Order") == bookstore_catalog.get("ordering.Order")
        assert loaded.get("ordering.Money").signature_view is None

    def test_load_empty(self, tmp_path: Path):
        store = CatalogStore(tmp_path / "catalog.db")
        assert store.load() is None
        assert store.get_metadata("source") is None
        store.close()

    def test_save_replaces(self, tmp_path: Path, small_catalog, bookstore_catalog):
        store = CatalogStore(tmp_path / "catalog.db")
        store.save(bookstore_catalog)
        store.save(small_catalog)
        loaded = store.load()
        store.close()
        assert len(loaded) == 3
