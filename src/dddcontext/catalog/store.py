"""Persistent storage for the artifact catalog using SQLite.

The ingestion layer hands over pre-classified artifact records as JSON;
``load_records`` validates them and ``CatalogStore`` keeps them between runs.
Loading always yields a frozen catalog.
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from pydantic import ValidationError

from dddcontext.catalog.catalog import ArtifactCatalog
from dddcontext.catalog.models import Artifact
from dddcontext.exceptions import CatalogError


def load_records(path: str | Path) -> list[Artifact]:
    """Read and validate artifact records from a JSON file.

    Accepts either a bare list of records or an object with an
    ``artifacts`` list.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise CatalogError(f"Records file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("artifacts", [])
    if not isinstance(data, list):
        raise CatalogError(f"{path}: expected a list of artifact records")

    artifacts: list[Artifact] = []
    for i, record in enumerate(data):
        try:
            artifacts.append(Artifact.model_validate(record))
        except ValidationError as e:
            raise CatalogError(f"{path}: record {i} is invalid: {e}") from e
    return artifacts


class CatalogStore:
    """Persists and loads artifact records using SQLite."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._create_tables()
        return self._conn

    def _create_tables(self) -> None:
        conn = self._get_conn()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS artifacts (
                id TEXT PRIMARY KEY,
                kind TEXT NOT NULL,
                bounded_context TEXT NOT NULL,
                full_content TEXT NOT NULL,
                signature_view TEXT,             -- NULL when the kind has no condensed view
                size_full INTEGER NOT NULL,
                size_signature INTEGER NOT NULL,
                semantic_weight REAL NOT NULL,
                title TEXT,
                tags TEXT                        -- JSON list
            );

            CREATE TABLE IF NOT EXISTS metadata (
                key TEXT PRIMARY KEY,
                value TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_artifacts_context ON artifacts(bounded_context);
            CREATE INDEX IF NOT EXISTS idx_artifacts_kind ON artifacts(kind);
        """)
        conn.commit()

    # ------------------------------------------------------------------
    # Save / Load
    # ------------------------------------------------------------------

    def save(self, catalog: ArtifactCatalog, metadata: dict | None = None) -> None:
        """Replace the stored records with the contents of ``catalog``."""
        conn = self._get_conn()
        conn.execute("DELETE FROM artifacts")
        conn.executemany(
            """INSERT INTO artifacts
               (id, kind, bounded_context, full_content, signature_view,
                size_full, size_signature, semantic_weight, title, tags)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            [
                (
                    a.id,
                    a.kind,
                    a.bounded_context,
                    a.full_content,
                    a.signature_view,
                    a.size_full,
                    a.size_signature,
                    a.semantic_weight,
                    a.title,
                    json.dumps(list(a.tags)),
                )
                for a in catalog
            ],
        )
        conn.commit()

        for key, value in (metadata or {}).items():
            self.set_metadata(key, value)

    def load(self) -> ArtifactCatalog | None:
        """Rebuild a frozen catalog. Returns None when nothing was ingested."""
        conn = self._get_conn()
        rows = conn.execute("SELECT * FROM artifacts ORDER BY rowid").fetchall()
        if not rows:
            return None

        artifacts = []
        for row in rows:
            artifacts.append(
                Artifact(
                    id=row["id"],
                    kind=row["kind"],
                    bounded_context=row["bounded_context"],
                    full_content=row["full_content"],
                    signature_view=row["signature_view"],
                    size_full=row["size_full"],
                    size_signature=row["size_signature"],
                    semantic_weight=row["semantic_weight"],
                    title=row["title"] or "",
                    tags=tuple(json.loads(row["tags"] or "[]")),
                )
            )
        return ArtifactCatalog.build(artifacts)

    def get_metadata(self, key: str) -> str | None:
        conn = self._get_conn()
        row = conn.execute("SELECT value FROM metadata WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set_metadata(self, key: str, value) -> None:
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
            (key, str(value)),
        )
        conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
