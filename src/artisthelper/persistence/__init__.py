"""Persistence layer mirroring the artist list under a durable key."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import ValidationError

from artisthelper.models import ArtistRecord


logger = logging.getLogger(__name__)

DEFAULT_STORE_KEY = "apexArtists"


def record_to_dict(record: ArtistRecord) -> dict:
    """Dump a record with ``id`` first, matching the dataset file layout."""

    return {"id": record.id, **record.model_dump(mode="json", exclude={"id"})}


def validate_records(items: Iterable[object], *, source: str) -> List[ArtistRecord]:
    """Validate entries one by one, skipping and logging the ones that fail."""

    records: List[ArtistRecord] = []
    for index, item in enumerate(items):
        try:
            records.append(ArtistRecord.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping invalid artist #%s in %s: %s", index, source, exc)
    return records


class ArtistStore:
    """Simple SQLite-backed key/value store for the artist list."""

    def __init__(self, db_path: Path | str | None = None, *, key: str = DEFAULT_STORE_KEY):
        self._use_uri = False
        self.key = key
        env_db = os.getenv("ARTISTHELPER_DB_PATH")
        if db_path is not None:
            self.db_path = Path(db_path)
        elif env_db and env_db.startswith("file:"):
            self.db_path = env_db
            self._use_uri = True
        elif env_db:
            self.db_path = Path(env_db)
        else:
            self.db_path = Path(tempfile.gettempdir()) / "artisthelper" / "artisthelper.sqlite"
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS catalog (
                    key TEXT PRIMARY KEY,
                    payload_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def save(self, records: Iterable[ArtistRecord]) -> None:
        payload = json.dumps([record_to_dict(record) for record in records])
        updated_at = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO catalog (key, payload_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    payload_json = excluded.payload_json,
                    updated_at = excluded.updated_at
                """,
                (self.key, payload, updated_at),
            )
            conn.commit()

    def load(self) -> Optional[List[ArtistRecord]]:
        """Return the stored list, or None when absent or unreadable."""

        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json FROM catalog WHERE key = ?",
                (self.key,),
            ).fetchone()
        if row is None:
            return None
        try:
            data = json.loads(row["payload_json"])
        except json.JSONDecodeError as exc:
            logger.warning("Stored artist list under %r is unreadable: %s", self.key, exc)
            return None
        if not isinstance(data, list):
            logger.warning("Stored artist list under %r is unreadable: not a JSON array", self.key)
            return None
        return validate_records(data, source=f"store key {self.key!r}")

    def has_payload(self) -> bool:
        with self._connect() as conn:
            row = conn.execute("SELECT 1 FROM catalog WHERE key = ?", (self.key,)).fetchone()
        return row is not None

    def clear(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM catalog WHERE key = ?", (self.key,))
            conn.commit()


def open_store(db_path: Path | str | None = None, *, key: str = DEFAULT_STORE_KEY) -> Optional[ArtistStore]:
    """Return a ready store, or None when the database cannot be opened."""

    try:
        return ArtistStore(db_path, key=key)
    except (sqlite3.Error, OSError) as exc:
        logger.warning("Artist store unavailable, continuing without it: %s", exc)
        return None


__all__ = [
    "ArtistStore",
    "DEFAULT_STORE_KEY",
    "open_store",
    "record_to_dict",
    "validate_records",
]
