# src/doseengine/storage.py
"""Key-value persistence of the dose form, kept outside the simulation."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Protocol, Sequence

from .const import DEFAULT_STORAGE_KEY
from .dosing import blank_entry, entries_from_records
from .types import DoseEntry

_LOGGER = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class KeyValueStore(Protocol):
    """Opaque string store owned by the caller."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store, handy for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SQLiteStore:
    """Key-value store on a single SQLite table."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()
        _LOGGER.debug("Dose store initialized at %s", self._db_path)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def get(self, key: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM app_config WHERE key = ?", (key,)).fetchone()
        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
            conn.commit()


class DoseListRepository:
    """Load and save the dose form rows as a JSON list under one key."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    def load(self) -> list[DoseEntry]:
        """Stored rows, or a single blank row when nothing usable is stored."""
        payload = self._store.get(self._key)
        if payload is None:
            return [blank_entry()]
        try:
            records = json.loads(payload)
        except json.JSONDecodeError as exc:
            _LOGGER.warning("Ignoring corrupt dose list under %r: %s", self._key, exc)
            return [blank_entry()]
        if not isinstance(records, list):
            _LOGGER.warning("Ignoring dose list under %r: expected a JSON list", self._key)
            return [blank_entry()]
        return entries_from_records(records) or [blank_entry()]

    def save(self, entries: Sequence[DoseEntry]) -> None:
        self._store.set(self._key, json.dumps([e.as_dict() for e in entries]))
