from __future__ import annotations

import json
import logging
from pathlib import Path

from doseengine.storage import DoseListRepository, MemoryStore, SQLiteStore
from doseengine.types import DoseEntry


def test_missing_key_loads_one_blank_row() -> None:
    repo = DoseListRepository(MemoryStore())
    assert repo.load() == [DoseEntry("", "")]


def test_repository_round_trip_through_sqlite(tmp_path: Path) -> None:
    store = SQLiteStore(tmp_path / "nested" / "doses.sqlite3")
    repo = DoseListRepository(store)
    entries = [DoseEntry("2024-01-01", "5"), DoseEntry("", ""), DoseEntry("2024-01-08", "7.5")]
    repo.save(entries)

    reopened = DoseListRepository(SQLiteStore(tmp_path / "nested" / "doses.sqlite3"))
    assert reopened.load() == entries

    repo.save(entries[:1])
    assert reopened.load() == entries[:1]


def test_saved_payload_is_plain_json_strings() -> None:
    store = MemoryStore()
    DoseListRepository(store, key="doses").save([DoseEntry("2024-01-01", 5)])
    assert json.loads(store.get("doses")) == [{"date": "2024-01-01", "amount": "5"}]


def test_corrupt_payload_is_ignored(caplog) -> None:
    store = MemoryStore({"zepboundDoses": "{not json"})
    with caplog.at_level(logging.WARNING, logger="doseengine.storage"):
        assert DoseListRepository(store).load() == [DoseEntry("", "")]
    assert "corrupt" in caplog.text

    store.set("zepboundDoses", json.dumps({"date": "2024-01-01"}))
    assert DoseListRepository(store).load() == [DoseEntry("", "")]


def test_partial_records_are_kept_blank() -> None:
    store = MemoryStore({"zepboundDoses": json.dumps([{"date": "2024-01-01"}, {"amount": "5"}])})
    assert DoseListRepository(store).load() == [DoseEntry("2024-01-01", ""), DoseEntry("", "5")]
