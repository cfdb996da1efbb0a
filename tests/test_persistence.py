import json
import logging
import sqlite3
from pathlib import Path

from artisthelper.persistence import ArtistStore, open_store, record_to_dict

from tests._factories import make_artist


def test_load_returns_none_when_nothing_stored(tmp_path: Path):
    store = ArtistStore(tmp_path / "store.sqlite")
    assert store.load() is None


def test_save_and_load_round_trip(tmp_path: Path):
    store = ArtistStore(tmp_path / "store.sqlite")
    records = [make_artist(1), make_artist(2, "Everly", rating=4.5, thoughts=None)]

    store.save(records)
    loaded = store.load()

    assert loaded == records


def test_save_overwrites_previous_list(tmp_path: Path):
    store = ArtistStore(tmp_path / "store.sqlite")
    store.save([make_artist(1)])
    store.save([make_artist(1), make_artist(2, "Everly")])
    assert len(store.load()) == 2


def test_keys_are_isolated(tmp_path: Path):
    db_path = tmp_path / "store.sqlite"
    ArtistStore(db_path, key="a").save([make_artist(1)])
    assert ArtistStore(db_path, key="b").load() is None


def test_clear_removes_stored_list(tmp_path: Path):
    store = ArtistStore(tmp_path / "store.sqlite")
    store.save([make_artist(1)])
    store.clear()
    assert store.load() is None


def test_record_to_dict_puts_id_first():
    payload = record_to_dict(make_artist(3))
    assert list(payload)[0] == "id"
    assert set(payload) == {
        "id",
        "name",
        "group",
        "genre",
        "position",
        "rank",
        "skills",
        "rating",
        "thoughts",
        "build",
        "description",
        "image",
    }


def test_open_store_returns_none_for_garbage_file(tmp_path: Path, caplog):
    db_path = tmp_path / "store.sqlite"
    db_path.write_bytes(b"this is not a sqlite database\n" * 100)

    with caplog.at_level(logging.WARNING):
        assert open_store(db_path) is None
    assert "Artist store unavailable" in caplog.text


def test_open_store_returns_none_for_unwritable_path(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    assert open_store(blocker / "nested" / "store.sqlite") is None


def test_load_skips_invalid_entries(tmp_path: Path, caplog):
    db_path = tmp_path / "store.sqlite"
    store = ArtistStore(db_path)
    payload = [record_to_dict(make_artist(1)), {"id": 2, "name": ""}, record_to_dict(make_artist(3, "Everly"))]
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "INSERT INTO catalog (key, payload_json, updated_at) VALUES (?, ?, ?)",
            (store.key, json.dumps(payload), "2024-01-01T00:00:00+00:00"),
        )
        conn.commit()

    with caplog.at_level(logging.WARNING):
        loaded = store.load()

    assert [record.id for record in loaded] == [1, 3]
    assert "Skipping invalid artist #1" in caplog.text


def test_has_payload(tmp_path: Path):
    store = ArtistStore(tmp_path / "store.sqlite")
    assert store.has_payload() is False
    store.save([])
    assert store.has_payload() is True
