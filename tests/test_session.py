import json
import logging
import sqlite3
from pathlib import Path

import pytest
from pydantic import ValidationError

from artisthelper.catalog import (
    AddArtistMessage,
    CatalogSession,
    FilterCriteria,
    InvalidArtistError,
    add_record,
)
from artisthelper.config_loader import CatalogSettings
from artisthelper.ingest import write_dataset
from artisthelper.persistence import ArtistStore, record_to_dict

from tests._factories import make_artist


def _payload(name: str = "Nova", **overrides) -> dict:
    data = {
        "name": name,
        "group": "DreamCatcher",
        "genre": "R&B",
        "position": "Dancer",
        "rank": "SSR",
        "skills": ["10 sec/1800 Damage", "200/DPS Defending HQ, GH, Club, LM", "50% Basic Attack Damage"],
        "description": f"{name} is a talented Dancer from DreamCatcher.",
    }
    data.update(overrides)
    return data


def test_add_record_assigns_next_id_without_mutating_input():
    records = [make_artist(5, "Five"), make_artist(42, "FortyTwo"), make_artist(7, "Seven")]
    snapshot = list(records)

    updated, assigned = add_record(records, _payload())
    assert assigned == 43
    assert updated[-1].id == 43
    assert updated[-1].name == "Nova"
    assert records == snapshot

    # a stale snapshot hands out the same id again
    _, stale_id = add_record(records, _payload("Other"))
    assert stale_id == 43
    _, threaded_id = add_record(updated, _payload("Other"))
    assert threaded_id == 44


def test_add_record_on_empty_list_starts_at_one():
    updated, assigned = add_record([], _payload())
    assert assigned == 1
    assert updated[0].skills[1] == "200/DPS Defending HQ, GH, Club, LM"


def test_repeated_adds_keep_ids_unique():
    records = [make_artist(3, "Three")]
    expected = []
    for index in range(5):
        expected.append(max(r.id for r in records) + 1)
        records, _ = add_record(records, _payload(f"Artist {index}"))
    ids = [r.id for r in records]
    assert len(ids) == len(set(ids))
    assert ids[1:] == expected


def test_add_record_refuses_blank_name():
    with pytest.raises(InvalidArtistError):
        add_record([], _payload(name="   "))
    with pytest.raises(InvalidArtistError):
        add_record([], {key: value for key, value in _payload().items() if key != "name"})


def test_add_record_requires_other_fields():
    with pytest.raises(ValidationError):
        add_record([], _payload(group=""))


def test_add_record_defaults_skills_to_empty():
    payload = _payload()
    payload.pop("skills")
    updated, _ = add_record([], payload)
    assert updated[0].skills == []


def test_session_add_persists_to_store(tmp_path: Path):
    store = ArtistStore(tmp_path / "store.sqlite")
    session = CatalogSession([make_artist(1)], store=store)

    record = session.add(_payload())

    assert record.id == 2
    assert [r.id for r in session.records] == [1, 2]
    stored = store.load()
    assert stored is not None
    assert [r.name for r in stored] == ["Kokoro", "Nova"]


class _BrokenStore:
    def save(self, records):
        raise sqlite3.OperationalError("disk I/O error")

    def load(self):
        return None


def test_store_write_failure_is_logged_not_raised(caplog):
    session = CatalogSession([make_artist(1)], store=_BrokenStore())

    with caplog.at_level(logging.WARNING):
        record = session.add(_payload())

    assert record.id == 2
    assert len(session.records) == 2
    assert "Error saving artists" in caplog.text


def test_handle_message_adds_artist():
    session = CatalogSession([make_artist(9)])
    record = session.handle_message({"type": "ADD_ARTIST", "artist": _payload()})
    assert record is not None
    assert record.id == 10

    message = AddArtistMessage(artist=_payload("Typed"))
    assert session.handle_message(message).id == 11


def test_handle_message_ignores_unknown_kinds():
    session = CatalogSession([make_artist(1)])
    assert session.handle_message({"type": "REMOVE_ARTIST", "artist": _payload()}) is None
    assert len(session.records) == 1


def test_handle_message_rejects_invalid_payload():
    session = CatalogSession([make_artist(1)])
    with pytest.raises(InvalidArtistError):
        session.handle_message({"type": "ADD_ARTIST", "artist": {"name": "Nobody"}})
    assert len(session.records) == 1


def test_session_filters_are_explicit_state():
    session = CatalogSession(
        [make_artist(1, "Claire", genre="Rock"), make_artist(2, "Aurora", genre="Pop")]
    )
    session.update_filters(genre="Rock")
    assert session.criteria == FilterCriteria(genre="Rock")
    assert [row.artist.name for row in session.view()] == ["Claire"]

    session.clear_filters()
    assert [row.artist.name for row in session.view()] == ["Aurora", "Claire"]


def test_open_seeds_store_from_dataset(tmp_path: Path):
    dataset = tmp_path / "artists.json"
    write_dataset([make_artist(1), make_artist(2, "Everly")], dataset)
    store = ArtistStore(tmp_path / "store.sqlite")

    session = CatalogSession.open(CatalogSettings(dataset_path=dataset), store=store)

    assert [r.name for r in session.records] == ["Kokoro", "Everly"]
    assert [r.name for r in store.load()] == ["Kokoro", "Everly"]


def test_open_prefers_stored_list(tmp_path: Path):
    dataset = tmp_path / "artists.json"
    write_dataset([make_artist(1)], dataset)
    store = ArtistStore(tmp_path / "store.sqlite")
    store.save([make_artist(1), make_artist(2, "Everly"), make_artist(3, "Alice")])

    session = CatalogSession.open(CatalogSettings(dataset_path=dataset), store=store)
    assert len(session.records) == 3


def test_open_falls_back_when_store_is_corrupt(tmp_path: Path, caplog):
    dataset = tmp_path / "artists.json"
    write_dataset([make_artist(1)], dataset)
    db_path = tmp_path / "store.sqlite"
    store = ArtistStore(db_path)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "INSERT INTO catalog (key, payload_json, updated_at) VALUES (?, ?, ?)",
            (store.key, "{not json", "2024-01-01T00:00:00+00:00"),
        )
        conn.commit()

    with caplog.at_level(logging.WARNING):
        session = CatalogSession.open(CatalogSettings(dataset_path=dataset), store=store)

    assert [r.name for r in session.records] == ["Kokoro"]
    assert "unreadable" in caplog.text

    with sqlite3.connect(db_path) as conn:
        raw = conn.execute("SELECT payload_json FROM catalog WHERE key = ?", (store.key,)).fetchone()[0]
    assert raw == "{not json"


def test_open_with_missing_dataset_starts_empty(tmp_path: Path, caplog):
    with caplog.at_level(logging.ERROR):
        session = CatalogSession.open(CatalogSettings(dataset_path=tmp_path / "missing.json"))

    assert session.records == ()
    assert session.view() == []
    assert "Unable to load artist dataset" in caplog.text


def test_open_with_bad_dataset_json_starts_empty(tmp_path: Path):
    dataset = tmp_path / "artists.json"
    dataset.write_text(json.dumps({"not": "a list"}), encoding="utf-8")
    session = CatalogSession.open(CatalogSettings(dataset_path=dataset))
    assert session.records == ()


def test_open_keeps_records_around_one_invalid_entry(tmp_path: Path, caplog):
    dataset = tmp_path / "artists.json"
    entries = [record_to_dict(make_artist(i, f"Artist {i}")) for i in (1, 2, 3)]
    entries.append({**record_to_dict(make_artist(4, "Blank")), "description": ""})
    entries.append({"id": 5, "name": "", "group": "Ghosts"})
    dataset.write_text(json.dumps(entries), encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        session = CatalogSession.open(CatalogSettings(dataset_path=dataset))

    assert [r.id for r in session.records] == [1, 2, 3, 4]
    assert session.records[3].description == ""
    assert "Skipping invalid artist #4" in caplog.text


def test_open_keeps_user_additions_when_one_stored_entry_is_invalid(tmp_path: Path):
    dataset = tmp_path / "artists.json"
    write_dataset([make_artist(1)], dataset)
    db_path = tmp_path / "store.sqlite"
    store = ArtistStore(db_path)
    stored = [record_to_dict(make_artist(1)), record_to_dict(make_artist(2, "Added")), {"id": 3}]
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "INSERT INTO catalog (key, payload_json, updated_at) VALUES (?, ?, ?)",
            (store.key, json.dumps(stored), "2024-01-01T00:00:00+00:00"),
        )
        conn.commit()

    session = CatalogSession.open(CatalogSettings(dataset_path=dataset), store=store)

    assert [r.name for r in session.records] == ["Kokoro", "Added"]


class _UnreadableStore:
    def load(self):
        raise OSError("permission denied")

    def has_payload(self):
        return False

    def save(self, records):
        raise OSError("permission denied")


def test_open_survives_store_os_errors(tmp_path: Path, caplog):
    dataset = tmp_path / "artists.json"
    write_dataset([make_artist(1)], dataset)

    with caplog.at_level(logging.WARNING):
        session = CatalogSession.open(CatalogSettings(dataset_path=dataset), store=_UnreadableStore())

    assert len(session.records) == 1
    assert "Unable to read stored artists" in caplog.text


def test_open_warns_about_duplicate_ids(tmp_path: Path, caplog):
    dataset = tmp_path / "artists.json"
    write_dataset([make_artist(1, "Kesha"), make_artist(1, "Everly")], dataset)

    with caplog.at_level(logging.WARNING):
        session = CatalogSession.open(CatalogSettings(dataset_path=dataset))

    assert len(session.records) == 2
    assert "Duplicate artist id 1 (Kesha / Everly)" in caplog.text
