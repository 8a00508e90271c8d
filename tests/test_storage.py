from datetime import date

from src.core.entities import ENTITY_NAMES
from src.server.models import StorageEntry
from src.services.storage import (
    backup_filename,
    create_backup_data,
    get_storage,
    load_snapshot,
    save_snapshot,
    set_storage,
)


def test_missing_key_gives_fallback(session):
    assert get_storage(session, "clients", []) == []


def test_corrupt_value_gives_fallback(session):
    session.add(StorageEntry(key="clients", value="{not json"))
    session.commit()
    assert get_storage(session, "clients", ["fallback"]) == ["fallback"]


def test_set_then_get(session):
    set_storage(session, "materials", [{"id": 1, "descrizione": "Tubo"}])
    session.commit()
    assert get_storage(session, "materials", []) == [{"id": 1, "descrizione": "Tubo"}]


def test_save_snapshot_writes_every_collection(session, current):
    del current["appointments"]
    save_snapshot(session, current)
    session.commit()

    snapshot = load_snapshot(session)
    assert list(snapshot) == list(ENTITY_NAMES)
    assert snapshot["clients"] == current["clients"]
    assert snapshot["appointments"] == []


def test_set_storage_commits_with_timestamp(session):
    set_storage(session, "clients", [{"id": 1}])
    session.commit()

    entry = session.get(StorageEntry, "clients")
    assert entry.updated_at is not None
    assert get_storage(session, "clients", []) == [{"id": 1}]

    set_storage(session, "clients", [{"id": 1}, {"id": 2}])
    session.commit()
    assert get_storage(session, "clients", []) == [{"id": 1}, {"id": 2}]


def test_non_list_value_loads_as_empty(session):
    set_storage(session, "jobs", {"id": 1})
    session.commit()
    assert load_snapshot(session)["jobs"] == []


def test_backup_data_has_metadata(session, current):
    save_snapshot(session, current)
    session.commit()

    data = create_backup_data(session)

    assert data["clients"] == current["clients"]
    assert data["appName"]
    assert data["appVersion"]
    assert data["exportDate"].endswith("Z")


def test_backup_filename():
    assert backup_filename(date(2025, 3, 14)).endswith("_2025-03-14.json")
