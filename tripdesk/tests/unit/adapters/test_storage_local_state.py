from __future__ import annotations

import json

from tripdesk.adapters.storage_local import MemoryStore, StorageLocal


def test_key_values_share_one_json_document(tmp_path) -> None:
    storage = StorageLocal(root_dir=str(tmp_path))
    assert storage.get("view_state.bookings") is None

    storage.set("view_state.bookings", {"search_term": "ami"})
    storage.set("draft.enquiry", {"name": "Divya"})

    with (tmp_path / "tripdesk_state.json").open("r", encoding="utf-8") as fh:
        persisted = json.load(fh)
    assert persisted == {
        "draft.enquiry": {"name": "Divya"},
        "view_state.bookings": {"search_term": "ami"},
    }
    assert StorageLocal(root_dir=str(tmp_path)).get("draft.enquiry") == {"name": "Divya"}


def test_setting_none_removes_key_and_leaves_no_temp_files(tmp_path) -> None:
    storage = StorageLocal(root_dir=str(tmp_path))
    storage.set("draft.booking", {"adults": 2})
    storage.set("draft.booking", None)

    assert storage.get("draft.booking") is None
    assert sorted(p.name for p in tmp_path.iterdir()) == ["tripdesk_state.json"]


def test_corrupt_state_file_reads_as_empty(tmp_path) -> None:
    (tmp_path / "tripdesk_state.json").write_text("{not json", encoding="utf-8")
    storage = StorageLocal(root_dir=str(tmp_path))

    assert storage.get("anything") is None
    storage.set("k", 1)
    assert storage.get("k") == 1


def test_creates_missing_root_directory(tmp_path) -> None:
    root = tmp_path / "nested" / "state"
    StorageLocal(root_dir=str(root)).set("k", [1, 2])
    assert (root / "tripdesk_state.json").exists()


def test_user_settings_missing_file_and_round_trip(tmp_path) -> None:
    storage = StorageLocal(root_dir=str(tmp_path))
    assert storage.load_user_settings() is None

    payload = {"api_base_url": "http://api.local", "page_size": 20}
    storage.save_user_settings(payload)
    assert storage.load_user_settings() == payload


def test_memory_store_copies_values() -> None:
    store = MemoryStore()
    value = {"tags": ["a"]}
    store.set("k", value)
    value["tags"].append("b")

    assert store.get("k") == {"tags": ["a"]}
    store.set("k", None)
    assert store.get("k") is None
