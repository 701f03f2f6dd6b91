from __future__ import annotations

from datetime import datetime

import pytest

from ulsconnect.database.file_store import JsonFileStore, find_one


def test_transaction_persists_and_roundtrips_datetimes(tmp_path):
    store = JsonFileStore(tmp_path / "nested" / "data.json")
    when = datetime(2024, 5, 1, 10, 30)

    with store.transaction() as data:
        data.setdefault("actividades", []).append({"_id": "a1", "fechaInicio": when})

    reopened = JsonFileStore(store.path)
    assert reopened.collection("actividades") == [{"_id": "a1", "fechaInicio": when}]


def test_failed_transaction_is_not_written(tmp_path):
    store = JsonFileStore(tmp_path / "data.json")
    with store.transaction() as data:
        data["usuarios"] = [{"_id": "u1"}]

    with pytest.raises(RuntimeError):
        with store.transaction() as data:
            data["usuarios"].append({"_id": "u2"})
            raise RuntimeError("boom")

    assert store.collection("usuarios") == [{"_id": "u1"}]


def test_missing_or_empty_file_is_empty(tmp_path):
    path = tmp_path / "data.json"
    assert JsonFileStore(path).snapshot() == {}
    path.write_text("  ", encoding="utf-8")
    assert JsonFileStore(path).collection("usuarios") == []


def test_find_one_matches_all_criteria():
    docs = [{"_id": "1", "a": 1, "b": 2}, {"_id": "2", "a": 1, "b": 3}]
    assert find_one(docs, a=1, b=3)["_id"] == "2"
    assert find_one(docs, a=2) is None


def test_new_ids_are_unique():
    assert JsonFileStore.new_id() != JsonFileStore.new_id()
