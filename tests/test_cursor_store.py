"""Tests for sync cursor persistence."""

import json

import pytest

from calendar_mirror.state.cursor_store import JsonFileCursorStore, MemoryCursorStore
from calendar_mirror.utils.exceptions import CursorStoreError


def test_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "state" / "cursors.json"
    JsonFileCursorStore(path).set("syncToken/a@example.com", "tok-1")

    assert JsonFileCursorStore(path).get("syncToken/a@example.com") == "tok-1"
    assert json.loads(path.read_text()) == {"syncToken/a@example.com": "tok-1"}


def test_file_store_missing_file_reads_as_empty(tmp_path):
    assert JsonFileCursorStore(tmp_path / "cursors.json").get("syncToken/x") is None


def test_file_store_delete(tmp_path):
    store = JsonFileCursorStore(tmp_path / "cursors.json")
    store.set("syncToken/a", "1")
    store.set("syncToken/b", "2")

    store.delete("syncToken/a")
    store.delete("syncToken/never-set")

    assert store.get("syncToken/a") is None
    assert store.get("syncToken/b") == "2"


def test_file_store_corrupt_file_raises(tmp_path):
    path = tmp_path / "cursors.json"
    path.write_text("{not json")

    with pytest.raises(CursorStoreError):
        JsonFileCursorStore(path).get("syncToken/a")


def test_file_store_leaves_no_temp_files(tmp_path):
    store = JsonFileCursorStore(tmp_path / "cursors.json")
    store.set("syncToken/a", "1")
    store.set("syncToken/a", "2")

    assert [p.name for p in tmp_path.iterdir()] == ["cursors.json"]


def test_memory_store_roundtrip():
    store = MemoryCursorStore({"syncToken/a": "1"})
    store.set("syncToken/b", "2")
    store.delete("syncToken/a")

    assert store.keys() == ["syncToken/b"]
