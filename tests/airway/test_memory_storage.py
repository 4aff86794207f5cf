"""Tests for MemoryStorage — in-memory storage backend for cloud mode.

Covers CRUD operations, deep-copy isolation, and the FileNotFoundError
contract that the routes depend on.
"""

from __future__ import annotations

import pytest

from airway.storage import MemoryStorage


def test_save_and_load_roundtrip(mem: MemoryStorage) -> None:
    data = {"tubeAngle": 26.0, "showHelp": False}
    mem.save("intubationConfig", data)
    assert mem.load("intubationConfig") == data


def test_save_overwrites_existing(mem: MemoryStorage) -> None:
    mem.save("p1", {"name": "Original"})
    mem.save("p1", {"name": "Updated"})
    assert mem.load("p1")["name"] == "Updated"


def test_load_not_found_raises(mem: MemoryStorage) -> None:
    with pytest.raises(FileNotFoundError, match="Not found: missing"):
        mem.load("missing")


def test_delete(mem: MemoryStorage) -> None:
    mem.save("p1", {})
    mem.delete("p1")
    with pytest.raises(FileNotFoundError):
        mem.load("p1")
    assert mem.list_items() == []


def test_delete_not_found_raises(mem: MemoryStorage) -> None:
    with pytest.raises(FileNotFoundError, match="Not found: ghost"):
        mem.delete("ghost")


def test_empty_id_rejected(mem: MemoryStorage) -> None:
    with pytest.raises(ValueError, match="Invalid id"):
        mem.save("", {})


def test_saved_data_is_isolated(mem: MemoryStorage) -> None:
    """Mutating the caller's dict after save must not change stored data."""
    data = {"sliders": {"tubeAngle": 26.0}}
    mem.save("p1", data)
    data["sliders"]["tubeAngle"] = 50.0
    assert mem.load("p1")["sliders"]["tubeAngle"] == 26.0


def test_loaded_data_is_isolated(mem: MemoryStorage) -> None:
    mem.save("p1", {"sliders": {"tubeAngle": 26.0}})
    mem.load("p1")["sliders"]["tubeAngle"] = 50.0
    assert mem.load("p1")["sliders"]["tubeAngle"] == 26.0


def test_list_items(mem: MemoryStorage) -> None:
    mem.save("a", {"name": "Alpha"})
    mem.save("b", {})
    items = {i["id"]: i for i in mem.list_items()}
    assert items["a"]["name"] == "Alpha"
    assert items["b"]["name"] == "b"
    assert all(i["modified_at"] for i in items.values())
