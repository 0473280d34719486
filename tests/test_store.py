"""Tests for store module."""

import json

import pytest

from equity_mc.errors import StoreUnavailableError
from equity_mc.store import InMemoryValueStore, JsonFileValueStore


def test_in_memory_get_set():
    """Test basic reads and writes."""
    store = InMemoryValueStore({"a": 1.0})
    store.set_value("b", "text")

    assert store.get_value("a") == 1.0
    assert store.get_value("b") == "text"
    assert store.snapshot() == {"a": 1.0, "b": "text"}


def test_in_memory_unknown_slot():
    """Test reading a slot that does not exist."""
    store = InMemoryValueStore()

    with pytest.raises(StoreUnavailableError, match="Unknown slot: missing"):
        store.get_value("missing")


def test_in_memory_flush_is_noop():
    """Test flush leaves values alone."""
    store = InMemoryValueStore({"a": 1.0})
    store.flush()

    assert store.get_value("a") == 1.0


def test_json_store_round_trip(tmp_path):
    """Test that writes persist to the JSON document."""
    path = tmp_path / "slots.json"
    store = JsonFileValueStore(path)

    store.set_value("expectedValue", 12.5)
    store.update({"minValue": 1.0, "maxValue": 20.0})

    assert store.get_value("expectedValue") == 12.5
    with path.open() as fh:
        assert json.load(fh) == {"expectedValue": 12.5, "minValue": 1.0, "maxValue": 20.0}
    assert not path.with_suffix(".tmp").exists()


def test_json_store_creates_parent_dirs(tmp_path):
    """Test writing into a directory that does not exist yet."""
    path = tmp_path / "nested" / "out.json"
    JsonFileValueStore(path).set_value("simCount", 10)

    assert json.loads(path.read_text()) == {"simCount": 10}


def test_json_store_unknown_slot(tmp_path):
    """Test reading a missing slot from the JSON store."""
    store = JsonFileValueStore(tmp_path / "empty.json")

    with pytest.raises(StoreUnavailableError, match="Unknown slot: simCount"):
        store.get_value("simCount")


def test_json_store_corrupt_file(tmp_path):
    """Test that an unreadable document raises StoreUnavailableError."""
    path = tmp_path / "bad.json"
    path.write_text("{not json")

    with pytest.raises(StoreUnavailableError, match="Cannot read"):
        JsonFileValueStore(path).get_value("a")


def test_json_store_non_object(tmp_path):
    """Test that a JSON array is not accepted as a slot document."""
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")

    with pytest.raises(StoreUnavailableError, match="does not hold a JSON object"):
        JsonFileValueStore(path).get_value("a")
