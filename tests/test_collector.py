"""Tests for collector module."""

import numpy as np
import pytest

from equity_mc.collector import (
    RealizationSource,
    SlotRealizationSource,
    collect,
    collect_from_source,
)
from equity_mc.store import InMemoryValueStore


class SequenceSource(RealizationSource):
    """Returns a fixed sequence of realizations."""

    def __init__(self, values):
        self._values = iter(values)

    def next_realization(self):
        return next(self._values)


class AdvancingStore(InMemoryValueStore):
    """Store whose sampling slot advances through a sequence on every read."""

    def __init__(self, sample_slot, samples, values=None):
        super().__init__(values)
        self.sample_slot = sample_slot
        self._samples = iter(samples)
        self.writes = []

    def get_value(self, slot):
        if slot == self.sample_slot:
            return next(self._samples)
        return super().get_value(slot)

    def set_value(self, slot, value):
        self.writes.append((slot, value))
        super().set_value(slot, value)


def test_collect_from_source_preserves_order():
    """Test that the batch keeps acquisition order."""
    batch = collect_from_source(SequenceSource([3.0, 1.0, 2.0]), 3)

    assert isinstance(batch, np.ndarray)
    np.testing.assert_array_equal(batch, [3.0, 1.0, 2.0])


def test_collect_from_source_progress_callback():
    """Test that progress is reported once per sample with a 1-based index."""
    seen = []
    collect_from_source(
        SequenceSource([5.0, 6.0]), 2, on_progress=lambda i, v: seen.append((i, v))
    )

    assert seen == [(1, 5.0), (2, 6.0)]


def test_collect_from_source_zero_count():
    """Test that a zero count yields an empty batch."""
    batch = collect_from_source(SequenceSource([]), 0)

    assert len(batch) == 0


def test_collect_from_source_negative_count():
    """Test that a negative count is rejected."""
    with pytest.raises(ValueError, match="Cannot collect negative number of samples"):
        collect_from_source(SequenceSource([]), -1)


def test_collect_writes_progress_markers():
    """Test batch contents and progress writes for three samples."""
    store = AdvancingStore(
        "equity", [100.0, 110.0, 90.0], values={"mean": None, "sd": None}
    )

    batch = collect(store, "equity", ["mean", "sd", "equity"], 3)

    np.testing.assert_array_equal(batch, [100.0, 110.0, 90.0])
    mean_writes = [value for slot, value in store.writes if slot == "mean"]
    sd_writes = [value for slot, value in store.writes if slot == "sd"]
    assert mean_writes == ["Updating...Sim 1", "Updating...Sim 2", "Updating...Sim 3"]
    assert sd_writes == mean_writes
    # The sampling slot is never written
    assert all(slot != "equity" for slot, _ in store.writes)
    # Each marker overwrites the previous one
    assert store.get_value("mean") == "Updating...Sim 3"


def test_collect_custom_template():
    """Test a custom progress marker format."""
    store = AdvancingStore("equity", [1.0, 2.0], values={"out": None})

    collect(store, "equity", ["out"], 2, progress_template="sim {i} running")

    assert [value for _, value in store.writes] == ["sim 1 running", "sim 2 running"]


def test_collect_numeric_strings_are_converted():
    """Test that numeric text read from the slot becomes a float."""
    store = AdvancingStore("equity", ["12.5", 7])

    batch = collect(store, "equity", [], 2)

    np.testing.assert_array_equal(batch, [12.5, 7.0])


def test_slot_source_non_numeric_value():
    """Test that a non-numeric sample is reported with slot and read number."""
    store = InMemoryValueStore({"equity": "#N/A"})
    source = SlotRealizationSource(store, "equity")

    with pytest.raises(ValueError, match="Slot equity held non-numeric value '#N/A' on read 1"):
        source.next_realization()
