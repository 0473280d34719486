"""Sample acquisition for the Equity Monte Carlo Harvester.

Harvests one realization per read of the sampling slot and reports progress
after each one. Independence of the realizations is the source's business.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable

import numpy as np

from equity_mc.config import DEFAULT_PROGRESS_TEMPLATE
from equity_mc.store import ValueStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, float], None]


class RealizationSource(ABC):
    """Abstract source of independent realizations."""

    @abstractmethod
    def next_realization(self) -> float:
        """Return the next realization."""
        pass


class SlotRealizationSource(RealizationSource):
    """Reads realizations from one slot of a value store."""

    def __init__(self, store: ValueStore, slot: str) -> None:
        self.store = store
        self.slot = slot
        self.reads = 0

    def next_realization(self) -> float:
        raw = self.store.get_value(self.slot)
        self.reads += 1
        try:
            return float(raw)
        except (TypeError, ValueError):
            raise ValueError(
                f"Slot {self.slot} held non-numeric value {raw!r} on read {self.reads}"
            ) from None


def collect_from_source(
    source: RealizationSource,
    count: int,
    on_progress: ProgressCallback | None = None,
) -> np.ndarray:
    """Draw ``count`` realizations from a source.

    Args:
        source: Realization source
        count: Number of realizations to draw
        on_progress: Called with (1-based iteration, value) after each draw

    Returns:
        Array of shape (count,) in acquisition order
    """
    if count < 0:
        raise ValueError("Cannot collect negative number of samples")

    batch = []
    # Lightweight progress logging every ~5% or on last
    step = max(1, count // 20)
    for i in range(1, count + 1):
        value = source.next_realization()
        batch.append(value)
        if on_progress is not None:
            on_progress(i, value)
        logger.debug("Sample %d/%d: %r", i, count, value)
        if count >= 20 and (i % step == 0 or i == count):
            logger.info("Progress: %d/%d", i, count)

    return np.array(batch, dtype=float)


def collect(
    store: ValueStore,
    sample_slot: str,
    other_slots: Iterable[str],
    count: int,
    progress_template: str = DEFAULT_PROGRESS_TEMPLATE,
) -> np.ndarray:
    """Collect a batch by reading the sampling slot ``count`` times.

    After each read, a progress marker is written to every slot in
    ``other_slots`` except the sampling slot, overwriting whatever was there.

    Args:
        store: Value store holding the slots
        sample_slot: Slot whose every read yields a fresh realization
        other_slots: Slots that receive progress markers
        count: Number of samples
        progress_template: Marker format, ``{i}`` is the 1-based iteration

    Returns:
        Array of shape (count,) in acquisition order
    """
    targets = [slot for slot in other_slots if slot != sample_slot]

    def write_progress(i: int, value: float) -> None:
        marker = progress_template.format(i=i)
        for slot in targets:
            store.set_value(slot, marker)

    source = SlotRealizationSource(store, sample_slot)
    return collect_from_source(source, count, on_progress=write_progress)
