"""Run orchestration for the Equity Monte Carlo Harvester.

Sequences sample collection, summary, writeback, the convergence gate and the
order-statistics writeback. Each step starts only after the previous one ends.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from equity_mc.collector import collect
from equity_mc.config import RunConfig
from equity_mc.errors import InvalidSampleCountError
from equity_mc.gate import wait_until_in_range
from equity_mc.metrics import (
    OrderStatistics,
    SummaryStatistics,
    order_statistics,
    summarize,
)
from equity_mc.store import SlotValue, ValueStore

logger = logging.getLogger(__name__)


@dataclass
class SimulationRun:
    """Everything one run produced."""

    sample_count: int
    batch: np.ndarray
    statistics: SummaryStatistics
    order_statistics: OrderStatistics
    polls: int


def parse_sample_count(raw: SlotValue, slot: str = "simCount") -> int:
    """Validate the requested sample count.

    Accepts integers and integral floats or numeric strings.

    Raises:
        InvalidSampleCountError: value is missing, non-numeric, non-integral
            or not positive
    """
    if isinstance(raw, bool) or raw is None:
        raise InvalidSampleCountError(f"{slot} must be a positive integer, got {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidSampleCountError(
            f"{slot} must be a positive integer, got {raw!r}"
        ) from None
    if not np.isfinite(value) or value != int(value) or value <= 0:
        raise InvalidSampleCountError(f"{slot} must be a positive integer, got {raw!r}")
    return int(value)


def run_simulation(store: ValueStore, config: RunConfig | None = None) -> SimulationRun:
    """Run one harvest against a value store.

    Args:
        store: Store holding the sample-count, sampling and output slots
        config: Slot bindings and gate settings; defaults to RunConfig()

    Returns:
        SimulationRun with the batch and the statistics written back
    """
    if config is None:
        config = RunConfig()
    bindings = config.bindings
    started = time.perf_counter()

    # Step 1: requested sample count
    count = parse_sample_count(store.get_value(bindings.sample_count), bindings.sample_count)

    # Step 2: resolve bindings once
    output_slots = bindings.output_slots()
    progress_slots = bindings.progress_slots()
    logger.info("Collecting %d samples from %s", count, bindings.sample)

    # Step 3: collect
    batch = collect(
        store,
        bindings.sample,
        progress_slots,
        count,
        progress_template=config.progress_template,
    )

    # Step 4: summarize
    stats = summarize(batch)
    logger.info(
        "Summary: mean=%.4f sd=%.4f min=%.4f max=%.4f",
        stats.expected_value,
        stats.standard_deviation,
        stats.min_value,
        stats.max_value,
    )

    # Step 5: write back, never touching the sampling slot
    for field_name, value in stats.as_dict().items():
        slot = output_slots.get(field_name)
        if slot is not None:
            store.set_value(slot, value)

    # Step 6: let the store settle the last sample inside [min, max]
    polls = wait_until_in_range(
        store,
        bindings.sample,
        bindings.min_value,
        bindings.max_value,
        max_polls=config.max_polls,
        interval_ms=config.poll_interval_ms,
    )

    # Step 7: order statistics pass, written again after the gate
    order = order_statistics(batch)
    store.set_value(bindings.median, order.median)
    store.set_value(bindings.q1, order.q1)
    store.set_value(bindings.q3, order.q3)

    logger.info("Run of %d samples finished in %.3fs", count, time.perf_counter() - started)
    return SimulationRun(
        sample_count=count,
        batch=batch,
        statistics=stats,
        order_statistics=order,
        polls=polls,
    )
