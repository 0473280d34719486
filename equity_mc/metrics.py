"""Metrics and analysis utilities for the Equity Monte Carlo Harvester.

Reduces a batch of realizations to summary statistics. Order statistics use
the nearest-rank rule on a zero-based, floor-rounded index into the sorted
batch, never interpolation, so an even-length batch yields the upper median.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np

from equity_mc.errors import InvalidSampleCountError


@dataclass(frozen=True)
class OrderStatistics:
    """Median and quartiles of a batch."""

    median: float
    q1: float
    q3: float


@dataclass(frozen=True)
class SummaryStatistics:
    """Distribution summary of a batch."""

    expected_value: float
    median: float
    min_value: float
    max_value: float
    standard_deviation: float
    q1: float
    q3: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


def _as_batch(batch) -> np.ndarray:
    arr = np.asarray(batch, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"Batch must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        raise InvalidSampleCountError("Cannot summarize an empty batch")
    return arr


def nearest_rank(sorted_batch: np.ndarray, fraction: float) -> float:
    """Value at index floor(len * fraction) of an ascending batch.

    Args:
        sorted_batch: Ascending, non-empty array
        fraction: Position in [0, 1)

    Returns:
        Element at the floor-rounded zero-based index
    """
    if not (0.0 <= fraction < 1.0):
        raise ValueError("fraction must be in [0, 1)")

    # 0.25, 0.5 and 0.75 are exact in binary, so n * fraction floors cleanly
    index = int(np.floor(len(sorted_batch) * fraction))
    return float(sorted_batch[index])


def order_statistics(batch) -> OrderStatistics:
    """Compute median, q1 and q3 of a batch with the nearest-rank rule.

    Args:
        batch: Non-empty sequence of realizations; it is not modified

    Returns:
        OrderStatistics for the batch
    """
    sorted_batch = np.sort(_as_batch(batch))
    return OrderStatistics(
        median=nearest_rank(sorted_batch, 0.5),
        q1=nearest_rank(sorted_batch, 0.25),
        q3=nearest_rank(sorted_batch, 0.75),
    )


def summarize(batch) -> SummaryStatistics:
    """Generate summary statistics for a batch.

    The standard deviation is the population one (divides by N).

    Args:
        batch: Non-empty sequence of realizations; it is not modified

    Returns:
        SummaryStatistics for the batch
    """
    arr = _as_batch(batch)
    order = order_statistics(arr)

    return SummaryStatistics(
        expected_value=float(np.mean(arr)),
        median=order.median,
        min_value=float(np.min(arr)),
        max_value=float(np.max(arr)),
        standard_deviation=float(np.std(arr, ddof=0)),
        q1=order.q1,
        q3=order.q3,
    )
