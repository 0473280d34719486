"""Convergence gate.

Polls a (value, lower, upper) slot triplet until the value lies inside the
bounds, flushing the store and sleeping between polls.
"""

from __future__ import annotations

import logging

from equity_mc.errors import NonConvergenceError
from equity_mc.store import SlotValue, ValueStore

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 50.0


def _as_number(value: SlotValue) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def in_range(value: SlotValue, lower: SlotValue, upper: SlotValue) -> bool:
    """True when all three are numeric and lower <= value <= upper.

    A non-numeric slot means the store has not settled yet.
    """
    v, lo, hi = _as_number(value), _as_number(lower), _as_number(upper)
    if v is None or lo is None or hi is None:
        return False
    return lo <= v <= hi


def wait_until_in_range(
    store: ValueStore,
    value_slot: str,
    lower_slot: str,
    upper_slot: str,
    max_polls: int | None = 1000,
    interval_ms: float = DEFAULT_POLL_INTERVAL_MS,
) -> int:
    """Block until the value slot settles inside [lower, upper].

    Args:
        store: Value store holding the slots
        value_slot: Slot being watched
        lower_slot: Slot holding the lower bound
        upper_slot: Slot holding the upper bound
        max_polls: Give up after this many flush-and-reread cycles. None waits
            forever, which never returns if the bounds cannot be met.
        interval_ms: Pause after each reread

    Returns:
        Number of polls made; 0 when the first read already satisfied the bounds

    Raises:
        NonConvergenceError: max_polls cycles passed without settling
    """
    if max_polls is not None and max_polls < 1:
        raise ValueError("max_polls must be at least 1 or None")

    def read_all() -> tuple[SlotValue, SlotValue, SlotValue]:
        return (
            store.get_value(value_slot),
            store.get_value(lower_slot),
            store.get_value(upper_slot),
        )

    value, lower, upper = read_all()
    lo, hi = _as_number(lower), _as_number(upper)
    if lo is not None and hi is not None and lo > hi:
        logger.warning(
            "Bounds for %s are inverted (%s > %s); the gate cannot converge",
            value_slot,
            lower,
            upper,
        )

    polls = 0
    while not in_range(value, lower, upper):
        if max_polls is not None and polls >= max_polls:
            raise NonConvergenceError(polls, value, lower, upper)
        store.flush()
        value, lower, upper = read_all()
        store.sleep(interval_ms)
        polls += 1
        logger.debug("Poll %d: %s=%r in [%r, %r]?", polls, value_slot, value, lower, upper)

    if polls:
        logger.info("%s settled after %d polls", value_slot, polls)
    return polls
