"""In-memory workbook standing in for an external formula engine.

Volatile formula slots recompute whenever any slot is edited (automatic
calculation) and on an explicit flush, the way spreadsheet random functions do.
"""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from equity_mc.config import SlotBindings
from equity_mc.errors import StoreUnavailableError
from equity_mc.sampling import fixed_fraction_equity
from equity_mc.store import InMemoryValueStore, SlotValue

logger = logging.getLogger(__name__)

Formula = Callable[[], SlotValue]


class Workbook(InMemoryValueStore):
    """Named-slot store with volatile formulas.

    With auto_recalculate on, every write re-evaluates every formula, the way a
    spreadsheet in automatic calculation mode does. A collector writing progress
    markers to seven slots therefore evaluates the sampling formula seven times
    per harvested sample and keeps only the last. Pass auto_recalculate=False to
    recalculate only on flush.
    """

    def __init__(
        self,
        values: dict[str, SlotValue] | None = None,
        auto_recalculate: bool = True,
    ) -> None:
        super().__init__(values)
        self.auto_recalculate = auto_recalculate
        self.recalculations = 0
        self._formulas: dict[str, Formula] = {}

    def define_formula(self, slot: str, formula: Formula) -> None:
        """Bind a volatile formula to a slot and evaluate it once."""
        self._formulas[slot] = formula
        self._values[slot] = formula()

    def set_value(self, slot: str, value: SlotValue) -> None:
        if slot in self._formulas:
            raise StoreUnavailableError(f"Slot {slot} holds a formula and is read-only")
        super().set_value(slot, value)
        if self.auto_recalculate:
            self.recalculate()

    def recalculate(self) -> None:
        """Re-evaluate every formula slot."""
        for slot, formula in self._formulas.items():
            self._values[slot] = formula()
        self.recalculations += 1

    def flush(self) -> None:
        self.recalculate()


def build_equity_workbook(
    rng: np.random.Generator,
    sims: int,
    trades: int = 400,
    win_rate: float = 0.5,
    reward_risk: float = 2.0,
    risk_fraction: float = 0.01,
    start_equity: float = 10_000.0,
    bindings: SlotBindings | None = None,
) -> Workbook:
    """Create a workbook whose sampling slot holds a fixed-fraction equity formula.

    Args:
        rng: Random number generator shared by every recalculation
        sims: Value seeded into the sample-count slot
        trades: Trades per equity path
        win_rate: Probability that a trade wins
        reward_risk: Reward-to-risk ratio of a winning trade
        risk_fraction: Fraction of equity risked per trade
        start_equity: Equity before the first trade
        bindings: Slot names to use; defaults to the standard names

    Returns:
        Workbook with the sample-count slot, the sampling formula and empty
        output slots
    """
    if bindings is None:
        bindings = SlotBindings()

    # Validate once so a bad parameter fails here rather than inside a recalc
    fixed_fraction_equity(rng, 0, win_rate, reward_risk, risk_fraction, start_equity)

    workbook = Workbook(
        {bindings.sample_count: sims, **dict.fromkeys(bindings.output_slots().values())}
    )

    workbook.define_formula(
        bindings.sample,
        lambda: fixed_fraction_equity(
            rng, trades, win_rate, reward_risk, risk_fraction, start_equity
        ),
    )
    logger.debug(
        "Built workbook: trades=%d win_rate=%.3f reward_risk=%.3f risk_fraction=%.4f",
        trades,
        win_rate,
        reward_risk,
        risk_fraction,
    )
    return workbook
