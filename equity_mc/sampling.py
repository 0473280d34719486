"""Sampling utilities for the stand-in formula engine.

Centralized, reproducible randomness and the fixed-fraction equity formula that
feeds the sampling slot. Nothing in the harvesting core imports this module.
"""

from __future__ import annotations

import numpy as np


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create a seeded random number generator.

    Args:
        seed: Random seed. If None, uses system entropy.

    Returns:
        NumPy Generator instance
    """
    return np.random.default_rng(seed)


def _validate_trade_params(
    trades: int,
    win_rate: float,
    reward_risk: float,
    risk_fraction: float,
    start_equity: float,
) -> None:
    if trades < 0:
        raise ValueError("Cannot simulate negative number of trades")
    if not (0.0 <= win_rate <= 1.0):
        raise ValueError("win_rate must be in [0, 1]")
    if reward_risk <= 0:
        raise ValueError("reward_risk must be positive")
    if not (0.0 <= risk_fraction < 1.0):
        raise ValueError("risk_fraction must be in [0, 1)")
    if start_equity <= 0:
        raise ValueError("start_equity must be positive")


def equity_curve(
    rng: np.random.Generator,
    trades: int = 400,
    win_rate: float = 0.5,
    reward_risk: float = 2.0,
    risk_fraction: float = 0.01,
    start_equity: float = 10_000.0,
) -> np.ndarray:
    """Simulate a fixed-fraction equity curve.

    Each trade risks ``risk_fraction`` of current equity. A win grows equity by
    ``risk_fraction * reward_risk``, a loss shrinks it by ``risk_fraction``, so
    returns compound.

    Args:
        rng: Random number generator
        trades: Number of trades in the path
        win_rate: Probability that a trade wins
        reward_risk: Reward-to-risk ratio of a winning trade
        risk_fraction: Fraction of equity risked per trade
        start_equity: Equity before the first trade

    Returns:
        Array of shape (trades + 1,) with equity after each trade, starting
        with ``start_equity``
    """
    _validate_trade_params(trades, win_rate, reward_risk, risk_fraction, start_equity)

    wins = rng.random(trades) < win_rate
    factors = np.where(wins, 1.0 + risk_fraction * reward_risk, 1.0 - risk_fraction)
    return start_equity * np.concatenate(([1.0], np.cumprod(factors)))


def fixed_fraction_equity(
    rng: np.random.Generator,
    trades: int = 400,
    win_rate: float = 0.5,
    reward_risk: float = 2.0,
    risk_fraction: float = 0.01,
    start_equity: float = 10_000.0,
) -> float:
    """Terminal equity of one fixed-fraction trade sequence.

    See ``equity_curve`` for the parameters.
    """
    return float(
        equity_curve(rng, trades, win_rate, reward_risk, risk_fraction, start_equity)[-1]
    )
