"""Tests for sampling module."""

import numpy as np
import pytest

from equity_mc.sampling import equity_curve, fixed_fraction_equity, make_rng


def test_make_rng_with_seed():
    """Test RNG creation with fixed seed."""
    rng1 = make_rng(42)
    rng2 = make_rng(42)

    # Same seed should produce same sequence
    assert rng1.random() == rng2.random()
    assert rng1.random() == rng2.random()


def test_make_rng_without_seed():
    """Test RNG creation without seed."""
    rng1 = make_rng(None)
    rng2 = make_rng(None)

    # Different instances should produce different sequences
    assert rng1.random() != rng2.random()


def test_equity_curve_shape_and_start():
    """Test curve length and starting point."""
    curve = equity_curve(make_rng(1), trades=400, start_equity=5000.0)

    assert curve.shape == (401,)
    assert curve[0] == 5000.0
    assert np.all(curve > 0)


def test_equity_curve_all_wins():
    """Test compounding when every trade wins."""
    curve = equity_curve(
        make_rng(1), trades=3, win_rate=1.0, reward_risk=2.0, risk_fraction=0.1,
        start_equity=100.0,
    )

    np.testing.assert_allclose(curve, [100.0, 120.0, 144.0, 172.8])


def test_equity_curve_all_losses():
    """Test compounding when every trade loses."""
    curve = equity_curve(
        make_rng(1), trades=2, win_rate=0.0, risk_fraction=0.5, start_equity=100.0
    )

    np.testing.assert_allclose(curve, [100.0, 50.0, 25.0])


def test_fixed_fraction_equity_is_last_point():
    """Test terminal equity equals the end of the curve for the same seed."""
    terminal = fixed_fraction_equity(make_rng(9), trades=50)
    curve = equity_curve(make_rng(9), trades=50)

    assert isinstance(terminal, float)
    assert terminal == curve[-1]


def test_fixed_fraction_equity_varies_between_draws():
    """Test that successive draws from one generator differ."""
    rng = make_rng(3)
    draws = {fixed_fraction_equity(rng) for _ in range(20)}

    assert len(draws) > 1


def test_fixed_fraction_equity_zero_trades():
    """Test that no trades leaves equity unchanged."""
    assert fixed_fraction_equity(make_rng(0), trades=0, start_equity=250.0) == 250.0


def test_equity_curve_invalid_inputs():
    """Test equity curve with invalid inputs."""
    rng = make_rng(42)

    with pytest.raises(ValueError, match="Cannot simulate negative number of trades"):
        equity_curve(rng, trades=-1)

    with pytest.raises(ValueError, match="win_rate must be in"):
        equity_curve(rng, win_rate=1.5)

    with pytest.raises(ValueError, match="reward_risk must be positive"):
        equity_curve(rng, reward_risk=0.0)

    with pytest.raises(ValueError, match="risk_fraction must be in"):
        equity_curve(rng, risk_fraction=1.0)

    with pytest.raises(ValueError, match="start_equity must be positive"):
        equity_curve(rng, start_equity=0.0)
