"""Tests for cover-date sweeps and window limits."""

import numpy as np
import pytest

from ptbarrier.finance.analysis import (
    WindowLimits,
    cover_date_sweep,
    monotonicity_violations,
    sweep_table,
    window_limits,
)
from ptbarrier.finance.barrier_analytical import barrier_analytical


class TestCoverDateSweep:

    def test_matches_reference_row(self, reference_env, make_contract):
        snapshot = reference_env.with_spot(105.0).snapshot()
        prices = cover_date_sweep(snapshot, make_contract(strike=110.0), [1, 90, 180, 270, 359])
        expected = [6.2303, 9.6812, 11.6055, 12.7342, 13.1376]
        assert np.allclose(prices, expected, atol=1e-4)

    def test_end_b1_rises_towards_vanilla(self, reference_env, make_contract):
        snapshot = reference_env.with_spot(105.0).snapshot()
        prices = cover_date_sweep(snapshot, make_contract(strike=110.0), range(0, 361, 30))
        assert len(monotonicity_violations(prices, increasing=True)) == 0

    def test_start_falls_towards_full_window(self, reference_env, make_contract):
        snapshot = reference_env.with_spot(105.0).snapshot()
        prices = cover_date_sweep(snapshot, make_contract(strike=110.0, window="start"), range(0, 361, 30))
        assert len(monotonicity_violations(prices, increasing=False)) == 0

    def test_table(self):
        text = sweep_table([1, 90], np.array([6.2303, 9.6812]))
        lines = text.splitlines()
        assert len(lines) == 4
        assert "9.681200" in lines[-1]


class TestWindowLimits:

    def test_end_b1_gaps_vanish(self, reference_env, make_contract):
        snapshot = reference_env.with_spot(105.0).snapshot()
        limits = window_limits(snapshot, make_contract(strike=110.0))
        assert isinstance(limits, WindowLimits)
        assert limits.evaluation_gap < 1e-8
        assert limits.maturity_gap < 1e-8

    def test_end_b1_below_barrier_compares_with_up_and_out(self, reference_env, make_contract):
        snapshot = reference_env.with_spot(95.0).snapshot()
        limits = window_limits(snapshot, make_contract(strike=90.0))
        expected = barrier_analytical(95.0, 90.0, 100.0, 1.0, 0.10, 0.25, 0.0, "up_and_out", "call")
        assert limits.full_window == pytest.approx(expected, abs=1e-12)
        assert limits.evaluation_gap < 1e-8

    def test_start_window_roles_flip(self, reference_env, make_contract):
        snapshot = reference_env.with_spot(105.0).snapshot()
        limits = window_limits(snapshot, make_contract(strike=110.0, window="start"))
        assert limits.at_evaluation == pytest.approx(limits.vanilla, abs=1e-8)
        assert limits.at_maturity == pytest.approx(limits.full_window, abs=1e-8)


class TestMonotonicityViolations:

    def test_increasing(self):
        assert list(monotonicity_violations(np.array([1.0, 2.0, 1.5, 3.0]))) == [1]

    def test_decreasing_with_tolerance(self):
        values = np.array([3.0, 2.0, 2.0 + 1e-12, 1.0])
        assert len(monotonicity_violations(values, increasing=False, tol=1e-9)) == 0
        assert list(monotonicity_violations(values, increasing=False)) == [1]
