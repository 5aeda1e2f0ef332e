"""Tests for day counts and flat market-data containers."""

from datetime import date, datetime

import pytest

from ptbarrier import InvalidParameter
from ptbarrier.finance.dates import day_count_days, to_date, year_fraction
from ptbarrier.finance.market_data import (
    BlackConstantVol,
    FlatForward,
    MarketEnvironment,
    flat_environment,
    snapshot_from_environment,
)


class TestDayCount:

    def test_actual360_year(self):
        assert year_fraction(date(2024, 1, 15), date(2025, 1, 9), "actual360") == pytest.approx(1.0)

    def test_actual365_leap_year(self):
        assert year_fraction(date(2024, 1, 1), date(2025, 1, 1)) == pytest.approx(366 / 365)

    def test_same_day_is_zero(self):
        assert year_fraction(date(2024, 3, 1), date(2024, 3, 1), "actual360") == 0.0

    def test_negative_span(self):
        assert day_count_days(date(2024, 3, 10), date(2024, 3, 1)) == -9

    def test_unknown_convention(self):
        with pytest.raises(InvalidParameter, match="day_count must be one of"):
            year_fraction(date(2024, 1, 1), date(2024, 7, 1), "thirty360")  # type: ignore[arg-type]

    def test_to_date(self):
        assert to_date(datetime(2024, 5, 6, 13, 45)) == date(2024, 5, 6)
        assert to_date(date(2024, 5, 6)) == date(2024, 5, 6)
        with pytest.raises(InvalidParameter, match="Unsupported date-like type"):
            to_date("2024-05-06")  # type: ignore[arg-type]


class TestCurves:

    def test_flat_forward_zero_rate(self):
        assert FlatForward(0.05).zero_rate(3.0) == 0.05

    def test_flat_forward_rejects_nan(self):
        with pytest.raises(InvalidParameter, match="rate must be finite"):
            FlatForward(float("nan"))

    def test_constant_vol(self):
        surface = BlackConstantVol(0.25, "actual360")
        assert surface.black_vol(0.5) == 0.25
        assert surface.black_vol(2.0, strike=80.0) == 0.25

    def test_constant_vol_rejects_zero(self):
        with pytest.raises(InvalidParameter, match="volatility must be > 0"):
            BlackConstantVol(0.0)


class TestMarketEnvironment:

    def test_snapshot_from_flat_quotes(self):
        env = flat_environment(date(2024, 1, 15), 95.0, 0.1, 0.25, 0.02, "actual360")
        snapshot = env.snapshot()
        assert snapshot.spot == 95.0
        assert snapshot.rate == 0.1
        assert snapshot.dividend_yield == 0.02
        assert snapshot.volatility == 0.25
        assert snapshot.evaluation_date == date(2024, 1, 15)
        assert snapshot.day_count == "actual360"
        assert snapshot_from_environment(env) == snapshot

    def test_with_spot_leaves_original(self):
        env = flat_environment(date(2024, 1, 15), 100.0, 0.1, 0.25)
        moved = env.with_spot(105.0)
        assert moved.spot == 105.0
        assert env.spot == 100.0
        assert moved.risk_free is env.risk_free

    def test_mixed_day_counts_rejected(self):
        with pytest.raises(InvalidParameter, match="curves must share one day count"):
            MarketEnvironment(
                evaluation_date=date(2024, 1, 15),
                spot=100.0,
                risk_free=FlatForward(0.1, "actual360"),
                dividend=FlatForward(0.0, "actual365fixed"),
                volatility=BlackConstantVol(0.25, "actual360"),
            )

    def test_bad_spot_rejected(self):
        with pytest.raises(InvalidParameter, match="spot must be > 0"):
            flat_environment(date(2024, 1, 15), 0.0, 0.1, 0.25)
