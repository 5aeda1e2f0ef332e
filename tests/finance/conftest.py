"""Fixtures for partial-time barrier pricing tests."""

from datetime import date, timedelta

import pytest

from ptbarrier.finance.market_data import flat_environment
from ptbarrier.finance.validation import MarketSnapshot, OptionContract


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

@pytest.fixture
def today():
    return date(2024, 1, 15)


@pytest.fixture
def maturity(today):
    """360 calendar days out: exactly one year under Actual/360."""
    return today + timedelta(days=360)


# ---------------------------------------------------------------------------
# Markets
# ---------------------------------------------------------------------------

@pytest.fixture
def reference_env(today):
    """Flat market of the reference table: r=10%, q=0, sigma=25%, Actual/360."""
    return flat_environment(
        evaluation_date=today,
        spot=100.0,
        rate=0.10,
        volatility=0.25,
        dividend_yield=0.0,
        day_count="actual360",
    )


@pytest.fixture
def dividend_snapshot(today):
    """S=100, r=5%, q=3%, sigma=20%, Actual/365 Fixed."""
    return MarketSnapshot(
        spot=100.0,
        rate=0.05,
        volatility=0.20,
        evaluation_date=today,
        dividend_yield=0.03,
    )


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------

@pytest.fixture
def make_contract(today, maturity):
    """Factory: OptionContract with the cover event `days` after today."""

    def _make(
        strike=100.0,
        barrier=100.0,
        barrier_type="down_and_out",
        days=180,
        window="end_b1",
        option_type="call",
        rebate=0.0,
        maturity_date=None,
    ):
        return OptionContract(
            strike=strike,
            barrier=barrier,
            barrier_type=barrier_type,
            cover_event_date=today + timedelta(days=days),
            maturity_date=maturity if maturity_date is None else maturity_date,
            option_type=option_type,
            window=window,
            rebate=rebate,
        )

    return _make
