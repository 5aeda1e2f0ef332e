"""Flat market-data containers and their reduction to a MarketSnapshot.

The analytic engine consumes scalars. Term structures here are flat by
construction, so adapting an environment is a lookup of the constant
rate, yield and volatility plus a day-count consistency check.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from datetime import date

from ptbarrier.errors import InvalidParameter

from .validation import DAY_COUNTS, DayCount, MarketSnapshot

LOGGER = logging.getLogger(__name__)


def _check_day_count(day_count: str) -> None:
    if day_count not in DAY_COUNTS:
        raise InvalidParameter(
            f"day_count must be one of {DAY_COUNTS}, got '{day_count}'"
        )


@dataclass(frozen=True)
class FlatForward:
    """Flat continuously compounded zero curve."""

    rate: float
    day_count: DayCount = "actual365fixed"

    def __post_init__(self):
        if not math.isfinite(self.rate):
            raise InvalidParameter(f"rate must be finite, got {self.rate}")
        _check_day_count(self.day_count)

    def zero_rate(self, t: float) -> float:
        return self.rate


@dataclass(frozen=True)
class BlackConstantVol:
    """Flat Black volatility surface."""

    volatility: float
    day_count: DayCount = "actual365fixed"

    def __post_init__(self):
        if not self.volatility > 0 or not math.isfinite(self.volatility):
            raise InvalidParameter(f"volatility must be > 0, got {self.volatility}")
        _check_day_count(self.day_count)

    def black_vol(self, t: float, strike: float | None = None) -> float:
        return self.volatility


@dataclass(frozen=True)
class MarketEnvironment:
    """Spot quote plus flat curves, all referenced to one evaluation date."""

    evaluation_date: date
    spot: float
    risk_free: FlatForward
    dividend: FlatForward
    volatility: BlackConstantVol

    def __post_init__(self):
        if not self.spot > 0:
            raise InvalidParameter(f"spot must be > 0, got {self.spot}")
        conventions = {
            self.risk_free.day_count,
            self.dividend.day_count,
            self.volatility.day_count,
        }
        if len(conventions) != 1:
            raise InvalidParameter(
                f"curves must share one day count, got {sorted(conventions)}"
            )

    @property
    def day_count(self) -> DayCount:
        return self.risk_free.day_count

    def with_spot(self, spot: float) -> "MarketEnvironment":
        """Copy of the environment with a new spot quote."""
        return dataclasses.replace(self, spot=spot)

    def snapshot(self) -> MarketSnapshot:
        return snapshot_from_environment(self)


def snapshot_from_environment(env: MarketEnvironment) -> MarketSnapshot:
    """Reduce flat term structures to the scalar inputs of the engine."""
    snapshot = MarketSnapshot(
        spot=env.spot,
        rate=env.risk_free.zero_rate(0.0),
        volatility=env.volatility.black_vol(0.0),
        evaluation_date=env.evaluation_date,
        dividend_yield=env.dividend.zero_rate(0.0),
        day_count=env.day_count,
    )
    LOGGER.debug("adapted market environment to %s", snapshot)
    return snapshot


def flat_environment(
    evaluation_date: date,
    spot: float,
    rate: float,
    volatility: float,
    dividend_yield: float = 0.0,
    day_count: DayCount = "actual365fixed",
) -> MarketEnvironment:
    """Build an environment from flat quotes sharing one day count."""
    return MarketEnvironment(
        evaluation_date=evaluation_date,
        spot=spot,
        risk_free=FlatForward(rate, day_count),
        dividend=FlatForward(dividend_yield, day_count),
        volatility=BlackConstantVol(volatility, day_count),
    )
