"""Data classes for partial-time barrier pricing. All values validated on creation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

from ptbarrier.errors import InvalidParameter


OptionType = Literal["call", "put"]

BarrierType = Literal[
    "down_and_out",
    "down_and_in",
    "up_and_out",
    "up_and_in",
]

# start:  barrier watched from the evaluation date to the cover event date
# end_b1: watched from the cover event date to maturity, a hit or cross
#         from either side knocks out
# end_b2: watched from the cover event date to maturity, being on the
#         wrong side at the cover event date already knocks out
BarrierWindow = Literal["start", "end_b1", "end_b2"]

DayCount = Literal["actual360", "actual365fixed"]

OPTION_TYPES: tuple[str, ...] = ("call", "put")
BARRIER_TYPES: tuple[str, ...] = ("down_and_out", "down_and_in", "up_and_out", "up_and_in")
BARRIER_WINDOWS: tuple[str, ...] = ("start", "end_b1", "end_b2")
DAY_COUNTS: tuple[str, ...] = ("actual360", "actual365fixed")


def _require_date(name: str, value) -> None:
    if not isinstance(value, date) or isinstance(value, datetime):
        raise InvalidParameter(f"{name} must be a datetime.date, got {value!r}")


@dataclass(frozen=True)
class MarketSnapshot:
    """Flat Black-Scholes-Merton market seen from its own evaluation date."""

    spot: float                   # Underlying price
    rate: float                   # Continuously compounded risk-free rate
    volatility: float             # Black volatility (annualized)
    evaluation_date: date
    dividend_yield: float = 0.0   # Continuous dividend yield
    day_count: DayCount = "actual365fixed"

    def __post_init__(self):
        if not self.spot > 0:
            raise InvalidParameter(f"spot must be > 0, got {self.spot}")
        if not self.volatility > 0:
            raise InvalidParameter(f"volatility must be > 0, got {self.volatility}")
        if not math.isfinite(self.rate):
            raise InvalidParameter(f"rate must be finite, got {self.rate}")
        if not math.isfinite(self.dividend_yield):
            raise InvalidParameter(
                f"dividend_yield must be finite, got {self.dividend_yield}"
            )
        if not math.isfinite(self.spot) or not math.isfinite(self.volatility):
            raise InvalidParameter("spot and volatility must be finite")
        _require_date("evaluation_date", self.evaluation_date)
        if self.day_count not in DAY_COUNTS:
            raise InvalidParameter(
                f"day_count must be one of {DAY_COUNTS}, got '{self.day_count}'"
            )


@dataclass(frozen=True)
class OptionContract:
    """European option with a partial-time barrier."""

    strike: float
    barrier: float
    barrier_type: BarrierType
    cover_event_date: date
    maturity_date: date
    option_type: OptionType = "call"
    window: BarrierWindow = "end_b1"
    rebate: float = 0.0

    def __post_init__(self):
        if not self.strike > 0:
            raise InvalidParameter(f"strike must be > 0, got {self.strike}")
        if not self.barrier > 0:
            raise InvalidParameter(f"barrier must be > 0, got {self.barrier}")
        if not self.rebate >= 0:
            raise InvalidParameter(f"rebate must be >= 0, got {self.rebate}")
        if self.option_type not in OPTION_TYPES:
            raise InvalidParameter(
                f"option_type must be 'call' or 'put', got '{self.option_type}'"
            )
        if self.barrier_type not in BARRIER_TYPES:
            raise InvalidParameter(
                f"barrier_type must be one of {BARRIER_TYPES}, got '{self.barrier_type}'"
            )
        if self.window not in BARRIER_WINDOWS:
            raise InvalidParameter(
                f"window must be one of {BARRIER_WINDOWS}, got '{self.window}'"
            )
        _require_date("cover_event_date", self.cover_event_date)
        _require_date("maturity_date", self.maturity_date)
        if self.cover_event_date > self.maturity_date:
            raise InvalidParameter(
                f"cover_event_date ({self.cover_event_date}) must not be after "
                f"maturity_date ({self.maturity_date})"
            )

    @property
    def is_knock_in(self) -> bool:
        return self.barrier_type.endswith("_in")

    @property
    def direction(self) -> str:
        return "down" if self.barrier_type.startswith("down") else "up"


@dataclass(frozen=True)
class EngineConfig:
    """Numerical settings of the analytic engine."""

    min_cover_time: float = 1e-10  # floor for t1 when cover date == evaluation date
    clip_negative: bool = True     # floor rounding noise below zero

    def __post_init__(self):
        if not self.min_cover_time > 0:
            raise InvalidParameter(
                f"min_cover_time must be > 0, got {self.min_cover_time}"
            )
        if self.min_cover_time > 1e-4:
            raise InvalidParameter(
                f"min_cover_time must be <= 1e-4 years, got {self.min_cover_time}"
            )


@dataclass
class PricingResult:
    """Complete result of a partial-time barrier valuation."""

    price: float
    vanilla_price: float
    knockout_price: float          # value of the matching knock-out leg, rebate excluded
    rebate_value: float
    survival_probability: float    # risk-neutral probability of not being knocked out
    cover_time: float              # t1 in years
    residual_time: float           # T in years
    correlation: float             # sqrt(t1 / T)
    method_name: str
    snapshot: MarketSnapshot
    contract: OptionContract


@dataclass
class GreeksResult:
    """Option Greeks (sensitivities)."""

    delta: float  # dV/dS
    gamma: float  # d2V/dS2
    vega: float   # dV/dsigma
    theta: float  # dV/dt, calendar time passing (per year)
    rho: float    # dV/dr
