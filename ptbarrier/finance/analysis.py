"""
Cover-date analysis for partial-time barrier options.

Key tool: price the same contract for a range of cover event dates and
compare the two ends of the range with the prices they must converge to:
- start window:  cover -> evaluation gives the vanilla price,
                 cover -> maturity gives the full-window barrier price
- end windows:   cover -> evaluation gives the full-window barrier price,
                 cover -> maturity gives the vanilla price (end_b1)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import timedelta
from typing import Sequence

import numpy as np

from .barrier_analytical import barrier_analytical
from .dates import year_fraction
from .partial_barrier import AnalyticPartialTimeBarrierEngine
from .validation import EngineConfig, MarketSnapshot, OptionContract


@dataclass
class WindowLimits:
    """Prices at both ends of the cover-date range and their targets."""

    at_evaluation: float    # cover event date == evaluation date
    at_maturity: float      # cover event date == maturity date
    vanilla: float
    full_window: float      # barrier watched over the whole life

    @property
    def evaluation_gap(self) -> float:
        return abs(self.at_evaluation - self.full_window)

    @property
    def maturity_gap(self) -> float:
        return abs(self.at_maturity - self.vanilla)


def cover_date_sweep(
    snapshot: MarketSnapshot,
    contract: OptionContract,
    days: Sequence[int],
    config: EngineConfig | None = None,
) -> np.ndarray:
    """Prices with cover event date = evaluation date + d for each d in days."""
    engine = AnalyticPartialTimeBarrierEngine(config)
    prices = np.zeros(len(days))
    for i, d in enumerate(days):
        cover = snapshot.evaluation_date + timedelta(days=int(d))
        priced = engine.price(snapshot, dataclasses.replace(contract, cover_event_date=cover))
        prices[i] = priced.price
    return prices


def spot_sweep(
    snapshot: MarketSnapshot,
    contract: OptionContract,
    spots: Sequence[float],
    config: EngineConfig | None = None,
) -> np.ndarray:
    """Prices of one contract over a range of spot levels."""
    engine = AnalyticPartialTimeBarrierEngine(config)
    return np.array(
        [engine.price(dataclasses.replace(snapshot, spot=float(s)), contract).price for s in spots],
        dtype=float,
    )


def window_limits(
    snapshot: MarketSnapshot,
    contract: OptionContract,
    config: EngineConfig | None = None,
) -> WindowLimits:
    """Evaluate the cover-date extremes and the prices they converge to.

    For the start window the roles flip: at_evaluation tends to vanilla and
    at_maturity to the full-window price; use the raw fields in that case.

    end_b1 knocks out from either side, so its full-window counterpart takes
    its direction from the spot: an up barrier when the spot is below H.
    """
    engine = AnalyticPartialTimeBarrierEngine(config)
    first = engine.price(
        snapshot, dataclasses.replace(contract, cover_event_date=snapshot.evaluation_date)
    )
    last = engine.price(
        snapshot, dataclasses.replace(contract, cover_event_date=contract.maturity_date)
    )
    T = year_fraction(snapshot.evaluation_date, contract.maturity_date, snapshot.day_count)
    barrier_type = contract.barrier_type
    if contract.window == "end_b1":
        side = "down" if snapshot.spot >= contract.barrier else "up"
        barrier_type = f"{side}_and_{barrier_type.rsplit('_', 1)[1]}"
    full = barrier_analytical(
        snapshot.spot,
        contract.strike,
        contract.barrier,
        T,
        snapshot.rate,
        snapshot.volatility,
        snapshot.dividend_yield,
        barrier_type,
        contract.option_type,
    )
    return WindowLimits(
        at_evaluation=first.price,
        at_maturity=last.price,
        vanilla=first.vanilla_price,
        full_window=full,
    )


def monotonicity_violations(values: np.ndarray, increasing: bool = True, tol: float = 0.0) -> np.ndarray:
    """Indices i where values[i+1] breaks the expected ordering by more than tol."""
    steps = np.diff(np.asarray(values, dtype=float))
    if increasing:
        return np.flatnonzero(steps < -tol)
    return np.flatnonzero(steps > tol)


def sweep_table(days: Sequence[int], prices: np.ndarray) -> str:
    """Print-ready table of a cover-date sweep."""
    lines = [f"{'days':>6s}  {'price':>12s}", "-" * 20]
    for d, p in zip(days, prices):
        lines.append(f"{int(d):6d}  {p:12.6f}")
    return "\n".join(lines)
