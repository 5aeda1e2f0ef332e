"""
QuantLib wrapper functions for benchmarking.

This module provides clean interfaces to the QuantLib pricing engines
that ptbarrier is compared against. QuantLib is imported lazily so the
package itself never depends on it.
"""

from __future__ import annotations

from datetime import date

_QL_DAY_COUNTS = {
    "actual360": "Actual360",
    "actual365fixed": "Actual365Fixed",
}

_QL_RANGES = {
    "start": "Start",
    "end_b1": "EndB1",
    "end_b2": "EndB2",
}

_QL_BARRIERS = {
    "down_and_out": "DownOut",
    "up_and_out": "UpOut",
    "down_and_in": "DownIn",
    "up_and_in": "UpIn",
}


def _ql_date(d: date):
    import QuantLib as ql

    return ql.Date(d.day, d.month, d.year)


def _make_ql_process(
    evaluation_date: date,
    S: float,
    r: float,
    sigma: float,
    q: float = 0.0,
    day_count: str = "actual365fixed",
):
    """Create QuantLib Black-Scholes-Merton process on flat curves."""
    import QuantLib as ql

    today = _ql_date(evaluation_date)
    ql.Settings.instance().evaluationDate = today
    dc = getattr(ql, _QL_DAY_COUNTS[day_count])()

    spot_handle = ql.QuoteHandle(ql.SimpleQuote(S))
    rate_handle = ql.YieldTermStructureHandle(
        ql.FlatForward(today, ql.QuoteHandle(ql.SimpleQuote(r)), dc)
    )
    div_handle = ql.YieldTermStructureHandle(
        ql.FlatForward(today, ql.QuoteHandle(ql.SimpleQuote(q)), dc)
    )
    vol_handle = ql.BlackVolTermStructureHandle(
        ql.BlackConstantVol(today, ql.NullCalendar(), ql.QuoteHandle(ql.SimpleQuote(sigma)), dc)
    )

    process = ql.BlackScholesMertonProcess(spot_handle, div_handle, rate_handle, vol_handle)
    return process, today


def ql_partial_time_barrier(
    evaluation_date: date,
    S: float,
    K: float,
    H: float,
    cover_event_date: date,
    maturity_date: date,
    r: float,
    sigma: float,
    q: float = 0.0,
    barrier_type: str = "down_and_out",
    window: str = "end_b1",
    option_type: str = "call",
    rebate: float = 0.0,
    day_count: str = "actual365fixed",
) -> float:
    """QuantLib AnalyticPartialTimeBarrierOptionEngine price."""
    import QuantLib as ql

    process, _ = _make_ql_process(evaluation_date, S, r, sigma, q, day_count)
    payoff = ql.PlainVanillaPayoff(
        ql.Option.Call if option_type == "call" else ql.Option.Put, K
    )
    exercise = ql.EuropeanExercise(_ql_date(maturity_date))

    option = ql.PartialTimeBarrierOption(
        getattr(ql.Barrier, _QL_BARRIERS[barrier_type]),
        getattr(ql.PartialBarrier, _QL_RANGES[window]),
        H,
        rebate,
        _ql_date(cover_event_date),
        payoff,
        exercise,
    )
    option.setPricingEngine(ql.AnalyticPartialTimeBarrierOptionEngine(process))
    return option.NPV()


def ql_barrier_analytical(
    evaluation_date: date,
    S: float,
    K: float,
    H: float,
    maturity_date: date,
    r: float,
    sigma: float,
    q: float = 0.0,
    barrier_type: str = "down_and_out",
    option_type: str = "call",
    day_count: str = "actual365fixed",
) -> float:
    """QuantLib analytical (full-window) barrier option price."""
    import QuantLib as ql

    process, _ = _make_ql_process(evaluation_date, S, r, sigma, q, day_count)
    payoff = ql.PlainVanillaPayoff(
        ql.Option.Call if option_type == "call" else ql.Option.Put, K
    )
    exercise = ql.EuropeanExercise(_ql_date(maturity_date))

    bt = getattr(ql.Barrier, _QL_BARRIERS[barrier_type])
    option = ql.BarrierOption(bt, H, 0.0, payoff, exercise)
    option.setPricingEngine(ql.AnalyticBarrierEngine(process))
    return option.NPV()


def ql_european_analytical(
    evaluation_date: date,
    S: float,
    K: float,
    maturity_date: date,
    r: float,
    sigma: float,
    q: float = 0.0,
    option_type: str = "call",
    day_count: str = "actual365fixed",
) -> float:
    """QuantLib analytical European option price."""
    import QuantLib as ql

    process, _ = _make_ql_process(evaluation_date, S, r, sigma, q, day_count)
    payoff = ql.PlainVanillaPayoff(
        ql.Option.Call if option_type == "call" else ql.Option.Put, K
    )
    option = ql.VanillaOption(payoff, ql.EuropeanExercise(_ql_date(maturity_date)))
    option.setPricingEngine(ql.AnalyticEuropeanEngine(process))
    return option.NPV()
