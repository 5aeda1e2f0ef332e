"""Analytical partial-time barrier options (Heynen-Kat 1994, Haug 2007).

Black-Scholes-Merton with cost of carry b = r - q. The barrier is only
watched on part of the option life, split by the cover event time t1:

    start   [0, t1]   then plain vanilla to T
    end_b1  [t1, T]   knocked out by a hit or cross from either side
    end_b2  [t1, T]   also knocked out if on the wrong side at t1

Every knock-out call is S*e^{(b-r)T} * P_asset - K*e^{-rT} * P_cash,
where both probabilities are sums of bivariate normal CDF terms
M(x, e; rho) with rho = sqrt(t1/T), each paired with its reflected
(image) term weighted by (H/S)^{2(mu+1)} or (H/S)^{2mu}.

Derived prices:
- puts:      P_out = C_out - S*e^{(b-r)T}*P_asset(0) + K*e^{-rT}*P_cash(0),
             the zero-strike legs being the forward and the survival
             probability of the knock-out event
- knock-ins: V_in = V_vanilla - V_out
- rebate:    paid at maturity, R*e^{-rT}*Q(knocked out) for outs,
             R*e^{-rT}*Q(never knocked in) for ins
"""

from __future__ import annotations

import logging
import math
import sys
from typing import NamedTuple

from ptbarrier.bivariate import bivariate_normal_cdf as M
from ptbarrier.errors import InvalidParameter, NumericalInstability

from .black_scholes import bs_vanilla_price
from .dates import year_fraction
from .validation import (
    BARRIER_TYPES,
    BARRIER_WINDOWS,
    EngineConfig,
    MarketSnapshot,
    OptionContract,
    PricingResult,
)

LOGGER = logging.getLogger(__name__)

_MAX_LOG = math.log(sys.float_info.max)


class _Leg(NamedTuple):
    """Auxiliaries of one leg: asset (index 1, 3) or cash (index 2, 4)."""

    d: float      # strike, over T
    f: float      # image of d
    e: float      # barrier, over t1
    e_img: float  # image of e
    g: float      # barrier, over T
    g_img: float  # image of g
    log_hs: float  # log of the reflection weight


def _legs(
    S: float, K: float, H: float, t1: float, T: float, b: float, sigma: float
) -> tuple[_Leg, _Leg, float]:
    sig_t = sigma * math.sqrt(T)
    sig_t1 = sigma * math.sqrt(t1)
    carry = b + 0.5 * sigma ** 2
    mu = (b - 0.5 * sigma ** 2) / sigma ** 2

    log_sh = math.log(S / H)
    log_sk = math.inf if K == 0.0 else math.log(S / K)

    d1 = (log_sk + carry * T) / sig_t
    f1 = d1 - 2.0 * log_sh / sig_t
    e1 = (log_sh + carry * t1) / sig_t1
    e3 = e1 - 2.0 * log_sh / sig_t1
    g1 = (log_sh + carry * T) / sig_t
    g3 = g1 - 2.0 * log_sh / sig_t

    asset = _Leg(
        d=d1, f=f1, e=e1, e_img=e3, g=g1, g_img=g3,
        log_hs=-2.0 * (mu + 1.0) * log_sh,
    )
    cash = _Leg(
        d=d1 - sig_t, f=f1 - sig_t, e=e1 - sig_t1, e_img=e3 - sig_t1,
        g=g1 - sig_t, g_img=g3 - sig_t,
        log_hs=-2.0 * mu * log_sh,
    )
    return asset, cash, math.sqrt(t1 / T)


def _reflected(leg: _Leg, m: float) -> float:
    """Image term (H/S)^p * m, combined in log space.

    Low volatility makes the weight overflow a double while m underflows;
    their product is what matters.
    """
    if m <= 0.0:
        return 0.0
    log_term = leg.log_hs + math.log(m)
    if log_term > _MAX_LOG:
        raise NumericalInstability(
            f"reflected term exp({log_term:.1f}) overflows, log weight {leg.log_hs:.1f}"
        )
    return math.exp(log_term)


def _start(leg: _Leg, rho: float, eta: int) -> float:
    """Never at the barrier on [0, t1], ends above the strike."""
    return (
        M(leg.d, eta * leg.e, eta * rho)
        - _reflected(leg, M(leg.f, eta * leg.e_img, eta * rho))
    )


def _above(x: float, x_img: float, leg: _Leg, rho: float) -> float:
    """Above the barrier on [t1, T], ends above the level behind x."""
    return M(x, leg.e, rho) - _reflected(leg, M(x_img, -leg.e_img, -rho))


def _below(x: float, x_img: float, leg: _Leg, rho: float) -> float:
    """Below the barrier on [t1, T], ends below the level behind x."""
    return M(-x, -leg.e, rho) - _reflected(leg, M(-x_img, leg.e_img, -rho))


def _knockout_probabilities(
    S: float,
    K: float,
    H: float,
    t1: float,
    T: float,
    b: float,
    sigma: float,
    window: str,
    direction: str,
) -> tuple[float, float]:
    """(P_asset, P_cash) of the knock-out call; K = 0 gives forward and survival."""
    asset, cash, rho = _legs(S, K, H, t1, T, b, sigma)

    def both(formula) -> tuple[float, float]:
        return formula(asset), formula(cash)

    if window == "start":
        eta = 1 if direction == "down" else -1
        return both(lambda leg: _start(leg, rho, eta))

    if window == "end_b1":
        if K > H:
            return both(lambda leg: _above(leg.d, leg.f, leg, rho))
        return both(
            lambda leg: _below(leg.g, leg.g_img, leg, rho)
            - _below(leg.d, leg.f, leg, rho)
            + _above(leg.g, leg.g_img, leg, rho)
        )

    if window == "end_b2":
        if direction == "down":
            if K < H:
                return both(lambda leg: _above(leg.g, leg.g_img, leg, rho))
            return both(lambda leg: _above(leg.d, leg.f, leg, rho))
        if K < H:
            return both(
                lambda leg: _below(leg.g, leg.g_img, leg, rho)
                - _below(leg.d, leg.f, leg, rho)
            )
        return 0.0, 0.0

    raise InvalidParameter(f"window must be one of {BARRIER_WINDOWS}, got '{window}'")


def _check_finite(label: str, number: float, S, K, H, t1, T) -> None:
    # checked before clipping: max(0.0, nan) is 0.0
    if not math.isfinite(number):
        raise NumericalInstability(
            f"{label} is not finite for S={S}, K={K}, H={H}, t1={t1}, T={T}"
        )


def _breached_at_start(S: float, H: float, direction: str) -> bool:
    return S <= H if direction == "down" else S >= H


def _evaluate(
    S: float,
    K: float,
    H: float,
    t1: float,
    T: float,
    r: float,
    sigma: float,
    q: float,
    barrier_type: str,
    window: str,
    option_type: str,
    rebate: float,
    clip_negative: bool,
) -> dict:
    """Price and its components; t1 is already floored."""
    b = r - q
    direction = "down" if barrier_type.startswith("down") else "up"
    forward_leg = S * math.exp((b - r) * T)
    disc = math.exp(-r * T)
    vanilla = bs_vanilla_price(S, K, T, r, sigma, q, option_type)

    if window == "start" and _breached_at_start(S, H, direction):
        LOGGER.debug("start window already breached at S=%s, H=%s", S, H)
        out_price = 0.0
        survival = 0.0
    else:
        p_asset, p_cash = _knockout_probabilities(
            S, K, H, t1, T, b, sigma, window, direction
        )
        f_asset, survival = _knockout_probabilities(
            S, 0.0, H, t1, T, b, sigma, window, direction
        )
        out_price = forward_leg * p_asset - K * disc * p_cash
        if option_type == "put":
            out_price = out_price - forward_leg * f_asset + K * disc * survival

    for label, number in (
        ("vanilla", vanilla), ("knock-out leg", out_price), ("survival", survival)
    ):
        _check_finite(label, number, S, K, H, t1, T)

    if clip_negative:
        if out_price < -1e-10:
            LOGGER.warning(
                "clipped knock-out value %.3e to zero (%s %s, S=%s, K=%s, H=%s)",
                out_price, window, barrier_type, S, K, H,
            )
        out_price = max(0.0, out_price)
    survival = min(1.0, max(0.0, survival))

    if barrier_type.endswith("_in"):
        value = vanilla - out_price
        rebate_value = rebate * disc * survival
    else:
        value = out_price
        rebate_value = rebate * disc * (1.0 - survival)

    if clip_negative:
        value = max(0.0, value)
    value += rebate_value

    _check_finite("price", value, S, K, H, t1, T)

    LOGGER.debug(
        "%s %s %s: price=%.10f vanilla=%.10f out=%.10f survival=%.6f",
        window, barrier_type, option_type, value, vanilla, out_price, survival,
    )
    return {
        "price": float(value),
        "vanilla_price": float(vanilla),
        "knockout_price": float(out_price),
        "rebate_value": float(rebate_value),
        "survival_probability": float(survival),
        "correlation": math.sqrt(t1 / T),
    }


def _check_scalars(S: float, K: float, H: float, sigma: float, rebate: float) -> None:
    if not S > 0:
        raise InvalidParameter(f"spot must be > 0, got {S}")
    if not K > 0:
        raise InvalidParameter(f"strike must be > 0, got {K}")
    if not H > 0:
        raise InvalidParameter(f"barrier must be > 0, got {H}")
    if not sigma > 0:
        raise InvalidParameter(f"volatility must be > 0, got {sigma}")
    if not rebate >= 0:
        raise InvalidParameter(f"rebate must be >= 0, got {rebate}")


def partial_barrier_analytical(
    S: float,
    K: float,
    H: float,
    t1: float,
    T: float,
    r: float,
    sigma: float,
    q: float = 0.0,
    barrier_type: str = "down_and_out",
    window: str = "end_b1",
    option_type: str = "call",
    rebate: float = 0.0,
    config: EngineConfig | None = None,
) -> float:
    """Analytical partial-time barrier price from year fractions.

    Parameters:
        S, K, H: spot, strike, barrier
        t1: cover event time in years, 0 <= t1 <= T
        T: time to maturity in years
        r, q: continuously compounded rate and dividend yield
        sigma: Black volatility
        barrier_type: "down_and_out", "up_and_out", "down_and_in", "up_and_in"
        window: "start", "end_b1" or "end_b2"
        option_type: "call" or "put"
        rebate: paid at maturity when knocked out (or never knocked in)
    """
    config = config if config is not None else EngineConfig()
    _check_scalars(S, K, H, sigma, rebate)
    if option_type not in {"call", "put"}:
        raise InvalidParameter(f"option_type must be 'call' or 'put', got '{option_type}'")
    if barrier_type not in BARRIER_TYPES:
        raise InvalidParameter(
            f"barrier_type must be one of {BARRIER_TYPES}, got '{barrier_type}'"
        )
    if window not in BARRIER_WINDOWS:
        raise InvalidParameter(f"window must be one of {BARRIER_WINDOWS}, got '{window}'")
    if not T > 0:
        raise InvalidParameter(f"time to maturity T must be > 0, got {T}")
    if not 0 <= t1 <= T:
        raise InvalidParameter(f"cover event time t1 must be in [0, T={T}], got {t1}")

    t1 = min(T, max(t1, config.min_cover_time))
    return _evaluate(
        S, K, H, t1, T, r, sigma, q,
        barrier_type, window, option_type, rebate, config.clip_negative,
    )["price"]


class AnalyticPartialTimeBarrierEngine:
    """Price partial-time barrier options in closed form.

    Workflow:
        1. Check evaluation <= cover event <= maturity on the snapshot's calendar
        2. Convert dates to year fractions with the snapshot's day count
        3. Assemble the bivariate-normal formula for (window, direction, strike vs barrier)
        4. Derive puts, knock-ins and the rebate from the knock-out call legs
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config if config is not None else EngineConfig()

    @property
    def name(self) -> str:
        return "Analytic partial-time barrier (Heynen-Kat)"

    def times(self, snapshot: MarketSnapshot, contract: OptionContract) -> tuple[float, float]:
        """(t1, T) in years; raises InvalidParameter on misordered dates."""
        today = snapshot.evaluation_date
        if contract.maturity_date <= today:
            raise InvalidParameter(
                f"maturity_date ({contract.maturity_date}) must be after "
                f"evaluation_date ({today})"
            )
        if not today <= contract.cover_event_date <= contract.maturity_date:
            raise InvalidParameter(
                f"cover_event_date ({contract.cover_event_date}) must be within "
                f"[{today}, {contract.maturity_date}]"
            )
        t1 = year_fraction(today, contract.cover_event_date, snapshot.day_count)
        T = year_fraction(today, contract.maturity_date, snapshot.day_count)
        return t1, T

    def price(self, snapshot: MarketSnapshot, contract: OptionContract) -> PricingResult:
        """Price a partial-time barrier option.

        Parameters:
            snapshot: flat market (spot, rate, dividend yield, volatility, dates)
            contract: option terms

        Returns:
            PricingResult with price, vanilla and knock-out components
        """
        t1, T = self.times(snapshot, contract)
        t1_eff = min(T, max(t1, self.config.min_cover_time))
        LOGGER.debug(
            "pricing %s %s %s K=%s H=%s t1=%.6f T=%.6f",
            contract.window, contract.barrier_type, contract.option_type,
            contract.strike, contract.barrier, t1, T,
        )
        parts = _evaluate(
            snapshot.spot,
            contract.strike,
            contract.barrier,
            t1_eff,
            T,
            snapshot.rate,
            snapshot.volatility,
            snapshot.dividend_yield,
            contract.barrier_type,
            contract.window,
            contract.option_type,
            contract.rebate,
            self.config.clip_negative,
        )
        return PricingResult(
            price=parts["price"],
            vanilla_price=parts["vanilla_price"],
            knockout_price=parts["knockout_price"],
            rebate_value=parts["rebate_value"],
            survival_probability=parts["survival_probability"],
            cover_time=t1,
            residual_time=T,
            correlation=parts["correlation"],
            method_name=self.name,
            snapshot=snapshot,
            contract=contract,
        )


def price(
    snapshot: MarketSnapshot,
    contract: OptionContract,
    config: EngineConfig | None = None,
) -> PricingResult:
    """Price one contract against one market snapshot."""
    return AnalyticPartialTimeBarrierEngine(config).price(snapshot, contract)
