"""Analytical full-window barrier option formulas (Reiner-Rubinstein).

Barrier watched over the whole life of the option, continuous dividend
yield q. Implements the 4 knock-out cases explicitly and derives
knock-in prices via in-out parity: V_in = V_vanilla - V_out.
"""

from __future__ import annotations

import numpy as np
from scipy.stats import norm

from ptbarrier.errors import InvalidParameter

from .black_scholes import bs_vanilla_price
from .validation import BARRIER_TYPES


def _rr_blocks(S: float, K: float, H: float, T: float, r: float, sigma: float, q: float):
    b = r - q
    sig_sqrt_t = sigma * np.sqrt(T)
    mu = (b - 0.5 * sigma ** 2) / sigma ** 2
    lam = mu + 1.0
    carry = np.exp((b - r) * T)
    disc = np.exp(-r * T)
    log_hs = np.log(H / S)

    x1 = np.log(S / K) / sig_sqrt_t + lam * sig_sqrt_t
    x2 = np.log(S / H) / sig_sqrt_t + lam * sig_sqrt_t
    y1 = np.log((H ** 2) / (S * K)) / sig_sqrt_t + lam * sig_sqrt_t
    y2 = np.log(H / S) / sig_sqrt_t + lam * sig_sqrt_t

    def A(phi: int) -> float:
        return float(
            phi * S * carry * norm.cdf(phi * x1)
            - phi * K * disc * norm.cdf(phi * x1 - phi * sig_sqrt_t)
        )

    def B(phi: int) -> float:
        return float(
            phi * S * carry * norm.cdf(phi * x2)
            - phi * K * disc * norm.cdf(phi * x2 - phi * sig_sqrt_t)
        )

    def image(power: float, x: float) -> float:
        # (H/S)^power * N(x) in log space; the weight alone can overflow
        return np.exp(power * log_hs + norm.logcdf(x))

    def C(phi: int, eta: int) -> float:
        return float(
            phi * S * carry * image(2 * lam, eta * y1)
            - phi * K * disc * image(2 * mu, eta * y1 - eta * sig_sqrt_t)
        )

    def D(phi: int, eta: int) -> float:
        return float(
            phi * S * carry * image(2 * lam, eta * y2)
            - phi * K * disc * image(2 * mu, eta * y2 - eta * sig_sqrt_t)
        )

    return A, B, C, D


def barrier_analytical(
    S: float,
    K: float,
    H: float,
    T: float,
    r: float,
    sigma: float,
    q: float = 0.0,
    barrier_type: str = "down_and_out",
    option_type: str = "call",
) -> float:
    """Analytical price of a barrier option watched over its whole life, no rebate."""
    if option_type not in {"call", "put"}:
        raise InvalidParameter(f"option_type must be 'call' or 'put', got '{option_type}'")
    if barrier_type not in BARRIER_TYPES:
        raise InvalidParameter(
            f"barrier_type must be one of {BARRIER_TYPES}, got '{barrier_type}'"
        )

    if barrier_type == "down_and_out" and S <= H:
        return 0.0
    if barrier_type == "up_and_out" and S >= H:
        return 0.0

    if barrier_type.endswith("_out"):
        A, B, C, D = _rr_blocks(S, K, H, T, r, sigma, q)

        if option_type == "call" and barrier_type == "down_and_out":
            if K > H:
                return max(0.0, A(1) - C(1, 1))
            return max(0.0, B(1) - D(1, 1))

        if option_type == "put" and barrier_type == "down_and_out":
            if K > H:
                return max(0.0, A(-1) - B(-1) + C(-1, 1) - D(-1, 1))
            return 0.0

        if option_type == "call" and barrier_type == "up_and_out":
            if K > H:
                return 0.0
            return max(0.0, A(1) - B(1) + C(1, -1) - D(1, -1))

        if K > H:
            return max(0.0, B(-1) - D(-1, -1))
        return max(0.0, A(-1) - C(-1, -1))

    out_type = barrier_type.replace("_in", "_out")
    vanilla = bs_vanilla_price(S, K, T, r, sigma, q, option_type)
    out_price = barrier_analytical(S, K, H, T, r, sigma, q, out_type, option_type)
    return max(0.0, vanilla - out_price)
