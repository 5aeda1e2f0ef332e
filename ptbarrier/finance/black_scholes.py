"""Black-Scholes-Merton vanilla prices with a continuous dividend yield.

Cost of carry b = r - q:
    Call = S*e^{(b-r)T}*N(d1) - K*e^{-rT}*N(d2)
    Put  = K*e^{-rT}*N(-d2) - S*e^{(b-r)T}*N(-d1)
"""

from __future__ import annotations

import numpy as np
from scipy.stats import norm

from ptbarrier.errors import InvalidParameter


def bs_d1_d2(
    S: float, K: float, T: float, r: float, sigma: float, q: float = 0.0
) -> tuple[float, float]:
    sqrt_t = np.sqrt(T)
    d1 = (np.log(S / K) + (r - q + 0.5 * sigma ** 2) * T) / (sigma * sqrt_t)
    return float(d1), float(d1 - sigma * sqrt_t)


def bs_vanilla_price(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    q: float = 0.0,
    option_type: str = "call",
) -> float:
    """Exact Black-Scholes-Merton price of a European call or put."""
    if option_type not in {"call", "put"}:
        raise InvalidParameter(f"option_type must be 'call' or 'put', got '{option_type}'")
    d1, d2 = bs_d1_d2(S, K, T, r, sigma, q)
    forward_leg = S * np.exp(-q * T)
    strike_leg = K * np.exp(-r * T)

    if option_type == "call":
        return float(forward_leg * norm.cdf(d1) - strike_leg * norm.cdf(d2))
    return float(strike_leg * norm.cdf(-d2) - forward_leg * norm.cdf(-d1))
