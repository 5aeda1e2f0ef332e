"""
Bivariate standard normal cumulative distribution.

M(a, b; rho) = P(X <= a, Y <= b) for standard normals X, Y with
correlation rho.

Algorithm: Genz (2004), "Numerical computation of rectangular bivariate
and trivariate normal and t probabilities", an adaptation of
Drezner-Wesolowsky (1990):
- |rho| < 0.925: Gauss-Legendre quadrature of the Plackett integral over
  theta in [0, asin(rho)] with 6, 12 or 20 nodes depending on |rho|
- |rho| >= 0.925: asymptotic expansion around |rho| = 1 plus a
  quadrature correction term

Absolute error is close to double precision over the whole plane.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.polynomial.legendre import leggauss
from scipy.stats import norm

from ptbarrier.errors import InvalidParameter, NumericalInstability

_TWO_PI = 2.0 * math.pi
_SQRT_TWO_PI = math.sqrt(_TWO_PI)

# Correlation can leave [-1, 1] by a few ulps after sqrt(t1/T).
_RHO_SLACK = 1e-12

_LEGENDRE = {n: leggauss(n) for n in (6, 12, 20)}


def _nodes(rho: float) -> tuple[np.ndarray, np.ndarray]:
    r = abs(rho)
    if r < 0.3:
        return _LEGENDRE[6]
    if r < 0.75:
        return _LEGENDRE[12]
    return _LEGENDRE[20]


def _upper_orthant(h: float, k: float, rho: float) -> float:
    """P(X > h, Y > k) for finite h, k."""
    x, w = _nodes(rho)
    hk = h * k

    if abs(rho) < 0.925:
        hs = (h * h + k * k) / 2.0
        asr = math.asin(rho)
        sn = np.sin(asr * (x + 1.0) / 2.0)
        integral = np.sum(w * np.exp((sn * hk - hs) / (1.0 - sn * sn)))
        return float(
            integral * asr / (2.0 * _TWO_PI)
            + norm.cdf(-h) * norm.cdf(-k)
        )

    if rho < 0:
        k = -k
        hk = -hk

    bvn = 0.0
    if abs(rho) < 1.0:
        as_ = (1.0 - rho) * (1.0 + rho)
        a = math.sqrt(as_)
        bs = (h - k) ** 2
        c = (4.0 - hk) / 8.0
        d = (12.0 - hk) / 16.0

        asr = -(bs / as_ + hk) / 2.0
        if asr > -100.0:
            bvn = a * math.exp(asr) * (
                1.0
                - c * (bs - as_) * (1.0 - d * bs / 5.0) / 3.0
                + c * d * as_ * as_ / 5.0
            )
        if hk > -100.0:
            b = math.sqrt(bs)
            bvn -= (
                math.exp(-hk / 2.0)
                * _SQRT_TWO_PI
                * norm.cdf(-b / a)
                * b
                * (1.0 - c * bs * (1.0 - d * bs / 5.0) / 3.0)
            )

        a /= 2.0
        for xi, wi in zip(x, w):
            xs = (a * (xi + 1.0)) ** 2
            asr = -(bs / xs + hk) / 2.0
            if asr > -100.0:
                rs = math.sqrt(1.0 - xs)
                bvn += a * wi * math.exp(asr) * (
                    math.exp(-hk * (1.0 - rs) / (2.0 * (1.0 + rs))) / rs
                    - (1.0 + c * xs * (1.0 + d * xs))
                )
        bvn = -bvn / _TWO_PI

    if rho > 0:
        return bvn + float(norm.cdf(-max(h, k)))

    bvn = -bvn
    if k > h:
        if h < 0:
            bvn += float(norm.cdf(k) - norm.cdf(h))
        else:
            bvn += float(norm.cdf(-h) - norm.cdf(-k))
    return bvn


def bivariate_normal_cdf(a: float, b: float, rho: float) -> float:
    """P(X <= a, Y <= b) for standard normals with correlation rho.

    Infinite limits are allowed; rho must lie in [-1, 1].
    """
    a = float(a)
    b = float(b)
    rho = float(rho)

    if math.isnan(a) or math.isnan(b) or math.isnan(rho):
        raise NumericalInstability(
            f"bivariate normal CDF called with NaN (a={a}, b={b}, rho={rho})"
        )
    if abs(rho) > 1.0 + _RHO_SLACK:
        raise InvalidParameter(f"correlation rho must be in [-1, 1], got {rho}")
    rho = min(1.0, max(-1.0, rho))

    if a == -math.inf or b == -math.inf:
        return 0.0
    if a == math.inf:
        return float(norm.cdf(b))
    if b == math.inf:
        return float(norm.cdf(a))

    value = _upper_orthant(-a, -b, rho)
    if not math.isfinite(value):
        raise NumericalInstability(
            f"bivariate normal CDF is not finite at a={a}, b={b}, rho={rho}"
        )
    return min(1.0, max(0.0, value))


def bivariate_normal_cdf_grid(a, b, rho) -> np.ndarray:
    """Element-wise bivariate_normal_cdf over broadcast arrays."""
    a_arr, b_arr, rho_arr = np.broadcast_arrays(
        np.asarray(a, dtype=float),
        np.asarray(b, dtype=float),
        np.asarray(rho, dtype=float),
    )
    out = np.empty(a_arr.shape, dtype=float)
    for idx in np.ndindex(a_arr.shape):
        out[idx] = bivariate_normal_cdf(a_arr[idx], b_arr[idx], rho_arr[idx])
    return out
