"""Greeks of partial-time barrier options by bump-and-reprice.

Delta, Gamma: central differences in spot (relative bump).
Vega, Rho: central differences in sigma and r.
Theta: one-sided, calendar time moves forward so both t1 and T shrink.
"""

from __future__ import annotations

from .partial_barrier import AnalyticPartialTimeBarrierEngine, partial_barrier_analytical
from .validation import EngineConfig, GreeksResult, MarketSnapshot, OptionContract


def compute_greeks(
    snapshot: MarketSnapshot,
    contract: OptionContract,
    config: EngineConfig | None = None,
    h_spot: float = 1e-3,
    h_sigma: float = 0.001,
    h_T: float = 1 / 365,
    h_r: float = 0.0001,
) -> GreeksResult:
    """Compute option Greeks.

    Parameters:
        snapshot: market snapshot
        contract: option terms
        config: engine settings
        h_spot: relative spot bump for delta and gamma
        h_sigma: bump size for vega
        h_T: bump size for theta (default 1 day)
        h_r: bump size for rho
    """
    engine = AnalyticPartialTimeBarrierEngine(config)
    t1, T = engine.times(snapshot, contract)

    def value(S=snapshot.spot, sigma=snapshot.volatility, r=snapshot.rate, cover=t1, expiry=T):
        return partial_barrier_analytical(
            S=S,
            K=contract.strike,
            H=contract.barrier,
            t1=cover,
            T=expiry,
            r=r,
            sigma=sigma,
            q=snapshot.dividend_yield,
            barrier_type=contract.barrier_type,
            window=contract.window,
            option_type=contract.option_type,
            rebate=contract.rebate,
            config=engine.config,
        )

    base = value()

    # --- Delta and Gamma ---
    dS = snapshot.spot * h_spot
    up = value(S=snapshot.spot + dS)
    dn = value(S=snapshot.spot - dS)
    delta = (up - dn) / (2 * dS)
    gamma = (up - 2 * base + dn) / dS ** 2

    # --- Vega ---
    h_sigma = min(h_sigma, snapshot.volatility / 2)
    vega = (
        value(sigma=snapshot.volatility + h_sigma)
        - value(sigma=snapshot.volatility - h_sigma)
    ) / (2 * h_sigma)

    # --- Theta: t1 cannot go below zero once the cover date is reached ---
    h_T = min(h_T, T / 4)
    later = value(cover=max(0.0, t1 - h_T), expiry=T - h_T)
    theta = (later - base) / h_T

    # --- Rho ---
    rho = (value(r=snapshot.rate + h_r) - value(r=snapshot.rate - h_r)) / (2 * h_r)

    return GreeksResult(
        delta=delta,
        gamma=gamma,
        vega=vega,
        theta=theta,
        rho=rho,
    )
