"""Partial-time barrier option pricing in closed form.

Market inputs come as a MarketSnapshot (or a flat MarketEnvironment
reduced to one), contract terms as an OptionContract. Each price comes
with its vanilla and knock-out components for parity diagnostics.
"""

from .validation import (
    EngineConfig,
    GreeksResult,
    MarketSnapshot,
    OptionContract,
    PricingResult,
)
from .market_data import (
    BlackConstantVol,
    FlatForward,
    MarketEnvironment,
    flat_environment,
    snapshot_from_environment,
)
from .dates import year_fraction
from .black_scholes import bs_vanilla_price
from .barrier_analytical import barrier_analytical
from .partial_barrier import (
    AnalyticPartialTimeBarrierEngine,
    partial_barrier_analytical,
    price,
)
from .greeks import compute_greeks

__all__ = [
    # Public API
    "MarketSnapshot",
    "OptionContract",
    "EngineConfig",
    "AnalyticPartialTimeBarrierEngine",
    "price",
    "partial_barrier_analytical",
    "barrier_analytical",
    "bs_vanilla_price",
    "compute_greeks",
    # Market data
    "FlatForward",
    "BlackConstantVol",
    "MarketEnvironment",
    "flat_environment",
    "snapshot_from_environment",
    "year_fraction",
    # Result types
    "PricingResult",
    "GreeksResult",
]
