"""Text reporting helpers for pricing results."""

from __future__ import annotations

from .validation import GreeksResult, PricingResult


def pricing_result_to_report(result: PricingResult) -> str:
    """Build a human-readable report from PricingResult, with in-out parity diagnostic."""
    contract = result.contract
    snapshot = result.snapshot
    if contract.is_knock_in:
        parity_gap = abs(result.price - result.rebate_value + result.knockout_price - result.vanilla_price)
    else:
        parity_gap = 0.0

    lines = [
        "Partial-Time Barrier Pricing Result",
        "-" * 46,
        f"Contract:     {contract.option_type} {contract.barrier_type} ({contract.window})",
        f"Strike:       {contract.strike}",
        f"Barrier:      {contract.barrier}",
        f"Cover event:  {contract.cover_event_date} (t1={result.cover_time:.6f})",
        f"Maturity:     {contract.maturity_date} (T={result.residual_time:.6f})",
        (
            f"Market:       S={snapshot.spot}, r={snapshot.rate}, "
            f"q={snapshot.dividend_yield}, sigma={snapshot.volatility}, "
            f"{snapshot.day_count}"
        ),
        "",
        f"Price:        {result.price:.6f}",
        f"Vanilla:      {result.vanilla_price:.6f}",
        f"Knock-out:    {result.knockout_price:.6f}",
        f"Rebate value: {result.rebate_value:.6f}",
        f"Survival:     {result.survival_probability:.4%}",
        f"Correlation:  {result.correlation:.6f}",
        f"Parity gap:   {parity_gap:.3e}",
        f"Method:       {result.method_name}",
    ]
    return "\n".join(lines)


def greeks_to_report(greeks: GreeksResult) -> str:
    lines = [
        "Greeks",
        "-" * 46,
        f"Delta: {greeks.delta:.6f}",
        f"Gamma: {greeks.gamma:.6f}",
        f"Vega:  {greeks.vega:.6f}",
        f"Theta: {greeks.theta:.6f}",
        f"Rho:   {greeks.rho:.6f}",
    ]
    return "\n".join(lines)
