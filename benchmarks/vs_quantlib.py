"""
Benchmark: ptbarrier vs QuantLib.

Compares prices and timing for the same partial-time barrier contracts.
Writes CSV tables to benchmarks/results/tables/ and, with --plot,
the PNG plots of plot_results.py.

Run:
    pip install QuantLib matplotlib
    python benchmarks/vs_quantlib.py --plot
"""

from __future__ import annotations

import csv
import os
import sys
import time
from datetime import date, timedelta
from pathlib import Path

import numpy as np

# Add parent directory to path for importing ptbarrier
sys.path.insert(0, str(Path(__file__).parent.parent))

from ptbarrier.finance import (
    OptionContract,
    flat_environment,
    price,
)

from helpers import ql_partial_time_barrier


TODAY = date(2024, 1, 15)
MATURITY = TODAY + timedelta(days=360)

# (spot, strike, cover event days, published value)
REFERENCE_CASES = [
    (95.0, 90.0, 1, 0.0393), (95.0, 110.0, 1, 0.0000),
    (105.0, 90.0, 1, 9.8751), (105.0, 110.0, 1, 6.2303),
    (95.0, 90.0, 90, 6.2747), (95.0, 110.0, 90, 3.7352),
    (105.0, 90.0, 90, 15.6324), (105.0, 110.0, 90, 9.6812),
    (95.0, 90.0, 180, 10.3345), (95.0, 110.0, 180, 5.8712),
    (105.0, 90.0, 180, 19.2896), (105.0, 110.0, 180, 11.6055),
    (95.0, 90.0, 270, 13.4342), (95.0, 110.0, 270, 7.1270),
    (105.0, 90.0, 270, 22.0753), (105.0, 110.0, 270, 12.7342),
    (95.0, 90.0, 359, 16.8576), (95.0, 110.0, 359, 7.5763),
    (105.0, 90.0, 359, 25.1488), (105.0, 110.0, 359, 13.1376),
]


# ═══════════════════════════════════════════════════════════════════════════════
# Timing utility
# ═══════════════════════════════════════════════════════════════════════════════

def measure(func, *args, n_runs: int = 10, warmup: int = 2, **kwargs):
    """Median wall time over n_runs."""
    for _ in range(warmup):
        result = func(*args, **kwargs)

    times = []
    for _ in range(n_runs):
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        t1 = time.perf_counter()
        times.append(t1 - t0)

    return {
        "price": result,
        "time_ms": np.median(times) * 1000,
        "time_std_ms": np.std(times) * 1000,
    }


# ═══════════════════════════════════════════════════════════════════════════════
# Table 1: published reference values
# ═══════════════════════════════════════════════════════════════════════════════

def benchmark_reference():
    """DownOut / end_b1 calls of the published table, r=10%, sigma=25%, Actual/360."""
    print("  Setting up reference table...")
    env = flat_environment(TODAY, 100.0, 0.10, 0.25, 0.0, "actual360")

    results = []
    for spot, strike, days, expected in REFERENCE_CASES:
        cover = TODAY + timedelta(days=days)
        contract = OptionContract(
            strike=strike, barrier=100.0, barrier_type="down_and_out",
            cover_event_date=cover, maturity_date=MATURITY, window="end_b1",
        )
        ours = measure(lambda: price(env.with_spot(spot).snapshot(), contract).price)
        ql_price = ql_partial_time_barrier(
            TODAY, spot, strike, 100.0, cover, MATURITY, 0.10, 0.25,
            window="end_b1", day_count="actual360",
        )
        results.append({
            "spot": spot,
            "strike": strike,
            "days": days,
            "expected": expected,
            "ptbarrier": ours["price"],
            "quantlib": ql_price,
            "error_vs_expected": abs(ours["price"] - expected),
            "error_vs_quantlib": abs(ours["price"] - ql_price),
            "time_ms": ours["time_ms"],
        })
    return results


# ═══════════════════════════════════════════════════════════════════════════════
# Table 2: cover-date sweep for every window
# ═══════════════════════════════════════════════════════════════════════════════

def benchmark_windows():
    """Knock-out calls for each window across cover dates, with dividends."""
    print("  Setting up window sweep...")
    env = flat_environment(TODAY, 100.0, 0.05, 0.20, 0.02, "actual365fixed")
    configs = [
        ("DOC H=95", "down_and_out", 95.0, 105.0),
        ("UOC H=120", "up_and_out", 120.0, 100.0),
    ]

    results = []
    for name, barrier_type, barrier, strike in configs:
        for window in ("start", "end_b1", "end_b2"):
            for days in range(0, 361, 30):
                cover = TODAY + timedelta(days=days)
                contract = OptionContract(
                    strike=strike, barrier=barrier, barrier_type=barrier_type,
                    cover_event_date=cover, maturity_date=MATURITY, window=window,
                )
                ours = price(env.snapshot(), contract).price
                try:
                    ql_price = ql_partial_time_barrier(
                        TODAY, 100.0, strike, barrier, cover, MATURITY, 0.05, 0.20, 0.02,
                        barrier_type=barrier_type, window=window,
                    )
                except RuntimeError as exc:
                    # QuantLib rejects some (window, barrier) combinations
                    print(f"    QuantLib: {name} {window} {days}d: {exc}")
                    ql_price = float("nan")
                results.append({
                    "config": name,
                    "window": window,
                    "days": days,
                    "ptbarrier": ours,
                    "quantlib": ql_price,
                    "abs_diff": abs(ours - ql_price),
                })
    return results


# ═══════════════════════════════════════════════════════════════════════════════
# Output
# ═══════════════════════════════════════════════════════════════════════════════

def save_csv(data, filename):
    """Write a list of dicts to CSV."""
    os.makedirs("benchmarks/results/tables", exist_ok=True)
    path = f"benchmarks/results/tables/{filename}"
    if not data:
        return
    with open(path, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=data[0].keys())
        w.writeheader()
        w.writerows(data)
    print(f"  Saved: {path}")


def print_table(data, title, key_cols=None):
    """Console table."""
    if not data:
        return
    print(f"\n{'='*80}")
    print(f"  {title}")
    print(f"{'='*80}")

    cols = key_cols or list(data[0].keys())
    header = " | ".join(f"{c:>15}" for c in cols)
    print(f"  {header}")
    print(f"  {'-' * len(header)}")
    for row in data:
        vals = []
        for c in cols:
            v = row.get(c, "")
            if isinstance(v, float):
                if "error" in c or "diff" in c:
                    vals.append(f"{v:>15.2e}")
                elif "time" in c:
                    vals.append(f"{v:>15.3f}")
                else:
                    vals.append(f"{v:>15.6f}")
            else:
                vals.append(f"{str(v):>15}")
        print(f"  {' | '.join(vals)}")


def main():
    print("=" * 80)
    print("  ptbarrier vs QuantLib: partial-time barrier options")
    print("=" * 80)

    try:
        import QuantLib as ql
    except ImportError:
        print("  ERROR: QuantLib not installed!")
        print("  Run: pip install QuantLib")
        sys.exit(1)
    print(f"  QuantLib version: {ql.__version__}")

    from ptbarrier import __version__
    print(f"  ptbarrier version: {__version__}")

    print("\n[1/2] Reference table...")
    reference = benchmark_reference()
    print_table(reference, "DownOut end_b1 calls",
                ["spot", "strike", "days", "expected", "ptbarrier", "error_vs_quantlib", "time_ms"])
    save_csv(reference, "reference_table.csv")

    print("\n[2/2] Cover-date sweep...")
    windows = benchmark_windows()
    print_table(windows, "Knock-out calls by window",
                ["config", "window", "days", "ptbarrier", "quantlib", "abs_diff"])
    save_csv(windows, "window_sweep.csv")

    worst = max(r["error_vs_expected"] for r in reference)
    print("\n" + "=" * 80)
    print(f"  Worst error vs published values: {worst:.2e} (tolerance 1e-4)")
    print("  Tables saved to benchmarks/results/tables/")
    if "--plot" in sys.argv[1:]:
        from plot_results import main as plot_main

        plot_main()
    else:
        print("  Run with --plot for sweep plots")


if __name__ == "__main__":
    main()
