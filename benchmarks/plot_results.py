"""
Plots of the ptbarrier vs QuantLib benchmark tables.

Run: python benchmarks/plot_results.py

Generates:
1. Cover-date sweep: price vs cover event day for every window
2. Reference table: absolute error vs the published values
"""

from __future__ import annotations

import csv
import os

import matplotlib.pyplot as plt


def load_csv(filename):
    """Load CSV file from results/tables."""
    path = f"benchmarks/results/tables/{filename}"
    if not os.path.exists(path):
        print(f"  Warning: {path} not found. Run vs_quantlib.py first.")
        return []
    with open(path) as f:
        return list(csv.DictReader(f))


def plot_window_sweep():
    """Price vs cover event day, ptbarrier lines and QuantLib markers."""
    data = load_csv("window_sweep.csv")
    if not data:
        return

    configs = sorted({row["config"] for row in data})
    fig, axes = plt.subplots(1, len(configs), figsize=(7 * len(configs), 5), squeeze=False)

    for ax, config in zip(axes[0], configs):
        for i, window in enumerate(("start", "end_b1", "end_b2")):
            rows = [r for r in data if r["config"] == config and r["window"] == window]
            days = [int(r["days"]) for r in rows]
            ax.plot(days, [float(r["ptbarrier"]) for r in rows], "-",
                    color=f"C{i}", label=f"ptbarrier {window}", linewidth=2)
            ax.plot(days, [float(r["quantlib"]) for r in rows], "o",
                    color=f"C{i}", label=f"QuantLib {window}", markersize=5, alpha=0.7)

        ax.set_xlabel("Cover event date (days from evaluation)", fontsize=11)
        ax.set_ylabel("Price", fontsize=11)
        ax.set_title(config, fontsize=12)
        ax.legend(fontsize=9)
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    fig.savefig("benchmarks/results/plots/window_sweep.png", dpi=150, bbox_inches="tight")
    print("  Saved: window_sweep.png")
    plt.close(fig)


def plot_reference_errors():
    """Absolute error per reference case, log scale."""
    data = load_csv("reference_table.csv")
    if not data:
        return

    fig, ax = plt.subplots(1, 1, figsize=(10, 5))
    labels = [f"S={float(r['spot']):g} K={float(r['strike']):g} {r['days']}d" for r in data]
    errors = [max(float(r["error_vs_expected"]), 1e-16) for r in data]
    ax.bar(range(len(data)), errors, color="C1")
    ax.axhline(1e-4, color="k", linestyle=":", label="tolerance 1e-4")
    ax.set_yscale("log")
    ax.set_xticks(range(len(data)))
    ax.set_xticklabels(labels, rotation=75, fontsize=8)
    ax.set_ylabel("|ptbarrier - published|", fontsize=11)
    ax.legend(fontsize=9)
    ax.grid(True, which="both", axis="y", alpha=0.3)

    plt.tight_layout()
    fig.savefig("benchmarks/results/plots/reference_errors.png", dpi=150, bbox_inches="tight")
    print("  Saved: reference_errors.png")
    plt.close(fig)


def main():
    print("=" * 80)
    print("  Generating plots for ptbarrier vs QuantLib benchmarks")
    print("=" * 80)

    os.makedirs("benchmarks/results/plots", exist_ok=True)

    print("\n[1/2] Cover-date sweep...")
    plot_window_sweep()

    print("\n[2/2] Reference errors...")
    plot_reference_errors()

    print("\n" + "=" * 80)
    print("  All plots saved to benchmarks/results/plots/")
    print("=" * 80)


if __name__ == "__main__":
    main()
