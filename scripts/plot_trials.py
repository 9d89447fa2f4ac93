#!/usr/bin/env python3
"""
Plot the distribution of CVM estimates for a single estimator and an ensemble
over repeated random-stream trials.

Usage examples:
  - python3 scripts/plot_trials.py
  - python3 scripts/plot_trials.py --trials 200 --instances 9 --output results/cvm_trials.png
"""

import argparse
import os

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from cvmcount.lib.trials import run_trials, summarize_estimates


def parse_args():
    parser = argparse.ArgumentParser(description="Histogram of CVM estimates, single vs ensemble")
    parser.add_argument("--capacity", type=int, default=1000)
    parser.add_argument("--sample-size", type=int, default=30000, dest="sample_size")
    parser.add_argument("--high", type=int, default=10000)
    parser.add_argument("--trials", type=int, default=50)
    parser.add_argument("--instances", type=int, default=7)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--bins", type=int, default=30)
    parser.add_argument("--output", "-o", default="cvm_trials.png")
    return parser.parse_args()


def main():
    args = parse_args()

    single, exact = run_trials(args.capacity, args.sample_size, args.trials,
                               high=args.high, seed=args.seed)
    ensemble, _ = run_trials(args.capacity, args.sample_size, args.trials,
                             high=args.high, instances=args.instances, seed=args.seed)
    truth = float(np.mean(exact))

    for label, estimates in (("single", single), (f"ensemble x{args.instances}", ensemble)):
        summary = summarize_estimates(estimates, true_count=truth)
        print(f"{label}: mean={summary['mean']:.0f} cv={summary['cv']:.4f} "
              f"mean_rel_error={summary['mean_rel_error']:.4f}")

    plt.figure(figsize=(10, 6))
    bins = np.histogram_bin_edges(np.concatenate([single, ensemble]), bins=args.bins)
    plt.hist(single, bins=bins, alpha=0.6, label="single estimator")
    plt.hist(ensemble, bins=bins, alpha=0.6, label=f"ensemble of {args.instances}")
    plt.axvline(truth, color="black", linestyle="--", linewidth=1.5, label="exact distinct count")
    plt.title(f"CVM estimates over {args.trials} trials (capacity {args.capacity})")
    plt.xlabel("Estimated distinct count")
    plt.ylabel("Trials")
    plt.grid(True, linestyle="--", alpha=0.7)
    plt.legend(loc="upper left")
    plt.tight_layout()

    out_dir = os.path.dirname(args.output)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    plt.savefig(args.output, dpi=150)
    print(f"Plot saved to {args.output}")


if __name__ == "__main__":
    main()
