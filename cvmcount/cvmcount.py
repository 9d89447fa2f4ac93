#!/usr/bin/env python
from __future__ import annotations
import sys
import os
import argparse
from contextlib import closing
from typing import Iterator, List, Optional
from cvmcount.lib.abstractsketch import AbstractSketch
from cvmcount.lib.coin import as_seed_sequence
from cvmcount.lib.ensemble import MIN_MEMBERS_FOR_ESTIMATE
from cvmcount.lib.streams import read_items, take, uniform_integers
from cvmcount.lib.trials import make_sketch, run_test, run_trials, summarize_estimates

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    arg_parser = argparse.ArgumentParser(
        description="""Estimate the number of distinct items in a stream with the CVM algorithm.

        Without input files a stream of uniformly random integers is counted.
        With input files every non-empty line is one item (gzipped files and
        "-" for stdin are accepted).
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    arg_parser.add_argument('files', nargs='*',
                       help='Text files whose lines are counted (default: random integer stream)')
    arg_parser.add_argument("--capacity", "-c", type=int, default=1000,
                       help="Number of elements held in memory by each estimator")
    arg_parser.add_argument("--sample-size", "-n", type=int, default=30000, dest="sample_size",
                       help="Maximum number of items read from the stream")
    arg_parser.add_argument("--instances", "-i", type=int, default=None,
                       help=f"Run an ensemble of this many estimators (at least {MIN_MEMBERS_FOR_ESTIMATE})")
    arg_parser.add_argument("--low", type=int, default=0, help="Smallest random integer (inclusive)")
    arg_parser.add_argument("--high", type=int, default=10000, help="Largest random integer (exclusive)")
    arg_parser.add_argument("--seed", type=int, default=None, help="Random seed for the stream and coin flips")
    arg_parser.add_argument("--trials", "-t", type=int, default=1,
                       help="Repeat the random-stream estimate this many times and summarize")
    arg_parser.add_argument("--strings", action="store_true",
                       help="Keep lines as strings instead of hashing them to 64-bit integers")
    arg_parser.add_argument("--verbose", action="store_true", help="Print verbose output")
    arg_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    args = arg_parser.parse_args(argv)

    if args.capacity < 1:
        arg_parser.error("--capacity must be at least 1")
    if args.sample_size < 0:
        arg_parser.error("--sample-size must be non-negative")
    if args.instances is not None and args.instances < MIN_MEMBERS_FOR_ESTIMATE:
        arg_parser.error(f"--instances must be at least {MIN_MEMBERS_FOR_ESTIMATE}")
    if args.seed is not None and args.seed < 0:
        arg_parser.error("--seed must be non-negative")
    if args.high <= args.low:
        arg_parser.error("--high must be greater than --low")
    if args.trials < 1:
        arg_parser.error("--trials must be at least 1")
    if args.trials > 1 and args.files:
        arg_parser.error("--trials only applies to the random integer stream")

    return args

def iter_lines(files: List[str]) -> Iterator[str]:
    """Yield the lines of every file in turn."""
    for filepath in files:
        yield from read_items(filepath)

def count_files(files: List[str], sketch: AbstractSketch, sample_size: int,
                as_strings: bool = False) -> int:
    """Feed up to sample_size lines from files to sketch and return its estimate."""
    with closing(iter_lines(files)) as lines:
        items = take(lines, sample_size)
        if as_strings:
            sketch.extend(items)
        else:
            for item in items:
                sketch.add_string(item)
    return sketch.estimate_cardinality()

def print_summary(summary: dict) -> None:
    """Print trial statistics as aligned name/value rows."""
    for key, value in summary.items():
        if isinstance(value, float) and not value.is_integer():
            print(f"{key:>15}: {value:.4f}")
        else:
            print(f"{key:>15}: {value:.0f}")

def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for cvmcount."""
    args = parse_args(argv)

    if args.verbose:
        kind = f"ensemble of {args.instances}" if args.instances else "single estimator"
        print(f"Using {kind} with capacity {args.capacity}, sample size {args.sample_size}")

    if args.files:
        for filepath in args.files:
            if filepath != "-" and not os.path.exists(filepath):
                print(f"Error: File {filepath} does not exist", file=sys.stderr)
                sys.exit(2)
        sketch = make_sketch(args.capacity, args.instances, args.seed, args.debug)
        estimate = count_files(args.files, sketch, args.sample_size, as_strings=args.strings)
        print(f"Result: {estimate}")
        return

    if args.trials > 1:
        estimates, exact_counts = run_trials(
            capacity=args.capacity,
            sample_size=args.sample_size,
            num_trials=args.trials,
            low=args.low,
            high=args.high,
            instances=args.instances,
            seed=args.seed,
            verbose=args.verbose,
            debug=args.debug
        )
        print_summary(summarize_estimates(estimates, true_count=float(exact_counts.mean())))
        return

    stream_seed, sketch_seed = as_seed_sequence(args.seed).spawn(2)
    if args.verbose:
        print(f"Counting random integers in [{args.low}, {args.high})")
    estimate = run_test(
        args.capacity,
        uniform_integers(args.low, args.high, seed=stream_seed),
        args.sample_size,
        instances=args.instances,
        seed=sketch_seed,
        debug=args.debug
    )
    print(f"Result: {estimate}")

if __name__ == "__main__":
    main()
