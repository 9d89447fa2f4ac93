"""
Driver and repeated-trial statistics for CVM estimators.

run_test feeds a bounded prefix of a stream to a single estimator or an
ensemble. run_trials repeats that over freshly drawn uniform streams so the
spread of the estimates can be summarized.
"""
from __future__ import annotations
from typing import Dict, Hashable, Iterable, Optional, Sequence, Tuple
import numpy as np # type: ignore
from scipy import stats # type: ignore
from cvmcount.lib.abstractsketch import AbstractSketch
from cvmcount.lib.coin import SeedLike, as_seed_sequence
from cvmcount.lib.cvm import CVM
from cvmcount.lib.ensemble import CVMEnsemble
from cvmcount.lib.streams import take

def make_sketch(capacity: int = 1000,
                instances: Optional[int] = None,
                seed: SeedLike = None,
                debug: bool = False) -> AbstractSketch:
    """Create a lone CVM, or a CVMEnsemble when instances is given."""
    if instances is None:
        return CVM(capacity, seed=seed, debug=debug)
    return CVMEnsemble(capacity, num_members=instances, seed=seed, debug=debug)


def run_test(capacity: int,
             data: Iterable[Hashable],
             sample_size: int,
             instances: Optional[int] = None,
             seed: SeedLike = None,
             debug: bool = False) -> int:
    """Estimate the distinct count of the first sample_size items of data.

    Args:
        capacity: Capacity of the estimator (or of each ensemble member)
        data: Stream of elements, possibly endless
        sample_size: Maximum number of items read from data
        instances: Number of ensemble members, or None for a single estimator
        seed: Seed for the estimator's coin flips
        debug: Whether to print debug information

    Returns:
        The estimated number of distinct items
    """
    sketch = make_sketch(capacity, instances, seed, debug)
    sketch.extend(take(data, sample_size))
    return sketch.estimate_cardinality()


def run_trials(capacity: int = 1000,
               sample_size: int = 30000,
               num_trials: int = 10,
               low: int = 0,
               high: int = 10000,
               instances: Optional[int] = None,
               seed: SeedLike = None,
               verbose: bool = False,
               debug: bool = False) -> Tuple[np.ndarray, np.ndarray]:
    """Repeat run_test over independently drawn uniform integer streams.

    Every trial gets its own stream seed and estimator seed, both spawned
    from seed, so a seeded call is reproducible.

    Returns:
        Tuple of (estimates, exact distinct counts of each trial's sample)
    """
    if num_trials < 1:
        raise ValueError(f"num_trials must be at least 1, got {num_trials}")

    estimates = np.zeros(num_trials, dtype=np.int64)
    exact_counts = np.zeros(num_trials, dtype=np.int64)
    for i, trial_seed in enumerate(as_seed_sequence(seed).spawn(num_trials)):
        stream_seed, sketch_seed = trial_seed.spawn(2)
        sample = np.random.default_rng(stream_seed).integers(low, high, size=sample_size)
        exact_counts[i] = np.unique(sample).size
        estimates[i] = run_test(capacity, sample.tolist(), sample_size,
                                instances=instances, seed=sketch_seed, debug=debug)
        if verbose:
            print(f"Trial {i + 1}/{num_trials}: estimate={estimates[i]} exact={exact_counts[i]}")

    return estimates, exact_counts


def summarize_estimates(estimates: Sequence[float],
                        true_count: Optional[float] = None) -> Dict[str, float]:
    """Summary statistics for a set of estimates.

    Args:
        estimates: Estimates from repeated trials
        true_count: Known distinct count, enables the error statistics

    Returns:
        Dictionary with mean, std, median, min, max and cv (coefficient of
        variation). With true_count also mean_rel_error and within_30pct.
    """
    values = np.asarray(estimates, dtype=float)
    if values.size == 0:
        raise ValueError("Cannot summarize an empty set of estimates")

    summary = {
        'trials': int(values.size),
        'mean': float(np.mean(values)),
        'std': float(np.std(values)),
        'median': float(np.median(values)),
        'min': float(np.min(values)),
        'max': float(np.max(values)),
        'cv': float(stats.variation(values)) if np.mean(values) != 0 else 0.0,
    }

    if true_count is not None and true_count > 0:
        rel_errors = np.abs(values - true_count) / true_count
        summary['true_count'] = float(true_count)
        summary['mean_rel_error'] = float(np.mean(rel_errors))
        summary['within_30pct'] = float(np.mean(rel_errors <= 0.3))

    return summary
