import gzip
import sys
from itertools import islice
from typing import Iterable, Iterator, TypeVar
import numpy as np # type: ignore
from cvmcount.lib.coin import SeedLike

T = TypeVar('T')

def uniform_integers(low: int = 0, high: int = 10000, seed: SeedLike = None,
                     chunk_size: int = 4096) -> Iterator[int]:
    """Endless stream of integers drawn uniformly from [low, high).

    Values are drawn from a numpy generator chunk_size at a time and yielded
    one by one as Python ints.
    """
    if high <= low:
        raise ValueError(f"high must be greater than low, got [{low}, {high})")
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    return _draw_integers(np.random.default_rng(seed), low, high, chunk_size)


def _draw_integers(rng: np.random.Generator, low: int, high: int,
                   chunk_size: int) -> Iterator[int]:
    while True:
        yield from rng.integers(low, high, size=chunk_size).tolist()


def read_items(filename: str) -> Iterator[str]:
    """Yield stripped, non-empty lines of a text file.

    Gzipped files (.gz) are decompressed on the fly and "-" reads stdin.
    """
    if filename == "-":
        for line in sys.stdin:
            line = line.strip()
            if line:
                yield line
        return

    opener = gzip.open if filename.endswith(".gz") else open
    with opener(filename, "rt") as file:
        for line in file:
            line = line.strip()
            if line:
                yield line


def take(iterable: Iterable[T], n: int) -> Iterator[T]:
    """Lazily yield at most the first n items of iterable."""
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return islice(iterable, n)
