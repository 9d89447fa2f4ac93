from __future__ import annotations
import warnings
from typing import Hashable, Optional, Set
from cvmcount.lib.abstractsketch import AbstractSketch
from cvmcount.lib.coin import Coin, SeedLike, make_coin

class CVM(AbstractSketch):
    """Distinct-elements estimator using the CVM algorithm.

    Keeps at most `capacity` sampled elements. Every time the sample fills
    up, each element survives a fair coin flip and the round counter goes
    up by one, so after r rounds a newly seen element is kept with
    probability 2^-r. The estimate is the sample size scaled back up by 2^r.

    References:
        Chakraborty, Vinodchandran & Meel (2023). Distinct Elements in
        Streams: An Algorithm for the (Text) Book. arXiv:2301.10191
    """

    # Estimates are scaled by at most 2^MAX_ROUNDS
    MAX_ROUNDS = 32

    def __init__(self,
                 capacity: int = 1000,
                 seed: SeedLike = None,
                 coin: Optional[Coin] = None,
                 hash_seed: int = 0,
                 debug: bool = False):
        """Initialize a CVM estimator.

        Args:
            capacity: Number of elements held before a sweep is triggered (>= 1)
            seed: Seed for the default RandomCoin. Ignored when coin is given
            coin: Source of coin flips. Defaults to RandomCoin(seed)
            hash_seed: Seed used by add_string/add_int hashing
            debug: Whether to print debug information

        Raises:
            ValueError: If capacity is not a positive integer
        """
        super().__init__()
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValueError(f"capacity must be an integer, got {type(capacity).__name__}")
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")

        self.capacity = capacity
        self.coin = make_coin(seed, coin)
        self.hash_seed = hash_seed
        self.debug = debug

        self.memory: Set[Hashable] = set()
        self.rounds = 0
        self.item_count = 0

    def __len__(self) -> int:
        return len(self.memory)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(capacity={self.capacity}, "
                f"retained={len(self.memory)}, rounds={self.rounds})")

    def add(self, value: Hashable) -> None:
        """Process one observed element.

        The element is kept if `rounds` coin flips all come up heads
        (always, before the first sweep). Otherwise a previously kept copy
        is dropped. A full memory triggers a sweep.

        Args:
            value: Hashable element from the stream
        """
        self.item_count += 1

        if self.coin.all_heads(self.rounds):
            self.memory.add(value)
        else:
            self.memory.discard(value)

        if len(self.memory) >= self.capacity:
            self.sweep()

    def sweep(self) -> None:
        """Keep each retained element with probability 1/2 and start a new round."""
        before = len(self.memory)
        keep = self.coin.flips(before)
        self.memory = {value for value, kept in zip(self.memory, keep) if kept}
        self.rounds += 1

        if self.debug:
            print(f"Sweep {self.rounds}: kept {len(self.memory)} of {before} elements "
                  f"after {self.item_count} items")

        if len(self.memory) >= self.capacity:
            warnings.warn(
                f"Sweep {self.rounds} kept all {len(self.memory)} elements; "
                f"memory is still at capacity {self.capacity}",
                RuntimeWarning
            )

    def estimate_cardinality(self) -> int:
        """Estimate the number of distinct elements seen.

        Returns:
            len(memory) * 2^min(rounds, MAX_ROUNDS), 0 for an empty sketch
        """
        return len(self.memory) * (1 << min(self.rounds, self.MAX_ROUNDS))

    @property
    def keep_probability(self) -> float:
        """Probability that a newly observed element is retained."""
        return 0.5 ** self.rounds
