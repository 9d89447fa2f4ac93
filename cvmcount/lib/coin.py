from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Union
import numpy as np # type: ignore

SeedLike = Union[None, int, np.random.SeedSequence]

class Coin(ABC):
    """Source of fair coin flips used for retention decisions.

    Heads (True) means "keep". Sketches own their coin, so a seeded coin
    makes a whole run reproducible.
    """

    @abstractmethod
    def flip(self) -> bool:
        """Flip the coin once."""
        pass

    @abstractmethod
    def flips(self, n: int) -> np.ndarray:
        """Flip the coin n times.

        Returns:
            Boolean array of length n
        """
        pass

    def all_heads(self, n: int) -> bool:
        """Flip up to n times and report whether every flip was heads.

        Stops at the first tail. With n <= 0 the answer is vacuously True
        and no flips are consumed.
        """
        for _ in range(n):
            if not self.flip():
                return False
        return True


class RandomCoin(Coin):
    def __init__(self, seed: SeedLike = None, block_size: int = 4096):
        """Initialize a coin backed by a numpy random generator.

        Args:
            seed: Integer seed, SeedSequence, or None for OS entropy
            block_size: Number of flips drawn from the generator at a time
        """
        if block_size < 1:
            raise ValueError("block_size must be at least 1")
        self.rng = np.random.default_rng(seed)
        self.block_size = block_size
        self._block: List[bool] = []
        self._pos = 0

    def _refill(self) -> None:
        self._block = self.rng.integers(0, 2, size=self.block_size, dtype=np.uint8).astype(bool).tolist()
        self._pos = 0

    def flip(self) -> bool:
        if self._pos >= len(self._block):
            self._refill()
        outcome = self._block[self._pos]
        self._pos += 1
        return outcome

    def flips(self, n: int) -> np.ndarray:
        if n <= 0:
            return np.zeros(0, dtype=bool)
        return self.rng.integers(0, 2, size=n, dtype=np.uint8).astype(bool)


class FixedCoin(Coin):
    """Coin that always lands the same way. Useful as a test stub."""

    def __init__(self, outcome: bool = True):
        self.outcome = bool(outcome)

    def flip(self) -> bool:
        return self.outcome

    def flips(self, n: int) -> np.ndarray:
        return np.full(max(n, 0), self.outcome, dtype=bool)


class ScriptedCoin(Coin):
    """Coin that replays a fixed list of outcomes, then refuses to flip."""

    def __init__(self, outcomes: Iterable[bool]):
        self.outcomes = [bool(o) for o in outcomes]
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self.outcomes) - self._pos

    def flip(self) -> bool:
        if self._pos >= len(self.outcomes):
            raise RuntimeError(f"ScriptedCoin exhausted after {len(self.outcomes)} flips")
        outcome = self.outcomes[self._pos]
        self._pos += 1
        return outcome

    def flips(self, n: int) -> np.ndarray:
        if n > self.remaining:
            raise RuntimeError(
                f"ScriptedCoin has {self.remaining} flips left, {n} requested")
        return np.array([self.flip() for _ in range(max(n, 0))], dtype=bool)


def make_coin(seed: SeedLike = None, coin: Optional[Coin] = None) -> Coin:
    """Return the given coin, or a RandomCoin seeded with seed."""
    if coin is not None:
        return coin
    return RandomCoin(seed)


def as_seed_sequence(seed: SeedLike = None) -> np.random.SeedSequence:
    """Wrap an integer seed (or None) in a SeedSequence; pass SeedSequences through."""
    if isinstance(seed, np.random.SeedSequence):
        return seed
    return np.random.SeedSequence(seed)
