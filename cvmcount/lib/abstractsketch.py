from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Hashable, Iterable, List
import xxhash # type: ignore

class AbstractSketch(ABC):
    """Base class for all distinct-count sketches."""

    @abstractmethod
    def add(self, value: Hashable) -> None:
        """Add one observed element to the sketch."""
        pass

    @abstractmethod
    def estimate_cardinality(self) -> int:
        """Estimate the number of distinct elements added so far."""
        pass

    def estimate(self) -> int:
        """Shorthand for estimate_cardinality()."""
        return self.estimate_cardinality()

    def extend(self, values: Iterable[Hashable]) -> None:
        """Add every element of an iterable, in order.

        The iterable is consumed lazily, so it may be a generator. Limiting
        how many elements are read is up to the caller.

        Args:
            values: Elements to add
        """
        for value in values:
            self.add(value)

    def add_string(self, s: str) -> None:
        """Add a string to the sketch as its 64-bit hash.

        Storing the hash keeps retained elements at a fixed size no matter
        how long the input strings are.
        """
        self.add(self.hash_str(s.encode()))

    def add_batch(self, strings: List[str]) -> None:
        """Add multiple strings to the sketch.

        Args:
            strings: List of strings to add to the sketch
        """
        for s in strings:
            self.add_string(s)

    def add_int(self, x: int) -> None:
        """Add an integer to the sketch as its 64-bit hash."""
        self.add(self.hash64_int(x))

    # Hash functions - static methods for use by all sketch implementations
    @staticmethod
    def _hash64_int(x: int, seed: int = 0) -> int:
        """64-bit hash function for integers.

        Args:
            x: Integer value to hash
            seed: Hash seed

        Returns:
            64-bit hash value as integer
        """
        # At least 8 bytes; wider integers get as many as they need
        nbytes = max(8, (x.bit_length() + 8) // 8)
        hasher = xxhash.xxh64(seed=seed)
        hasher.update(x.to_bytes(nbytes, byteorder='little', signed=True))
        return hasher.intdigest()

    @staticmethod
    def _hash_str(s: bytes, seed: int = 0) -> int:
        """Hash a byte string to 64 bits using xxhash.

        Args:
            s: Bytes to hash
            seed: Hash seed

        Returns:
            Hash value as integer
        """
        return xxhash.xxh64_intdigest(s, seed=seed)

    # Instance methods that use the sketch's hash seed (if available)
    def hash_str(self, s: bytes) -> int:
        """Instance method to hash a string using the instance's hash seed."""
        return self._hash_str(s, seed=getattr(self, 'hash_seed', 0))

    def hash64_int(self, x: int) -> int:
        """Instance method to hash an integer using the instance's hash seed."""
        return self._hash64_int(x, seed=getattr(self, 'hash_seed', 0))
