from __future__ import annotations
from typing import Dict, Hashable, List, Sequence
import numpy as np # type: ignore
from cvmcount.lib.abstractsketch import AbstractSketch
from cvmcount.lib.coin import RandomCoin, SeedLike, as_seed_sequence
from cvmcount.lib.cvm import CVM

# One minimum and one maximum are trimmed, so at least one value must remain
MIN_MEMBERS_FOR_ESTIMATE = 3

class CVMEnsemble(AbstractSketch):
    """Several independent CVM estimators fed the same stream.

    Members make their own random retention decisions, so their estimates
    differ. The combined estimate drops the smallest and largest member
    estimate and averages the rest, which damps the variance of a single
    estimator.
    """

    def __init__(self,
                 capacity: int = 1000,
                 num_members: int = 7,
                 seed: SeedLike = None,
                 hash_seed: int = 0,
                 debug: bool = False):
        """Initialize an ensemble of CVM estimators.

        Args:
            capacity: Capacity of every member
            num_members: Number of members (>= 1; >= 3 to estimate)
            seed: Seed from which independent member seeds are spawned
            hash_seed: Seed used by add_string/add_int hashing
            debug: Whether to print debug information

        Raises:
            ValueError: If num_members is not a positive integer
        """
        _check_member_count(num_members)
        children = as_seed_sequence(seed).spawn(num_members)
        members = [CVM(capacity, coin=RandomCoin(child), debug=debug)
                   for child in children]
        self._init_members(members, hash_seed, debug)

    def _init_members(self, members: List[AbstractSketch], hash_seed: int, debug: bool) -> None:
        self.members = members
        self.hash_seed = hash_seed
        self.debug = debug
        self.item_count = 0
        if self.debug:
            print(f"Created ensemble with {len(self.members)} members")

    @classmethod
    def from_members(cls, members: Sequence[AbstractSketch],
                     hash_seed: int = 0, debug: bool = False) -> 'CVMEnsemble':
        """Build an ensemble around already constructed sketches.

        Args:
            members: Sketches to combine
            hash_seed: Seed used by add_string/add_int hashing
            debug: Whether to print debug information

        Raises:
            ValueError: If members is empty
        """
        _check_member_count(len(members))
        ensemble = cls.__new__(cls)
        ensemble._init_members(list(members), hash_seed, debug)
        return ensemble

    def __len__(self) -> int:
        return len(self.members)

    @property
    def capacity(self) -> int:
        return getattr(self.members[0], 'capacity', 0)

    def add(self, value: Hashable) -> None:
        """Add one element to every member."""
        self.item_count += 1
        for member in self.members:
            member.add(value)

    def member_estimates(self) -> np.ndarray:
        """Return each member's current estimate, in member order."""
        return np.array([m.estimate_cardinality() for m in self.members], dtype=object)

    def estimate_cardinality(self) -> int:
        """Estimate distinct elements as the min/max trimmed mean of the members.

        Returns:
            Integer (floor) mean of the member estimates after dropping one
            minimum and one maximum

        Raises:
            ValueError: If the ensemble has fewer than 3 members
        """
        if len(self.members) < MIN_MEMBERS_FOR_ESTIMATE:
            raise ValueError(
                f"Trimmed mean needs at least {MIN_MEMBERS_FOR_ESTIMATE} members, "
                f"ensemble has {len(self.members)}")

        estimates = sorted(int(e) for e in self.member_estimates())
        trimmed = estimates[1:-1]
        return sum(trimmed) // len(trimmed)

    def get_stats(self) -> Dict[str, float]:
        """Spread of the member estimates."""
        estimates = self.member_estimates().astype(float)
        return {
            'members': len(self.members),
            'min': float(np.min(estimates)),
            'max': float(np.max(estimates)),
            'mean': float(np.mean(estimates)),
            'std': float(np.std(estimates)),
        }


def _check_member_count(num_members: int) -> None:
    if isinstance(num_members, bool) or not isinstance(num_members, int):
        raise ValueError(f"num_members must be an integer, got {type(num_members).__name__}")
    if num_members < 1:
        raise ValueError(f"num_members must be at least 1, got {num_members}")
