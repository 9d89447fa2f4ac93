from __future__ import annotations
import pytest # type: ignore
import numpy as np # type: ignore
from cvmcount.lib.abstractsketch import AbstractSketch
from cvmcount.lib.coin import FixedCoin
from cvmcount.lib.cvm import CVM
from cvmcount.lib.ensemble import CVMEnsemble, MIN_MEMBERS_FOR_ESTIMATE
from cvmcount.lib.trials import run_trials, summarize_estimates

class StubSketch(AbstractSketch):
    """Sketch that reports a fixed estimate and records what it was fed."""

    def __init__(self, value: int):
        self.value = value
        self.seen = []

    def add(self, value) -> None:
        self.seen.append(value)

    def estimate_cardinality(self) -> int:
        return self.value

def stub_ensemble(values):
    return CVMEnsemble.from_members([StubSketch(v) for v in values])

@pytest.mark.quick
class TestEnsembleQuick:
    """Quick tests for CVMEnsemble."""

    def test_init(self):
        ensemble = CVMEnsemble(capacity=50, num_members=5, seed=1)
        assert len(ensemble) == 5
        assert ensemble.capacity == 50
        assert all(isinstance(m, CVM) for m in ensemble.members)
        assert all(m.capacity == 50 for m in ensemble.members)
        # Members are independent objects with their own coins
        assert len({id(m) for m in ensemble.members}) == 5
        assert len({id(m.coin) for m in ensemble.members}) == 5

    @pytest.mark.parametrize("num_members", [1, 2, 3, 7])
    def test_member_count(self, num_members):
        ensemble = CVMEnsemble(capacity=10, num_members=num_members)
        assert len(ensemble.members) == num_members

    def test_zero_members_rejected(self):
        with pytest.raises(ValueError):
            CVMEnsemble(capacity=10, num_members=0)
        with pytest.raises(ValueError):
            CVMEnsemble(capacity=10, num_members=-3)
        with pytest.raises(ValueError):
            CVMEnsemble(capacity=10, num_members=2.0)
        with pytest.raises(ValueError):
            CVMEnsemble.from_members([])

    def test_capacity_validated_by_members(self):
        with pytest.raises(ValueError):
            CVMEnsemble(capacity=0, num_members=3)

    def test_trimmed_mean(self):
        """Min and max are dropped before averaging."""
        ensemble = stub_ensemble([10, 20, 30, 40, 1000])
        assert ensemble.estimate_cardinality() == 30

    def test_trimmed_mean_order_independent(self):
        assert stub_ensemble([1000, 40, 10, 30, 20]).estimate() == 30

    def test_trimmed_mean_truncates(self):
        # Remaining [2, 3] averages to 2.5, truncated to 2
        assert stub_ensemble([1, 2, 3, 4]).estimate() == 2
        assert stub_ensemble([0, 7, 8, 9]).estimate() == 7

    def test_three_members_returns_median(self):
        assert stub_ensemble([5, 100, 1]).estimate() == 5

    @pytest.mark.parametrize("num_members", [1, 2])
    def test_too_few_members_to_estimate(self, num_members):
        ensemble = CVMEnsemble(capacity=10, num_members=num_members)
        ensemble.extend(range(5))
        with pytest.raises(ValueError):
            ensemble.estimate_cardinality()
        assert MIN_MEMBERS_FOR_ESTIMATE == 3

    def test_empty_estimate(self):
        assert CVMEnsemble(capacity=10, num_members=3, seed=1).estimate() == 0

    def test_add_feeds_every_member(self):
        stubs = [StubSketch(0) for _ in range(4)]
        ensemble = CVMEnsemble.from_members(stubs)
        ensemble.extend(["a", "b", "a"])
        for stub in stubs:
            assert stub.seen == ["a", "b", "a"]
        assert ensemble.item_count == 3

    def test_exact_regime(self):
        members = [CVM(capacity=100, coin=FixedCoin(True)) for _ in range(3)]
        ensemble = CVMEnsemble.from_members(members)
        ensemble.extend(list(range(10)) * 3)
        assert all(len(m.memory) == 10 for m in members)
        assert ensemble.estimate() == 10

    def test_add_string_shares_hash(self):
        """Every member stores the same hashed value."""
        members = [CVM(capacity=100, coin=FixedCoin(True)) for _ in range(3)]
        ensemble = CVMEnsemble.from_members(members)
        ensemble.add_string("chr1")
        expected = ensemble.hash_str(b"chr1")
        assert all(m.memory == {expected} for m in members)

    def test_hash_seed_applied_once(self):
        """The ensemble hashes with its own seed; members store the digest as is."""
        ensemble = CVMEnsemble(capacity=100, num_members=3, seed=1, hash_seed=99)
        ensemble.add_int(7)
        expected = ensemble.hash64_int(7)
        assert expected != CVM(capacity=10).hash64_int(7)
        assert all(m.memory == {expected} for m in ensemble.members)

    def test_member_estimates(self):
        estimates = stub_ensemble([3, 1, 2]).member_estimates()
        assert list(estimates) == [3, 1, 2]

    def test_seeded_ensembles_repeat(self, random_stream):
        a = CVMEnsemble(capacity=100, num_members=5, seed=8)
        b = CVMEnsemble(capacity=100, num_members=5, seed=8)
        a.extend(random_stream)
        b.extend(random_stream)
        assert list(a.member_estimates()) == list(b.member_estimates())
        assert a.estimate() == b.estimate()

    def test_members_evolve_independently(self, random_stream):
        ensemble = CVMEnsemble(capacity=100, num_members=5, seed=1)
        ensemble.extend(random_stream)
        memories = [frozenset(m.memory) for m in ensemble.members]
        assert len(set(memories)) > 1
        for member in ensemble.members:
            assert len(member.memory) < member.capacity

    def test_get_stats(self):
        stats = stub_ensemble([10, 20, 30]).get_stats()
        assert stats['members'] == 3
        assert stats['min'] == 10.0
        assert stats['max'] == 30.0
        assert stats['mean'] == pytest.approx(20.0)
        assert stats['std'] == pytest.approx(np.std([10, 20, 30]))

    def test_debug_output(self, capsys):
        CVMEnsemble(capacity=10, num_members=3, debug=True)
        assert "Created ensemble with 3 members" in capsys.readouterr().out


@pytest.mark.full
class TestEnsembleFull:
    """Statistical behaviour of the ensemble."""

    def test_variance_reduction(self):
        """A 7-member ensemble spreads less than a single estimator."""
        single, exact = run_trials(capacity=1000, sample_size=30000, num_trials=12, seed=77)
        ensemble, _ = run_trials(capacity=1000, sample_size=30000, num_trials=12,
                                 instances=7, seed=77)
        single_stats = summarize_estimates(single, true_count=float(exact.mean()))
        ensemble_stats = summarize_estimates(ensemble, true_count=float(exact.mean()))
        print(f"single cv={single_stats['cv']:.4f} ensemble cv={ensemble_stats['cv']:.4f}")
        assert ensemble_stats['cv'] < single_stats['cv']
        assert ensemble_stats['within_30pct'] == 1.0
