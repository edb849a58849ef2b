"""
Tests for the lattice searches.
"""

import math

import pytest

from qmcsim.discrepancy import (
    DEGENERATE,
    DiscShift1Lattice,
    Palpha,
    Searcher,
    SearcherCBC,
    SearcherKorobov,
)
from qmcsim.hups import KorobovLattice, Rank1Lattice
from qmcsim.rng import MRG32k3a


def korobov_values(n, s, candidates):
    engine = DiscShift1Lattice()
    return {a: engine.compute(KorobovLattice(n, a, s)) for a in candidates}


class SkipsTwo(DiscShift1Lattice):
    """Reports the lattice with second component 2 as degenerate."""

    def compute(self, points=None, n=None, s=None, gamma=None):
        if points.generating_vector[1] == 2:
            return DEGENERATE
        return super().compute(points, n, s, gamma)


class TestSearcherKorobov:
    """Exhaustive and random searches over Korobov lattices."""

    def test_exhaust_finds_minimum(self) -> None:
        """The exhaustive search returns the smallest value over a in [2, n)."""
        n, s = 31, 3
        values = korobov_values(n, s, range(2, n))
        searcher = SearcherKorobov(DiscShift1Lattice(), n)
        best = searcher.exhaust(s)
        assert best == min(values.values())
        assert values[searcher.best_a] == best
        assert searcher.best_val == best
        assert searcher.best_as == list(KorobovLattice(n, searcher.best_a, s).generating_vector)

    def test_exhaust_prime_power_of_two(self) -> None:
        """For n = 2^k only odd generators are tried."""
        n, s = 32, 2
        values = korobov_values(n, s, range(3, n, 2))
        searcher = SearcherKorobov(DiscShift1Lattice(), n)
        assert searcher.exhaust_prime(s) == min(values.values())
        assert searcher.best_a % 2 == 1

    def test_exhaust_prime_composite(self) -> None:
        """For other n only generators relatively prime to n are tried."""
        n, s = 30, 2
        searcher = SearcherKorobov(DiscShift1Lattice(), n)
        searcher.exhaust_prime(s)
        assert math.gcd(n, searcher.best_a) == 1

    def test_prime_n_skips_filter(self) -> None:
        """With prime_n the prime search is the plain search."""
        searcher = SearcherKorobov(DiscShift1Lattice(), 31, prime_n=True)
        assert searcher.exhaust_prime(2) == searcher.exhaust(2)

    def test_random_with_many_candidates_is_exhaustive(self) -> None:
        """Asking for at least n random candidates runs the exhaustive search."""
        searcher = SearcherKorobov(DiscShift1Lattice(), 31)
        assert searcher.random(2, 31) == SearcherKorobov(DiscShift1Lattice(), 31).exhaust(2)

    def test_random_reproducible(self) -> None:
        """Two searches drawing from identical streams agree."""
        stream = MRG32k3a()
        first = SearcherKorobov(DiscShift1Lattice(), 101, stream=stream.clone())
        second = SearcherKorobov(DiscShift1Lattice(), 101, stream=stream.clone())
        assert first.random(3, 10) == second.random(3, 10)
        assert first.best_a == second.best_a
        assert 2 <= first.best_a < 101
        assert first.best_val == DiscShift1Lattice().compute(KorobovLattice(101, first.best_a, 3))

    def test_random_prime_power_of_two(self) -> None:
        """Random generators are made odd when n is a power of 2."""
        searcher = SearcherKorobov(DiscShift1Lattice(), 64)
        searcher.random_prime(2, 20)
        assert searcher.best_a % 2 == 1

    def test_degenerate_candidates_are_skipped(self) -> None:
        """A candidate whose discrepancy lost all precision never wins."""
        searcher = SearcherKorobov(SkipsTwo(), 13)
        searcher.exhaust(2)
        assert searcher.best_a != 2
        assert searcher.best_val >= 0.0

    def test_too_few_points(self) -> None:
        """At least three points are needed to have a generator to search."""
        with pytest.raises(ValueError):
            SearcherKorobov(DiscShift1Lattice(), 2)


class TestSearcher:
    """Searches over general generating vectors."""

    def test_exhaust_two_dimensions(self) -> None:
        """In two dimensions the search covers every second component in [1, n)."""
        n = 17
        engine = DiscShift1Lattice()
        values = {a: engine.compute(Rank1Lattice(n, [1, a])) for a in range(1, n)}
        searcher = Searcher(engine, n)
        assert searcher.exhaust(2) == min(values.values())
        assert values[searcher.best_as[1]] == searcher.best_val
        assert searcher.best_as[0] == 1

    def test_general_no_worse_than_korobov(self) -> None:
        """Korobov vectors are a subset of the general vectors."""
        n, s = 11, 3
        general = Searcher(DiscShift1Lattice(), n).exhaust(s)
        korobov = SearcherKorobov(DiscShift1Lattice(), n).exhaust(s)
        assert general <= korobov

    def test_random_vectors(self) -> None:
        """Random vectors have s components, the first one equal to 1."""
        searcher = Searcher(DiscShift1Lattice(), 50)
        searcher.random_prime(4, 15)
        assert len(searcher.best_as) == 4
        assert searcher.best_as[0] == 1
        assert all(math.gcd(50, a) == 1 for a in searcher.best_as)

    def test_gamma_is_passed_to_engine(self) -> None:
        """Weights given to the searcher are used for every candidate."""
        gamma = [1.0, 0.5, 0.25]
        searcher = SearcherKorobov(DiscShift1Lattice(), 31, gamma=gamma)
        best = searcher.exhaust(3)
        lattice = KorobovLattice(31, searcher.best_a, 3)
        assert best == DiscShift1Lattice(gamma=gamma).compute(lattice)

    def test_palpha_beta(self) -> None:
        """P-alpha takes s + 1 weights through the same argument."""
        searcher = SearcherKorobov(Palpha(alpha=2), 31, gamma=[1.0, 1.0, 1.0])
        best = searcher.exhaust(2)
        assert best == Palpha(alpha=2).compute(KorobovLattice(31, searcher.best_a, 2))


class TestSearcherCBC:
    """Component-by-component searches."""

    def test_two_dimensions_match_full_search(self) -> None:
        """With one free component CBC and the full search coincide."""
        n = 23
        cbc = SearcherCBC(DiscShift1Lattice(), n)
        full = Searcher(DiscShift1Lattice(), n)
        assert cbc.exhaust(2) == full.exhaust(2)
        assert cbc.best_as == full.best_as

    def test_components_are_kept(self) -> None:
        """Going to a higher dimension keeps the components already chosen."""
        n = 29
        cbc = SearcherCBC(DiscShift1Lattice(), n)
        cbc.exhaust(2)
        prefix = list(cbc.best_as)
        best = cbc.exhaust(4)
        assert cbc.best_as[:2] == prefix
        assert len(cbc.best_as) == len(cbc.best_vals) == 4
        assert cbc.best_vals[-1] == best == cbc.best_val
        assert cbc.best_vals[0] == DiscShift1Lattice().compute(Rank1Lattice(n, [1]))

    def test_each_value_matches_its_prefix(self) -> None:
        """best_vals[j] is the discrepancy of the first j + 1 components."""
        n = 19
        engine = DiscShift1Lattice()
        cbc = SearcherCBC(engine, n)
        cbc.exhaust(3)
        for j in range(3):
            assert cbc.best_vals[j] == engine.compute(Rank1Lattice(n, cbc.best_as[: j + 1]))

    def test_random_prime(self) -> None:
        """Random CBC components are relatively prime to n when asked."""
        cbc = SearcherCBC(DiscShift1Lattice(), 40, stream=MRG32k3a())
        cbc.random_prime(3, 8)
        assert len(cbc.best_as) == 3
        assert all(math.gcd(40, a) == 1 for a in cbc.best_as)
