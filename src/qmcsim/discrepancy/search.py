"""
Searches for rank-1 lattices with a small discrepancy.

A searcher scores candidate lattices of n points with a discrepancy engine
and keeps the best generating vector. The first component is always 1.

- `Searcher` tries full generating vectors (1, a_1, ..., a_{s-1}).
- `SearcherKorobov` tries Korobov vectors (1, a, a^2, ...) mod n.
- `SearcherCBC` builds the vector one component at a time, keeping the
  components already chosen.

Each search is either exhaustive or tries k random candidates drawn from a
`RandomStream`. The `_prime` variants only try multipliers relatively prime
to n (odd multipliers when n is a power of 2).
"""

from __future__ import annotations

import itertools
import logging
import math
from typing import Sequence

from qmcsim.discrepancy.base import DEGENERATE, Discrepancy
from qmcsim.hups.pointset import KorobovLattice, PointSet, Rank1Lattice
from qmcsim.rng.base import RandomStream
from qmcsim.rng.mrg32k3a import MRG32k3a

logger = logging.getLogger(__name__)


class Searcher:
    """
    Search over general rank-1 lattices of `n` points.

    `gamma` is passed to every `compute()` call, so it must hold at least as
    many weights as the largest dimension searched. When `prime_n` is true
    every multiplier is taken to be relatively prime to n, and the `_prime`
    searches do not filter.
    """

    def __init__(
        self,
        disc: Discrepancy,
        n: int,
        gamma: Sequence[float] | None = None,
        prime_n: bool = False,
        stream: RandomStream | None = None,
    ) -> None:
        if n < 3:
            raise ValueError(f"n must be at least 3, got {n}")
        self.disc = disc
        self.n = n
        self.gamma = None if gamma is None else list(gamma)
        self.prime_n = prime_n
        self.power_of_two = n & (n - 1) == 0
        self.stream = stream if stream is not None else MRG32k3a("lattice search")
        self.best_val = math.inf
        self.best_as: list[int] = []

    # ------------------------------------------------------------- scoring

    def _score(self, lattice: PointSet) -> float:
        value = self.disc.compute(lattice, gamma=self.gamma)
        if value == DEGENERATE:
            logger.debug("%s: skipping %s, discrepancy lost all precision", type(self).__name__, lattice)
            return math.inf
        return value

    def _coprime(self, a: int) -> bool:
        if self.power_of_two:
            return a & 1 == 1
        return math.gcd(self.n, a) == 1

    def _multipliers(self, low: int, rel_prime: bool) -> list[int]:
        return [a for a in range(low, self.n) if not rel_prime or self._coprime(a)]

    def _draw(self, low: int, rel_prime: bool) -> int:
        if self.power_of_two:
            a = self.stream.next_int(low, self.n - 1)
            return a | 1 if rel_prime else a
        while True:
            a = self.stream.next_int(low, self.n - 1)
            if not rel_prime or math.gcd(self.n, a) == 1:
                return a

    def _finish(self) -> float:
        logger.debug("%s: best vector %s, discrepancy %g", type(self).__name__, self.best_as, self.best_val)
        return self.best_val

    # ------------------------------------------------------------ searches

    def _exhaust(self, s: int, rel_prime: bool) -> float:
        self.best_val = math.inf
        self.best_as = [1] * s
        candidates = self._multipliers(1, rel_prime)
        for tail in itertools.product(candidates, repeat=s - 1):
            err = self._score(Rank1Lattice(self.n, (1,) + tail))
            if err < self.best_val:
                self.best_val = err
                self.best_as = [1, *tail]
        return self._finish()

    def _random(self, s: int, k: int, rel_prime: bool) -> float:
        self.best_val = math.inf
        self.best_as = [1] * s
        for _ in range(k):
            vector = [1] + [self._draw(1, rel_prime) for _ in range(s - 1)]
            err = self._score(Rank1Lattice(self.n, vector))
            if err < self.best_val:
                self.best_val = err
                self.best_as = vector
        return self._finish()

    def exhaust(self, s: int) -> float:
        """Try every vector with components in [1, n); return the best value."""
        return self._exhaust(s, False)

    def exhaust_prime(self, s: int) -> float:
        """Like `exhaust`, with components relatively prime to n."""
        return self._exhaust(s, not self.prime_n)

    def random(self, s: int, k: int) -> float:
        """Try `k` random vectors; return the best value."""
        return self._random(s, k, False)

    def random_prime(self, s: int, k: int) -> float:
        """Like `random`, with components relatively prime to n."""
        return self._random(s, k, not self.prime_n)


class SearcherKorobov(Searcher):
    """Search over Korobov lattices (1, a, a^2, ..., a^(s-1)) mod n, for a in [2, n)."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.best_a = -1

    def _keep(self, a: int, err: float) -> None:
        if err < self.best_val:
            self.best_val = err
            self.best_a = a

    def _finish_korobov(self, s: int) -> float:
        if self.best_a > 0:
            self.best_as = list(KorobovLattice(self.n, self.best_a, s).generating_vector)
        return self._finish()

    def _exhaust(self, s: int, rel_prime: bool) -> float:
        self.best_val = math.inf
        self.best_a = -1
        for a in self._multipliers(2, rel_prime):
            self._keep(a, self._score(KorobovLattice(self.n, a, s)))
        return self._finish_korobov(s)

    def _random(self, s: int, k: int, rel_prime: bool) -> float:
        if k >= self.n:
            return self._exhaust(s, rel_prime)
        self.best_val = math.inf
        self.best_a = -1
        for _ in range(k):
            a = self._draw(2, rel_prime)
            self._keep(a, self._score(KorobovLattice(self.n, a, s)))
        return self._finish_korobov(s)


class SearcherCBC(Searcher):
    """
    Component-by-component search.

    Component j is chosen with components 0..j-1 fixed at their best values.
    `best_vals[j]` is the best discrepancy found in dimension j + 1; the
    first entry is the discrepancy of the one-dimensional lattice.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.best_vals: list[float] = []

    def _start(self) -> None:
        self.best_as = [1]
        self.best_vals = [self._score(Rank1Lattice(self.n, [1]))]

    def _extend(self, candidates) -> None:
        best, pos = math.inf, -1
        for a in candidates:
            err = self._score(Rank1Lattice(self.n, self.best_as + [a]))
            if err < best:
                best, pos = err, a
        self.best_as.append(pos)
        self.best_vals.append(best)

    def _exhaust(self, s: int, rel_prime: bool) -> float:
        self._start()
        candidates = self._multipliers(1, rel_prime)
        for _ in range(1, s):
            self._extend(candidates)
        self.best_val = self.best_vals[-1]
        return self._finish()

    def _random(self, s: int, k: int, rel_prime: bool) -> float:
        if k >= self.n:
            return self._exhaust(s, rel_prime)
        self._start()
        for _ in range(1, s):
            self._extend(self._draw(1, rel_prime) for _ in range(k))
        self.best_val = self.best_vals[-1]
        return self._finish()
