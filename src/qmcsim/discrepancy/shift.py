"""
Discrepancies for point sets randomised by a uniform shift modulo 1.

D^2 is the variance of the integration error of the shifted set over a
weighted Korobov space of smoothness 1 (B2 terms) or 2 (B2 and B4 terms).
For a lattice the pairwise differences are again lattice points, which
reduces the O(n^2) sum to O(n); the Lattice engines assume that structure.
"""

from __future__ import annotations

import numpy as np

from qmcsim.discrepancy.base import (
    ONE_SIXTH,
    ONE_THIRTIETH,
    Discrepancy,
    bernoulli2,
    bernoulli4,
    wrapped_difference,
)


class DiscShift1(Discrepancy):
    """Shift discrepancy of order 1 for an arbitrary point set; weights C1 = gamma^2."""

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1 = gamma * gamma
        disc = float(np.prod(1.0 + c1 * ONE_SIXTH)) / n

        def kernel(x, block):
            return np.prod(1.0 + c1 * bernoulli2(wrapped_difference(x, block)), axis=1)

        disc += 2.0 * self._pair_sum(points, kernel) / (n * n)
        return disc - 1.0

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1 = float(gamma[0] * gamma[0])
        disc = c1 * ONE_SIXTH / n
        pairs = self._pair_sum(points, lambda x, block: c1 * bernoulli2(wrapped_difference(x, block)))
        return disc + 2.0 * pairs / (n * n)


class DiscShift1Lattice(DiscShift1):
    """
    Shift discrepancy of order 1 for a rank-1 lattice:

        D^2 = -1 + (1/n) sum_i prod_r (1 + gamma_r^2 B2(u_ir))
    """

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1 = gamma * gamma
        return self._diagonal_sum(np.prod(1.0 + c1 * bernoulli2(points), axis=1)) / n - 1.0

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1 = float(gamma[0] * gamma[0])
        return c1 * self._diagonal_sum(bernoulli2(points)) / n


def _order2_weights(gamma: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    v = gamma * gamma
    return 0.5 * v, v * v / 12.0


class DiscShift2(Discrepancy):
    """Shift discrepancy of order 2 for an arbitrary point set; C1 = gamma^2/2, C2 = gamma^4/12."""

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1, c2 = _order2_weights(gamma)
        disc = float(np.prod(1.0 + c1 * ONE_SIXTH + c2 * ONE_THIRTIETH)) / n

        def kernel(x, block):
            u = wrapped_difference(x, block)
            return np.prod(1.0 + c1 * bernoulli2(u) - c2 * bernoulli4(u), axis=1)

        disc += 2.0 * self._pair_sum(points, kernel) / (n * n)
        return disc - 1.0

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1, c2 = (float(c[0]) for c in _order2_weights(gamma))
        disc = (c1 * ONE_SIXTH + c2 * ONE_THIRTIETH) / n

        def kernel(x, block):
            u = wrapped_difference(x, block)
            return c1 * bernoulli2(u) - c2 * bernoulli4(u)

        return disc + 2.0 * self._pair_sum(points, kernel) / (n * n)


class DiscShift2Lattice(DiscShift2):
    """Shift discrepancy of order 2 for a rank-1 lattice, O(ns)."""

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1, c2 = _order2_weights(gamma)
        terms = 1.0 + c1 * bernoulli2(points) - c2 * bernoulli4(points)
        return self._diagonal_sum(np.prod(terms, axis=1)) / n - 1.0

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1, c2 = (float(c[0]) for c in _order2_weights(gamma))
        disc = self._diagonal_sum(c1 * bernoulli2(points) - c2 * bernoulli4(points)) / n
        return max(disc, 0.0)
