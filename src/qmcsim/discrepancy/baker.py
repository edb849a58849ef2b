"""
Shift discrepancies for point sets folded by the baker's transformation.

Each coordinate of the randomly shifted set is folded by u -> 1 - |2u - 1|.
D^2 is the variance of the integration error of the folded set over a
weighted Korobov space of smoothness 1, with weights

    C1 = 4 gamma^2 / 3,   C2 = gamma^4 / 9,   C3 = 16 gamma^4 / 45.

The kernel of a difference u is 1 - K(u), where v = (u - 1/2) mod 1 and

    K(u) = C1 (B4(u) - B4(v)) + C2 (7 B4(u) - 2 B4(v)) + C3 (B6(u) - B6(v)).
"""

from __future__ import annotations

import numpy as np

from qmcsim.discrepancy.base import Discrepancy, bernoulli4, bernoulli6, wrapped_difference


def _baker_weights(gamma: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    v = gamma * gamma
    w = v * v
    return v * 4.0 / 3.0, w / 9.0, w * 16.0 / 45.0


def _folded_term(u, c1, c2, c3):
    v = wrapped_difference(u, 0.5)
    b4u, b4v = bernoulli4(u), bernoulli4(v)
    return c1 * (b4u - b4v) + c2 * (7.0 * b4u - 2.0 * b4v) + c3 * (bernoulli6(u) - bernoulli6(v))


class DiscShiftBaker1(Discrepancy):
    """Baker-folded shift discrepancy of order 1 for an arbitrary point set, O(n^2 s)."""

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n, s = points.shape
        c1, c2, c3 = _baker_weights(gamma)
        disc = float(np.prod(1.0 - _folded_term(np.zeros(s), c1, c2, c3))) / n

        def kernel(x, block):
            return np.prod(1.0 - _folded_term(wrapped_difference(x, block), c1, c2, c3), axis=1)

        disc += 2.0 * self._pair_sum(points, kernel) / (n * n)
        return disc - 1.0

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1, c2, c3 = (float(c[0]) for c in _baker_weights(gamma))
        disc = -float(_folded_term(0.0, c1, c2, c3)) / n

        def kernel(x, block):
            return _folded_term(wrapped_difference(x, block), c1, c2, c3)

        return disc - 2.0 * self._pair_sum(points, kernel) / (n * n)


class DiscShiftBaker1Lattice(DiscShiftBaker1):
    """
    Baker-folded shift discrepancy of order 1 for a rank-1 lattice, O(ns):

        D^2 = -1 + (1/n) sum_i prod_r (1 - K_r(u_ir))
    """

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1, c2, c3 = _baker_weights(gamma)
        terms = np.prod(1.0 - _folded_term(points, c1, c2, c3), axis=1)
        return self._diagonal_sum(terms) / n - 1.0

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        c1, c2, c3 = (float(c[0]) for c in _baker_weights(gamma))
        return -self._diagonal_sum(_folded_term(points, c1, c2, c3)) / n
