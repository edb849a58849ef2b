"""
L2-type discrepancies (Warnock / Hickernell closed forms).

These engines are unweighted: gamma is accepted and ignored.
"""

from __future__ import annotations

import numpy as np

from qmcsim.discrepancy.base import Discrepancy


class DiscL2Hickernell(Discrepancy):
    """
    Modified L2-star discrepancy of Hickernell:

        D^2 = (4/3)^s - (2/n) sum_i prod_r (3 - u_ir^2)/2
              + (1/n^2) sum_i sum_j prod_r (2 - max(u_ir, u_jr))
    """

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n, s = points.shape
        disc = -(0.5 ** (s - 1)) * self._diagonal_sum(np.prod(3.0 - points * points, axis=1)) / n
        diag = self._diagonal_sum(np.prod(2.0 - points, axis=1))
        pairs = self._pair_sum(points, lambda x, block: np.prod(2.0 - np.maximum(x, block), axis=1))
        disc += (diag + 2.0 * pairs) / (n * n)
        return disc + (4.0 / 3.0) ** s

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        disc = self._diagonal_sum(points * points) / n
        pairs = self._pair_sum(points, np.maximum)
        disc -= (self._diagonal_sum(points) + 2.0 * pairs) / (n * n)
        return disc + 1.0 / 3.0


class DiscL2Unanchored(Discrepancy):
    """
    Unanchored (box) L2 discrepancy:

        D^2 = 12^(-s) - (2/n) sum_i prod_r u_ir (1 - u_ir)/2
              + (1/n^2) sum_i sum_j prod_r (min(u_ir, u_jr) - u_ir u_jr)
    """

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n, s = points.shape
        diag = self._diagonal_sum(np.prod(points * (1.0 - points), axis=1))
        disc = diag / n * (1.0 / n - 0.5 ** (s - 1))
        pairs = self._pair_sum(points, lambda x, block: np.prod(np.minimum(x, block) - x * block, axis=1))
        disc += 2.0 * pairs / (n * n)
        return disc + (1.0 / 12.0) ** s

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        diag = self._diagonal_sum(points * (1.0 - points))
        disc = -(1.0 - 1.0 / n) * diag / n
        pairs = self._pair_sum(points, lambda x, block: np.minimum(x, block) - x * block)
        disc += 2.0 * pairs / (n * n)
        return disc + 1.0 / 12.0


class DiscL2Star(Discrepancy):
    """
    L2-star discrepancy (Warnock's formula). A negative D^2 from rounding is
    reported as 0. The one-dimensional form is the Cramer-von Mises statistic
    computed on the sorted points.
    """

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n, s = points.shape
        disc = -(0.5 ** (s - 1)) * self._diagonal_sum(np.prod((1.0 - points) * (1.0 + points), axis=1)) / n
        diag = self._diagonal_sum(np.prod(1.0 - points, axis=1))
        pairs = self._pair_sum(points, lambda x, block: np.prod(1.0 - np.maximum(x, block), axis=1))
        disc += (diag + 2.0 * pairs) / (n * n)
        disc += (1.0 / 3.0) ** s
        return max(disc, 0.0)

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        t = np.sort(points)
        v = t - (np.arange(n) + 0.5) / n
        w2 = self._diagonal_sum(v * v) + 1.0 / (12.0 * n)
        return w2 / n


class DiscL2Symmetric(Discrepancy):
    """
    Symmetric L2 discrepancy of Hickernell:

        D^2 = (4/3)^s - (2/n) sum_i prod_r (1 + 2u_ir - 2u_ir^2)
              + (2^s/n^2) sum_i sum_j prod_r (1 - |u_ir - u_jr|)
    """

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n, s = points.shape
        u = 0.5 - points
        disc = -2.0 * self._diagonal_sum(np.prod(1.5 - 2.0 * u * u, axis=1)) / n
        pairs = self._pair_sum(points, lambda x, block: np.prod(1.0 - np.abs(x - block), axis=1))
        disc += (n + 2.0 * pairs) * 2.0**s / (n * n)
        return disc + (4.0 / 3.0) ** s

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        disc = -4.0 * self._diagonal_sum(points * (1.0 - points)) / n
        pairs = self._pair_sum(points, lambda x, block: np.abs(x - block))
        disc -= 4.0 * pairs / (n * n)
        disc += 4.0 / 3.0
        return max(disc, 0.0)
