"""
P-alpha figure of merit for rank-1 lattices.

    P_alpha = beta_0 * (-1 + (1/n) sum_i prod_j (1 -/+ C_j B_alpha(u_ij)))

with C_j = (2 pi beta_j)^alpha / alpha!. The Bernoulli polynomial of each
supported degree is written out in Horner form; the sign in front of C_j is
(-1)^(alpha/2 + 1). The result is P_alpha itself, not its square root.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np

from qmcsim.config import ReductionConfig
from qmcsim.discrepancy.base import (
    DEGENERATE,
    ONE_THIRTIETH,
    Discrepancy,
    Points,
    bernoulli2,
    bernoulli4,
    bernoulli6,
)
from qmcsim.errors import UnsupportedParameterError

FOURTEEN_THIRDS = 14.0 / 3.0
SEVEN_THIRDS = 7.0 / 3.0
TWO_THIRDS = 2.0 / 3.0


def _term2(u: np.ndarray, c: np.ndarray) -> np.ndarray:
    return 1.0 + c * bernoulli2(u)


def _term4(u: np.ndarray, c: np.ndarray) -> np.ndarray:
    return 1.0 - c * bernoulli4(u)


def _term6(u: np.ndarray, c: np.ndarray) -> np.ndarray:
    return 1.0 + c * bernoulli6(u)


def _term8(u: np.ndarray, c: np.ndarray) -> np.ndarray:
    uu = u * u
    return 1.0 - c * (((((u - 4.0) * u + FOURTEEN_THIRDS) * uu - SEVEN_THIRDS) * uu + TWO_THIRDS) * uu - ONE_THIRTIETH)


TERMS: dict[int, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    2: _term2,
    4: _term4,
    6: _term6,
    8: _term8,
}


def check_alpha(alpha: int) -> int:
    if alpha not in TERMS:
        raise UnsupportedParameterError(f"alpha must be one of {{2, 4, 6, 8}}, got {alpha}")
    return alpha


class Palpha(Discrepancy):
    """
    P-alpha engine.

    The weights are beta = (beta_0, beta_1, ..., beta_s), passed as `beta`
    (or `gamma`); beta_0 scales the whole sum. All ones when omitted.
    """

    GAMMA_OFFSET = 1

    def __init__(
        self,
        points: Points | None = None,
        alpha: int = 2,
        beta: Sequence[float] | None = None,
        config: ReductionConfig | None = None,
    ) -> None:
        super().__init__(points, beta, config)
        self._alpha = check_alpha(alpha)

    @property
    def alpha(self) -> int:
        return self._alpha

    def set_beta(self, beta: Sequence[float]) -> None:
        self.set_gamma(beta)

    def compute(
        self,
        points: Points | None = None,
        n: int | None = None,
        s: int | None = None,
        gamma: Sequence[float] | None = None,
        alpha: int | None = None,
    ) -> float:
        """Compute P_alpha; `alpha` overrides the engine's own value for this call only."""
        if alpha is None or alpha == self._alpha:
            return super().compute(points, n, s, gamma)
        other = Palpha(alpha=check_alpha(alpha), beta=self._gamma, config=self._config)
        return other.compute(self._points if points is None else points, n, s, gamma)

    def _factors(self, beta: np.ndarray) -> np.ndarray:
        a = self._alpha
        return (2.0 * math.pi * beta[1:]) ** a / math.factorial(a)

    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        n = points.shape[0]
        terms = TERMS[self._alpha](points, self._factors(gamma))
        mean = self._diagonal_sum(np.prod(terms, axis=1)) / n
        return float(gamma[0]) * (mean - 1.0)

    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        return self._disc2(points.reshape(-1, 1), gamma)

    def _finish(self, d2: float) -> float:
        if d2 < 0.0:
            return DEGENERATE
        return d2

    def __str__(self) -> str:
        return f"{super().__str__()}\nalpha = {self._alpha}"
