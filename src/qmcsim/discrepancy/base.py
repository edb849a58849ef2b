"""
Base class for discrepancy engines.

An engine scores a point set in [0, 1)^s. Points are given either as an
(n, s) array (general form) or as a 1-D array of n values, which selects the
engine's one-dimensional formula. The squared discrepancy D^2 is assembled
from a diagonal sum and a pairwise sum over i < j; `compute()` returns
sqrt(D^2), or DEGENERATE when rounding has made D^2 negative.

The pairwise sums loop over the outer index and vectorise the inner one
with numpy. Per-row sums are combined with math.fsum, so the result does
not depend on how rows are sharded over worker threads.
"""

from __future__ import annotations

import itertools
import logging
import math
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence, Union

import numpy as np

from qmcsim.config import DEFAULT_CONFIG, ReductionConfig
from qmcsim.errors import IllegalStateError
from qmcsim.hups.pointset import PointSet

logger = logging.getLogger(__name__)

DEGENERATE = -1.0

ONE_SIXTH = 1.0 / 6.0
ONE_THIRTIETH = 1.0 / 30.0
ONE_FORTY_SECOND = 1.0 / 42.0

Points = Union[PointSet, np.ndarray, Sequence[float], Sequence[Sequence[float]]]
PairKernel = Callable[[np.ndarray, np.ndarray], np.ndarray]


def bernoulli2(u):
    """Bernoulli polynomial B2(u) = u^2 - u + 1/6."""
    return u * (u - 1.0) + ONE_SIXTH


def bernoulli4(u):
    """Bernoulli polynomial B4(u) = u^4 - 2u^3 + u^2 - 1/30."""
    return ((u - 2.0) * u + 1.0) * u * u - ONE_THIRTIETH


def bernoulli6(u):
    """Bernoulli polynomial B6(u) = u^6 - 3u^5 + 5u^4/2 - u^2/2 + 1/42."""
    uu = u * u
    return (((u - 3.0) * u + 2.5) * uu - 0.5) * uu + ONE_FORTY_SECOND


def wrapped_difference(x, y):
    """(x - y) mod 1, for coordinates in [0, 1)."""
    u = x - y
    return np.where(u < 0.0, u + 1.0, u)


def _row_sums(points: np.ndarray, kernel: PairKernel, rows: range) -> list[float]:
    return [float(np.sum(kernel(points[i], points[i + 1 :]))) for i in rows]


class Discrepancy(ABC):
    """
    Abstract base class for discrepancy engines.

    Args:
        points: Point set to cache for `compute()`; an (n, s) array, a 1-D
            array of n values, or a PointSet.
        gamma: Per-coordinate weights (all ones when omitted).
        config: Pairwise-sum reduction settings.
    """

    # Extra leading weights some engines take (beta[0] for P-alpha).
    GAMMA_OFFSET = 0

    def __init__(
        self,
        points: Points | None = None,
        gamma: Sequence[float] | None = None,
        config: ReductionConfig | None = None,
    ) -> None:
        self._config = config or DEFAULT_CONFIG
        self._points: np.ndarray | None = None
        self._gamma: np.ndarray | None = None
        if points is not None:
            self.set_points(points)
        if gamma is not None:
            self.set_gamma(gamma)

    # ---------------------------------------------------------------- points

    @staticmethod
    def to_array(points: Points) -> np.ndarray:
        """Return the points as a float array of shape (n,) or (n, s)."""
        if isinstance(points, PointSet):
            arr = points.to_array()
        else:
            arr = np.asarray(points, dtype=float)
        if arr.ndim not in (1, 2):
            raise ValueError(f"points must be a 1-D or 2-D array, got shape {arr.shape}")
        return arr

    def set_points(self, points: Points) -> None:
        arr = np.array(self.to_array(points), dtype=float)
        arr.setflags(write=False)
        self._points = arr

    @property
    def points(self) -> np.ndarray | None:
        return self._points

    @property
    def num_points(self) -> int:
        return 0 if self._points is None else self._points.shape[0]

    @property
    def dimension(self) -> int:
        if self._points is None:
            return 0
        return 1 if self._points.ndim == 1 else self._points.shape[1]

    def set_gamma(self, gamma: Sequence[float]) -> None:
        self._gamma = np.array(gamma, dtype=float)

    @property
    def gamma(self) -> np.ndarray | None:
        return None if self._gamma is None else self._gamma.copy()

    @property
    def config(self) -> ReductionConfig:
        return self._config

    def _resolve_gamma(self, gamma: Sequence[float] | None, s: int) -> np.ndarray:
        size = s + self.GAMMA_OFFSET
        if gamma is not None:
            g = np.asarray(gamma, dtype=float)
        elif self._gamma is not None:
            g = self._gamma
        else:
            return np.ones(size)
        if g.shape[0] < size:
            raise ValueError(f"{type(self).__name__} needs {size} weights, got {g.shape[0]}")
        return g[:size]

    # --------------------------------------------------------------- compute

    def compute(
        self,
        points: Points | None = None,
        n: int | None = None,
        s: int | None = None,
        gamma: Sequence[float] | None = None,
    ) -> float:
        """
        Compute the discrepancy of the first `n` points, first `s` coordinates.

        Uses the cached points when `points` is omitted, and the one-dimensional
        formula when the points are a 1-D array.
        """
        if points is None:
            if self._points is None:
                raise IllegalStateError(f"{type(self).__name__}: no points to compute on")
            arr = self._points
        else:
            arr = self.to_array(points)

        if n is not None:
            if not 0 < n <= arr.shape[0]:
                raise ValueError(f"n = {n} out of range (1..{arr.shape[0]})")
            arr = arr[:n]
        if arr.shape[0] == 0:
            raise ValueError("cannot compute the discrepancy of an empty point set")

        if arr.ndim == 1:
            g = self._resolve_gamma(gamma, 1)
            d2 = self._disc2_1d(arr, g)
        else:
            if s is not None:
                if not 0 < s <= arr.shape[1]:
                    raise ValueError(f"s = {s} out of range (1..{arr.shape[1]})")
                arr = arr[:, :s]
            g = self._resolve_gamma(gamma, arr.shape[1])
            d2 = self._disc2(arr, g)
        return self._finish(d2)

    def __call__(self, points: Points | None = None) -> float:
        return self.compute(points)

    def _finish(self, d2: float) -> float:
        if d2 < 0.0:
            logger.debug("%s: squared discrepancy %r is negative", type(self).__name__, d2)
            return DEGENERATE
        return math.sqrt(d2)

    @abstractmethod
    def _disc2(self, points: np.ndarray, gamma: np.ndarray) -> float:
        """Squared discrepancy of an (n, s) array."""
        ...

    @abstractmethod
    def _disc2_1d(self, points: np.ndarray, gamma: np.ndarray) -> float:
        """Squared discrepancy of a 1-D array of n values."""
        ...

    # ------------------------------------------------------------ reduction

    def _pair_sum(self, points: np.ndarray, kernel: PairKernel) -> float:
        """
        Return the sum over i < j of kernel(points[i], points[j]).

        `kernel(x, block)` receives one point and the block of all later
        points and returns one value per point of the block.
        """
        rows = points.shape[0] - 1
        if rows <= 0:
            return 0.0
        shards = self._config.shard_count(rows)
        if shards == 1:
            return math.fsum(_row_sums(points, kernel, range(rows)))
        with ThreadPoolExecutor(max_workers=shards) as pool:
            parts = pool.map(lambda k: _row_sums(points, kernel, range(k, rows, shards)), range(shards))
            return math.fsum(itertools.chain.from_iterable(parts))

    @staticmethod
    def _diagonal_sum(values: np.ndarray) -> float:
        return math.fsum(values.tolist())

    def __str__(self) -> str:
        lines = [f"{type(self).__name__}:", f"n = {self.num_points},   dim = {self.dimension}"]
        if self._gamma is not None:
            lines.append(f"gamma = {self._gamma.tolist()}")
        return "\n".join(lines)
