"""
Point sets in the unit hypercube.

A point set exposes `num_points`, `dimension` and `coordinate(i, j)`, and
can be materialised as an (n, s) numpy array for the discrepancy engines.
Any point set can be randomised by a uniform shift modulo 1.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from qmcsim.rng.base import RandomStream

# Largest lattice size whose products i * a stay within int64.
MAX_LATTICE_POINTS = 2**31 - 1


class PointSet(ABC):
    """Abstract base class for point sets of n points in s dimensions."""

    def __init__(self) -> None:
        self._shift: np.ndarray | None = None

    @property
    @abstractmethod
    def num_points(self) -> int: ...

    @property
    @abstractmethod
    def dimension(self) -> int: ...

    @abstractmethod
    def _raw_coordinate(self, i: int, j: int) -> float: ...

    def _raw_array(self) -> np.ndarray:
        n, s = self.num_points, self.dimension
        return np.array([[self._raw_coordinate(i, j) for j in range(s)] for i in range(n)], dtype=float)

    def coordinate(self, i: int, j: int) -> float:
        """Coordinate j of point i, including the random shift if one is set."""
        if not 0 <= i < self.num_points:
            raise IndexError(f"point index {i} out of range [0, {self.num_points})")
        if not 0 <= j < self.dimension:
            raise IndexError(f"coordinate index {j} out of range [0, {self.dimension})")
        u = self._raw_coordinate(i, j)
        if self._shift is not None:
            u = (u + self._shift[j]) % 1.0
        return u

    def to_array(self) -> np.ndarray:
        """Return the points as a new (num_points, dimension) array."""
        points = self._raw_array()
        if self._shift is not None:
            points = (points + self._shift) % 1.0
        return points

    def add_random_shift(self, stream: RandomStream) -> None:
        """Shift every point by the same uniform vector drawn from `stream`, modulo 1."""
        self._shift = np.array(stream.next_array_of_double(self.dimension), dtype=float)

    def clear_random_shift(self) -> None:
        self._shift = None

    @property
    def shift(self) -> np.ndarray | None:
        return None if self._shift is None else self._shift.copy()

    def __len__(self) -> int:
        return self.num_points

    def __str__(self) -> str:
        return f"{type(self).__name__}: number of points = {self.num_points}, dimension = {self.dimension}"


class ArrayPointSet(PointSet):
    """Point set backed by an explicit (n, s) array of coordinates in [0, 1)."""

    def __init__(self, points: Sequence[Sequence[float]] | np.ndarray) -> None:
        super().__init__()
        arr = np.array(points, dtype=float)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise ValueError(f"points must be a 2-D array, got shape {arr.shape}")
        arr.setflags(write=False)
        self._points = arr

    @classmethod
    def from_stream(cls, stream: RandomStream, n: int, s: int) -> ArrayPointSet:
        """Monte Carlo point set: n points of s successive uniforms each."""
        if n < 0 or s < 0:
            raise ValueError(f"n and s must be non-negative (got n={n}, s={s})")
        return cls([stream.next_array_of_double(s) for _ in range(n)])

    @property
    def num_points(self) -> int:
        return self._points.shape[0]

    @property
    def dimension(self) -> int:
        return self._points.shape[1]

    def _raw_coordinate(self, i: int, j: int) -> float:
        return float(self._points[i, j])

    def _raw_array(self) -> np.ndarray:
        return self._points.copy()


class Rank1Lattice(PointSet):
    """
    Rank-1 lattice with generating vector a:

        P_n = { (i * a / n) mod 1 : i = 0, ..., n-1 }
    """

    def __init__(self, n: int, a: Sequence[int], s: int | None = None) -> None:
        super().__init__()
        if not 1 <= n <= MAX_LATTICE_POINTS:
            raise ValueError(f"n must be in [1, {MAX_LATTICE_POINTS}], got {n}")
        if s is None:
            s = len(a)
        if s > len(a):
            raise ValueError(f"dimension {s} exceeds generating vector length {len(a)}")
        self._n = n
        self._a = [int(x) % n for x in a[:s]]

    @property
    def num_points(self) -> int:
        return self._n

    @property
    def dimension(self) -> int:
        return len(self._a)

    @property
    def generating_vector(self) -> tuple[int, ...]:
        return tuple(self._a)

    def _raw_coordinate(self, i: int, j: int) -> float:
        return (i * self._a[j] % self._n) / self._n

    def _raw_array(self) -> np.ndarray:
        k = np.arange(self._n, dtype=np.int64)[:, None]
        a = np.array(self._a, dtype=np.int64)[None, :]
        return ((k * a) % self._n) / self._n


class KorobovLattice(Rank1Lattice):
    """Rank-1 lattice with generating vector (1, a, a^2, ..., a^(s-1)) mod n."""

    def __init__(self, n: int, a: int, s: int) -> None:
        if s < 1:
            raise ValueError(f"dimension must be positive, got {s}")
        vector = [1 % n]
        for _ in range(s - 1):
            vector.append(vector[-1] * a % n)
        super().__init__(n, vector)
        self._generator = a

    @property
    def generator(self) -> int:
        return self._generator
