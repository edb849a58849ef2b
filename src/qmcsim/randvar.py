"""
Random variate generators.

Each generator transforms the uniforms of a `RandomStream` into draws from
a distribution. The stream is shared, not copied: resetting it (or moving
it to its next substream) replays or advances the variates as well, which
is what common random numbers across simulated systems rely on.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

from qmcsim.rng.base import RandomStream


class RandomVariateGen(ABC):
    """Abstract base class for generators driven by a uniform stream."""

    def __init__(self, stream: RandomStream) -> None:
        if stream is None:
            raise ValueError("stream must not be None")
        self._stream = stream

    @property
    def stream(self) -> RandomStream:
        return self._stream

    @stream.setter
    def stream(self, stream: RandomStream) -> None:
        self._stream = stream

    def _uniform(self) -> float:
        return self._stream.next_double()

    @abstractmethod
    def __call__(self) -> float:
        """Generate next random value from the distribution."""
        ...

    def next_double(self) -> float:
        return self()

    def next_array_of_double(self, n: int) -> list[float]:
        """Return the next `n` variates."""
        if n < 0:
            raise ValueError("Must have a non-negative number of elements.")
        return [self() for _ in range(n)]


class UniformGen(RandomVariateGen):
    """Uniform distribution on [lo, hi]."""

    def __init__(self, stream: RandomStream, lo: float = 0.0, hi: float = 1.0) -> None:
        super().__init__(stream)
        if hi <= lo:
            raise ValueError(f"UniformGen requires lo < hi (got lo={lo}, hi={hi})")
        self._lo = lo
        self._hi = hi
        self._range = hi - lo

    def __call__(self) -> float:
        return self._lo + (self._range * self._uniform())


class BernoulliGen(RandomVariateGen):
    """Boolean draw: True with probability p."""

    def __init__(self, stream: RandomStream, p: float) -> None:
        super().__init__(stream)
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"p must be in [0, 1], got {p}")
        self._prob = p

    def __call__(self) -> bool:
        return self._uniform() < self._prob


class ExponentialGen(RandomVariateGen):
    """Exponential distribution with given mean, by inversion."""

    def __init__(self, stream: RandomStream, mean: float) -> None:
        super().__init__(stream)
        if mean <= 0.0:
            raise ValueError(f"mean must be positive, got {mean}")
        self._mean = mean

    @property
    def mean(self) -> float:
        return self._mean

    def __call__(self) -> float:
        return -self._mean * math.log1p(-self._uniform())


class ErlangGen(RandomVariateGen):
    """
    Erlang distribution with given mean and standard deviation.

    The shape k = (mean/std_dev)^2 is rounded to the nearest integer (at least 1).
    """

    def __init__(self, stream: RandomStream, mean: float, std_dev: float) -> None:
        super().__init__(stream)
        if mean <= 0.0 or std_dev <= 0.0:
            raise ValueError(f"mean and std_dev must be positive (got {mean}, {std_dev})")
        self._mean = mean
        self._std_dev = std_dev
        self._k = max(1, round((mean / std_dev) ** 2))

    @property
    def k(self) -> int:
        return self._k

    def __call__(self) -> float:
        z = 1.0
        for _ in range(self._k):
            z *= self._uniform()
        return -(self._mean / self._k) * math.log(z)


class HyperExponentialGen(RandomVariateGen):
    """
    Two-branch hyperexponential distribution with given mean and standard deviation.

    Requires coefficient of variation (std_dev/mean) > 1.
    """

    def __init__(self, stream: RandomStream, mean: float, std_dev: float) -> None:
        super().__init__(stream)
        if mean <= 0.0:
            raise ValueError(f"mean must be positive, got {mean}")
        cv = std_dev / mean
        if cv <= 1.0:
            raise ValueError(
                f"HyperExponentialGen requires CV > 1 (got {cv:.4f}). "
                "Use ExponentialGen for CV=1 or ErlangGen for CV<1."
            )
        self._mean = mean
        self._std_dev = std_dev
        self._p = 0.5 * (1.0 - math.sqrt((cv * cv - 1.0) / (cv * cv + 1.0)))

    def __call__(self) -> float:
        z = self._mean / (1.0 - self._p) if self._uniform() > self._p else self._mean / self._p
        return -0.5 * z * math.log(self._uniform())


class NormalGen(RandomVariateGen):
    """
    Normal distribution with given mean and standard deviation.

    Marsaglia's polar method (Knuth Vol 2, p.117); the second value of
    each pair is kept for the next call.
    """

    def __init__(self, stream: RandomStream, mean: float = 0.0, std_dev: float = 1.0) -> None:
        super().__init__(stream)
        if std_dev <= 0.0:
            raise ValueError(f"std_dev must be positive, got {std_dev}")
        self._mean = mean
        self._std_dev = std_dev
        self._spare: float | None = None

    def __call__(self) -> float:
        if self._spare is not None:
            x = self._spare
            self._spare = None
        else:
            while True:
                v1 = 2.0 * self._uniform() - 1.0
                v2 = 2.0 * self._uniform() - 1.0
                s = v1 * v1 + v2 * v2
                if 0.0 < s < 1.0:
                    break
            s = math.sqrt((-2.0 * math.log(s)) / s)
            x = v1 * s
            self._spare = v2 * s
        return self._mean + x * self._std_dev


class TriangularGen(RandomVariateGen):
    """
    Triangular distribution with lower limit a, upper limit b, and mode c.

    Requires: a < b and a <= c <= b.
    """

    def __init__(self, stream: RandomStream, a: float, b: float, c: float) -> None:
        super().__init__(stream)
        if not (a < b and a <= c <= b):
            raise ValueError(f"TriangularGen requires a < b and a <= c <= b (got {a}, {b}, {c})")
        self._a = a
        self._b = b
        self._c = c

    def __call__(self) -> float:
        a, b, c = self._a, self._b, self._c
        f = (c - a) / (b - a)
        u = self._uniform()
        if u < f:
            return a + math.sqrt(u * (b - a) * (c - a))
        return b - math.sqrt((1 - u) * (b - a) * (b - c))
