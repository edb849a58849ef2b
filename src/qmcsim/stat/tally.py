"""
Tally - statistical collector for a sequence of observations.

Keeps the count, sum, sum of squares, minimum and maximum of the values
added, and derives the average, sample variance and a normal-theory
confidence interval half-width from them.
"""

from __future__ import annotations

import logging
import math

logger = logging.getLogger(__name__)

# Two-sided standard normal quantiles for the supported confidence levels (percent).
Z_VALUES = {
    90.0: 1.6448536269514722,
    95.0: 1.959963984540054,
    99.0: 2.5758293035489004,
}


class Tally:
    """Collector of individual observations."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self.init()

    def init(self) -> None:
        """Discard all observations."""
        self._number: int = 0
        self._sum: float = 0.0
        self._sum_sq: float = 0.0
        self._min: float = math.inf
        self._max: float = -math.inf

    def add(self, x: float) -> None:
        """Record observation `x`."""
        if x < self._min:
            self._min = x
        if x > self._max:
            self._max = x
        self._sum += x
        self._sum_sq += x * x
        self._number += 1

    def __iadd__(self, x: float) -> Tally:
        self.add(x)
        return self

    @property
    def number_obs(self) -> int:
        return self._number

    @property
    def sum(self) -> float:
        return self._sum

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    @property
    def average(self) -> float:
        """Mean of the observations; NaN when there are none."""
        if self._number == 0:
            logger.warning("%s: average of a tally with no observation", self._label())
            return math.nan
        return self._sum / self._number

    @property
    def variance(self) -> float:
        """
        Sample variance, with the n-1 denominator.

        NaN with fewer than two observations.
        """
        n = self._number
        if n < 2:
            logger.warning("%s: variance needs at least 2 observations, have %d", self._label(), n)
            return math.nan
        v = (self._sum_sq - (self._sum * self._sum) / n) / (n - 1)
        if v < 0.0:
            # Cancellation in sum_sq - sum^2/n for nearly constant data.
            logger.warning("%s: negative variance %g set to 0", self._label(), v)
            return 0.0
        return v

    @property
    def standard_deviation(self) -> float:
        return math.sqrt(self.variance)

    def confidence(self, percent: float = 95.0) -> float:
        """
        Half-width of the normal confidence interval on the mean.

        Supported levels: 90, 95 and 99 percent.
        """
        if percent not in Z_VALUES:
            raise ValueError(f"unsupported confidence level {percent}, use one of {sorted(Z_VALUES)}")
        return Z_VALUES[percent] * self.standard_deviation / math.sqrt(self._number)

    def confidence_interval(self, percent: float = 95.0) -> tuple[float, float]:
        """(center, half-width) of the normal confidence interval on the mean."""
        return self.average, self.confidence(percent)

    def _label(self) -> str:
        return self.name or type(self).__name__

    def __str__(self) -> str:
        lines = [f"REPORT on Tally stat. collector ==> {self._label()}"]
        if self._number == 0:
            lines.append("Number of observations: 0")
            return "\n".join(lines)
        lines.extend(
            [
                f"Number of observations: {self._number}",
                f"Minimum               : {self._min}",
                f"Maximum               : {self._max}",
                f"Average               : {self.average}",
            ]
        )
        if self._number >= 2:
            lines.append(f"Standard deviation    : {self.standard_deviation}")
        return "\n".join(lines)
