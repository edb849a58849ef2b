"""
Runtime configuration.

Algorithm constants (moduli, multipliers, jump tables) live as module-level
constants next to the code that uses them. The only tunable runtime
behaviour is how the O(n^2) discrepancy pair sums are reduced.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

WORKERS_ENV = "QMCSIM_WORKERS"


@dataclass(frozen=True)
class ReductionConfig:
    """
    Settings for the pairwise sums of the discrepancy engines.

    Attributes:
        workers: Number of threads the outer summation index is sharded over.
            1 keeps the computation on the calling thread.
        min_rows_per_worker: A shard is only created when every worker gets
            at least this many outer rows; smaller inputs run serially.
    """

    workers: int = 1
    min_rows_per_worker: int = 64

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.min_rows_per_worker < 1:
            raise ValueError(f"min_rows_per_worker must be >= 1, got {self.min_rows_per_worker}")

    @classmethod
    def from_env(cls) -> ReductionConfig:
        """Build a config from the QMCSIM_WORKERS environment variable."""
        raw = os.environ.get(WORKERS_ENV)
        if raw is None or raw.strip() == "":
            return cls()
        try:
            workers = int(raw)
        except ValueError as exc:
            raise ValueError(f"{WORKERS_ENV} must be an integer, got {raw!r}") from exc
        return cls(workers=workers)

    def shard_count(self, rows: int) -> int:
        """Number of shards to use for `rows` outer rows."""
        if self.workers <= 1:
            return 1
        return max(1, min(self.workers, rows // self.min_rows_per_worker))


DEFAULT_CONFIG = ReductionConfig()
