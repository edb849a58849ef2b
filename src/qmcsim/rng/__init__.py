"""Uniform random number streams with stream and substream partitioning."""

from qmcsim.rng.base import RandomStream, SeedSequence, reset_package_seeds
from qmcsim.rng.manager import RandomStreamManager
from qmcsim.rng.mrg31k3p import MRG31k3p
from qmcsim.rng.mrg32k3a import MRG32k3a
from qmcsim.rng.well import WellStream
from qmcsim.rng.well607 import WELL607
from qmcsim.rng.well1024 import WELL1024

__all__ = [
    "RandomStream",
    "SeedSequence",
    "reset_package_seeds",
    "RandomStreamManager",
    "MRG32k3a",
    "MRG31k3p",
    "WellStream",
    "WELL607",
    "WELL1024",
]
