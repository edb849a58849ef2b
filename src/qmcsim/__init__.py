"""
qmcsim - random streams, quasi-Monte Carlo point sets and discrepancies,
and a small discrete-event simulator.
"""

from qmcsim.config import DEFAULT_CONFIG, ReductionConfig
from qmcsim.discrepancy import (
    DEGENERATE,
    DiscL2Hickernell,
    DiscL2Star,
    DiscL2Symmetric,
    DiscL2Unanchored,
    Discrepancy,
    DiscShift1,
    DiscShift1Lattice,
    DiscShift2,
    DiscShift2Lattice,
    DiscShiftBaker1,
    DiscShiftBaker1Lattice,
    Palpha,
    Searcher,
    SearcherCBC,
    SearcherKorobov,
)
from qmcsim.errors import (
    ConcurrentModificationError,
    EventNotFoundError,
    IllegalStateError,
    InvalidSeedError,
    QmcSimError,
    UnsupportedParameterError,
)
from qmcsim.hups import ArrayPointSet, KorobovLattice, PointSet, Rank1Lattice
from qmcsim.randvar import (
    BernoulliGen,
    ErlangGen,
    ExponentialGen,
    HyperExponentialGen,
    NormalGen,
    RandomVariateGen,
    TriangularGen,
    UniformGen,
)
from qmcsim.rng import (
    MRG31k3p,
    MRG32k3a,
    RandomStream,
    RandomStreamManager,
    SeedSequence,
    WELL607,
    WELL1024,
    reset_package_seeds,
)
from qmcsim.simevents import DoublyLinked, Event, EventList, RedblackTree, Simulator
from qmcsim.stat import Tally

__version__ = "0.1.0"
__all__ = [
    # Random streams
    "RandomStream",
    "SeedSequence",
    "reset_package_seeds",
    "RandomStreamManager",
    "MRG32k3a",
    "MRG31k3p",
    "WELL607",
    "WELL1024",
    # Random variates
    "RandomVariateGen",
    "UniformGen",
    "BernoulliGen",
    "ExponentialGen",
    "ErlangGen",
    "HyperExponentialGen",
    "NormalGen",
    "TriangularGen",
    # Point sets
    "PointSet",
    "ArrayPointSet",
    "Rank1Lattice",
    "KorobovLattice",
    # Discrepancies
    "DEGENERATE",
    "Discrepancy",
    "DiscL2Hickernell",
    "DiscL2Unanchored",
    "DiscL2Star",
    "DiscL2Symmetric",
    "DiscShift1",
    "DiscShift1Lattice",
    "DiscShift2",
    "DiscShift2Lattice",
    "DiscShiftBaker1",
    "DiscShiftBaker1Lattice",
    "Palpha",
    # Lattice searches
    "Searcher",
    "SearcherKorobov",
    "SearcherCBC",
    # Simulation
    "Event",
    "EventList",
    "DoublyLinked",
    "RedblackTree",
    "Simulator",
    # Statistics
    "Tally",
    # Configuration and errors
    "ReductionConfig",
    "DEFAULT_CONFIG",
    "QmcSimError",
    "InvalidSeedError",
    "UnsupportedParameterError",
    "ConcurrentModificationError",
    "IllegalStateError",
    "EventNotFoundError",
]
