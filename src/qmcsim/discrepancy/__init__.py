"""Discrepancies and figures of merit for point sets in the unit hypercube."""

from qmcsim.discrepancy.baker import DiscShiftBaker1, DiscShiftBaker1Lattice
from qmcsim.discrepancy.base import DEGENERATE, Discrepancy
from qmcsim.discrepancy.l2 import DiscL2Hickernell, DiscL2Star, DiscL2Symmetric, DiscL2Unanchored
from qmcsim.discrepancy.palpha import Palpha
from qmcsim.discrepancy.search import Searcher, SearcherCBC, SearcherKorobov
from qmcsim.discrepancy.shift import DiscShift1, DiscShift1Lattice, DiscShift2, DiscShift2Lattice

__all__ = [
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
    "Searcher",
    "SearcherKorobov",
    "SearcherCBC",
]
