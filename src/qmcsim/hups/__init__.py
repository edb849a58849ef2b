"""Highly uniform point sets for quasi-Monte Carlo."""

from qmcsim.hups.pointset import ArrayPointSet, KorobovLattice, PointSet, Rank1Lattice

__all__ = ["PointSet", "ArrayPointSet", "Rank1Lattice", "KorobovLattice"]
