"""
Discrepancy demonstration.

Compares Monte Carlo points with Korobov lattices of the same size under
several discrepancies, estimates the L2-star discrepancy of a randomly
shifted lattice over independent shifts, and searches for the best Korobov
generators.

Pass a number to spread the pair sums over that many threads.
"""

from __future__ import annotations

import sys

from qmcsim import (
    ArrayPointSet,
    DiscL2Hickernell,
    DiscL2Star,
    DiscL2Unanchored,
    DiscShift1,
    DiscShift1Lattice,
    DiscShiftBaker1Lattice,
    KorobovLattice,
    MRG32k3a,
    Palpha,
    ReductionConfig,
    SearcherKorobov,
    Tally,
    reset_package_seeds,
)

DIMENSION = 4
SIZES = [(127, 26), (251, 46), (509, 108), (1021, 76)]


def compare(config: ReductionConfig) -> None:
    """Print each discrepancy for Monte Carlo points and for a lattice."""
    print("=" * 60)
    print("MONTE CARLO VERSUS LATTICE")
    print("=" * 60)
    print()

    engines = [
        DiscL2Star(config=config),
        DiscL2Unanchored(config=config),
        DiscL2Hickernell(config=config),
    ]
    stream = MRG32k3a("points")
    for n, a in SIZES:
        mc = ArrayPointSet.from_stream(stream, n, DIMENSION)
        lattice = KorobovLattice(n, a, DIMENSION)
        print(f"n = {n}, lattice generator a = {a}")
        for engine in engines:
            print(f"  {type(engine).__name__:18s} MC {engine(mc):.6f}   lattice {engine(lattice):.6f}")
        print(f"  {'P2':18s} lattice {Palpha().compute(lattice):.3e}")
        print()


def shifted_lattice(config: ReductionConfig, shifts: int = 20) -> None:
    """
    L2-star discrepancy of a lattice over independent random shifts.

    The shift discrepancy only depends on the pairwise differences, so it
    is the same for every shift.
    """
    print("=" * 60)
    print("RANDOMLY SHIFTED LATTICE")
    print("=" * 60)
    print()

    n, a = SIZES[1]
    lattice = KorobovLattice(n, a, DIMENSION)
    star = DiscL2Star(config=config)
    shift = DiscShift1(config=config)
    stream = MRG32k3a("shifts")
    values = Tally("L2-star discrepancy")
    print(f"Shift discrepancy without shift: {shift(lattice):.6f}")
    for _ in range(shifts):
        lattice.add_random_shift(stream)
        values.add(star(lattice))
    print(f"Shift discrepancy after {shifts} shifts: {shift(lattice):.6f}")
    lattice.clear_random_shift()

    print(values)
    print()


def search(config: ReductionConfig, s: int = DIMENSION) -> None:
    """Best Korobov generator for each size, with and without the baker folding."""
    print("=" * 60)
    print("KOROBOV SEARCH")
    print("=" * 60)
    print()

    for engine in (DiscShift1Lattice(config=config), DiscShiftBaker1Lattice(config=config)):
        print(type(engine).__name__)
        for n, _ in SIZES:
            searcher = SearcherKorobov(engine, n, prime_n=True)
            best = searcher.exhaust(s)
            print(f"  n = {n:5d}   a = {searcher.best_a:4d}   discrepancy {best:.6f}")
        print()


def main() -> None:
    workers = int(sys.argv[1]) if len(sys.argv) > 1 else 1
    config = ReductionConfig(workers=workers)
    reset_package_seeds()
    compare(config)
    shifted_lattice(config)
    search(config)


if __name__ == "__main__":
    main()
