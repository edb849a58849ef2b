"""
Tests for point sets.
"""

import numpy as np
import pytest

from qmcsim.hups import ArrayPointSet, KorobovLattice, Rank1Lattice
from qmcsim.hups.pointset import MAX_LATTICE_POINTS
from qmcsim.rng import MRG32k3a, reset_package_seeds


class TestRank1Lattice:
    """Tests for Rank1Lattice and KorobovLattice."""

    def test_coordinates(self) -> None:
        """Point i is (i * a / n) mod 1."""
        lattice = Rank1Lattice(8, [1, 3])
        assert lattice.num_points == 8
        assert lattice.dimension == 2
        assert lattice.coordinate(3, 1) == (3 * 3 % 8) / 8
        expected = np.array([[i / 8, (3 * i % 8) / 8] for i in range(8)])
        assert np.array_equal(lattice.to_array(), expected)

    def test_vector_reduced_and_truncated(self) -> None:
        """The generating vector is taken mod n and cut to s entries."""
        lattice = Rank1Lattice(7, [8, 10, 3], s=2)
        assert lattice.generating_vector == (1, 3)
        assert lattice.dimension == 2

    def test_bad_arguments(self) -> None:
        """n must be positive and s no larger than the vector."""
        with pytest.raises(ValueError):
            Rank1Lattice(0, [1])
        with pytest.raises(ValueError):
            Rank1Lattice(5, [1, 2], s=3)

    def test_size_limit(self) -> None:
        """Lattices are limited to n < 2^31 so integer products stay exact."""
        with pytest.raises(ValueError):
            Rank1Lattice(MAX_LATTICE_POINTS + 1, [1, 3])
        lattice = Rank1Lattice(MAX_LATTICE_POINTS, [1, MAX_LATTICE_POINTS - 1])
        i = MAX_LATTICE_POINTS - 2
        assert lattice.coordinate(i, 1) == 2 / MAX_LATTICE_POINTS

    def test_index_errors(self) -> None:
        """coordinate checks both indices."""
        lattice = Rank1Lattice(5, [1, 2])
        with pytest.raises(IndexError):
            lattice.coordinate(5, 0)
        with pytest.raises(IndexError):
            lattice.coordinate(0, 2)

    def test_korobov_vector(self) -> None:
        """The Korobov vector is (1, a, a^2, ...) mod n."""
        lattice = KorobovLattice(31, 12, 4)
        assert lattice.generating_vector == (1, 12, 144 % 31, 12**3 % 31)
        assert lattice.generator == 12
        assert len(lattice) == 31

    def test_random_shift(self) -> None:
        """A shift moves every point by the same vector modulo 1."""
        lattice = Rank1Lattice(16, [1, 5])
        stream = MRG32k3a()
        shift = stream.clone().next_array_of_double(2)
        lattice.add_random_shift(stream)
        assert np.allclose(lattice.shift, shift)
        shifted = lattice.to_array()
        assert np.allclose(shifted, (Rank1Lattice(16, [1, 5]).to_array() + shift) % 1.0)
        assert lattice.coordinate(2, 1) == pytest.approx(shifted[2, 1])
        lattice.clear_random_shift()
        assert lattice.shift is None
        assert lattice.coordinate(0, 0) == 0.0


class TestArrayPointSet:
    """Tests for ArrayPointSet."""

    def test_one_dimensional_input(self) -> None:
        """A flat list becomes an (n, 1) point set."""
        points = ArrayPointSet([0.1, 0.5, 0.9])
        assert points.num_points == 3
        assert points.dimension == 1
        assert points.coordinate(1, 0) == 0.5

    def test_to_array_is_a_copy(self) -> None:
        """Callers may modify the returned array."""
        points = ArrayPointSet([[0.1, 0.2], [0.3, 0.4]])
        arr = points.to_array()
        arr[0, 0] = 0.9
        assert points.coordinate(0, 0) == 0.1

    def test_from_stream(self) -> None:
        """Monte Carlo points take s successive uniforms each."""
        values = MRG32k3a().next_array_of_double(6)
        reset_package_seeds()
        points = ArrayPointSet.from_stream(MRG32k3a(), 3, 2)
        assert points.to_array().ravel().tolist() == values

    def test_bad_shape(self) -> None:
        """Only 1-D and 2-D inputs are accepted."""
        with pytest.raises(ValueError):
            ArrayPointSet(np.zeros((2, 2, 2)))

    def test_str(self) -> None:
        """The description gives size and dimension."""
        assert "number of points = 2, dimension = 2" in str(ArrayPointSet([[0.0, 0.0], [0.5, 0.5]]))
