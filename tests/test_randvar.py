"""
Tests for the random variate generators.
"""

import math

import pytest

from qmcsim.randvar import (
    BernoulliGen,
    ErlangGen,
    ExponentialGen,
    HyperExponentialGen,
    NormalGen,
    TriangularGen,
    UniformGen,
)
from qmcsim.rng import MRG32k3a, reset_package_seeds
from qmcsim.stat import Tally


def sample_tally(gen, n=20000) -> Tally:
    tally = Tally()
    for _ in range(n):
        tally.add(gen())
    return tally


class TestUniformGen:
    """Tests for UniformGen."""

    def setup_method(self) -> None:
        reset_package_seeds()

    def test_range(self) -> None:
        """Values lie within [lo, hi]."""
        gen = UniformGen(MRG32k3a(), 10.0, 20.0)
        for _ in range(1000):
            assert 10.0 <= gen() <= 20.0

    def test_reproducibility(self) -> None:
        """Resetting the package seeds replays the variates."""
        values1 = UniformGen(MRG32k3a()).next_array_of_double(100)
        reset_package_seeds()
        values2 = UniformGen(MRG32k3a()).next_array_of_double(100)
        assert values1 == values2

    def test_shares_stream(self) -> None:
        """Resetting the stream replays the generator."""
        stream = MRG32k3a()
        gen = UniformGen(stream, -1.0, 1.0)
        first = gen.next_array_of_double(10)
        stream.reset_start_stream()
        assert gen.next_array_of_double(10) == first

    def test_bad_bounds(self) -> None:
        """lo must be below hi."""
        with pytest.raises(ValueError):
            UniformGen(MRG32k3a(), 1.0, 1.0)

    def test_no_stream(self) -> None:
        """A generator needs a stream."""
        with pytest.raises(ValueError):
            UniformGen(None)


class TestExponentialGen:
    """Tests for ExponentialGen."""

    def setup_method(self) -> None:
        reset_package_seeds()

    def test_positive(self) -> None:
        """Values are positive."""
        gen = ExponentialGen(MRG32k3a(), 1.0)
        for _ in range(1000):
            assert gen() > 0

    def test_mean(self) -> None:
        """The sample mean is close to the requested mean."""
        tally = sample_tally(ExponentialGen(MRG32k3a(), 5.0))
        assert abs(tally.average - 5.0) < 0.2

    def test_inversion(self) -> None:
        """One uniform per value: x = -mean * ln(1 - u)."""
        stream = MRG32k3a()
        u = stream.clone().next_double()
        assert ExponentialGen(stream, 2.0)() == pytest.approx(-2.0 * math.log(1.0 - u))

    def test_bad_mean(self) -> None:
        """The mean must be positive."""
        with pytest.raises(ValueError):
            ExponentialGen(MRG32k3a(), 0.0)


class TestNormalGen:
    """Tests for NormalGen."""

    def setup_method(self) -> None:
        reset_package_seeds()

    def test_moments(self) -> None:
        """Sample mean and standard deviation match the parameters."""
        tally = sample_tally(NormalGen(MRG32k3a(), 100.0, 2.0))
        assert abs(tally.average - 100.0) < 0.1
        assert abs(tally.standard_deviation - 2.0) < 0.1

    def test_spare_value(self) -> None:
        """The second call of a pair uses no uniforms."""
        stream = MRG32k3a()
        gen = NormalGen(stream)
        gen()
        state = stream.state
        gen()
        assert stream.state == state

    def test_bad_std_dev(self) -> None:
        """The standard deviation must be positive."""
        with pytest.raises(ValueError):
            NormalGen(MRG32k3a(), 0.0, -1.0)


class TestErlangGen:
    """Tests for ErlangGen."""

    def setup_method(self) -> None:
        reset_package_seeds()

    def test_shape(self) -> None:
        """k = (mean / std_dev)^2."""
        assert ErlangGen(MRG32k3a(), 10.0, 5.0).k == 4
        assert ErlangGen(MRG32k3a(), 1.0, 5.0).k == 1

    def test_mean(self) -> None:
        """The sample mean is close to the requested mean."""
        tally = sample_tally(ErlangGen(MRG32k3a(), 10.0, 5.0))
        assert abs(tally.average - 10.0) < 0.3

    def test_bad_parameters(self) -> None:
        """Mean and standard deviation must be positive."""
        with pytest.raises(ValueError):
            ErlangGen(MRG32k3a(), 1.0, 0.0)


class TestHyperExponentialGen:
    """Tests for HyperExponentialGen."""

    def setup_method(self) -> None:
        reset_package_seeds()

    def test_mean(self) -> None:
        """The sample mean is close to the requested mean."""
        tally = sample_tally(HyperExponentialGen(MRG32k3a(), 4.0, 8.0), 50000)
        assert abs(tally.average - 4.0) < 0.3

    def test_requires_cv_above_one(self) -> None:
        """CV <= 1 is rejected."""
        with pytest.raises(ValueError):
            HyperExponentialGen(MRG32k3a(), 4.0, 4.0)


class TestOtherGenerators:
    """Tests for BernoulliGen and TriangularGen."""

    def setup_method(self) -> None:
        reset_package_seeds()

    def test_bernoulli_frequency(self) -> None:
        """True comes up with probability p."""
        gen = BernoulliGen(MRG32k3a(), 0.3)
        hits = sum(1 for _ in range(20000) if gen())
        assert abs(hits / 20000 - 0.3) < 0.02

    def test_bernoulli_bounds(self) -> None:
        """p outside [0, 1] is rejected; p = 0 never succeeds."""
        with pytest.raises(ValueError):
            BernoulliGen(MRG32k3a(), 1.5)
        gen = BernoulliGen(MRG32k3a(), 0.0)
        assert not any(gen() for _ in range(100))

    def test_triangular_range_and_mean(self) -> None:
        """Values lie in [a, b] with mean (a + b + c) / 3."""
        gen = TriangularGen(MRG32k3a(), 1.0, 7.0, 4.0)
        values = gen.next_array_of_double(20000)
        assert all(1.0 <= v <= 7.0 for v in values)
        assert abs(sum(values) / len(values) - 4.0) < 0.1

    def test_triangular_bad_mode(self) -> None:
        """The mode must lie between the limits."""
        with pytest.raises(ValueError):
            TriangularGen(MRG32k3a(), 0.0, 1.0, 2.0)

    def test_negative_count(self) -> None:
        """next_array_of_double rejects negative sizes."""
        with pytest.raises(ValueError):
            UniformGen(MRG32k3a()).next_array_of_double(-1)
