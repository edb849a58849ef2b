"""
Pytest configuration and fixtures for qmcsim.
"""

from typing import Iterator

import pytest

from qmcsim.rng import reset_package_seeds
from qmcsim.simevents import Simulator

# The four points used by the discrepancy regression baselines.
BASELINE_POINTS = [0.1, 0.3, 0.6, 0.9]


@pytest.fixture(autouse=True)
def fresh_package_state() -> Iterator[None]:
    """Every test starts from the documented package seeds and no default simulator."""
    reset_package_seeds()
    Simulator.reset_default()
    yield
    reset_package_seeds()
    Simulator.reset_default()


@pytest.fixture
def sim() -> Simulator:
    """A fresh simulator, initialised and ready to schedule events."""
    simulator = Simulator()
    simulator.init()
    return simulator


@pytest.fixture
def baseline_points() -> list[float]:
    return list(BASELINE_POINTS)
