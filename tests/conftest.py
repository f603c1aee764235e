import numpy as np
import pytest

from bounds import Bounds
from noise_field import NoiseField
from settings import SimulationConfig


@pytest.fixture
def small_bounds():
    return Bounds(240, 160)


@pytest.fixture(scope="session")
def built_field():
    return NoiseField.build(1234, Bounds(240, 160))


@pytest.fixture
def constant_field():
    """Factory for fields holding a single noise value everywhere."""
    def make(value, width=240, height=160):
        return NoiseField.from_values(np.full((height, width), value))
    return make


@pytest.fixture
def base_config():
    return SimulationConfig(seed=1234, particle_count=50)
