import numpy as np
import pytest

from bounds import Bounds
from particle import ParticleSystem


def test_generate_places_particles_uniformly_inside_bounds():
    bounds = Bounds(300, 200)
    particles = ParticleSystem.generate(2000, bounds, np.random.default_rng(7))

    assert particles.particle_count == len(particles) == 2000
    assert particles.positions.shape == (2000, 2)
    assert np.all(particles.positions >= 0.0)
    assert np.all(particles.positions[:, 0] < 300)
    assert np.all(particles.positions[:, 1] < 200)
    # Roughly centered, as a uniform draw should be
    assert particles.positions[:, 0].mean() == pytest.approx(150, abs=15)
    assert particles.positions[:, 1].mean() == pytest.approx(100, abs=10)


def test_generate_starts_motionless():
    particles = ParticleSystem.generate(10, Bounds(10, 10), np.random.default_rng(0))
    assert np.array_equal(particles.motion, np.zeros((10, 2)))
    assert particles.mean_speed() == 0.0


def test_generate_is_reproducible_from_generator_seed():
    a = ParticleSystem.generate(5, Bounds(50, 50), np.random.default_rng(3))
    b = ParticleSystem.generate(5, Bounds(50, 50), np.random.default_rng(3))
    assert np.array_equal(a.positions, b.positions)


def test_generate_empty_set():
    particles = ParticleSystem.generate(0, Bounds(50, 50), np.random.default_rng(3))
    assert particles.positions.shape == (0, 2)
    assert particles.mean_speed() == 0.0


def test_mismatched_arrays_are_rejected():
    with pytest.raises(ValueError):
        ParticleSystem(np.zeros((3, 2)), np.zeros((2, 2)))


def test_mean_speed():
    particles = ParticleSystem([[0, 0], [1, 1]], [[3, 4], [0, 1]])
    assert particles.mean_speed() == pytest.approx(3.0)
