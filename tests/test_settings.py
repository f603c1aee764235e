import dataclasses
import logging

import pytest

from settings import (
    SimulationConfig, PARAMETER_RANGES, SEED_MAX,
    VELOCITY_MODE, ACCELERATION_MODE
)


def test_from_dict_reads_known_parameters():
    config = SimulationConfig.from_dict({
        "seed": 99,
        "particle_count": 12,
        "max_speed": 2.5,
        "integration_mode": ACCELERATION_MODE,
    })
    assert config.seed == 99
    assert config.particle_count == 12
    assert config.max_speed == 2.5
    assert config.integration_mode == ACCELERATION_MODE
    assert config.steer_rate == SimulationConfig().steer_rate


def test_from_dict_draws_random_seed_when_missing():
    for params in ({}, {"seed": None}):
        config = SimulationConfig.from_dict(params)
        assert 0 <= config.seed <= SEED_MAX


def test_from_dict_ignores_unknown_keys(caplog):
    with caplog.at_level(logging.WARNING):
        config = SimulationConfig.from_dict({"seed": 1, "friction": 0.5})
    assert config.seed == 1
    assert "friction" in caplog.text


@pytest.mark.parametrize("key, value", [
    ("particle_count", 1001),
    ("steer_rate", 1.5),
    ("flow_influence", -0.1),
    ("max_speed", 11.0),
    ("max_acceleration", 2.0),
    ("seed", -1),
    ("noise_octaves", 0),
])
def test_from_dict_rejects_out_of_range_values(key, value):
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({"seed": 1, key: value})


def test_from_dict_rejects_unknown_mode():
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({"seed": 1, "integration_mode": "verlet"})


def test_replace_clamps_like_a_slider():
    config = SimulationConfig(seed=1)
    changed = config.replace(particle_count=5000, steer_rate=-3.0, max_speed=10.5)
    assert changed.particle_count == PARAMETER_RANGES["particle_count"][1]
    assert changed.steer_rate == 0.0
    assert changed.max_speed == 10.0
    # The previous snapshot is untouched.
    assert config.particle_count == 400


def test_replace_rounds_integer_parameters():
    config = SimulationConfig(seed=1).replace(particle_count=12.6, noise_octaves=2.2)
    assert config.particle_count == 13
    assert config.noise_octaves == 2


def test_replace_keeps_seed_in_u32_range():
    config = SimulationConfig(seed=1).replace(seed=2**40)
    assert config.seed == SEED_MAX


def test_replace_passes_flags_through():
    config = SimulationConfig(seed=1).replace(paused=True, draw_flowfield=True)
    assert config.paused and config.draw_flowfield


def test_config_is_frozen():
    config = SimulationConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.max_speed = 3.0


def test_as_dict_round_trips_through_from_dict():
    config = SimulationConfig(seed=5, integration_mode=VELOCITY_MODE, particle_count=3)
    assert SimulationConfig.from_dict(config.as_dict()) == config
