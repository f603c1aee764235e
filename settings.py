# settings.py
"""
The tunable parameter set of the simulation.

This module defines SimulationConfig, a single immutable snapshot of every
experimental parameter. The settings surface (keyboard controls in the
visualizer, or config.json at startup) produces new snapshots; the
simulation only ever reads them.
"""
import logging
import random
from dataclasses import dataclass, fields, replace as dataclass_replace
from typing import Dict, Any

# --- Data Contracts ---
#
# class SimulationConfig:
#   - from_dict(params: Dict[str, Any]) -> SimulationConfig:
#     - Inputs: The "simulation_parameters" section of config.json.
#       A missing or null "seed" draws a random u32.
#     - Outputs: A validated SimulationConfig.
#     - Side Effects: Logs unknown keys and the chosen seed.
#     - Raises: ValueError for out-of-range values or an unknown mode.
#
#   - replace(self, **changes) -> SimulationConfig:
#     - Outputs: A new config with numeric values clamped into
#       PARAMETER_RANGES, the way a slider would bound them.
#
#   - validate(self) -> None:
#     - Raises: ValueError if any value is outside PARAMETER_RANGES.

SEED_MAX = 2**32 - 1

VELOCITY_MODE = "velocity"
ACCELERATION_MODE = "acceleration"
INTEGRATION_MODES = (VELOCITY_MODE, ACCELERATION_MODE)

# (min, max) inclusive for every numeric parameter.
PARAMETER_RANGES = {
    "seed": (0, SEED_MAX),
    "particle_count": (0, 1000),
    "particle_size": (0.1, 50.0),
    "max_speed": (0.0, 10.0),
    "steer_rate": (0.0, 1.0),
    "flow_influence": (0.0, 1.0),
    "max_acceleration": (0.0, 1.0),
    "noise_octaves": (1, 8),
}

INTEGER_PARAMETERS = ("seed", "particle_count", "noise_octaves")


@dataclass(frozen=True)
class SimulationConfig:
    """
    An immutable snapshot of the simulation parameters and display flags.
    """
    seed: int = 0
    particle_count: int = 400
    particle_size: float = 1.0
    max_speed: float = 1.0
    steer_rate: float = 0.1
    flow_influence: float = 1.0
    max_acceleration: float = 1.0
    integration_mode: str = VELOCITY_MODE
    noise_octaves: int = 1
    seamless: bool = True
    paused: bool = False
    draw_background: bool = True
    draw_particles: bool = True
    draw_flowfield: bool = False

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "SimulationConfig":
        """
        Builds a config from a parameter dictionary, validating every value.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in params.items():
            if key in known:
                values[key] = value
            else:
                logging.warning(f"Ignoring unknown simulation parameter '{key}'.")

        if values.get('seed') is None:
            values['seed'] = random_seed()
            logging.info(f"No seed configured. Using random seed {values['seed']}.")

        for key in INTEGER_PARAMETERS:
            if key in values:
                values[key] = int(values[key])

        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        """Checks every parameter against its range."""
        for key, (low, high) in PARAMETER_RANGES.items():
            value = getattr(self, key)
            if not low <= value <= high:
                msg = (
                    f"Configuration error: {key}={value} is outside "
                    f"its allowed range [{low}, {high}]."
                )
                logging.critical(msg)
                raise ValueError(msg)

        if self.integration_mode not in INTEGRATION_MODES:
            msg = (
                f"Configuration error: unknown integration_mode "
                f"'{self.integration_mode}'. Expected one of {INTEGRATION_MODES}."
            )
            logging.critical(msg)
            raise ValueError(msg)

    def replace(self, **changes) -> "SimulationConfig":
        """
        Returns a copy with the given changes, clamped into range.
        """
        for key, value in changes.items():
            if key in PARAMETER_RANGES:
                low, high = PARAMETER_RANGES[key]
                if key in INTEGER_PARAMETERS:
                    value = int(round(value))
                changes[key] = min(max(value, low), high)
        config = dataclass_replace(self, **changes)
        config.validate()
        return config

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def random_seed() -> int:
    """Draws a fresh seed over the full u32 range."""
    return random.randint(0, SEED_MAX)
