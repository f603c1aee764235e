# simulation.py
"""
Handles the core simulation logic: steering particles through the flow field.

This module defines the Numba-jitted integration kernels and the Simulation
class, which owns the noise field, the particle set and the current
settings snapshot. Each tick computes a complete new particle set and swaps
it in, so readers always see either the old or the new state.
"""
import logging
import numpy as np
from numba import jit
from typing import Callable, Dict, Optional

from bounds import Bounds
from constants import (
    TIME_MULTIPLIER, MAX_ELAPSED_SECONDS, MAX_DT, FLOW_ACCELERATION_CAP
)
from flow import value_to_direction
from noise_field import NoiseField, lookup
from particle import ParticleSystem
from settings import SimulationConfig, VELOCITY_MODE, ACCELERATION_MODE

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, config: SimulationConfig, bounds: Bounds):
#     - Side Effects: Builds the NoiseField and generates the particles.
#     - Raises: ValueError if a single tick could move a particle further
#       than the bounds (the toroidal wrap would be invalid).
#
#   - apply_settings(self, config: SimulationConfig) -> None:
#     - Side Effects: Replaces the config. Rebuilds the field on a seed,
#       octave or seamless change and regenerates the particles on a count
#       or integration mode change, synchronously.
#     - Raises: ValueError, leaving the previous state untouched.
#
#   - tick(self, elapsed_seconds: float) -> ParticleSystem:
#     - Side Effects: Unless paused, replaces self.particles with the
#       state one frame later.
#     - Invariants: Particle count is constant. Every position satisfies
#       0 <= x < W and 0 <= y < H afterwards.


@jit(nopython=True)
def _wrap(value, size):
    """Single-step toroidal wrap into [0, size)."""
    if value < 0.0:
        value += size
    # Also catches value + size rounding to exactly size.
    if value >= size:
        value -= size
    return value


@jit(nopython=True)
def _renormalize(x, y, length):
    """
    Scales (x, y) to exactly `length`. A zero vector has no direction and
    stays zero.
    """
    current = np.sqrt(x * x + y * y)
    if current == 0.0:
        return 0.0, 0.0
    scale = length / current
    return x * scale, y * scale


@jit(nopython=True)
def _clamp_length_max(x, y, max_length):
    """Caps the length of (x, y) at max_length, leaving shorter vectors alone."""
    length_sq = x * x + y * y
    if length_sq > max_length * max_length:
        scale = max_length / np.sqrt(length_sq)
        return x * scale, y * scale
    return x, y


@jit(nopython=True)
def _steer_velocity_numba(
    positions, velocities, field_values,
    flow_influence, steer_rate, max_speed, dt, width, height
):
    """
    Numba-jitted velocity-steering step.

    Each velocity turns toward a blend of the local flow direction and its
    own heading, then is renormalized to max_speed.
    """
    particle_count = positions.shape[0]
    new_positions = np.empty((particle_count, 2), dtype=np.float64)
    new_velocities = np.empty((particle_count, 2), dtype=np.float64)

    for i in range(particle_count):
        px = positions[i, 0]
        py = positions[i, 1]
        vx = velocities[i, 0]
        vy = velocities[i, 1]

        dir_x, dir_y = value_to_direction(lookup(field_values, px, py))

        # Target heading: flow direction blended with inertia
        steer_x = dir_x * flow_influence + vx * (1.0 - flow_influence)
        steer_y = dir_y * flow_influence + vy * (1.0 - flow_influence)
        prev_speed = np.sqrt(vx * vx + vy * vy)
        steer_x, steer_y = _renormalize(steer_x, steer_y, max(prev_speed, 1.0))

        new_vx = vx * (1.0 - steer_rate) + steer_x * steer_rate
        new_vy = vy * (1.0 - steer_rate) + steer_y * steer_rate
        new_vx, new_vy = _renormalize(new_vx, new_vy, max_speed)

        new_velocities[i, 0] = new_vx
        new_velocities[i, 1] = new_vy
        new_positions[i, 0] = _wrap(px + new_vx * dt, width)
        new_positions[i, 1] = _wrap(py + new_vy * dt, height)

    return new_positions, new_velocities


@jit(nopython=True)
def _accumulate_acceleration_numba(
    positions, accelerations, field_values,
    flow_cap, max_acceleration, dt, width, height
):
    """
    Numba-jitted acceleration-accumulation step.

    A small, capped flow contribution is added to each particle's
    accumulated acceleration every tick, which moves the particle directly.
    """
    particle_count = positions.shape[0]
    new_positions = np.empty((particle_count, 2), dtype=np.float64)
    new_accelerations = np.empty((particle_count, 2), dtype=np.float64)

    for i in range(particle_count):
        px = positions[i, 0]
        py = positions[i, 1]

        dir_x, dir_y = value_to_direction(lookup(field_values, px, py))
        dir_x, dir_y = _clamp_length_max(dir_x, dir_y, flow_cap)

        ax, ay = _clamp_length_max(
            accelerations[i, 0] + dir_x,
            accelerations[i, 1] + dir_y,
            max_acceleration
        )

        new_accelerations[i, 0] = ax
        new_accelerations[i, 1] = ay
        new_positions[i, 0] = _wrap(px + ax * dt, width)
        new_positions[i, 1] = _wrap(py + ay * dt, height)

    return new_positions, new_accelerations


def _integrate_velocity(particles, field, config, dt, bounds):
    positions, velocities = _steer_velocity_numba(
        particles.positions, particles.motion, field.values,
        float(config.flow_influence), float(config.steer_rate),
        float(config.max_speed), float(dt),
        float(bounds.width), float(bounds.height)
    )
    return ParticleSystem(positions, velocities)


def _integrate_acceleration(particles, field, config, dt, bounds):
    positions, accelerations = _accumulate_acceleration_numba(
        particles.positions, particles.motion, field.values,
        float(FLOW_ACCELERATION_CAP), float(config.max_acceleration), float(dt),
        float(bounds.width), float(bounds.height)
    )
    return ParticleSystem(positions, accelerations)


# Integration strategies, keyed by SimulationConfig.integration_mode.
INTEGRATORS: Dict[str, Callable[..., ParticleSystem]] = {
    VELOCITY_MODE: _integrate_velocity,
    ACCELERATION_MODE: _integrate_acceleration,
}

# Settings whose change requires a new NoiseField.
FIELD_SETTINGS = ("seed", "noise_octaves", "seamless")
# Settings whose change requires a new particle set.
PARTICLE_SETTINGS = ("particle_count", "integration_mode")


def max_step_displacement(config: SimulationConfig) -> float:
    """Largest distance a particle can travel in one tick under `config`."""
    if config.integration_mode == ACCELERATION_MODE:
        return config.max_acceleration * MAX_DT
    return config.max_speed * MAX_DT


def check_wrap_guard(config: SimulationConfig, bounds: Bounds) -> None:
    """
    Rejects configurations where one tick could cross the whole domain.

    The wrap is a single add/subtract of the domain size, which is only
    correct while per-tick displacement stays below it.
    """
    displacement = max_step_displacement(config)
    limit = min(bounds.width, bounds.height)
    if displacement >= limit:
        msg = (
            f"Configuration error: a particle could move {displacement:.2f}px "
            f"in one tick ({config.integration_mode} mode, dt <= {MAX_DT}), "
            f"which is not less than the smallest bounds dimension ({limit:.2f}px)."
        )
        logging.critical(msg)
        raise ValueError(msg)


class Simulation:
    """
    Owns the flow field, the particle set and the settings snapshot, and
    advances the particles one frame at a time.
    """
    def __init__(self, config: SimulationConfig, bounds: Bounds, field: Optional[NoiseField] = None):
        """
        Initializes the simulation environment.

        Args:
            config (SimulationConfig): The initial settings.
            bounds (Bounds): The toroidal domain.
            field (Optional[NoiseField]): A prebuilt field to start from.
                Built from config.seed when omitted. It is still replaced
                on a later seed change.
        """
        config.validate()
        check_wrap_guard(config, bounds)

        self.config = config
        self.bounds = bounds
        self.step_count = 0

        # All particle placement comes from one generator seeded by the
        # initial seed, so a run is reproducible from its config.
        self.rng = np.random.default_rng(config.seed)

        self.field = field if field is not None else self._build_field(config)
        self.particles = ParticleSystem.generate(config.particle_count, bounds, self.rng)

        logging.info("Simulation logic initialized and configuration validated.")
        logging.info(
            f"Domain {bounds.width:.0f}x{bounds.height:.0f}, "
            f"integration mode '{config.integration_mode}'."
        )

    def _build_field(self, config: SimulationConfig) -> NoiseField:
        return NoiseField.build(
            config.seed, self.bounds,
            octaves=config.noise_octaves,
            seamless=config.seamless
        )

    def regenerate_field(self) -> None:
        """Replaces the noise field with one built from the current config."""
        self.field = self._build_field(self.config)

    def regenerate_particles(self) -> None:
        """Replaces every particle with a fresh, motionless one."""
        self.particles = ParticleSystem.generate(
            self.config.particle_count, self.bounds, self.rng
        )

    def apply_settings(self, config: SimulationConfig) -> None:
        """
        Installs a new settings snapshot, rebuilding whatever it invalidates.
        """
        config.validate()
        check_wrap_guard(config, self.bounds)

        old = self.config
        changed = [
            key for key, value in config.as_dict().items()
            if getattr(old, key) != value
        ]
        if not changed:
            return

        for key in changed:
            logging.info(f"Setting '{key}' changed: {getattr(old, key)} -> {getattr(config, key)}")

        self.config = config
        if any(key in FIELD_SETTINGS for key in changed):
            self.regenerate_field()
        if any(key in PARTICLE_SETTINGS for key in changed):
            self.regenerate_particles()

    def tick(self, elapsed_seconds: float) -> ParticleSystem:
        """
        Advances the simulation by one frame.

        Args:
            elapsed_seconds (float): Wall time since the previous tick.
                Clamped to [0, MAX_ELAPSED_SECONDS].

        Returns:
            ParticleSystem: The current particle set.
        """
        if self.config.paused:
            return self.particles

        elapsed = min(max(elapsed_seconds, 0.0), MAX_ELAPSED_SECONDS)
        if elapsed < elapsed_seconds:
            logging.debug(f"Frame took {elapsed_seconds:.3f}s; clamped to {elapsed:.3f}s.")
        return self.step(elapsed * TIME_MULTIPLIER)

    def step(self, dt: float) -> ParticleSystem:
        """
        Integrates every particle over `dt` simulation time units and swaps
        in the result.
        """
        dt = min(max(dt, 0.0), MAX_DT)
        integrate = INTEGRATORS[self.config.integration_mode]
        self.particles = integrate(self.particles, self.field, self.config, dt, self.bounds)
        self.step_count += 1
        return self.particles
