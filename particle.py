# particle.py
"""
Holds the state of all particles in the simulation.

This module defines the ParticleSystem class, which stores particle data
(position and motion state) in NumPy arrays. A ParticleSystem is treated
as a value: each tick builds a new one rather than editing the old one.
"""
import logging
import numpy as np

from bounds import Bounds

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, positions: np.ndarray, motion: np.ndarray):
#     - Inputs:
#       - positions: float64 array of shape (N, 2), bounds-local.
#       - motion: float64 array of shape (N, 2). Velocities in velocity
#         mode, accumulated accelerations in acceleration mode.
#     - Invariants: both arrays have the same shape (N, 2).
#
#   - generate(count: int, bounds: Bounds, rng: np.random.Generator) -> ParticleSystem:
#     - Outputs: `count` particles placed uniformly in [0, W) x [0, H)
#       with zero motion.


class ParticleSystem:
    """
    A container for all particles, storing their state as NumPy arrays.
    """
    def __init__(self, positions: np.ndarray, motion: np.ndarray):
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        motion = np.asarray(motion, dtype=np.float64).reshape(-1, 2)
        if positions.shape != motion.shape:
            msg = (
                f"Particle arrays disagree: positions {positions.shape}, "
                f"motion {motion.shape}."
            )
            logging.error(msg)
            raise ValueError(msg)

        self.positions = positions
        self.motion = motion

    @classmethod
    def generate(cls, count: int, bounds: Bounds, rng: np.random.Generator) -> "ParticleSystem":
        """
        Places `count` particles uniformly at random within the bounds.

        Args:
            count (int): Number of particles.
            bounds (Bounds): The simulation domain.
            rng (np.random.Generator): Source of randomness, owned by the caller.
        """
        positions = rng.uniform(
            low=[0, 0],
            high=[bounds.width, bounds.height],
            size=(count, 2)
        )
        motion = np.zeros((count, 2), dtype=np.float64)

        logging.info(f"ParticleSystem generated with {count} particles.")
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {positions.shape}, "
            f"Motion shape: {motion.shape}"
        )
        return cls(positions, motion)

    @property
    def particle_count(self) -> int:
        return self.positions.shape[0]

    def __len__(self) -> int:
        return self.particle_count

    def mean_speed(self) -> float:
        """Average magnitude of the motion state, 0.0 for an empty set."""
        if self.particle_count == 0:
            return 0.0
        return float(np.mean(np.linalg.norm(self.motion, axis=1)))
