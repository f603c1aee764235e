# noise_field.py
"""
Builds and samples the scalar noise map that drives the flow field.

This module defines the NoiseField class, a precomputed Perlin noise map
covering the simulation bounds. The map is built once per seed and is
never mutated afterwards; a new seed produces a new NoiseField.
"""
import logging
import numpy as np
from noise import pnoise2
from numba import jit
from typing import Optional

from bounds import Bounds
from constants import NOISE_WINDOW_SPAN, NOISE_OFFSET_RANGE

# --- Data Contracts ---
#
# class NoiseField:
#   - build(seed: int, bounds: Bounds, octaves: int = 1, seamless: bool = True) -> NoiseField:
#     - Inputs:
#       - seed: u32 master seed for the map.
#       - bounds: The simulation bounds; one sample per pixel.
#     - Outputs: A new NoiseField.
#     - Invariants:
#       - Identical inputs produce bit-for-bit identical values.
#       - self.values is a read-only float64 array of shape (H, W) with
#         every value in [0, 1].
#       - When seamless, opposite edges of the map are continuous.
#
#   - get(self, x: int, y: int) -> float:
#     - Inputs: Pixel coordinates. Out-of-range coordinates wrap around.
#     - Outputs: The noise value at (x, y), in [0, 1].
#
# lookup(values, x, y) -> float:
#   - Numba-jitted field read shared by NoiseField.get and the integration
#     kernels in simulation.py.

# Lattice period used when the map is not seamless. This is the noise
# library's own default, far larger than the sampling window.
_NON_SEAMLESS_REPEAT = 1024


@jit(nopython=True)
def lookup(values, x, y):
    """
    Reads the noise value at pixel (x, y), wrapping out-of-range coordinates.
    """
    height, width = values.shape
    ix = int(np.floor(x)) % width
    iy = int(np.floor(y)) % height
    return values[iy, ix]


class NoiseField:
    """
    A static 2D noise map over the simulation bounds.
    """
    def __init__(self, values: np.ndarray, seed: int = 0, octaves: int = 1, seamless: bool = False):
        """
        Wraps a precomputed (H, W) array of values in [0, 1].

        Use NoiseField.build to generate a map from a seed.
        """
        values = np.array(values, dtype=np.float64, copy=True)
        if values.ndim != 2 or values.size == 0:
            msg = f"Noise values must be a non-empty 2D array, got shape {values.shape}."
            logging.error(msg)
            raise ValueError(msg)
        values.setflags(write=False)

        self.values = values
        self.seed = seed
        self.octaves = octaves
        self.seamless = seamless

    @property
    def width(self) -> int:
        return self.values.shape[1]

    @property
    def height(self) -> int:
        return self.values.shape[0]

    @classmethod
    def from_values(cls, values: np.ndarray, seed: int = 0) -> "NoiseField":
        return cls(values, seed=seed)

    @classmethod
    def build(cls, seed: int, bounds: Bounds, octaves: int = 1, seamless: bool = True) -> "NoiseField":
        """
        Generates a Perlin noise map for the given seed and bounds.

        Pixel coordinates are scaled into a window NOISE_WINDOW_SPAN lattice
        units wide and shifted by two per-axis offsets drawn from the seed.
        In seamless mode the lattice repeats with the window span, so the
        map tiles across the domain edges.

        Args:
            seed (int): Master seed for the map.
            bounds (Bounds): The domain to cover, one sample per pixel.
            octaves (int): Number of Perlin octaves to sum.
            seamless (bool): Whether the map should tile across its edges.
        """
        width, height = bounds.pixel_size

        # The same seed always yields the same offsets.
        rng = np.random.default_rng(seed)
        offset_x, offset_y = rng.uniform(0.0, NOISE_OFFSET_RANGE, size=2)
        # The permutation table only holds 256 distinct bases.
        base = int(seed) & 0xFF
        repeat = NOISE_WINDOW_SPAN if seamless else _NON_SEAMLESS_REPEAT

        scale_x = NOISE_WINDOW_SPAN / width
        scale_y = NOISE_WINDOW_SPAN / height

        values = np.empty((height, width), dtype=np.float64)
        for y in range(height):
            ny = float(offset_y + y * scale_y)
            for x in range(width):
                nx = float(offset_x + x * scale_x)
                values[y, x] = pnoise2(
                    nx, ny,
                    octaves=octaves,
                    repeatx=repeat,
                    repeaty=repeat,
                    base=base
                )

        # Perlin output is roughly [-1, 1]; fold it into [0, 1].
        np.clip(values * 0.5 + 0.5, 0.0, 1.0, out=values)

        logging.info(
            f"NoiseField built for seed {seed} ({width}x{height}, "
            f"octaves={octaves}, seamless={seamless})."
        )
        logging.debug(
            f"Noise offsets: ({offset_x:.3f}, {offset_y:.3f}), base {base}. "
            f"Value range: [{values.min():.3f}, {values.max():.3f}]"
        )
        return cls(values, seed=seed, octaves=octaves, seamless=seamless)

    def get(self, x: int, y: int) -> float:
        """Returns the noise value at (x, y); coordinates wrap around the map."""
        return float(lookup(self.values, float(x), float(y)))
