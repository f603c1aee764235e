# bounds.py
"""
The rectangular domain the simulation runs in.

Particles live in bounds-local coordinates [0, width) x [0, height); the
origin only matters to the renderer, which translates by it when drawing.
"""
import logging
import math
from dataclasses import dataclass

# --- Data Contracts ---
#
# class Bounds:
#   - Fields: width (float > 0), height (float > 0), origin_x, origin_y.
#   - Invariants: frozen; construction with a non-positive size raises
#     ValueError.


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle defining the toroidal domain."""
    width: float
    height: float
    origin_x: float = 0.0
    origin_y: float = 0.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            msg = f"Bounds must have a positive size, got {self.width}x{self.height}."
            logging.error(msg)
            raise ValueError(msg)

    @classmethod
    def from_window(cls, width: int, height: int, padding: int = 0) -> "Bounds":
        """Builds the simulation bounds from window geometry, inset by padding."""
        return cls(
            width=float(width - padding * 2),
            height=float(height - padding * 2),
            origin_x=float(padding),
            origin_y=float(padding),
        )

    @property
    def size(self):
        return self.width, self.height

    @property
    def pixel_size(self):
        """
        Integer (width, height) of the noise map covering these bounds.

        Rounded up so every position in [0, W) x [0, H) has its own pixel,
        and never smaller than one pixel per axis.
        """
        return max(1, math.ceil(self.width)), max(1, math.ceil(self.height))
