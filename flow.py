# flow.py
"""
Turns noise values into steering directions.

Both the simulation tick and the renderer sample the flow field through
this module. Every function here is pure and only reads the (immutable)
NoiseField, so the two callers never need to coordinate.
"""
import numpy as np
from numba import jit

from noise_field import NoiseField

# --- Data Contracts ---
#
# value_to_direction(value: float) -> Tuple[float, float]:
#   - Numba-jitted. Maps value in [0, 1] to the angle value * 2pi and
#     returns its unit vector (cos, sin).
#
# direction(field: NoiseField, x: float, y: float) -> np.ndarray:
#   - Outputs: Unit vector of shape (2,) for the field value at (x, y).
#
# arrow_segments(field, columns, rows, cell_width, cell_height, length, padding):
#   - Outputs: (starts, ends), two float64 arrays of shape (M, 2) where
#     M = (columns + 2 * padding) * (rows + 2 * padding).
#   - Invariants: starts are cell centres; |ends[i] - starts[i]| == length
#     for every arrow.


@jit(nopython=True)
def value_to_direction(value):
    angle = value * 2.0 * np.pi
    return np.cos(angle), np.sin(angle)


def direction(field: NoiseField, x: float, y: float) -> np.ndarray:
    """
    Samples the flow direction at (x, y).

    Returns:
        np.ndarray: A unit vector of shape (2,).
    """
    dx, dy = value_to_direction(field.get(x, y))
    return np.array([dx, dy], dtype=np.float64)


def arrow_segments(
    field: NoiseField,
    columns: int,
    rows: int,
    cell_width: float,
    cell_height: float,
    length: float = 8.0,
    padding: int = 1
):
    """
    Computes one flow arrow per grid cell for display.

    Arrows start at the cell centre and point along the direction sampled
    there. A ring of `padding` cells outside the grid is included so the field
    visibly continues past the edges; those cells sample the wrapped field.

    Returns:
        Tuple[np.ndarray, np.ndarray]: Arrow start and end points, each of
        shape (M, 2), in bounds-local coordinates.
    """
    xs = (np.arange(-padding, columns + padding) + 0.5) * cell_width
    ys = (np.arange(-padding, rows + padding) + 0.5) * cell_height
    grid_x, grid_y = np.meshgrid(xs, ys, indexing='ij')
    starts = np.column_stack([grid_x.ravel(), grid_y.ravel()]).astype(np.float64)

    directions = np.array([direction(field, x, y) for x, y in starts])
    directions = directions.reshape(-1, 2)
    ends = starts + directions * length
    return starts, ends
