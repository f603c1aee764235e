import math

import numpy as np
import pytest

from flow import arrow_segments, direction, value_to_direction
from noise_field import NoiseField


@pytest.mark.parametrize("value", np.linspace(0.0, 1.0, 17))
def test_value_to_direction_is_unit_length(value):
    dx, dy = value_to_direction(value)
    assert math.hypot(dx, dy) == pytest.approx(1.0)


@pytest.mark.parametrize("value, expected", [
    (0.0, (1.0, 0.0)),
    (0.25, (0.0, 1.0)),
    (0.5, (-1.0, 0.0)),
    (0.75, (0.0, -1.0)),
    (1.0, (1.0, 0.0)),
])
def test_value_maps_to_angle_of_full_turn(constant_field, value, expected):
    field = constant_field(value)
    result = direction(field, 12, 34)
    assert result == pytest.approx(np.array(expected), abs=1e-12)


def test_direction_on_built_field_is_unit_length(built_field):
    for x, y in [(0, 0), (17, 99), (239, 159), (-1, -1), (240, 160)]:
        assert np.linalg.norm(direction(built_field, x, y)) == pytest.approx(1.0)


def test_arrow_segments_cover_padded_grid(built_field):
    starts, ends = arrow_segments(built_field, 24, 16, 10, 10, length=8.0, padding=1)
    assert starts.shape == ends.shape == (26 * 18, 2)
    assert starts[:, 0].min() == -5
    assert starts[:, 0].max() == 245
    assert starts[:, 1].min() == -5
    assert starts[:, 1].max() == 165
    lengths = np.linalg.norm(ends - starts, axis=1)
    assert lengths == pytest.approx(np.full(len(lengths), 8.0))


def test_arrow_segments_follow_field_direction(constant_field):
    field = constant_field(0.25)
    starts, ends = arrow_segments(field, 3, 2, 10, 10, length=5.0, padding=0)
    assert starts.shape == (6, 2)
    assert ends - starts == pytest.approx(np.tile([0.0, 5.0], (6, 1)), abs=1e-12)


def test_arrows_are_anchored_at_cell_centres():
    values = np.zeros((20, 20))
    # Only the centre pixel of the first cell points along +y.
    values[5, 5] = 0.25
    field = NoiseField.from_values(values)
    starts, ends = arrow_segments(field, 2, 2, 10, 10, length=4.0, padding=0)
    assert starts.tolist() == [[5.0, 5.0], [5.0, 15.0], [15.0, 5.0], [15.0, 15.0]]
    assert ends[0] == pytest.approx([5.0, 9.0], abs=1e-12)
    assert ends[3] == pytest.approx([19.0, 15.0], abs=1e-12)
