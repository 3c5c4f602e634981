"""
Tests for flat field extraction.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm3d.grid import GridState, initialize
from lbm3d.field import (
    extract_velocity_field,
    extract_density_field,
    extract_velocity_magnitude,
    velocity_field_to_grid,
)
from lbm3d.solver import step


@pytest.fixture
def coordinate_grid():
    """Grid whose velocity at (x, y, z) is (x, y, z)."""
    grid = GridState(3, 2, 4)
    for z in range(4):
        for y in range(2):
            for x in range(3):
                grid.velocity[:, z, y, x] = (x, y, z)
                grid.density[z, y, x] = 100 * z + 10 * y + x
    return grid


class TestVelocityField:
    """Test flat velocity buffer layout."""

    def test_shape(self, coordinate_grid):
        field = extract_velocity_field(coordinate_grid)
        assert field.shape == (24, 3)

    def test_x_fastest_ordering(self, coordinate_grid):
        field = extract_velocity_field(coordinate_grid)

        np.testing.assert_array_equal(field[0], [0, 0, 0])
        np.testing.assert_array_equal(field[1], [1, 0, 0])
        np.testing.assert_array_equal(field[3], [0, 1, 0])
        np.testing.assert_array_equal(field[6], [0, 0, 1])
        np.testing.assert_array_equal(field[23], [2, 1, 3])

    def test_rows_follow_cell_index(self, coordinate_grid):
        field = extract_velocity_field(coordinate_grid)

        for index in range(coordinate_grid.num_cells):
            x, y, z = coordinate_grid.cell_coordinates(index)
            np.testing.assert_array_equal(field[index], [x, y, z])

    def test_output_buffer(self, coordinate_grid):
        out = np.full((24, 3), -1.0)
        result = extract_velocity_field(coordinate_grid, out=out)

        assert result is out
        np.testing.assert_array_equal(out[5], [2, 1, 0])

    def test_output_buffer_shape_checked(self, coordinate_grid):
        with pytest.raises(ValueError):
            extract_velocity_field(coordinate_grid, out=np.zeros((24, 2)))

    def test_does_not_alias_grid(self, coordinate_grid):
        field = extract_velocity_field(coordinate_grid)
        field[:] = 99.0

        assert coordinate_grid.velocity[0, 0, 0, 1] == 1.0

    def test_extraction_does_not_disturb_steps(self):
        a = initialize(4, 4, 4)
        b = initialize(4, 4, 4)

        for _ in range(3):
            step(a, 1.0)
            extract_velocity_field(a)
            step(b, 1.0)

        np.testing.assert_array_equal(a.distributions, b.distributions)

    def test_roundtrip_to_volume(self, coordinate_grid):
        volume = velocity_field_to_grid(extract_velocity_field(coordinate_grid), 3, 2, 4)

        assert volume.shape == (4, 2, 3, 3)
        np.testing.assert_array_equal(volume[3, 1, 2], [2, 1, 3])

    def test_to_volume_shape_checked(self):
        with pytest.raises(ValueError):
            velocity_field_to_grid(np.zeros((10, 3)), 3, 2, 4)


class TestScalarFields:
    """Test density and magnitude buffers."""

    def test_density_ordering(self, coordinate_grid):
        density = extract_density_field(coordinate_grid)

        assert density.shape == (24,)
        assert density[coordinate_grid.cell_index(2, 1, 3)] == 312

    def test_velocity_magnitude(self, coordinate_grid):
        magnitude = extract_velocity_magnitude(coordinate_grid)

        assert np.isclose(magnitude[coordinate_grid.cell_index(2, 1, 3)], np.sqrt(14.0))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
