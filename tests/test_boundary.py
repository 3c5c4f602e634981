"""
Tests for the box-face bounce-back handler.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm3d.lattice import E, Q, OPPOSITE, W
from lbm3d.boundary import (
    is_boundary_node,
    create_box_walls,
    apply_bounce_back,
    apply_bounce_back_fast,
)

BOUNCE_BACK = [apply_bounce_back, apply_bounce_back_fast]


class TestBoundaryNodes:
    """Test boundary node detection."""

    def test_faces_edges_corners(self):
        assert is_boundary_node(0, 2, 2, 5, 5, 5)
        assert is_boundary_node(4, 2, 2, 5, 5, 5)
        assert is_boundary_node(2, 0, 4, 5, 5, 5)
        assert is_boundary_node(0, 0, 0, 5, 5, 5)
        assert not is_boundary_node(2, 2, 2, 5, 5, 5)
        assert not is_boundary_node(1, 3, 1, 5, 5, 5)

    def test_mask_matches_predicate(self):
        width, height, depth = 5, 4, 3
        mask = create_box_walls(width, height, depth)

        assert mask.shape == (depth, height, width)
        for z in range(depth):
            for y in range(height):
                for x in range(width):
                    assert mask[z, y, x] == is_boundary_node(x, y, z, width, height, depth)

    def test_interior_count(self):
        mask = create_box_walls(6, 5, 4)
        assert np.count_nonzero(~mask) == 4 * 3 * 2


@pytest.mark.parametrize("bounce_back", BOUNCE_BACK)
class TestBounceBack:
    """Test reflection of wall populations into the domain."""

    def test_outgoing_population_reflected_into_neighbor(self, bounce_back):
        """Wall node at x = 0 with 5.0 heading -x feeds +x of cell x = 1."""
        f = np.zeros((Q, 4, 4, 4))
        f[2, 1, 1, 0] = 5.0  # direction (-1, 0, 0) at (0, 1, 1)

        f_new = bounce_back(f)

        assert f_new[1, 1, 1, 1] == 5.0  # direction (1, 0, 0) at (1, 1, 1)
        assert f_new[2, 1, 1, 0] == 5.0
        assert np.count_nonzero(f_new) == 2

    def test_each_direction_reflects_opposite_slot(self, bounce_back):
        for k in range(1, Q):
            f = np.zeros((Q, 3, 3, 3))
            # Corner node: every direction with a positive-or-zero component is in bounds
            f[OPPOSITE[k], 0, 0, 0] = 1.0

            f_new = bounce_back(f)

            x, y, z = E[k]
            if min(x, y, z) >= 0:
                assert f_new[k, z, y, x] == 1.0
            else:
                assert np.count_nonzero(f_new) == 1

    def test_interior_node_does_not_emit(self, bounce_back):
        f = np.zeros((Q, 5, 5, 5))
        f[:, 2, 2, 2] = 1.0

        f_new = bounce_back(f)

        np.testing.assert_array_equal(f_new, f)

    def test_reads_pre_pass_values(self, bounce_back):
        """Writes into one wall node are not re-emitted in the same pass."""
        f = np.zeros((Q, 1, 1, 3))
        f[1, 0, 0, 1] = 7.0   # slot +x of (1, 0, 0), rewritten from (0, 0, 0)
        f[2, 0, 0, 0] = 2.0   # -x at (0, 0, 0): lands in slot +x of (1, 0, 0)

        f_new = bounce_back(f)

        assert f_new[1, 0, 0, 1] == 2.0
        # (1, 0, 0) is itself a wall node (ny = nz = 1); it emits its
        # pre-pass -x population (0.0) into +x of (2, 0, 0), not 7.0 or 2.0
        assert f_new[1, 0, 0, 2] == 0.0
        # (2, 0, 0) reflects its pre-pass +x population into -x of (1, 0, 0)
        assert f_new[2, 0, 0, 1] == f[1, 0, 0, 2]

    def test_rest_equilibrium_unchanged(self, bounce_back):
        f = np.broadcast_to(W[:, None, None, None], (Q, 4, 5, 6)).copy()

        f_new = bounce_back(f)

        np.testing.assert_array_equal(f_new, f)

    def test_input_not_modified(self, bounce_back):
        rng = np.random.default_rng(0)
        f = rng.random((Q, 3, 4, 5))
        f_before = f.copy()

        bounce_back(f)

        np.testing.assert_array_equal(f, f_before)

    def test_custom_mask(self, bounce_back):
        f = np.zeros((Q, 3, 3, 3))
        f[2, 1, 1, 1] = 4.0
        mask = np.zeros((3, 3, 3), dtype=bool)
        mask[1, 1, 1] = True

        f_new = bounce_back(f, mask)

        assert f_new[1, 1, 1, 2] == 4.0


def test_bounce_back_fast_equals_standard():
    rng = np.random.default_rng(11)
    f = rng.random((Q, 4, 5, 6))

    np.testing.assert_allclose(apply_bounce_back_fast(f), apply_bounce_back(f), rtol=1e-14)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
