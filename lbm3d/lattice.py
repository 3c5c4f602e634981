"""
D3Q19 Lattice Constants and Utilities

Defines the D3Q19 lattice model for 3D fluid simulations.
"""
import numpy as np

# D3Q19 lattice velocities
#   0        rest
#   1 - 6    axis-aligned:  +x -x +y -y +z -z
#   7 - 18   face-diagonal, stored in opposite pairs:
#            xy, x-y, xz, x-z, yz, y-z

E = np.array([
    [0, 0, 0],
    [1, 0, 0], [-1, 0, 0],
    [0, 1, 0], [0, -1, 0],
    [0, 0, 1], [0, 0, -1],
    [1, 1, 0], [-1, -1, 0],
    [1, -1, 0], [-1, 1, 0],
    [1, 0, 1], [-1, 0, -1],
    [1, 0, -1], [-1, 0, 1],
    [0, 1, 1], [0, -1, -1],
    [0, 1, -1], [0, -1, 1],
], dtype=np.int32)

# Lattice velocity components
EX = np.ascontiguousarray(E[:, 0])
EY = np.ascontiguousarray(E[:, 1])
EZ = np.ascontiguousarray(E[:, 2])

# Lattice weights
W = np.array(
    [1/3]
    + [1/18] * 6
    + [1/36] * 12,
    dtype=np.float64,
)

# Opposite direction indices (for bounce-back)
OPPOSITE = np.array(
    [0, 2, 1, 4, 3, 6, 5, 8, 7, 10, 9, 12, 11, 14, 13, 16, 15, 18, 17],
    dtype=np.int32,
)

# Lattice sound speed squared
CS2 = 1.0 / 3.0
CS4 = CS2 * CS2

# Number of lattice velocities and spatial dimensions
Q = 19
D = 3


def opposite(k):
    """Index of the direction pointing against direction ``k``."""
    if not 0 <= k < Q:
        raise IndexError(f"direction index must be in [0, {Q}), got {k}")
    return int(OPPOSITE[k])
