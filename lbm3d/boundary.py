"""
Boundary Condition Handlers

Bounce-back on the faces of the simulation box (no-slip, stationary walls).

A cell is a boundary node when any of its coordinates is 0 or the last index
of its axis. After streaming, every boundary node n pushes its opposite
populations back into the domain:

    f_k(n + e_k) = f_{k*}(n)        for every k with n + e_k inside the grid

where k* is the opposite direction of k. Edge and corner nodes lie on
several faces and simply contribute along every in-bounds direction.

The pass reads only the post-streaming input and writes into a copy. A given
(target cell, k) pair has exactly one source node n = target - e_k, so writes
never collide and their order is irrelevant.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, EZ, Q, OPPOSITE
from .streaming import neighbor_slices


def is_boundary_node(x, y, z, width, height, depth):
    """True when (x, y, z) lies on any face of a width x height x depth box."""
    return (
        x == 0 or x == width - 1
        or y == 0 or y == height - 1
        or z == 0 or z == depth - 1
    )


def create_box_walls(width, height, depth):
    """
    Create mask of the boundary nodes of a box.

    Parameters
    ----------
    width, height, depth : int
        Grid dimensions along x, y and z

    Returns
    -------
    wall_mask : ndarray
        Boolean mask, shape (depth, height, width)
    """
    wall_mask = np.zeros((depth, height, width), dtype=bool)

    wall_mask[0, :, :] = True
    wall_mask[-1, :, :] = True
    wall_mask[:, 0, :] = True
    wall_mask[:, -1, :] = True
    wall_mask[:, :, 0] = True
    wall_mask[:, :, -1] = True

    return wall_mask


def apply_bounce_back(f, wall_mask=None):
    """
    Apply bounce-back from boundary nodes to their in-bounds neighbours.

    Parameters
    ----------
    f : ndarray
        Post-streaming distribution functions, shape (Q, nz, ny, nx)
    wall_mask : ndarray, optional
        Boolean mask of boundary nodes, shape (nz, ny, nx).
        Defaults to all faces of the box.

    Returns
    -------
    f_new : ndarray
        Distribution with bounce-back applied
    """
    shape = f.shape[1:]
    if wall_mask is None:
        nz, ny, nx = shape
        wall_mask = create_box_walls(nx, ny, nz)

    f_new = f.copy()

    for i in range(Q):
        i_opp = OPPOSITE[i]
        src, dst = neighbor_slices(i, shape)
        from_wall = wall_mask[src]
        # Neighbour slot i takes the wall node's opposite population
        f_new[i][dst] = np.where(from_wall, f[i_opp][src], f_new[i][dst])

    return f_new


@njit(parallel=True, cache=True)
def apply_bounce_back_numba(f, f_out, wall_mask, ex, ey, ez, opposite):
    """
    Numba-accelerated bounce-back.

    Pull form: each cell gathers slot k from the node at x - e_k when that
    node is a wall node, so every output value has a single writer.

    Parameters
    ----------
    f : ndarray
        Input distribution, shape (Q, nz, ny, nx)
    f_out : ndarray
        Output distribution, shape (Q, nz, ny, nx); must hold a copy of f
    wall_mask : ndarray
        Boolean wall mask, shape (nz, ny, nx)
    ex, ey, ez : ndarray
        Lattice velocity components (integer)
    opposite : ndarray
        Opposite direction indices
    """
    q, nz, ny, nx = f.shape

    for z in prange(nz):
        for y in range(ny):
            for x in range(nx):
                for k in range(q):
                    x_src = x - ex[k]
                    y_src = y - ey[k]
                    z_src = z - ez[k]

                    if (x_src >= 0 and x_src < nx and y_src >= 0 and y_src < ny
                            and z_src >= 0 and z_src < nz):
                        if wall_mask[z_src, y_src, x_src]:
                            f_out[k, z, y, x] = f[opposite[k], z_src, y_src, x_src]


def apply_bounce_back_fast(f, wall_mask=None):
    """
    Fast bounce-back using Numba.

    Same contract as :func:`apply_bounce_back`.
    """
    if wall_mask is None:
        nz, ny, nx = f.shape[1:]
        wall_mask = create_box_walls(nx, ny, nz)

    f_out = f.copy()
    apply_bounce_back_numba(f, f_out, wall_mask, EX, EY, EZ, OPPOSITE)
    return f_out
