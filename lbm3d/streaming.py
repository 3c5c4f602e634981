"""
Streaming Step Implementations

Propagation of distribution functions along lattice velocities inside a
closed box.

The streaming step moves each distribution f_i from site x to site x + e_i:
    f_i(x + e_i, t + dt) = f_i^out(x, t)

Streaming always writes into a fresh output array, so no value of the
current step is overwritten before it has been read.

A population whose target x + e_i lies outside the box never reaches a
neighbour. It is turned around at the wall and stored in the opposite slot
i* of the emitting cell. Those are precisely the slots that have no upstream
neighbour (x - e_i* = x + e_i is outside), so every output slot is written
exactly once and the total population is conserved.

Two schemes are implemented:
- Push: Write f_i from x to x + e_i (NumPy slices)
- Pull: Read f_i at x from x - e_i (Numba, one writer per output cell)
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, EZ, OPPOSITE, Q


def _shift_slices(shift, n):
    """Source and destination slices for a shift of -1, 0 or +1 along an axis of length n."""
    if shift > 0:
        return slice(0, n - 1), slice(1, n)
    if shift < 0:
        return slice(1, n), slice(0, n - 1)
    return slice(0, n), slice(0, n)


def neighbor_slices(k, shape):
    """
    Slices pairing every cell with its in-bounds neighbour along direction k.

    Parameters
    ----------
    k : int
        Direction index
    shape : tuple
        Grid shape (nz, ny, nx)

    Returns
    -------
    src : tuple of slice
        Cells x whose neighbour x + e_k is inside the grid
    dst : tuple of slice
        The corresponding neighbours x + e_k
    """
    nz, ny, nx = shape
    src_z, dst_z = _shift_slices(EZ[k], nz)
    src_y, dst_y = _shift_slices(EY[k], ny)
    src_x, dst_x = _shift_slices(EX[k], nx)
    return (src_z, src_y, src_x), (dst_z, dst_y, dst_x)


def stream_bounded(f):
    """
    Streaming step with solid walls on every face of the box.

    Uses push scheme: f_i(x + e_i) = f_i(x), with wall reflection of
    populations that would leave the domain.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, nz, ny, nx)

    Returns
    -------
    f_streamed : ndarray
        Post-streaming distribution
    """
    f_out = np.zeros_like(f)
    shape = f.shape[1:]

    for i in range(Q):
        src, dst = neighbor_slices(i, shape)
        f_out[i][dst] = f[i][src]

        # Populations with no in-bounds target bounce off the wall
        exiting = np.ones(shape, dtype=bool)
        exiting[src] = False
        if exiting.any():
            f_out[OPPOSITE[i]][exiting] = f[i][exiting]

    return f_out


@njit(parallel=True, cache=True)
def stream_bounded_numba(f, f_out, ex, ey, ez, opposite):
    """
    Numba-accelerated bounded streaming.

    Uses pull scheme; a slot without an in-bounds source takes the opposite
    population of its own cell.

    Parameters
    ----------
    f : ndarray
        Input distribution functions, shape (Q, nz, ny, nx)
    f_out : ndarray
        Output distribution functions, shape (Q, nz, ny, nx)
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
                        f_out[k, z, y, x] = f[k, z_src, y_src, x_src]
                    else:
                        f_out[k, z, y, x] = f[opposite[k], z, y, x]


def stream_bounded_fast(f):
    """
    Fast bounded streaming using Numba.

    Same contract as :func:`stream_bounded`.
    """
    f_out = np.zeros_like(f)
    stream_bounded_numba(f, f_out, EX, EY, EZ, OPPOSITE)
    return f_out


def collide_and_stream(f, tau, u_prev=None, use_fast=True):
    """
    Combined collision and streaming step.

    Order: moments, collision, then streaming.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, nz, ny, nx)
    tau : float
        Relaxation time
    u_prev : ndarray, optional
        Velocity of the previous step, kept for cells of vanishing density
    use_fast : bool
        Use the Numba kernels (default True)

    Returns
    -------
    f_out : ndarray
        Updated distribution
    rho : ndarray
        Pre-collision density field
    u : ndarray
        Pre-collision velocity field
    """
    from .equilibrium import compute_equilibrium, compute_equilibrium_fast
    from .observables import compute_macroscopic, compute_macroscopic_fast
    from .collision import bgk_collision, bgk_collision_fast

    if use_fast:
        rho, u = compute_macroscopic_fast(f, u_prev)
        f_eq = compute_equilibrium_fast(rho, u)
        f_coll = bgk_collision_fast(f, f_eq, tau)
        f_out = stream_bounded_fast(f_coll)
    else:
        rho, u = compute_macroscopic(f, u_prev)
        f_eq = compute_equilibrium(rho, u)
        f_coll = bgk_collision(f, f_eq, tau)
        f_out = stream_bounded(f_coll)

    return f_out, rho, u
