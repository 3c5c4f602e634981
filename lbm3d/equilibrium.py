"""
Equilibrium Distribution Functions

Maxwell-Boltzmann equilibrium for the D3Q19 lattice.

The equilibrium distribution is the Maxwell-Boltzmann distribution truncated
to second order in velocity:

    f_i^eq = w_i * rho * [1 + (e_i · u)/c_s^2 + (e_i · u)^2/(2*c_s^4) - u^2/(2*c_s^2)]

With c_s^2 = 1/3 this is the familiar

    f_i^eq = w_i * rho * (1 + 3 (e_i · u) + 4.5 (e_i · u)^2 - 1.5 u^2)

where:
    - w_i are the lattice weights
    - e_i are the lattice velocities
    - rho is the density
    - u = (ux, uy, uz) is the macroscopic velocity
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, EZ, W, CS2, CS4, Q


def equilibrium(k, rho, u):
    """
    Equilibrium population of a single direction.

    Parameters
    ----------
    k : int
        Direction index in [0, Q)
    rho : float
        Density
    u : sequence of 3 floats
        Velocity (ux, uy, uz)

    Returns
    -------
    f_eq : float
    """
    ux, uy, uz = u
    eu = EX[k] * ux + EY[k] * uy + EZ[k] * uz
    u_sq = ux * ux + uy * uy + uz * uz
    return float(W[k] * rho * (
        1.0
        + eu / CS2
        + (eu * eu) / (2.0 * CS4)
        - u_sq / (2.0 * CS2)
    ))


def equilibrium_single_site(rho, u):
    """
    Compute equilibrium distribution for a single lattice site.

    Useful for initialization, boundary conditions and testing.

    Parameters
    ----------
    rho : float
        Density at the site
    u : sequence of 3 floats
        Velocity at the site

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q,)
    """
    ux, uy, uz = u
    eu = EX * ux + EY * uy + EZ * uz
    u_sq = ux * ux + uy * uy + uz * uz
    return W * rho * (
        1.0
        + eu / CS2
        + (eu * eu) / (2.0 * CS4)
        - u_sq / (2.0 * CS2)
    )


def compute_equilibrium(rho, u):
    """
    Compute equilibrium distribution for all lattice sites.

    Uses vectorized NumPy operations.

    Parameters
    ----------
    rho : ndarray
        Density field, shape (nz, ny, nx)
    u : ndarray
        Velocity field, shape (3, nz, ny, nx)

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q, nz, ny, nx)
        Structure of Arrays (SoA) layout, one contiguous block per direction.
    """
    f_eq = np.zeros((Q,) + rho.shape, dtype=np.float64)

    ux, uy, uz = u[0], u[1], u[2]
    u_sq = ux * ux + uy * uy + uz * uz

    for i in range(Q):
        eu = EX[i] * ux + EY[i] * uy + EZ[i] * uz
        f_eq[i] = W[i] * rho * (
            1.0
            + eu / CS2
            + (eu * eu) / (2.0 * CS4)
            - u_sq / (2.0 * CS2)
        )

    return f_eq


@njit(parallel=True, cache=True)
def compute_equilibrium_numba(rho, u, f_eq, ex, ey, ez, w, cs2, cs4):
    """
    Numba-accelerated equilibrium computation.

    Parameters
    ----------
    rho : ndarray
        Density field, shape (nz, ny, nx)
    u : ndarray
        Velocity field, shape (3, nz, ny, nx)
    f_eq : ndarray
        Output equilibrium distribution, shape (Q, nz, ny, nx)
    ex, ey, ez : ndarray
        Lattice velocity components
    w : ndarray
        Lattice weights
    cs2, cs4 : float
        Sound speed squared and fourth power
    """
    q, nz, ny, nx = f_eq.shape

    for z in prange(nz):
        for y in range(ny):
            for x in range(nx):
                rho_c = rho[z, y, x]
                ux = u[0, z, y, x]
                uy = u[1, z, y, x]
                uz = u[2, z, y, x]
                u_sq = ux * ux + uy * uy + uz * uz

                for k in range(q):
                    eu = ex[k] * ux + ey[k] * uy + ez[k] * uz
                    f_eq[k, z, y, x] = w[k] * rho_c * (
                        1.0
                        + eu / cs2
                        + (eu * eu) / (2.0 * cs4)
                        - u_sq / (2.0 * cs2)
                    )


def compute_equilibrium_fast(rho, u):
    """
    Fast equilibrium computation using Numba.

    Same contract as :func:`compute_equilibrium`.
    """
    f_eq = np.zeros((Q,) + rho.shape, dtype=np.float64)

    ex = EX.astype(np.float64)
    ey = EY.astype(np.float64)
    ez = EZ.astype(np.float64)

    compute_equilibrium_numba(
        np.ascontiguousarray(rho, dtype=np.float64),
        np.ascontiguousarray(u, dtype=np.float64),
        f_eq, ex, ey, ez, W, CS2, CS4,
    )

    return f_eq
