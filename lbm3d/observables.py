"""
Macroscopic Observable Extraction

Compute density, velocity, and derived quantities from distributions.

In LBM, macroscopic quantities are moments of the distribution function:
    - Density (0th moment): rho = sum_i(f_i)
    - Momentum (1st moment): rho*u = sum_i(f_i * e_i)

Cells whose density does not exceed DENSITY_EPSILON have no defined velocity.
Such cells keep their previous velocity when one is supplied, and get zero
velocity otherwise. The density itself is never clamped.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, EZ, Q
from .errors import NumericalDivergenceError

DENSITY_EPSILON = 1e-10


def compute_density(f):
    """
    Compute density field from distribution functions.

    rho = sum_i(f_i)

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, nz, ny, nx)

    Returns
    -------
    rho : ndarray
        Density field, shape (nz, ny, nx)
    """
    return np.sum(f, axis=0)


def compute_momentum(f):
    """
    Compute momentum density rho*u = sum_i(f_i * e_i).

    Returns
    -------
    momentum : ndarray
        Shape (3, nz, ny, nx)
    """
    momentum = np.zeros((3,) + f.shape[1:], dtype=np.float64)

    for i in range(Q):
        momentum[0] += f[i] * EX[i]
        momentum[1] += f[i] * EY[i]
        momentum[2] += f[i] * EZ[i]

    return momentum


def compute_velocity(f, rho=None, u_prev=None):
    """
    Compute velocity field from distribution functions.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, nz, ny, nx)
    rho : ndarray, optional
        Density field, shape (nz, ny, nx). If None, computed from f.
    u_prev : ndarray, optional
        Previous velocity field, shape (3, nz, ny, nx), used where the
        density is too small to divide by.

    Returns
    -------
    u : ndarray
        Velocity field, shape (3, nz, ny, nx)
    """
    if rho is None:
        rho = compute_density(f)

    momentum = compute_momentum(f)

    valid = rho > DENSITY_EPSILON
    rho_safe = np.where(valid, rho, 1.0)
    u = momentum / rho_safe

    fallback = u_prev if u_prev is not None else 0.0
    return np.where(valid, u, fallback)


def compute_macroscopic(f, u_prev=None):
    """
    Compute all macroscopic quantities from distribution functions.

    Returns
    -------
    rho : ndarray
        Density field, shape (nz, ny, nx)
    u : ndarray
        Velocity field, shape (3, nz, ny, nx)
    """
    rho = compute_density(f)
    u = compute_velocity(f, rho, u_prev)
    return rho, u


@njit(parallel=True, cache=True)
def compute_macroscopic_numba(f, rho, u, ex, ey, ez, eps):
    """
    Numba-accelerated macroscopic quantity computation.

    ``u`` holds the previous velocity on entry; cells with density at or
    below ``eps`` are left untouched.
    """
    q, nz, ny, nx = f.shape

    for z in prange(nz):
        for y in range(ny):
            for x in range(nx):
                rho_local = 0.0
                rho_ux = 0.0
                rho_uy = 0.0
                rho_uz = 0.0

                for k in range(q):
                    f_k = f[k, z, y, x]
                    rho_local += f_k
                    rho_ux += f_k * ex[k]
                    rho_uy += f_k * ey[k]
                    rho_uz += f_k * ez[k]

                rho[z, y, x] = rho_local

                if rho_local > eps:
                    u[0, z, y, x] = rho_ux / rho_local
                    u[1, z, y, x] = rho_uy / rho_local
                    u[2, z, y, x] = rho_uz / rho_local


def compute_macroscopic_fast(f, u_prev=None):
    """
    Fast macroscopic quantity computation using Numba.

    Same contract as :func:`compute_macroscopic`.
    """
    shape = f.shape[1:]
    rho = np.zeros(shape, dtype=np.float64)
    if u_prev is None:
        u = np.zeros((3,) + shape, dtype=np.float64)
    else:
        u = np.array(u_prev, dtype=np.float64, copy=True)

    ex = EX.astype(np.float64)
    ey = EY.astype(np.float64)
    ez = EZ.astype(np.float64)

    compute_macroscopic_numba(f, rho, u, ex, ey, ez, DENSITY_EPSILON)

    return rho, u


def compute_velocity_magnitude(u):
    """
    Compute velocity magnitude field.

    |u| = sqrt(ux^2 + uy^2 + uz^2)
    """
    return np.sqrt(np.sum(u * u, axis=0))


def get_total_mass(f):
    """Total population in the domain (conserved in a sealed box)."""
    return float(np.sum(f))


def get_total_momentum(f):
    """Total momentum (px, py, pz) of the distribution."""
    return tuple(float(p) for p in compute_momentum(f).sum(axis=(1, 2, 3)))


def get_kinetic_energy(rho, u):
    """Return total kinetic energy 0.5 * sum(rho * |u|^2)."""
    return 0.5 * float(np.sum(rho * np.sum(u * u, axis=0)))


def check_numerical_stability(grid, step=None):
    """
    Raise if the grid contains NaN or Inf values.

    This check is never run implicitly; drivers call it when they want
    divergence surfaced.

    Parameters
    ----------
    grid : GridState
        Grid to inspect
    step : int, optional
        Timestep number reported in the error

    Raises
    ------
    NumericalDivergenceError
        On the first non-finite field found
    """
    for name in ("distributions", "density", "velocity"):
        values = getattr(grid, name)
        if not np.all(np.isfinite(values)):
            bad = int(np.count_nonzero(~np.isfinite(values)))
            where = f" at step {step}" if step is not None else ""
            raise NumericalDivergenceError(
                f"{bad} non-finite value(s) in {name}{where}",
                field=name,
                step=step,
            )
