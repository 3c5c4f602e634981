"""
Collision Operators

BGK collision model for LBM.

The collision step models molecular interactions and drives the distribution
toward equilibrium. The relaxation time tau controls the viscosity:

    nu = c_s^2 * (tau - 0.5) * dt

where c_s^2 = 1/3 for D3Q19 and dt = 1 in lattice units.

Any tau > 0 defines a valid relaxation; physical (positive) viscosity
requires tau > 0.5.
"""

import math
import warnings

import numpy as np
from numba import njit, prange

from .errors import InvalidConfigurationError


def tau_from_viscosity(nu, dt=1.0, cs2=1.0/3.0):
    """
    Compute relaxation time from kinematic viscosity.

    tau = nu / (c_s^2 * dt) + 0.5

    Parameters
    ----------
    nu : float
        Kinematic viscosity
    dt : float
        Time step (default 1.0 in lattice units)
    cs2 : float
        Sound speed squared (default 1/3)

    Returns
    -------
    tau : float
        Relaxation time
    """
    return nu / (cs2 * dt) + 0.5


def viscosity_from_tau(tau, dt=1.0, cs2=1.0/3.0):
    """
    Compute kinematic viscosity from relaxation time.

    nu = c_s^2 * (tau - 0.5) * dt

    Raises
    ------
    InvalidConfigurationError
        If tau <= 0.5 (no positive viscosity corresponds to it)
    """
    if tau <= 0.5:
        raise InvalidConfigurationError(
            f"tau must be > 0.5 for a positive viscosity, got {tau}"
        )
    return cs2 * (tau - 0.5) * dt


def validate_tau(tau, name="tau"):
    """
    Validate a relaxation time.

    Parameters
    ----------
    tau : float
        Relaxation time to validate
    name : str
        Name for error messages

    Raises
    ------
    InvalidConfigurationError
        If tau is not a finite number > 0

    Returns
    -------
    tau : float
        Validated tau value
    """
    try:
        tau = float(tau)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{name} must be a number, got {tau!r}") from None

    if not math.isfinite(tau) or tau <= 0.0:
        raise InvalidConfigurationError(f"{name} must be a finite value > 0, got {tau}")

    if tau <= 0.5:
        warnings.warn(
            f"{name} = {tau} <= 0.5 corresponds to a negative viscosity; "
            f"the simulation is likely to diverge.",
            RuntimeWarning,
            stacklevel=2,
        )
    elif tau > 2.0:
        warnings.warn(
            f"{name} = {tau} is large, which may cause slow convergence. "
            f"Consider tau in range (0.5, 2.0) for efficiency.",
            RuntimeWarning,
            stacklevel=2,
        )
    return tau


def bgk_collision(f, f_eq, tau):
    """
    BGK (Bhatnagar-Gross-Krook) collision operator.

    f_out = f + (f_eq - f) / tau

    Parameters
    ----------
    f : ndarray
        Distribution functions (Q, nz, ny, nx)
    f_eq : ndarray
        Equilibrium distribution (Q, nz, ny, nx)
    tau : float
        Relaxation time (tau > 0)

    Returns
    -------
    f_out : ndarray
        Post-collision distribution
    """
    if tau <= 0.0:
        raise InvalidConfigurationError(f"tau must be > 0, got {tau}")

    omega = 1.0 / tau
    return f + omega * (f_eq - f)


@njit(parallel=True, cache=True)
def bgk_collision_numba(f, f_eq, omega, f_out):
    """
    Numba-accelerated BGK collision.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, nz, ny, nx)
    f_eq : ndarray
        Equilibrium distribution, shape (Q, nz, ny, nx)
    omega : float
        Relaxation frequency (1/tau)
    f_out : ndarray
        Output post-collision distribution, shape (Q, nz, ny, nx)
    """
    q, nz, ny, nx = f.shape

    for z in prange(nz):
        for y in range(ny):
            for x in range(nx):
                for k in range(q):
                    f_out[k, z, y, x] = f[k, z, y, x] + omega * (f_eq[k, z, y, x] - f[k, z, y, x])


def bgk_collision_fast(f, f_eq, tau):
    """Numba-accelerated BGK collision, same contract as :func:`bgk_collision`."""
    if tau <= 0.0:
        raise InvalidConfigurationError(f"tau must be > 0, got {tau}")

    omega = 1.0 / tau
    f_out = np.zeros_like(f)
    bgk_collision_numba(f, f_eq, omega, f_out)
    return f_out
