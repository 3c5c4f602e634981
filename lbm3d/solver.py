"""
3D LBM Solver

One timestep on a GridState, and a small solver class that drives it.

A step consists of:
1. Moment update: density and velocity from the current distributions
2. BGK collision toward the local equilibrium
3. Bounded streaming into a second buffer
4. Bounce-back from the box faces, after streaming has fully completed

The grid arrays are replaced only once all four phases are done, so a reader
never observes a partially updated step.
"""

import time

import numpy as np

from .grid import SimulationParameters, initialize, parity_initial_condition
from .collision import validate_tau
from .streaming import collide_and_stream
from .boundary import apply_bounce_back, apply_bounce_back_fast, create_box_walls
from .observables import (
    check_numerical_stability,
    compute_velocity_magnitude,
    get_kinetic_energy,
    get_total_mass,
    get_total_momentum,
)
from .field import extract_velocity_field


def step(grid, tau, use_fast=True, wall_mask=None):
    """
    Advance a grid by exactly one timestep, in place.

    Parameters
    ----------
    grid : GridState
        Grid to update
    tau : float
        Relaxation time (> 0)
    use_fast : bool
        Use the Numba kernels (default True)
    wall_mask : ndarray, optional
        Precomputed boundary mask, shape (nz, ny, nx)

    Returns
    -------
    grid : GridState
        The same grid object

    Raises
    ------
    InvalidConfigurationError
        If tau <= 0
    """
    tau = validate_tau(tau)
    if wall_mask is None:
        wall_mask = create_box_walls(grid.width, grid.height, grid.depth)

    f_streamed, rho, u = collide_and_stream(
        grid.distributions, tau, u_prev=grid.velocity, use_fast=use_fast
    )

    if use_fast:
        f_next = apply_bounce_back_fast(f_streamed, wall_mask)
    else:
        f_next = apply_bounce_back(f_streamed, wall_mask)

    # Swap generations
    grid.density = rho
    grid.velocity = u
    grid.distributions = f_next

    return grid


class LBMSolver3D:
    """
    CPU-based D3Q19 LBM solver for a sealed box using NumPy/Numba.

    Parameters
    ----------
    params : SimulationParameters
        Grid dimensions and relaxation time
    initial_condition : callable, optional
        ``(x, y, z) -> (rho0, (ux, uy, uz))``; defaults to the parity pattern
    use_fast : bool
        Use Numba-accelerated functions (default True)

    Attributes
    ----------
    grid : GridState
        Simulation state
    step_count : int
        Completed timesteps
    total_time : float
        Wall-clock seconds spent in :meth:`step`
    """

    def __init__(self, params, initial_condition=parity_initial_condition, use_fast=True):
        if not isinstance(params, SimulationParameters):
            raise TypeError(f"params must be SimulationParameters, got {type(params).__name__}")

        self.params = params
        self.use_fast = use_fast
        self.grid = initialize(params.width, params.height, params.depth, initial_condition)
        self.wall_mask = create_box_walls(params.width, params.height, params.depth)

        # Statistics
        self.step_count = 0
        self.total_time = 0.0

    @property
    def tau(self):
        return self.params.tau

    def step(self):
        """
        Perform one LBM timestep.

        Returns
        -------
        dt : float
            Time taken for this step (seconds)
        """
        start = time.perf_counter()

        step(self.grid, self.params.tau, use_fast=self.use_fast, wall_mask=self.wall_mask)

        dt = time.perf_counter() - start
        self.step_count += 1
        self.total_time += dt

        return dt

    def run(self, num_steps, verbose=True, report_interval=100, check_interval=None):
        """
        Run simulation for specified number of steps.

        Parameters
        ----------
        num_steps : int
            Number of timesteps to run
        verbose : bool
            Print progress information
        report_interval : int
            Steps between progress reports
        check_interval : int, optional
            Steps between NaN/Inf checks; no checks when None

        Returns
        -------
        mlups : float
            Performance in Million Lattice Updates Per Second

        Raises
        ------
        NumericalDivergenceError
            If a stability check finds non-finite values
        """
        num_cells = self.params.num_cells
        start = time.perf_counter()

        for n in range(num_steps):
            self.step()

            if check_interval and (n + 1) % check_interval == 0:
                check_numerical_stability(self.grid, step=self.step_count)

            if verbose and (n + 1) % report_interval == 0:
                elapsed = time.perf_counter() - start
                mlups = (n + 1) * num_cells / elapsed / 1e6
                print(f"Step {n + 1}/{num_steps}, mass: {self.get_total_mass():.6f}, "
                      f"MLUPS: {mlups:.2f}")

        total = time.perf_counter() - start
        mlups = num_steps * num_cells / total / 1e6 if total > 0 else 0.0

        if verbose:
            print(f"Completed {num_steps} steps in {total:.2f}s")
            print(f"Performance: {mlups:.2f} MLUPS")

        return mlups

    def velocity_field(self, out=None):
        """Flat (N, 3) velocity buffer, x fastest."""
        return extract_velocity_field(self.grid, out=out)

    def get_velocity_magnitude(self):
        """Return velocity magnitude field, shape (nz, ny, nx)."""
        return compute_velocity_magnitude(self.grid.velocity)

    def get_total_mass(self):
        """Return total mass (conserved in a sealed box at rest)."""
        return get_total_mass(self.grid.distributions)

    def get_total_momentum(self):
        return get_total_momentum(self.grid.distributions)

    def get_kinetic_energy(self):
        return get_kinetic_energy(self.grid.density, self.grid.velocity)

    def max_velocity(self):
        return float(np.max(self.get_velocity_magnitude()))
