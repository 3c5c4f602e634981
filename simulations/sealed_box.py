"""
Sealed Box Simulation

Fluid in a closed box with no-slip bounce-back walls on all six faces.

Two scenarios:
- rest: uniform density, zero velocity. A fluid at rest in a sealed box
  must stay at rest.
- parity: the reference pattern where each velocity component is 1 on even
  coordinates of its axis and 0 on odd ones.
"""

import time
import sys
import os

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm3d.grid import SimulationParameters, parity_initial_condition, rest_initial_condition
from lbm3d.solver import LBMSolver3D
from lbm3d.errors import NumericalDivergenceError


def run_sealed_box(n=16, tau=1.0, num_steps=100, scenario='rest', verbose=True):
    """
    Run the sealed-box simulation.

    Parameters
    ----------
    n : int
        Grid size (n x n x n)
    tau : float
        Relaxation time
    num_steps : int
        Number of timesteps
    scenario : {'rest', 'parity'}
        Initial condition
    verbose : bool
        Print progress

    Returns
    -------
    solver : LBMSolver3D
        Solver object with results
    """
    if scenario == 'rest':
        initial_condition = rest_initial_condition(1.0)
    elif scenario == 'parity':
        initial_condition = parity_initial_condition
    else:
        raise ValueError(f"unknown scenario {scenario!r}")

    params = SimulationParameters(n, n, n, tau)

    if verbose:
        print("Sealed Box Simulation")
        print("=" * 50)
        print(f"Grid: {n} x {n} x {n}")
        print(f"Scenario: {scenario}")
        print(f"Tau: {tau}")
        print()

    solver = LBMSolver3D(params, initial_condition)
    mass_initial = solver.get_total_mass()

    start = time.perf_counter()
    try:
        solver.run(num_steps, verbose=verbose, report_interval=max(1, num_steps // 10),
                   check_interval=max(1, num_steps // 10))
    except NumericalDivergenceError as exc:
        if verbose:
            print(f"Diverged: {exc}")
        raise
    elapsed = time.perf_counter() - start

    if verbose:
        mass_final = solver.get_total_mass()
        print()
        print(f"Simulation time: {elapsed:.2f}s")
        print(f"Mass drift: {abs(mass_final - mass_initial) / mass_initial:.2e}")
        print(f"Max |u|: {solver.max_velocity():.3e}")
        print(f"Density range: [{np.min(solver.grid.density):.6f}, "
              f"{np.max(solver.grid.density):.6f}]")

    return solver


if __name__ == "__main__":
    solver = run_sealed_box(n=16, tau=1.0, num_steps=200, scenario='rest')

    from visualization.field_plots import plot_velocity_slice
    import matplotlib.pyplot as plt

    p = solver.params
    plot_velocity_slice(solver.velocity_field(), p.width, p.height, p.depth)
    plt.show()
