"""
D3Q19 Lattice Boltzmann fluid core.

Typical use::

    from lbm3d import initialize, step, extract_velocity_field

    grid = initialize(16, 16, 16)
    for _ in range(100):
        step(grid, tau=1.0)
    field = extract_velocity_field(grid)
"""

from .errors import LBMError, InvalidConfigurationError, NumericalDivergenceError
from .lattice import E, W, OPPOSITE, Q, opposite
from .equilibrium import equilibrium
from .grid import (
    GridState,
    SimulationParameters,
    initialize,
    initialize_uniform,
    parity_initial_condition,
    rest_initial_condition,
)
from .solver import LBMSolver3D, step
from .field import extract_velocity_field
from .observables import check_numerical_stability

__version__ = "0.1.0"

__all__ = [
    "LBMError",
    "InvalidConfigurationError",
    "NumericalDivergenceError",
    "E",
    "W",
    "OPPOSITE",
    "Q",
    "opposite",
    "equilibrium",
    "GridState",
    "SimulationParameters",
    "initialize",
    "initialize_uniform",
    "parity_initial_condition",
    "rest_initial_condition",
    "LBMSolver3D",
    "step",
    "extract_velocity_field",
    "check_numerical_stability",
]
