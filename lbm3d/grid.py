"""
Grid State

All mutable simulation data for a fixed-size 3D box.

Arrays follow the (z, y, x) axis order so that the C-contiguous layout has x
varying fastest:

    density        shape (nz, ny, nx)
    velocity       shape (3, nz, ny, nx)
    distributions  shape (Q, nz, ny, nx)

The flat position of a value in its raveled array is given by
:meth:`GridState.cell_index` and :meth:`GridState.distribution_index`.
"""

import numbers

import numpy as np

from .lattice import Q
from .equilibrium import compute_equilibrium, equilibrium_single_site
from .collision import validate_tau, viscosity_from_tau
from .errors import InvalidConfigurationError


def _validate_dimensions(width, height, depth):
    for name, value in (("width", width), ("height", height), ("depth", depth)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidConfigurationError(f"{name} must be > 0, got {value}")
    return int(width), int(height), int(depth)


class SimulationParameters:
    """
    Fixed parameters of one simulation instance.

    Parameters
    ----------
    width, height, depth : int
        Grid dimensions along x, y and z (all > 0)
    tau : float
        BGK relaxation time (> 0)
    """

    def __init__(self, width, height, depth, tau=1.0):
        self._width, self._height, self._depth = _validate_dimensions(width, height, depth)
        self._tau = validate_tau(tau)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def depth(self):
        return self._depth

    @property
    def tau(self):
        return self._tau

    @property
    def omega(self):
        """Relaxation frequency 1/tau."""
        return 1.0 / self._tau

    @property
    def viscosity(self):
        """Lattice kinematic viscosity, or None when tau <= 0.5."""
        if self._tau <= 0.5:
            return None
        return viscosity_from_tau(self._tau)

    @property
    def shape(self):
        """Array shape (depth, height, width)."""
        return (self._depth, self._height, self._width)

    @property
    def num_cells(self):
        return self._width * self._height * self._depth

    def __repr__(self):
        return (f"SimulationParameters(width={self._width}, height={self._height}, "
                f"depth={self._depth}, tau={self._tau})")


class GridState:
    """
    Density, velocity and distribution arrays of a width x height x depth box.

    The dimensions are validated before anything is allocated and cannot be
    changed afterwards. New grids hold zeros; use :func:`initialize` to set an
    initial condition.

    Attributes
    ----------
    density : ndarray
        Shape (nz, ny, nx)
    velocity : ndarray
        Shape (3, nz, ny, nx)
    distributions : ndarray
        Shape (Q, nz, ny, nx)
    """

    def __init__(self, width, height, depth):
        self._width, self._height, self._depth = _validate_dimensions(width, height, depth)

        shape = self.shape
        self.density = np.zeros(shape, dtype=np.float64)
        self.velocity = np.zeros((3,) + shape, dtype=np.float64)
        self.distributions = np.zeros((Q,) + shape, dtype=np.float64)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def depth(self):
        return self._depth

    @property
    def shape(self):
        return (self._depth, self._height, self._width)

    @property
    def num_cells(self):
        return self._width * self._height * self._depth

    def contains(self, x, y, z):
        return 0 <= x < self._width and 0 <= y < self._height and 0 <= z < self._depth

    def cell_index(self, x, y, z):
        """Flat cell index, x fastest: x + width * (y + height * z)."""
        if not self.contains(x, y, z):
            raise IndexError(f"cell ({x}, {y}, {z}) outside grid {self._width}x{self._height}x{self._depth}")
        return x + self._width * (y + self._height * z)

    def cell_coordinates(self, index):
        """Inverse of :meth:`cell_index`."""
        if not 0 <= index < self.num_cells:
            raise IndexError(f"cell index {index} outside [0, {self.num_cells})")
        x = index % self._width
        y = (index // self._width) % self._height
        z = index // (self._width * self._height)
        return x, y, z

    def distribution_index(self, x, y, z, k):
        """Flat index of population k of cell (x, y, z) in the raveled distributions."""
        if not 0 <= k < Q:
            raise IndexError(f"direction index must be in [0, {Q}), got {k}")
        return k * self.num_cells + self.cell_index(x, y, z)

    def cell_distributions(self, x, y, z):
        """View of the Q populations of one cell."""
        return self.distributions[:, z, y, x]

    def cell_velocity(self, x, y, z):
        return self.velocity[:, z, y, x]

    def copy(self):
        clone = GridState(self._width, self._height, self._depth)
        clone.density[...] = self.density
        clone.velocity[...] = self.velocity
        clone.distributions[...] = self.distributions
        return clone

    def __repr__(self):
        return f"GridState(width={self._width}, height={self._height}, depth={self._depth})"


def parity_initial_condition(x, y, z):
    """
    Reference initial condition.

    Unit density; each velocity component is 1 when its own coordinate is
    even and 0 when it is odd.
    """
    return 1.0, (
        1.0 if x % 2 == 0 else 0.0,
        1.0 if y % 2 == 0 else 0.0,
        1.0 if z % 2 == 0 else 0.0,
    )


def rest_initial_condition(rho0=1.0):
    """Initial condition factory for a fluid at rest with uniform density."""
    def initial_condition(x, y, z):
        return rho0, (0.0, 0.0, 0.0)
    return initial_condition


def initialize(width, height, depth, initial_condition=parity_initial_condition):
    """
    Allocate a grid and set every cell to equilibrium.

    Parameters
    ----------
    width, height, depth : int
        Grid dimensions
    initial_condition : callable
        ``(x, y, z) -> (rho0, (ux, uy, uz))``, called once per cell

    Returns
    -------
    grid : GridState
    """
    grid = GridState(width, height, depth)

    for z in range(depth):
        for y in range(height):
            for x in range(width):
                rho0, u0 = initial_condition(x, y, z)
                ux, uy, uz = (float(c) for c in u0)

                grid.density[z, y, x] = rho0
                grid.velocity[:, z, y, x] = (ux, uy, uz)
                grid.distributions[:, z, y, x] = equilibrium_single_site(rho0, (ux, uy, uz))

    return grid


def initialize_uniform(width, height, depth, rho=1.0, u=(0.0, 0.0, 0.0)):
    """
    Initialize with uniform density and velocity.

    Vectorised equivalent of :func:`initialize` with a constant condition.
    """
    grid = GridState(width, height, depth)

    grid.density[...] = rho
    for axis in range(3):
        grid.velocity[axis] = u[axis]
    grid.distributions[...] = compute_equilibrium(grid.density, grid.velocity)

    return grid
