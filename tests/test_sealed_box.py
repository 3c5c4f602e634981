"""
End-to-end tests of the sealed-box solver.

A fluid at rest in a box with bounce-back walls on every face must stay at
rest, and the full step must conserve mass in that state.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm3d.errors import InvalidConfigurationError, NumericalDivergenceError
from lbm3d.grid import (
    SimulationParameters,
    initialize,
    initialize_uniform,
    rest_initial_condition,
)
from lbm3d.observables import check_numerical_stability, get_total_mass
from lbm3d.solver import LBMSolver3D, step


class TestStep:
    """Test the functional step API."""

    def test_rest_box_stays_at_rest(self):
        """4x4x4, tau = 1, 100 steps, walls on every face."""
        grid = initialize(4, 4, 4, rest_initial_condition(1.0))

        for _ in range(100):
            step(grid, 1.0)

        np.testing.assert_allclose(grid.density, 1.0, atol=1e-10)
        np.testing.assert_allclose(grid.velocity, 0.0, atol=1e-10)

    def test_mass_conserved_at_rest(self):
        grid = initialize_uniform(5, 4, 3, rho=1.2)
        mass_initial = get_total_mass(grid.distributions)

        for _ in range(10):
            step(grid, 0.8)

        assert np.isclose(get_total_mass(grid.distributions), mass_initial, rtol=1e-12)

    def test_equilibrium_at_rest_is_steady(self):
        grid = initialize_uniform(4, 4, 4)
        f_initial = grid.distributions.copy()

        step(grid, 0.9)

        np.testing.assert_allclose(grid.distributions, f_initial, rtol=1e-13)

    def test_returns_same_grid(self):
        grid = initialize_uniform(3, 3, 3)
        assert step(grid, 1.0) is grid

    def test_updates_moments(self):
        grid = initialize(4, 4, 4)
        grid.density[...] = 0.0

        step(grid, 1.0)

        np.testing.assert_allclose(grid.density, 1.0, rtol=1e-12)

    def test_fast_equals_standard(self):
        a = initialize_uniform(4, 5, 6, u=(0.02, -0.01, 0.03))
        b = a.copy()

        for _ in range(5):
            step(a, 0.8, use_fast=True)
            step(b, 0.8, use_fast=False)

        np.testing.assert_allclose(a.distributions, b.distributions, rtol=1e-12, atol=1e-15)
        np.testing.assert_allclose(a.velocity, b.velocity, rtol=1e-10, atol=1e-14)

    @pytest.mark.parametrize("tau", [0.0, -1.0])
    def test_invalid_tau(self, tau):
        grid = initialize_uniform(3, 3, 3)
        before = grid.distributions.copy()

        with pytest.raises(InvalidConfigurationError):
            step(grid, tau)

        np.testing.assert_array_equal(grid.distributions, before)

    def test_deterministic(self):
        a = initialize(4, 4, 4)
        b = initialize(4, 4, 4)

        for _ in range(3):
            step(a, 1.0)
            step(b, 1.0)

        np.testing.assert_array_equal(a.distributions, b.distributions)


class TestDiagnostics:
    """Test the optional divergence check."""

    def test_finite_grid_passes(self):
        check_numerical_stability(initialize_uniform(3, 3, 3))

    def test_nan_detected(self):
        grid = initialize_uniform(3, 3, 3)
        grid.distributions[4, 1, 1, 1] = np.nan

        with pytest.raises(NumericalDivergenceError) as excinfo:
            check_numerical_stability(grid, step=12)

        assert excinfo.value.field == "distributions"
        assert excinfo.value.step == 12

    def test_inf_velocity_detected(self):
        grid = initialize_uniform(3, 3, 3)
        grid.velocity[0, 0, 0, 0] = np.inf

        with pytest.raises(NumericalDivergenceError) as excinfo:
            check_numerical_stability(grid)

        assert excinfo.value.field == "velocity"

    def test_step_does_not_check(self):
        grid = initialize_uniform(3, 3, 3)
        grid.distributions[0, 1, 1, 1] = np.nan

        step(grid, 1.0)

        assert np.isnan(grid.distributions).any()


class TestLBMSolver3D:
    """Test the solver driver class."""

    def test_rest_run(self):
        params = SimulationParameters(4, 4, 4, tau=1.0)
        solver = LBMSolver3D(params, rest_initial_condition(1.0))

        solver.run(100, verbose=False)

        assert solver.step_count == 100
        assert solver.total_time > 0.0
        assert solver.max_velocity() < 1e-10
        assert np.isclose(solver.get_total_mass(), 64.0, rtol=1e-12)

    def test_velocity_field_buffer(self):
        params = SimulationParameters(3, 4, 5, tau=1.0)
        solver = LBMSolver3D(params, rest_initial_condition(1.0))
        solver.step()

        field = solver.velocity_field()

        assert field.shape == (60, 3)

    def test_default_initial_condition_is_parity(self):
        params = SimulationParameters(2, 2, 2, tau=1.0)
        solver = LBMSolver3D(params)

        np.testing.assert_array_equal(solver.grid.velocity[:, 0, 0, 0], [1.0, 1.0, 1.0])
        np.testing.assert_array_equal(solver.grid.velocity[:, 1, 1, 1], [0.0, 0.0, 0.0])

    def test_run_surfaces_divergence(self):
        params = SimulationParameters(3, 3, 3, tau=1.0)
        solver = LBMSolver3D(params, rest_initial_condition(1.0))
        solver.grid.distributions[0, 1, 1, 1] = np.nan

        with pytest.raises(NumericalDivergenceError):
            solver.run(2, verbose=False, check_interval=1)

    def test_verbose_report(self, capsys):
        params = SimulationParameters(3, 3, 3, tau=1.0)
        solver = LBMSolver3D(params, rest_initial_condition(1.0))

        solver.run(4, verbose=True, report_interval=2)

        out = capsys.readouterr().out
        assert "Step 2/4" in out
        assert "Completed 4 steps" in out

    def test_requires_parameters(self):
        with pytest.raises(TypeError):
            LBMSolver3D((4, 4, 4))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
