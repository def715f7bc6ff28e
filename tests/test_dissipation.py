"""Tests for the viscous dissipation estimator."""

import numpy as np
import pytest

from tkebudget.core.grid import CCC, Center
from tkebudget.errors import GridMismatchError, LocationMismatchError
from tkebudget.fields import center_field, create_model_state, zface_field
from tkebudget.operations import (
    DissipationEstimator,
    ViscousDissipation,
    average_horizontal,
    strain_rate_squared,
)


class TestStrainRate:
    """Tests for the strain-rate double contraction."""

    def test_uniform_flow(self, grid_factory):
        """Test uniform velocities have no strain."""
        model = create_model_state(grid_factory())
        model.u.fill(1.0)
        model.v.fill(-2.0)
        model.w.fill(0.5)
        strain = strain_rate_squared(model.velocities)
        assert strain.location == CCC
        np.testing.assert_allclose(strain.data, 0.0, atol=1e-14)

    def test_vertical_shear(self, grid_factory, z_nodes):
        """Test u = S z gives Σ₁₃ = S/2 away from the walls."""
        grid = grid_factory(nx=4, ny=4, nz=5)
        shear = 2.0
        model = create_model_state(grid)
        model.u.from_numpy(np.broadcast_to(shear * z_nodes(grid, Center), model.u.shape))
        profile = average_horizontal(strain_rate_squared(model.velocities)).profile()
        # Σ₁₃ vanishes on the boundary faces, halving the wall-adjacent cells
        expected = np.full(grid.nz, 2 * (shear / 2) ** 2)
        expected[[0, -1]] /= 2
        np.testing.assert_allclose(profile, expected, rtol=1e-12)

    def test_non_negative(self, grid_factory, random_model):
        """Test the contraction is non-negative for random velocities."""
        model = random_model(grid_factory(), seed=4)
        assert np.all(strain_rate_squared(model.velocities).data >= 0.0)


class TestViscousDissipation:
    """Tests for ViscousDissipation."""

    def test_implements_protocol(self):
        """Test the estimator satisfies DissipationEstimator."""
        assert isinstance(ViscousDissipation(), DissipationEstimator)

    def test_vertical_shear(self, grid_factory, z_nodes):
        """Test ϵ = ν S² in the interior for uniform shear."""
        grid = grid_factory(nx=4, ny=4, nz=5)
        shear, nu = 3.0, 1e-2
        model = create_model_state(grid)
        model.u.from_numpy(np.broadcast_to(shear * z_nodes(grid, Center), model.u.shape))
        model.eddy_viscosity.fill(nu)

        epsilon = ViscousDissipation()(model.velocities, model.eddy_viscosity)
        profile = average_horizontal(epsilon).profile()
        np.testing.assert_allclose(profile[1:-1], nu * shear**2, rtol=1e-12)
        np.testing.assert_allclose(profile[[0, -1]], nu * shear**2 / 2, rtol=1e-12)

    def test_zero_viscosity(self, grid_factory, random_model):
        """Test zero viscosity dissipates nothing."""
        model = random_model(grid_factory(), seed=5)
        model.eddy_viscosity.fill(0.0)
        epsilon = ViscousDissipation()(model.velocities, model.eddy_viscosity)
        np.testing.assert_array_equal(epsilon.data, 0.0)

    def test_out_argument(self, grid_factory, random_model):
        """Test the estimate is written into a supplied buffer."""
        grid = grid_factory()
        model = random_model(grid, seed=6)
        out = center_field(grid)
        result = ViscousDissipation()(model.velocities, model.eddy_viscosity, out=out)
        assert result is out
        expected = ViscousDissipation()(model.velocities, model.eddy_viscosity)
        np.testing.assert_allclose(out.data, expected.data, rtol=1e-12)

    def test_viscosity_location(self, grid_factory):
        """Test the viscosity must be cell centered."""
        grid = grid_factory()
        model = create_model_state(grid)
        with pytest.raises(LocationMismatchError, match="Eddy viscosity"):
            ViscousDissipation()(model.velocities, zface_field(grid))

    def test_grid_mismatch(self, grid_factory):
        """Test viscosity and velocities must share a grid."""
        model = create_model_state(grid_factory(nz=4))
        with pytest.raises(GridMismatchError):
            ViscousDissipation()(model.velocities, center_field(grid_factory(nz=6)))
