"""Tests for staggered interpolation and pointwise algebra."""

import numpy as np
import pytest

from tkebudget.core.grid import CCC, CCF, FCC, FCF, Center, Face, profile_location
from tkebudget.errors import GridMismatchError, LocationMismatchError
from tkebudget.fields import center_field, profile_field, xface_field, zface_field
from tkebudget.operations import (
    add,
    at,
    average_horizontal,
    interpolate,
    multiply,
    scale,
    subtract,
)
from tkebudget.operations.interpolation import interpolate_axis


class TestInterpolation:
    """Tests for half-cell interpolation kernels."""

    def test_face_to_center_periodic(self, grid_factory):
        """Test the last center averages the last and first face."""
        grid = grid_factory(nx=4, ny=1, nz=1)
        u = xface_field(grid)
        u.from_numpy(np.arange(4.0).reshape(4, 1, 1))
        result = interpolate_axis(u, 0, Center)
        assert result.location == CCC
        np.testing.assert_allclose(result.data[:, 0, 0], [0.5, 1.5, 2.5, 1.5])

    def test_center_to_face_periodic(self, grid_factory):
        """Test the first face averages the last and first center."""
        grid = grid_factory(nx=4, ny=1, nz=1)
        c = center_field(grid)
        c.from_numpy(np.arange(4.0).reshape(4, 1, 1))
        result = interpolate_axis(c, 0, Face)
        assert result.location == FCC
        np.testing.assert_allclose(result.data[:, 0, 0], [1.5, 0.5, 1.5, 2.5])

    def test_center_to_face_bounded(self, grid_factory):
        """Test boundary z faces copy the adjacent center."""
        grid = grid_factory(nx=1, ny=1, nz=4)
        c = center_field(grid)
        c.from_numpy(np.arange(4.0))
        result = interpolate(c, CCF)
        np.testing.assert_allclose(result.data[0, 0, :], [0.0, 0.5, 1.5, 2.5, 3.0])

    def test_face_to_center_bounded(self, stretched_grid, z_nodes):
        """Test z faces average onto centers on a stretched grid."""
        w = zface_field(stretched_grid)
        w.from_numpy(np.broadcast_to(z_nodes(stretched_grid, Face), w.shape))
        result = interpolate(w, CCC)
        expected = np.broadcast_to(z_nodes(stretched_grid, Center), result.shape)
        np.testing.assert_allclose(result.data, expected, atol=1e-14)

    def test_two_axis_move(self, grid_factory):
        """Test a constant survives interpolation across two axes."""
        u = xface_field(grid_factory())
        u.fill(3.0)
        result = interpolate(u, CCF)
        assert result.location == CCF
        np.testing.assert_allclose(result.data, 3.0)

    def test_no_move_returns_field(self, grid_factory):
        """Test interpolation to the current location is a no-op."""
        w = zface_field(grid_factory())
        assert interpolate(w, CCF) is w

    def test_no_move_with_out_copies(self, grid_factory):
        """Test an explicit destination receives a copy."""
        grid = grid_factory()
        w = zface_field(grid)
        w.fill(1.0)
        out = zface_field(grid)
        assert interpolate(w, CCF, out=out) is out
        np.testing.assert_allclose(out.data, 1.0)

    def test_reduced_axes_must_match(self, grid_factory):
        """Test profiles cannot be interpolated to 3D locations."""
        profile = profile_field(grid_factory())
        with pytest.raises(ValueError, match="reduced axes must match"):
            interpolate(profile, CCC)

    def test_profile_vertical_move(self, grid_factory):
        """Test profiles interpolate along z."""
        grid = grid_factory(nz=3)
        profile = profile_field(grid, Center)
        profile.from_numpy(np.array([1.0, 2.0, 4.0]))
        result = interpolate(profile, profile_location(Face))
        np.testing.assert_allclose(result.profile(), [1.0, 1.5, 3.0, 4.0])


class TestAlgebra:
    """Tests for pointwise operations with location handling."""

    def test_common_location_faces_win(self, grid_factory):
        """Test mixed operands meet at faces."""
        grid = grid_factory()
        product = multiply(zface_field(grid), xface_field(grid))
        assert product.location == FCF

    def test_explicit_location(self, grid_factory):
        """Test products can be evaluated at a requested location."""
        grid = grid_factory(nx=2, ny=1, nz=2)
        w = zface_field(grid)
        w.from_numpy(np.array([0.0, 2.0, 4.0]))
        b = center_field(grid)
        b.fill(0.5)
        product = multiply(w, b, location=CCC)
        assert product.location == CCC
        np.testing.assert_allclose(product.data[0, 0, :], [0.5, 1.5])

    def test_profile_broadcast(self, grid_factory):
        """Test subtracting a profile removes the horizontal mean."""
        grid = grid_factory()
        rng = np.random.default_rng(1)
        u = xface_field(grid)
        u.from_numpy(rng.standard_normal(u.shape))
        U = average_horizontal(u)
        fluctuation = subtract(u, U)
        assert fluctuation.location == FCC
        np.testing.assert_allclose(average_horizontal(fluctuation).profile(), 0.0, atol=1e-14)

    def test_profile_times_profile(self, grid_factory):
        """Test profile operands stay reduced."""
        grid = grid_factory(nz=2)
        a = profile_field(grid, Center)
        a.from_numpy(np.array([1.0, 2.0]))
        result = add(a, a)
        assert result.is_profile
        np.testing.assert_allclose(result.profile(), [2.0, 4.0])

    def test_incompatible_location(self, grid_factory):
        """Test requested locations must keep reduced axes reduced."""
        grid = grid_factory()
        with pytest.raises(ValueError, match="incompatible"):
            multiply(profile_field(grid), profile_field(grid), location=CCC)

    def test_scale(self, grid_factory):
        """Test scaling keeps the location."""
        w = zface_field(grid_factory())
        w.fill(2.0)
        result = scale(w, -1.5)
        assert result.location == CCF
        np.testing.assert_allclose(result.data, -3.0)

    def test_out_argument(self, grid_factory):
        """Test results are written into a supplied destination."""
        grid = grid_factory()
        out = center_field(grid)
        a = center_field(grid)
        a.fill(1.0)
        assert add(a, a, out=out) is out
        np.testing.assert_allclose(out.data, 2.0)

    def test_out_wrong_location(self, grid_factory):
        """Test a destination at the wrong location is rejected."""
        grid = grid_factory()
        with pytest.raises(LocationMismatchError):
            add(center_field(grid), center_field(grid), out=zface_field(grid))

    def test_grid_mismatch(self, grid_factory):
        """Test operands must share a grid."""
        with pytest.raises(GridMismatchError):
            add(center_field(grid_factory(nz=4)), center_field(grid_factory(nz=5)))

    def test_at_identity(self, grid_factory):
        """Test at() returns the field when already located."""
        b = center_field(grid_factory())
        assert at(CCC, b) is b
        assert at(CCF, b).location == CCF
