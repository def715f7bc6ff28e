"""Tests for area-weighted horizontal averaging."""

import numpy as np
import pytest

from tkebudget.core.grid import Center, Face, profile_location
from tkebudget.fields import center_field, profile_field, xface_field, zface_field
from tkebudget.operations import average_horizontal
from tkebudget.operations.averaging import horizontal_weights


class TestHorizontalWeights:
    """Tests for normalised area weights."""

    def test_uniform_weights(self, grid_factory):
        """Test uniform grids weight every column equally."""
        grid = grid_factory(nx=4, ny=2)
        weights = horizontal_weights(center_field(grid))
        np.testing.assert_allclose(weights, 1.0 / 8)

    def test_weights_sum_to_one(self, stretched_grid):
        """Test weights are normalised at every staggering."""
        for field in (center_field(stretched_grid), xface_field(stretched_grid)):
            assert horizontal_weights(field).sum() == pytest.approx(1.0)


class TestAverageHorizontal:
    """Tests for average_horizontal."""

    def test_constant(self, stretched_grid):
        """Test the mean of a constant is that constant."""
        field = zface_field(stretched_grid)
        field.fill(2.5)
        np.testing.assert_allclose(average_horizontal(field).profile(), 2.5)

    def test_keeps_vertical_location(self, grid_factory):
        """Test center and face inputs give center and face profiles."""
        grid = grid_factory(nz=3)
        assert average_horizontal(center_field(grid)).location == profile_location(Center)
        mean = average_horizontal(zface_field(grid))
        assert mean.location == profile_location(Face)
        assert mean.shape == (1, 1, 4)

    def test_uniform_matches_numpy_mean(self, grid_factory):
        """Test uniform grids reduce to the arithmetic mean."""
        grid = grid_factory(nx=8, ny=4, nz=5)
        rng = np.random.default_rng(2)
        field = center_field(grid)
        field.from_numpy(rng.standard_normal(field.shape))
        np.testing.assert_allclose(
            average_horizontal(field).profile(),
            field.data.mean(axis=(0, 1)),
            rtol=1e-12,
        )

    def test_stretched_area_weighting(self, stretched_grid, x_nodes):
        """Test stretched grids weight columns by their area."""
        field = center_field(stretched_grid)
        field.from_numpy(np.broadcast_to(x_nodes(stretched_grid, Center), field.shape))
        dx = np.asarray(stretched_grid.x_spacing)
        expected = (dx * stretched_grid.nodes(0, Center)).sum() / dx.sum()
        np.testing.assert_allclose(average_horizontal(field).profile(), expected, rtol=1e-12)

    def test_face_widths_on_x_faces(self, stretched_grid, x_nodes):
        """Test x-face fields use face control-volume widths."""
        field = xface_field(stretched_grid)
        field.from_numpy(np.broadcast_to(x_nodes(stretched_grid, Face), field.shape))
        widths = stretched_grid.widths(0, Face)
        expected = (widths * stretched_grid.nodes(0, Face)).sum() / widths.sum()
        np.testing.assert_allclose(average_horizontal(field).profile(), expected, rtol=1e-12)

    def test_out_argument(self, grid_factory):
        """Test averages are written into a supplied profile."""
        grid = grid_factory()
        field = center_field(grid)
        field.fill(1.0)
        out = profile_field(grid, Center)
        assert average_horizontal(field, out=out) is out
        np.testing.assert_allclose(out.profile(), 1.0)

    def test_out_overwritten(self, grid_factory):
        """Test stale values in the destination do not accumulate."""
        grid = grid_factory()
        field = center_field(grid)
        field.fill(1.0)
        out = profile_field(grid, Center)
        out.fill(10.0)
        average_horizontal(field, out=out)
        np.testing.assert_allclose(out.profile(), 1.0)

    def test_already_reduced(self, grid_factory):
        """Test profiles cannot be averaged again."""
        with pytest.raises(ValueError, match="already horizontally reduced"):
            average_horizontal(profile_field(grid_factory()))

    def test_names_profile(self, grid_factory):
        """Test the profile name marks the average."""
        field = center_field(grid_factory(), name="b")
        assert average_horizontal(field).name == "<b>"
