"""Tests for the linear equation of state."""

import numpy as np
import pytest

from tkebudget.core.grid import CCC
from tkebudget.errors import LocationMismatchError, MissingInputError
from tkebudget.fields import center_field, zface_field
from tkebudget.operations import linear_buoyancy
from tkebudget.params import BuoyancyParams

PARAMS = BuoyancyParams(
    gravitational_acceleration=10.0, thermal_expansion=2e-4, haline_contraction=8e-4
)


class TestLinearBuoyancy:
    """Tests for linear_buoyancy."""

    def test_temperature_only(self, grid_factory):
        """Test b = g α T without salinity."""
        temperature = center_field(grid_factory())
        temperature.fill(5.0)
        b = linear_buoyancy(PARAMS, temperature=temperature)
        assert b.location == CCC
        np.testing.assert_allclose(b.data, 10.0 * 2e-4 * 5.0)

    def test_salinity_only(self, grid_factory):
        """Test b = -g β S without temperature."""
        salinity = center_field(grid_factory())
        salinity.fill(35.0)
        b = linear_buoyancy(PARAMS, salinity=salinity)
        np.testing.assert_allclose(b.data, -10.0 * 8e-4 * 35.0)

    def test_both_tracers(self, grid_factory):
        """Test both tracers combine."""
        grid = grid_factory()
        temperature = center_field(grid)
        salinity = center_field(grid)
        temperature.fill(5.0)
        salinity.fill(35.0)
        out = center_field(grid)
        b = linear_buoyancy(PARAMS, temperature, salinity, out=out)
        assert b is out
        np.testing.assert_allclose(out.data, 10.0 * (2e-4 * 5.0 - 8e-4 * 35.0))

    def test_no_tracers(self):
        """Test at least one tracer is required."""
        with pytest.raises(MissingInputError, match="temperature or salinity"):
            linear_buoyancy(PARAMS)

    def test_tracer_location(self, grid_factory):
        """Test tracers must be cell centered."""
        with pytest.raises(LocationMismatchError, match="Temperature"):
            linear_buoyancy(PARAMS, temperature=zface_field(grid_factory()))
