"""Pytest fixtures and test utilities for tkebudget."""

import numpy as np
import pytest

from tkebudget.config import init_taichi
from tkebudget.core.grid import StaggeredGrid
from tkebudget.fields import create_model_state


@pytest.fixture(scope="session", autouse=True)
def taichi_init():
    """Initialize Taichi once per test session with CPU backend."""
    init_taichi(backend="cpu", debug=True)
    yield


@pytest.fixture
def grid_factory():
    """Factory for uniform grids, periodic over 2π in x by default."""
    return make_grid


def make_grid(
    nx: int = 8,
    ny: int = 4,
    nz: int = 5,
    lx: float = 2 * np.pi,
    ly: float = 1.0,
    lz: float = 1.0,
) -> StaggeredGrid:
    """Create a uniform staggered grid."""
    return StaggeredGrid.uniform(nx, ny, nz, lx=lx, ly=ly, lz=lz)


@pytest.fixture
def stretched_grid():
    """Grid with non-uniform spacing on every axis."""
    return StaggeredGrid(
        nx=6,
        ny=5,
        nz=4,
        x_spacing=(0.5, 1.0, 1.5, 1.0, 0.5, 0.25),
        y_spacing=(1.0, 2.0, 1.0, 0.5, 0.5),
        z_faces=(-3.0, -1.5, -0.75, -0.25, 0.0),
    )


@pytest.fixture
def model_factory():
    """Factory for zero-initialised model states."""
    return create_model_state


@pytest.fixture
def random_model():
    """Factory for model states filled with reproducible random values."""
    return make_random_model


def make_random_model(grid: StaggeredGrid, seed: int = 0, **kwargs):
    """Model state with random velocities, pressure, buoyancy, and viscosity."""
    rng = np.random.default_rng(seed)
    model = create_model_state(grid, **kwargs)
    for name in model.container.field_names:
        field = model.container[name]
        values = rng.standard_normal(field.shape)
        if name == "eddy_viscosity":
            values = 1e-3 * np.abs(values)
        field.from_numpy(values)
    return model


@pytest.fixture
def x_nodes():
    """x coordinates broadcastable against (nx, ny, nz) arrays."""
    return make_x_nodes


def make_x_nodes(grid: StaggeredGrid, location) -> np.ndarray:
    return grid.nodes(0, location).reshape(-1, 1, 1)


@pytest.fixture
def z_nodes():
    """z coordinates broadcastable against (nx, ny, nz) arrays."""
    return make_z_nodes


def make_z_nodes(grid: StaggeredGrid, location) -> np.ndarray:
    return grid.nodes(2, location).reshape(1, 1, -1)
