"""
Taichi configuration and initialization.

Environment variables:
    TKE_BACKEND: 'cpu' (default), 'cuda', or 'vulkan'
    TKE_DEBUG: '1' to enable debug mode (bounds checking)

The budget reductions only run on the CPU backend. Taichi may still be
initialised on a GPU for other work; the budget then refuses to run
instead of returning partial results.
"""

import logging
import os

import taichi as ti
from taichi.lang import impl

from tkebudget.core.dtypes import DTYPE
from tkebudget.errors import UnsupportedExecutionTargetError
from tkebudget.params.schema import BACKENDS, ExecutionParams

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("cpu",)
KNOWN_BACKENDS = BACKENDS

ARCHS = {"cpu": ti.cpu, "cuda": ti.cuda, "vulkan": ti.vulkan}

# ti.cpu names the host architecture; either may be configured
CPU_ARCHS = (ti.x64, ti.arm64)


def get_backend() -> str:
    """Determine Taichi backend from the environment (default 'cpu')."""
    env = os.environ.get("TKE_BACKEND", "cpu").lower()
    if env not in KNOWN_BACKENDS:
        raise ValueError(f"Invalid TKE_BACKEND: {env}")
    return env


def init_taichi(backend: str | None = None, debug: bool | None = None) -> str:
    """Initialize Taichi with specified or environment backend.

    Returns:
        Name of the backend Taichi was initialised with
    """
    if backend is None:
        backend = get_backend()
    if debug is None:
        debug = os.environ.get("TKE_DEBUG", "0") == "1"

    arch = ARCHS.get(backend)
    if arch is None:
        raise ValueError(f"Unknown backend: {backend}")

    ti.init(
        arch=arch,
        default_fp=DTYPE,
        debug=debug,
        offline_cache=True,
        random_seed=42,
    )
    logger.info("Initialised Taichi on %s (debug=%s)", backend, debug)
    return backend


def init_from_params(params: ExecutionParams) -> str:
    """Initialize Taichi from the execution group of a DiagnosticsConfig.

    Example:
        config = load_config("budget.yaml")
        init_from_params(config.execution)
    """
    return init_taichi(backend=params.backend, debug=params.debug)


def configured_arch():
    """Architecture Taichi is currently configured for."""
    return impl.current_cfg().arch


def active_backend() -> str:
    """Backend name of the configured Taichi architecture."""
    arch = configured_arch()
    if arch in CPU_ARCHS:
        return "cpu"
    for name, known in ARCHS.items():
        if arch == known:
            return name
    return arch.name


def check_execution_target(backend: str | None = None) -> None:
    """Fail loudly when the reductions cannot run on `backend`.

    Args:
        backend: Backend name; defaults to the one Taichi is configured for

    Raises:
        UnsupportedExecutionTargetError: For accelerator backends
    """
    if backend is None:
        backend = active_backend()
    if backend not in SUPPORTED_BACKENDS:
        raise UnsupportedExecutionTargetError(
            f"TKE budget reductions are not supported on the '{backend}' backend; "
            f"initialise Taichi with one of {SUPPORTED_BACKENDS}"
        )
