"""Turbulent kinetic energy budget of a model snapshot.

The turbulent kinetic energy equation is

    ∂t E = - ∂z ⟨w′e′ + w′p′⟩ - ⟨w′u′⟩ ∂z U - ⟨w′v′⟩ ∂z V + ⟨w′b′⟩ - ϵ

where uppercase variables and ⟨·⟩ denote horizontal means and primed
variables deviations from them. compute_tke_budget returns one vertical
profile per term:

    turbulent_kinetic_energy        E = ⟨½ (u′² + v′² + w′²)⟩     Center
    tke_shear_production            -⟨w′u′⟩ ∂z U - ⟨w′v′⟩ ∂z V   Center
    tke_advective_flux              ⟨w′e′⟩                        Face
    tke_pressure_flux               ⟨w′p′⟩                        Face
    tke_dissipation                 ϵ = ⟨2 νₑ Σᵢⱼ Σᵢⱼ⟩            Center
    tke_buoyancy_flux               ⟨w′b′⟩                        Center

and, with include_flux_divergences,

    tke_advective_flux_divergence   ∂z ⟨w′e′⟩                     Center
    tke_pressure_flux_divergence    ∂z ⟨w′p′⟩                     Center

Correlations are formed as w′ times the full field: ⟨w′p⟩ = ⟨w′p′⟩
because ⟨w′⟩ = 0 on every level.

Scratch buffers, when given, hold the transient 3D quantities: vertical
fluxes in the (Center, Center, Face) buffer and everything else in the
cell-centered one. Their contents are overwritten on every call.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from tkebudget import config
from tkebudget.core.grid import CCC, CCF, CFC, FCC, Center, Face, profile_location
from tkebudget.errors import BufferAliasError, MissingInputError
from tkebudget.fields.field import Field
from tkebudget.fields.state import ModelState, Velocities
from tkebudget.operations.algebra import add, multiply, subtract
from tkebudget.operations.averaging import average_horizontal
from tkebudget.operations.buoyancy import linear_buoyancy
from tkebudget.operations.differencing import d_dz
from tkebudget.operations.dissipation import ViscousDissipation
from tkebudget.operations.protocol import DissipationEstimator, DivergenceOrdering
from tkebudget.operations.turbulence import shear_production, turbulent_kinetic_energy
from tkebudget.operations.utils import check_location, check_same_grid
from tkebudget.params.schema import BudgetParams, BuoyancyParams

logger = logging.getLogger(__name__)

BUDGET_KEYS = (
    "turbulent_kinetic_energy",
    "tke_shear_production",
    "tke_advective_flux",
    "tke_pressure_flux",
    "tke_dissipation",
    "tke_buoyancy_flux",
)

FLUX_DIVERGENCE_KEYS = (
    "tke_advective_flux_divergence",
    "tke_pressure_flux_divergence",
)


@dataclass
class TKEBudgetOptions:
    """Options for compute_tke_budget.

    Attributes:
        include_flux_divergences: Also return ∂z of the two flux profiles
        mean_u, mean_v: Precomputed horizontal means of u and v (··C)
        mean_w: Precomputed horizontal mean of w (··F)
        scratch_face: Reusable CCF buffer, overwritten on every call
        scratch_center: Reusable CCC buffer, overwritten on every call
        turbulent_kinetic_energy: Precomputed TKE field (CCC)
        shear_production: Precomputed shear production field (CCC)
        dissipation: Precomputed dissipation field (CCC); the eddy
            viscosity is not needed when this is given
        dissipation_estimator: Estimator used when dissipation is None
        divergence_ordering: Differentiate before or after averaging

    Every optional field is derived from the inputs when left as None.
    """

    include_flux_divergences: bool = False
    mean_u: Field | None = None
    mean_v: Field | None = None
    mean_w: Field | None = None
    scratch_face: Field | None = None
    scratch_center: Field | None = None
    turbulent_kinetic_energy: Field | None = None
    shear_production: Field | None = None
    dissipation: Field | None = None
    dissipation_estimator: DissipationEstimator = field(default_factory=ViscousDissipation)
    divergence_ordering: DivergenceOrdering = DivergenceOrdering.DIFFERENTIATE_THEN_AVERAGE

    @classmethod
    def from_params(cls, params: BudgetParams, **kwargs) -> "TKEBudgetOptions":
        """Build options from configuration, plus per-call fields in kwargs."""
        return cls(
            include_flux_divergences=params.include_flux_divergences,
            divergence_ordering=DivergenceOrdering.from_name(params.divergence_ordering),
            **kwargs,
        )


def _check_inputs(
    velocities: Velocities,
    pressure: Field | None,
    buoyancy: Field | None,
    eddy_viscosity: Field | None,
    options: TKEBudgetOptions,
) -> None:
    required = {
        "u": velocities.u,
        "v": velocities.v,
        "w": velocities.w,
        "pressure": pressure,
        "buoyancy": buoyancy,
    }
    if options.dissipation is None:
        required["eddy_viscosity"] = eddy_viscosity

    missing = [name for name, f in required.items() if f is None]
    if missing:
        raise MissingInputError(f"Missing required input fields: {', '.join(missing)}")

    expected = [
        (velocities.u, FCC, "u"),
        (velocities.v, CFC, "v"),
        (velocities.w, CCF, "w"),
        (pressure, CCC, "Pressure"),
        (buoyancy, CCC, "Buoyancy"),
        (eddy_viscosity, CCC, "Eddy viscosity"),
        (options.mean_u, profile_location(Center), "mean_u"),
        (options.mean_v, profile_location(Center), "mean_v"),
        (options.mean_w, profile_location(Face), "mean_w"),
        (options.scratch_face, CCF, "scratch_face"),
        (options.scratch_center, CCC, "scratch_center"),
        (options.turbulent_kinetic_energy, CCC, "turbulent_kinetic_energy"),
        (options.shear_production, CCC, "shear_production"),
        (options.dissipation, CCC, "dissipation"),
    ]
    present = [entry for entry in expected if entry[0] is not None]

    # Grids first: a scratch buffer from another model is a grid error
    check_same_grid(*(f for f, _, _ in present))
    for f, location, role in present:
        check_location(f, location, role)

    # Model inputs are read throughout the call; precomputed terms are
    # consumed before either buffer is first written
    scratch = [
        (buffer, role)
        for buffer, role in (
            (options.scratch_face, "scratch_face"),
            (options.scratch_center, "scratch_center"),
        )
        if buffer is not None
    ]
    inputs = [(f, role) for f, _, role in expected[:6] if f is not None]
    for f, role in inputs:
        for buffer, buffer_role in scratch:
            if np.shares_memory(f.data, buffer.data):
                raise BufferAliasError(f"{role} shares its storage with {buffer_role}")


def _flux_divergence(
    flux: Field,
    flux_profile: Field,
    ordering: DivergenceOrdering,
    scratch: Field | None,
) -> Field:
    if ordering is DivergenceOrdering.AVERAGE_THEN_DIFFERENTIATE:
        return d_dz(flux_profile)
    return average_horizontal(d_dz(flux, out=scratch))


def compute_tke_budget(
    velocities: Velocities | tuple,
    pressure: Field | None,
    buoyancy: Field | None,
    eddy_viscosity: Field | None,
    options: TKEBudgetOptions | None = None,
) -> dict[str, Field]:
    """Compute the horizontally averaged TKE budget.

    Precomputed TKE, shear production, and dissipation fields may live in
    scratch_center: each is averaged (and the TKE turned into its flux)
    before the buffer is reused.

    Args:
        velocities: (u, v, w) at FCC, CFC, CCF
        pressure: Kinematic pressure at cell centers
        buoyancy: Buoyancy at cell centers
        eddy_viscosity: Subfilter eddy viscosity at cell centers
        options: Optional overrides and scratch buffers

    Returns:
        Dict of vertical profiles keyed by BUDGET_KEYS, plus
        FLUX_DIVERGENCE_KEYS when flux divergences are requested

    Raises:
        UnsupportedExecutionTargetError: On accelerator backends
        MissingInputError: If a required input is None
        GridMismatchError: If inputs or scratch buffers use different grids
        LocationMismatchError: If an input is not at its expected location
        BufferAliasError: If a model input is one of the scratch buffers
    """
    if options is None:
        options = TKEBudgetOptions()

    config.check_execution_target()
    velocities = Velocities(*velocities)
    _check_inputs(velocities, pressure, buoyancy, eddy_viscosity, options)

    u, v, w = velocities
    face = options.scratch_face
    center = options.scratch_center

    U = options.mean_u if options.mean_u is not None else average_horizontal(u)
    V = options.mean_v if options.mean_v is not None else average_horizontal(v)
    W = options.mean_w if options.mean_w is not None else average_horizontal(w)

    statistics: dict[str, Field] = {}

    e = options.turbulent_kinetic_energy
    if e is None:
        e = turbulent_kinetic_energy(velocities, U, V, W)
    statistics["turbulent_kinetic_energy"] = average_horizontal(e)

    if options.shear_production is not None:
        statistics["tke_shear_production"] = average_horizontal(options.shear_production)
    if options.dissipation is not None:
        statistics["tke_dissipation"] = average_horizontal(options.dissipation)

    w_prime = subtract(w, W)

    # The two vertical fluxes take turns in the face buffer; e is spent
    # before the first write into the center buffer
    for key, quantity in (("tke_advective_flux", e), ("tke_pressure_flux", pressure)):
        flux = multiply(w_prime, quantity, out=face)
        statistics[key] = average_horizontal(flux)

        if options.include_flux_divergences:
            statistics[f"{key}_divergence"] = _flux_divergence(
                flux, statistics[key], options.divergence_ordering, center
            )

    if "tke_shear_production" not in statistics:
        production = shear_production(velocities, U, V, W, out=center)
        statistics["tke_shear_production"] = average_horizontal(production)

    if "tke_dissipation" not in statistics:
        logger.debug(
            "Estimating dissipation with %s", type(options.dissipation_estimator).__name__
        )
        dissipation = options.dissipation_estimator(velocities, eddy_viscosity, out=center)
        statistics["tke_dissipation"] = average_horizontal(dissipation)

    buoyancy_flux = multiply(w_prime, buoyancy, location=CCC, out=center)
    statistics["tke_buoyancy_flux"] = average_horizontal(buoyancy_flux)

    keys = BUDGET_KEYS + (FLUX_DIVERGENCE_KEYS if options.include_flux_divergences else ())
    for key in keys:
        statistics[key].name = key
    logger.debug("Computed TKE budget with %d terms", len(keys))
    return {key: statistics[key] for key in keys}


def turbulent_kinetic_energy_budget(
    model: ModelState,
    options: TKEBudgetOptions | None = None,
    buoyancy_params: BuoyancyParams | None = None,
) -> dict[str, Field]:
    """TKE budget of a ModelState, deriving inputs the model lacks.

    Pressure defaults to the stored total pressure, else the sum of the
    hydrostatic and non-hydrostatic parts. Buoyancy defaults to the stored
    field, else the linear equation of state applied to the tracers.

    Raises:
        MissingInputError: If an input is neither stored nor derivable
    """
    pressure = model.pressure
    if pressure is None:
        hydrostatic = model.hydrostatic_pressure
        nonhydrostatic = model.nonhydrostatic_pressure
        if hydrostatic is not None and nonhydrostatic is not None:
            pressure = add(hydrostatic, nonhydrostatic)
        else:
            raise MissingInputError(
                "Model has no pressure field and no hydrostatic/non-hydrostatic "
                "pair to derive it from"
            )

    buoyancy = model.buoyancy
    if buoyancy is None:
        if model.temperature is None and model.salinity is None:
            raise MissingInputError(
                "Model has no buoyancy field and no tracers to derive it from"
            )
        buoyancy = linear_buoyancy(
            buoyancy_params or BuoyancyParams(),
            temperature=model.temperature,
            salinity=model.salinity,
        )

    return compute_tke_budget(
        model.velocities, pressure, buoyancy, model.eddy_viscosity, options
    )
