"""
Create a simulation container from physical and geometric input data.

Each output class builds the fixed set of fields of its schema at
construction, and `save` writes them in schema order.
"""

import logging
import pathlib
import typing

import numpy as np

from voxsim.kernel import FieldContainer, ScalarField, VectorField, Voxels
from voxsim.simulation.field_util import constant_scalar_field, patch_field, whole_domain_field
from voxsim.simulation.keywords import Keyword
from voxsim.simulation.schema import FLUID_SCHEMA, MECHANICAL_SCHEMA, SimulationSchema


logger = logging.getLogger(__name__)


class SimulationOutput:
    """Base class of writers bound to one schema."""

    schema: SimulationSchema
    _entries: dict[Keyword, Voxels | ScalarField | VectorField]

    def to_container(self) -> FieldContainer:
        container = FieldContainer()
        for slot in self.schema.slots:
            container.add(self._entries[slot.key], slot.entry_name)
        return container

    def save(self, path: str | pathlib.Path) -> pathlib.Path:
        path = pathlib.Path(path)
        self.to_container().save(path)
        logger.info(f"Exported container {path} successfully.")
        return path


class FluidSimulationOutput(SimulationOutput):
    """
    Fields of a simple fluid flow without heat transfer.

    The inlet velocity points along -Z and is set on the surface voxels of the
    inlet patch that face +Z; the rest of the fluid domain is at rest.

    Parameters
    ----------
    density : float
        Fluid density in kg/m3.
    viscosity : float
        Kinematic viscosity in m2/s.
    inlet_velocity : float
        Flow speed at the inlet in m/s.
    fluid_domain, solid_domain : Voxels
        The two domains.
    inlet_patch : Voxels
        An oversized volume around the inlet; it is intersected with the fluid domain.
    """

    schema = FLUID_SCHEMA

    inlet_flow_direction = np.array([0.0, 0.0, -1.0])
    surface_threshold = 0.5
    """Max distance to the surface, in voxels"""
    direction_tolerance = 0.0

    def __init__(self, density: float, viscosity: float, inlet_velocity: float,
                 fluid_domain: Voxels, solid_domain: Voxels, inlet_patch: Voxels) -> None:
        inlet = patch_field(
            fluid_domain, inlet_patch, inlet_velocity * self.inlet_flow_direction,
            surface_direction=-self.inlet_flow_direction,
            tolerance=self.direction_tolerance,
            surface_threshold=self.surface_threshold)
        logger.info(f"Inlet patch covers {inlet.nb_active} voxels.")
        velocity = whole_domain_field(fluid_domain, inlet)

        self._entries = {
            Keyword.fluid: fluid_domain,
            Keyword.solid: solid_domain,
            Keyword.velocity: velocity,
            Keyword.density: constant_scalar_field(velocity, density),
            Keyword.viscosity: constant_scalar_field(velocity, viscosity),
        }

    @property
    def fluid_domain(self) -> Voxels:
        return self._entries[Keyword.fluid]

    @property
    def solid_domain(self) -> Voxels:
        return self._entries[Keyword.solid]

    @property
    def velocity_field(self) -> VectorField:
        return self._entries[Keyword.velocity]

    @property
    def density_field(self) -> ScalarField:
        return self._entries[Keyword.density]

    @property
    def viscosity_field(self) -> ScalarField:
        return self._entries[Keyword.viscosity]


class MechanicalSimulationOutput(SimulationOutput):
    """
    Fields of a linear elastic solid.

    Displacement is fixed to zero on the fixed patch, a constant force is applied
    on every voxel of the force patch. Both patches are intersected with the
    solid domain.

    Parameters
    ----------
    density : float
        Solid density in kg/m3.
    poisson_ratio : float
        Poisson's ratio (-).
    young_modulus : float
        Young's modulus in Pa.
    solid_domain : Voxels
    fixed_patch, force_patch : Voxels
        Oversized volumes around the boundary regions.
    applied_force : sequence of float
        Force vector in N.
    """

    schema = MECHANICAL_SCHEMA

    fixed_displacement = np.zeros(3)

    def __init__(self, density: float, poisson_ratio: float, young_modulus: float,
                 solid_domain: Voxels, fixed_patch: Voxels, force_patch: Voxels,
                 applied_force: typing.Sequence[float] = (20.0, 0.0, 0.0)) -> None:
        fixed = patch_field(solid_domain, fixed_patch, self.fixed_displacement)
        logger.info(f"Fixed patch covers {fixed.nb_active} voxels.")
        displacement = whole_domain_field(solid_domain, fixed)

        loaded = patch_field(solid_domain, force_patch, applied_force)
        logger.info(f"Force patch covers {loaded.nb_active} voxels.")
        force = whole_domain_field(solid_domain, loaded)

        self._entries = {
            Keyword.solid: solid_domain,
            Keyword.displacement: displacement,
            Keyword.force: force,
            Keyword.density: constant_scalar_field(displacement, density),
            Keyword.modulus: constant_scalar_field(displacement, young_modulus),
            Keyword.poisson: constant_scalar_field(displacement, poisson_ratio),
        }

    @property
    def solid_domain(self) -> Voxels:
        return self._entries[Keyword.solid]

    @property
    def displacement_field(self) -> VectorField:
        return self._entries[Keyword.displacement]

    @property
    def force_field(self) -> VectorField:
        return self._entries[Keyword.force]

    @property
    def density_field(self) -> ScalarField:
        return self._entries[Keyword.density]

    @property
    def young_modulus_field(self) -> ScalarField:
        return self._entries[Keyword.modulus]

    @property
    def poisson_ratio_field(self) -> ScalarField:
        return self._entries[Keyword.poisson]
