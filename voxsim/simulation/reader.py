"""
Load a simulation container and retrieve its typed volumes and fields.

The content is validated once, at construction: entry count, tally per field
type, dispatch by keyword and completeness. Any failure raises and leaves no
reader object behind.
"""

import collections
import logging
import pathlib

from voxsim.kernel import FieldContainer, FieldType, ScalarField, VectorField, Voxels
from voxsim.simulation.errors import MissingFieldError, SchemaMismatchError, UnsupportedFieldError
from voxsim.simulation.keywords import Keyword
from voxsim.simulation.schema import FLUID_SCHEMA, MECHANICAL_SCHEMA, SimulationSchema


logger = logging.getLogger(__name__)

_unsuitable = "The file content is not suitable for this simulation input."

_number_words = {1: "One", 2: "Two", 3: "Three", 4: "Four", 5: "Five", 6: "Six"}
_type_words = {
    FieldType.voxels: "voxel field",
    FieldType.vector: "vector field",
    FieldType.scalar: "scalar field",
}


def _count_literal(count: int, noun: str):
    word = _number_words.get(count, str(count))
    return f"{word} {noun}{'' if count == 1 else 's'} {'is' if count == 1 else 'are'} expected."


class SimulationInput:
    """Base class of readers bound to one schema."""

    schema: SimulationSchema

    def __init__(self, path: str | pathlib.Path) -> None:
        self.path = pathlib.Path(path)
        container = FieldContainer.load(self.path)
        logger.info(f"Loaded container {self.path}")
        self._check_composition(container)
        self._entries = self._dispatch(container)

    def _check_composition(self, container: FieldContainer):
        nb_fields = container.field_count
        logger.info(f"Container holds {nb_fields} fields")
        if nb_fields != self.schema.nb_fields:
            raise SchemaMismatchError(
                f"{_count_literal(self.schema.nb_fields, 'field')} Found {nb_fields}. {_unsuitable}")

        tallies = collections.Counter()
        for index in range(nb_fields):
            field_type = container.field_type(index)
            logger.info(f"-  Field {index} has type {field_type} and name '{container.field_name(index)}'")
            if field_type == FieldType.unknown:
                raise UnsupportedFieldError(f"Unsupported field found. {_unsuitable}")
            tallies[field_type] += 1

        expected = self.schema.tallies
        if any(tallies[field_type] != count for field_type, count in expected.items()):
            literals = [_count_literal(count, _type_words[field_type]) for field_type, count in expected.items()]
            raise SchemaMismatchError(" ".join(literals + [_unsuitable]))

    def _dispatch(self, container: FieldContainer) -> dict[Keyword, object]:
        entries = {}
        for index in range(container.field_count):
            name = container.field_name(index)
            field_type = container.field_type(index)
            slot = self.schema.match(name, field_type)
            if slot is None:
                continue
            if slot.key in entries:
                logger.warning(f"-  Field '{name}' replaces an earlier entry for the {slot.label}.")
            match field_type:
                case FieldType.voxels:
                    entries[slot.key] = container.get_voxels(index)
                case FieldType.scalar:
                    entries[slot.key] = container.get_scalar_field(index)
                case FieldType.vector:
                    entries[slot.key] = container.get_vector_field(index)
            logger.info(f"-  Field '{name}' successfully retrieved as {slot.label}.")

        for slot in self.schema.slots:
            if slot.key not in entries:
                raise MissingFieldError(slot.label)
        return entries

    def _get(self, key: Keyword):
        return self._entries[key]


class FluidSimulationInput(SimulationInput):
    """
    Input of a simple fluid flow without heat transfer.

    Holds a fluid and a solid domain, the velocity (m/s), density (kg/m3) and
    kinematic viscosity (m2/s) fields.
    """

    schema = FLUID_SCHEMA

    @property
    def fluid_domain(self) -> Voxels:
        return self._get(Keyword.fluid)

    @property
    def solid_domain(self) -> Voxels:
        return self._get(Keyword.solid)

    @property
    def velocity_field(self) -> VectorField:
        return self._get(Keyword.velocity)

    @property
    def density_field(self) -> ScalarField:
        return self._get(Keyword.density)

    @property
    def viscosity_field(self) -> ScalarField:
        return self._get(Keyword.viscosity)


class MechanicalSimulationInput(SimulationInput):
    """
    Input of a linear elastic solid.

    Holds the solid domain, displacement (m) and force (N) fields, density
    (kg/m3), Young's modulus (Pa) and Poisson's ratio (-) fields.
    """

    schema = MECHANICAL_SCHEMA

    @property
    def solid_domain(self) -> Voxels:
        return self._get(Keyword.solid)

    @property
    def displacement_field(self) -> VectorField:
        return self._get(Keyword.displacement)

    @property
    def force_field(self) -> VectorField:
        return self._get(Keyword.force)

    @property
    def density_field(self) -> ScalarField:
        return self._get(Keyword.density)

    @property
    def young_modulus_field(self) -> ScalarField:
        return self._get(Keyword.modulus)

    @property
    def poisson_ratio_field(self) -> ScalarField:
        return self._get(Keyword.poisson)
