"""
Fixed composition of a simulation container.

A schema is an ordered list of slots. Writers store one entry per slot in that
order; readers expect exactly that many entries, the same tally per field type,
and assign entries to slots by keyword.
"""

import collections
import dataclasses as dc

from voxsim.kernel import FieldType
from voxsim.simulation.keywords import Keyword, domain_name, field_name


@dc.dataclass(frozen=True)
class Slot:
    key: Keyword
    field_type: FieldType
    label: str
    """Human readable name, used in logs and errors"""

    @property
    def entry_name(self):
        if self.field_type == FieldType.voxels:
            return domain_name(self.key)
        return field_name(self.key)

    def accepts(self, name: str, field_type: FieldType):
        return field_type == self.field_type and self.key in name


@dc.dataclass(frozen=True)
class SimulationSchema:
    kind: str
    slots: tuple[Slot, ...]

    @property
    def nb_fields(self):
        return len(self.slots)

    @property
    def tallies(self) -> dict[FieldType, int]:
        counts = collections.Counter(slot.field_type for slot in self.slots)
        return {field_type: counts.get(field_type, 0)
                for field_type in (FieldType.voxels, FieldType.vector, FieldType.scalar)}

    def slot(self, key: Keyword) -> Slot:
        for slot in self.slots:
            if slot.key == key:
                return slot
        raise KeyError(f"The {self.kind} schema has no slot for '{key}'")

    def match(self, name: str, field_type: FieldType) -> Slot | None:
        """The first slot, in schema order, accepting the entry."""
        for slot in self.slots:
            if slot.accepts(name, field_type):
                return slot
        return None


FLUID_SCHEMA = SimulationSchema("fluid", (
    Slot(Keyword.fluid, FieldType.voxels, "fluid domain voxel field"),
    Slot(Keyword.solid, FieldType.voxels, "solid domain voxel field"),
    Slot(Keyword.velocity, FieldType.vector, "fluid velocity field"),
    Slot(Keyword.density, FieldType.scalar, "fluid density field"),
    Slot(Keyword.viscosity, FieldType.scalar, "fluid viscosity field"),
))

MECHANICAL_SCHEMA = SimulationSchema("mechanical", (
    Slot(Keyword.solid, FieldType.voxels, "solid domain voxel field"),
    Slot(Keyword.displacement, FieldType.vector, "displacement field"),
    Slot(Keyword.force, FieldType.vector, "force field"),
    Slot(Keyword.density, FieldType.scalar, "solid density field"),
    Slot(Keyword.modulus, FieldType.scalar, "solid young's modulus field"),
    Slot(Keyword.poisson, FieldType.scalar, "solid poisson's ratio field"),
))
