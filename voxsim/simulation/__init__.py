from .keywords import Keyword, domain_name, field_name
from .schema import Slot, SimulationSchema, FLUID_SCHEMA, MECHANICAL_SCHEMA
from .errors import (
    SimulationInputError,
    SchemaMismatchError,
    UnsupportedFieldError,
    MissingFieldError,
    EmptyPatchError,
)
from .field_util import constant_scalar_field, patch_field, whole_domain_field, dummy_displacement_field
from .writer import SimulationOutput, FluidSimulationOutput, MechanicalSimulationOutput
from .reader import SimulationInput, FluidSimulationInput, MechanicalSimulationInput
from .probe import ProbeSample, probe_grid, probe_fields, estimate_max_magnitude, summarize
from .display import DisplacementCheck, display_scale_factor
