"""
Naming convention of the entries in a simulation container.

The reader dispatches on substrings of the entry names, so no keyword may be a
substring of another.
"""

from enum import StrEnum


class Keyword(StrEnum):
    fluid = "fluid"
    solid = "solid"
    density = "density"
    viscosity = "viscosity"
    velocity = "velocity"
    poisson = "poisson"
    modulus = "modulus"
    displacement = "displacement"
    force = "force"


def domain_name(key: Keyword) -> str:
    return f"Simulation.Domain_{key}"


def field_name(key: Keyword) -> str:
    return f"Simulation.Field_{key}"
