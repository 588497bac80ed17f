"""Failures when writing or reading a simulation container. All of them are terminal."""


class SimulationInputError(Exception):
    """The container content is not suitable for the simulation input."""


class SchemaMismatchError(SimulationInputError):
    """The number of entries, or their tally by type, differs from the schema."""


class UnsupportedFieldError(SimulationInputError):
    """An entry is neither a domain volume nor a scalar or vector field."""


class MissingFieldError(SimulationInputError):
    """No entry could be assigned to a logical field of the schema."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Missing {label}")
        self.label = label


class EmptyPatchError(ValueError):
    """A boundary patch does not overlap the domain."""
