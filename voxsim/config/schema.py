"""
Configuration schema.

Sections mirror the stages of a run:
- kernel: lattice settings (voxel size)
- task: which task to run and where containers are exported
- fluid / mechanical: physical constants of the two simulation setups
- probe: bounding-box probe settings of the read tasks
- display: displacement preview settings

Each section is a raw dict; semantic knowledge lives in the consuming code
(tasks.py), not here.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Config:
    """
    Top-level configuration.

    All sections are raw dicts to avoid schema duplication.
    """
    kernel: dict[str, Any]
    task: dict[str, Any]
    fluid: dict[str, Any] = field(default_factory=dict)
    mechanical: dict[str, Any] = field(default_factory=dict)
    probe: dict[str, Any] = field(default_factory=dict)
    display: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def section_names(cls) -> list[str]:
        return ["kernel", "task", "fluid", "mechanical", "probe", "display"]
