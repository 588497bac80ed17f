"""
TOML configuration loading and saving.

Uses tomllib for reading and tomli_w for writing.
"""

import copy
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from .schema import Config


_defaults: dict[str, dict[str, Any]] = {
    "kernel": {
        "voxel_size": 0.5,
    },
    "task": {
        "name": "write_fluid",
    },
    "fluid": {
        "density": 1000.0,
        "viscosity": 8.97e-6,
        "inlet_velocity": 1.5,
        "pipe_length": 150.0,
    },
    "mechanical": {
        "density": 7800.0,
        "young_modulus": 200e9,
        "poisson_ratio": 0.3,
        "applied_force": [20.0, 0.0, 0.0],
    },
    "probe": {
        "grow": 1.0,
        "step": 2.0,
    },
    "display": {
        "max_displacement": 10.0,
        "step": 2.0,
        "nb_classes": 20,
    },
}


def default_config() -> Config:
    """A complete configuration with the values of the reference setups."""
    return Config(**copy.deepcopy(_defaults))


def load_config(path: str | Path) -> Config:
    """
    Load a TOML configuration file and return a Config object.

    Missing sections and keys are filled from the defaults. Unknown sections
    raise a ValueError.
    """
    path = Path(path)
    with open(path, "rb") as f:
        data = tomllib.load(f)

    unknown = set(data) - set(Config.section_names())
    if unknown:
        raise ValueError(f"Unknown configuration section(s) in {path}: {sorted(unknown)}")

    sections = copy.deepcopy(_defaults)
    for name, values in data.items():
        sections[name].update(values)
    return Config(**sections)


def save_config(config: Config, path: str | Path) -> None:
    """Save a Config object to a TOML file."""
    path = Path(path)
    data: dict[str, Any] = {}

    for name in Config.section_names():
        section = getattr(config, name)
        if section:
            data[name] = section

    with open(path, "wb") as f:
        tomli_w.dump(data, f)


def get_task_name(config: Config) -> str:
    return config.task["name"]
