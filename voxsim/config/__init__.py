"""
Configuration module for TOML-based run parameters.

Provides:
- Schema dataclass of raw config sections
- TOML loading and saving, with defaults
"""

from .schema import Config

from .loader import load_config, save_config, default_config, get_task_name

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "default_config",
    "get_task_name",
]
