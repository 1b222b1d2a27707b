"""
Configuration loading, validation and environment presets.

Pydantic schemas available for type-safe validation:
- Config: Complete configuration schema
- validate_config_pydantic: Validate and parse config to Pydantic model
"""

from .loader import (
    find_config_file,
    load_config,
    load_config_with_env,
    parse_config,
    simulation_parameters,
)
from .presets import DEFAULT_PRESET, ENVIRONMENT_PRESETS, get_preset, preset_names
from .schemas import (
    Config,
    DetectionConfig,
    OutputConfig,
    OverlayConfig,
    SimulationConfig,
    validate_config_pydantic,
)

__all__ = [
    # Pydantic validation
    "Config",
    "DetectionConfig",
    "OutputConfig",
    "OverlayConfig",
    "SimulationConfig",
    "validate_config_pydantic",
    # Loading
    "find_config_file",
    "load_config",
    "load_config_with_env",
    "parse_config",
    "simulation_parameters",
    # Presets
    "DEFAULT_PRESET",
    "ENVIRONMENT_PRESETS",
    "get_preset",
    "preset_names",
]
