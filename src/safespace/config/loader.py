"""
Configuration loading - YAML file discovery, environment overrides, validation.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ConfigValidationError
from ..models import EffectParameters
from ..utils.constants import ENV_DEVICE, ENV_MODEL_FILE
from .presets import get_preset
from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


def config_search_paths() -> list[Path]:
    return [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "safespace" / DEFAULT_CONFIG_NAME,
    ]


def find_config_file(config_path: str | None = None) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (must exist if given)
    2. Current directory (config.yaml)
    3. ~/.config/safespace/config.yaml

    Returns:
        Path to config file, or None if no file was found and none was specified

    Raises:
        ConfigValidationError: If an explicitly specified file does not exist
    """
    if config_path:
        specified = Path(config_path)
        if not specified.exists():
            raise ConfigValidationError(f"Specified config file not found: {config_path}")
        return specified

    for path in config_search_paths():
        if path.exists():
            logger.info(f"Using config: {path}")
            return path
    return None


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides to a raw config dict.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    detection = config.setdefault("detection", {})
    if ENV_MODEL_FILE in os.environ:
        logger.info(f"Using model file from environment: {ENV_MODEL_FILE}")
        detection["model_file"] = os.environ[ENV_MODEL_FILE]
    if ENV_DEVICE in os.environ:
        logger.info(f"Using device from environment: {ENV_DEVICE}")
        detection["device"] = os.environ[ENV_DEVICE]
    return config


def parse_config(raw: dict | None) -> Config:
    """
    Validate a raw config dict (after environment overrides).

    Raises:
        ConfigValidationError: With every pydantic error on its own line
    """
    raw = load_config_with_env(dict(raw or {}))
    try:
        return validate_config_pydantic(raw)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigValidationError("Invalid configuration:\n  " + "\n  ".join(problems)) from e


def load_config(config_path: str | None = None) -> Config:
    """
    Load, override and validate the configuration.

    Falls back to defaults when no config file exists.

    Raises:
        ConfigValidationError: If the file is missing, unreadable or invalid
    """
    config_file = find_config_file(config_path)
    if config_file is None:
        logger.info("No config file found, using defaults")
        return parse_config({})

    try:
        with open(config_file, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {config_file}: {e}") from e

    if raw is not None and not isinstance(raw, dict):
        raise ConfigValidationError(f"Top level of {config_file} must be a mapping")

    config = parse_config(raw)
    logger.info(f"Configuration loaded from {config_file}")
    return config


def simulation_parameters(config: Config) -> EffectParameters:
    """Preset values, with explicit lighting/occlusion taking precedence."""
    preset = get_preset(config.simulation.environment)
    return EffectParameters(
        lighting=(
            preset.lighting
            if config.simulation.lighting is None
            else config.simulation.lighting
        ),
        occlusion=(
            preset.occlusion
            if config.simulation.occlusion is None
            else config.simulation.occlusion
        ),
    )
