"""
Environment presets - named (lighting, occlusion) pairs seeding simulation.
"""

from ..models import EnvironmentPreset

ENVIRONMENT_PRESETS: tuple[EnvironmentPreset, ...] = (
    EnvironmentPreset("Normal Station", lighting=0.8, occlusion=0.0),
    EnvironmentPreset("Dim Lighting", lighting=0.3, occlusion=0.0),
    EnvironmentPreset("Emergency Lighting", lighting=0.1, occlusion=0.0),
    EnvironmentPreset("Maintenance Mode", lighting=0.6, occlusion=0.4),
    EnvironmentPreset("Sleep Quarters", lighting=0.2, occlusion=0.2),
)

DEFAULT_PRESET = "Normal Station"

_BY_NAME = {preset.name.lower(): preset for preset in ENVIRONMENT_PRESETS}


def preset_names() -> list[str]:
    return [preset.name for preset in ENVIRONMENT_PRESETS]


def get_preset(name: str) -> EnvironmentPreset:
    """
    Look up a preset by name, ignoring case and surrounding whitespace.

    Raises:
        ValueError: If no preset has that name
    """
    preset = _BY_NAME.get(name.strip().lower())
    if preset is None:
        raise ValueError(
            f"Unknown environment preset '{name}'. Available: {', '.join(preset_names())}"
        )
    return preset
