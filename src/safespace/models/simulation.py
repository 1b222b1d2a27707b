"""
Simulation parameter models.
"""

from dataclasses import dataclass


def _check_unit(name: str, value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")
    return float(value)


@dataclass(frozen=True)
class EffectParameters:
    """Lighting and occlusion levels for the effects chain, both in [0, 1]."""

    lighting: float = 0.5
    occlusion: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "lighting", _check_unit("lighting", self.lighting))
        object.__setattr__(self, "occlusion", _check_unit("occlusion", self.occlusion))


@dataclass(frozen=True)
class EnvironmentPreset:
    """Named default (lighting, occlusion) pair."""

    name: str
    lighting: float
    occlusion: float

    @property
    def parameters(self) -> EffectParameters:
        return EffectParameters(lighting=self.lighting, occlusion=self.occlusion)
