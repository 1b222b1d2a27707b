"""
Pydantic schemas for configuration validation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.constants import (
    BACKEND_CONFIDENCE,
    BOX_LINE_WIDTH,
    LABEL_STRIP_ALPHA,
    LABEL_STRIP_HEIGHT,
    MIN_CONFIDENCE,
)
from .presets import DEFAULT_PRESET, get_preset


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class DetectionConfig(StrictModel):
    """Detection settings."""

    model_file: str = Field(default="best.pt", description="YOLO model file path (.pt)")
    device: str = Field(default="auto", description="'auto', 'cpu', 'cuda' or 'cuda:N'")
    confidence_threshold: float = Field(
        default=MIN_CONFIDENCE,
        ge=MIN_CONFIDENCE,
        le=1.0,
        description="Minimum confidence for a detection (never below 0.5)",
    )
    backend_confidence: float = Field(
        default=BACKEND_CONFIDENCE,
        ge=0.0,
        le=1.0,
        description="Confidence floor passed to the model itself",
    )

    @field_validator("model_file")
    @classmethod
    def validate_model_file(cls, v: str) -> str:
        if not v.endswith(".pt"):
            raise ValueError("Model file must be .pt format")
        return v


class SimulationConfig(StrictModel):
    """Initial simulation controls."""

    environment: str = DEFAULT_PRESET
    lighting: float | None = Field(default=None, ge=0.0, le=1.0)
    occlusion: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        return get_preset(v).name


class OverlayConfig(StrictModel):
    """Overlay drawing settings."""

    line_width: int = Field(default=BOX_LINE_WIDTH, ge=1, le=20)
    label_height: int = Field(default=LABEL_STRIP_HEIGHT, ge=8, le=100)
    label_alpha: float = Field(default=LABEL_STRIP_ALPHA, ge=0.0, le=1.0)


class OutputConfig(StrictModel):
    """Where the CLI writes annotated images."""

    image_dir: str = "output"


class Config(StrictModel):
    """Complete configuration schema."""

    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate configuration using Pydantic.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config(**config)
