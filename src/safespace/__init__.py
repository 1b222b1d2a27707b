"""
SafeSpace Detection

Detects safety-critical equipment (fire extinguishers, oxygen tanks,
toolboxes, ...) with a pretrained YOLO model, maps raw output into a closed
taxonomy with hazard semantics, aggregates detections and alerts, renders
overlays, and simulates degraded lighting and occlusion for offline
robustness checks.

Package structure:
  core/     - Inference adapter, label mapper, aggregator, alerts, effects,
              overlay, detection session
  models/   - Data models and the Detector protocol
  config/   - YAML/pydantic configuration and environment presets
  utils/    - Constants, event schema, queue abstraction, time formatting
"""

__version__ = "1.0.0"

from .config import ENVIRONMENT_PRESETS, get_preset, load_config
from .core import (
    AlertEngine,
    DetectionAggregator,
    DetectionSession,
    InferenceAdapter,
    SessionState,
    adjust_lighting,
    apply_occlusion,
    classify,
    compose_effects,
    map_observations,
    render,
)
from .errors import (
    ConfigurationError,
    ConfigValidationError,
    InferenceError,
    InputError,
    RenderError,
    SafeSpaceError,
)
from .models import (
    AlertRecord,
    AlertSeverity,
    Category,
    Detection,
    EffectParameters,
    EnvironmentPreset,
    RawObservation,
    Rect,
)

__all__ = [
    # Config
    "ENVIRONMENT_PRESETS",
    "get_preset",
    "load_config",
    # Core
    "AlertEngine",
    "DetectionAggregator",
    "DetectionSession",
    "InferenceAdapter",
    "SessionState",
    "adjust_lighting",
    "apply_occlusion",
    "classify",
    "compose_effects",
    "map_observations",
    "render",
    # Errors
    "ConfigValidationError",
    "ConfigurationError",
    "InferenceError",
    "InputError",
    "RenderError",
    "SafeSpaceError",
    # Models
    "AlertRecord",
    "AlertSeverity",
    "Category",
    "Detection",
    "EffectParameters",
    "EnvironmentPreset",
    "RawObservation",
    "Rect",
]
