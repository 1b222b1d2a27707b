"""
Data models for the detection pipeline.
"""

from .alerts import AlertRecord, AlertSeverity
from .detection import (
    CATEGORY_COLORS,
    HAZARD_CATEGORIES,
    BoxOrigin,
    Category,
    Detection,
    RawObservation,
    Rect,
)
from .detector import Detector, InferenceResult
from .simulation import EffectParameters, EnvironmentPreset

__all__ = [
    # Alerts
    "AlertRecord",
    "AlertSeverity",
    # Detection
    "BoxOrigin",
    "CATEGORY_COLORS",
    "Category",
    "Detection",
    "HAZARD_CATEGORIES",
    "RawObservation",
    "Rect",
    # Protocols
    "Detector",
    "InferenceResult",
    # Simulation
    "EffectParameters",
    "EnvironmentPreset",
]
