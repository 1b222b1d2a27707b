"""
Core detection pipeline.

Inference adapter -> label mapper -> aggregator -> {alert engine, overlay},
plus the independent image effects chain and the session that ties them
together.
"""

from .aggregator import AggregatorSnapshot, DetectionAggregator
from .alerts import AlertEngine, build_alert
from .effects import adjust_lighting, apply_occlusion, compose_effects, vignette_radii
from .inference import InferenceAdapter, decode_image, load_model
from .label_mapper import (
    LABEL_RULES,
    classify,
    flip_vertical,
    map_observations,
    to_display_space,
)
from .overlay import OverlayStyle, RenderResult, render, render_with_result
from .session import DetectionSession, PassOutcome, SessionState

__all__ = [
    # Aggregation
    "AggregatorSnapshot",
    "AlertEngine",
    "DetectionAggregator",
    "build_alert",
    # Effects
    "adjust_lighting",
    "apply_occlusion",
    "compose_effects",
    "vignette_radii",
    # Inference
    "InferenceAdapter",
    "decode_image",
    "load_model",
    # Label mapping
    "LABEL_RULES",
    "classify",
    "flip_vertical",
    "map_observations",
    "to_display_space",
    # Overlay
    "OverlayStyle",
    "RenderResult",
    "render",
    "render_with_result",
    # Session
    "DetectionSession",
    "PassOutcome",
    "SessionState",
]
