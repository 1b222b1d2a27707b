"""
Utility modules for constants, event schema and queue abstractions.
"""

from .constants import (
    BACKEND_CONFIDENCE,
    ENV_DEVICE,
    ENV_MODEL_FILE,
    INITIAL_DETECTION_ACCURACY,
    MIN_CONFIDENCE,
)
from .event_schema import (
    EVENT_TYPE_ALERT_RAISED,
    EVENT_TYPE_DETECTIONS_UPDATED,
    EVENT_TYPE_PASS_FAILED,
    EVENT_TYPE_STATE_CHANGED,
    get_event_summary,
    is_valid_event,
)
from .queue_protocol import CallbackQueueAdapter, EventQueue
from .timefmt import mission_time, time_ago

__all__ = [
    "BACKEND_CONFIDENCE",
    "ENV_DEVICE",
    "ENV_MODEL_FILE",
    "INITIAL_DETECTION_ACCURACY",
    "MIN_CONFIDENCE",
    # Event schema
    "EVENT_TYPE_ALERT_RAISED",
    "EVENT_TYPE_DETECTIONS_UPDATED",
    "EVENT_TYPE_PASS_FAILED",
    "EVENT_TYPE_STATE_CHANGED",
    "get_event_summary",
    "is_valid_event",
    # Queue abstraction
    "CallbackQueueAdapter",
    "EventQueue",
    # Time formatting
    "mission_time",
    "time_ago",
]
