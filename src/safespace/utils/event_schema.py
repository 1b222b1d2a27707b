"""
Event Schema - Contract between the detection session and the presentation layer.

The session publishes plain dicts onto subscribed queues. Consumers can be a
queue.Queue drained by a UI thread or a callback wrapped in
CallbackQueueAdapter.

Event Types:
    STATE_CHANGED: Session moved between Idle/Capturing/Processing/Ready
    DETECTIONS_UPDATED: A pass was applied; carries the new current set
    ALERT_RAISED: A hazardous detection produced an alert
    PASS_FAILED: A pass ended with an input, inference or render error
"""

from typing import Any, Literal, TypedDict

EVENT_TYPE_STATE_CHANGED = "STATE_CHANGED"
EVENT_TYPE_DETECTIONS_UPDATED = "DETECTIONS_UPDATED"
EVENT_TYPE_ALERT_RAISED = "ALERT_RAISED"
EVENT_TYPE_PASS_FAILED = "PASS_FAILED"

EventType = Literal[
    "STATE_CHANGED", "DETECTIONS_UPDATED", "ALERT_RAISED", "PASS_FAILED"
]


class BaseEvent(TypedDict, total=False):
    """
    Common fields present in all events.

    Required fields:
        event_type: Type of event
        generation: Session generation the event belongs to
    """

    event_type: EventType
    generation: int


class StateChangedEvent(BaseEvent):
    previous: str
    state: str


class DetectionsUpdatedEvent(BaseEvent):
    """
    DETECTIONS_UPDATED event.

    Additional fields:
        detections: Serialized current detection set
        detection_accuracy: Aggregator accuracy after this pass
        processing_time_ms: Backend time for this pass
        overlay: Annotated image (numpy array) or None
    """

    detections: list[dict[str, Any]]
    detection_accuracy: float
    processing_time_ms: float
    overlay: Any


class AlertRaisedEvent(BaseEvent):
    alert: dict[str, Any]


class PassFailedEvent(BaseEvent):
    error_type: str
    message: str


REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    EVENT_TYPE_STATE_CHANGED: ("previous", "state"),
    EVENT_TYPE_DETECTIONS_UPDATED: (
        "detections",
        "detection_accuracy",
        "processing_time_ms",
    ),
    EVENT_TYPE_ALERT_RAISED: ("alert",),
    EVENT_TYPE_PASS_FAILED: ("error_type", "message"),
}


def is_valid_event(event: dict[str, Any]) -> bool:
    """Check that an event has a known type and its required fields."""
    event_type = event.get("event_type")
    if event_type not in REQUIRED_FIELDS:
        return False
    if "generation" not in event:
        return False
    return all(key in event for key in REQUIRED_FIELDS[event_type])


def get_event_summary(event: dict[str, Any]) -> str:
    """One-line human readable summary for logs."""
    event_type = event.get("event_type", "UNKNOWN")
    if event_type == EVENT_TYPE_STATE_CHANGED:
        return f"{event.get('previous')} -> {event.get('state')}"
    if event_type == EVENT_TYPE_DETECTIONS_UPDATED:
        return (
            f"{len(event.get('detections', []))} detection(s), "
            f"accuracy {event.get('detection_accuracy', 0):.2f}"
        )
    if event_type == EVENT_TYPE_ALERT_RAISED:
        return event.get("alert", {}).get("title", "alert")
    if event_type == EVENT_TYPE_PASS_FAILED:
        return f"{event.get('error_type')}: {event.get('message')}"
    return event_type
