"""
Detection Session - single-in-flight inference with a stale-result guard.

States: IDLE -> CAPTURING -> PROCESSING -> READY. A new submission
supersedes the outstanding one (the older request still runs to completion
but its result is discarded). Every submission and every stop() bumps a
generation counter; a worker may only apply its result if the generation it
was started with is still current.

Inference runs on a single-worker thread pool so callers on an interactive
thread never block on the model.
"""

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from ..errors import ConfigurationError, InferenceError, InputError, SafeSpaceError
from ..models import AlertRecord, Detection, Detector, EffectParameters
from ..utils.constants import BACKEND_CONFIDENCE, MIN_CONFIDENCE
from ..utils.event_schema import (
    EVENT_TYPE_ALERT_RAISED,
    EVENT_TYPE_DETECTIONS_UPDATED,
    EVENT_TYPE_PASS_FAILED,
    EVENT_TYPE_STATE_CHANGED,
    get_event_summary,
)
from ..utils.queue_protocol import EventQueue
from .aggregator import DetectionAggregator
from .effects import compose_effects
from .inference import InferenceAdapter, decode_image
from .label_mapper import map_observations
from .overlay import OverlayStyle, render_with_result

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "Idle"
    CAPTURING = "Capturing"
    PROCESSING = "Processing"
    READY = "Ready"


ALLOWED_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.CAPTURING, SessionState.PROCESSING}),
    SessionState.CAPTURING: frozenset({SessionState.PROCESSING, SessionState.IDLE}),
    SessionState.PROCESSING: frozenset(
        {SessionState.PROCESSING, SessionState.READY, SessionState.IDLE}
    ),
    SessionState.READY: frozenset(
        {SessionState.CAPTURING, SessionState.PROCESSING, SessionState.IDLE}
    ),
}


class InvalidTransitionError(SafeSpaceError):
    """Raised when the session is asked to make a disallowed state change."""


@dataclass
class PassOutcome:
    """
    What happened to one submitted frame.

    Attributes:
        generation: Generation the pass was started with
        detections: Detections produced (empty on failure)
        alerts: Alerts raised when the pass was applied
        overlay: Annotated frame, or the base frame if rendering failed
        error: Input, inference or render error, if any
        stale: True if a newer submission or stop() superseded this pass
        applied: True if the pass replaced the session's detection state
        elapsed_ms: Backend time
    """

    generation: int
    detections: list[Detection] = field(default_factory=list)
    alerts: list[AlertRecord] = field(default_factory=list)
    overlay: np.ndarray | None = None
    error: SafeSpaceError | None = None
    stale: bool = False
    applied: bool = False
    elapsed_ms: float = 0.0


class DetectionSession:
    """
    Owns the detector, aggregator and overlay for one logical session.

    The aggregator is only written from _apply(), under the session lock,
    so there is exactly one writer.
    """

    def __init__(
        self,
        detector: Detector | None,
        aggregator: DetectionAggregator | None = None,
        threshold: float = MIN_CONFIDENCE,
        overlay_style: OverlayStyle | None = None,
        disabled_reason: str | None = None,
    ):
        self.detector = detector
        self.aggregator = aggregator or DetectionAggregator()
        self.threshold = max(threshold, MIN_CONFIDENCE)
        self.overlay_style = overlay_style or OverlayStyle()
        self.disabled_reason = disabled_reason
        if detector is None and disabled_reason is None:
            self.disabled_reason = "No detector configured"

        self.simulation = EffectParameters()

        self._state = SessionState.IDLE
        self._generation = 0
        self._pending: Future | None = None
        self._overlay: np.ndarray | None = None
        self._last_error: SafeSpaceError | None = None
        self._subscribers: list[EventQueue] = []
        self._lock = threading.RLock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="inference")

    @classmethod
    def with_model_file(
        cls,
        model_file: str,
        device: str = "auto",
        backend_confidence: float = BACKEND_CONFIDENCE,
        **kwargs,
    ) -> "DetectionSession":
        """
        Build a session around YOLO weights.

        A ConfigurationError does not propagate: the session comes back
        disabled with disabled_reason set.
        """
        try:
            detector = InferenceAdapter.from_file(model_file, device, backend_confidence)
        except ConfigurationError as e:
            logger.error(f"Detection disabled: {e}")
            return cls(None, disabled_reason=str(e), **kwargs)
        return cls(detector, **kwargs)

    @property
    def available(self) -> bool:
        return self.detector is not None

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def overlay(self) -> np.ndarray | None:
        with self._lock:
            return self._overlay

    @property
    def last_error(self) -> SafeSpaceError | None:
        with self._lock:
            return self._last_error

    @property
    def detections(self) -> list[Detection]:
        return self.aggregator.current

    @property
    def alerts(self) -> list[AlertRecord]:
        return self.aggregator.alerts

    def subscribe(self, sink: EventQueue) -> None:
        with self._lock:
            self._subscribers.append(sink)

    def unsubscribe(self, sink: EventQueue) -> None:
        with self._lock:
            if sink in self._subscribers:
                self._subscribers.remove(sink)

    def _publish(self, event: dict) -> None:
        """
        Hand an event to every subscriber without blocking.

        Events go out while the session lock is held, so a bounded queue that
        is full drops the event rather than stalling the worker.
        """
        with self._lock:
            subscribers = list(self._subscribers)
        logger.debug(f"{event.get('event_type')}: {get_event_summary(event)}")
        for sink in subscribers:
            try:
                sink.put(event, block=False)
            except queue.Full:
                logger.warning(f"Subscriber queue full, dropped {event.get('event_type')}")
            except Exception as e:
                logger.warning(f"Subscriber rejected {event.get('event_type')}: {e}")

    def _transition(self, new_state: SessionState) -> None:
        """Move to new_state and announce it. Caller holds the lock."""
        previous = self._state
        if new_state == previous and new_state != SessionState.PROCESSING:
            return
        if new_state not in ALLOWED_TRANSITIONS[previous]:
            raise InvalidTransitionError(f"{previous.value} -> {new_state.value}")
        self._state = new_state
        logger.debug(f"Session {previous.value} -> {new_state.value}")
        self._publish(
            {
                "event_type": EVENT_TYPE_STATE_CHANGED,
                "generation": self._generation,
                "previous": previous.value,
                "state": new_state.value,
            }
        )

    def _ensure_available(self) -> None:
        if not self.available:
            raise ConfigurationError(self.disabled_reason or "Detection unavailable")

    def start(self) -> None:
        """Begin a detection session (Idle/Ready -> Capturing)."""
        self._ensure_available()
        with self._lock:
            # Already capturing or mid-pass: nothing to do
            if self._state in (SessionState.IDLE, SessionState.READY):
                self._transition(SessionState.CAPTURING)
        logger.info("Detection started")

    def stop(self) -> None:
        """
        End the session.

        In-flight inference is allowed to finish but its result is dropped.
        """
        with self._lock:
            self._generation += 1
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
            self._transition(SessionState.IDLE)
        logger.info("Detection stopped")

    def submit(self, image, effects: EffectParameters | None = None) -> Future:
        """
        Queue a frame for inference, superseding any outstanding request.

        Args:
            image: BGR frame or image path
            effects: Optional lighting/occlusion to apply before inference

        Returns:
            Future resolving to a PassOutcome
        """
        self._ensure_available()
        with self._lock:
            self._generation += 1
            generation = self._generation
            if self._pending is not None and self._pending.cancel():
                logger.debug("Cancelled queued request before it started")
            self._transition(SessionState.PROCESSING)
            future = self._executor.submit(self._run_pass, image, generation, effects)
            self._pending = future
        return future

    def simulate(self, image, lighting: float | None = None, occlusion: float | None = None) -> Future:
        """
        Run detection on a frame after simulated lighting and occlusion.

        Levels default to the session's current simulation parameters. The
        confidence filter applies to observations from the composited frame.
        """
        params = EffectParameters(
            lighting=self.simulation.lighting if lighting is None else lighting,
            occlusion=self.simulation.occlusion if occlusion is None else occlusion,
        )
        return self.submit(image, effects=params)

    def preview(self, image) -> np.ndarray:
        """Apply the current simulation parameters without running detection."""
        frame = decode_image(image)
        return compose_effects(frame, self.simulation.lighting, self.simulation.occlusion)

    def set_simulation(self, params: EffectParameters) -> None:
        self.simulation = params

    def _run_pass(self, image, generation: int, effects: EffectParameters | None) -> PassOutcome:
        try:
            frame = decode_image(image)
            if effects is not None:
                frame = compose_effects(frame, effects.lighting, effects.occlusion)
        except InputError as e:
            logger.warning(f"Skipping frame: {e}")
            return self._fail(generation, e)

        try:
            result = self.detector.infer(frame)
        except Exception as e:
            logger.error(f"Detector raised instead of returning an error: {e}", exc_info=True)
            return self._fail(generation, InferenceError(str(e)))
        if not result.ok:
            return self._fail(generation, result.error, result.elapsed_ms)

        detections = map_observations(result.observations, self.threshold)
        rendered = render_with_result(frame, detections, self.overlay_style)
        return self._apply(generation, detections, rendered, result.elapsed_ms)

    def _apply(self, generation, detections, rendered, elapsed_ms) -> PassOutcome:
        outcome = PassOutcome(
            generation=generation,
            detections=detections,
            overlay=rendered.image,
            error=rendered.error,
            elapsed_ms=elapsed_ms,
        )
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding stale result (gen {generation} < {self._generation})")
                outcome.stale = True
                return outcome

            outcome.alerts = self.aggregator.ingest(detections, elapsed_ms)
            outcome.applied = True
            self._overlay = rendered.image
            self._last_error = rendered.error
            self._pending = None
            self._transition(SessionState.READY)

            snapshot = self.aggregator.snapshot()
            self._publish(
                {
                    "event_type": EVENT_TYPE_DETECTIONS_UPDATED,
                    "generation": generation,
                    "detections": [d.to_dict() for d in snapshot.current],
                    "detection_accuracy": snapshot.detection_accuracy,
                    "processing_time_ms": snapshot.processing_time_ms,
                    "overlay": rendered.image,
                }
            )
            for alert in outcome.alerts:
                self._publish(
                    {
                        "event_type": EVENT_TYPE_ALERT_RAISED,
                        "generation": generation,
                        "alert": alert.to_dict(),
                    }
                )
            if rendered.error is not None:
                self._publish_failure(generation, rendered.error)
        return outcome

    def _fail(self, generation: int, error: SafeSpaceError, elapsed_ms: float = 0.0) -> PassOutcome:
        outcome = PassOutcome(generation=generation, error=error, elapsed_ms=elapsed_ms)
        with self._lock:
            if generation != self._generation:
                outcome.stale = True
                return outcome
            self._last_error = error
            self._pending = None
            self._transition(SessionState.READY)
            self._publish_failure(generation, error)
        return outcome

    def _publish_failure(self, generation: int, error: SafeSpaceError) -> None:
        self._publish(
            {
                "event_type": EVENT_TYPE_PASS_FAILED,
                "generation": generation,
                "error_type": type(error).__name__,
                "message": str(error),
            }
        )

    def close(self) -> None:
        """Stop and wait for the worker thread to exit."""
        self.stop()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "DetectionSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
