"""
Detection Aggregator - current/historical detection state and derived metrics.

Each ingest replaces the current set wholesale, appends to the history log,
bumps per-category counts, recomputes accuracy and raises one alert per
hazardous detection.
"""

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models import AlertRecord, Category, Detection
from ..utils.constants import (
    ACCURACY_CEILING,
    ACCURACY_FLOOR,
    INITIAL_DETECTION_ACCURACY,
)
from .alerts import AlertEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatorSnapshot:
    """Read-only view of aggregator state at one moment."""

    current: tuple[Detection, ...]
    history_length: int
    counts: dict[Category, int] = field(default_factory=dict)
    detection_accuracy: float = INITIAL_DETECTION_ACCURACY
    processing_time_ms: float = 0.0


def estimate_accuracy(detections: Sequence[Detection]) -> float | None:
    """Mean confidence clamped to the accuracy band, or None if empty."""
    if not detections:
        return None
    mean = sum(d.confidence for d in detections) / len(detections)
    return max(ACCURACY_FLOOR, min(ACCURACY_CEILING, mean))


class DetectionAggregator:
    """
    Owns detection state.

    ingest() is the only mutation entry point. Properties return copies so
    readers on other threads never see a half-applied pass.
    """

    def __init__(self, alert_engine: AlertEngine | None = None):
        self.alert_engine = alert_engine or AlertEngine()
        self._current: tuple[Detection, ...] = ()
        self._history: list[Detection] = []
        self._counts: dict[Category, int] = {}
        self._accuracy = INITIAL_DETECTION_ACCURACY
        self._processing_time_ms = 0.0
        self._lock = threading.Lock()

    def ingest(
        self, detections: Sequence[Detection], processing_time_ms: float | None = None
    ) -> list[AlertRecord]:
        """
        Apply one inference pass.

        Args:
            detections: Accepted detections of the pass, in pass order
            processing_time_ms: Backend time for the pass, if measured

        Returns:
            Alerts raised for hazardous detections in this pass
        """
        detections = tuple(detections)
        with self._lock:
            self._current = detections
            self._history.extend(detections)
            for detection in detections:
                self._counts[detection.category] = (
                    self._counts.get(detection.category, 0) + 1
                )
            accuracy = estimate_accuracy(detections)
            if accuracy is not None:
                self._accuracy = accuracy
            if processing_time_ms is not None:
                self._processing_time_ms = processing_time_ms

        raised = [
            self.alert_engine.raise_alert(detection)
            for detection in detections
            if detection.is_hazard
        ]

        logger.info(
            f"Ingested {len(detections)} detection(s), "
            f"{len(raised)} hazard alert(s), accuracy {self._accuracy:.2f}"
        )
        return raised

    @property
    def current(self) -> list[Detection]:
        with self._lock:
            return list(self._current)

    @property
    def history(self) -> list[Detection]:
        with self._lock:
            return list(self._history)

    @property
    def counts(self) -> dict[Category, int]:
        with self._lock:
            return dict(self._counts)

    @property
    def detection_accuracy(self) -> float:
        with self._lock:
            return self._accuracy

    @property
    def processing_time_ms(self) -> float:
        with self._lock:
            return self._processing_time_ms

    @property
    def alerts(self) -> list[AlertRecord]:
        return self.alert_engine.alerts

    def snapshot(self) -> AggregatorSnapshot:
        with self._lock:
            return AggregatorSnapshot(
                current=self._current,
                history_length=len(self._history),
                counts=dict(self._counts),
                detection_accuracy=self._accuracy,
                processing_time_ms=self._processing_time_ms,
            )
