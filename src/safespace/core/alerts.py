"""
Alert Engine - turns hazardous detections into alert records.

The alert list is most-recent-first and unbounded for the life of the
process. No deduplication: the same object seen in two passes yields two
alerts.
"""

import logging
import threading

from ..models import AlertRecord, AlertSeverity, Detection

logger = logging.getLogger(__name__)


def build_alert(detection: Detection) -> AlertRecord:
    """Build the alert record for a detection."""
    name = detection.category.display_name
    return AlertRecord(
        title=f"{name} Detected",
        message=(
            f"A {name.lower()} has been detected with "
            f"{detection.confidence_pct}% confidence."
        ),
        severity=AlertSeverity.WARNING,
    )


class AlertEngine:
    """
    Owns the process-wide alert list.

    Single writer (the aggregator), many readers. Readers get copies.
    """

    def __init__(self):
        self._alerts: list[AlertRecord] = []
        self._lock = threading.Lock()

    def raise_alert(self, detection: Detection) -> AlertRecord:
        """Create an alert for detection and prepend it to the list."""
        alert = build_alert(detection)
        self.add(alert)
        logger.info(f"Alert: {alert.message}")
        return alert

    def add(self, alert: AlertRecord) -> None:
        """Prepend an arbitrary alert (e.g. a system notice)."""
        with self._lock:
            self._alerts.insert(0, alert)

    @property
    def alerts(self) -> list[AlertRecord]:
        with self._lock:
            return list(self._alerts)

    @property
    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for alert in self._alerts if not alert.is_read)

    def mark_read(self, alert_id: str) -> bool:
        """Mark one alert as read. Returns False if the id is unknown."""
        with self._lock:
            for alert in self._alerts:
                if alert.id == alert_id:
                    alert.is_read = True
                    return True
        return False

    def mark_all_read(self) -> int:
        """Mark every alert as read, returning how many changed."""
        changed = 0
        with self._lock:
            for alert in self._alerts:
                if not alert.is_read:
                    alert.is_read = True
                    changed += 1
        return changed

    def __len__(self) -> int:
        with self._lock:
            return len(self._alerts)
