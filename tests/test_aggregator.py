"""
Tests for detection aggregation (current set, history, counts, accuracy)
"""

import unittest

from safespace.core.aggregator import DetectionAggregator, estimate_accuracy
from safespace.models import AlertSeverity, Category, Detection, Rect


def make_detection(category, confidence=0.8, index=1):
    return Detection(
        name=f"{category.display_name} #{index}",
        category=category,
        confidence=confidence,
        box=Rect(0.1, 0.1, 0.2, 0.2),
    )


class TestIngest(unittest.TestCase):
    """Test applying inference passes."""

    def setUp(self):
        self.aggregator = DetectionAggregator()

    def test_current_replaced_history_appended(self):
        """Test two disjoint passes of size 2 and 3."""
        first = [make_detection(Category.TOOLBOX, index=i) for i in (1, 2)]
        second = [make_detection(Category.TOOLBOX, index=i) for i in (1, 2, 3)]

        self.aggregator.ingest(first)
        self.aggregator.ingest(second)

        self.assertEqual(len(self.aggregator.history), 5)
        self.assertEqual(
            [d.id for d in self.aggregator.current], [d.id for d in second]
        )

    def test_history_preserves_order(self):
        """Test that history is append-only in pass order."""
        a = make_detection(Category.TOOLBOX)
        b = make_detection(Category.OXYGEN_TANK)
        self.aggregator.ingest([a])
        self.aggregator.ingest([b])
        self.assertEqual([d.id for d in self.aggregator.history], [a.id, b.id])

    def test_empty_pass_clears_current_only(self):
        """Test that an empty pass empties current but keeps accuracy."""
        self.aggregator.ingest([make_detection(Category.TOOLBOX, 0.9)])
        self.aggregator.ingest([])

        self.assertEqual(self.aggregator.current, [])
        self.assertEqual(len(self.aggregator.history), 1)
        self.assertAlmostEqual(self.aggregator.detection_accuracy, 0.9)

    def test_counts_per_category(self):
        """Test cumulative per-category counts."""
        self.aggregator.ingest(
            [make_detection(Category.TOOLBOX), make_detection(Category.OXYGEN_TANK)]
        )
        self.aggregator.ingest([make_detection(Category.TOOLBOX)])

        counts = self.aggregator.counts
        self.assertEqual(counts[Category.TOOLBOX], 2)
        self.assertEqual(counts[Category.OXYGEN_TANK], 1)
        self.assertNotIn(Category.FIRE_EXTINGUISHER, counts)

    def test_processing_time_recorded(self):
        """Test that the latest backend time is kept."""
        self.aggregator.ingest([], processing_time_ms=42.5)
        self.assertEqual(self.aggregator.processing_time_ms, 42.5)
        self.aggregator.ingest([])
        self.assertEqual(self.aggregator.processing_time_ms, 42.5)

    def test_returned_lists_are_copies(self):
        """Test that callers cannot mutate aggregator state."""
        self.aggregator.ingest([make_detection(Category.TOOLBOX)])
        self.aggregator.current.clear()
        self.aggregator.history.clear()
        self.assertEqual(len(self.aggregator.current), 1)
        self.assertEqual(len(self.aggregator.history), 1)

    def test_snapshot(self):
        """Test the read-only snapshot."""
        self.aggregator.ingest([make_detection(Category.TOOLBOX, 0.7)], 12.0)
        snapshot = self.aggregator.snapshot()
        self.assertEqual(len(snapshot.current), 1)
        self.assertEqual(snapshot.history_length, 1)
        self.assertAlmostEqual(snapshot.detection_accuracy, 0.7)
        self.assertEqual(snapshot.processing_time_ms, 12.0)


class TestAccuracy(unittest.TestCase):
    """Test the detection accuracy metric."""

    def test_initial_accuracy(self):
        """Test the starting value before any pass."""
        self.assertEqual(DetectionAggregator().detection_accuracy, 0.85)

    def test_mean_confidence(self):
        """Test accuracy as mean confidence of the pass."""
        detections = [
            make_detection(Category.TOOLBOX, 0.7),
            make_detection(Category.TOOLBOX, 0.9),
        ]
        self.assertAlmostEqual(estimate_accuracy(detections), 0.8)

    def test_clamped_to_band(self):
        """Test that accuracy stays within [0.6, 0.99]."""
        self.assertEqual(estimate_accuracy([make_detection(Category.TOOLBOX, 0.5)]), 0.6)
        self.assertEqual(estimate_accuracy([make_detection(Category.TOOLBOX, 1.0)]), 0.99)
        self.assertIsNone(estimate_accuracy([]))


class TestHazardAlerts(unittest.TestCase):
    """Test alerts raised from ingested passes."""

    def test_one_alert_per_hazard(self):
        """Test that only the hazardous detection raises an alert."""
        aggregator = DetectionAggregator()
        raised = aggregator.ingest(
            [make_detection(Category.OXYGEN_TANK, 0.77), make_detection(Category.TOOLBOX)]
        )

        self.assertEqual(len(raised), 1)
        self.assertEqual(raised[0].title, "Oxygen Tank Detected")
        self.assertEqual(raised[0].severity, AlertSeverity.WARNING)
        self.assertEqual(len(aggregator.alerts), 1)

    def test_no_deduplication_across_passes(self):
        """Test that the same hazard in two passes yields two alerts."""
        aggregator = DetectionAggregator()
        aggregator.ingest([make_detection(Category.FIRE_EXTINGUISHER)])
        aggregator.ingest([make_detection(Category.FIRE_EXTINGUISHER)])
        self.assertEqual(len(aggregator.alerts), 2)


if __name__ == "__main__":
    unittest.main()
