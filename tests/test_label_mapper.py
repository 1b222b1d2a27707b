"""
Tests for label mapping (threshold, rule order, coordinate conversion)
"""

import unittest

from safespace.core.label_mapper import (
    LABEL_RULES,
    classify,
    flip_vertical,
    map_observations,
    match_category,
    to_display_space,
)
from safespace.models import BoxOrigin, Category, RawObservation, Rect


def observation(label, confidence=0.9, box=None, origin=BoxOrigin.BOTTOM_LEFT):
    return RawObservation(
        label=label,
        confidence=confidence,
        box=box or Rect(0.1, 0.1, 0.2, 0.3),
        origin=origin,
    )


class TestConfidenceThreshold(unittest.TestCase):
    """Test the minimum confidence gate."""

    def test_below_threshold_discarded(self):
        """Test that anything under 0.5 is dropped."""
        self.assertIsNone(classify(observation("fire_extinguisher", 0.4999)))
        self.assertIsNone(classify(observation("oxygen_tank", 0.1)))

    def test_threshold_is_inclusive(self):
        """Test that exactly 0.5 is accepted."""
        detection = classify(observation("toolbox", 0.5))
        self.assertIsNotNone(detection)
        self.assertEqual(detection.confidence, 0.5)

    def test_threshold_cannot_be_lowered(self):
        """Test that a lower requested threshold still enforces 0.5."""
        self.assertIsNone(classify(observation("toolbox", 0.45), threshold=0.2))

    def test_threshold_can_be_raised(self):
        """Test that a stricter threshold is honoured."""
        self.assertIsNone(classify(observation("toolbox", 0.6), threshold=0.7))
        self.assertIsNotNone(classify(observation("toolbox", 0.75), threshold=0.7))


class TestRuleOrder(unittest.TestCase):
    """Test first-match-wins classification."""

    def test_rule_table_order(self):
        """Test that the rule table is evaluated fire, oxygen, tool."""
        self.assertEqual(
            [category for _, category in LABEL_RULES],
            [Category.FIRE_EXTINGUISHER, Category.OXYGEN_TANK, Category.TOOLBOX],
        )

    def test_fire_beats_tank(self):
        """Test that a label mentioning fire and tank is a fire extinguisher."""
        self.assertEqual(match_category("fire_tank"), Category.FIRE_EXTINGUISHER)

    def test_oxygen_beats_toolbox(self):
        """Test that oxygen wins over toolbox keywords."""
        self.assertEqual(match_category("oxygen_toolbox"), Category.OXYGEN_TANK)

    def test_case_insensitive(self):
        """Test that matching ignores case."""
        self.assertEqual(match_category("Fire_Extinguisher_v2"), Category.FIRE_EXTINGUISHER)
        self.assertEqual(match_category("OXYGEN"), Category.OXYGEN_TANK)
        self.assertEqual(match_category("ToolKit"), Category.TOOLBOX)
        self.assertEqual(match_category("cardboard BOX"), Category.TOOLBOX)

    def test_unmatched_label_discarded(self):
        """Test that labels outside the rule table produce nothing."""
        self.assertIsNone(match_category("laptop"))
        self.assertIsNone(classify(observation("laptop", 0.99)))
        self.assertIsNone(classify(observation("medical_kit", 0.99)))


class TestCoordinateConversion(unittest.TestCase):
    """Test model space to display space conversion."""

    def test_flip_is_involution(self):
        """Test that flipping twice returns the original box."""
        box = Rect(0.15, 0.25, 0.3, 0.4)
        twice = flip_vertical(flip_vertical(box))
        self.assertAlmostEqual(twice.x, box.x)
        self.assertAlmostEqual(twice.y, box.y)
        self.assertAlmostEqual(twice.width, box.width)
        self.assertAlmostEqual(twice.height, box.height)

    def test_flip_preserves_size(self):
        """Test that flipping only moves y."""
        flipped = flip_vertical(Rect(0.1, 0.1, 0.2, 0.3))
        self.assertEqual(flipped.x, 0.1)
        self.assertEqual(flipped.width, 0.2)
        self.assertEqual(flipped.height, 0.3)
        self.assertAlmostEqual(flipped.y, 0.6)

    def test_top_left_boxes_not_flipped(self):
        """Test that image-space boxes pass through unchanged."""
        box = to_display_space(Rect(0.1, 0.1, 0.2, 0.3), BoxOrigin.TOP_LEFT)
        self.assertAlmostEqual(box.y, 0.1)

    def test_out_of_range_box_clamped(self):
        """Test that boxes poking past the frame are clipped to [0, 1]."""
        box = to_display_space(Rect(-0.1, 0.0, 0.5, 1.2), BoxOrigin.TOP_LEFT)
        self.assertEqual(box.x, 0.0)
        self.assertAlmostEqual(box.width, 0.4)
        self.assertEqual(box.max_y, 1.0)


class TestScenarioMapping(unittest.TestCase):
    """Test mapping a full pass."""

    def test_fire_extinguisher_scenario(self):
        """Test a bottom-left fire extinguisher observation end to end."""
        detection = classify(observation("Fire_Extinguisher_v2", 0.82))

        self.assertEqual(detection.category, Category.FIRE_EXTINGUISHER)
        self.assertEqual(detection.confidence, 0.82)
        self.assertTrue(detection.is_hazard)
        self.assertAlmostEqual(detection.box.x, 0.1)
        self.assertAlmostEqual(detection.box.y, 0.6)
        self.assertAlmostEqual(detection.box.width, 0.2)
        self.assertAlmostEqual(detection.box.height, 0.3)
        self.assertEqual(detection.name, "Fire Extinguisher #1")

    def test_names_number_accepted_detections(self):
        """Test that discarded observations do not consume a number."""
        detections = map_observations(
            [
                observation("toolbox", 0.9),
                observation("laptop", 0.9),
                observation("oxygen_tank", 0.3),
                observation("oxygen_tank", 0.7),
                observation("tool", 0.8),
            ]
        )

        self.assertEqual(
            [d.name for d in detections],
            ["Toolbox #1", "Oxygen Tank #2", "Toolbox #3"],
        )

    def test_empty_pass(self):
        """Test that no observations maps to no detections."""
        self.assertEqual(map_observations([]), [])

    def test_every_detection_has_unique_id(self):
        """Test that identical observations still get distinct ids."""
        detections = map_observations([observation("toolbox")] * 3)
        self.assertEqual(len({d.id for d in detections}), 3)


if __name__ == "__main__":
    unittest.main()
