"""
Tests for the ultralytics inference adapter (with a fake model)
"""

import unittest

import numpy as np

from safespace.core.inference import (
    InferenceAdapter,
    decode_image,
    load_model,
    parse_results,
)
from safespace.errors import ConfigurationError, InferenceError, InputError
from safespace.models import BoxOrigin, Detector


class FakeTensor:
    """Just enough of a torch tensor for parse_results."""

    def __init__(self, values):
        self.values = np.asarray(values, dtype=np.float32)

    def int(self):
        return FakeTensor(self.values.astype(np.int64))

    def cpu(self):
        return self

    def numpy(self):
        return self.values

    def tolist(self):
        return self.values.tolist()

    def __len__(self):
        return len(self.values)


class FakeBoxes:
    def __init__(self, cls, conf, xyxyn):
        self.cls = FakeTensor(cls)
        self.conf = FakeTensor(conf)
        self.xyxyn = FakeTensor(xyxyn)


class FakeResult:
    def __init__(self, boxes, names):
        self.boxes = boxes
        self.names = names


class FakeModel:
    names = {0: "FireExtinguisher", 1: "OxygenTank", 2: "ToolBox"}

    def __init__(self, boxes=None, error=None):
        self.boxes = boxes
        self.error = error
        self.calls = []

    def predict(self, source, conf, device, verbose):
        self.calls.append({"shape": source.shape, "conf": conf, "device": device})
        if self.error is not None:
            raise self.error
        return [FakeResult(self.boxes, self.names)]


def two_boxes():
    return FakeBoxes(
        cls=[0, 2],
        conf=[0.82, 0.4],
        xyxyn=[[0.1, 0.2, 0.3, 0.6], [0.5, 0.5, 0.9, 1.0]],
    )


class TestParseResults(unittest.TestCase):
    """Test conversion of ultralytics results."""

    def test_boxes_are_top_left(self):
        """Test label, confidence and xyxyn conversion."""
        observations = parse_results([FakeResult(two_boxes(), FakeModel.names)])

        self.assertEqual(len(observations), 2)
        first = observations[0]
        self.assertEqual(first.label, "FireExtinguisher")
        self.assertAlmostEqual(first.confidence, 0.82, places=5)
        self.assertEqual(first.origin, BoxOrigin.TOP_LEFT)
        self.assertAlmostEqual(first.box.x, 0.1, places=5)
        self.assertAlmostEqual(first.box.y, 0.2, places=5)
        self.assertAlmostEqual(first.box.width, 0.2, places=5)
        self.assertAlmostEqual(first.box.height, 0.4, places=5)
        self.assertEqual(observations[1].label, "ToolBox")

    def test_no_boxes(self):
        """Test empty and missing results."""
        self.assertEqual(parse_results([]), [])
        self.assertEqual(parse_results([FakeResult(None, {})]), [])
        empty = FakeBoxes(cls=[], conf=[], xyxyn=np.zeros((0, 4)))
        self.assertEqual(parse_results([FakeResult(empty, {})]), [])


class TestDecodeImage(unittest.TestCase):
    """Test image input handling."""

    def test_grayscale_promoted(self):
        """Test that grayscale frames become BGR."""
        frame = decode_image(np.zeros((8, 6), dtype=np.uint8))
        self.assertEqual(frame.shape, (8, 6, 3))

    def test_bgra_dropped_to_bgr(self):
        """Test that an alpha channel is removed."""
        frame = decode_image(np.zeros((8, 6, 4), dtype=np.uint8))
        self.assertEqual(frame.shape, (8, 6, 3))

    def test_bad_inputs(self):
        """Test undecodable paths and unsupported types."""
        with self.assertRaises(InputError):
            decode_image("/nonexistent/frame.jpg")
        with self.assertRaises(InputError):
            decode_image(b"not an image")
        with self.assertRaises(InputError):
            decode_image(np.zeros((4, 4, 2), dtype=np.uint8))

    def test_non_uint8_rejected(self):
        """Test that arrays OpenCV cannot convert raise InputError."""
        for dtype in (np.int64, np.float64, np.float32):
            with self.assertRaises(InputError):
                decode_image(np.zeros((10, 10), dtype=dtype))
        with self.assertRaises(InputError):
            decode_image(np.zeros((10, 10, 4), dtype=np.int32))


class TestInferenceAdapter(unittest.TestCase):
    """Test the adapter with a fake YOLO model."""

    def setUp(self):
        self.frame = np.zeros((48, 64, 3), dtype=np.uint8)

    def test_is_detector(self):
        """Test that the adapter satisfies the Detector protocol."""
        self.assertIsInstance(InferenceAdapter(FakeModel()), Detector)

    def test_infer(self):
        """Test a successful pass."""
        model = FakeModel(two_boxes())
        adapter = InferenceAdapter(model, device="cpu", backend_confidence=0.3)

        result = adapter.infer(self.frame)

        self.assertTrue(result.ok)
        self.assertEqual(len(result.observations), 2)
        self.assertGreaterEqual(result.elapsed_ms, 0.0)
        self.assertEqual(model.calls[0], {"shape": (48, 64, 3), "conf": 0.3, "device": "cpu"})

    def test_backend_failure_returned(self):
        """Test that a model exception becomes an InferenceError result."""
        adapter = InferenceAdapter(FakeModel(error=RuntimeError("CUDA out of memory")))

        result = adapter.infer(self.frame)

        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, InferenceError)
        self.assertIn("CUDA out of memory", str(result.error))
        self.assertEqual(result.observations, [])

    def test_bad_dtype_returned(self):
        """Test that an unsupported dtype comes back as InputError, not a cv2 fault."""
        model = FakeModel(two_boxes())
        result = InferenceAdapter(model).infer(np.zeros((10, 10), dtype=np.int64))

        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, InputError)
        self.assertEqual(model.calls, [])

    def test_bad_input_returned(self):
        """Test that undecodable input never reaches the model."""
        model = FakeModel(two_boxes())
        result = InferenceAdapter(model).infer("/nonexistent/frame.jpg")

        self.assertIsInstance(result.error, InputError)
        self.assertEqual(model.calls, [])

    def test_class_names(self):
        self.assertEqual(InferenceAdapter(FakeModel()).class_names[1], "OxygenTank")


class TestLoadModel(unittest.TestCase):
    """Test model loading failures."""

    def test_missing_file(self):
        """Test that a missing artifact is a configuration error."""
        with self.assertRaises(ConfigurationError):
            load_model("/nonexistent/best.pt", device="cpu")


if __name__ == "__main__":
    unittest.main()
