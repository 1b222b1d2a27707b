"""
Constants used throughout the detection pipeline
"""

# Label mapping
MIN_CONFIDENCE = 0.5  # Observations below this never become detections
BACKEND_CONFIDENCE = 0.25  # Floor passed to the detector backend

# Aggregator metrics
INITIAL_DETECTION_ACCURACY = 0.85
ACCURACY_FLOOR = 0.6
ACCURACY_CEILING = 0.99

# Image effects
VIGNETTE_OUTER_SCALE = 0.8  # outer radius as a fraction of min(width, height)
VIGNETTE_INNER_FALLOFF = 0.8  # how far the inner radius shrinks at full occlusion
NEUTRAL_LIGHTING = 0.5

# Overlay rendering
BOX_LINE_WIDTH = 3
LABEL_STRIP_HEIGHT = 20
LABEL_STRIP_ALPHA = 0.7
LABEL_FONT_SCALE = 0.45
LABEL_TEXT_OFFSET = (5, 15)  # (x, y) from the strip's top-left corner

# Inference
TARGET_LATENCY_MS = 50.0

# Environment variables
ENV_MODEL_FILE = "SAFESPACE_MODEL_FILE"
ENV_DEVICE = "SAFESPACE_DEVICE"
