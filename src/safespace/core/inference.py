"""
Inference Adapter - wraps a pretrained ultralytics YOLO detector.

The model is loaded once; a load failure is a ConfigurationError. Per-call
problems (undecodable input, backend failure) come back inside the
InferenceResult instead of being raised.
"""

import logging
import time
from pathlib import Path

import cv2
import numpy as np
import torch
from ultralytics import YOLO

from ..errors import ConfigurationError, InferenceError, InputError
from ..models import BoxOrigin, InferenceResult, RawObservation, Rect
from ..utils.constants import BACKEND_CONFIDENCE, TARGET_LATENCY_MS

logger = logging.getLogger(__name__)


def resolve_device(device: str = "auto") -> str:
    """Pick cuda when available for 'auto', otherwise honour the request."""
    if device == "auto":
        return "cuda" if torch.cuda.is_available() else "cpu"
    return device


def load_model(model_file: str, device: str = "auto") -> YOLO:
    """
    Load YOLO weights once at startup.

    Raises:
        ConfigurationError: If the artifact is missing or cannot be loaded
    """
    path = Path(model_file)
    if not path.exists():
        raise ConfigurationError(f"Model file not found: {model_file}")

    device = resolve_device(device)
    try:
        model = YOLO(str(path))
        model.to(device)
    except Exception as e:
        raise ConfigurationError(f"Failed to load model {model_file}: {e}") from e

    logger.info(f"Model initialized: {model_file}")
    logger.info(f"Device: {device}")
    if device == "cuda":
        logger.info(f"GPU: {torch.cuda.get_device_name(0)}")
    else:
        logger.warning("Running on CPU - inference may exceed the latency budget")
    return model


def decode_image(image) -> np.ndarray:
    """
    Accept a BGR array or an image path and return a BGR array.

    Raises:
        InputError: If the image cannot be decoded or has the wrong shape
    """
    if isinstance(image, (str, Path)):
        frame = cv2.imread(str(image), cv2.IMREAD_COLOR)
        if frame is None:
            raise InputError(f"Could not decode image: {image}")
        return frame

    if not isinstance(image, np.ndarray):
        raise InputError(f"Unsupported image type: {type(image).__name__}")
    if image.size == 0:
        raise InputError("Empty image")
    if image.dtype != np.uint8:
        raise InputError(f"Unsupported image dtype: {image.dtype} (expected uint8)")
    if image.ndim == 3 and image.shape[2] == 3:
        return image
    if image.ndim == 2:
        code = cv2.COLOR_GRAY2BGR
    elif image.ndim == 3 and image.shape[2] == 4:
        code = cv2.COLOR_BGRA2BGR
    else:
        raise InputError(f"Unsupported image shape: {image.shape}")

    try:
        return cv2.cvtColor(image, code)
    except cv2.error as e:
        raise InputError(f"Could not convert image to BGR: {e}") from e


def parse_results(results) -> list[RawObservation]:
    """
    Convert ultralytics Results into raw observations.

    Boxes come from boxes.xyxyn, which is normalized with a top-left origin.
    """
    if not results:
        return []
    result = results[0]
    boxes = result.boxes
    if boxes is None or boxes.cls is None or len(boxes.cls) == 0:
        return []

    names = result.names
    classes = boxes.cls.int().cpu().tolist()
    confs = boxes.conf.cpu().tolist()
    xyxyn = boxes.xyxyn.cpu().numpy()

    observations = []
    for class_id, conf, box in zip(classes, confs, xyxyn):
        x1, y1, x2, y2 = (float(v) for v in box)
        observations.append(
            RawObservation(
                label=str(names.get(class_id, class_id)),
                confidence=float(conf),
                box=Rect(x=x1, y=y1, width=x2 - x1, height=y2 - y1),
                origin=BoxOrigin.TOP_LEFT,
            )
        )
    return observations


class InferenceAdapter:
    """
    Detector implementation backed by an ultralytics model.

    Example:
        adapter = InferenceAdapter.from_file("best.pt")
        result = adapter.infer(frame)
    """

    def __init__(
        self,
        model,
        device: str = "cpu",
        backend_confidence: float = BACKEND_CONFIDENCE,
    ):
        self.model = model
        self.device = device
        self.backend_confidence = backend_confidence

    @classmethod
    def from_file(
        cls,
        model_file: str,
        device: str = "auto",
        backend_confidence: float = BACKEND_CONFIDENCE,
    ) -> "InferenceAdapter":
        device = resolve_device(device)
        return cls(load_model(model_file, device), device, backend_confidence)

    @property
    def class_names(self) -> dict[int, str]:
        return dict(getattr(self.model, "names", {}) or {})

    def infer(self, image) -> InferenceResult:
        """
        Run the model on one image.

        Call from a worker thread; this blocks for the duration of inference.
        """
        try:
            frame = decode_image(image)
        except InputError as e:
            logger.warning(f"Skipping frame: {e}")
            return InferenceResult(error=e)

        start = time.perf_counter()
        try:
            results = self.model.predict(
                source=frame,
                conf=self.backend_confidence,
                device=self.device,
                verbose=False,
            )
            observations = parse_results(results)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(f"Inference failed: {e}", exc_info=True)
            return InferenceResult(error=InferenceError(str(e)), elapsed_ms=elapsed_ms)

        elapsed_ms = (time.perf_counter() - start) * 1000
        if elapsed_ms > TARGET_LATENCY_MS:
            logger.debug(f"Inference took {elapsed_ms:.1f}ms (target {TARGET_LATENCY_MS}ms)")
        return InferenceResult(observations=observations, elapsed_ms=elapsed_ms)
