"""
Detector Protocol - Common interface for detection backends.

Any backend (YOLO weights, an exported ONNX graph, a test double) can
implement this protocol to plug into the detection session.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from ..errors import SafeSpaceError
from .detection import RawObservation


@dataclass
class InferenceResult:
    """
    Outcome of one inference call.

    Attributes:
        observations: Raw observations, empty on failure
        error: InputError or InferenceError if the call failed
        elapsed_ms: Wall-clock time spent inside the backend
    """

    observations: list[RawObservation] = field(default_factory=list)
    error: SafeSpaceError | None = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@runtime_checkable
class Detector(Protocol):
    """
    Protocol for detection backends.

    Example:
        result = detector.infer(frame)
        if result.ok:
            detections = map_observations(result.observations)
    """

    def infer(self, image: Any) -> InferenceResult:
        """
        Run the detector on one image.

        Args:
            image: BGR frame (numpy array) or path to an image file

        Returns:
            InferenceResult; failures are reported in result.error, never raised
        """
        ...
