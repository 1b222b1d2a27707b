"""
Simulation estimates shown when a simulated pass has nothing to report.

Heuristics only: they describe how lighting and occlusion are expected to
degrade the detector, not how it actually performed.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from ..models import Detection, EffectParameters

BASE_ACCURACY = 92
BASE_OBJECTS_FOUND = 7
BASE_DETECTION_TIME_MS = 35


@dataclass(frozen=True)
class SimulationEstimate:
    """Headline numbers for a simulation run."""

    accuracy_pct: int
    objects_found: int
    detection_time_ms: int

    @property
    def failure_rate_pct(self) -> int:
        return 100 - self.accuracy_pct


def estimate_accuracy_pct(params: EffectParameters, detections: Sequence[Detection] = ()) -> int:
    """Mean confidence when there are detections, otherwise the heuristic."""
    if detections:
        return int(sum(d.confidence for d in detections) / len(detections) * 100)

    lighting_impact = (1.0 - params.lighting) * 20
    occlusion_impact = params.occlusion * 30
    return max(60, min(99, int(BASE_ACCURACY - lighting_impact - occlusion_impact)))


def estimate_objects_found(params: EffectParameters, detections: Sequence[Detection] = ()) -> int:
    if detections:
        return len(detections)
    lighting_impact = int((1.0 - params.lighting) * 3)
    occlusion_impact = int(params.occlusion * 4)
    return max(3, BASE_OBJECTS_FOUND - lighting_impact - occlusion_impact)


def estimate_detection_time_ms(params: EffectParameters) -> int:
    lighting_impact = int((1.0 - params.lighting) * 20)
    occlusion_impact = int(params.occlusion * 30)
    return BASE_DETECTION_TIME_MS + lighting_impact + occlusion_impact


def estimate(params: EffectParameters, detections: Sequence[Detection] = ()) -> SimulationEstimate:
    return SimulationEstimate(
        accuracy_pct=estimate_accuracy_pct(params, detections),
        objects_found=estimate_objects_found(params, detections),
        detection_time_ms=estimate_detection_time_ms(params),
    )
