"""
Label Mapper - raw detector output to domain detections.

Classification is driven by an ordered rule table. The first rule whose
keywords appear in the lower-cased label wins, so a label such as
"fire_tank" maps to Fire Extinguisher even though it also mentions a tank.
"""

import logging
from collections.abc import Iterable

from ..models import BoxOrigin, Category, Detection, RawObservation, Rect
from ..utils.constants import MIN_CONFIDENCE

logger = logging.getLogger(__name__)

# Ordered: earlier rules take precedence over later ones.
LABEL_RULES: tuple[tuple[frozenset[str], Category], ...] = (
    (frozenset({"fire", "extinguisher"}), Category.FIRE_EXTINGUISHER),
    (frozenset({"oxygen", "tank"}), Category.OXYGEN_TANK),
    (frozenset({"tool", "box", "toolbox"}), Category.TOOLBOX),
)


def flip_vertical(box: Rect) -> Rect:
    """
    Mirror a normalized box across the horizontal midline.

    Converts between bottom-left and top-left origins: y' = 1 - y - height.
    Applying it twice returns the original box.
    """
    return Rect(x=box.x, y=1.0 - box.y - box.height, width=box.width, height=box.height)


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, value))


def clamp_box(box: Rect) -> Rect:
    """Clip a normalized box so every edge lies inside [0, 1]."""
    x1, y1 = _clamp_unit(box.x), _clamp_unit(box.y)
    x2, y2 = _clamp_unit(box.max_x), _clamp_unit(box.max_y)
    return Rect(x=x1, y=y1, width=max(0.0, x2 - x1), height=max(0.0, y2 - y1))


def to_display_space(box: Rect, origin: BoxOrigin) -> Rect:
    """Convert a model-space box to display space (top-left origin)."""
    if origin is BoxOrigin.BOTTOM_LEFT:
        box = flip_vertical(box)
    return clamp_box(box)


def match_category(label: str) -> Category | None:
    """Return the category of the first rule matching label, or None."""
    normalized = label.lower()
    for keywords, category in LABEL_RULES:
        if any(keyword in normalized for keyword in keywords):
            return category
    return None


def classify(
    observation: RawObservation,
    index: int = 1,
    threshold: float = MIN_CONFIDENCE,
) -> Detection | None:
    """
    Classify one raw observation.

    Args:
        observation: Raw detector output
        index: 1-based position among this pass's accepted detections
        threshold: Minimum confidence; never below MIN_CONFIDENCE

    Returns:
        Detection in display space, or None if discarded
    """
    threshold = max(threshold, MIN_CONFIDENCE)
    if observation.confidence < threshold:
        return None

    category = match_category(observation.label)
    if category is None:
        return None

    return Detection(
        name=f"{category.display_name} #{index}",
        category=category,
        confidence=observation.confidence,
        box=to_display_space(observation.box, observation.origin),
    )


def map_observations(
    observations: Iterable[RawObservation], threshold: float = MIN_CONFIDENCE
) -> list[Detection]:
    """
    Classify every observation of one inference pass.

    Accepted detections are numbered 1..n in observation order.
    """
    detections: list[Detection] = []
    discarded = 0
    for observation in observations:
        detection = classify(observation, len(detections) + 1, threshold)
        if detection is None:
            discarded += 1
            continue
        detections.append(detection)

    logger.debug(f"Mapped {len(detections)} detection(s), discarded {discarded}")
    return detections
