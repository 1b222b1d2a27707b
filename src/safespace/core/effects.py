"""
Image Effects Chain - simulated lighting and occlusion.

Pure functions on BGR uint8 frames. The chain order is fixed: lighting
first, then occlusion. The two do not commute because the exposure gain
clips at 255 before the vignette darkens the frame.
"""

import logging

import numpy as np

from ..errors import InputError
from ..utils.constants import (
    NEUTRAL_LIGHTING,
    VIGNETTE_INNER_FALLOFF,
    VIGNETTE_OUTER_SCALE,
)

logger = logging.getLogger(__name__)


def _validate_image(image) -> np.ndarray:
    if not isinstance(image, np.ndarray):
        raise InputError(f"Expected numpy array, got {type(image).__name__}")
    if image.ndim not in (2, 3) or image.size == 0:
        raise InputError(f"Unsupported image shape: {image.shape}")
    if image.dtype != np.uint8:
        raise InputError(f"Unsupported image dtype: {image.dtype} (expected uint8)")
    return image


def _clamp_level(level: float) -> float:
    return float(min(1.0, max(0.0, level)))


def _to_uint8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def exposure_value(level: float) -> float:
    """Map a lighting level in [0, 1] to an exposure value in [-1, 1]."""
    return (_clamp_level(level) - NEUTRAL_LIGHTING) * 2


def adjust_lighting(image: np.ndarray, level: float) -> np.ndarray:
    """
    Apply an exposure adjustment.

    Every sample is multiplied by 2 ** exposure_value(level) and clipped to
    [0, 255]. level=0.5 returns an identical copy.

    Args:
        image: BGR or grayscale uint8 frame
        level: Lighting level in [0, 1]; values outside are clamped

    Returns:
        New adjusted frame
    """
    image = _validate_image(image)
    ev = exposure_value(level)
    if ev == 0:
        return image.copy()

    gain = 2.0**ev
    return _to_uint8(image.astype(np.float32) * gain)


def vignette_radii(width: int, height: int, level: float) -> tuple[float, float]:
    """
    Radii of the occlusion vignette.

    Returns:
        (outer_radius, inner_radius) in pixels
    """
    outer = VIGNETTE_OUTER_SCALE * min(width, height)
    inner = outer * (1 - VIGNETTE_INNER_FALLOFF * _clamp_level(level))
    return outer, inner


def vignette_alpha(width: int, height: int, level: float) -> np.ndarray:
    """
    Per-pixel darkening alpha for the occlusion vignette.

    Alpha is 0 inside the inner radius and ramps linearly to level at the outer
    radius. Pixels beyond the outer radius are left untouched. Distances are
    measured from pixel centres to the image centre.

    Returns:
        float32 array of shape (height, width)
    """
    level = _clamp_level(level)
    outer, inner = vignette_radii(width, height, level)

    ys, xs = np.ogrid[:height, :width]
    distance = np.hypot(xs + 0.5 - width / 2, ys + 0.5 - height / 2)

    span = outer - inner
    if span <= 0:
        ramp = np.zeros_like(distance)
    else:
        ramp = np.clip((distance - inner) / span, 0.0, 1.0)
    # Nothing is drawn past the outer radius
    ramp = np.where(distance > outer, 0.0, ramp)
    return (ramp * level).astype(np.float32)


def apply_occlusion(image: np.ndarray, level: float) -> np.ndarray:
    """
    Composite a radial black vignette over the frame.

    Args:
        image: BGR or grayscale uint8 frame
        level: Occlusion level; <= 0 returns the input unchanged, > 1 is clamped

    Returns:
        Occluded frame (the input itself when level <= 0)
    """
    image = _validate_image(image)
    if level <= 0:
        return image

    height, width = image.shape[:2]
    alpha = vignette_alpha(width, height, level)
    if image.ndim == 3:
        alpha = alpha[:, :, np.newaxis]

    # Black source: out = src * (1 - alpha) + 0 * alpha
    return _to_uint8(image.astype(np.float32) * (1.0 - alpha))


def compose_effects(image: np.ndarray, lighting: float, occlusion: float) -> np.ndarray:
    """Lighting then occlusion. The order is part of the contract."""
    logger.debug(f"Composing effects: lighting={lighting:.2f}, occlusion={occlusion:.2f}")
    return apply_occlusion(adjust_lighting(image, lighting), occlusion)
