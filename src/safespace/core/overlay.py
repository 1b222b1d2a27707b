"""
Overlay Renderer - draws detection boxes and labels onto a frame.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import cv2
import numpy as np

from ..errors import RenderError
from ..models import Detection
from ..utils.constants import (
    BOX_LINE_WIDTH,
    LABEL_FONT_SCALE,
    LABEL_STRIP_ALPHA,
    LABEL_STRIP_HEIGHT,
    LABEL_TEXT_OFFSET,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlayStyle:
    """Drawing parameters for the overlay."""

    line_width: int = BOX_LINE_WIDTH
    label_height: int = LABEL_STRIP_HEIGHT
    label_alpha: float = LABEL_STRIP_ALPHA
    font_scale: float = LABEL_FONT_SCALE


@dataclass
class RenderResult:
    """Rendered frame plus the error that forced a fallback, if any."""

    image: np.ndarray
    error: RenderError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def label_text(detection: Detection) -> str:
    return f"{detection.category.display_name}: {detection.confidence_pct}%"


def label_strip_rect(
    box_px: tuple[int, int, int, int], canvas_size: tuple[int, int], strip_height: int
) -> tuple[int, int, int, int]:
    """
    Place the label strip above a pixel box, kept inside the canvas.

    Args:
        box_px: (x1, y1, x2, y2) of the detection box
        canvas_size: (width, height) of the frame
        strip_height: Strip height in pixels

    Returns:
        (x1, y1, x2, y2) of the strip. If the box touches the top edge the
        strip slides down to y=0 and overlaps the box instead.
    """
    width, height = canvas_size
    x1, y1, x2, _ = box_px
    strip_height = min(strip_height, height)

    top = min(max(y1 - strip_height, 0), height - strip_height)
    left = min(max(x1, 0), width - 1)
    right = min(max(x2, left + 1), width)
    return left, top, right, top + strip_height


def _draw_detection(canvas: np.ndarray, detection: Detection, style: OverlayStyle) -> None:
    height, width = canvas.shape[:2]
    x1, y1, x2, y2 = detection.box.to_pixels(width, height)
    color = detection.category.color

    cv2.rectangle(canvas, (x1, y1), (x2, y2), color, style.line_width)

    sx1, sy1, sx2, sy2 = label_strip_rect(
        (x1, y1, x2, y2), (width, height), style.label_height
    )
    strip = canvas[sy1:sy2, sx1:sx2]
    # Blend toward black: src * (1 - alpha)
    canvas[sy1:sy2, sx1:sx2] = cv2.addWeighted(
        strip, 1.0 - style.label_alpha, np.zeros_like(strip), style.label_alpha, 0
    )

    dx, dy = LABEL_TEXT_OFFSET
    cv2.putText(
        canvas,
        label_text(detection),
        (sx1 + dx, sy1 + min(dy, sy2 - sy1)),
        cv2.FONT_HERSHEY_SIMPLEX,
        style.font_scale,
        (255, 255, 255),
        1,
        cv2.LINE_AA,
    )


def render_with_result(
    image: np.ndarray,
    detections: Sequence[Detection],
    style: OverlayStyle | None = None,
) -> RenderResult:
    """
    Draw detections onto a copy of image, in the given order.

    Never mutates the input. On failure the result carries a RenderError and
    an unannotated copy of the input.
    """
    style = style or OverlayStyle()
    try:
        if not isinstance(image, np.ndarray) or image.ndim != 3 or image.size == 0:
            raise RenderError(f"Cannot render onto {getattr(image, 'shape', type(image))}")
        canvas = image.copy()
        for detection in detections:
            _draw_detection(canvas, detection, style)
        return RenderResult(image=canvas)
    except Exception as e:
        error = e if isinstance(e, RenderError) else RenderError(str(e))
        logger.warning(f"Overlay rendering failed, returning base image: {error}")
        fallback = image.copy() if isinstance(image, np.ndarray) else image
        return RenderResult(image=fallback, error=error)


def render(
    image: np.ndarray,
    detections: Sequence[Detection],
    style: OverlayStyle | None = None,
) -> np.ndarray:
    """Draw detections onto a copy of image; the base image on failure."""
    return render_with_result(image, detections, style).image
