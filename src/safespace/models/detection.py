"""
Detection data models - rectangles, categories, raw observations and detections.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class BoxOrigin(Enum):
    """Where a detector places the origin of its normalized box coordinates."""

    BOTTOM_LEFT = "bottom_left"  # y increases upward (Vision-style)
    TOP_LEFT = "top_left"  # y increases downward (image-style)


@dataclass(frozen=True)
class Rect:
    """
    Normalized rectangle.

    Attributes:
        x: Left edge, fraction of image width
        y: Origin-side edge, fraction of image height
        width: Fraction of image width
        height: Fraction of image height
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def to_pixels(self, image_width: int, image_height: int) -> tuple[int, int, int, int]:
        """Scale to pixel (x1, y1, x2, y2) for an image of the given size."""
        return (
            int(round(self.x * image_width)),
            int(round(self.y * image_height)),
            int(round(self.max_x * image_width)),
            int(round(self.max_y * image_height)),
        )


class Category(Enum):
    """Closed set of equipment categories. Values are display names."""

    FIRE_EXTINGUISHER = "Fire Extinguisher"
    OXYGEN_TANK = "Oxygen Tank"
    TOOLBOX = "Toolbox"
    LAPTOP = "Laptop"
    MEDICAL_KIT = "Medical Kit"
    WATER_CONTAINER = "Water Container"
    SPACE_HELMET = "Space Helmet"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def is_hazard(self) -> bool:
        return self in HAZARD_CATEGORIES

    @property
    def color(self) -> tuple[int, int, int]:
        """Overlay colour in BGR order."""
        return CATEGORY_COLORS[self]

    @property
    def description(self) -> str:
        return CATEGORY_DESCRIPTIONS[self]


HAZARD_CATEGORIES = frozenset({Category.FIRE_EXTINGUISHER, Category.OXYGEN_TANK})

# BGR, OpenCV channel order
CATEGORY_COLORS: dict[Category, tuple[int, int, int]] = {
    Category.FIRE_EXTINGUISHER: (51, 51, 204),
    Category.OXYGEN_TANK: (0, 255, 255),
    Category.TOOLBOX: (255, 0, 0),
    Category.LAPTOP: (204, 204, 0),
    Category.MEDICAL_KIT: (0, 255, 0),
    Category.WATER_CONTAINER: (255, 0, 0),
    Category.SPACE_HELMET: (255, 255, 255),
}

CATEGORY_DESCRIPTIONS: dict[Category, str] = {
    Category.FIRE_EXTINGUISHER: "Critical safety equipment for fire emergencies in space.",
    Category.OXYGEN_TANK: "Essential life support equipment containing breathable oxygen.",
    Category.TOOLBOX: "Contains necessary tools for station maintenance and repairs.",
    Category.LAPTOP: "Computing equipment for communication and mission operations.",
    Category.MEDICAL_KIT: "Contains medical supplies for emergency treatment.",
    Category.WATER_CONTAINER: "Stores potable water for crew consumption.",
    Category.SPACE_HELMET: "Part of EVA suit required for spacewalks.",
}


@dataclass(frozen=True)
class RawObservation:
    """
    One unfiltered output unit from the detector backend.

    Lives for a single inference pass only.
    """

    label: str
    confidence: float
    box: Rect
    origin: BoxOrigin = BoxOrigin.BOTTOM_LEFT


@dataclass(frozen=True)
class Detection:
    """
    A classified, localized detection.

    The box is always in display space: origin top-left, y increasing
    downward, every component in [0, 1].
    """

    name: str
    category: Category
    confidence: float
    box: Rect
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def is_hazard(self) -> bool:
        return self.category.is_hazard

    @property
    def confidence_pct(self) -> int:
        return int(round(self.confidence * 100))

    def to_dict(self) -> dict:
        """Serialize for event payloads and CLI output."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.display_name,
            "confidence": self.confidence,
            "box": {
                "x": self.box.x,
                "y": self.box.y,
                "width": self.box.width,
                "height": self.box.height,
            },
            "timestamp": self.timestamp.isoformat(),
            "is_hazard": self.is_hazard,
        }
