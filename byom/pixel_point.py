"""Position on a map image."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PixelPoint:
    """Sub-pixel position on a map image, origin at the top-left corner.

    No bounds are enforced; projected positions may lie off the image.

    Attributes:
        x: Column, increasing to the right.
        y: Row, increasing downwards.
    """

    x: float
    y: float

    def distance_to(self, other: "PixelPoint") -> float:
        """Euclidean distance to another pixel, in pixels."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def is_within(self, width: float, height: float) -> bool:
        """True if the point lies on a width x height image, edges included."""
        return 0 <= self.x <= width and 0 <= self.y <= height
