"""Pixel to geographic correspondence points."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint


@dataclass(frozen=True)
class CorrespondencePoint:
    """One observed pairing between a map pixel and a geographic coordinate.

    Points are interchangeable except for their order: the first two points
    of a list are the ones a two-point similarity fit uses.

    Attributes:
        pixel: Position on the map image.
        geo: Matching real-world position.
    """

    pixel: PixelPoint
    geo: GeoPoint

    @classmethod
    def create(cls, image_x: float, image_y: float, lon: float, lat: float) -> CorrespondencePoint:
        """Build a point from bare floats."""
        return cls(pixel=PixelPoint(float(image_x), float(image_y)), geo=GeoPoint(float(lon), float(lat)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the flat reference point schema.

        Returns:
            Dictionary with imageX, imageY, lon and lat keys.
        """
        return {
            "imageX": self.pixel.x,
            "imageY": self.pixel.y,
            "lon": self.geo.lon,
            "lat": self.geo.lat,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CorrespondencePoint:
        """Create a point from the flat reference point schema.

        Args:
            data: Dictionary with imageX, imageY, lon and lat keys.

        Returns:
            New CorrespondencePoint instance.

        Raises:
            KeyError: If required keys are missing from data.
            ValueError: If values cannot be converted to float.
        """
        return cls.create(data["imageX"], data["imageY"], data["lon"], data["lat"])


def as_arrays(points: Sequence[CorrespondencePoint]) -> tuple[np.ndarray, np.ndarray]:
    """Split correspondences into pixel and geo coordinate arrays.

    Args:
        points: Correspondence points in caller order.

    Returns:
        Tuple of (pixels, geos), each a float64 array of shape (N, 2).
        Geo rows are (lon, lat).
    """
    pixels = np.array([[p.pixel.x, p.pixel.y] for p in points], dtype=np.float64).reshape(-1, 2)
    geos = np.array([[p.geo.lon, p.geo.lat] for p in points], dtype=np.float64).reshape(-1, 2)
    return pixels, geos
