"""Stored map and reference point records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from byom.correspondence import CorrespondencePoint
from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint


@dataclass(frozen=True)
class MapRecord:
    """A georeferenced map image.

    Attributes:
        id: Store-assigned identifier.
        name: Display name.
        image_path: Location of the source image, if known.
        image_width: Image width in pixels, if known.
        image_height: Image height in pixels, if known.
        created_at: When the map was added.
    """

    id: int
    name: str
    image_path: Optional[str]
    image_width: Optional[int]
    image_height: Optional[int]
    created_at: datetime

    @property
    def has_dimensions(self) -> bool:
        return self.image_width is not None and self.image_height is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for YAML serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "image_path": self.image_path,
            "image_width": self.image_width,
            "image_height": self.image_height,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapRecord:
        """Create record from dictionary loaded from YAML.

        Raises:
            KeyError: If required keys are missing.
            ValueError: If values have the wrong format.
        """
        width = data.get("image_width")
        height = data.get("image_height")
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            image_path=data.get("image_path"),
            image_width=int(width) if width is not None else None,
            image_height=int(height) if height is not None else None,
            created_at=_parse_timestamp(data["created_at"]),
        )


@dataclass(frozen=True)
class PointRecord:
    """A stored reference point belonging to one map.

    Attributes:
        id: Store-assigned identifier, increasing in insertion order.
        map_id: Owning map.
        image_x: Pixel x coordinate.
        image_y: Pixel y coordinate.
        lon: Longitude in degrees.
        lat: Latitude in degrees.
        created_at: When the point was added.
    """

    id: int
    map_id: int
    image_x: float
    image_y: float
    lon: float
    lat: float
    created_at: datetime

    @property
    def correspondence(self) -> CorrespondencePoint:
        """The pixel/geo pairing this record stores."""
        return CorrespondencePoint(
            pixel=PixelPoint(self.image_x, self.image_y),
            geo=GeoPoint(self.lon, self.lat),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for YAML serialization."""
        return {
            "id": self.id,
            "map_id": self.map_id,
            "image_x": self.image_x,
            "image_y": self.image_y,
            "lon": self.lon,
            "lat": self.lat,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PointRecord:
        """Create record from dictionary loaded from YAML.

        Raises:
            KeyError: If required keys are missing.
            ValueError: If values have the wrong format.
        """
        return cls(
            id=int(data["id"]),
            map_id=int(data["map_id"]),
            image_x=float(data["image_x"]),
            image_y=float(data["image_y"]),
            lon=float(data["lon"]),
            lat=float(data["lat"]),
            created_at=_parse_timestamp(data["created_at"]),
        )


def _parse_timestamp(value: Any) -> datetime:
    # PyYAML already turns unquoted ISO timestamps into datetime
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))
