"""Geographic coordinate representation."""

from dataclasses import dataclass

from byom.types import Degrees


@dataclass(frozen=True)
class GeoPoint:
    """Geographic coordinates in decimal degrees (WGS84).

    Longitude comes first because the transforms treat it as the planar x
    axis and latitude as the y axis.

    Attributes:
        lon: Longitude in degrees, expected in [-180, 180].
        lat: Latitude in degrees, expected in [-90, 90].
    """

    lon: Degrees
    lat: Degrees
