"""Render a map's reference points as KML."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from jinja2 import Environment, PackageLoader

from byom.correspondence import CorrespondencePoint
from byom.geo_point import GeoPoint

# Set up Jinja2 template environment
_template_env = Environment(
    loader=PackageLoader("byom.kml", "templates"),
    autoescape=False,  # KML is XML, text fields are escaped in the templates
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_map_kml(
    name: str,
    points: Sequence[CorrespondencePoint],
    footprint: Optional[Sequence[GeoPoint]] = None,
    point_names: Optional[Sequence[str]] = None,
) -> str:
    """Render reference points (and optionally the image outline) to KML.

    Args:
        name: Document name, usually the map name.
        points: Reference points; their geographic side is plotted.
        footprint: Image corners in geographic coordinates, drawn as a polygon.
        point_names: Labels for the points (default: "P1", "P2", ...).

    Returns:
        KML content as a string.

    Raises:
        ValueError: If point_names does not match the number of points.
    """
    if point_names is None:
        point_names = [f"P{i}" for i in range(1, len(points) + 1)]
    elif len(point_names) != len(points):
        raise ValueError(
            f"Got {len(point_names)} point names for {len(points)} reference points"
        )

    template_points = [
        {
            "name": label,
            "x": point.pixel.x,
            "y": point.pixel.y,
            "lon": point.geo.lon,
            "lat": point.geo.lat,
        }
        for label, point in zip(point_names, points)
    ]

    template = _template_env.get_template("map.kml.j2")
    return template.render(name=name, points=template_points, footprint=list(footprint or []))
