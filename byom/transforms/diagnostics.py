"""
Fit quality diagnostics.

Measures how far a fitted planar model lands from each recorded reference
point, both in degrees (the model's own units) and in meters on the WGS84
ellipsoid. The ground distance is only a report: the model itself stays a
planar lon/lat fit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from pyproj import Geod

from byom.correspondence import CorrespondencePoint, as_arrays
from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint
from byom.transforms.evaluation import to_geo, to_geo_array
from byom.transforms.models import TransformModel
from byom.types import Meters, Pixels

_WGS84 = Geod(ellps="WGS84")


@dataclass(frozen=True)
class FitDiagnostics:
    """Residuals of a model against the points it was fitted from.

    Attributes:
        model: The evaluated transform.
        residuals_deg: Planar residual per point, degrees.
        residuals_m: Geodesic residual per point, meters.
        rms_m: Root mean square of residuals_m.
        max_m: Largest residual in meters.
    """

    model: TransformModel
    residuals_deg: tuple[float, ...]
    residuals_m: tuple[float, ...]
    rms_m: Meters
    max_m: Meters

    @property
    def worst_index(self) -> int | None:
        """Index of the point with the largest residual, None when empty."""
        if not self.residuals_m:
            return None
        return int(np.argmax(self.residuals_m))


def diagnose(points: Sequence[CorrespondencePoint], model: TransformModel) -> FitDiagnostics:
    """Compute residuals of ``model`` at each correspondence point.

    Args:
        points: Reference points, typically the ones the model was fitted from.
        model: Fitted transform.

    Returns:
        FitDiagnostics; empty residuals and zero statistics for no points.
    """
    if not points:
        return FitDiagnostics(
            model=model, residuals_deg=(), residuals_m=(), rms_m=Meters(0.0), max_m=Meters(0.0)
        )

    pixels, geos = as_arrays(points)
    predicted = to_geo_array(pixels, model)

    residuals_deg = np.linalg.norm(predicted - geos, axis=1)
    _az12, _az21, distances = _WGS84.inv(
        predicted[:, 0], predicted[:, 1], geos[:, 0], geos[:, 1]
    )
    residuals_m = np.abs(np.asarray(distances, dtype=np.float64))

    return FitDiagnostics(
        model=model,
        residuals_deg=tuple(float(r) for r in residuals_deg),
        residuals_m=tuple(float(r) for r in residuals_m),
        rms_m=Meters(float(np.sqrt(np.mean(residuals_m * residuals_m)))),
        max_m=Meters(float(residuals_m.max())),
    )


def image_footprint(width: Pixels, height: Pixels, model: TransformModel) -> list[GeoPoint]:
    """Geographic positions of the image corners.

    Corners are returned clockwise from the top-left: (0, 0), (width, 0),
    (width, height), (0, height).
    """
    corners = [(0, 0), (width, 0), (width, height), (0, height)]
    return [to_geo(PixelPoint(float(x), float(y)), model) for x, y in corners]
