"""
Forward (image → geo) and inverse (geo → image) evaluation of fitted models.

``to_pixel`` is the exact algebraic inverse of ``to_geo`` for the same model,
so ``to_pixel(to_geo(p, m), m) ≈ p`` for every invertible model.

An affine model is singular when |a*e - b*d| < tolerance (1e-10). Maps at
metre resolution have coefficients around 1e-5 degrees per pixel, which puts
their determinants at or below that bound; ``relative=True`` instead compares
the determinant with the magnitude of its two products, a*e and b*d.
"""

from __future__ import annotations

import math

import numpy as np

from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint
from byom.transforms.errors import SingularTransformError, UnknownModelKindError
from byom.transforms.fitting import DETERMINANT_TOLERANCE
from byom.transforms.models import AffineTransform, SimilarityTransform, TransformModel


def to_geo(pixel: PixelPoint, model: TransformModel) -> GeoPoint:
    """Map an image pixel to geographic coordinates.

    Args:
        pixel: Image position.
        model: Fitted transform.

    Returns:
        GeoPoint (lon, lat).

    Raises:
        UnknownModelKindError: If model is not a SimilarityTransform or
            AffineTransform.
    """
    x, y = pixel.x, pixel.y
    if isinstance(model, SimilarityTransform):
        s = model.scale
        cos_r = math.cos(model.rotation)
        sin_r = math.sin(model.rotation)
        lon = s * cos_r * x - s * sin_r * y + model.translate_x
        lat = s * sin_r * x + s * cos_r * y + model.translate_y
        return GeoPoint(lon=lon, lat=lat)
    if isinstance(model, AffineTransform):
        lon = model.a * x + model.b * y + model.c
        lat = model.d * x + model.e * y + model.f
        return GeoPoint(lon=lon, lat=lat)
    raise UnknownModelKindError(model)


def is_invertible(
    model: TransformModel,
    tolerance: float = DETERMINANT_TOLERANCE,
    relative: bool = False,
) -> bool:
    """Check whether the linear part of a model can be inverted.

    Args:
        model: Fitted transform.
        tolerance: Determinant threshold for affine models.
        relative: Scale the threshold by max(|a*e|, |b*d|) instead of
            comparing |det| with it directly.

    Raises:
        UnknownModelKindError: For an unrecognised model.
    """
    if isinstance(model, SimilarityTransform):
        return math.isfinite(model.scale) and model.scale != 0.0
    if isinstance(model, AffineTransform):
        det = model.determinant
        if not math.isfinite(det):
            return False
        if relative:
            return abs(det) > tolerance * max(abs(model.a * model.e), abs(model.b * model.d))
        return abs(det) >= tolerance
    raise UnknownModelKindError(model)


def _singular_error(model: TransformModel) -> SingularTransformError:
    det = model.determinant if isinstance(model, AffineTransform) else model.scale ** 2
    return SingularTransformError(determinant=det)


def to_pixel(
    geo: GeoPoint,
    model: TransformModel,
    tolerance: float = DETERMINANT_TOLERANCE,
    relative: bool = False,
) -> PixelPoint:
    """Map geographic coordinates back to an image pixel.

    Args:
        geo: Geographic position (lon, lat).
        model: Fitted transform.
        tolerance: Determinant threshold for affine models.
        relative: Use the relative singularity check (see is_invertible).

    Returns:
        PixelPoint on the image plane (may lie outside the image).

    Raises:
        SingularTransformError: If the model's linear part is not invertible.
        UnknownModelKindError: If model is not a known transform.
    """
    if not is_invertible(model, tolerance, relative):
        raise _singular_error(model)

    if isinstance(model, SimilarityTransform):
        cos_r = math.cos(model.rotation)
        sin_r = math.sin(model.rotation)
        lon_shifted = geo.lon - model.translate_x
        lat_shifted = geo.lat - model.translate_y
        x = (cos_r * lon_shifted + sin_r * lat_shifted) / model.scale
        y = (-sin_r * lon_shifted + cos_r * lat_shifted) / model.scale
        return PixelPoint(x=x, y=y)

    # AffineTransform; is_invertible already rejected anything else
    det = model.determinant
    lon_shifted = geo.lon - model.c
    lat_shifted = geo.lat - model.f
    x = (model.e * lon_shifted - model.b * lat_shifted) / det
    y = (-model.d * lon_shifted + model.a * lat_shifted) / det
    return PixelPoint(x=x, y=y)


def _check_points_array(pts: np.ndarray) -> np.ndarray:
    pts = np.asarray(pts, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected points shape (N, 2) but got {pts.shape}")
    return pts


def to_geo_array(pixels: np.ndarray, model: TransformModel) -> np.ndarray:
    """Vectorised ``to_geo`` over an (N, 2) array of pixels.

    Returns:
        (N, 2) array of (lon, lat) rows.
    """
    pixels = _check_points_array(pixels)
    if not isinstance(model, (SimilarityTransform, AffineTransform)):
        raise UnknownModelKindError(model)
    T = model.to_matrix()
    return pixels @ T[:2, :2].T + T[:2, 2]


def to_pixel_array(
    geos: np.ndarray,
    model: TransformModel,
    tolerance: float = DETERMINANT_TOLERANCE,
    relative: bool = False,
) -> np.ndarray:
    """Vectorised ``to_pixel`` over an (N, 2) array of (lon, lat) rows.

    Returns:
        (N, 2) array of (x, y) pixel rows.

    Raises:
        SingularTransformError: If the model's linear part is not invertible.
    """
    geos = _check_points_array(geos)
    if not is_invertible(model, tolerance, relative):
        raise _singular_error(model)
    T = model.to_matrix()
    inverse = np.linalg.inv(T[:2, :2])
    return (geos - T[:2, 2]) @ inverse.T
