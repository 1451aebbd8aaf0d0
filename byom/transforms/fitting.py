"""
Transform fitting from correspondence points.

Two fitters and a selector:

- ``fit_similarity``: closed form from the first two points.
- ``fit_affine``: ordinary least squares over every point. Each output axis
  is fitted independently on (x, y, 1):

      lon ≈ a*x + b*y + c
      lat ≈ d*x + e*y + f

  The normal-equations matrix AᵀA (sums of 1, x, y, x², y², xy) is checked
  for singularity before solving; the solve itself uses SVD least squares on
  the design matrix.
- ``select_and_fit``: picks the model from the number of points.

All functions are pure and deterministic.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from byom.correspondence import CorrespondencePoint, as_arrays
from byom.transforms.errors import (
    CoincidentPointsError,
    CollinearPointsError,
    InsufficientPointsError,
)
from byom.transforms.models import AffineTransform, SimilarityTransform, TransformModel

# Singularity threshold for determinants (normal equations and inverse)
DETERMINANT_TOLERANCE = 1e-10

MIN_SIMILARITY_POINTS = 2
MIN_AFFINE_POINTS = 3


def fit_similarity(points: Sequence[CorrespondencePoint]) -> SimilarityTransform:
    """Fit a similarity transform from the first two correspondence points.

    Any points after the second are ignored.

    Args:
        points: Correspondence points; only points[0] and points[1] are used.

    Returns:
        SimilarityTransform mapping pixels to (lon, lat).

    Raises:
        InsufficientPointsError: If fewer than 2 points are given.
        CoincidentPointsError: If the two points share a pixel position.
        CollinearPointsError: If the inputs yield a non-finite transform.
    """
    if len(points) < MIN_SIMILARITY_POINTS:
        raise InsufficientPointsError(MIN_SIMILARITY_POINTS, len(points), "similarity transform")

    p1, p2 = points[0], points[1]

    # Image space vector
    dx_img = p2.pixel.x - p1.pixel.x
    dy_img = p2.pixel.y - p1.pixel.y

    # Geographic space vector (lon, lat)
    dx_geo = p2.geo.lon - p1.geo.lon
    dy_geo = p2.geo.lat - p1.geo.lat

    dist_img = p1.pixel.distance_to(p2.pixel)
    if dist_img == 0.0:
        raise CoincidentPointsError(
            "Reference points coincide in pixel space, cannot compute similarity transform"
        )
    dist_geo = math.hypot(dx_geo, dy_geo)
    scale = dist_geo / dist_img

    rotation = math.atan2(dy_geo, dx_geo) - math.atan2(dy_img, dx_img)

    # Translation from substituting the first point into the forward equation
    cos_r = math.cos(rotation)
    sin_r = math.sin(rotation)
    tx = p1.geo.lon - (scale * cos_r * p1.pixel.x - scale * sin_r * p1.pixel.y)
    ty = p1.geo.lat - (scale * sin_r * p1.pixel.x + scale * cos_r * p1.pixel.y)

    if not all(math.isfinite(v) for v in (scale, rotation, tx, ty)):
        raise CollinearPointsError("Reference points produce a non-finite similarity transform")

    return SimilarityTransform(scale=scale, rotation=rotation, translate_x=tx, translate_y=ty)


def normal_matrix(pixels: np.ndarray) -> np.ndarray:
    """Build the 3x3 normal-equations matrix AᵀA for design rows (x, y, 1).

        [[Σx², Σxy, Σx],
         [Σxy, Σy², Σy],
         [Σx,  Σy,  n ]]

    Args:
        pixels: (N, 2) array of pixel coordinates.

    Returns:
        Symmetric (3, 3) float64 array.
    """
    design = np.hstack([pixels, np.ones((pixels.shape[0], 1), dtype=np.float64)])
    return design.T @ design


def fit_affine(
    points: Sequence[CorrespondencePoint],
    tolerance: float = DETERMINANT_TOLERANCE,
) -> AffineTransform:
    """Fit an affine transform by least squares over all points.

    Args:
        points: Three or more correspondence points.
        tolerance: Minimum |det(AᵀA)| accepted as non-singular.

    Returns:
        AffineTransform minimising the squared residual over every point.
        With exactly three non-collinear points it interpolates them.

    Raises:
        InsufficientPointsError: If fewer than 3 points are given.
        CollinearPointsError: If the normal equations are (near-)singular.
    """
    if len(points) < MIN_AFFINE_POINTS:
        raise InsufficientPointsError(MIN_AFFINE_POINTS, len(points), "affine transform")

    pixels, geos = as_arrays(points)

    det = float(np.linalg.det(normal_matrix(pixels)))
    if not math.isfinite(det) or abs(det) < tolerance:
        raise CollinearPointsError(determinant=det)

    design = np.hstack([pixels, np.ones((pixels.shape[0], 1), dtype=np.float64)])
    try:
        # coeffs[:, 0] = (a, b, c), coeffs[:, 1] = (d, e, f)
        coeffs, _residuals, rank, _singular_vals = np.linalg.lstsq(design, geos, rcond=None)
    except np.linalg.LinAlgError as e:
        raise CollinearPointsError(determinant=det) from e

    if rank < 3 or not np.isfinite(coeffs).all():
        raise CollinearPointsError(determinant=det)

    (a, d), (b, e), (c, f) = coeffs.tolist()
    return AffineTransform(a=a, b=b, c=c, d=d, e=e, f=f)


def select_and_fit(
    points: Sequence[CorrespondencePoint] | None,
    tolerance: float = DETERMINANT_TOLERANCE,
) -> TransformModel | None:
    """Fit the model appropriate for the number of points.

    Args:
        points: Correspondence points for one map, in insertion order.
        tolerance: Singularity threshold passed to the affine fitter.

    Returns:
        None for fewer than 2 points, a SimilarityTransform for exactly 2,
        an AffineTransform over all points for 3 or more.

    Raises:
        CoincidentPointsError: If two points share a pixel position.
        CollinearPointsError: If 3+ points are (near-)collinear.
    """
    if not points or len(points) < MIN_SIMILARITY_POINTS:
        return None
    if len(points) == MIN_SIMILARITY_POINTS:
        return fit_similarity(points)
    return fit_affine(points, tolerance=tolerance)
