"""
Coordinate transform engine.

Fits a planar transform from pixel ↔ geographic correspondences and
evaluates it in both directions:

- 2 points: similarity (scale, rotation, translation)
- 3+ points: affine least squares over all points

Everything here is pure and stateless; failures are raised as
``TransformError`` subclasses and never logged.
"""

from byom.transforms.diagnostics import FitDiagnostics, diagnose, image_footprint
from byom.transforms.errors import (
    CoincidentPointsError,
    CollinearPointsError,
    InsufficientPointsError,
    SingularTransformError,
    TransformError,
    UnknownModelKindError,
)
from byom.transforms.evaluation import (
    is_invertible,
    to_geo,
    to_geo_array,
    to_pixel,
    to_pixel_array,
)
from byom.transforms.fitting import (
    DETERMINANT_TOLERANCE,
    fit_affine,
    fit_similarity,
    select_and_fit,
)
from byom.transforms.models import (
    AffineTransform,
    SimilarityTransform,
    TransformKind,
    TransformModel,
    model_from_dict,
)

__all__ = [
    # Models
    "TransformKind",
    "TransformModel",
    "SimilarityTransform",
    "AffineTransform",
    "model_from_dict",
    # Fitting
    "DETERMINANT_TOLERANCE",
    "fit_similarity",
    "fit_affine",
    "select_and_fit",
    # Evaluation
    "to_geo",
    "to_pixel",
    "to_geo_array",
    "to_pixel_array",
    "is_invertible",
    # Diagnostics
    "FitDiagnostics",
    "diagnose",
    "image_footprint",
    # Errors
    "TransformError",
    "InsufficientPointsError",
    "CollinearPointsError",
    "CoincidentPointsError",
    "SingularTransformError",
    "UnknownModelKindError",
]
