"""
Bring Your Own Map: georeference map images from reference points.

Pair a handful of pixels on a scanned or photographed map with their real
longitude/latitude, and the package fits a planar transform that converts
between the two spaces:

    - 2 reference points: similarity transform (scale, rotation, translation)
    - 3+ reference points: affine transform, least squares over all points

Example Usage:
    >>> from byom import CorrespondencePoint, PixelPoint, GeoPoint, select_and_fit, to_geo, to_pixel
    >>>
    >>> points = [
    ...     CorrespondencePoint.create(0, 0, 10.0, 20.0),
    ...     CorrespondencePoint.create(1, 0, 11.0, 20.0),
    ...     CorrespondencePoint.create(0, 1, 10.0, 21.0),
    ... ]
    >>> model = select_and_fit(points)
    >>> geo = to_geo(PixelPoint(5, 5), model)        # ≈ GeoPoint(lon=15.0, lat=25.0)
    >>> pixel = to_pixel(GeoPoint(15.0, 25.0), model)  # ≈ PixelPoint(x=5.0, y=5.0)

Available Classes:
    Coordinates:
        - PixelPoint, GeoPoint, CorrespondencePoint
    Transforms:
        - SimilarityTransform, AffineTransform, TransformKind
    Persistence and interaction:
        - PointStore: maps and reference points in a YAML file
        - MapSession: point editing and live position lookup for one map
        - GeorefConfig: tolerances, limits and store location
"""

from byom.config import GeorefConfig, get_default_config
from byom.correspondence import CorrespondencePoint
from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint
from byom.session import LocatedPosition, MapSession
from byom.store import MapRecord, PointRecord, PointStore
from byom.transforms import (
    AffineTransform,
    CoincidentPointsError,
    CollinearPointsError,
    InsufficientPointsError,
    SimilarityTransform,
    SingularTransformError,
    TransformError,
    TransformKind,
    TransformModel,
    UnknownModelKindError,
    fit_affine,
    fit_similarity,
    select_and_fit,
    to_geo,
    to_pixel,
)

__all__ = [
    # Coordinates
    'PixelPoint',
    'GeoPoint',
    'CorrespondencePoint',

    # Transform engine
    'TransformKind',
    'TransformModel',
    'SimilarityTransform',
    'AffineTransform',
    'select_and_fit',
    'fit_similarity',
    'fit_affine',
    'to_geo',
    'to_pixel',

    # Errors
    'TransformError',
    'InsufficientPointsError',
    'CollinearPointsError',
    'CoincidentPointsError',
    'SingularTransformError',
    'UnknownModelKindError',

    # Persistence and interaction
    'PointStore',
    'MapRecord',
    'PointRecord',
    'MapSession',
    'LocatedPosition',
    'GeorefConfig',
    'get_default_config',
]

# Package metadata
__version__ = '0.1.0'
__description__ = 'Georeference map images from reference points'
