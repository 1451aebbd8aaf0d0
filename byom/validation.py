"""
Correspondence point validation.

Provides validation functions for reference points entered at the
interaction boundary: geographic ranges, pixel bounds, image dimensions and
duplicate detection. The transform engine itself never validates or clamps
its inputs; callers run these checks before storing a point.
"""

import logging
import math
import numbers
from collections.abc import Sequence
from typing import Any, Optional

from byom.correspondence import CorrespondencePoint
from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint

logger = logging.getLogger(__name__)


# Validation constants
GPS_EPSILON = 1e-6  # Default epsilon for GPS coordinate comparison (degrees)
PIXEL_EPSILON = 0.5  # Default epsilon for pixel coordinate comparison (pixels)
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MAX_IMAGE_DIMENSION = 100000
MAX_POINT_COUNT = 1000  # Keeps the O(n^2) duplicate scan bounded


def _is_valid_finite_number(value: Any) -> bool:
    """Check if a value is a valid finite real number (int, float, or numpy numeric).

    Args:
        value: Value to check

    Returns:
        True if value is a valid finite number, False otherwise
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False

    try:
        return math.isfinite(value)
    except (TypeError, ValueError):
        return False


def _validate_numeric_field(
    value: Any,
    field_name: str,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> None:
    """Validate a numeric field with optional range checking.

    Args:
        value: Value to validate
        field_name: Name of the field for error messages
        min_value: Optional minimum allowed value (inclusive)
        max_value: Optional maximum allowed value (inclusive)

    Raises:
        ValueError: If value is invalid
    """
    if not _is_valid_finite_number(value):
        if isinstance(value, numbers.Number):
            raise ValueError(
                f"{field_name} must be a finite number, "
                f"got {value} (NaN and Infinity are not allowed)"
            )
        raise ValueError(f"{field_name} must be a number, got {type(value).__name__}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{field_name} {value} outside valid range [{min_value}, {max_value}]")
    if max_value is not None and value > max_value:
        raise ValueError(f"{field_name} {value} outside valid range [{min_value}, {max_value}]")


def validate_geo_point(geo: GeoPoint) -> None:
    """Validate a geographic coordinate.

    Raises:
        ValueError: If longitude or latitude is non-finite or out of range
    """
    _validate_numeric_field(geo.lon, 'longitude', MIN_LONGITUDE, MAX_LONGITUDE)
    _validate_numeric_field(geo.lat, 'latitude', MIN_LATITUDE, MAX_LATITUDE)


def validate_image_dimension(dimension: Any, dimension_name: str) -> Optional[int]:
    """Validate and normalize an image dimension parameter.

    Args:
        dimension: The dimension value to validate (or None)
        dimension_name: Name for error messages ('image_width' or 'image_height')

    Returns:
        Validated dimension as int, or None if not provided

    Raises:
        ValueError: If dimension is invalid
    """
    if dimension is None:
        return None

    if not _is_valid_finite_number(dimension):
        raise ValueError(f"{dimension_name} must be a finite positive integer, got {dimension!r}")

    dim_int = int(dimension)
    if dim_int != dimension:
        raise ValueError(f"{dimension_name} must be a whole number of pixels, got {dimension}")
    if dim_int <= 0:
        raise ValueError(f"{dimension_name} must be positive, got {dim_int}")

    # Sanity check for reasonable image dimensions
    if dim_int > MAX_IMAGE_DIMENSION:
        raise ValueError(
            f"{dimension_name} {dim_int} exceeds maximum allowed value of {MAX_IMAGE_DIMENSION}"
        )

    return dim_int


def validate_pixel_point(
    pixel: PixelPoint,
    image_width: Optional[int] = None,
    image_height: Optional[int] = None,
) -> None:
    """Validate a pixel coordinate, optionally against the image size.

    Bounds are inclusive: a tap on the right or bottom edge is accepted.

    Raises:
        ValueError: If the coordinate is non-finite or outside the image
    """
    _validate_numeric_field(pixel.x, 'x coordinate')
    _validate_numeric_field(pixel.y, 'y coordinate')

    if image_width is not None and not 0 <= pixel.x <= image_width:
        raise ValueError(f"x coordinate {pixel.x} outside image width [0, {image_width}]")
    if image_height is not None and not 0 <= pixel.y <= image_height:
        raise ValueError(f"y coordinate {pixel.y} outside image height [0, {image_height}]")


def detect_duplicate_points(
    points: Sequence[CorrespondencePoint],
    gps_epsilon: float = GPS_EPSILON,
    pixel_epsilon: float = PIXEL_EPSILON,
) -> None:
    """Detect duplicate correspondence points.

    Two points are duplicates if BOTH their geographic and pixel coordinates
    are within epsilon of each other.

    Args:
        points: Correspondence points (must be pre-validated)
        gps_epsilon: Epsilon threshold for geographic comparison (degrees)
        pixel_epsilon: Epsilon threshold for pixel comparison (pixels)

    Raises:
        ValueError: If duplicate points are detected
    """
    for i in range(len(points)):
        p_i = points[i]

        for j in range(i + 1, len(points)):
            p_j = points[j]

            gps_duplicate = (
                abs(p_i.geo.lat - p_j.geo.lat) < gps_epsilon and
                abs(p_i.geo.lon - p_j.geo.lon) < gps_epsilon
            )
            pixel_duplicate = (
                abs(p_i.pixel.x - p_j.pixel.x) < pixel_epsilon and
                abs(p_i.pixel.y - p_j.pixel.y) < pixel_epsilon
            )

            if gps_duplicate and pixel_duplicate:
                raise ValueError(
                    f"Duplicate reference point detected at index {i} and {j} "
                    f"(geographic coordinates within {gps_epsilon} degrees and "
                    f"pixel coordinates within {pixel_epsilon} pixels)"
                )


def validate_correspondences(
    points: Sequence[CorrespondencePoint],
    image_width: Optional[int] = None,
    image_height: Optional[int] = None,
    gps_epsilon: float = GPS_EPSILON,
    pixel_epsilon: float = PIXEL_EPSILON,
    max_points: int = MAX_POINT_COUNT,
) -> list[CorrespondencePoint]:
    """Validate a full set of correspondence points for one map.

    Args:
        points: Correspondence points in insertion order
        image_width: Optional image width for pixel bounds validation
        image_height: Optional image height for pixel bounds validation
        gps_epsilon: Duplicate threshold in degrees
        pixel_epsilon: Duplicate threshold in pixels
        max_points: Maximum number of points accepted

    Returns:
        The validated points as a list

    Raises:
        ValueError: If any point fails validation
    """
    validated_width = validate_image_dimension(image_width, 'image_width')
    validated_height = validate_image_dimension(image_height, 'image_height')

    point_list = list(points)
    if len(point_list) > max_points:
        raise ValueError(
            f"Too many reference points provided: {len(point_list)}. "
            f"Maximum allowed is {max_points}"
        )

    if validated_width is None and validated_height is None:
        logger.debug("Image dimensions not provided, skipping pixel bounds validation")

    for i, point in enumerate(point_list):
        try:
            validate_geo_point(point.geo)
            validate_pixel_point(point.pixel, validated_width, validated_height)
        except ValueError as e:
            raise ValueError(f"Reference point at index {i}: {e}") from e

    if len(point_list) > 1:
        detect_duplicate_points(point_list, gps_epsilon, pixel_epsilon)

    logger.debug(f"Validated {len(point_list)} reference points")
    return point_list
