#!/usr/bin/env python3
"""
Unit tests for reference point validation functions.

Tests verify validation logic for geographic coordinates, pixel coordinates,
image dimensions, duplicate detection, and whole point sets.
"""

import unittest

import numpy as np

from byom.correspondence import CorrespondencePoint
from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint
from byom.validation import (
    MAX_POINT_COUNT,
    _is_valid_finite_number,
    detect_duplicate_points,
    validate_correspondences,
    validate_geo_point,
    validate_image_dimension,
    validate_pixel_point,
)


class TestValidateGeoPoint(unittest.TestCase):
    """Test geographic coordinate validation."""

    def test_valid_coordinates_pass(self):
        """Test that valid latitude and longitude pass validation."""
        validate_geo_point(GeoPoint(lon=-0.230194, lat=39.640583))

    def test_latitude_out_of_range_raises(self):
        """Test that latitude > 90 raises ValueError."""
        with self.assertRaisesRegex(ValueError, "latitude 91.0 outside valid range"):
            validate_geo_point(GeoPoint(lon=0.0, lat=91.0))

    def test_longitude_out_of_range_raises(self):
        """Test that longitude < -180 raises ValueError."""
        with self.assertRaisesRegex(ValueError, "longitude -181.0 outside valid range"):
            validate_geo_point(GeoPoint(lon=-181.0, lat=0.0))

    def test_boundaries_pass(self):
        """Test that coordinates exactly on the limits pass validation."""
        validate_geo_point(GeoPoint(lon=-180.0, lat=-90.0))
        validate_geo_point(GeoPoint(lon=180.0, lat=90.0))

    def test_nan_raises(self):
        """Test that NaN coordinates are rejected."""
        with self.assertRaisesRegex(ValueError, "latitude must be a finite number"):
            validate_geo_point(GeoPoint(lon=0.0, lat=float("nan")))

    def test_string_raises(self):
        """Test that non-numeric coordinates are rejected."""
        with self.assertRaisesRegex(ValueError, "longitude must be a number, got str"):
            validate_geo_point(GeoPoint(lon="0.0", lat=0.0))


class TestValidatePixelPoint(unittest.TestCase):
    """Test pixel coordinate validation."""

    def test_inside_image_passes(self):
        validate_pixel_point(PixelPoint(100.0, 200.0), 1920, 1080)

    def test_edges_are_inclusive(self):
        """Test that a tap on the right or bottom edge is accepted."""
        validate_pixel_point(PixelPoint(1920.0, 1080.0), 1920, 1080)
        validate_pixel_point(PixelPoint(0.0, 0.0), 1920, 1080)

    def test_outside_width_raises(self):
        with self.assertRaisesRegex(ValueError, "x coordinate 1921.0 outside image width"):
            validate_pixel_point(PixelPoint(1921.0, 10.0), 1920, 1080)

    def test_negative_y_raises(self):
        with self.assertRaisesRegex(ValueError, "y coordinate -1.0 outside image height"):
            validate_pixel_point(PixelPoint(10.0, -1.0), 1920, 1080)

    def test_no_dimensions_skips_bounds(self):
        """Test that any finite pixel passes when the image size is unknown."""
        validate_pixel_point(PixelPoint(-500.0, 99999.0))

    def test_infinite_raises(self):
        with self.assertRaisesRegex(ValueError, "x coordinate must be a finite number"):
            validate_pixel_point(PixelPoint(float("inf"), 0.0))


class TestValidateImageDimension(unittest.TestCase):
    """Test image dimension validation."""

    def test_none_passes_through(self):
        self.assertIsNone(validate_image_dimension(None, "image_width"))

    def test_whole_float_is_converted(self):
        self.assertEqual(validate_image_dimension(1920.0, "image_width"), 1920)

    def test_fractional_raises(self):
        with self.assertRaisesRegex(ValueError, "whole number"):
            validate_image_dimension(1920.5, "image_width")

    def test_zero_raises(self):
        with self.assertRaisesRegex(ValueError, "image_height must be positive"):
            validate_image_dimension(0, "image_height")

    def test_too_large_raises(self):
        with self.assertRaisesRegex(ValueError, "exceeds maximum"):
            validate_image_dimension(100001, "image_width")

    def test_bool_raises(self):
        with self.assertRaises(ValueError):
            validate_image_dimension(True, "image_width")


class TestIsValidFiniteNumber(unittest.TestCase):
    """Test the finite number helper."""

    def test_accepts_numbers(self):
        for value in (0, 1.5, -3, np.float64(2.0), np.int32(7)):
            with self.subTest(value=value):
                self.assertTrue(_is_valid_finite_number(value))

    def test_rejects_non_numbers(self):
        for value in (True, None, "1.0", float("nan"), float("-inf")):
            with self.subTest(value=value):
                self.assertFalse(_is_valid_finite_number(value))


class TestDetectDuplicatePoints(unittest.TestCase):
    """Test duplicate point detection."""

    def test_distinct_points_pass(self):
        points = [
            CorrespondencePoint.create(100, 100, -0.2301, 39.6404),
            CorrespondencePoint.create(900, 600, -0.2254, 39.6371),
        ]
        detect_duplicate_points(points)

    def test_same_pixel_and_geo_raises(self):
        points = [
            CorrespondencePoint.create(100, 100, -0.2301, 39.6404),
            CorrespondencePoint.create(900, 600, -0.2254, 39.6371),
            CorrespondencePoint.create(100.2, 100.1, -0.2301, 39.6404),
        ]
        with self.assertRaisesRegex(ValueError, "Duplicate reference point detected at index 0 and 2"):
            detect_duplicate_points(points)

    def test_same_geo_different_pixel_passes(self):
        """Test that only points matching in BOTH spaces count as duplicates."""
        points = [
            CorrespondencePoint.create(100, 100, -0.2301, 39.6404),
            CorrespondencePoint.create(500, 100, -0.2301, 39.6404),
        ]
        detect_duplicate_points(points)

    def test_same_pixel_different_geo_passes(self):
        points = [
            CorrespondencePoint.create(100, 100, -0.2301, 39.6404),
            CorrespondencePoint.create(100, 100, -0.2254, 39.6371),
        ]
        detect_duplicate_points(points)

    def test_custom_epsilons(self):
        points = [
            CorrespondencePoint.create(100, 100, 0.0, 0.0),
            CorrespondencePoint.create(103, 100, 0.001, 0.0),
        ]
        detect_duplicate_points(points)
        with self.assertRaises(ValueError):
            detect_duplicate_points(points, gps_epsilon=0.01, pixel_epsilon=5.0)


class TestValidateCorrespondences(unittest.TestCase):
    """Test validation of a whole point set."""

    def setUp(self):
        self.points = [
            CorrespondencePoint.create(100, 100, -0.2301, 39.6404),
            CorrespondencePoint.create(900, 600, -0.2254, 39.6371),
            CorrespondencePoint.create(300, 700, -0.2290, 39.6360),
        ]

    def test_valid_set_returned_as_list(self):
        result = validate_correspondences(tuple(self.points), 1920, 1080)
        self.assertEqual(result, self.points)

    def test_error_names_index(self):
        self.points.append(CorrespondencePoint.create(2000, 10, -0.23, 39.64))
        with self.assertRaisesRegex(ValueError, "Reference point at index 3: x coordinate"):
            validate_correspondences(self.points, 1920, 1080)

    def test_too_many_points_raises(self):
        points = [
            CorrespondencePoint.create(i % 1000, i // 1000, i * 1e-4, 0.0)
            for i in range(MAX_POINT_COUNT + 1)
        ]
        with self.assertRaisesRegex(ValueError, "Too many reference points"):
            validate_correspondences(points)

    def test_custom_max_points(self):
        with self.assertRaisesRegex(ValueError, "Maximum allowed is 2"):
            validate_correspondences(self.points, max_points=2)

    def test_invalid_dimension_raises(self):
        with self.assertRaisesRegex(ValueError, "image_width must be positive"):
            validate_correspondences(self.points, image_width=-5)

    def test_empty_set_passes(self):
        self.assertEqual(validate_correspondences([]), [])


if __name__ == "__main__":
    unittest.main()
