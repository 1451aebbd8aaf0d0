"""Unit tests for byom.transforms.fitting (model fitting and selection)."""

import math

import numpy as np
import pytest

from byom import CorrespondencePoint
from byom.transforms import (
    AffineTransform,
    CoincidentPointsError,
    CollinearPointsError,
    InsufficientPointsError,
    SimilarityTransform,
    TransformError,
    fit_affine,
    fit_similarity,
    select_and_fit,
    to_geo,
)
from byom.pixel_point import PixelPoint
from byom.transforms.fitting import normal_matrix


def cp(x, y, lon, lat):
    return CorrespondencePoint.create(x, y, lon, lat)


@pytest.fixture
def unit_triangle():
    """Three points of the affine lon = x + 10, lat = y + 20."""
    return [cp(0, 0, 10, 20), cp(1, 0, 11, 20), cp(0, 1, 10, 21)]


class TestSelectAndFit:
    """Tests for choosing the model from the point count."""

    @pytest.mark.parametrize(
        "points",
        [None, [], [cp(0, 0, 0, 0)]],
        ids=["none", "empty", "single-point"],
    )
    def test_too_few_points_returns_none(self, points) -> None:
        assert select_and_fit(points) is None

    def test_two_points_select_similarity(self) -> None:
        model = select_and_fit([cp(0, 0, 0, 0), cp(100, 0, 0, 1)])

        assert isinstance(model, SimilarityTransform)

    def test_three_points_select_affine(self, unit_triangle) -> None:
        model = select_and_fit(unit_triangle)

        assert isinstance(model, AffineTransform)

    def test_collinear_points_raise(self) -> None:
        points = [cp(0, 0, 0, 0), cp(1, 0, 1, 0), cp(2, 0, 2, 0)]

        with pytest.raises(CollinearPointsError):
            select_and_fit(points)


class TestFitSimilarity:
    """Tests for the two-point similarity fit."""

    def test_quarter_turn_scale_and_rotation(self) -> None:
        """(0,0)->(0,0) and (100,0)->(0,1): scale 0.01, rotation pi/2."""
        model = fit_similarity([cp(0, 0, 0, 0), cp(100, 0, 0, 1)])

        assert model.scale == pytest.approx(0.01)
        assert model.rotation == pytest.approx(math.pi / 2)
        assert model.translate_x == pytest.approx(0.0, abs=1e-12)
        assert model.translate_y == pytest.approx(0.0, abs=1e-12)

        mid = to_geo(PixelPoint(50, 0), model)
        assert mid.lon == pytest.approx(0.0, abs=1e-12)
        assert mid.lat == pytest.approx(0.5)

    def test_maps_both_reference_points_exactly(self) -> None:
        points = [cp(120, 80, -0.2301, 39.6404), cp(900, 610, -0.2254, 39.6371)]
        model = fit_similarity(points)

        for p in points:
            geo = to_geo(p.pixel, model)
            assert geo.lon == pytest.approx(p.geo.lon, abs=1e-12)
            assert geo.lat == pytest.approx(p.geo.lat, abs=1e-12)

    def test_only_first_two_points_are_used(self) -> None:
        first_two = [cp(0, 0, 0, 0), cp(100, 0, 0, 1)]
        with_extra = first_two + [cp(50, 50, 42.0, -7.0)]

        assert fit_similarity(with_extra) == fit_similarity(first_two)

    def test_coincident_pixels_raise(self) -> None:
        points = [cp(10, 10, 0, 0), cp(10, 10, 1, 1)]

        with pytest.raises(CoincidentPointsError) as exc_info:
            fit_similarity(points)

        # Coincident points are a special case of degenerate geometry
        assert isinstance(exc_info.value, CollinearPointsError)
        assert isinstance(exc_info.value, TransformError)
        assert isinstance(exc_info.value, ValueError)

    def test_coincident_geo_gives_zero_scale(self) -> None:
        model = fit_similarity([cp(0, 0, 5, 5), cp(10, 0, 5, 5)])

        assert model.scale == 0.0
        assert math.isfinite(model.rotation)

    def test_single_point_raises_insufficient(self) -> None:
        with pytest.raises(InsufficientPointsError) as exc_info:
            fit_similarity([cp(0, 0, 0, 0)])

        assert exc_info.value.required == 2
        assert exc_info.value.given == 1


class TestFitAffine:
    """Tests for the least-squares affine fit."""

    def test_unit_triangle_recovers_coefficients(self, unit_triangle) -> None:
        model = fit_affine(unit_triangle)

        assert model.a == pytest.approx(1.0)
        assert model.b == pytest.approx(0.0, abs=1e-12)
        assert model.c == pytest.approx(10.0)
        assert model.d == pytest.approx(0.0, abs=1e-12)
        assert model.e == pytest.approx(1.0)
        assert model.f == pytest.approx(20.0)

        geo = to_geo(PixelPoint(5, 5), model)
        assert geo.lon == pytest.approx(15.0)
        assert geo.lat == pytest.approx(25.0)

    def test_least_squares_uses_every_point(self) -> None:
        """A fourth point off the plane pulls the fit away from the first three."""
        points = [
            cp(0, 0, 0, 0.0),
            cp(1, 0, 1, 0.0),
            cp(0, 1, 0, 1.0),
            cp(1, 1, 1, 1.4),
        ]

        model = fit_affine(points)

        # lon is exactly x
        assert model.a == pytest.approx(1.0)
        assert model.b == pytest.approx(0.0, abs=1e-12)
        assert model.c == pytest.approx(0.0, abs=1e-12)
        # lat: least-squares plane through 0, 0, 1, 1.4 at the unit square corners
        assert model.d == pytest.approx(0.2)
        assert model.e == pytest.approx(1.2)
        assert model.f == pytest.approx(-0.1)

    def test_least_squares_minimises_residual(self) -> None:
        points = [
            cp(0, 0, 0, 0.0),
            cp(1, 0, 1, 0.0),
            cp(0, 1, 0, 1.0),
            cp(1, 1, 1, 1.4),
        ]

        def sse(model):
            total = 0.0
            for p in points:
                geo = to_geo(p.pixel, model)
                total += (geo.lon - p.geo.lon) ** 2 + (geo.lat - p.geo.lat) ** 2
            return total

        fitted = fit_affine(points)
        first_three = fit_affine(points[:3])

        assert sse(fitted) < sse(first_three)
        assert sse(fitted) == pytest.approx(4 * 0.1 ** 2)

    def test_realistic_geographic_coefficients(self) -> None:
        """Degrees-per-pixel coefficients around 1e-6 fit without tripping the tolerance."""
        def geo(x, y):
            return -0.2301 + 1e-6 * x, 39.6404 - 8e-7 * y

        points = [cp(x, y, *geo(x, y)) for x, y in [(0, 0), (4000, 0), (0, 3000), (4000, 3000)]]

        model = fit_affine(points)

        assert model.a == pytest.approx(1e-6)
        assert model.e == pytest.approx(-8e-7)
        assert model.c == pytest.approx(-0.2301)
        assert model.f == pytest.approx(39.6404)

    @pytest.mark.parametrize(
        "pixels",
        [
            [(0, 0), (1, 0), (2, 0)],
            [(0, 0), (0, 5), (0, 10), (0, 15)],
            [(0, 0), (1, 1), (2, 2)],
            [(3, 3), (3, 3), (3, 3)],
        ],
        ids=["horizontal-line", "vertical-line", "diagonal-line", "all-coincident"],
    )
    def test_collinear_points_raise(self, pixels) -> None:
        points = [cp(x, y, float(i), float(i)) for i, (x, y) in enumerate(pixels)]

        with pytest.raises(CollinearPointsError) as exc_info:
            fit_affine(points)

        assert exc_info.value.determinant is not None
        assert abs(exc_info.value.determinant) < 1e-10

    def test_two_points_raise_insufficient(self) -> None:
        with pytest.raises(InsufficientPointsError) as exc_info:
            fit_affine([cp(0, 0, 0, 0), cp(1, 0, 1, 0)])

        assert exc_info.value.required == 3
        assert exc_info.value.given == 2

    def test_order_does_not_change_fit(self, unit_triangle) -> None:
        extra = unit_triangle + [cp(2, 3, 12.1, 22.9)]

        forward = fit_affine(extra)
        backward = fit_affine(list(reversed(extra)))

        np.testing.assert_allclose(forward.to_matrix(), backward.to_matrix(), atol=1e-12)


class TestNormalMatrix:
    """Tests for the normal-equations matrix."""

    def test_sums(self) -> None:
        pixels = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [2.0, 3.0]])

        M = normal_matrix(pixels)

        expected = np.array(
            [
                [5.0, 6.0, 3.0],   # Σx², Σxy, Σx
                [6.0, 10.0, 4.0],  # Σxy, Σy², Σy
                [3.0, 4.0, 4.0],   # Σx,  Σy,  n
            ]
        )
        np.testing.assert_allclose(M, expected)
