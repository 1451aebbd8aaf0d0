"""
Map session: the glue between user interaction, the store and the transform engine.

A session binds one map in a PointStore. Every query re-fits the transform
from the map's current reference points, so an add, edit or delete is
reflected by the very next call without any cache to invalidate.

Typical usage:
    >>> with PointStore("maps.yaml") as store:
    ...     session = MapSession(store, map_id)
    ...     session.add_point(PixelPoint(120, 80), GeoPoint(-0.2301, 39.6404))
    ...     session.add_point(PixelPoint(900, 610), GeoPoint(-0.2254, 39.6371))
    ...     fix = session.locate(GeoPoint(-0.2280, 39.6390))
    ...     if fix is not None and fix.on_map:
    ...         draw_marker(fix.pixel)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from byom.config import GeorefConfig, get_default_config
from byom.correspondence import CorrespondencePoint
from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint
from byom.store import MapRecord, PointRecord, PointStore
from byom.transforms import (
    CollinearPointsError,
    FitDiagnostics,
    SingularTransformError,
    TransformModel,
    diagnose,
    select_and_fit,
    to_geo,
    to_pixel,
)
from byom.validation import (
    detect_duplicate_points,
    validate_geo_point,
    validate_pixel_point,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocatedPosition:
    """A geographic position projected onto the map image.

    Attributes:
        geo: The position that was projected.
        pixel: Where it lands on the image plane.
        on_map: True if the pixel lies inside the image. Always True when
            the map has no recorded dimensions.
    """

    geo: GeoPoint
    pixel: PixelPoint
    on_map: bool


class MapSession:
    """Reference point editing and coordinate lookup for one map.

    Args:
        store: An open PointStore.
        map_id: Map to work on.
        config: Tolerances and limits (default: get_default_config()).

    Raises:
        KeyError: If the map does not exist in the store.
    """

    def __init__(self, store: PointStore, map_id: int, config: Optional[GeorefConfig] = None):
        self.store = store
        self.map_id = map_id
        self.config = config if config is not None else get_default_config()
        if store.get_map(map_id) is None:
            raise KeyError(f"Map not found: {map_id}")

    @property
    def map(self) -> MapRecord:
        record = self.store.get_map(self.map_id)
        if record is None:
            raise KeyError(f"Map not found: {self.map_id}")
        return record

    def points(self) -> list[CorrespondencePoint]:
        """Current reference points in insertion order."""
        return [p.correspondence for p in self.store.list_points(self.map_id)]

    # ---------- Transform ----------
    def transform(self) -> Optional[TransformModel]:
        """Fit the transform for the current reference points.

        Returns:
            The fitted model, or None when there are fewer than two points
            or the points are too degenerate to fit.
        """
        points = self.points()
        try:
            return select_and_fit(points, tolerance=self.config.determinant_tolerance)
        except CollinearPointsError as e:
            logger.warning(f"Map {self.map_id}: cannot fit transform from {len(points)} points: {e}")
            return None

    def pixel_to_geo(self, pixel: PixelPoint) -> Optional[GeoPoint]:
        """Convert an image tap to geographic coordinates.

        Returns:
            GeoPoint, or None when no transform can be fitted yet.
        """
        model = self.transform()
        if model is None:
            return None
        return to_geo(pixel, model)

    def locate(self, geo: GeoPoint) -> Optional[LocatedPosition]:
        """Project a live position fix onto the map image.

        Returns:
            LocatedPosition, or None when there is no usable transform
            (too few points, degenerate points or a singular model). A None
            result means the position marker should not be drawn.
        """
        model = self.transform()
        if model is None:
            return None
        try:
            pixel = to_pixel(
                geo,
                model,
                tolerance=self.config.determinant_tolerance,
                relative=self.config.relative_singularity_check,
            )
        except SingularTransformError as e:
            logger.warning(f"Map {self.map_id}: cannot project position ({geo.lon}, {geo.lat}): {e}")
            return None
        return LocatedPosition(geo=geo, pixel=pixel, on_map=self._is_on_map(pixel))

    def diagnostics(self) -> Optional[FitDiagnostics]:
        """Residuals of the current transform at each reference point."""
        model = self.transform()
        if model is None:
            return None
        return diagnose(self.points(), model)

    def _is_on_map(self, pixel: PixelPoint) -> bool:
        record = self.map
        if not record.has_dimensions:
            return True
        return pixel.is_within(record.image_width, record.image_height)

    # ---------- Editing ----------
    def add_point(self, pixel: PixelPoint, geo: GeoPoint) -> int:
        """Validate and store a new reference point.

        Returns:
            The new point ID.

        Raises:
            ValueError: If the point is out of range, duplicates an existing
                point, or the map already holds the maximum number of points.
        """
        record = self.map
        validate_geo_point(geo)
        validate_pixel_point(pixel, record.image_width, record.image_height)

        existing = self.points()
        if len(existing) >= self.config.max_points:
            raise ValueError(
                f"Map {self.map_id} already has {len(existing)} reference points "
                f"(maximum {self.config.max_points})"
            )
        detect_duplicate_points(
            existing + [CorrespondencePoint(pixel, geo)],
            self.config.gps_epsilon,
            self.config.pixel_epsilon,
        )

        point_id = self.store.add_point(self.map_id, pixel, geo)
        logger.info(f"Map {self.map_id}: added reference point {point_id} ({len(existing) + 1} total)")
        return point_id

    def move_point(
        self,
        point_id: int,
        pixel: Optional[PixelPoint] = None,
        geo: Optional[GeoPoint] = None,
    ) -> None:
        """Change the pixel and/or geographic position of a reference point.

        Raises:
            KeyError: If the point does not belong to this map.
            ValueError: If the new position is invalid or lands on another
                reference point.
        """
        current = self._owned_point(point_id)
        if pixel is None and geo is None:
            return
        if pixel is not None:
            record = self.map
            validate_pixel_point(pixel, record.image_width, record.image_height)
        if geo is not None:
            validate_geo_point(geo)

        moved = CorrespondencePoint(
            pixel if pixel is not None else current.correspondence.pixel,
            geo if geo is not None else current.correspondence.geo,
        )
        edited = [
            moved if p.id == point_id else p.correspondence
            for p in self.store.list_points(self.map_id)
        ]
        detect_duplicate_points(edited, self.config.gps_epsilon, self.config.pixel_epsilon)

        self.store.update_point(
            point_id,
            image_x=moved.pixel.x,
            image_y=moved.pixel.y,
            lon=moved.geo.lon,
            lat=moved.geo.lat,
        )

    def remove_point(self, point_id: int) -> None:
        """Delete a reference point of this map.

        Raises:
            KeyError: If the point does not belong to this map.
        """
        self._owned_point(point_id)
        self.store.delete_point(point_id)
        logger.info(f"Map {self.map_id}: removed reference point {point_id}")

    def _owned_point(self, point_id: int) -> PointRecord:
        point = self.store.get_point(point_id)
        if point is None or point.map_id != self.map_id:
            raise KeyError(f"Point {point_id} not found on map {self.map_id}")
        return point
