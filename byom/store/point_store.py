"""
Persistent storage for maps and their reference points.

The store is an explicitly constructed object with an open/close lifecycle;
there is no module-level handle. It keeps the whole document in memory and
writes it back synchronously after every mutation, so the last writer wins.

Storage Structure (YAML):
    version: 1
    next_map_id: 3
    next_point_id: 12
    maps:
      - {id: 1, name: "Campus", image_path: ..., image_width: 4000, ...}
    points:
      - {id: 1, map_id: 1, image_x: 120.5, image_y: 88.0, lon: -0.23, lat: 39.64, ...}

Usage:
    >>> with PointStore("maps.yaml") as store:
    ...     map_id = store.add_map("Campus", image_width=4000, image_height=3000)
    ...     store.add_point(map_id, PixelPoint(120.5, 88.0), GeoPoint(-0.23, 39.64))
    ...     points = store.list_points(map_id)

Pass ``path=None`` for a purely in-memory store.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml

from byom.geo_point import GeoPoint
from byom.pixel_point import PixelPoint
from byom.store.filesystem import FileSystem, get_fs
from byom.store.records import MapRecord, PointRecord

logger = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1
UPDATABLE_POINT_FIELDS = frozenset(["image_x", "image_y", "lon", "lat"])


class StoreClosedError(RuntimeError):
    """Raised when a store is used before open() or after close()."""


class PointStore:
    """Maps and reference points keyed by integer identifiers.

    Args:
        path: YAML file backing the store, or None for an in-memory store.
        fs: File system implementation (default: DefaultFileSystem).

    Attributes:
        path: Backing file, None when in memory.
    """

    def __init__(self, path: Optional[str | Path] = None, fs: Optional[FileSystem] = None):
        self.path = Path(path).expanduser() if path is not None else None
        self._fs = get_fs(fs)
        self._open = False
        self._maps: dict[int, MapRecord] = {}
        self._points: dict[int, PointRecord] = {}
        self._next_map_id = 1
        self._next_point_id = 1

    # ---------- Lifecycle ----------
    def open(self) -> PointStore:
        """Load the backing file (if any) and mark the store usable.

        Returns:
            self, so ``store = PointStore(path).open()`` reads naturally.

        Raises:
            ValueError: If the backing file is malformed.
        """
        if self._open:
            return self

        self._maps.clear()
        self._points.clear()
        self._next_map_id = 1
        self._next_point_id = 1

        if self.path is not None and self._fs.exists(self.path):
            self._load(self._fs.read_text(self.path))
            logger.info(
                f"Opened store {self.path}: {len(self._maps)} maps, {len(self._points)} points"
            )
        else:
            logger.debug(f"Opened empty store ({self.path or 'in memory'})")

        self._open = True
        return self

    def close(self) -> None:
        """Mark the store closed. Data was already written on each mutation."""
        if self._open:
            logger.debug(f"Closed store ({self.path or 'in memory'})")
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def __enter__(self) -> PointStore:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------- Maps ----------
    def add_map(
        self,
        name: str,
        image_path: Optional[str] = None,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
    ) -> int:
        """Add a new map.

        Returns:
            The ID of the newly created map.
        """
        self._require_open()
        map_id = self._next_map_id
        self._next_map_id += 1
        self._maps[map_id] = MapRecord(
            id=map_id,
            name=name,
            image_path=image_path,
            image_width=image_width,
            image_height=image_height,
            created_at=datetime.now(),
        )
        self._flush()
        logger.info(f"Added map {map_id} ({name!r})")
        return map_id

    def list_maps(self) -> list[MapRecord]:
        """All maps in creation order."""
        self._require_open()
        return [self._maps[k] for k in sorted(self._maps)]

    def get_map(self, map_id: int) -> Optional[MapRecord]:
        """Get a single map by ID, or None if it does not exist."""
        self._require_open()
        return self._maps.get(map_id)

    def delete_map(self, map_id: int) -> None:
        """Delete a map and all of its reference points.

        Deleting a map that does not exist is a no-op.
        """
        self._require_open()
        if self._maps.pop(map_id, None) is None:
            logger.debug(f"delete_map: map {map_id} not found")
            return
        orphaned = [pid for pid, p in self._points.items() if p.map_id == map_id]
        for pid in orphaned:
            del self._points[pid]
        self._flush()
        logger.info(f"Deleted map {map_id} and {len(orphaned)} reference points")

    # ---------- Reference points ----------
    def list_points(self, map_id: int) -> list[PointRecord]:
        """Reference points of one map in insertion order.

        The first two entries are the ones a two-point similarity fit uses.
        """
        self._require_open()
        return [p for pid, p in sorted(self._points.items()) if p.map_id == map_id]

    def get_point(self, point_id: int) -> Optional[PointRecord]:
        """Get a single reference point by ID, or None."""
        self._require_open()
        return self._points.get(point_id)

    def add_point(self, map_id: int, pixel: PixelPoint, geo: GeoPoint) -> int:
        """Add a reference point to a map.

        Returns:
            The ID of the newly created point.

        Raises:
            KeyError: If the map does not exist.
        """
        self._require_open()
        if map_id not in self._maps:
            raise KeyError(f"Map not found: {map_id}")

        point_id = self._next_point_id
        self._next_point_id += 1
        self._points[point_id] = PointRecord(
            id=point_id,
            map_id=map_id,
            image_x=float(pixel.x),
            image_y=float(pixel.y),
            lon=float(geo.lon),
            lat=float(geo.lat),
            created_at=datetime.now(),
        )
        self._flush()
        logger.debug(f"Added point {point_id} to map {map_id}")
        return point_id

    def update_point(self, point_id: int, **updates: float) -> PointRecord:
        """Update some fields of a reference point.

        Args:
            point_id: Point to update.
            **updates: Any of image_x, image_y, lon, lat.

        Returns:
            The updated record.

        Raises:
            KeyError: If the point does not exist.
            ValueError: If an unknown field is given.
        """
        self._require_open()
        unknown = sorted(set(updates) - UPDATABLE_POINT_FIELDS)
        if unknown:
            raise ValueError(
                f"Cannot update fields: {', '.join(unknown)}. "
                f"Updatable fields: {', '.join(sorted(UPDATABLE_POINT_FIELDS))}"
            )

        point = self._points.get(point_id)
        if point is None:
            raise KeyError(f"Point not found: {point_id}")

        updated = replace(point, **{k: float(v) for k, v in updates.items()})
        self._points[point_id] = updated
        self._flush()
        logger.debug(f"Updated point {point_id}: {sorted(updates)}")
        return updated

    def delete_point(self, point_id: int) -> None:
        """Delete a reference point. Deleting a missing point is a no-op."""
        self._require_open()
        if self._points.pop(point_id, None) is None:
            logger.debug(f"delete_point: point {point_id} not found")
            return
        self._flush()
        logger.debug(f"Deleted point {point_id}")

    # ---------- Persistence ----------
    def _require_open(self) -> None:
        if not self._open:
            raise StoreClosedError("Point store is not open; call open() or use a with block")

    def to_dict(self) -> dict[str, Any]:
        """Convert the whole store to a dictionary for YAML serialization."""
        return {
            "version": STORE_FORMAT_VERSION,
            "next_map_id": self._next_map_id,
            "next_point_id": self._next_point_id,
            "maps": [self._maps[k].to_dict() for k in sorted(self._maps)],
            "points": [self._points[k].to_dict() for k in sorted(self._points)],
        }

    def _flush(self) -> None:
        if self.path is None:
            return
        content = yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)
        self._fs.write_text(self.path, content)

    def _load(self, text: str) -> None:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse store file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Store file {self.path} must contain a mapping")

        version = data.get("version", STORE_FORMAT_VERSION)
        if version != STORE_FORMAT_VERSION:
            raise ValueError(f"Unsupported store format version {version} in {self.path}")

        try:
            for entry in data.get("maps") or []:
                record = MapRecord.from_dict(entry)
                self._maps[record.id] = record
            for entry in data.get("points") or []:
                point = PointRecord.from_dict(entry)
                self._points[point.id] = point
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed record in store file {self.path}: {e}") from e

        self._next_map_id = max(
            int(data.get("next_map_id", 1)), max(self._maps, default=0) + 1
        )
        self._next_point_id = max(
            int(data.get("next_point_id", 1)), max(self._points, default=0) + 1
        )
