"""Persistence for maps and their reference points."""

from byom.store.filesystem import DefaultFileSystem, FileSystem
from byom.store.point_store import PointStore, StoreClosedError
from byom.store.records import MapRecord, PointRecord

__all__ = [
    "DefaultFileSystem",
    "FileSystem",
    "MapRecord",
    "PointRecord",
    "PointStore",
    "StoreClosedError",
]
