"""KML export of reference points."""

from byom.kml.exporter import render_map_kml

__all__ = ["render_map_kml"]
