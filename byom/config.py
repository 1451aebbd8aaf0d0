"""
Configuration for the georeferencing tools.

Values can be loaded from a YAML file with a top-level ``byom`` section:

    byom:
      store_path: ~/.byom/maps.yaml
      determinant_tolerance: 1.0e-10
      gps_epsilon: 1.0e-6
      pixel_epsilon: 0.5
      max_points: 1000
      log_level: INFO
      relative_singularity_check: false
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from byom.transforms import DETERMINANT_TOLERANCE
from byom.validation import GPS_EPSILON, MAX_POINT_COUNT, PIXEL_EPSILON

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path.home() / ".byom" / "maps.yaml"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class GeorefConfig:
    """Settings shared by the store, session and CLI.

    Attributes:
        store_path: YAML file holding maps and reference points.
        determinant_tolerance: Singularity threshold for fitting and inversion.
        gps_epsilon: Duplicate point threshold in degrees.
        pixel_epsilon: Duplicate point threshold in pixels.
        max_points: Maximum reference points per map.
        log_level: Name of the logging level used by the CLI.
        relative_singularity_check: Judge affine inverses against the size
            of their coefficients instead of the bare tolerance.
    """

    store_path: Path = DEFAULT_STORE_PATH
    determinant_tolerance: float = DETERMINANT_TOLERANCE
    gps_epsilon: float = GPS_EPSILON
    pixel_epsilon: float = PIXEL_EPSILON
    max_points: int = MAX_POINT_COUNT
    log_level: str = "WARNING"
    relative_singularity_check: bool = False

    def __post_init__(self):
        """Validate numeric settings and log level."""
        for name in ("determinant_tolerance", "gps_epsilon", "pixel_epsilon"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"'{name}' must be a positive number, got {value!r}")
        if not isinstance(self.max_points, int) or isinstance(self.max_points, bool) \
                or self.max_points < 2:
            raise ValueError(f"'max_points' must be an integer >= 2, got {self.max_points!r}")
        if not isinstance(self.store_path, Path):
            raise ValueError(f"'store_path' must be a path, got {self.store_path!r}")
        if not isinstance(self.relative_singularity_check, bool):
            raise ValueError(
                f"'relative_singularity_check' must be true or false, "
                f"got {self.relative_singularity_check!r}"
            )
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. Must be one of: {', '.join(_LOG_LEVELS)}"
            )

    @classmethod
    def from_yaml(cls, path: str | Path) -> GeorefConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            GeorefConfig instance loaded from file

        Raises:
            FileNotFoundError: If configuration file does not exist
            ValueError: If configuration file is malformed or contains invalid values
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {path}\n"
                f"Please create a configuration file or use get_default_config()"
            )

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML configuration file: {e}") from e

        if not data:
            raise ValueError(
                f"Configuration file is empty: {path}\n"
                f"Expected a 'byom' section"
            )

        if not isinstance(data, dict) or 'byom' not in data:
            raise ValueError(
                f"Configuration file missing 'byom' section: {path}\n"
                f"Expected structure: byom:\n  store_path: ...\n  ..."
            )

        logger.debug(f"Loaded configuration from {config_path}")
        return cls.from_dict(data['byom'] or {})

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> GeorefConfig:
        """Create configuration from dictionary.

        Unknown keys are rejected so typos do not pass silently.

        Args:
            config: Dictionary of settings, all optional

        Returns:
            GeorefConfig instance

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ValueError(f"Configuration must be a dictionary, got {type(config)}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            raise ValueError(
                f"Unknown configuration keys: {', '.join(unknown)}. "
                f"Valid keys: {', '.join(sorted(known))}"
            )

        values = dict(config)
        if isinstance(values.get('store_path'), (str, Path)):
            values['store_path'] = Path(values['store_path']).expanduser()
        if 'max_points' in values and isinstance(values['max_points'], float) \
                and values['max_points'].is_integer():
            values['max_points'] = int(values['max_points'])

        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a YAML-friendly dictionary."""
        return {
            'store_path': str(self.store_path),
            'determinant_tolerance': self.determinant_tolerance,
            'gps_epsilon': self.gps_epsilon,
            'pixel_epsilon': self.pixel_epsilon,
            'max_points': self.max_points,
            'log_level': self.log_level,
            'relative_singularity_check': self.relative_singularity_check,
        }


def get_default_config(store_path: Optional[str | Path] = None) -> GeorefConfig:
    """Get default configuration, optionally overriding the store location.

    Returns:
        GeorefConfig with default values
    """
    if store_path is None:
        return GeorefConfig()
    return GeorefConfig(store_path=Path(store_path).expanduser())
