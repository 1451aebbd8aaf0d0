"""
Unit type annotations for type-safe numeric parameters.

This module defines NewType aliases for the units that flow through the
georeferencing code. They are zero-overhead hints that document whether a
number is a pixel dimension, an angle in degrees or radians, or a distance,
and let static type checkers catch unit mismatches.

Usage Example:
    >>> from byom.types import Degrees, Meters
    >>>
    >>> def ground_error(lat_error: Degrees) -> Meters:
    ...     pass
"""

from typing import NewType

# Angular units
Degrees = NewType('Degrees', float)
"""Angle in degrees (e.g., latitude, longitude)"""

Radians = NewType('Radians', float)
"""Angle in radians (e.g., similarity transform rotation)"""

# Distance units
Meters = NewType('Meters', float)
"""Ground distance in meters (e.g., fit residuals)"""

# Image coordinate units
Pixels = NewType('Pixels', int)
"""Image dimensions in whole pixels (e.g., width, height)"""
