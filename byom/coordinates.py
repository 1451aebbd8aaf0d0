"""
GPS coordinate parsing utilities.

Reference points are usually typed in by hand, either as decimal degrees
copied from a map tile picker or as DMS text copied from a GPS readout.
"""

import re

_DMS_PATTERN = re.compile(r"""^\s*(\d+)°\s*(\d+)'\s*([\d.]+)"?\s*([NSEW])\s*$""")


def dms_to_dd(dms_str: str) -> float:
    """
    Convert DMS (degrees, minutes, seconds) string to decimal degrees.

    Accepts the GPS readout form with optional spaces between fields and a
    trailing hemisphere letter, e.g. "39°38'25.72\"N" or "0° 13' 48.63\" W".
    Minutes and seconds must be below 60.

    Args:
        dms_str: DMS coordinate text

    Returns:
        Signed decimal degrees, negative in the southern and western hemispheres

    Raises:
        ValueError: If the text is not valid DMS
    """
    match = _DMS_PATTERN.match(dms_str)
    if not match:
        raise ValueError(f"Invalid DMS format: {dms_str}")

    degrees = int(match.group(1))
    minutes = int(match.group(2))
    seconds = float(match.group(3))
    direction = match.group(4)

    if minutes >= 60 or seconds >= 60:
        raise ValueError(f"Invalid DMS format: {dms_str}")

    dd = degrees + minutes / 60 + seconds / 3600

    if direction in ("S", "W"):
        dd = -dd

    return dd


def parse_degrees(value: str) -> float:
    """
    Parse a coordinate given either as decimal degrees or as DMS text.

    Args:
        value: "-0.2301", "39.64" or "39°38'25.72\"N"

    Returns:
        Decimal degrees

    Raises:
        ValueError: If the value is neither a number nor valid DMS
    """
    try:
        return float(value)
    except ValueError:
        return dms_to_dd(value)
