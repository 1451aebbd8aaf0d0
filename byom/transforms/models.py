"""
Fitted transform models.

Both models map image pixels (x, y) to geographic coordinates (lon, lat),
treating longitude and latitude as a flat Cartesian plane. That is only
accurate over small extents and is kept on purpose: stored correspondence
sets were fitted this way.

Similarity (two reference points):

    lon = s*cos(r)*x - s*sin(r)*y + tx
    lat = s*sin(r)*x + s*cos(r)*y + ty

Affine (three or more reference points):

    lon = a*x + b*y + c
    lat = d*x + e*y + f

Models are immutable. Serialised form is a ``{"type": ..., "transform": {...}}``
pair.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union

import numpy as np

from byom.transforms.errors import UnknownModelKindError
from byom.types import Radians


class TransformKind(Enum):
    """Enumeration of supported transform models."""

    SIMILARITY = "similarity"
    """Uniform scale, rotation and translation fitted from exactly two points."""

    AFFINE = "affine"
    """Six-parameter least-squares fit from three or more points."""


@dataclass(frozen=True)
class SimilarityTransform:
    """Two-point similarity transform.

    Attributes:
        scale: Degrees per pixel.
        rotation: Rotation from image axes to geo axes, radians.
        translate_x: Longitude offset (tx).
        translate_y: Latitude offset (ty).
    """

    scale: float
    rotation: Radians
    translate_x: float
    translate_y: float

    @property
    def kind(self) -> TransformKind:
        return TransformKind.SIMILARITY

    def linear_part(self) -> np.ndarray:
        """Return the 2x2 rotation-scale matrix."""
        cos_r = math.cos(self.rotation)
        sin_r = math.sin(self.rotation)
        return self.scale * np.array([[cos_r, -sin_r], [sin_r, cos_r]], dtype=np.float64)

    def to_matrix(self) -> np.ndarray:
        """Return the 3x3 homogeneous matrix with last row [0, 0, 1]."""
        T = np.eye(3, dtype=np.float64)
        T[:2, :2] = self.linear_part()
        T[:2, 2] = [self.translate_x, self.translate_y]
        return T

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "transform": {
                "scale": self.scale,
                "rotation": self.rotation,
                "tx": self.translate_x,
                "ty": self.translate_y,
            },
        }


@dataclass(frozen=True)
class AffineTransform:
    """Six-coefficient affine transform.

    Attributes:
        a, b, c: Longitude coefficients for x, y and the constant term.
        d, e, f: Latitude coefficients for x, y and the constant term.
    """

    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    @property
    def kind(self) -> TransformKind:
        return TransformKind.AFFINE

    @property
    def determinant(self) -> float:
        """Determinant of the linear part, ``a*e - b*d``."""
        return self.a * self.e - self.b * self.d

    def linear_part(self) -> np.ndarray:
        """Return the 2x2 matrix [[a, b], [d, e]]."""
        return np.array([[self.a, self.b], [self.d, self.e]], dtype=np.float64)

    def to_matrix(self) -> np.ndarray:
        """Return the 3x3 homogeneous matrix with last row [0, 0, 1]."""
        return np.array(
            [
                [self.a, self.b, self.c],
                [self.d, self.e, self.f],
                [0.0, 0.0, 1.0],
            ],
            dtype=np.float64,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value, "transform": asdict(self)}


TransformModel = Union[SimilarityTransform, AffineTransform]


def model_from_dict(data: dict[str, Any]) -> TransformModel:
    """Restore a model from its ``{"type", "transform"}`` dictionary.

    Args:
        data: Dictionary produced by ``to_dict()``.

    Returns:
        SimilarityTransform or AffineTransform.

    Raises:
        UnknownModelKindError: If the type tag is not a known model kind.
        KeyError: If coefficients are missing.
    """
    try:
        kind = TransformKind(data.get("type"))
    except ValueError:
        raise UnknownModelKindError(str(data.get("type"))) from None

    params = data["transform"]
    if kind is TransformKind.SIMILARITY:
        return SimilarityTransform(
            scale=float(params["scale"]),
            rotation=float(params["rotation"]),
            translate_x=float(params["tx"]),
            translate_y=float(params["ty"]),
        )
    return AffineTransform(**{name: float(params[name]) for name in "abcdef"})
