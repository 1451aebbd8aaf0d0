"""
Error types raised by the transform engine.

Fitting and evaluation either return a complete result or raise one of these;
they never hand back partially computed or non-finite coordinates.

    TransformError (ValueError)
    ├── InsufficientPointsError
    ├── CollinearPointsError
    │   └── CoincidentPointsError
    └── SingularTransformError

    UnknownModelKindError (TypeError)

TransformError subclasses are recoverable: a caller can ask for more or
better-spread points, or skip a frame. UnknownModelKindError is a programming
error and is not meant to be caught.
"""

from __future__ import annotations


class TransformError(ValueError):
    """Base class for recoverable fitting and evaluation failures."""


class InsufficientPointsError(TransformError):
    """Fewer correspondence points than the requested model needs."""

    def __init__(self, required: int, given: int, model: str = "transform"):
        self.required = required
        self.given = given
        super().__init__(
            f"Need at least {required} reference points for {model}, got {given}"
        )


class CollinearPointsError(TransformError):
    """Point geometry is too degenerate to determine the model."""

    def __init__(self, message: str = "Points are collinear, cannot compute affine transform",
                 determinant: float | None = None):
        self.determinant = determinant
        super().__init__(message)


class CoincidentPointsError(CollinearPointsError):
    """The two similarity points share the same pixel position."""


class SingularTransformError(TransformError):
    """The linear part of a model cannot be inverted."""

    def __init__(self, message: str = "Transform is singular", determinant: float | None = None):
        self.determinant = determinant
        super().__init__(message)


class UnknownModelKindError(TypeError):
    """An evaluator was handed something that is not a known transform model."""

    def __init__(self, model: object):
        self.model = model
        kind = model if isinstance(model, str) else getattr(model, "kind", None)
        detail = f"kind {kind!r}" if kind is not None else f"type {type(model).__name__}"
        super().__init__(f"Unknown transform model: {detail}")
