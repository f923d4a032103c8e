from __future__ import annotations

from typing import Literal, Tuple

Point = Tuple[float, float]
Vector = Tuple[float, float]
Segment = Tuple[Point, Point]

VertexKind = Literal["circle", "birth", "boundary", "corner"]

OPEN = -1
"""Sentinel vertex handle for a half-edge end that is not terminated yet."""

OUTER_FACE = -1
"""Face handle of the unbounded region outside the clipping rectangle."""


class VoronoiError(RuntimeError):
    """Base class for failures while constructing a diagram."""


class ClippingError(VoronoiError):
    """Raised when the unbounded diagram cannot be closed inside the rectangle."""


__all__ = [
    "Point",
    "Vector",
    "Segment",
    "VertexKind",
    "OPEN",
    "OUTER_FACE",
    "VoronoiError",
    "ClippingError",
]
