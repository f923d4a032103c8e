"""Axis-aligned clipping rectangle."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .geometry import EPSILON, scaled_tolerance
from .types import Point, Vector


class Side(enum.IntEnum):
    """Rectangle sides in clockwise order starting from the top."""

    TOP = 0
    RIGHT = 1
    BOTTOM = 2
    LEFT = 3


@dataclass(frozen=True)
class BoundingBox:
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    def __post_init__(self) -> None:
        for name in ("xmin", "ymin", "xmax", "ymax"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"bounding box {name} must be finite (got {value!r})")
        if self.xmin > self.xmax or self.ymin > self.ymax:
            raise ValueError(
                f"bounding box is inverted: ({self.xmin}, {self.ymin}) - ({self.xmax}, {self.ymax})"
            )

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "BoundingBox":
        xs: List[float] = []
        ys: List[float] = []
        for x, y in points:
            xs.append(float(x))
            ys.append(float(y))
        if not xs:
            raise ValueError("cannot bound an empty point set")
        return cls(min(xs), min(ys), max(xs), max(ys))

    @classmethod
    def coerce(cls, bounds: Union["BoundingBox", Sequence[Sequence[float]]]) -> "BoundingBox":
        if isinstance(bounds, BoundingBox):
            return bounds
        try:
            (xmin, ymin), (xmax, ymax) = bounds
        except (TypeError, ValueError) as exc:
            raise ValueError(f"bounds must be ((xmin, ymin), (xmax, ymax)), got {bounds!r}") from exc
        return cls(float(xmin), float(ymin), float(xmax), float(ymax))

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def perimeter(self) -> float:
        return 2.0 * (self.width + self.height)

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.xmin, other.xmin),
            min(self.ymin, other.ymin),
            max(self.xmax, other.xmax),
            max(self.ymax, other.ymax),
        )

    def include(self, point: Point) -> "BoundingBox":
        x, y = point
        return BoundingBox(min(self.xmin, x), min(self.ymin, y), max(self.xmax, x), max(self.ymax, y))

    def expand(self, margin: float) -> "BoundingBox":
        return BoundingBox(self.xmin - margin, self.ymin - margin, self.xmax + margin, self.ymax + margin)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Upper-left, upper-right, lower-right and lower-left corners (clockwise)."""

        return (
            (self.xmin, self.ymax),
            (self.xmax, self.ymax),
            (self.xmax, self.ymin),
            (self.xmin, self.ymin),
        )

    def tolerance(self, eps: float = EPSILON) -> float:
        return scaled_tolerance(eps, self.xmin, self.ymin, self.xmax, self.ymax, unit=0.0)

    def contains_point(self, point: Point, eps: float = EPSILON) -> bool:
        tol = self.tolerance(eps)
        x, y = point
        return self.xmin - tol <= x <= self.xmax + tol and self.ymin - tol <= y <= self.ymax + tol

    def border_side(self, point: Point, eps: float = EPSILON) -> Optional[Side]:
        """Return the first side (clockwise from the top) that ``point`` lies on."""

        if not self.contains_point(point, eps):
            return None
        tol = self.tolerance(eps)
        x, y = point
        if abs(y - self.ymax) <= tol:
            return Side.TOP
        if abs(x - self.xmax) <= tol:
            return Side.RIGHT
        if abs(y - self.ymin) <= tol:
            return Side.BOTTOM
        if abs(x - self.xmin) <= tol:
            return Side.LEFT
        return None

    def is_on_border(self, point: Point, eps: float = EPSILON) -> bool:
        return self.border_side(point, eps) is not None

    def snap(self, point: Point, eps: float = EPSILON) -> Point:
        """Move coordinates within tolerance of a side exactly onto it."""

        tol = self.tolerance(eps)
        x, y = point
        for bound in (self.xmin, self.xmax):
            if abs(x - bound) <= tol:
                x = bound
        for bound in (self.ymin, self.ymax):
            if abs(y - bound) <= tol:
                y = bound
        return x, y

    def first_intersection(
        self, origin: Point, direction: Vector, eps: float = EPSILON
    ) -> Optional[Tuple[Point, Side]]:
        """Return where the ray from ``origin`` along ``direction`` leaves the rectangle.

        ``origin`` must lie inside the rectangle. The hit is snapped exactly
        onto the side it was found on.
        """

        ox, oy = origin
        dx, dy = direction
        if dx == 0.0 and dy == 0.0:
            return None
        if not self.contains_point(origin, eps):
            return None

        t_exit = math.inf
        side: Optional[Side] = None
        if dx != 0.0:
            bound, candidate = (self.xmax, Side.RIGHT) if dx > 0.0 else (self.xmin, Side.LEFT)
            t = (bound - ox) / dx
            if t < t_exit:
                t_exit, side = t, candidate
        if dy != 0.0:
            bound, candidate = (self.ymax, Side.TOP) if dy > 0.0 else (self.ymin, Side.BOTTOM)
            t = (bound - oy) / dy
            if t < t_exit:
                t_exit, side = t, candidate
        if side is None or t_exit < 0.0:
            return None

        x = ox + t_exit * dx
        y = oy + t_exit * dy
        if side in (Side.LEFT, Side.RIGHT):
            x = self.xmax if side is Side.RIGHT else self.xmin
            y = min(max(y, self.ymin), self.ymax)
        else:
            y = self.ymax if side is Side.TOP else self.ymin
            x = min(max(x, self.xmin), self.xmax)
        return self.snap((x, y), eps), side

    def perimeter_position(self, point: Point, eps: float = EPSILON) -> float:
        """Clockwise arc length from the upper-left corner to a point on the border."""

        side = self.border_side(point, eps)
        if side is None:
            raise ValueError(f"point {point!r} is not on the rectangle border")
        x, y = point
        if side is Side.TOP:
            return x - self.xmin
        if side is Side.RIGHT:
            return self.width + (self.ymax - y)
        if side is Side.BOTTOM:
            return self.width + self.height + (self.xmax - x)
        return 2.0 * self.width + self.height + (y - self.ymin)

    def corners_between(self, start: float, end: float) -> List[int]:
        """Indices into :meth:`corners` met strictly between two perimeter positions.

        The walk runs clockwise from ``start`` to ``end``, wrapping past the
        upper-left corner when needed.
        """

        total = self.perimeter
        span = (end - start) % total
        found = []
        for idx, corner in enumerate(self.corners()):
            stop = self.perimeter_position(corner)
            offset = (stop - start) % total
            if 0.0 < offset < span:
                found.append((offset, idx))
        return [idx for _, idx in sorted(found)]

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.xmin, self.ymin, self.xmax, self.ymax


__all__ = ["BoundingBox", "Side"]
