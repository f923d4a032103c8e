"""Geometry kernel for the sweep: parabolas, breakpoints and circle tests.

The sweep line moves from the largest y towards the smallest y. Every arc of
the beachline is a parabola with the site as focus and the sweep line as
directrix, so it opens upwards and the beachline is the lower envelope of
those parabolas.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional

from .types import Point, Vector

EPSILON = 1e-9


def _vec2(a: Point, b: Point) -> Vector:
    return b[0] - a[0], b[1] - a[1]


def _dot2(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1]


def _cross2(a: Vector, b: Vector) -> float:
    return a[0] * b[1] - a[1] * b[0]


def _norm2(v: Vector) -> float:
    return math.hypot(v[0], v[1])


def _midpoint2(a: Point, b: Point) -> Point:
    return (a[0] + b[0]) * 0.5, (a[1] + b[1]) * 0.5


def scaled_tolerance(eps: float, *values: float, unit: float = 1.0) -> float:
    """Return ``eps`` relative to ``unit`` or the largest magnitude among ``values``."""

    scale = unit
    for value in values:
        scale = max(scale, abs(value))
    return eps * scale


def length_scale(points: Iterable[Point]) -> float:
    """Characteristic length of a point set.

    This is the larger side of the bounding box, or the largest coordinate
    magnitude when every point coincides, and ``1.0`` for the origin alone.
    Tolerances measured against it do not depend on the units of the input.
    """

    xs: List[float] = []
    ys: List[float] = []
    for x, y in points:
        xs.append(x)
        ys.append(y)
    if not xs:
        return 1.0
    extent = max(max(xs) - min(xs), max(ys) - min(ys))
    if extent > 0.0:
        return extent
    magnitude = max(max(abs(v) for v in xs), max(abs(v) for v in ys))
    return magnitude if magnitude > 0.0 else 1.0


def nearly_equal(a: float, b: float, eps: float = EPSILON, unit: float = 1.0) -> bool:
    return abs(a - b) <= scaled_tolerance(eps, a, b, unit=unit)


def distance(a: Point, b: Point) -> float:
    return _norm2(_vec2(a, b))


def parabola_y(site: Point, sweep_y: float, x: float) -> float:
    """Height at ``x`` of the parabola with focus ``site`` and directrix ``y = sweep_y``.

    Every point of the parabola is as far from the focus as from the
    directrix, which gives ``((x - fx)^2) / (2 (fy - l)) + (fy + l) / 2``.
    """

    depth = site[1] - sweep_y
    if depth == 0.0:
        raise ValueError(f"site {site!r} lies on the sweep line y={sweep_y!r}")
    return (x - site[0]) ** 2 / (2.0 * depth) + (site[1] + sweep_y) * 0.5


def breakpoint_x(
    left: Point, right: Point, sweep_y: float, eps: float = EPSILON, unit: float = 1.0
) -> float:
    """Return the x-coordinate of the breakpoint between two adjacent arcs.

    ``left`` owns the arc on the left of the breakpoint and ``right`` the arc
    on its right. The value depends on the sweep coordinate and is never
    cached by callers.
    """

    lx, ly = left
    rx, ry = right
    if abs(ly - ry) <= scaled_tolerance(eps, ly, ry, unit=unit):
        return (lx + rx) * 0.5

    depth_left = ly - sweep_y
    depth_right = ry - sweep_y
    if abs(depth_left) <= scaled_tolerance(eps, ly, sweep_y, unit=unit):
        return lx
    if abs(depth_right) <= scaled_tolerance(eps, ry, sweep_y, unit=unit):
        return rx

    a = depth_right - depth_left
    b = 2.0 * (rx * depth_left - lx * depth_right)
    c = lx * lx * depth_right - rx * rx * depth_left + (ly - ry) * depth_left * depth_right
    root = math.sqrt(max(b * b - 4.0 * a * c, 0.0))
    q = -0.5 * (b + math.copysign(root, b))
    if q == 0.0:
        x1 = x2 = 0.0
    else:
        x1, x2 = q / a, c / q
    # the lower site owns the narrower parabola, which dips below the wider
    # one between the two roots
    if ly < ry:
        return max(x1, x2)
    return min(x1, x2)


def breakpoint_point(
    left: Point, right: Point, sweep_y: float, eps: float = EPSILON, unit: float = 1.0
) -> Optional[Point]:
    """Return the breakpoint position, or ``None`` when both sites sit on the sweep line."""

    x = breakpoint_x(left, right, sweep_y, eps, unit)
    focus = left if left[1] >= right[1] else right
    if focus[1] - sweep_y <= scaled_tolerance(eps, focus[1], sweep_y, unit=unit):
        return None
    return x, parabola_y(focus, sweep_y, x)


def breakpoint_direction(left: Point, right: Point) -> Vector:
    """Direction in which the breakpoint between ``left`` and ``right`` travels.

    The breakpoint follows the perpendicular bisector of the two sites and
    keeps ``left`` on its right-hand side while the sweep moves down.
    """

    return right[1] - left[1], left[0] - right[0]


def circumcenter(a: Point, b: Point, c: Point, eps: float = EPSILON) -> Optional[Point]:
    """Return the circumcenter of ``a``, ``b``, ``c`` or ``None`` for collinear points."""

    bx, by = _vec2(a, b)
    cx, cy = _vec2(a, c)
    det = 2.0 * _cross2((bx, by), (cx, cy))
    # collinearity is judged on the shape of the triple, not its size
    scale = max(abs(bx), abs(by), abs(cx), abs(cy))
    if scale == 0.0 or abs(det) <= eps * scale * scale:
        return None
    b_sq = bx * bx + by * by
    c_sq = cx * cx + cy * cy
    ux = (cy * b_sq - by * c_sq) / det
    uy = (bx * c_sq - cx * b_sq) / det
    return a[0] + ux, a[1] + uy


def equidistant(center: Point, a: Point, b: Point, c: Point, eps: float = EPSILON) -> bool:
    radii = (distance(center, a), distance(center, b), distance(center, c))
    # sanity check on an exact formula, so only rounding noise is tolerated
    return max(radii) - min(radii) <= scaled_tolerance(math.sqrt(eps), *radii, unit=0.0)


def circle_bottom(center: Point, radius: float) -> float:
    return center[1] - radius


def _ahead_of(position: Point, direction: Vector, center: Point, eps: float, unit: float) -> bool:
    offset = _vec2(position, center)
    length = _norm2(offset)
    if length <= scaled_tolerance(eps, *position, *center, unit=unit):
        return True
    return _dot2(offset, direction) >= -eps * _norm2(direction) * length


def _closer_later(
    center: Point,
    left: Point,
    right: Point,
    sweep_y: float,
    later_y: float,
    radius: float,
    eps: float,
    unit: float,
) -> bool:
    later = breakpoint_point(left, right, later_y, eps, unit)
    if later is None:
        return False
    now = breakpoint_point(left, right, sweep_y, eps, unit)
    reference = radius if now is None else distance(now, center)
    return distance(later, center) < reference


def breakpoints_converge(
    center: Point,
    left: Point,
    mid: Point,
    right: Point,
    sweep_y: float,
    eps: float = EPSILON,
    divisor: float = 10.0,
    unit: float = 1.0,
) -> bool:
    """Return ``True`` when the breakpoints around ``mid`` move towards ``center``.

    The primary test checks that ``center`` lies on the forward side of both
    breakpoint rays at the current sweep coordinate. When both breakpoints
    already sit on ``center`` the arc has zero width, and it is squeezed only
    if the breakpoints cross once the sweep moves on; an arc that was just
    born under the center widens instead. When a breakpoint has no defined
    position yet the sweep is advanced by a fraction of the radius and both
    breakpoints must get closer to ``center``.
    """

    radius = distance(center, mid)
    later_y = sweep_y - max(radius / divisor, scaled_tolerance(eps, sweep_y, unit=unit))
    left_pos = breakpoint_point(left, mid, sweep_y, eps, unit)
    right_pos = breakpoint_point(mid, right, sweep_y, eps, unit)
    if left_pos is not None and right_pos is not None:
        tol = scaled_tolerance(eps, *center, unit=unit)
        if distance(left_pos, center) <= tol and distance(right_pos, center) <= tol:
            width = breakpoint_x(mid, right, later_y, eps, unit) - breakpoint_x(left, mid, later_y, eps, unit)
            return width < 0.0
        return _ahead_of(left_pos, breakpoint_direction(left, mid), center, eps, unit) and _ahead_of(
            right_pos, breakpoint_direction(mid, right), center, eps, unit
        )

    return _closer_later(center, left, mid, sweep_y, later_y, radius, eps, unit) and _closer_later(
        center, mid, right, sweep_y, later_y, radius, eps, unit
    )


def convergence_test(
    center: Point,
    left: Point,
    mid: Point,
    right: Point,
    sweep_y: float,
    eps: float = EPSILON,
    divisor: float = 10.0,
    unit: float = 1.0,
) -> bool:
    """Decide whether the circle through three consecutive arcs is a future event."""

    if not equidistant(center, left, mid, right, eps):
        return False
    bottom = circle_bottom(center, distance(center, mid))
    if bottom > sweep_y + scaled_tolerance(eps, bottom, sweep_y, unit=unit):
        return False
    return breakpoints_converge(center, left, mid, right, sweep_y, eps, divisor, unit)


__all__ = [
    "EPSILON",
    "breakpoint_direction",
    "breakpoint_point",
    "breakpoint_x",
    "circle_bottom",
    "circumcenter",
    "convergence_test",
    "breakpoints_converge",
    "distance",
    "equidistant",
    "length_scale",
    "nearly_equal",
    "parabola_y",
    "scaled_tolerance",
]
