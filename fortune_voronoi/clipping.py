"""Close the unbounded sweep output inside an axis-aligned rectangle."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .bbox import BoundingBox
from .dcel import DCEL
from .geometry import _midpoint2, breakpoint_direction
from .logging_utils import apply_debug_logging
from .sweep import FortuneSweep
from .types import OPEN, OUTER_FACE, ClippingError, Point, Vector

logger = logging.getLogger(__name__)


def diagram_bounds(sweep: FortuneSweep, bounds: Optional[BoundingBox] = None) -> BoundingBox:
    """Rectangle holding every finite vertex, every site and the lowest event, plus the margin."""

    dcel = sweep.dcel
    points: List[Point] = list(sweep.sites)
    points.extend(
        dcel.point(idx) for idx in dcel.live_vertices() if dcel.vertices[idx].kind != "birth"
    )
    box = BoundingBox.from_points(points)
    if sweep.stats.lowest_event_y is not None:
        box = box.include((box.xmin, sweep.stats.lowest_event_y))
    box = box.expand(sweep.config.margin)
    if bounds is not None:
        box = box.union(bounds)
    return box


def _forward_open_ends(sweep: FortuneSweep) -> Dict[int, Vector]:
    """Open half-edges left behind by breakpoints that are still on the beachline."""

    dcel = sweep.dcel
    ends: Dict[int, Vector] = {}
    for node in sweep.beachline.breakpoints():
        open_end = dcel.twin(node.edge)
        assert dcel.origin(open_end) == OPEN, f"breakpoint edge {node.edge} is already closed"
        ends[open_end] = breakpoint_direction(node.left_point, node.right_point)
    return ends


def _dissolve_birth_vertices(dcel: DCEL) -> int:
    count = 0
    for idx in list(dcel.live_vertices()):
        vertex = dcel.vertices[idx]
        if vertex.kind == "birth" and len(vertex.outgoing) == 2:
            dcel.dissolve_vertex(idx)
            count += 1
    return count


def _ray(dcel: DCEL, half_edge: int) -> Tuple[Point, Vector]:
    """Anchor and direction of the ray leading to the open origin of ``half_edge``."""

    face = dcel.face(half_edge)
    twin_face = dcel.face(dcel.twin(half_edge))
    site = dcel.site_point(face)
    other = dcel.site_point(twin_face)
    target = dcel.target(half_edge)
    anchor = dcel.point(target) if target != OPEN else _midpoint2(site, other)
    return anchor, breakpoint_direction(other, site)


class _BorderVertices:
    """Boundary vertices keyed by their clockwise position on the rectangle."""

    def __init__(self, dcel: DCEL, box: BoundingBox, eps: float):
        self.dcel = dcel
        self.box = box
        self.eps = eps
        self.tol = box.tolerance(eps)
        self.corners = [dcel.add_vertex(corner, "corner") for corner in box.corners()]
        self.entries: List[Tuple[float, int]] = [
            (box.perimeter_position(corner, eps), handle)
            for corner, handle in zip(box.corners(), self.corners)
        ]

    def position(self, vertex: int) -> float:
        return self.box.perimeter_position(self.dcel.point(vertex), self.eps)

    def vertex_at(self, point: Point) -> int:
        t = self.box.perimeter_position(point, self.eps)
        total = self.box.perimeter
        for existing_t, handle in self.entries:
            gap = abs(existing_t - t)
            if min(gap, total - gap) <= self.tol:
                return handle
        handle = self.dcel.add_vertex(point, "boundary")
        self.entries.append((t, handle))
        return handle


def _clip_open_origins(dcel: DCEL, box: BoundingBox, border: _BorderVertices, eps: float) -> int:
    rays = [(edge, _ray(dcel, edge)) for edge in dcel.unbounded_half_edges()]
    for edge, (anchor, direction) in rays:
        hit = box.first_intersection(anchor, direction, eps)
        if hit is None:
            raise ClippingError(
                f"ray from {anchor!r} along {direction!r} does not leave the rectangle {box.as_tuple()!r}"
            )
        point, _side = hit
        dcel.set_origin(edge, border.vertex_at(point))
    return len(rays)


def _chains(dcel: DCEL, face: int) -> List[Tuple[int, int]]:
    """Return ``(first, last)`` half-edges of every open chain around ``face``."""

    chains = []
    edges = [idx for idx in dcel.live_half_edges() if dcel.face(idx) == face]
    for start in edges:
        if dcel.prev(start) is not None:
            continue
        last = start
        steps = 0
        while dcel.next(last) is not None:
            last = dcel.next(last)  # type: ignore[assignment]
            steps += 1
            if steps > len(edges):
                raise ClippingError(f"face {face} has a chain that never ends")
        chains.append((start, last))
    return chains


def _stitch_face(dcel: DCEL, box: BoundingBox, border: _BorderVertices, face: int) -> int:
    chains = _chains(dcel, face)
    if not chains:
        if any(dcel.face(idx) == face for idx in dcel.live_half_edges()):
            return 0
        # a lone cell owns the whole rectangle
        ring = border.corners
        edges = [dcel.make_boundary_edge(ring[i], ring[(i + 1) % 4], face) for i in range(4)]
        for i, edge in enumerate(edges):
            dcel.link(edge, edges[(i + 1) % 4])
        dcel.faces[face].edge = edges[0]
        return 4

    starts = [(border.position(dcel.origin(first)), first) for first, _ in chains]
    total = box.perimeter
    added = 0
    for _, last in chains:
        exit_vertex = dcel.target(last)
        t_exit = border.position(exit_vertex)
        if not starts:
            raise ClippingError(f"face {face} has a chain exit with no entry")
        _, first = min(starts, key=lambda item: (item[0] - t_exit) % total)
        entry_vertex = dcel.origin(first)
        if entry_vertex == exit_vertex:
            dcel.link(last, first)
            continue

        path = [exit_vertex]
        for corner_idx in box.corners_between(t_exit, border.position(entry_vertex)):
            corner = border.corners[corner_idx]
            if corner not in (exit_vertex, entry_vertex):
                path.append(corner)
        path.append(entry_vertex)

        previous = last
        for u, v in zip(path, path[1:]):
            edge = dcel.make_boundary_edge(u, v, face)
            dcel.link(previous, edge)
            previous = edge
            added += 1
        dcel.link(previous, first)
    return added


def _link_outer_ring(dcel: DCEL) -> None:
    outer = [idx for idx in dcel.live_half_edges() if dcel.face(idx) == OUTER_FACE]
    by_origin: Dict[int, int] = {}
    for edge in outer:
        origin = dcel.origin(edge)
        if origin in by_origin:
            raise ClippingError(f"boundary vertex {origin} has two outer half-edges")
        by_origin[origin] = edge
    for edge in outer:
        following = by_origin.get(dcel.target(edge))
        if following is None:
            raise ClippingError(f"outer half-edge {edge} has no successor")
        dcel.link(edge, following)


def _verify_cycles(dcel: DCEL) -> None:
    live = list(dcel.live_half_edges())
    for edge in live:
        record = dcel.half_edges[edge]
        if record.origin == OPEN:
            raise ClippingError(f"half-edge {edge} is still unbounded")
        if record.next is None or record.prev is None:
            raise ClippingError(f"half-edge {edge} on face {record.face} is not part of a cycle")
        if dcel.prev(record.next) != edge:
            raise ClippingError(f"half-edge {edge} has inconsistent next/prev links")
        if dcel.origin(record.next) != dcel.target(edge):
            raise ClippingError(f"half-edge {edge} is not followed by an edge leaving its target")

    for face in dcel.faces:
        members = [edge for edge in live if dcel.face(edge) == face.site]
        if not members:
            raise ClippingError(f"face {face.site} has no boundary")
        start = members[0]
        edge = start
        for _ in range(len(members)):
            edge = dcel.next(edge)  # type: ignore[assignment]
            if edge == start:
                break
        else:
            raise ClippingError(f"face {face.site} boundary is not a single closed cycle")
        face.edge = start


def clip_diagram(sweep: FortuneSweep, bounds: Optional[BoundingBox] = None) -> BoundingBox:
    """Terminate every unbounded edge on a rectangle and close every face.

    Returns the rectangle actually used, which contains ``bounds`` when given.
    Raises :class:`ClippingError` when the graph cannot be closed.
    """

    dcel = sweep.dcel
    eps = sweep.config.tolerance
    box = diagram_bounds(sweep, bounds)

    forward = _forward_open_ends(sweep)
    for edge, direction in forward.items():
        _, expected = _ray(dcel, edge)
        assert expected == direction, f"open end {edge} travels along {expected!r}, not {direction!r}"
    dissolved = _dissolve_birth_vertices(dcel)

    border = _BorderVertices(dcel, box, eps)
    clipped = _clip_open_origins(dcel, box, border, eps)
    added = sum(_stitch_face(dcel, box, border, face.site) for face in dcel.faces)
    _link_outer_ring(dcel)
    _verify_cycles(dcel)

    logger.info(
        "Clipped diagram to %s: %d open ends (%d forward), %d birth vertices dissolved, %d rectangle edges",
        box.as_tuple(),
        clipped,
        len(forward),
        dissolved,
        added,
    )
    return box


apply_debug_logging(globals(), logger=logger)
