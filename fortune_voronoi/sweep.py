"""Fortune's sweepline driver.

A :class:`FortuneSweep` owns every piece of mutable state for one
construction: the event queue, the beachline and the half-edge arena. The
sweep line moves from the largest y towards the smallest y.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .beachline import Arc, Beachline, Breakpoint
from .config import VoronoiConfig, get_voronoi_config
from .dcel import DCEL
from .events import CircleEvent, EventQueue, SiteEvent
from .geometry import (
    breakpoint_point,
    circle_bottom,
    circumcenter,
    convergence_test,
    distance,
    length_scale,
    scaled_tolerance,
)
from .types import OPEN, Point

logger = logging.getLogger(__name__)


@dataclass
class SweepStats:
    site_events: int = 0
    circle_events_scheduled: int = 0
    circle_events_processed: int = 0
    stale_events_skipped: int = 0
    degenerate_triples: int = 0
    lowest_event_y: Optional[float] = None


class FortuneSweep:
    def __init__(self, sites: Sequence[Point], config: Optional[VoronoiConfig] = None):
        self.config = config or get_voronoi_config()
        self.eps = self.config.tolerance
        self.sites: List[Point] = [(float(x), float(y)) for x, y in sites]
        self.queue = EventQueue()
        self.dcel = DCEL(self.sites)
        self.unit = length_scale(self.sites)
        self.beachline = Beachline(self.dcel, self.queue, self.eps, self.unit)
        self.stats = SweepStats()
        self.sweep_y: Optional[float] = None
        self._finished = False

    def run(self) -> "FortuneSweep":
        assert not self._finished, "a sweep can only run once"
        for idx, point in enumerate(self.sites):
            self.queue.push_site(idx, point)

        while not self.queue.is_empty():
            event = self.queue.pop_min()
            if isinstance(event, CircleEvent):
                if not event.active:
                    self.stats.stale_events_skipped += 1
                    continue
                self._advance(event.y)
                self._handle_circle(event)
            else:
                self._advance(event.y)
                self._handle_site(event)

        self._finished = True
        logger.info(
            "Sweep finished: %d sites, %d/%d circle events processed, %d stale, %d degenerate triples",
            self.stats.site_events,
            self.stats.circle_events_processed,
            self.stats.circle_events_scheduled,
            self.stats.stale_events_skipped,
            self.stats.degenerate_triples,
        )
        return self

    def _advance(self, y: float) -> None:
        self.sweep_y = y
        lowest = self.stats.lowest_event_y
        if lowest is None or y < lowest:
            self.stats.lowest_event_y = y

    # ------------------------------------------------------------------
    # site events
    def _handle_site(self, event: SiteEvent) -> None:
        self.stats.site_events += 1
        beachline = self.beachline
        if beachline.is_empty:
            beachline.insert_first(event.site, event.point)
            return

        x, y = event.point
        arc = beachline.find_arc_above(x, y)
        if abs(arc.point[1] - y) <= scaled_tolerance(self.eps, arc.point[1], y, unit=self.unit):
            new_arc = beachline.insert_beside(event.site, event.point, arc)
            pred = beachline.predecessor_leaf(new_arc)
            succ = beachline.successor_leaf(new_arc)
        else:
            hit = self._breakpoint_under(arc, x, y)
            if hit is None:
                pred, new_arc, succ = beachline.insert_split(event.site, event.point, arc, y)
            else:
                node, point = hit
                vertex, collapsed = self._event_vertex(point, (node.edge,))
                pred, new_arc, succ = beachline.insert_at_breakpoint(event.site, event.point, node, vertex)
                for edge in collapsed:
                    self.dcel.contract_edge(edge)
        logger.debug("Site %d at (%.6g, %.6g) placed under arc of site %d", event.site, x, y, arc.site)

        if pred is not None:
            self._detect(beachline.predecessor_leaf(pred), pred, new_arc)
        if succ is not None:
            self._detect(new_arc, succ, beachline.successor_leaf(succ))

    def _breakpoint_under(self, arc: Arc, x: float, y: float) -> Optional[Tuple[Breakpoint, Point]]:
        """Return the breakpoint flanking ``arc`` that sits right above ``x``, with its position."""

        tol = scaled_tolerance(self.eps, x, unit=self.unit)
        best: Optional[Tuple[float, Breakpoint]] = None
        for node in self.beachline.flanking_breakpoints(arc):
            if node is None:
                continue
            gap = abs(node.x(y, self.eps, self.unit) - x)
            if gap <= tol and (best is None or gap < best[0]):
                best = (gap, node)
        if best is None:
            return None
        node = best[1]
        point = breakpoint_point(node.left_point, node.right_point, y, self.eps, self.unit)
        if point is None:
            return None
        return node, point

    # ------------------------------------------------------------------
    # circle events
    def _handle_circle(self, event: CircleEvent) -> None:
        self.stats.circle_events_processed += 1
        beachline = self.beachline
        dcel = self.dcel
        arc = event.arc
        arc.event = None
        event.active = False

        left_bp, right_bp = beachline.flanking_breakpoints(arc)
        pred = beachline.predecessor_leaf(arc)
        succ = beachline.successor_leaf(arc)
        assert left_bp is not None and right_bp is not None, "circle event on an outermost arc"
        assert pred is not None and succ is not None

        left_edge, right_edge = left_bp.edge, right_bp.edge
        vertex, collapsed = self._event_vertex(event.center, (left_edge, right_edge))
        dcel.close_edge(left_edge, vertex)
        dcel.close_edge(right_edge, vertex)
        new_edge = dcel.make_dangling_edge(vertex, face=pred.site, twin_face=succ.site)
        dcel.link(left_edge, new_edge)
        dcel.link(right_edge, dcel.twin(left_edge))
        dcel.link(dcel.twin(new_edge), dcel.twin(right_edge))
        for edge in collapsed:
            dcel.contract_edge(edge)

        beachline.remove_arc(arc, new_edge)
        logger.debug(
            "Circle event at (%.6g, %.6g) removed arc of site %d between sites %d and %d",
            event.center[0],
            event.center[1],
            arc.site,
            pred.site,
            succ.site,
        )

        for neighbour in (pred, succ):
            if neighbour.event is not None:
                self.queue.invalidate(neighbour.event)
                neighbour.event = None
        self._detect(beachline.predecessor_leaf(pred), pred, succ)
        self._detect(pred, succ, beachline.successor_leaf(succ))

    def _event_vertex(self, center: Point, edges: Tuple[int, ...]) -> Tuple[int, List[int]]:
        """Return the vertex for an event at ``center`` and the edges that collapse onto it.

        A flanking edge whose fixed end already sits on the event center is
        reused instead of creating a second vertex at the same place.
        """

        dcel = self.dcel
        tol = scaled_tolerance(self.eps, *center, unit=self.unit)
        matches: List[Tuple[int, int]] = []
        for edge in edges:
            origin = dcel.origin(edge)
            if origin == OPEN or not dcel.is_shared_vertex(origin):
                continue
            if distance(dcel.point(origin), center) <= tol:
                matches.append((edge, origin))

        if not matches:
            return dcel.add_vertex(center, "circle"), []

        vertex = matches[0][1]
        dcel.promote(vertex, "circle")
        for _, origin in matches[1:]:
            if origin != vertex:
                dcel.merge_vertex(origin, vertex)
        logger.debug("Reusing vertex %d for coincident circle event", vertex)
        return vertex, [edge for edge, _ in matches]

    def _detect(self, left: Optional[Arc], mid: Arc, right: Optional[Arc]) -> None:
        if left is None or right is None:
            return
        if left.site == right.site:
            return
        assert self.sweep_y is not None
        center = circumcenter(left.point, mid.point, right.point, self.eps)
        if center is None:
            self.stats.degenerate_triples += 1
            return
        if not convergence_test(
            center,
            left.point,
            mid.point,
            right.point,
            self.sweep_y,
            self.eps,
            self.config.convergence_divisor,
            self.unit,
        ):
            return

        bottom = min(circle_bottom(center, distance(center, mid.point)), self.sweep_y)
        if mid.event is not None:
            self.queue.invalidate(mid.event)
        mid.event = self.queue.push_circle(center, bottom, mid)
        self.stats.circle_events_scheduled += 1
        logger.debug(
            "Scheduled circle event for site %d at sweep %.6g (sites %d, %d, %d)",
            mid.site,
            bottom,
            left.site,
            mid.site,
            right.site,
        )
