"""Arena-backed doubly connected edge list used while the diagram is built.

Vertices, half-edges and faces live in flat lists and refer to each other by
integer handles. Removal only marks records dead; :mod:`fortune_voronoi.diagram`
compacts the arena once construction is finished.

Every half-edge keeps its face on its right, so walking ``next`` around a
face visits its boundary clockwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence

from .types import OPEN, OUTER_FACE, Point, VertexKind

logger = logging.getLogger(__name__)


@dataclass
class Vertex:
    x: float
    y: float
    kind: VertexKind
    alive: bool = True
    outgoing: List[int] = field(default_factory=list)

    @property
    def point(self) -> Point:
        return self.x, self.y


@dataclass
class HalfEdge:
    origin: int = OPEN
    twin: int = -1
    next: Optional[int] = None
    prev: Optional[int] = None
    face: int = OUTER_FACE
    alive: bool = True


@dataclass
class Face:
    site: int
    point: Point
    edge: Optional[int] = None


class DCEL:
    def __init__(self, sites: Sequence[Point]):
        self.vertices: List[Vertex] = []
        self.half_edges: List[HalfEdge] = []
        self.faces: List[Face] = [Face(idx, (float(x), float(y))) for idx, (x, y) in enumerate(sites)]

    # ------------------------------------------------------------------
    # accessors
    def origin(self, half_edge: int) -> int:
        return self.half_edges[half_edge].origin

    def target(self, half_edge: int) -> int:
        return self.half_edges[self.half_edges[half_edge].twin].origin

    def twin(self, half_edge: int) -> int:
        return self.half_edges[half_edge].twin

    def next(self, half_edge: int) -> Optional[int]:
        return self.half_edges[half_edge].next

    def prev(self, half_edge: int) -> Optional[int]:
        return self.half_edges[half_edge].prev

    def face(self, half_edge: int) -> int:
        return self.half_edges[half_edge].face

    def point(self, vertex: int) -> Point:
        return self.vertices[vertex].point

    def site_point(self, face: int) -> Point:
        return self.faces[face].point

    def live_vertices(self) -> Iterator[int]:
        return (idx for idx, vertex in enumerate(self.vertices) if vertex.alive)

    def live_half_edges(self) -> Iterator[int]:
        return (idx for idx, edge in enumerate(self.half_edges) if edge.alive)

    # ------------------------------------------------------------------
    # construction
    def add_vertex(self, point: Point, kind: VertexKind) -> int:
        self.vertices.append(Vertex(float(point[0]), float(point[1]), kind))
        return len(self.vertices) - 1

    def _new_pair(self, origin: int, twin_origin: int, face: int, twin_face: int) -> int:
        handle = len(self.half_edges)
        self.half_edges.append(HalfEdge(origin=origin, twin=handle + 1, face=face))
        self.half_edges.append(HalfEdge(origin=twin_origin, twin=handle, face=twin_face))
        for edge, vertex in ((handle, origin), (handle + 1, twin_origin)):
            if vertex != OPEN:
                self.vertices[vertex].outgoing.append(edge)
        for edge, face_idx in ((handle, face), (handle + 1, twin_face)):
            if face_idx != OUTER_FACE and self.faces[face_idx].edge is None:
                self.faces[face_idx].edge = edge
        return handle

    def make_dangling_edge(self, origin: int, face: int, twin_face: int) -> int:
        """Create a twin pair starting at ``origin`` whose far end is still open.

        Returns the half-edge on ``face``; its target is the open end.
        """

        return self._new_pair(origin, OPEN, face, twin_face)

    def make_open_edge(self, face: int, twin_face: int) -> int:
        return self._new_pair(OPEN, OPEN, face, twin_face)

    def make_boundary_edge(self, u: int, v: int, face: int) -> int:
        """Create the rectangle edge ``u -> v`` on ``face`` with its twin on the outer face."""

        return self._new_pair(u, v, face, OUTER_FACE)

    def set_origin(self, half_edge: int, vertex: int) -> None:
        record = self.half_edges[half_edge]
        assert record.origin == OPEN, f"half-edge {half_edge} already has origin {record.origin}"
        record.origin = vertex
        self.vertices[vertex].outgoing.append(half_edge)

    def close_edge(self, half_edge: int, vertex: int) -> None:
        """Terminate the open target of ``half_edge`` at ``vertex``."""

        self.set_origin(self.half_edges[half_edge].twin, vertex)

    def link(self, h1: int, h2: int) -> None:
        first = self.half_edges[h1]
        second = self.half_edges[h2]
        assert first.face == second.face, f"cannot link {h1} (face {first.face}) to {h2} (face {second.face})"
        first.next = h2
        second.prev = h1

    def is_shared_vertex(self, vertex: int) -> bool:
        return len(self.vertices[vertex].outgoing) > 1

    def promote(self, vertex: int, kind: VertexKind = "circle") -> None:
        self.vertices[vertex].kind = kind

    def unbounded_half_edges(self) -> List[int]:
        return [idx for idx in self.live_half_edges() if self.half_edges[idx].origin == OPEN]

    # ------------------------------------------------------------------
    # removal
    def _kill_edges(self, edges: Iterable[int]) -> None:
        for edge in edges:
            record = self.half_edges[edge]
            record.alive = False
            if record.origin != OPEN:
                outgoing = self.vertices[record.origin].outgoing
                if edge in outgoing:
                    outgoing.remove(edge)
            if record.face != OUTER_FACE and self.faces[record.face].edge == edge:
                replacement = record.next if record.next is not None and record.next != edge else record.prev
                self.faces[record.face].edge = replacement

    def contract_edge(self, half_edge: int) -> None:
        """Remove a zero-length edge, splicing its neighbours together on both faces."""

        twin = self.half_edges[half_edge].twin
        assert self.origin(half_edge) == self.origin(twin), f"half-edge {half_edge} has non-zero length"
        for edge in (half_edge, twin):
            record = self.half_edges[edge]
            before, after = record.prev, record.next
            if before is not None:
                self.half_edges[before].next = after
            if after is not None:
                self.half_edges[after].prev = before
        self._kill_edges((half_edge, twin))
        logger.debug("Contracted zero-length edge %d/%d", half_edge, twin)

    def merge_vertex(self, source: int, target: int) -> None:
        """Move every outgoing half-edge of ``source`` onto ``target``."""

        moved = self.vertices[source].outgoing
        for edge in moved:
            self.half_edges[edge].origin = target
        self.vertices[target].outgoing.extend(moved)
        self.vertices[source].outgoing = []
        self.vertices[source].alive = False

    def dissolve_vertex(self, vertex: int) -> None:
        """Remove a degree-two vertex, fusing its two collinear edges into one pair."""

        record = self.vertices[vertex]
        assert len(record.outgoing) == 2, f"vertex {vertex} has degree {len(record.outgoing)}"
        h1, h2 = record.outgoing
        x = self.half_edges[h2].twin
        y = self.half_edges[h1].twin
        assert self.half_edges[x].face == self.half_edges[h1].face

        for keep, drop in ((x, h1), (y, h2)):
            after = self.half_edges[drop].next
            self.half_edges[keep].next = after
            if after is not None:
                self.half_edges[after].prev = keep
            face = self.half_edges[keep].face
            if face != OUTER_FACE and self.faces[face].edge == drop:
                self.faces[face].edge = keep
        self.half_edges[x].twin = y
        self.half_edges[y].twin = x

        for drop in (h1, h2):
            self.half_edges[drop].alive = False
        record.outgoing = []
        record.alive = False
