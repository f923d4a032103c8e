"""Immutable Voronoi diagram produced by a finished construction."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from scipy.spatial import cKDTree

from .bbox import BoundingBox
from .sweep import FortuneSweep, SweepStats
from .types import OUTER_FACE, Point, Segment, VertexKind


@dataclass(frozen=True)
class HalfEdgeRecord:
    origin: int
    twin: int
    next: int
    prev: int
    face: int


@dataclass(frozen=True)
class FaceRecord:
    site: int
    edge: int


@dataclass(frozen=True)
class VoronoiDiagram:
    """Closed planar subdivision of a rectangle into one cell per site.

    Half-edges keep their cell on the right, so cell boundaries run
    clockwise and the outer face (``OUTER_FACE``) runs counter-clockwise.
    """

    sites: Tuple[Point, ...]
    vertices: Tuple[Point, ...]
    vertex_kinds: Tuple[VertexKind, ...]
    half_edges: Tuple[HalfEdgeRecord, ...]
    faces: Tuple[FaceRecord, ...]
    bbox: BoundingBox
    stats: SweepStats

    # ------------------------------------------------------------------
    # navigation
    def origin(self, half_edge: int) -> Point:
        return self.vertices[self.half_edges[half_edge].origin]

    def target(self, half_edge: int) -> Point:
        return self.vertices[self.half_edges[self.half_edges[half_edge].twin].origin]

    def segment(self, half_edge: int) -> Segment:
        return self.origin(half_edge), self.target(half_edge)

    def _pairs(self) -> List[int]:
        return [idx for idx, record in enumerate(self.half_edges) if idx < record.twin]

    def edges(self) -> List[Segment]:
        """One segment per undirected edge, rectangle edges included."""

        return [self.segment(idx) for idx in self._pairs()]

    def voronoi_segments(self) -> List[Segment]:
        """Segments separating two sites, i.e. the edges that are not on the rectangle."""

        segments = []
        for idx in self._pairs():
            record = self.half_edges[idx]
            if record.face != OUTER_FACE and self.half_edges[record.twin].face != OUTER_FACE:
                segments.append(self.segment(idx))
        return segments

    def face_half_edges(self, site: int) -> List[int]:
        start = self.faces[site].edge
        cycle = [start]
        edge = self.half_edges[start].next
        while edge != start:
            cycle.append(edge)
            edge = self.half_edges[edge].next
        return cycle

    def cell_segments(self) -> Dict[int, List[Segment]]:
        return {face.site: [self.segment(h) for h in self.face_half_edges(face.site)] for face in self.faces}

    def cell_polygon(self, site: int) -> List[Point]:
        """Cell corners in clockwise order."""

        return [self.origin(h) for h in self.face_half_edges(site)]

    def cell_area(self, site: int) -> float:
        polygon = np.asarray(self.cell_polygon(site), dtype=float)
        x, y = polygon[:, 0], polygon[:, 1]
        return float(0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))

    def adjacent_sites(self, site: int) -> List[int]:
        neighbours: List[int] = []
        for edge in self.face_half_edges(site):
            other = self.half_edges[self.half_edges[edge].twin].face
            if other != OUTER_FACE and other not in neighbours:
                neighbours.append(other)
        return neighbours

    def voronoi_vertices(self) -> List[Point]:
        return [point for point, kind in zip(self.vertices, self.vertex_kinds) if kind == "circle"]

    def euler_characteristic(self) -> int:
        """``V - E + F`` counting the outer face; 2 for a connected planar graph."""

        return len(self.vertices) - len(self.half_edges) // 2 + len(self.faces) + 1

    def vertex_array(self) -> np.ndarray:
        return np.asarray(self.vertices, dtype=float).reshape(-1, 2)

    @cached_property
    def _site_tree(self) -> cKDTree:
        return cKDTree(np.asarray(self.sites, dtype=float))

    def locate(self, point: Point) -> int:
        """Index of the cell containing ``point`` (its nearest site)."""

        _, index = self._site_tree.query(np.asarray(point, dtype=float))
        return int(index)

    def summary(self) -> Dict[str, Any]:
        return {
            "sites": len(self.sites),
            "vertices": len(self.vertices),
            "voronoi_vertices": len(self.voronoi_vertices()),
            "edges": len(self.half_edges) // 2,
            "bbox": self.bbox.as_tuple(),
        }


def freeze(sweep: FortuneSweep, bbox: BoundingBox) -> VoronoiDiagram:
    """Compact the live records of a clipped sweep into a :class:`VoronoiDiagram`."""

    dcel = sweep.dcel
    vertex_map: Dict[int, int] = {}
    vertices: List[Point] = []
    kinds: List[VertexKind] = []
    for idx in dcel.live_vertices():
        vertex = dcel.vertices[idx]
        if not vertex.outgoing:
            continue
        vertex_map[idx] = len(vertices)
        vertices.append(vertex.point)
        kinds.append(vertex.kind)

    edge_map = {old: new for new, old in enumerate(dcel.live_half_edges())}

    def remap(handle: Optional[int]) -> int:
        assert handle is not None and handle in edge_map, f"dangling half-edge reference {handle}"
        return edge_map[handle]

    half_edges = []
    for old in edge_map:
        record = dcel.half_edges[old]
        half_edges.append(
            HalfEdgeRecord(
                origin=vertex_map[record.origin],
                twin=remap(record.twin),
                next=remap(record.next),
                prev=remap(record.prev),
                face=record.face,
            )
        )
    faces = [FaceRecord(face.site, remap(face.edge)) for face in dcel.faces]

    return VoronoiDiagram(
        sites=tuple(sweep.sites),
        vertices=tuple(vertices),
        vertex_kinds=tuple(kinds),
        half_edges=tuple(half_edges),
        faces=tuple(faces),
        bbox=bbox,
        stats=dataclasses.replace(sweep.stats),
    )
