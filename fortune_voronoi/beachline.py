"""Beachline: a balanced full binary tree of arcs and breakpoints.

Leaves are :class:`Arc` nodes and read left to right give the arcs cut by the
sweep line in x order. Internal nodes are :class:`Breakpoint` nodes; their
position is a function of the sweep coordinate and is recomputed from the
geometry kernel on every descent. The tree is kept balanced with AVL
rotations applied to internal nodes only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from .dcel import DCEL
from .events import EventQueue
from .geometry import EPSILON, breakpoint_x, parabola_y, scaled_tolerance
from .types import Point

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Arc:
    site: int
    point: Point
    event: Optional[int] = None
    parent: Optional["Breakpoint"] = field(default=None, repr=False)

    @property
    def height(self) -> int:
        return 0


@dataclass(eq=False)
class Breakpoint:
    left_site: int
    left_point: Point
    right_site: int
    right_point: Point
    edge: int
    left: "Node" = field(repr=False)
    right: "Node" = field(repr=False)
    parent: Optional["Breakpoint"] = field(default=None, repr=False)
    height: int = 1

    def __post_init__(self) -> None:
        self.left.parent = self
        self.right.parent = self
        self.height = 1 + max(self.left.height, self.right.height)

    def x(self, sweep_y: float, eps: float = EPSILON, unit: float = 1.0) -> float:
        return breakpoint_x(self.left_point, self.right_point, sweep_y, eps, unit)


Node = Union[Arc, Breakpoint]


class Beachline:
    def __init__(self, dcel: DCEL, queue: EventQueue, eps: float = EPSILON, unit: float = 1.0):
        self.dcel = dcel
        self.queue = queue
        self.eps = eps
        self.unit = unit
        self.root: Optional[Node] = None

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def __len__(self) -> int:
        return sum(1 for _ in self.arcs())

    # ------------------------------------------------------------------
    # traversal
    def _inorder(self) -> Iterator[Node]:
        stack: List[Node] = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left if isinstance(node, Breakpoint) else None
            node = stack.pop()
            yield node
            node = node.right if isinstance(node, Breakpoint) else None

    def arcs(self) -> Iterator[Arc]:
        return (node for node in self._inorder() if isinstance(node, Arc))

    def breakpoints(self) -> Iterator[Breakpoint]:
        return (node for node in self._inorder() if isinstance(node, Breakpoint))

    def find_arc_above(self, x: float, sweep_y: float) -> Arc:
        node = self.root
        assert node is not None, "beachline is empty"
        while isinstance(node, Breakpoint):
            node = node.left if x < node.x(sweep_y, self.eps, self.unit) else node.right
        return node

    @staticmethod
    def _leftmost_leaf(node: Node) -> Arc:
        while isinstance(node, Breakpoint):
            node = node.left
        return node

    @staticmethod
    def _rightmost_leaf(node: Node) -> Arc:
        while isinstance(node, Breakpoint):
            node = node.right
        return node

    def predecessor_leaf(self, arc: Node) -> Optional[Arc]:
        assert isinstance(arc, Arc), "predecessor_leaf expects an arc"
        node: Node = arc
        while node.parent is not None and node.parent.left is node:
            node = node.parent
        if node.parent is None:
            return None
        node = node.parent.left
        while isinstance(node, Breakpoint):
            node = node.right
        return node

    def successor_leaf(self, arc: Node) -> Optional[Arc]:
        assert isinstance(arc, Arc), "successor_leaf expects an arc"
        node: Node = arc
        while node.parent is not None and node.parent.right is node:
            node = node.parent
        if node.parent is None:
            return None
        node = node.parent.right
        while isinstance(node, Breakpoint):
            node = node.left
        return node

    def flanking_breakpoints(self, arc: Node) -> Tuple[Optional[Breakpoint], Optional[Breakpoint]]:
        """Return the breakpoints immediately left and right of ``arc``."""

        assert isinstance(arc, Arc), "flanking_breakpoints expects an arc"
        left: Optional[Breakpoint] = None
        right: Optional[Breakpoint] = None
        node: Node = arc
        while node.parent is not None and (left is None or right is None):
            parent = node.parent
            if parent.right is node and left is None:
                left = parent
            elif parent.left is node and right is None:
                right = parent
            node = parent
        return left, right

    # ------------------------------------------------------------------
    # updates
    def insert_first(self, site: int, point: Point) -> Arc:
        assert self.root is None, "beachline already has arcs"
        arc = Arc(site, point)
        self.root = arc
        return arc

    def insert_split(self, site: int, point: Point, arc: Node, sweep_y: float) -> Tuple[Arc, Arc, Arc]:
        """Split ``arc`` under the new site into ``A | S | A``.

        The split point on the old parabola becomes a birth vertex with two
        dangling half-edge pairs heading away from it in opposite directions.
        Returns the new arc together with its left and right neighbours as
        ``(left, new, right)``.
        """

        assert isinstance(arc, Arc), "insert_split expects an arc"
        self._cancel_event(arc)

        birth = self.dcel.add_vertex((point[0], parabola_y(arc.point, sweep_y, point[0])), "birth")
        left_edge = self.dcel.make_dangling_edge(birth, face=arc.site, twin_face=site)
        right_edge = self.dcel.make_dangling_edge(birth, face=site, twin_face=arc.site)
        self.dcel.link(self.dcel.twin(right_edge), left_edge)
        self.dcel.link(self.dcel.twin(left_edge), right_edge)

        left, middle, right = Arc(arc.site, arc.point), Arc(site, point), Arc(arc.site, arc.point)
        inner = Breakpoint(site, point, arc.site, arc.point, right_edge, middle, right)
        top = Breakpoint(arc.site, arc.point, site, point, left_edge, left, inner)
        self._replace(arc, top)
        self._rebalance(top.parent)
        logger.debug("Split arc of site %d at x=%.6g for site %d", arc.site, point[0], site)
        return left, middle, right

    def insert_at_breakpoint(
        self, site: int, point: Point, node: Node, vertex: int
    ) -> Tuple[Arc, Arc, Arc]:
        """Insert the new site directly under ``node``, between its two arcs.

        The breakpoint's edge ends at ``vertex`` and two dangling edges leave
        it on either side of the new arc. The two arcs keep their identity;
        their pending circle events are cancelled. Returns ``(left, new, right)``.
        """

        assert isinstance(node, Breakpoint), "insert_at_breakpoint expects a breakpoint"
        left = self._rightmost_leaf(node.left)
        right = self._leftmost_leaf(node.right)
        self._cancel_event(left)
        self._cancel_event(right)

        dcel = self.dcel
        dcel.close_edge(node.edge, vertex)
        left_edge = dcel.make_dangling_edge(vertex, face=left.site, twin_face=site)
        right_edge = dcel.make_dangling_edge(vertex, face=site, twin_face=right.site)
        dcel.link(node.edge, left_edge)
        dcel.link(dcel.twin(left_edge), right_edge)
        dcel.link(dcel.twin(right_edge), dcel.twin(node.edge))

        middle = Arc(site, point)
        parent = right.parent
        inner = Breakpoint(site, point, right.site, right.point, right_edge, middle, right)
        self._attach(parent, right, inner)
        node.right_site, node.right_point, node.edge = site, point, left_edge
        self._rebalance(parent)
        logger.debug(
            "Site %d inserted at the breakpoint between sites %d and %d", site, left.site, right.site
        )
        return left, middle, right

    def insert_beside(self, site: int, point: Point, arc: Node) -> Arc:
        """Place a new arc next to ``arc`` whose site lies on the sweep line."""

        assert isinstance(arc, Arc), "insert_beside expects an arc"
        new_arc = Arc(site, point)
        left, right = (new_arc, arc) if point[0] < arc.point[0] else (arc, new_arc)
        parent = arc.parent
        edge = self.dcel.make_open_edge(face=left.site, twin_face=right.site)
        node = Breakpoint(left.site, left.point, right.site, right.point, edge, left, right)
        self._attach(parent, arc, node)
        self._rebalance(parent)
        return new_arc

    def remove_arc(self, arc: Node, edge: int) -> Tuple[Arc, Arc, Breakpoint]:
        """Remove a squeezed arc; the surviving breakpoint traces ``edge``."""

        assert isinstance(arc, Arc), "remove_arc expects an arc"
        left_bp, right_bp = self.flanking_breakpoints(arc)
        pred = self.predecessor_leaf(arc)
        succ = self.successor_leaf(arc)
        assert left_bp is not None and right_bp is not None, "cannot remove an outermost arc"
        assert pred is not None and succ is not None

        parent = arc.parent
        assert parent is not None
        sibling = parent.right if parent.left is arc else parent.left
        merged = right_bp if parent is left_bp else left_bp
        self._replace(parent, sibling)
        arc.parent = None

        merged.left_site, merged.left_point = pred.site, pred.point
        merged.right_site, merged.right_point = succ.site, succ.point
        merged.edge = edge
        self._rebalance(sibling.parent)
        return pred, succ, merged

    def _cancel_event(self, arc: Arc) -> None:
        if arc.event is not None:
            self.queue.invalidate(arc.event)
            arc.event = None

    # ------------------------------------------------------------------
    # balancing
    def _replace(self, old: Node, new: Node) -> None:
        self._attach(old.parent, old, new)

    def _attach(self, parent: Optional[Breakpoint], old: Node, new: Node) -> None:
        new.parent = parent
        if parent is None:
            self.root = new
        elif parent.left is old:
            parent.left = new
        else:
            parent.right = new

    @staticmethod
    def _update(node: Breakpoint) -> None:
        node.height = 1 + max(node.left.height, node.right.height)

    @staticmethod
    def _balance(node: Breakpoint) -> int:
        return node.left.height - node.right.height

    def _rotate_left(self, node: Breakpoint) -> Breakpoint:
        pivot = node.right
        assert isinstance(pivot, Breakpoint)
        self._replace(node, pivot)
        node.right = pivot.left
        node.right.parent = node
        pivot.left = node
        node.parent = pivot
        self._update(node)
        self._update(pivot)
        return pivot

    def _rotate_right(self, node: Breakpoint) -> Breakpoint:
        pivot = node.left
        assert isinstance(pivot, Breakpoint)
        self._replace(node, pivot)
        node.left = pivot.right
        node.left.parent = node
        pivot.right = node
        node.parent = pivot
        self._update(node)
        self._update(pivot)
        return pivot

    def _rebalance(self, node: Optional[Breakpoint]) -> None:
        while node is not None:
            self._update(node)
            balance = self._balance(node)
            if balance > 1:
                child = node.left
                assert isinstance(child, Breakpoint)
                if self._balance(child) < 0:
                    self._rotate_left(child)
                node = self._rotate_right(node)
            elif balance < -1:
                child = node.right
                assert isinstance(child, Breakpoint)
                if self._balance(child) > 0:
                    self._rotate_right(child)
                node = self._rotate_left(node)
            node = node.parent

    # ------------------------------------------------------------------
    # diagnostics
    def check_invariants(self, sweep_y: Optional[float] = None) -> None:
        """Raise ``AssertionError`` when the tree structure is inconsistent."""

        if self.root is None:
            return
        assert self.root.parent is None, "root has a parent"
        self._check_subtree(self.root)

        leaves = list(self.arcs())
        nodes = list(self.breakpoints())
        assert len(nodes) == len(leaves) - 1, "tree is not a full binary tree"
        for idx, node in enumerate(nodes):
            assert node.left_site == leaves[idx].site, f"breakpoint {idx} has stale left site"
            assert node.right_site == leaves[idx + 1].site, f"breakpoint {idx} has stale right site"
        if sweep_y is not None:
            positions = [node.x(sweep_y, self.eps, self.unit) for node in nodes]
            for before, after in zip(positions, positions[1:]):
                assert before <= after + scaled_tolerance(self.eps, before, after, unit=self.unit), (
                    "breakpoints out of order"
                )

    def _check_subtree(self, node: Node) -> int:
        if isinstance(node, Arc):
            return 0
        for child in (node.left, node.right):
            assert child.parent is node, "child does not point back to its parent"
        left = self._check_subtree(node.left)
        right = self._check_subtree(node.right)
        assert abs(left - right) <= 1, "subtree is out of balance"
        assert node.height == 1 + max(left, right), "stale subtree height"
        return node.height
