"""Event queue for the sweep.

Site events are plain values. Circle events live in a table owned by the
queue and are addressed by integer handles, so the beachline can cancel an
event without searching the heap. Cancelled entries stay in the heap until
they are popped.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

from .types import Point


@dataclass(frozen=True)
class SiteEvent:
    site: int
    point: Point

    @property
    def y(self) -> float:
        return self.point[1]

    @property
    def x(self) -> float:
        return self.point[0]


@dataclass
class CircleEvent:
    center: Point
    sweep: float
    arc: Any
    active: bool = True
    handle: int = -1

    @property
    def y(self) -> float:
        return self.sweep

    @property
    def x(self) -> float:
        return self.center[0]


Event = Union[SiteEvent, CircleEvent]
_Key = Tuple[float, float, int]


class EventQueue:
    """Min-heap ordered by descending ``y``, then ascending ``x``, then insertion."""

    def __init__(self) -> None:
        self._heap: List[Tuple[_Key, Event]] = []
        self._counter = itertools.count()
        self._circles: Dict[int, CircleEvent] = {}

    def __len__(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return not self._heap

    def push(self, event: Event) -> None:
        key = (-event.y, event.x, next(self._counter))
        heapq.heappush(self._heap, (key, event))

    def push_site(self, site: int, point: Point) -> SiteEvent:
        event = SiteEvent(site, (float(point[0]), float(point[1])))
        self.push(event)
        return event

    def push_circle(self, center: Point, sweep: float, arc: Any) -> int:
        handle = len(self._circles)
        event = CircleEvent(center=center, sweep=sweep, arc=arc, handle=handle)
        self._circles[handle] = event
        self.push(event)
        return handle

    def circle(self, handle: int) -> CircleEvent:
        return self._circles[handle]

    def invalidate(self, handle: int) -> None:
        self._circles[handle].active = False

    def peek_min(self) -> Event:
        if not self._heap:
            raise IndexError("peek from an empty event queue")
        return self._heap[0][1]

    def pop_min(self) -> Event:
        if not self._heap:
            raise IndexError("pop from an empty event queue")
        return heapq.heappop(self._heap)[1]


__all__ = ["CircleEvent", "Event", "EventQueue", "SiteEvent"]
