"""
Markup element model.

Four immutable element kinds drawn over a blueprint:
- FreehandStroke: ordered path of points
- Rectangle: two opposite corners (drag direction unconstrained)
- Circle: center plus a point on the edge
- TextLabel: left-anchored text

All coordinates are in the blueprint's logical space, independent of
zoom and pan. A snapshot is a tuple of elements; order is z-order.
"""

import math
import time
import uuid as uuid_lib
from dataclasses import dataclass, field, replace
from typing import Tuple, Union, Iterable


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class _ElementBase:
    id: str
    color: str
    stroke_width: float
    created_at: int


@dataclass(frozen=True)
class FreehandStroke(_ElementBase):
    points: Tuple[Point, ...] = field(default_factory=tuple)

    kind = 'pen'

    def with_point(self, point: Point) -> 'FreehandStroke':
        """Return a copy with point appended to the path."""
        return replace(self, points=self.points + (point,))


@dataclass(frozen=True)
class Rectangle(_ElementBase):
    start: Point = Point(0.0, 0.0)
    end: Point = Point(0.0, 0.0)

    kind = 'rectangle'

    def with_end(self, point: Point) -> 'Rectangle':
        return replace(self, end=point)

    def bounding_box(self) -> Tuple[float, float, float, float]:
        """Normalized (left, top, width, height) regardless of drag direction."""
        left = min(self.start.x, self.end.x)
        top = min(self.start.y, self.end.y)
        return (left, top, abs(self.end.x - self.start.x), abs(self.end.y - self.start.y))


@dataclass(frozen=True)
class Circle(_ElementBase):
    center: Point = Point(0.0, 0.0)
    edge: Point = Point(0.0, 0.0)

    kind = 'circle'

    @property
    def radius(self) -> float:
        return self.center.distance_to(self.edge)

    def with_end(self, point: Point) -> 'Circle':
        return replace(self, edge=point)


@dataclass(frozen=True)
class TextLabel(_ElementBase):
    anchor: Point = Point(0.0, 0.0)
    text: str = ''

    kind = 'text'


MarkupElement = Union[FreehandStroke, Rectangle, Circle, TextLabel]
Snapshot = Tuple[MarkupElement, ...]

ELEMENT_TYPES = {
    FreehandStroke.kind: FreehandStroke,
    Rectangle.kind: Rectangle,
    Circle.kind: Circle,
    TextLabel.kind: TextLabel,
}

EMPTY_SNAPSHOT: Snapshot = ()


def now_ms() -> int:
    """Current time in integer milliseconds since epoch."""
    return int(time.time() * 1000)


def new_element_id(timestamp: int) -> str:
    return f"{timestamp}-{uuid_lib.uuid4().hex[:8]}"


def make_snapshot(elements: Iterable[MarkupElement]) -> Snapshot:
    return tuple(elements)


def append_element(snapshot: Snapshot, element: MarkupElement) -> Snapshot:
    """New snapshot with element on top."""
    return snapshot + (element,)


__all__ = [
    'Point',
    'FreehandStroke',
    'Rectangle',
    'Circle',
    'TextLabel',
    'MarkupElement',
    'Snapshot',
    'ELEMENT_TYPES',
    'EMPTY_SNAPSHOT',
    'now_ms',
    'new_element_id',
    'make_snapshot',
    'append_element',
]
