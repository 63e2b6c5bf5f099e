"""
Interaction state machine for markup tools.

Expressed as a pure reducer:

    reduce(state, event, settings) -> Transition(state, committed)

States:
- Idle
- Drawing(tool, element)   an element is being dragged out
- TextPending(point)       waiting for text entry at a captured point

Events carry points that are already in logical coordinates. A transition
with a non-None `committed` element means the caller must append it and
push a new history snapshot.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union, Callable

from ..config import Config
from .elements import (
    Point, FreehandStroke, Rectangle, Circle, TextLabel,
    MarkupElement, now_ms, new_element_id
)


class DrawingTool(Enum):
    """Available markup tools."""
    PEN = 'pen'
    RECTANGLE = 'rectangle'
    CIRCLE = 'circle'
    TEXT = 'text'


@dataclass(frozen=True)
class ToolSettings:
    tool: DrawingTool = DrawingTool.PEN
    color: str = Config.DEFAULT_COLOR
    stroke_width: float = Config.DEFAULT_STROKE_WIDTH


# ==================== States ====================

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Drawing:
    tool: DrawingTool
    element: MarkupElement


@dataclass(frozen=True)
class TextPending:
    point: Point


InteractionState = Union[Idle, Drawing, TextPending]

IDLE = Idle()


# ==================== Events ====================

@dataclass(frozen=True)
class PointerDown:
    point: Point


@dataclass(frozen=True)
class PointerMove:
    point: Point


@dataclass(frozen=True)
class PointerUp:
    point: Point


@dataclass(frozen=True)
class TextConfirm:
    text: str


@dataclass(frozen=True)
class TextCancel:
    pass


InteractionEvent = Union[PointerDown, PointerMove, PointerUp, TextConfirm, TextCancel]


@dataclass(frozen=True)
class Transition:
    state: InteractionState
    committed: Optional[MarkupElement] = None


# ==================== Reducer ====================

def _start_element(settings: ToolSettings, point: Point, clock: Callable[[], int]) -> MarkupElement:
    """Seed a new in-progress element at point."""
    timestamp = clock()
    common = {
        'id': new_element_id(timestamp),
        'color': settings.color,
        'stroke_width': settings.stroke_width,
        'created_at': timestamp,
    }
    if settings.tool == DrawingTool.PEN:
        return FreehandStroke(points=(point,), **common)
    if settings.tool == DrawingTool.RECTANGLE:
        return Rectangle(start=point, end=point, **common)
    if settings.tool == DrawingTool.CIRCLE:
        return Circle(center=point, edge=point, **common)
    raise ValueError(f"Tool {settings.tool} does not draw by dragging")


def _extend_element(element: MarkupElement, point: Point) -> MarkupElement:
    if isinstance(element, FreehandStroke):
        # Unbounded accumulation: every move sample is kept
        return element.with_point(point)
    if isinstance(element, (Rectangle, Circle)):
        return element.with_end(point)
    return element


def reduce(
    state: InteractionState,
    event: InteractionEvent,
    settings: ToolSettings,
    clock: Callable[[], int] = now_ms
) -> Transition:
    """
    Apply one event to the interaction state.

    Args:
        state: Current interaction state
        event: Pointer or text event (logical coordinates)
        settings: Active tool, color and stroke width
        clock: Millisecond clock used to timestamp new elements

    Returns:
        Transition with the next state and the element to commit, if any
    """
    if isinstance(state, Idle):
        if isinstance(event, PointerDown):
            if settings.tool == DrawingTool.TEXT:
                return Transition(TextPending(event.point))
            element = _start_element(settings, event.point, clock)
            return Transition(Drawing(settings.tool, element))
        return Transition(state)

    if isinstance(state, Drawing):
        if isinstance(event, PointerMove):
            return Transition(replace(state, element=_extend_element(state.element, event.point)))
        if isinstance(event, PointerUp):
            return Transition(IDLE, committed=state.element)
        return Transition(state)

    if isinstance(state, TextPending):
        if isinstance(event, TextConfirm):
            if not event.text.strip():
                return Transition(IDLE)
            timestamp = clock()
            label = TextLabel(
                id=new_element_id(timestamp),
                color=settings.color,
                stroke_width=settings.stroke_width,
                created_at=timestamp,
                anchor=state.point,
                text=event.text,
            )
            return Transition(IDLE, committed=label)
        if isinstance(event, TextCancel):
            return Transition(IDLE)
        return Transition(state)

    return Transition(state)


def in_progress_element(state: InteractionState) -> Optional[MarkupElement]:
    """The element being drawn, if any."""
    if isinstance(state, Drawing):
        return state.element
    return None


__all__ = [
    'DrawingTool',
    'ToolSettings',
    'Idle',
    'Drawing',
    'TextPending',
    'InteractionState',
    'IDLE',
    'PointerDown',
    'PointerMove',
    'PointerUp',
    'TextConfirm',
    'TextCancel',
    'InteractionEvent',
    'Transition',
    'reduce',
    'in_progress_element',
]
