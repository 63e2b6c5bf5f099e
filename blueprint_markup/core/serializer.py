"""
Snapshot serializer for the markup wire format.

The serialized form is a JSON array of element records, each with a
"type" discriminator plus kind-specific geometry:

    pen        points: [{x, y}, ...]
    rectangle  startX, startY, endX, endY   (opposite corners)
    circle     startX, startY, endX, endY   (center, point on edge)
    text       startX, startY, text         (anchor)

Every record also carries id, color, strokeWidth and timestamp (ms).
This format is shared with the web application and saved markups must
stay loadable across versions, so field names never change.
"""

import json
import logging
import math
from typing import Dict, Any, Iterable

from .elements import (
    Point, FreehandStroke, Rectangle, Circle, TextLabel,
    MarkupElement, Snapshot, EMPTY_SNAPSHOT
)
from .errors import DecodeError

logger = logging.getLogger(__name__)


# ==================== Encoding ====================

def element_to_record(element: MarkupElement) -> Dict[str, Any]:
    """Convert one element to its wire record."""
    record: Dict[str, Any] = {
        'id': element.id,
        'type': element.kind,
        'color': element.color,
        'strokeWidth': float(element.stroke_width),
        'timestamp': int(element.created_at),
    }

    if isinstance(element, FreehandStroke):
        record['points'] = [{'x': float(p.x), 'y': float(p.y)} for p in element.points]

    elif isinstance(element, Rectangle):
        record.update(_corner_fields(element.start, element.end))

    elif isinstance(element, Circle):
        record.update(_corner_fields(element.center, element.edge))

    elif isinstance(element, TextLabel):
        record['startX'] = float(element.anchor.x)
        record['startY'] = float(element.anchor.y)
        record['text'] = element.text

    else:
        raise TypeError(f"Unsupported markup element: {element!r}")

    return record


def _corner_fields(start: Point, end: Point) -> Dict[str, float]:
    return {
        'startX': float(start.x),
        'startY': float(start.y),
        'endX': float(end.x),
        'endY': float(end.y),
    }


def encode_snapshot(snapshot: Iterable[MarkupElement]) -> str:
    """Serialize a snapshot to the JSON wire string."""
    return json.dumps([element_to_record(e) for e in snapshot])


# ==================== Decoding ====================

def _number(record: Dict, key: str) -> float:
    value = record.get(key)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Field '{key}' must be a number, got {value!r}")
    # json.loads accepts NaN, Infinity and out-of-range literals like 1e400
    try:
        number = float(value)
    except OverflowError as e:
        raise DecodeError(f"Field '{key}' is out of range") from e
    if not math.isfinite(number):
        raise DecodeError(f"Field '{key}' must be finite, got {value!r}")
    return number


def _point(data: Any) -> Point:
    if not isinstance(data, dict):
        raise DecodeError(f"Point must be an object, got {data!r}")
    return Point(_number(data, 'x'), _number(data, 'y'))


def record_to_element(record: Any) -> MarkupElement:
    """Convert one wire record to an element, raising DecodeError if malformed."""
    if not isinstance(record, dict):
        raise DecodeError(f"Element record must be an object, got {type(record).__name__}")

    kind = record.get('type')
    element_id = record.get('id')
    color = record.get('color')
    if not isinstance(element_id, str) or not element_id:
        raise DecodeError("Element record is missing an id")
    if not isinstance(color, str):
        raise DecodeError(f"Element {element_id} has no color")

    common = {
        'id': element_id,
        'color': color,
        'stroke_width': _number(record, 'strokeWidth'),
        'created_at': int(_number(record, 'timestamp')),
    }

    if kind == FreehandStroke.kind:
        points = record.get('points')
        if not isinstance(points, list) or not points:
            raise DecodeError(f"Stroke {element_id} needs at least one point")
        return FreehandStroke(points=tuple(_point(p) for p in points), **common)

    if kind == Rectangle.kind:
        return Rectangle(
            start=Point(_number(record, 'startX'), _number(record, 'startY')),
            end=Point(_number(record, 'endX'), _number(record, 'endY')),
            **common
        )

    if kind == Circle.kind:
        return Circle(
            center=Point(_number(record, 'startX'), _number(record, 'startY')),
            edge=Point(_number(record, 'endX'), _number(record, 'endY')),
            **common
        )

    if kind == TextLabel.kind:
        text = record.get('text')
        if not isinstance(text, str):
            raise DecodeError(f"Text element {element_id} has no text")
        return TextLabel(
            anchor=Point(_number(record, 'startX'), _number(record, 'startY')),
            text=text,
            **common
        )

    raise DecodeError(f"Unknown element type: {kind!r}")


def decode_snapshot(data: str) -> Snapshot:
    """
    Parse a serialized snapshot.

    Args:
        data: JSON wire string

    Returns:
        Tuple of elements in stored order

    Raises:
        DecodeError: if the string is not JSON, not an array, or any
            element record is malformed
    """
    if not isinstance(data, str):
        raise DecodeError(f"Serialized markup must be a string, got {type(data).__name__}")

    try:
        records = json.loads(data)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Markup is not valid JSON: {e}") from e

    if not isinstance(records, list):
        raise DecodeError(f"Markup must be a JSON array, got {type(records).__name__}")

    return tuple(record_to_element(r) for r in records)


def decode_snapshot_or_empty(data: str, context: str = '') -> Snapshot:
    """Decode, falling back to an empty snapshot (logged) on malformed data."""
    try:
        return decode_snapshot(data)
    except DecodeError as e:
        logger.warning(f"Discarding malformed markup{' for ' + context if context else ''}: {e}")
        return EMPTY_SNAPSHOT


__all__ = [
    'element_to_record',
    'record_to_element',
    'encode_snapshot',
    'decode_snapshot',
    'decode_snapshot_or_empty',
]
