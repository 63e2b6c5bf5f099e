"""Markup editing core (element model, history, viewport, interaction)"""

from .elements import (
    Point, FreehandStroke, Rectangle, Circle, TextLabel,
    MarkupElement, Snapshot, EMPTY_SNAPSHOT
)
from .errors import (
    MarkupError, DecodeError, ValidationError, NetworkError,
    StateInvariantViolation, NamedSaveNotFound
)
from .history import HistoryStack
from .interaction import DrawingTool, ToolSettings
from .serializer import encode_snapshot, decode_snapshot
from .session import MarkupSession
from .viewport import Viewport

__all__ = [
    'Point',
    'FreehandStroke',
    'Rectangle',
    'Circle',
    'TextLabel',
    'MarkupElement',
    'Snapshot',
    'EMPTY_SNAPSHOT',
    'MarkupError',
    'DecodeError',
    'ValidationError',
    'NetworkError',
    'StateInvariantViolation',
    'NamedSaveNotFound',
    'HistoryStack',
    'DrawingTool',
    'ToolSettings',
    'encode_snapshot',
    'decode_snapshot',
    'MarkupSession',
    'Viewport',
]
