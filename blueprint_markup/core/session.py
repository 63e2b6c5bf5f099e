"""
MarkupSession - editing state for one open blueprint.

Combines the history stack, the interaction reducer, tool settings and
the viewport. All operations are synchronous; listeners are notified
after every change so the view can repaint immediately.
"""

import logging
from dataclasses import replace
from typing import Callable, List, Optional

from ..config import Config
from .elements import Point, MarkupElement, Snapshot, EMPTY_SNAPSHOT, append_element, now_ms
from .history import HistoryStack
from .interaction import (
    DrawingTool, ToolSettings, InteractionState, InteractionEvent, IDLE,
    TextPending, PointerDown, PointerMove, PointerUp, TextConfirm, TextCancel,
    reduce, in_progress_element
)
from .viewport import Viewport

logger = logging.getLogger(__name__)


class MarkupSession:
    """
    In-memory editing session.

    Usage:
        session = MarkupSession(initial_snapshot)
        session.set_tool(DrawingTool.RECTANGLE)
        session.pointer_down(10, 10)
        session.pointer_move(50, 40)
        session.pointer_up(50, 40)
        session.undo()
    """

    def __init__(self, initial: Snapshot = EMPTY_SNAPSHOT,
                 viewport: Optional[Viewport] = None,
                 clock: Callable[[], int] = now_ms):
        self._history = HistoryStack(initial)
        self._state: InteractionState = IDLE
        self._settings = ToolSettings()
        self._viewport = viewport or Viewport()
        self._clock = clock
        self._saved_snapshot: Snapshot = self._history.current
        self._listeners: List[Callable[[], None]] = []

    # ==================== Properties ====================

    @property
    def history(self) -> HistoryStack:
        return self._history

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def elements(self) -> Snapshot:
        """Committed elements currently rendered (always history.current)."""
        return self._history.current

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def in_progress(self) -> Optional[MarkupElement]:
        return in_progress_element(self._state)

    @property
    def pending_text_point(self) -> Optional[Point]:
        if isinstance(self._state, TextPending):
            return self._state.point
        return None

    @property
    def settings(self) -> ToolSettings:
        return self._settings

    @property
    def is_dirty(self) -> bool:
        """True when the current elements differ from the last saved or loaded ones."""
        return self._history.current != self._saved_snapshot

    # ==================== Listeners ====================

    def add_listener(self, callback: Callable[[], None]):
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback()

    # ==================== Tool Settings ====================

    def set_tool(self, tool: DrawingTool):
        if tool == self._settings.tool:
            return
        # Switching tools abandons any pending text entry
        if isinstance(self._state, TextPending):
            self._state = IDLE
        self._settings = replace(self._settings, tool=tool)
        self._notify()

    def set_color(self, color: str):
        self._settings = replace(self._settings, color=color)

    def set_stroke_width(self, width: float):
        width = max(Config.MIN_STROKE_WIDTH, min(Config.MAX_STROKE_WIDTH, width))
        self._settings = replace(self._settings, stroke_width=width)

    # ==================== Pointer & Text Input ====================

    def dispatch(self, event: InteractionEvent) -> Optional[MarkupElement]:
        """Feed one event through the reducer; commits if the transition says so."""
        transition = reduce(self._state, event, self._settings, self._clock)
        self._state = transition.state
        if transition.committed is not None:
            self._commit(transition.committed)
        self._notify()
        return transition.committed

    def pointer_down(self, device_x: float, device_y: float):
        return self.dispatch(PointerDown(self._viewport.screen_to_logical(device_x, device_y)))

    def pointer_move(self, device_x: float, device_y: float):
        return self.dispatch(PointerMove(self._viewport.screen_to_logical(device_x, device_y)))

    def pointer_up(self, device_x: float, device_y: float):
        return self.dispatch(PointerUp(self._viewport.screen_to_logical(device_x, device_y)))

    def abort_drawing(self):
        """Drop the in-progress element without committing it."""
        if self.in_progress is not None:
            self._state = IDLE
            self._notify()

    def confirm_text(self, text: str):
        return self.dispatch(TextConfirm(text))

    def cancel_text(self):
        return self.dispatch(TextCancel())

    def _commit(self, element: MarkupElement):
        self._history.push(append_element(self._history.current, element))
        logger.debug(f"Committed {element.kind} {element.id} (history {self._history.index + 1}/{len(self._history)})")

    # ==================== History ====================

    def undo(self) -> bool:
        changed = self._history.undo() is not None
        if changed:
            self._notify()
        return changed

    def redo(self) -> bool:
        changed = self._history.redo() is not None
        if changed:
            self._notify()
        return changed

    def clear_all(self):
        """Remove every element (undoable)."""
        self._state = IDLE
        self._history.clear()
        self._notify()

    def replace_elements(self, snapshot: Snapshot):
        """
        Replace the working elements with a loaded snapshot.

        History is reseeded to a single entry so stack[index] keeps
        matching what is rendered.
        """
        self._state = IDLE
        self._history.reseed(snapshot)
        self._saved_snapshot = self._history.current
        self._notify()

    def mark_saved(self, snapshot: Optional[Snapshot] = None):
        """Record snapshot (default: current) as the last persisted state."""
        self._saved_snapshot = self._history.current if snapshot is None else snapshot
        self._notify()

    # ==================== Viewport ====================

    def zoom_in(self):
        self._viewport.zoom_in()
        self._notify()

    def zoom_out(self):
        self._viewport.zoom_out()
        self._notify()

    def reset_view(self):
        self._viewport.reset_view()
        self._notify()

    def pan_by(self, device_dx: float, device_dy: float):
        self._viewport.pan_by(device_dx, device_dy)
        self._notify()


__all__ = ['MarkupSession']
