"""
EventBus - Central event system for editor-wide notifications

Pattern: Observer/Publisher-Subscriber
"""

from PyQt6.QtCore import QObject, pyqtSignal
from typing import Optional


class EventBus(QObject):
    """
    Central event bus for decoupled communication between editor components

    The canvas, toolbar and main window never hold references to each
    other's internals; they talk through these signals.

    Usage:
        event_bus = get_event_bus()
        event_bus.history_changed.connect(toolbar.set_history_state)
        event_bus.set_history_state(True, False)
    """

    # Blueprint events
    blueprint_opened = pyqtSignal(str)  # blueprint_id

    # Markup events
    markup_changed = pyqtSignal()
    history_changed = pyqtSignal(bool, bool)  # can_undo, can_redo

    # Tool and view events
    tool_changed = pyqtSignal(str)  # 'pen', 'rectangle', 'circle', 'text'
    zoom_changed = pyqtSignal(float)  # zoom factor

    # Save events
    save_started = pyqtSignal(str)  # operation ('save_live', 'save_named', ...)
    save_finished = pyqtSignal(str, str)  # operation, message
    save_failed = pyqtSignal(str, str)  # operation, error_message

    # Error events
    error_occurred = pyqtSignal(str, str)  # error_type, error_message

    def __init__(self):
        super().__init__()

        # State storage
        self._blueprint_id: Optional[str] = None
        self._current_tool: str = 'pen'
        self._zoom: float = 1.0
        self._can_undo: bool = False
        self._can_redo: bool = False

    # Getters (read current state)

    def get_blueprint_id(self) -> Optional[str]:
        """Get the currently open blueprint ID"""
        return self._blueprint_id

    def get_current_tool(self) -> str:
        return self._current_tool

    def get_zoom(self) -> float:
        return self._zoom

    def get_history_state(self):
        """Get (can_undo, can_redo)"""
        return self._can_undo, self._can_redo

    # Setters (update state and emit signals)

    def set_blueprint(self, blueprint_id: str):
        """
        Set the open blueprint

        Args:
            blueprint_id: Blueprint identifier
        """
        self._blueprint_id = blueprint_id
        self.blueprint_opened.emit(blueprint_id)

    def set_tool(self, tool: str):
        """
        Set active drawing tool

        Args:
            tool: 'pen', 'rectangle', 'circle' or 'text'
        """
        if tool not in ('pen', 'rectangle', 'circle', 'text'):
            raise ValueError(f"Invalid tool: {tool}")

        if self._current_tool != tool:
            self._current_tool = tool
            self.tool_changed.emit(tool)

    def set_zoom(self, zoom: float):
        if self._zoom != zoom:
            self._zoom = zoom
            self.zoom_changed.emit(zoom)

    def set_history_state(self, can_undo: bool, can_redo: bool):
        """
        Publish undo/redo availability

        Args:
            can_undo: True if there is an earlier snapshot
            can_redo: True if there is a later snapshot
        """
        if (self._can_undo, self._can_redo) != (can_undo, can_redo):
            self._can_undo = can_undo
            self._can_redo = can_redo
            self.history_changed.emit(can_undo, can_redo)

    # Convenience methods

    def notify_markup_changed(self):
        self.markup_changed.emit()

    def report_error(self, error_type: str, message: str):
        """
        Report an error to the UI

        Args:
            error_type: Type of error (e.g., "network", "decode", "validation")
            message: Human-readable error message
        """
        self.error_occurred.emit(error_type, message)

    def start_save(self, operation: str):
        """Signal that a persistence request was queued"""
        self.save_started.emit(operation)

    def finish_save(self, operation: str, message: str):
        """Signal that a persistence request completed"""
        self.save_finished.emit(operation, message)

    def fail_save(self, operation: str, message: str):
        """Signal that a persistence request failed"""
        self.save_failed.emit(operation, message)


# Singleton instance (lazy initialization)
_event_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """
    Get global EventBus singleton instance

    Returns:
        Global EventBus instance
    """
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = EventBus()
    return _event_bus_instance


# Export
__all__ = ['EventBus', 'get_event_bus']
