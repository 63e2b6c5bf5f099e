"""
MarkupEditorWindow - Main application window

Pattern: QMainWindow with toolbar + canvas + status bar
"""

import logging
from typing import Dict, Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QStatusBar, QMessageBox, QFileDialog
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QCloseEvent, QKeySequence, QShortcut

from ..config import Config
from ..core.elements import Snapshot
from ..core.errors import MarkupError, ValidationError
from ..core.interaction import DrawingTool
from ..core.session import MarkupSession
from ..events.event_bus import EventBus, get_event_bus
from ..services.markup_persistence import MarkupPersistenceBridge
from ..services.records import Blueprint, NamedMarkupSave, LiveSaveResult
from ..services.save_worker import MarkupSaveQueue
from .dialogs.named_saves_dialog import NamedSavesDialog
from .dialogs.save_markup_dialog import SaveMarkupDialog
from .markup.qt_surface import export_png
from .markup_canvas import MarkupCanvas
from .markup_toolbar import MarkupToolbar

logger = logging.getLogger(__name__)


class MarkupEditorWindow(QMainWindow):
    """
    Main editor window for one blueprint

    Features:
    - Toolbar with tools, colors, history, zoom and save actions
    - Canvas rendering the blueprint and markup
    - Non-blocking saves through MarkupSaveQueue
    - Status bar notifications for save results and errors

    Layout:
        +------------------------------------------+
        |  MarkupToolbar                           |
        +------------------------------------------+
        |  MarkupCanvas                            |
        |                                          |
        +------------------------------------------+
        |  StatusBar                               |
        +------------------------------------------+
    """

    def __init__(self, blueprint_id: str, bridge: MarkupPersistenceBridge,
                 parent=None, event_bus: Optional[EventBus] = None,
                 save_queue: Optional[MarkupSaveQueue] = None,
                 owner_id: Optional[str] = None):
        super().__init__(parent)

        # Services and event bus (injectable for testing)
        self._event_bus = event_bus or get_event_bus()
        self._bridge = bridge
        self._save_queue = save_queue or MarkupSaveQueue(bridge, parent=self)
        self._owner_id = owner_id

        self._blueprint_id = blueprint_id
        self._blueprint: Optional[Blueprint] = None
        self._image_url: Optional[str] = None
        self._viewing_save: Optional[NamedMarkupSave] = None

        # Snapshot captured per in-flight live save
        self._pending_live: Dict[str, Snapshot] = {}

        self._session = MarkupSession()
        self._restore_tool_settings()

        self._setup_window()
        self._create_widgets()
        self._create_layout()
        self._create_shortcuts()
        self._connect_signals()
        self._sync_ui()
        self._toolbar.set_persistence_enabled(False)

    def _setup_window(self):
        """Configure window properties"""
        self.setWindowTitle(f"{Config.APP_NAME} {Config.APP_VERSION}")
        self.setGeometry(100, 100, Config.DEFAULT_WINDOW_WIDTH, Config.DEFAULT_WINDOW_HEIGHT)

    def _create_widgets(self):
        """Create UI widgets"""
        self._toolbar = MarkupToolbar()
        self._toolbar.set_tool(self._session.settings.tool)
        self._toolbar.set_color(self._session.settings.color)
        self._toolbar.set_stroke_width(self._session.settings.stroke_width)

        self._canvas = MarkupCanvas(self._session)

        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready")

    def _create_layout(self):
        """Create window layout"""
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self._toolbar)
        layout.addWidget(self._canvas, 1)
        self.setCentralWidget(central)

    def _create_shortcuts(self):
        """Keyboard shortcuts (window-wide)"""
        bindings = [
            (QKeySequence.StandardKey.Undo, self.undo),
            (QKeySequence("Ctrl+Y"), self.redo),
            (QKeySequence("Ctrl+Shift+Z"), self.redo),
            (QKeySequence.StandardKey.Save, self.save_live),
            (QKeySequence.StandardKey.Refresh, self.open_blueprint),
            (QKeySequence("P"), lambda: self._set_tool(DrawingTool.PEN)),
            (QKeySequence("R"), lambda: self._set_tool(DrawingTool.RECTANGLE)),
            (QKeySequence("C"), lambda: self._set_tool(DrawingTool.CIRCLE)),
            (QKeySequence("T"), lambda: self._set_tool(DrawingTool.TEXT)),
        ]
        self._shortcuts = []
        for sequence, handler in bindings:
            shortcut = QShortcut(sequence, self)
            shortcut.setContext(Qt.ShortcutContext.WindowShortcut)
            shortcut.activated.connect(handler)
            self._shortcuts.append(shortcut)

    def _connect_signals(self):
        """Connect signals between components"""
        # Toolbar -> session
        self._toolbar.tool_changed.connect(self._set_tool)
        self._toolbar.color_changed.connect(self._session.set_color)
        self._toolbar.stroke_width_changed.connect(self._session.set_stroke_width)
        self._toolbar.undo_clicked.connect(self.undo)
        self._toolbar.redo_clicked.connect(self.redo)
        self._toolbar.clear_clicked.connect(self.clear_all)
        self._toolbar.zoom_in_clicked.connect(self._canvas.zoom_in)
        self._toolbar.zoom_out_clicked.connect(self._canvas.zoom_out)
        self._toolbar.reset_view_clicked.connect(self._canvas.reset_view)

        # Toolbar -> persistence
        self._toolbar.save_clicked.connect(self.save_live)
        self._toolbar.save_as_clicked.connect(self.save_named)
        self._toolbar.saved_markups_clicked.connect(self.show_named_saves)
        self._toolbar.back_to_current_clicked.connect(self.back_to_current)
        self._toolbar.export_clicked.connect(self.export_image)

        # Session -> UI
        self._session.add_listener(self._sync_ui)
        self._canvas.element_committed.connect(lambda element: self._event_bus.notify_markup_changed())

        # Save queue results
        self._save_queue.blueprint_opened.connect(self._on_blueprint_opened)
        self._save_queue.live_saved.connect(self._on_live_saved)
        self._save_queue.named_saved.connect(self._on_named_saved)
        self._save_queue.named_listed.connect(self._on_named_listed)
        self._save_queue.image_fetched.connect(self._on_image_fetched)
        self._save_queue.request_failed.connect(self._on_request_failed)

        # Event bus
        self._event_bus.error_occurred.connect(self._on_error)

    # ==================== Properties ====================

    @property
    def session(self) -> MarkupSession:
        return self._session

    @property
    def canvas(self) -> MarkupCanvas:
        return self._canvas

    @property
    def toolbar(self) -> MarkupToolbar:
        return self._toolbar

    @property
    def save_queue(self) -> MarkupSaveQueue:
        return self._save_queue

    @property
    def viewing_save(self) -> Optional[NamedMarkupSave]:
        return self._viewing_save

    # ==================== UI State ====================

    def _sync_ui(self):
        """Reflect session state in toolbar, title and event bus."""
        history = self._session.history
        self._toolbar.set_history_state(history.can_undo, history.can_redo)
        self._toolbar.set_zoom_percent(self._session.viewport.zoom_percent)
        self._toolbar.set_viewing_named_save(self._viewing_save is not None)

        self._event_bus.set_history_state(history.can_undo, history.can_redo)
        self._event_bus.set_zoom(self._session.viewport.zoom)

        title = f"{Config.APP_NAME} {Config.APP_VERSION}"
        if self._blueprint is not None:
            title = f"{self._blueprint.name or self._blueprint.id} - {title}"
        if self._viewing_save is not None:
            title = f"[{self._viewing_save.name}] {title}"
        if self._session.is_dirty:
            title = f"* {title}"
        self.setWindowTitle(title)

    def _notify(self, message: str):
        self._status_bar.showMessage(message, Config.STATUS_MESSAGE_MS)

    def _require_blueprint(self) -> bool:
        if self._blueprint is None:
            self._notify("Blueprint is not loaded yet; press F5 to retry")
            return False
        return True

    def _set_tool(self, tool: DrawingTool):
        self._session.set_tool(tool)
        self._toolbar.set_tool(tool)
        self._event_bus.set_tool(tool.value)

    # ==================== Editing ====================

    def undo(self):
        if self._session.undo():
            self._event_bus.notify_markup_changed()

    def redo(self):
        if self._session.redo():
            self._event_bus.notify_markup_changed()

    def clear_all(self):
        if not self._session.elements:
            return
        self._session.clear_all()
        self._event_bus.notify_markup_changed()
        self._notify("Markup cleared (undo to restore)")

    # ==================== Loading ====================

    def open_blueprint(self):
        """Request the blueprint and its live markup."""
        self._status_bar.showMessage(f"Loading blueprint {self._blueprint_id}...")
        self._save_queue.open_blueprint(self._blueprint_id)

    def _on_blueprint_opened(self, request_id: str, blueprint: Blueprint, snapshot: Snapshot):
        self._blueprint = blueprint
        self._viewing_save = None
        self._toolbar.set_persistence_enabled(True)
        self._session.replace_elements(snapshot)
        self._event_bus.set_blueprint(blueprint.id)
        self._notify(f"Loaded {len(snapshot)} markup element(s)")

        if blueprint.source_image_url and blueprint.source_image_url != self._image_url:
            self._image_url = blueprint.source_image_url
            self._save_queue.fetch_image(blueprint.source_image_url)

    def _on_image_fetched(self, request_id: str, data: bytes):
        if not self._canvas.load_background_data(data):
            self._event_bus.report_error("image", "Blueprint image could not be decoded")

    def back_to_current(self):
        """Leave a named save and reload the live markup."""
        self._notify("Returning to current markup...")
        self._save_queue.open_blueprint(self._blueprint_id)

    # ==================== Saving ====================

    def save_live(self):
        """Overwrite the live markup with the current elements."""
        if not self._require_blueprint():
            return
        snapshot = self._session.elements
        request_id = self._save_queue.save_live(self._blueprint_id, snapshot)
        self._pending_live[request_id] = snapshot
        self._toolbar.set_saving(True)
        self._event_bus.start_save('save_live')
        self._status_bar.showMessage("Saving markup...")

    def _on_live_saved(self, request_id: str, result: LiveSaveResult):
        snapshot = self._pending_live.pop(request_id, None)
        if snapshot is not None:
            self._session.mark_saved(snapshot)
        self._toolbar.set_saving(bool(self._pending_live))
        message = "Markup saved"
        if result.version is not None:
            message = f"Markup saved (version {result.version})"
        self._event_bus.finish_save('save_live', message)
        self._notify(message)

    def save_named(self):
        """Ask for a name and create a named save of the current elements."""
        if not self._require_blueprint():
            return
        dialog = SaveMarkupDialog(self, default_name=self._viewing_save.name if self._viewing_save else "")
        if not dialog.exec():
            return
        name, description, is_shared = dialog.get_values()
        self.request_named_save(name, description, is_shared)

    def request_named_save(self, name: str, description: Optional[str] = None,
                           is_shared: bool = False) -> Optional[str]:
        """Queue a named save; returns the request id, or None if nothing was queued."""
        if not self._require_blueprint():
            return None
        try:
            request_id = self._save_queue.save_named(
                self._blueprint_id, name, self._session.elements,
                description=description, is_shared=is_shared, owner_id=self._owner_id
            )
        except ValidationError as e:
            QMessageBox.warning(self, "Save Markup", str(e))
            return None
        self._event_bus.start_save('save_named')
        self._status_bar.showMessage(f"Saving '{name.strip()}'...")
        return request_id

    def _on_named_saved(self, request_id: str, save: NamedMarkupSave):
        message = f"Saved markup '{save.name}'"
        self._event_bus.finish_save('save_named', message)
        self._notify(message)

    # ==================== Named Saves ====================

    def show_named_saves(self):
        if not self._require_blueprint():
            return
        self._status_bar.showMessage("Loading saved markups...")
        self._save_queue.list_named(self._blueprint_id)

    def _on_named_listed(self, request_id: str, saves: list):
        self._status_bar.clearMessage()
        dialog = NamedSavesDialog(saves, self)
        dialog.save_selected.connect(self.load_named_save)
        dialog.exec()

    def load_named_save(self, save_id: str) -> bool:
        """Replace the working elements with a named save (history is reseeded)."""
        try:
            snapshot = self._bridge.load_named(save_id)
        except MarkupError as e:
            logger.warning(f"Could not load named save {save_id}: {e}")
            self._event_bus.report_error("load", str(e))
            return False

        self._viewing_save = self._bridge.get_named(save_id)
        self._session.replace_elements(snapshot)
        self._event_bus.notify_markup_changed()
        name = self._viewing_save.name if self._viewing_save else save_id
        self._notify(f"Loaded saved markup '{name}'")
        return True

    # ==================== Export ====================

    def export_image(self):
        default_name = f"{self._blueprint_id}-markup.png"
        path, _ = QFileDialog.getSaveFileName(self, "Export PNG", default_name, "PNG Images (*.png)")
        if not path:
            return
        if not path.lower().endswith('.png'):
            path += '.png'
        if export_png(path, self._canvas.background, self._session.elements):
            self._notify(f"Exported {path}")
        else:
            self._event_bus.report_error("export", f"Could not write {path}")

    # ==================== Errors ====================

    def _on_request_failed(self, request_id: str, operation: str, message: str):
        if operation == 'save_live':
            self._pending_live.pop(request_id, None)
            self._toolbar.set_saving(bool(self._pending_live))
        if operation in ('save_live', 'save_named'):
            self._event_bus.fail_save(operation, message)
        self._event_bus.report_error("network", message)
        if operation == 'open_blueprint':
            self._notify(f"Could not open blueprint: {message} (F5 to retry)")

    def _on_error(self, error_type: str, error_message: str):
        """Non-blocking notification; the user may retry."""
        self._notify(f"Error: {error_message}")

    # ==================== Settings ====================

    def _restore_tool_settings(self):
        settings = Config.load_settings()
        color = settings.get('last_color')
        if isinstance(color, str) and color:
            self._session.set_color(color)
        width = settings.get('last_stroke_width')
        if isinstance(width, (int, float)) and not isinstance(width, bool):
            self._session.set_stroke_width(width)

    def _save_tool_settings(self):
        Config.save_setting('last_color', self._session.settings.color)
        Config.save_setting('last_stroke_width', self._session.settings.stroke_width)

    def closeEvent(self, event: QCloseEvent):
        """Handle window close"""
        if self._session.is_dirty:
            reply = QMessageBox.question(
                self, "Unsaved Markup",
                "Markup has unsaved changes. Close anyway?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No
            )
            if reply != QMessageBox.StandardButton.Yes:
                event.ignore()
                return

        if self._save_queue.pending_count:
            logger.warning(f"Closing with {self._save_queue.pending_count} persistence request(s) still running")
        self._session.remove_listener(self._sync_ui)
        self._event_bus.error_occurred.disconnect(self._on_error)
        self._save_tool_settings()
        event.accept()


__all__ = ['MarkupEditorWindow']
