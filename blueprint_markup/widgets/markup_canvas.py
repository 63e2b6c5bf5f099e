"""
MarkupCanvas - Drawing surface for blueprint markup

Immediate-mode widget: every paintEvent repaints the background image and
all markup through the renderer. Mouse input is forwarded to the
MarkupSession, which owns history, tool state and the viewport.

Input:
- Left button: draw with the active tool
- Middle button drag: pan
- Ctrl + wheel: zoom
- Esc: cancel pending text / in-progress shape
"""

import logging
from typing import Optional

from PyQt6.QtWidgets import QWidget, QInputDialog, QSizePolicy
from PyQt6.QtCore import Qt, pyqtSignal, QPointF, QRectF
from PyQt6.QtGui import QPainter, QColor, QImage, QCursor

from ..core.interaction import DrawingTool, TextPending
from ..core.session import MarkupSession
from .markup.qt_surface import QPainterSurface, render_to_image
from .markup.renderer import render_markup

logger = logging.getLogger(__name__)


class MarkupCanvas(QWidget):
    """
    Canvas widget rendering a MarkupSession.

    Usage:
        canvas = MarkupCanvas(session)
        canvas.set_background(image)
        canvas.element_committed.connect(on_commit)
    """

    # Signals
    element_committed = pyqtSignal(object)  # MarkupElement
    view_changed = pyqtSignal(float)  # zoom

    BACKGROUND_COLOR = '#0d1117'

    def __init__(self, session: MarkupSession, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._session = session
        self._background: Optional[QImage] = None
        self._pan_anchor: Optional[QPointF] = None

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(320, 240)
        self._update_cursor()

        self._session.add_listener(self._on_session_changed)

    # ==================== Properties ====================

    @property
    def session(self) -> MarkupSession:
        return self._session

    @property
    def background(self) -> Optional[QImage]:
        return self._background

    def set_background(self, image: Optional[QImage]):
        if image is not None and image.isNull():
            logger.warning("Ignoring null background image")
            image = None
        self._background = image
        self.update()

    def load_background_data(self, data: bytes) -> bool:
        """Decode image bytes into the background. Returns False if undecodable."""
        image = QImage()
        if not image.loadFromData(data):
            logger.warning("Could not decode blueprint image")
            return False
        self.set_background(image)
        return True

    def background_size(self):
        if self._background is None:
            return 0.0, 0.0
        return float(self._background.width()), float(self._background.height())

    def render_image(self) -> QImage:
        """Render background plus committed markup at full resolution."""
        size = None
        if self._background is None:
            size = (max(1, self.width()), max(1, self.height()))
        return render_to_image(self._background, self._session.elements, size)

    # ==================== Painting ====================

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            surface = QPainterSurface(
                painter, QRectF(self.rect()), QColor(self.BACKGROUND_COLOR)
            )
            render_markup(
                surface,
                self._background,
                self._session.elements,
                self._session.in_progress,
                self._session.viewport,
                self.background_size()
            )
        finally:
            painter.end()

    def _on_session_changed(self):
        self._update_cursor()
        self.update()

    def _update_cursor(self):
        if self._session.settings.tool == DrawingTool.TEXT:
            self.setCursor(QCursor(Qt.CursorShape.IBeamCursor))
        else:
            self.setCursor(QCursor(Qt.CursorShape.CrossCursor))

    # ==================== Mouse Events ====================

    def mousePressEvent(self, event):
        pos = event.position()

        if event.button() == Qt.MouseButton.MiddleButton:
            self._pan_anchor = pos
            self.setCursor(QCursor(Qt.CursorShape.ClosedHandCursor))
            event.accept()
            return

        if event.button() == Qt.MouseButton.LeftButton:
            self.setFocus()
            self._session.pointer_down(pos.x(), pos.y())
            if isinstance(self._session.state, TextPending):
                self._prompt_for_text()
            event.accept()
            return

        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        pos = event.position()

        if self._pan_anchor is not None:
            delta = pos - self._pan_anchor
            self._pan_anchor = pos
            self._session.pan_by(delta.x(), delta.y())
            event.accept()
            return

        if self._session.in_progress is not None:
            self._session.pointer_move(pos.x(), pos.y())
            event.accept()
            return

        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        pos = event.position()

        if event.button() == Qt.MouseButton.MiddleButton and self._pan_anchor is not None:
            self._pan_anchor = None
            self._update_cursor()
            event.accept()
            return

        if event.button() == Qt.MouseButton.LeftButton and self._session.in_progress is not None:
            committed = self._session.pointer_up(pos.x(), pos.y())
            if committed is not None:
                self.element_committed.emit(committed)
            event.accept()
            return

        super().mouseReleaseEvent(event)

    def wheelEvent(self, event):
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            if event.angleDelta().y() > 0:
                self.zoom_in()
            elif event.angleDelta().y() < 0:
                self.zoom_out()
            event.accept()
            return
        super().wheelEvent(event)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            self.cancel_interaction()
            event.accept()
            return
        super().keyPressEvent(event)

    # ==================== Text Tool ====================

    def _request_text(self):
        """Ask the user for label text. Returns (text, ok)."""
        return QInputDialog.getText(self, "Add Text", "Enter label text:")

    def _prompt_for_text(self):
        text, ok = self._request_text()
        if ok:
            committed = self._session.confirm_text(text)
            if committed is not None:
                self.element_committed.emit(committed)
        else:
            self._session.cancel_text()

    def cancel_interaction(self):
        """Abandon pending text entry or the shape being dragged."""
        if isinstance(self._session.state, TextPending):
            self._session.cancel_text()
        elif self._session.in_progress is not None:
            # Dropping an unfinished drag commits nothing
            self._session.abort_drawing()

    # ==================== Zoom ====================

    def zoom_in(self):
        self._session.zoom_in()
        self.view_changed.emit(self._session.viewport.zoom)

    def zoom_out(self):
        self._session.zoom_out()
        self.view_changed.emit(self._session.viewport.zoom)

    def reset_view(self):
        self._session.reset_view()
        self.view_changed.emit(self._session.viewport.zoom)

    def closeEvent(self, event):
        self._session.remove_listener(self._on_session_changed)
        super().closeEvent(event)


__all__ = ['MarkupCanvas']
