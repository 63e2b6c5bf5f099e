"""
Markup Toolbar Widget

Single-row toolbar for the blueprint editor with:
- Tool selection (pen, rectangle, circle, text)
- Color presets and picker
- Stroke size slider
- Undo/Redo/Clear
- Zoom out/in/reset with percentage label
- Save, Save As, Saved Markups, Back to Current, Export PNG
"""

from typing import Optional, Dict
from PyQt6.QtWidgets import (
    QWidget, QHBoxLayout, QPushButton, QFrame, QButtonGroup,
    QLabel, QColorDialog, QSlider
)
from PyQt6.QtCore import pyqtSignal, Qt
from PyQt6.QtGui import QColor

from ..config import Config
from ..core.interaction import DrawingTool


class MarkupToolbar(QWidget):
    """
    Editor toolbar. Emits intent signals only; the main window applies them.

    Usage:
        toolbar = MarkupToolbar()
        toolbar.tool_changed.connect(session.set_tool)
        toolbar.set_history_state(session.history.can_undo, session.history.can_redo)
    """

    # Signals
    tool_changed = pyqtSignal(object)  # DrawingTool
    color_changed = pyqtSignal(str)  # hex color
    stroke_width_changed = pyqtSignal(int)
    undo_clicked = pyqtSignal()
    redo_clicked = pyqtSignal()
    clear_clicked = pyqtSignal()
    zoom_in_clicked = pyqtSignal()
    zoom_out_clicked = pyqtSignal()
    reset_view_clicked = pyqtSignal()
    save_clicked = pyqtSignal()
    save_as_clicked = pyqtSignal()
    saved_markups_clicked = pyqtSignal()
    back_to_current_clicked = pyqtSignal()
    export_clicked = pyqtSignal()

    # Tool definitions: (label, DrawingTool, tooltip)
    TOOLS = [
        ("Pen", DrawingTool.PEN, "Freehand pen (P)"),
        ("Rect", DrawingTool.RECTANGLE, "Rectangle (R)"),
        ("Circle", DrawingTool.CIRCLE, "Circle (C)"),
        ("Text", DrawingTool.TEXT, "Text label (T)"),
    ]

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._tool_buttons: Dict[DrawingTool, QPushButton] = {}
        self._current_tool = DrawingTool.PEN
        self._current_color = Config.DEFAULT_COLOR

        self._setup_ui()
        self._connect_signals()

        self._tool_buttons[DrawingTool.PEN].setChecked(True)
        self.set_history_state(False, False)
        self.set_viewing_named_save(False)

    def _setup_ui(self):
        """Build the single-row toolbar UI."""
        self.setFixedHeight(44)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        self._tool_btn_style = """
            QPushButton { background: #21262d; border: 1px solid #30363d; border-radius: 3px;
                          color: #e6edf3; padding: 2px 8px; }
            QPushButton:hover { background: #30363d; border-color: #484f58; }
            QPushButton:checked { background: #238636; border-color: #2ea043; }
            QPushButton:disabled { background: #161b22; color: #6e7681; border-color: #21262d; }
        """

        # Tool button group (exclusive selection)
        self._tool_group = QButtonGroup(self)
        self._tool_group.setExclusive(True)

        for label, tool, tooltip in self.TOOLS:
            btn = self._create_button(label, tooltip, checkable=True)
            self._tool_group.addButton(btn)
            self._tool_buttons[tool] = btn
            layout.addWidget(btn)

        layout.addWidget(self._create_separator())

        # Color presets
        self._preset_buttons = []
        for color in Config.COLOR_PRESETS:
            btn = QPushButton()
            btn.setFixedSize(22, 22)
            btn.setToolTip(color)
            btn.setStyleSheet(f"background-color: {color}; border: 1px solid #484f58;")
            btn.clicked.connect(lambda checked, c=color: self._on_color_chosen(c))
            self._preset_buttons.append(btn)
            layout.addWidget(btn)

        self._color_btn = QPushButton()
        self._color_btn.setFixedSize(28, 22)
        self._color_btn.setToolTip("Pick color")
        layout.addWidget(self._color_btn)
        self._update_color_button()

        layout.addWidget(self._create_separator())

        # ===== Stroke Size Slider Section =====
        size_label = QLabel("Size")
        size_label.setStyleSheet("color: #8b949e; font-size: 11px;")
        layout.addWidget(size_label)

        self._size_slider = QSlider(Qt.Orientation.Horizontal)
        self._size_slider.setRange(Config.MIN_STROKE_WIDTH, Config.MAX_STROKE_WIDTH)
        self._size_slider.setValue(int(Config.DEFAULT_STROKE_WIDTH))
        self._size_slider.setFixedWidth(80)
        self._size_slider.setToolTip(f"Stroke width ({Config.MIN_STROKE_WIDTH}-{Config.MAX_STROKE_WIDTH})")
        layout.addWidget(self._size_slider)

        self._size_value_label = QLabel(str(int(Config.DEFAULT_STROKE_WIDTH)))
        self._size_value_label.setFixedWidth(20)
        self._size_value_label.setStyleSheet("color: #e6edf3; font-size: 11px;")
        layout.addWidget(self._size_value_label)

        layout.addWidget(self._create_separator())

        # History
        self._undo_btn = self._create_button("Undo", "Undo (Ctrl+Z)")
        layout.addWidget(self._undo_btn)
        self._redo_btn = self._create_button("Redo", "Redo (Ctrl+Y)")
        layout.addWidget(self._redo_btn)
        self._clear_btn = self._create_button("Clear", "Remove all markup (undoable)")
        self._clear_btn.setStyleSheet(self._tool_btn_style.replace("#238636", "#da3633"))
        layout.addWidget(self._clear_btn)

        layout.addWidget(self._create_separator())

        # Zoom
        self._zoom_out_btn = self._create_button("-", "Zoom out")
        layout.addWidget(self._zoom_out_btn)
        self._zoom_label = QLabel("100%")
        self._zoom_label.setFixedWidth(44)
        self._zoom_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._zoom_label.setStyleSheet("color: #e6edf3; font-size: 11px;")
        layout.addWidget(self._zoom_label)
        self._zoom_in_btn = self._create_button("+", "Zoom in")
        layout.addWidget(self._zoom_in_btn)
        self._reset_view_btn = self._create_button("Reset", "Reset zoom and pan")
        layout.addWidget(self._reset_view_btn)

        layout.addStretch()

        # Persistence
        self._back_btn = self._create_button("Back to Current", "Return to the live markup")
        layout.addWidget(self._back_btn)
        self._saved_btn = self._create_button("Saved Markups", "Load a named save")
        layout.addWidget(self._saved_btn)
        self._export_btn = self._create_button("Export PNG", "Export blueprint with markup")
        layout.addWidget(self._export_btn)
        self._save_as_btn = self._create_button("Save As", "Save a named copy")
        layout.addWidget(self._save_as_btn)
        self._save_btn = self._create_button("Save", "Save live markup (Ctrl+S)")
        self._save_btn.setStyleSheet(self._tool_btn_style.replace("#21262d", "#238636", 1))
        layout.addWidget(self._save_btn)

    def _create_button(self, text: str, tooltip: str, checkable: bool = False) -> QPushButton:
        btn = QPushButton(text)
        btn.setFixedHeight(28)
        btn.setCheckable(checkable)
        btn.setToolTip(tooltip)
        btn.setStyleSheet(self._tool_btn_style)
        return btn

    def _create_separator(self) -> QFrame:
        """Create a vertical separator."""
        sep = QFrame()
        sep.setFrameShape(QFrame.Shape.VLine)
        sep.setStyleSheet("background: #30363d; max-width: 1px;")
        return sep

    def _connect_signals(self):
        """Connect internal signals."""
        for tool, btn in self._tool_buttons.items():
            btn.clicked.connect(lambda checked, t=tool: self._on_tool_clicked(t))

        self._color_btn.clicked.connect(self._open_color_dialog)
        self._size_slider.valueChanged.connect(self._on_size_changed)

        self._undo_btn.clicked.connect(self.undo_clicked.emit)
        self._redo_btn.clicked.connect(self.redo_clicked.emit)
        self._clear_btn.clicked.connect(self.clear_clicked.emit)

        self._zoom_in_btn.clicked.connect(self.zoom_in_clicked.emit)
        self._zoom_out_btn.clicked.connect(self.zoom_out_clicked.emit)
        self._reset_view_btn.clicked.connect(self.reset_view_clicked.emit)

        self._save_btn.clicked.connect(self.save_clicked.emit)
        self._save_as_btn.clicked.connect(self.save_as_clicked.emit)
        self._saved_btn.clicked.connect(self.saved_markups_clicked.emit)
        self._back_btn.clicked.connect(self.back_to_current_clicked.emit)
        self._export_btn.clicked.connect(self.export_clicked.emit)

    # ==================== Handlers ====================

    def _on_tool_clicked(self, tool: DrawingTool):
        self._current_tool = tool
        self.tool_changed.emit(tool)

    def _on_color_chosen(self, color: str):
        self._current_color = color
        self._update_color_button()
        self.color_changed.emit(color)

    def _open_color_dialog(self):
        """Open Qt color picker dialog"""
        color = QColorDialog.getColor(QColor(self._current_color), self, "Markup Color")
        if color.isValid():
            self._on_color_chosen(color.name())

    def _update_color_button(self):
        self._color_btn.setStyleSheet(
            f"background-color: {self._current_color}; border: 2px solid #e6edf3;"
        )

    def _on_size_changed(self, value: int):
        self._size_value_label.setText(str(value))
        self.stroke_width_changed.emit(value)

    # ==================== PUBLIC API ====================

    @property
    def current_tool(self) -> DrawingTool:
        return self._current_tool

    @property
    def current_color(self) -> str:
        return self._current_color

    @property
    def stroke_width(self) -> int:
        return self._size_slider.value()

    def set_tool(self, tool: DrawingTool):
        """Set the active tool programmatically (no signal)."""
        if tool in self._tool_buttons:
            self._tool_buttons[tool].setChecked(True)
            self._current_tool = tool

    def set_color(self, color: str):
        """Set the current color programmatically (no signal)."""
        self._current_color = color
        self._update_color_button()

    def set_stroke_width(self, width: float):
        """Set the stroke width programmatically (no signal)."""
        self._size_slider.blockSignals(True)
        self._size_slider.setValue(int(round(width)))
        self._size_slider.blockSignals(False)
        self._size_value_label.setText(str(self._size_slider.value()))

    def set_history_state(self, can_undo: bool, can_redo: bool):
        self._undo_btn.setEnabled(can_undo)
        self._redo_btn.setEnabled(can_redo)

    def set_zoom_percent(self, percent: int):
        self._zoom_label.setText(f"{percent}%")
        self._zoom_out_btn.setEnabled(percent > int(round(Config.MIN_ZOOM * 100)))
        self._zoom_in_btn.setEnabled(percent < int(round(Config.MAX_ZOOM * 100)))

    def set_viewing_named_save(self, viewing: bool):
        """'Back to Current' is only meaningful while a named save is shown."""
        self._back_btn.setVisible(viewing)

    def set_saving(self, saving: bool):
        self._save_btn.setEnabled(not saving)
        self._save_btn.setText("Saving..." if saving else "Save")

    def set_persistence_enabled(self, enabled: bool):
        for btn in (self._save_btn, self._save_as_btn, self._saved_btn):
            btn.setEnabled(enabled)


__all__ = ['MarkupToolbar']
