"""Tests for the canvas, toolbar, dialogs, event bus and image export."""

from datetime import datetime, timezone

import pytest
from PyQt6.QtCore import QEvent, QPointF, Qt
from PyQt6.QtGui import QColor, QImage, QMouseEvent

from blueprint_markup.core.elements import Rectangle, TextLabel
from blueprint_markup.core.interaction import DrawingTool
from blueprint_markup.core.session import MarkupSession
from blueprint_markup.events.event_bus import EventBus, get_event_bus
from blueprint_markup.services.records import NamedMarkupSave
from blueprint_markup.widgets.dialogs import NamedSavesDialog, SaveMarkupDialog
from blueprint_markup.widgets.markup.qt_surface import render_to_image, export_png
from blueprint_markup.widgets.markup_canvas import MarkupCanvas
from blueprint_markup.widgets.markup_toolbar import MarkupToolbar

from conftest import make_rect

pytestmark = pytest.mark.usefixtures("qapp")


def mouse(kind, x, y, button=Qt.MouseButton.LeftButton):
    buttons = Qt.MouseButton.NoButton if kind == QEvent.Type.MouseButtonRelease else button
    return QMouseEvent(kind, QPointF(x, y), QPointF(x, y), button, buttons,
                       Qt.KeyboardModifier.NoModifier)


def press(canvas, x, y, button=Qt.MouseButton.LeftButton):
    canvas.mousePressEvent(mouse(QEvent.Type.MouseButtonPress, x, y, button))


def move(canvas, x, y, button=Qt.MouseButton.LeftButton):
    canvas.mouseMoveEvent(mouse(QEvent.Type.MouseMove, x, y, button))


def release(canvas, x, y, button=Qt.MouseButton.LeftButton):
    canvas.mouseReleaseEvent(mouse(QEvent.Type.MouseButtonRelease, x, y, button))


def solid_image(width, height, color="white"):
    image = QImage(width, height, QImage.Format.Format_ARGB32)
    image.fill(QColor(color))
    return image


@pytest.fixture()
def canvas(clock):
    widget = MarkupCanvas(MarkupSession(clock=clock))
    widget.resize(400, 300)
    yield widget
    widget.deleteLater()


# ==================== Canvas ====================

class TestCanvas:

    def test_drag_commits_rectangle(self, canvas):
        committed = []
        canvas.element_committed.connect(committed.append)
        canvas.session.set_tool(DrawingTool.RECTANGLE)

        press(canvas, 10, 10)
        move(canvas, 40, 30)
        assert isinstance(canvas.session.in_progress, Rectangle)
        release(canvas, 50, 60)

        [rect] = committed
        assert canvas.session.elements == (rect,)
        assert (rect.end.x, rect.end.y) == (50, 60)

    def test_middle_drag_pans(self, canvas):
        press(canvas, 100, 100, Qt.MouseButton.MiddleButton)
        move(canvas, 130, 90, Qt.MouseButton.MiddleButton)
        release(canvas, 130, 90, Qt.MouseButton.MiddleButton)

        assert canvas.session.viewport.pan == (30.0, -10.0)
        assert canvas.session.elements == ()

    def test_text_tool_prompts_and_commits(self, canvas):
        canvas.session.set_tool(DrawingTool.TEXT)
        canvas._request_text = lambda: ("Move outlet", True)

        press(canvas, 25, 35)

        [label] = canvas.session.elements
        assert isinstance(label, TextLabel)
        assert label.text == "Move outlet"
        assert (label.anchor.x, label.anchor.y) == (25, 35)

    def test_cancelled_text_commits_nothing(self, canvas):
        canvas.session.set_tool(DrawingTool.TEXT)
        canvas._request_text = lambda: ("ignored", False)

        press(canvas, 25, 35)

        assert canvas.session.elements == ()
        assert canvas.session.pending_text_point is None

    def test_escape_drops_unfinished_shape(self, canvas):
        press(canvas, 0, 0)
        move(canvas, 10, 10)
        canvas.cancel_interaction()

        assert canvas.session.in_progress is None
        release(canvas, 20, 20)
        assert canvas.session.elements == ()

    def test_zoom_emits_view_changed(self, canvas):
        zooms = []
        canvas.view_changed.connect(zooms.append)
        canvas.zoom_in()
        canvas.zoom_in()
        canvas.reset_view()
        assert zooms == [pytest.approx(1.1), pytest.approx(1.2), 1.0]

    def test_background_loading(self, canvas, tmp_path):
        path = tmp_path / "plan.png"
        solid_image(64, 48).save(str(path), "PNG")

        assert canvas.load_background_data(path.read_bytes())
        assert canvas.background_size() == (64.0, 48.0)
        assert not canvas.load_background_data(b"not an image")
        assert canvas.background_size() == (64.0, 48.0)

    def test_null_background_ignored(self, canvas):
        canvas.set_background(QImage())
        assert canvas.background is None

    def test_render_image_matches_background(self, canvas):
        canvas.set_background(solid_image(80, 50))
        image = canvas.render_image()
        assert (image.width(), image.height()) == (80, 50)

    def test_paint_does_not_raise(self, canvas):
        canvas.session.pointer_down(0, 0)
        canvas.session.pointer_move(20, 20)
        canvas.grab()


# ==================== Export ====================

class TestExport:

    def test_rectangle_outline_only(self):
        rect = make_rect(start=(10, 10), end=(50, 50), color="#FF0000", width=4)
        image = render_to_image(None, [rect], (64, 64))

        edge = image.pixelColor(10, 30)
        assert edge.alpha() == 255
        assert edge.red() > 200
        assert image.pixelColor(30, 30).alpha() == 0

    def test_background_drawn_first(self):
        image = render_to_image(solid_image(20, 10, "blue"), [])
        assert (image.width(), image.height()) == (20, 10)
        assert image.pixelColor(5, 5) == QColor("blue")

    def test_background_kept_at_pixel_size(self):
        image = render_to_image(solid_image(20, 10, "blue"), [], (64, 64))
        assert image.pixelColor(5, 5) == QColor("blue")
        assert image.pixelColor(40, 30).alpha() == 0

    def test_export_png_writes_file(self, tmp_path):
        path = tmp_path / "out.png"
        assert export_png(path, solid_image(30, 20), [make_rect()])
        written = QImage(str(path))
        assert (written.width(), written.height()) == (30, 20)


# ==================== Toolbar ====================

class TestToolbar:

    def test_tool_click_emits(self):
        toolbar = MarkupToolbar()
        tools = []
        toolbar.tool_changed.connect(tools.append)
        toolbar._tool_buttons[DrawingTool.CIRCLE].click()
        assert tools == [DrawingTool.CIRCLE]
        assert toolbar.current_tool == DrawingTool.CIRCLE

    def test_programmatic_updates_are_silent(self):
        toolbar = MarkupToolbar()
        widths = []
        toolbar.stroke_width_changed.connect(widths.append)

        toolbar.set_stroke_width(7)
        assert toolbar.stroke_width == 7
        assert widths == []

        toolbar._size_slider.setValue(2)
        assert widths == [2]

    def test_zoom_limits_disable_buttons(self):
        toolbar = MarkupToolbar()
        toolbar.set_zoom_percent(300)
        assert not toolbar._zoom_in_btn.isEnabled()
        assert toolbar._zoom_out_btn.isEnabled()
        toolbar.set_zoom_percent(10)
        assert not toolbar._zoom_out_btn.isEnabled()

    def test_history_buttons(self):
        toolbar = MarkupToolbar()
        assert not toolbar._undo_btn.isEnabled()
        toolbar.set_history_state(True, False)
        assert toolbar._undo_btn.isEnabled()
        assert not toolbar._redo_btn.isEnabled()

    def test_saving_disables_save(self):
        toolbar = MarkupToolbar()
        toolbar.set_saving(True)
        assert not toolbar._save_btn.isEnabled()
        toolbar.set_saving(False)
        assert toolbar._save_btn.isEnabled()


# ==================== Dialogs ====================

class TestSaveMarkupDialog:

    def test_save_disabled_for_blank_name(self):
        dialog = SaveMarkupDialog()
        assert not dialog.is_save_enabled()
        dialog._name_input.setText("   ")
        assert not dialog.is_save_enabled()
        dialog._name_input.setText(" Rough-in ")
        assert dialog.is_save_enabled()

    def test_values(self):
        dialog = SaveMarkupDialog(default_name="Plan B")
        dialog._description_input.setPlainText("  ")
        dialog._shared_check.setChecked(True)
        assert dialog.get_values() == ("Plan B", None, True)


def named_save(save_id, name, day):
    return NamedMarkupSave(
        id=save_id, blueprint_id="bp-1", name=name, serialized_snapshot="[]",
        updated_at=datetime(2024, 5, day, tzinfo=timezone.utc),
    )


class TestNamedSavesDialog:

    def test_most_recent_selected_first(self):
        dialog = NamedSavesDialog([named_save("a", "Old", 1), named_save("b", "New", 9)])
        assert dialog.selected_save_id() == "b"

    def test_accept_emits_selected_id(self):
        dialog = NamedSavesDialog([named_save("a", "Only", 1)])
        selected = []
        dialog.save_selected.connect(selected.append)
        dialog._on_accept()
        assert selected == ["a"]

    def test_empty_list(self):
        dialog = NamedSavesDialog([])
        selected = []
        dialog.save_selected.connect(selected.append)
        assert dialog.selected_save_id() is None
        dialog._on_accept()
        assert selected == []


# ==================== Event Bus ====================

class TestEventBus:

    def test_tool_change_emits_once(self):
        bus = EventBus()
        tools = []
        bus.tool_changed.connect(tools.append)
        bus.set_tool('rectangle')
        bus.set_tool('rectangle')
        assert tools == ['rectangle']

    def test_invalid_tool_rejected(self):
        with pytest.raises(ValueError):
            EventBus().set_tool('laser')

    def test_history_state(self):
        bus = EventBus()
        states = []
        bus.history_changed.connect(lambda u, r: states.append((u, r)))
        bus.set_history_state(True, False)
        bus.set_history_state(True, False)
        bus.set_history_state(False, True)
        assert states == [(True, False), (False, True)]
        assert bus.get_history_state() == (False, True)

    def test_save_lifecycle_signals(self):
        bus = EventBus()
        seen = []
        bus.save_started.connect(lambda op: seen.append(("started", op)))
        bus.save_failed.connect(lambda op, msg: seen.append(("failed", op)))
        bus.start_save('save_live')
        bus.fail_save('save_live', 'offline')
        assert seen == [("started", "save_live"), ("failed", "save_live")]

    def test_singleton(self):
        assert get_event_bus() is get_event_bus()
