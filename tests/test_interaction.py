"""Tests for the interaction reducer."""

from blueprint_markup.core.elements import Point, FreehandStroke, Rectangle, Circle, TextLabel
from blueprint_markup.core.interaction import (
    DrawingTool, ToolSettings, Idle, Drawing, TextPending, IDLE,
    PointerDown, PointerMove, PointerUp, TextConfirm, TextCancel,
    reduce, in_progress_element
)


def settings(tool, color="#DA3633", width=5):
    return ToolSettings(tool=tool, color=color, stroke_width=width)


class TestDrawingTools:

    def test_pen_accumulates_every_point(self, clock):
        s = settings(DrawingTool.PEN)
        t = reduce(IDLE, PointerDown(Point(1, 1)), s, clock)
        assert isinstance(t.state, Drawing)
        assert t.committed is None

        t = reduce(t.state, PointerMove(Point(2, 2)), s, clock)
        t = reduce(t.state, PointerMove(Point(3, 3)), s, clock)
        element = in_progress_element(t.state)
        assert isinstance(element, FreehandStroke)
        assert element.points == (Point(1, 1), Point(2, 2), Point(3, 3))

        t = reduce(t.state, PointerUp(Point(3, 3)), s, clock)
        assert t.state == IDLE
        assert t.committed.points == (Point(1, 1), Point(2, 2), Point(3, 3))

    def test_new_element_uses_current_settings(self, clock):
        s = settings(DrawingTool.RECTANGLE, color="#1F6FEB", width=7)
        t = reduce(IDLE, PointerDown(Point(0, 0)), s, clock)
        element = in_progress_element(t.state)
        assert element.color == "#1F6FEB"
        assert element.stroke_width == 7
        assert element.created_at == 1000
        assert element.id.startswith("1000-")

    def test_rectangle_tracks_end_corner(self, clock):
        s = settings(DrawingTool.RECTANGLE)
        t = reduce(IDLE, PointerDown(Point(10, 10)), s, clock)
        t = reduce(t.state, PointerMove(Point(4, 30)), s, clock)
        t = reduce(t.state, PointerUp(Point(4, 30)), s, clock)
        assert isinstance(t.committed, Rectangle)
        assert t.committed.start == Point(10, 10)
        assert t.committed.end == Point(4, 30)

    def test_circle_radius_from_edge_point(self, clock):
        s = settings(DrawingTool.CIRCLE)
        t = reduce(IDLE, PointerDown(Point(0, 0)), s, clock)
        t = reduce(t.state, PointerMove(Point(3, 4)), s, clock)
        t = reduce(t.state, PointerUp(Point(3, 4)), s, clock)
        assert isinstance(t.committed, Circle)
        assert t.committed.radius == 5

    def test_click_without_move_commits_degenerate_shape(self, clock):
        s = settings(DrawingTool.PEN)
        t = reduce(IDLE, PointerDown(Point(5, 5)), s, clock)
        t = reduce(t.state, PointerUp(Point(5, 5)), s, clock)
        assert t.committed.points == (Point(5, 5),)

    def test_move_while_idle_is_ignored(self, clock):
        t = reduce(IDLE, PointerMove(Point(1, 1)), settings(DrawingTool.PEN), clock)
        assert t.state == IDLE
        assert t.committed is None


class TestTextTool:

    def test_pointer_down_waits_for_text(self, clock):
        t = reduce(IDLE, PointerDown(Point(8, 9)), settings(DrawingTool.TEXT), clock)
        assert t.state == TextPending(Point(8, 9))
        assert in_progress_element(t.state) is None

    def test_confirm_commits_label_at_captured_point(self, clock):
        s = settings(DrawingTool.TEXT)
        t = reduce(TextPending(Point(8, 9)), TextConfirm("Valve A"), s, clock)
        assert t.state == IDLE
        assert isinstance(t.committed, TextLabel)
        assert t.committed.anchor == Point(8, 9)
        assert t.committed.text == "Valve A"

    def test_blank_text_commits_nothing(self, clock):
        t = reduce(TextPending(Point(1, 1)), TextConfirm("   "), settings(DrawingTool.TEXT), clock)
        assert t.state == IDLE
        assert t.committed is None

    def test_cancel_commits_nothing(self, clock):
        t = reduce(TextPending(Point(1, 1)), TextCancel(), settings(DrawingTool.TEXT), clock)
        assert isinstance(t.state, Idle)
        assert t.committed is None

    def test_pointer_events_do_not_leave_text_pending(self, clock):
        pending = TextPending(Point(1, 1))
        t = reduce(pending, PointerDown(Point(5, 5)), settings(DrawingTool.TEXT), clock)
        assert t.state == pending
