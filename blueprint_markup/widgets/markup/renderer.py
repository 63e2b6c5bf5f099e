"""
Markup renderer.

Repaints the whole surface on every call (no dirty-rect tracking):

    clear -> viewport transform -> background -> committed elements
    (list order) -> in-progress element on top

Drawing goes through a small surface interface so the renderer works
with any immediate-mode 2-D backend. QPainterSurface is the Qt one;
tests use a recording surface.

Surface methods:
    clear()                              erase to transparent/background
    save() / restore()                   push/pop transform and pen
    scale(factor) / translate(dx, dy)    modify the transform
    draw_image(image, width, height)     background filling (0, 0, width, height)
    set_pen(color, width)                outline color and width
    draw_polyline(points)                list of (x, y)
    draw_rect(left, top, width, height)  unfilled
    draw_ellipse(cx, cy, rx, ry)         unfilled
    draw_text(x, y, text, pixel_size)    left-anchored, baseline at y
"""

from typing import Optional, Iterable, Any, Tuple

from ...config import Config
from ...core.elements import FreehandStroke, Rectangle, Circle, TextLabel, MarkupElement
from ...core.viewport import Viewport


def text_pixel_size(element: TextLabel) -> float:
    return element.stroke_width * Config.TEXT_SIZE_FACTOR


def draw_element(surface, element: MarkupElement):
    """Draw one element in logical coordinates."""
    surface.set_pen(element.color, element.stroke_width)

    if isinstance(element, FreehandStroke):
        # A single-point stroke is legal but draws nothing
        if len(element.points) >= 2:
            surface.draw_polyline([(p.x, p.y) for p in element.points])

    elif isinstance(element, Rectangle):
        surface.draw_rect(*element.bounding_box())

    elif isinstance(element, Circle):
        radius = element.radius
        surface.draw_ellipse(element.center.x, element.center.y, radius, radius)

    elif isinstance(element, TextLabel):
        if element.text:
            surface.draw_text(element.anchor.x, element.anchor.y, element.text, text_pixel_size(element))


def render_markup(
    surface,
    background: Optional[Any],
    elements: Iterable[MarkupElement],
    in_progress: Optional[MarkupElement],
    viewport: Viewport,
    background_size: Tuple[float, float] = (0.0, 0.0)
):
    """
    Repaint background and markup.

    The background is drawn at the logical origin at its intrinsic size, so
    logical units are image pixels; it is not stretched to fill the surface.

    Args:
        surface: Drawing surface (see module docstring)
        background: Backend image object, or None to skip
        elements: Committed elements in z-order
        in_progress: Element being drawn, drawn last
        viewport: Zoom/pan state
        background_size: Logical extent of the background (its pixel size)
    """
    surface.clear()
    surface.save()

    origin_x, origin_y = viewport.origin
    if origin_x or origin_y:
        surface.translate(origin_x, origin_y)
    surface.scale(viewport.zoom)
    pan_x, pan_y = viewport.pan
    surface.translate(pan_x, pan_y)

    if background is not None:
        width, height = background_size
        surface.draw_image(background, width, height)

    for element in elements:
        draw_element(surface, element)

    if in_progress is not None:
        draw_element(surface, in_progress)

    surface.restore()


__all__ = ['render_markup', 'draw_element', 'text_pixel_size']
