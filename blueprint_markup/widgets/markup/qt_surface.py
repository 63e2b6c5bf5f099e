"""
QPainter drawing surface and image export for the markup renderer.
"""

from pathlib import Path
from typing import Optional, Iterable, Tuple, Union

from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QPainter, QPen, QColor, QFont, QImage, QPainterPath, QBrush

from ...config import Config
from ...core.elements import MarkupElement
from ...core.viewport import Viewport
from .renderer import render_markup


class QPainterSurface:
    """
    Adapts a QPainter to the renderer's surface interface.

    Args:
        painter: Active painter
        device_rect: Area cleared by clear()
        fill_color: Clear color (transparent by default)
    """

    def __init__(self, painter: QPainter, device_rect: QRectF,
                 fill_color: Optional[QColor] = None):
        self._painter = painter
        self._device_rect = QRectF(device_rect)
        self._fill_color = fill_color if fill_color is not None else QColor(0, 0, 0, 0)
        self._painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        self._painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)

    @property
    def painter(self) -> QPainter:
        return self._painter

    def clear(self):
        self._painter.save()
        self._painter.resetTransform()
        self._painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Source)
        self._painter.fillRect(self._device_rect, self._fill_color)
        self._painter.restore()

    def save(self):
        self._painter.save()

    def restore(self):
        self._painter.restore()

    def scale(self, factor: float):
        self._painter.scale(factor, factor)

    def translate(self, dx: float, dy: float):
        self._painter.translate(dx, dy)

    def draw_image(self, image: QImage, width: float, height: float):
        if image is None or image.isNull():
            return
        if width <= 0 or height <= 0:
            width, height = image.width(), image.height()
        self._painter.drawImage(QRectF(0, 0, width, height), image)

    def set_pen(self, color: str, width: float):
        pen = QPen(QColor(color), width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        self._painter.setPen(pen)
        self._painter.setBrush(QBrush(Qt.BrushStyle.NoBrush))

    def draw_polyline(self, points: Iterable[Tuple[float, float]]):
        points = list(points)
        if len(points) < 2:
            return
        path = QPainterPath()
        path.moveTo(points[0][0], points[0][1])
        for x, y in points[1:]:
            path.lineTo(x, y)
        self._painter.drawPath(path)

    def draw_rect(self, left: float, top: float, width: float, height: float):
        self._painter.drawRect(QRectF(left, top, width, height))

    def draw_ellipse(self, cx: float, cy: float, rx: float, ry: float):
        self._painter.drawEllipse(QPointF(cx, cy), rx, ry)

    def draw_text(self, x: float, y: float, text: str, pixel_size: float):
        font = QFont(Config.TEXT_FONT_FAMILY)
        font.setStyleHint(QFont.StyleHint.Monospace)
        font.setPixelSize(max(1, int(round(pixel_size))))
        self._painter.setFont(font)
        # Text is filled with the pen color
        self._painter.drawText(QPointF(x, y), text)


def render_to_image(
    background: Optional[QImage],
    elements: Iterable[MarkupElement],
    size: Optional[Tuple[int, int]] = None
) -> QImage:
    """
    Render background plus markup at zoom 1 into a new ARGB image.

    Args:
        background: Blueprint image (None for markup only on transparency)
        elements: Committed elements
        size: Output size; defaults to the background's size. The background
            is never stretched to it.

    Returns:
        Rendered QImage
    """
    background_size = (0.0, 0.0)
    if background is not None and not background.isNull():
        background_size = (float(background.width()), float(background.height()))
        if size is None:
            size = (background.width(), background.height())
    if size is None:
        size = (1920, 1080)
    width, height = size

    image = QImage(width, height, QImage.Format.Format_ARGB32)
    image.fill(QColor(0, 0, 0, 0))

    painter = QPainter(image)
    try:
        surface = QPainterSurface(painter, QRectF(0, 0, width, height))
        render_markup(surface, background, elements, None, Viewport(), background_size)
    finally:
        painter.end()
    return image


def export_png(path: Union[str, Path], background: Optional[QImage],
               elements: Iterable[MarkupElement]) -> bool:
    """Write the rendered markup to a PNG file. Returns True on success."""
    image = render_to_image(background, list(elements))
    return image.save(str(path), 'PNG')


__all__ = ['QPainterSurface', 'render_to_image', 'export_png']
