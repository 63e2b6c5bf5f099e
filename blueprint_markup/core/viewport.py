"""
Viewport - zoom/pan state and device <-> logical coordinate conversion.

The renderer scales by zoom and then translates by pan, so a logical
point p lands on the device at:

    device = origin + (p + pan) * zoom

screen_to_logical() is the exact inverse. Logical coordinates are the
blueprint's intrinsic space and do not change with zoom or pan.
"""

from typing import Tuple

from ..config import Config
from .elements import Point


class Viewport:
    """
    Zoom and pan state for the markup surface.

    Zoom is clamped to [Config.MIN_ZOOM, Config.MAX_ZOOM]. The origin is
    the top-left of the drawing surface in device coordinates (0, 0 when
    events are already widget-local).
    """

    def __init__(self, zoom: float = 1.0, pan_x: float = 0.0, pan_y: float = 0.0,
                 origin_x: float = 0.0, origin_y: float = 0.0):
        self._zoom = self._clamp_zoom(zoom)
        self._pan_x = float(pan_x)
        self._pan_y = float(pan_y)
        self._origin_x = float(origin_x)
        self._origin_y = float(origin_y)

    # ==================== Properties ====================

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def pan(self) -> Tuple[float, float]:
        return (self._pan_x, self._pan_y)

    @property
    def origin(self) -> Tuple[float, float]:
        return (self._origin_x, self._origin_y)

    @property
    def zoom_percent(self) -> int:
        return int(round(self._zoom * 100))

    @staticmethod
    def _clamp_zoom(value: float) -> float:
        return max(Config.MIN_ZOOM, min(Config.MAX_ZOOM, float(value)))

    # ==================== Zoom & Pan ====================

    def set_zoom(self, value: float):
        self._zoom = self._clamp_zoom(value)

    def zoom_in(self):
        # Rounded to one decimal so repeated steps don't drift past the limits
        self._zoom = self._clamp_zoom(round(self._zoom + Config.ZOOM_STEP, 1))

    def zoom_out(self):
        self._zoom = self._clamp_zoom(round(self._zoom - Config.ZOOM_STEP, 1))

    def reset_view(self):
        self._zoom = 1.0
        self._pan_x = 0.0
        self._pan_y = 0.0

    def set_pan(self, pan_x: float, pan_y: float):
        self._pan_x = float(pan_x)
        self._pan_y = float(pan_y)

    def pan_by(self, device_dx: float, device_dy: float):
        """Shift the view by a device-space drag delta."""
        self._pan_x += device_dx / self._zoom
        self._pan_y += device_dy / self._zoom

    def set_origin(self, origin_x: float, origin_y: float):
        self._origin_x = float(origin_x)
        self._origin_y = float(origin_y)

    # ==================== Conversion ====================

    def screen_to_logical(self, device_x: float, device_y: float) -> Point:
        """Convert a device/pointer position to logical blueprint coordinates."""
        z = self._zoom
        x = (device_x - self._origin_x - self._pan_x * z) / z
        y = (device_y - self._origin_y - self._pan_y * z) / z
        return Point(x, y)

    def logical_to_screen(self, point: Point) -> Tuple[float, float]:
        """Convert a logical point to device coordinates."""
        z = self._zoom
        return (
            self._origin_x + (point.x + self._pan_x) * z,
            self._origin_y + (point.y + self._pan_y) * z,
        )

    def copy(self) -> 'Viewport':
        return Viewport(self._zoom, self._pan_x, self._pan_y, self._origin_x, self._origin_y)

    def __repr__(self) -> str:
        return f"Viewport(zoom={self._zoom}, pan=({self._pan_x}, {self._pan_y}))"


__all__ = ['Viewport']
