"""
Markup rendering subpackage.

- renderer: backend-independent immediate-mode repaint of markup
- qt_surface: QPainter surface adapter and PNG export
"""

from .renderer import render_markup, draw_element, text_pixel_size
from .qt_surface import QPainterSurface, render_to_image, export_png

__all__ = [
    'render_markup',
    'draw_element',
    'text_pixel_size',
    'QPainterSurface',
    'render_to_image',
    'export_png',
]
