"""UI Widgets for Blueprint Markup"""

from .main_window import MarkupEditorWindow
from .markup_canvas import MarkupCanvas
from .markup_toolbar import MarkupToolbar

__all__ = [
    'MarkupEditorWindow',
    'MarkupCanvas',
    'MarkupToolbar',
]
