"""
Dialogs package
"""

from .save_markup_dialog import SaveMarkupDialog
from .named_saves_dialog import NamedSavesDialog

__all__ = [
    'SaveMarkupDialog',
    'NamedSavesDialog',
]
