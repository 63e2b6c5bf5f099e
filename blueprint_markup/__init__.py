"""
Blueprint Markup

Vector markup editor for blueprint images, with undo/redo, named saves
and live markup persistence.
"""

__version__ = "1.0.0"
__author__ = "Blueprint Markup"

from .config import Config
from .events.event_bus import EventBus, get_event_bus

__all__ = [
    'Config',
    'EventBus',
    'get_event_bus',
]
