"""Utility functions for Blueprint Markup"""

from .json_utils import (
    safe_json_load,
    safe_json_save,
    safe_json_update,
    write_json_atomic,
)
from .logging_config import LoggingConfig

__all__ = [
    'safe_json_load',
    'safe_json_save',
    'safe_json_update',
    'write_json_atomic',
    'LoggingConfig',
]
