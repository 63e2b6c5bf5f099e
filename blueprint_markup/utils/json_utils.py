"""
JSON Utilities - Safe JSON file operations

Used for user settings and the offline blueprint store:
- Loading with a fallback value instead of raising
- Atomic writes (temp file + replace) so a crash never leaves half a file
- Key-level updates of a JSON object file
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


def safe_json_load(path: Union[str, Path], default: Any = None) -> Any:
    """
    Load JSON from a file, returning default on any error.

    Args:
        path: Path to JSON file
        default: Value to return if the file doesn't exist or is invalid

    Returns:
        Parsed JSON data, or default

    Examples:
        >>> settings = safe_json_load(Config.get_settings_file(), default={})
    """
    file_path = Path(path)
    if not file_path.exists():
        return default

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in {path}: {e}")
        return default
    except OSError as e:
        logger.warning(f"Could not read {path}: {e}")
        return default


def write_json_atomic(path: Union[str, Path], data: Any, indent: int = 2):
    """
    Write JSON atomically, raising on failure.

    The data is written to a temporary file in the same directory and
    then moved over the target.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f'.{file_path.name}.', dir=str(file_path.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        os.replace(tmp_name, file_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def safe_json_save(path: Union[str, Path], data: Any, indent: int = 2) -> bool:
    """
    Save data to a JSON file, logging instead of raising.

    Returns:
        True if save succeeded, False otherwise
    """
    try:
        write_json_atomic(path, data, indent=indent)
        return True
    except TypeError as e:
        logger.error(f"Data not JSON serializable for {path}: {e}")
        return False
    except OSError as e:
        logger.error(f"Could not write to {path}: {e}")
        return False


def safe_json_update(path: Union[str, Path], updates: dict) -> bool:
    """
    Update specific keys in a JSON object file.

    Creates the file with updates if it doesn't exist.

    Examples:
        >>> safe_json_update(Config.get_settings_file(), {"api_url": "http://site:3000"})
    """
    data = safe_json_load(path, default={})

    if not isinstance(data, dict):
        logger.warning(f"Cannot update non-dict JSON in {path}")
        return False

    data.update(updates)
    return safe_json_save(path, data)


__all__ = [
    'safe_json_load',
    'write_json_atomic',
    'safe_json_save',
    'safe_json_update',
]
