"""
Global configuration for Blueprint Markup

Constants for the editor (zoom limits, tool defaults), the persistence
endpoint, and per-user paths for settings, logs and the offline store.
"""

import os
import sys
from pathlib import Path
from typing import Final, Optional, Any

from .utils.json_utils import safe_json_load, safe_json_update


class Config:
    """Central configuration class for all application settings"""

    # Application metadata
    APP_NAME: Final[str] = "Blueprint Markup"
    APP_VERSION: Final[str] = "1.0.0"
    APP_AUTHOR: Final[str] = "Blueprint Markup"

    # Paths
    APP_ROOT: Final[Path] = Path(__file__).parent

    # Viewport
    MIN_ZOOM: Final[float] = 0.1
    MAX_ZOOM: Final[float] = 3.0
    ZOOM_STEP: Final[float] = 0.1

    # Tool defaults
    DEFAULT_COLOR: Final[str] = "#238636"
    DEFAULT_STROKE_WIDTH: Final[float] = 3
    MIN_STROKE_WIDTH: Final[float] = 1
    MAX_STROKE_WIDTH: Final[float] = 10
    TEXT_SIZE_FACTOR: Final[float] = 6  # text pixel size = stroke width * factor
    TEXT_FONT_FAMILY: Final[str] = "Space Mono"
    COLOR_PRESETS: Final[list] = [
        "#238636",  # Green (default)
        "#DA3633",  # Red
        "#1F6FEB",  # Blue
        "#D29922",  # Amber
        "#000000",  # Black
        "#FFFFFF",  # White
    ]

    # Persistence endpoint
    DEFAULT_API_URL: Final[str] = "http://localhost:3000"
    API_URL_ENV: Final[str] = "BLUEPRINT_MARKUP_API_URL"
    OFFLINE_ENV: Final[str] = "BLUEPRINT_MARKUP_OFFLINE"
    HTTP_TIMEOUT_SEC: Final[float] = 10.0
    SAVE_THREAD_COUNT: Final[int] = 2

    # Window settings
    DEFAULT_WINDOW_WIDTH: Final[int] = 1280
    DEFAULT_WINDOW_HEIGHT: Final[int] = 860
    STATUS_MESSAGE_MS: Final[int] = 4000

    # Storage structure
    STORE_FOLDER_NAME: Final[str] = "blueprints"
    LOG_FOLDER_NAME: Final[str] = "logs"
    SETTINGS_FILE_NAME: Final[str] = "settings.json"

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """
        Get user data directory.

        Uses system AppData/Local (Windows) or .local/share (Linux)
        so settings and offline markup survive application updates.
        """
        # If 'portable.txt' exists next to the package, stick to a local folder
        portable_flag = cls.APP_ROOT.parent / 'portable.txt'
        if portable_flag.exists():
            user_dir = cls.APP_ROOT.parent / 'data'
        elif sys.platform == 'win32':
            base_path = Path(os.environ.get('LOCALAPPDATA', os.path.expanduser('~')))
            user_dir = base_path / 'BlueprintMarkup'
        elif sys.platform == 'darwin':
            user_dir = Path.home() / 'Library' / 'Application Support' / 'BlueprintMarkup'
        else:
            user_dir = Path.home() / '.local' / 'share' / 'BlueprintMarkup'

        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    @classmethod
    def get_log_dir(cls) -> Path:
        """Get log directory"""
        return cls.get_user_data_dir() / cls.LOG_FOLDER_NAME

    @classmethod
    def get_store_dir(cls) -> Path:
        """Get offline blueprint store directory"""
        store_dir = cls.get_user_data_dir() / cls.STORE_FOLDER_NAME
        store_dir.mkdir(parents=True, exist_ok=True)
        return store_dir

    @classmethod
    def get_settings_file(cls) -> Path:
        """Get settings JSON file path"""
        return cls.get_user_data_dir() / cls.SETTINGS_FILE_NAME

    # Settings

    @classmethod
    def load_settings(cls) -> dict:
        """Load user settings (empty dict if missing or invalid)"""
        data = safe_json_load(cls.get_settings_file(), default={})
        return data if isinstance(data, dict) else {}

    @classmethod
    def get_setting(cls, key: str, default: Any = None) -> Any:
        return cls.load_settings().get(key, default)

    @classmethod
    def save_setting(cls, key: str, value: Any) -> bool:
        """Persist a single setting"""
        return safe_json_update(cls.get_settings_file(), {key: value})

    @classmethod
    def get_api_url(cls) -> str:
        """
        Resolve the persistence API base URL.

        Order: environment variable, saved setting, built-in default.
        """
        url = os.environ.get(cls.API_URL_ENV) or cls.get_setting('api_url') or cls.DEFAULT_API_URL
        return url.rstrip('/')

    @classmethod
    def is_offline(cls) -> bool:
        """True when the offline (local file) store should be used."""
        value = os.environ.get(cls.OFFLINE_ENV)
        if value is not None:
            return value.strip().lower() in ('1', 'true', 'yes', 'on')
        return bool(cls.get_setting('offline', False))

    @classmethod
    def get_author(cls) -> Optional[str]:
        """User id recorded as owner of named saves, if configured."""
        return cls.get_setting('user_id')


__all__ = ['Config']
