"""
Centralized logging configuration for Blueprint Markup
"""
import logging
import sys
from pathlib import Path
from typing import Optional


class LoggingConfig:
    """Central logging configuration"""

    _initialized = False
    _log_file_path: Optional[Path] = None

    LOG_FILE_NAME = "blueprint_markup.log"

    @classmethod
    def setup_logging(cls, log_dir: Path, console_level: int = logging.INFO):
        """Setup logging system (file at DEBUG, console at console_level)"""
        if cls._initialized:
            return

        log_dir.mkdir(parents=True, exist_ok=True)
        cls._log_file_path = log_dir / cls.LOG_FILE_NAME

        logger = logging.getLogger()
        logger.setLevel(logging.DEBUG)

        # File handler
        file_handler = logging.FileHandler(cls._log_file_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
        logger.addHandler(console_handler)

        cls._initialized = True
        logger.info(f"Logging system initialized ({cls._log_file_path})")

    @classmethod
    def get_logger(cls, name: str):
        """Get a logger instance"""
        return logging.getLogger(name)


__all__ = ['LoggingConfig']
