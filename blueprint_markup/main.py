"""
Blueprint Markup - Main Entry Point

Desktop editor for annotating blueprint images with vector markup.

Usage:
    python -m blueprint_markup.main BLUEPRINT_ID [--api-url URL]
    python -m blueprint_markup.main BLUEPRINT_ID --offline [--image PATH]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

from .config import Config
from .events.event_bus import get_event_bus
from .services.blueprint_api_client import BlueprintApiClient
from .services.local_blueprint_store import LocalBlueprintStore
from .services.markup_channels import MarkupChannelRegistry
from .services.markup_persistence import MarkupPersistenceBridge
from .utils.logging_config import LoggingConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='blueprint-markup',
        description=f"{Config.APP_NAME} {Config.APP_VERSION}"
    )
    parser.add_argument('blueprint_id', help="Blueprint to open")
    parser.add_argument('--api-url', default=None,
                        help=f"Persistence API base URL (default: {Config.DEFAULT_API_URL}, "
                             f"or ${Config.API_URL_ENV})")
    parser.add_argument('--offline', action='store_true', default=None,
                        help="Use the local file store instead of the API")
    parser.add_argument('--image', default=None,
                        help="Offline only: register this image if the blueprint is new")
    parser.add_argument('--debug', action='store_true', help="Log DEBUG to the console")
    return parser.parse_args(argv)


def create_bridge(args: argparse.Namespace) -> MarkupPersistenceBridge:
    """
    Build the persistence bridge for the selected store.

    Offline mode uses LocalBlueprintStore and registers --image as a new
    blueprint when the id is not in the store yet.
    """
    logger = LoggingConfig.get_logger(__name__)
    offline = args.offline if args.offline is not None else Config.is_offline()

    if offline:
        store = LocalBlueprintStore()
        if args.blueprint_id not in store.list_blueprints():
            if not args.image:
                logger.warning(f"Blueprint {args.blueprint_id} is not in the local store; pass --image to create it")
            else:
                image_path = str(Path(args.image).resolve())
                store.create_blueprint(image_path, name=args.blueprint_id, blueprint_id=args.blueprint_id)
        logger.info(f"Offline store: {Config.get_store_dir()}")
    else:
        store = BlueprintApiClient(args.api_url)
        logger.info(f"API: {store.base_url}")

    return MarkupPersistenceBridge(store, MarkupChannelRegistry())


def setup_application(argv: Optional[List[str]] = None) -> QApplication:
    """
    Initialize and configure the Qt application

    Returns:
        Configured QApplication instance
    """
    app = QApplication(argv if argv is not None else sys.argv)

    # Set application metadata
    app.setApplicationName(Config.APP_NAME)
    app.setApplicationVersion(Config.APP_VERSION)
    app.setOrganizationName(Config.APP_AUTHOR)

    # Initialize event bus (singleton)
    get_event_bus()

    return app


def main(argv: Optional[List[str]] = None):
    """
    Main entry point for Blueprint Markup

    Creates the application, opens the blueprint in the editor window, and
    runs the event loop.
    """
    args = parse_args(argv)

    # Setup logging first
    console_level = logging.DEBUG if args.debug else logging.INFO
    LoggingConfig.setup_logging(Config.get_log_dir(), console_level=console_level)

    logger = LoggingConfig.get_logger(__name__)
    logger.info(f"Starting {Config.APP_NAME} {Config.APP_VERSION}...")

    app = setup_application()
    bridge = create_bridge(args)

    # Create and show main window
    from .widgets.main_window import MarkupEditorWindow
    window = MarkupEditorWindow(args.blueprint_id, bridge, owner_id=Config.get_author())
    window.show()
    window.open_blueprint()

    logger.info(f"Editing blueprint {args.blueprint_id}")

    # Run event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
