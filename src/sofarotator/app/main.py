"""
Run with: python -m sofarotator
"""
from __future__ import annotations

import logging
import sys

from sofarotator import config
from sofarotator.app.application import create_app
from sofarotator.app.ui.main_window import MainWindow
from sofarotator.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    """Main entry point for the application."""
    setup_logging(level=config.LOG_LEVEL, log_file=config.LOG_FILE)

    app = create_app()
    win = MainWindow()
    win.show()
    logger.info("Main window shown, starting event loop.")
    return app.exec()

if __name__ == "__main__":
    sys.exit(main())
