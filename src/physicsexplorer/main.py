"""
Application Initialization
==========================
This module wires the explorer together and starts the Qt event loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging from `config`.
2. Instantiates the ExplorerSession (per-topic session records).
3. Instantiates the Main Window, passing the session in.
"""
import logging
import sys

from PySide6.QtWidgets import QApplication

from physicsexplorer import config
from physicsexplorer.controller.session import ExplorerSession
from physicsexplorer.logging_config import setup_logging
from physicsexplorer.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> None:
    # 1. Logging (set PHYSICSEXPLORER_LOG_LEVEL=DEBUG to see every tick)
    setup_logging(level=config.LOG_LEVEL, log_file=config.LOG_FILE)

    # 2. Qt application
    app = QApplication(sys.argv)
    app.setApplicationName(config.APP_NAME)

    # 3. Session and window
    explorer = ExplorerSession(tick_interval_ms=config.DEFAULT_TICK_INTERVAL_MS)
    window = MainWindow(explorer)
    window.resize(1100, 600)
    window.show()
    logger.info("Main window shown.")

    # 4. Event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
