import sys
from typing import Optional

from PySide6.QtWidgets import QApplication, QMainWindow

from core.distributor import Distributor
from core.logging_utils import configure_logging, get_logger
from app.theme import LIVE_LOG_QSS
from app.widgets.log_view import LogView

logger = get_logger(__name__)


class LiveLogWindow(QMainWindow):
    """Top-level "Live Log" window hosting a single LogView."""

    def __init__(self, distributor: Optional[Distributor] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Live Log")
        self.resize(900, 500)
        self.log_view = LogView(distributor)
        self.setCentralWidget(self.log_view)

    def closeEvent(self, event):
        self.log_view.close()
        super().closeEvent(event)


def open_live_log(distributor: Optional[Distributor] = None) -> LiveLogWindow:
    """Show a live log window bound to ``distributor`` (or the current one).

    A QApplication must already exist.
    """
    window = LiveLogWindow(distributor)
    window.show()
    logger.info("Live log window opened for %r", window.log_view.distributor)
    return window


def main(distributor: Optional[Distributor] = None, on_ready=None):
    """Main entry point for the live log UI.

    ``on_ready`` is called with the window once it is shown, e.g. to start
    emitting messages.
    """
    configure_logging()
    app = QApplication.instance() or QApplication(sys.argv)
    app.setStyleSheet(LIVE_LOG_QSS)

    window = open_live_log(distributor)
    if on_ready is not None:
        on_ready(window)

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
