"""Cropline — trim a video by dragging a crop window over its timeline."""

import logging
import sys
from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QPalette, QColor
from cropline.main_window import MainWindow
from cropline.version import __version__

logging.basicConfig(
    level=logging.INFO,
    format="%(name)s | %(levelname)s | %(message)s",
)

_logger = logging.getLogger(__name__)


def _global_exception_handler(exc_type, exc_value, exc_tb):
    """Log unhandled exceptions instead of crashing silently."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return
    _logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))


def main() -> None:
    """Application entry point — creates QApplication, applies theme, shows MainWindow."""
    sys.excepthook = _global_exception_handler

    app = QApplication(sys.argv)
    app.setApplicationName("Cropline")
    app.setApplicationVersion(__version__)

    # dark palette base (QSS handles the rest)
    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, QColor("#1f2937"))
    palette.setColor(QPalette.ColorRole.WindowText, QColor("#e5e7eb"))
    palette.setColor(QPalette.ColorRole.Base, QColor("#111827"))
    palette.setColor(QPalette.ColorRole.AlternateBase, QColor("#374151"))
    palette.setColor(QPalette.ColorRole.Text, QColor("#e5e7eb"))
    palette.setColor(QPalette.ColorRole.Button, QColor("#374151"))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor("#e5e7eb"))
    palette.setColor(QPalette.ColorRole.Highlight, QColor("#3b82f6"))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor("#ffffff"))
    app.setPalette(palette)

    window = MainWindow()
    window.show()

    # Optional video path on the command line
    if len(sys.argv) > 1:
        window.open_path(sys.argv[1])

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
