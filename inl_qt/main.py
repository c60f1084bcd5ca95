from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List

from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from inlplot.settings import settings_dir, settings_path
from inl_qt.main_window import MainWindow


LOG_FILENAME = "inl_qt.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"

_logger = logging.getLogger("inl_qt")


def _init_logging() -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_file = settings_dir() / LOG_FILENAME
    file_error = None
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_file, encoding="utf-8"))
    except OSError as exc:
        file_error = exc
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, handlers=handlers)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)

    if file_error is not None:
        _logger.warning("Logging to console only, cannot write %s: %s", log_file, file_error)
    else:
        _logger.info("Log file: %s", log_file)


def _install_excepthook() -> None:
    def _hook(exc_type, exc, tb) -> None:
        _logger.critical("Unhandled exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _hook


def main() -> int:
    _init_logging()
    _install_excepthook()
    app = QApplication(sys.argv)
    app.setApplicationName("INL plot")
    _logger.info("Settings: %s", settings_path())

    window = MainWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
