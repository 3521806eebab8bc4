import logging
import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths
from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.state import AppState, Notify
from db.database import get_config, initialize_database
from db.models import Config
from ui.main_window import MainWindow

logger = logging.getLogger(__name__)

def setup_logging() -> None:
    level = logging.DEBUG if os.getenv("LRCPUB_DEBUG") == "1" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

def get_app_data_dir() -> str:
    base = QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    os.makedirs(base, exist_ok=True)
    return base

def init_app_state() -> AppState:
    app_state = AppState()

    app_data_dir = get_app_data_dir()
    app_state.app_data_dir = app_data_dir

    try:
        app_state.db = initialize_database(app_data_dir)
        app_state.config = get_config(app_state.db)
    except Exception as e:
        logger.exception("Failed to open settings database")
        app_state.config = Config()
        app_state.queued_notifications.append(
            Notify(message=f"Failed to load settings, using defaults: {e}", notify_type="error")
        )

    return app_state

def main() -> int:
    setup_logging()
    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName("lrc-publisher")

    app_state = init_app_state()
    main_window = MainWindow(app_state)
    main_window.show()

    return qt_app.exec()

if __name__ == "__main__":
    raise SystemExit(main())
