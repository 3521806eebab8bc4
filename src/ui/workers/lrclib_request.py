# ui/workers/lrclib_request.py
from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6.QtCore import QThread, Signal

from core.lrclib_client import LrcLibError

logger = logging.getLogger(__name__)


class LrcLibRequestWorker(QThread):
    """Runs one blocking LRCLIB call off the GUI thread."""
    succeeded = Signal(object)   # whatever the call returned
    failed = Signal(str)         # user-facing message

    def __init__(self, call: Callable[[], Any], error_message: str = "Request failed.", parent=None):
        super().__init__(parent)
        self.call = call
        self.error_message = error_message

    def run(self):
        try:
            result = self.call()
        except LrcLibError as e:
            self.failed.emit(e.message)
            return
        except Exception:
            logger.exception("LRCLIB request failed")
            self.failed.emit(self.error_message)
            return
        self.succeeded.emit(result)
