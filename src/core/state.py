from __future__ import annotations
from dataclasses import dataclass
from PySide6.QtCore import QObject, Signal, Slot

@dataclass(frozen=True)
class Notify:
    message: str
    notify_type: str = "info"   # info/success/warning/error

class AppState(QObject):
    notification = Signal(object)   # emits Notify
    config_changed = Signal(object) # emits db.models.Config

    def __init__(self):
        super().__init__()
        self.app_data_dir: str | None = None
        self.db = None
        self.config = None
        self.queued_notifications: list[Notify] = []

    @Slot(str, str)
    def notify(self, message: str, notify_type: str = "info"):
        self.notification.emit(Notify(message=message, notify_type=notify_type))

    def set_config(self, config) -> None:
        self.config = config
        self.config_changed.emit(config)
