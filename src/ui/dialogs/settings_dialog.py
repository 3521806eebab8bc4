from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QSpinBox,
    QPushButton, QHBoxLayout, QMessageBox
)

from core.lrclib_client import normalize_instance
from db.database import get_config, set_config
from db.models import Config

class SettingsDialog(QDialog):
    def __init__(self, app_state, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.resize(460, 200)
        self.app_state = app_state

        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.instance_edit = QLineEdit()
        self.instance_edit.setPlaceholderText("https://lrclib.net")
        form.addRow("LRCLIB instance", self.instance_edit)

        self.debounce_spin = QSpinBox()
        self.debounce_spin.setRange(0, 10000)
        self.debounce_spin.setSingleStep(100)
        self.debounce_spin.setSuffix(" ms")
        form.addRow("Validation delay", self.debounce_spin)

        # 0 = no ceiling
        self.max_attempts_spin = QSpinBox()
        self.max_attempts_spin.setRange(0, 2_000_000_000)
        self.max_attempts_spin.setSingleStep(1_000_000)
        self.max_attempts_spin.setSpecialValueText("Unlimited")
        form.addRow("Max solver attempts", self.max_attempts_spin)

        layout.addLayout(form)

        btn_layout = QHBoxLayout()
        btn_layout.addStretch(1)
        self.save_btn = QPushButton("Save")
        self.cancel_btn = QPushButton("Cancel")
        btn_layout.addWidget(self.save_btn)
        btn_layout.addWidget(self.cancel_btn)
        layout.addLayout(btn_layout)

        # load existing config
        self._load()

        # connect
        self.save_btn.clicked.connect(self.save)
        self.cancel_btn.clicked.connect(self.reject)

    def _load(self):
        config = get_config(self.app_state.db)
        self.instance_edit.setText(config.lrclib_instance)
        self.debounce_spin.setValue(config.validation_debounce_ms)
        self.max_attempts_spin.setValue(config.solver_max_attempts or 0)

    def save(self):
        instance = self.instance_edit.text().strip()
        if instance and not instance.startswith(("http://", "https://")):
            QMessageBox.warning(
                self, "Invalid instance", "The LRCLIB instance must be an http(s) URL."
            )
            return

        config = Config(
            lrclib_instance=normalize_instance(instance),
            validation_debounce_ms=self.debounce_spin.value(),
            solver_max_attempts=self.max_attempts_spin.value() or None,
        )
        set_config(self.app_state.db, config)
        self.app_state.set_config(config)
        self.accept()
