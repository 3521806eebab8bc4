from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QLineEdit,
    QSpinBox, QTabWidget, QPlainTextEdit, QPushButton, QFileDialog, QToolButton, QStyle
)
from PySide6.QtGui import QShortcut, QKeySequence, QTextCursor
import logging
import os

from core.lrc_normalizer import extract_plain_lyrics, normalize_and_sort_lrc, strip_word_timings
from core.lrc_validator import validate_lrc
from core.lrclib_client import LrcLibClient
from core.models import PublishPayload
from library.track_file import AUDIO_EXTS, LYRICS_EXTS, read_lyrics_file, read_track_file
from ui.dialogs.publish_lyrics_dialog import PublishLyricsDialog
from ui.dialogs.settings_dialog import SettingsDialog
from ui.widgets.banner import StatusBanner
from ui.widgets.validation_panel import ValidationPanel

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("LRC Publisher")
        self.resize(900, 700)
        self.app_state = app_state
        self.client = LrcLibClient(self.app_state.config.lrclib_instance)

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self.banner = StatusBanner(self)
        self.layout.addWidget(self.banner)
        self.app_state.notification.connect(self._on_notify)
        self.app_state.config_changed.connect(self._on_config_changed)

        # --- Top bar (file loading + settings) ---
        top_bar = QHBoxLayout()

        self.btn_open_audio = QPushButton("Open Audio File...")
        self.btn_open_audio.clicked.connect(self.open_audio_file)
        self.btn_open_lyrics = QPushButton("Open Lyrics File...")
        self.btn_open_lyrics.clicked.connect(self.open_lyrics_file)
        top_bar.addWidget(self.btn_open_audio)
        top_bar.addWidget(self.btn_open_lyrics)
        top_bar.addStretch(1)

        self.btn_config = QToolButton()
        self.btn_config.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogDetailedView))
        self.btn_config.setToolTip("Settings")
        self.btn_config.clicked.connect(self.open_config_modal)
        top_bar.addWidget(self.btn_config)

        self.layout.addLayout(top_bar)

        # --- Track metadata ---
        form = QFormLayout()
        self.track_edit = QLineEdit()
        self.artist_edit = QLineEdit()
        self.album_edit = QLineEdit()
        self.duration_spin = QSpinBox()
        self.duration_spin.setRange(0, 24 * 3600)
        self.duration_spin.setSuffix(" s")
        self.duration_spin.setSpecialValueText("Unknown")
        form.addRow("Track name", self.track_edit)
        form.addRow("Artist", self.artist_edit)
        form.addRow("Album", self.album_edit)
        form.addRow("Duration", self.duration_spin)
        self.layout.addLayout(form)

        # --- Lyrics tabs ---
        self.tabs = QTabWidget()

        synced_tab = QWidget()
        synced_layout = QVBoxLayout(synced_tab)
        synced_layout.setContentsMargins(0, 0, 0, 0)
        self.synced_edit = QPlainTextEdit()
        self.synced_edit.setPlaceholderText("[00:12.34] First line of the song...")
        synced_layout.addWidget(self.synced_edit, 3)

        self.validation_panel = ValidationPanel(self.app_state.config.validation_debounce_ms)
        self.validation_panel.autoFixRequested.connect(self.auto_fix_synced)
        self.validation_panel.issueActivated.connect(self._goto_synced_line)
        synced_layout.addWidget(self.validation_panel, 1)
        self.synced_edit.textChanged.connect(
            lambda: self.validation_panel.schedule(self.synced_edit.toPlainText())
        )

        plain_tab = QWidget()
        plain_layout = QVBoxLayout(plain_tab)
        plain_layout.setContentsMargins(0, 0, 0, 0)
        self.plain_edit = QPlainTextEdit()
        plain_layout.addWidget(self.plain_edit, 1)
        self.btn_plain_from_synced = QPushButton("Generate From Synced")
        self.btn_plain_from_synced.clicked.connect(self.plain_from_synced)
        plain_layout.addWidget(self.btn_plain_from_synced)

        self.tabs.addTab(synced_tab, "Synced")
        self.tabs.addTab(plain_tab, "Plain")
        self.layout.addWidget(self.tabs, 1)

        # --- Publish ---
        footer = QHBoxLayout()
        footer.addStretch(1)
        self.btn_publish_synced = QPushButton("Publish Synced")
        self.btn_publish_plain = QPushButton("Publish Plain")
        self.btn_publish_synced.clicked.connect(self._publish_synced)
        self.btn_publish_plain.clicked.connect(self._publish_plain)
        footer.addWidget(self.btn_publish_synced)
        footer.addWidget(self.btn_publish_plain)
        self.layout.addLayout(footer)

        QShortcut(QKeySequence("Ctrl+O"), self, activated=self.open_audio_file)
        QShortcut(QKeySequence("Ctrl+Shift+F"), self, activated=self.auto_fix_synced)

        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()

    # ------------------ notifications / config ------------------
    def _on_notify(self, n):
        self.banner.show_message(n.message, n.notify_type)

    def _on_config_changed(self, config):
        self.client = LrcLibClient(config.lrclib_instance)
        self.validation_panel.debouncer.set_interval(config.validation_debounce_ms)

    def open_config_modal(self):
        if self.app_state.db is None:
            self.app_state.notify("Settings are unavailable: the settings database could not be opened.", "error")
            return
        SettingsDialog(self.app_state, self).exec()

    # ------------------ loading ------------------
    def open_audio_file(self):
        exts = " ".join(f"*{e}" for e in sorted(AUDIO_EXTS))
        path, _ = QFileDialog.getOpenFileName(self, "Open Audio File", "", f"Audio files ({exts})")
        if path:
            self.load_audio_file(path)

    def load_audio_file(self, path: str):
        try:
            track = read_track_file(path)
        except ValueError as e:
            self.app_state.notify(str(e), "error")
            return

        self.track_edit.setText(track.title)
        self.artist_edit.setText(track.artist)
        self.album_edit.setText(track.album)
        self.duration_spin.setValue(int(round(track.duration or 0)))
        if track.synced_lyrics:
            self.synced_edit.setPlainText(track.synced_lyrics)
        if track.plain_lyrics:
            self.plain_edit.setPlainText(track.plain_lyrics)
        self.app_state.notify(f"Loaded {os.path.basename(path)}", "info")

    def open_lyrics_file(self):
        exts = " ".join(f"*{e}" for e in sorted(LYRICS_EXTS))
        path, _ = QFileDialog.getOpenFileName(self, "Open Lyrics File", "", f"Lyrics files ({exts})")
        if path:
            self.load_lyrics_file(path)

    def load_lyrics_file(self, path: str):
        try:
            plain, synced = read_lyrics_file(path)
        except OSError as e:
            self.app_state.notify(f"Cannot read {path}: {e}", "error")
            return

        if synced:
            self.synced_edit.setPlainText(synced)
            self.tabs.setCurrentIndex(0)
        elif plain:
            self.plain_edit.setPlainText(plain)
            self.tabs.setCurrentIndex(1)
        else:
            self.app_state.notify("The lyrics file is empty.", "warning")

    # ------------------ editing ------------------
    def auto_fix_synced(self):
        text = self.synced_edit.toPlainText()
        if not text.strip():
            return

        text, removed = strip_word_timings(text)
        result = normalize_and_sort_lrc(text)

        self.synced_edit.setPlainText(result.normalized)
        if not self.plain_edit.toPlainText().strip():
            self.plain_edit.setPlainText(result.plain_lyrics)
        self.validation_panel.validate_now(result.normalized)

        parts = []
        if result.changes:
            parts.append(f"expanded {result.changes} line(s) into {result.expanded_lines}")
        if removed:
            parts.append(f"removed {removed} word timestamp(s)")
        parts.append("sorted by time")
        self.app_state.notify("Auto-fix: " + ", ".join(parts) + ".", "success")

    def plain_from_synced(self):
        plain = extract_plain_lyrics(self.synced_edit.toPlainText())
        if plain:
            self.plain_edit.setPlainText(plain)
        else:
            self.app_state.notify("No synced lines to take the plain lyrics from.", "warning")

    def _goto_synced_line(self, line: int):
        block = self.synced_edit.document().findBlockByNumber(max(0, line - 1))
        if block.isValid():
            cursor = QTextCursor(block)
            self.synced_edit.setTextCursor(cursor)
            self.synced_edit.setFocus()

    # ------------------ publish dialogs ------------------
    def _form_payload(self, is_synced: bool) -> PublishPayload:
        return PublishPayload.from_form(
            track_name=self.track_edit.text(),
            artist_name=self.artist_edit.text(),
            album_name=self.album_edit.text(),
            duration_s=float(self.duration_spin.value()),
            plain_lyrics=self.plain_edit.toPlainText(),
            synced_lyrics=self.synced_edit.toPlainText() if is_synced else "",
        )

    def _publish_synced(self):
        self._open_publish_dialog(is_synced=True)

    def _publish_plain(self):
        self._open_publish_dialog(is_synced=False)

    def _open_publish_dialog(self, is_synced: bool):
        payload = self._form_payload(is_synced)
        missing = payload.missing_fields()
        if missing:
            self.app_state.notify(f"Missing {', '.join(missing)}; cannot publish.", "warning")
            return
        if is_synced and not payload.synced_lyrics:
            self.app_state.notify("There are no synced lyrics to publish.", "warning")
            return

        validation = None
        if is_synced:
            validation = validate_lrc(payload.synced_lyrics)
            self.validation_panel.set_result(validation)

        dlg = PublishLyricsDialog(
            payload=payload,
            client=self.client,
            validation=validation,
            max_attempts=self.app_state.config.solver_max_attempts,
            parent=self,
        )
        dlg.exec()

        if dlg.result_ok:
            self.app_state.notify(dlg.result_message, "success")
        elif dlg.result_message:
            self.app_state.notify(dlg.result_message, "error")
        dlg.dispose()
