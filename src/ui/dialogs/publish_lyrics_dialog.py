from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import Qt, QThread
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QTableWidget, QTableWidgetItem, QWidget, QStackedWidget
)

from core.challenge import Challenge, SolveProgress, make_publish_token
from core.lrclib_client import CHALLENGE_FAILED, PUBLISH_FAILED, LrcLibClient
from core.lrc_validator import ValidationResult, is_publish_blocked, validation_summary
from core.models import PublishPayload
from ui.widgets.validation_panel import fill_issues_table, make_issues_table
from ui.workers.challenge_solver import SolveHandle, spawn_solver
from ui.workers.lrclib_request import LrcLibRequestWorker

logger = logging.getLogger(__name__)

PENDING = "Pending"
RUNNING = "Running..."
DONE = "Done"
FAILED = "Failed"


@dataclass(frozen=True)
class PublishProgress:
    requestChallenge: str = PENDING
    solveChallenge: str = PENDING
    publishLyrics: str = PENDING


class PublishLyricsDialog(QDialog):
    """
    Shows either:
      - the validation issues (if any), with a "Continue Anyway" override
        unless multi-timestamp lines still need expanding, or
      - confirmation + progress table (request challenge, solve, publish)
    """
    def __init__(
        self,
        payload: PublishPayload,
        client: LrcLibClient,
        validation: Optional[ValidationResult] = None,
        max_attempts: Optional[int] = None,
        parent=None
    ):
        super().__init__(parent)
        self.setWindowTitle("Publish Lyrics")
        self.setModal(True)

        self.payload = payload
        self.client = client
        self.validation = validation
        self.max_attempts = max_attempts

        self.result_ok = False
        self.result_message = ""

        self._is_publishing = False
        self._progress = PublishProgress()
        self._challenge: Optional[Challenge] = None
        self.solver: Optional[SolveHandle] = None
        self._request_worker: Optional[LrcLibRequestWorker] = None
        self._pending_threads: list = []

        self.resize(650, 420)

        root = QVBoxLayout(self)
        root.setContentsMargins(14, 14, 14, 14)
        root.setSpacing(10)

        self.stack = QStackedWidget()
        root.addWidget(self.stack, 1)

        # --- page 0: lint table
        lint_page = QWidget()
        lint_layout = QVBoxLayout(lint_page)
        lint_layout.setSpacing(8)

        self.lint_header = QLabel()
        self.lint_header.setWordWrap(True)
        lint_layout.addWidget(self.lint_header)

        self.lint_table = make_issues_table()
        lint_layout.addWidget(self.lint_table, 1)

        self.stack.addWidget(lint_page)

        # --- page 1: confirm/progress
        pub_page = QWidget()
        pub_layout = QVBoxLayout(pub_page)
        pub_layout.setSpacing(12)
        pub_layout.setAlignment(Qt.AlignTop)

        self.info_label = QLabel()
        self.info_label.setWordWrap(True)
        pub_layout.addWidget(self.info_label)

        self.progress_table = QTableWidget(3, 2)
        self.progress_table.setHorizontalHeaderLabels(["Step", "Status"])
        self.progress_table.verticalHeader().setVisible(False)
        self.progress_table.horizontalHeader().setStretchLastSection(True)
        self.progress_table.setEditTriggers(self.progress_table.EditTrigger.NoEditTriggers)
        self.progress_table.setSelectionMode(self.progress_table.SelectionMode.NoSelection)

        self.progress_table.setItem(0, 0, QTableWidgetItem("Request challenge..."))
        self.progress_table.setItem(1, 0, QTableWidgetItem("Solve challenge..."))
        self.progress_table.setItem(2, 0, QTableWidgetItem("Publish lyrics..."))
        self._set_progress(PublishProgress())

        pub_layout.addWidget(self.progress_table)

        self.stack.addWidget(pub_page)

        # --- footer buttons
        footer = QHBoxLayout()
        footer.addStretch(1)

        self.btn_primary = QPushButton()
        self.btn_secondary = QPushButton("Cancel")

        self.btn_primary.clicked.connect(self._on_primary)
        self.btn_secondary.clicked.connect(self._on_secondary)

        footer.addWidget(self.btn_primary)
        footer.addWidget(self.btn_secondary)

        root.addLayout(footer)

        if validation is not None and not validation.is_valid:
            self._show_lint(validation)
        else:
            self._show_confirm()

    @property
    def blocked(self) -> bool:
        return self.validation is not None and is_publish_blocked(self.validation)

    @property
    def kind(self) -> str:
        return "synchronized" if self.payload.is_synced else "unsynchronized"

    def _title(self) -> str:
        return f"<b>{self.payload.track_name} - {self.payload.artist_name}</b>"

    def _show_lint(self, validation: ValidationResult):
        fill_issues_table(self.lint_table, validation.issues)
        self.stack.setCurrentIndex(0)
        if self.blocked:
            self.lint_header.setText(
                f"Please fix the following problem(s) before publishing ({validation_summary(validation)}). "
                "Lines with several timestamps must be expanded first; use Auto-fix in the editor."
            )
            self.btn_primary.setText("Close")
            self.btn_secondary.hide()
        else:
            self.lint_header.setText(
                f"The synced lyrics have problem(s) ({validation_summary(validation)}). "
                "You can go back and fix them, or publish anyway."
            )
            self.btn_primary.setText("Continue Anyway")
            self.btn_secondary.show()

    def _show_confirm(self):
        self.stack.setCurrentIndex(1)
        self.info_label.setText(
            f"Do you want to publish your {self.kind} lyrics of the song "
            f"{self._title()} to {self.client.base_url}?"
        )
        self.btn_primary.setText("Publish Now")
        self.btn_primary.setEnabled(True)
        self.btn_secondary.setText("Cancel")
        self.btn_secondary.show()

    def _set_progress(self, prog: PublishProgress):
        self._progress = prog
        self.progress_table.setItem(0, 1, QTableWidgetItem(prog.requestChallenge))
        self.progress_table.setItem(1, 1, QTableWidgetItem(prog.solveChallenge))
        self.progress_table.setItem(2, 1, QTableWidgetItem(prog.publishLyrics))

    def _on_primary(self):
        if self.stack.currentIndex() == 0:
            if self.blocked:
                self.reject()
            else:
                self._show_confirm()
            return
        if not self._is_publishing:
            self._start_publish()

    def _on_secondary(self):
        if self._is_publishing:
            self._cancel_publish()
        self.reject()

    # ------------------ publish flow ------------------
    def _start_publish(self):
        self._is_publishing = True
        self.btn_primary.setEnabled(False)

        self.info_label.setText(f"Publishing your {self.kind} lyrics of the song {self._title()}...")
        self._set_progress(PublishProgress(requestChallenge=RUNNING))

        self._run_request(self.client.request_challenge, CHALLENGE_FAILED, self._on_challenge)

    def _run_request(self, call, error_message: str, on_success):
        worker = LrcLibRequestWorker(call, error_message, self)
        worker.succeeded.connect(on_success)
        worker.failed.connect(self._on_failed)
        self._request_worker = worker
        worker.start()

    def _on_challenge(self, challenge: Challenge):
        if not self._is_publishing:
            return
        self._challenge = challenge
        self._set_progress(PublishProgress(requestChallenge=DONE, solveChallenge=RUNNING))

        self.solver = spawn_solver(
            challenge,
            on_progress=self._on_solve_progress,
            max_attempts=self.max_attempts,
            parent=self,
        )
        self.solver.solved.connect(self._on_solved)
        self.solver.failed.connect(self._on_failed)

    def _on_solve_progress(self, prog: SolveProgress):
        self.progress_table.setItem(1, 1, QTableWidgetItem(f"{RUNNING} {prog.attempts:,} attempts"))

    def _on_solved(self, nonce):
        if not self._is_publishing or self._challenge is None:
            return
        self._set_progress(PublishProgress(DONE, DONE, RUNNING))

        token = make_publish_token(self._challenge, nonce)
        payload = self.payload
        self._run_request(lambda: self.client.publish(token, payload), PUBLISH_FAILED, self._on_published)

    def _on_published(self, _result):
        if not self._is_publishing:
            return
        self._set_progress(PublishProgress(DONE, DONE, DONE))
        self._finish(True, f"Your {self.kind} lyrics have been published.")

    def _on_failed(self, message: str):
        if not self._is_publishing:
            return
        p = self._progress
        self._set_progress(PublishProgress(
            requestChallenge=FAILED if p.requestChallenge == RUNNING else p.requestChallenge,
            solveChallenge=FAILED if p.solveChallenge == RUNNING else p.solveChallenge,
            publishLyrics=FAILED if p.publishLyrics == RUNNING else p.publishLyrics,
        ))
        self._finish(False, message or PUBLISH_FAILED)

    def _finish(self, ok: bool, message: str):
        self._is_publishing = False
        self.result_ok = ok
        self.result_message = message
        if ok:
            logger.info(message)
            self.accept()
        else:
            logger.warning("Publish failed: %s", message)
            self.reject()

    def _cancel_publish(self):
        self._is_publishing = False
        if self.solver is not None:
            self.solver.cancel()
            self.solver.wait(2000)
        worker = self._request_worker
        if worker is not None and worker.isRunning():
            # a blocking HTTP call cannot be interrupted; drop its result instead
            worker.succeeded.disconnect()
            worker.failed.disconnect()
            logger.debug("Left an LRCLIB request to finish in the background")
        self.result_message = "Publishing was cancelled."

    def dispose(self):
        """Delete the dialog once none of its worker threads is still running."""
        running = [t for t in self.findChildren(QThread) if t.isRunning()]
        if not running:
            self.deleteLater()
            return
        self._pending_threads = running
        for t in running:
            t.finished.connect(self._on_thread_finished)

    def _on_thread_finished(self):
        thread = self.sender()
        if thread in self._pending_threads:
            self._pending_threads.remove(thread)
        if self._pending_threads:
            return
        # finished is emitted just before the thread exits
        for t in self.findChildren(QThread):
            t.wait()
        self.deleteLater()

    def reject(self):
        if self._is_publishing:
            self._cancel_publish()
        super().reject()
