from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QTableWidget, QTableWidgetItem,
)

from core.lrc_validator import ValidationIssue, ValidationResult, validate_lrc, validation_summary


class ValidationDebouncer(QObject):
    """
    Re-validates text after an idle window with no further edits.
    Every schedule() restarts the window; validation runs on the thread that
    owns this object, so two runs never overlap.
    """
    validated = Signal(object)   # ValidationResult

    def __init__(self, interval_ms: int = 1000, parent=None):
        super().__init__(parent)
        self._pending: Optional[str] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._run)

    def set_interval(self, interval_ms: int) -> None:
        self._timer.setInterval(max(0, int(interval_ms)))

    def interval(self) -> int:
        return self._timer.interval()

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def schedule(self, text: str) -> None:
        self._pending = text
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._pending = None

    def flush(self) -> Optional[ValidationResult]:
        """Run a pending validation now instead of waiting."""
        if not self._timer.isActive():
            return None
        self._timer.stop()
        return self._run()

    def _run(self) -> Optional[ValidationResult]:
        text = self._pending
        self._pending = None
        if text is None:
            return None
        result = validate_lrc(text)
        self.validated.emit(result)
        return result


def fill_issues_table(table: QTableWidget, issues) -> None:
    table.setRowCount(len(issues))
    for r, issue in enumerate(issues):
        table.setItem(r, 0, QTableWidgetItem(str(issue.line)))
        table.setItem(r, 1, QTableWidgetItem(issue.severity.value))
        table.setItem(r, 2, QTableWidgetItem(issue.type.label))
        msg = issue.message if not issue.suggestion else f"{issue.message}. {issue.suggestion}"
        item = QTableWidgetItem(msg)
        item.setToolTip(issue.raw)
        table.setItem(r, 3, item)


def make_issues_table(parent=None) -> QTableWidget:
    table = QTableWidget(0, 4, parent)
    table.setHorizontalHeaderLabels(["Line", "Severity", "Type", "Message"])
    table.horizontalHeader().setStretchLastSection(True)
    table.verticalHeader().setVisible(False)
    table.setEditTriggers(table.EditTrigger.NoEditTriggers)
    table.setSelectionBehavior(table.SelectionBehavior.SelectRows)
    return table


class ValidationPanel(QWidget):
    """
    Live feedback under the synced lyrics editor: summary, issue list and an
    auto-fix button (expand multi-timestamp lines, sort, strip word timings).
    """
    autoFixRequested = Signal()
    issueActivated = Signal(int)    # 1-based line number

    def __init__(self, interval_ms: int = 1000, parent=None):
        super().__init__(parent)
        self.result: Optional[ValidationResult] = None

        self.debouncer = ValidationDebouncer(interval_ms, self)
        self.debouncer.validated.connect(self.set_result)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(6)

        header = QHBoxLayout()
        self.summary_label = QLabel("")
        self.btn_fix = QPushButton("Auto-fix")
        self.btn_fix.setToolTip("Expand multi-timestamp lines, sort by time and strip word timings")
        self.btn_fix.setEnabled(False)
        self.btn_fix.clicked.connect(lambda: self.autoFixRequested.emit())
        header.addWidget(self.summary_label, 1)
        header.addWidget(self.btn_fix)
        root.addLayout(header)

        self.table = make_issues_table(self)
        self.table.cellDoubleClicked.connect(self._on_row_activated)
        self.table.hide()
        root.addWidget(self.table, 1)

    def schedule(self, text: str) -> None:
        self.debouncer.schedule(text)

    def validate_now(self, text: str) -> ValidationResult:
        self.debouncer.cancel()
        result = validate_lrc(text)
        self.set_result(result)
        return result

    def clear(self) -> None:
        self.debouncer.cancel()
        self.result = None
        self.summary_label.setText("")
        self.table.setRowCount(0)
        self.table.hide()
        self.btn_fix.setEnabled(False)

    def set_result(self, result: ValidationResult) -> None:
        self.result = result
        if result.total_lines == 0:
            self.clear()
            return

        self.summary_label.setText(validation_summary(result))
        fill_issues_table(self.table, result.issues)
        self.table.setVisible(not result.is_valid)
        self.btn_fix.setEnabled(result.has_multi_timestamps or result.has_elrc or result.has_warnings)

    def _on_row_activated(self, row: int, _col: int):
        if self.result and 0 <= row < len(self.result.issues):
            issue: ValidationIssue = self.result.issues[row]
            self.issueActivated.emit(issue.line)
