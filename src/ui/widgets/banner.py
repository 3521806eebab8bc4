from __future__ import annotations

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QToolButton, QWidget


def _colors(kind: str) -> tuple[str, str, str]:
    """
    Returns (bg, border, text).
    """
    kind = (kind or "info").lower()
    if kind == "success":
        return "#052e1a", "#16a34a", "#e5e7eb"
    if kind == "warning":
        return "#2a1a05", "#f59e0b", "#e5e7eb"
    if kind == "error":
        return "#2a0a0a", "#ef4444", "#e5e7eb"
    return "#0b1222", "#38bdf8", "#e5e7eb"


class StatusBanner(QFrame):
    """
    Inline success/error banner shown above the publish form.
    Errors stay until dismissed; other kinds hide after `timeout_ms`.
    """
    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("Banner")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        root = QHBoxLayout(self)
        root.setContentsMargins(12, 8, 8, 8)
        root.setSpacing(10)

        self.lbl = QLabel()
        self.lbl.setWordWrap(True)
        self.lbl.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)

        self.btn_close = QToolButton()
        self.btn_close.setText("✕")
        self.btn_close.setCursor(Qt.CursorShape.PointingHandCursor)
        self.btn_close.clicked.connect(self.dismiss)

        root.addWidget(self.lbl, 1)
        root.addWidget(self.btn_close, 0, Qt.AlignmentFlag.AlignTop)

        self._hide_timer = QTimer(self)
        self._hide_timer.setSingleShot(True)
        self._hide_timer.timeout.connect(self.dismiss)

        self.kind = "info"
        self.hide()

    def show_message(self, message: str, kind: str = "info", timeout_ms: int = 5000):
        self.kind = kind
        bg, border, text = _colors(kind)
        self.setStyleSheet(f"""
        QFrame#Banner {{
            background: {bg};
            border: 1px solid {border};
            border-radius: 10px;
        }}
        QLabel {{ color: {text}; }}
        QToolButton {{ border: none; background: transparent; color: {text}; }}
        """)
        self.lbl.setText(message)
        self.show()

        self._hide_timer.stop()
        if kind != "error" and timeout_ms > 0:
            self._hide_timer.start(timeout_ms)

    def message(self) -> str:
        return self.lbl.text()

    def dismiss(self):
        self._hide_timer.stop()
        self.hide()
