"""Scrollback console: displays received bytes and emits typed keys."""

from __future__ import annotations
import locale
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QKeyEvent, QPalette, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit, QWidget

MAX_LINES = 100


def _key_code(key) -> int:
    return int(getattr(key, "value", key))


IGNORED_KEYS = frozenset(_key_code(k) for k in (Qt.Key_Left, Qt.Key_Right, Qt.Key_Up, Qt.Key_Down, Qt.Key_Backspace))


def local_encoding() -> str:
    return locale.getpreferredencoding(False) or "latin-1"


def keypress_payload(key, text: str, encoding: Optional[str] = None) -> bytes:
    """Bytes to send for a key press; empty for navigation keys and keys without text."""
    if _key_code(key) in IGNORED_KEYS or not text:
        return b""
    return text.encode(encoding or local_encoding(), errors="replace")


class Console(QPlainTextEdit):
    key_pressed = Signal(bytes)

    def __init__(self, parent: Optional[QWidget] = None, encoding: Optional[str] = None):
        super().__init__(parent)
        self.encoding = encoding or local_encoding()
        self.document().setMaximumBlockCount(MAX_LINES)
        p = self.palette()
        p.setColor(QPalette.Base, Qt.black)
        p.setColor(QPalette.Text, Qt.green)
        self.setPalette(p)

    def display_data(self, data: bytes):
        self.moveCursor(QTextCursor.End)
        self.insertPlainText(bytes(data).decode(self.encoding, errors="replace"))
        self.ensureCursorVisible()

    def keyPressEvent(self, e: QKeyEvent):
        payload = keypress_payload(e.key(), e.text(), self.encoding)
        if payload:
            self.key_pressed.emit(payload)
