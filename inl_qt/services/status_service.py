from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QTimer


class StatusService:
    """Status bar text plus a busy indicator shared by overlapping jobs.

    Both calls may come from worker threads; they are queued onto the GUI
    thread. The indicator stays on until every ``set_busy(True)`` has been
    matched by a ``set_busy(False)``.
    """

    def __init__(self, *, set_text: Callable[[str], None], set_busy: Callable[[bool], None]) -> None:
        self._show_text = set_text
        self._show_busy = set_busy
        self._pending = 0

    def set_status(self, text: str) -> None:
        message = str(text)
        QTimer.singleShot(0, lambda: self._show_text(message))

    def _change_busy(self, delta: int) -> None:
        self._pending = max(0, self._pending + delta)
        self._show_busy(self._pending > 0)

    def set_busy(self, busy: bool) -> None:
        delta = 1 if busy else -1
        QTimer.singleShot(0, lambda: self._change_busy(delta))
