from __future__ import annotations

from typing import Iterable, Optional

from PySide6.QtWidgets import QFileDialog, QMessageBox, QWidget


class DialogService:
    def __init__(self, parent: QWidget) -> None:
        self._parent = parent

    def info(self, title: str, message: str) -> None:
        QMessageBox.information(self._parent, str(title), str(message))

    def error(self, title: str, message: str) -> None:
        QMessageBox.critical(self._parent, str(title), str(message))

    def warn_many(self, title: str, messages: Iterable[object], *, limit: int = 15) -> None:
        lines = [str(m) for m in messages]
        if not lines:
            return
        shown = lines[:limit]
        if len(lines) > limit:
            shown.append(f"... and {len(lines) - limit} more")
        QMessageBox.warning(self._parent, str(title), "\n".join(shown))

    def pick_folder(self, start: str, title: str = "Select directory...") -> Optional[str]:
        folder = QFileDialog.getExistingDirectory(self._parent, str(title), str(start))
        return folder or None
