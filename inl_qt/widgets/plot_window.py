from __future__ import annotations

from typing import Optional

from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg
from matplotlib.backends.backend_qtagg import NavigationToolbar2QT as NavigationToolbar
from matplotlib.figure import Figure
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QVBoxLayout, QWidget


class PlotWindow(QWidget):
    """Top-level window holding one matplotlib figure."""

    def __init__(self, parent: Optional[QWidget] = None, *, title: str = "INL plot") -> None:
        super().__init__(parent, Qt.Window)
        self.setWindowTitle(str(title))
        self.resize(1100, 650)
        self.setAttribute(Qt.WA_DeleteOnClose, True)

        self.figure = Figure(figsize=(11, 6))
        self.canvas = FigureCanvasQTAgg(self.figure)
        self.toolbar = NavigationToolbar(self.canvas, self)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.addWidget(self.toolbar)
        layout.addWidget(self.canvas, 1)

    def redraw(self) -> None:
        self.canvas.draw_idle()
