from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import shiboken6
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QMainWindow,
    QProgressBar,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from inlplot.settings import load_settings, resolve_start_folder, save_settings
from inl_qt.adapters import InlAdapter
from inl_qt.services import DialogService, StatusService
from inl_qt.services.worker import run_in_worker
from inl_qt.widgets import PlotWindow


_logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("INL plot")
        self.resize(760, 560)

        self._settings = load_settings()
        self._status_label = QLabel("Ready")
        self._progress = QProgressBar()
        self._progress.setRange(0, 0)
        self._progress.setVisible(False)

        self.status_service = StatusService(set_text=self._status_label.setText, set_busy=self._set_busy)
        self.dialog_service = DialogService(self)
        self.adapter = InlAdapter(resolve_start_folder(self._settings))
        self._plot_windows: List[PlotWindow] = []

        self._init_ui()
        self._refresh_file_list()
        self._set_variables_enabled(False)

    def _init_ui(self) -> None:
        root = QWidget()
        layout = QHBoxLayout(root)
        layout.addWidget(self._build_files_panel(), 1)
        layout.addWidget(self._build_variables_panel(), 2)
        self.setCentralWidget(root)

        self._build_menu()
        bar = QStatusBar()
        bar.addWidget(self._status_label, 1)
        bar.addPermanentWidget(self._progress)
        self.setStatusBar(bar)

    def _build_files_panel(self) -> QWidget:
        box = QGroupBox("Files")
        layout = QVBoxLayout(box)

        self._folder_label = QLabel("")
        self._folder_label.setWordWrap(True)
        layout.addWidget(self._folder_label)

        folder_btn = QPushButton("Folder…")
        folder_btn.clicked.connect(self._choose_folder)
        layout.addWidget(folder_btn)

        self._file_list = QListWidget()
        self._file_list.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self._file_list.itemSelectionChanged.connect(self._on_file_selection)
        layout.addWidget(self._file_list, 1)

        self._load_btn = QPushButton("Load")
        self._load_btn.setEnabled(False)
        self._load_btn.clicked.connect(self._load_selected)
        layout.addWidget(self._load_btn)
        return box

    def _build_variables_panel(self) -> QWidget:
        box = QGroupBox("Variables")
        layout = QVBoxLayout(box)

        lists = QHBoxLayout()
        left_col = QVBoxLayout()
        left_col.addWidget(QLabel("Left axis"))
        self._left_list = QListWidget()
        self._left_list.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self._left_list.itemSelectionChanged.connect(self._on_variable_selection)
        left_col.addWidget(self._left_list, 1)
        lists.addLayout(left_col)

        right_col = QVBoxLayout()
        right_col.addWidget(QLabel("Right axis"))
        self._right_list = QListWidget()
        self._right_list.setSelectionMode(QAbstractItemView.ExtendedSelection)
        right_col.addWidget(self._right_list, 1)
        lists.addLayout(right_col)
        layout.addLayout(lists, 1)

        opts = QHBoxLayout()
        self._overlay_cb = QCheckBox("Overlay")
        self._overlay_cb.setChecked(bool(self._settings.get("overlay")))
        opts.addWidget(self._overlay_cb)
        self._sort_cb = QCheckBox("Sort by time")
        self._sort_cb.setChecked(bool(self._settings.get("sort")))
        opts.addWidget(self._sort_cb)
        self._clear_cb = QCheckBox("Clear figure")
        self._clear_cb.setToolTip("Redraw in the last plot window instead of opening a new one")
        self._clear_cb.setChecked(bool(self._settings.get("clear_figure")))
        opts.addWidget(self._clear_cb)
        opts.addStretch(1)
        layout.addLayout(opts)

        self._plot_btn = QPushButton("Plot")
        self._plot_btn.setEnabled(False)
        self._plot_btn.clicked.connect(self._plot)
        layout.addWidget(self._plot_btn)
        return box

    def _build_menu(self) -> None:
        file_menu = self.menuBar().addMenu("File")
        folder_action = QAction("Choose Folder…", self)
        folder_action.triggered.connect(self._choose_folder)
        file_menu.addAction(folder_action)

        refresh_action = QAction("Refresh File List", self)
        refresh_action.triggered.connect(self._refresh_file_list)
        file_menu.addAction(refresh_action)

        file_menu.addSeparator()
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

    def _set_busy(self, busy: bool) -> None:
        self._progress.setVisible(bool(busy))

    def _set_variables_enabled(self, enabled: bool) -> None:
        self._left_list.setEnabled(bool(enabled))
        self._right_list.setEnabled(bool(enabled))
        if not enabled:
            self._plot_btn.setEnabled(False)

    def _refresh_file_list(self) -> None:
        files = self.adapter.refresh_files()
        self._folder_label.setText(str(self.adapter.folder))
        self._file_list.clear()
        self._file_list.addItems(files)
        self._load_btn.setEnabled(False)
        self.status_service.set_status(f"{len(files)} file(s) in folder")

    def _choose_folder(self) -> None:
        folder = self.dialog_service.pick_folder(str(self.adapter.folder))
        if not folder:
            return
        self.adapter.set_folder(Path(folder))
        self._settings["last_folder"] = str(folder)
        self._persist_settings()
        self._populate_variables([])
        self._set_variables_enabled(False)
        self._refresh_file_list()

    def _selected_files(self) -> List[str]:
        return [item.text() for item in self._file_list.selectedItems()]

    def _on_file_selection(self) -> None:
        self._load_btn.setEnabled(bool(self._selected_files()))
        self._set_variables_enabled(False)

    def _load_selected(self) -> None:
        names = self._selected_files()
        if not names:
            return
        self._load_btn.setEnabled(False)

        def _work(_h):
            return self.adapter.read_selected(names)

        def _done(datasets) -> None:
            self._on_loaded(names, datasets)

        def _err(msg: str) -> None:
            self._load_btn.setEnabled(True)
            self.status_service.set_status("Load failed")
            self.dialog_service.error("Load", msg)

        run_in_worker(
            _work,
            on_result=_done,
            on_error=_err,
            status=self.status_service,
            description="Loading data, this may take several minutes, please wait...",
            group="inl_load",
        )

    def _on_loaded(self, names: List[str], datasets) -> None:
        variables = self.adapter.apply_loaded(names, datasets)
        self._populate_variables(variables)
        self._set_variables_enabled(True)
        self._load_btn.setEnabled(bool(self._selected_files()))
        self.status_service.set_status(f"Loaded {len(datasets)} file(s), {len(variables) - 1} variable(s)")

    def _populate_variables(self, variables: List[str]) -> None:
        for lst in (self._left_list, self._right_list):
            lst.clear()
            lst.addItems(variables)
            if variables:
                lst.setCurrentRow(0)

    def _on_variable_selection(self) -> None:
        selection = [item.text() for item in self._left_list.selectedItems()]
        self._plot_btn.setEnabled(self.adapter.can_plot(selection))

    def _forget_window(self, window: PlotWindow) -> None:
        self._plot_windows = [w for w in self._plot_windows if w is not window]

    def _target_window(self) -> PlotWindow:
        # Closed windows delete themselves; only live, visible ones are reused.
        self._plot_windows = [w for w in self._plot_windows if shiboken6.isValid(w) and w.isVisible()]
        if self._clear_cb.isChecked() and self._plot_windows:
            return self._plot_windows[-1]
        window = PlotWindow(self, title=f"INL plot {len(self._plot_windows) + 1}")
        window.destroyed.connect(lambda *_: self._forget_window(window))
        self._plot_windows.append(window)
        return window

    def _plot(self) -> None:
        left = [item.text() for item in self._left_list.selectedItems()]
        right = [item.text() for item in self._right_list.selectedItems()]
        window = self._target_window()
        try:
            result = self.adapter.plot(
                left,
                right,
                overlay=self._overlay_cb.isChecked(),
                sort=self._sort_cb.isChecked(),
                figure=window.figure,
            )
        except ValueError as exc:
            _logger.exception("Plot failed")
            self.dialog_service.error("Plot", str(exc))
            return

        window.redraw()
        window.show()
        window.raise_()
        if result.warnings:
            self.status_service.set_status(f"Plotted with {len(result.warnings)} missing variable(s)")
            self.dialog_service.warn_many("Missing variables", result.warnings)
        else:
            self.status_service.set_status("Plotted")
        self._persist_settings()

    def _persist_settings(self) -> None:
        self._settings["overlay"] = self._overlay_cb.isChecked()
        self._settings["sort"] = self._sort_cb.isChecked()
        self._settings["clear_figure"] = self._clear_cb.isChecked()
        try:
            save_settings(self._settings)
        except OSError:
            _logger.warning("Could not save settings", exc_info=True)

    def closeEvent(self, event) -> None:
        self._persist_settings()
        super().closeEvent(event)
