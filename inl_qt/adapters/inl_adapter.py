from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from matplotlib.figure import Figure

from inlplot.inl_io import list_data_files, merge_variables, read_data
from inlplot.inl_model import PlotResult, RawDataset
from inlplot.inl_render import inl_plot


# First entry of both variable lists; selecting only this means "no variables".
NONE_ITEM = "none"


class InlAdapter:
    """GUI state that does not depend on Qt: folder, loaded files, variables."""

    def __init__(self, folder: Optional[Path] = None, *, extensions: Sequence[str] = (".xlsx",)) -> None:
        self.folder: Path = Path(folder) if folder is not None else Path.cwd()
        self.extensions = tuple(extensions)
        self.files: List[str] = []
        self.loaded_names: List[str] = []
        self.datasets: List[RawDataset] = []
        self.variables: List[str] = [NONE_ITEM]
        self.refresh_files()

    def set_folder(self, folder: Path) -> List[str]:
        self.folder = Path(folder)
        self.reset_loaded()
        return self.refresh_files()

    def refresh_files(self) -> List[str]:
        self.files = list_data_files(self.folder, self.extensions)
        return list(self.files)

    def reset_loaded(self) -> None:
        self.loaded_names = []
        self.datasets = []
        self.variables = [NONE_ITEM]

    def read_selected(self, names: Sequence[str]) -> List[RawDataset]:
        """Read the chosen files; safe to call from a worker thread."""
        return read_data([self.folder / str(n) for n in names])

    def apply_loaded(self, names: Sequence[str], datasets: Sequence[RawDataset]) -> List[str]:
        self.loaded_names = [str(n) for n in names]
        self.datasets = list(datasets)
        self.variables = [NONE_ITEM] + merge_variables(self.datasets)
        return list(self.variables)

    @staticmethod
    def selected_variables(selection: Sequence[str]) -> List[str]:
        return [str(v) for v in selection if str(v) != NONE_ITEM]

    def can_plot(self, left_selection: Sequence[str]) -> bool:
        return bool(self.datasets) and bool(self.selected_variables(left_selection))

    def legend_prefixes(self) -> List[str]:
        return [f"{Path(n).stem}: " for n in self.loaded_names]

    def plot(
        self,
        left_selection: Sequence[str],
        right_selection: Sequence[str] = (),
        *,
        overlay: bool = False,
        sort: bool = False,
        figure: Optional[Figure] = None,
    ) -> PlotResult:
        """Plot onto ``figure`` when given (it is cleared first), else a new figure."""
        return inl_plot(
            self.datasets,
            left=self.selected_variables(left_selection),
            right=self.selected_variables(right_selection),
            overlay=overlay,
            sort=sort,
            prefix=self.legend_prefixes(),
            clear_figure=figure is not None,
            figure=figure,
            raw=True,
        )
