from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import numpy as np
import pandas as pd


TIME_COLUMN = "asciitime"
HEADER_ROW = 0
# Row 2 of the source spreadsheets holds units; data starts on row 3.
FIRST_DATA_ROW = 2

DEFAULT_LEGEND_LOCATION = "best-outside"


class ConfigurationError(ValueError):
    pass


class MalformedDataError(ValueError):
    pass


def as_name_list(value: Union[None, str, Sequence[str]]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(v) for v in value]


@dataclass
class RawDataset:
    """Header-plus-data grid read from one input file (or one sheet).

    ``cells`` is a 2-D object array. Row 0 names the columns, row 1 is the
    reserved units row and rows 2.. hold the samples.
    """

    cells: np.ndarray
    name: str = ""
    path: Optional[Path] = None
    sheet_name: Optional[str] = None

    def __post_init__(self) -> None:
        cells = np.asarray(self.cells, dtype=object)
        if cells.ndim != 2:
            raise MalformedDataError(f"Raw data '{self.name}' must be a 2-D grid, got {cells.ndim}-D.")
        if cells.shape[0] < FIRST_DATA_ROW + 1:
            raise MalformedDataError(
                f"Raw data '{self.name}' needs a header row, a units row and at least one data row "
                f"(got {cells.shape[0]} row(s))."
            )
        self.cells = cells

    @classmethod
    def from_grid(cls, grid: Any, *, name: str = "", path: Optional[Path] = None) -> "RawDataset":
        if isinstance(grid, RawDataset):
            return grid
        if isinstance(grid, pd.DataFrame):
            values = grid.to_numpy(dtype=object)
        elif isinstance(grid, np.ndarray):
            values = grid.astype(object)
        else:
            # Rows of a hand-built grid may differ in length; pad with empty cells.
            rows = [list(row) for row in grid]
            width = max((len(row) for row in rows), default=0)
            values = np.full((len(rows), width), None, dtype=object)
            for i, row in enumerate(rows):
                values[i, : len(row)] = row
        return cls(cells=values, name=str(name), path=path)

    @property
    def header(self) -> List[Any]:
        return list(self.cells[HEADER_ROW, :])

    @property
    def n_rows(self) -> int:
        return int(self.cells.shape[0])

    @property
    def n_data_rows(self) -> int:
        return self.n_rows - FIRST_DATA_ROW

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        if self.path is not None:
            return Path(self.path).name
        return "<raw data>"


@dataclass
class ExtractOptions:
    overlay: bool = False
    sort: bool = False
    prefix: List[str] = field(default_factory=list)
    hide_prefix: bool = False

    def __post_init__(self) -> None:
        self.prefix = as_name_list(self.prefix)
        self.overlay = bool(self.overlay)
        self.sort = bool(self.sort)
        self.hide_prefix = bool(self.hide_prefix)

    def label_for(self, dataset_index: int, n_datasets: int, variable: str) -> str:
        # Prefixes apply only when there is exactly one per dataset.
        if not self.hide_prefix and self.prefix and len(self.prefix) == int(n_datasets):
            return f"{self.prefix[dataset_index]}{variable}"
        return str(variable)


@dataclass(frozen=True)
class ExtractionWarning:
    kind: str
    dataset: str
    variable: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ExtractionResult:
    x: np.ndarray = field(default_factory=lambda: np.full((0, 0), np.nan))
    y: np.ndarray = field(default_factory=lambda: np.full((0, 0), np.nan))
    labels: List[str] = field(default_factory=list)
    warnings: List[ExtractionWarning] = field(default_factory=list)

    @property
    def n_series(self) -> int:
        return len(self.labels)

    @property
    def n_rows(self) -> int:
        return int(self.x.shape[0])

    def column(self, index: int) -> tuple[np.ndarray, np.ndarray]:
        """Return one (time, value) pair with its NaN padding stripped."""
        x = self.x[:, index]
        y = self.y[:, index]
        n = int(np.count_nonzero(~np.isnan(x)))
        return x[:n], y[:n]


@dataclass
class PlotOptions:
    """Every option recognised by the plotting command, with its default."""

    left: List[str] = field(default_factory=list)
    right: List[str] = field(default_factory=list)
    overlay: bool = False
    sort: bool = False
    prefix: List[str] = field(default_factory=list)
    hide_prefix: bool = False
    location: str = DEFAULT_LEGEND_LOCATION
    clear_figure: bool = False
    raw: bool = False

    def __post_init__(self) -> None:
        self.left = as_name_list(self.left)
        self.right = as_name_list(self.right)
        self.prefix = as_name_list(self.prefix)
        self.location = str(self.location or DEFAULT_LEGEND_LOCATION)

    def validate(self) -> "PlotOptions":
        if not self.left:
            raise ConfigurationError("Variables must be defined for plotting on the left.")
        return self

    def extract_options(self) -> ExtractOptions:
        return ExtractOptions(
            overlay=self.overlay,
            sort=self.sort,
            prefix=list(self.prefix),
            hide_prefix=self.hide_prefix,
        )


@dataclass
class SingleAxisRequest:
    left: ExtractionResult
    overlay: bool = False
    location: str = DEFAULT_LEGEND_LOCATION

    @property
    def warnings(self) -> List[ExtractionWarning]:
        return list(self.left.warnings)


@dataclass
class DualAxisRequest:
    left: ExtractionResult
    right: ExtractionResult
    overlay: bool = False
    location: str = DEFAULT_LEGEND_LOCATION

    @property
    def warnings(self) -> List[ExtractionWarning]:
        return list(self.left.warnings) + list(self.right.warnings)


PlotRequest = Union[SingleAxisRequest, DualAxisRequest]


@dataclass
class PlotResult:
    figure: Any
    axes: List[Any]
    request: PlotRequest
    warnings: List[ExtractionWarning] = field(default_factory=list)
