from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from inlplot.inl_extract import ASCIITIME_FORMAT
from inlplot.inl_model import RawDataset


def stamps(n: int, *, start: str = "2012-01-02 03:04:05", step_s: int = 60) -> List[str]:
    t0 = pd.Timestamp(start)
    return [(t0 + pd.Timedelta(seconds=step_s * i)).strftime(ASCIITIME_FORMAT) for i in range(n)]


def make_grid(columns: Dict[str, Sequence[object]], *, units: Optional[Sequence[str]] = None) -> List[List[object]]:
    header = list(columns.keys())
    n = max((len(v) for v in columns.values()), default=0)
    units_row = list(units) if units is not None else ["-"] * len(header)
    rows = [[col[i] if i < len(col) else None for col in columns.values()] for i in range(n)]
    return [header, units_row, *rows]


def make_raw(columns: Dict[str, Sequence[object]], *, name: str = "run") -> RawDataset:
    return RawDataset.from_grid(make_grid(columns), name=name)


@pytest.fixture
def two_runs() -> List[RawDataset]:
    """Run 1 has A and B over 3 rows, run 2 only A over 5 rows."""
    r1 = make_raw({"asciitime": stamps(3), "A": [1.0, 2.0, 3.0], "B": [10.0, 20.0, 30.0]}, name="run1.xlsx")
    r2 = make_raw(
        {"asciitime": stamps(5, start="2012-01-03 08:00:00"), "A": [5.0, 6.0, 7.0, 8.0, 9.0]},
        name="run2.xlsx",
    )
    return [r1, r2]


@pytest.fixture
def write_csv(tmp_path):
    def _write(name: str, grid: List[List[object]]) -> Path:
        path = tmp_path / name
        lines = []
        for row in grid:
            lines.append(",".join("" if v is None else str(v) for v in row))
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_xlsx(tmp_path):
    def _write(name: str, grid: List[List[object]], *, sheet_name: str = "Sheet1") -> Path:
        path = tmp_path / name
        pd.DataFrame(grid).to_excel(path, header=False, index=False, sheet_name=sheet_name)
        return path

    return _write
