from __future__ import annotations

import csv
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from inlplot.inl_extract import find_column
from inlplot.inl_model import FIRST_DATA_ROW, TIME_COLUMN, RawDataset


_logger = logging.getLogger(__name__)

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx", ".xlsm")
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS + EXCEL_EXTENSIONS

# Columns left of this marker are bookkeeping (timestamps, counters).
VARIABLE_MARKER_COLUMN = "ExcelTime"

PathLike = Union[str, os.PathLike]


class UnsupportedFileFormatError(ValueError):
    pass


def _check_extension(path: Path) -> str:
    ext = str(path.suffix).lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileFormatError(
            f"Unsupported file format '{path.suffix or '(none)'}' for {path.name}; "
            f"expected one of {', '.join(SUPPORTED_EXTENSIONS)}."
        )
    return ext


# Data cells that mean "no sample".
_MISSING_TEXT = {"", "na", "n/a", "#n/a", "null", "none"}


def _coerce_cell(value: object) -> object:
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.lower() in _MISSING_TEXT:
        return None
    try:
        return float(text)
    except ValueError:
        return value


def _csv_width(path: Path) -> int:
    # Rows may be ragged; size the frame to the widest one.
    with path.open("r", newline="", encoding="utf-8-sig") as fh:
        return max((len(row) for row in csv.reader(fh)), default=0)


def _trim_trailing_empty_rows(df: pd.DataFrame) -> pd.DataFrame:
    filled = df.notna().any(axis=1).to_numpy()
    if not filled.any():
        return df.iloc[:0]
    last = int(np.flatnonzero(filled)[-1])
    return df.iloc[: last + 1]


def list_sheets(path: PathLike) -> List[str]:
    p = Path(path)
    if _check_extension(p) not in EXCEL_EXTENSIONS:
        return []
    xf = pd.ExcelFile(p)
    return [str(s) for s in (xf.sheet_names or [])]


def read_raw(path: PathLike, *, sheet_name: Optional[str] = None) -> RawDataset:
    """Read one CSV file or workbook sheet into a ``RawDataset``.

    Everything is read without a header so the units row survives; numeric
    text in CSV data cells is converted to floats.
    """
    p = Path(path)
    ext = _check_extension(p)
    _logger.info("Loading %s, this may take several minutes, please wait...", p.name)

    if ext in EXCEL_EXTENSIONS:
        df = pd.read_excel(p, sheet_name=sheet_name or 0, header=None)
    else:
        df = pd.read_csv(
            p,
            header=None,
            names=list(range(_csv_width(p))),
            dtype=object,
            skip_blank_lines=False,
            keep_default_na=False,
        )
        # Header and units rows stay text; "1" or "nan" can be a column name.
        data = df.iloc[FIRST_DATA_ROW:].apply(lambda col: col.map(_coerce_cell))
        df = pd.concat([df.iloc[:FIRST_DATA_ROW], data])

    df = _trim_trailing_empty_rows(df)
    cells = df.to_numpy(dtype=object)
    _logger.info("Loaded %s: %d row(s), %d column(s)", p.name, cells.shape[0], cells.shape[1])
    return RawDataset(cells=cells, name=p.name, path=p, sheet_name=sheet_name)


def read_data(paths: Union[PathLike, Sequence[PathLike]], *, sheet_name: Optional[str] = None) -> List[RawDataset]:
    if isinstance(paths, (str, os.PathLike)):
        paths = [paths]

    cache: Dict[Path, RawDataset] = {}
    out: List[RawDataset] = []
    for item in paths:
        key = Path(item).expanduser().resolve()
        if key not in cache:
            cache[key] = read_raw(item, sheet_name=sheet_name)
        out.append(cache[key])
    return out


def list_data_files(folder: PathLike, extensions: Iterable[str] = (".xlsx",)) -> List[str]:
    root = Path(folder)
    if not root.is_dir():
        return []
    exts = {str(e).lower() for e in extensions}
    return sorted(p.name for p in root.iterdir() if p.is_file() and p.suffix.lower() in exts)


def available_variables(raw: RawDataset) -> List[str]:
    header = raw.header
    start = find_column(raw, VARIABLE_MARKER_COLUMN)
    if start is not None:
        candidates = header[start + 1 :]
    else:
        candidates = header
    out: List[str] = []
    for cell in candidates:
        if not isinstance(cell, str) or not cell.strip():
            continue
        if cell.lower() == TIME_COLUMN:
            continue
        out.append(cell)
    return out


def merge_variables(datasets: Iterable[RawDataset]) -> List[str]:
    seen = set()
    for raw in datasets:
        seen.update(available_variables(raw))
    return sorted(seen)
