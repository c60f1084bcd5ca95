from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Any, Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from inlplot.inl_model import (
    FIRST_DATA_ROW,
    TIME_COLUMN,
    ConfigurationError,
    ExtractionResult,
    ExtractionWarning,
    ExtractOptions,
    MalformedDataError,
    RawDataset,
    as_name_list,
)


_logger = logging.getLogger(__name__)

ASCIITIME_FORMAT = "%a %b %d %H:%M:%S %Y"
# Same origin as matplotlib's default date epoch, so the values plot as dates.
TIME_EPOCH = pd.Timestamp("1970-01-01")

VARIABLE_NOT_FOUND = "variable_not_found"


class MalformedTimestampError(ValueError):
    pass


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def find_column(raw: RawDataset, name: str) -> Optional[int]:
    key = str(name).lower()
    for idx, cell in enumerate(raw.header):
        if isinstance(cell, str) and cell.lower() == key:
            return idx
    return None


def extract_variable(raw: RawDataset, name: str) -> np.ndarray:
    """Return the data rows of column ``name`` (case-insensitive) as floats.

    An absent column yields an empty array. Empty cells become NaN; any other
    non-numeric cell raises ``MalformedDataError``.
    """
    idx = find_column(raw, name)
    if idx is None:
        return np.asarray([], dtype=float)

    cells = pd.Series(raw.cells[FIRST_DATA_ROW:, idx], dtype=object)
    values = pd.to_numeric(cells, errors="coerce")
    bad = values.isna().to_numpy() & ~cells.map(_is_blank).to_numpy(dtype=bool)
    if bad.any():
        pos = int(np.flatnonzero(bad)[0])
        raise MalformedDataError(
            f"Non-numeric value {cells.iloc[pos]!r} for '{name}' in {raw.label} "
            f"(row {pos + FIRST_DATA_ROW + 1})."
        )
    return values.to_numpy(dtype=float)


def parse_timestamps(values: Iterable[Any]) -> np.ndarray:
    """Parse 'Mon Jan 02 03:04:05 2012' strings into days since 1970-01-01."""
    cells = pd.Series(list(values), dtype=object)
    if cells.empty:
        return np.asarray([], dtype=float)

    text = cells.map(lambda v: v.strip() if isinstance(v, str) else None)
    parsed = pd.to_datetime(text, format=ASCIITIME_FORMAT, errors="coerce")
    bad = parsed.isna().to_numpy()
    if bad.any():
        pos = int(np.flatnonzero(bad)[0])
        raise MalformedTimestampError(
            f"Timestamp {cells.iloc[pos]!r} at position {pos + 1} does not match '{ASCIITIME_FORMAT}'."
        )
    return ((parsed - TIME_EPOCH) / pd.Timedelta(days=1)).to_numpy(dtype=float)


def dataset_time(raw: RawDataset, *, overlay: bool = False) -> np.ndarray:
    idx = find_column(raw, TIME_COLUMN)
    if idx is None:
        raise MalformedTimestampError(f"No '{TIME_COLUMN}' column in {raw.label}.")
    try:
        x = parse_timestamps(raw.cells[FIRST_DATA_ROW:, idx])
    except MalformedTimestampError as exc:
        raise MalformedTimestampError(f"{raw.label}: {exc}") from exc
    if overlay and x.size:
        x = x - x[0]
    return x


def pack(series: Sequence[Sequence[float]]) -> np.ndarray:
    """Stack variable-length series as columns, padding short ones with NaN."""
    cols = [np.asarray(s, dtype=float).ravel() for s in series]
    height = max((c.size for c in cols), default=0)
    out = np.full((height, len(cols)), np.nan, dtype=float)
    for i, c in enumerate(cols):
        out[: c.size, i] = c
    return out


def _resolve_options(options: Optional[ExtractOptions], overrides: dict) -> ExtractOptions:
    known = {f.name for f in fields(ExtractOptions)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigurationError(f"Unknown extraction option(s): {', '.join(unknown)}")
    if options is None:
        return ExtractOptions(**overrides)
    if overrides:
        return replace(options, **overrides)
    return options


def extract_data(
    datasets: Union[RawDataset, Sequence[RawDataset]],
    variables: Union[str, Sequence[str]],
    options: Optional[ExtractOptions] = None,
    **overrides: Any,
) -> ExtractionResult:
    """Pull ``variables`` out of every dataset and pack them for plotting.

    Columns are ordered dataset by dataset, variable by variable. Variables
    missing from a dataset are skipped and reported in ``warnings``.
    """
    opts = _resolve_options(options, overrides)
    raws: List[RawDataset] = [datasets] if isinstance(datasets, RawDataset) else list(datasets)
    names = as_name_list(variables)

    xs: List[np.ndarray] = []
    ys: List[np.ndarray] = []
    labels: List[str] = []
    events: List[ExtractionWarning] = []
    if not raws or not names:
        return ExtractionResult(x=pack(xs), y=pack(ys), labels=labels, warnings=events)

    for r, raw in enumerate(raws):
        x = dataset_time(raw, overlay=opts.overlay)
        order = np.argsort(x, kind="stable") if opts.sort else None

        for name in names:
            y = extract_variable(raw, name)
            if y.size == 0:
                event = ExtractionWarning(
                    kind=VARIABLE_NOT_FOUND,
                    dataset=raw.label,
                    variable=name,
                    message=f"Variable {name} not found in {raw.label}.",
                )
                _logger.warning("%s", event.message)
                events.append(event)
                continue

            if order is not None:
                xs.append(x[order])
                ys.append(y[order])
            else:
                xs.append(x.copy())
                ys.append(y)
            labels.append(opts.label_for(r, len(raws), name))

    return ExtractionResult(x=pack(xs), y=pack(ys), labels=labels, warnings=events)
