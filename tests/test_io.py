"""Tests for reading CSV files and workbooks into raw datasets."""

from __future__ import annotations

import numpy as np
import pytest

import inlplot.inl_io as inl_io
from conftest import make_grid, stamps
from inlplot.inl_extract import extract_data, extract_variable
from inlplot.inl_io import (
    UnsupportedFileFormatError,
    available_variables,
    list_data_files,
    list_sheets,
    merge_variables,
    read_data,
    read_raw,
)
from inlplot.inl_model import RawDataset


def _run_grid(n: int = 3):
    return make_grid(
        {
            "asciitime": stamps(n),
            "ExcelTime": [40909.0 + i for i in range(n)],
            "TC_Water_Inlet": [20.0 + i for i in range(n)],
            "dP_Eco": [0.5 * i for i in range(n)],
        },
        units=["-", "days", "C", "psi"],
    )


class TestReadRaw:
    def test_csv_keeps_header_and_units(self, write_csv) -> None:
        path = write_csv("run.csv", _run_grid())
        raw = read_raw(path)

        assert raw.name == "run.csv"
        assert raw.path == path
        assert raw.header == ["asciitime", "ExcelTime", "TC_Water_Inlet", "dP_Eco"]
        assert raw.cells[1, 2] == "C"
        assert raw.n_data_rows == 3
        np.testing.assert_array_equal(extract_variable(raw, "tc_water_inlet"), [20.0, 21.0, 22.0])

    def test_xlsx_round_trips_through_extraction(self, write_xlsx) -> None:
        path = write_xlsx("run.xlsx", _run_grid(4))
        raw = read_raw(path)

        assert raw.header[0] == "asciitime"
        res = extract_data([raw], ["dP_Eco"])
        np.testing.assert_array_equal(res.y[:, 0], [0.0, 0.5, 1.0, 1.5])

    def test_named_sheet(self, tmp_path) -> None:
        import pandas as pd

        path = tmp_path / "book.xlsx"
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame(_run_grid(2)).to_excel(writer, sheet_name="1st", header=False, index=False)
            pd.DataFrame(_run_grid(5)).to_excel(writer, sheet_name="27th", header=False, index=False)

        assert list_sheets(path) == ["1st", "27th"]
        raw = read_raw(path, sheet_name="27th")
        assert raw.sheet_name == "27th"
        assert raw.n_data_rows == 5

    def test_ragged_csv_rows(self, tmp_path) -> None:
        path = tmp_path / "ragged.csv"
        t = stamps(2)
        path.write_text(f"asciitime,A,B\n-,V\n{t[0]},1\n{t[1]},2,3\n", encoding="utf-8")

        raw = read_raw(path)
        assert raw.cells.shape == (4, 3)
        values = extract_variable(raw, "B")
        assert np.isnan(values[0]) and values[1] == 3.0

    def test_numeric_looking_headers_stay_names(self, tmp_path) -> None:
        path = tmp_path / "odd_names.csv"
        t = stamps(2)
        path.write_text(f"asciitime,1,nan,inf\n-,1,V,0\n{t[0]},1.5,2,NA\n{t[1]},2.5,,7\n", encoding="utf-8")

        raw = read_raw(path)
        assert raw.header == ["asciitime", "1", "nan", "inf"]
        assert raw.cells[1, 1] == "1"
        np.testing.assert_array_equal(extract_variable(raw, "1"), [1.5, 2.5])
        values = extract_variable(raw, "nan")
        assert values[0] == 2.0 and np.isnan(values[1])
        values = extract_variable(raw, "INF")
        assert np.isnan(values[0]) and values[1] == 7.0
        assert available_variables(raw) == ["1", "nan", "inf"]

    def test_trailing_blank_rows_are_dropped(self, tmp_path) -> None:
        path = tmp_path / "blank_tail.csv"
        t = stamps(1)
        path.write_text(f"asciitime,A\n-,V\n{t[0]},1\n,\n\n", encoding="utf-8")
        assert read_raw(path).n_data_rows == 1

    def test_unsupported_extension_checked_before_io(self, tmp_path) -> None:
        with pytest.raises(UnsupportedFileFormatError):
            read_raw(tmp_path / "does_not_exist.txt")

    def test_missing_file_propagates(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            read_raw(tmp_path / "missing.csv")

    def test_load_is_logged(self, write_csv, caplog) -> None:
        path = write_csv("logged.csv", _run_grid())
        with caplog.at_level("INFO", logger="inlplot.inl_io"):
            read_raw(path)
        assert "Loading logged.csv" in caplog.text


class TestReadData:
    def test_single_path_and_order(self, write_csv) -> None:
        a = write_csv("a.csv", _run_grid(2))
        b = write_csv("b.csv", _run_grid(3))

        assert [r.name for r in read_data(str(a))] == ["a.csv"]
        assert [r.name for r in read_data([b, a])] == ["b.csv", "a.csv"]

    def test_each_distinct_file_read_once(self, write_csv, monkeypatch) -> None:
        a = write_csv("a.csv", _run_grid(2))
        calls = []
        real = inl_io.read_raw

        def _counting(path, **kwargs):
            calls.append(path)
            return real(path, **kwargs)

        monkeypatch.setattr(inl_io, "read_raw", _counting)
        out = read_data([a, str(a), a])
        assert len(calls) == 1
        assert out[0] is out[1] is out[2]


class TestFolderHelpers:
    def test_list_data_files(self, tmp_path) -> None:
        for name in ("b.xlsx", "a.xlsx", "notes.txt", "c.csv"):
            (tmp_path / name).write_text("", encoding="utf-8")
        (tmp_path / "sub.xlsx").mkdir()

        assert list_data_files(tmp_path) == ["a.xlsx", "b.xlsx"]
        assert list_data_files(tmp_path, (".csv", ".xlsx")) == ["a.xlsx", "b.xlsx", "c.csv"]
        assert list_data_files(tmp_path / "nowhere") == []

    def test_available_variables_after_excel_time(self) -> None:
        raw = RawDataset.from_grid(_run_grid(1))
        assert available_variables(raw) == ["TC_Water_Inlet", "dP_Eco"]

    def test_available_variables_without_marker(self) -> None:
        raw = RawDataset.from_grid(make_grid({"AsciiTime": stamps(1), "A": [1], "B": [2]}))
        assert available_variables(raw) == ["A", "B"]

    def test_merge_variables(self) -> None:
        r1 = RawDataset.from_grid(make_grid({"asciitime": stamps(1), "B": [1], "A": [1]}))
        r2 = RawDataset.from_grid(make_grid({"asciitime": stamps(1), "C": [1], "A": [1]}))
        assert merge_variables([r1, r2]) == ["A", "B", "C"]
