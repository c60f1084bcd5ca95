"""Tests for the Qt-independent GUI adapter."""

from __future__ import annotations

import pytest
from matplotlib.figure import Figure

from conftest import make_grid, stamps
from inl_qt.adapters.inl_adapter import NONE_ITEM, InlAdapter


@pytest.fixture
def data_folder(tmp_path, write_xlsx):
    write_xlsx(
        "08152012_1st_ORC_Run.xlsx",
        make_grid({"asciitime": stamps(3), "ExcelTime": [1, 2, 3], "dP_Exhaust": [1, 2, 3], "dP_Eco": [3, 2, 1]}),
    )
    write_xlsx(
        "08302012_11th_ORC_Run.xlsx",
        make_grid({"asciitime": stamps(4), "ExcelTime": [1, 2, 3, 4], "dP_Exhaust": [5, 6, 7, 8], "P_Abs": [1, 1, 1, 1]}),
    )
    (tmp_path / "readme.txt").write_text("not data", encoding="utf-8")
    return tmp_path


def test_lists_workbooks(data_folder) -> None:
    adapter = InlAdapter(data_folder)
    assert adapter.files == ["08152012_1st_ORC_Run.xlsx", "08302012_11th_ORC_Run.xlsx"]
    assert adapter.variables == [NONE_ITEM]


def test_load_and_variables(data_folder) -> None:
    adapter = InlAdapter(data_folder)
    names = list(adapter.files)
    variables = adapter.apply_loaded(names, adapter.read_selected(names))

    assert variables == [NONE_ITEM, "P_Abs", "dP_Eco", "dP_Exhaust"]
    assert adapter.legend_prefixes() == ["08152012_1st_ORC_Run: ", "08302012_11th_ORC_Run: "]


def test_can_plot_requires_real_left_selection(data_folder) -> None:
    adapter = InlAdapter(data_folder)
    assert not adapter.can_plot(["dP_Eco"])

    names = adapter.files[:1]
    adapter.apply_loaded(names, adapter.read_selected(names))
    assert not adapter.can_plot([NONE_ITEM])
    assert not adapter.can_plot([])
    assert adapter.can_plot([NONE_ITEM, "dP_Eco"])


def test_plot_uses_file_prefixes(data_folder) -> None:
    adapter = InlAdapter(data_folder)
    names = list(adapter.files)
    adapter.apply_loaded(names, adapter.read_selected(names))

    fig = Figure()
    result = adapter.plot(["dP_Exhaust"], [NONE_ITEM, "dP_Eco"], overlay=True, figure=fig)

    assert result.figure is fig
    assert result.request.left.labels == ["08152012_1st_ORC_Run: dP_Exhaust", "08302012_11th_ORC_Run: dP_Exhaust"]
    assert result.request.right.labels == ["08152012_1st_ORC_Run: dP_Eco"]
    assert [w.dataset for w in result.warnings] == ["08302012_11th_ORC_Run.xlsx"]


def test_set_folder_resets_loaded_state(data_folder, tmp_path_factory) -> None:
    adapter = InlAdapter(data_folder)
    names = adapter.files[:1]
    adapter.apply_loaded(names, adapter.read_selected(names))

    empty = tmp_path_factory.mktemp("empty")
    assert adapter.set_folder(empty) == []
    assert adapter.datasets == [] and adapter.variables == [NONE_ITEM]
