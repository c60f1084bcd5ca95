"""Tests for persisted GUI preferences."""

from __future__ import annotations

import json

import pytest

from inlplot.settings import load_settings, resolve_start_folder, save_settings, settings_path


@pytest.fixture(autouse=True)
def _appdata(tmp_path, monkeypatch):
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))


def test_defaults_when_missing() -> None:
    assert load_settings() == {"last_folder": None, "overlay": False, "sort": False, "clear_figure": False}


def test_round_trip(tmp_path) -> None:
    save_settings({"last_folder": str(tmp_path), "overlay": True, "unknown": 1})
    data = json.loads(settings_path().read_text(encoding="utf-8"))
    assert "unknown" not in data

    loaded = load_settings()
    assert loaded["last_folder"] == str(tmp_path)
    assert loaded["overlay"] is True
    assert loaded["sort"] is False


def test_corrupt_file_gives_defaults() -> None:
    p = settings_path()
    p.parent.mkdir(parents=True)
    p.write_text("{not json", encoding="utf-8")
    assert load_settings()["last_folder"] is None


def test_non_object_file_gives_defaults() -> None:
    p = settings_path()
    p.parent.mkdir(parents=True)
    p.write_text("[1, 2]", encoding="utf-8")
    assert load_settings()["overlay"] is False


def test_resolve_start_folder(tmp_path) -> None:
    assert resolve_start_folder({"last_folder": str(tmp_path)}) == tmp_path
    assert resolve_start_folder({"last_folder": str(tmp_path / "gone")}, fallback=tmp_path) == tmp_path
    assert resolve_start_folder({}, fallback=tmp_path) == tmp_path
