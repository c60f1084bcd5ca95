from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional


# Keep this stable; used for %APPDATA%\<APP_SETTINGS_DIRNAME>\settings.json
APP_SETTINGS_DIRNAME = "INL plot"
SETTINGS_FILENAME = "settings.json"


def _defaults() -> Dict[str, Any]:
    return {
        "last_folder": None,
        "overlay": False,
        "sort": False,
        "clear_figure": False,
    }


def _appdata_dir() -> Path:
    # Windows: %APPDATA% (Roaming)
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata)

    home = Path.home()
    candidate = home / "AppData" / "Roaming"
    return candidate if candidate.exists() else home


def settings_dir() -> Path:
    return _appdata_dir() / APP_SETTINGS_DIRNAME


def settings_path() -> Path:
    return settings_dir() / SETTINGS_FILENAME


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Dict[str, Any]:
    """Load persistent GUI preferences.

    Returns a dict with:
        - last_folder: str | None
        - overlay, sort, clear_figure: bool (last state of the check boxes)

    A missing or unreadable file yields the defaults.
    """
    out = _defaults()
    p = settings_path()
    try:
        if not p.is_file():
            return out
        data = json.loads(p.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings.json must be an object")
    except (OSError, ValueError):
        return out

    folder = data.get("last_folder")
    out["last_folder"] = None if folder in (None, "") or not isinstance(folder, str) else folder
    for k in ("overlay", "sort", "clear_figure"):
        out[k] = _as_bool(data.get(k), out[k])
    return out


def save_settings(settings: Dict[str, Any]) -> None:
    """Persist settings to %APPDATA%\\<APP_SETTINGS_DIRNAME>\\settings.json."""
    p = settings_path()
    p.parent.mkdir(parents=True, exist_ok=True)

    src = settings or {}
    safe = _defaults()
    folder = src.get("last_folder")
    safe["last_folder"] = None if folder in (None, "") else str(folder)
    for k in ("overlay", "sort", "clear_figure"):
        safe[k] = _as_bool(src.get(k), safe[k])

    p.write_text(json.dumps(safe, ensure_ascii=False, indent=2), encoding="utf-8")


def resolve_start_folder(settings: Dict[str, Any], fallback: Optional[Path] = None) -> Path:
    """The remembered folder if it still exists, else ``fallback`` (cwd)."""
    folder = (settings or {}).get("last_folder")
    if folder:
        p = Path(str(folder))
        if p.is_dir():
            return p
    return Path(fallback) if fallback is not None else Path.cwd()
