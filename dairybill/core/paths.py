from __future__ import annotations

import sys
from pathlib import Path


def is_frozen() -> bool:
    return bool(getattr(sys, "frozen", False))


def project_root() -> Path:
    """Return the directory that holds the bundled `assets/` folder.

    - In a PyInstaller onefile build, assets are extracted to sys._MEIPASS.
    - In dev, this is the repository root (…/dairybill/..).
    """
    if is_frozen():
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass)
    return Path(__file__).resolve().parents[2]


def resource_path(rel: str | Path) -> Path:
    """Resolve a bundled resource such as 'assets/Logo.png'. Absolute paths pass through."""
    rel = Path(rel)
    if rel.is_absolute():
        return rel
    return project_root() / rel


def settings_path() -> Path:
    """Location of settings.json: next to the executable when frozen, else the repo root."""
    if is_frozen():
        return Path(sys.executable).resolve().parent / "settings.json"
    return project_root() / "settings.json"
