from __future__ import annotations

from pathlib import Path
import os

APP_NAME = "photoslib"


def config_root() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        base = Path(xdg)
    else:
        base = Path.home() / ".config"
    root = base / APP_NAME
    root.mkdir(parents=True, exist_ok=True)
    return root


def default_library_path() -> Path:
    return Path.home() / "Pictures" / "Photos Library.photoslibrary"


def database_path(library_path: Path) -> Path:
    return library_path / "database" / "Photos.sqlite"


def originals_root(library_path: Path) -> Path:
    return library_path / "originals"
