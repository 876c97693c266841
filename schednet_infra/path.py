# schednet_infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "SchedNet"


def user_data_dir() -> Path:
    """
    Per-user data directory for the database file and logs:

    Windows: %APPDATA%\\SchedNet
    macOS:   ~/Library/Application Support/SchedNet
    Linux:   $XDG_DATA_HOME/SchedNet (default ~/.local/share/SchedNet)
    """
    if sys.platform.startswith("win"):
        base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))

    path = base / APP_NAME
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        path = Path.home() / f".{APP_NAME.lower()}"
        path.mkdir(parents=True, exist_ok=True)
    return path


def default_db_path() -> Path:
    return user_data_dir() / "schednet.db"


def default_db_url() -> str:
    """SCHEDNET_DB_URL if set, otherwise a SQLite file under the user data dir."""
    url = os.getenv("SCHEDNET_DB_URL", "").strip()
    if url:
        return url
    return f"sqlite:///{default_db_path().as_posix()}"
