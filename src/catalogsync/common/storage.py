"""Local paths used by catalogsync."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "catalogsync"
HTTP_CACHE_FILENAME: Final[str] = "http-cache.sqlite"


def get_data_dir() -> Path:
    """Return the directory where catalogsync keeps local state."""

    env_dir = os.getenv("CATALOGSYNC_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()

    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_CACHE_HOME")
        base_path = Path(base) if base else (Path.home() / ".cache")

    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_http_cache_path() -> Path:
    """Return the sqlite file backing the HTTP response cache, creating its directory."""

    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / HTTP_CACHE_FILENAME
