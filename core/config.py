from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import streamlit as st

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "TARP_DASH_DATA_DIR"
SESSION_DATA_DIR_KEY = "tarp_dash_data_dir"
DEFAULT_BRANCH = "nidagundi"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    currency: str = "INR"
    default_branch: str = DEFAULT_BRANCH


def _default_data_dir() -> Path:
    return Path.home() / ".tarpaulin_dashboard"


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            return json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
    return {}


def persist_data_dir(data_dir_str: str, *, default_dir: Optional[Path] = None) -> Path:
    """
    Remember a data directory choice in the default folder's settings.json,
    which is where resolve_settings() looks for it on the next start.
    """
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    home = default_dir or _default_data_dir()
    home.mkdir(parents=True, exist_ok=True)
    payload = {"data_dir": str(data_dir)}
    (home / CONFIG_FILE_NAME).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return data_dir


def resolve_settings(data_dir: Optional[str | Path] = None, *, session_dir: Optional[str] = None) -> Settings:
    # Priority order:
    # 1) Explicit argument (scripts / tests)
    # 2) Session state (set via Data Management page)
    # 3) Environment variable
    # 4) Persisted settings in default folder
    # 5) Default folder
    if data_dir is not None:
        resolved = Path(data_dir).expanduser().resolve()
    elif session_dir:
        resolved = Path(session_dir).expanduser().resolve()
    elif os.getenv(ENV_DATA_DIR):
        resolved = Path(os.getenv(ENV_DATA_DIR, "")).expanduser().resolve()
    else:
        default_dir = _default_data_dir()
        persisted = _load_persisted_settings(default_dir)
        resolved = Path(persisted.get("data_dir", default_dir)).expanduser().resolve()

    resolved.mkdir(parents=True, exist_ok=True)
    return Settings(data_dir=resolved, db_path=resolved / "app.db")


@st.cache_resource
def _cached_settings(session_dir: Optional[str]) -> Settings:
    return resolve_settings(session_dir=session_dir)


def get_settings() -> Settings:
    return _cached_settings(st.session_state.get(SESSION_DATA_DIR_KEY))
