# src/ganttdb/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole process.
- Components take settings (or plain arguments) explicitly; only the
  composition root calls get_settings().
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "GANTTDB"

DEFAULT_DATABASE_URL = "mem:gantt-project-state"
DEFAULT_INIT_SCRIPT = "sql/init-project-database.sql"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Store ----
    database_url: str
    connect_timeout: float
    init_script: str

    @staticmethod
    def from_env() -> "Settings":
        load_dotenv(find_dotenv(usecwd=True), override=False)

        app_name = _env(_k("APP_NAME"), "ganttdb").strip() or "ganttdb"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/ganttdb"))

        database_url = _env(_k("DATABASE_URL"), DEFAULT_DATABASE_URL).strip() or DEFAULT_DATABASE_URL
        connect_timeout = max(0.0, _env_float(_k("CONNECT_TIMEOUT"), 30.0))
        init_script = _env(_k("INIT_SCRIPT"), DEFAULT_INIT_SCRIPT).strip() or DEFAULT_INIT_SCRIPT

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            database_url=database_url,
            connect_timeout=connect_timeout,
            init_script=init_script,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
