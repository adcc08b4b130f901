# tests/conftest.py

from __future__ import annotations

import logging
import sqlite3
import uuid
from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from ganttdb.storage.connection import SqliteConnectionProvider
from ganttdb.storage.sql_database import SqlProjectDatabase


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with cli/bootstrap.

    We intentionally use a SimpleNamespace rather than reading the
    environment, to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="ganttdb-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        database_url=f"mem:test-{uuid.uuid4().hex}",
        connect_timeout=1.0,
        init_script="sql/init-project-database.sql",
    )


@pytest.fixture()
def provider() -> Iterator[SqliteConnectionProvider]:
    """A fresh, uniquely named in-memory store per test."""
    p = SqliteConnectionProvider(f"mem:test-{uuid.uuid4().hex}")
    yield p
    p.close()


@pytest.fixture()
def db(provider: SqliteConnectionProvider) -> SqlProjectDatabase:
    database = SqlProjectDatabase(provider)
    database.init()
    return database


@pytest.fixture()
def fetch_task(provider: SqliteConnectionProvider):
    """Raw read of one TASK row (None when missing)."""

    def _fetch(task_id: int) -> sqlite3.Row | None:
        with provider.connection() as conn:
            return conn.execute("SELECT * FROM task WHERE id = ?", (task_id,)).fetchone()

    return _fetch


@pytest.fixture()
def restore_logging() -> Iterator[None]:
    """Undo setup_logging(): drop its handlers and put the previous ones back."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for h in list(root.handlers):
        if h not in saved_handlers:
            root.removeHandler(h)
            h.close()
    for h in saved_handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(saved_level)
    logging.captureWarnings(False)
