# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ganttdb.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", (), None)


@pytest.mark.parametrize(
    "name, level, shown",
    [
        ("ganttdb.storage.query", logging.DEBUG, False),
        ("ganttdb.storage.query", logging.INFO, True),
        ("ganttdb.storage.executor", logging.DEBUG, True),
        ("ganttdb", logging.DEBUG, True),
        ("ganttdbx", logging.WARNING, False),
        ("py.warnings", logging.WARNING, False),
        ("urllib3", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown


def test_setup_logging_installs_console_and_file(tmp_path: Path, restore_logging: None) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)

    assert log_file == tmp_path / "logs" / "ganttdb.log"
    handlers = logging.getLogger().handlers
    assert len(handlers) == 2
    console = next(h for h in handlers if not isinstance(h, logging.FileHandler))
    store_log = next(h for h in handlers if isinstance(h, logging.FileHandler))
    assert console.level == logging.WARNING
    assert any(isinstance(f, _ConsoleNoiseFilter) for f in console.filters)
    assert store_log.level == logging.DEBUG


def test_statement_tracing_reaches_the_file(tmp_path: Path, restore_logging: None) -> None:
    log_file = setup_logging(log_dir=tmp_path)
    logging.getLogger("ganttdb.storage.query").debug("SQL SELECT 1 params=[]")
    assert "SQL SELECT 1" in log_file.read_text(encoding="utf-8")


def test_setup_logging_replaces_previous_handlers(tmp_path: Path, restore_logging: None) -> None:
    setup_logging(log_dir=tmp_path / "first")
    setup_logging(log_dir=tmp_path / "second")
    files = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
    assert [Path(h.baseFilename).parent.name for h in files] == ["second"]
