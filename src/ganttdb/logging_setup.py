# src/ganttdb/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Per-statement tracing; the log file keeps it, the console does not.
_STATEMENT_LOGGERS = ("ganttdb.storage.query",)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - SQL statement tracing (ganttdb.storage.query) only at INFO+
    - other ganttdb logs pass (the handler level still applies)
    - Python warnings (captured as 'py.warnings') and other libraries only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name in _STATEMENT_LOGGERS:
            return record.levelno >= logging.INFO
        if record.name == "ganttdb" or record.name.startswith("ganttdb."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/ganttdb",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console gets the filtered stream at console_level; <log_dir>/ganttdb.log
    gets everything from file_level, SQL statements included.

    Replaces any handlers already on the root logger. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "ganttdb.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    store_log = logging.FileHandler(str(log_file), encoding="utf-8")
    store_log.setLevel(file_level)
    store_log.setFormatter(fmt)
    root.addHandler(store_log)

    logging.captureWarnings(True)
    return log_file
