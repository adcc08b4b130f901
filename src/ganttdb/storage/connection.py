# src/ganttdb/storage/connection.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Iterator
from datetime import date
from decimal import Decimal
from pathlib import Path

logger = logging.getLogger(__name__)

MEM_PREFIX = "mem:"
FILE_PREFIX = "file:"

# Declared column types with their own converters. DECIMAL_TEXT has TEXT
# affinity, so the stored decimal string is never coerced to REAL/INTEGER.
DECIMAL_TYPE = "DECIMAL_TEXT"
DATE_TYPE = "DATE"


def _decode_decimal(raw: bytes) -> Decimal:
    return Decimal(raw.decode("ascii"))


def _decode_date(raw: bytes) -> date:
    return date.fromisoformat(raw.decode("ascii"))


def register_column_codecs() -> None:
    """Install the Decimal/date codecs. sqlite3 keeps them process-wide; idempotent."""
    sqlite3.register_adapter(Decimal, str)
    sqlite3.register_converter(DECIMAL_TYPE, _decode_decimal)
    sqlite3.register_converter(DATE_TYPE, _decode_date)


class SqliteConnectionProvider:
    """
    Hands out short-lived SQLite connections for one store address.

    Addresses:
    - "mem:<name>" -- named in-memory store shared by every connection of this
      process. A keep-alive connection holds it open until close(), so closing
      a work connection never drops data. "mem:<name>;DB_CLOSE_DELAY=0" skips
      the keep-alive (the store dies with its last connection).
    - "file:<path>" or a bare path -- file-backed store.

    Every connection has foreign keys enabled and sqlite3.Row rows.
    DECIMAL_TEXT columns read back as Decimal, DATE columns as date.
    """

    def __init__(self, url: str, *, timeout: float = 30.0) -> None:
        self._url = url
        self._timeout = float(timeout)
        self._lock = threading.Lock()
        self._keepalive: sqlite3.Connection | None = None
        register_column_codecs()

        location, options = self._parse(url)
        if location.startswith(MEM_PREFIX):
            name = location[len(MEM_PREFIX):].strip()
            if not name:
                raise ValueError(f"in-memory store needs a name: {url!r}")
            self._target = f"file:{name}?mode=memory&cache=shared"
            self._is_memory = True
            self._keep_open = options.get("DB_CLOSE_DELAY", "-1") == "-1"
            self._db_path: Path | None = None
        else:
            raw = location[len(FILE_PREFIX):] if location.startswith(FILE_PREFIX) else location
            self._db_path = Path(raw).expanduser()
            self._target = str(self._db_path)
            self._is_memory = False
            self._keep_open = False

    @staticmethod
    def _parse(url: str) -> tuple[str, dict[str, str]]:
        location, *rest = url.split(";")
        options: dict[str, str] = {}
        for part in rest:
            key, _, value = part.partition("=")
            if key.strip():
                options[key.strip().upper()] = value.strip()
        return location.strip(), options

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_in_memory(self) -> bool:
        return self._is_memory

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self._target,
            timeout=self._timeout,
            uri=self._is_memory,
            check_same_thread=False,
            detect_types=sqlite3.PARSE_DECLTYPES,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def acquire(self) -> sqlite3.Connection:
        """Open a new connection. Raises sqlite3.Error / OSError on failure."""
        if self._is_memory and self._keep_open:
            with self._lock:
                if self._keepalive is None:
                    self._keepalive = self._open()
                    logger.info("In-memory store opened url=%s", self._url)
        elif self._db_path is not None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        return self._open()

    @contextlib.contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Scoped connection: commit on success, rollback on error, always close."""
        conn = self.acquire()
        try:
            yield conn
            conn.commit()
        except BaseException:
            with contextlib.suppress(sqlite3.Error):
                conn.rollback()
            raise
        finally:
            conn.close()

    def close(self) -> None:
        """Release the keep-alive connection; an in-memory store is dropped."""
        with self._lock:
            keepalive, self._keepalive = self._keepalive, None
        if keepalive is not None:
            keepalive.close()
            logger.info("In-memory store released url=%s", self._url)
