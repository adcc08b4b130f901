# tests/fakes.py

from __future__ import annotations

import sqlite3
from datetime import date
from decimal import Decimal
from typing import Any

from ganttdb.storage.connection import SqliteConnectionProvider
from ganttdb.tasks.task_models import Cost, Task, TimeDuration


class UnreachableProvider:
    """Connection provider whose store is never reachable."""

    def __init__(self) -> None:
        self.attempts = 0
        self.closed = False

    def acquire(self) -> sqlite3.Connection:
        self.attempts += 1
        raise sqlite3.OperationalError("unable to open database")

    def close(self) -> None:
        self.closed = True


class DroppingConnection:
    """
    Wraps a real connection; statements starting with one of `fail_prefixes`
    raise as if the connection had been dropped. Records every statement.
    """

    def __init__(self, conn: sqlite3.Connection, owner: "FlakyProvider") -> None:
        self._conn = conn
        self._owner = owner

    def execute(self, sql: str, params: Any = ()) -> sqlite3.Cursor:
        self._owner.statements.append((sql, tuple(params)))
        head = sql.lstrip().upper()
        if any(head.startswith(p) for p in self._owner.fail_prefixes):
            raise sqlite3.OperationalError("connection dropped")
        return self._conn.execute(sql, params)

    def executescript(self, script: str) -> sqlite3.Cursor:
        self._owner.statements.append((script, ()))
        return self._conn.executescript(script)

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._owner.open_connections -= 1
        self._conn.close()


class FlakyProvider:
    """Real in-memory store with switchable statement failures."""

    def __init__(self, inner: SqliteConnectionProvider) -> None:
        self._inner = inner
        self.fail_prefixes: tuple[str, ...] = ()
        self.statements: list[tuple[str, tuple[Any, ...]]] = []
        self.open_connections = 0

    def acquire(self) -> DroppingConnection:
        conn = self._inner.acquire()
        self.open_connections += 1
        return DroppingConnection(conn, self)

    def close(self) -> None:
        self._inner.close()

    def updates(self) -> list[tuple[str, tuple[Any, ...]]]:
        return [s for s in self.statements if s[0].lstrip().upper().startswith("UPDATE")]


def make_task(task_id: int = 1, name: str = "A", **overrides: Any) -> Task:
    fields: dict[str, Any] = dict(
        id=task_id,
        name=name,
        start=date(2024, 3, 1),
        duration=TimeDuration(5),
        cost=Cost(manual_value=Decimal(0), is_calculated=True),
    )
    fields.update(overrides)
    return Task(**fields)
