# src/ganttdb/storage/query.py

"""
Small statement builder bound to one open connection.

Table and column names come from this package, never from user input; they
are still checked so a typo cannot turn into a different statement. Values are
always bound as parameters.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

TASK = "task"
TASK_DEPENDENCY = "taskdependency"


@dataclass(frozen=True, slots=True)
class SqlExpr:
    """Raw SQL right-hand side for a SET clause, with its own parameters."""

    sql: str
    params: tuple[Any, ...] = ()


def _ident(name: str) -> str:
    if not _IDENT.match(name):
        raise ValueError(f"invalid SQL identifier: {name!r}")
    return name


class QueryContext:
    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        logger.debug("SQL %s params=%s", " ".join(sql.split()), list(params))
        return self.connection.execute(sql, params)

    def execute_script(self, script: str) -> None:
        """Run a multi-statement script as one transaction."""
        logger.debug("SQL script (%d chars)", len(script))
        self.connection.executescript(f"BEGIN;\n{script}\nCOMMIT;")

    def insert_into(self, table: str, values: Mapping[str, Any]) -> int:
        if not values:
            raise ValueError("insert needs at least one column")
        cols = ", ".join(_ident(c) for c in values)
        placeholders = ", ".join("?" for _ in values)
        cur = self.execute(
            f"INSERT INTO {_ident(table)} ({cols}) VALUES ({placeholders})",
            list(values.values()),
        )
        return cur.rowcount

    def update(
        self,
        table: str,
        assignments: Mapping[str, Any],
        where: Mapping[str, Any],
    ) -> int:
        """
        UPDATE table SET ... WHERE col = ? AND ...

        An assignment value may be an SqlExpr; anything else is bound as a
        parameter. Returns the number of rows changed.
        """
        if not assignments:
            raise ValueError("update needs at least one assignment")
        if not where:
            raise ValueError("update needs a WHERE condition")

        fields: list[str] = []
        params: list[Any] = []
        for col, value in assignments.items():
            if isinstance(value, SqlExpr):
                fields.append(f"{_ident(col)} = {value.sql}")
                params.extend(value.params)
            else:
                fields.append(f"{_ident(col)} = ?")
                params.append(value)

        conditions: list[str] = []
        for col, value in where.items():
            conditions.append(f"{_ident(col)} = ?")
            params.append(value)

        sql = f"UPDATE {_ident(table)} SET {', '.join(fields)} WHERE {' AND '.join(conditions)}"
        return self.execute(sql, params).rowcount
