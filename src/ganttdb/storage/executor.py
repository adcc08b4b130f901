# src/ganttdb/storage/executor.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Callable, Iterator
from typing import TypeVar

from ..core.errors import DatabaseConnectionError, DatabaseOperationError
from ..core.ports import ConnectionProvider
from .query import QueryContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _default_error_message() -> str:
    return "Failed to execute query"


class StatementExecutor:
    """
    Runs one unit of work against a freshly acquired connection.

    Two failure tiers:
    - the connection cannot be acquired -> DatabaseConnectionError,
    - the operation raises -> DatabaseOperationError(error_message()).
    The connection is committed on success, rolled back on failure and closed
    on every path.

    Inside transaction() all work shares one pinned connection and commits
    once at the end. The pinned connection is per thread: other threads keep
    getting their own connection per call while a transaction is open.
    """

    def __init__(self, provider: ConnectionProvider) -> None:
        self._provider = provider
        self._local = threading.local()

    @property
    def _pinned(self) -> sqlite3.Connection | None:
        return getattr(self._local, "conn", None)

    @property
    def in_transaction(self) -> bool:
        """True when the calling thread is inside transaction()."""
        return self._pinned is not None

    def _acquire(self) -> sqlite3.Connection:
        try:
            return self._provider.acquire()
        except Exception as exc:
            raise DatabaseConnectionError(exc) from exc

    def run(
        self,
        body: Callable[[QueryContext], T],
        error_message: Callable[[], str] = _default_error_message,
        *,
        operation: str = "query",
        task_ids: tuple[int, ...] = (),
    ) -> T:
        pinned = self._pinned
        if pinned is not None:
            try:
                return body(QueryContext(pinned))
            except Exception as exc:
                raise DatabaseOperationError(
                    error_message(), exc, operation=operation, task_ids=task_ids
                ) from exc

        conn = self._acquire()
        try:
            try:
                result = body(QueryContext(conn))
                conn.commit()
                return result
            except Exception as exc:
                with contextlib.suppress(sqlite3.Error):
                    conn.rollback()
                raise DatabaseOperationError(
                    error_message(), exc, operation=operation, task_ids=task_ids
                ) from exc
        finally:
            conn.close()

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        if self._pinned is not None:
            # nested block joins the outer transaction
            yield
            return

        conn = self._acquire()
        self._local.conn = conn
        try:
            try:
                yield
            except BaseException:
                with contextlib.suppress(sqlite3.Error):
                    conn.rollback()
                logger.debug("Transaction rolled back")
                raise
            try:
                conn.commit()
            except sqlite3.Error as exc:
                raise DatabaseOperationError(
                    "Failed to commit transaction", exc, operation="transaction"
                ) from exc
            logger.debug("Transaction committed")
        finally:
            self._local.conn = None
            conn.close()
