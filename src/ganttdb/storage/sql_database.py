# src/ganttdb/storage/sql_database.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterable, Iterator
from importlib import resources

from ..core.errors import DatabaseOperationError, InitScriptNotFoundError
from ..core.ports import ConnectionProvider, TaskUpdateBuilder
from ..tasks.task_models import Task, TaskDependency
from .connection import SqliteConnectionProvider
from .executor import StatementExecutor
from .query import TASK, TASK_DEPENDENCY, QueryContext
from .update_builder import SqlTaskUpdateBuilder
from .values import task_columns

logger = logging.getLogger(__name__)

IN_MEMORY_URL = "mem:gantt-project-state;DB_CLOSE_DELAY=-1"
DB_INIT_SCRIPT_PATH = "sql/init-project-database.sql"
SHUTDOWN_STATEMENT = "PRAGMA optimize"


class SqlProjectDatabase:
    """
    SQL persistence of the project task graph (tasks + dependencies).

    Every public operation acquires its own connection and releases it before
    returning; there is no atomicity across calls unless they run inside
    transaction(). Dependencies must be inserted after both of their tasks.
    """

    def __init__(
        self,
        provider: ConnectionProvider,
        *,
        init_script_path: str = DB_INIT_SCRIPT_PATH,
    ) -> None:
        self._provider = provider
        self._executor = StatementExecutor(provider)
        self._init_script_path = init_script_path

    @classmethod
    def create_in_memory_database(cls, url: str = IN_MEMORY_URL) -> SqlProjectDatabase:
        return cls(SqliteConnectionProvider(url))

    # ---- low-level helpers ----

    @contextlib.contextmanager
    def _scoped_connection(self, message: str, operation: str) -> Iterator[sqlite3.Connection]:
        """Fresh connection where any failure, connecting included, means `message`."""
        try:
            conn = self._provider.acquire()
        except Exception as exc:
            raise DatabaseOperationError(message, exc, operation=operation) from exc
        try:
            yield conn
            conn.commit()
        except Exception as exc:
            with contextlib.suppress(sqlite3.Error):
                conn.rollback()
            raise DatabaseOperationError(message, exc, operation=operation) from exc
        finally:
            conn.close()

    def _read_init_script(self) -> str:
        script = resources.files("ganttdb").joinpath(self._init_script_path)
        if not script.is_file():
            raise InitScriptNotFoundError(self._init_script_path)
        try:
            return script.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DatabaseOperationError("Failed to init the database", exc, operation="init") from exc

    # ---- public API ----

    def init(self) -> None:
        """Create the schema. Meant for a fresh store: a second run fails."""
        queries = self._read_init_script()
        with self._scoped_connection("Failed to init the database", "init") as conn:
            QueryContext(conn).execute_script(queries)
        logger.info("Project database initialized script=%s", self._init_script_path)

    def create_task_update_builder(self, task: Task) -> TaskUpdateBuilder:
        return SqlTaskUpdateBuilder(task, self._executor)

    def insert_task(self, task: Task) -> None:
        values = task_columns(task)
        self._executor.run(
            lambda q: q.insert_into(TASK, values),
            lambda: f"Failed to insert task {task.id}",
            operation="insert_task",
            task_ids=(int(task.id),),
        )
        logger.debug("Task inserted task_id=%s", task.id)

    def insert_task_dependency(self, task_dependency: TaskDependency) -> None:
        dep = task_dependency
        values = {
            "dependee_id": int(dep.dependee_id),
            "dependant_id": int(dep.dependant_id),
            "type": dep.constraint_type.persistent_value,
            "lag": int(dep.difference),
            "hardness": dep.hardness.identifier,
        }
        self._executor.run(
            lambda q: q.insert_into(TASK_DEPENDENCY, values),
            lambda: f"Failed to insert task dependency {dep.dependee_id} -> {dep.dependant_id}",
            operation="insert_task_dependency",
            task_ids=(int(dep.dependee_id), int(dep.dependant_id)),
        )
        logger.debug("Dependency inserted %s -> %s", dep.dependee_id, dep.dependant_id)

    def transaction(self) -> contextlib.AbstractContextManager[None]:
        """
        Group writes into one transaction:

            with db.transaction():
                db.insert_task(a)
                db.insert_task(b)
                db.insert_task_dependency(dep)

        Commits once when the block ends, rolls everything back if it raises.
        """
        return self._executor.transaction()

    def insert_tasks(
        self,
        tasks: Iterable[Task],
        dependencies: Iterable[TaskDependency] = (),
    ) -> None:
        """Insert tasks, then dependencies, all or nothing."""
        with self.transaction():
            n_tasks = 0
            for task in tasks:
                self.insert_task(task)
                n_tasks += 1
            n_deps = 0
            for dep in dependencies:
                self.insert_task_dependency(dep)
                n_deps += 1
        logger.info("Batch inserted tasks=%s dependencies=%s", n_tasks, n_deps)

    def table_names(self) -> list[str]:
        """Names of the tables currently in the store, sorted."""
        return self._executor.run(
            lambda q: [
                row[0]
                for row in q.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
                ).fetchall()
            ],
            lambda: "Failed to list tables",
            operation="table_names",
        )

    def shutdown(self) -> None:
        if self._executor.in_transaction:
            raise DatabaseOperationError(
                "Failed to shutdown the database: a transaction is still open",
                operation="shutdown",
            )
        with self._scoped_connection("Failed to shutdown the database", "shutdown") as conn:
            conn.execute(SHUTDOWN_STATEMENT)
        self._provider.close()
        logger.info("Project database shut down")
