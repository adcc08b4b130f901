# src/ganttdb/core/errors.py

"""
Errors surfaced by the project database.

Callers catch ProjectDatabaseError. The subclasses keep the failure context
as data so code can branch on it without parsing messages:
- DatabaseConnectionError: the store could not be reached at all,
- DatabaseOperationError: a statement (or the init script) failed,
- InitScriptNotFoundError: the bundled init script is missing.
"""

from __future__ import annotations


class ProjectDatabaseError(Exception):
    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class DatabaseConnectionError(ProjectDatabaseError):
    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__("Failed to connect to the database", cause)


class DatabaseOperationError(ProjectDatabaseError):
    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        *,
        operation: str = "query",
        task_ids: tuple[int, ...] = (),
    ) -> None:
        super().__init__(message, cause)
        self.operation = operation
        self.task_ids = task_ids


class InitScriptNotFoundError(ProjectDatabaseError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Init script not found: {path}")
        self.path = path
