"""
Persistence of a project's task graph in a relational store.

Components:
- core/errors.py: ProjectDatabaseError and its variants
- core/ports.py: ProjectDatabase / TaskUpdateBuilder protocols
- tasks/task_models.py: the task and dependency values that get persisted
- storage/: SQLite connection provider, statement executor, writer and
  the task update builder
"""

from .core.errors import (
    DatabaseConnectionError,
    DatabaseOperationError,
    InitScriptNotFoundError,
    ProjectDatabaseError,
)
from .storage.sql_database import SqlProjectDatabase
from .storage.update_builder import SqlTaskUpdateBuilder

__all__ = [
    "DatabaseConnectionError",
    "DatabaseOperationError",
    "InitScriptNotFoundError",
    "ProjectDatabaseError",
    "SqlProjectDatabase",
    "SqlTaskUpdateBuilder",
]
