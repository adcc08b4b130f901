# src/ganttdb/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) of the persistence layer.

The application depends on these Protocols, not on the SQLite classes, so a
different store can be plugged in and tests can use fakes.
"""

import sqlite3
from collections.abc import Iterable
from contextlib import AbstractContextManager
from datetime import date
from typing import Any, Protocol

from ..tasks.task_models import Color, Priority, ShapePaint, Task, TaskDependency, TimeDuration


class ConnectionProvider(Protocol):
    def acquire(self) -> sqlite3.Connection: ...
    def close(self) -> None: ...


class TaskUpdateBuilder(Protocol):
    """Accumulates changes to one task; execute() writes them as one UPDATE."""

    def set_name(self, name: str | None) -> None: ...
    def set_milestone(self, is_milestone: bool) -> None: ...
    def set_priority(self, priority: Priority | None) -> None: ...
    def set_start(self, start: date | None) -> None: ...
    def set_end(self, end: date | None) -> None: ...
    def set_duration(self, length: TimeDuration | None) -> None: ...
    def shift(self, shift: TimeDuration | None) -> None: ...
    def set_completion_percentage(self, percentage: int) -> None: ...
    def set_shape(self, shape: ShapePaint | None) -> None: ...
    def set_color(self, color: Color | None) -> None: ...
    def set_web_link(self, web_link: str | None) -> None: ...
    def set_notes(self, notes: str | None) -> None: ...
    def add_notes(self, notes: str | None) -> None: ...
    def set_expand(self, expand: bool) -> None: ...
    def set_critical(self, critical: bool) -> None: ...
    def set_task_info(self, task_info: Any | None) -> None: ...
    def set_project_task(self, project_task: bool) -> None: ...
    def execute(self) -> None: ...


class ProjectDatabase(Protocol):
    def init(self) -> None: ...
    def create_task_update_builder(self, task: Task) -> TaskUpdateBuilder: ...
    def insert_task(self, task: Task) -> None: ...
    def insert_task_dependency(self, task_dependency: TaskDependency) -> None: ...
    def insert_tasks(
            self,
            tasks: Iterable[Task],
            dependencies: Iterable[TaskDependency] = (),
    ) -> None: ...
    def transaction(self) -> AbstractContextManager[None]: ...
    def table_names(self) -> list[str]: ...
    def shutdown(self) -> None: ...
