# src/ganttdb/storage/update_builder.py

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from ..tasks.task_models import Color, Priority, ShapePaint, Task, TimeDuration
from .executor import StatementExecutor
from .query import TASK, SqlExpr
from .values import (
    add_days,
    days_between,
    externalized_color,
    externalized_notes,
    externalized_shape,
    externalized_web_link,
    to_local_date,
)

logger = logging.getLogger(__name__)


class SqlTaskUpdateBuilder:
    """
    Collects column changes for one task and writes them as a single UPDATE.

    Setters only record the change; nothing touches the store until execute().
    execute() sends one statement filtered by the task id (or nothing, when no
    change is pending) and always clears the pending changes afterwards, also
    when the statement fails.

    A builder is bound to one task for its lifetime and must be used from a
    single thread.
    """

    def __init__(self, task: Task, executor: StatementExecutor) -> None:
        self._task = task
        self._task_id = int(task.id)
        self._executor = executor
        self._pending: dict[str, Any] = {}
        self._pending_end: date | None = None

    @property
    def task_id(self) -> int:
        return self._task_id

    @property
    def pending_columns(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def _next_step(self, column: str, value: Any) -> None:
        self._pending[column] = value

    def _effective_start(self) -> date:
        pending = self._pending.get("start_date")
        if isinstance(pending, str):
            return date.fromisoformat(pending)
        return self._task.start

    def execute(self) -> None:
        try:
            if not self._pending:
                return
            assignments = dict(self._pending)
            if self._pending_end is not None:
                assignments["duration"] = days_between(self._effective_start(), self._pending_end)
            changed = self._executor.run(
                lambda q: q.update(TASK, assignments, {"id": self._task_id}),
                lambda: "Failed to execute update",
                operation="update",
                task_ids=(self._task_id,),
            )
            logger.debug(
                "Task update task_id=%s columns=%s rows=%s",
                self._task_id,
                ",".join(assignments),
                changed,
            )
        finally:
            self._pending.clear()
            self._pending_end = None

    # ---- mutators ----

    def set_name(self, name: str | None) -> None:
        self._next_step("name", name)

    def set_milestone(self, is_milestone: bool) -> None:
        self._next_step("is_milestone", bool(is_milestone))

    def set_priority(self, priority: Priority | None) -> None:
        if priority is None:
            return
        self._next_step("priority", Priority(priority).persistent_value)

    def set_start(self, start: date | None) -> None:
        if start is None:
            return
        self._next_step("start_date", to_local_date(start))

    def set_end(self, end: date | None) -> None:
        """Stored as the duration from the start to end, resolved in execute()."""
        if end is None:
            return
        self._pending_end = end
        # placeholder keeps the column order; execute() fills in the days
        self._next_step("duration", None)

    def set_duration(self, length: TimeDuration | None) -> None:
        if length is None:
            return
        self._pending_end = None
        self._next_step("duration", int(length.length))

    def shift(self, shift: TimeDuration | None) -> None:
        if shift is None:
            return
        shifted = add_days(self._effective_start(), shift.length)
        self._next_step("start_date", to_local_date(shifted))

    def set_completion_percentage(self, percentage: int) -> None:
        self._next_step("completion", int(percentage))

    def set_shape(self, shape: ShapePaint | None) -> None:
        self._next_step("shape", externalized_shape(shape))

    def set_color(self, color: Color | None) -> None:
        self._next_step("color", externalized_color(color))

    def set_web_link(self, web_link: str | None) -> None:
        self._next_step("web_link", externalized_web_link(web_link))

    def set_notes(self, notes: str | None) -> None:
        self._next_step("notes", externalized_notes(notes))

    def add_notes(self, notes: str | None) -> None:
        """Append to the pending notes, or to the stored notes if none are pending."""
        if not notes:
            return
        if "notes" not in self._pending:
            self._next_step("notes", SqlExpr("COALESCE(notes, '') || ?", (notes,)))
            return
        pending = self._pending["notes"]
        if isinstance(pending, SqlExpr):
            self._next_step("notes", SqlExpr(f"{pending.sql} || ?", (*pending.params, notes)))
        else:
            self._next_step("notes", (pending or "") + notes)

    def set_expand(self, expand: bool) -> None:
        self._next_step("is_expanded", bool(expand))

    def set_critical(self, critical: bool) -> None:
        self._next_step("is_critical", bool(critical))

    def set_task_info(self, task_info: Any | None) -> None:
        self._next_step("task_info", None if task_info is None else str(task_info))

    def set_project_task(self, project_task: bool) -> None:
        self._next_step("is_project_task", bool(project_task))
