# src/ganttdb/storage/values.py

"""
Column value conversions shared by the writer and the update builder.

Dates are always stored as date-only ISO strings. Converting through a
timezone-aware datetime shifts midnight values to the previous day, so a
datetime input is truncated with .date() and never localized.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from urllib.parse import quote_plus

from ..tasks.task_models import DEFAULT_TASK_COLOR, Color, Cost, ShapePaint, Task

_WEB_LINK_PLACEHOLDER = "http://"


def to_local_date(value: date | datetime | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def add_days(value: date | datetime, days: int) -> date:
    if isinstance(value, datetime):
        value = value.date()
    return value + timedelta(days=int(days))


def days_between(start: date | datetime, end: date | datetime) -> int:
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    return (end - start).days


def externalized_color(color: Color | None) -> str | None:
    if color is None or color == DEFAULT_TASK_COLOR:
        return None
    return color.to_hex()


def externalized_shape(shape: ShapePaint | None) -> str | None:
    return shape.serialize() if shape is not None else None


def externalized_web_link(web_link: str | None) -> str | None:
    if web_link is None:
        return None
    link = web_link.strip()
    if not link or link == _WEB_LINK_PLACEHOLDER:
        return None
    return quote_plus(link)


def externalized_notes(notes: str | None) -> str | None:
    if not notes:
        return None
    return notes


def cost_columns(cost: Cost) -> tuple[Decimal | None, bool | None]:
    """
    (cost_manual_value, is_cost_calculated) for a task cost.

    A calculated cost with a zero manual value means "no manual override" and
    is stored as (NULL, NULL). A manual override of zero stays (0, False).
    """
    manual = Decimal(cost.manual_value)
    if cost.is_calculated and manual == 0:
        return None, None
    return manual, bool(cost.is_calculated)


def task_columns(task: Task) -> dict[str, object]:
    """Full TASK row for a task snapshot, in schema column order."""
    cost_manual_value, is_cost_calculated = cost_columns(task.cost)
    return {
        "id": int(task.id),
        "name": task.name,
        "color": externalized_color(task.color),
        "shape": externalized_shape(task.shape),
        "is_milestone": bool(task.is_milestone),
        "is_project_task": bool(task.is_project_task),
        "start_date": to_local_date(task.start),
        "duration": int(task.duration.length),
        "completion": int(task.completion_percentage),
        "earliest_start_date": to_local_date(task.earliest_start),
        "priority": task.priority.persistent_value,
        "web_link": externalized_web_link(task.web_link),
        "cost_manual_value": cost_manual_value,
        "is_cost_calculated": is_cost_calculated,
        "notes": externalized_notes(task.notes),
    }
