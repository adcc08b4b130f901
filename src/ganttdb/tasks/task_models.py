# src/ganttdb/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import IntEnum, StrEnum


class Priority(IntEnum):
    """
    Task priority.

    Values are the persistent encoding written to the database and must never
    be renumbered (LOWEST/HIGHEST were added after LOW/NORMAL/HIGH).
    """

    LOW = 0
    NORMAL = 1
    HIGH = 2
    LOWEST = 3
    HIGHEST = 4

    @property
    def persistent_value(self) -> int:
        return int(self.value)


class ConstraintType(IntEnum):
    START_START = 1
    FINISH_START = 2
    FINISH_FINISH = 3
    START_FINISH = 4

    @property
    def persistent_value(self) -> int:
        return int(self.value)


class Hardness(StrEnum):
    STRONG = "Strong"
    RUBBER = "Rubber"

    @property
    def identifier(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class TimeDuration:
    length: int
    unit: str = "day"


@dataclass(frozen=True, slots=True)
class Color:
    red: int
    green: int
    blue: int

    def to_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


DEFAULT_TASK_COLOR = Color(140, 182, 206)


@dataclass(frozen=True, slots=True)
class ShapePaint:
    """Fill pattern of a task bar: a width x height bitmap of 0/1 cells."""

    width: int
    height: int
    array: tuple[int, ...]

    def serialize(self) -> str:
        return ",".join(str(int(v)) for v in self.array)


@dataclass(frozen=True, slots=True)
class Cost:
    manual_value: Decimal = Decimal(0)
    is_calculated: bool = True


@dataclass(slots=True)
class Task:
    id: int
    name: str
    start: date
    duration: TimeDuration

    color: Color | None = None
    shape: ShapePaint | None = None
    is_milestone: bool = False
    is_project_task: bool = False
    completion_percentage: int = 0
    earliest_start: date | None = None
    priority: Priority = Priority.NORMAL
    web_link: str | None = None
    cost: Cost = field(default_factory=Cost)
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class TaskDependency:
    """Precedence link: the dependant task is constrained by the dependee."""

    dependee_id: int
    dependant_id: int
    constraint_type: ConstraintType = ConstraintType.FINISH_START
    difference: int = 0
    hardness: Hardness = Hardness.STRONG
