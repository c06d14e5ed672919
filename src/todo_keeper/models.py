"""Data models for Todo Keeper."""

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from todo_keeper.errors import ValidationError

DUE_DATE_FORMAT = "dd.mm.yyyy"
DUE_DATE_PATTERN = re.compile(r"\d{2}\.\d{2}\.\d{4}")

NAME_REQUIRED_MESSAGE = "Please enter a name."
DUE_DATE_MESSAGE = f"Due date must be in the format {DUE_DATE_FORMAT}."


class Priority(IntEnum):
    """Priority of a task, ordered from lowest to highest."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, raw: str) -> "Priority":
        """Parse a priority from its name ("high") or ordinal ("2").

        Raises:
            ValueError: If the text names no priority.
        """
        text = raw.strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown priority: {raw!r}") from None


class TaskStatus(IntEnum):
    """Status of a task."""

    OPEN = 0
    COMPLETED = 1

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass
class Task:
    """Represents a task in the database.

    An ``id`` of 0 marks a task that has not been persisted yet.
    """

    name: str
    priority: Priority
    due_date: str
    description: str | None = None
    status: TaskStatus = TaskStatus.OPEN
    id: int = 0

    @property
    def is_persisted(self) -> bool:
        return self.id != 0

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Task":
        """Create a Task from a SQLite row dictionary.

        Out-of-range priority or status values fall back to LOW and OPEN.
        """
        try:
            priority = Priority(int(row["priority"]))
        except (TypeError, ValueError):
            priority = Priority.LOW
        try:
            status = TaskStatus(int(row["status"]))
        except (TypeError, ValueError):
            status = TaskStatus.OPEN
        return cls(
            id=int(row["id"]),
            name=row["name"] or "",
            priority=priority,
            due_date=row["due_date"] or "",
            description=row["description"],
            status=status,
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain representation used for JSON output."""
        return {
            "id": self.id,
            "name": self.name,
            "priority": self.priority.name.lower(),
            "due_date": self.due_date,
            "description": self.description,
            "status": self.status.name.lower(),
        }


def validate_task(task: Task) -> list[str]:
    """Return the user-facing problems that prevent saving the task.

    An empty list means the task can be saved. Only the textual shape of the
    due date is checked, not whether it names a real calendar day.
    """
    messages: list[str] = []
    if not task.name or not task.name.strip():
        messages.append(NAME_REQUIRED_MESSAGE)
    if not DUE_DATE_PATTERN.fullmatch(task.due_date or ""):
        messages.append(DUE_DATE_MESSAGE)
    return messages


def check_task(task: Task) -> ValidationError | None:
    """Wrap the result of validate_task in a ValidationError, if any."""
    messages = validate_task(task)
    if messages:
        return ValidationError(messages)
    return None
