"""Filtering and sorting of task lists for display."""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable

from todo_keeper.models import Priority, Task, TaskStatus
from todo_keeper.overdue import is_overdue, parse_due_date

logger = logging.getLogger(__name__)

# Sort key for due dates that cannot be parsed: after every real date.
UNPARSABLE_DATE = datetime.max


class PriorityFilter(Enum):
    """Which priority to keep when filtering."""

    ALL = "all"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def priority(self) -> Priority | None:
        """The priority this filter keeps, or None for ALL."""
        if self is PriorityFilter.ALL:
            return None
        return Priority[self.name]

    @classmethod
    def parse(cls, raw: str) -> "PriorityFilter":
        """Parse "all", a priority name or a priority ordinal."""
        text = raw.strip().lower()
        if text == "all":
            return cls.ALL
        return cls(Priority.parse(text).name.lower())


class SortBy(Enum):
    """Field to sort on."""

    PRIORITY = "priority"
    DATE = "date"


class SortOrder(Enum):
    """Direction of the sort."""

    ASCENDING = "asc"
    DESCENDING = "desc"

    @classmethod
    def parse(cls, raw: str) -> "SortOrder":
        text = raw.strip().lower()
        if text in ("asc", "ascending"):
            return cls.ASCENDING
        if text in ("desc", "descending"):
            return cls.DESCENDING
        raise ValueError(f"Unknown sort order: {raw!r}")


def _date_key(task: Task) -> datetime:
    due = parse_due_date(task.due_date)
    return due if due is not None else UNPARSABLE_DATE


def _priority_key(task: Task) -> int:
    return int(task.priority)


def apply_filter_and_sort(
    tasks: Iterable[Task],
    priority_filter: PriorityFilter,
    overdue_only: bool,
    sort_by: SortBy,
    sort_order: SortOrder,
    now: datetime | None = None,
) -> list[Task]:
    """Filter tasks by priority and overdue state, then sort them.

    Stages run in a fixed order: priority filter, overdue filter, sort.
    The sort is stable in both directions, so tasks with equal keys keep
    their input order. Any error while processing yields an empty list.

    Args:
        tasks: The tasks to process.
        priority_filter: Keep only tasks of this priority (ALL keeps every task).
        overdue_only: Keep only open tasks whose due date has passed.
        sort_by: Sort on priority ordinal or on the parsed due date.
        sort_order: Ascending or descending.
        now: Reference time for the overdue check, defaults to the current time.

    Returns:
        A new list with the selected tasks in display order.
    """
    try:
        selected = list(tasks)

        wanted = priority_filter.priority
        if wanted is not None:
            selected = [t for t in selected if t.priority == wanted]

        if overdue_only:
            if now is None:
                now = datetime.now()
            selected = [
                t for t in selected
                if is_overdue(t, now) and t.status == TaskStatus.OPEN
            ]

        key = _priority_key if sort_by is SortBy.PRIORITY else _date_key
        return sorted(
            selected, key=key, reverse=sort_order is SortOrder.DESCENDING
        )
    except Exception:
        logger.exception("Error applying filter and sort")
        return []


@dataclass
class QueryOptions:
    """The filter and sort settings of a task list view.

    Defaults match the "reset" state of the filter dialog.
    """

    priority_filter: PriorityFilter = PriorityFilter.ALL
    overdue_only: bool = False
    sort_by: SortBy = SortBy.PRIORITY
    sort_order: SortOrder = SortOrder.DESCENDING

    def apply(self, tasks: Iterable[Task], now: datetime | None = None) -> list[Task]:
        return apply_filter_and_sort(
            tasks,
            self.priority_filter,
            self.overdue_only,
            self.sort_by,
            self.sort_order,
            now=now,
        )

    def describe(self) -> str:
        """Short human readable summary for status bars."""
        parts = [
            f"priority: {self.priority_filter.value}",
            f"sort: {self.sort_by.value} {self.sort_order.value}",
        ]
        if self.overdue_only:
            parts.append("overdue only")
        return " | ".join(parts)
