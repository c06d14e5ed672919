"""Due date parsing and overdue detection."""

import logging
import re
from datetime import datetime, timedelta

from todo_keeper.models import Task

logger = logging.getLogger(__name__)

_DATE_PARTS = re.compile(r"\s*(\d{1,2})\.(\d{1,2})\.(\d{1,4})\s*")


def parse_due_date(text: str | None) -> datetime | None:
    """Parse a ``dd.mm.yyyy`` due date into local midnight of that day.

    Day and month values outside their usual range roll over into the next
    month or year, so "32.01.2024" is the 1st of February and "00.03.2024"
    is the last day of February. Text that does not have the digit shape
    returns None.
    """
    if not text:
        return None
    match = _DATE_PARTS.fullmatch(text)
    if match is None:
        return None

    day, month, year = (int(part) for part in match.groups())
    # Normalise the month first, then let timedelta carry the day over.
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    if not 1 <= year <= 9999:
        return None
    try:
        return datetime(year, month, 1) + timedelta(days=day - 1)
    except OverflowError:
        return None


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    """Return True if an open task's due date lies strictly before ``now``.

    Completed tasks and tasks with an unreadable due date are never overdue.
    When ``now`` carries a timezone, the due date is midnight in that zone.
    """
    if task.is_completed:
        return False
    due = parse_due_date(task.due_date)
    if due is None:
        logger.debug("Unparsable due date %r on task %s", task.due_date, task.id)
        return False
    if now is None:
        now = datetime.now()
    return due.replace(tzinfo=now.tzinfo) < now
