"""In-memory view of the stored tasks."""

import logging

from todo_keeper.database import Database
from todo_keeper.models import Task, TaskStatus, check_task
from todo_keeper.result import Err, Ok, Result, succeeded

logger = logging.getLogger(__name__)


class TaskRepository:
    """Cache of every task in the database.

    The cache is only ever replaced wholesale: after each successful insert,
    update or delete the full task list is read again. A failed mutation
    leaves the cache as it was.
    """

    def __init__(self, database: Database) -> None:
        self.database = database
        self._tasks: list[Task] = []
        self._filter_active: bool | None = None

    @property
    def filter_active(self) -> bool | None:
        """The status filter passed to the most recent load()."""
        return self._filter_active

    def load(self, filter_active: bool | None = None) -> Result[list[Task]]:
        """Re-read all tasks from the database.

        Args:
            filter_active: True for open tasks, False for completed tasks,
                None for everything. Remembered for current() once the
                load succeeds.

        Returns:
            The selected view, or the storage error. On error the cache keeps
            its previous contents.
        """
        result = self.database.fetch_all()
        if not result.ok:
            return result
        self._tasks = list(result.value)
        self._filter_active = filter_active
        logger.debug("Loaded %d tasks", len(self._tasks))
        return Ok(self.current())

    def _reload(self) -> None:
        reloaded = self.load(self._filter_active)
        if not reloaded.ok:
            logger.warning("Reload after mutation failed: %s", reloaded.error)

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def active_tasks(self) -> list[Task]:
        """Cached tasks that are still open."""
        return [t for t in self._tasks if not t.is_completed]

    def completed_tasks(self) -> list[Task]:
        """Cached tasks that have been completed."""
        return [t for t in self._tasks if t.is_completed]

    def current(self) -> list[Task]:
        """The view selected by the last load()."""
        if self._filter_active is None:
            return self.all_tasks()
        if self._filter_active:
            return self.active_tasks()
        return self.completed_tasks()

    def find(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def save(self, task: Task) -> Result[int]:
        """Insert a new task or update an existing one.

        Validation happens first; an invalid task never reaches the database.

        Returns:
            The task's ID on success. Updating a task that no longer exists
            returns Ok(0).
        """
        problem = check_task(task)
        if problem is not None:
            return Err(problem)

        if task.is_persisted:
            updated = self.database.update(task)
            if not updated.ok:
                return updated
            if not updated.value:
                logger.info("Task %s no longer exists", task.id)
                return Ok(0)
            self._reload()
            return Ok(task.id)

        inserted = self.database.insert(task)
        if inserted.ok:
            self._reload()
        return inserted

    def mark_done(self, task: Task) -> Result[bool]:
        """Mark a task as completed.

        Only the status changes, so a stored task whose other fields would
        fail validation can still be completed.
        """
        result = self.database.set_status(task.id, TaskStatus.COMPLETED)
        if succeeded(result):
            self._reload()
        return result

    def delete(self, task_id: int) -> Result[bool]:
        """Delete a task by ID."""
        result = self.database.delete(task_id)
        if succeeded(result):
            self._reload()
        return result
