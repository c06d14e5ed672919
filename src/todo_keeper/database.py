"""Database management for Todo Keeper."""

import logging
import shutil
import sqlite3
from contextlib import contextmanager
from importlib import resources
from pathlib import Path
from typing import Generator

from todo_keeper.errors import StorageError
from todo_keeper.models import Task, TaskStatus, check_task
from todo_keeper.result import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "ToDoApp.db"
TEMPLATE_RESOURCE = "template.sql"

_COLUMNS = "id, name, priority, due_date, description, status"

_STORAGE_ERRORS = (sqlite3.Error, OSError)


def load_template_sql() -> str:
    """Return the bundled SQL snapshot used to seed a new database."""
    template = resources.files("todo_keeper") / "data" / TEMPLATE_RESOURCE
    return template.read_text(encoding="utf-8")


class Database:
    """SQLite store for tasks.

    Every public operation makes sure the database file exists, opens its own
    connection and closes it before returning. Storage failures are logged
    and returned as ``Err`` values instead of being raised.
    """

    def __init__(self, db_path: Path, template_path: Path | None = None) -> None:
        """Initialize database with path and an optional template database file."""
        self.db_path = Path(db_path)
        self.template_path = Path(template_path) if template_path else None

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager for database connections with dict-like row access."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def initialize(self) -> Result[bool]:
        """Create the database from the template if it does not exist yet.

        Returns Ok(True) when a new database was seeded and Ok(False) when one
        was already present. Safe to call before every operation.
        """
        if self.db_path.exists():
            return Ok(False)

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            if self.template_path is not None:
                shutil.copyfile(self.template_path, self.db_path)
            else:
                script = load_template_sql()
                with self.connection() as conn:
                    conn.executescript(script)
                    conn.commit()
        except _STORAGE_ERRORS as e:
            logger.exception("Error creating database at %s", self.db_path)
            # Leave no half-seeded file behind so the next call retries.
            self.db_path.unlink(missing_ok=True)
            return Err(StorageError("initialize", e))

        logger.info(
            "Database created at %s (%d bytes)",
            self.db_path,
            self.db_path.stat().st_size,
        )
        return Ok(True)

    def verify_connection(self) -> bool:
        """Verify the database connection and schema are valid."""
        if not self.initialize().ok:
            return False
        try:
            with self.connection() as conn:
                conn.execute("SELECT 1 FROM todos LIMIT 1")
                return True
        except sqlite3.Error:
            return False

    def fetch_all(self) -> Result[list[Task]]:
        """Fetch every stored task in storage order."""
        init = self.initialize()
        if not init.ok:
            return init

        try:
            with self.connection() as conn:
                rows = conn.execute(f"SELECT {_COLUMNS} FROM todos").fetchall()
                return Ok([Task.from_row(dict(row)) for row in rows])
        except _STORAGE_ERRORS as e:
            logger.exception("Fetching tasks failed")
            return Err(StorageError("fetch_all", e))

    def get(self, task_id: int) -> Result[Task | None]:
        """Fetch a single task by ID, or Ok(None) if there is no such task."""
        init = self.initialize()
        if not init.ok:
            return init

        try:
            with self.connection() as conn:
                row = conn.execute(
                    f"SELECT {_COLUMNS} FROM todos WHERE id = ?", (task_id,)
                ).fetchone()
                return Ok(Task.from_row(dict(row)) if row else None)
        except _STORAGE_ERRORS as e:
            logger.exception("Fetching task %s failed", task_id)
            return Err(StorageError("get", e))

    def insert(self, task: Task) -> Result[int]:
        """Insert a new task and return the ID assigned to it.

        The task's own ``id`` is ignored. Invalid tasks are rejected before
        the database is touched.
        """
        problem = check_task(task)
        if problem is not None:
            return Err(problem)

        init = self.initialize()
        if not init.ok:
            return init

        try:
            with self.connection() as conn:
                cursor = conn.execute(
                    "INSERT INTO todos (name, priority, due_date, description, status) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        task.name,
                        int(task.priority),
                        task.due_date,
                        task.description,
                        int(task.status),
                    ),
                )
                conn.commit()
                task_id = cursor.lastrowid
        except _STORAGE_ERRORS as e:
            logger.exception("Insert failed")
            return Err(StorageError("insert", e))

        if task_id is None:
            logger.error("SQLite did not return lastrowid for insert")
            return Err(StorageError("insert"))
        logger.debug("Task inserted id=%s priority=%s due=%s", task_id, task.priority, task.due_date)
        return Ok(int(task_id))

    def update(self, task: Task) -> Result[bool]:
        """Write all fields of the task to the row with the same ID.

        Returns Ok(False) if no row has that ID.
        """
        problem = check_task(task)
        if problem is not None:
            return Err(problem)

        init = self.initialize()
        if not init.ok:
            return init

        try:
            with self.connection() as conn:
                cursor = conn.execute(
                    "UPDATE todos SET name = ?, priority = ?, due_date = ?, "
                    "description = ?, status = ? WHERE id = ?",
                    (
                        task.name,
                        int(task.priority),
                        task.due_date,
                        task.description,
                        int(task.status),
                        task.id,
                    ),
                )
                conn.commit()
                matched = cursor.rowcount > 0
        except _STORAGE_ERRORS as e:
            logger.exception("Update failed")
            return Err(StorageError("update", e))

        logger.debug("Update result: %s, task id: %s", matched, task.id)
        return Ok(matched)

    def set_status(self, task_id: int, status: TaskStatus) -> Result[bool]:
        """Change only the status of a stored task.

        The other fields are left as stored, whatever their shape. Returns
        Ok(False) if no row has that ID.
        """
        init = self.initialize()
        if not init.ok:
            return init

        try:
            with self.connection() as conn:
                cursor = conn.execute(
                    "UPDATE todos SET status = ? WHERE id = ?", (int(status), task_id)
                )
                conn.commit()
                matched = cursor.rowcount > 0
        except _STORAGE_ERRORS as e:
            logger.exception("Status update failed")
            return Err(StorageError("set_status", e))

        logger.debug("Status of task %s set to %s: %s", task_id, status.name, matched)
        return Ok(matched)

    def delete(self, task_id: int) -> Result[bool]:
        """Delete a task by ID. Returns Ok(False) if no row has that ID."""
        init = self.initialize()
        if not init.ok:
            return init

        try:
            with self.connection() as conn:
                cursor = conn.execute("DELETE FROM todos WHERE id = ?", (task_id,))
                conn.commit()
                deleted = cursor.rowcount > 0
        except _STORAGE_ERRORS as e:
            logger.exception("Delete failed")
            return Err(StorageError("delete", e))

        logger.debug("Delete result: %s, task id: %s", deleted, task_id)
        return Ok(deleted)
