# tests/fakes.py

from __future__ import annotations

from dataclasses import replace

from todo_keeper.errors import StorageError
from todo_keeper.models import Task, TaskStatus, check_task
from todo_keeper.result import Err, Ok, Result


class FakeDatabase:
    """
    In-memory stand-in for Database used by repository tests.

    - Records every call for assertions
    - ``fail`` makes every storage operation return a StorageError
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.rows: dict[int, Task] = {}
        self.calls: list[str] = []
        self.fail = False
        self._next_id = 1
        for task in tasks or []:
            self._store(task)

    def _store(self, task: Task) -> int:
        task_id = self._next_id
        self._next_id += 1
        self.rows[task_id] = replace(task, id=task_id)
        return task_id

    def _failure(self, operation: str) -> Err | None:
        self.calls.append(operation)
        if self.fail:
            return Err(StorageError(operation))
        return None

    def initialize(self) -> Result[bool]:
        return self._failure("initialize") or Ok(False)

    def fetch_all(self) -> Result[list[Task]]:
        return self._failure("fetch_all") or Ok([replace(t) for t in self.rows.values()])

    def insert(self, task: Task) -> Result[int]:
        problem = check_task(task)
        if problem is not None:
            return Err(problem)
        return self._failure("insert") or Ok(self._store(task))

    def update(self, task: Task) -> Result[bool]:
        problem = check_task(task)
        if problem is not None:
            return Err(problem)
        failed = self._failure("update")
        if failed:
            return failed
        if task.id not in self.rows:
            return Ok(False)
        self.rows[task.id] = replace(task)
        return Ok(True)

    def set_status(self, task_id: int, status: TaskStatus) -> Result[bool]:
        failed = self._failure("set_status")
        if failed:
            return failed
        if task_id not in self.rows:
            return Ok(False)
        self.rows[task_id] = replace(self.rows[task_id], status=status)
        return Ok(True)

    def delete(self, task_id: int) -> Result[bool]:
        failed = self._failure("delete")
        if failed:
            return failed
        return Ok(self.rows.pop(task_id, None) is not None)
