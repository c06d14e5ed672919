# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

from todo_keeper.database import Database
from todo_keeper.models import Priority, Task, TaskStatus
from todo_keeper.repository import TaskRepository

from .fakes import FakeDatabase


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "ToDoApp.db"


@pytest.fixture()
def database(db_path: Path) -> Database:
    """A real SQLite database in a temporary directory (seeded on first use)."""
    return Database(db_path)


@pytest.fixture()
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture()
def repo(fake_db: FakeDatabase) -> TaskRepository:
    return TaskRepository(fake_db)


@pytest.fixture()
def now() -> datetime:
    """Fixed evaluation time so overdue checks are deterministic."""
    return datetime(2024, 1, 1)


@pytest.fixture()
def make_task() -> Callable[..., Task]:
    def _make(
        name: str = "Task",
        priority: Priority = Priority.LOW,
        due_date: str = "01.01.2099",
        description: str | None = None,
        status: TaskStatus = TaskStatus.OPEN,
        id: int = 0,
    ) -> Task:
        return Task(
            id=id,
            name=name,
            priority=priority,
            due_date=due_date,
            description=description,
            status=status,
        )

    return _make
