# tests/test_repository.py

from __future__ import annotations

import sqlite3
from dataclasses import replace
from pathlib import Path

from todo_keeper.database import Database
from todo_keeper.errors import StorageError, ValidationError
from todo_keeper.models import Priority, TaskStatus
from todo_keeper.repository import TaskRepository

from .fakes import FakeDatabase


def seeded(make_task) -> FakeDatabase:
    return FakeDatabase(
        [
            make_task(name="open a"),
            make_task(name="done b", status=TaskStatus.COMPLETED),
            make_task(name="open c", priority=Priority.HIGH),
        ]
    )


def test_load_selects_view(make_task) -> None:
    repo = TaskRepository(seeded(make_task))

    assert [t.name for t in repo.load(True).value] == ["open a", "open c"]
    assert repo.filter_active is True
    assert [t.name for t in repo.load(False).value] == ["done b"]
    assert len(repo.load(None).value) == 3
    assert len(repo.current()) == 3


def test_active_and_completed_views(make_task) -> None:
    repo = TaskRepository(seeded(make_task))
    repo.load()

    assert [t.name for t in repo.active_tasks()] == ["open a", "open c"]
    assert [t.name for t in repo.completed_tasks()] == ["done b"]
    assert len(repo.all_tasks()) == 3


def test_cache_is_empty_before_first_load(repo: TaskRepository) -> None:
    assert repo.all_tasks() == []
    assert repo.active_tasks() == []


def test_save_inserts_and_reloads(repo: TaskRepository, fake_db: FakeDatabase, make_task) -> None:
    repo.load(True)

    result = repo.save(make_task(name="new"))

    assert result.ok and result.value == 1
    assert fake_db.calls == ["fetch_all", "insert", "fetch_all"]
    assert [t.name for t in repo.current()] == ["new"]


def test_save_updates_existing_task(make_task) -> None:
    db = seeded(make_task)
    repo = TaskRepository(db)
    repo.load(True)
    task = repo.find(1)

    result = repo.save(replace(task, name="renamed"))

    assert result.ok and result.value == 1
    assert repo.find(1).name == "renamed"


def test_save_invalid_task_makes_no_storage_call(repo: TaskRepository, fake_db: FakeDatabase, make_task) -> None:
    result = repo.save(make_task(name=""))

    assert isinstance(result.error, ValidationError)
    assert fake_db.calls == []


def test_save_of_vanished_task_returns_zero(repo: TaskRepository, make_task) -> None:
    result = repo.save(make_task(id=77))
    assert result.ok and result.value == 0


def test_mark_done_moves_task_out_of_active_view(make_task) -> None:
    repo = TaskRepository(seeded(make_task))
    repo.load(True)

    result = repo.mark_done(repo.find(3))

    assert result.ok and result.value is True
    assert [t.name for t in repo.current()] == ["open a"]
    assert repo.find(3).status is TaskStatus.COMPLETED


def test_delete_reloads(make_task) -> None:
    db = seeded(make_task)
    repo = TaskRepository(db)
    repo.load()

    assert repo.delete(2).value is True
    assert repo.find(2) is None
    assert repo.delete(2).value is False


def test_failed_mutation_leaves_cache_unchanged(make_task) -> None:
    db = seeded(make_task)
    repo = TaskRepository(db)
    repo.load(True)
    before = repo.all_tasks()

    db.fail = True
    results = [
        repo.save(make_task(name="x")),
        repo.mark_done(repo.find(1)),
        repo.delete(1),
        repo.load(False),
    ]

    for result in results:
        assert isinstance(result.error, StorageError)
    assert repo.all_tasks() == before
    assert repo.filter_active is True


def test_not_found_mutation_does_not_reload(repo: TaskRepository, fake_db: FakeDatabase, make_task) -> None:
    repo.delete(5)
    repo.mark_done(make_task(id=5))
    assert "fetch_all" not in fake_db.calls


def test_repository_over_real_database(tmp_path: Path, make_task) -> None:
    repo = TaskRepository(Database(tmp_path / "ToDoApp.db"))

    active = repo.load(True).value
    assert all(t.status is TaskStatus.OPEN for t in active)

    task_id = repo.save(make_task(name="Real", due_date="01.05.2024")).value
    assert repo.find(task_id).name == "Real"

    repo.mark_done(repo.find(task_id))
    assert repo.find(task_id).status is TaskStatus.COMPLETED
    assert all(t.id != task_id for t in repo.current())
    assert any(t.id == task_id for t in repo.completed_tasks())


def test_mark_done_ignores_shape_of_stored_due_date(db_path: Path) -> None:
    database = Database(db_path)
    database.initialize()
    conn = sqlite3.connect(db_path)
    conn.execute(
        "INSERT INTO todos (name, priority, due_date, status) VALUES ('legacy', 1, '1.2.2024', 0)"
    )
    conn.commit()
    conn.close()
    repo = TaskRepository(database)
    legacy = [t for t in repo.load(True).value if t.name == "legacy"][0]

    result = repo.mark_done(legacy)

    assert result.ok and result.value is True
    done = repo.find(legacy.id)
    assert done.status is TaskStatus.COMPLETED
    assert done.due_date == "1.2.2024"
    assert all(t.id != legacy.id for t in repo.current())


def test_mark_done_only_changes_status(make_task) -> None:
    db = FakeDatabase([make_task(name="odd date", due_date="5.5.2020", description="kept")])
    repo = TaskRepository(db)
    repo.load()

    assert repo.mark_done(repo.find(1)).value is True
    assert db.calls[-2:] == ["set_status", "fetch_all"]
    assert db.rows[1] == make_task(
        id=1,
        name="odd date",
        due_date="5.5.2020",
        description="kept",
        status=TaskStatus.COMPLETED,
    )
