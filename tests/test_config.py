# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todo_keeper import config as config_module
from todo_keeper.config import DEFAULT_THEME, Config, load_config
from todo_keeper.query import PriorityFilter, SortBy, SortOrder


@pytest.fixture(autouse=True)
def no_env_db(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(config_module.DB_ENV_VAR, raising=False)


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "nope.toml")
    assert config.theme == DEFAULT_THEME
    assert config.db_path.name == "ToDoApp.db"
    assert config.template_path is None
    options = config.query_options()
    assert options.sort_by is SortBy.PRIORITY
    assert options.sort_order is SortOrder.DESCENDING
    assert options.priority_filter is PriorityFilter.ALL
    assert options.overdue_only is False


def test_values_are_read(tmp_path: Path) -> None:
    path = tmp_path / "todo-keeper.toml"
    path.write_text(
        'db_path = "/data/todos.db"\n'
        'template_path = "/data/template.db"\n'
        'theme = "nord"\n'
        'default_sort_by = "date"\n'
        'default_sort_order = "asc"\n'
        'default_priority_filter = "high"\n'
        'log_level = "debug"\n'
        'log_dir = "/var/log/todo"\n',
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.db_path == Path("/data/todos.db")
    assert config.template_path == Path("/data/template.db")
    assert config.theme == "nord"
    assert config.default_sort_by is SortBy.DATE
    assert config.default_sort_order is SortOrder.ASCENDING
    assert config.default_priority_filter is PriorityFilter.HIGH
    assert config.log_level == "DEBUG"
    assert config.console_log_level == logging.DEBUG
    assert config.log_dir == Path("/var/log/todo")


def test_bad_values_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "todo-keeper.toml"
    path.write_text(
        'theme = 3\n'
        'default_sort_by = "colour"\n'
        'default_sort_order = "up"\n'
        'default_priority_filter = "urgent"\n'
        'log_level = "LOUD"\n',
        encoding="utf-8",
    )

    config = load_config(path)
    defaults = Config()

    assert config.theme == defaults.theme
    assert config.default_sort_by is defaults.default_sort_by
    assert config.default_sort_order is defaults.default_sort_order
    assert config.default_priority_filter is defaults.default_priority_filter
    assert config.log_level == defaults.log_level


def test_invalid_toml_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "todo-keeper.toml"
    path.write_text("this is = = not toml", encoding="utf-8")
    assert load_config(path).theme == DEFAULT_THEME


def test_environment_overrides_db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "todo-keeper.toml"
    path.write_text('db_path = "/from/file.db"\n', encoding="utf-8")
    monkeypatch.setenv(config_module.DB_ENV_VAR, str(tmp_path / "env.db"))

    assert load_config(path).db_path == tmp_path / "env.db"
