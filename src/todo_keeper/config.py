"""Configuration file support for Todo Keeper."""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from todo_keeper.database import DEFAULT_DB_NAME
from todo_keeper.query import PriorityFilter, QueryOptions, SortBy, SortOrder

CONFIG_FILE = Path.home() / ".config" / "todo-keeper" / "todo-keeper.toml"
DB_ENV_VAR = "TODO_KEEPER_DB"

DEFAULT_THEME = "textual-dark"
DEFAULT_LOG_DIR = Path.home() / ".local" / "state" / "todo-keeper"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class Config:
    """Application configuration."""

    db_path: Path = field(default_factory=lambda: Path.cwd() / DEFAULT_DB_NAME)
    template_path: Path | None = None
    theme: str = DEFAULT_THEME
    default_sort_by: SortBy = SortBy.PRIORITY
    default_sort_order: SortOrder = SortOrder.DESCENDING
    default_priority_filter: PriorityFilter = PriorityFilter.ALL
    log_level: str = "WARNING"
    log_dir: Path = DEFAULT_LOG_DIR

    def query_options(self) -> QueryOptions:
        """Initial filter and sort settings for a task list view."""
        return QueryOptions(
            priority_filter=self.default_priority_filter,
            sort_by=self.default_sort_by,
            sort_order=self.default_sort_order,
        )

    @property
    def console_log_level(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from the config file.

    Returns the default configuration if:
    - The config file doesn't exist
    - The config file has invalid TOML syntax
    - Any other error occurs during loading

    The ``TODO_KEEPER_DB`` environment variable overrides ``db_path``.

    Returns:
        Config object with loaded or default values.
    """
    path = config_file if config_file is not None else CONFIG_FILE
    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            # Invalid TOML or read error - use defaults
            logging.getLogger(__name__).warning("Ignoring unreadable config %s", path)
            data = {}

    config = _parse_config(data)

    env_db = os.environ.get(DB_ENV_VAR)
    if env_db:
        config.db_path = Path(env_db).expanduser()

    return config


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse configuration from a dictionary.

    Unknown keys and values of the wrong type are ignored.

    Args:
        data: Dictionary from parsed TOML file.

    Returns:
        Config object with parsed values.
    """
    config = Config()

    if isinstance(data.get("db_path"), str):
        config.db_path = Path(data["db_path"]).expanduser()

    if isinstance(data.get("template_path"), str):
        config.template_path = Path(data["template_path"]).expanduser()

    if isinstance(data.get("theme"), str):
        config.theme = data["theme"]

    if isinstance(data.get("default_sort_by"), str):
        try:
            config.default_sort_by = SortBy(data["default_sort_by"].lower())
        except ValueError:
            pass

    if isinstance(data.get("default_sort_order"), str):
        try:
            config.default_sort_order = SortOrder.parse(data["default_sort_order"])
        except ValueError:
            pass

    if isinstance(data.get("default_priority_filter"), (str, int)):
        try:
            config.default_priority_filter = PriorityFilter.parse(
                str(data["default_priority_filter"])
            )
        except ValueError:
            pass

    if isinstance(data.get("log_level"), str):
        level = data["log_level"].upper()
        if level in LOG_LEVELS:
            config.log_level = level

    if isinstance(data.get("log_dir"), str):
        config.log_dir = Path(data["log_dir"]).expanduser()

    return config
