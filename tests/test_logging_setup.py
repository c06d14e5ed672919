# tests/test_logging_setup.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from todo_keeper.logging_setup import LOG_FILE_NAME, _ConsoleNoiseFilter, setup_logging


@pytest.fixture()
def root_handlers() -> Iterator[None]:
    root = logging.getLogger()
    saved, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in saved:
            h.close()
    for h in saved:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_drops_third_party_noise() -> None:
    noise = _ConsoleNoiseFilter()
    assert noise.filter(_record("todo_keeper.database", logging.DEBUG))
    assert noise.filter(_record("todo_keeper", logging.INFO))
    assert not noise.filter(_record("textual", logging.WARNING))
    assert not noise.filter(_record("todo_keeper_other", logging.INFO))
    assert noise.filter(_record("asyncio", logging.ERROR))


@pytest.mark.usefixtures("root_handlers")
def test_file_handler_writes_log(tmp_path: Path) -> None:
    setup_logging(log_dir=tmp_path / "logs", console=False)

    logging.getLogger("todo_keeper.test").info("hello from the test")
    for h in logging.getLogger().handlers:
        h.flush()

    content = (tmp_path / "logs" / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "hello from the test" in content
    assert not any(
        type(h) is logging.StreamHandler for h in logging.getLogger().handlers
    )


@pytest.mark.usefixtures("root_handlers")
def test_console_only_without_log_dir() -> None:
    setup_logging(console_level=logging.INFO)

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert handlers[0].level == logging.INFO


@pytest.mark.usefixtures("root_handlers")
def test_unwritable_log_dir_is_not_fatal(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    setup_logging(log_dir=blocker / "logs", console=False)

    assert not any(
        isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers
    )
