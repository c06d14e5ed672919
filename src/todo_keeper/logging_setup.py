"""Logging configuration for Todo Keeper."""

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "todo-keeper.log"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow todo_keeper logs at the handler's level
    - third-party loggers (textual, asyncio, ...) only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "todo_keeper" or record.name.startswith("todo_keeper."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path | None = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    console: bool = True,
) -> None:
    """
    Configure the root logger with:
    - Console handler on stderr, filtered (skipped when ``console`` is False,
      e.g. while the TUI owns the terminal)
    - File handler with full logs when ``log_dir`` is given

    Call this once, early, from the entry point.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(console_level)
        ch.setFormatter(fmt)
        ch.addFilter(_ConsoleNoiseFilter())
        root.addHandler(ch)

    if log_dir is not None:
        log_path = Path(log_dir)
        try:
            log_path.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(str(log_path / LOG_FILE_NAME), encoding="utf-8")
        except OSError:
            logging.getLogger(__name__).warning("Cannot write logs to %s", log_path)
        else:
            fh.setLevel(file_level)
            fh.setFormatter(fmt)
            root.addHandler(fh)

    logging.captureWarnings(True)
