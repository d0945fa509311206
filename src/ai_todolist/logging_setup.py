# src/ai_todolist/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "ai_todolist.log"

_REMINDER_LOGGER = "ai_todolist.notifications.reminder_scheduler"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console-only filter. The REPL shares the terminal with log output, so:
    per-poll reminder lines stay in the file (the console window prints them already),
    other app records pass, third-party records and py.warnings need ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(_REMINDER_LOGGER):
            return record.levelno >= logging.WARNING
        if record.name.startswith("ai_todolist."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/ai_todolist",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """Install stderr + file handlers on the root logger. Returns the log file path."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
