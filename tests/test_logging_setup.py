# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ai_todolist.logging_setup import LOG_FILE_NAME, _ConsoleNoiseFilter, setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_levels() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("ai_todolist.todos.todo_store", logging.DEBUG))
    assert not f.filter(_record("ai_todolist.notifications.reminder_scheduler", logging.INFO))
    assert f.filter(_record("ai_todolist.notifications.reminder_scheduler", logging.WARNING))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert f.filter(_record("httpx", logging.ERROR))
    assert not f.filter(_record("py.warnings", logging.WARNING))


def test_setup_logging_writes_file(tmp_path: Path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")

    assert log_file == tmp_path / "logs" / LOG_FILE_NAME
    logging.getLogger("ai_todolist.test").debug("hello file")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello file" in log_file.read_text(encoding="utf-8")
