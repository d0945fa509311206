# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from ai_todolist.core.state import AppState
from ai_todolist.notifications.reminder_scheduler import ReminderScheduler
from ai_todolist.todos.todo_store import TodoStore

from .fakes import FakeClock, FakeSink, FakeTodoParser, FakeWindow


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="AI TodoList (test)",
        log_level="DEBUG",
        notifier="console",
        openai_api_key=None,
        openai_base_url=None,
        llm_models=["test-model"],
        llm_timeout_seconds=1.0,
        data_dir=tmp_path,
        todos_db_path=tmp_path / "todos.sqlite3",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 6, 1, 9, 0))


@pytest.fixture()
def store(settings: SimpleNamespace, clock: FakeClock) -> TodoStore:
    return TodoStore(settings.todos_db_path, clock=clock)


@pytest.fixture()
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture()
def window() -> FakeWindow:
    return FakeWindow()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TodoStore, sink: FakeSink, clock: FakeClock) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: We keep the real SQLite TodoStore here because its correctness is part
    of what we want to test.
    """
    return AppState(
        settings=settings,
        todo_store=store,
        sink=sink,
        scheduler=ReminderScheduler(
            store,
            sink,
            clock=clock,
            interval_seconds=0.05,
        ),
        parser=FakeTodoParser(),
    )
