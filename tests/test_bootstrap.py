# tests/test_bootstrap.py

from __future__ import annotations

from pathlib import Path

import pytest

from ai_todolist.cli.bootstrap import build_parser, build_sink, create_initial_state
from ai_todolist.config import Settings
from ai_todolist.connectors.console_connector import ConsoleWindow
from ai_todolist.core.ports import CLICKED_CHANNEL, LOG_CHANNEL
from ai_todolist.llm.offline import OfflineTodoParser
from ai_todolist.notifications.reminder_scheduler import BATCH_LIMIT, POLL_INTERVAL_SECONDS
from ai_todolist.notifications.sinks import ConsoleNotificationSink, DesktopNotificationSink


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AITODO_NOTIFIER", "Console")
    monkeypatch.setenv("AITODO_LLM_MODELS", "a, b")
    monkeypatch.setenv("AITODO_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("AITODO_TODOS_DB_PATH", raising=False)

    s = Settings.from_env()

    assert s.notifier == "console"
    assert s.llm_models == ["a", "b"]
    assert s.todos_db_path == tmp_path / "todos.sqlite3"


def test_reminder_timing_is_not_read_from_env(monkeypatch: pytest.MonkeyPatch, settings) -> None:
    monkeypatch.setenv("AITODO_REMINDER_INTERVAL_SECONDS", "3600")
    monkeypatch.setenv("AITODO_REMINDER_BATCH_LIMIT", "500")

    s = Settings.from_env()
    assert not hasattr(s, "reminder_interval_seconds")
    assert not hasattr(s, "reminder_batch_limit")

    scheduler = create_initial_state(settings=settings).scheduler
    assert scheduler._interval == POLL_INTERVAL_SECONDS == 30.0
    assert scheduler._batch_limit == BATCH_LIMIT == 10


def test_unknown_notifier_falls_back_to_desktop(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AITODO_NOTIFIER", "carrier-pigeon")
    assert Settings.from_env().notifier == "desktop"


def test_create_initial_state_without_api_key(settings) -> None:
    state = create_initial_state(settings=settings)

    assert isinstance(state.sink, ConsoleNotificationSink)
    assert isinstance(state.parser, OfflineTodoParser)
    assert settings.todos_db_path.exists()
    assert state.runner is None


def test_build_sink_and_parser(settings) -> None:
    settings.notifier = "desktop"
    assert isinstance(build_sink(settings), DesktopNotificationSink)

    settings.llm_models = []
    settings.openai_api_key = "sk-test"
    assert isinstance(build_parser(settings), OfflineTodoParser)


def test_console_window_events() -> None:
    lines: list[str] = []
    window = ConsoleWindow(printer=lines.append)

    window.send(LOG_CHANNEL, "[Reminder] No reminders due at 2024-06-01 09:00")
    window.send(CLICKED_CHANNEL, 3)
    window.send("other", "ignored")

    assert window.focused_todo_id == 3
    assert len(lines) == 2
    assert lines[0].endswith("] [Reminder] No reminders due at 2024-06-01 09:00")
    assert lines[1].endswith("] [focus] todo #3")
