# src/ai_todolist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/notification sink/scheduler/parser).
"""

from __future__ import annotations

import logging

from ..config import NOTIFIER_CONSOLE, get_settings
from ..core.ports import NotificationSink, TodoParser
from ..core.state import AppState
from ..llm.client import OpenAITodoParser, friendly_llm_error_message
from ..llm.offline import OfflineTodoParser
from ..notifications.reminder_scheduler import ReminderScheduler
from ..notifications.sinks import ConsoleNotificationSink, DesktopNotificationSink
from ..todos.timeutil import Clock
from ..todos.todo_store import TodoStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.todos_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_sink(settings) -> NotificationSink:
    if getattr(settings, "notifier", None) == NOTIFIER_CONSOLE:
        return ConsoleNotificationSink()
    return DesktopNotificationSink(app_name=str(getattr(settings, "app_name", "AI TodoList")))


def build_parser(settings) -> TodoParser:
    try:
        return OpenAITodoParser(settings)
    except Exception as e:
        # Fallback for local runs without an API key.
        logger.info("AI parsing disabled: %s", friendly_llm_error_message(e))
        return OfflineTodoParser()


def create_initial_state(*, settings=None, clock: Clock | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TodoStore(settings.todos_db_path, clock=clock)
    sink = build_sink(settings)
    scheduler = ReminderScheduler(store, sink, clock=clock)

    return AppState(
        settings=settings,
        todo_store=store,
        sink=sink,
        scheduler=scheduler,
        parser=build_parser(settings),
    )
