# src/ai_todolist/todos/todo_api.py

from __future__ import annotations

import logging
from typing import Any

from ..core.state import AppState
from ..notifications.sinks import send_test_notification
from .timeutil import combine_date_time
from .todo_models import Todo

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT_SECONDS = 30.0


def create_todo_from_text(state: AppState, text: str) -> Todo | None:
    """
    Quick-add: parse one free-text line and store it.

    The parser is best-effort; when it fails the whole line becomes the title
    with no due time. Returns None only for blank input.
    """
    text = (text or "").strip()
    if not text:
        return None

    try:
        parsed = state.parser.parse(text)
    except Exception:
        logger.exception("Todo parser crashed; storing the raw text.")
        parsed = None

    if parsed is None or not parsed.title:
        return state.todo_store.add_todo(text)

    due = combine_date_time(parsed.date, parsed.time)
    tags = [parsed.condition] if parsed.condition else None

    todo = state.todo_store.add_todo(
        parsed.title,
        due=due,
        category=parsed.category,
        tags=tags,
    )
    logger.info("Created todo id=%s from text (due=%s alert=%s)", todo.id, todo.due_at, todo.alert_at)
    return todo


def reset_reminder(state: AppState, todo_id: int) -> dict[str, Any]:
    """Re-arm the reminder of one todo (notified -> False)."""
    try:
        found = state.todo_store.reset_notified(int(todo_id))
    except Exception as e:
        logger.exception("reset_notified failed todo_id=%s", todo_id)
        return {"success": False, "error": str(e) or e.__class__.__name__}

    if not found:
        return {"success": False, "error": f"Todo #{todo_id} not found"}

    logger.info("Reset notified flag for todo #%s", todo_id)
    return {"success": True}


def open_todo(state: AppState, todo_id: int) -> dict[str, Any]:
    """Focus a todo in the host window, the same event a notification click sends."""
    todo = state.todo_store.get_todo(int(todo_id))
    if todo is None or todo.is_deleted:
        return {"success": False, "error": f"Todo #{todo_id} not found"}

    if not state.scheduler.route_click(todo.id):
        return {"success": False, "error": "No host window attached"}
    return {"success": True}


def check_reminders_now(
    state: AppState, *, timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS
) -> dict[str, Any]:
    """Run one reminder poll on the scheduler's event loop and wait for it."""
    runner = state.runner
    if runner is None:
        return {"success": False, "error": "Reminder scheduler is not running"}

    try:
        delivered = runner.run(state.scheduler.check_now(), timeout=timeout)
    except Exception as e:
        logger.exception("Manual reminder check failed")
        return {"success": False, "error": str(e) or e.__class__.__name__}

    logger.info("Manual reminder check executed (delivered=%s)", delivered)
    return {"success": True, "delivered": delivered}


def send_test_reminder(
    state: AppState, message: str | None = None, *, timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS
) -> dict[str, Any]:
    runner = state.runner
    if runner is None:
        return {"success": False, "error": "Reminder scheduler is not running"}

    try:
        return runner.run(send_test_notification(state.sink, message), timeout=timeout)
    except Exception as e:
        logger.exception("Test notification failed")
        return {"success": False, "error": str(e) or e.__class__.__name__}
