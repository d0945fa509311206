# src/ai_todolist/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..todos.todo_api import (
    check_reminders_now,
    create_todo_from_text,
    open_todo,
    reset_reminder,
    send_test_reminder,
)
from ..todos.todo_models import Todo

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /check, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def format_todo(todo: Todo) -> str:
    box = "[x]" if todo.completed else "[ ]"
    parts = [f"#{todo.id} {box} {todo.title}"]
    if todo.category:
        parts.append(f"({todo.category})")
    if todo.due_at:
        parts.append(f"due {todo.due_at}")
    if todo.alert_at:
        parts.append(f"alert {todo.alert_at}{' (sent)' if todo.notified else ''}")
    return "  ".join(parts)


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    running = state.runner is not None and state.runner.thread.is_alive()
    return (
        "Status:\n"
        f"  Todos: {state.todo_store.count_todos()}\n"
        f"  Reminder scheduler: {'RUNNING' if running else 'STOPPED'}\n"
        f"  Notifier: {getattr(state.settings, 'notifier', '?')}\n"
        f"  Parser: {state.parser.__class__.__name__}"
    )


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <text>   -> parse free text (title, date, time, category) and store it
    """
    text = " ".join(args).strip()
    if not text:
        return "Usage: /add <todo text>"
    todo = create_todo_from_text(state, text)
    if todo is None:
        return "Nothing to add."
    return f"Added {format_todo(todo)}"


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /list             -> all todos
    /list <query>     -> search title/category/tags
    """
    query = " ".join(args).strip()
    todos = state.todo_store.search_todos(query) if query else state.todo_store.list_todos()
    if not todos:
        return "No todos."
    return "\n".join(format_todo(t) for t in todos)


def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    todo_id = _parse_id(args)
    if todo_id is None:
        return "Usage: /done <id>"
    try:
        todo = state.todo_store.toggle_complete(todo_id)
    except LookupError:
        return f"Todo #{todo_id} not found."
    return f"{'Completed' if todo.completed else 'Reopened'} {format_todo(todo)}"


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    todo_id = _parse_id(args)
    if todo_id is None:
        return "Usage: /delete <id>"
    if not state.todo_store.delete_todo(todo_id):
        return f"Todo #{todo_id} not found."
    return f"Deleted todo #{todo_id}."


def cmd_check(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("[Reminder] Checking now...")
    result = check_reminders_now(state)
    if not result.get("success"):
        return f"Reminder check failed: {result.get('error')}"
    return f"Reminder check done ({result.get('delivered', 0)} sent)."


def cmd_reset(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    todo_id = _parse_id(args)
    if todo_id is None:
        return "Usage: /reset <id>"
    result = reset_reminder(state, todo_id)
    if not result.get("success"):
        return f"Reset failed: {result.get('error')}"
    return f"Reminder for todo #{todo_id} re-armed."


def cmd_open(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    todo_id = _parse_id(args)
    if todo_id is None:
        return "Usage: /open <id>"
    result = open_todo(state, todo_id)
    if not result.get("success"):
        return f"Open failed: {result.get('error')}"
    return f"Opened todo #{todo_id}."


def cmd_test(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    result = send_test_reminder(state, " ".join(args) or None)
    if not result.get("success"):
        return f"Test notification failed: {result.get('error')}"
    return "Test notification sent."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show scheduler/notifier/parser status.")
registry.register("add", cmd_add, help_text="Add a todo from free text: /add dentist tomorrow 3pm.")
registry.register("list", cmd_list, help_text="List todos, or search: /list [query].", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.")
registry.register("delete", cmd_delete, help_text="Delete a todo: /delete <id>.", aliases=["rm"])
registry.register("check", cmd_check, help_text="Check for due reminders right now.")
registry.register("reset", cmd_reset, help_text="Re-arm a todo's reminder: /reset <id>.")
registry.register("open", cmd_open, help_text="Focus a todo, as a notification click would: /open <id>.")
registry.register("test", cmd_test, help_text="Show a test notification: /test [message].")
