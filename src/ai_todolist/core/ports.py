# src/ai_todolist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The reminder scheduler depends on Protocols instead of concrete implementations.
This keeps storage/notification backends/host windows swappable and makes testing easier.
"""

from typing import Any, Awaitable, Callable, Protocol

ClickHandler = Callable[[], None]

# Host window channels.
LOG_CHANNEL = "notification:log"
CLICKED_CHANNEL = "notification:clicked"


class TodoRepo(Protocol):
    """Storage operations the reminder scheduler needs (see TodoStore)."""

    def query_due_unnotified(self, now: str, limit: int = 10) -> list[Any]: ...
    def mark_notified(self, todo_id: int) -> bool: ...
    def reset_notified(self, todo_id: int) -> bool: ...


class NotificationSink(Protocol):
    """
    Host notification facility.

    show() returns once the notification is handed to the OS and raises if it
    could not be displayed. If the backend reports clicks, it calls on_click.
    """

    def show(
            self,
            *,
            title: str,
            body: str,
            on_click: ClickHandler | None = None,
    ) -> Awaitable[None]: ...


class HostWindow(Protocol):
    """
    The application window (or console) that hosts the scheduler.

    Events:
    - ("notification:log", str)     operator-facing log line
    - ("notification:clicked", int) bring the window forward and focus that todo
    """

    def send(self, channel: str, payload: Any) -> None: ...


class TodoParser(Protocol):
    """Free text -> structured todo suggestion (best-effort, None on failure)."""

    def parse(self, text: str) -> Any | None: ...
