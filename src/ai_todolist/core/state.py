# src/ai_todolist/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..notifications.reminder_scheduler import ReminderScheduler
from ..todos.todo_store import TodoStore
from .ports import HostWindow, NotificationSink, TodoParser

if TYPE_CHECKING:
    from ..connectors.background import ReminderBackgroundRunner


@dataclass
class AppState:
    # Settings object (config.Settings in the app, SimpleNamespace in tests).
    settings: Any

    todo_store: TodoStore
    sink: NotificationSink
    scheduler: ReminderScheduler
    parser: TodoParser

    # Set by cli.main once the host window and the reminder thread are up.
    window: HostWindow | None = None
    runner: ReminderBackgroundRunner | None = None

    lock: threading.RLock = field(default_factory=threading.RLock)
