# src/ai_todolist/connectors/console_connector.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..cli.commands import registry as command_registry
from ..core.ports import CLICKED_CHANNEL, LOG_CHANNEL
from ..core.state import AppState
from ..todos.todo_api import create_todo_from_text

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleWindow:
    """
    Host window for terminal use.

    - log events are printed with a timestamp (operator log surface)
    - click events remember the todo to focus and print it
    Called from the reminder thread, so printing is serialized.
    """

    def __init__(self, printer: Callable[[str], Any] = print) -> None:
        self._printer = printer
        self._lock = threading.Lock()
        self.focused_todo_id: int | None = None

    def send(self, channel: str, payload: Any) -> None:
        if channel == LOG_CHANNEL:
            self._print(str(payload))
        elif channel == CLICKED_CHANNEL:
            self.focused_todo_id = int(payload)
            self._print(f"[focus] todo #{self.focused_todo_id}")
        else:
            logger.debug("ConsoleWindow: ignoring channel=%s", channel)

    def _print(self, text: str) -> None:
        with self._lock:
            self._printer(f"[{_ts_local()}] {text}")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState) -> None:
    """
    Blocking REPL:
    - "/command args" goes to the command registry
    - any other line is a quick-add parsed into a todo
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a todo to add it. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            with state.lock:
                cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)
            continue

        try:
            with state.lock:
                todo = create_todo_from_text(state, user_input)
        except Exception:
            logger.exception("Quick-add failed.")
            _print_ts("Could not add the todo.")
            continue

        if todo is not None:
            alert = f", reminder at {todo.alert_at}" if todo.alert_at else ""
            due = f" (due {todo.due_at}{alert})" if todo.due_at else ""
            _print_ts(f'Added #{todo.id} "{todo.title}" [{todo.category}]{due}')

    logger.info("Console connector finished.")
