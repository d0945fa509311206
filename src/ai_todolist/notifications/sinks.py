# src/ai_todolist/notifications/sinks.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from plyer import notification as plyer_notification

from ..core.ports import ClickHandler, NotificationSink

logger = logging.getLogger(__name__)

TEST_TITLE = "AI TodoList test"
TEST_MESSAGE = "Notifications are working."


class DesktopNotificationSink:
    """
    OS notifications through plyer (toast on Windows, Notification Center on macOS,
    libnotify/D-Bus on Linux).

    plyer's notify() is blocking, so it runs in a worker thread. Backends raise
    (typically NotImplementedError) when the platform has no notification service;
    the error propagates so the scheduler keeps the todo for a retry.

    plyer has no click callback, so on_click is never invoked by this sink.
    """

    def __init__(self, *, app_name: str = "AI TodoList", timeout_seconds: int = 10) -> None:
        self._app_name = app_name
        self._timeout = int(timeout_seconds)

    async def show(
        self,
        *,
        title: str,
        body: str,
        on_click: ClickHandler | None = None,
    ) -> None:
        await asyncio.to_thread(self._notify, title, body)

    def _notify(self, title: str, body: str) -> None:
        plyer_notification.notify(
            title=title,
            message=body,
            app_name=self._app_name,
            timeout=self._timeout,
        )
        logger.debug("Desktop notification shown title=%r", title)


class ConsoleNotificationSink:
    """
    Prints reminders to the terminal.

    Used when desktop notifications are disabled (headless machines, SSH sessions).
    """

    def __init__(self, printer: Callable[[str], Any] = print) -> None:
        self._printer = printer

    async def show(
        self,
        *,
        title: str,
        body: str,
        on_click: ClickHandler | None = None,
    ) -> None:
        text = body.replace("\n", " | ")
        self._printer(f"[{title}] {text}")


async def send_test_notification(sink: NotificationSink, message: str | None = None) -> dict[str, Any]:
    """Show a one-off notification to check that the sink works."""
    try:
        await sink.show(title=TEST_TITLE, body=(message or "").strip() or TEST_MESSAGE)
    except Exception as e:
        logger.exception("Test notification failed")
        return {"success": False, "error": str(e) or e.__class__.__name__}
    logger.info("Test notification sent")
    return {"success": True}
