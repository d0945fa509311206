# src/ai_todolist/connectors/background.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any, TypeVar

from ..core.ports import HostWindow
from ..notifications.reminder_scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ReminderBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        """Stop the scheduler; a poll already in flight is allowed to finish."""
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Reminder loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)

    def run(self, coro: Coroutine[Any, Any, T], timeout: float | None = None) -> T:
        """Run a coroutine on the reminder loop from another thread and wait for its result."""
        fut = asyncio.run_coroutine_threadsafe(coro, self.loop)
        return fut.result(timeout=timeout)


async def _run_scheduler(
    scheduler: ReminderScheduler, window: HostWindow | None, stop_event: asyncio.Event
) -> None:
    await scheduler.start(window)
    try:
        await stop_event.wait()
    finally:
        await scheduler.aclose()


def start_reminders_in_background(
    scheduler: ReminderScheduler, window: HostWindow | None
) -> ReminderBackgroundRunner | None:
    """
    Start the reminder scheduler on its own event loop in a daemon thread.

    The console REPL blocks on input(), so the scheduler cannot share the main thread.
    Manual checks are submitted to this loop with ReminderBackgroundRunner.run().
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_run_scheduler(scheduler, window, stop_event))
        except Exception:
            logger.exception("Reminder thread crashed.")
        finally:
            with contextlib.suppress(Exception):
                loop.run_until_complete(loop.shutdown_asyncgens())
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="reminder-scheduler", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Reminder thread did not initialize properly.")
        return None

    logger.info("Reminder background thread started.")
    return ReminderBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
