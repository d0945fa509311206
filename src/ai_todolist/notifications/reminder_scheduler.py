# src/ai_todolist/notifications/reminder_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

A small polling loop that:
- computes "now" as a canonical local-time string,
- fetches due, unnotified todos (capped per poll),
- shows a notification for each via an injected sink,
- marks a todo notified only after its notification was shown.

Delivery is at-least-once: a failed show() leaves the todo eligible for the next poll,
and a failed mark after a successful show() can repeat one notification.

Polls never overlap. A manual check_now() issued while the timer poll is in flight waits
for it and then runs against the already-updated rows.
"""

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any

from ..core.ports import CLICKED_CHANNEL, LOG_CHANNEL, HostWindow, NotificationSink, TodoRepo
from ..todos.timeutil import Clock, now_canonical

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 30.0
BATCH_LIMIT = 10
REMINDER_TITLE = "AI TodoList reminder"


@dataclass(slots=True, frozen=True)
class Reminder:
    todo_id: int
    title: str
    body: str


def build_reminder(todo: Any) -> Reminder:
    """Notification payload for a todo: its title, plus the due time when set."""
    title = str(getattr(todo, "title", "") or "").strip()
    body = title
    due_at = getattr(todo, "due_at", None)
    if due_at:
        body += f"\nDue: {due_at}"
    return Reminder(todo_id=int(getattr(todo, "id")), title=title, body=body)


class ReminderScheduler:
    """
    Owns the reminder timer.

    States: stopped -> running -> stopped. One instance per app, wired in bootstrap.
    All methods must be called from the event loop that runs the scheduler.
    """

    def __init__(
            self,
            store: TodoRepo,
            sink: NotificationSink,
            *,
            clock: Clock | None = None,
            interval_seconds: float = POLL_INTERVAL_SECONDS,
            batch_limit: int = BATCH_LIMIT,
    ) -> None:
        self._store = store
        self._sink = sink
        self._clock = clock
        self._interval = max(0.01, float(interval_seconds))
        self._batch_limit = max(1, int(batch_limit))

        self._window: HostWindow | None = None
        self._poll_lock = asyncio.Lock()
        self._stop_event: asyncio.Event | None = None
        self._runner: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return (
            self._runner is not None
            and not self._runner.done()
            and self._stop_event is not None
            and not self._stop_event.is_set()
        )

    @property
    def window(self) -> HostWindow | None:
        return self._window

    # ---- lifecycle ----

    async def start(self, window: HostWindow | None) -> None:
        """
        Attach the host window, poll once right away, then every interval.

        Calling start() on a running scheduler only swaps the window.
        """
        self._window = window
        if self.running:
            logger.debug("Reminder scheduler already running; window updated.")
            return

        stop_event = asyncio.Event()
        self._stop_event = stop_event
        self._emit_log(f"[Reminder scheduler] Started (interval: {self._interval:g}s)")

        await self.poll_once()
        self._runner = asyncio.create_task(self._run(stop_event), name="reminder-scheduler")

    def stop(self) -> None:
        """Stop the timer. A poll already in flight finishes normally. No-op when stopped."""
        if self._stop_event is None or self._stop_event.is_set():
            return
        self._stop_event.set()
        self._emit_log("[Reminder scheduler] Stopped")

    async def aclose(self) -> None:
        """stop() and wait for the timer task to exit."""
        self.stop()
        runner = self._runner
        self._runner = None
        if runner is not None:
            await runner

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
            except TimeoutError:
                await self.poll_once()

    # ---- polling ----

    async def check_now(self) -> int:
        """Manual poll (operator/debug command). Serialized with timer polls."""
        logger.debug("Manual reminder check requested.")
        return await self.poll_once()

    async def poll_once(self) -> int:
        """
        Run one poll. Never raises.

        Returns the number of todos marked notified by this poll.
        """
        async with self._poll_lock:
            try:
                return await self._poll()
            except Exception as e:
                logger.exception("Reminder poll failed")
                self._emit_log(f"[Reminder scheduler] Error: {e}")
                return 0

    async def _poll(self) -> int:
        now = now_canonical(self._clock)

        todos = await asyncio.to_thread(self._store.query_due_unnotified, now, self._batch_limit)
        if not todos:
            self._emit_log(f"[Reminder] No reminders due at {now}")
            return 0

        self._emit_log(f"[Reminder] Sending {len(todos)} reminder(s)...")

        delivered = 0
        for todo in todos:
            reminder = build_reminder(todo)

            try:
                await self._sink.show(
                    title=REMINDER_TITLE,
                    body=reminder.body,
                    on_click=partial(self.route_click, reminder.todo_id),
                )
            except Exception:
                # Left unmarked: retried on the next poll.
                logger.exception("Reminder delivery failed todo_id=%s", reminder.todo_id)
                continue

            # Store errors propagate and abort this poll only.
            marked = await asyncio.to_thread(self._store.mark_notified, reminder.todo_id)
            if not marked:
                logger.warning("mark_notified found no row todo_id=%s", reminder.todo_id)
                continue

            delivered += 1
            self._emit_log(f'[Reminder] Todo #{reminder.todo_id} "{reminder.title}" notified')

        return delivered

    # ---- host window events ----

    def route_click(self, todo_id: int) -> bool:
        """Forward a notification click (or the console /open command) to the host window."""
        window = self._window
        if window is None:
            return False
        try:
            window.send(CLICKED_CHANNEL, todo_id)
        except Exception:
            logger.exception("Failed to forward notification click todo_id=%s", todo_id)
            return False
        return True

    def _emit_log(self, message: str) -> None:
        logger.info("%s", message)
        window = self._window
        if window is None:
            return
        try:
            window.send(LOG_CHANNEL, message)
        except Exception:
            logger.debug("Host window rejected log event.", exc_info=True)
