# src/ai_todolist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then:
- starts the reminder scheduler in a background thread (its own event loop),
- runs the console REPL in the main thread,
- on exit stops the scheduler (an in-flight poll finishes) and shuts down.
"""

from __future__ import annotations

import logging
import signal

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.background import start_reminders_in_background
from ..connectors.console_connector import ConsoleWindow, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    runner = state.runner
    if runner is not None:
        runner.stop()
        runner.join(timeout=10.0)
        if runner.thread.is_alive():
            logger.warning("Reminder thread did not stop within 10s.")

    # TodoStore uses short-lived sqlite connections per call; close() is a no-op hook.
    try:
        state.todo_store.close()
    except Exception:
        logger.debug("TodoStore close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    # keep noisy libs readable
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    logger.info("Starting %s...", settings.app_name)
    logger.debug("Writing full log to %s", log_file)

    state = create_initial_state(settings=settings)
    state.window = ConsoleWindow()
    state.runner = start_reminders_in_background(state.scheduler, state.window)

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Some platforms may not support SIGTERM.
        logger.debug("SIGTERM handler not installed.", exc_info=True)

    try:
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
