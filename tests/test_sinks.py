# tests/test_sinks.py

from __future__ import annotations

import pytest

from ai_todolist.notifications import sinks
from ai_todolist.notifications.sinks import (
    TEST_MESSAGE,
    TEST_TITLE,
    ConsoleNotificationSink,
    DesktopNotificationSink,
    send_test_notification,
)

from .fakes import FakeSink


@pytest.mark.asyncio
async def test_console_sink_prints_single_line() -> None:
    lines: list[str] = []
    sink = ConsoleNotificationSink(printer=lines.append)

    await sink.show(title="AI TodoList reminder", body="Dentist\nDue: 2024-06-01 15:00")

    assert lines == ["[AI TodoList reminder] Dentist | Due: 2024-06-01 15:00"]


@pytest.mark.asyncio
async def test_desktop_sink_calls_plyer(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(sinks.plyer_notification, "notify", lambda **kw: calls.append(kw))

    await DesktopNotificationSink(app_name="Todo", timeout_seconds=5).show(title="t", body="b")

    assert calls == [{"title": "t", "message": "b", "app_name": "Todo", "timeout": 5}]


@pytest.mark.asyncio
async def test_desktop_sink_propagates_backend_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def _unsupported(**_kw):
        raise NotImplementedError("No usable implementation found!")

    monkeypatch.setattr(sinks.plyer_notification, "notify", _unsupported)

    with pytest.raises(NotImplementedError):
        await DesktopNotificationSink().show(title="t", body="b")


@pytest.mark.asyncio
async def test_send_test_notification_reports_result() -> None:
    sink = FakeSink()
    assert await send_test_notification(sink) == {"success": True}
    assert sink.shown[0].title == TEST_TITLE
    assert sink.shown[0].body == TEST_MESSAGE

    sink.fail_when = lambda body: True
    result = await send_test_notification(sink, "hi")
    assert result == {"success": False, "error": "notification backend unavailable"}
