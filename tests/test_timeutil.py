# tests/test_timeutil.py

from __future__ import annotations

import time
from datetime import date, datetime, timedelta, timezone

import pytest

from ai_todolist.todos.timeutil import (
    combine_date_time,
    derive_alert,
    format_canonical,
    has_time_of_day,
    now_canonical,
    pad,
    parse_canonical,
    to_canonical,
)

needs_tzset = pytest.mark.skipif(not hasattr(time, "tzset"), reason="time.tzset() is POSIX-only")


@pytest.fixture()
def local_tz(monkeypatch: pytest.MonkeyPatch):
    """Switch the process local timezone for one test."""

    def _set(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()


def test_pad() -> None:
    assert pad(0) == "00"
    assert pad(7) == "07"
    assert pad(12) == "12"


@needs_tzset
@pytest.mark.parametrize(
    "tz",
    ["UTC", "America/Los_Angeles", "America/St_Johns", "Asia/Seoul", "Pacific/Kiritimati", "Pacific/Pago_Pago"],
)
def test_date_only_is_local_midnight_in_any_timezone(local_tz, tz: str) -> None:
    local_tz(tz)
    assert to_canonical("2024-03-10") == "2024-03-10 00:00"
    assert to_canonical("2024-01-01") == "2024-01-01 00:00"
    assert to_canonical(date(2024, 12, 31)) == "2024-12-31 00:00"


@needs_tzset
def test_trailing_z_is_read_as_wall_clock(local_tz) -> None:
    local_tz("America/Los_Angeles")
    assert to_canonical("2024-06-01T09:30:00.000Z") == "2024-06-01 09:30"
    assert to_canonical("2024-06-01T00:10Z") == "2024-06-01 00:10"


@needs_tzset
def test_aware_datetime_is_converted_to_local(local_tz) -> None:
    local_tz("Asia/Seoul")
    aware = datetime(2024, 6, 1, 0, 30, tzinfo=timezone.utc)
    assert to_canonical(aware) == "2024-06-01 09:30"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-06-01 09:05", "2024-06-01 09:05"),
        ("2024-06-01 09:05:59", "2024-06-01 09:05"),
        ("2024-06-01T09:05", "2024-06-01 09:05"),
        ("2024-06-01T09:05:30", "2024-06-01 09:05"),
        ("2024-06-01T09:05:30.123", "2024-06-01 09:05"),
        ("2024-06-01T23:59:59.999Z", "2024-06-01 23:59"),
        ("  2024-06-01 09:05  ", "2024-06-01 09:05"),
    ],
)
def test_combined_strings_canonicalize(raw: str, expected: str) -> None:
    assert to_canonical(raw) == expected
    # canonical output parses back to itself
    assert to_canonical(expected) == expected


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "tomorrow", "2024-02-30", "2024-13-01", "2024-06-01 24:00", "2024/06/01", "06-01-2024", True, [], {}],
)
def test_unparseable_input_is_none(raw) -> None:
    assert to_canonical(raw) is None
    assert parse_canonical(raw) is None


def test_datetime_and_epoch_inputs() -> None:
    assert to_canonical(datetime(2024, 6, 1, 9, 5, 42, 123)) == "2024-06-01 09:05"

    ts = 1_717_232_400
    assert to_canonical(ts) == format_canonical(datetime.fromtimestamp(ts))
    assert to_canonical(float(ts)) == to_canonical(ts)


def test_has_time_of_day() -> None:
    assert has_time_of_day("2024-06-01 09:00")
    assert has_time_of_day("2024-06-01T09:00Z")
    assert has_time_of_day(datetime(2024, 6, 1))
    assert not has_time_of_day("2024-06-01")
    assert not has_time_of_day(date(2024, 6, 1))
    assert not has_time_of_day(None)
    assert not has_time_of_day("not a date")


def test_derive_alert_subtracts_five_minutes_with_rollover() -> None:
    assert derive_alert("2024-01-01 00:03") == "2023-12-31 23:58"
    assert derive_alert("2024-03-01 00:00") == "2024-02-29 23:55"
    assert derive_alert("2024-06-01 15:00") == "2024-06-01 14:55"
    assert derive_alert(datetime(2024, 6, 1, 15, 2)) == "2024-06-01 14:57"


def test_derive_alert_needs_a_time_of_day() -> None:
    assert derive_alert("2024-06-01") is None
    assert derive_alert(date(2024, 6, 1)) is None
    assert derive_alert(None) is None
    assert derive_alert("garbage") is None


def test_now_canonical_uses_injected_clock() -> None:
    assert now_canonical(lambda: datetime(2024, 6, 1, 9, 5, 59)) == "2024-06-01 09:05"
    assert len(now_canonical()) == len("YYYY-MM-DD HH:MM")


def test_canonical_strings_sort_chronologically() -> None:
    values = ["2024-06-01 09:05", "2023-12-31 23:58", "2024-06-01 10:00", "2024-01-01 00:00"]
    parsed = sorted(values, key=lambda s: parse_canonical(s))
    assert sorted(values) == parsed


def test_combine_date_time() -> None:
    assert combine_date_time("2024-06-01", "15:00") == "2024-06-01 15:00"
    assert combine_date_time("2024-06-01", "9:30") == "2024-06-01 09:30"
    assert combine_date_time("2024-06-01", None) == "2024-06-01"
    assert combine_date_time("2024-06-01", "25:00") == "2024-06-01"
    assert combine_date_time("2024-06-01", "soon") == "2024-06-01"
    assert combine_date_time(None, "15:00") is None
    assert combine_date_time("2024-02-30", "15:00") is None


def test_out_of_range_values_yield_none() -> None:
    assert derive_alert("0001-01-01 00:03") is None
    assert derive_alert("0001-01-01 00:05") == "0001-01-01 00:00"

    ahead = timezone(timedelta(hours=5))
    behind = timezone(timedelta(hours=-5))
    assert parse_canonical(datetime.min.replace(tzinfo=ahead)) is None
    assert to_canonical(datetime.max.replace(tzinfo=behind)) is None
    assert has_time_of_day(datetime.min.replace(tzinfo=ahead)) is False
