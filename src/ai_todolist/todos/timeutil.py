# src/ai_todolist/todos/timeutil.py

from __future__ import annotations

"""
Local wall-clock time helpers.

Every stored instant (due_at, alert_at, created_at, ...) is a canonical local-time string:

    YYYY-MM-DD HH:MM

The format is zero padded and ordered most-significant first, so plain string comparison
in SQL (alert_at <= ?) matches chronological order. Epoch numbers and ISO strings with a
zone never reach storage.

Parsing rules:
- "YYYY-MM-DD" is local midnight of that calendar day, built from its numeric parts.
- "YYYY-MM-DDTHH:MM[:SS][.fff][Z]" and "YYYY-MM-DD HH:MM[:SS]" are read as local wall-clock
  components; a trailing "Z" is accepted but does not move the time to UTC.
- Anything unparseable is None, never an exception.
"""

import re
from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Any

CANONICAL_FORMAT = "%Y-%m-%d %H:%M"
ALERT_LEAD = timedelta(minutes=5)

Clock = Callable[[], datetime]

_DATE_ONLY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DATE_TIME_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?Z?$"
)
_TIME_OF_DAY_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def pad(n: int) -> str:
    return f"{int(n):02d}"


def format_canonical(dt: datetime) -> str:
    return f"{dt.year:04d}-{pad(dt.month)}-{pad(dt.day)} {pad(dt.hour)}:{pad(dt.minute)}"


def _from_parts(*parts: str | None) -> datetime | None:
    nums = [int(p) for p in parts if p is not None]
    try:
        return datetime(*nums)
    except ValueError:
        return None


def _parse_string(raw: str) -> datetime | None:
    s = raw.strip()
    if not s:
        return None

    m = _DATE_ONLY_RE.match(s)
    if m:
        return _from_parts(*m.groups())

    m = _DATE_TIME_RE.match(s)
    if m:
        return _from_parts(*m.groups())

    return None


def parse_canonical(value: Any) -> datetime | None:
    """Parse any accepted input into a naive local datetime (or None)."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            try:
                value = value.astimezone().replace(tzinfo=None)
            except (OverflowError, OSError, ValueError):
                return None
        return value.replace(second=0, microsecond=0)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value).replace(second=0, microsecond=0)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        dt = _parse_string(value)
        return dt.replace(second=0, microsecond=0) if dt is not None else None

    return None


def to_canonical(value: Any) -> str | None:
    dt = parse_canonical(value)
    return format_canonical(dt) if dt is not None else None


def has_time_of_day(value: Any) -> bool:
    """
    True when the input carries an explicit time of day.

    date objects and "YYYY-MM-DD" strings do not; datetimes, epoch numbers and combined
    strings do. Unparseable input has no time of day either.
    """
    if parse_canonical(value) is None:
        return False
    if isinstance(value, datetime):
        return True
    if isinstance(value, date):
        return False
    if isinstance(value, str):
        return _DATE_ONLY_RE.match(value.strip()) is None
    return True


def now_canonical(clock: Clock | None = None) -> str:
    now = (clock or datetime.now)()
    return format_canonical(parse_canonical(now) or now)


def derive_alert(due: Any, *, lead: timedelta = ALERT_LEAD) -> str | None:
    """
    Alert instant for a due value: due minus `lead` in wall-clock arithmetic.

    Only due values with an explicit time of day get an alert.
    """
    if not has_time_of_day(due):
        return None
    dt = parse_canonical(due)
    if dt is None:
        return None
    try:
        return format_canonical(dt - lead)
    except OverflowError:
        return None


def combine_date_time(date_str: str | None, time_str: str | None) -> str | None:
    """
    Join a "YYYY-MM-DD" date with an optional "HH:MM" time.

    Returns the date alone when time is missing or malformed, None when the date is unusable.
    """
    d = (date_str or "").strip()
    if not d or _DATE_ONLY_RE.match(d) is None or _parse_string(d) is None:
        return None

    t = (time_str or "").strip()
    m = _TIME_OF_DAY_RE.match(t)
    if not m:
        return d

    combined = f"{d} {pad(int(m.group(1)))}:{m.group(2)}"
    return combined if _parse_string(combined) is not None else d
