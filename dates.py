"""Calendar-day keys for study targets.

Callers may address a day with a ``date``, a ``datetime``, an ISO string or a
nanosecond timestamp. Everything is normalized to a ``datetime.date`` at the
boundary so the planner only ever compares plain days.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from errors import InvalidArgument

NANOS_PER_SECOND = 1_000_000_000

_TIMESTAMP_RE = re.compile(r"^-?\d+$")


def get_timezone(name: str | None) -> tzinfo | None:
    """Resolve an IANA zone name; ``None`` or empty means local time."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidArgument(f"Unknown timezone '{name}'") from exc


def to_day(value, tz: tzinfo | None = None) -> date:
    """Normalize ``value`` to the calendar day it falls on in ``tz``."""
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(tz).date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise InvalidArgument(f"Not a date: {value!r}")
    if isinstance(value, int):
        return _from_nanos(value, tz)
    if isinstance(value, str):
        return parse_day(value, tz)
    raise InvalidArgument(f"Not a date: {value!r}")


def parse_day(text: str, tz: tzinfo | None = None) -> date:
    text = text.strip()
    if _TIMESTAMP_RE.match(text):
        return _from_nanos(int(text), tz)
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return to_day(datetime.fromisoformat(text), tz)
    except ValueError as exc:
        raise InvalidArgument(f"Not a date: '{text}'") from exc


def _from_nanos(nanos: int, tz: tzinfo | None) -> date:
    try:
        return datetime.fromtimestamp(nanos // NANOS_PER_SECOND, tz).date()
    except (OverflowError, OSError, ValueError) as exc:
        raise InvalidArgument(f"Timestamp out of range: {nanos}") from exc


def day_to_timestamp(day: date, tz: tzinfo | None = None) -> int:
    """Nanoseconds since the epoch at midnight of ``day`` in ``tz``."""
    midnight = datetime.combine(day, time(), tzinfo=tz)
    return int(midnight.timestamp()) * NANOS_PER_SECOND


def today(tz: tzinfo | None = None) -> date:
    return datetime.now(tz).date()
