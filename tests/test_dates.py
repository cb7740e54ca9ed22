"""Tests for calendar-day normalization."""
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from dates import NANOS_PER_SECOND, day_to_timestamp, get_timezone, parse_day, to_day, today
from errors import InvalidArgument

UTC = ZoneInfo("UTC")


def test_date_passes_through():
    assert to_day(date(2026, 10, 17)) == date(2026, 10, 17)


def test_naive_datetime_drops_time_of_day():
    assert to_day(datetime(2026, 10, 17, 23, 59, 59)) == date(2026, 10, 17)


def test_aware_datetime_uses_target_timezone():
    moment = datetime(2026, 10, 17, 23, 30, tzinfo=timezone.utc)
    assert to_day(moment, ZoneInfo("Asia/Tokyo")) == date(2026, 10, 18)
    assert to_day(moment, UTC) == date(2026, 10, 17)


def test_nanosecond_timestamps_within_a_day_are_equal():
    midnight = day_to_timestamp(date(2026, 10, 17), UTC)
    late = midnight + (23 * 3600 + 59 * 60) * NANOS_PER_SECOND + 123_456_789
    assert to_day(midnight, UTC) == to_day(late, UTC) == date(2026, 10, 17)
    assert to_day(late + 60 * NANOS_PER_SECOND, UTC) == date(2026, 10, 18)


def test_local_timestamp_round_trip():
    day = date(2026, 3, 1)
    assert to_day(day_to_timestamp(day)) == day


def test_day_to_timestamp_utc_epoch():
    assert day_to_timestamp(date(1970, 1, 2), UTC) == 86_400 * NANOS_PER_SECOND


def test_parse_day_formats():
    assert parse_day("2026-10-17") == date(2026, 10, 17)
    assert parse_day(" 2026-10-17T08:15:00 ") == date(2026, 10, 17)
    assert parse_day(str(86_400 * NANOS_PER_SECOND), UTC) == date(1970, 1, 2)


@pytest.mark.parametrize("value", ["yesterday", "2026-13-01", "", 1.5, True, None])
def test_rejects_non_dates(value):
    with pytest.raises(InvalidArgument):
        to_day(value)


def test_rejects_out_of_range_timestamp():
    with pytest.raises(InvalidArgument):
        to_day(10**30)


def test_get_timezone():
    assert get_timezone(None) is None
    assert get_timezone("") is None
    assert get_timezone("Europe/Madrid") == ZoneInfo("Europe/Madrid")
    with pytest.raises(InvalidArgument):
        get_timezone("Mars/Olympus_Mons")


def test_today_matches_clock_in_zone():
    tokyo = ZoneInfo("Asia/Tokyo")
    before = datetime.now(tokyo).date()
    assert today(tokyo) in (before, datetime.now(tokyo).date())
    assert isinstance(today(), date)
